from datetime import date, datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session
from salonsuite.core.cache import cache_get, cache_set, report_cache_key, CACHE_TTL_SHORT
from salonsuite.core.currency import to_money
from salonsuite.core.database import get_db
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.models.booking import Booking, BookingStatusEnum
from salonsuite.models.customer import Customer
from salonsuite.models.expense import Expense, ExpenseStatusEnum
from salonsuite.models.invoice import Invoice, InvoiceStatusEnum
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.report import SummaryReport

router = APIRouter()


@router.get("/summary", response_model=SummaryReport)
async def get_summary_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Revenue, GST, bookings, customers and expenses for a date range (cached 2 min)."""
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    cache_key = report_cache_key("summary", tenant.id, start_date.isoformat(), end_date.isoformat())
    cached = cache_get(cache_key)
    if cached is not None:
        return cached

    invoice_row = db.query(
        func.coalesce(func.sum(Invoice.total_amount), 0),
        func.coalesce(func.sum(Invoice.gst_amount), 0),
        func.count(Invoice.id),
    ).filter(
        Invoice.tenant_id == tenant.id,
        Invoice.status != InvoiceStatusEnum.VOID,
        Invoice.invoice_date >= start_date,
        Invoice.invoice_date <= end_date,
    ).one()
    revenue, gst_collected, invoice_count = to_money(invoice_row[0]), to_money(invoice_row[1]), invoice_row[2]

    bookings = db.query(Booking.status, func.count(Booking.id)).filter(
        Booking.tenant_id == tenant.id,
        Booking.booking_date >= start_date,
        Booking.booking_date <= end_date,
    ).group_by(Booking.status).all()
    booking_counts = {status: count for status, count in bookings}

    range_start = datetime(start_date.year, start_date.month, start_date.day)
    range_end = datetime(end_date.year, end_date.month, end_date.day) + timedelta(days=1)
    customers_total = db.query(func.count(Customer.id)).filter(Customer.tenant_id == tenant.id).scalar() or 0
    customers_new = db.query(func.count(Customer.id)).filter(
        Customer.tenant_id == tenant.id,
        Customer.created_at >= range_start,
        Customer.created_at < range_end,
    ).scalar() or 0

    expenses = to_money(db.query(func.coalesce(func.sum(Expense.amount), 0)).filter(
        Expense.tenant_id == tenant.id,
        Expense.status == ExpenseStatusEnum.APPROVED,
        Expense.expense_date >= start_date,
        Expense.expense_date <= end_date,
    ).scalar())

    report = SummaryReport(
        start_date=start_date,
        end_date=end_date,
        revenue=revenue,
        gst_collected=gst_collected,
        invoice_count=invoice_count,
        bookings_total=sum(booking_counts.values()),
        bookings_completed=booking_counts.get(BookingStatusEnum.COMPLETED, 0),
        bookings_cancelled=booking_counts.get(BookingStatusEnum.CANCELLED, 0),
        customers_total=customers_total,
        customers_new=customers_new,
        expenses_approved=expenses,
        net=revenue - gst_collected - expenses,
    )
    cache_set(cache_key, report.model_dump(mode="json"), ttl_seconds=CACHE_TTL_SHORT)
    return report
