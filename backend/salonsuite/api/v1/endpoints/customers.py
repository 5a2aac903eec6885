from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session
from salonsuite.core.currency import to_money
from salonsuite.core.database import get_db
from salonsuite.core.dates import utcnow
from salonsuite.core.logging_config import get_logger
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.core.validators import get_tenant_customer
from salonsuite.models.booking import Booking
from salonsuite.models.customer import Customer
from salonsuite.models.invoice import Invoice, InvoiceStatusEnum
from salonsuite.models.loyalty import CustomerLoyalty, LoyaltyTransaction
from salonsuite.models.membership import CustomerMembership
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerFindOrCreate,
    CustomerResponse,
    CustomerStats,
)
from salonsuite.services import loyalty_service

router = APIRouter()
logger = get_logger("customers")

DUPLICATE_PHONE_MESSAGE = "Customer with this phone number already exists"


def _phone_taken(db: Session, tenant_id: str, phone: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Customer.id).filter(
        Customer.tenant_id == tenant_id,
        Customer.phone == phone,
    )
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    return query.first() is not None


def create_customer_record(db: Session, tenant_id: str, data: dict) -> Customer:
    """Insert a customer and enroll them in loyalty (welcome bonus when the program gives one)."""
    enroll = data.pop("loyalty_enrolled", True)
    customer = Customer(tenant_id=tenant_id, loyalty_enrolled=False, **data)
    db.add(customer)
    db.flush()
    if enroll:
        loyalty_service.enroll_customer(db, tenant_id, customer)
    logger.info(f"Customer created: {customer.id}", extra={"tenant_id": tenant_id, "customer_id": customer.id})
    return customer


@router.post("/", response_model=CustomerResponse, status_code=201)
async def create_customer(
    customer_in: CustomerCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Create a new customer"""
    if _phone_taken(db, tenant.id, customer_in.phone):
        raise HTTPException(status_code=409, detail=DUPLICATE_PHONE_MESSAGE)
    customer = create_customer_record(db, tenant.id, customer_in.model_dump())
    db.commit()
    db.refresh(customer)
    return customer


@router.get("/", response_model=List[CustomerResponse])
async def list_customers(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """List customers with search by name or phone"""
    query = db.query(Customer).filter(Customer.tenant_id == tenant.id)
    if search:
        query = query.filter(
            (Customer.phone.contains(search)) |
            (Customer.name.ilike(f"%{search}%"))
        )
    return query.order_by(Customer.name).offset(skip).limit(limit).all()


@router.get("/stats", response_model=CustomerStats)
async def customer_stats(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    now = utcnow()
    start_of_day = datetime(now.year, now.month, now.day)
    start_of_month = datetime(now.year, now.month, 1)
    base = db.query(func.count(Customer.id)).filter(Customer.tenant_id == tenant.id)
    total = base.scalar() or 0
    new_today = base.filter(Customer.created_at >= start_of_day).scalar() or 0
    new_this_month = base.filter(Customer.created_at >= start_of_month).scalar() or 0
    average = db.query(func.avg(Invoice.total_amount)).filter(
        Invoice.tenant_id == tenant.id,
        Invoice.status != InvoiceStatusEnum.VOID,
    ).scalar()
    return CustomerStats(
        total_customers=total,
        new_today=new_today,
        new_this_month=new_this_month,
        average_spend=to_money(average or 0),
    )


@router.post("/find-or-create", response_model=CustomerResponse)
async def find_or_create_customer(
    body: CustomerFindOrCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Return the customer with this phone, creating one when none exists."""
    existing = db.query(Customer).filter(
        Customer.tenant_id == tenant.id,
        Customer.phone == body.phone,
    ).first()
    if existing:
        return existing
    customer = create_customer_record(db, tenant.id, body.model_dump())
    db.commit()
    db.refresh(customer)
    return customer


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return get_tenant_customer(db, tenant.id, customer_id)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    customer_update: CustomerUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer = get_tenant_customer(db, tenant.id, customer_id)
    update_data = customer_update.model_dump(exclude_unset=True)
    if "phone" in update_data and _phone_taken(db, tenant.id, update_data["phone"], exclude_id=customer.id):
        raise HTTPException(status_code=409, detail=DUPLICATE_PHONE_MESSAGE)
    for field, value in update_data.items():
        setattr(customer, field, value)
    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/{customer_id}", status_code=204)
async def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer = get_tenant_customer(db, tenant.id, customer_id)
    has_history = (
        db.query(Invoice.id).filter(Invoice.customer_id == customer.id).first()
        or db.query(Booking.id).filter(Booking.customer_id == customer.id).first()
    )
    if has_history:
        raise HTTPException(status_code=400, detail="Cannot delete a customer with invoices or bookings")
    for model in (LoyaltyTransaction, CustomerLoyalty, CustomerMembership):
        db.query(model).filter(model.tenant_id == tenant.id, model.customer_id == customer.id).delete()
    db.delete(customer)
    db.commit()
    logger.info(f"Customer deleted: {customer_id}", extra={"tenant_id": tenant.id, "customer_id": customer_id})
    return None
