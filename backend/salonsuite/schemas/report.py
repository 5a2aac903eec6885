from pydantic import BaseModel
from datetime import date
from decimal import Decimal


class SummaryReport(BaseModel):
    start_date: date
    end_date: date
    revenue: Decimal
    gst_collected: Decimal
    invoice_count: int
    bookings_total: int
    bookings_completed: int
    bookings_cancelled: int
    customers_total: int
    customers_new: int
    expenses_approved: Decimal
    net: Decimal
