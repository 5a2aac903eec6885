from pydantic import BaseModel, Field
from typing import Optional, List, Any, Dict
from datetime import date, datetime
from decimal import Decimal
from salonsuite.models.invoice import PaymentModeEnum, InvoiceStatusEnum, InvoiceItemTypeEnum


class InvoiceCreate(BaseModel):
    customer_id: int
    amount: Decimal = Field(..., gt=0)
    invoice_date: date
    due_date: date
    description: str = "Services"
    payment_method: PaymentModeEnum = PaymentModeEnum.CASH
    notes: Optional[str] = None


class InvoiceUpdate(BaseModel):
    notes: Optional[str] = None
    payment_method: Optional[PaymentModeEnum] = None
    due_date: Optional[date] = None


class InvoiceItemResponse(BaseModel):
    id: int
    item_type: InvoiceItemTypeEnum
    reference_id: Optional[int]
    staff_id: Optional[int]
    description: str
    quantity: int
    unit_price: Decimal
    total_amount: Decimal

    class Config:
        from_attributes = True


class InvoiceResponse(BaseModel):
    id: int
    invoice_number: str
    customer_id: int
    customer_name: Optional[str] = None
    booking_id: Optional[int]
    invoice_date: date
    due_date: Optional[date]
    subtotal: Decimal
    discount_amount: Decimal
    gst_amount: Decimal
    total_amount: Decimal
    payment_method: PaymentModeEnum
    status: InvoiceStatusEnum
    breakdown: Optional[Dict[str, Any]] = None
    notes: Optional[str]
    items: List[InvoiceItemResponse] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ShareTokenResponse(BaseModel):
    invoice_id: int
    share_token: str
