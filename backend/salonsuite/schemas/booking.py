from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from salonsuite.models.booking import BookingStatusEnum


class BookingServiceCreate(BaseModel):
    service_id: int
    quantity: int = Field(1, ge=1)


class BookingCreate(BaseModel):
    customer_id: int
    staff_id: Optional[int] = None
    booking_date: date
    booking_time: str = Field("10:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    services: List[BookingServiceCreate] = Field(..., min_length=1)
    notes: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatusEnum


class BookingServiceResponse(BaseModel):
    id: int
    service_id: int
    service_name: Optional[str] = None
    quantity: int
    price: Decimal

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    id: int
    booking_number: str
    customer_id: int
    customer_name: Optional[str] = None
    staff_id: Optional[int]
    booking_date: date
    booking_time: str
    status: BookingStatusEnum
    total_amount: Decimal
    notes: Optional[str]
    services: List[BookingServiceResponse] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
