from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from salonsuite.models.staff import StaffRoleEnum


class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str
    email: Optional[str] = None
    role: StaffRoleEnum = StaffRoleEnum.STYLIST
    commission_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    joining_date: Optional[datetime] = None


class StaffUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    role: Optional[StaffRoleEnum] = None
    commission_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None
    joining_date: Optional[datetime] = None


class StaffResponse(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str]
    role: StaffRoleEnum
    commission_percentage: Decimal
    is_active: bool
    joining_date: Optional[datetime]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
