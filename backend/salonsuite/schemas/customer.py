from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from salonsuite.core.validators import validate_phone


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_anniversary: Optional[date] = None
    lead_source: Optional[str] = None
    notes: Optional[str] = None
    loyalty_enrolled: bool = True

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        return validate_phone(v)


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_anniversary: Optional[date] = None
    lead_source: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone(v) if v is not None else v


class CustomerFindOrCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str
    email: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        return validate_phone(v)


class CustomerResponse(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str]
    address: Optional[str]
    gender: Optional[str]
    date_of_birth: Optional[date]
    date_of_anniversary: Optional[date]
    lead_source: Optional[str]
    notes: Optional[str]
    loyalty_enrolled: bool
    loyalty_enrolled_at: Optional[datetime]
    total_visits: int
    total_spent: Decimal
    last_visit: Optional[datetime]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerStats(BaseModel):
    total_customers: int
    new_today: int
    new_this_month: int
    average_spend: Decimal
