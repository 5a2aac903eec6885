from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from salonsuite.models.membership import PlanStatusEnum, MembershipStatusEnum


class MembershipPlanCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    duration_months: int = Field(..., ge=1)
    benefits: List[str] = []
    discount_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    max_bookings_per_month: Optional[int] = Field(None, ge=0)


class MembershipPlanUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    duration_months: Optional[int] = Field(None, ge=1)
    benefits: Optional[List[str]] = None
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    max_bookings_per_month: Optional[int] = Field(None, ge=0)
    status: Optional[PlanStatusEnum] = None


class MembershipPlanResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    price: Decimal
    duration_months: int
    benefits: Optional[List[str]]
    discount_percentage: Decimal
    max_bookings_per_month: Optional[int]
    status: PlanStatusEnum
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerMembershipCreate(BaseModel):
    customer_id: int
    plan_id: int
    start_date: Optional[date] = None
    amount_paid: Optional[Decimal] = Field(None, ge=0)


class CustomerMembershipUpdate(BaseModel):
    status: Optional[MembershipStatusEnum] = None
    bookings_used: Optional[int] = Field(None, ge=0)
    end_date: Optional[date] = None


class CustomerMembershipResponse(BaseModel):
    id: int
    customer_id: int
    plan_id: int
    plan_name: Optional[str] = None
    start_date: date
    end_date: date
    status: MembershipStatusEnum
    display_status: Optional[str] = None
    amount_paid: Decimal
    bookings_used: int
    invoice_id: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MembershipStats(BaseModel):
    total_plans: int
    active_plans: int
    total_memberships: int
    active_memberships: int
    expired_memberships: int
    total_revenue: Decimal


class ExpireResult(BaseModel):
    expired: int
