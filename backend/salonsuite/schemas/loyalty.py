from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime, date
from decimal import Decimal
from salonsuite.models.loyalty import LoyaltyTransactionTypeEnum


class LoyaltySettingsUpdate(BaseModel):
    is_active: Optional[bool] = None
    earn_on_purchase_enabled: Optional[bool] = None
    points_per_rupee: Optional[Decimal] = Field(None, ge=0)
    max_redemption_percent: Optional[int] = Field(None, ge=0, le=100)
    minimum_order_amount: Optional[Decimal] = Field(None, ge=0)
    cashback_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    welcome_bonus: Optional[int] = Field(None, ge=0)
    referral_bonus: Optional[int] = Field(None, ge=0)
    points_validity_days: Optional[int] = Field(None, ge=1)


class LoyaltySettingsResponse(BaseModel):
    is_active: bool
    earn_on_purchase_enabled: bool
    points_per_rupee: Decimal
    max_redemption_percent: int
    minimum_order_amount: Decimal
    cashback_percentage: Decimal
    welcome_bonus: int
    referral_bonus: int
    points_validity_days: int

    class Config:
        from_attributes = True


class LoyaltyTierResponse(BaseModel):
    name: str
    display_name: str
    min_spending: Decimal
    multiplier: Decimal

    class Config:
        from_attributes = True


class TierProgress(BaseModel):
    current_tier: str
    next_tier: Optional[str]
    progress: Decimal
    remaining: Decimal


class CustomerLoyaltyResponse(BaseModel):
    customer_id: int
    enrolled: bool
    points: int
    tier: str
    lifetime_spending: Decimal
    total_earned: int
    total_redeemed: int
    join_date: Optional[datetime]
    last_activity: Optional[datetime]
    tier_progress: TierProgress


class PointsAdjustment(BaseModel):
    points: int = Field(..., gt=0)
    description: Optional[str] = None


class EnrollRequest(BaseModel):
    award_welcome_bonus: bool = True


class LoyaltyTransactionResponse(BaseModel):
    id: int
    customer_id: int
    transaction_type: LoyaltyTransactionTypeEnum
    points: int
    amount: Decimal
    description: Optional[str]
    invoice_id: Optional[int]
    expires_at: Optional[datetime]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class LoyaltyStats(BaseModel):
    total_members: int
    total_points_issued: int
    total_points_redeemed: int
    total_value_redeemed: Decimal
    outstanding_points: int
    active_members: int
    tier_distribution: Dict[str, int]


class MembershipSummary(BaseModel):
    id: int
    plan_name: str
    start_date: date
    end_date: date
    status: str
    display_status: str
    discount_percentage: Decimal


class CustomerInvoiceData(BaseModel):
    customer_id: int
    customer_name: str
    loyalty_enrolled: bool
    points: int
    tier: str
    points_value: Decimal
    memberships: List[MembershipSummary]
