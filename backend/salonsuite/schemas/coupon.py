from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from salonsuite.models.coupon import DiscountTypeEnum


class CouponCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    discount_type: DiscountTypeEnum
    discount_value: Decimal = Field(..., gt=0)
    min_order_amount: Decimal = Field(Decimal("0"), ge=0)
    max_discount: Optional[Decimal] = Field(None, gt=0)
    valid_from: date
    valid_until: date
    usage_limit: Optional[int] = Field(None, ge=1)
    is_active: bool = True

    @model_validator(mode="after")
    def check_ranges(self):
        if self.discount_type == DiscountTypeEnum.PERCENTAGE and self.discount_value > 100:
            raise ValueError("Percentage discount must be between 0 and 100")
        if self.valid_until < self.valid_from:
            raise ValueError("valid_until must not be before valid_from")
        return self


class CouponUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    discount_type: Optional[DiscountTypeEnum] = None
    discount_value: Optional[Decimal] = Field(None, gt=0)
    min_order_amount: Optional[Decimal] = Field(None, ge=0)
    max_discount: Optional[Decimal] = Field(None, gt=0)
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    usage_limit: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class CouponResponse(BaseModel):
    id: int
    code: str
    name: str
    description: Optional[str]
    discount_type: DiscountTypeEnum
    discount_value: Decimal
    min_order_amount: Decimal
    max_discount: Optional[Decimal]
    valid_from: date
    valid_until: date
    usage_limit: Optional[int]
    used_count: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CouponValidateRequest(BaseModel):
    code: str
    order_amount: Decimal = Field(..., ge=0)


class CouponValidateResponse(BaseModel):
    valid: bool
    message: str
    coupon: Optional[CouponResponse] = None
    discount_amount: Decimal = Decimal("0.00")
