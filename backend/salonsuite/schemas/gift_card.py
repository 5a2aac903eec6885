from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from salonsuite.models.gift_card import GiftCardStatusEnum
from salonsuite.core.validators import parse_money_input


class GiftCardCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    issued_to: Optional[int] = None
    expires_in_days: Optional[int] = Field(None, ge=1)

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return parse_money_input(v)


class GiftCardResponse(BaseModel):
    id: int
    code: str
    initial_amount: Decimal
    balance: Decimal
    status: GiftCardStatusEnum
    customer_name: Optional[str]
    customer_phone: Optional[str]
    issued_to: Optional[int]
    expires_at: Optional[datetime]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GiftCardStats(BaseModel):
    total_cards: int
    total_value: Decimal
    redeemed_value: Decimal
    outstanding_balance: Decimal
    active_cards: int
