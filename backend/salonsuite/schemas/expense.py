from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict
from datetime import date, datetime
from decimal import Decimal
from salonsuite.models.expense import ExpenseStatusEnum
from salonsuite.core.validators import parse_money_input


class ExpenseCreate(BaseModel):
    category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    expense_date: date
    payment_method: Optional[str] = None
    vendor: Optional[str] = None
    receipt_reference: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return parse_money_input(v)


class ExpenseUpdate(BaseModel):
    category: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    expense_date: Optional[date] = None
    payment_method: Optional[str] = None
    vendor: Optional[str] = None
    receipt_reference: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return parse_money_input(v)


class ExpenseResponse(BaseModel):
    id: int
    category: str
    description: str
    amount: Decimal
    expense_date: date
    payment_method: Optional[str]
    vendor: Optional[str]
    receipt_reference: Optional[str]
    status: ExpenseStatusEnum
    notes: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ExpenseSummary(BaseModel):
    total: Decimal
    approved_total: Decimal
    pending_total: Decimal
    by_category: Dict[str, Decimal]
