from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from salonsuite.models.cash_register import CashTransactionTypeEnum, RegisterStatusEnum


class CashRegisterCreate(BaseModel):
    name: str = Field(..., min_length=1)
    location: Optional[str] = None
    opening_balance: Decimal = Field(Decimal("0"), ge=0)


class CashTransactionCreate(BaseModel):
    type: CashTransactionTypeEnum
    amount: Decimal = Field(..., gt=0)
    category: Optional[str] = None
    description: Optional[str] = None
    reference: Optional[str] = None


class CashTransactionResponse(BaseModel):
    id: int
    register_id: int
    type: CashTransactionTypeEnum
    amount: Decimal
    category: Optional[str]
    description: Optional[str]
    reference: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CashRegisterResponse(BaseModel):
    id: int
    name: str
    location: Optional[str]
    opening_balance: Decimal
    current_balance: Decimal
    status: RegisterStatusEnum
    transactions: List[CashTransactionResponse] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
