from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Enum as SQLEnum, Text
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class ExpenseStatusEnum(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    expense_date = Column(Date, nullable=False, index=True)
    payment_method = Column(String(30), nullable=True)
    vendor = Column(String(255), nullable=True)
    receipt_reference = Column(String(255), nullable=True)
    status = Column(SQLEnum(ExpenseStatusEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=ExpenseStatusEnum.PENDING)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
