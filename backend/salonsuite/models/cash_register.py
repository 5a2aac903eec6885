from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum as SQLEnum, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class RegisterStatusEnum(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class CashTransactionTypeEnum(str, enum.Enum):
    CASH_IN = "cash_in"
    CASH_OUT = "cash_out"


class CashRegister(Base):
    __tablename__ = "cash_registers"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    opening_balance = Column(Numeric(12, 2), nullable=False, default=0)
    current_balance = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(SQLEnum(RegisterStatusEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=RegisterStatusEnum.OPEN)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    transactions = relationship(
        "CashTransaction",
        back_populates="register",
        cascade="all, delete-orphan",
        order_by="CashTransaction.id.desc()",
    )


class CashTransaction(Base):
    __tablename__ = "cash_transactions"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    register_id = Column(Integer, ForeignKey("cash_registers.id"), nullable=False, index=True)
    type = Column(SQLEnum(CashTransactionTypeEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String(100), nullable=True)
    description = Column(Text)
    reference = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    register = relationship("CashRegister", back_populates="transactions")
