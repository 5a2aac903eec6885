from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class GiftCardStatusEnum(str, enum.Enum):
    ACTIVE = "active"
    USED = "used"
    EXPIRED = "expired"


class GiftCard(Base):
    __tablename__ = "gift_cards"
    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_gift_cards_tenant_code"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    code = Column(String(20), nullable=False, index=True)
    initial_amount = Column(Numeric(10, 2), nullable=False)
    balance = Column(Numeric(10, 2), nullable=False)
    status = Column(SQLEnum(GiftCardStatusEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=GiftCardStatusEnum.ACTIVE)
    customer_name = Column(String(255), nullable=True)
    customer_phone = Column(String(20), nullable=True)
    issued_to = Column(Integer, ForeignKey("customers.id"), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    transactions = relationship("GiftCardTransaction", back_populates="gift_card", cascade="all, delete-orphan")


class GiftCardTransaction(Base):
    __tablename__ = "gift_card_transactions"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    gift_card_id = Column(Integer, ForeignKey("gift_cards.id"), nullable=False, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    balance_after = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    gift_card = relationship("GiftCard", back_populates="transactions")
