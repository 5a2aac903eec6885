from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Boolean, Enum as SQLEnum, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class LoyaltyTransactionTypeEnum(str, enum.Enum):
    EARNED = "earned"
    REDEEMED = "redeemed"


class LoyaltySettings(Base):
    __tablename__ = "loyalty_settings"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, unique=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    earn_on_purchase_enabled = Column(Boolean, default=True, nullable=False)
    points_per_rupee = Column(Numeric(8, 2), nullable=False, default=1)
    max_redemption_percent = Column(Integer, nullable=False, default=50)
    minimum_order_amount = Column(Numeric(10, 2), nullable=False, default=100)
    cashback_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    welcome_bonus = Column(Integer, nullable=False, default=100)
    referral_bonus = Column(Integer, nullable=False, default=50)
    points_validity_days = Column(Integer, nullable=False, default=45)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tenant = relationship("Tenant", back_populates="loyalty_settings")


class LoyaltyTransaction(Base):
    __tablename__ = "loyalty_transactions"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    transaction_type = Column(SQLEnum(LoyaltyTransactionTypeEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, index=True)
    points = Column(Integer, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False, default=0)  # purchase amount (earned) or rupee value (redeemed)
    description = Column(Text)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    customer = relationship("Customer")


class CustomerLoyalty(Base):
    """Per-customer balance, rebuilt from loyalty_transactions after every write."""
    __tablename__ = "customer_loyalty"
    __table_args__ = (
        UniqueConstraint("tenant_id", "customer_id", name="uq_customer_loyalty_tenant_customer"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    points = Column(Integer, nullable=False, default=0)
    tier = Column(String(20), nullable=False, default="bronze")
    lifetime_spending = Column(Numeric(12, 2), nullable=False, default=0)
    total_earned = Column(Integer, nullable=False, default=0)
    total_redeemed = Column(Integer, nullable=False, default=0)
    join_date = Column(DateTime(timezone=True), nullable=True)
    last_activity = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("Customer", back_populates="loyalty")
