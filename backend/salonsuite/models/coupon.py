from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Boolean, Enum as SQLEnum, Text, UniqueConstraint
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class DiscountTypeEnum(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class Coupon(Base):
    __tablename__ = "coupons"
    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_coupons_tenant_code"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    code = Column(String(50), nullable=False, index=True)  # stored upper-case
    name = Column(String(255), nullable=False)
    description = Column(Text)
    discount_type = Column(SQLEnum(DiscountTypeEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False)
    discount_value = Column(Numeric(10, 2), nullable=False)
    min_order_amount = Column(Numeric(10, 2), nullable=False, default=0)
    max_discount = Column(Numeric(10, 2), nullable=True)
    valid_from = Column(Date, nullable=False)
    valid_until = Column(Date, nullable=False)
    usage_limit = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
