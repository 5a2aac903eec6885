from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Enum as SQLEnum, Text, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class PlanStatusEnum(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class MembershipStatusEnum(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    PENDING = "pending"


class MembershipPlan(Base):
    __tablename__ = "membership_plans"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    duration_months = Column(Integer, nullable=False, default=1)
    benefits = Column(JSON, nullable=True)  # list of strings
    discount_percentage = Column(Numeric(5, 2), default=0)
    max_bookings_per_month = Column(Integer, nullable=True)
    status = Column(SQLEnum(PlanStatusEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=PlanStatusEnum.ACTIVE)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    memberships = relationship("CustomerMembership", back_populates="plan")


class CustomerMembership(Base):
    __tablename__ = "customer_memberships"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey("membership_plans.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False, index=True)
    status = Column(SQLEnum(MembershipStatusEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=MembershipStatusEnum.ACTIVE)
    amount_paid = Column(Numeric(10, 2), nullable=False, default=0)
    bookings_used = Column(Integer, nullable=False, default=0)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("Customer", back_populates="memberships")
    plan = relationship("MembershipPlan", back_populates="memberships")
