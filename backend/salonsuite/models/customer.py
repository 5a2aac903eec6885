from sqlalchemy import Column, Integer, String, Date, DateTime, Text, ForeignKey, Boolean, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from salonsuite.core.database import Base


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("tenant_id", "phone", name="uq_customers_tenant_phone"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False, index=True)
    email = Column(String(255), nullable=True)
    address = Column(Text)
    gender = Column(String(10), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    date_of_anniversary = Column(Date, nullable=True)
    lead_source = Column(String(50), nullable=True)
    notes = Column(Text)
    loyalty_enrolled = Column(Boolean, default=True, nullable=False)
    loyalty_enrolled_at = Column(DateTime(timezone=True), nullable=True)
    total_visits = Column(Integer, default=0, nullable=False)
    total_spent = Column(Numeric(12, 2), default=0, nullable=False)
    last_visit = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tenant = relationship("Tenant", back_populates="customers")
    bookings = relationship("Booking", back_populates="customer")
    invoices = relationship("Invoice", back_populates="customer")
    memberships = relationship("CustomerMembership", back_populates="customer")
    loyalty = relationship("CustomerLoyalty", back_populates="customer", uselist=False)
