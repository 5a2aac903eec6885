from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from salonsuite.core.database import Base


class Tenant(Base):
    """A salon/spa organization. Every business row hangs off a tenant id."""
    __tablename__ = "tenants"

    id = Column(String(64), primary_key=True, index=True)  # slug, e.g. "glow-studio"
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text)
    gstin = Column(String(15), nullable=True)
    sender_id = Column(String(10), nullable=True)  # MessageBot sender ID for this salon
    sms_enabled = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customers = relationship("Customer", back_populates="tenant")
    loyalty_settings = relationship("LoyaltySettings", back_populates="tenant", uselist=False, cascade="all, delete-orphan")
