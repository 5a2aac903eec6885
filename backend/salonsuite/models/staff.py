from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class StaffRoleEnum(str, enum.Enum):
    STYLIST = "stylist"
    THERAPIST = "therapist"
    MANAGER = "manager"
    ASSISTANT = "assistant"
    RECEPTIONIST = "receptionist"


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=True)
    role = Column(SQLEnum(StaffRoleEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=StaffRoleEnum.STYLIST)
    commission_percentage = Column(Numeric(5, 2), default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    joining_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bookings = relationship("Booking", back_populates="staff")
