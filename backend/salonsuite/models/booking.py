from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Enum as SQLEnum, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class BookingStatusEnum(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


TERMINAL_BOOKING_STATUSES = {
    BookingStatusEnum.COMPLETED,
    BookingStatusEnum.CANCELLED,
    BookingStatusEnum.NO_SHOW,
}

# Statuses only move forward; terminal statuses have no way out
BOOKING_TRANSITIONS = {
    BookingStatusEnum.PENDING: {
        BookingStatusEnum.CONFIRMED,
        BookingStatusEnum.COMPLETED,
        BookingStatusEnum.CANCELLED,
        BookingStatusEnum.NO_SHOW,
    },
    BookingStatusEnum.CONFIRMED: {
        BookingStatusEnum.COMPLETED,
        BookingStatusEnum.CANCELLED,
        BookingStatusEnum.NO_SHOW,
    },
}


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("tenant_id", "booking_number", name="uq_bookings_tenant_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    booking_number = Column(String(50), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=True, index=True)
    booking_date = Column(Date, nullable=False, index=True)
    booking_time = Column(String(5), nullable=False, default="10:00")  # HH:MM
    status = Column(SQLEnum(BookingStatusEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=BookingStatusEnum.PENDING)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("Customer", back_populates="bookings")
    staff = relationship("Staff", back_populates="bookings")
    services = relationship("BookingService", back_populates="booking", cascade="all, delete-orphan")
    invoice = relationship("Invoice", back_populates="booking", uselist=False)


class BookingService(Base):
    __tablename__ = "booking_services"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    quantity = Column(Integer, default=1, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    booking = relationship("Booking", back_populates="services")
    service = relationship("Service", back_populates="booking_services")
