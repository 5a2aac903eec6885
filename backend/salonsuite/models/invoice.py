from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Enum as SQLEnum, Text, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class PaymentModeEnum(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"
    WALLET = "wallet"
    SPLIT = "split"


class InvoiceStatusEnum(str, enum.Enum):
    PAID = "paid"
    VOID = "void"


class InvoiceItemTypeEnum(str, enum.Enum):
    SERVICE = "service"
    PRODUCT = "product"
    MEMBERSHIP = "membership"
    CUSTOM = "custom"


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("tenant_id", "invoice_number", name="uq_invoices_tenant_number"),
        UniqueConstraint("tenant_id", "idempotency_key", name="uq_invoices_tenant_idempotency_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    invoice_number = Column(String(50), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=True, unique=True)
    invoice_date = Column(Date, nullable=False, index=True)
    due_date = Column(Date, nullable=True)
    subtotal = Column(Numeric(12, 2), nullable=False)
    discount_amount = Column(Numeric(12, 2), default=0.00)  # coupon/manual + gift cards + loyalty
    gst_amount = Column(Numeric(12, 2), nullable=False, default=0.00)
    total_amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(SQLEnum(PaymentModeEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=PaymentModeEnum.CASH)
    status = Column(SQLEnum(InvoiceStatusEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=InvoiceStatusEnum.PAID)
    breakdown = Column(JSON, nullable=True)
    notes = Column(Text)
    share_token = Column(String(64), unique=True, nullable=True, index=True)
    idempotency_key = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("Customer", back_populates="invoices")
    booking = relationship("Booking", back_populates="invoice")
    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan")


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    item_type = Column(SQLEnum(InvoiceItemTypeEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=InvoiceItemTypeEnum.SERVICE)
    reference_id = Column(Integer, nullable=True)  # service / product / membership plan id
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=True)
    description = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="items")
