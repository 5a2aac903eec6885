"""
Invoice Service for SalonSuite

Provides utility functions for invoice operations including:
- Invoice / booking number generation
- GST calculation
- Share tokens for public invoice links
"""
import secrets
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from salonsuite.core.config import settings
from salonsuite.core.currency import to_money, ZERO
from salonsuite.core.gst_rates import get_gst_rate_by_id
from salonsuite.core.logging_config import get_logger
from salonsuite.models.booking import Booking
from salonsuite.models.invoice import Invoice

logger = get_logger("invoice_service")


def _next_sequence(db: Session, column, tenant_column, tenant_id: str, prefix_pattern: str) -> int:
    existing = db.query(column).filter(
        tenant_column == tenant_id,
        column.like(f"{prefix_pattern}%"),
    ).all()

    max_seq = 0
    for (number,) in existing:
        try:
            max_seq = max(max_seq, int(number.split("-")[-1]))
        except (ValueError, IndexError):
            logger.warning(f"Could not parse document number: {number}")
    return max_seq + 1


def generate_invoice_number(db: Session, tenant_id: str, on_date: Optional[date] = None) -> str:
    """
    Generate the next invoice number for a tenant.

    Format: INV-YYYYMMDD-XXX, where XXX is the sequence for that day
    (001, 002, ...), counted per tenant.
    """
    on_date = on_date or date.today()
    prefix_pattern = f"{settings.INVOICE_PREFIX}-{on_date.strftime('%Y%m%d')}-"
    next_seq = _next_sequence(db, Invoice.invoice_number, Invoice.tenant_id, tenant_id, prefix_pattern)
    invoice_number = f"{prefix_pattern}{next_seq:03d}"
    logger.info(
        f"Generated invoice number: {invoice_number}",
        extra={"tenant_id": tenant_id, "sequence": next_seq}
    )
    return invoice_number


def generate_booking_number(db: Session, tenant_id: str, on_date: Optional[date] = None) -> str:
    """Format: BK-YYYYMMDD-XXX, per tenant per day."""
    on_date = on_date or date.today()
    prefix_pattern = f"{settings.BOOKING_PREFIX}-{on_date.strftime('%Y%m%d')}-"
    next_seq = _next_sequence(db, Booking.booking_number, Booking.tenant_id, tenant_id, prefix_pattern)
    return f"{prefix_pattern}{next_seq:03d}"


def get_gst_rate_percent(gst_rate_id: Optional[int] = None) -> Decimal:
    """Total GST percentage (CGST + SGST) for a slab; falls back to the configured default slab."""
    rate = get_gst_rate_by_id(gst_rate_id or settings.DEFAULT_GST_RATE_ID)
    if rate is None:
        rate = get_gst_rate_by_id(settings.DEFAULT_GST_RATE_ID)
    return rate.total_rate if rate else ZERO


def calculate_gst(amount, gst_rate_id: Optional[int] = None) -> Tuple[Decimal, Decimal]:
    """
    Split GST on an amount into (cgst_amount, sgst_amount).

    Intra-state only: a salon bills walk-in customers of its own state.
    """
    rate = get_gst_rate_by_id(gst_rate_id or settings.DEFAULT_GST_RATE_ID)
    if rate is None:
        return (ZERO, ZERO)
    amount = to_money(amount)
    cgst = to_money(amount * rate.cgst_rate / Decimal("100"))
    sgst = to_money(amount * rate.sgst_rate / Decimal("100"))
    return (cgst, sgst)


def ensure_share_token(db: Session, invoice: Invoice) -> str:
    """Return the invoice's share token, creating one on first use."""
    if invoice.share_token:
        return invoice.share_token
    while True:
        token = secrets.token_urlsafe(24)
        if not db.query(Invoice.id).filter(Invoice.share_token == token).first():
            break
    invoice.share_token = token
    db.flush()
    logger.info(f"Created share token for invoice {invoice.invoice_number}", extra={"invoice_id": invoice.id})
    return token
