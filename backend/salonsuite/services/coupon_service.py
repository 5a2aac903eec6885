"""
Coupon validation and discount computation.
"""
from datetime import date
from decimal import Decimal
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from salonsuite.core.currency import to_money, ZERO
from salonsuite.core.logging_config import get_logger
from salonsuite.models.coupon import Coupon, DiscountTypeEnum

logger = get_logger("coupon_service")

INVALID_COUPON_MESSAGE = "Invalid coupon code or not applicable for this order amount"


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def compute_coupon_discount(coupon, subtotal) -> Decimal:
    """
    percentage -> subtotal * value / 100, fixed -> value.
    Capped by max_discount when set and never more than the subtotal.
    """
    subtotal = max(ZERO, to_money(subtotal))
    value = to_money(coupon.discount_value)
    if coupon.discount_type == DiscountTypeEnum.PERCENTAGE:
        discount = to_money(subtotal * value / Decimal("100"))
    else:
        discount = value
    if coupon.max_discount is not None:
        discount = min(discount, to_money(coupon.max_discount))
    return max(ZERO, min(discount, subtotal))


def is_coupon_available(coupon: Coupon, today: Optional[date] = None) -> bool:
    """Active, inside the inclusive date window and not exhausted."""
    today = today or date.today()
    if not coupon.is_active:
        return False
    if coupon.valid_from and today < coupon.valid_from:
        return False
    if coupon.valid_until and today > coupon.valid_until:
        return False
    if coupon.usage_limit is not None and (coupon.used_count or 0) >= coupon.usage_limit:
        return False
    return True


def find_valid_coupon(db: Session, tenant_id: str, code: str, order_amount, today: Optional[date] = None) -> Optional[Coupon]:
    """Case-insensitive lookup; None unless the coupon applies to this order amount."""
    normalized = normalize_code(code)
    if not normalized:
        return None
    coupon = db.query(Coupon).filter(
        Coupon.tenant_id == tenant_id,
        func.upper(Coupon.code) == normalized,
    ).first()
    if not coupon or not is_coupon_available(coupon, today):
        return None
    if to_money(coupon.min_order_amount) > to_money(order_amount):
        return None
    return coupon


def record_coupon_use(db: Session, coupon: Coupon) -> Coupon:
    coupon.used_count = (coupon.used_count or 0) + 1
    db.flush()
    logger.info(
        f"Coupon {coupon.code} used ({coupon.used_count} uses)",
        extra={"tenant_id": coupon.tenant_id, "coupon_id": coupon.id, "used_count": coupon.used_count}
    )
    return coupon
