"""
Loyalty Service for SalonSuite

Provides:
- Per-tenant loyalty settings (created with defaults on first read)
- Tier table and tier progress by lifetime spending
- Points earned / max redeemable calculations
- Transaction log writes and the customer_loyalty balance aggregate
"""
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_FLOOR
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from salonsuite.core.currency import to_money, ZERO
from salonsuite.core.dates import utcnow, as_utc
from salonsuite.core.logging_config import get_logger
from salonsuite.models.customer import Customer
from salonsuite.models.loyalty import (
    LoyaltySettings,
    LoyaltyTransaction,
    CustomerLoyalty,
    LoyaltyTransactionTypeEnum,
)

logger = get_logger("loyalty_service")

DEFAULT_LOYALTY_SETTINGS: Dict[str, Any] = {
    "is_active": True,
    "earn_on_purchase_enabled": True,
    "points_per_rupee": Decimal("1"),
    "max_redemption_percent": 50,
    "minimum_order_amount": Decimal("100"),
    "cashback_percentage": Decimal("0"),
    "welcome_bonus": 100,
    "referral_bonus": 50,
    "points_validity_days": 45,
}

TRANSACTIONS_MAX_LIMIT = 200
ACTIVE_MEMBER_WINDOW_DAYS = 30

# (name, display name, lifetime spending threshold, points multiplier)
_TIERS = [
    ("bronze", "Bronze", Decimal("0"), Decimal("1")),
    ("silver", "Silver", Decimal("25000"), Decimal("1.25")),
    ("gold", "Gold", Decimal("50000"), Decimal("1.5")),
    ("platinum", "Platinum", Decimal("100000"), Decimal("2")),
]


class LoyaltyTier:
    __slots__ = ("name", "display_name", "min_spending", "multiplier")

    def __init__(self, name: str, display_name: str, min_spending: Decimal, multiplier: Decimal):
        self.name = name
        self.display_name = display_name
        self.min_spending = min_spending
        self.multiplier = multiplier


def get_tiers() -> List[LoyaltyTier]:
    return [LoyaltyTier(*t) for t in _TIERS]


def calculate_tier(lifetime_spending) -> LoyaltyTier:
    """Highest tier whose threshold the lifetime spending has reached."""
    spending = to_money(lifetime_spending)
    current = LoyaltyTier(*_TIERS[0])
    for t in _TIERS:
        if spending >= t[2]:
            current = LoyaltyTier(*t)
    return current


def next_tier(tier_name: str) -> Optional[LoyaltyTier]:
    names = [t[0] for t in _TIERS]
    if tier_name not in names:
        return None
    idx = names.index(tier_name)
    if idx + 1 >= len(_TIERS):
        return None
    return LoyaltyTier(*_TIERS[idx + 1])


def progress_to_next_tier(lifetime_spending) -> Dict[str, Any]:
    """
    Progress inside the current tier band.

    Returns a dict with current tier, next tier (None at the top), progress
    percentage (0..100) and the spend remaining to reach the next tier.
    """
    spending = to_money(lifetime_spending)
    current = calculate_tier(spending)
    upcoming = next_tier(current.name)
    if upcoming is None:
        return {
            "current_tier": current.name,
            "next_tier": None,
            "progress": Decimal("100"),
            "remaining": ZERO,
        }
    band = upcoming.min_spending - current.min_spending
    progress = (spending - current.min_spending) / band * Decimal("100")
    progress = min(Decimal("100"), max(Decimal("0"), progress))
    return {
        "current_tier": current.name,
        "next_tier": upcoming.name,
        "progress": to_money(progress),
        "remaining": to_money(max(ZERO, upcoming.min_spending - spending)),
    }


def calculate_points_earned(final_amount, settings) -> int:
    """floor(final_amount * points_per_rupee) when earning applies, else 0."""
    amount = to_money(final_amount)
    if not settings.is_active or not settings.earn_on_purchase_enabled:
        return 0
    if amount < to_money(settings.minimum_order_amount):
        return 0
    points = (amount * Decimal(str(settings.points_per_rupee))).to_integral_value(rounding=ROUND_FLOOR)
    return max(0, int(points))


def calculate_max_redeemable(amount, settings, points_balance: int) -> int:
    """min(floor(amount * max_redemption_percent / 100), balance); 0 when the program is off."""
    if not settings.is_active:
        return 0
    amount = max(ZERO, to_money(amount))
    cap = (amount * Decimal(settings.max_redemption_percent) / Decimal("100")).to_integral_value(rounding=ROUND_FLOOR)
    return max(0, min(int(cap), int(points_balance or 0)))


def get_or_create_settings(db: Session, tenant_id: str) -> LoyaltySettings:
    row = db.query(LoyaltySettings).filter(LoyaltySettings.tenant_id == tenant_id).first()
    if row:
        return row
    row = LoyaltySettings(tenant_id=tenant_id, **DEFAULT_LOYALTY_SETTINGS)
    db.add(row)
    db.flush()
    logger.info(f"Created default loyalty settings for tenant {tenant_id}", extra={"tenant_id": tenant_id})
    return row


def update_settings(db: Session, tenant_id: str, changes: Dict[str, Any]) -> LoyaltySettings:
    """Partial merge over the stored (or default) settings."""
    row = get_or_create_settings(db, tenant_id)
    for field, value in changes.items():
        if field in DEFAULT_LOYALTY_SETTINGS and value is not None:
            setattr(row, field, value)
    db.flush()
    return row


def refresh_customer_loyalty(db: Session, tenant_id: str, customer_id: int) -> CustomerLoyalty:
    """Rebuild the balance aggregate from the transaction log."""
    db.flush()
    rows = db.query(
        LoyaltyTransaction.transaction_type,
        func.coalesce(func.sum(LoyaltyTransaction.points), 0),
        func.coalesce(func.sum(LoyaltyTransaction.amount), 0),
        func.max(LoyaltyTransaction.created_at),
    ).filter(
        LoyaltyTransaction.tenant_id == tenant_id,
        LoyaltyTransaction.customer_id == customer_id,
    ).group_by(LoyaltyTransaction.transaction_type).all()

    earned = redeemed = 0
    lifetime = ZERO
    for txn_type, points_sum, amount_sum, _ in rows:
        if txn_type == LoyaltyTransactionTypeEnum.EARNED:
            earned = int(points_sum or 0)
            lifetime = to_money(amount_sum or 0)
        elif txn_type == LoyaltyTransactionTypeEnum.REDEEMED:
            redeemed = int(points_sum or 0)

    aggregate = db.query(CustomerLoyalty).filter(
        CustomerLoyalty.tenant_id == tenant_id,
        CustomerLoyalty.customer_id == customer_id,
    ).first()
    if not aggregate:
        aggregate = CustomerLoyalty(tenant_id=tenant_id, customer_id=customer_id, join_date=utcnow())
        db.add(aggregate)

    aggregate.total_earned = earned
    aggregate.total_redeemed = redeemed
    aggregate.points = max(0, earned - redeemed)
    aggregate.lifetime_spending = lifetime
    aggregate.tier = calculate_tier(lifetime).name
    if rows:
        aggregate.last_activity = utcnow()
    db.flush()
    return aggregate


def get_customer_loyalty(db: Session, tenant_id: str, customer_id: int) -> CustomerLoyalty:
    aggregate = db.query(CustomerLoyalty).filter(
        CustomerLoyalty.tenant_id == tenant_id,
        CustomerLoyalty.customer_id == customer_id,
    ).first()
    if aggregate:
        return aggregate
    return refresh_customer_loyalty(db, tenant_id, customer_id)


def get_points_balance(db: Session, tenant_id: str, customer_id: int) -> int:
    return get_customer_loyalty(db, tenant_id, customer_id).points


def record_transaction(
    db: Session,
    tenant_id: str,
    customer_id: int,
    transaction_type: LoyaltyTransactionTypeEnum,
    points: int,
    amount=ZERO,
    description: Optional[str] = None,
    invoice_id: Optional[int] = None,
    settings: Optional[LoyaltySettings] = None,
) -> LoyaltyTransaction:
    """
    Append to the loyalty log and refresh the aggregate.

    Earned points get expires_at = now + points_validity_days. A redemption
    larger than the current balance raises ValueError.
    """
    if points <= 0:
        raise ValueError("Points must be greater than zero")
    if transaction_type == LoyaltyTransactionTypeEnum.REDEEMED:
        balance = get_points_balance(db, tenant_id, customer_id)
        if points > balance:
            raise ValueError(f"Insufficient loyalty points: balance is {balance}, requested {points}")

    expires_at = None
    if transaction_type == LoyaltyTransactionTypeEnum.EARNED:
        settings = settings or get_or_create_settings(db, tenant_id)
        expires_at = utcnow() + timedelta(days=settings.points_validity_days)

    txn = LoyaltyTransaction(
        tenant_id=tenant_id,
        customer_id=customer_id,
        transaction_type=transaction_type,
        points=points,
        amount=to_money(amount),
        description=description,
        invoice_id=invoice_id,
        expires_at=expires_at,
        created_at=utcnow(),
    )
    db.add(txn)
    refresh_customer_loyalty(db, tenant_id, customer_id)
    logger.info(
        f"Loyalty {transaction_type.value}: {points} points for customer {customer_id}",
        extra={
            "tenant_id": tenant_id,
            "customer_id": customer_id,
            "points": points,
            "invoice_id": invoice_id,
        }
    )
    return txn


def enroll_customer(db: Session, tenant_id: str, customer: Customer, award_welcome_bonus: bool = True) -> CustomerLoyalty:
    """Mark the customer enrolled; first enrollment may earn the welcome bonus."""
    settings = get_or_create_settings(db, tenant_id)
    first_enrollment = customer.loyalty_enrolled_at is None
    customer.loyalty_enrolled = True
    if first_enrollment:
        customer.loyalty_enrolled_at = utcnow()
    db.flush()
    if award_welcome_bonus and first_enrollment and settings.is_active and settings.welcome_bonus > 0:
        record_transaction(
            db, tenant_id, customer.id,
            LoyaltyTransactionTypeEnum.EARNED,
            settings.welcome_bonus,
            description="Welcome bonus",
            settings=settings,
        )
    return get_customer_loyalty(db, tenant_id, customer.id)


def unenroll_customer(db: Session, customer: Customer) -> Customer:
    customer.loyalty_enrolled = False
    db.flush()
    return customer


def list_transactions(
    db: Session,
    tenant_id: str,
    customer_id: Optional[int] = None,
    transaction_type: Optional[LoyaltyTransactionTypeEnum] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[LoyaltyTransaction]:
    limit = max(1, min(int(limit), TRANSACTIONS_MAX_LIMIT))
    offset = max(0, int(offset))
    query = db.query(LoyaltyTransaction).filter(LoyaltyTransaction.tenant_id == tenant_id)
    if customer_id is not None:
        query = query.filter(LoyaltyTransaction.customer_id == customer_id)
    if transaction_type is not None:
        query = query.filter(LoyaltyTransaction.transaction_type == transaction_type)
    if date_from is not None:
        query = query.filter(LoyaltyTransaction.created_at >= date_from)
    if date_to is not None:
        query = query.filter(LoyaltyTransaction.created_at <= date_to)
    return query.order_by(LoyaltyTransaction.created_at.desc(), LoyaltyTransaction.id.desc()).offset(offset).limit(limit).all()


def get_expiring_points(db: Session, tenant_id: str, days: int = 7, customer_id: Optional[int] = None) -> List[LoyaltyTransaction]:
    """Earned transactions whose points expire within the next `days` days."""
    now = utcnow()
    horizon = now + timedelta(days=max(0, days))
    query = db.query(LoyaltyTransaction).filter(
        LoyaltyTransaction.tenant_id == tenant_id,
        LoyaltyTransaction.transaction_type == LoyaltyTransactionTypeEnum.EARNED,
        LoyaltyTransaction.expires_at.isnot(None),
    )
    if customer_id is not None:
        query = query.filter(LoyaltyTransaction.customer_id == customer_id)
    rows = query.order_by(LoyaltyTransaction.expires_at).all()
    return [r for r in rows if now <= as_utc(r.expires_at) <= horizon]


def get_program_stats(db: Session, tenant_id: str) -> Dict[str, Any]:
    aggregates = db.query(CustomerLoyalty).filter(CustomerLoyalty.tenant_id == tenant_id).all()
    since = utcnow() - timedelta(days=ACTIVE_MEMBER_WINDOW_DAYS)
    active = sum(1 for a in aggregates if a.last_activity and as_utc(a.last_activity) >= since)
    tier_counts: Dict[str, int] = {t[0]: 0 for t in _TIERS}
    for a in aggregates:
        tier_counts[a.tier] = tier_counts.get(a.tier, 0) + 1
    return {
        "total_members": len(aggregates),
        "total_points_issued": sum(a.total_earned or 0 for a in aggregates),
        "total_points_redeemed": sum(a.total_redeemed or 0 for a in aggregates),
        # 1 point = 1 rupee
        "total_value_redeemed": to_money(sum(a.total_redeemed or 0 for a in aggregates)),
        "outstanding_points": sum(a.points or 0 for a in aggregates),
        "active_members": active,
        "tier_distribution": tier_counts,
    }
