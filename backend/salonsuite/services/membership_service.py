"""
Membership helpers: end-date arithmetic, display status and expiry sweep.
"""
from datetime import date, timedelta
from typing import Optional
from sqlalchemy.orm import Session

from salonsuite.core.currency import to_money
from salonsuite.core.dates import add_months
from salonsuite.core.logging_config import get_logger
from salonsuite.models.membership import CustomerMembership, MembershipPlan, MembershipStatusEnum

logger = get_logger("membership_service")

EXPIRING_SOON_DAYS = 7


def calculate_end_date(start_date: date, duration_months: int) -> date:
    return add_months(start_date, duration_months)


def display_status(end_date: date, today: Optional[date] = None) -> str:
    """expired / expiring_soon (within 7 days) / active"""
    today = today or date.today()
    if end_date < today:
        return "expired"
    if end_date <= today + timedelta(days=EXPIRING_SOON_DAYS):
        return "expiring_soon"
    return "active"


def create_customer_membership(
    db: Session,
    tenant_id: str,
    customer_id: int,
    plan: MembershipPlan,
    start_date: Optional[date] = None,
    amount_paid=None,
    invoice_id: Optional[int] = None,
) -> CustomerMembership:
    start_date = start_date or date.today()
    membership = CustomerMembership(
        tenant_id=tenant_id,
        customer_id=customer_id,
        plan_id=plan.id,
        start_date=start_date,
        end_date=calculate_end_date(start_date, plan.duration_months),
        status=MembershipStatusEnum.ACTIVE,
        amount_paid=to_money(plan.price if amount_paid is None else amount_paid),
        bookings_used=0,
        invoice_id=invoice_id,
    )
    db.add(membership)
    db.flush()
    logger.info(
        f"Customer {customer_id} joined plan {plan.name}",
        extra={"tenant_id": tenant_id, "customer_id": customer_id, "plan_id": plan.id, "end_date": str(membership.end_date)}
    )
    return membership


def expire_memberships(db: Session, tenant_id: str, today: Optional[date] = None) -> int:
    """Mark active memberships whose end date has passed as expired; returns how many."""
    today = today or date.today()
    stale = db.query(CustomerMembership).filter(
        CustomerMembership.tenant_id == tenant_id,
        CustomerMembership.status == MembershipStatusEnum.ACTIVE,
        CustomerMembership.end_date < today,
    ).all()
    for m in stale:
        m.status = MembershipStatusEnum.EXPIRED
    db.flush()
    if stale:
        logger.info(f"Expired {len(stale)} memberships", extra={"tenant_id": tenant_id, "count": len(stale)})
    return len(stale)
