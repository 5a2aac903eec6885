"""
Built-in customer segments for campaigns.
"""
from datetime import timedelta
from typing import Dict, List
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from salonsuite.core.dates import utcnow
from salonsuite.models.customer import Customer

VIP_SPEND_THRESHOLD = 10000
NEW_CUSTOMER_DAYS = 30
INACTIVE_DAYS = 90

SEGMENTS: List[Dict[str, str]] = [
    {"id": "all", "name": "All Customers", "description": "Everyone in the customer list"},
    {"id": "vip", "name": "VIP Customers", "description": f"Lifetime spend above {VIP_SPEND_THRESHOLD}"},
    {"id": "new", "name": "New Customers", "description": f"Joined in the last {NEW_CUSTOMER_DAYS} days"},
    {"id": "inactive", "name": "Inactive Customers", "description": f"No visit in the last {INACTIVE_DAYS} days"},
]


def segment_query(db: Session, tenant_id: str, segment: str):
    query = db.query(Customer).filter(Customer.tenant_id == tenant_id)
    now = utcnow().replace(tzinfo=None)
    if segment == "all":
        return query
    if segment == "vip":
        return query.filter(Customer.total_spent > VIP_SPEND_THRESHOLD)
    if segment == "new":
        return query.filter(Customer.created_at >= now - timedelta(days=NEW_CUSTOMER_DAYS))
    if segment == "inactive":
        cutoff = now - timedelta(days=INACTIVE_DAYS)
        return query.filter(or_(
            Customer.last_visit < cutoff,
            and_(Customer.last_visit.is_(None), Customer.created_at < cutoff),
        ))
    raise ValueError(f"Unknown segment: {segment}")


def segment_counts(db: Session, tenant_id: str) -> List[Dict]:
    return [dict(s, count=segment_query(db, tenant_id, s["id"]).count()) for s in SEGMENTS]
