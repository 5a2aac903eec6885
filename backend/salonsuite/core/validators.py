"""
Reusable validators for common validation patterns
"""
import re
from typing import Any, Iterable, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from salonsuite.core.currency import parse_currency
from salonsuite.core.gst_rates import get_gst_rate_by_id
from salonsuite.models.customer import Customer
from salonsuite.models.staff import Staff

PHONE_MIN_DIGITS = 10


def normalize_phone(phone: str) -> str:
    """Digits only, without a trunk 0 or the 91 country code, so one number has one spelling."""
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == 11 and digits.startswith("0"):
        digits = digits[1:]
    elif len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    return digits


def validate_phone(phone: Optional[str]) -> str:
    phone = normalize_phone(phone)
    if len(phone) < PHONE_MIN_DIGITS:
        raise ValueError("Phone number must be at least 10 digits")
    return phone


def parse_money_input(value: Any) -> Any:
    """Accept amounts typed as '₹1,250.50'; anything else is left for pydantic."""
    if isinstance(value, str) and ("₹" in value or "," in value):
        return parse_currency(value)
    return value


def validate_gst_rate_id(gst_rate_id: Optional[int]) -> Optional[int]:
    if gst_rate_id is not None and get_gst_rate_by_id(gst_rate_id) is None:
        raise ValueError(f"Unknown GST rate id: {gst_rate_id}")
    return gst_rate_id


def get_tenant_customer(db: Session, tenant_id: str, customer_id: int) -> Customer:
    """Fetch a customer of this tenant or raise 404 (other tenants' rows look missing)."""
    customer = db.query(Customer).filter(
        Customer.id == customer_id,
        Customer.tenant_id == tenant_id,
    ).first()
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


def get_tenant_staff(db: Session, tenant_id: str, staff_id: Optional[int], allow_none: bool = True) -> Optional[Staff]:
    if staff_id is None:
        if allow_none:
            return None
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Staff ID is required")
    staff = db.query(Staff).filter(
        Staff.id == staff_id,
        Staff.tenant_id == tenant_id,
        Staff.is_active == True,
    ).first()
    if not staff:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff not found or inactive")
    return staff


def missing_ids(requested: Iterable[int], found: Iterable[int]) -> List[int]:
    found_set = set(found)
    return sorted({i for i in requested if i not in found_set})
