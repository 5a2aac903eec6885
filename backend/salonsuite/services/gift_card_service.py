"""
Gift card issuing, lookup and redemption.
"""
import secrets
import string
import time
from datetime import timedelta
from typing import Any, Dict, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from salonsuite.core.config import settings
from salonsuite.core.currency import format_inr_compact, to_money, ZERO
from salonsuite.core.dates import utcnow, as_utc
from salonsuite.core.logging_config import get_logger
from salonsuite.models.gift_card import GiftCard, GiftCardTransaction, GiftCardStatusEnum

logger = get_logger("gift_card_service")

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_gift_card_code() -> str:
    """GC + last 8 digits of the epoch millis + 4 random upper-case alphanumerics."""
    millis = str(int(time.time() * 1000))[-8:]
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(4))
    return f"GC{millis}{suffix}"


def _unique_code(db: Session, tenant_id: str) -> str:
    while True:
        code = generate_gift_card_code()
        exists = db.query(GiftCard.id).filter(GiftCard.tenant_id == tenant_id, GiftCard.code == code).first()
        if not exists:
            return code


def create_gift_card(
    db: Session,
    tenant_id: str,
    amount,
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
    issued_to: Optional[int] = None,
    expires_in_days: Optional[int] = None,
) -> GiftCard:
    amount = to_money(amount)
    if amount <= ZERO:
        raise ValueError("Gift card amount must be greater than zero")
    days = expires_in_days if expires_in_days is not None else settings.GIFT_CARD_DEFAULT_EXPIRY_DAYS
    card = GiftCard(
        tenant_id=tenant_id,
        code=_unique_code(db, tenant_id),
        initial_amount=amount,
        balance=amount,
        status=GiftCardStatusEnum.ACTIVE,
        customer_name=customer_name,
        customer_phone=customer_phone,
        issued_to=issued_to,
        expires_at=utcnow() + timedelta(days=days),
    )
    db.add(card)
    db.flush()
    logger.info(
        f"Issued gift card {card.code} worth {format_inr_compact(card.initial_amount)}",
        extra={"tenant_id": tenant_id, "gift_card_id": card.id, "amount": str(amount)}
    )
    return card


def is_expired(card: GiftCard) -> bool:
    return card.expires_at is not None and as_utc(card.expires_at) < utcnow()


def lookup_gift_card(db: Session, tenant_id: str, code: str) -> Optional[GiftCard]:
    """
    Find a redeemable card by code (case-insensitive).

    Returns None unless the card is active, unexpired and has balance left.
    A card found past its expiry is flagged expired.
    """
    normalized = (code or "").strip().upper()
    if not normalized:
        return None
    card = db.query(GiftCard).filter(
        GiftCard.tenant_id == tenant_id,
        func.upper(GiftCard.code) == normalized,
    ).first()
    if not card:
        return None
    if card.status == GiftCardStatusEnum.ACTIVE and is_expired(card):
        card.status = GiftCardStatusEnum.EXPIRED
        db.flush()
        logger.info(f"Gift card {card.code} flagged expired", extra={"tenant_id": tenant_id, "gift_card_id": card.id})
    if card.status != GiftCardStatusEnum.ACTIVE or to_money(card.balance) <= ZERO:
        return None
    return card


def redeem_gift_card(db: Session, card: GiftCard, amount, invoice_id: Optional[int] = None) -> GiftCardTransaction:
    amount = to_money(amount)
    balance = to_money(card.balance)
    if amount <= ZERO:
        raise ValueError("Gift card amount must be greater than zero")
    if amount > balance:
        raise ValueError(f"Gift card {card.code} has insufficient balance")
    card.balance = balance - amount
    if card.balance <= ZERO:
        card.status = GiftCardStatusEnum.USED
    txn = GiftCardTransaction(
        tenant_id=card.tenant_id,
        gift_card_id=card.id,
        invoice_id=invoice_id,
        amount=amount,
        balance_after=card.balance,
    )
    db.add(txn)
    db.flush()
    logger.info(
        f"Redeemed {amount} from gift card {card.code}",
        extra={"tenant_id": card.tenant_id, "gift_card_id": card.id, "invoice_id": invoice_id, "balance": str(card.balance)}
    )
    return txn


def get_gift_card_stats(db: Session, tenant_id: str) -> Dict[str, Any]:
    cards = db.query(GiftCard).filter(GiftCard.tenant_id == tenant_id).all()
    total_value = sum((to_money(c.initial_amount) for c in cards), ZERO)
    outstanding = sum((to_money(c.balance) for c in cards), ZERO)
    return {
        "total_cards": len(cards),
        "total_value": total_value,
        "redeemed_value": total_value - outstanding,
        "outstanding_balance": outstanding,
        "active_cards": sum(1 for c in cards if c.status == GiftCardStatusEnum.ACTIVE and not is_expired(c)),
    }
