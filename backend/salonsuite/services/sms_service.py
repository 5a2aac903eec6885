"""
SMS delivery through the MessageBot HTTP API.

Two senders use it: marketing campaigns (one message per recipient, {name}
personalised) and the invoice notification sent after checkout. A failed
send is logged and reported as False; it never fails the calling request.
"""
from typing import Iterable, Optional
import requests

from salonsuite.core.config import settings
from salonsuite.core.currency import format_inr
from salonsuite.core.logging_config import get_logger

logger = get_logger("sms_service")

REQUEST_TIMEOUT = 10
INDIAN_MOBILE_LENGTH = 10


def format_phone_number(phone: str) -> str:
    """Reduce a phone number to the 10 digits MessageBot expects (drops 0 / 91 prefixes)."""
    digits = "".join(ch for ch in (phone or "") if ch.isdigit())
    if digits.startswith("0"):
        digits = digits[1:]
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    return digits[:INDIAN_MOBILE_LENGTH]


def _resolve_sender(sender_id: Optional[str]) -> Optional[str]:
    """Sender ID to use, or None when MessageBot is not usable."""
    if not settings.SMS_ENABLED:
        logger.debug("SMS disabled; message not sent")
        return None
    if not settings.MESSAGEBOT_API_TOKEN:
        logger.warning("MESSAGEBOT_API_TOKEN is empty; message not sent")
        return None
    sender = sender_id or settings.MESSAGEBOT_SENDER_ID
    if not sender:
        logger.warning("No MessageBot sender ID for this salon; message not sent")
    return sender or None


def send_sms_via_messagebot(to: str, message: str, sender_id: Optional[str] = None) -> bool:
    """Send one SMS. Returns True only when MessageBot answered 200."""
    sender = _resolve_sender(sender_id)
    if sender is None:
        return False

    phone = format_phone_number(to)
    if len(phone) != INDIAN_MOBILE_LENGTH:
        logger.warning(f"Skipping SMS to unusable number {to!r}")
        return False

    try:
        response = requests.post(
            settings.MESSAGEBOT_API_URL,
            json={"to": phone, "senderId": sender, "message": message},
            headers={"Authorization": f"Bearer {settings.MESSAGEBOT_API_TOKEN}"},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"MessageBot request failed for {phone}: {e}", exc_info=True)
        return False

    if response.status_code != 200:
        logger.error(
            f"MessageBot rejected SMS to {phone}: {response.status_code} {response.text}",
            extra={"phone": phone, "status_code": response.status_code},
        )
        return False

    logger.info(f"SMS sent to {phone}", extra={"phone": phone, "sender_id": sender})
    return True


def personalize(message: str, customer) -> str:
    """Fill the {name} placeholder of a campaign message."""
    return message.replace("{name}", customer.name or "")


def send_campaign_sms(tenant, customers: Iterable, message: str) -> int:
    """Send a campaign to each customer with the tenant's sender ID; returns how many went out."""
    sent = sum(
        1
        for customer in customers
        if customer.phone and send_sms_via_messagebot(customer.phone, personalize(message, customer), sender_id=tenant.sender_id)
    )
    logger.info(f"Campaign SMS delivered to {sent} customers of {tenant.id}")
    return sent


def invoice_sms_text(invoice, customer) -> str:
    return (
        f"Hi {customer.name}, thank you for visiting! Invoice {invoice.invoice_number} "
        f"for {format_inr(invoice.total_amount)} is ready."
    )


def send_invoice_sms(tenant, invoice, customer) -> bool:
    """Invoice notification; skipped unless SMS is enabled for the salon."""
    if not tenant.sms_enabled:
        logger.debug(f"Invoice SMS skipped for {invoice.invoice_number}: salon {tenant.id} has SMS off")
        return False
    return send_sms_via_messagebot(customer.phone, invoice_sms_text(invoice, customer), sender_id=tenant.sender_id)
