"""
Money helpers: rounding to paise and INR display formatting
(Indian digit grouping, e.g. 1,23,456.00).
"""
import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Number = Union[Decimal, int, float, str]

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Number) -> Decimal:
    """Coerce to Decimal rounded half-up to 2 places. None counts as zero."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(amount: Number, fraction_digits: int = 2) -> str:
    value = to_money(amount)
    sign = "-" if value < 0 else ""
    quant = Decimal(1).scaleb(-fraction_digits) if fraction_digits else Decimal(1)
    text = f"{abs(value).quantize(quant, rounding=ROUND_HALF_UP):f}"
    whole, _, frac = text.partition(".")
    grouped = _group_indian(whole)
    return f"{sign}₹{grouped}.{frac}" if frac else f"{sign}₹{grouped}"


def format_inr_compact(amount: Number) -> str:
    value = to_money(amount)

    def trim(n: Decimal) -> str:
        text = f"{n.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP):f}"
        return text[:-2] if text.endswith(".0") else text

    if value >= Decimal("10000000"):
        return f"₹{trim(value / Decimal('10000000'))}Cr"
    if value >= Decimal("100000"):
        return f"₹{trim(value / Decimal('100000'))}L"
    if value >= Decimal("1000"):
        return f"₹{trim(value / Decimal('1000'))}K"
    text = f"{value:f}".rstrip("0").rstrip(".")
    return f"₹{text}"


def parse_currency(text: str) -> Decimal:
    """Parse user-entered money like '₹1,250.50' -> Decimal('1250.50'); junk -> 0."""
    if not text:
        return ZERO
    cleaned = re.sub(r"[^\d.\-]", "", text)
    try:
        return to_money(Decimal(cleaned))
    except InvalidOperation:
        return ZERO
