from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from salonsuite.core.currency import format_inr, format_inr_compact, parse_currency, to_money
from salonsuite.core.dates import add_months
from salonsuite.core.validators import parse_money_input, validate_phone
from salonsuite.models.coupon import DiscountTypeEnum
from salonsuite.services import coupon_service, loyalty_service, membership_service, sms_service
from salonsuite.services.gift_card_service import generate_gift_card_code


class TestTiers:
    @pytest.mark.parametrize("spending, tier", [
        (0, "bronze"),
        (24999.99, "bronze"),
        (25000, "silver"),
        (50000, "gold"),
        (99999, "gold"),
        (100000, "platinum"),
        (500000, "platinum"),
    ])
    def test_calculate_tier(self, spending, tier):
        assert loyalty_service.calculate_tier(spending).name == tier

    def test_progress_inside_band(self):
        progress = loyalty_service.progress_to_next_tier(Decimal("37500"))
        assert progress["current_tier"] == "silver"
        assert progress["next_tier"] == "gold"
        assert progress["progress"] == Decimal("50.00")
        assert progress["remaining"] == Decimal("12500.00")

    def test_progress_at_top_tier(self):
        progress = loyalty_service.progress_to_next_tier(Decimal("150000"))
        assert progress["next_tier"] is None
        assert progress["progress"] == Decimal("100")
        assert progress["remaining"] == Decimal("0.00")

    def test_tier_table(self):
        tiers = loyalty_service.get_tiers()
        assert [t.name for t in tiers] == ["bronze", "silver", "gold", "platinum"]
        assert tiers[-1].multiplier == Decimal("2")


class TestPointCalculators:
    def settings(self, **overrides):
        values = dict(loyalty_service.DEFAULT_LOYALTY_SETTINGS)
        values.update(overrides)
        return SimpleNamespace(**values)

    def test_points_earned_floors(self):
        assert loyalty_service.calculate_points_earned(Decimal("150.75"), self.settings()) == 150

    def test_points_earned_disabled(self):
        assert loyalty_service.calculate_points_earned(500, self.settings(earn_on_purchase_enabled=False)) == 0
        assert loyalty_service.calculate_points_earned(500, self.settings(is_active=False)) == 0

    def test_max_redeemable(self):
        assert loyalty_service.calculate_max_redeemable(Decimal("999"), self.settings(), 1000) == 499
        assert loyalty_service.calculate_max_redeemable(Decimal("999"), self.settings(), 40) == 40
        assert loyalty_service.calculate_max_redeemable(Decimal("999"), self.settings(is_active=False), 1000) == 0


class TestCoupons:
    def coupon(self, **overrides):
        values = dict(
            discount_type=DiscountTypeEnum.PERCENTAGE,
            discount_value=Decimal("20"),
            max_discount=None,
            is_active=True,
            valid_from=date(2026, 1, 1),
            valid_until=date(2026, 12, 31),
            usage_limit=None,
            used_count=0,
        )
        values.update(overrides)
        return SimpleNamespace(**values)

    def test_percentage_discount_with_cap(self):
        assert coupon_service.compute_coupon_discount(self.coupon(), 1000) == Decimal("200.00")
        assert coupon_service.compute_coupon_discount(self.coupon(max_discount=Decimal("150")), 1000) == Decimal("150.00")

    def test_fixed_discount_never_exceeds_subtotal(self):
        fixed = self.coupon(discount_type=DiscountTypeEnum.FIXED, discount_value=Decimal("300"))
        assert coupon_service.compute_coupon_discount(fixed, 1000) == Decimal("300.00")
        assert coupon_service.compute_coupon_discount(fixed, 120) == Decimal("120.00")

    def test_availability_window_is_inclusive(self):
        coupon = self.coupon()
        assert coupon_service.is_coupon_available(coupon, date(2026, 1, 1))
        assert coupon_service.is_coupon_available(coupon, date(2026, 12, 31))
        assert not coupon_service.is_coupon_available(coupon, date(2027, 1, 1))

    def test_exhausted_coupon(self):
        coupon = self.coupon(usage_limit=2, used_count=2)
        assert not coupon_service.is_coupon_available(coupon, date(2026, 6, 1))

    def test_normalize_code(self):
        assert coupon_service.normalize_code("  save10 ") == "SAVE10"


class TestMembershipDates:
    def test_add_months_clamps_day(self):
        assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
        assert add_months(date(2028, 1, 31), 1) == date(2028, 2, 29)
        assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)

    def test_display_status(self):
        today = date(2026, 6, 10)
        assert membership_service.display_status(date(2026, 6, 9), today) == "expired"
        assert membership_service.display_status(today, today) == "expiring_soon"
        assert membership_service.display_status(today + timedelta(days=7), today) == "expiring_soon"
        assert membership_service.display_status(today + timedelta(days=8), today) == "active"


class TestCurrency:
    def test_to_money_rounds_half_up(self):
        assert to_money("10.005") == Decimal("10.01")
        assert to_money(None) == Decimal("0.00")

    def test_format_inr_uses_indian_grouping(self):
        assert format_inr(Decimal("123456.5")) == "₹1,23,456.50"
        assert format_inr(999) == "₹999.00"
        assert format_inr(-1500) == "-₹1,500.00"

    def test_format_inr_compact(self):
        assert format_inr_compact(2500) == "₹2.5K"
        assert format_inr_compact(150000) == "₹1.5L"
        assert format_inr_compact(20000000) == "₹2Cr"
        assert format_inr_compact(250) == "₹250"

    def test_parse_currency(self):
        assert parse_currency("₹1,250.50") == Decimal("1250.50")
        assert parse_currency("") == Decimal("0.00")


def test_validate_phone():
    assert validate_phone(" 98765 43210 ") == "9876543210"
    assert validate_phone("+91 98765-43210") == "9876543210"
    assert validate_phone("098765 43210") == "9876543210"
    with pytest.raises(ValueError):
        validate_phone("12345")


def test_parse_money_input():
    assert parse_money_input("₹1,250.50") == Decimal("1250.50")
    assert parse_money_input("450") == "450"
    assert parse_money_input(300) == 300


def test_gift_card_code_format():
    code = generate_gift_card_code()
    assert code.startswith("GC")
    assert len(code) == 14
    assert code == code.upper()


class TestSms:
    def test_format_phone_number(self):
        assert sms_service.format_phone_number("+91 98765-43210") == "9876543210"
        assert sms_service.format_phone_number("09876543210") == "9876543210"

    def test_personalize(self):
        customer = SimpleNamespace(name="Asha")
        assert sms_service.personalize("Hi {name}, 20% off!", customer) == "Hi Asha, 20% off!"

    def test_send_skipped_when_disabled(self, monkeypatch):
        monkeypatch.setattr(sms_service.settings, "SMS_ENABLED", False)
        assert sms_service.send_sms_via_messagebot("9876543210", "hello") is False
