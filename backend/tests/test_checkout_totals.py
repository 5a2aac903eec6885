from decimal import Decimal
from types import SimpleNamespace

import pytest

from salonsuite.models.coupon import DiscountTypeEnum
from salonsuite.models.loyalty import LoyaltySettings
from salonsuite.services.checkout_service import CheckoutError, compute_checkout_totals
from salonsuite.services.loyalty_service import DEFAULT_LOYALTY_SETTINGS


def loyalty_settings(**overrides):
    values = dict(DEFAULT_LOYALTY_SETTINGS)
    values.update(overrides)
    return LoyaltySettings(**values)


def ten_percent_off(max_discount=None):
    return SimpleNamespace(
        discount_type=DiscountTypeEnum.PERCENTAGE,
        discount_value=Decimal("10"),
        max_discount=max_discount,
    )


def test_full_chain_applies_coupon_gst_gift_card_then_points():
    totals = compute_checkout_totals(
        [(Decimal("1000"), 1)],
        coupon=ten_percent_off(),
        gst_rate=Decimal("18"),
        gift_cards=[("GC1", Decimal("62"), Decimal("100"))],
        redeem_points=200,
        points_balance=300,
        settings=loyalty_settings(),
    )
    assert totals.subtotal == Decimal("1000.00")
    assert totals.coupon_discount == Decimal("100.00")
    assert totals.discounted_subtotal == Decimal("900.00")
    assert totals.gst_amount == Decimal("162.00")
    assert totals.amount_before_loyalty == Decimal("1062.00")
    assert totals.gift_card_total == Decimal("62.00")
    assert totals.amount_after_gift_cards == Decimal("1000.00")
    # min(floor(1000 * 50%), 300)
    assert totals.max_redeemable_points == 300
    assert totals.loyalty_discount == Decimal("200.00")
    assert totals.total == Decimal("800.00")
    assert totals.points_earned == 800


def test_manual_discount_used_without_coupon():
    totals = compute_checkout_totals(
        [(Decimal("500"), 2)],
        manual_discount_percent=Decimal("10"),
        gst_rate=Decimal("18"),
        settings=loyalty_settings(),
    )
    assert totals.manual_discount == Decimal("100.00")
    assert totals.coupon_discount == Decimal("0.00")
    assert totals.total == Decimal("1062.00")


def test_coupon_wins_over_manual_discount():
    totals = compute_checkout_totals(
        [(Decimal("1000"), 1)],
        coupon=ten_percent_off(max_discount=Decimal("50")),
        manual_discount_percent=Decimal("30"),
        settings=loyalty_settings(),
    )
    assert totals.coupon_discount == Decimal("50.00")
    assert totals.manual_discount == Decimal("0.00")
    assert totals.discounted_subtotal == Decimal("950.00")


def test_redemption_above_cap_is_rejected():
    with pytest.raises(CheckoutError):
        compute_checkout_totals(
            [(Decimal("200"), 1)],
            redeem_points=150,
            points_balance=500,
            settings=loyalty_settings(),
        )


def test_redemption_limited_by_balance():
    totals = compute_checkout_totals(
        [(Decimal("1000"), 1)],
        redeem_points=0,
        points_balance=120,
        settings=loyalty_settings(),
    )
    assert totals.max_redeemable_points == 120


def test_redemption_rejected_when_program_inactive():
    with pytest.raises(CheckoutError):
        compute_checkout_totals(
            [(Decimal("1000"), 1)],
            redeem_points=10,
            points_balance=100,
            settings=loyalty_settings(is_active=False),
        )


def test_gift_card_cannot_exceed_amount_due():
    with pytest.raises(CheckoutError):
        compute_checkout_totals(
            [(Decimal("100"), 1)],
            gift_cards=[("GC1", Decimal("150"), Decimal("500"))],
            settings=loyalty_settings(),
        )


def test_gift_card_cannot_exceed_its_balance():
    with pytest.raises(CheckoutError):
        compute_checkout_totals(
            [(Decimal("1000"), 1)],
            gift_cards=[("GC1", Decimal("150"), Decimal("100"))],
            settings=loyalty_settings(),
        )


def test_same_gift_card_twice_is_rejected():
    with pytest.raises(CheckoutError):
        compute_checkout_totals(
            [(Decimal("1000"), 1)],
            gift_cards=[("gc1", Decimal("10"), Decimal("100")), ("GC1", Decimal("10"), Decimal("100"))],
            settings=loyalty_settings(),
        )


def test_no_points_below_minimum_order():
    totals = compute_checkout_totals([(Decimal("50"), 1)], settings=loyalty_settings())
    assert totals.total == Decimal("50.00")
    assert totals.points_earned == 0


def test_points_earned_at_exactly_minimum_order():
    totals = compute_checkout_totals([(Decimal("100"), 1)], settings=loyalty_settings())
    assert totals.total == Decimal("100.00")
    assert totals.points_earned == 100


def test_redemption_below_minimum_earns_nothing():
    totals = compute_checkout_totals(
        [(Decimal("100"), 1)],
        redeem_points=1,
        points_balance=10,
        settings=loyalty_settings(),
    )
    assert totals.total == Decimal("99.00")
    assert totals.points_earned == 0


def test_points_follow_points_per_rupee():
    totals = compute_checkout_totals(
        [(Decimal("999"), 1)],
        settings=loyalty_settings(points_per_rupee=Decimal("0.1")),
    )
    assert totals.points_earned == 99


def test_manual_discount_out_of_range():
    with pytest.raises(CheckoutError):
        compute_checkout_totals([(Decimal("100"), 1)], manual_discount_percent=Decimal("120"))
