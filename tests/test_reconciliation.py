from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.models.enums.discount_kind import DiscountKind
from app.models.enums.payment_channel import PaymentChannel
from app.services.billing.reconciliation import (
    PaymentSplit,
    apply_discount,
    build_payment_update,
    clean_discount_value,
    compute_due,
    derive_paid_status,
    discount_text,
    down_payment_change,
    settle,
    split_payment,
    split_payment_free,
    toggled_paid_update,
)

D = Decimal
NOW = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)


# =====================================================
# DISCOUNT
# =====================================================
@pytest.mark.parametrize("base", ["0", "1", "500", "999.99"])
def test_no_discount_keeps_base(base):
    result = apply_discount(base, DiscountKind.none, 40)
    assert result.discounted_cost == D(base).quantize(D("0.01"))
    assert result.discount_amount == D("0.00")


def test_percent_discount_scenario():
    result = apply_discount(500, DiscountKind.percent, 10)
    assert result.discounted_cost == D("450.00")
    assert result.discount_amount == D("50.00")


@pytest.mark.parametrize(
    "base,value",
    [(500, 0), (500, 100), (1234.4, 25), (80, 33), (19.98, 50), (300, 12.5)],
)
def test_percent_matches_remaining_share(base, value):
    result = apply_discount(base, DiscountKind.percent, value)
    expected = (D(str(base)) * (100 - D(str(value))) / 100).quantize(D("0.01"))
    assert result.discounted_cost == expected


def test_percent_value_is_clamped():
    assert apply_discount(200, "percent", 150).discounted_cost == D("0.00")
    assert apply_discount(200, "percent", -20).discounted_cost == D("200.00")


def test_fixed_discount_exceeding_base():
    result = apply_discount(500, DiscountKind.amount, 600)
    assert result.discount_amount == D("500.00")
    assert result.discounted_cost == D("0.00")


@pytest.mark.parametrize("base,value", [(0, 5), (10, 3.333), (100, 100.01), (75.5, 0)])
def test_fixed_discount_never_exceeds_base(base, value):
    result = apply_discount(base, DiscountKind.amount, value)
    assert result.discount_amount <= D(str(base))
    assert result.discounted_cost >= 0


def test_discount_is_deterministic():
    assert apply_discount(321.45, "percent", 17) == apply_discount(321.45, "percent", 17)


def test_unknown_kind_and_garbage_values():
    assert apply_discount("abc", "bogus", "x").discounted_cost == D("0.00")
    assert apply_discount("150", "weird", 10).discounted_cost == D("150.00")
    assert apply_discount(None, None, None).discount_amount == D("0.00")


def test_clean_discount_value():
    assert clean_discount_value("percent", 250) == D("100")
    assert clean_discount_value("amount", 250) == D("250.00")
    assert clean_discount_value("amount", -3) == D("0.00")


def test_discount_text():
    assert discount_text("percent", 10) == "10%"
    assert discount_text("percent", "12.5") == "12.5%"
    assert discount_text("amount", 20).endswith("20.00")
    assert discount_text("none", 5) == "—"


# =====================================================
# DUE / DOWN PAYMENT
# =====================================================
def test_due_without_down_payment():
    assert compute_due(120, down_payment=50) == D("120.00")


def test_due_with_down_payment():
    assert compute_due(120, down_payment=50, deduct_down_payment=True) == D("70.00")
    assert compute_due(30, down_payment=50, deduct_down_payment=True) == D("0.00")


def test_down_payment_change():
    assert down_payment_change(30, down_payment=50, deduct_down_payment=True) == D("20.00")
    assert down_payment_change(80, down_payment=50, deduct_down_payment=True) == D("0.00")
    assert down_payment_change(30, down_payment=50) == D("0.00")


# =====================================================
# SPLIT
# =====================================================
def test_clamped_split_scenario():
    split = split_payment(300, 350)
    assert split == PaymentSplit(D("300.00"), D("0.00"))


@pytest.mark.parametrize("due", [0, -5, "0.00", None])
def test_clamped_split_nothing_owed(due):
    split = split_payment(due, 100)
    assert split.gcash == 0 and split.cash == 0


@pytest.mark.parametrize(
    "due,gcash",
    [(300, 0), (300, 120.55), (300, 300), (300, 1000), (0.01, 5), (99.99, "abc"), (47.5, -10)],
)
def test_clamped_split_reconciles(due, gcash):
    split = split_payment(due, gcash)
    assert split.gcash + split.cash == D(str(due)).quantize(D("0.01"))
    assert split.gcash >= 0 and split.cash >= 0


def test_cash_priority_mirrors_split():
    split = split_payment(300, 120, priority=PaymentChannel.cash)
    assert split.cash == D("120.00")
    assert split.gcash == D("180.00")


def test_free_split_keeps_inputs():
    split = split_payment_free("200", -5)
    assert split.gcash == D("200.00")
    assert split.cash == D("0.00")


def test_free_split_scenario_gives_change():
    s = settle(300, split_payment_free(200, 200))
    assert s.total_collected == D("400.00")
    assert s.change == D("100.00")
    assert s.remaining == D("0.00")
    assert s.is_paid is True


def test_free_split_shortfall():
    s = settle(300, split_payment_free(100, 50))
    assert s.remaining == D("150.00")
    assert s.change == D("0.00")
    assert s.is_paid is False


# =====================================================
# PAID STATUS
# =====================================================
@pytest.mark.parametrize("collected", [0, 5, 1000, None, "junk"])
def test_paid_when_nothing_due(collected):
    assert derive_paid_status(0, collected) is True


def test_paid_threshold():
    assert derive_paid_status(100, D("99.99")) is False
    assert derive_paid_status(100, 100) is True
    assert derive_paid_status(100, 150) is True


def test_payment_update_writes_amounts_and_flag_together():
    update = build_payment_update(PaymentSplit(D("10.00"), D("5.00")), True, NOW)
    assert update == {
        "gcash_amount": D("10.00"),
        "cash_amount": D("5.00"),
        "is_paid": True,
        "paid_at": NOW,
    }
    assert build_payment_update(PaymentSplit(D("0"), D("0")), False, NOW)["paid_at"] is None


@pytest.mark.parametrize("current,expected", [(True, False), (False, True), ("paid", False), (None, True), (0, True)])
def test_manual_toggle_flips(current, expected):
    update = toggled_paid_update(current, NOW)
    assert update["is_paid"] is expected
    assert update["paid_at"] == (NOW if expected else None)
