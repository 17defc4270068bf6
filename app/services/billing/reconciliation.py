# app/services/billing/reconciliation.py
"""Discount and payment reconciliation shared by every billing screen.

All functions are pure: they never touch the database, never raise on bad
input (weak values are coerced to zero, rule violations are clamped) and
return fresh values on every call.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.models.enums.discount_kind import DiscountKind
from app.models.enums.payment_channel import PaymentChannel
from app.utils.decimal_utils import ZERO, clamp, money_text, normalize_amount, round2, to_bool

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DiscountResult:
    discounted_cost: Decimal
    discount_amount: Decimal


@dataclass(frozen=True)
class PaymentSplit:
    gcash: Decimal
    cash: Decimal

    @property
    def total(self) -> Decimal:
        return round2(self.gcash + self.cash)


@dataclass(frozen=True)
class Settlement:
    due: Decimal
    total_collected: Decimal
    change: Decimal
    remaining: Decimal
    is_paid: bool


# =====================================================
# DISCOUNT
# =====================================================
def clean_discount_value(kind, value) -> Decimal:
    """Value as it should be stored: non-negative, percent capped at 100."""
    cleaned = normalize_amount(value)
    if DiscountKind.parse(kind) == DiscountKind.percent:
        return clamp(cleaned, ZERO, HUNDRED)
    return cleaned


def apply_discount(base_cost, kind, value) -> DiscountResult:
    cost = normalize_amount(base_cost)
    kind = DiscountKind.parse(kind)
    v = normalize_amount(value)

    if kind == DiscountKind.percent:
        pct = clamp(v, ZERO, HUNDRED)
        disc = round2(cost * pct / HUNDRED)
        return DiscountResult(round2(max(ZERO, cost - disc)), disc)

    if kind == DiscountKind.amount:
        disc = round2(min(cost, v))
        return DiscountResult(round2(max(ZERO, cost - disc)), disc)

    return DiscountResult(cost, ZERO)


def discount_text(kind, value) -> str:
    kind = DiscountKind.parse(kind)
    v = normalize_amount(value)
    if kind == DiscountKind.percent and v > 0:
        return f"{v.normalize():f}%"
    if kind == DiscountKind.amount and v > 0:
        return money_text(v)
    return "—"


# =====================================================
# DUE AMOUNT
# =====================================================
def compute_due(discounted_cost, *, down_payment=ZERO, deduct_down_payment: bool = False) -> Decimal:
    cost = normalize_amount(discounted_cost)
    if not deduct_down_payment:
        return cost
    return round2(max(ZERO, cost - normalize_amount(down_payment)))


def down_payment_change(discounted_cost, *, down_payment=ZERO, deduct_down_payment: bool = False) -> Decimal:
    """Part of the down payment left over once the cost is covered."""
    if not deduct_down_payment:
        return ZERO
    return round2(max(ZERO, normalize_amount(down_payment) - normalize_amount(discounted_cost)))


# =====================================================
# PAYMENT SPLIT
# =====================================================
def split_payment(due, preferred, *, priority: PaymentChannel = PaymentChannel.gcash) -> PaymentSplit:
    """Clamp the preferred channel to ``due`` and let the other absorb the rest.

    With GCash priority (the default) the GCash amount is kept and cash makes
    up the remainder; with cash priority the roles are swapped. The two
    channels always add up to exactly ``due``, or are both zero when nothing
    is owed.
    """
    d = normalize_amount(due)
    if d <= 0:
        return PaymentSplit(ZERO, ZERO)

    kept = round2(min(d, normalize_amount(preferred)))
    rest = round2(max(ZERO, d - kept))

    if PaymentChannel(priority) == PaymentChannel.cash:
        return PaymentSplit(gcash=rest, cash=kept)
    return PaymentSplit(gcash=kept, cash=rest)


def split_payment_free(gcash, cash) -> PaymentSplit:
    return PaymentSplit(normalize_amount(gcash), normalize_amount(cash))


# =====================================================
# PAID STATUS
# =====================================================
def derive_paid_status(due, total_collected) -> bool:
    d = normalize_amount(due)
    if d <= 0:
        return True
    return normalize_amount(total_collected) >= d


def settle(due, split: PaymentSplit) -> Settlement:
    d = normalize_amount(due)
    total = split.total
    return Settlement(
        due=d,
        total_collected=total,
        change=round2(max(ZERO, total - d)),
        remaining=round2(max(ZERO, d - total)),
        is_paid=derive_paid_status(d, total),
    )


def build_payment_update(split: PaymentSplit, is_paid: bool, now: datetime) -> dict:
    """Columns that must always be written together."""
    return {
        "gcash_amount": split.gcash,
        "cash_amount": split.cash,
        "is_paid": is_paid,
        "paid_at": now if is_paid else None,
    }


def toggled_paid_update(current, now: datetime) -> dict:
    next_paid = not to_bool(current)
    return {
        "is_paid": next_paid,
        "paid_at": now if next_paid else None,
    }
