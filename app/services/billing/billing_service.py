# app/services/billing/billing_service.py
"""Glue between persisted rows and the pure reconciliation functions.

Every screen service builds its column changes here so that discount,
payment amounts and the paid flag always travel in the same update.
"""
import logging
from datetime import datetime
from decimal import Decimal

from app.models.enums.discount_kind import DiscountKind
from app.models.enums.payment_channel import PaymentChannel
from app.schemas.billing.billing_schemas import BillingOut, DiscountApply, PaymentApply
from app.services.billing.reconciliation import (
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
from app.utils.decimal_utils import ZERO, normalize_amount, round2, to_bool

logger = logging.getLogger(__name__)


# =====================================================
# READ SIDE
# =====================================================
def stored_split(record):
    return split_payment_free(record.gcash_amount, record.cash_amount)


def record_due(record, base_cost, *, deduct_down_payment: bool = False, down_payment: Decimal = ZERO) -> Decimal:
    kind = getattr(record, "discount_kind", DiscountKind.none)
    value = getattr(record, "discount_value", ZERO)
    discounted = apply_discount(base_cost, kind, value).discounted_cost
    return compute_due(discounted, down_payment=down_payment, deduct_down_payment=deduct_down_payment)


def summarize_billing(
    record,
    base_cost,
    *,
    deduct_down_payment: bool = False,
    down_payment: Decimal = ZERO,
) -> BillingOut:
    """Project a stored row into the numbers every screen and receipt shows.

    Records without discount columns (orders, consignment) bill at base cost.
    ``is_paid`` is the stored flag, so a manual toggle is reflected until the
    next discount or payment save recomputes it.
    """
    kind = DiscountKind.parse(getattr(record, "discount_kind", None))
    value = normalize_amount(getattr(record, "discount_value", None))

    base = normalize_amount(base_cost)
    discount = apply_discount(base, kind, value)
    due = compute_due(
        discount.discounted_cost,
        down_payment=down_payment,
        deduct_down_payment=deduct_down_payment,
    )
    dp_change = down_payment_change(
        discount.discounted_cost,
        down_payment=down_payment,
        deduct_down_payment=deduct_down_payment,
    )

    split = stored_split(record)
    settlement = settle(due, split)

    if due > 0:
        display_label, display_amount = "Total Balance", due
    else:
        display_label, display_amount = "Total Change", dp_change

    return BillingOut(
        base_cost=base,
        discount_kind=kind,
        discount_value=value,
        discount_text=discount_text(kind, value),
        discount_amount=discount.discount_amount,
        discounted_cost=discount.discounted_cost,
        down_payment=normalize_amount(down_payment) if deduct_down_payment else ZERO,
        due=due,
        gcash_amount=split.gcash,
        cash_amount=split.cash,
        total_paid=settlement.total_collected,
        remaining=settlement.remaining,
        change=round2(settlement.change + dp_change),
        is_paid=to_bool(record.is_paid),
        paid_at=record.paid_at,
        display_label=display_label,
        display_amount=display_amount,
    )


# =====================================================
# WRITE SIDE
# =====================================================
def discount_changes(
    record,
    base_cost,
    payload: DiscountApply,
    now: datetime,
    *,
    deduct_down_payment: bool = False,
    down_payment: Decimal = ZERO,
    free: bool = False,
) -> dict:
    """Columns to write when staff save a discount.

    Recorded payments are re-fitted to the new due amount (GCash kept, cash
    absorbs the rest). A record with nothing collected stays at zero so the
    discount alone never marks it paid. With ``free`` the recorded amounts
    are kept as they are and only the paid flag follows the new due.
    """
    kind = DiscountKind.parse(payload.discount_kind)
    value = clean_discount_value(kind, payload.discount_value)

    discounted = apply_discount(base_cost, kind, value).discounted_cost
    due = compute_due(discounted, down_payment=down_payment, deduct_down_payment=deduct_down_payment)

    current = stored_split(record)
    if free:
        gcash = current.gcash if payload.gcash_amount is None else payload.gcash_amount
        split = split_payment_free(gcash, current.cash)
    elif payload.gcash_amount is not None:
        split = split_payment(due, payload.gcash_amount)
    elif current.total > 0:
        split = split_payment(due, current.gcash)
    else:
        split = current

    is_paid = derive_paid_status(due, split.total)

    changes = {
        "discount_kind": kind.value,
        "discount_value": value,
        "discount_reason": (payload.discount_reason or "").strip() or None,
        **build_payment_update(split, is_paid, now),
    }
    logger.info(
        "Discount computed",
        extra={
            "record_id": record.id,
            "discount_kind": kind.value,
            "discount_value": str(value),
            "due": str(due),
            "free": free,
            "is_paid": is_paid,
        },
    )
    return changes


def payment_changes(due, payload: PaymentApply, now: datetime, *, free: bool = False) -> dict:
    """Columns to write when staff save a payment.

    ``free`` keeps both channel amounts as typed (retail sales may give
    change); otherwise the split is clamped so it adds up to ``due``.
    """
    if free:
        split = split_payment_free(payload.gcash_amount, payload.cash_amount)
    else:
        priority = PaymentChannel(payload.priority)
        preferred = payload.cash_amount if priority == PaymentChannel.cash else payload.gcash_amount
        split = split_payment(due, preferred, priority=priority)

    settlement = settle(due, split)
    logger.info(
        "Payment computed",
        extra={
            "due": str(settlement.due),
            "gcash": str(split.gcash),
            "cash": str(split.cash),
            "free": free,
            "is_paid": settlement.is_paid,
        },
    )
    return build_payment_update(split, settlement.is_paid, now)


def paid_toggle_changes(record, now: datetime) -> dict:
    return toggled_paid_update(record.is_paid, now)


def apply_changes(record, changes: dict) -> None:
    for column, value in changes.items():
        setattr(record, column, value)
