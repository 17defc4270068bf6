# app/schemas/billing/billing_schemas.py

from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from app.models.enums.discount_kind import DiscountKind
from app.models.enums.payment_channel import PaymentChannel


# =========================
# INPUTS
# =========================
class DiscountApply(BaseModel):
    discount_kind: DiscountKind = DiscountKind.none
    # negative / oversized values are clamped, not rejected
    discount_value: Decimal = Decimal("0")
    discount_reason: Optional[str] = None
    # GCash the customer intends to pay; defaults to what is already recorded
    gcash_amount: Optional[Decimal] = None


class PaymentApply(BaseModel):
    gcash_amount: Decimal = Decimal("0")
    cash_amount: Decimal = Decimal("0")
    # channel whose amount is kept when the split is clamped to the due amount
    priority: PaymentChannel = PaymentChannel.gcash


# =========================
# OUT
# =========================
class BillingOut(BaseModel):
    base_cost: Decimal
    discount_kind: DiscountKind
    discount_value: Decimal
    discount_text: str
    discount_amount: Decimal
    discounted_cost: Decimal
    down_payment: Decimal
    due: Decimal

    gcash_amount: Decimal
    cash_amount: Decimal
    total_paid: Decimal
    remaining: Decimal
    change: Decimal

    is_paid: bool
    paid_at: Optional[datetime]

    display_label: Literal["Total Balance", "Total Change"]
    display_amount: Decimal
