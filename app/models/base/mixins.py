from sqlalchemy import Column, Boolean, DateTime, Numeric, String
from sqlalchemy.sql import func

from app.models.enums.discount_kind import DiscountKind


class TimestampMixin:
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        onupdate=func.now()
    )


class DiscountMixin:
    discount_kind = Column(String(20), nullable=False, default=DiscountKind.none.value)
    discount_value = Column(Numeric(10, 2), nullable=False, default=0)
    discount_reason = Column(String(255), nullable=True)


class PaymentMixin:
    """GCash/cash split plus the paid flag derived from it.

    ``gcash_amount``, ``cash_amount``, ``is_paid`` and ``paid_at`` are only
    ever written together.
    """

    gcash_amount = Column(Numeric(10, 2), nullable=False, default=0)
    cash_amount = Column(Numeric(10, 2), nullable=False, default=0)
    is_paid = Column(Boolean, nullable=False, default=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)
