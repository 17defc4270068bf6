# app/services/orders/add_on_order_service.py

import logging
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.error_codes import ErrorCode
from app.core.exceptions import invalid_state, not_found
from app.models.orders.add_on_models import AddOnOrder, AddOnOrderItem
from app.schemas.billing.billing_schemas import PaymentApply
from app.schemas.orders.add_on_schemas import (
    AddOnItemOut,
    AddOnOrderCreate,
    AddOnOrderListData,
    AddOnOrderOut,
)
from app.services.billing.billing_service import (
    apply_changes,
    paid_toggle_changes,
    payment_changes,
    summarize_billing,
)
from app.utils.decimal_utils import ZERO, normalize_amount, round2
from app.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


def _map_order(order: AddOnOrder) -> AddOnOrderOut:
    return AddOnOrderOut(
        id=order.id,
        full_name=order.full_name,
        seat_number=order.seat_number,
        items=[AddOnItemOut.model_validate(i) for i in order.items],
        billing=summarize_billing(order, order.grand_total),
        created_at=order.created_at,
    )


async def _get_order(db: AsyncSession, order_id: int) -> AddOnOrder:
    order = await db.get(AddOnOrder, order_id)
    if not order:
        raise not_found("Add-on order not found", ErrorCode.ADD_ON_ORDER_NOT_FOUND)
    return order


async def _commit_and_map(db: AsyncSession, order: AddOnOrder) -> AddOnOrderOut:
    await db.commit()
    await db.refresh(order)
    return _map_order(order)


# =====================================================
# CREATE
# =====================================================
async def create_add_on_order(db: AsyncSession, payload: AddOnOrderCreate) -> AddOnOrderOut:
    if not payload.items:
        raise invalid_state("Order must contain at least one item", ErrorCode.ADD_ON_ORDER_EMPTY_ITEMS)

    items = []
    grand_total = ZERO
    for line in payload.items:
        price = normalize_amount(line.price)
        total = round2(price * line.quantity)
        grand_total += total
        items.append(
            AddOnOrderItem(
                item_name=line.item_name.strip(),
                category=line.category,
                quantity=line.quantity,
                price=price,
                total=total,
            )
        )

    order = AddOnOrder(
        full_name=payload.full_name.strip(),
        seat_number=payload.seat_number,
        grand_total=round2(grand_total),
        items=items,
    )
    db.add(order)
    await db.flush()

    logger.info(
        "Add-on order created",
        extra={"order_id": order.id, "lines": len(items), "grand_total": str(order.grand_total)},
    )
    return await _commit_and_map(db, order)


# =====================================================
# GET / LIST
# =====================================================
async def get_add_on_order(db: AsyncSession, order_id: int) -> AddOnOrderOut:
    return _map_order(await _get_order(db, order_id))


async def list_add_on_orders(
    db: AsyncSession,
    *,
    created_on: date | None = None,
    page: int = 1,
    page_size: int = 50,
) -> AddOnOrderListData:
    query = select(AddOnOrder)

    if created_on:
        day_start = datetime.combine(created_on, time.min, tzinfo=timezone.utc)
        query = query.where(
            AddOnOrder.created_at >= day_start,
            AddOnOrder.created_at < day_start + timedelta(days=1),
        )

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    result = await db.execute(
        query.order_by(AddOnOrder.created_at.desc(), AddOnOrder.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return AddOnOrderListData(
        total=total or 0,
        items=[_map_order(o) for o in result.scalars().all()],
    )


# =====================================================
# PAYMENT / PAID
# =====================================================
async def apply_add_on_payment(db: AsyncSession, order_id: int, payload: PaymentApply) -> AddOnOrderOut:
    order = await _get_order(db, order_id)

    apply_changes(order, payment_changes(order.grand_total, payload, utc_now()))

    logger.info("Add-on payment saved", extra={"order_id": order.id, "is_paid": order.is_paid})
    return await _commit_and_map(db, order)


async def toggle_add_on_paid(db: AsyncSession, order_id: int) -> AddOnOrderOut:
    order = await _get_order(db, order_id)

    apply_changes(order, paid_toggle_changes(order, utc_now()))

    logger.info("Add-on paid toggled", extra={"order_id": order.id, "is_paid": order.is_paid})
    return await _commit_and_map(db, order)
