# app/services/orders/consignment_service.py

import logging

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.error_codes import ErrorCode
from app.core.exceptions import invalid_state, not_found
from app.models.orders.consignment_models import ConsignmentItem, ConsignmentSale
from app.schemas.billing.billing_schemas import PaymentApply
from app.schemas.orders.consignment_schemas import (
    ConsignmentItemCreate,
    ConsignmentItemOut,
    ConsignmentSaleCreate,
    ConsignmentSaleListData,
    ConsignmentSaleOut,
    ConsignmentTotalsOut,
    ConsignmentVoid,
)
from app.services.billing.billing_service import (
    apply_changes,
    paid_toggle_changes,
    payment_changes,
    summarize_billing,
)
from app.utils.decimal_utils import ZERO, normalize_amount, round2, to_bool
from app.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


# =====================================================
# MAPPER
# =====================================================
def _map_sale(sale: ConsignmentSale) -> ConsignmentSaleOut:
    item = sale.consignment
    return ConsignmentSaleOut(
        id=sale.id,
        consignment_id=sale.consignment_id,
        item_name=item.item_name if item else "-",
        category=item.category if item else None,
        size=item.size if item else None,
        full_name=sale.full_name,
        seat_number=sale.seat_number,
        quantity=sale.quantity,
        price=sale.price,
        total=sale.total,
        billing=summarize_billing(sale, sale.total),
        voided=to_bool(sale.voided),
        voided_at=sale.voided_at,
        void_note=sale.void_note,
        created_at=sale.created_at,
    )


async def _get_item(db: AsyncSession, item_id: int) -> ConsignmentItem:
    item = await db.get(ConsignmentItem, item_id)
    if not item:
        raise not_found("Consignment item not found", ErrorCode.CONSIGNMENT_ITEM_NOT_FOUND)
    return item


async def _get_sale(db: AsyncSession, sale_id: int) -> ConsignmentSale:
    sale = await db.get(ConsignmentSale, sale_id)
    if not sale:
        raise not_found("Consignment record not found", ErrorCode.CONSIGNMENT_SALE_NOT_FOUND)
    return sale


def _assert_not_voided(sale: ConsignmentSale, action: str) -> None:
    if to_bool(sale.voided):
        raise invalid_state(
            f"Cannot {action} for VOIDED record",
            ErrorCode.CONSIGNMENT_SALE_VOIDED,
            sale_id=sale.id,
        )


async def _commit_and_map(db: AsyncSession, sale: ConsignmentSale) -> ConsignmentSaleOut:
    await db.commit()
    await db.refresh(sale)
    return _map_sale(sale)


# =====================================================
# CATALOG
# =====================================================
async def create_consignment_item(db: AsyncSession, payload: ConsignmentItemCreate) -> ConsignmentItemOut:
    item = ConsignmentItem(
        full_name=payload.full_name.strip(),
        item_name=payload.item_name.strip(),
        category=payload.category,
        size=payload.size,
        image_url=payload.image_url,
        price=normalize_amount(payload.price),
        stock=payload.stock,
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)

    logger.info("Consignment item created", extra={"item_id": item.id, "stock": item.stock})
    return ConsignmentItemOut.model_validate(item)


async def list_consignment_items(db: AsyncSession) -> list[ConsignmentItemOut]:
    result = await db.execute(select(ConsignmentItem).order_by(ConsignmentItem.item_name))
    return [ConsignmentItemOut.model_validate(i) for i in result.scalars().all()]


# =====================================================
# SALES
# =====================================================
async def create_consignment_sale(db: AsyncSession, payload: ConsignmentSaleCreate) -> ConsignmentSaleOut:
    result = await db.execute(
        select(ConsignmentItem)
        .where(ConsignmentItem.id == payload.consignment_id)
        .with_for_update()
    )
    item = result.scalar_one_or_none()
    if not item:
        raise not_found("Consignment item not found", ErrorCode.CONSIGNMENT_ITEM_NOT_FOUND)

    if item.stock < payload.quantity:
        raise invalid_state(
            "Not enough stock",
            ErrorCode.INSUFFICIENT_STOCK,
            available=item.stock,
            requested=payload.quantity,
        )

    price = normalize_amount(item.price)
    sale = ConsignmentSale(
        consignment_id=item.id,
        full_name=payload.full_name.strip(),
        seat_number=payload.seat_number,
        quantity=payload.quantity,
        price=price,
        total=round2(price * payload.quantity),
    )
    item.stock -= payload.quantity

    db.add(sale)
    await db.flush()

    logger.info(
        "Consignment sold",
        extra={"sale_id": sale.id, "item_id": item.id, "quantity": sale.quantity, "stock_left": item.stock},
    )
    return await _commit_and_map(db, sale)


async def get_consignment_sale(db: AsyncSession, sale_id: int) -> ConsignmentSaleOut:
    return _map_sale(await _get_sale(db, sale_id))


def _sale_query(search: str | None):
    query = select(ConsignmentSale).join(ConsignmentItem, ConsignmentSale.consignment_id == ConsignmentItem.id)
    if search:
        like = f"%{search.strip()}%"
        query = query.where(
            or_(
                ConsignmentSale.full_name.ilike(like),
                ConsignmentSale.seat_number.ilike(like),
                ConsignmentItem.item_name.ilike(like),
                ConsignmentItem.category.ilike(like),
            )
        )
    return query


async def list_consignment_sales(
    db: AsyncSession,
    *,
    search: str | None = None,
    page: int = 1,
    page_size: int = 50,
) -> ConsignmentSaleListData:
    query = _sale_query(search)

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    result = await db.execute(
        query.order_by(ConsignmentSale.created_at.desc(), ConsignmentSale.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return ConsignmentSaleListData(
        total=total or 0,
        items=[_map_sale(s) for s in result.unique().scalars().all()],
    )


async def consignment_totals(db: AsyncSession, *, search: str | None = None) -> ConsignmentTotalsOut:
    """Sums over non-voided sales."""
    result = await db.execute(_sale_query(search).where(ConsignmentSale.voided.is_(False)))

    total_amount = total_gcash = total_cash = ZERO
    for sale in result.unique().scalars().all():
        total_amount += normalize_amount(sale.total)
        total_gcash += normalize_amount(sale.gcash_amount)
        total_cash += normalize_amount(sale.cash_amount)

    return ConsignmentTotalsOut(
        total_amount=round2(total_amount),
        total_gcash=round2(total_gcash),
        total_cash=round2(total_cash),
    )


# =====================================================
# PAYMENT / PAID / VOID
# =====================================================
async def apply_consignment_payment(db: AsyncSession, sale_id: int, payload: PaymentApply) -> ConsignmentSaleOut:
    sale = await _get_sale(db, sale_id)
    _assert_not_voided(sale, "set payment")

    # retail sale: keep what was handed over, overpayment becomes change
    apply_changes(sale, payment_changes(sale.total, payload, utc_now(), free=True))

    logger.info("Consignment payment saved", extra={"sale_id": sale.id, "is_paid": sale.is_paid})
    return await _commit_and_map(db, sale)


async def toggle_consignment_paid(db: AsyncSession, sale_id: int) -> ConsignmentSaleOut:
    sale = await _get_sale(db, sale_id)
    _assert_not_voided(sale, "change paid status")

    apply_changes(sale, paid_toggle_changes(sale, utc_now()))

    logger.info("Consignment paid toggled", extra={"sale_id": sale.id, "is_paid": sale.is_paid})
    return await _commit_and_map(db, sale)


async def void_consignment_sale(db: AsyncSession, sale_id: int, payload: ConsignmentVoid) -> ConsignmentSaleOut:
    reason = (payload.reason or "").strip()
    if not reason:
        raise invalid_state("Void reason is required", ErrorCode.VOID_REASON_REQUIRED)

    sale = await _get_sale(db, sale_id)
    _assert_not_voided(sale, "void")

    item = await _get_item(db, sale.consignment_id)
    item.stock += sale.quantity

    sale.voided = True
    sale.voided_at = utc_now()
    sale.void_note = reason

    logger.info(
        "Consignment voided",
        extra={"sale_id": sale.id, "item_id": item.id, "returned": sale.quantity},
    )
    return await _commit_and_map(db, sale)
