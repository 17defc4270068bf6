# app/services/promos/promo_booking_service.py

import logging
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.error_codes import ErrorCode
from app.core.exceptions import not_found
from app.models.promos.promo_booking_models import PromoBooking
from app.schemas.billing.billing_schemas import DiscountApply, PaymentApply
from app.schemas.promos.promo_booking_schemas import (
    PromoBookingCreate,
    PromoBookingListData,
    PromoBookingOut,
)
from app.services.billing.billing_service import (
    apply_changes,
    discount_changes,
    paid_toggle_changes,
    payment_changes,
    record_due,
    summarize_billing,
)
from app.services.billing.time_billing import session_status
from app.utils.decimal_utils import normalize_amount
from app.utils.time_utils import as_utc, utc_now

logger = logging.getLogger(__name__)


# =====================================================
# MAPPER
# =====================================================
def area_label(area: str) -> str:
    return "Conference Room" if area == "conference_room" else "Common Area"


def seat_label(booking: PromoBooking) -> str:
    if booking.area == "conference_room":
        return "CONFERENCE ROOM"
    return booking.seat_number or "N/A"


def _map_booking(booking: PromoBooking, now: datetime) -> PromoBookingOut:
    return PromoBookingOut(
        id=booking.id,
        full_name=booking.full_name,
        phone_number=booking.phone_number,
        area=booking.area,
        area_label=area_label(booking.area),
        seat_label=seat_label(booking),
        package_title=booking.package_title,
        option_name=booking.option_name,
        start_at=booking.start_at,
        end_at=booking.end_at,
        status=session_status(booking.start_at, booking.end_at, now),
        discount_reason=booking.discount_reason,
        billing=summarize_billing(booking, booking.price),
        created_at=booking.created_at,
    )


async def _get_booking(db: AsyncSession, booking_id: int) -> PromoBooking:
    booking = await db.get(PromoBooking, booking_id)
    if not booking:
        raise not_found("Promo booking not found", ErrorCode.PROMO_BOOKING_NOT_FOUND)
    return booking


async def _commit_and_map(db: AsyncSession, booking: PromoBooking) -> PromoBookingOut:
    await db.commit()
    await db.refresh(booking)
    return _map_booking(booking, utc_now())


# =====================================================
# CREATE / GET / LIST
# =====================================================
async def create_promo_booking(db: AsyncSession, payload: PromoBookingCreate) -> PromoBookingOut:
    booking = PromoBooking(
        full_name=payload.full_name.strip(),
        phone_number=payload.phone_number,
        area=payload.area,
        seat_number=None if payload.area == "conference_room" else payload.seat_number,
        package_title=payload.package_title,
        option_name=payload.option_name,
        start_at=as_utc(payload.start_at),
        end_at=as_utc(payload.end_at),
        price=normalize_amount(payload.price),
    )
    db.add(booking)
    await db.flush()

    logger.info("Promo booking created", extra={"booking_id": booking.id, "price": str(booking.price)})
    return await _commit_and_map(db, booking)


async def get_promo_booking(db: AsyncSession, booking_id: int) -> PromoBookingOut:
    booking = await _get_booking(db, booking_id)
    return _map_booking(booking, utc_now())


async def list_promo_bookings(
    db: AsyncSession,
    *,
    created_on: date | None = None,
    full_name: str | None = None,
    page: int = 1,
    page_size: int = 50,
) -> PromoBookingListData:
    query = select(PromoBooking)

    if created_on:
        day_start = datetime.combine(created_on, time.min, tzinfo=timezone.utc)
        query = query.where(
            PromoBooking.created_at >= day_start,
            PromoBooking.created_at < day_start + timedelta(days=1),
        )
    if full_name:
        query = query.where(PromoBooking.full_name.ilike(f"%{full_name.strip()}%"))

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    result = await db.execute(
        query.order_by(PromoBooking.created_at.desc(), PromoBooking.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    now = utc_now()
    return PromoBookingListData(
        total=total or 0,
        items=[_map_booking(b, now) for b in result.scalars().all()],
    )


# =====================================================
# DISCOUNT / PAYMENT / PAID
# =====================================================
async def apply_promo_discount(db: AsyncSession, booking_id: int, payload: DiscountApply) -> PromoBookingOut:
    booking = await _get_booking(db, booking_id)

    # recorded payments stay as entered; overpayment remains change
    apply_changes(booking, discount_changes(booking, booking.price, payload, utc_now(), free=True))
    return await _commit_and_map(db, booking)


async def apply_promo_payment(db: AsyncSession, booking_id: int, payload: PaymentApply) -> PromoBookingOut:
    booking = await _get_booking(db, booking_id)

    due = record_due(booking, booking.price)
    # walk-up package payments may overpay; the excess is shown as change
    apply_changes(booking, payment_changes(due, payload, utc_now(), free=True))

    logger.info("Promo payment saved", extra={"booking_id": booking.id, "is_paid": booking.is_paid})
    return await _commit_and_map(db, booking)


async def toggle_promo_paid(db: AsyncSession, booking_id: int) -> PromoBookingOut:
    booking = await _get_booking(db, booking_id)

    apply_changes(booking, paid_toggle_changes(booking, utc_now()))

    logger.info("Promo paid toggled", extra={"booking_id": booking.id, "is_paid": booking.is_paid})
    return await _commit_and_map(db, booking)
