# app/services/sessions/customer_session_service.py

import logging
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.error_codes import ErrorCode
from app.core.config import DOWN_PAYMENT
from app.core.exceptions import invalid_state, not_found
from app.models.enums.session_status import HourAvail
from app.models.sessions.customer_session_models import CustomerSession
from app.schemas.billing.billing_schemas import DiscountApply, PaymentApply
from app.schemas.sessions.customer_session_schemas import (
    CustomerSessionCreate,
    CustomerSessionListData,
    CustomerSessionOut,
)
from app.services.billing.billing_service import (
    apply_changes,
    discount_changes,
    paid_toggle_changes,
    payment_changes,
    record_due,
    summarize_billing,
)
from app.services.billing.time_billing import (
    compute_cost_with_free_minutes,
    diff_minutes,
    format_minutes,
    is_open_time,
    scheduled_start,
    session_status,
)
from app.utils.decimal_utils import normalize_amount
from app.utils.time_utils import as_utc, utc_now

logger = logging.getLogger(__name__)


# =====================================================
# HELPERS
# =====================================================
def _billing_options(session: CustomerSession) -> dict:
    # Reservations were secured with a fixed down payment; walk-ins were not
    return {
        "deduct_down_payment": bool(session.reservation),
        "down_payment": DOWN_PAYMENT,
    }


def _start(session: CustomerSession) -> datetime:
    return scheduled_start(
        session.time_started,
        session.reservation_date if session.reservation else None,
    )


def base_cost(session: CustomerSession, now: datetime) -> Decimal:
    """Cost before discount: live for open time, stored once closed."""
    if is_open_time(session.hour_avail, session.time_ended):
        return compute_cost_with_free_minutes(_start(session), now)
    return normalize_amount(session.total_amount)


def _total_minutes(session: CustomerSession, now: datetime) -> int:
    if is_open_time(session.hour_avail, session.time_ended):
        return diff_minutes(_start(session), now)
    return int(session.total_time or 0)


def _map_session(session: CustomerSession, now: datetime) -> CustomerSessionOut:
    open_time = is_open_time(session.hour_avail, session.time_ended)
    start = _start(session)
    end = None if open_time else as_utc(session.time_ended)

    minutes = _total_minutes(session, now)

    return CustomerSessionOut(
        id=session.id,
        session_date=session.date,
        full_name=session.full_name,
        phone_number=session.phone_number,
        customer_type=session.customer_type,
        customer_field=session.customer_field,
        has_id=session.has_id,
        id_number=session.id_number,
        seat_number=session.seat_number,
        hour_avail=session.hour_avail,
        time_started=session.time_started,
        time_ended=session.time_ended,
        is_open_time=open_time,
        total_minutes=minutes,
        total_time_text=format_minutes(minutes),
        status=session_status(start, end, now),
        reservation=session.reservation,
        reservation_date=session.reservation_date,
        discount_reason=session.discount_reason,
        billing=summarize_billing(session, base_cost(session, now), **_billing_options(session)),
        created_at=session.created_at,
    )


async def _get_session(db: AsyncSession, session_id: int, reservation: bool) -> CustomerSession:
    session = await db.get(CustomerSession, session_id)
    if not session or bool(session.reservation) != reservation:
        raise not_found(
            "Reservation not found" if reservation else "Customer session not found",
            ErrorCode.SESSION_NOT_FOUND,
        )
    return session


async def _commit_and_map(db: AsyncSession, session: CustomerSession) -> CustomerSessionOut:
    await db.commit()
    await db.refresh(session)
    return _map_session(session, utc_now())


# =====================================================
# CREATE
# =====================================================
async def create_session(db: AsyncSession, payload: CustomerSessionCreate) -> CustomerSessionOut:
    now = utc_now()
    started = as_utc(payload.time_started) or now
    ended = as_utc(payload.time_ended)

    if payload.reservation:
        # stored times sit on the reserved day, keeping the entered clock time
        shifted = scheduled_start(started, payload.reservation_date)
        if ended is not None:
            ended += shifted - started
        started = shifted

    session = CustomerSession(
        date=payload.session_date or started.date(),
        full_name=payload.full_name.strip(),
        phone_number=payload.phone_number,
        customer_type=payload.customer_type,
        customer_field=payload.customer_field,
        has_id=payload.has_id,
        id_number=payload.id_number,
        seat_number=payload.seat_number,
        time_started=started,
        reservation=payload.reservation,
        reservation_date=payload.reservation_date if payload.reservation else None,
    )

    if ended is None:
        session.hour_avail = HourAvail.open.value
        session.time_ended = None
        session.total_time = 0
        session.total_amount = 0
    else:
        session.hour_avail = HourAvail.closed.value
        session.time_ended = ended
        session.total_time = diff_minutes(started, ended)
        session.total_amount = compute_cost_with_free_minutes(started, ended)

    db.add(session)
    await db.flush()

    logger.info(
        "Customer session created",
        extra={
            "session_id": session.id,
            "reservation": session.reservation,
            "hour_avail": session.hour_avail,
        },
    )
    return await _commit_and_map(db, session)


# =====================================================
# GET / LIST
# =====================================================
async def get_session(db: AsyncSession, session_id: int, *, reservation: bool = False) -> CustomerSessionOut:
    session = await _get_session(db, session_id, reservation)
    return _map_session(session, utc_now())


async def list_sessions(
    db: AsyncSession,
    *,
    reservation: bool = False,
    on_date: date | None = None,
    full_name: str | None = None,
    page: int = 1,
    page_size: int = 50,
) -> CustomerSessionListData:
    query = select(CustomerSession).where(CustomerSession.reservation.is_(reservation))

    if on_date:
        date_col = CustomerSession.reservation_date if reservation else CustomerSession.date
        query = query.where(date_col == on_date)
    if full_name:
        query = query.where(CustomerSession.full_name.ilike(f"%{full_name.strip()}%"))

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    result = await db.execute(
        query.order_by(CustomerSession.time_started.desc(), CustomerSession.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    now = utc_now()
    return CustomerSessionListData(
        total=total or 0,
        items=[_map_session(s, now) for s in result.scalars().all()],
    )


# =====================================================
# STOP OPEN TIME
# =====================================================
async def stop_session(db: AsyncSession, session_id: int, *, reservation: bool = False) -> CustomerSessionOut:
    session = await _get_session(db, session_id, reservation)

    if not is_open_time(session.hour_avail, session.time_ended):
        raise invalid_state("Session is not on open time", ErrorCode.SESSION_INVALID_STATE)

    now = utc_now()
    start = _start(session)
    if now < start:
        raise invalid_state(
            "Stop Time is only allowed once the reservation has started",
            ErrorCode.SESSION_INVALID_STATE,
        )

    session.time_ended = now
    session.total_time = diff_minutes(start, now)
    session.total_amount = compute_cost_with_free_minutes(start, now)
    session.hour_avail = HourAvail.closed.value

    logger.info(
        "Customer session stopped",
        extra={
            "session_id": session.id,
            "total_time": session.total_time,
            "total_amount": str(session.total_amount),
        },
    )
    return await _commit_and_map(db, session)


# =====================================================
# DISCOUNT / PAYMENT / PAID
# =====================================================
async def apply_session_discount(
    db: AsyncSession,
    session_id: int,
    payload: DiscountApply,
    *,
    reservation: bool = False,
) -> CustomerSessionOut:
    session = await _get_session(db, session_id, reservation)
    now = utc_now()

    changes = discount_changes(
        session,
        base_cost(session, now),
        payload,
        now,
        **_billing_options(session),
    )
    apply_changes(session, changes)
    return await _commit_and_map(db, session)


async def apply_session_payment(
    db: AsyncSession,
    session_id: int,
    payload: PaymentApply,
    *,
    reservation: bool = False,
) -> CustomerSessionOut:
    session = await _get_session(db, session_id, reservation)
    now = utc_now()

    due = record_due(session, base_cost(session, now), **_billing_options(session))
    apply_changes(session, payment_changes(due, payload, now))

    logger.info("Session payment saved", extra={"session_id": session.id, "is_paid": session.is_paid})
    return await _commit_and_map(db, session)


async def toggle_session_paid(db: AsyncSession, session_id: int, *, reservation: bool = False) -> CustomerSessionOut:
    session = await _get_session(db, session_id, reservation)

    apply_changes(session, paid_toggle_changes(session, utc_now()))

    logger.info("Session paid toggled", extra={"session_id": session.id, "is_paid": session.is_paid})
    return await _commit_and_map(db, session)


# =====================================================
# DELETE
# =====================================================
async def delete_session(db: AsyncSession, session_id: int, *, reservation: bool = False) -> None:
    session = await _get_session(db, session_id, reservation)
    await db.delete(session)
    await db.commit()
    logger.info("Customer session deleted", extra={"session_id": session_id})


async def delete_sessions_by_date(db: AsyncSession, on_date: date, *, reservation: bool = False) -> int:
    date_col = CustomerSession.reservation_date if reservation else CustomerSession.date

    result = await db.execute(
        delete(CustomerSession).where(
            CustomerSession.reservation.is_(reservation),
            date_col == on_date,
        )
    )
    await db.commit()

    deleted = result.rowcount or 0
    logger.info(
        "Customer sessions deleted by date",
        extra={"on_date": on_date.isoformat(), "reservation": reservation, "deleted": deleted},
    )
    return deleted
