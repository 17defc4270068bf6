# app/services/billing/time_billing.py
from datetime import date, datetime
from decimal import Decimal

from app.core.config import FREE_MINUTES, HOURLY_RATE
from app.models.enums.session_status import HourAvail, SessionStatus
from app.utils.decimal_utils import round2
from app.utils.time_utils import as_utc

SIXTY = Decimal("60")
# Legacy rows marked open time with a far-future end instead of hour_avail
OPEN_TIME_SENTINEL_YEAR = 2999


def diff_minutes(start: datetime | None, end: datetime | None) -> int:
    start, end = as_utc(start), as_utc(end)
    if start is None or end is None or end <= start:
        return 0
    return int((end - start).total_seconds() // 60)


def compute_cost_with_free_minutes(
    start: datetime | None,
    end: datetime | None,
    *,
    hourly_rate: Decimal = HOURLY_RATE,
    free_minutes: int = FREE_MINUTES,
) -> Decimal:
    charge_minutes = max(0, diff_minutes(start, end) - free_minutes)
    return round2(Decimal(charge_minutes) * hourly_rate / SIXTY)


def is_open_time(hour_avail: str | None, time_ended: datetime | None) -> bool:
    if (hour_avail or "").strip().upper() == HourAvail.open.value:
        return True
    return time_ended is not None and time_ended.year >= OPEN_TIME_SENTINEL_YEAR


def scheduled_start(time_started: datetime, reservation_date: date | None) -> datetime:
    """Reservations keep the clock time of ``time_started`` on the reserved day."""
    start = as_utc(time_started)
    if reservation_date is None:
        return start
    return start.replace(
        year=reservation_date.year,
        month=reservation_date.month,
        day=reservation_date.day,
    )


def session_status(start: datetime, end: datetime | None, now: datetime) -> SessionStatus:
    start, end, now = as_utc(start), as_utc(end), as_utc(now)
    if now < start:
        return SessionStatus.upcoming
    if end is None or now <= end:
        return SessionStatus.ongoing
    return SessionStatus.finished


def format_minutes(minutes: int) -> str:
    if minutes <= 0:
        return "0 min"
    hrs, mins = divmod(minutes, 60)
    if hrs == 0:
        return f"{mins} min"
    if mins == 0:
        return f"{hrs} hour{'s' if hrs > 1 else ''}"
    return f"{hrs} hr {mins} min"

