from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.models.enums.session_status import SessionStatus
from app.services.billing.time_billing import (
    compute_cost_with_free_minutes,
    diff_minutes,
    format_minutes,
    is_open_time,
    scheduled_start,
    session_status,
)

START = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)


def test_diff_minutes():
    assert diff_minutes(START, START + timedelta(minutes=90, seconds=59)) == 90
    assert diff_minutes(START, START - timedelta(minutes=1)) == 0
    assert diff_minutes(None, START) == 0


def test_diff_minutes_accepts_naive_sqlite_values():
    naive = START.replace(tzinfo=None)
    assert diff_minutes(naive, START + timedelta(minutes=30)) == 30


@pytest.mark.parametrize(
    "minutes,expected",
    [(0, "0.00"), (5, "0.00"), (6, "0.33"), (65, "20.00"), (125, "40.00")],
)
def test_cost_with_free_minutes(minutes, expected):
    end = START + timedelta(minutes=minutes)
    assert compute_cost_with_free_minutes(START, end) == Decimal(expected)


def test_cost_with_custom_rate():
    end = START + timedelta(minutes=60)
    assert compute_cost_with_free_minutes(START, end, hourly_rate=Decimal("30"), free_minutes=0) == Decimal("30.00")


def test_is_open_time():
    assert is_open_time("OPEN", None)
    assert is_open_time(" open ", None)
    assert not is_open_time("CLOSED", START)
    assert is_open_time(None, datetime(2999, 1, 1, tzinfo=timezone.utc))


def test_scheduled_start_moves_to_reservation_day():
    start = scheduled_start(START, date(2025, 3, 10))
    assert start == datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)
    assert scheduled_start(START, None) == START


def test_session_status():
    end = START + timedelta(hours=2)
    assert session_status(START, end, START - timedelta(minutes=1)) == SessionStatus.upcoming
    assert session_status(START, end, START + timedelta(hours=1)) == SessionStatus.ongoing
    assert session_status(START, end, end + timedelta(seconds=1)) == SessionStatus.finished
    assert session_status(START, None, START + timedelta(days=3)) == SessionStatus.ongoing


@pytest.mark.parametrize(
    "minutes,text",
    [(0, "0 min"), (45, "45 min"), (60, "1 hour"), (120, "2 hours"), (90, "1 hr 30 min")],
)
def test_format_minutes(minutes, text):
    assert format_minutes(minutes) == text
