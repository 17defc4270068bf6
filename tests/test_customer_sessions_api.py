from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

D = Decimal


def _iso(value: datetime) -> str:
    return value.isoformat()


def _data(resp, status=200):
    assert resp.status_code == status, resp.text
    body = resp.json()
    assert body["success"] is True
    return body["data"]


def _closed_walk_in(client, minutes: int, **extra):
    start = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)
    payload = {
        "full_name": "Ana Cruz",
        "seat_number": "A1",
        "session_date": "2025-03-01",
        "time_started": _iso(start),
        "time_ended": _iso(start + timedelta(minutes=minutes)),
        **extra,
    }
    return _data(client.post("/customer-sessions", json=payload))


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_closed_session_is_billed_after_free_minutes(client):
    session = _closed_walk_in(client, 125)
    billing = session["billing"]

    assert session["hour_avail"] == "CLOSED"
    assert session["total_minutes"] == 125
    assert session["total_time_text"] == "2 hr 5 min"
    assert D(billing["base_cost"]) == D("40")
    assert D(billing["due"]) == D("40")
    assert billing["display_label"] == "Total Balance"
    assert billing["is_paid"] is False


def test_discount_then_payment_flow(client):
    session = _closed_walk_in(client, 125)
    sid = session["id"]

    # discount alone never marks the session paid
    data = _data(client.post(f"/customer-sessions/{sid}/discount", json={
        "discount_kind": "percent", "discount_value": 10, "discount_reason": "student",
    }))
    assert D(data["billing"]["due"]) == D("36")
    assert data["billing"]["discount_text"] == "10%"
    assert data["discount_reason"] == "student"
    assert data["billing"]["is_paid"] is False

    # gcash beyond due is clamped, cash absorbs nothing
    data = _data(client.post(f"/customer-sessions/{sid}/payment", json={"gcash_amount": 50}))
    assert D(data["billing"]["gcash_amount"]) == D("36")
    assert D(data["billing"]["cash_amount"]) == D("0")
    assert data["billing"]["is_paid"] is True
    assert data["billing"]["paid_at"] is not None

    # a bigger discount re-fits the recorded payment
    data = _data(client.post(f"/customer-sessions/{sid}/discount", json={
        "discount_kind": "amount", "discount_value": 10,
    }))
    assert D(data["billing"]["due"]) == D("30")
    assert D(data["billing"]["gcash_amount"]) == D("30")
    assert D(data["billing"]["cash_amount"]) == D("0")
    assert data["billing"]["is_paid"] is True


def test_cash_priority_payment_and_manual_toggle(client):
    session = _closed_walk_in(client, 65)
    sid = session["id"]

    data = _data(client.post(f"/customer-sessions/{sid}/payment", json={
        "gcash_amount": 0, "cash_amount": 5, "priority": "cash",
    }))
    billing = data["billing"]
    assert D(billing["cash_amount"]) == D("5")
    assert D(billing["gcash_amount"]) == D("15")
    assert billing["is_paid"] is True

    data = _data(client.post(f"/customer-sessions/{sid}/toggle-paid"))
    assert data["billing"]["is_paid"] is False
    assert data["billing"]["paid_at"] is None

    # the next save recomputes the status from the amounts
    data = _data(client.post(f"/customer-sessions/{sid}/payment", json={"gcash_amount": 20}))
    assert data["billing"]["is_paid"] is True


def test_open_time_session_can_be_stopped(client):
    start = datetime.now(timezone.utc) - timedelta(minutes=65)
    session = _data(client.post("/customer-sessions", json={
        "full_name": "Ben Reyes",
        "seat_number": "B2",
        "time_started": _iso(start),
    }))
    assert session["is_open_time"] is True
    assert session["status"] == "Ongoing"

    stopped = _data(client.post(f"/customer-sessions/{session['id']}/stop"))
    assert stopped["is_open_time"] is False
    assert stopped["hour_avail"] == "CLOSED"
    assert D(stopped["billing"]["base_cost"]) >= D("20")

    resp = client.post(f"/customer-sessions/{session['id']}/stop")
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "SESSION_INVALID_STATE"


def test_invalid_time_range_is_rejected(client):
    resp = client.post("/customer-sessions", json={
        "full_name": "Bad Range",
        "seat_number": "C3",
        "time_started": "2025-03-01T10:00:00+00:00",
        "time_ended": "2025-03-01T09:00:00+00:00",
    })
    assert resp.status_code == 422
    assert resp.json()["error_code"] == "VALIDATION_ERROR"


def test_missing_session_returns_404(client):
    resp = client.get("/customer-sessions/999999")
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "SESSION_NOT_FOUND"


def test_list_and_delete_by_date(client):
    _closed_walk_in(client, 30, session_date="2025-04-02")
    _closed_walk_in(client, 30, session_date="2025-04-02", full_name="Carla Dizon")

    listed = _data(client.get("/customer-sessions/", params={"on_date": "2025-04-02"}))
    assert listed["total"] == 2

    found = _data(client.get("/customer-sessions/", params={"on_date": "2025-04-02", "full_name": "carla"}))
    assert found["total"] == 1

    deleted = _data(client.delete("/customer-sessions/by-date/2025-04-02"))
    assert deleted["deleted"] == 2
    assert _data(client.get("/customer-sessions/", params={"on_date": "2025-04-02"}))["total"] == 0


def test_delete_single_session(client):
    sid = _closed_walk_in(client, 10)["id"]
    _data(client.delete(f"/customer-sessions/{sid}"))
    assert client.get(f"/customer-sessions/{sid}").status_code == 404


# =====================================================
# RESERVATIONS
# =====================================================
def test_reservation_requires_date(client):
    resp = client.post("/reservations", json={"full_name": "No Date", "seat_number": "D4"})
    assert resp.status_code == 422


def test_reservation_down_payment_gives_change(client):
    start = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)
    res = _data(client.post("/reservations", json={
        "full_name": "Dina Lim",
        "seat_number": "E5",
        "reservation_date": "2025-03-05",
        "time_started": _iso(start),
        "time_ended": _iso(start + timedelta(minutes=65)),
    }))
    billing = res["billing"]

    assert res["reservation"] is True
    assert D(billing["base_cost"]) == D("20")
    assert D(billing["down_payment"]) == D("50")
    assert D(billing["due"]) == D("0")
    assert billing["display_label"] == "Total Change"
    assert D(billing["display_amount"]) == D("30")

    # nothing left to collect: saving a payment marks it paid
    data = _data(client.post(f"/reservations/{res['id']}/payment", json={"gcash_amount": 0}))
    assert data["billing"]["is_paid"] is True

    # reservations are not reachable through the walk-in routes
    assert client.get(f"/customer-sessions/{res['id']}").status_code == 404


def test_reservation_deducts_down_payment_from_due(client):
    start = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)
    res = _data(client.post("/reservations", json={
        "full_name": "Eli Santos",
        "seat_number": "F6",
        "reservation_date": "2025-03-06",
        "time_started": _iso(start),
        "time_ended": _iso(start + timedelta(hours=5, minutes=5)),
    }))
    assert D(res["billing"]["base_cost"]) == D("100")
    assert D(res["billing"]["due"]) == D("50")

    data = _data(client.post(f"/reservations/{res['id']}/payment", json={"gcash_amount": 20}))
    assert D(data["billing"]["gcash_amount"]) == D("20")
    assert D(data["billing"]["cash_amount"]) == D("30")
    assert data["billing"]["is_paid"] is True


def test_future_reservation_cannot_be_stopped(client):
    tomorrow = date.today() + timedelta(days=2)
    res = _data(client.post("/reservations", json={
        "full_name": "Future Guest",
        "seat_number": "G7",
        "reservation_date": tomorrow.isoformat(),
        "time_started": _iso(datetime.now(timezone.utc)),
    }))
    assert res["status"] == "Upcoming"

    resp = client.post(f"/reservations/{res['id']}/stop")
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "SESSION_INVALID_STATE"


def test_list_reservations_by_reservation_date(client):
    _data(client.post("/reservations", json={
        "full_name": "Listed Guest",
        "seat_number": "H8",
        "reservation_date": "2030-01-15",
    }))
    listed = _data(client.get("/reservations/", params={"on_date": "2030-01-15"}))
    assert listed["total"] == 1
    assert listed["items"][0]["reservation_date"] == "2030-01-15"


def test_upcoming_open_reservation_is_not_billed_yet(client):
    started = datetime.now(timezone.utc) - timedelta(hours=3)
    reserved_on = date.today() + timedelta(days=2)
    res = _data(client.post("/reservations", json={
        "full_name": "Early Bird",
        "seat_number": "J1",
        "reservation_date": reserved_on.isoformat(),
        "time_started": _iso(started),
    }))

    assert res["status"] == "Upcoming"
    assert res["total_minutes"] == 0
    assert D(res["billing"]["base_cost"]) == D("0")
    assert res["time_started"].startswith(reserved_on.isoformat())


def test_reservation_live_bill_matches_stopped_bill(client):
    scheduled = datetime.now(timezone.utc) - timedelta(hours=3)
    res = _data(client.post("/reservations", json={
        "full_name": "Late Entry",
        "seat_number": "J2",
        "reservation_date": scheduled.date().isoformat(),
        "time_started": _iso(scheduled - timedelta(days=5)),
    }))
    assert res["status"] == "Ongoing"
    assert res["total_minutes"] in (180, 181)
    live_cost = D(res["billing"]["base_cost"])
    assert D("58.33") <= live_cost <= D("59")

    stopped = _data(client.post(f"/reservations/{res['id']}/stop"))
    assert stopped["total_minutes"] in (180, 181)
    assert D("58.33") <= D(stopped["billing"]["base_cost"]) <= D("59")

    fetched = _data(client.get(f"/reservations/{res['id']}"))
    assert fetched["status"] == "Finished"
