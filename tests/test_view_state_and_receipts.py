import asyncio
import os

from app.schemas.billing.billing_schemas import BillingOut
from app.schemas.support.view_state_schemas import ViewStateOut
from app.services.support.view_state_service import ViewStateBroadcaster, broadcaster
from app.utils.pdf_generators.receipt_pdf import _summary_rows


def _data(resp, status=200):
    assert resp.status_code == status, resp.text
    return resp.json()["data"]


# =====================================================
# CUSTOMER VIEW
# =====================================================
def test_view_state_set_and_stop(client):
    state = _data(client.put("/customer-view", json={"enabled": True, "session_id": "42"}))
    assert state["enabled"] is True
    assert state["session_id"] == "42"

    assert _data(client.get("/customer-view/viewing/42"))["viewing"] is True
    assert _data(client.get("/customer-view/viewing/7"))["viewing"] is False

    state = _data(client.post("/customer-view/stop"))
    assert state["enabled"] is False
    assert state["session_id"] is None
    assert _data(client.get("/customer-view"))["enabled"] is False


def test_enabling_without_session_stays_off(client):
    state = _data(client.put("/customer-view", json={"enabled": True, "session_id": "  "}))
    assert state["enabled"] is False
    assert state["session_id"] is None


def test_writes_are_published_to_subscribers(client):
    queue = broadcaster.subscribe()
    try:
        _data(client.put("/customer-view", json={"enabled": True, "session_id": "9"}))
        published = queue.get_nowait()
        assert published.enabled is True
        assert published.session_id == "9"
    finally:
        broadcaster.unsubscribe(queue)
        client.post("/customer-view/stop")


def test_slow_subscriber_keeps_latest_state():
    hub = ViewStateBroadcaster(max_queue=1)

    async def scenario():
        queue = hub.subscribe()
        hub.publish(ViewStateOut(enabled=True, session_id="1", updated_at=None))
        hub.publish(ViewStateOut(enabled=True, session_id="2", updated_at=None))
        latest = queue.get_nowait()
        hub.unsubscribe(queue)
        return latest, hub.subscriber_count

    latest, remaining = asyncio.run(scenario())
    assert latest.session_id == "2"
    assert remaining == 0


# =====================================================
# RECEIPTS
# =====================================================
def test_session_receipt_pdf(client, receipt_dir):
    session = _data(client.post("/customer-sessions", json={
        "full_name": "Kim & Co",
        "seat_number": "R1",
        "time_started": "2025-03-01T08:00:00+00:00",
        "time_ended": "2025-03-01T09:05:00+00:00",
    }))
    resp = client.get(f"/customer-sessions/{session['id']}/receipt")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")
    assert os.path.exists(os.path.join(receipt_dir, f"Receipt_CS-{session['id']}.pdf"))


def test_add_on_receipt_pdf(client):
    order = _data(client.post("/add-on-orders", json={
        "full_name": "Lea Ramos",
        "seat_number": "R2",
        "items": [{"item_name": "Tea", "quantity": 1, "price": "35"}],
    }))
    resp = client.get(f"/add-on-orders/{order['id']}/receipt")
    assert resp.status_code == 200
    assert resp.content.startswith(b"%PDF")


def test_receipt_for_missing_record(client):
    resp = client.get("/promo-bookings/999999/receipt")
    assert resp.status_code == 404


def _promo(client):
    return _data(client.post("/promo-bookings", json={
        "full_name": "Mia Tan",
        "area": "common_area",
        "seat_number": "R3",
        "package_title": "Day Pass",
        "start_at": "2025-03-01T08:00:00+00:00",
        "end_at": "2025-03-01T16:00:00+00:00",
        "price": "300",
    }))


def test_promo_receipt_shows_change_after_overpayment(client):
    bid = _promo(client)["id"]
    data = _data(client.post(f"/promo-bookings/{bid}/payment", json={
        "gcash_amount": 150, "cash_amount": 250,
    }))

    rows = dict(_summary_rows(BillingOut.model_validate(data["billing"])))
    assert rows["Change"].endswith("100.00")
    assert rows["Total Balance"].endswith("300.00")
    assert "Remaining" not in rows

    resp = client.get(f"/promo-bookings/{bid}/receipt")
    assert resp.status_code == 200
    assert resp.content.startswith(b"%PDF")


def test_receipt_shows_remaining_on_short_payment(client):
    bid = _promo(client)["id"]
    data = _data(client.post(f"/promo-bookings/{bid}/payment", json={"cash_amount": 120}))

    rows = dict(_summary_rows(BillingOut.model_validate(data["billing"])))
    assert rows["Remaining"].endswith("180.00")
    assert "Change" not in rows
