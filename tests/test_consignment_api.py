from decimal import Decimal

D = Decimal


def _data(resp, status=200):
    assert resp.status_code == status, resp.text
    return resp.json()["data"]


def _item(client, stock=5, price="150", name="Tote Bag"):
    return _data(client.post("/consignment/items", json={
        "full_name": "Ivy Consignor",
        "item_name": name,
        "category": "Bags",
        "size": "M",
        "price": price,
        "stock": stock,
    }))


def _sell(client, item_id, quantity=1, full_name="Jay Buyer"):
    return client.post("/consignment/sales", json={
        "consignment_id": item_id,
        "full_name": full_name,
        "seat_number": "C1",
        "quantity": quantity,
    })


def _stock(client, item_id):
    items = _data(client.get("/consignment/items"))
    return next(i["stock"] for i in items if i["id"] == item_id)


def test_sale_decrements_stock(client):
    item = _item(client, stock=5)
    sale = _data(_sell(client, item["id"], quantity=2))

    assert sale["item_name"] == "Tote Bag"
    assert D(sale["total"]) == D("300")
    assert D(sale["billing"]["due"]) == D("300")
    assert _stock(client, item["id"]) == 3


def test_insufficient_stock(client):
    item = _item(client, stock=1)
    resp = _sell(client, item["id"], quantity=2)
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "INSUFFICIENT_STOCK"
    assert resp.json()["details"]["available"] == 1
    assert _stock(client, item["id"]) == 1


def test_unknown_item(client):
    resp = _sell(client, 999999)
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "CONSIGNMENT_ITEM_NOT_FOUND"


def test_free_payment_exposes_change_and_remaining(client):
    item = _item(client, stock=3, price="300")
    sale = _data(_sell(client, item["id"]))

    data = _data(client.post(f"/consignment/sales/{sale['id']}/payment", json={
        "gcash_amount": 200, "cash_amount": 200,
    }))
    assert D(data["billing"]["total_paid"]) == D("400")
    assert D(data["billing"]["change"]) == D("100")
    assert data["billing"]["is_paid"] is True

    data = _data(client.post(f"/consignment/sales/{sale['id']}/payment", json={
        "gcash_amount": 100, "cash_amount": 50,
    }))
    assert D(data["billing"]["remaining"]) == D("150")
    assert data["billing"]["is_paid"] is False


def test_void_requires_reason_and_restores_stock(client):
    item = _item(client, stock=4)
    sale = _data(_sell(client, item["id"], quantity=3))
    assert _stock(client, item["id"]) == 1

    resp = client.post(f"/consignment/sales/{sale['id']}/void", json={"reason": "   "})
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "VOID_REASON_REQUIRED"

    voided = _data(client.post(f"/consignment/sales/{sale['id']}/void", json={"reason": "Wrong size"}))
    assert voided["voided"] is True
    assert voided["void_note"] == "Wrong size"
    assert voided["voided_at"] is not None
    assert _stock(client, item["id"]) == 4

    for path, body in (("payment", {"gcash_amount": 10}), ("toggle-paid", None), ("void", {"reason": "again"})):
        resp = client.post(f"/consignment/sales/{sale['id']}/{path}", json=body)
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "CONSIGNMENT_SALE_VOIDED"


def test_totals_skip_voided_sales(client):
    item = _item(client, stock=10, price="50", name="Keychain Totals")
    kept = _data(_sell(client, item["id"], quantity=2, full_name="Totals Kept"))
    dropped = _data(_sell(client, item["id"], quantity=1, full_name="Totals Dropped"))

    _data(client.post(f"/consignment/sales/{kept['id']}/payment", json={"gcash_amount": 60, "cash_amount": 40}))
    _data(client.post(f"/consignment/sales/{dropped['id']}/void", json={"reason": "Returned"}))

    totals = _data(client.get("/consignment/sales/totals", params={"search": "Keychain Totals"}))
    assert D(totals["total_amount"]) == D("100")
    assert D(totals["total_gcash"]) == D("60")
    assert D(totals["total_cash"]) == D("40")

    listed = _data(client.get("/consignment/sales", params={"search": "Keychain Totals"}))
    assert listed["total"] == 2


def test_missing_sale(client):
    resp = client.get("/consignment/sales/999999")
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "CONSIGNMENT_SALE_NOT_FOUND"
