import re

from sqlalchemy.exc import OperationalError

from conftest import auth_header, make_token
from dailygreens.checkout import orchestrator
from dailygreens.db.models import Product, Transaction

CHECKOUT = {"fullName": "", "paymentMethodId": 1, "orderMethodId": 1}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_checkout_requires_token(client, shop):
    r = client.post("/transactions", json=CHECKOUT)
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_revoked_token_is_rejected(client, shop, cache):
    token = make_token(shop["user_id"])
    cache.set(f"blacklist:{token}", "1")
    r = client.post("/transactions", json=CHECKOUT, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Token has been revoked, please login again"


def test_refresh_token_is_not_an_access_token(client, shop):
    token = make_token(shop["user_id"], token_type="refresh")
    r = client.post("/transactions", json=CHECKOUT, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_checkout_scenario(client, shop, db):
    r = client.post("/transactions", json=CHECKOUT, headers=auth_header(shop["user_id"]))
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["success"] is True
    data = body["data"]
    assert re.match(r"^INV-\d{8}-\d{5}$", data["noInvoice"])
    assert data["deliveryFee"] == 10.0
    assert data["adminFee"] == 2.0
    assert data["tax"] == 15.0
    assert data["totalTransaction"] == 177.0

    db.expire_all()
    assert db.get(Product, 1).stock == 8
    assert db.get(Product, 2).stock == 3

    detail = client.get(f"/transactions/{data['transactionId']}", headers=auth_header(shop["user_id"]))
    assert detail.status_code == 200
    tx = detail.json()["data"]
    # blank fullName in the request falls back to the profile
    assert tx["fullName"] == "Budi Santoso"
    assert tx["status"] == "in progress"
    assert tx["orderMethod"] == "Door Delivery"
    assert tx["paymentMethod"] == "Bank Transfer"
    assert len(tx["transactionItems"]) == 2
    assert sum(it["subtotal"] for it in tx["transactionItems"]) == 150.0


def test_transaction_detail_is_private(client, shop):
    r = client.post("/transactions", json=CHECKOUT, headers=auth_header(shop["user_id"]))
    tid = r.json()["data"]["transactionId"]
    other = client.get(f"/transactions/{tid}", headers=auth_header(99))
    assert other.status_code == 404


def test_unknown_payment_method(client, shop):
    r = client.post("/transactions", json={**CHECKOUT, "paymentMethodId": 77}, headers=auth_header(shop["user_id"]))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid payment method id"


def test_missing_method_ids_fail_validation(client, shop):
    r = client.post("/transactions", json={"fullName": "x"}, headers=auth_header(shop["user_id"]))
    assert r.status_code == 422


def test_empty_cart(client, shop, db):
    payload = {**CHECKOUT, "fullName": "Admin", "address": "HQ", "phone": "021"}
    r = client.post("/transactions", json=payload, headers=auth_header(shop["admin_id"], "admin"))
    assert r.status_code == 400
    assert r.json()["message"] == "Cart is empty, cannot checkout"
    assert db.query(Transaction).count() == 0


def test_incomplete_payment_info(client, shop):
    r = client.post("/transactions", json=CHECKOUT, headers=auth_header(shop["admin_id"], "admin"))
    assert r.status_code == 400
    assert r.json()["message"].startswith("Payment info is incomplete")


def test_unknown_user(client, shop):
    r = client.post("/transactions", json=CHECKOUT, headers=auth_header(404))
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"


def test_insufficient_stock_conflict(client, shop, db):
    db.get(Product, 1).stock = 1
    db.commit()
    r = client.post("/transactions", json=CHECKOUT, headers=auth_header(shop["user_id"]))
    assert r.status_code == 409
    assert r.json()["message"] == "Insufficient stock for product_id 1"
    db.expire_all()
    assert db.query(Transaction).count() == 0
    assert db.get(Product, 2).stock == 5


def test_admin_routes_require_admin(client, shop):
    r = client.post("/transactions", json=CHECKOUT, headers=auth_header(shop["user_id"]))
    tid = r.json()["data"]["transactionId"]
    assert client.get(f"/admin/transactions/{tid}", headers=auth_header(shop["user_id"])).status_code == 403
    ok = client.get(f"/admin/transactions/{tid}", headers=auth_header(shop["admin_id"], "admin"))
    assert ok.status_code == 200
    assert ok.json()["data"]["userId"] == shop["user_id"]


def test_admin_updates_status(client, shop):
    r = client.post("/transactions", json=CHECKOUT, headers=auth_header(shop["user_id"]))
    tid = r.json()["data"]["transactionId"]
    admin = auth_header(shop["admin_id"], "admin")

    upd = client.patch(f"/admin/transactions/{tid}", json={"status": "sending"}, headers=admin)
    assert upd.status_code == 200
    assert upd.json()["message"] == "Transaction status updated successfully"
    assert client.get(f"/admin/transactions/{tid}", headers=admin).json()["data"]["status"] == "sending"

    assert client.patch(f"/admin/transactions/{tid}", json={"status": "lost"}, headers=admin).status_code == 422
    assert client.patch("/admin/transactions/999", json={"status": "finished"}, headers=admin).status_code == 404


def test_fee_listings(client, shop):
    orders = client.get("/order-methods").json()["data"]
    payments = client.get("/payment-methods").json()["data"]
    assert [(m["name"], m["deliveryFee"]) for m in orders] == [("Door Delivery", 10.0), ("Pick Up", 0.0)]
    assert [(m["name"], m["adminFee"]) for m in payments] == [("Bank Transfer", 2.0), ("Cash", 0.0)]


def test_cart_endpoints(client, shop):
    headers = auth_header(shop["user_id"])
    lines = client.get("/carts", headers=headers).json()["data"]
    assert [l["productId"] for l in lines] == [1, 2]

    added = client.post("/carts", json={"productId": 2, "sizeId": 1, "variantId": 1, "amount": 1}, headers=headers)
    assert added.status_code == 201
    assert added.json()["data"]["amount"] == 3
    assert added.json()["data"]["subtotal"] == 75.0

    too_many = client.post("/carts", json={"productId": 2, "sizeId": 1, "variantId": 1, "amount": 3}, headers=headers)
    assert too_many.status_code == 400

    line_id = lines[0]["id"]
    assert client.delete(f"/carts/{line_id}", headers=auth_header(shop["admin_id"], "admin")).status_code == 404
    assert client.delete(f"/carts/{line_id}", headers=headers).status_code == 200
    assert len(client.get("/carts", headers=headers).json()["data"]) == 1


def test_storage_failure_is_enveloped(client, shop, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection reset"))

    monkeypatch.setattr(orchestrator, "read_cart", broken)
    r = client.post("/transactions", json=CHECKOUT, headers=auth_header(shop["user_id"]))
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Failed to fetch list carts from database"
    assert "connection reset" in body["error"]
