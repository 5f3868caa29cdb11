import pytest

from tests.conftest import checkout_body, headers


@pytest.fixture
def shop(make_user, make_product, add_to_cart):
    make_user(1)
    make_user(2)
    make_user(9, role="admin")
    pen = make_product("Pen", "20.00", stock=5)
    add_to_cart(1, pen, 2)
    return pen


def place(client, user_id=1, **overrides):
    return client.post("/orders", json=checkout_body(**overrides), headers=headers(user_id))


def test_create_order(client, shop, stock_of):
    resp = place(client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert body["paymentStatus"] == "pending"
    assert body["userId"] == 1
    assert body["subtotal"] == "40.00"
    assert body["discount"] == "0.00"
    assert body["tax"] == "3.20"
    assert body["shipping"] == "9.99"
    assert body["total"] == "53.19"
    assert body["items"] == [
        {"id": body["items"][0]["id"], "productId": shop, "name": "Pen", "price": "20.00", "quantity": 2}
    ]
    assert stock_of(shop) == 3
    assert client.get("/cart", headers=headers(1)).json()["items"] == []


def test_order_round_trip(client, shop):
    created = place(client, notes="leave at the door").json()

    fetched = client.get(f"/orders/{created['id']}", headers=headers(1))

    assert fetched.status_code == 200
    assert fetched.json() == created


def test_express_shipping(client, shop):
    body = place(client, shippingMethod="express").json()
    assert body["shipping"] == "19.99"
    assert body["shippingMethod"] == "express"


def test_empty_cart(client, shop):
    resp = place(client, user_id=2)

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "EMPTY_CART"


def test_out_of_stock_reports_lines(client, shop, add_to_cart, make_product):
    rare = make_product("Rare", "1.00", stock=0)
    add_to_cart(1, rare, 1)

    resp = place(client)

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["code"] == "PRODUCT_UNAVAILABLE"
    assert [d["productId"] for d in detail["details"]] == [rare]
    assert len(client.get("/cart", headers=headers(1)).json()["items"]) == 2


def test_invalid_coupon_rejects_checkout(client, shop):
    resp = place(client, couponCode="NOPE")

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "INVALID_COUPON"
    assert resp.json()["detail"]["reason"] == "INVALID_COUPON"


def test_address_validation(client, shop):
    resp = place(client, shippingAddress={"street": "x", "city": "y"})
    assert resp.status_code == 422


def test_missing_identity(client, shop):
    assert client.post("/orders", json=checkout_body()).status_code == 401
    assert client.get("/orders", headers=headers(404)).status_code == 401


def test_order_of_another_user(client, shop):
    order_id = place(client).json()["id"]

    resp = client.get(f"/orders/{order_id}", headers=headers(2))

    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "FORBIDDEN"


def test_admin_reads_any_order(client, shop):
    order_id = place(client).json()["id"]
    assert client.get(f"/orders/{order_id}", headers=headers(9)).status_code == 200


def test_unknown_order(client, shop):
    resp = client.get("/orders/777", headers=headers(1))
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "NOT_FOUND"


def test_list_orders_pagination(client, shop, add_to_cart):
    ids = []
    for _ in range(3):
        ids.append(place(client).json()["id"])
        add_to_cart(1, shop, 1)

    resp = client.get("/orders", params={"page": 1, "limit": 2}, headers=headers(1))

    assert resp.status_code == 200
    body = resp.json()
    assert body["pagination"] == {"page": 1, "pageSize": 2, "total": 3, "totalPages": 2}
    assert [o["id"] for o in body["data"]] == ids[::-1][:2]

    second = client.get("/orders", params={"page": 2, "limit": 2}, headers=headers(1)).json()
    assert [o["id"] for o in second["data"]] == ids[:1]


def test_list_orders_sorted_by_total(client, shop, add_to_cart):
    big = place(client).json()
    add_to_cart(1, shop, 1)
    small = place(client).json()

    resp = client.get("/orders", params={"sort": "total", "order": "asc"}, headers=headers(1))

    assert [o["id"] for o in resp.json()["data"]] == [small["id"], big["id"]]


def test_list_orders_status_filter(client, shop):
    order_id = place(client).json()["id"]
    client.put(f"/orders/{order_id}/cancel", headers=headers(1))

    pending = client.get("/orders", params={"status": "pending"}, headers=headers(1)).json()
    cancelled = client.get("/orders", params={"status": "cancelled"}, headers=headers(1)).json()

    assert pending["data"] == []
    assert [o["id"] for o in cancelled["data"]] == [order_id]
    assert client.get("/orders", params={"status": "lost"}, headers=headers(1)).status_code == 422


def test_cancel_order(client, shop, stock_of):
    order_id = place(client).json()["id"]

    resp = client.put(f"/orders/{order_id}/cancel", headers=headers(1))

    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"
    assert stock_of(shop) == 5

    again = client.put(f"/orders/{order_id}/cancel", headers=headers(1))
    assert again.status_code == 400
    assert again.json()["detail"]["code"] == "NOT_CANCELLABLE"


def test_cancel_someone_elses_order(client, shop):
    order_id = place(client).json()["id"]
    assert client.put(f"/orders/{order_id}/cancel", headers=headers(2)).status_code == 403


def test_admin_status_update(client, shop):
    order_id = place(client).json()["id"]
    url = f"/orders/admin/{order_id}/status"

    assert client.put(url, json={"status": "processing"}, headers=headers(1)).status_code == 403

    resp = client.put(url, json={"status": "processing"}, headers=headers(9))
    assert resp.status_code == 200
    assert resp.json()["status"] == "processing"

    resp = client.put(url, json={"status": "delivered"}, headers=headers(9))
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "ILLEGAL_TRANSITION"

    assert client.put(url, json={"status": "returned"}, headers=headers(9)).status_code == 422


def test_admin_list_all_orders(client, shop, add_to_cart):
    place(client)
    add_to_cart(2, shop, 1)
    place(client, user_id=2)

    assert client.get("/orders/admin", headers=headers(1)).status_code == 403

    body = client.get("/orders/admin", headers=headers(9)).json()
    assert body["pagination"]["total"] == 2
    assert {o["userId"] for o in body["data"]} == {1, 2}


def test_order_keeps_purchase_price_after_product_update(client, shop):
    order_id = place(client).json()["id"]

    update = client.put(
        f"/products/{shop}", json={"price": "99.00", "name": "Golden Pen"}, headers=headers(9)
    )
    assert update.status_code == 200
    assert (update.json()["price"], update.json()["name"]) == ("99.00", "Golden Pen")

    order = client.get(f"/orders/{order_id}", headers=headers(1)).json()
    assert [(i["name"], i["price"]) for i in order["items"]] == [("Pen", "20.00")]
    assert order["subtotal"] == "40.00"
