"""Request boundary tests through TestClient."""

import pytest

BUYER = {"X-User-Email": "buyer@example.com"}
OTHER_BUYER = {"X-User-Email": "other@example.com"}
SELLER_1 = {"X-User-Email": "seller1@example.com"}
SELLER_2 = {"X-User-Email": "seller2@example.com"}

ADDRESS = {"fullName": "Jane Doe", "address": "1 Main St", "city": "Springfield", "phone": "555-0100"}


def _add(client, product_id, quantity, headers=BUYER):
    return client.post("/cart/items", json={"productId": product_id, "quantity": quantity}, headers=headers)


def _order(client, lines, headers=BUYER):
    for product_id, quantity in lines:
        assert _add(client, product_id, quantity, headers).status_code == 201
    response = client.post("/orders", json=ADDRESS, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_missing_identity_header(client):
    response = client.get("/cart")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthenticated", "detail": "Missing X-User-Email header"}


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/nowhere", headers=BUYER)

    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"


class TestCartEndpoints:
    def test_get_cart_creates_it(self, client):
        response = client.get("/cart", headers=BUYER)

        assert response.status_code == 200
        body = response.json()
        assert body["userId"] == "buyer@example.com"
        assert body["items"] == []
        assert body["total"] == 0

    def test_add_item(self, client):
        response = _add(client, "p-lip", 2)

        assert response.status_code == 201
        item = response.json()["items"][0]
        assert item["productId"] == "p-lip"
        assert item["productName"] == "Red Lipstick"
        assert item["quantity"] == 2
        assert item["price"] == pytest.approx(19.99)
        assert item["lineTotal"] == pytest.approx(39.98)
        assert response.json()["total"] == pytest.approx(39.98)

    def test_add_accepts_snake_case_body(self, client):
        response = client.post("/cart/items", json={"product_id": "p-lip", "quantity": 1}, headers=BUYER)
        assert response.status_code == 201

    def test_get_cart_reports_availability(self, client, catalog):
        _add(client, "p-lip", 3)
        catalog.products["p-lip"]["stock"] = 1

        item = client.get("/cart", headers=BUYER).json()["items"][0]
        assert item["available"] is False

    def test_zero_quantity(self, client):
        response = _add(client, "p-lip", 0)

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidArgument"

    def test_insufficient_stock_message(self, client):
        response = _add(client, "p-mascara", 3)

        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Insufficient stock for product: Mascara. Available: 2, Requested: 3"
        )

    def test_unknown_product(self, client):
        response = _add(client, "nope", 1)

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_update_quantity(self, client):
        _add(client, "p-lip", 1)

        response = client.put("/cart/items/p-lip", params={"quantity": 4}, headers=BUYER)

        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 4

    def test_update_quantity_zero(self, client):
        _add(client, "p-lip", 1)
        response = client.put("/cart/items/p-lip", params={"quantity": 0}, headers=BUYER)
        assert response.status_code == 400

    def test_update_quantity_without_param(self, client):
        _add(client, "p-lip", 1)
        assert client.put("/cart/items/p-lip", headers=BUYER).status_code == 400

    def test_remove_item(self, client):
        _add(client, "p-lip", 1)

        response = client.delete("/cart/items/p-lip", headers=BUYER)

        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_clear_cart(self, client):
        _add(client, "p-lip", 1)

        response = client.delete("/cart", headers=BUYER)

        assert response.status_code == 204
        assert client.get("/cart", headers=BUYER).json()["items"] == []

    def test_clear_missing_cart(self, client):
        assert client.delete("/cart", headers=BUYER).status_code == 404

    def test_catalog_outage(self, client, catalog):
        catalog.failing.add("fetch")

        response = _add(client, "p-lip", 1)

        assert response.status_code == 502
        assert response.json()["error"] == "Dependency"


class TestOrderEndpoints:
    def test_create_order(self, client, catalog):
        order = _order(client, [("p-lip", 3), ("p-lip", 2)])

        assert order["status"] == "PENDING"
        assert order["totalAmount"] == pytest.approx(99.95)
        assert order["shippingAddress"] == ADDRESS
        assert order["items"][0]["sellerId"] == "seller-1"
        assert catalog.stock("p-lip") == 5
        assert client.get("/cart", headers=BUYER).json()["items"] == []

    def test_create_order_from_empty_cart(self, client):
        client.get("/cart", headers=BUYER)
        response = client.post("/orders", json=ADDRESS, headers=BUYER)
        assert response.status_code == 400

    def test_create_order_with_blank_address_field(self, client):
        _add(client, "p-lip", 1)
        response = client.post("/orders", json={**ADDRESS, "city": "  "}, headers=BUYER)

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidArgument"

    def test_stock_reduction_failure_is_internal(self, client, catalog):
        _add(client, "p-lip", 1)
        catalog.failing.add("reduce")

        response = client.post("/orders", json=ADDRESS, headers=BUYER)

        assert response.status_code == 500
        assert response.json()["error"] == "Internal"
        assert len(client.get("/orders", headers=BUYER).json()) == 1

    def test_list_and_get(self, client):
        order = _order(client, [("p-lip", 1)])

        listed = client.get("/orders", headers=BUYER).json()
        fetched = client.get(f"/orders/{order['id']}", headers=BUYER)

        assert [o["id"] for o in listed] == [order["id"]]
        assert fetched.status_code == 200
        assert fetched.json() == order

    def test_get_foreign_order(self, client):
        order = _order(client, [("p-lip", 1)])

        response = client.get(f"/orders/{order['id']}", headers=OTHER_BUYER)

        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"

    def test_get_missing_order(self, client):
        assert client.get("/orders/does-not-exist", headers=BUYER).status_code == 404

    def test_cancel(self, client, catalog):
        order = _order(client, [("p-lip", 4)])

        response = client.put(f"/orders/{order['id']}/cancel", headers=BUYER)

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        assert catalog.restored == [("p-lip", 4)]

    def test_cancel_twice_conflicts(self, client):
        order = _order(client, [("p-lip", 1)])
        client.put(f"/orders/{order['id']}/cancel", headers=BUYER)

        response = client.put(f"/orders/{order['id']}/cancel", headers=BUYER)

        assert response.status_code == 409
        assert response.json()["error"] == "Conflict"

    def test_delete(self, client):
        order = _order(client, [("p-lip", 1)])

        assert client.delete(f"/orders/{order['id']}", headers=BUYER).status_code == 409

        client.put(f"/orders/{order['id']}/cancel", headers=BUYER)
        assert client.delete(f"/orders/{order['id']}", headers=BUYER).status_code == 204
        assert client.get(f"/orders/{order['id']}", headers=BUYER).status_code == 404

    def test_redo(self, client):
        order = _order(client, [("p-lip", 1)])

        response = client.post(f"/orders/{order['id']}/redo", headers=BUYER)

        assert response.status_code == 201
        redone = response.json()
        assert redone["id"] != order["id"]
        assert redone["items"] == order["items"]
        assert redone["shippingAddress"] == order["shippingAddress"]

    def test_search(self, client):
        lipstick = _order(client, [("p-lip", 1)])
        _order(client, [("p-mascara", 1)])

        found = client.get("/orders/search", params={"q": "lip"}, headers=BUYER).json()
        assert [o["id"] for o in found] == [lipstick["id"]]

        found = client.get("/orders/search", params={"q": "lip", "status": "CANCELLED"}, headers=BUYER).json()
        assert found == []

    def test_search_by_dates(self, client):
        _order(client, [("p-lip", 1)])

        params = {"dateFrom": "2000-01-01T00:00:00", "dateTo": "2000-12-31T23:59:59"}
        assert client.get("/orders/search", params=params, headers=BUYER).json() == []

        params = {"dateFrom": "2000-01-01T00:00:00Z", "dateTo": "2999-01-01T00:00:00Z"}
        assert len(client.get("/orders/search", params=params, headers=BUYER).json()) == 1

    def test_search_with_unknown_status(self, client):
        response = client.get("/orders/search", params={"status": "LOST"}, headers=BUYER)
        assert response.status_code == 400


class TestSellerEndpoints:
    def test_seller_sees_only_own_lines(self, client):
        order = _order(client, [("p-lip", 2), ("p-serum", 1)])

        response = client.get(f"/orders/seller/{order['id']}", headers=SELLER_1)

        assert response.status_code == 200
        body = response.json()
        assert [i["productId"] for i in body["items"]] == ["p-lip"]
        assert body["totalAmount"] == pytest.approx(39.98)

    def test_seller_list(self, client):
        order = _order(client, [("p-lip", 1), ("p-serum", 1)])

        listed = client.get("/orders/seller", headers=SELLER_2).json()

        assert [o["id"] for o in listed] == [order["id"]]
        assert listed[0]["totalAmount"] == pytest.approx(42.0)

    def test_unknown_seller(self, client):
        assert client.get("/orders/seller", headers={"X-User-Email": "ghost@example.com"}).status_code == 404

    def test_status_lifecycle(self, client):
        order = _order(client, [("p-lip", 1)])
        url = f"/orders/{order['id']}/status"

        assert client.put(url, params={"status": "SHIPPED"}, headers=SELLER_1).status_code == 409
        for status in ("READY_FOR_DELIVERY", "SHIPPED", "DELIVERED"):
            response = client.put(url, params={"status": status}, headers=SELLER_1)
            assert response.status_code == 200
            assert response.json()["status"] == status
        assert client.put(url, params={"status": "CANCELLED"}, headers=SELLER_1).status_code == 409

    def test_status_update_by_unrelated_seller(self, client):
        order = _order(client, [("p-lip", 1)])

        response = client.put(
            f"/orders/{order['id']}/status", params={"status": "READY_FOR_DELIVERY"}, headers=SELLER_2
        )
        assert response.status_code == 403

    def test_seller_search(self, client):
        _order(client, [("p-lip", 1), ("p-serum", 1)])

        by_other_sellers_product = client.get("/orders/seller/search", params={"q": "lip"}, headers=SELLER_2)
        by_own_product = client.get("/orders/seller/search", params={"q": "serum"}, headers=SELLER_2)

        assert by_other_sellers_product.json() == []
        assert len(by_own_product.json()) == 1


def test_blank_identity_is_rejected():
    from orderhub.api.deps import get_caller_id
    from orderhub.domain.errors import UnauthenticatedError

    with pytest.raises(UnauthenticatedError) as exc:
        get_caller_id("   ")
    assert exc.value.status_code == 401
    assert get_caller_id(" buyer@example.com ") == "buyer@example.com"
