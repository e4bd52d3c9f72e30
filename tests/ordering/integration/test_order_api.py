"""Integration tests for order read and fulfillment endpoints via TestClient."""

import pytest
from ordering.order.order import OrderStatus

BUYER = {"Authorization": "Bearer buyer-token"}
SELLER = {"Authorization": "Bearer seller-token"}
OTHER_SELLER = {"Authorization": "Bearer other-seller-token"}
ADMIN = {"Authorization": "Bearer admin-token"}


@pytest.fixture()
def order_id(client, make_product, buyer, seller):
    product = make_product(price=1000, stock=5, seller_id=seller, title="Vintage Camera")
    response = client.post("/checkout", json={"items": [{"product_id": product.id, "quantity": 2}]}, headers=BUYER)
    assert response.status_code == 201
    return response.json()["order_id"]


class TestOrderDetail:
    def test_buyer_sees_order(self, client, order_id):
        response = client.get(f"/orders/{order_id}", headers=BUYER)

        assert response.status_code == 200
        data = response.json()
        assert data["order_id"] == order_id
        assert data["status"] == OrderStatus.PAID.value
        assert data["total_amount"] == 2000
        assert data["items"][0]["title"] == "Vintage Camera"
        assert data["items"][0]["price_at_purchase"] == 1000

    def test_seller_of_item_sees_order(self, client, order_id):
        assert client.get(f"/orders/{order_id}", headers=SELLER).status_code == 200

    def test_admin_sees_order(self, client, order_id, admin):
        assert client.get(f"/orders/{order_id}", headers=ADMIN).status_code == 200

    def test_unrelated_seller_is_forbidden(self, client, order_id, other_seller):
        response = client.get(f"/orders/{order_id}", headers=OTHER_SELLER)
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "unauthorized"

    def test_unknown_order(self, client, buyer):
        response = client.get("/orders/missing", headers=BUYER)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "order_not_found"


class TestShipEndpoint:
    def test_seller_ships(self, client, order_id):
        response = client.put(f"/orders/{order_id}/ship", headers=SELLER)

        assert response.status_code == 200
        assert client.get(f"/orders/{order_id}", headers=BUYER).json()["status"] == OrderStatus.SHIPPED.value

    def test_ship_twice_conflicts(self, client, order_id):
        client.put(f"/orders/{order_id}/ship", headers=SELLER)

        response = client.put(f"/orders/{order_id}/ship", headers=SELLER)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "invalid_transition"

    def test_other_seller_forbidden(self, client, order_id, other_seller):
        response = client.put(f"/orders/{order_id}/ship", headers=OTHER_SELLER)
        assert response.status_code == 403

    def test_buyer_forbidden(self, client, order_id):
        assert client.put(f"/orders/{order_id}/ship", headers=BUYER).status_code == 403

    def test_anonymous(self, client, order_id):
        assert client.put(f"/orders/{order_id}/ship").status_code == 401


class TestReadViews:
    def test_my_orders(self, client, order_id):
        response = client.get("/orders/mine", headers=BUYER)

        assert response.status_code == 200
        rows = response.json()
        assert [row["order_id"] for row in rows] == [order_id]
        assert rows[0]["item_count"] == 2
        assert rows[0]["total_amount"] == 2000

    def test_seller_queue(self, client, order_id):
        response = client.get("/orders/seller-queue", headers=SELLER)

        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["order_id"] == order_id
        assert rows[0]["subtotal"] == 2000

    def test_seller_queue_status_filter(self, client, order_id):
        client.put(f"/orders/{order_id}/ship", headers=SELLER)

        assert client.get("/orders/seller-queue", params={"status": "paid"}, headers=SELLER).json() == []
        shipped = client.get("/orders/seller-queue", params={"status": "shipped"}, headers=SELLER).json()
        assert [row["order_id"] for row in shipped] == [order_id]

    def test_seller_queue_is_for_sellers_only(self, client, order_id):
        assert client.get("/orders/seller-queue", headers=BUYER).status_code == 403
