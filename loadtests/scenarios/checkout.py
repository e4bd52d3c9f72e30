"""Checkout load test scenarios.

Buyers race for a small pool of listings so that conditional stock
decrements contend on the same rows. A 409 ``insufficient_stock`` is an
expected outcome under contention, not a failure; a 5xx is.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import CATEGORIES, auth_headers, cart_lines, product_data
from loadtests.helpers.response import error_code, extract_error_detail
from loadtests.helpers.state import BuyerState, SellerState

# Shared across users in one Locust process: the listings buyers compete for
_shared_product_ids: list[str] = []

_EXPECTED_CHECKOUT_REJECTIONS = {"insufficient_stock", "product_not_purchasable"}


def _ensure_products(client, count: int = 5, stock: int | None = None) -> list[str]:
    if _shared_product_ids:
        return _shared_product_ids
    for _ in range(count):
        resp = client.post("/products", json=product_data(stock=stock), headers=auth_headers("seller"), name="POST /products")
        if resp.status_code == 201:
            _shared_product_ids.append(resp.json()["id"])
    return _shared_product_ids


def _checkout(client, state: BuyerState, payload: dict) -> None:
    with client.post(
        "/checkout",
        json=payload,
        headers=auth_headers("buyer"),
        catch_response=True,
        name="POST /checkout",
    ) as resp:
        if resp.status_code == 201:
            state.order_ids.append(resp.json()["order_id"])
        elif resp.status_code == 409 and error_code(resp) in _EXPECTED_CHECKOUT_REJECTIONS:
            state.sold_out += 1
            resp.success()
        else:
            resp.failure(f"Checkout failed: {resp.status_code}: {extract_error_detail(resp)}")


class BuyerJourney(SequentialTaskSet):
    """Browse -> Checkout -> Order history -> Order detail."""

    def on_start(self):
        self.state = BuyerState()
        self.product_ids = _ensure_products(self.client)

    @task
    def browse(self):
        with self.client.get(
            "/products",
            params={"category": random.choice(CATEGORIES)},
            catch_response=True,
            name="GET /products",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Browse failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def checkout(self):
        if not self.product_ids:
            self.interrupt()
        _checkout(self.client, self.state, cart_lines(self.product_ids))

    @task
    def order_history(self):
        with self.client.get(
            "/orders/mine",
            headers=auth_headers("buyer"),
            catch_response=True,
            name="GET /orders/mine",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Order history failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def order_detail(self):
        if not self.state.order_ids:
            self.interrupt()
        with self.client.get(
            f"/orders/{self.state.order_ids[-1]}",
            headers=auth_headers("buyer"),
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Order detail failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class SellerJourney(SequentialTaskSet):
    """List product -> Read paid queue -> Ship one paid order."""

    def on_start(self):
        self.state = SellerState()

    @task
    def list_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            headers=auth_headers("seller"),
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_ids.append(resp.json()["id"])
            else:
                resp.failure(f"List product failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def ship_paid_order(self):
        resp = self.client.get(
            "/orders/seller-queue",
            params={"status": "paid"},
            headers=auth_headers("seller"),
            name="GET /orders/seller-queue",
        )
        if resp.status_code != 200 or not resp.json():
            self.interrupt()

        order_id = random.choice(resp.json())["order_id"]
        with self.client.put(
            f"/orders/{order_id}/ship",
            headers=auth_headers("seller"),
            catch_response=True,
            name="PUT /orders/{id}/ship",
        ) as ship:
            if ship.status_code == 200:
                self.state.shipped_order_ids.append(order_id)
            elif ship.status_code == 409:
                # Another seller session shipped it first
                ship.success()
            else:
                ship.failure(f"Ship failed: {ship.status_code}: {extract_error_detail(ship)}")

    @task
    def done(self):
        self.interrupt()


class CheckoutUser(HttpUser):
    """Buyers checking out against a shared pool of listings."""

    tasks = [BuyerJourney]
    wait_time = between(0.5, 2.0)


class SellerUser(HttpUser):
    """Sellers listing products and working through their paid queue."""

    tasks = [SellerJourney]
    wait_time = between(1.0, 3.0)


class LastUnitsContentionUser(HttpUser):
    """Many buyers racing for one unit each of a nearly sold-out listing.

    The number of successful checkouts must never exceed the listed stock.
    """

    wait_time = between(0.0, 0.2)

    def on_start(self):
        self.state = BuyerState()
        self.product_ids = _ensure_products(self.client, count=1, stock=10)

    @task
    def grab_last_unit(self):
        if not self.product_ids:
            return
        _checkout(self.client, self.state, {"items": [{"product_id": self.product_ids[0], "quantity": 1}]})
