"""Application tests for the order lifecycle through the event store.

pending -> paid -> shipped -> completed, with state reconstructed from the
event store after every step.
"""

import json

import pytest
from ordering.order.completion import CompleteOrder
from ordering.order.fulfillment import ShipOrder
from ordering.order.order import Order, OrderStatus
from ordering.order.payment import ConfirmPayment
from ordering.order.placement import PlaceOrder
from ordering.projections.buyer_orders import orders_for_buyer
from protean import current_domain
from protean.exceptions import ValidationError
from shared.errors import InvalidTransition, OrderNotFound

ITEMS = [
    {"product_id": "prod-a", "seller_id": "seller-1", "title": "Mug", "quantity": 2, "price_at_purchase": 1000},
    {"product_id": "prod-b", "seller_id": "seller-2", "title": "Lamp", "quantity": 1, "price_at_purchase": 500},
]


def _place(status="pending", items=ITEMS, total=2500):
    return current_domain.process(
        PlaceOrder(buyer_id="buyer-1", items=json.dumps(items), total_amount=total, status=status),
        asynchronous=False,
    )


class TestPlaceOrderCommand:
    def test_order_and_items_persisted_together(self):
        order_id = _place(status="paid")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PAID.value
        assert len(order.items) == 2
        assert order.total_amount == 2500

    def test_status_defaults_to_paid(self):
        order_id = current_domain.process(
            PlaceOrder(buyer_id="buyer-1", items=json.dumps(ITEMS), total_amount=2500),
            asynchronous=False,
        )
        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.PAID.value

    def test_mismatched_total_persists_nothing(self):
        with pytest.raises(ValidationError):
            _place(total=1)

        assert orders_for_buyer("buyer-1") == []


class TestFullOrderLifecycle:
    def test_happy_path_to_completion(self, seller):
        repo = current_domain.repository_for(Order)
        order_id = _place()
        assert repo.get(order_id).status == OrderStatus.PENDING.value

        current_domain.process(ConfirmPayment(order_id=order_id), asynchronous=False)
        assert repo.get(order_id).status == OrderStatus.PAID.value

        current_domain.process(ShipOrder(order_id=order_id, actor_id=seller), asynchronous=False)
        assert repo.get(order_id).status == OrderStatus.SHIPPED.value

        current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)
        order = repo.get(order_id)
        assert order.status == OrderStatus.COMPLETED.value
        assert order.total_amount == 2500

    def test_confirm_payment_twice_is_invalid(self):
        order_id = _place()
        current_domain.process(ConfirmPayment(order_id=order_id), asynchronous=False)

        with pytest.raises(InvalidTransition):
            current_domain.process(ConfirmPayment(order_id=order_id), asynchronous=False)

    def test_complete_requires_shipped(self):
        order_id = _place(status="paid")

        with pytest.raises(InvalidTransition):
            current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)
        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.PAID.value

    @pytest.mark.parametrize("command_cls", [ConfirmPayment, CompleteOrder])
    def test_unknown_order(self, command_cls):
        with pytest.raises(OrderNotFound):
            current_domain.process(command_cls(order_id="missing"), asynchronous=False)
