"""Tests for the Order state machine: pending -> paid -> shipped -> completed."""

import pytest
from ordering.order.events import OrderCompleted, OrderShipped, PaymentConfirmed
from ordering.order.order import Order, OrderStatus
from shared.errors import InvalidTransition


def _order_at_state(target_status):
    """Create an order and advance it to the desired state."""
    initial = OrderStatus.PENDING if target_status == OrderStatus.PENDING else OrderStatus.PAID
    order = Order.place(
        buyer_id="buyer-1",
        items_data=[
            {"product_id": "prod-a", "seller_id": "seller-1", "title": "Mug", "quantity": 1, "price_at_purchase": 1000}
        ],
        total_amount=1000,
        status=initial.value,
    )
    order._events.clear()
    if target_status in (OrderStatus.PENDING, OrderStatus.PAID):
        return order

    order.ship(shipped_by="seller-1")
    order._events.clear()
    if target_status == OrderStatus.SHIPPED:
        return order

    order.complete()
    order._events.clear()
    return order


class TestValidTransitions:
    def test_pending_to_paid(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.confirm_payment()
        assert order.status == OrderStatus.PAID.value
        assert isinstance(order._events[-1], PaymentConfirmed)

    def test_paid_to_shipped(self):
        order = _order_at_state(OrderStatus.PAID)
        order.ship(shipped_by="seller-1")
        assert order.status == OrderStatus.SHIPPED.value
        assert order.shipped_by == "seller-1"
        event = order._events[-1]
        assert isinstance(event, OrderShipped)
        assert event.shipped_by == "seller-1"

    def test_shipped_to_completed(self):
        order = _order_at_state(OrderStatus.SHIPPED)
        order.complete()
        assert order.status == OrderStatus.COMPLETED.value
        assert isinstance(order._events[-1], OrderCompleted)

    def test_transition_updates_timestamp(self):
        order = _order_at_state(OrderStatus.PAID)
        placed_at = order.updated_at
        order.ship(shipped_by="seller-1")
        assert order.updated_at >= placed_at


class TestInvalidTransitions:
    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PENDING, OrderStatus.SHIPPED, OrderStatus.COMPLETED],
    )
    def test_ship_only_from_paid(self, status):
        order = _order_at_state(status)
        with pytest.raises(InvalidTransition) as exc_info:
            order.ship(shipped_by="seller-1")
        assert exc_info.value.current == status.value
        assert exc_info.value.target == OrderStatus.SHIPPED.value
        assert order.status == status.value
        assert order._events == []

    @pytest.mark.parametrize("status", [OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.COMPLETED])
    def test_confirm_payment_only_from_pending(self, status):
        order = _order_at_state(status)
        with pytest.raises(InvalidTransition):
            order.confirm_payment()

    def test_pending_cannot_skip_to_completed(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(InvalidTransition):
            order.complete()

    def test_paid_cannot_skip_to_completed(self):
        order = _order_at_state(OrderStatus.PAID)
        with pytest.raises(InvalidTransition):
            order.complete()

    def test_completed_is_terminal(self):
        order = _order_at_state(OrderStatus.COMPLETED)
        for transition in (order.confirm_payment, order.complete, lambda: order.ship("seller-1")):
            with pytest.raises(InvalidTransition):
                transition()
        assert order.status == OrderStatus.COMPLETED.value
