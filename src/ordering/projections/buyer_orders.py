"""Buyer order history: one row per order, newest first when listed."""

import json

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import (
    OrderCompleted,
    OrderPlaced,
    OrderShipped,
    PaymentConfirmed,
)
from ordering.order.order import Order, OrderStatus


@ordering.projection
class BuyerOrderHistory:
    order_id = Identifier(identifier=True, required=True)
    buyer_id = Identifier(required=True)
    status = String(required=True)
    total_amount = Integer(default=0)
    item_count = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()


@ordering.projector(projector_for=BuyerOrderHistory, aggregates=[Order])
class BuyerOrderHistoryProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        items = json.loads(event.items) if isinstance(event.items, str) else []
        current_domain.repository_for(BuyerOrderHistory).add(
            BuyerOrderHistory(
                order_id=event.order_id,
                buyer_id=event.buyer_id,
                status=event.status,
                total_amount=event.total_amount,
                item_count=sum(int(item["quantity"]) for item in items),
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    def _update_status(self, order_id, status, updated_at):
        repo = current_domain.repository_for(BuyerOrderHistory)
        record = repo.get(order_id)
        record.status = status
        record.updated_at = updated_at
        repo.add(record)

    @on(PaymentConfirmed)
    def on_payment_confirmed(self, event):
        self._update_status(event.order_id, OrderStatus.PAID.value, event.confirmed_at)

    @on(OrderShipped)
    def on_order_shipped(self, event):
        self._update_status(event.order_id, OrderStatus.SHIPPED.value, event.shipped_at)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        self._update_status(event.order_id, OrderStatus.COMPLETED.value, event.completed_at)


def orders_for_buyer(buyer_id):
    """Return a buyer's orders, newest first."""
    records = current_domain.repository_for(BuyerOrderHistory)._dao.query.filter(buyer_id=str(buyer_id)).all().items
    return sorted(records, key=lambda record: record.created_at, reverse=True)
