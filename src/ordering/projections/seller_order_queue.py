"""Seller order queue: one row per (order, seller) pair.

Each seller sees only their own share of an order: the quantity and subtotal
of the items they sold, from the prices captured at checkout.
"""

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
class SellerOrderQueue:
    entry_id = Identifier(identifier=True, required=True)  # "{order_id}:{seller_id}"
    seller_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    status = String(required=True)
    quantity = Integer(default=0)
    subtotal = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()


@ordering.projector(projector_for=SellerOrderQueue, aggregates=[Order])
class SellerOrderQueueProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        items = json.loads(event.items) if isinstance(event.items, str) else []

        shares = {}
        for item in items:
            seller_id = str(item["seller_id"])
            quantity, subtotal = shares.get(seller_id, (0, 0))
            shares[seller_id] = (
                quantity + int(item["quantity"]),
                subtotal + int(item["quantity"]) * int(item["price_at_purchase"]),
            )

        repo = current_domain.repository_for(SellerOrderQueue)
        for seller_id, (quantity, subtotal) in shares.items():
            repo.add(
                SellerOrderQueue(
                    entry_id=f"{event.order_id}:{seller_id}",
                    seller_id=seller_id,
                    order_id=event.order_id,
                    buyer_id=event.buyer_id,
                    status=event.status,
                    quantity=quantity,
                    subtotal=subtotal,
                    created_at=event.placed_at,
                    updated_at=event.placed_at,
                )
            )

    def _update_status(self, order_id, status, updated_at):
        repo = current_domain.repository_for(SellerOrderQueue)
        entries = repo._dao.query.filter(order_id=str(order_id)).all().items
        for entry in entries:
            entry.status = status
            entry.updated_at = updated_at
            repo.add(entry)

    @on(PaymentConfirmed)
    def on_payment_confirmed(self, event):
        self._update_status(event.order_id, OrderStatus.PAID.value, event.confirmed_at)

    @on(OrderShipped)
    def on_order_shipped(self, event):
        self._update_status(event.order_id, OrderStatus.SHIPPED.value, event.shipped_at)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        self._update_status(event.order_id, OrderStatus.COMPLETED.value, event.completed_at)


def queue_for_seller(seller_id, status=None):
    """Return a seller's queue entries, newest first, optionally filtered by status."""
    filters = {"seller_id": str(seller_id)}
    if status:
        filters["status"] = status
    records = current_domain.repository_for(SellerOrderQueue)._dao.query.filter(**filters).all().items
    return sorted(records, key=lambda record: record.created_at, reverse=True)
