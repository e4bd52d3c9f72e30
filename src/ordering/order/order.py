"""Order aggregate (Event Sourced).

An Order and its items are written together, in a single aggregate commit,
so an order can never exist without its items. Item prices are snapshots
taken at checkout and never change afterwards, and the order total always
equals the sum of ``price_at_purchase * quantity`` over its items.

State Machine:
    PENDING -> PAID -> SHIPPED -> COMPLETED
    One step at a time, never backwards.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import apply
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String
from shared.errors import InvalidTransition

from ordering.domain import ordering
from ordering.order.events import (
    OrderCompleted,
    OrderPlaced,
    OrderShipped,
    PaymentConfirmed,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    COMPLETED = "completed"


_NEXT_STATUS = {
    OrderStatus.PENDING: OrderStatus.PAID,
    OrderStatus.PAID: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.COMPLETED,
    OrderStatus.COMPLETED: None,  # Terminal
}

# Orders enter the ledger either awaiting payment or already paid
_INITIAL_STATUSES = {OrderStatus.PENDING, OrderStatus.PAID}


def order_total(items_data) -> int:
    """Sum of price-at-purchase times quantity over item dicts."""
    return sum(int(item["price_at_purchase"]) * int(item["quantity"]) for item in items_data)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A purchased product line.

    ``seller_id`` and ``title`` are captured with the price so the order stays
    readable, and shippable by its seller, after the listing is edited or removed.
    """

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    price_at_purchase = Integer(required=True, min_value=0)

    @property
    def subtotal(self):
        return self.price_at_purchase * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root (Event Sourced)
# ---------------------------------------------------------------------------
@ordering.aggregate(is_event_sourced=True)
class Order:
    buyer_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    total_amount = Integer(default=0, min_value=0)
    shipped_by = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, buyer_id, items_data, total_amount, status=OrderStatus.PAID.value):
        """Record a new order together with all of its items.

        Args:
            buyer_id: The buyer who checked out.
            items_data: List of dicts with product_id, seller_id, title,
                        quantity, price_at_purchase.
            total_amount: Total computed by the caller from the same prices;
                          must match the items exactly.
            status: Initial status, ``pending`` or ``paid``.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        try:
            initial = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status {status}"]}) from None
        if initial not in _INITIAL_STATUSES:
            raise ValidationError({"status": [f"Orders cannot be placed as {initial.value}"]})

        for item in items_data:
            if int(item["quantity"]) < 1:
                raise ValidationError({"quantity": ["Quantity must be at least 1"]})
            if int(item["price_at_purchase"]) < 0:
                raise ValidationError({"price_at_purchase": ["Price must not be negative"]})

        if order_total(items_data) != total_amount:
            raise ValidationError({"total_amount": ["Order total does not match its items"]})

        # Pre-generate item IDs for deterministic replay
        items_with_ids = [{**item, "id": str(uuid4())} for item in items_data]

        order = cls._create_new()
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                buyer_id=str(buyer_id),
                items=json.dumps(items_with_ids),
                total_amount=total_amount,
                status=initial.value,
                placed_at=datetime.now(UTC),
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def seller_ids(self):
        return {str(item.seller_id) for item in self.items}

    def is_sold_by(self, seller_id):
        return str(seller_id) in self.seller_ids

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if _NEXT_STATUS.get(current) != target_status:
            raise InvalidTransition(current=current.value, target=target_status.value)

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def confirm_payment(self):
        """Payment for a pending order was confirmed by the payment process."""
        self._assert_can_transition(OrderStatus.PAID)
        self.raise_(
            PaymentConfirmed(
                order_id=str(self.id),
                confirmed_at=datetime.now(UTC),
            )
        )

    def ship(self, shipped_by):
        """Hand a paid order over for delivery."""
        self._assert_can_transition(OrderStatus.SHIPPED)
        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                shipped_by=str(shipped_by),
                shipped_at=datetime.now(UTC),
            )
        )

    def complete(self):
        """Close a shipped order once delivery is confirmed."""
        self._assert_can_transition(OrderStatus.COMPLETED)
        self.raise_(
            OrderCompleted(
                order_id=str(self.id),
                completed_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # @apply methods rebuild state during event replay
    # -------------------------------------------------------------------
    @apply
    def _on_order_placed(self, event: OrderPlaced):
        self.id = event.order_id
        self.buyer_id = event.buyer_id
        self.status = event.status
        self.total_amount = event.total_amount
        self.created_at = event.placed_at
        self.updated_at = event.placed_at

        items_data = json.loads(event.items) if isinstance(event.items, str) else []
        self.items = [OrderItem(**item_data) for item_data in items_data]

    @apply
    def _on_payment_confirmed(self, event: PaymentConfirmed):
        self.status = OrderStatus.PAID.value
        self.updated_at = event.confirmed_at

    @apply
    def _on_order_shipped(self, event: OrderShipped):
        self.status = OrderStatus.SHIPPED.value
        self.shipped_by = event.shipped_by
        self.updated_at = event.shipped_at

    @apply
    def _on_order_completed(self, event: OrderCompleted):
        self.status = OrderStatus.COMPLETED.value
        self.updated_at = event.completed_at
