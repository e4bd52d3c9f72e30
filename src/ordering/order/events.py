"""Domain events for the Order aggregate.

Events are persisted to the event store, replayed through @apply to rebuild
Order state, and drive the buyer and seller read views.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A buyer's cart was priced, its stock reserved, and the order recorded."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item dicts, prices in minor units
    total_amount = Integer(required=True)
    status = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentConfirmed:
    """Payment for a pending order was confirmed."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    """A seller handed the order over for delivery."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    shipped_by = Identifier(required=True)
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCompleted:
    """Delivery was confirmed; the order is closed."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    completed_at = DateTime(required=True)
