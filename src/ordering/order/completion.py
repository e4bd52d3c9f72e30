"""Order completion: command and handler."""

from protean import handle
from protean.fields import Identifier

from ordering.domain import ordering
from ordering.order.lookup import load_order
from ordering.order.order import Order


@ordering.command(part_of="Order")
class CompleteOrder:
    """Close a shipped order once delivery has been confirmed."""

    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class CompleteOrderHandler:
    @handle(CompleteOrder)
    def complete_order(self, command):
        repo, order = load_order(command.order_id)
        order.complete()
        repo.add(order)
