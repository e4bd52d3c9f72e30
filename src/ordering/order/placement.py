"""Order placement: command and handler.

The order row and all of its items are one aggregate, persisted by a single
repository write inside the handler's unit of work.
"""

import json

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus


@ordering.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item dicts
    total_amount = Integer(required=True, min_value=0)
    status = String(max_length=20, default=OrderStatus.PAID.value)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items

        order = Order.place(
            buyer_id=command.buyer_id,
            items_data=items_data,
            total_amount=command.total_amount,
            status=command.status or OrderStatus.PAID.value,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
