"""Order payment: command and handler.

Checkout places orders as already paid. Orders placed as pending are moved
to paid here once an external payment process confirms them.
"""

from protean import handle
from protean.fields import Identifier

from ordering.domain import ordering
from ordering.order.lookup import load_order
from ordering.order.order import Order


@ordering.command(part_of="Order")
class ConfirmPayment:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        repo, order = load_order(command.order_id)
        order.confirm_payment()
        repo.add(order)
