"""Order fulfillment: shipping a paid order.

Only a seller who sold at least one item in the order may ship it. Ownership
is checked against the seller captured on each order item, so it still holds
after a listing is deleted.
"""

import structlog
from identity.provider import Role, get_identity_provider
from protean import handle
from protean.fields import Identifier
from shared.errors import Unauthorized

from ordering.domain import ordering
from ordering.order.lookup import load_order
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ShipOrder:
    """Mark a paid order as shipped on behalf of one of its sellers."""

    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class ShipOrderHandler:
    @handle(ShipOrder)
    def ship_order(self, command):
        role = get_identity_provider().require_role(command.actor_id)
        repo, order = load_order(command.order_id)

        if role != Role.SELLER or not order.is_sold_by(command.actor_id):
            logger.warning(
                "fulfillment.ship_denied",
                order_id=str(command.order_id),
                actor_id=str(command.actor_id),
                role=role.value,
            )
            raise Unauthorized()

        order.ship(shipped_by=command.actor_id)
        repo.add(order)
        logger.info("fulfillment.order_shipped", order_id=str(order.id), actor_id=str(command.actor_id))
