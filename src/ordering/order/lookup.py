"""Loading orders for command handlers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from shared.errors import OrderNotFound

from ordering.order.order import Order


def load_order(order_id):
    """Return the repository and the order, or raise OrderNotFound."""
    repo = current_domain.repository_for(Order)
    try:
        order = repo.get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound(order_id) from None
    return repo, order
