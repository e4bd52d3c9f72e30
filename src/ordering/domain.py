"""Ordering bounded context: order placement and fulfillment.

Orders are event sourced. The checkout saga reserves catalog stock and then
persists the order; fulfillment moves an order along
pending -> paid -> shipped -> completed.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
