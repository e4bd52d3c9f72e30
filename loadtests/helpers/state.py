"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps the ids it created so follow-up requests can
reference them.
"""

from dataclasses import dataclass, field


@dataclass
class BuyerState:
    """Orders a simulated buyer has placed and how many checkouts hit empty stock."""

    order_ids: list[str] = field(default_factory=list)
    sold_out: int = 0


@dataclass
class SellerState:
    """Listings created by a simulated seller and the orders it has shipped."""

    product_ids: list[str] = field(default_factory=list)
    shipped_order_ids: list[str] = field(default_factory=list)
