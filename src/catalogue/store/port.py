"""Catalog store port (abstract interface).

Defines the contract that every product store adapter must implement.
Checkout only ever mutates stock through ``conditional_decrement_stock`` and
its compensating ``restock``; there is no operation that writes an absolute
stock value computed outside the store.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class ProductStatus(Enum):
    ACTIVE = "active"
    SOLD = "sold"
    DRAFT = "draft"


class DecrementFailure(Enum):
    NOT_FOUND = "not_found"
    NOT_ACTIVE = "not_active"
    INSUFFICIENT_STOCK = "insufficient_stock"


class StoreUnavailable(Exception):
    """The backing store could not be reached or rejected the operation."""


@dataclass(frozen=True)
class Product:
    """A catalog listing. Prices are integer minor currency units."""

    id: str
    title: str
    price: int
    stock: int
    seller_id: str
    status: str = ProductStatus.ACTIVE.value
    description: str | None = None
    category: str | None = None
    images: tuple[str, ...] = ()
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_purchasable(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value


@dataclass(frozen=True)
class DecrementResult:
    """Outcome of a conditional stock decrement."""

    success: bool
    failure: DecrementFailure | None = None
    remaining_stock: int | None = None


class CatalogStore(ABC):
    """Abstract product store interface."""

    @abstractmethod
    def add_product(self, product: Product) -> Product:
        """Insert a new product listing."""
        ...

    @abstractmethod
    def get_products_by_ids(self, product_ids: list[str]) -> list[Product]:
        """Fetch every existing product among ``product_ids`` in one read."""
        ...

    @abstractmethod
    def get_product(self, product_id: str) -> Product:
        """Fetch one product, whatever its status. Raises ProductNotFound."""
        ...

    @abstractmethod
    def search_products(
        self,
        query: str | None = None,
        category: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        """Active products, newest first.

        ``query`` matches title or description case-insensitively; ``category``
        must match exactly.
        """
        ...

    @abstractmethod
    def products_for_seller(self, seller_id: str) -> list[Product]:
        """Return all listings owned by a seller."""
        ...

    @abstractmethod
    def conditional_decrement_stock(self, product_id: str, amount: int) -> DecrementResult:
        """Atomically decrement stock by ``amount`` only if stock >= amount.

        The product must also be active. Never leaves stock negative.
        """
        ...

    @abstractmethod
    def restock(self, product_id: str, amount: int) -> None:
        """Atomically add ``amount`` back to stock (compensation for a decrement)."""
        ...

    @abstractmethod
    def update_price(self, product_id: str, price: int) -> Product:
        """Change a product's price. Existing orders keep their snapshot."""
        ...

    @abstractmethod
    def delete_product(self, product_id: str) -> None:
        """Remove a listing. Order history must not depend on it."""
        ...
