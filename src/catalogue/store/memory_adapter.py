"""In-process catalog store for development and testing.

All stock mutations run under a single lock, which makes the check and the
decrement one atomic step for every thread sharing the store.

Like the fake payment gateway, it can be told to fail so that callers'
failure paths can be exercised:

    store.configure(fail_on={"conditional_decrement_stock"})
"""

import threading
from dataclasses import replace

from shared.errors import ProductNotFound

from catalogue.store.port import (
    CatalogStore,
    DecrementFailure,
    DecrementResult,
    Product,
    StoreUnavailable,
)


class InMemoryCatalogStore(CatalogStore):
    """Catalog store backed by a dict, serialised by a lock."""

    def __init__(self) -> None:
        self._products: dict[str, Product] = {}
        self._lock = threading.Lock()
        self.fail_on: set[str] = set()
        self.failures_remaining: int | None = None
        self.calls: list[dict] = []

    def configure(self, fail_on=(), times: int | None = None) -> None:
        """Make the named operations raise StoreUnavailable.

        ``times`` limits how many calls fail before the store recovers;
        None keeps failing until reconfigured.
        """
        self.fail_on = set(fail_on)
        self.failures_remaining = times

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if method not in self.fail_on:
            return
        if self.failures_remaining is None:
            raise StoreUnavailable(f"{method} failed")
        if self.failures_remaining > 0:
            self.failures_remaining -= 1
            raise StoreUnavailable(f"{method} failed")

    def add_product(self, product: Product) -> Product:
        self._record("add_product", product_id=product.id)
        if product.stock < 0:
            raise ValueError("stock must not be negative")
        with self._lock:
            self._products[product.id] = product
        return product

    def get_products_by_ids(self, product_ids: list[str]) -> list[Product]:
        self._record("get_products_by_ids", product_ids=list(product_ids))
        with self._lock:
            return [self._products[pid] for pid in dict.fromkeys(product_ids) if pid in self._products]

    def get_product(self, product_id: str) -> Product:
        self._record("get_product", product_id=product_id)
        with self._lock:
            product = self._products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def search_products(
        self,
        query: str | None = None,
        category: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        self._record("search_products", query=query, category=category)
        needle = query.strip().casefold() if query else ""
        with self._lock:
            # Reversed first so equal timestamps still list the latest insert first
            candidates = list(reversed(self._products.values()))

        matches = [
            product
            for product in sorted(candidates, key=lambda p: p.created_at, reverse=True)
            if product.is_purchasable
            and (not category or product.category == category)
            and (
                not needle
                or needle in product.title.casefold()
                or needle in (product.description or "").casefold()
            )
        ]
        return matches[:limit] if limit is not None else matches

    def products_for_seller(self, seller_id: str) -> list[Product]:
        self._record("products_for_seller", seller_id=seller_id)
        with self._lock:
            return [p for p in self._products.values() if p.seller_id == seller_id]

    def conditional_decrement_stock(self, product_id: str, amount: int) -> DecrementResult:
        self._record("conditional_decrement_stock", product_id=product_id, amount=amount)
        if amount <= 0:
            raise ValueError("amount must be positive")
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                return DecrementResult(success=False, failure=DecrementFailure.NOT_FOUND)
            if not product.is_purchasable:
                return DecrementResult(success=False, failure=DecrementFailure.NOT_ACTIVE)
            if product.stock < amount:
                return DecrementResult(
                    success=False,
                    failure=DecrementFailure.INSUFFICIENT_STOCK,
                    remaining_stock=product.stock,
                )
            updated = replace(product, stock=product.stock - amount)
            self._products[product_id] = updated
            return DecrementResult(success=True, remaining_stock=updated.stock)

    def restock(self, product_id: str, amount: int) -> None:
        self._record("restock", product_id=product_id, amount=amount)
        if amount <= 0:
            raise ValueError("amount must be positive")
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            self._products[product_id] = replace(product, stock=product.stock + amount)

    def update_price(self, product_id: str, price: int) -> Product:
        self._record("update_price", product_id=product_id, price=price)
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            updated = replace(product, price=price)
            self._products[product_id] = updated
            return updated

    def delete_product(self, product_id: str) -> None:
        self._record("delete_product", product_id=product_id)
        with self._lock:
            if self._products.pop(product_id, None) is None:
                raise ProductNotFound(product_id)
