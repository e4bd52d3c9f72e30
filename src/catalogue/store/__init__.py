"""Catalog store factory.

Provides get_catalog_store() / set_catalog_store() to swap implementations:
- SqlCatalogStore when CATALOG_DATABASE_URL is set
- InMemoryCatalogStore otherwise (development and tests)
"""

import os

from catalogue.store.memory_adapter import InMemoryCatalogStore
from catalogue.store.port import (
    CatalogStore,
    DecrementFailure,
    DecrementResult,
    Product,
    ProductStatus,
    StoreUnavailable,
)

__all__ = [
    "CatalogStore",
    "DecrementFailure",
    "DecrementResult",
    "InMemoryCatalogStore",
    "Product",
    "ProductStatus",
    "StoreUnavailable",
    "get_catalog_store",
    "reset_catalog_store",
    "set_catalog_store",
]

_current_store: CatalogStore | None = None


def get_catalog_store() -> CatalogStore:
    """Return the current catalog store, creating the configured default on first use."""
    global _current_store
    if _current_store is None:
        database_uri = os.getenv("CATALOG_DATABASE_URL")
        if database_uri:
            from catalogue.store.sql_adapter import SqlCatalogStore

            _current_store = SqlCatalogStore(database_uri=database_uri)
        else:
            _current_store = InMemoryCatalogStore()
    return _current_store


def set_catalog_store(store: CatalogStore) -> None:
    """Override the active catalog store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_catalog_store() -> None:
    """Reset to the configured default store."""
    global _current_store
    _current_store = None
