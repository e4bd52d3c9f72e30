import os
from pathlib import Path
from uuid import uuid4

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config overlay before any domain is initialised.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


# ---------------------------------------------------------------------------
# Collaborators: a fresh catalog store and identity provider per test
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def catalog():
    from catalogue.store import InMemoryCatalogStore, reset_catalog_store, set_catalog_store

    store = InMemoryCatalogStore()
    set_catalog_store(store)
    yield store
    reset_catalog_store()


@pytest.fixture(autouse=True)
def identity():
    from identity.provider import FakeIdentityProvider, reset_identity_provider, set_identity_provider

    provider = FakeIdentityProvider()
    set_identity_provider(provider)
    yield provider
    reset_identity_provider()


@pytest.fixture()
def buyer(identity):
    from identity.provider import Role

    identity.register("buyer-1", "buyer@test.com", Role.BUYER, token="buyer-token")
    return "buyer-1"


@pytest.fixture()
def seller(identity):
    from identity.provider import Role

    identity.register("seller-1", "seller@test.com", Role.SELLER, token="seller-token")
    return "seller-1"


@pytest.fixture()
def other_seller(identity):
    from identity.provider import Role

    identity.register("seller-2", "other.seller@test.com", Role.SELLER, token="other-seller-token")
    return "seller-2"


@pytest.fixture()
def admin(identity):
    from identity.provider import Role

    identity.register("admin-1", "admin@test.com", Role.ADMIN, token="admin-token")
    return "admin-1"


@pytest.fixture()
def make_product(catalog):
    """Factory that lists a product straight into the catalog store."""
    from catalogue.store import Product

    def _make(
        price=1000,
        stock=5,
        seller_id="seller-1",
        status="active",
        title="Vintage Camera",
        product_id=None,
        category=None,
        description=None,
    ):
        return catalog.add_product(
            Product(
                id=product_id or str(uuid4()),
                title=title,
                price=price,
                stock=stock,
                seller_id=seller_id,
                status=status,
                category=category,
                description=description,
            )
        )

    return _make
