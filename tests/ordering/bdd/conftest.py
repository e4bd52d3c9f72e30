"""Shared BDD fixtures for checkout and fulfillment."""

import pytest


@pytest.fixture()
def context():
    """Outcome of the When steps: placed order ids and the last captured error."""
    return {"order_ids": [], "error": None}
