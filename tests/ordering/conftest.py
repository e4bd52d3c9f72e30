import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def place(buyer):
    """Place an order through the checkout saga and return the loaded aggregate."""
    from ordering.checkout.saga import CheckoutSaga
    from ordering.order.order import Order
    from protean import current_domain

    def _place(*lines, buyer_id=buyer):
        order_id = CheckoutSaga().place_order(buyer_id, [{"product_id": pid, "quantity": qty} for pid, qty in lines])
        return current_domain.repository_for(Order).get(order_id)

    return _place
