import pytest
from catalogue.api import product_router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import checkout_router, order_router
from ordering.domain import ordering
from shared.api import install_domain_context, register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    install_domain_context(app, {"/checkout": ordering, "/orders": ordering})
    register_error_handlers(app)
    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(product_router)
    return TestClient(app)
