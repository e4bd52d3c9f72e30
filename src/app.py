"""Marketplace FastAPI application.

Checkout and order fulfillment run synchronously per request. Requests under
/checkout and /orders are wrapped in the ordering domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the domain.toml overlay.
import os

from catalogue.api import product_router
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.demo import register_demo_users
from ordering.api.routes import checkout_router, order_router
from ordering.domain import ordering
from shared.api import install_domain_context, register_error_handlers

ordering.init()

# Fixed-token demo accounts (buyer, seller, admin) for local runs and load tests
if os.getenv("MARKETPLACE_DEMO", "").lower() in {"1", "true", "yes"}:
    register_demo_users()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Marketplace API",
    description="Marketplace checkout, order fulfillment and seller listings",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_domain_context(
    app,
    {
        "/checkout": ordering,
        "/orders": ordering,
    },
)
register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(product_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ordering": {"name": ordering.name},
            },
        }
    )
