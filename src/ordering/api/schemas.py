"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Amounts are integer minor currency units.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class CheckoutRequest(BaseModel):
    items: list[CartLineSchema]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": "prod-001", "quantity": 2},
                        {"product_id": "prod-002", "quantity": 1},
                    ]
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderItemResponse(BaseModel):
    product_id: str
    seller_id: str
    title: str | None = None
    quantity: int
    price_at_purchase: int


class OrderResponse(BaseModel):
    order_id: str
    buyer_id: str
    status: str
    total_amount: int
    items: list[OrderItemResponse]
    created_at: datetime | None = None


class BuyerOrderResponse(BaseModel):
    order_id: str
    status: str
    total_amount: int
    item_count: int
    created_at: datetime | None = None


class SellerQueueEntryResponse(BaseModel):
    order_id: str
    buyer_id: str
    status: str
    quantity: int
    subtotal: int
    created_at: datetime | None = None
