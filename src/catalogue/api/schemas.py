"""Pydantic request/response schemas for the Catalogue API.

Prices are integer minor currency units (e.g. cents).
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ListProductRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: int = Field(ge=0)
    stock: int = Field(ge=0, default=1)
    category: str | None = Field(default=None, max_length=64)
    images: list[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Hand-thrown mug",
                    "description": "Stoneware, 350 ml",
                    "price": 1000,
                    "stock": 5,
                    "category": "home",
                    "images": ["https://images.example.com/mug.jpg"],
                }
            ]
        }
    }


class ChangePriceRequest(BaseModel):
    price: int = Field(ge=0)


class ProductResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    price: int
    stock: int
    seller_id: str
    status: str
    category: str | None = None
    images: list[str] = []
    created_at: datetime | None = None
