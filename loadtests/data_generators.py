"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request schemas.
Prices are integer minor currency units.
"""

import random

from faker import Faker

fake = Faker()

CATEGORIES = ["Electronics", "Furniture", "Fashion", "Books", "Sports", "Other"]

DEMO_TOKENS = {
    "buyer": "demo-buyer-token",
    "seller": "demo-seller-token",
    "admin": "demo-admin-token",
}


def auth_headers(role: str) -> dict:
    return {"Authorization": f"Bearer {DEMO_TOKENS[role]}"}


def product_data(stock: int | None = None) -> dict:
    """Generate a ListProductRequest payload."""
    return {
        "title": fake.catch_phrase()[:255],
        "description": fake.sentence(nb_words=12),
        "price": random.randint(100, 50_000),
        "stock": stock if stock is not None else random.randint(5, 50),
        "category": random.choice(CATEGORIES),
        "images": [fake.image_url()],
    }


def cart_lines(product_ids: list[str], max_lines: int = 3) -> dict:
    """Generate a CheckoutRequest payload over a random subset of products."""
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, max_lines)))
    return {"items": [{"product_id": pid, "quantity": random.randint(1, 3)} for pid in chosen]}
