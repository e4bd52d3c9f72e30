"""FastAPI endpoints for the public catalogue and seller listing management."""

from fastapi import APIRouter, Depends, Query
from identity.dependencies import current_user
from identity.provider import User

from catalogue.api.schemas import ChangePriceRequest, ListProductRequest, ProductResponse
from catalogue.listing import browse_products, change_price, list_product, product_detail, products_for_seller
from catalogue.store import Product

product_router = APIRouter(prefix="/products", tags=["products"])


def _to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        title=product.title,
        description=product.description,
        price=product.price,
        stock=product.stock,
        seller_id=product.seller_id,
        status=product.status,
        category=product.category,
        images=list(product.images),
        created_at=product.created_at,
    )


@product_router.get("", response_model=list[ProductResponse])
async def search_products(
    q: str | None = None,
    category: str | None = None,
    limit: int | None = Query(default=None, ge=1, le=100),
) -> list[ProductResponse]:
    return [_to_response(product) for product in browse_products(query=q, category=category, limit=limit)]


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: ListProductRequest, user: User = Depends(current_user)) -> ProductResponse:
    product = list_product(
        actor_id=user.id,
        title=body.title,
        price=body.price,
        stock=body.stock,
        description=body.description,
        category=body.category,
        images=body.images,
    )
    return _to_response(product)


@product_router.get("/mine", response_model=list[ProductResponse])
async def my_products(user: User = Depends(current_user)) -> list[ProductResponse]:
    return [_to_response(product) for product in products_for_seller(user.id)]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _to_response(product_detail(product_id))


@product_router.put("/{product_id}/price", response_model=ProductResponse)
async def update_price(product_id: str, body: ChangePriceRequest, user: User = Depends(current_user)) -> ProductResponse:
    return _to_response(change_price(actor_id=user.id, product_id=product_id, new_price=body.price))
