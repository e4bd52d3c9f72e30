"""Seller-facing catalogue operations: listing products and editing prices."""

from uuid import uuid4

import structlog
from identity.provider import Role, get_identity_provider
from protean.exceptions import ValidationError
from shared.errors import ProductNotFound, Unauthorized

from catalogue.store import Product, ProductStatus, get_catalog_store

logger = structlog.get_logger(__name__)

_LISTING_ROLES = {Role.SELLER, Role.ADMIN}

# Order items snapshot the title into a column of this size
TITLE_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 64


def _require_lister(actor_id: str) -> Role:
    role = get_identity_provider().require_role(actor_id)
    if role not in _LISTING_ROLES:
        raise Unauthorized()
    return role


def _validate_amounts(price=None, stock=None) -> None:
    errors = {}
    if price is not None and (not isinstance(price, int) or price < 0):
        errors["price"] = ["Price must be a non-negative integer amount in minor units"]
    if stock is not None and (not isinstance(stock, int) or stock < 0):
        errors["stock"] = ["Stock must be a non-negative integer"]
    if errors:
        raise ValidationError(errors)


def list_product(
    actor_id: str,
    title: str,
    price: int,
    stock: int = 1,
    description: str | None = None,
    status: str = ProductStatus.ACTIVE.value,
    category: str | None = None,
    images: list[str] | None = None,
) -> Product:
    """Create a listing owned by the acting seller."""
    _require_lister(actor_id)
    if not title or not title.strip():
        raise ValidationError({"title": ["Title is required"]})
    if len(title.strip()) > TITLE_MAX_LENGTH:
        raise ValidationError({"title": [f"Title must be at most {TITLE_MAX_LENGTH} characters"]})
    if category and len(category) > CATEGORY_MAX_LENGTH:
        raise ValidationError({"category": [f"Category must be at most {CATEGORY_MAX_LENGTH} characters"]})
    _validate_amounts(price=price, stock=stock)
    if status not in {s.value for s in ProductStatus}:
        raise ValidationError({"status": [f"Unknown product status {status}"]})

    product = Product(
        id=str(uuid4()),
        title=title.strip(),
        price=price,
        stock=stock,
        seller_id=str(actor_id),
        status=status,
        description=description,
        category=category or None,
        images=tuple(images or ()),
    )
    get_catalog_store().add_product(product)
    logger.info("catalogue.product_listed", product_id=product.id, seller_id=product.seller_id)
    return product


def change_price(actor_id: str, product_id: str, new_price: int) -> Product:
    """Reprice a listing. Only its seller or an admin may do so."""
    role = _require_lister(actor_id)
    _validate_amounts(price=new_price)

    store = get_catalog_store()
    found = store.get_products_by_ids([product_id])
    if not found:
        raise ProductNotFound(product_id)
    if role != Role.ADMIN and found[0].seller_id != str(actor_id):
        raise Unauthorized()

    product = store.update_price(product_id, new_price)
    logger.info("catalogue.price_changed", product_id=product_id, price=new_price)
    return product


def products_for_seller(seller_id: str) -> list[Product]:
    return get_catalog_store().products_for_seller(str(seller_id))


def browse_products(query: str | None = None, category: str | None = None, limit: int | None = None) -> list[Product]:
    """Public catalogue: active listings matching a free-text query and category."""
    return get_catalog_store().search_products(query=query, category=category, limit=limit)


def product_detail(product_id: str) -> Product:
    """A single active listing. Drafts and sold listings are reported as not found."""
    product = get_catalog_store().get_product(product_id)
    if not product.is_purchasable:
        raise ProductNotFound(product_id)
    return product
