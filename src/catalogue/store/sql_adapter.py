"""Relational catalog store built on SQLAlchemy Core.

Stock is decremented with a single conditional statement:

    UPDATE catalog_products
       SET stock = stock - :amount
     WHERE id = :id AND status = 'active' AND stock >= :amount

The database serialises concurrent updates of the same row, so the guard is
evaluated against the row as it is at write time. A CHECK constraint keeps
``stock >= 0`` even for writes that bypass this adapter.
"""

from contextlib import contextmanager

import structlog
from shared.errors import ProductNotFound
from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    insert,
    or_,
    select,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from catalogue.store.port import (
    CatalogStore,
    DecrementFailure,
    DecrementResult,
    Product,
    ProductStatus,
    StoreUnavailable,
)

logger = structlog.get_logger(__name__)

metadata = MetaData()

products = Table(
    "catalog_products",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("title", String(255), nullable=False),
    Column("description", Text),
    Column("price", Integer, nullable=False),
    Column("stock", Integer, nullable=False),
    Column("seller_id", String(64), nullable=False, index=True),
    Column("status", String(16), nullable=False, default=ProductStatus.ACTIVE.value),
    Column("category", String(64), index=True),
    Column("images", JSON, nullable=False, default=list),
    Column("created_at", DateTime(timezone=True), nullable=False),
    CheckConstraint("stock >= 0", name="ck_catalog_products_stock_non_negative"),
    CheckConstraint("price >= 0", name="ck_catalog_products_price_non_negative"),
)


def _to_product(row) -> Product:
    return Product(
        id=row["id"],
        title=row["title"],
        price=row["price"],
        stock=row["stock"],
        seller_id=row["seller_id"],
        status=row["status"],
        description=row["description"],
        category=row["category"],
        images=tuple(row["images"] or ()),
        created_at=row["created_at"],
    )


class SqlCatalogStore(CatalogStore):
    """Catalog store backed by any SQLAlchemy-supported database."""

    def __init__(self, database_uri: str | None = None, engine: Engine | None = None) -> None:
        if engine is None and database_uri is None:
            raise ValueError("Either database_uri or engine is required")
        self.engine = engine if engine is not None else create_engine(database_uri)

    def create_schema(self) -> None:
        metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        metadata.drop_all(self.engine)

    @contextmanager
    def _guard(self, operation: str):
        """Translate driver errors into StoreUnavailable."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("catalog_store.failed", operation=operation, error=exc.__class__.__name__)
            raise StoreUnavailable(f"{operation} failed") from exc

    def add_product(self, product: Product) -> Product:
        with self._guard("add_product"), self.engine.begin() as conn:
            conn.execute(
                insert(products).values(
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
            )
        return product

    def get_products_by_ids(self, product_ids: list[str]) -> list[Product]:
        ids = list(dict.fromkeys(product_ids))
        if not ids:
            return []
        with self._guard("get_products_by_ids"), self.engine.connect() as conn:
            rows = conn.execute(select(products).where(products.c.id.in_(ids))).mappings().all()
        return [_to_product(row) for row in rows]

    def get_product(self, product_id: str) -> Product:
        with self._guard("get_product"), self.engine.connect() as conn:
            row = conn.execute(select(products).where(products.c.id == product_id)).mappings().first()
        if row is None:
            raise ProductNotFound(product_id)
        return _to_product(row)

    def search_products(
        self,
        query: str | None = None,
        category: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        statement = select(products).where(products.c.status == ProductStatus.ACTIVE.value)
        if query and query.strip():
            needle = query.strip()
            statement = statement.where(
                or_(
                    products.c.title.icontains(needle, autoescape=True),
                    products.c.description.icontains(needle, autoescape=True),
                )
            )
        if category:
            statement = statement.where(products.c.category == category)
        statement = statement.order_by(products.c.created_at.desc(), products.c.id)
        if limit is not None:
            statement = statement.limit(limit)

        with self._guard("search_products"), self.engine.connect() as conn:
            rows = conn.execute(statement).mappings().all()
        return [_to_product(row) for row in rows]

    def products_for_seller(self, seller_id: str) -> list[Product]:
        with self._guard("products_for_seller"), self.engine.connect() as conn:
            rows = (
                conn.execute(select(products).where(products.c.seller_id == seller_id).order_by(products.c.title))
                .mappings()
                .all()
            )
        return [_to_product(row) for row in rows]

    def conditional_decrement_stock(self, product_id: str, amount: int) -> DecrementResult:
        if amount <= 0:
            raise ValueError("amount must be positive")

        with self._guard("conditional_decrement_stock"), self.engine.begin() as conn:
            result = conn.execute(
                update(products)
                .where(
                    products.c.id == product_id,
                    products.c.status == ProductStatus.ACTIVE.value,
                    products.c.stock >= amount,
                )
                .values(stock=products.c.stock - amount)
            )
            current = conn.execute(
                select(products.c.stock, products.c.status).where(products.c.id == product_id)
            ).first()

        if result.rowcount == 1:
            return DecrementResult(success=True, remaining_stock=current.stock if current else None)
        if current is None:
            return DecrementResult(success=False, failure=DecrementFailure.NOT_FOUND)
        if current.status != ProductStatus.ACTIVE.value:
            return DecrementResult(success=False, failure=DecrementFailure.NOT_ACTIVE)
        return DecrementResult(
            success=False,
            failure=DecrementFailure.INSUFFICIENT_STOCK,
            remaining_stock=current.stock,
        )

    def restock(self, product_id: str, amount: int) -> None:
        if amount <= 0:
            raise ValueError("amount must be positive")

        with self._guard("restock"), self.engine.begin() as conn:
            result = conn.execute(
                update(products).where(products.c.id == product_id).values(stock=products.c.stock + amount)
            )
        if result.rowcount == 0:
            raise ProductNotFound(product_id)

    def update_price(self, product_id: str, price: int) -> Product:
        with self._guard("update_price"), self.engine.begin() as conn:
            result = conn.execute(update(products).where(products.c.id == product_id).values(price=price))
            if result.rowcount == 0:
                raise ProductNotFound(product_id)
            row = conn.execute(select(products).where(products.c.id == product_id)).mappings().one()
        return _to_product(row)

    def delete_product(self, product_id: str) -> None:
        with self._guard("delete_product"), self.engine.begin() as conn:
            result = conn.execute(delete(products).where(products.c.id == product_id))
        if result.rowcount == 0:
            raise ProductNotFound(product_id)
