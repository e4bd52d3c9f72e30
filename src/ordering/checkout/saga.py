"""Checkout saga: turns a submitted cart into a paid order.

Flow:
    1. Validate the cart lines (EmptyCart before touching any store)
    2. Read every referenced product in one catalog call
    3. Pre-check availability and stock, price the cart from that read
    4. Reserve stock with one conditional decrement per product,
       in ascending product-id order
    5. Persist the Order with all of its items (PlaceOrder)
    6. On any failure after step 4 began, restock what was reserved

The pre-check in step 3 is optimistic only. The conditional decrement in
step 4 is what prevents overselling when checkouts race for the same stock.
A successful checkout raises OrderPlaced, which refreshes the buyer order
history and seller order queue views.
"""

import json
import os
import time

import structlog
from catalogue.store import (
    CatalogStore,
    DecrementFailure,
    StoreUnavailable,
    get_catalog_store,
)
from protean.utils.globals import current_domain
from shared.errors import (
    InsufficientStock,
    ProductNotFound,
    ProductNotPurchasable,
    Unavailable,
)

from ordering.checkout.cart import CartLine, normalize_cart
from ordering.order.order import OrderStatus
from ordering.order.placement import PlaceOrder

logger = structlog.get_logger(__name__)

COMPENSATION_ATTEMPTS = int(os.getenv("CHECKOUT_COMPENSATION_ATTEMPTS", "3"))
COMPENSATION_BACKOFF = float(os.getenv("CHECKOUT_COMPENSATION_BACKOFF", "0.05"))


class CheckoutSaga:
    """Coordinates the catalog store and the order ledger for one checkout."""

    def __init__(
        self,
        catalog: CatalogStore | None = None,
        compensation_attempts: int = COMPENSATION_ATTEMPTS,
        compensation_backoff: float = COMPENSATION_BACKOFF,
    ) -> None:
        self._catalog = catalog
        self.compensation_attempts = max(compensation_attempts, 1)
        self.compensation_backoff = compensation_backoff

    @property
    def catalog(self) -> CatalogStore:
        return self._catalog if self._catalog is not None else get_catalog_store()

    def place_order(self, buyer_id, lines) -> str:
        """Place an order for ``lines`` and return its id.

        Raises EmptyCart, ProductNotFound, ProductNotPurchasable,
        InsufficientStock or Unavailable. When an error is raised, no order
        exists and every reserved unit of stock has been returned.
        """
        cart = normalize_cart(lines)
        log = logger.bind(buyer_id=str(buyer_id))

        products = self._load_products(cart)
        items_data = self._price(cart, products)
        total_amount = sum(item["price_at_purchase"] * item["quantity"] for item in items_data)

        reserved = self._reserve(cart, log)

        try:
            order_id = current_domain.process(
                PlaceOrder(
                    buyer_id=str(buyer_id),
                    items=json.dumps(items_data),
                    total_amount=total_amount,
                    status=OrderStatus.PAID.value,
                ),
                asynchronous=False,
            )
        except Exception as exc:
            log.error("checkout.persist_failed", error=exc.__class__.__name__)
            self._release(reserved, log)
            raise Unavailable() from exc

        log.info("checkout.placed", order_id=order_id, total_amount=total_amount, lines=len(cart))
        return order_id

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def _load_products(self, cart: list[CartLine]):
        try:
            found = self.catalog.get_products_by_ids([line.product_id for line in cart])
        except StoreUnavailable as exc:
            logger.error("checkout.catalog_unavailable", step="read")
            raise Unavailable() from exc
        return {product.id: product for product in found}

    def _price(self, cart: list[CartLine], products) -> list[dict]:
        items_data = []
        for line in cart:
            product = products.get(line.product_id)
            if product is None:
                raise ProductNotFound(line.product_id)
            if not product.is_purchasable:
                raise ProductNotPurchasable(line.product_id)
            if product.stock < line.quantity:
                raise InsufficientStock(line.product_id)

            items_data.append(
                {
                    "product_id": product.id,
                    "seller_id": product.seller_id,
                    "title": product.title,
                    "quantity": line.quantity,
                    "price_at_purchase": product.price,
                }
            )
        return items_data

    def _reserve(self, cart: list[CartLine], log) -> list[CartLine]:
        reserved: list[CartLine] = []
        for line in sorted(cart, key=lambda cart_line: cart_line.product_id):
            try:
                result = self.catalog.conditional_decrement_stock(line.product_id, line.quantity)
            except StoreUnavailable as exc:
                log.error("checkout.catalog_unavailable", step="reserve", product_id=line.product_id)
                self._release(reserved, log)
                raise Unavailable() from exc

            if not result.success:
                log.info(
                    "checkout.reservation_rejected",
                    product_id=line.product_id,
                    quantity=line.quantity,
                    reason=result.failure.value if result.failure else None,
                )
                if self._release(reserved, log):
                    # Stock is still held for a checkout that will not happen
                    raise Unavailable()
                if result.failure == DecrementFailure.NOT_FOUND:
                    raise ProductNotFound(line.product_id)
                if result.failure == DecrementFailure.NOT_ACTIVE:
                    raise ProductNotPurchasable(line.product_id)
                raise InsufficientStock(line.product_id)

            reserved.append(line)
            log.debug("checkout.reserved", product_id=line.product_id, quantity=line.quantity)
        return reserved

    # -------------------------------------------------------------------
    # Compensation
    # -------------------------------------------------------------------
    def _release(self, reserved: list[CartLine], log) -> list[CartLine]:
        """Return reserved stock, retrying each restock. Returns lines that could not be restored."""
        unrestored = []
        for line in reserved:
            if not self._restock_with_retry(line, log):
                unrestored.append(line)
        if reserved:
            log.info("checkout.compensated", restored=len(reserved) - len(unrestored), failed=len(unrestored))
        return unrestored

    def _restock_with_retry(self, line: CartLine, log) -> bool:
        for attempt in range(1, self.compensation_attempts + 1):
            try:
                self.catalog.restock(line.product_id, line.quantity)
                return True
            except ProductNotFound:
                log.warning("checkout.restock_skipped", product_id=line.product_id, reason="product deleted")
                return True
            except StoreUnavailable:
                log.warning("checkout.restock_retry", product_id=line.product_id, attempt=attempt)
                if attempt < self.compensation_attempts:
                    time.sleep(self.compensation_backoff * attempt)

        log.critical(
            "checkout.restock_failed",
            product_id=line.product_id,
            quantity=line.quantity,
            attempts=self.compensation_attempts,
        )
        return False


def place_order(buyer_id, lines) -> str:
    """Place an order through a saga bound to the configured catalog store."""
    return CheckoutSaga().place_order(buyer_id, lines)
