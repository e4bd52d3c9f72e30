"""Marketplace error taxonomy.

Every error a buyer or seller can run into carries a stable ``code``. The code
is the key into the localised message catalogue (``shared.messages``) and is
what API clients branch on; ``params`` fill the message placeholders.
"""


class MarketplaceError(Exception):
    """Base class for all business errors raised by the marketplace."""

    code = "marketplace_error"

    def __init__(self, **params):
        self.params = params
        details = ", ".join(f"{key}={value}" for key, value in params.items())
        super().__init__(f"{self.code}({details})" if details else self.code)


class CheckoutError(MarketplaceError):
    """Raised when a cart cannot be turned into an order."""

    code = "checkout_error"


class FulfillmentError(MarketplaceError):
    """Raised when an order cannot move along its fulfillment lifecycle."""

    code = "fulfillment_error"


class EmptyCart(CheckoutError):
    code = "empty_cart"


class ProductNotFound(CheckoutError):
    code = "product_not_found"

    def __init__(self, product_id):
        self.product_id = str(product_id)
        super().__init__(product_id=self.product_id)


class ProductNotPurchasable(CheckoutError):
    """The product exists but is not listed as active."""

    code = "product_not_purchasable"

    def __init__(self, product_id):
        self.product_id = str(product_id)
        super().__init__(product_id=self.product_id)


class InsufficientStock(CheckoutError):
    code = "insufficient_stock"

    def __init__(self, product_id):
        self.product_id = str(product_id)
        super().__init__(product_id=self.product_id)


class Unavailable(CheckoutError, FulfillmentError):
    """A backing store failed; nothing was committed on the caller's behalf."""

    code = "unavailable"


class Unauthenticated(MarketplaceError):
    code = "unauthenticated"


class Unauthorized(MarketplaceError):
    code = "unauthorized"


class OrderNotFound(FulfillmentError):
    code = "order_not_found"

    def __init__(self, order_id):
        self.order_id = str(order_id)
        super().__init__(order_id=self.order_id)


class InvalidTransition(FulfillmentError):
    code = "invalid_transition"

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(current=current, target=target)
