"""Cart lines as submitted at checkout.

The cart itself is owned by the buyer's client session; the server only sees
the lines it receives with a checkout request and never stores them.
"""

from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from shared.errors import EmptyCart

from ordering.domain import ordering


@ordering.value_object
class CartLine:
    """One product and how many units of it the buyer wants."""

    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


def _coerce(line) -> CartLine:
    if isinstance(line, CartLine):
        return line
    if isinstance(line, dict):
        product_id = line.get("product_id") or line.get("productId")
        quantity = line.get("quantity")
    else:
        product_id = getattr(line, "product_id", None)
        quantity = getattr(line, "quantity", None)

    if not product_id:
        raise ValidationError({"product_id": ["Each cart line needs a product id"]})
    # Integer fields would coerce "2" and 1.5, so the raw type is checked first
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError({"quantity": [f"Quantity for {product_id} must be a positive integer"]})
    return CartLine(product_id=str(product_id), quantity=quantity)


def normalize_cart(lines) -> list[CartLine]:
    """Validate submitted lines and merge repeated products.

    Raises EmptyCart when nothing was submitted. Order of first appearance is
    preserved.
    """
    if not lines:
        raise EmptyCart()

    merged: dict[str, int] = {}
    for line in lines:
        cart_line = _coerce(line)
        merged[cart_line.product_id] = merged.get(cart_line.product_id, 0) + cart_line.quantity

    return [CartLine(product_id=pid, quantity=qty) for pid, qty in merged.items()]
