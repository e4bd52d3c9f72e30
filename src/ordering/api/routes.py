"""FastAPI routes for the Ordering domain: checkout and order fulfillment."""

from fastapi import APIRouter, Depends
from identity.dependencies import current_user
from identity.provider import Role, User
from protean.utils.globals import current_domain
from shared.errors import Unauthorized

from ordering.api.schemas import (
    BuyerOrderResponse,
    CheckoutRequest,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    SellerQueueEntryResponse,
    StatusResponse,
)
from ordering.checkout.saga import CheckoutSaga
from ordering.order.fulfillment import ShipOrder
from ordering.order.lookup import load_order
from ordering.projections.buyer_orders import orders_for_buyer
from ordering.projections.seller_order_queue import queue_for_seller

# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=OrderIdResponse)
async def checkout(body: CheckoutRequest, user: User = Depends(current_user)) -> OrderIdResponse:
    """Place an order for the buyer's submitted cart."""
    order_id = CheckoutSaga().place_order(
        buyer_id=user.id,
        lines=[line.model_dump() for line in body.items],
    )
    return OrderIdResponse(order_id=order_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("/mine", response_model=list[BuyerOrderResponse])
async def my_orders(user: User = Depends(current_user)) -> list[BuyerOrderResponse]:
    return [
        BuyerOrderResponse(
            order_id=str(record.order_id),
            status=record.status,
            total_amount=record.total_amount,
            item_count=record.item_count,
            created_at=record.created_at,
        )
        for record in orders_for_buyer(user.id)
    ]


@order_router.get("/seller-queue", response_model=list[SellerQueueEntryResponse])
async def seller_queue(status: str | None = None, user: User = Depends(current_user)) -> list[SellerQueueEntryResponse]:
    if user.role != Role.SELLER:
        raise Unauthorized()
    return [
        SellerQueueEntryResponse(
            order_id=str(entry.order_id),
            buyer_id=str(entry.buyer_id),
            status=entry.status,
            quantity=entry.quantity,
            subtotal=entry.subtotal,
            created_at=entry.created_at,
        )
        for entry in queue_for_seller(user.id, status=status)
    ]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user: User = Depends(current_user)) -> OrderResponse:
    """Order detail for its buyer, one of its sellers, or an admin."""
    _, order = load_order(order_id)
    if user.role != Role.ADMIN and str(order.buyer_id) != user.id and not order.is_sold_by(user.id):
        raise Unauthorized()

    return OrderResponse(
        order_id=str(order.id),
        buyer_id=str(order.buyer_id),
        status=order.status,
        total_amount=order.total_amount,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                seller_id=str(item.seller_id),
                title=item.title,
                quantity=item.quantity,
                price_at_purchase=item.price_at_purchase,
            )
            for item in order.items
        ],
        created_at=order.created_at,
    )


@order_router.put("/{order_id}/ship", response_model=StatusResponse)
async def ship_order(order_id: str, user: User = Depends(current_user)) -> StatusResponse:
    current_domain.process(ShipOrder(order_id=order_id, actor_id=user.id), asynchronous=False)
    return StatusResponse()
