"""FastAPI endpoints for the Ordering context."""

from uuid import UUID

from fastapi import APIRouter, Query, Response
from protean.utils.globals import current_domain

from storefront.dependencies import ContextDep, PageDep
from storefront.ordering.api.schemas import AddToCartRequest, CartResponse, OrderResponse, PlaceOrderRequest
from storefront.ordering.cart import queries as cart_queries
from storefront.ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.ordering.order import queries as order_queries
from storefront.ordering.order.cancellation import CancelOrder
from storefront.ordering.order.fulfillment import DeleteOrder, UpdateOrderStatus, UpdatePaymentStatus
from storefront.ordering.order.placement import PlaceOrder, order_line
from storefront.shared.schemas import CountResponse, PageResponse

cart_router = APIRouter(prefix="/api/cart", tags=["cart"])
order_router = APIRouter(prefix="/api/orders", tags=["orders"])


def _id(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


# --- Cart endpoints ---


@cart_router.get("", response_model=PageResponse[CartResponse])
def list_carts(page: PageDep) -> PageResponse[CartResponse]:
    return PageResponse[CartResponse].from_page(cart_queries.list_carts(page), CartResponse.from_view)


@cart_router.get("/count", response_model=CountResponse)
def count_cart_items_by_query(user_id: UUID = Query(..., alias="userId")) -> CountResponse:
    return CountResponse(count=cart_queries.count_items(str(user_id)))


@cart_router.get("/user/{user_id}", response_model=CartResponse)
def get_cart(user_id: UUID) -> CartResponse:
    return CartResponse.from_view(cart_queries.get_cart(str(user_id)))


@cart_router.get("/user/{user_id}/count", response_model=CountResponse)
def count_cart_items(user_id: UUID) -> CountResponse:
    return CountResponse(count=cart_queries.count_items(str(user_id)))


@cart_router.post("/user/{user_id}/items", response_model=CartResponse)
def add_to_cart(user_id: UUID, body: AddToCartRequest, context: ContextDep) -> CartResponse:
    command = AddToCart(user_id=str(user_id), product_id=str(body.product_id), quantity=body.quantity)
    return CartResponse.from_view(current_domain.process(command, asynchronous=False))


@cart_router.put("/user/{user_id}/items/{item_id}", response_model=CartResponse)
def update_cart_item(user_id: UUID, item_id: UUID, context: ContextDep, quantity: int = Query(...)) -> CartResponse:
    command = UpdateCartQuantity(user_id=str(user_id), item_id=str(item_id), quantity=quantity)
    return CartResponse.from_view(current_domain.process(command, asynchronous=False))


@cart_router.delete("/user/{user_id}/items/{item_id}", response_model=CartResponse)
def remove_cart_item(user_id: UUID, item_id: UUID, context: ContextDep) -> CartResponse:
    command = RemoveFromCart(user_id=str(user_id), item_id=str(item_id))
    return CartResponse.from_view(current_domain.process(command, asynchronous=False))


@cart_router.delete("/user/{user_id}", response_model=CartResponse)
def clear_cart(user_id: UUID, context: ContextDep) -> CartResponse:
    return CartResponse.from_view(current_domain.process(ClearCart(user_id=str(user_id)), asynchronous=False))


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
def place_order(body: PlaceOrderRequest, context: ContextDep) -> OrderResponse:
    command = PlaceOrder(
        user_id=str(body.user_id),
        lines=[order_line(line.product_id, line.quantity) for line in body.items],
        shipping_cost=body.shipping_cost,
        shipping_method_id=_id(body.shipping_method_id),
        payment_method_id=_id(body.payment_method_id),
        customer_notes=body.customer_notes,
    )
    return OrderResponse.from_order(current_domain.process(command, asynchronous=False))


@order_router.get("", response_model=PageResponse[OrderResponse])
def list_orders(page: PageDep) -> PageResponse[OrderResponse]:
    return PageResponse[OrderResponse].from_page(order_queries.list_orders(page), OrderResponse.from_order)


@order_router.get("/count", response_model=CountResponse)
def count_orders() -> CountResponse:
    return CountResponse(count=order_queries.count_orders())


@order_router.get("/count/status/{status}", response_model=CountResponse)
def count_orders_by_status(status: str) -> CountResponse:
    return CountResponse(count=order_queries.count_orders(status))


@order_router.get("/number/{order_number}", response_model=OrderResponse)
def get_order_by_number(order_number: str) -> OrderResponse:
    return OrderResponse.from_order(order_queries.get_by_number(order_number))


@order_router.get("/user/{user_id}", response_model=PageResponse[OrderResponse])
def list_orders_for_user(user_id: UUID, page: PageDep) -> PageResponse[OrderResponse]:
    result = order_queries.list_for_user(str(user_id), page)
    return PageResponse[OrderResponse].from_page(result, OrderResponse.from_order)


@order_router.get("/status/{status}", response_model=PageResponse[OrderResponse])
def list_orders_by_status(status: str, page: PageDep) -> PageResponse[OrderResponse]:
    result = order_queries.list_by_status(status, page)
    return PageResponse[OrderResponse].from_page(result, OrderResponse.from_order)


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: UUID) -> OrderResponse:
    return OrderResponse.from_order(order_queries.get_order(str(order_id)))


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: UUID, context: ContextDep, status: str = Query(...)) -> OrderResponse:
    command = UpdateOrderStatus(order_id=str(order_id), status=status)
    return OrderResponse.from_order(current_domain.process(command, asynchronous=False))


@order_router.patch("/{order_id}/payment-status", response_model=OrderResponse)
def update_payment_status(
    order_id: UUID,
    context: ContextDep,
    payment_status: str = Query(..., alias="paymentStatus"),
) -> OrderResponse:
    command = UpdatePaymentStatus(order_id=str(order_id), payment_status=payment_status)
    return OrderResponse.from_order(current_domain.process(command, asynchronous=False))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(order_id: UUID, context: ContextDep) -> OrderResponse:
    return OrderResponse.from_order(current_domain.process(CancelOrder(order_id=str(order_id)), asynchronous=False))


@order_router.delete("/{order_id}", status_code=204)
def delete_order(order_id: UUID, context: ContextDep) -> Response:
    current_domain.process(DeleteOrder(order_id=str(order_id)), asynchronous=False)
    return Response(status_code=204)
