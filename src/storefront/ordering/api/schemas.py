"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from storefront.ordering.cart.views import CartLineView, CartView
from storefront.ordering.order.order import CustomerOrder, OrderItem
from storefront.shared.schemas import ApiModel

# --- Cart Schemas ---


class AddToCartRequest(ApiModel):
    model_config = {"json_schema_extra": {"examples": [{"productId": "5f0c7c1e-8a57-4f55-9b0e-3c2f6f1e9a10", "quantity": 2}]}}

    product_id: UUID
    quantity: int = Field(1, ge=1)


class CartItemResponse(ApiModel):
    id: UUID
    product_id: UUID
    product_name: str
    product_image: str | None = None
    unit_price: float
    quantity: int
    subtotal: float
    in_stock: bool
    available_stock: int
    added_at: datetime

    @classmethod
    def from_line(cls, line: CartLineView) -> CartItemResponse:
        return cls(
            id=line.id,
            product_id=line.product_id,
            product_name=line.product_name,
            product_image=line.product_image,
            unit_price=float(line.unit_price),
            quantity=line.quantity,
            subtotal=float(line.subtotal),
            in_stock=line.in_stock,
            available_stock=line.available_stock,
            added_at=line.added_at,
        )


class CartResponse(ApiModel):
    id: UUID
    user_id: UUID
    items: list[CartItemResponse]
    total_items: int
    total_value: float
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: CartView) -> CartResponse:
        return cls(
            id=view.id,
            user_id=view.user_id,
            items=[CartItemResponse.from_line(line) for line in view.items],
            total_items=view.total_items,
            total_value=float(view.total_value),
            created_at=view.created_at,
            updated_at=view.updated_at,
        )


# --- Order Schemas ---


class OrderLineRequest(ApiModel):
    product_id: UUID
    quantity: int = Field(..., ge=1)


class PlaceOrderRequest(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "userId": "0b6f7a8e-3d7c-4b4b-8f3e-2a6d1c9e5f01",
                    "items": [{"productId": "5f0c7c1e-8a57-4f55-9b0e-3c2f6f1e9a10", "quantity": 2}],
                    "shippingCost": 4.99,
                    "customerNotes": "Leave at the front desk",
                },
                {"userId": "0b6f7a8e-3d7c-4b4b-8f3e-2a6d1c9e5f01"},
            ]
        }
    }

    user_id: UUID
    items: list[OrderLineRequest] = Field(default_factory=list)
    shipping_cost: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    shipping_method_id: UUID | None = None
    payment_method_id: UUID | None = None
    customer_notes: str | None = Field(None, max_length=1000)


class OrderItemResponse(ApiModel):
    id: UUID
    product_id: UUID
    product_name: str
    product_sku: str
    unit_price: float
    quantity: int
    total_price: float

    @classmethod
    def from_item(cls, item: OrderItem) -> OrderItemResponse:
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            product_sku=item.product_sku,
            unit_price=float(item.unit_price),
            quantity=item.quantity,
            total_price=float(item.total_price),
        )


class OrderResponse(ApiModel):
    id: UUID
    user_id: UUID
    order_number: str
    status: str
    payment_status: str
    shipping_method_id: UUID | None = None
    payment_method_id: UUID | None = None
    subtotal: float
    shipping_cost: float
    total: float
    item_count: int
    customer_notes: str | None = None
    items: list[OrderItemResponse]
    created_at: datetime
    updated_at: datetime
    cancelled_at: datetime | None = None

    @classmethod
    def from_order(cls, order: CustomerOrder) -> OrderResponse:
        return cls(
            id=order.id,
            user_id=order.user_id,
            order_number=order.order_number,
            status=order.status,
            payment_status=order.payment_status,
            shipping_method_id=order.shipping_method_id,
            payment_method_id=order.payment_method_id,
            subtotal=float(order.subtotal),
            shipping_cost=float(order.shipping_cost),
            total=float(order.total),
            item_count=order.item_count,
            customer_notes=order.customer_notes,
            items=[OrderItemResponse.from_item(item) for item in order.items],
            created_at=order.created_at,
            updated_at=order.updated_at,
            cancelled_at=order.cancelled_at,
        )
