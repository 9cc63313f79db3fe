"""Join-fetch read model for a cart and its lines."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.ordering.cart.cart import ShoppingCart, cart_totals
from storefront.shared.money import ZERO, line_total

UNKNOWN_PRODUCT = "Unknown Product"


@dataclass(frozen=True)
class CartLineView:
    id: str
    product_id: str
    product_name: str
    product_image: str | None
    unit_price: Decimal
    quantity: int
    subtotal: Decimal
    in_stock: bool
    available_stock: int
    added_at: datetime


@dataclass(frozen=True)
class CartView:
    id: str
    user_id: str
    items: list[CartLineView]
    total_items: int
    total_value: Decimal
    created_at: datetime
    updated_at: datetime


def build_cart_view(cart: ShoppingCart) -> CartView:
    """Resolve every line's product in one query and compute totals from it."""
    products = current_domain.repository_for(Product).get_many(item.product_id for item in cart.items)

    lines = []
    for item in cart.items:
        product = products.get(item.product_id)
        price = product.price if product is not None else ZERO
        available = product.stock_quantity if product is not None else 0
        lines.append(
            CartLineView(
                id=item.id,
                product_id=item.product_id,
                product_name=product.name if product is not None else UNKNOWN_PRODUCT,
                product_image=product.primary_image if product is not None else None,
                unit_price=price,
                quantity=item.quantity,
                subtotal=line_total(price, item.quantity),
                in_stock=product is not None and product.is_active and available >= item.quantity,
                available_stock=available,
                added_at=item.added_at,
            )
        )

    totals = cart_totals(cart.items, products)
    return CartView(
        id=cart.id,
        user_id=cart.user_id,
        items=lines,
        total_items=totals.total_items,
        total_value=totals.total_value,
        created_at=cart.created_at,
        updated_at=cart.updated_at,
    )
