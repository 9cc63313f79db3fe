"""Read-side cart operations."""

from protean.utils.globals import current_domain

from storefront.ordering.cart.cart import ShoppingCart
from storefront.ordering.cart.items import get_or_create_cart
from storefront.ordering.cart.views import CartView, build_cart_view
from storefront.shared.pagination import Page, PageRequest


def get_cart(user_id) -> CartView:
    """Cart detail; an empty cart is created on first access."""
    return build_cart_view(get_or_create_cart(user_id))


def count_items(user_id) -> int:
    return current_domain.repository_for(ShoppingCart).count_items(user_id)


def list_carts(request: PageRequest) -> Page[CartView]:
    return current_domain.repository_for(ShoppingCart).list_all(request).map(build_cart_view)
