"""Wishlist management: commands, handler and read model."""

from dataclasses import dataclass

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.product_management import require_product
from storefront.domain import storefront
from storefront.exceptions import DuplicateResourceError
from storefront.identity.accounts import require_user
from storefront.ordering.cart.cart import ShoppingCart
from storefront.ordering.cart.items import ensure_orderable, get_or_create_cart
from storefront.ordering.cart.views import CartView, build_cart_view
from storefront.shared.pagination import Page, PageRequest
from storefront.utils.logging import get_logger
from storefront.wishlist.item import WishlistItem

logger = get_logger(__name__)


@storefront.command(part_of="WishlistItem")
class AddToWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="WishlistItem")
class RemoveFromWishlist:
    item_id = Identifier(required=True)


@storefront.command(part_of="WishlistItem")
class RemoveProductFromWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="WishlistItem")
class ClearWishlist:
    user_id = Identifier(required=True)


@storefront.command(part_of="WishlistItem")
class MoveToCart:
    """Put one unit of the wished product in the cart and drop the wishlist entry."""

    item_id = Identifier(required=True)


@dataclass(frozen=True)
class WishlistEntryView:
    item: WishlistItem
    product: Product | None


def _views(items: list[WishlistItem]) -> list[WishlistEntryView]:
    products = current_domain.repository_for(Product).get_many(item.product_id for item in items)
    return [WishlistEntryView(item=item, product=products.get(item.product_id)) for item in items]


def _wishlist():
    return current_domain.repository_for(WishlistItem)


@storefront.command_handler(part_of=WishlistItem)
class WishlistHandler:
    @handle(AddToWishlist)
    def add_item(self, command: AddToWishlist) -> WishlistEntryView:
        require_user(command.user_id)
        product = require_product(command.product_id)
        if _wishlist().get_for(command.user_id, command.product_id) is not None:
            raise DuplicateResourceError({"product_id": ["Product is already in the wishlist"]})
        item = _wishlist().add(WishlistItem.save_for_later(command.user_id, command.product_id))

        logger.info("wishlist_item_added", user_id=command.user_id, product_id=command.product_id)
        return WishlistEntryView(item=item, product=product)

    @handle(RemoveFromWishlist)
    def remove_item(self, command: RemoveFromWishlist) -> None:
        if not _wishlist().delete(command.item_id):
            raise ObjectNotFoundError({"item_id": [f"Wishlist item not found: {command.item_id}"]})

        logger.info("wishlist_item_removed", item_id=command.item_id)

    @handle(RemoveProductFromWishlist)
    def remove_product(self, command: RemoveProductFromWishlist) -> None:
        item = _wishlist().get_for(command.user_id, command.product_id)
        if item is None:
            raise ObjectNotFoundError({"product_id": ["Product is not in the wishlist"]})
        _wishlist().delete(item.id)

        logger.info("wishlist_item_removed", item_id=item.id)

    @handle(ClearWishlist)
    def clear(self, command: ClearWishlist) -> int:
        require_user(command.user_id)
        removed = _wishlist().clear(command.user_id)

        logger.info("wishlist_cleared", user_id=command.user_id, removed=removed)
        return removed

    @handle(MoveToCart)
    def move_to_cart(self, command: MoveToCart) -> CartView:
        item = _wishlist().get(command.item_id)
        if item is None:
            raise ObjectNotFoundError({"item_id": [f"Wishlist item not found: {command.item_id}"]})

        product = require_product(item.product_id)
        cart = get_or_create_cart(item.user_id)
        existing = cart.item_for_product(product.id)
        ensure_orderable(product, 1 + (existing.quantity if existing else 0))

        cart.add_item(product_id=product.id, quantity=1)
        current_domain.repository_for(ShoppingCart).add(cart)
        _wishlist().delete(item.id)

        logger.info("wishlist_item_moved_to_cart", item_id=item.id, product_id=item.product_id, cart_id=cart.id)
        return build_cart_view(cart)


# --- Queries ---


def list_for_user(user_id) -> list[WishlistEntryView]:
    require_user(user_id)
    return _views(_wishlist().for_user(user_id))


def page_for_user(user_id, request: PageRequest) -> Page[WishlistEntryView]:
    require_user(user_id)
    page = _wishlist().page_for_user(user_id, request)
    return Page(
        content=_views(list(page.content)),
        page_number=page.page_number,
        page_size=page.page_size,
        total_elements=page.total_elements,
    )


def count_for_user(user_id) -> int:
    return _wishlist().count_for_user(user_id)


def contains(user_id, product_id) -> bool:
    return _wishlist().get_for(user_id, product_id) is not None
