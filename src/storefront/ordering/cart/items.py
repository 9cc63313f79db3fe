"""Cart item management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.identity.accounts import require_user
from storefront.ordering.cart.cart import ShoppingCart, ensure_positive_quantity
from storefront.ordering.cart.views import CartView, build_cart_view
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


def get_or_create_cart(user_id) -> ShoppingCart:
    """The user's cart, created on first use. The user must exist."""
    repo = current_domain.repository_for(ShoppingCart)
    cart = repo.get_for_user(user_id)
    if cart is None:
        require_user(user_id)
        cart = repo.add(ShoppingCart.create(user_id=str(user_id)))
    return cart


def ensure_orderable(product: Product, quantity: int) -> None:
    if not product.is_active:
        raise ValidationError({"product_id": ["Product is not available"]})
    if not product.can_be_ordered(quantity):
        raise ValidationError({"quantity": [f"Insufficient stock. Available: {product.stock_quantity}"]})


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command: AddToCart) -> CartView:
        ensure_positive_quantity(command.quantity)

        product = current_domain.repository_for(Product).get(command.product_id)
        cart = get_or_create_cart(command.user_id)

        existing = cart.item_for_product(product.id)
        ensure_orderable(product, command.quantity + (existing.quantity if existing else 0))

        item = cart.add_item(product_id=product.id, quantity=command.quantity)
        current_domain.repository_for(ShoppingCart).add(cart)

        logger.info(
            "cart_item_added",
            cart_id=cart.id,
            item_id=item.id,
            product_id=product.id,
            quantity=command.quantity,
        )
        return build_cart_view(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command: UpdateCartQuantity) -> CartView:
        ensure_positive_quantity(command.quantity)

        cart = self._cart_owning(command.user_id, command.item_id)
        item = cart.find_item(command.item_id)
        product = current_domain.repository_for(Product).get(item.product_id)
        ensure_orderable(product, command.quantity)

        cart.update_item_quantity(command.item_id, command.quantity)
        current_domain.repository_for(ShoppingCart).add(cart)

        logger.info("cart_quantity_updated", cart_id=cart.id, item_id=command.item_id, quantity=command.quantity)
        return build_cart_view(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command: RemoveFromCart) -> CartView:
        cart = self._cart_owning(command.user_id, command.item_id)
        cart.remove_item(command.item_id)
        current_domain.repository_for(ShoppingCart).add(cart)

        logger.info("cart_item_removed", cart_id=cart.id, item_id=command.item_id)
        return build_cart_view(cart)

    @handle(ClearCart)
    def clear_cart(self, command: ClearCart) -> CartView:
        cart = get_or_create_cart(command.user_id)
        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)

        logger.info("cart_cleared", cart_id=cart.id)
        return build_cart_view(cart)

    @staticmethod
    def _cart_owning(user_id, item_id) -> ShoppingCart:
        cart = get_or_create_cart(user_id)
        if cart.find_item(item_id) is None:
            if current_domain.repository_for(ShoppingCart).cart_id_for_item(item_id) is not None:
                raise ValidationError({"item_id": ["Item does not belong to user's cart"]})
            raise ObjectNotFoundError({"item_id": [f"Cart item not found: {item_id}"]})
        return cart
