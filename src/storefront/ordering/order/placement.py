"""Order placement: command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Decimal, Identifier, List, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import DuplicateResourceError
from storefront.identity.accounts import require_user
from storefront.ordering.cart.cart import ShoppingCart, ensure_positive_quantity
from storefront.ordering.order.order import CustomerOrder, generate_order_number
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# A colliding order number is regenerated once before placement gives up
ORDER_NUMBER_ATTEMPTS = 2


@storefront.command(part_of="CustomerOrder")
class PlaceOrder:
    """Place an order for `lines`, or for the user's cart when no lines are given.

    Each line is a ``{"product_id": ..., "quantity": ...}`` mapping.
    """

    user_id = Identifier(required=True)
    lines = List(content_type=dict)
    shipping_cost = Decimal()
    shipping_method_id = Identifier()
    payment_method_id = Identifier()
    customer_notes = Text()


def order_line(product_id, quantity: int) -> dict:
    return {"product_id": str(product_id), "quantity": quantity}


def merge_lines(lines: list[dict]) -> dict[str, int]:
    """Combine repeated products into one quantity, keeping first-seen order."""
    merged: dict[str, int] = {}
    for line in lines:
        product_id = str(line["product_id"])
        quantity = ensure_positive_quantity(line.get("quantity"))
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


def insufficient_stock(name: str, available: int) -> ValidationError:
    return ValidationError({"quantity": [f"Insufficient stock for product: {name}. Available: {available}"]})


def allocate_order_number() -> str:
    repo = current_domain.repository_for(CustomerOrder)
    for _ in range(ORDER_NUMBER_ATTEMPTS):
        number = generate_order_number()
        if not repo.number_taken(number):
            return number
        logger.warning("order_number_collision", order_number=number)
    raise DuplicateResourceError({"order_number": [f"Order number already exists: {number}"]})


@storefront.command_handler(part_of=CustomerOrder)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command: PlaceOrder) -> CustomerOrder:
        """Validate every line, snapshot prices, write the order and take the stock.

        Runs in one unit of work: if any line fails, nothing is written and
        no stock moves.
        """
        requested = merge_lines(command.lines or [])
        if command.shipping_cost is not None and command.shipping_cost < 0:
            raise ValidationError({"shipping_cost": ["Shipping cost must not be negative"]})

        require_user(command.user_id)
        products_repo = current_domain.repository_for(Product)
        carts_repo = current_domain.repository_for(ShoppingCart)

        cart = None
        if not requested:
            cart = carts_repo.get_for_user(command.user_id)
            if cart is None or cart.is_empty:
                raise ValidationError({"items": ["Cannot place an order from an empty cart"]})
            requested = merge_lines([order_line(item.product_id, item.quantity) for item in cart.items])

        products = products_repo.get_many(requested.keys())
        lines = []
        for product_id, quantity in requested.items():
            product = products.get(product_id)
            if product is None:
                raise ObjectNotFoundError({"product_id": [f"Product not found: {product_id}"]})
            if not product.is_active:
                raise ValidationError({"product_id": [f"Product is not available: {product.name}"]})
            if product.stock_quantity < quantity:
                raise insufficient_stock(product.name, product.stock_quantity)
            lines.append((product, quantity))

        order = CustomerOrder.place(
            user_id=command.user_id,
            order_number=allocate_order_number(),
            lines=lines,
            shipping_cost=command.shipping_cost,
            shipping_method_id=command.shipping_method_id,
            payment_method_id=command.payment_method_id,
            customer_notes=command.customer_notes,
        )
        current_domain.repository_for(CustomerOrder).add(order)

        for product, quantity in lines:
            if not products_repo.decrement_stock(product.id, quantity):
                # Stock moved between the check and the guarded update
                current = products_repo.get_or_none(product.id)
                raise insufficient_stock(product.name, current.stock_quantity if current else 0)

        if cart is not None:
            cart.clear()
            carts_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            total=str(order.total),
            from_cart=cart is not None,
        )
        return order
