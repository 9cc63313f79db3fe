"""Order cancellation: command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.ordering.order.order import CustomerOrder
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="CustomerOrder")
class CancelOrder:
    order_id = Identifier(required=True)


def cancel_and_restock(order: CustomerOrder) -> None:
    """Cancel the order and give its quantities back to the products that still exist."""
    order.cancel()
    current_domain.repository_for(CustomerOrder).add(order)
    products = current_domain.repository_for(Product)
    for item in order.items:
        products.increment_stock(item.product_id, item.quantity)


@storefront.command_handler(part_of=CustomerOrder)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command: CancelOrder) -> CustomerOrder:
        order = current_domain.repository_for(CustomerOrder).get(command.order_id)
        cancel_and_restock(order)

        logger.info(
            "order_cancelled",
            order_id=order.id,
            order_number=order.order_number,
            cancelled_at=order.cancelled_at.isoformat(),
        )
        return order
