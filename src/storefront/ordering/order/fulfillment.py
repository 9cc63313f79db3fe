"""Order status and payment status updates: commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.cancellation import cancel_and_restock
from storefront.ordering.order.order import CustomerOrder, OrderStatus, parse_order_status, parse_payment_status
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="CustomerOrder")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=30)


@storefront.command(part_of="CustomerOrder")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=30)


@storefront.command(part_of="CustomerOrder")
class DeleteOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=CustomerOrder)
class OrderFulfillmentHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command: UpdateOrderStatus) -> CustomerOrder:
        target = parse_order_status(command.status)

        repo = current_domain.repository_for(CustomerOrder)
        order = repo.get(command.order_id)
        previous = order.order_status
        if target == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED:
            cancel_and_restock(order)
        elif order.change_status(target):
            repo.add(order)

        logger.info("order_status_changed", order_id=order.id, previous=previous.value, status=order.status)
        return order

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command: UpdatePaymentStatus) -> CustomerOrder:
        target = parse_payment_status(command.payment_status)

        repo = current_domain.repository_for(CustomerOrder)
        order = repo.get(command.order_id)
        order.change_payment_status(target)
        repo.add(order)

        logger.info(
            "order_payment_status_changed",
            order_id=order.id,
            payment_status=order.payment_status,
            status=order.status,
        )
        return order

    @handle(DeleteOrder)
    def delete_order(self, command: DeleteOrder) -> None:
        repo = current_domain.repository_for(CustomerOrder)
        repo.get(command.order_id)
        repo.delete(command.order_id)

        logger.info("order_deleted", order_id=command.order_id)
