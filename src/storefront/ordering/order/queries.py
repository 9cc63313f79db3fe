"""Read-side order operations."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.accounts import require_user
from storefront.ordering.order.order import CustomerOrder, parse_order_status
from storefront.shared.pagination import Page, PageRequest


def _orders():
    return current_domain.repository_for(CustomerOrder)


def get_order(order_id) -> CustomerOrder:
    return _orders().get(order_id)


def get_by_number(order_number: str) -> CustomerOrder:
    order = _orders().get_by_number(order_number)
    if order is None:
        raise ObjectNotFoundError({"order_number": [f"Order not found: {order_number}"]})
    return order


def list_orders(request: PageRequest) -> Page[CustomerOrder]:
    return _orders().list_all(request)


def list_for_user(user_id, request: PageRequest) -> Page[CustomerOrder]:
    require_user(user_id)
    return _orders().list_by_user(user_id, request)


def list_by_status(status: str, request: PageRequest) -> Page[CustomerOrder]:
    return _orders().list_by_status(parse_order_status(status), request)


def count_orders(status: str | None = None) -> int:
    target = parse_order_status(status) if status is not None else None
    return _orders().count(target)
