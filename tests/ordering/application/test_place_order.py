"""Application tests for order placement, cancellation and fulfillment."""

from decimal import Decimal
from itertools import repeat
from uuid import uuid4

import pytest
from protean import current_domain

from storefront.catalogue.product_management import UpdateProduct, get_product
from storefront.catalogue.repository import ProductRepository
from storefront.exceptions import DuplicateResourceError, ObjectNotFoundError, ValidationError
from storefront.ordering.cart import queries as cart_queries
from storefront.ordering.cart.items import AddToCart
from storefront.ordering.order import queries
from storefront.ordering.order.cancellation import CancelOrder
from storefront.ordering.order.fulfillment import DeleteOrder, UpdateOrderStatus, UpdatePaymentStatus
from storefront.ordering.order.order import OrderStatus, PaymentStatus
from storefront.ordering.order.placement import PlaceOrder, order_line
from storefront.shared.pagination import PageRequest


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _stock(product_id):
    return get_product(product_id).product.stock_quantity


def _place(user, *lines, **kwargs):
    return _process(
        PlaceOrder(user_id=user.id, lines=[order_line(product.id, quantity) for product, quantity in lines], **kwargs)
    )


class TestPlaceOrder:
    def test_totals_and_stock(self, make_user, make_product):
        user = make_user()
        mug = make_product(price=Decimal("4.50"), stock_quantity=10)
        pot = make_product(price=Decimal("20.00"), stock_quantity=2)

        order = _place(user, (mug, 2), (pot, 1), shipping_cost=Decimal("5.00"))

        assert order.order_status == OrderStatus.PENDING
        assert order.subtotal == Decimal("29.00")
        assert order.total == Decimal("34.00")
        assert _stock(mug.id) == 8
        assert _stock(pot.id) == 1

    def test_insufficient_stock_changes_nothing(self, make_user, make_product):
        user = make_user()
        plenty = make_product(stock_quantity=10)
        scarce = make_product(stock_quantity=1)

        with pytest.raises(ValidationError, match="Insufficient stock"):
            _place(user, (plenty, 3), (scarce, 2))

        assert _stock(plenty.id) == 10
        assert _stock(scarce.id) == 1
        assert queries.count_orders() == 0

    def test_failed_decrement_rolls_back_the_whole_order(self, make_user, make_product, monkeypatch):
        user = make_user()
        first = make_product(stock_quantity=10)
        second = make_product(stock_quantity=10)
        _stock(first.id)
        _stock(second.id)

        original = ProductRepository.decrement_stock
        calls = []

        def decrement_stock(self, product_id, quantity):
            calls.append(product_id)
            # Another buyer takes the stock of the second line after the check
            if product_id == second.id:
                return False
            return original(self, product_id, quantity)

        monkeypatch.setattr(ProductRepository, "decrement_stock", decrement_stock)

        with pytest.raises(ValidationError, match="Insufficient stock"):
            _place(user, (first, 3), (second, 2))

        assert calls == [first.id, second.id]
        assert queries.count_orders() == 0
        assert queries.list_for_user(user.id, PageRequest()).total_elements == 0
        assert _stock(first.id) == 10
        assert _stock(second.id) == 10

    def test_inactive_product(self, make_user, make_product):
        user = make_user()
        product = make_product(is_active=False)

        with pytest.raises(ValidationError, match="not available"):
            _place(user, (product, 1))

    def test_duplicate_lines_are_merged(self, make_user, make_product):
        user = make_user()
        product = make_product(stock_quantity=5)

        order = _place(user, (product, 2), (product, 3))

        assert len(order.items) == 1
        assert order.items[0].quantity == 5
        assert _stock(product.id) == 0

    def test_merged_lines_are_checked_against_stock(self, make_user, make_product):
        user = make_user()
        product = make_product(stock_quantity=4)

        with pytest.raises(ValidationError):
            _place(user, (product, 2), (product, 3))

    def test_snapshot_survives_catalogue_edits(self, make_user, make_product):
        user = make_user()
        product = make_product(name="Original Mug", price=Decimal("9.00"))
        order = _place(user, (product, 1))

        _process(UpdateProduct(product_id=product.id, name="Renamed Mug", price=Decimal("99.00")))

        item = queries.get_order(order.id).items[0]
        assert item.product_name == "Original Mug"
        assert item.product_sku == product.sku
        assert item.unit_price == Decimal("9.00")

    def test_from_cart(self, make_user, make_product):
        user = make_user()
        product = make_product(price=Decimal("3.00"), stock_quantity=5)
        _process(AddToCart(user_id=user.id, product_id=product.id, quantity=2))

        order = _process(PlaceOrder(user_id=user.id))

        assert order.total == Decimal("6.00")
        assert cart_queries.count_items(user.id) == 0
        assert _stock(product.id) == 3

    def test_empty_cart(self, make_user):
        user = make_user()
        with pytest.raises(ValidationError):
            _process(PlaceOrder(user_id=user.id))

    def test_unknown_product(self, make_user):
        user = make_user()
        with pytest.raises(ObjectNotFoundError):
            _process(PlaceOrder(user_id=user.id, lines=[order_line(uuid4(), 1)]))

    def test_order_number_lookup(self, make_user, make_product):
        user = make_user()
        order = _place(user, (make_product(), 1))

        assert queries.get_by_number(order.order_number).id == order.id


class TestOrderNumbers:
    TAKEN = "ORD-20261019-000001"
    FRESH = "ORD-20261019-000002"

    def _numbers(self, monkeypatch, numbers):
        sequence = iter(numbers)
        monkeypatch.setattr("storefront.ordering.order.placement.generate_order_number", lambda: next(sequence))

    def test_collision_is_retried_with_a_fresh_number(self, make_user, make_product, monkeypatch):
        user = make_user()
        self._numbers(monkeypatch, [self.TAKEN, self.TAKEN, self.FRESH])
        _place(user, (make_product(), 1))

        order = _place(user, (make_product(), 1))

        assert order.order_number == self.FRESH
        assert queries.count_orders() == 2

    def test_repeated_collision_is_a_conflict(self, make_user, make_product, monkeypatch):
        user = make_user()
        product = make_product(stock_quantity=5)
        self._numbers(monkeypatch, repeat(self.TAKEN))
        _place(user, (product, 1))

        with pytest.raises(DuplicateResourceError, match="Order number already exists"):
            _place(user, (product, 1))

        assert queries.count_orders() == 1
        assert _stock(product.id) == 4


class TestCancelOrder:
    def test_cancel_restores_stock(self, make_user, make_product):
        user = make_user()
        product = make_product(stock_quantity=5)
        order = _place(user, (product, 3))

        cancelled = _process(CancelOrder(order_id=order.id))

        assert cancelled.order_status == OrderStatus.CANCELLED
        assert cancelled.cancelled_at is not None
        assert _stock(product.id) == 5

    def test_status_update_to_cancelled_also_restocks(self, make_user, make_product):
        user = make_user()
        product = make_product(stock_quantity=5)
        order = _place(user, (product, 2))

        _process(UpdateOrderStatus(order_id=order.id, status="cancelled"))

        assert _stock(product.id) == 5
        assert queries.get_order(order.id).order_status == OrderStatus.CANCELLED

    def test_shipped_order_cannot_be_cancelled(self, make_user, make_product):
        user = make_user()
        product = make_product(stock_quantity=5)
        order = _place(user, (product, 2))
        for status in ("confirmed", "processing", "shipped"):
            _process(UpdateOrderStatus(order_id=order.id, status=status))

        with pytest.raises(ValidationError):
            _process(CancelOrder(order_id=order.id))

        assert _stock(product.id) == 3

    def test_cancelling_twice(self, make_user, make_product):
        user = make_user()
        order = _place(user, (make_product(), 1))
        _process(CancelOrder(order_id=order.id))

        with pytest.raises(ValidationError):
            _process(CancelOrder(order_id=order.id))


class TestFulfillment:
    def test_invalid_transition(self, make_user, make_product):
        user = make_user()
        order = _place(user, (make_product(), 1))

        with pytest.raises(ValidationError, match="Cannot transition from pending to shipped"):
            _process(UpdateOrderStatus(order_id=order.id, status="shipped"))

    def test_unknown_status(self, make_user, make_product):
        user = make_user()
        order = _place(user, (make_product(), 1))

        with pytest.raises(ValidationError, match="Invalid order status"):
            _process(UpdateOrderStatus(order_id=order.id, status="teleported"))

    def test_payment_confirms_pending_order(self, make_user, make_product):
        user = make_user()
        order = _place(user, (make_product(), 1))

        updated = _process(UpdatePaymentStatus(order_id=order.id, payment_status="PAID"))

        assert updated.payment == PaymentStatus.PAID
        assert queries.get_order(order.id).order_status == OrderStatus.CONFIRMED

    def test_listing_and_counting_by_status(self, make_user, make_product):
        user = make_user()
        first = _place(user, (make_product(), 1))
        _place(user, (make_product(), 1))
        _process(UpdateOrderStatus(order_id=first.id, status="confirmed"))

        assert queries.count_orders() == 2
        assert queries.count_orders("pending") == 1
        assert [order.id for order in queries.list_by_status("confirmed", PageRequest()).content] == [first.id]
        assert queries.list_for_user(user.id, PageRequest()).total_elements == 2

    def test_delete(self, make_user, make_product):
        user = make_user()
        order = _place(user, (make_product(), 1))

        _process(DeleteOrder(order_id=order.id))

        with pytest.raises(ObjectNotFoundError):
            queries.get_order(order.id)
