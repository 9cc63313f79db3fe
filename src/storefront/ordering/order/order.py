"""Customer order with snapshotted line items and its status lifecycle."""

from __future__ import annotations

import random
from datetime import datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Decimal, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.clock import utc_now
from storefront.shared.money import ZERO, line_total, to_money


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED, OrderStatus.FAILED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: set(),
    OrderStatus.REFUNDED: set(),
    OrderStatus.FAILED: set(),
}

_CANCELLABLE_STATES = {
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
}


def parse_order_status(value: str) -> OrderStatus:
    try:
        return OrderStatus((value or "").strip().lower())
    except ValueError:
        raise ValidationError({"status": [f"Invalid order status: {value}"]}) from None


def parse_payment_status(value: str) -> PaymentStatus:
    try:
        return PaymentStatus((value or "").strip().lower())
    except ValueError:
        raise ValidationError({"payment_status": [f"Invalid payment status: {value}"]}) from None


def generate_order_number(now: datetime | None = None) -> str:
    """ORD-YYYYMMDD-NNNNNN."""
    now = now or utc_now()
    return f"ORD-{now:%Y%m%d}-{random.randint(0, 999_999):06d}"


@storefront.entity(part_of="CustomerOrder")
class OrderItem:
    """A line frozen at placement time: later catalogue edits do not touch it."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_sku = String(required=True, max_length=64)
    unit_price = Decimal(required=True, precision=12, scale=2)
    quantity = Integer(required=True, min_value=1)
    total_price = Decimal(precision=12, scale=2)
    created_at = DateTime(default=utc_now)
    updated_at = DateTime(default=utc_now)

    @classmethod
    def snapshot(cls, product, quantity: int) -> OrderItem:
        unit_price = to_money(product.price)
        return cls(
            product_id=product.id,
            product_name=product.name,
            product_sku=product.sku,
            unit_price=unit_price,
            quantity=quantity,
            total_price=line_total(unit_price, quantity),
        )


@storefront.aggregate
class CustomerOrder:
    user_id = Identifier(required=True)
    order_number = String(required=True, max_length=32)
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(max_length=20, choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    shipping_method_id = Identifier()
    payment_method_id = Identifier()
    subtotal = Decimal(precision=12, scale=2, default=ZERO)
    shipping_cost = Decimal(precision=12, scale=2, default=ZERO)
    total = Decimal(precision=12, scale=2, default=ZERO)
    customer_notes = Text()
    cancelled_at = DateTime()
    items = HasMany(OrderItem)
    created_at = DateTime(default=utc_now)
    updated_at = DateTime(default=utc_now)

    @invariant.post
    def total_must_cover_lines_and_shipping(self):
        if self.total is not None and self.subtotal is not None and self.shipping_cost is not None:
            if self.total != self.subtotal + self.shipping_cost:
                raise ValidationError({"total": ["Order total must equal subtotal plus shipping cost"]})

    @property
    def order_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def payment(self) -> PaymentStatus:
        return PaymentStatus(self.payment_status)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        order_number: str,
        lines: list[tuple],
        shipping_cost=None,
        shipping_method_id=None,
        payment_method_id=None,
        customer_notes: str | None = None,
    ) -> CustomerOrder:
        """Build a pending order from `(product, quantity)` pairs.

        Product name, sku and price are copied into each line.
        """
        if not lines:
            raise ValidationError({"items": ["An order must contain at least one item"]})

        shipping_cost = to_money(shipping_cost)
        if shipping_cost < 0:
            raise ValidationError({"shipping_cost": ["Shipping cost must not be negative"]})

        items = [OrderItem.snapshot(product, quantity) for product, quantity in lines]
        subtotal = to_money(sum((item.total_price for item in items), ZERO))
        now = utc_now()
        return cls(
            user_id=user_id,
            order_number=order_number,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            shipping_method_id=shipping_method_id,
            payment_method_id=payment_method_id,
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            total=to_money(subtotal + shipping_cost),
            customer_notes=customer_notes,
            items=items,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def change_status(self, target: OrderStatus) -> bool:
        """Move to `target`; returns False when already there."""
        if target == self.order_status:
            return False
        if target == OrderStatus.CANCELLED:
            self.cancel()
            return True
        self._assert_can_transition(target)
        self.status = target.value
        self.updated_at = utc_now()
        return True

    def cancel(self) -> None:
        if self.order_status not in _CANCELLABLE_STATES:
            raise ValidationError(
                {
                    "status": [
                        f"Cannot cancel order in {self.status} state. "
                        f"Cancellation is only allowed from: "
                        f"{', '.join(s.value for s in OrderStatus if s in _CANCELLABLE_STATES)}"
                    ]
                }
            )
        now = utc_now()
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now

    def change_payment_status(self, payment_status: PaymentStatus) -> None:
        """Record a payment outcome; a paid pending order becomes confirmed."""
        self.payment_status = payment_status.value
        if payment_status == PaymentStatus.PAID and self.order_status == OrderStatus.PENDING:
            self.status = OrderStatus.CONFIRMED.value
        self.updated_at = utc_now()

    # -------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: OrderStatus) -> None:
        if target not in _VALID_TRANSITIONS.get(self.order_status, set()):
            raise ValidationError({"status": [f"Cannot transition from {self.status} to {target.value}"]})
