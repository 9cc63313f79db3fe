"""Shopping cart: one per user, holding at most one line per product."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.domain import storefront
from storefront.shared.clock import utc_now
from storefront.shared.money import ZERO, line_total, to_money


def ensure_positive_quantity(quantity: int | None) -> int:
    if quantity is None or quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})
    return quantity


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    created_at = DateTime(default=utc_now)
    updated_at = DateTime(default=utc_now)

    @property
    def added_at(self):
        return self.created_at


@storefront.aggregate
class ShoppingCart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime(default=utc_now)
    updated_at = DateTime(default=utc_now)

    @classmethod
    def create(cls, user_id):
        now = utc_now()
        return cls(user_id=user_id, items=[], created_at=now, updated_at=now)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id) -> CartItem | None:
        return next((item for item in self.items if item.id == str(item_id)), None)

    def item_for_product(self, product_id) -> CartItem | None:
        return next((item for item in self.items if item.product_id == str(product_id)), None)

    def add_item(self, product_id, quantity: int) -> CartItem:
        """Add a product, or increase the quantity of its existing line."""
        ensure_positive_quantity(quantity)
        now = utc_now()

        existing = self.item_for_product(product_id)
        if existing is not None:
            existing.quantity += quantity
            existing.updated_at = now
            item = existing
        else:
            item = CartItem(product_id=product_id, quantity=quantity, created_at=now, updated_at=now)
            self.add_items(item)

        self.updated_at = now
        return item

    def update_item_quantity(self, item_id, quantity: int) -> CartItem:
        ensure_positive_quantity(quantity)
        now = utc_now()

        item = self._require_item(item_id)
        item.quantity = quantity
        item.updated_at = now
        self.updated_at = now
        return item

    def remove_item(self, item_id) -> CartItem:
        item = self._require_item(item_id)
        self.remove_items(item)
        self.updated_at = utc_now()
        return item

    def clear(self) -> None:
        if self.items:
            self.remove_items(list(self.items))
        self.updated_at = utc_now()

    def _require_item(self, item_id) -> CartItem:
        item = self.find_item(item_id)
        if item is None:
            raise ObjectNotFoundError({"item_id": [f"Cart item not found: {item_id}"]})
        return item


@dataclass(frozen=True)
class CartTotals:
    total_items: int
    total_value: Decimal


def cart_totals(items: Iterable[CartItem], products: Mapping[str, object]) -> CartTotals:
    """Sum quantities and price times quantity over the given lines.

    Lines whose product is missing, or that lack a price or quantity,
    contribute zero to the value.
    """
    total_items = 0
    total_value = ZERO
    for item in items:
        quantity = item.quantity or 0
        product = products.get(item.product_id)
        price = getattr(product, "price", None)
        total_items += quantity
        total_value += line_total(price, quantity)
    return CartTotals(total_items=total_items, total_value=to_money(total_value))
