"""Product aggregate and its stock rules."""

from decimal import Decimal as D

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Decimal, Identifier, Integer, List, String, Text

from storefront.domain import storefront
from storefront.shared.clock import utc_now
from storefront.shared.money import to_money


@storefront.aggregate
class Product:
    """A sellable catalogue item.

    Price is a non-negative cent amount, stock a non-negative count. Only
    active products with enough stock can be put in a cart or ordered.
    """

    sku: String(required=True, max_length=64)
    name: String(required=True, max_length=255)
    description: Text()
    price: Decimal(required=True, precision=12, scale=2)
    stock_quantity: Integer(default=0)
    category_id: Identifier()
    is_active: Boolean(default=True)
    images: List(content_type=String(max_length=500))
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @invariant.post
    def price_must_not_be_negative(self):
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": ["Price must not be negative"]})

    @invariant.post
    def stock_must_not_be_negative(self):
        if self.stock_quantity is not None and self.stock_quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock quantity must not be negative"]})

    @classmethod
    def create(
        cls,
        sku,
        name,
        price,
        stock_quantity=0,
        description=None,
        category_id=None,
        is_active=True,
        images=None,
    ):
        now = utc_now()
        return cls(
            sku=_required(sku, "sku", 64),
            name=_required(name, "name", 255),
            price=_valid_price(price),
            stock_quantity=_valid_stock(stock_quantity),
            description=description,
            category_id=category_id,
            is_active=True if is_active is None else is_active,
            images=list(images or []),
            created_at=now,
            updated_at=now,
        )

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None

    def can_be_ordered(self, quantity: int) -> bool:
        return self.is_active and quantity > 0 and self.stock_quantity >= quantity

    def update_details(
        self,
        name=None,
        description=None,
        price=None,
        category_id=None,
        images=None,
        is_active=None,
    ) -> None:
        if name is not None:
            self.name = _required(name, "name", 255)
        if description is not None:
            self.description = description
        if price is not None:
            self.price = _valid_price(price)
        if category_id is not None:
            self.category_id = category_id
        if images is not None:
            self.images = list(images)
        if is_active is not None:
            self.is_active = is_active
        self.updated_at = utc_now()

    def adjust_stock(self, delta: int) -> None:
        new_quantity = self.stock_quantity + delta
        if new_quantity < 0:
            raise ValidationError({"stock_quantity": [f"Insufficient stock. Available: {self.stock_quantity}"]})
        self.stock_quantity = new_quantity
        self.updated_at = utc_now()


def _required(value: str | None, field_name: str, max_length: int) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError({field_name: [f"Product {field_name} is required"]})
    if len(value) > max_length:
        raise ValidationError({field_name: [f"Product {field_name} must be at most {max_length} characters"]})
    return value


def _valid_price(price) -> D:
    if price is None:
        raise ValidationError({"price": ["Price is required"]})
    price = to_money(price)
    if price < 0:
        raise ValidationError({"price": ["Price must not be negative"]})
    return price


def _valid_stock(quantity: int | None) -> int:
    quantity = 0 if quantity is None else int(quantity)
    if quantity < 0:
        raise ValidationError({"stock_quantity": ["Stock quantity must not be negative"]})
    return quantity
