"""Table definitions, used for DDL only.

Repositories talk to these tables with hand-written SQL.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
)

metadata = MetaData()


def _stamp_columns() -> list[Column]:
    return [
        Column("id", Uuid, primary_key=True),
        Column("created_at", DateTime(timezone=True), nullable=False),
        Column("updated_at", DateTime(timezone=True), nullable=False),
    ]


users = Table(
    "users",
    metadata,
    *_stamp_columns(),
    Column("email", String(254), nullable=False, unique=True),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("phone_number", String(30)),
    Column("password_hash", String(255)),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("roles", Text, nullable=False, default="[]"),
)

categories = Table(
    "categories",
    metadata,
    *_stamp_columns(),
    Column("name", String(100), nullable=False, unique=True),
    Column("description", Text),
    Column("parent_id", Uuid, ForeignKey("categories.id")),
)

products = Table(
    "products",
    metadata,
    *_stamp_columns(),
    Column("category_id", Uuid, ForeignKey("categories.id", ondelete="SET NULL")),
    Column("sku", String(64), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("price", Numeric(12, 2), nullable=False),
    Column("stock_quantity", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("images", Text, nullable=False, default="[]"),
    Index("ix_products_category_id", "category_id"),
)

shopping_carts = Table(
    "shopping_carts",
    metadata,
    *_stamp_columns(),
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
)

cart_items = Table(
    "cart_items",
    metadata,
    *_stamp_columns(),
    Column("cart_id", Uuid, ForeignKey("shopping_carts.id", ondelete="CASCADE"), nullable=False),
    Column("product_id", Uuid, nullable=False),
    Column("quantity", Integer, nullable=False),
    UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
)

customer_orders = Table(
    "customer_orders",
    metadata,
    *_stamp_columns(),
    Column("user_id", Uuid, ForeignKey("users.id"), nullable=False),
    Column("order_number", String(32), nullable=False, unique=True),
    Column("status", String(32), nullable=False),
    Column("payment_status", String(32), nullable=False),
    Column("shipping_method_id", Uuid),
    Column("payment_method_id", Uuid),
    Column("subtotal", Numeric(12, 2), nullable=False),
    Column("shipping_cost", Numeric(12, 2), nullable=False),
    Column("total", Numeric(12, 2), nullable=False),
    Column("customer_notes", Text),
    Column("cancelled_at", DateTime(timezone=True)),
    Index("ix_customer_orders_user_id", "user_id"),
    Index("ix_customer_orders_status", "status"),
)

order_items = Table(
    "order_items",
    metadata,
    *_stamp_columns(),
    Column("order_id", Uuid, ForeignKey("customer_orders.id", ondelete="CASCADE"), nullable=False),
    Column("product_id", Uuid, nullable=False),
    Column("product_name", String(255), nullable=False),
    Column("product_sku", String(64), nullable=False),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("total_price", Numeric(12, 2), nullable=False),
)

product_reviews = Table(
    "product_reviews",
    metadata,
    *_stamp_columns(),
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("product_id", Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
    Column("rating", Integer, nullable=False),
    Column("title", String(200)),
    Column("comment", Text),
    Column("is_verified", Boolean, nullable=False, default=False),
    Column("is_approved", Boolean, nullable=False, default=True),
    UniqueConstraint("user_id", "product_id", name="uq_product_reviews_user_product"),
)

wishlist_items = Table(
    "wishlist_items",
    metadata,
    *_stamp_columns(),
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("product_id", Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
    UniqueConstraint("user_id", "product_id", name="uq_wishlist_items_user_product"),
)
