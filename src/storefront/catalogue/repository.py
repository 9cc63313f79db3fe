"""SQL access for categories and products."""

import json
from collections.abc import Iterable

from protean.exceptions import ObjectNotFoundError
from sqlalchemy import Row, bindparam, event, text
from sqlalchemy.orm import Session

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shared.cache import ReadThroughCache
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.repository import SqlRepository, stamp_params
from storefront.shared.rows import as_bool, as_datetime, as_decimal, as_id, as_json_list, db_id, db_money

_CATEGORY_COLUMNS = "id, created_at, updated_at, name, description, parent_id"
_PRODUCT_COLUMNS = (
    "id, created_at, updated_at, category_id, sku, name, description, price, "
    "stock_quantity, is_active, images"
)

# Single-product reads are served from here; entries hold raw column values
product_cache = ReadThroughCache("products")

# Session.info key for the product ids a transaction has written
_WRITTEN_PRODUCTS = "storefront.written_products"


def _written_in(session: Session) -> set[str]:
    return session.info.setdefault(_WRITTEN_PRODUCTS, set())


def _mark_written(session: Session, product_ids: Iterable[str]) -> None:
    ids = {str(product_id) for product_id in product_ids}
    if ids:
        _written_in(session).update(ids)
        product_cache.invalidate_many(ids)


@event.listens_for(Session, "after_commit")
def _evict_committed_products(session: Session) -> None:
    # Other readers may have cached the pre-commit rows in the meantime
    written = session.info.pop(_WRITTEN_PRODUCTS, None)
    if written:
        product_cache.invalidate_many(written)


@event.listens_for(Session, "after_rollback")
def _forget_rolled_back_products(session: Session) -> None:
    written = session.info.pop(_WRITTEN_PRODUCTS, None)
    if written:
        product_cache.invalidate_many(written)


def _to_category(row: Row) -> Category:
    m = row._mapping
    category = Category(
        id=as_id(m["id"]),
        created_at=as_datetime(m["created_at"]),
        updated_at=as_datetime(m["updated_at"]),
        name=m["name"],
        description=m["description"],
        parent_id=as_id(m["parent_id"]),
    )
    category.state_.mark_retrieved()
    return category


def _to_product(m) -> Product:
    product = Product(
        id=as_id(m["id"]),
        created_at=as_datetime(m["created_at"]),
        updated_at=as_datetime(m["updated_at"]),
        category_id=as_id(m["category_id"]),
        sku=m["sku"],
        name=m["name"],
        description=m["description"],
        price=as_decimal(m["price"]),
        stock_quantity=int(m["stock_quantity"]),
        is_active=as_bool(m["is_active"]),
        images=as_json_list(m["images"]),
    )
    product.state_.mark_retrieved()
    return product


def _row_to_product(row: Row) -> Product:
    return _to_product(row._mapping)


@storefront.repository(part_of=Category)
class CategoryRepository(SqlRepository):
    def _insert(self, session, category: Category) -> None:
        with self._unique("name", f"Category already exists: {category.name}"):
            self._run(
                session,
                f"INSERT INTO categories ({_CATEGORY_COLUMNS}) "
                "VALUES (:id, :created_at, :updated_at, :name, :description, :parent_id)",
                self._params(category),
            )

    def _update(self, session, category: Category) -> None:
        with self._unique("name", f"Category already exists: {category.name}"):
            self._run(
                session,
                "UPDATE categories SET updated_at = :updated_at, name = :name, "
                "description = :description, parent_id = :parent_id WHERE id = :id",
                self._params(category),
            )

    def get(self, category_id, field: str = "category_id") -> Category:
        category = self.get_or_none(category_id)
        if category is None:
            raise ObjectNotFoundError({field: [f"Category not found: {category_id}"]})
        return category

    def get_or_none(self, category_id) -> Category | None:
        row = self._first(f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE id = :id", {"id": db_id(category_id)})
        return _to_category(row) if row else None

    def exists(self, category_id) -> bool:
        return self._first("SELECT 1 FROM categories WHERE id = :id", {"id": db_id(category_id)}) is not None

    def name_taken(self, name: str, exclude_id=None) -> bool:
        row = self._first(
            "SELECT id FROM categories WHERE LOWER(name) = :name AND (:exclude_id IS NULL OR id <> :exclude_id)",
            {"name": name.lower(), "exclude_id": db_id(exclude_id)},
        )
        return row is not None

    def list_all(self) -> list[Category]:
        rows = self._all(f"SELECT {_CATEGORY_COLUMNS} FROM categories ORDER BY name")
        return [_to_category(row) for row in rows]

    def names_for(self, category_ids: Iterable) -> dict[str, str]:
        ids = [db_id(category_id) for category_id in set(category_ids)]
        if not ids:
            return {}
        statement = text("SELECT id, name FROM categories WHERE id IN :ids").bindparams(
            bindparam("ids", expanding=True)
        )
        return {as_id(row.id): row.name for row in self._all(statement, {"ids": ids})}

    def children_of(self, parent_id) -> list[Category]:
        rows = self._all(
            f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE parent_id = :parent_id ORDER BY name",
            {"parent_id": db_id(parent_id)},
        )
        return [_to_category(row) for row in rows]

    def ancestor_ids(self, category_id) -> list[str]:
        """Walk parent links upwards; stops on a repeated id."""
        seen: list[str] = []
        current = self.get_or_none(category_id)
        while current is not None and current.parent_id is not None and current.parent_id not in seen:
            seen.append(current.parent_id)
            current = self.get_or_none(current.parent_id)
        return seen

    def delete(self, category_id) -> bool:
        """Delete the category and detach its products, evicting them from the product cache."""
        params = {"id": db_id(category_id)}
        with self._session() as session:
            detached = [
                as_id(row.id)
                for row in self._run(session, "SELECT id FROM products WHERE category_id = :id", params).all()
            ]
            self._run(session, "UPDATE products SET category_id = NULL WHERE category_id = :id", params)
            _mark_written(session, detached)
            return self._run(session, "DELETE FROM categories WHERE id = :id", params).rowcount == 1

    @staticmethod
    def _params(category: Category) -> dict:
        return {
            **stamp_params(category),
            "name": category.name,
            "description": category.description,
            "parent_id": db_id(category.parent_id),
        }


@storefront.repository(part_of=Product)
class ProductRepository(SqlRepository):
    """Products, with single-product reads served through the shared cache.

    Any write invalidates the cached entry; products written in the current
    transaction are never read from or stored in the cache, so uncommitted
    state does not leak out.
    """

    def _insert(self, session, product: Product) -> None:
        with self._unique("sku", f"Product with SKU already exists: {product.sku}"):
            self._run(
                session,
                f"INSERT INTO products ({_PRODUCT_COLUMNS}) VALUES (:id, :created_at, :updated_at, "
                ":category_id, :sku, :name, :description, :price, :stock_quantity, :is_active, :images)",
                self._params(product),
            )
        _mark_written(session, [product.id])

    def _update(self, session, product: Product) -> None:
        with self._unique("sku", f"Product with SKU already exists: {product.sku}"):
            self._run(
                session,
                "UPDATE products SET updated_at = :updated_at, category_id = :category_id, sku = :sku, "
                "name = :name, description = :description, price = :price, "
                "stock_quantity = :stock_quantity, is_active = :is_active, images = :images WHERE id = :id",
                self._params(product),
            )
        _mark_written(session, [product.id])

    def get(self, product_id) -> Product:
        product = self.get_or_none(product_id)
        if product is None:
            raise ObjectNotFoundError({"product_id": [f"Product not found: {product_id}"]})
        return product

    def get_or_none(self, product_id) -> Product | None:
        key = db_id(product_id)
        with self._session() as session:
            if key in _written_in(session):
                values = self._load(session, key)
            else:
                values = product_cache.get_or_load(key, lambda: self._load(session, key))
        return _to_product(values) if values else None

    def get_many(self, product_ids: Iterable) -> dict[str, Product]:
        ids = [db_id(product_id) for product_id in set(product_ids)]
        if not ids:
            return {}
        statement = text(f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id IN :ids").bindparams(
            bindparam("ids", expanding=True)
        )
        products = [_row_to_product(row) for row in self._all(statement, {"ids": ids})]
        return {product.id: product for product in products}

    def get_by_sku(self, sku: str) -> Product | None:
        row = self._first(f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE sku = :sku", {"sku": sku.strip()})
        return _row_to_product(row) if row else None

    def exists(self, product_id) -> bool:
        return self._first("SELECT 1 FROM products WHERE id = :id", {"id": db_id(product_id)}) is not None

    def list_all(self, request: PageRequest) -> Page[Product]:
        return self._list("", {}, request)

    def list_active(self, request: PageRequest) -> Page[Product]:
        return self._list("WHERE is_active = :active", {"active": True}, request)

    def list_by_category(self, category_id, request: PageRequest) -> Page[Product]:
        return self._list("WHERE category_id = :category_id", {"category_id": db_id(category_id)}, request)

    def search(self, keyword: str, request: PageRequest) -> Page[Product]:
        return self._list(
            "WHERE LOWER(name) LIKE :pattern OR LOWER(COALESCE(description, '')) LIKE :pattern "
            "OR LOWER(sku) LIKE :pattern",
            {"pattern": f"%{keyword.strip().lower()}%"},
            request,
        )

    def decrement_stock(self, product_id, quantity: int) -> bool:
        """Guarded decrement; False when the row lacks enough stock."""
        with self._session() as session:
            result = self._run(
                session,
                "UPDATE products SET stock_quantity = stock_quantity - :quantity "
                "WHERE id = :id AND stock_quantity >= :quantity",
                {"id": db_id(product_id), "quantity": quantity},
            )
            _mark_written(session, [product_id])
            return result.rowcount == 1

    def increment_stock(self, product_id, quantity: int) -> bool:
        with self._session() as session:
            result = self._run(
                session,
                "UPDATE products SET stock_quantity = stock_quantity + :quantity WHERE id = :id",
                {"id": db_id(product_id), "quantity": quantity},
            )
            _mark_written(session, [product_id])
            return result.rowcount == 1

    def delete(self, product_id) -> bool:
        params = {"id": db_id(product_id)}
        with self._session() as session:
            self._run(session, "DELETE FROM cart_items WHERE product_id = :id", params)
            self._run(session, "DELETE FROM wishlist_items WHERE product_id = :id", params)
            self._run(session, "DELETE FROM product_reviews WHERE product_id = :id", params)
            deleted = self._run(session, "DELETE FROM products WHERE id = :id", params).rowcount == 1
            _mark_written(session, [product_id])
            return deleted

    def _load(self, session, product_id: str) -> dict | None:
        row = self._run(
            session, f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = :id", {"id": product_id}
        ).first()
        return dict(row._mapping) if row else None

    def _list(self, where: str, params: dict, request: PageRequest) -> Page[Product]:
        return self._page(
            f"SELECT {_PRODUCT_COLUMNS} FROM products {where} ORDER BY name, sku",
            f"SELECT COUNT(*) FROM products {where}",
            params,
            request,
            _row_to_product,
        )

    @staticmethod
    def _params(product: Product) -> dict:
        return {
            **stamp_params(product),
            "category_id": db_id(product.category_id),
            "sku": product.sku,
            "name": product.name,
            "description": product.description,
            "price": db_money(product.price),
            "stock_quantity": product.stock_quantity,
            "is_active": product.is_active,
            "images": json.dumps(list(product.images)),
        }
