"""SQL access for wishlist entries."""

from sqlalchemy import Row

from storefront.domain import storefront
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.repository import SqlRepository, stamp_params
from storefront.shared.rows import as_datetime, as_id, db_id
from storefront.wishlist.item import WishlistItem

_COLUMNS = "id, created_at, updated_at, user_id, product_id"


def _to_item(row: Row) -> WishlistItem:
    m = row._mapping
    item = WishlistItem(
        id=as_id(m["id"]),
        created_at=as_datetime(m["created_at"]),
        updated_at=as_datetime(m["updated_at"]),
        user_id=as_id(m["user_id"]),
        product_id=as_id(m["product_id"]),
    )
    item.state_.mark_retrieved()
    return item


@storefront.repository(part_of=WishlistItem)
class WishlistRepository(SqlRepository):
    def _insert(self, session, item: WishlistItem) -> None:
        with self._unique("product_id", "Product is already in the wishlist"):
            self._run(
                session,
                f"INSERT INTO wishlist_items ({_COLUMNS}) VALUES (:id, :created_at, :updated_at, :user_id, :product_id)",
                {**stamp_params(item), "user_id": db_id(item.user_id), "product_id": db_id(item.product_id)},
            )

    def _update(self, session, item: WishlistItem) -> None:
        self._run(session, "UPDATE wishlist_items SET updated_at = :updated_at WHERE id = :id", stamp_params(item))

    def get(self, item_id) -> WishlistItem | None:
        row = self._first(f"SELECT {_COLUMNS} FROM wishlist_items WHERE id = :id", {"id": db_id(item_id)})
        return _to_item(row) if row else None

    def get_for(self, user_id, product_id) -> WishlistItem | None:
        row = self._first(
            f"SELECT {_COLUMNS} FROM wishlist_items WHERE user_id = :user_id AND product_id = :product_id",
            {"user_id": db_id(user_id), "product_id": db_id(product_id)},
        )
        return _to_item(row) if row else None

    def for_user(self, user_id) -> list[WishlistItem]:
        rows = self._all(
            f"SELECT {_COLUMNS} FROM wishlist_items WHERE user_id = :user_id ORDER BY created_at DESC",
            {"user_id": db_id(user_id)},
        )
        return [_to_item(row) for row in rows]

    def page_for_user(self, user_id, request: PageRequest) -> Page[WishlistItem]:
        return self._page(
            f"SELECT {_COLUMNS} FROM wishlist_items WHERE user_id = :user_id ORDER BY created_at DESC",
            "SELECT COUNT(*) FROM wishlist_items WHERE user_id = :user_id",
            {"user_id": db_id(user_id)},
            request,
            _to_item,
        )

    def count_for_user(self, user_id) -> int:
        total = self._scalar("SELECT COUNT(*) FROM wishlist_items WHERE user_id = :user_id", {"user_id": db_id(user_id)})
        return int(total or 0)

    def delete(self, item_id) -> bool:
        return self._execute("DELETE FROM wishlist_items WHERE id = :id", {"id": db_id(item_id)}) == 1

    def clear(self, user_id) -> int:
        return self._execute("DELETE FROM wishlist_items WHERE user_id = :user_id", {"user_id": db_id(user_id)})
