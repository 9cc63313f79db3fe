"""SQL access for shopping carts and their lines."""

from sqlalchemy import Row

from storefront.domain import storefront
from storefront.ordering.cart.cart import CartItem, ShoppingCart
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.repository import SqlRepository, stamp_params
from storefront.shared.rows import as_datetime, as_id, db_id

_CART_COLUMNS = "id, created_at, updated_at, user_id"
_ITEM_COLUMNS = "id, created_at, updated_at, cart_id, product_id, quantity"


def _to_item(row: Row) -> CartItem:
    m = row._mapping
    item = CartItem(
        id=as_id(m["id"]),
        created_at=as_datetime(m["created_at"]),
        updated_at=as_datetime(m["updated_at"]),
        product_id=as_id(m["product_id"]),
        quantity=int(m["quantity"]),
    )
    item.state_.mark_retrieved()
    return item


@storefront.repository(part_of=ShoppingCart)
class CartRepository(SqlRepository):
    def _insert(self, session, cart: ShoppingCart) -> None:
        with self._unique("user_id", f"User already has a cart: {cart.user_id}"):
            self._run(
                session,
                f"INSERT INTO shopping_carts ({_CART_COLUMNS}) VALUES (:id, :created_at, :updated_at, :user_id)",
                {**stamp_params(cart), "user_id": db_id(cart.user_id)},
            )
        for item in cart.items:
            self._insert_item(session, cart, item)

    def _update(self, session, cart: ShoppingCart) -> None:
        """Write the cart and bring its stored lines in line with `cart.items`."""
        params = stamp_params(cart)
        self._run(session, "UPDATE shopping_carts SET updated_at = :updated_at WHERE id = :id", params)

        stored = {
            as_id(row.id)
            for row in self._run(
                session, "SELECT id FROM cart_items WHERE cart_id = :cart_id", {"cart_id": params["id"]}
            ).all()
        }
        current = {item.id for item in cart.items}

        for item_id in stored - current:
            self._run(session, "DELETE FROM cart_items WHERE id = :id", {"id": db_id(item_id)})
        for item in cart.items:
            if item.id in stored:
                self._run(
                    session,
                    "UPDATE cart_items SET updated_at = :updated_at, quantity = :quantity WHERE id = :id",
                    {**stamp_params(item), "quantity": item.quantity},
                )
            else:
                self._insert_item(session, cart, item)

    def get_for_user(self, user_id) -> ShoppingCart | None:
        row = self._first(
            f"SELECT {_CART_COLUMNS} FROM shopping_carts WHERE user_id = :user_id", {"user_id": db_id(user_id)}
        )
        return self._assemble(row) if row else None

    def get(self, cart_id) -> ShoppingCart | None:
        row = self._first(f"SELECT {_CART_COLUMNS} FROM shopping_carts WHERE id = :id", {"id": db_id(cart_id)})
        return self._assemble(row) if row else None

    def list_all(self, request: PageRequest) -> Page[ShoppingCart]:
        return self._page(
            f"SELECT {_CART_COLUMNS} FROM shopping_carts ORDER BY created_at",
            "SELECT COUNT(*) FROM shopping_carts",
            {},
            request,
            self._assemble,
        )

    def cart_id_for_item(self, item_id) -> str | None:
        row = self._first("SELECT cart_id FROM cart_items WHERE id = :id", {"id": db_id(item_id)})
        return as_id(row.cart_id) if row else None

    def count_items(self, user_id) -> int:
        """Sum of line quantities in the user's cart, 0 without a cart."""
        total = self._scalar(
            "SELECT COALESCE(SUM(ci.quantity), 0) FROM cart_items ci "
            "JOIN shopping_carts c ON c.id = ci.cart_id WHERE c.user_id = :user_id",
            {"user_id": db_id(user_id)},
        )
        return int(total or 0)

    def _insert_item(self, session, cart: ShoppingCart, item: CartItem) -> None:
        with self._unique("product_id", f"Product already in cart: {item.product_id}"):
            self._run(
                session,
                f"INSERT INTO cart_items ({_ITEM_COLUMNS}) "
                "VALUES (:id, :created_at, :updated_at, :cart_id, :product_id, :quantity)",
                {
                    **stamp_params(item),
                    "cart_id": db_id(cart.id),
                    "product_id": db_id(item.product_id),
                    "quantity": item.quantity,
                },
            )
        item.state_.mark_saved()

    def _assemble(self, row: Row) -> ShoppingCart:
        m = row._mapping
        items = self._all(
            f"SELECT {_ITEM_COLUMNS} FROM cart_items WHERE cart_id = :cart_id ORDER BY created_at",
            {"cart_id": db_id(m["id"])},
        )
        cart = ShoppingCart(
            id=as_id(m["id"]),
            created_at=as_datetime(m["created_at"]),
            updated_at=as_datetime(m["updated_at"]),
            user_id=as_id(m["user_id"]),
            items=[_to_item(item) for item in items],
        )
        cart.state_.mark_retrieved()
        return cart
