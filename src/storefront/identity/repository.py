"""SQL access for user accounts."""

import json

from protean.exceptions import ObjectNotFoundError
from sqlalchemy import Row

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.repository import SqlRepository, stamp_params
from storefront.shared.rows import as_bool, as_datetime, as_id, as_json_list, db_id

_COLUMNS = (
    "id, created_at, updated_at, email, first_name, last_name, phone_number, "
    "password_hash, is_active, roles"
)


def _to_user(row: Row) -> User:
    m = row._mapping
    user = User(
        id=as_id(m["id"]),
        created_at=as_datetime(m["created_at"]),
        updated_at=as_datetime(m["updated_at"]),
        email=m["email"],
        first_name=m["first_name"],
        last_name=m["last_name"],
        phone_number=m["phone_number"],
        password_hash=m["password_hash"],
        is_active=as_bool(m["is_active"]),
        roles=as_json_list(m["roles"]),
    )
    user.state_.mark_retrieved()
    return user


@storefront.repository(part_of=User)
class UserRepository(SqlRepository):
    def _insert(self, session, user: User) -> None:
        with self._unique("email", f"Email already in use: {user.email}"):
            self._run(
                session,
                f"INSERT INTO users ({_COLUMNS}) VALUES (:id, :created_at, :updated_at, :email, "
                ":first_name, :last_name, :phone_number, :password_hash, :is_active, :roles)",
                self._params(user),
            )

    def _update(self, session, user: User) -> None:
        with self._unique("email", f"Email already in use: {user.email}"):
            self._run(
                session,
                "UPDATE users SET updated_at = :updated_at, email = :email, first_name = :first_name, "
                "last_name = :last_name, phone_number = :phone_number, password_hash = :password_hash, "
                "is_active = :is_active, roles = :roles WHERE id = :id",
                self._params(user),
            )

    def get(self, user_id) -> User:
        user = self.get_or_none(user_id)
        if user is None:
            raise ObjectNotFoundError({"user_id": [f"User not found: {user_id}"]})
        return user

    def get_or_none(self, user_id) -> User | None:
        row = self._first(f"SELECT {_COLUMNS} FROM users WHERE id = :id", {"id": db_id(user_id)})
        return _to_user(row) if row else None

    def get_by_email(self, email: str) -> User | None:
        row = self._first(f"SELECT {_COLUMNS} FROM users WHERE email = :email", {"email": email})
        return _to_user(row) if row else None

    def exists(self, user_id) -> bool:
        return self._first("SELECT 1 FROM users WHERE id = :id", {"id": db_id(user_id)}) is not None

    def email_taken(self, email: str, exclude_id=None) -> bool:
        row = self._first(
            "SELECT id FROM users WHERE email = :email AND (:exclude_id IS NULL OR id <> :exclude_id)",
            {"email": email, "exclude_id": db_id(exclude_id)},
        )
        return row is not None

    def list_all(self, request: PageRequest) -> Page[User]:
        return self._page(
            f"SELECT {_COLUMNS} FROM users ORDER BY created_at, email",
            "SELECT COUNT(*) FROM users",
            {},
            request,
            _to_user,
        )

    def search(self, keyword: str, request: PageRequest) -> Page[User]:
        where = (
            "WHERE LOWER(email) LIKE :pattern OR LOWER(COALESCE(first_name, '')) LIKE :pattern "
            "OR LOWER(COALESCE(last_name, '')) LIKE :pattern"
        )
        return self._page(
            f"SELECT {_COLUMNS} FROM users {where} ORDER BY email",
            f"SELECT COUNT(*) FROM users {where}",
            {"pattern": f"%{keyword.strip().lower()}%"},
            request,
            _to_user,
        )

    def has_orders(self, user_id) -> bool:
        row = self._first("SELECT 1 FROM customer_orders WHERE user_id = :id", {"id": db_id(user_id)})
        return row is not None

    def delete(self, user_id) -> bool:
        params = {"id": db_id(user_id)}
        with self._session() as session:
            self._run(
                session,
                "DELETE FROM cart_items WHERE cart_id IN (SELECT id FROM shopping_carts WHERE user_id = :id)",
                params,
            )
            self._run(session, "DELETE FROM shopping_carts WHERE user_id = :id", params)
            self._run(session, "DELETE FROM wishlist_items WHERE user_id = :id", params)
            self._run(session, "DELETE FROM product_reviews WHERE user_id = :id", params)
            return self._run(session, "DELETE FROM users WHERE id = :id", params).rowcount == 1

    @staticmethod
    def _params(user: User) -> dict:
        return {
            **stamp_params(user),
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "phone_number": user.phone_number,
            "password_hash": user.password_hash,
            "is_active": user.is_active,
            "roles": json.dumps(list(user.roles)),
        }
