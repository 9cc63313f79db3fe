"""SQL access for product reviews."""

from collections import defaultdict
from collections.abc import Iterable

from protean.exceptions import ObjectNotFoundError
from sqlalchemy import Row, bindparam, text

from storefront.domain import storefront
from storefront.reviews.rating import RatingSummary
from storefront.reviews.review import ProductReview
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.repository import SqlRepository, stamp_params
from storefront.shared.rows import as_bool, as_datetime, as_id, db_id

_COLUMNS = "id, created_at, updated_at, user_id, product_id, rating, title, comment, is_verified, is_approved"


def _to_review(row: Row) -> ProductReview:
    m = row._mapping
    review = ProductReview(
        id=as_id(m["id"]),
        created_at=as_datetime(m["created_at"]),
        updated_at=as_datetime(m["updated_at"]),
        user_id=as_id(m["user_id"]),
        product_id=as_id(m["product_id"]),
        rating=int(m["rating"]),
        title=m["title"],
        comment=m["comment"],
        is_verified=as_bool(m["is_verified"]),
        is_approved=as_bool(m["is_approved"]),
    )
    review.state_.mark_retrieved()
    return review


@storefront.repository(part_of=ProductReview)
class ReviewRepository(SqlRepository):
    def _insert(self, session, review: ProductReview) -> None:
        with self._unique("product_id", "You have already reviewed this product"):
            self._run(
                session,
                f"INSERT INTO product_reviews ({_COLUMNS}) VALUES (:id, :created_at, :updated_at, :user_id, "
                ":product_id, :rating, :title, :comment, :is_verified, :is_approved)",
                self._params(review),
            )

    def _update(self, session, review: ProductReview) -> None:
        self._run(
            session,
            "UPDATE product_reviews SET updated_at = :updated_at, rating = :rating, title = :title, "
            "comment = :comment, is_verified = :is_verified, is_approved = :is_approved WHERE id = :id",
            self._params(review),
        )

    def get(self, review_id) -> ProductReview:
        row = self._first(f"SELECT {_COLUMNS} FROM product_reviews WHERE id = :id", {"id": db_id(review_id)})
        if row is None:
            raise ObjectNotFoundError({"review_id": [f"Review not found: {review_id}"]})
        return _to_review(row)

    def exists_for(self, user_id, product_id) -> bool:
        row = self._first(
            "SELECT 1 FROM product_reviews WHERE user_id = :user_id AND product_id = :product_id",
            {"user_id": db_id(user_id), "product_id": db_id(product_id)},
        )
        return row is not None

    def list_all(self, request: PageRequest) -> Page[ProductReview]:
        return self._list("", {}, request)

    def list_by_product(self, product_id, request: PageRequest, approved_only: bool = True) -> Page[ProductReview]:
        where = "WHERE product_id = :product_id"
        params: dict = {"product_id": db_id(product_id)}
        if approved_only:
            where += " AND is_approved = :approved"
            params["approved"] = True
        return self._list(where, params, request)

    def list_by_user(self, user_id, request: PageRequest) -> Page[ProductReview]:
        return self._list("WHERE user_id = :user_id", {"user_id": db_id(user_id)}, request)

    def approved_ratings(self, product_id) -> list[int]:
        rows = self._all(
            "SELECT rating FROM product_reviews WHERE product_id = :product_id AND is_approved = :approved",
            {"product_id": db_id(product_id), "approved": True},
        )
        return [int(row.rating) for row in rows]

    def count_for_product(self, product_id) -> int:
        total = self._scalar(
            "SELECT COUNT(*) FROM product_reviews WHERE product_id = :product_id AND is_approved = :approved",
            {"product_id": db_id(product_id), "approved": True},
        )
        return int(total or 0)

    def rating_summaries(self, product_ids: Iterable) -> dict[str, RatingSummary]:
        """Approved-review summaries for many products in one query."""
        ids = [db_id(product_id) for product_id in set(product_ids)]
        if not ids:
            return {}
        statement = text(
            "SELECT product_id, rating FROM product_reviews WHERE product_id IN :ids AND is_approved = :approved"
        ).bindparams(bindparam("ids", expanding=True))
        ratings: dict[str, list[int]] = defaultdict(list)
        for row in self._all(statement, {"ids": ids, "approved": True}):
            ratings[as_id(row.product_id)].append(int(row.rating))
        return {product_id: RatingSummary.from_ratings(scores) for product_id, scores in ratings.items()}

    def delete(self, review_id) -> bool:
        return self._execute("DELETE FROM product_reviews WHERE id = :id", {"id": db_id(review_id)}) == 1

    def _list(self, where: str, params: dict, request: PageRequest) -> Page[ProductReview]:
        return self._page(
            f"SELECT {_COLUMNS} FROM product_reviews {where} ORDER BY created_at DESC",
            f"SELECT COUNT(*) FROM product_reviews {where}",
            params,
            request,
            _to_review,
        )

    @staticmethod
    def _params(review: ProductReview) -> dict:
        return {
            **stamp_params(review),
            "user_id": db_id(review.user_id),
            "product_id": db_id(review.product_id),
            "rating": review.rating,
            "title": review.title,
            "comment": review.comment,
            "is_verified": review.is_verified,
            "is_approved": review.is_approved,
        }
