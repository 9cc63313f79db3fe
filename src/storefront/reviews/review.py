"""Product review aggregate."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.clock import utc_now

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(score: int | None) -> int:
    if score is None or not MIN_RATING <= score <= MAX_RATING:
        raise ValidationError({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})
    return score


@storefront.aggregate
class ProductReview:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    rating: Integer(required=True)
    title: String(max_length=200)
    comment: Text()
    is_verified: Boolean(default=False)
    is_approved: Boolean(default=True)
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @invariant.post
    def rating_must_be_in_range(self):
        validate_rating(self.rating)

    @classmethod
    def submit(cls, user_id, product_id, rating, title=None, comment=None, is_verified=False):
        now = utc_now()
        return cls(
            user_id=user_id,
            product_id=product_id,
            rating=validate_rating(rating),
            title=title,
            comment=comment,
            is_verified=is_verified,
            is_approved=True,
            created_at=now,
            updated_at=now,
        )

    def edit(self, rating: int | None = None, title: str | None = None, comment: str | None = None) -> None:
        if rating is not None:
            self.rating = validate_rating(rating)
        if title is not None:
            self.title = title
        if comment is not None:
            self.comment = comment
        self.updated_at = utc_now()

    def moderate(self, approved: bool) -> None:
        self.is_approved = approved
        self.updated_at = utc_now()
