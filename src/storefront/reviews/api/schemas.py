"""Pydantic request/response schemas for the Reviews API."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from storefront.reviews.rating import RatingSummary
from storefront.reviews.review import ProductReview
from storefront.shared.schemas import ApiModel


class SubmitReviewRequest(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "userId": "0b6f7a8e-3d7c-4b4b-8f3e-2a6d1c9e5f01",
                    "productId": "5f0c7c1e-8a57-4f55-9b0e-3c2f6f1e9a10",
                    "rating": 4,
                    "title": "Great value",
                    "comment": "Fits well and washes nicely.",
                }
            ]
        }
    }

    user_id: UUID
    product_id: UUID
    rating: int
    title: str | None = Field(None, max_length=200)
    comment: str | None = Field(None, max_length=5000)


class EditReviewRequest(ApiModel):
    model_config = {"json_schema_extra": {"examples": [{"rating": 5, "comment": "Even better after a month."}]}}

    rating: int | None = None
    title: str | None = Field(None, max_length=200)
    comment: str | None = Field(None, max_length=5000)


class ModerateReviewRequest(ApiModel):
    approved: bool


class ReviewResponse(ApiModel):
    id: UUID
    user_id: UUID
    product_id: UUID
    rating: int
    title: str | None = None
    comment: str | None = None
    is_verified: bool
    is_approved: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_review(cls, review: ProductReview) -> ReviewResponse:
        return cls(
            id=review.id,
            user_id=review.user_id,
            product_id=review.product_id,
            rating=review.rating,
            title=review.title,
            comment=review.comment,
            is_verified=review.is_verified,
            is_approved=review.is_approved,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )


class AverageRatingResponse(ApiModel):
    product_id: UUID
    average_rating: float | None = None
    review_count: int
    distribution: dict[str, int]

    @classmethod
    def from_summary(cls, product_id: UUID, summary: RatingSummary) -> AverageRatingResponse:
        return cls(
            product_id=product_id,
            average_rating=summary.average,
            review_count=summary.count,
            distribution={str(score): count for score, count in summary.distribution.items()},
        )


class ReviewCheckResponse(ApiModel):
    has_reviewed: bool
