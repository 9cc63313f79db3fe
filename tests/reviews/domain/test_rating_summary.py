"""Tests for the review entity and the rating aggregate."""

from uuid import uuid4

import pytest

from storefront.exceptions import ValidationError
from storefront.reviews.rating import RatingSummary
from storefront.reviews.review import ProductReview


def _make_review(**overrides):
    fields = {"user_id": str(uuid4()), "product_id": str(uuid4()), "rating": 4}
    fields.update(overrides)
    return ProductReview.submit(**fields)


class TestRating:
    @pytest.mark.parametrize("score", [1, 3, 5])
    def test_valid_scores(self, score):
        assert _make_review(rating=score).rating == score

    @pytest.mark.parametrize("score", [0, 6, -2, None])
    def test_out_of_range(self, score):
        with pytest.raises(ValidationError, match="Rating must be between 1 and 5"):
            _make_review(rating=score)

    def test_edit_validates_rating(self):
        review = _make_review()
        with pytest.raises(ValidationError):
            review.edit(rating=9)
        assert review.rating == 4

    def test_moderate(self):
        review = _make_review()
        review.moderate(False)
        assert review.is_approved is False


class TestRatingSummary:
    def test_no_reviews_means_absent_average(self):
        summary = RatingSummary.from_ratings([])
        assert summary.average is None
        assert summary.count == 0

    def test_single_review(self):
        summary = RatingSummary.from_ratings([4])
        assert summary.average == 4.0
        assert summary.count == 1

    def test_average_is_rounded(self):
        summary = RatingSummary.from_ratings([5, 4, 4])
        assert summary.average == 4.33

    def test_distribution(self):
        summary = RatingSummary.from_ratings([5, 5, 1])
        assert summary.distribution == {1: 1, 2: 0, 3: 0, 4: 0, 5: 2}
