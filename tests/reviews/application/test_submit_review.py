"""Application tests for review submission, moderation and the rating aggregate."""

from uuid import uuid4

import pytest
from protean import current_domain

from storefront.catalogue.product_management import get_product
from storefront.exceptions import DuplicateResourceError, ObjectNotFoundError, PermissionDeniedError, ValidationError
from storefront.ordering.order.fulfillment import UpdateOrderStatus
from storefront.ordering.order.placement import PlaceOrder, order_line
from storefront.reviews import queries
from storefront.reviews.submission import DeleteReview, EditReview, ModerateReview, SubmitReview
from storefront.shared.pagination import PageRequest


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _submit(user, product, rating=4, **kwargs):
    return _process(SubmitReview(user_id=user.id, product_id=product.id, rating=rating, **kwargs))


class TestSubmitReview:
    def test_submit(self, make_user, make_product):
        user = make_user()
        product = make_product()

        review = _submit(user, product, rating=5, title="Great", comment="Would buy again")

        stored = queries.get_review(review.id)
        assert stored.rating == 5
        assert stored.is_approved is True
        assert stored.is_verified is False

    def test_second_review_is_a_duplicate(self, make_user, make_product):
        user = make_user()
        product = make_product()
        _submit(user, product, rating=4)

        with pytest.raises(DuplicateResourceError, match="You have already reviewed this product"):
            _submit(user, product, rating=2)

        assert queries.count_for_product(product.id) == 1

    def test_rating_out_of_range(self, make_user, make_product):
        with pytest.raises(ValidationError):
            _submit(make_user(), make_product(), rating=6)

    def test_unknown_product(self, make_user):
        with pytest.raises(ObjectNotFoundError):
            _process(SubmitReview(user_id=make_user().id, product_id=str(uuid4()), rating=3))

    def test_verified_after_delivery(self, make_user, make_product):
        user = make_user()
        product = make_product()
        order = _process(PlaceOrder(user_id=user.id, lines=[order_line(product.id, 1)]))
        for status in ("confirmed", "processing", "shipped", "delivered"):
            _process(UpdateOrderStatus(order_id=order.id, status=status))

        assert _submit(user, product).is_verified is True

    def test_has_reviewed(self, make_user, make_product):
        user = make_user()
        product = make_product()
        assert queries.has_reviewed(user.id, product.id) is False

        _submit(user, product)

        assert queries.has_reviewed(user.id, product.id) is True


class TestRatingAggregate:
    def test_unrated_product(self, make_product):
        summary = queries.rating_summary(make_product().id)
        assert summary.average is None
        assert summary.count == 0

    def test_single_rating(self, make_user, make_product):
        product = make_product()
        _submit(make_user(), product, rating=4)

        assert queries.rating_summary(product.id).average == 4.0

    def test_average_over_reviewers(self, make_user, make_product):
        product = make_product()
        for rating in (5, 4, 2):
            _submit(make_user(), product, rating=rating)

        summary = queries.rating_summary(product.id)
        assert summary.average == 3.67
        assert summary.count == 3

    def test_rejected_reviews_are_excluded(self, make_user, make_product):
        product = make_product()
        _submit(make_user(), product, rating=5)
        spam = _submit(make_user(), product, rating=1)

        _process(ModerateReview(review_id=spam.id, approved=False))

        assert queries.rating_summary(product.id).average == 5.0
        view = get_product(product.id)
        assert view.average_rating == 5.0
        assert view.review_count == 1


class TestPermissions:
    def test_author_can_edit(self, make_user, make_product):
        author = make_user()
        review = _submit(author, make_product(), rating=3)

        edited = _process(EditReview(review_id=review.id, rating=4, caller_id=author.id, caller_role="CUSTOMER"))

        assert edited.rating == 4
        assert queries.get_review(review.id).rating == 4

    def test_other_customer_cannot_edit(self, make_user, make_product):
        review = _submit(make_user(), make_product())

        with pytest.raises(PermissionDeniedError):
            _process(
                EditReview(review_id=review.id, comment="hijacked", caller_id=str(uuid4()), caller_role="CUSTOMER")
            )

        assert queries.get_review(review.id).comment is None

    def test_admin_can_delete(self, make_user, make_product):
        product = make_product()
        review = _submit(make_user(), product)

        _process(DeleteReview(review_id=review.id, caller_id=str(uuid4()), caller_role="ADMIN"))

        assert queries.list_for_product(product.id, PageRequest()).total_elements == 0

    def test_customer_cannot_moderate(self, make_user, make_product):
        review = _submit(make_user(), make_product())

        with pytest.raises(PermissionDeniedError):
            _process(ModerateReview(review_id=review.id, approved=False, caller_id=str(uuid4()), caller_role="CUSTOMER"))
