"""Read-side review operations, including the rating aggregate."""

from protean.utils.globals import current_domain

from storefront.catalogue.product_management import require_product
from storefront.identity.accounts import require_user
from storefront.reviews.rating import RatingSummary
from storefront.reviews.review import ProductReview
from storefront.reviews.submission import require_review
from storefront.shared.pagination import Page, PageRequest


def _reviews():
    return current_domain.repository_for(ProductReview)


def get_review(review_id) -> ProductReview:
    return require_review(review_id)


def list_reviews(request: PageRequest) -> Page[ProductReview]:
    return _reviews().list_all(request)


def list_for_product(product_id, request: PageRequest) -> Page[ProductReview]:
    require_product(product_id)
    return _reviews().list_by_product(product_id, request)


def list_for_user(user_id, request: PageRequest) -> Page[ProductReview]:
    require_user(user_id)
    return _reviews().list_by_user(user_id, request)


def rating_summary(product_id) -> RatingSummary:
    require_product(product_id)
    return RatingSummary.from_ratings(_reviews().approved_ratings(product_id))


def count_for_product(product_id) -> int:
    require_product(product_id)
    return _reviews().count_for_product(product_id)


def has_reviewed(user_id, product_id) -> bool:
    return _reviews().exists_for(user_id, product_id)
