"""Join-fetch read models for products."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.reviews.review import ProductReview


@dataclass(frozen=True)
class ProductView:
    product: Product
    category_name: str | None
    average_rating: float | None
    review_count: int


def build_product_views(products: Iterable[Product]) -> list[ProductView]:
    """Attach category names and approved-review ratings to each product."""
    products = list(products)
    ratings = current_domain.repository_for(ProductReview).rating_summaries([product.id for product in products])
    category_names = current_domain.repository_for(Category).names_for(
        [product.category_id for product in products if product.category_id is not None]
    )

    views = []
    for product in products:
        summary = ratings.get(product.id)
        views.append(
            ProductView(
                product=product,
                category_name=category_names.get(product.category_id),
                average_rating=summary.average if summary else None,
                review_count=summary.count if summary else 0,
            )
        )
    return views


def build_product_view(product: Product) -> ProductView:
    return build_product_views([product])[0]
