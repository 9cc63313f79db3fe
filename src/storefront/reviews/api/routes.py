"""FastAPI endpoints for the Reviews context."""

from uuid import UUID

from fastapi import APIRouter, Query, Response
from protean.utils.globals import current_domain

from storefront.dependencies import ContextDep, PageDep
from storefront.reviews import queries
from storefront.reviews.api.schemas import (
    AverageRatingResponse,
    EditReviewRequest,
    ModerateReviewRequest,
    ReviewCheckResponse,
    ReviewResponse,
    SubmitReviewRequest,
)
from storefront.reviews.submission import DeleteReview, EditReview, ModerateReview, SubmitReview, caller_fields
from storefront.shared.schemas import CountResponse, PageResponse

review_router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@review_router.post("", status_code=201, response_model=ReviewResponse)
def submit_review(body: SubmitReviewRequest, context: ContextDep) -> ReviewResponse:
    command = SubmitReview(
        user_id=str(body.user_id),
        product_id=str(body.product_id),
        rating=body.rating,
        title=body.title,
        comment=body.comment,
    )
    return ReviewResponse.from_review(current_domain.process(command, asynchronous=False))


@review_router.get("", response_model=PageResponse[ReviewResponse])
def list_reviews(page: PageDep) -> PageResponse[ReviewResponse]:
    return PageResponse[ReviewResponse].from_page(queries.list_reviews(page), ReviewResponse.from_review)


@review_router.get("/check", response_model=ReviewCheckResponse)
def check_review(
    user_id: UUID = Query(..., alias="userId"),
    product_id: UUID = Query(..., alias="productId"),
) -> ReviewCheckResponse:
    return ReviewCheckResponse(has_reviewed=queries.has_reviewed(str(user_id), str(product_id)))


@review_router.get("/product/{product_id}", response_model=PageResponse[ReviewResponse])
def list_product_reviews(product_id: UUID, page: PageDep) -> PageResponse[ReviewResponse]:
    result = queries.list_for_product(str(product_id), page)
    return PageResponse[ReviewResponse].from_page(result, ReviewResponse.from_review)


@review_router.get("/product/{product_id}/average-rating", response_model=AverageRatingResponse)
def average_rating(product_id: UUID) -> AverageRatingResponse:
    return AverageRatingResponse.from_summary(product_id, queries.rating_summary(str(product_id)))


@review_router.get("/product/{product_id}/count", response_model=CountResponse)
def count_product_reviews(product_id: UUID) -> CountResponse:
    return CountResponse(count=queries.count_for_product(str(product_id)))


@review_router.get("/user/{user_id}", response_model=PageResponse[ReviewResponse])
def list_user_reviews(user_id: UUID, page: PageDep) -> PageResponse[ReviewResponse]:
    result = queries.list_for_user(str(user_id), page)
    return PageResponse[ReviewResponse].from_page(result, ReviewResponse.from_review)


@review_router.get("/{review_id}", response_model=ReviewResponse)
def get_review(review_id: UUID) -> ReviewResponse:
    return ReviewResponse.from_review(queries.get_review(str(review_id)))


@review_router.put("/{review_id}", response_model=ReviewResponse)
def edit_review(review_id: UUID, body: EditReviewRequest, context: ContextDep) -> ReviewResponse:
    command = EditReview(
        review_id=str(review_id),
        rating=body.rating,
        title=body.title,
        comment=body.comment,
        **caller_fields(context),
    )
    return ReviewResponse.from_review(current_domain.process(command, asynchronous=False))


@review_router.patch("/{review_id}/moderation", response_model=ReviewResponse)
def moderate_review(review_id: UUID, body: ModerateReviewRequest, context: ContextDep) -> ReviewResponse:
    command = ModerateReview(review_id=str(review_id), approved=body.approved, **caller_fields(context))
    return ReviewResponse.from_review(current_domain.process(command, asynchronous=False))


@review_router.delete("/{review_id}", status_code=204)
def delete_review(review_id: UUID, context: ContextDep) -> Response:
    current_domain.process(DeleteReview(review_id=str(review_id), **caller_fields(context)), asynchronous=False)
    return Response(status_code=204)
