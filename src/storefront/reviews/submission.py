"""Review submission, editing and moderation: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product_management import require_product
from storefront.domain import storefront
from storefront.exceptions import DuplicateResourceError, PermissionDeniedError
from storefront.identity.accounts import require_user
from storefront.ordering.order.order import CustomerOrder
from storefront.reviews.review import ProductReview, validate_rating
from storefront.shared.context import RequestContext
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="ProductReview")
class SubmitReview:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)
    title = String(max_length=200)
    comment = Text()


@storefront.command(part_of="ProductReview")
class EditReview:
    review_id = Identifier(required=True)
    rating = Integer()
    title = String(max_length=200)
    comment = Text()
    caller_id = Identifier()
    caller_role = String(max_length=20)


@storefront.command(part_of="ProductReview")
class ModerateReview:
    review_id = Identifier(required=True)
    approved = Boolean(required=True)
    caller_id = Identifier()
    caller_role = String(max_length=20)


@storefront.command(part_of="ProductReview")
class DeleteReview:
    review_id = Identifier(required=True)
    caller_id = Identifier()
    caller_role = String(max_length=20)


def caller_fields(context: RequestContext) -> dict:
    """Who is asking; both stay empty for anonymous callers."""
    return {"caller_id": context.user_id, "caller_role": context.role}


def caller_of(command) -> RequestContext:
    return RequestContext(user_id=command.caller_id, role=command.caller_role)


def require_review(review_id) -> ProductReview:
    return current_domain.repository_for(ProductReview).get(review_id)


def ensure_can_manage(context: RequestContext, review: ProductReview) -> None:
    if not context.can_act_for(review.user_id):
        raise PermissionDeniedError({"review_id": ["Only the author or an administrator can change this review"]})


@storefront.command_handler(part_of=ProductReview)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command: SubmitReview) -> ProductReview:
        """One review per customer per product; verified when they received it in a delivered order."""
        validate_rating(command.rating)

        require_product(command.product_id)
        require_user(command.user_id)

        repo = current_domain.repository_for(ProductReview)
        if repo.exists_for(command.user_id, command.product_id):
            raise DuplicateResourceError({"product_id": ["You have already reviewed this product"]})

        orders = current_domain.repository_for(CustomerOrder)
        review = ProductReview.submit(
            user_id=command.user_id,
            product_id=command.product_id,
            rating=command.rating,
            title=command.title,
            comment=command.comment,
            is_verified=orders.user_has_delivered_product(command.user_id, command.product_id),
        )
        repo.add(review)

        logger.info(
            "review_submitted",
            review_id=review.id,
            product_id=review.product_id,
            rating=review.rating,
            verified=review.is_verified,
        )
        return review

    @handle(EditReview)
    def edit_review(self, command: EditReview) -> ProductReview:
        if command.rating is not None:
            validate_rating(command.rating)

        review = require_review(command.review_id)
        ensure_can_manage(caller_of(command), review)
        review.edit(rating=command.rating, title=command.title, comment=command.comment)
        current_domain.repository_for(ProductReview).add(review)

        logger.info("review_edited", review_id=review.id)
        return review

    @handle(DeleteReview)
    def delete_review(self, command: DeleteReview) -> None:
        review = require_review(command.review_id)
        ensure_can_manage(caller_of(command), review)
        current_domain.repository_for(ProductReview).delete(command.review_id)

        logger.info("review_deleted", review_id=command.review_id)

    @handle(ModerateReview)
    def moderate_review(self, command: ModerateReview) -> ProductReview:
        caller = caller_of(command)
        if caller.is_authenticated and not caller.is_admin:
            raise PermissionDeniedError({"review_id": ["Only an administrator can moderate reviews"]})

        review = require_review(command.review_id)
        review.moderate(command.approved)
        current_domain.repository_for(ProductReview).add(review)

        logger.info("review_moderated", review_id=command.review_id, approved=command.approved)
        return review
