"""Resolve the caller identity carried in the X-User-Id header."""

from uuid import UUID

from protean.utils.globals import current_domain

from storefront.identity.user import User
from storefront.shared.context import ANONYMOUS, RequestContext
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

USER_ID_HEADER = "X-User-Id"


def resolve_request_context(user_id_header: str | None) -> RequestContext:
    """Malformed, unknown and inactive ids leave the request anonymous; they never fail it."""
    if not user_id_header or not user_id_header.strip():
        return ANONYMOUS

    try:
        user_id = str(UUID(user_id_header.strip()))
    except ValueError:
        logger.debug("ignored_malformed_user_header", value=user_id_header)
        return ANONYMOUS

    user = current_domain.repository_for(User).get_or_none(user_id)

    if user is None or not user.is_active:
        logger.debug("ignored_unknown_user_header", user_id=user_id)
        return ANONYMOUS

    return RequestContext(user_id=user.id, role=user.role)
