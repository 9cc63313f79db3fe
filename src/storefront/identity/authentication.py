"""Credential checks."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.identity.email import normalize_email
from storefront.identity.passwords import pwd_context, verify_password
from storefront.identity.user import DEFAULT_ROLE, User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthenticatedIdentity:
    user_id: str
    role: str


def authenticate(email: str | None, password: str | None) -> AuthenticatedIdentity | None:
    """Verify an email/password pair.

    Unknown email, inactive account, missing password hash and wrong password
    all produce the same None result, so callers cannot tell them apart.
    """
    normalized = normalize_email(email)
    if not normalized or not password:
        logger.info("authentication_failed", reason="missing_credentials")
        return None

    user = current_domain.repository_for(User).get_by_email(normalized)

    if user is None or not user.is_active or not user.password_hash:
        pwd_context.dummy_verify()
        logger.info("authentication_failed", reason="unknown_or_inactive")
        return None

    if not verify_password(password, user.password_hash):
        logger.info("authentication_failed", reason="bad_password", user_id=user.id)
        return None

    logger.info("authentication_succeeded", user_id=user.id)
    return AuthenticatedIdentity(user_id=user.id, role=user.role or DEFAULT_ROLE)
