"""Account administration: commands, handler and queries."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Identifier, List, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import DuplicateResourceError
from storefront.identity.email import normalize_email, validate_email_address
from storefront.identity.passwords import hash_password
from storefront.identity.registration import ensure_password
from storefront.identity.user import User
from storefront.shared.pagination import Page, PageRequest
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class UpdateUser:
    user_id: Identifier(required=True)
    email: String(max_length=254)
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    phone_number: String(max_length=30)
    password_hash: String(max_length=255, sanitize=False)


@storefront.command(part_of="User")
class SetUserActive:
    user_id: Identifier(required=True)
    active: Boolean(required=True)


@storefront.command(part_of="User")
class UpdateUserRoles:
    user_id: Identifier(required=True)
    roles: List(content_type=String(max_length=20))


@storefront.command(part_of="User")
class DeleteUser:
    user_id: Identifier(required=True)


def update_user_command(user_id, email=None, first_name=None, last_name=None, phone_number=None, password=None):
    """Normalize the email and hash a new password before they enter a command."""
    return UpdateUser(
        user_id=user_id,
        email=validate_email_address(normalize_email(email)) if email is not None else None,
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        password_hash=hash_password(ensure_password(password)) if password is not None else None,
    )


def require_user(user_id) -> User:
    return current_domain.repository_for(User).get(user_id)


@storefront.command_handler(part_of=User)
class UserAccountsHandler:
    @handle(UpdateUser)
    def update_user(self, command: UpdateUser) -> User:
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.email is not None and command.email != user.email:
            if repo.email_taken(command.email, exclude_id=user.id):
                raise DuplicateResourceError({"email": [f"Email already in use: {command.email}"]})
            user.change_email(command.email)
        if command.password_hash is not None:
            user.change_password_hash(command.password_hash)
        user.update_profile(
            first_name=command.first_name,
            last_name=command.last_name,
            phone_number=command.phone_number,
        )
        repo.add(user)

        logger.info("user_updated", user_id=user.id)
        return user

    @handle(SetUserActive)
    def set_active(self, command: SetUserActive) -> User:
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        if command.active:
            user.activate()
        else:
            user.deactivate()
        repo.add(user)

        logger.info("user_activated" if command.active else "user_deactivated", user_id=user.id)
        return user

    @handle(UpdateUserRoles)
    def update_roles(self, command: UpdateUserRoles) -> User:
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.assign_roles(list(command.roles or []))
        repo.add(user)

        logger.info("user_roles_updated", user_id=user.id, roles=list(user.roles))
        return user

    @handle(DeleteUser)
    def delete_user(self, command: DeleteUser) -> None:
        """Remove an account with its cart, wishlist and reviews.

        Accounts with orders are kept for the order history; deactivate them instead.
        """
        repo = current_domain.repository_for(User)
        repo.get(command.user_id)
        if repo.has_orders(command.user_id):
            raise ValidationError({"user_id": ["User has orders and cannot be deleted; deactivate instead"]})
        repo.delete(command.user_id)

        logger.info("user_deleted", user_id=command.user_id)


# --- Queries ---


def get_user(user_id) -> User:
    return require_user(user_id)


def get_user_by_email(email: str) -> User:
    normalized = normalize_email(email)
    user = current_domain.repository_for(User).get_by_email(normalized)
    if user is None:
        raise ObjectNotFoundError({"email": [f"User not found: {normalized}"]})
    return user


def list_users(request: PageRequest) -> Page[User]:
    return current_domain.repository_for(User).list_all(request)


def search_users(keyword: str, request: PageRequest) -> Page[User]:
    if not keyword or not keyword.strip():
        raise ValidationError({"keyword": ["Search keyword is required"]})
    return current_domain.repository_for(User).search(keyword, request)
