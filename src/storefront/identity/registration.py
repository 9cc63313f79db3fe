"""User registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import DuplicateResourceError
from storefront.identity.email import normalize_email, validate_email_address
from storefront.identity.passwords import hash_password
from storefront.identity.user import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class RegisterUser:
    """Create an account. Carries the password hash, never the password itself."""

    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255, sanitize=False)
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    phone_number: String(max_length=30)


def ensure_password(password: str | None) -> str:
    if not password or not password.strip():
        raise ValidationError({"password": ["Password is required"]})
    return password


def register_user_command(email, password, first_name=None, last_name=None, phone_number=None) -> RegisterUser:
    """Validate the raw credentials and hash the password before it enters a command."""
    normalized = validate_email_address(normalize_email(email))
    return RegisterUser(
        email=normalized,
        password_hash=hash_password(ensure_password(password)),
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
    )


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command: RegisterUser) -> User:
        repo = current_domain.repository_for(User)
        email = validate_email_address(normalize_email(command.email))
        if repo.email_taken(email):
            raise DuplicateResourceError({"email": [f"Email already in use: {email}"]})

        user = User.register(
            email=email,
            password_hash=command.password_hash,
            first_name=command.first_name,
            last_name=command.last_name,
            phone_number=command.phone_number,
        )
        repo.add(user)

        logger.info("user_registered", user_id=user.id)
        return user
