"""User aggregate."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, List, String

from storefront.domain import storefront
from storefront.identity.email import normalize_email, validate_email_address
from storefront.shared.clock import utc_now


class Role(Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


DEFAULT_ROLE = Role.CUSTOMER.value


@storefront.aggregate
class User:
    """A registered account.

    Emails are kept normalized (trimmed, lower-cased). The password is only
    ever held as a one-way hash. `roles` stores role names; `role` picks the
    one reported to callers.
    """

    email: String(required=True, max_length=254)
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    phone_number: String(max_length=30)
    password_hash: String(max_length=255, sanitize=False)
    is_active: Boolean(default=True)
    roles: List(content_type=String(max_length=20))
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @invariant.post
    def roles_must_be_known(self):
        known = {role.value for role in Role}
        unknown = [name for name in self.roles or [] if name not in known]
        if unknown:
            raise ValidationError({"roles": [f"Unknown role: {name}" for name in unknown]})

    @property
    def role(self) -> str:
        if Role.ADMIN.value in self.roles:
            return Role.ADMIN.value
        return self.roles[0] if self.roles else DEFAULT_ROLE

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @classmethod
    def register(cls, email, password_hash, first_name=None, last_name=None, phone_number=None):
        now = utc_now()
        return cls(
            email=validate_email_address(normalize_email(email)),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            is_active=True,
            roles=[DEFAULT_ROLE],
            created_at=now,
            updated_at=now,
        )

    def update_profile(self, first_name=None, last_name=None, phone_number=None) -> None:
        if first_name is not None:
            self.first_name = first_name
        if last_name is not None:
            self.last_name = last_name
        if phone_number is not None:
            self.phone_number = phone_number
        self.updated_at = utc_now()

    def change_email(self, email: str) -> None:
        self.email = validate_email_address(normalize_email(email))
        self.updated_at = utc_now()

    def change_password_hash(self, password_hash: str) -> None:
        self.password_hash = password_hash
        self.updated_at = utc_now()

    def activate(self) -> None:
        self.is_active = True
        self.updated_at = utc_now()

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = utc_now()

    def assign_roles(self, roles: list[str]) -> None:
        names = [role.strip().upper() for role in roles if role and role.strip()]
        if not names:
            raise ValidationError({"roles": ["At least one role is required"]})

        known = {role.value for role in Role}
        unknown = [name for name in names if name not in known]
        if unknown:
            raise ValidationError({"roles": [f"Unknown role: {name}" for name in unknown]})

        self.roles = list(dict.fromkeys(names))
        self.updated_at = utc_now()
