"""Email normalization and structural validation."""

from storefront.exceptions import ValidationError

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def normalize_email(email: str | None) -> str:
    """Trimmed, lower-cased form used for storage and lookup."""
    return (email or "").strip().lower()


def validate_email_address(email: str) -> str:
    """Check the basic structure of an already normalized address.

    Exactly one @, non-empty local and domain parts, a dotted domain with no
    leading or trailing hyphens in its labels, no consecutive dots and none
    of the characters that need quoting.
    """
    error = ValidationError({"email": [f"Invalid email address: {email!r}"]})

    if not email or len(email) > 254 or any(ch.isspace() for ch in email):
        raise error
    if email.count("@") != 1:
        raise error

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        raise error
    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        raise error
    if "." not in domain_part or ".." in email:
        raise error
    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        raise error
    if any(ch in email for ch in _FORBIDDEN):
        raise error

    return email
