"""Error taxonomy shared by handlers and the HTTP layer.

Validation and not-found errors are protean's own. The storefront adds
conflict, authentication and authorization errors on top of protean's base
exceptions. Every error carries field-keyed messages in the
``{"field": ["message", ...]}`` shape.
"""

from __future__ import annotations

from typing import Any

from protean.exceptions import (
    InvalidDataError,
    InvalidOperationError,
    InvalidStateError,
    ObjectNotFoundError,
    ProteanException,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "DuplicateResourceError",
    "InvalidDataError",
    "InvalidOperationError",
    "InvalidStateError",
    "ObjectNotFoundError",
    "PermissionDeniedError",
    "ValidationError",
    "error_messages",
]


class DuplicateResourceError(InvalidStateError):
    """A unique value (email, SKU, order number, review) is already taken."""


class AuthenticationError(ProteanException):
    """Credentials were missing or did not match an active account."""


class PermissionDeniedError(ProteanException):
    """The caller is known but may not perform the operation."""


def error_messages(exc: Exception) -> dict[str, list[str]]:
    """Field-keyed messages for any storefront or protean exception."""
    messages: Any = getattr(exc, "messages", None)
    if messages is None:
        messages = exc.args[0] if exc.args else str(exc)

    if isinstance(messages, dict):
        return {
            str(field): [str(msg) for msg in (msgs if isinstance(msgs, list | tuple) else [msgs])]
            for field, msgs in messages.items()
        }
    if isinstance(messages, list | tuple):
        return {"_entity": [str(msg) for msg in messages]}
    return {"_entity": [str(messages)]}
