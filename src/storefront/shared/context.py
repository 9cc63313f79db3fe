"""Caller identity for a single request."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    user_id: str | None = None
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def can_act_for(self, user_id: str) -> bool:
        """Anonymous callers are not restricted; authenticated ones must own the record or be admins."""
        if not self.is_authenticated:
            return True
        return self.is_admin or self.user_id == str(user_id)

    def log_fields(self) -> dict[str, str | None]:
        return {"caller_id": self.user_id, "caller_role": self.role}


ANONYMOUS = RequestContext()
