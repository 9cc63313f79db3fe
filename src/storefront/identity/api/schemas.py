"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from storefront.identity.user import User
from storefront.shared.schemas import ApiModel

# --- Request Schemas ---


class AuthenticateRequest(ApiModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "jane@example.com", "password": "s3cret-pass"}]}}

    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class RegisterUserRequest(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "jane@example.com",
                    "password": "s3cret-pass",
                    "firstName": "Jane",
                    "lastName": "Doe",
                    "phoneNumber": "+1-555-0100",
                }
            ]
        }
    }

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone_number: str | None = Field(None, max_length=30)


class UpdateUserRequest(ApiModel):
    model_config = {"json_schema_extra": {"examples": [{"firstName": "Janet", "phoneNumber": "+1-555-0199"}]}}

    email: EmailStr | None = None
    password: str | None = Field(None, min_length=8, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone_number: str | None = Field(None, max_length=30)


class UpdateRolesRequest(ApiModel):
    model_config = {"json_schema_extra": {"examples": [{"roles": ["CUSTOMER", "ADMIN"]}]}}

    roles: list[str] = Field(..., min_length=1)


# --- Response Schemas ---


class AuthResponse(ApiModel):
    user_id: UUID
    role: str


class UserResponse(ApiModel):
    id: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    full_name: str
    phone_number: str | None = None
    is_active: bool
    role: str
    roles: list[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            phone_number=user.phone_number,
            is_active=user.is_active,
            role=user.role,
            roles=list(user.roles),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
