"""FastAPI endpoints for the Identity context."""

from uuid import UUID

from fastapi import APIRouter, Query, Response
from protean.utils.globals import current_domain

from storefront.dependencies import ContextDep, PageDep
from storefront.exceptions import AuthenticationError
from storefront.identity import accounts
from storefront.identity.accounts import DeleteUser, SetUserActive, UpdateUserRoles, update_user_command
from storefront.identity.api.schemas import (
    AuthenticateRequest,
    AuthResponse,
    RegisterUserRequest,
    UpdateRolesRequest,
    UpdateUserRequest,
    UserResponse,
)
from storefront.identity.authentication import authenticate as check_credentials
from storefront.identity.registration import register_user_command
from storefront.shared.schemas import PageResponse

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])
user_router = APIRouter(prefix="/api/users", tags=["users"])


def _register(body: RegisterUserRequest):
    command = register_user_command(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        phone_number=body.phone_number,
    )
    return current_domain.process(command, asynchronous=False)


# --- Auth endpoints ---


@auth_router.post("/authenticate", response_model=AuthResponse)
def authenticate(body: AuthenticateRequest) -> AuthResponse:
    identity = check_credentials(body.email, body.password)
    if identity is None:
        raise AuthenticationError({"credentials": ["Invalid email or password"]})
    return AuthResponse(user_id=identity.user_id, role=identity.role)


@auth_router.post("/register", status_code=201, response_model=AuthResponse)
def register(body: RegisterUserRequest, context: ContextDep) -> AuthResponse:
    user = _register(body)
    return AuthResponse(user_id=user.id, role=user.role)


# --- User endpoints ---


@user_router.post("", status_code=201, response_model=UserResponse)
def create_user(body: RegisterUserRequest, context: ContextDep) -> UserResponse:
    return UserResponse.from_user(_register(body))


@user_router.get("", response_model=PageResponse[UserResponse])
def list_users(page: PageDep) -> PageResponse[UserResponse]:
    return PageResponse[UserResponse].from_page(accounts.list_users(page), UserResponse.from_user)


@user_router.get("/search", response_model=PageResponse[UserResponse])
def search_users(page: PageDep, keyword: str = Query(..., min_length=1)) -> PageResponse[UserResponse]:
    return PageResponse[UserResponse].from_page(accounts.search_users(keyword, page), UserResponse.from_user)


@user_router.get("/email/{email}", response_model=UserResponse)
def get_user_by_email(email: str) -> UserResponse:
    return UserResponse.from_user(accounts.get_user_by_email(email))


@user_router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UUID) -> UserResponse:
    return UserResponse.from_user(accounts.get_user(str(user_id)))


@user_router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: UUID, body: UpdateUserRequest, context: ContextDep) -> UserResponse:
    command = update_user_command(
        user_id=str(user_id),
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        phone_number=body.phone_number,
    )
    return UserResponse.from_user(current_domain.process(command, asynchronous=False))


@user_router.delete("/{user_id}", status_code=204)
def delete_user(user_id: UUID, context: ContextDep) -> Response:
    current_domain.process(DeleteUser(user_id=str(user_id)), asynchronous=False)
    return Response(status_code=204)


@user_router.patch("/{user_id}/activate", response_model=UserResponse)
def activate_user(user_id: UUID, context: ContextDep) -> UserResponse:
    user = current_domain.process(SetUserActive(user_id=str(user_id), active=True), asynchronous=False)
    return UserResponse.from_user(user)


@user_router.patch("/{user_id}/deactivate", response_model=UserResponse)
def deactivate_user(user_id: UUID, context: ContextDep) -> UserResponse:
    user = current_domain.process(SetUserActive(user_id=str(user_id), active=False), asynchronous=False)
    return UserResponse.from_user(user)


@user_router.put("/{user_id}/roles", response_model=UserResponse)
def update_roles(user_id: UUID, body: UpdateRolesRequest, context: ContextDep) -> UserResponse:
    user = current_domain.process(UpdateUserRoles(user_id=str(user_id), roles=body.roles), asynchronous=False)
    return UserResponse.from_user(user)
