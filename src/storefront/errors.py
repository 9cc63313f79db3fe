"""Map exceptions to HTTP responses with a stable error body."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import (
    InvalidDataError,
    InvalidOperationError,
    InvalidStateError,
    ObjectNotFoundError,
    ValidationError,
)

from storefront.exceptions import (
    AuthenticationError,
    DuplicateResourceError,
    PermissionDeniedError,
    error_messages,
)
from storefront.shared.schemas import ErrorResponse
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# Checked in order, so subclasses come before their bases
DOMAIN_ERRORS: list[tuple[type[Exception], int, str]] = [
    (ValidationError, 400, "validation_error"),
    (InvalidDataError, 400, "validation_error"),
    (InvalidOperationError, 400, "validation_error"),
    (ObjectNotFoundError, 404, "not_found"),
    (DuplicateResourceError, 409, "already_exists"),
    (InvalidStateError, 409, "already_exists"),
    (AuthenticationError, 401, "unauthorized"),
    (PermissionDeniedError, 403, "forbidden"),
]


def _body(kind: str, message: str, errors: dict[str, list[str]] | None = None) -> dict:
    return ErrorResponse(error=kind, message=message, errors=errors or {}).model_dump()


def _field_path(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "_entity"


def _summary(errors: dict[str, list[str]]) -> str:
    if list(errors) == ["_entity"]:
        return "; ".join(errors["_entity"])
    return "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in errors.items())


def classify(exc: Exception) -> tuple[int, str]:
    for error_cls, status_code, kind in DOMAIN_ERRORS:
        if isinstance(exc, error_cls):
            return status_code, kind
    return 500, "internal_error"


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code, kind = classify(exc)
    errors = error_messages(exc)
    logger.info("request_rejected", path=request.url.path, kind=kind, status_code=status_code, errors=errors)
    return JSONResponse(status_code=status_code, content=_body(kind, _summary(errors), errors))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_path(error.get("loc", ())), []).append(error.get("msg", "Invalid value"))

    logger.info("request_rejected", path=request.url.path, kind="validation_error", status_code=400, errors=errors)
    return JSONResponse(status_code=400, content=_body("validation_error", _summary(errors), errors))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error=type(exc).__name__)
    return JSONResponse(status_code=500, content=_body("internal_error", "An unexpected error occurred"))


def register_exception_handlers(app: FastAPI) -> None:
    for error_cls, _, _ in DOMAIN_ERRORS:
        app.add_exception_handler(error_cls, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
