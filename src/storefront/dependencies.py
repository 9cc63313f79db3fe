"""FastAPI dependencies shared by every router."""

from typing import Annotated

from fastapi import Depends, Header, Query

from storefront.config import load_settings
from storefront.identity.request_context import resolve_request_context
from storefront.shared.context import RequestContext
from storefront.shared.pagination import PageRequest
from storefront.utils.logging import add_context

_settings = load_settings()


def page_request(
    page: Annotated[int, Query(ge=0, description="Zero-based page index")] = 0,
    size: Annotated[int | None, Query(ge=1, le=_settings.max_page_size, description="Page size")] = None,
) -> PageRequest:
    return PageRequest(page=page, size=size or _settings.default_page_size)


def request_context(x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None) -> RequestContext:
    """Resolve the caller and bind it to the log context of the request."""
    context = resolve_request_context(x_user_id)
    if context.is_authenticated:
        add_context(**context.log_fields())
    return context


PageDep = Annotated[PageRequest, Depends(page_request)]
ContextDep = Annotated[RequestContext, Depends(request_context)]
