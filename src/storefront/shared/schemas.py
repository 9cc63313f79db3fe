"""Pydantic building blocks shared by every API package."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront.shared.pagination import Page

T = TypeVar("T")


class ApiModel(BaseModel):
    """camelCase on the wire; snake_case field names are accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageResponse(ApiModel, Generic[T]):
    content: list[T]
    page_number: int
    page_size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool
    has_next: bool
    has_previous: bool

    @classmethod
    def from_page(cls, page: Page, mapper: Callable[[Any], T]) -> PageResponse[T]:
        return cls(
            content=[mapper(item) for item in page.content],
            page_number=page.page_number,
            page_size=page.page_size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            first=page.first,
            last=page.last,
            has_next=page.has_next,
            has_previous=page.has_previous,
        )


class CountResponse(ApiModel):
    count: int


class ErrorResponse(BaseModel):
    error: str
    message: str
    errors: dict[str, list[str]] = {}
