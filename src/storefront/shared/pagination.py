"""Page of results returned by every list operation."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = 10

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    content: Sequence[T]
    page_number: int
    page_size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_elements / self.page_size)

    @property
    def first(self) -> bool:
        return self.page_number == 0

    @property
    def last(self) -> bool:
        return self.page_number >= self.total_pages - 1

    @property
    def has_next(self) -> bool:
        return self.page_number + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page_number > 0

    def map(self, fn: Callable[[T], U]) -> Page[U]:
        return Page(
            content=[fn(item) for item in self.content],
            page_number=self.page_number,
            page_size=self.page_size,
            total_elements=self.total_elements,
        )

    @classmethod
    def of(cls, content: Sequence[T], request: PageRequest, total: int) -> Page[T]:
        return cls(content=list(content), page_number=request.page, page_size=request.size, total_elements=total)
