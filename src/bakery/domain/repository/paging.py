"""Paging primitives shared by every repository."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page number plus page size."""

    page: int = 0
    size: int = 50

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("Page index must not be negative")
        if self.size < 1:
            raise ValueError("Page size must be at least 1")

    @property
    def offset(self) -> int:
        return self.page * self.size

    @staticmethod
    def of(page: int, size: int) -> PageRequest:
        return PageRequest(page=page, size=size)


@dataclass(frozen=True)
class Page(Generic[T]):
    content: list[T]
    request: PageRequest
    total: int

    def __iter__(self) -> Iterator[T]:
        return iter(self.content)

    def __len__(self) -> int:
        return len(self.content)

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.request.size)

    @property
    def has_next(self) -> bool:
        return self.request.offset + len(self.content) < self.total

    @staticmethod
    def slice(items: list[T], request: PageRequest) -> Page[T]:
        """Cut one page out of an already filtered and ordered list."""
        return Page(
            content=items[request.offset : request.offset + request.size],
            request=request,
            total=len(items),
        )


class LoadGraph(Enum):
    """How much of the order aggregate to load.

    BRIEF resolves customer, pickup location and items; FULL also loads the
    history log.
    """

    BRIEF = "brief"
    FULL = "full"
