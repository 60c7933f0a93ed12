"""Abstract transaction boundary."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType


class UnitOfWork(ABC):
    """All-or-nothing scope for repository writes.

    Used as a context manager: writes made inside the block become visible
    in storage only when the block exits cleanly; any exception rolls them
    all back and is re-raised.
    """

    def __enter__(self) -> UnitOfWork:
        self.begin()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def begin(self) -> None:
        """Open a transaction."""

    @abstractmethod
    def commit(self) -> None:
        """Make every buffered write durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every buffered write."""
