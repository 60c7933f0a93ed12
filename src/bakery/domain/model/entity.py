"""Base class for every persisted entity."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, kw_only=True)
class AbstractEntity:
    """Identity and optimistic-concurrency bookkeeping.

    ``id`` stays ``None`` until the first save and ``version`` is bumped by
    the repository on every successful write. Domain code never assigns
    either of them; repositories do.
    """

    id: int | None = None
    version: int = 0

    @property
    def is_new(self) -> bool:
        return self.id is None

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if other is None or type(self) is not type(other):
            return False
        return self.id == other.id and self.version == other.version  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id, self.version))
