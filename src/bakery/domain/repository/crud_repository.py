"""Abstract repository shared by every entity type.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from bakery.domain.model.entity import AbstractEntity
from bakery.domain.repository.paging import Page, PageRequest

E = TypeVar("E", bound=AbstractEntity)


class CrudRepository(ABC, Generic[E]):

    @abstractmethod
    def get_by_id(self, entity_id: int) -> E | None:
        """Return an entity by its ID, or None if not found."""

    @abstractmethod
    def save(self, entity: E) -> E:
        """Insert or update; assigns id and bumps version.

        Raises ConcurrentModificationError if the stored version differs
        from ``entity.version``.
        """

    @abstractmethod
    def delete(self, entity: E) -> None:
        """Remove the entity. Raises EntityNotFoundError if it is absent."""

    @abstractmethod
    def count(self) -> int:
        """Return the total number of stored entities."""

    @abstractmethod
    def find_all(self, page: PageRequest) -> Page[E]:
        """Return one page of all entities, ordered by id."""
