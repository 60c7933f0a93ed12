"""Application service contract: generic CRUD plus text filtering.

Every entity service builds on ``CrudService``; the ones that back a
searchable grid also implement ``FilterableCrudService``. Writes are
validated first and then run inside a unit of work.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import structlog

from bakery.domain.exceptions import EntityNotFoundError
from bakery.domain.model.entity import AbstractEntity
from bakery.domain.model.user import User
from bakery.domain.model.validation import ensure_valid
from bakery.domain.repository.crud_repository import CrudRepository
from bakery.domain.repository.paging import Page, PageRequest
from bakery.domain.repository.unit_of_work import UnitOfWork

E = TypeVar("E", bound=AbstractEntity)

logger = structlog.get_logger(__name__)


class CrudService(ABC, Generic[E]):

    def __init__(self, unit_of_work: UnitOfWork) -> None:
        self._uow = unit_of_work

    @property
    @abstractmethod
    def repository(self) -> CrudRepository[E]:
        """The repository this service delegates to."""

    @abstractmethod
    def create_new(self, acting_user: User) -> E:
        """Return a transient default instance; nothing is persisted."""

    def save(self, acting_user: User, entity: E) -> E:
        ensure_valid(entity)
        with self._uow:
            saved = self.repository.save(entity)
        logger.info(
            "Entity saved",
            entity=type(entity).__name__,
            entity_id=saved.id,
            version=saved.version,
            acting_user=acting_user.email if acting_user else None,
        )
        return saved

    def delete(self, acting_user: User, entity: E | None) -> None:
        if entity is None:
            raise EntityNotFoundError("Cannot delete a missing entity")
        with self._uow:
            self.repository.delete(entity)
        logger.info(
            "Entity deleted",
            entity=type(entity).__name__,
            entity_id=entity.id,
            acting_user=acting_user.email if acting_user else None,
        )

    def delete_by_id(self, acting_user: User, entity_id: int) -> None:
        self.delete(acting_user, self.load(entity_id))

    def count(self) -> int:
        return self.repository.count()

    def load(self, entity_id: int) -> E:
        entity = self.repository.get_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(f"{self._entity_name()} #{entity_id} not found")
        return entity

    def _entity_name(self) -> str:
        return type(self).__name__.removesuffix("Service")


class FilterableCrudService(CrudService[E]):

    @abstractmethod
    def find_any_matching(self, filter_text: str | None, page: PageRequest) -> Page[E]:
        """One page of entities whose searchable fields contain ``filter_text``.

        ``None`` means no filter: an unfiltered page is returned.
        """

    @abstractmethod
    def count_any_matching(self, filter_text: str | None) -> int:
        """Count under the same rule as ``find_any_matching``."""
