"""Shared JSON-backed CrudRepository machinery.

Subclasses provide the collection name, the record <-> entity mapping and
the fields that must stay unique. Queries are plain predicates over the
raw records, always ordered by id.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Callable
from typing import Protocol, TypeVar

from bakery.domain.exceptions import (
    ConcurrentModificationError,
    DataConflictError,
    EntityNotFoundError,
)
from bakery.domain.model.entity import AbstractEntity
from bakery.domain.repository.crud_repository import CrudRepository
from bakery.domain.repository.paging import Page, PageRequest
from bakery.infrastructure.persistence.json_store import JsonStore

E = TypeVar("E", bound=AbstractEntity)

Predicate = Callable[[dict], bool]


class Referrer(Protocol):
    """A collection whose records point at records of other collections."""

    def references(self, collection: str, entity_id: int) -> bool: ...


def contains_ignore_case(value: str | None, text: str) -> bool:
    return text.casefold() in (value or "").casefold()


class JsonRepository(CrudRepository[E]):

    collection: str
    unique_fields: tuple[str, ...] = ()

    def __init__(self, store: JsonStore) -> None:
        self._store = store
        self._referrers: list[Referrer] = []

    def add_referrer(self, referrer: Referrer) -> None:
        """Deletes are refused while ``referrer`` still points at the record."""
        self._referrers.append(referrer)

    # --- CrudRepository interface ---------------------------------------------

    def get_by_id(self, entity_id: int) -> E | None:
        raw = self._find_raw(entity_id)
        return self._to_domain(raw) if raw is not None else None

    def save(self, entity: E) -> E:
        records = self._store.read(self.collection)
        raw = self._to_raw(entity)

        if entity.id is None:
            new_id = max((r["id"] for r in records), default=0) + 1
            self._check_unique(records, raw, exclude_id=None)
            raw.update(id=new_id, version=0)
            records.append(raw)
        else:
            index = self._index_of(records, entity.id)
            if index is None:
                raise EntityNotFoundError(f"{self._entity_name()} #{entity.id} no longer exists")
            self._check_version(records[index], entity)
            self._check_unique(records, raw, exclude_id=entity.id)
            raw.update(id=entity.id, version=entity.version + 1)
            records[index] = raw

        self._store.write(self.collection, records)
        entity.id = raw["id"]
        entity.version = raw["version"]
        self._after_save(entity)
        return entity

    def delete(self, entity: E) -> None:
        records = self._store.read(self.collection)
        index = self._index_of(records, entity.id) if entity.id is not None else None
        if index is None:
            raise EntityNotFoundError(f"{self._entity_name()} #{entity.id} not found")
        self._check_version(records[index], entity)
        self._check_unreferenced(entity)
        del records[index]
        self._store.write(self.collection, records)

    def count(self) -> int:
        return len(self._store.read(self.collection))

    def find_all(self, page: PageRequest) -> Page[E]:
        return self._query(lambda raw: True, page)

    # --- Query helpers --------------------------------------------------------

    def _query(self, predicate: Predicate, page: PageRequest) -> Page[E]:
        matching = self._matching(predicate)
        window = Page.slice(matching, page)
        return Page(content=self._to_domain_many(window.content), request=page, total=window.total)

    def _count(self, predicate: Predicate) -> int:
        return len(self._matching(predicate))

    def _matching(self, predicate: Predicate) -> list[dict]:
        return sorted(
            (raw for raw in self._store.read(self.collection) if predicate(raw)),
            key=lambda raw: raw["id"],
        )

    def _find_raw(self, entity_id: int) -> dict | None:
        for raw in self._store.read(self.collection):
            if raw["id"] == entity_id:
                return raw
        return None

    def all_by_id(self) -> dict[int, E]:
        return {raw["id"]: self._to_domain(raw) for raw in self._store.read(self.collection)}

    def _to_domain_many(self, records: list[dict]) -> list[E]:
        return [self._to_domain(raw) for raw in records]

    # --- Integrity checks -----------------------------------------------------

    def _check_version(self, stored: dict, entity: E) -> None:
        if stored.get("version", 0) != entity.version:
            raise ConcurrentModificationError(
                f"{self._entity_name()} #{entity.id} was modified concurrently "
                f"(expected version {entity.version}, stored {stored.get('version', 0)})"
            )

    def _check_unique(self, records: list[dict], raw: dict, exclude_id: int | None) -> None:
        for field in self.unique_fields:
            value = raw.get(field)
            if value is None:
                continue
            for other in records:
                if other["id"] == exclude_id:
                    continue
                other_value = other.get(field)
                if other_value is not None and other_value.casefold() == value.casefold():
                    raise DataConflictError(f"Duplicate value for {self.collection}.{field}: {value!r}")

    def _check_unreferenced(self, entity: E) -> None:
        if any(r.references(self.collection, entity.id) for r in self._referrers):
            raise DataConflictError(
                f"'{entity}' is used by existing orders and cannot be deleted"
            )

    @staticmethod
    def _index_of(records: list[dict], entity_id: int) -> int | None:
        for i, raw in enumerate(records):
            if raw["id"] == entity_id:
                return i
        return None

    def _entity_name(self) -> str:
        return type(self).__name__.removeprefix("Json").removesuffix("Repository")

    def _after_save(self, entity: E) -> None:
        """Hook for repositories that number owned entities."""

    # --- Serialization --------------------------------------------------------

    @abstractmethod
    def _to_raw(self, entity: E) -> dict: ...

    @abstractmethod
    def _to_domain(self, raw: dict) -> E: ...
