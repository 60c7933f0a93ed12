"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

from bakery.domain.model.user import User
from bakery.domain.repository.paging import Page, PageRequest
from bakery.domain.repository.user_repository import UserRepository
from bakery.infrastructure.persistence.json_repository import (
    JsonRepository,
    Predicate,
    contains_ignore_case,
)

SEARCHABLE_FIELDS = ("email", "first_name", "last_name", "role")


def _any_field_contains(text: str) -> Predicate:
    return lambda raw: any(contains_ignore_case(raw.get(name), text) for name in SEARCHABLE_FIELDS)


class JsonUserRepository(JsonRepository[User], UserRepository):

    collection = "users"
    unique_fields = ("email",)

    def get_by_email(self, email: str) -> User | None:
        for raw in self._matching(lambda raw: (raw.get("email") or "").casefold() == email.casefold()):
            return self._to_domain(raw)
        return None

    def find_by_any_field_containing(self, text: str, page: PageRequest) -> Page[User]:
        return self._query(_any_field_contains(text), page)

    def count_by_any_field_containing(self, text: str) -> int:
        return self._count(_any_field_contains(text))

    def _to_raw(self, entity: User) -> dict:
        return {
            "email": entity.email,
            "password_hash": entity.password_hash,
            "first_name": entity.first_name,
            "last_name": entity.last_name,
            "role": entity.role,
            "locked": entity.locked,
        }

    def _to_domain(self, raw: dict) -> User:
        return User(
            id=raw["id"],
            version=raw.get("version", 0),
            email=raw.get("email"),
            password_hash=raw.get("password_hash"),
            first_name=raw.get("first_name"),
            last_name=raw.get("last_name"),
            role=raw.get("role"),
            locked=bool(raw.get("locked", False)),
        )
