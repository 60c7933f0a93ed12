"""Abstract repository for User."""

from __future__ import annotations

from abc import abstractmethod

from bakery.domain.model.user import User
from bakery.domain.repository.crud_repository import CrudRepository
from bakery.domain.repository.paging import Page, PageRequest


class UserRepository(CrudRepository[User]):

    @abstractmethod
    def get_by_email(self, email: str) -> User | None:
        """Return the user with this email (ignoring case), or None."""

    @abstractmethod
    def find_by_any_field_containing(self, text: str, page: PageRequest) -> Page[User]:
        """Users whose email, first name, last name or role contains ``text``."""

    @abstractmethod
    def count_by_any_field_containing(self, text: str) -> int:
        """Count of ``find_by_any_field_containing`` matches."""
