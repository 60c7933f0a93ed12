"""Application service: Staff user accounts.

Locked accounts are read-only: they can neither be saved nor deleted, and
nobody may delete their own account.
"""

from __future__ import annotations

import structlog

from bakery.application.crud_service import FilterableCrudService
from bakery.domain.exceptions import DataConflictError, PermissionDeniedError
from bakery.domain.model.user import User
from bakery.domain.repository.paging import Page, PageRequest
from bakery.domain.repository.unit_of_work import UnitOfWork
from bakery.domain.repository.user_repository import UserRepository

MODIFY_LOCKED_USER_NOT_PERMITTED = "User has been locked and cannot be modified or deleted"
DELETING_SELF_NOT_PERMITTED = "You cannot delete your own account"
DUPLICATE_EMAIL_MESSAGE = "There is already a user with that email address."

logger = structlog.get_logger(__name__)


class UserService(FilterableCrudService[User]):

    def __init__(self, user_repo: UserRepository, unit_of_work: UnitOfWork) -> None:
        super().__init__(unit_of_work)
        self._user_repo = user_repo

    @property
    def repository(self) -> UserRepository:
        return self._user_repo

    def find_any_matching(self, filter_text: str | None, page: PageRequest) -> Page[User]:
        if filter_text is not None:
            return self._user_repo.find_by_any_field_containing(filter_text, page)
        return self.find(page)

    def count_any_matching(self, filter_text: str | None) -> int:
        if filter_text is not None:
            return self._user_repo.count_by_any_field_containing(filter_text)
        return self.count()

    def find(self, page: PageRequest) -> Page[User]:
        return self._user_repo.find_all(page)

    def find_by_email(self, email: str) -> User | None:
        return self._user_repo.get_by_email(email)

    def save(self, acting_user: User, entity: User) -> User:
        self._throw_if_user_locked(entity)
        entity.normalize()
        try:
            return super().save(acting_user, entity)
        except DataConflictError as exc:
            raise DataConflictError(DUPLICATE_EMAIL_MESSAGE) from exc

    def delete(self, acting_user: User, entity: User | None) -> None:
        self._throw_if_deleting_self(acting_user, entity)
        self._throw_if_user_locked(entity)
        super().delete(acting_user, entity)

    def create_new(self, acting_user: User) -> User:
        return User()

    # --- Guards ---------------------------------------------------------------

    @staticmethod
    def _throw_if_deleting_self(acting_user: User, user: User | None) -> None:
        if user is None or acting_user is None:
            return
        if acting_user is user or (user.id is not None and acting_user.id == user.id):
            logger.warning("Refused self-deletion", user_id=user.id)
            raise PermissionDeniedError(DELETING_SELF_NOT_PERMITTED)

    def _throw_if_user_locked(self, user: User | None) -> None:
        if user is None:
            return
        if user.locked or self._stored_locked(user):
            logger.warning("Refused change to locked user", user_id=user.id)
            raise PermissionDeniedError(MODIFY_LOCKED_USER_NOT_PERMITTED)

    def _stored_locked(self, user: User) -> bool:
        """Clearing ``locked`` in memory does not unlock a stored account."""
        if user.id is None:
            return False
        stored = self._user_repo.get_by_id(user.id)
        return stored is not None and stored.locked
