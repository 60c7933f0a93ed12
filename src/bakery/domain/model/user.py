"""Back-office user accounts and their roles."""

from __future__ import annotations

from dataclasses import dataclass

from bakery.domain.exceptions import FieldViolation
from bakery.domain.model import validation
from bakery.domain.model.entity import AbstractEntity


class Role:
    BARISTA = "barista"
    BAKER = "baker"
    ADMIN = "admin"

    @staticmethod
    def all_roles() -> tuple[str, ...]:
        return (Role.BARISTA, Role.BAKER, Role.ADMIN)


@dataclass(eq=False, kw_only=True)
class User(AbstractEntity):
    """A staff member who places and handles orders.

    ``email`` is unique regardless of case and is normalised to lower case
    by ``normalize()`` before every write.
    """

    email: str | None = None
    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None
    locked: bool = False

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def normalize(self) -> None:
        if self.email is not None:
            self.email = self.email.lower()

    def validate(self) -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        if validation.require(violations, "email", self.email):
            if validation.max_length(violations, "email", self.email, 255):
                validation.is_email(violations, "email", self.email)
        if validation.require(violations, "password_hash", self.password_hash):
            validation.length_between(violations, "password_hash", self.password_hash, 4, 255)
        for name in ("first_name", "last_name"):
            value = getattr(self, name)
            if validation.require(violations, name, value):
                validation.max_length(violations, name, value, 255)
        if validation.require(violations, "role", self.role):
            if self.role not in Role.all_roles():
                violations.append(FieldViolation("role", f"must be one of {', '.join(Role.all_roles())}"))
        return violations

    def __str__(self) -> str:
        return self.email or ""
