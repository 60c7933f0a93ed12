"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so outer layers can catch them uniformly and display user-friendly messages.
Anything that is not a DomainException is an infrastructure failure and is
left to propagate untouched.
"""

from __future__ import annotations

from dataclasses import dataclass


class DomainException(Exception):
    """Base class for all domain errors."""


@dataclass(frozen=True)
class FieldViolation:
    """A single failed field constraint."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(DomainException):
    """One or more field constraints were violated.

    Raised before any persistence attempt; ``violations`` lists every
    failing field, not just the first one.
    """

    def __init__(self, violations: list[FieldViolation] | str) -> None:
        if isinstance(violations, str):
            violations = [FieldViolation(field="", message=violations)]
        self.violations = list(violations)
        super().__init__("; ".join(str(v) if v.field else v.message for v in self.violations))


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class DataConflictError(DomainException):
    """A write would break a data-integrity rule such as a unique field.

    The message is safe to show to the end user verbatim.
    """


class PermissionDeniedError(DataConflictError):
    """The acting user is not allowed to modify or delete the target."""


class ConcurrentModificationError(DomainException):
    """The entity was changed by someone else since it was loaded."""
