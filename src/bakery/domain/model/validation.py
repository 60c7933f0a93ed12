"""Small field-constraint helpers used by the entities' ``validate()``.

Each helper appends a FieldViolation to ``violations`` when the constraint
fails and returns whether the value passed, so callers can skip dependent
checks.
"""

from __future__ import annotations

import re

from bakery.domain.exceptions import FieldViolation, ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require(violations: list[FieldViolation], field: str, value: object) -> bool:
    if value is None or (isinstance(value, str) and not value.strip()):
        violations.append(FieldViolation(field, "must not be blank"))
        return False
    return True


def max_length(violations: list[FieldViolation], field: str, value: str | None, limit: int) -> bool:
    if value is not None and len(value) > limit:
        violations.append(FieldViolation(field, f"must be at most {limit} characters"))
        return False
    return True


def length_between(
    violations: list[FieldViolation], field: str, value: str | None, low: int, high: int
) -> bool:
    if value is not None and not low <= len(value) <= high:
        violations.append(FieldViolation(field, f"length must be between {low} and {high}"))
        return False
    return True


def value_range(
    violations: list[FieldViolation], field: str, value: int | None, low: int, high: int | None = None
) -> bool:
    if value is None:
        return True
    if value < low or (high is not None and value > high):
        bound = f"between {low} and {high}" if high is not None else f"at least {low}"
        violations.append(FieldViolation(field, f"must be {bound}"))
        return False
    return True


def matches(
    violations: list[FieldViolation], field: str, value: str | None, pattern: re.Pattern[str], message: str
) -> bool:
    if value is not None and not pattern.match(value):
        violations.append(FieldViolation(field, message))
        return False
    return True


def is_email(violations: list[FieldViolation], field: str, value: str | None) -> bool:
    return matches(violations, field, value, EMAIL_PATTERN, "must be a well-formed email address")


def ensure_valid(entity) -> None:
    """Raise ValidationError carrying every violation reported by ``entity.validate()``."""
    violations = entity.validate()
    if violations:
        raise ValidationError(violations)
