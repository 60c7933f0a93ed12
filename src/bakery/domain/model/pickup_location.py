"""Pickup location: a named place where customers collect orders."""

from __future__ import annotations

from dataclasses import dataclass

from bakery.domain.exceptions import FieldViolation
from bakery.domain.model import validation
from bakery.domain.model.entity import AbstractEntity


@dataclass(eq=False, kw_only=True)
class PickupLocation(AbstractEntity):

    name: str | None = None

    def validate(self) -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        if validation.require(violations, "name", self.name):
            validation.max_length(violations, "name", self.name, 255)
        return violations

    def __str__(self) -> str:
        return self.name or ""
