"""Product catalog entry.

Prices are integer cents so totals never go through floating point.
"""

from __future__ import annotations

from dataclasses import dataclass

from bakery.domain.exceptions import FieldViolation
from bakery.domain.model import validation
from bakery.domain.model.entity import AbstractEntity

MAX_PRICE = 100_000


@dataclass(eq=False, kw_only=True)
class Product(AbstractEntity):

    name: str | None = None
    price: int | None = None

    def validate(self) -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        if validation.require(violations, "name", self.name):
            validation.max_length(violations, "name", self.name, 255)
        validation.value_range(violations, "price", self.price, 0, MAX_PRICE)
        return violations

    def __str__(self) -> str:
        return self.name or ""
