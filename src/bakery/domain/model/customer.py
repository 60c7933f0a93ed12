"""Customer details, owned by exactly one Order and persisted with it."""

from __future__ import annotations

import re
from dataclasses import dataclass

from bakery.domain.exceptions import FieldViolation
from bakery.domain.model import validation
from bakery.domain.model.entity import AbstractEntity

PHONE_PATTERN = re.compile(r"^(\+\d+)?([ -]?\d+){4,14}$")


@dataclass(eq=False, kw_only=True)
class Customer(AbstractEntity):

    full_name: str | None = None
    phone_number: str | None = None
    details: str | None = None

    def validate(self) -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        if validation.require(violations, "customer.full_name", self.full_name):
            validation.max_length(violations, "customer.full_name", self.full_name, 255)
        if validation.require(violations, "customer.phone_number", self.phone_number):
            if validation.max_length(violations, "customer.phone_number", self.phone_number, 20):
                validation.matches(
                    violations,
                    "customer.phone_number",
                    self.phone_number,
                    PHONE_PATTERN,
                    "is not a valid phone number",
                )
        validation.max_length(violations, "customer.details", self.details, 255)
        return violations
