"""Order aggregate: orders, their items and their history log.

The Order is an aggregate root that owns its customer, its line items and
its history log. All three are persisted together with the order and are
never referenced from anywhere else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Protocol

from bakery.domain.exceptions import FieldViolation
from bakery.domain.model import validation
from bakery.domain.model.customer import Customer
from bakery.domain.model.entity import AbstractEntity
from bakery.domain.model.pickup_location import PickupLocation
from bakery.domain.model.product import Product
from bakery.domain.model.user import User

ORDER_PLACED_MESSAGE = "Order placed"


class OrderState(Enum):
    NEW = "NEW"
    CONFIRMED = "CONFIRMED"
    READY = "READY"
    DELIVERED = "DELIVERED"
    PROBLEM = "PROBLEM"
    CANCELLED = "CANCELLED"

    @property
    def display_name(self) -> str:
        return self.value.lower().capitalize()

    def can_transition_to(self, target: OrderState) -> bool:
        """Conventional bakery flow, for callers that want to guard transitions.

        The Order aggregate itself accepts any transition.
        """
        return target in _CONVENTIONAL_FLOW[self]


_CONVENTIONAL_FLOW: dict[OrderState, frozenset[OrderState]] = {
    OrderState.NEW: frozenset({OrderState.CONFIRMED, OrderState.PROBLEM, OrderState.CANCELLED}),
    OrderState.CONFIRMED: frozenset({OrderState.READY, OrderState.PROBLEM, OrderState.CANCELLED}),
    OrderState.READY: frozenset({OrderState.DELIVERED, OrderState.PROBLEM, OrderState.CANCELLED}),
    OrderState.PROBLEM: frozenset(
        {OrderState.CONFIRMED, OrderState.READY, OrderState.DELIVERED, OrderState.CANCELLED}
    ),
    OrderState.DELIVERED: frozenset({OrderState.PROBLEM}),
    OrderState.CANCELLED: frozenset(),
}


@dataclass(eq=False, kw_only=True)
class OrderItem(AbstractEntity):
    """A product and how many of it the customer wants."""

    product: Product | None = None
    quantity: int | None = 1
    comment: str | None = None

    @property
    def total_price(self) -> int:
        if self.quantity is None or self.product is None or self.product.price is None:
            return 0
        return self.quantity * self.product.price

    def validate(self, prefix: str = "item") -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        validation.require(violations, f"{prefix}.product", self.product)
        if validation.require(violations, f"{prefix}.quantity", self.quantity):
            validation.value_range(violations, f"{prefix}.quantity", self.quantity, 1)
        validation.max_length(violations, f"{prefix}.comment", self.comment, 255)
        return violations


@dataclass(eq=False, kw_only=True)
class HistoryItem(AbstractEntity):
    """One entry of an order's audit log.

    ``new_state`` is a snapshot of the order state at the time the entry was
    written. The timestamp is taken at construction and is not a constructor
    argument; only ``reconstitute`` restores a stored one.
    """

    created_by: User | None = None
    message: str | None = None
    new_state: OrderState | None = None
    timestamp: datetime = field(default_factory=datetime.now, init=False)

    @staticmethod
    def reconstitute(timestamp: datetime, **fields) -> HistoryItem:
        """Rebuild a persisted entry with its original timestamp."""
        item = HistoryItem(**fields)
        item.timestamp = timestamp
        return item

    def validate(self, prefix: str = "history") -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        if validation.require(violations, f"{prefix}.message", self.message):
            validation.max_length(violations, f"{prefix}.message", self.message, 255)
        validation.require(violations, f"{prefix}.created_by", self.created_by)
        return violations


class OrderSummary(Protocol):
    """Read-only view of an order without its history."""

    @property
    def id(self) -> int | None: ...

    @property
    def state(self) -> OrderState | None: ...

    @property
    def customer(self) -> Customer | None: ...

    @property
    def items(self) -> list[OrderItem]: ...

    @property
    def due_date(self) -> date | None: ...

    @property
    def due_time(self) -> time | None: ...

    @property
    def pickup_location(self) -> PickupLocation | None: ...

    @property
    def total_price(self) -> int: ...


@dataclass(eq=False, kw_only=True)
class Order(AbstractEntity):
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it seeds the state,
    the owned customer and the "Order placed" history entry. The
    ``__init__`` is intentionally plain so the repository can reconstitute
    persisted orders as they were stored.

    ``history`` is ``None`` when the order was loaded without its history
    (see ``LoadGraph.BRIEF``); it is never ``None`` for orders built via
    ``create()`` or loaded in full.
    """

    due_date: date | None = None
    due_time: time | None = None
    pickup_location: PickupLocation | None = None
    customer: Customer | None = None
    items: list[OrderItem] = field(default_factory=list)
    state: OrderState | None = None
    history: list[HistoryItem] | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(created_by: User) -> Order:
        order = Order(state=OrderState.NEW, customer=Customer(), items=[])
        order.add_history_item(created_by, ORDER_PLACED_MESSAGE)
        return order

    # --- State transitions ----------------------------------------------------

    def change_state(self, user: User, new_state: OrderState | None) -> None:
        """Move to ``new_state``, recording it in the history.

        Nothing is recorded when the state does not actually change or when
        either side is undefined. Transition legality is not checked here.
        """
        record = self.state is not None and new_state is not None and self.state != new_state
        self.state = new_state
        if record:
            self.add_history_item(user, f"Order {new_state.display_name}")

    def add_history_item(self, user: User, message: str) -> HistoryItem:
        item = HistoryItem(created_by=user, message=message, new_state=self.state)
        if self.history is None:
            self.history = []
        self.history.append(item)
        return item

    # --- Computed properties --------------------------------------------------

    @property
    def total_price(self) -> int:
        return sum(item.total_price for item in self.items or [])

    @property
    def history_loaded(self) -> bool:
        return self.history is not None

    # --- Validation -----------------------------------------------------------

    def validate(self) -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        validation.require(violations, "due_date", self.due_date)
        validation.require(violations, "due_time", self.due_time)
        validation.require(violations, "pickup_location", self.pickup_location)
        validation.require(violations, "state", self.state)
        if validation.require(violations, "customer", self.customer):
            violations.extend(self.customer.validate())
        if not self.items:
            violations.append(FieldViolation("items", "must contain at least one item"))
        for index, item in enumerate(self.items or []):
            violations.extend(item.validate(prefix=f"items[{index}]"))
        for index, entry in enumerate(self.history or []):
            violations.extend(entry.validate(prefix=f"history[{index}]"))
        return violations
