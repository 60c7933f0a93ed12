"""Abstract repository for the Order aggregate.

Paged finders load orders with ``LoadGraph.BRIEF``; ``get_by_id`` loads the
full graph unless told otherwise. The reporting queries return grouped
tuples exactly as a SQL ``GROUP BY`` would, leaving gap-filling to the
dashboard aggregation.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Collection
from datetime import date

from bakery.domain.model.order import HistoryItem, Order, OrderState, OrderSummary
from bakery.domain.model.product import Product
from bakery.domain.repository.crud_repository import CrudRepository
from bakery.domain.repository.paging import LoadGraph, Page, PageRequest


class OrderRepository(CrudRepository[Order]):

    @abstractmethod
    def get_by_id(self, entity_id: int, graph: LoadGraph = LoadGraph.FULL) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def load_history(self, order_id: int) -> list[HistoryItem]:
        """Return the stored history log of an order (empty if unknown)."""

    # --- Filtered finders -----------------------------------------------------

    @abstractmethod
    def find_by_due_date_from(self, floor: date, page: PageRequest) -> Page[Order]:
        """Orders with ``due_date >= floor``."""

    @abstractmethod
    def find_by_customer_name_containing(self, text: str, page: PageRequest) -> Page[Order]:
        """Orders whose customer full name contains ``text``, ignoring case."""

    @abstractmethod
    def find_by_customer_name_containing_and_due_date_from(
        self, text: str, floor: date, page: PageRequest
    ) -> Page[Order]:
        """Intersection of the two single-filter finders."""

    @abstractmethod
    def count_by_due_date_from(self, floor: date) -> int: ...

    @abstractmethod
    def count_by_customer_name_containing(self, text: str) -> int: ...

    @abstractmethod
    def count_by_customer_name_containing_and_due_date_from(self, text: str, floor: date) -> int: ...

    @abstractmethod
    def find_summaries_due_from(self, floor: date) -> list[OrderSummary]:
        """Lightweight projections of every order due on or after ``floor``."""

    # --- Dashboard counters ---------------------------------------------------

    @abstractmethod
    def count_by_due_date(self, due_date: date) -> int: ...

    @abstractmethod
    def count_by_due_date_and_state_in(self, due_date: date, states: Collection[OrderState]) -> int: ...

    @abstractmethod
    def count_by_state(self, state: OrderState) -> int: ...

    # --- Reporting queries ----------------------------------------------------

    @abstractmethod
    def count_per_month(self, state: OrderState, year: int) -> list[tuple[int, int]]:
        """(month, order count) for ``year``, months without orders omitted."""

    @abstractmethod
    def sum_per_month_last_three_years(self, state: OrderState, year: int) -> list[tuple[int, int, int]]:
        """(year, month, sum of quantity * price) for ``year - 3 .. year``.

        Ordered by year descending, then month.
        """

    @abstractmethod
    def count_per_day(self, state: OrderState, year: int, month: int) -> list[tuple[int, int]]:
        """(day of month, order count), days without orders omitted."""

    @abstractmethod
    def count_per_product(self, state: OrderState, year: int, month: int) -> list[tuple[Product, int]]:
        """(product, summed quantity), ordered by product id."""
