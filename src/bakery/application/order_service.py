"""Application service: Orders.

Owns the transactional boundaries around the Order aggregate, the filtered
order search used by the storefront, and the dashboard statistics.

Orders are never deleted through this service.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from datetime import date, time, timedelta

import structlog

from bakery.domain.exceptions import EntityNotFoundError, ValidationError
from bakery.domain.model.dashboard import DashboardData, DeliveryStats
from bakery.domain.model.order import Order, OrderState, OrderSummary
from bakery.domain.model.user import User
from bakery.domain.model.validation import ensure_valid
from bakery.domain.repository.order_repository import OrderRepository
from bakery.domain.repository.paging import Page, PageRequest
from bakery.domain.repository.unit_of_work import UnitOfWork
from bakery.domain.service import dashboard_aggregation

DEFAULT_DUE_TIME = time(16, 0)

NOT_AVAILABLE_STATES = frozenset(OrderState) - {
    OrderState.DELIVERED,
    OrderState.READY,
    OrderState.CANCELLED,
}

OrderMutator = Callable[[User, Order], None]

logger = structlog.get_logger(__name__)


class OrderService:

    def __init__(
        self,
        order_repo: OrderRepository,
        unit_of_work: UnitOfWork,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._order_repo = order_repo
        self._uow = unit_of_work
        self._today = today

    @property
    def repository(self) -> OrderRepository:
        return self._order_repo

    # --- Commands -------------------------------------------------------------

    def save_order(self, acting_user: User, order_id: int | None, mutator: OrderMutator) -> Order:
        """Create or load an order, let ``mutator`` fill it in, then persist.

        Loading, mutation, validation and the write form one unit of work:
        if any step raises, nothing is stored.
        """
        with self._uow:
            if order_id is None:
                order = Order.create(acting_user)
            else:
                order = self.load(order_id)
            mutator(acting_user, order)
            ensure_valid(order)
            saved = self._order_repo.save(order)
        logger.info(
            "Order saved",
            order_id=saved.id,
            version=saved.version,
            state=saved.state.value if saved.state else None,
            acting_user=acting_user.email,
        )
        return saved

    def save(self, acting_user: User, order: Order) -> Order:
        """Persist an order that was changed outside ``save_order``."""
        with self._uow:
            self._ensure_history(order)
            ensure_valid(order)
            saved = self._order_repo.save(order)
        logger.info("Order saved", order_id=saved.id, version=saved.version, acting_user=acting_user.email)
        return saved

    def add_comment(self, acting_user: User, order: Order, comment: str) -> Order:
        """Append a free-text history entry and persist the order.

        Works on a copy: the returned order carries the new entry and the
        refreshed version, while ``order`` itself is left as it was, also
        when the call fails.
        """
        working = copy.deepcopy(order)
        with self._uow:
            self._ensure_history(working)
            working.add_history_item(acting_user, comment)
            ensure_valid(working)
            saved = self._order_repo.save(working)
        logger.info("Comment added", order_id=saved.id, acting_user=acting_user.email)
        return saved

    # --- Queries --------------------------------------------------------------

    def load(self, order_id: int) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order

    def count(self) -> int:
        return self._order_repo.count()

    def create_new(self, acting_user: User) -> Order:
        order = Order.create(acting_user)
        order.due_time = DEFAULT_DUE_TIME
        order.due_date = self._today()
        return order

    def find_any_matching_after_due_date(
        self,
        name_filter: str | None,
        due_date_floor: date | None,
        page: PageRequest,
    ) -> Page[Order]:
        if name_filter:
            if due_date_floor is not None:
                return self._order_repo.find_by_customer_name_containing_and_due_date_from(
                    name_filter, due_date_floor, page
                )
            return self._order_repo.find_by_customer_name_containing(name_filter, page)
        if due_date_floor is not None:
            return self._order_repo.find_by_due_date_from(due_date_floor, page)
        return self._order_repo.find_all(page)

    def count_any_matching_after_due_date(self, name_filter: str | None, due_date_floor: date | None) -> int:
        if name_filter and due_date_floor is not None:
            return self._order_repo.count_by_customer_name_containing_and_due_date_from(
                name_filter, due_date_floor
            )
        if name_filter:
            return self._order_repo.count_by_customer_name_containing(name_filter)
        if due_date_floor is not None:
            return self._order_repo.count_by_due_date_from(due_date_floor)
        return self._order_repo.count()

    def find_any_matching_starting_today(self) -> list[OrderSummary]:
        return self._order_repo.find_summaries_due_from(self._today())

    # --- Dashboard ------------------------------------------------------------

    def get_dashboard_data(self, month: int, year: int) -> DashboardData:
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")

        delivered = OrderState.DELIVERED
        data = DashboardData(
            delivery_stats=self._delivery_stats(),
            deliveries_this_month=dashboard_aggregation.deliveries_per_day(
                year, month, self._order_repo.count_per_day(delivered, year, month)
            ),
            deliveries_this_year=dashboard_aggregation.deliveries_per_month(
                self._order_repo.count_per_month(delivered, year)
            ),
            sales_per_month=dashboard_aggregation.sales_matrix(
                year, month, self._order_repo.sum_per_month_last_three_years(delivered, year)
            ),
            product_deliveries=dashboard_aggregation.product_deliveries(
                self._order_repo.count_per_product(delivered, year, month)
            ),
        )
        logger.debug("Dashboard computed", month=month, year=year)
        return data

    def _delivery_stats(self) -> DeliveryStats:
        today = self._today()
        return DeliveryStats(
            due_today=self._order_repo.count_by_due_date(today),
            due_tomorrow=self._order_repo.count_by_due_date(today + timedelta(days=1)),
            delivered_today=self._order_repo.count_by_due_date_and_state_in(today, {OrderState.DELIVERED}),
            not_available_today=self._order_repo.count_by_due_date_and_state_in(today, NOT_AVAILABLE_STATES),
            new_orders=self._order_repo.count_by_state(OrderState.NEW),
        )

    # --- Internal helpers -----------------------------------------------------

    def _ensure_history(self, order: Order) -> None:
        """Brief-loaded orders must pull their stored history before appending."""
        if order.history is not None:
            return
        order.history = [] if order.id is None else self._order_repo.load_history(order.id)
