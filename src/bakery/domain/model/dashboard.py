"""Read models produced by the dashboard aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field

from bakery.domain.model.product import Product


@dataclass(frozen=True)
class DeliveryStats:
    delivered_today: int = 0
    due_today: int = 0
    due_tomorrow: int = 0
    not_available_today: int = 0
    new_orders: int = 0


@dataclass
class DashboardData:
    """Everything the dashboard shows for one month.

    Series entries are ``None`` where the grouped query had no row, which is
    not the same as a count of zero.
    """

    delivery_stats: DeliveryStats
    deliveries_this_month: list[int | None]
    deliveries_this_year: list[int | None]
    sales_per_month: list[list[int | None]]
    product_deliveries: dict[Product, int] = field(default_factory=dict)

    def sales_for_years_back(self, years_back: int) -> list[int | None]:
        return self.sales_per_month[years_back]
