"""Domain service: Dashboard Aggregation.

Reshapes the grouped rows returned by the order reporting queries into the
dense series the dashboard draws. Everything here is pure: no repository
access, no clock.

Gap-filling always allocates the full-length series of ``None`` first and
then overlays only the indices present in the grouped rows, so "no data" is
never confused with zero.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable

from bakery.domain.model.product import Product

MONTHS_PER_YEAR = 12
SALES_YEARS = 3


def gap_fill(length: int, rows: Iterable[tuple[int, int]]) -> list[int | None]:
    """Turn 1-based ``(index, value)`` rows into a dense list of ``length``.

    Indices outside ``1..length`` are a bug in the query and raise
    IndexError rather than being silently dropped.
    """
    series: list[int | None] = [None] * length
    for index, value in rows:
        if not 1 <= index <= length:
            raise IndexError(f"Group index {index} outside 1..{length}")
        series[index - 1] = value
    return series


def deliveries_per_day(year: int, month: int, rows: Iterable[tuple[int, int]]) -> list[int | None]:
    days_in_month = calendar.monthrange(year, month)[1]
    return gap_fill(days_in_month, rows)


def deliveries_per_month(rows: Iterable[tuple[int, int]]) -> list[int | None]:
    return gap_fill(MONTHS_PER_YEAR, rows)


def sales_matrix(
    year: int, month: int, rows: Iterable[tuple[int, int, int]]
) -> list[list[int | None]]:
    """Build the years-back × month sales matrix.

    Row 0 is ``year``, row 1 the year before and so on. The cell for the
    requested (year, month) stays ``None``: that month is still in progress
    and must not be compared against finished months. Rows for years outside
    the three-year window are skipped.
    """
    matrix: list[list[int | None]] = [[None] * MONTHS_PER_YEAR for _ in range(SALES_YEARS)]
    for row_year, row_month, total in rows:
        years_back = year - row_year
        if not 0 <= years_back < SALES_YEARS:
            continue
        if years_back == 0 and row_month == month:
            continue
        matrix[years_back][row_month - 1] = total
    return matrix


def product_deliveries(rows: Iterable[tuple[Product, int]]) -> dict[Product, int]:
    """Keep the query's product-id order; later duplicates overwrite earlier ones."""
    deliveries: dict[Product, int] = {}
    for product, quantity in rows:
        deliveries[product] = int(quantity)
    return deliveries
