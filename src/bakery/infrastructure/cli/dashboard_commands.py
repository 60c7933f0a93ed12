"""CLI command for the dashboard statistics."""

from __future__ import annotations

from datetime import date

import click

from bakery.domain.exceptions import DomainException
from bakery.infrastructure.bootstrap import build_services
from bakery.infrastructure.cli.common import format_price


def _series(values: list[int | None]) -> str:
    return " ".join("-" if v is None else str(v) for v in values)


@click.command("show")
@click.option("--month", type=int, default=None, help="Month (1-12), default the current one.")
@click.option("--year", type=int, default=None, help="Year, default the current one.")
def dashboard_show(month: int | None, year: int | None) -> None:
    """Print delivery statistics and sales figures."""
    today = date.today()
    month = month or today.month
    year = year or today.year
    services = build_services()

    try:
        data = services.orders.get_dashboard_data(month, year)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    stats = data.delivery_stats
    click.echo(f"Due today:           {stats.due_today}")
    click.echo(f"Due tomorrow:        {stats.due_tomorrow}")
    click.echo(f"Delivered today:     {stats.delivered_today}")
    click.echo(f"Not available today: {stats.not_available_today}")
    click.echo(f"New orders:          {stats.new_orders}")
    click.echo()
    click.echo(f"Deliveries {year}-{month:02d} per day:")
    click.echo(f"  {_series(data.deliveries_this_month)}")
    click.echo(f"Deliveries {year} per month:")
    click.echo(f"  {_series(data.deliveries_this_year)}")
    click.echo()
    click.echo("Sales per month:")
    for years_back, row in enumerate(data.sales_per_month):
        cells = " ".join(f"{format_price(v):>9}" for v in row)
        click.echo(f"  {year - years_back}  {cells}")

    if data.product_deliveries:
        click.echo()
        click.echo(f"{'Product':<30} {'Delivered':>10}")
        click.echo("-" * 41)
        for product, quantity in data.product_deliveries.items():
            click.echo(f"{product.name:<30} {quantity:>10}")
