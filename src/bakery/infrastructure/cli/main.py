import click

from bakery.infrastructure.cli.dashboard_commands import dashboard_show
from bakery.infrastructure.cli.location_commands import location_add, location_list
from bakery.infrastructure.cli.order_commands import (
    order_comment,
    order_create,
    order_list,
    order_show,
    order_state,
)
from bakery.infrastructure.cli.product_commands import product_add, product_list
from bakery.infrastructure.cli.user_commands import user_add, user_delete, user_list
from bakery.infrastructure.logging import configure_logging
from bakery.infrastructure.settings import get_settings


@click.group()
def cli() -> None:
    """Bakery order management"""
    configure_logging(get_settings().log_level)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def location() -> None:
    """Manage pickup locations."""


@cli.group()
def user() -> None:
    """Manage staff users."""


@cli.group()
def dashboard() -> None:
    """Delivery and sales statistics."""


# Register subcommands
order.add_command(order_comment)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_state)
product.add_command(product_add)
product.add_command(product_list)
location.add_command(location_add)
location.add_command(location_list)
user.add_command(user_add)
user.add_command(user_delete)
user.add_command(user_list)
dashboard.add_command(dashboard_show)
