"""Helpers shared by the command modules."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

from bakery.domain.model.user import User
from bakery.domain.repository.paging import PageRequest
from bakery.infrastructure.bootstrap import Services
from bakery.infrastructure.settings import get_settings

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


def acting_user(services: Services, email: str | None, required: bool = True) -> User | None:
    """Resolve the ``--as`` option to a stored user."""
    if email is None:
        if required:
            raise click.UsageError("--as is required for this command")
        return None
    user = services.users.find_by_email(email)
    if user is None:
        raise click.ClickException(f"No user with email '{email}'")
    return user


def parse_price(raw: str) -> int:
    """Parse '4.50' into 450 cents."""
    try:
        cents = Decimal(raw) * 100
    except InvalidOperation:
        raise click.BadParameter(f"Invalid price '{raw}'.")
    if cents != cents.to_integral_value():
        raise click.BadParameter(f"Price '{raw}' has more than two decimals.")
    return int(cents)


def format_price(cents: int | None) -> str:
    if cents is None:
        return "-"
    return str(Decimal(cents).scaleb(-2))


def page_request(page: int, size: int | None) -> PageRequest:
    return PageRequest.of(page, size or get_settings().default_page_size)


def paging_options(func):
    func = click.option("--size", type=int, default=None, help="Page size.")(func)
    func = click.option("--page", type=int, default=0, show_default=True, help="Zero-based page.")(func)
    return click.option("--filter", "filter_text", default=None, help="Case-insensitive search text.")(func)


def echo_page_footer(page_number: int, shown: int, total: int) -> None:
    click.echo(f"Page {page_number}: {shown} of {total}")
