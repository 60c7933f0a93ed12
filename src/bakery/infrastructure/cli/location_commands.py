"""CLI commands for pickup locations."""

from __future__ import annotations

import click

from bakery.domain.exceptions import DomainException
from bakery.infrastructure.bootstrap import build_services
from bakery.infrastructure.cli.common import acting_user, echo_page_footer, page_request, paging_options


@click.command("add")
@click.option("--name", required=True, help="Location name.")
@click.option("--as", "as_email", default=None, help="Email of the acting user.")
def location_add(name: str, as_email: str | None) -> None:
    """Add a pickup location."""
    services = build_services()
    user = acting_user(services, as_email, required=False)
    location = services.locations.create_new(user)
    location.name = name

    try:
        location = services.locations.save(user, location)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Pickup location #{location.id} '{location.name}' added")


@click.command("list")
@paging_options
def location_list(filter_text: str | None, page: int, size: int | None) -> None:
    """List pickup locations, optionally filtered by name."""
    services = build_services()
    locations = services.locations.find_any_matching(filter_text, page_request(page, size))

    if not locations.content:
        click.echo("No pickup locations found.")
        return

    click.echo(f"{'ID':<6} {'Name':<30}")
    click.echo("-" * 37)
    for loc in locations:
        click.echo(f"{loc.id:<6} {loc.name:<30}")
    echo_page_footer(page, len(locations), services.locations.count_any_matching(filter_text))
