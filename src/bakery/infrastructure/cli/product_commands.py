"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from bakery.domain.exceptions import DomainException
from bakery.infrastructure.bootstrap import build_services
from bakery.infrastructure.cli.common import (
    acting_user,
    echo_page_footer,
    format_price,
    page_request,
    paging_options,
    parse_price,
)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 4.50).")
@click.option("--as", "as_email", default=None, help="Email of the acting user.")
def product_add(name: str, price: str, as_email: str | None) -> None:
    """Add a new product to the catalog."""
    services = build_services()
    user = acting_user(services, as_email, required=False)
    product = services.products.create_new(user)
    product.name = name
    product.price = parse_price(price)

    try:
        product = services.products.save(user, product)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {format_price(product.price)}")


@click.command("list")
@paging_options
def product_list(filter_text: str | None, page: int, size: int | None) -> None:
    """List products, optionally filtered by name."""
    services = build_services()
    request = page_request(page, size)
    products = services.products.find_any_matching(filter_text, request)

    if not products.content:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<30} {'Price':>10}")
    click.echo("-" * 48)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<30} {format_price(p.price):>10}")
    echo_page_footer(page, len(products), services.products.count_any_matching(filter_text))
