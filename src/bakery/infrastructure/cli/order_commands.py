"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime, time

import click

from bakery.domain.exceptions import DomainException, EntityNotFoundError, ValidationError
from bakery.domain.model.order import Order, OrderItem, OrderState
from bakery.domain.model.user import User
from bakery.infrastructure.bootstrap import Services, build_services
from bakery.infrastructure.cli.common import (
    DATE_TYPE,
    acting_user,
    echo_page_footer,
    format_price,
    page_request,
)

STATE_CHOICE = click.Choice([state.name for state in OrderState], case_sensitive=False)


def _parse_items(raw: str) -> list[tuple[str, int]]:
    """Parse 'Croissant:3,Baguette:1' into (product name, quantity) pairs."""
    specs: list[tuple[str, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductName:Quantity'."
            )
        name, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{name}'."
            )
        specs.append((name.strip(), qty))
    return specs


def _parse_time(raw: str | None) -> time | None:
    if raw is None:
        return None
    try:
        return time.fromisoformat(raw)
    except ValueError:
        raise click.BadParameter(f"Invalid time '{raw}'. Expected HH:MM.")


def _build_items(services: Services, specs: list[tuple[str, int]]) -> list[OrderItem]:
    items: list[OrderItem] = []
    for name, quantity in specs:
        product = services.products.repository.get_by_name(name)
        if product is None:
            raise EntityNotFoundError(f"Product '{name}' not found")
        items.append(OrderItem(product=product, quantity=quantity))
    return items


def _display_order(order: Order) -> None:
    customer = order.customer
    click.echo(f"Order #{order.id}  (state={order.state.display_name if order.state else '-'})")
    click.echo(f"Customer: {customer.full_name}  {customer.phone_number}")
    if customer.details:
        click.echo(f"Details:  {customer.details}")
    click.echo(f"Due:      {order.due_date} {order.due_time:%H:%M} at {order.pickup_location}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in order.items:
        price = item.product.price if item.product else None
        click.echo(
            f"  {str(item.product):<20} {item.quantity:>5} "
            f"{format_price(price):>10} {format_price(item.total_price):>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {format_price(order.total_price):>20}")

    if order.history:
        click.echo()
        click.echo("History:")
        for entry in order.history:
            state = entry.new_state.display_name if entry.new_state else "-"
            click.echo(f"  {entry.timestamp:%Y-%m-%d %H:%M}  {state:<10} {entry.message}  ({entry.created_by})")


@click.command("create")
@click.option("--customer", required=True, help="Customer full name.")
@click.option("--phone", required=True, help="Customer phone number.")
@click.option("--details", default=None, help="Free-text customer details.")
@click.option("--items", required=True, help="Items as 'Product:Qty,Product:Qty'.")
@click.option("--due", "due_date", type=DATE_TYPE, default=None, help="Due date (YYYY-MM-DD), default today.")
@click.option("--time", "due_time", default=None, help="Due time (HH:MM), default 16:00.")
@click.option("--location", default=None, help="Pickup location name, default the first one.")
@click.option("--as", "as_email", required=True, help="Email of the acting user.")
def order_create(
    customer: str,
    phone: str,
    details: str | None,
    items: str,
    due_date: datetime | None,
    due_time: str | None,
    location: str | None,
    as_email: str,
) -> None:
    """Place a new order."""
    specs = _parse_items(items)
    parsed_time = _parse_time(due_time)
    services = build_services()
    user = acting_user(services, as_email)

    def fill(actor: User, order: Order) -> None:
        order.customer.full_name = customer
        order.customer.phone_number = phone
        order.customer.details = details
        order.items = _build_items(services, specs)
        defaults = services.orders.create_new(actor)
        order.due_date = due_date.date() if due_date else defaults.due_date
        order.due_time = parsed_time or defaults.due_time
        if location is None:
            order.pickup_location = services.locations.get_default()
        else:
            order.pickup_location = services.locations.repository.get_by_name(location)
            if order.pickup_location is None:
                raise EntityNotFoundError(f"Pickup location '{location}' not found")

    try:
        order = services.orders.save_order(user, None, fill)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order.id} created  (state={order.state.display_name})")
    click.echo(f"Total: {format_price(order.total_price)}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show an order with its history."""
    services = build_services()

    try:
        order = services.orders.load(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(order)


@click.command("state")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--state", "new_state", required=True, type=STATE_CHOICE, help="Target state.")
@click.option("--force", is_flag=True, default=False, help="Allow transitions outside the usual flow.")
@click.option("--as", "as_email", required=True, help="Email of the acting user.")
def order_state(order_id: int, new_state: str, force: bool, as_email: str) -> None:
    """Move an order to another state."""
    target = OrderState[new_state.upper()]
    services = build_services()
    user = acting_user(services, as_email)

    def transition(actor: User, order: Order) -> None:
        if not force and order.state is not None and order.state != target:
            if not order.state.can_transition_to(target):
                raise ValidationError(
                    f"Cannot move order from {order.state.display_name} to {target.display_name}"
                )
        order.change_state(actor, target)

    try:
        order = services.orders.save_order(user, order_id, transition)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order.id} is now {order.state.display_name}.")


@click.command("comment")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--text", required=True, help="Comment to record in the history.")
@click.option("--as", "as_email", required=True, help="Email of the acting user.")
def order_comment(order_id: int, text: str, as_email: str) -> None:
    """Add a comment to an order's history."""
    services = build_services()
    user = acting_user(services, as_email)

    try:
        order = services.orders.load(order_id)
        services.orders.add_comment(user, order, text)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Comment added to order #{order_id}.")


@click.command("list")
@click.option("--name", "name_filter", default=None, help="Customer name contains.")
@click.option("--from", "due_from", type=DATE_TYPE, default=None, help="Due on or after (YYYY-MM-DD).")
@click.option("--upcoming", is_flag=True, default=False, help="Only orders due today or later.")
@click.option("--page", type=int, default=0, show_default=True, help="Zero-based page.")
@click.option("--size", type=int, default=None, help="Page size.")
def order_list(
    name_filter: str | None,
    due_from: datetime | None,
    upcoming: bool,
    page: int,
    size: int | None,
) -> None:
    """List orders, filtered by customer name and due date."""
    services = build_services()

    if upcoming:
        orders = services.orders.find_any_matching_starting_today()
        total = len(orders)
    else:
        floor = due_from.date() if due_from else None
        result = services.orders.find_any_matching_after_due_date(name_filter, floor, page_request(page, size))
        orders = result.content
        total = services.orders.count_any_matching_after_due_date(name_filter, floor)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Due':<17} {'State':<10} {'Customer':<25} {'Total':>10}")
    click.echo("-" * 72)
    for o in orders:
        due = f"{o.due_date} {o.due_time:%H:%M}"
        state = o.state.display_name if o.state else "-"
        name = o.customer.full_name or ""
        click.echo(f"{o.id:<6} {due:<17} {state:<10} {name:<25} {format_price(o.total_price):>10}")
    if not upcoming:
        echo_page_footer(page, len(orders), total)
