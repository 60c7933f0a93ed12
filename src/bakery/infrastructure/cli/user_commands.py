"""CLI commands for staff user accounts."""

from __future__ import annotations

import click

from bakery.domain.exceptions import DomainException
from bakery.domain.model.user import Role
from bakery.infrastructure.bootstrap import build_services
from bakery.infrastructure.cli.common import acting_user, echo_page_footer, page_request, paging_options
from bakery.infrastructure.security import hash_password


@click.command("add")
@click.option("--email", required=True, help="Login email, unique.")
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--role", required=True, type=click.Choice(Role.all_roles()))
@click.option("--password", required=True, prompt=True, hide_input=True)
@click.option("--locked", is_flag=True, default=False, help="Create the account locked.")
@click.option("--as", "as_email", default=None, help="Email of the acting user.")
def user_add(
    email: str,
    first_name: str,
    last_name: str,
    role: str,
    password: str,
    locked: bool,
    as_email: str | None,
) -> None:
    """Add a staff user."""
    services = build_services()
    actor = acting_user(services, as_email, required=False)
    user = services.users.create_new(actor)
    user.email = email
    user.first_name = first_name
    user.last_name = last_name
    user.role = role
    user.password_hash = hash_password(password)

    try:
        user = services.users.save(actor, user)
        if locked:
            # Locked accounts cannot be saved, so the flag goes on last.
            user.locked = True
            user = services.users.repository.save(user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User #{user.id} '{user.email}' added as {user.role}")


@click.command("delete")
@click.option("--id", "user_id", required=True, type=int, help="User ID to delete.")
@click.option("--as", "as_email", required=True, help="Email of the acting user.")
def user_delete(user_id: int, as_email: str) -> None:
    """Delete a staff user."""
    services = build_services()
    actor = acting_user(services, as_email)

    try:
        services.users.delete_by_id(actor, user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User #{user_id} deleted.")


@click.command("list")
@paging_options
def user_list(filter_text: str | None, page: int, size: int | None) -> None:
    """List users, filtered on email, name or role."""
    services = build_services()
    users = services.users.find_any_matching(filter_text, page_request(page, size))

    if not users.content:
        click.echo("No users found.")
        return

    click.echo(f"{'ID':<6} {'Email':<30} {'Name':<25} {'Role':<8} {'Locked':<6}")
    click.echo("-" * 79)
    for u in users:
        click.echo(f"{u.id:<6} {u.email:<30} {u.full_name:<25} {u.role:<8} {'yes' if u.locked else '':<6}")
    echo_page_footer(page, len(users), services.users.count_any_matching(filter_text))
