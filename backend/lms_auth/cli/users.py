"""Operator commands for user accounts."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext
from sqlalchemy.exc import IntegrityError

from lms_auth.models.user import Role, User
from lms_auth.uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Manage user accounts outside the HTTP API."""


@users_cli.command("create-superadmin")
@click.option("--email", required=True, help="Login email of the new account.")
@click.option("--full-name", required=True, help="Display name.")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Initial password (prompted when omitted).",
)
@with_appcontext
def create_superadmin_command(email: str, full_name: str, password: str) -> None:
    """Create a SuperAdmin account; the API never grants this role at signup."""
    if len(password) < 6:
        raise click.BadParameter("must be at least 6 characters", param_hint="--password")

    try:
        with SQLAlchemyUnitOfWork() as uow:
            if uow.users.exists_by_email(email):
                raise click.ClickException(f"A user with email {email} already exists.")
            user = User(full_name=full_name, email=email, role=Role.SUPER_ADMIN.value)
            user.password = password
            user.is_active = True
            uow.users.add(user)
            user_id = user.id
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    except IntegrityError as exc:
        raise click.ClickException(f"A user with email {email} already exists.") from exc

    LOGGER.info("SuperAdmin created", extra={"event": "users.create_superadmin", "user_id": user_id})
    click.echo(f"Created SuperAdmin {email} (id={user_id}).")
