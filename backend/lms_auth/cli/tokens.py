"""Operator commands for the refresh-token ledger."""

from __future__ import annotations

import logging
from datetime import timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from lms_auth.uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Maintain the refresh-token ledger."""


@tokens_cli.command("prune")
@click.option(
    "--older-than-days",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Only delete rows that expired (or were revoked) at least this many days ago.",
)
@with_appcontext
def prune_command(older_than_days: int) -> None:
    """Delete revoked and expired refresh tokens."""
    clock = current_app.extensions["clock"]
    cutoff = clock.now() - timedelta(days=older_than_days)
    with SQLAlchemyUnitOfWork() as uow:
        deleted = uow.refresh_tokens.purge(cutoff)
    LOGGER.info("Refresh tokens pruned", extra={"event": "tokens.prune", "status": deleted})
    click.echo(f"Pruned {deleted} refresh token(s).")
