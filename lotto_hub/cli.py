"""Flask CLI commands (``flask --app wsgi <command>``)."""

from __future__ import annotations

import click
from flask import Flask, current_app
from flask.cli import with_appcontext

from lotto_hub.db import get_state
from lotto_hub.services.auth_service import Role, TokenService
from lotto_hub.services.retention_service import RetentionService


def retention_from_config(config) -> RetentionService:  # type: ignore[no-untyped-def]
    return RetentionService(
        results_days=int(config["RESULTS_RETENTION_DAYS"]),
        sales_hours=int(config["SALES_RETENTION_HOURS"]),
        winners_hours=int(config["WINNERS_RETENTION_HOURS"]),
    )


@click.command("purge-expired")
@with_appcontext
def purge_expired_command() -> None:
    """Drop results, sales and winners past their retention window."""

    report = retention_from_config(current_app.config).purge(get_state())
    click.echo(f"Purged {report.result_dates} result date(s), {report.sales} sale(s), {report.winners} winner(s).")


@click.command("issue-token")
@click.argument("uid")
@click.option("--role", type=click.Choice([r.value for r in Role]), default=Role.SELLER.value, show_default=True)
@with_appcontext
def issue_token_command(uid: str, role: str) -> None:
    """Print a bearer token for UID with ROLE."""

    tokens = TokenService(str(current_app.config["SECRET_KEY"]), int(current_app.config["TOKEN_MAX_AGE_SECONDS"]))
    click.echo(tokens.issue(uid, role))


def register_commands(app: Flask) -> None:
    app.cli.add_command(purge_expired_command)
    app.cli.add_command(issue_token_command)
