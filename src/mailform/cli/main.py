"""mailform CLI entry point."""

import logging

import click

from mailform.settings import MailFormSettings


@click.group()
@click.option("--log-level", default=None, help="Override MAILFORM_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """mailform: declarative mail forms CLI."""
    settings = MailFormSettings.from_env()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


# Register subcommand groups
from mailform.cli.forms_cmd import forms  # noqa: E402

cli.add_command(forms)
