"""CLI entry point for aineko.

Usage:
    aineko                    # Pick a seance and attach (interactive)
    aineko new [NAME]         # Start a new seance
    aineko list               # List seances and their status
    aineko handle             # Forward a Claude Code hook event (used by hooks)
"""

import logging
import os

import click

from aineko.commands.detail import detail
from aineko.commands.list import list_seances
from aineko.commands.new import new
from aineko.commands.open import open_seance
from aineko.commands.select import run_picker, watch
from aineko.commands.setup import setup
from aineko.commands.status import status
from aineko.core.config import LOG_LEVEL_ENV
from aineko.core.display import status_indicator
from aineko.core.status import STATUSES
from aineko.hooks.handler import handle

# Short forms accepted for commands
ALIASES = {
    "o": "open",
    "n": "new",
    "l": "list",
    "ls": "list",
    "w": "watch",
    "h": "help",
}


class AliasedGroup(click.Group):
    """Group that also resolves the short command names in ALIASES."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx: click.Context, args: list[str]):
        _name, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; level from --verbose or AINEKO_LOG_LEVEL."""
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@click.group(
    cls=AliasedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.version_option(package_name="aineko")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Aineko - manage Claude Code agent seances.

    Each seance runs in its own zellij session; Claude Code hooks report
    what it is doing so you can see which seances need you.

    Running 'aineko' without a subcommand opens the seance picker.
    """
    configure_logging(verbose)

    # If a subcommand was invoked, let it handle things
    if ctx.invoked_subcommand is not None:
        return

    run_picker()


@click.command("help")
@click.pass_context
def help_cmd(ctx: click.Context) -> None:
    """Show this help message."""
    click.echo(ctx.parent.get_help())
    click.echo()
    click.echo("Aliases:")
    for alias, command in ALIASES.items():
        click.echo(f"  {alias:<4} {command}")
    click.echo()
    click.echo("Status indicators:")
    for status_name in STATUSES:
        click.echo(f"  {status_indicator(status_name)} {status_name}")


# Register commands
main.add_command(open_seance)
main.add_command(new)
main.add_command(list_seances)
main.add_command(watch)
main.add_command(setup)
main.add_command(status)
main.add_command(detail)
main.add_command(handle)
main.add_command(help_cmd)
