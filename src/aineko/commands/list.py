"""List command for aineko.

Prints every active seance with its status.
"""

import click

from aineko.core.config import get_seances_dir
from aineko.core.display import format_seance_lines
from aineko.core.seance import Seance, list_active_seances
from aineko.core.zellij import ZellijError, list_sessions


def active_seances() -> list[Seance]:
    """Load active seances, most urgent first.

    Exits with an error if zellij cannot be run.
    """
    try:
        session_lines = list_sessions()
    except ZellijError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    return list_active_seances(get_seances_dir(), session_lines)


@click.command("list")
def list_seances() -> None:
    """List all active seances and their status.

    Examples:

        aineko list

        aineko ls
    """
    seances = active_seances()
    if not seances:
        click.echo("No active seances")
        return

    for line in format_seance_lines(seances):
        click.echo(line)
