"""Open command for aineko.

Attaches to the current project's seance, creating one if none exists.
"""

from pathlib import Path

import click

from aineko.commands.attach import attach_with_listener
from aineko.commands.list import active_seances
from aineko.commands.new import new


@click.command("open")
@click.pass_context
def open_seance(ctx: click.Context) -> None:
    """Open the seance for the current directory or create a new one.

    When several seances belong to the directory, the most urgent one
    (waiting, then idle, then working) is opened.
    """
    current_dir = str(Path.cwd().absolute())
    seances = [s for s in active_seances() if s.project_dir == current_dir]

    if not seances:
        click.echo(f"No existing seance for {current_dir}, creating new seance")
        ctx.invoke(new)
        return

    exit_code = attach_with_listener(seances[0].identity)
    if exit_code:
        raise SystemExit(exit_code)
