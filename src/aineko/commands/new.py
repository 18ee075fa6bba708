"""New command for aineko.

Creates a seance: a state record plus a detached zellij session, then
attaches to it with the event listener running.
"""

from pathlib import Path

import click

from aineko.commands.attach import attach_with_listener
from aineko.core.config import get_seances_dir, get_sockets_dir
from aineko.core.listener import socket_path_for
from aineko.core.seance import create_new_seance
from aineko.core.zellij import ZellijError


@click.command()
@click.argument("name", required=False)
def new(name: str | None) -> None:
    """Start a new seance.

    NAME defaults to the current directory name.

    Examples:

        aineko new

        aineko new auth-refactor
    """
    project_dir = Path.cwd()
    name = name or project_dir.name
    sockets_dir = get_sockets_dir()

    try:
        identity, _state = create_new_seance(
            name, get_seances_dir(), sockets_dir, project_dir
        )
    except (ValueError, ZellijError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Created seance: {identity.session_name}")
    socket_path = socket_path_for(identity.id, sockets_dir)
    exit_code = attach_with_listener(identity, socket_path)
    if exit_code:
        raise SystemExit(exit_code)
