"""Hook handler for Claude Code integration.

`aineko handle` is registered as a Claude Code hook for every tracked
event. It runs inside the seance (possibly sandboxed), reads the event JSON
from stdin and forwards it to the seance's listener over the unix socket
named by AINEKO_SOCKET_PATH.
"""

import os
import sys

import click
import orjson

from aineko.core.config import SOCKET_PATH_ENV
from aineko.core.listener import send_event


def read_stdin_json() -> dict:
    """Read and parse the hook event JSON from stdin.

    Raises:
        ValueError: If stdin is empty or not a JSON object.
    """
    data = sys.stdin.read()
    if not data.strip():
        raise ValueError("no hook event on stdin")
    event = orjson.loads(data)
    if not isinstance(event, dict):
        raise ValueError("hook event must be a JSON object")
    return event


@click.command()
def handle() -> None:
    """Forward a Claude Code hook event to the seance listener.

    Called by Claude Code hooks with AINEKO_SOCKET_PATH set; reads the event
    from stdin.
    """
    socket_path = os.environ.get(SOCKET_PATH_ENV)
    if not socket_path:
        click.echo(f"Error: {SOCKET_PATH_ENV} environment variable not set", err=True)
        raise SystemExit(1)

    try:
        event = read_stdin_json()
        send_event(socket_path, event)
    except (ValueError, OSError) as e:
        click.echo(f"Error forwarding hook event: {e}", err=True)
        raise SystemExit(1)
