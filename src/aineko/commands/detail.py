"""Detail command for aineko.

Shows the persisted state of a seance; also used as the picker's preview.
"""

import re

import click

from aineko.core.config import get_seances_dir
from aineko.core.display import (
    format_hook_event,
    format_time,
    parse_formatted_seance_line,
    status_indicator,
)
from aineko.core.seance import session_name_for
from aineko.core.state import StateError, read_seance_state
from aineko.core.status import seance_status

_SEANCE_ID_RE = re.compile(r"[a-z0-9]+")


def resolve_seance_id(seance_arg: str) -> str | None:
    """Get a seance ID from a plain ID, a session name or a formatted list line."""
    if _SEANCE_ID_RE.fullmatch(seance_arg):
        return seance_arg
    parsed = parse_formatted_seance_line(seance_arg)
    if parsed is None:
        return None
    return parsed[0]


@click.command()
@click.argument("seance")
def detail(seance: str) -> None:
    """Show detailed information about a seance.

    SEANCE is a seance ID, a session name, or a line from `aineko list`.

    Examples:

        aineko detail x3k9p2

        aineko detail my-project:x3k9p2
    """
    seance_id = resolve_seance_id(seance)
    try:
        state = read_seance_state(seance_id, get_seances_dir()) if seance_id else None
    except StateError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if state is None:
        click.echo(f"Error: seance not found: {seance}", err=True)
        raise SystemExit(1)

    status = seance_status(state)
    click.echo(f"Seance: {state.name}")
    click.echo(f"ID: {seance_id}")
    if state.name:
        click.echo(f"Session: {session_name_for(state.name, seance_id)}")
    click.echo(f"Status: {status} {status_indicator(status)}")
    if state.project_dir:
        click.echo(f"Project: {state.project_dir}")
    if state.created_at:
        click.echo(f"Created: {format_time(state.created_at)}")
    if state.updated_at:
        click.echo(f"Updated: {format_time(state.updated_at)}")
    if state.claude_session_id:
        click.echo(f"Claude Session: {state.claude_session_id}")
    if state.transcript_path:
        click.echo(f"Transcript: {state.transcript_path}")
    if state.last_message is not None:
        click.echo()
        click.echo(format_hook_event(state.last_message))
