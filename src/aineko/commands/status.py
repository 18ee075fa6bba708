"""Status command for aineko.

Prints diagnostics: where state lives and which hooks are installed.
"""

import click

from aineko.core.config import get_seances_dir
from aineko.core.events import HOOK_EVENTS
from aineko.hooks.install import (
    enabled_hooks,
    get_claude_settings_path,
    read_claude_settings,
)


def print_configured_hooks(hooks: dict | None) -> None:
    """Print which aineko hooks are registered."""
    enabled = enabled_hooks(hooks)
    click.echo(f"Aineko hooks ({len(enabled)}/{len(HOOK_EVENTS)} enabled):")
    for event in HOOK_EVENTS:
        mark = "✓" if event in enabled else "✗"
        click.echo(f"  {mark} {event}")


@click.command()
def status() -> None:
    """Print diagnostics information."""
    settings_path = get_claude_settings_path()
    click.echo(f"Seances state directory: {get_seances_dir()}")
    click.echo()
    click.echo(f"Claude Code settings: {settings_path}")
    click.echo()
    print_configured_hooks(read_claude_settings(settings_path).get("hooks"))
