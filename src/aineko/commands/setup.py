"""Setup command for aineko.

Installs hooks and configures Claude Code integration.
"""

import platform

import click

from aineko.commands.status import print_configured_hooks
from aineko.core.zellij import is_installed as zellij_is_installed
from aineko.hooks.install import (
    get_claude_settings_path,
    read_claude_settings,
    setup_hooks,
)


@click.command()
def setup() -> None:
    """Set up aineko integration with Claude Code.

    This command:

    \b
    1. Checks that zellij is installed
    2. Registers `aineko handle` as a Claude Code hook for session
       start/end, prompts, tool use, notifications and stops
    3. Backs up the previous settings to settings.json.backup

    Examples:

        aineko setup
    """
    # 1. Check zellij
    if not zellij_is_installed():
        click.echo("Warning: zellij is not installed.", err=True)
        if platform.system() == "Darwin":
            click.echo("Install with: brew install zellij", err=True)
        else:
            click.echo("Install with your package manager or cargo install zellij", err=True)

    # 2. Install hooks
    settings_path = get_claude_settings_path()
    click.echo("Setting up aineko hooks in Claude Code settings...")
    click.echo(f"Settings file: {settings_path}")
    try:
        backup_path = setup_hooks(settings_path)
    except OSError as e:
        click.echo(f"Error setting up hooks: {e}", err=True)
        raise SystemExit(1)

    if backup_path is not None:
        click.echo(f"Backup created: {backup_path}")

    click.echo()
    click.echo("✓ Hooks configured successfully!")
    click.echo()
    click.echo("Aineko will now receive events from Claude Code sessions.")
    click.echo()
    print_configured_hooks(read_claude_settings(settings_path).get("hooks"))
