"""Interactive seance picker for aineko.

Runs fzf over the seance list with `aineko detail` as preview and attaches
to the chosen seance. `aineko watch` restarts the picker periodically so
statuses stay fresh.
"""

import subprocess

import click
from watchfiles import watch as watch_files

from aineko.commands.attach import attach_with_listener
from aineko.commands.list import active_seances
from aineko.core.config import get_seances_dir, get_watch_interval
from aineko.core.display import format_seance_lines, parse_formatted_seance_line
from aineko.core.seance import parse_seance_from_session

# Exit status of `timeout` when the command timed out
TIMEOUT_EXIT_CODE = 124


def fzf_command(watch: bool, interval: float) -> list[str]:
    """Build the fzf command line for the picker."""
    prompt = (
        f"Select a seance to attach (auto-refresh {interval:g}s): "
        if watch
        else "Select a seance to attach: "
    )
    cmd = [
        "fzf",
        f"--prompt={prompt}",
        "--height=60%",
        "--preview-window=up:50%:wrap",
        "--preview=aineko detail {}",
    ]
    if watch:
        # --foreground keeps fzf's access to the terminal for key input
        cmd = ["timeout", "--foreground", f"{interval:g}s"] + cmd
    return cmd


def wait_for_seances(interval: float) -> None:
    """Block until a seance state file changes or the interval elapses."""
    seances_dir = get_seances_dir()
    seances_dir.mkdir(parents=True, exist_ok=True)
    for _changes in watch_files(
        seances_dir,
        rust_timeout=int(interval * 1000),
        yield_on_timeout=True,
    ):
        return


def run_picker(watch: bool = False) -> None:
    """Show the seance picker and attach to the selection.

    Args:
        watch: Restart the picker every watch interval until a seance is chosen.
    """
    interval = get_watch_interval()
    while True:
        seances = active_seances()
        if not seances:
            if not watch:
                click.echo("No active seances")
                return
            click.echo(
                f"No active seances (refreshing in {interval:g}s, press Ctrl-C to exit)"
            )
            wait_for_seances(interval)
            continue

        lines = format_seance_lines(seances)
        try:
            result = subprocess.run(
                fzf_command(watch, interval),
                input="\n".join(lines),
                stdout=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            click.echo(f"Error: failed to run fzf: {e}", err=True)
            raise SystemExit(1)

        selected = result.stdout.strip()
        if result.returncode == 0 and selected:
            parsed = parse_formatted_seance_line(selected)
            identity = parse_seance_from_session(parsed[1]) if parsed else None
            if identity is None:
                click.echo(f"Error: cannot parse selection: {selected}", err=True)
                raise SystemExit(1)
            exit_code = attach_with_listener(identity)
            if exit_code:
                raise SystemExit(exit_code)
            return

        if watch and result.returncode == TIMEOUT_EXIT_CODE:
            continue

        click.echo("No seance selected")
        return


@click.command("watch")
def watch() -> None:
    """Select a seance with the list refreshed every few seconds."""
    run_picker(watch=True)
