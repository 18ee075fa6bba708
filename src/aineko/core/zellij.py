"""zellij wrapper for aineko.

Each seance runs in its own zellij session named "{name}:{id}". Sessions
are created detached and attached in the foreground, so detaching leaves the
agent running.
"""

import os
import re
import subprocess

from aineko.core.config import SEANCE_ID_ENV, SOCKET_PATH_ENV

# First whitespace-delimited token of a `zellij list-sessions` line
_SESSION_LINE_RE = re.compile(r"^(\S+)")


def _zellij_cmd(args: list[str]) -> list[str]:
    """Build a zellij command."""
    return ["zellij"] + args


class ZellijError(Exception):
    """Raised when zellij cannot be run or a zellij command fails."""

    pass


def is_installed() -> bool:
    """Check if zellij is installed on the system.

    Returns:
        True if zellij is installed and accessible, False otherwise.
    """
    try:
        result = subprocess.run(_zellij_cmd(["--version"]), capture_output=True)
    except OSError:
        return False
    return result.returncode == 0


def list_sessions() -> list[str]:
    """List active zellij sessions.

    Returns:
        Raw `zellij list-sessions --no-formatting` lines (session name plus
        trailing metadata such as "[Created 3m ago]"), excluding exited
        sessions. zellij exits non-zero when there are no sessions, which
        yields an empty list.

    Raises:
        ZellijError: If zellij cannot be run.
    """
    try:
        result = subprocess.run(
            _zellij_cmd(["list-sessions", "--no-formatting"]),
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise ZellijError(f"Failed to run zellij: {e}") from e

    if result.returncode != 0:
        return []

    lines = (line.strip() for line in result.stdout.splitlines())
    return [line for line in lines if line and "(EXITED" not in line]


def parse_session_line(line: str) -> str | None:
    """Extract the session name from a `zellij list-sessions` line.

    Args:
        line: e.g. "my-project:x3k9p2 [Created 2h ago]"

    Returns:
        The session name (e.g. "my-project:x3k9p2"), or None if the line is blank.
    """
    match = _SESSION_LINE_RE.match(line)
    if match is None:
        return None
    return match.group(1)


def list_session_names() -> list[str]:
    """List the names of active zellij sessions, without metadata.

    Raises:
        ZellijError: If zellij cannot be run.
    """
    names = (parse_session_line(line) for line in list_sessions())
    return [name for name in names if name]


def create_session(
    name: str,
    socket_path: str | None = None,
    seance_id: str | None = None,
) -> None:
    """Create a new detached zellij session.

    Args:
        name: Session name (e.g., "my-project:x3k9p2")
        socket_path: Exported to the session as AINEKO_SOCKET_PATH.
        seance_id: Exported to the session as AINEKO_SEANCE_ID.

    Raises:
        ZellijError: If zellij command fails.
    """
    env = os.environ.copy()
    if socket_path:
        env[SOCKET_PATH_ENV] = socket_path
    if seance_id:
        env[SEANCE_ID_ENV] = seance_id

    try:
        result = subprocess.run(
            _zellij_cmd(["attach", name, "--create-background"]),
            capture_output=True,
            text=True,
            env=env,
        )
    except OSError as e:
        raise ZellijError(f"Failed to run zellij: {e}") from e

    if result.returncode != 0:
        raise ZellijError(f"Failed to create zellij session: {result.stderr}")


def attach_session(name: str) -> int:
    """Attach to an existing zellij session in the foreground.

    Blocks until the user detaches or the session ends.

    Args:
        name: Session name to attach to.

    Returns:
        zellij's exit code.

    Raises:
        ZellijError: If zellij cannot be run.
    """
    try:
        result = subprocess.run(_zellij_cmd(["attach", name]))
    except OSError as e:
        raise ZellijError(f"Failed to run zellij: {e}") from e
    return result.returncode
