"""State management for aineko seances.

Each seance has one JSON record at {seances_dir}/{id}.json holding:
- name: Seance name (the part of the zellij session name before the colon)
- project_dir: Absolute path of the project the seance was created in
- created_at / updated_at: ISO-8601 UTC timestamps
- socket_path: Unix socket the seance's listener binds
- last_message: Last hook event received (optional)
- transcript_path: Claude Code transcript file (optional)
- claude_session_id: Set while a Claude session is running (optional)

Only the listener that owns a seance's socket (and, once, the command that
creates the seance) writes its record, so writes need no locking beyond an
atomic whole-file replace.
"""

import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path

import orjson

# Known record keys, in the order they are written
STATE_FIELDS = (
    "name",
    "project_dir",
    "created_at",
    "updated_at",
    "socket_path",
    "last_message",
    "transcript_path",
    "claude_session_id",
)


class StateError(Exception):
    """Raised when a seance state file cannot be decoded."""

    pass


@dataclass
class SeanceState:
    """Persisted state of a seance.

    Every field is optional so that records written by older versions (or
    created by the first event for an unknown seance) remain readable.
    Keys this version does not know about are kept in ``extra`` and written
    back unchanged.
    """

    name: str | None = None
    project_dir: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    socket_path: str | None = None
    last_message: dict | None = None
    transcript_path: str | None = None
    claude_session_id: str | None = None
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize to a plain dict, omitting absent fields."""
        data = dict(self.extra)
        for key in STATE_FIELDS:
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SeanceState":
        known = {key: data[key] for key in STATE_FIELDS if key in data}
        extra = {key: value for key, value in data.items() if key not in STATE_FIELDS}
        return cls(**known, extra=extra)


def now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Render a datetime as an ISO-8601 UTC string ending in "Z".

    Microseconds are always included so that string order matches time order.
    """
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="microseconds").replace("+00:00", "Z")


def seance_state_file(seance_id: str, seances_dir: Path) -> Path:
    """Get path to the state file for a seance."""
    return Path(seances_dir) / f"{seance_id}.json"


def read_seance_state(seance_id: str, seances_dir: Path) -> SeanceState | None:
    """Read the state of a seance.

    Args:
        seance_id: The seance ID.
        seances_dir: Directory holding the state files.

    Returns:
        SeanceState if a record exists, None otherwise.

    Raises:
        StateError: If the record exists but cannot be decoded, or a known
            field has the wrong type.
    """
    state_file = seance_state_file(seance_id, seances_dir)
    try:
        content = state_file.read_bytes()
    except FileNotFoundError:
        return None

    try:
        data = orjson.loads(content)
    except orjson.JSONDecodeError as e:
        raise StateError(f"Corrupt state file {state_file}: {e}") from e

    if not isinstance(data, dict):
        raise StateError(f"Corrupt state file {state_file}: expected a JSON object")

    for key in STATE_FIELDS:
        value = data.get(key)
        expected = dict if key == "last_message" else str
        if value is not None and not isinstance(value, expected):
            raise StateError(
                f"Corrupt state file {state_file}: {key} must be a {expected.__name__}"
            )

    return SeanceState.from_dict(data)


def write_seance_state(
    seance_id: str,
    state: SeanceState,
    seances_dir: Path,
    clock: Callable[[], datetime] | None = None,
) -> SeanceState:
    """Write the state of a seance.

    Stamps ``updated_at`` with the current time, overwriting whatever the
    caller supplied, and atomically replaces the previous record.

    Args:
        seance_id: The seance ID.
        state: State to persist.
        seances_dir: Directory holding the state files (created if missing).
        clock: Time source, defaults to the system UTC clock.

    Returns:
        The state as written, including the new ``updated_at``.
    """
    clock = clock or now
    seances_dir = Path(seances_dir)
    seances_dir.mkdir(parents=True, exist_ok=True)

    state = replace(state, updated_at=format_timestamp(clock()))
    state_file = seance_state_file(seance_id, seances_dir)

    fd, tmp_name = tempfile.mkstemp(
        dir=seances_dir, prefix=f".{seance_id}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as tmp_file:
            tmp_file.write(orjson.dumps(state.to_dict()))
        os.replace(tmp_name, state_file)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    return state
