"""Seance identity and listing.

A seance is identified by its zellij session name "{name}:{id}". The
identity is never stored; it is parsed from the live session list every time
seances are listed, then merged with the seance's persisted state.
"""

import logging
import re
import secrets
from dataclasses import dataclass
from pathlib import Path

from aineko.core.listener import socket_path_for
from aineko.core.state import (
    SeanceState,
    StateError,
    format_timestamp,
    now,
    read_seance_state,
    write_seance_state,
)
from aineko.core.status import seance_status, sort_seances
from aineko.core.zellij import create_session, parse_session_line

logger = logging.getLogger(__name__)

SEANCE_ID_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789"
SEANCE_ID_LENGTH = 6

# Any id length is accepted; only the generator fixes it at SEANCE_ID_LENGTH
_SESSION_NAME_RE = re.compile(r"([^:]+):([a-z0-9]+)")


@dataclass(frozen=True)
class SeanceIdentity:
    """Identity of a seance, derived from its zellij session name.

    Attributes:
        id: Lowercase alphanumeric seance ID (e.g., "x3k9p2")
        name: Human-readable name, without colons (e.g., "my-project")
        session_name: zellij session name, always "{name}:{id}"
    """

    id: str
    name: str
    session_name: str


@dataclass
class Seance:
    """A live seance: identity, persisted state (if any) and derived status."""

    identity: SeanceIdentity
    state: SeanceState | None
    status: str

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def session_name(self) -> str:
        return self.identity.session_name

    @property
    def project_dir(self) -> str | None:
        return self.state.project_dir if self.state else None

    @property
    def created_at(self) -> str | None:
        return self.state.created_at if self.state else None

    @property
    def updated_at(self) -> str | None:
        return self.state.updated_at if self.state else None


def generate_seance_id(length: int = SEANCE_ID_LENGTH) -> str:
    """Generate a short random lowercase alphanumeric seance ID."""
    return "".join(secrets.choice(SEANCE_ID_CHARS) for _ in range(length))


def validate_seance_name(name: str) -> None:
    """Check that a seance name can round-trip through its session name.

    Raises:
        ValueError: If the name is empty or contains a colon or whitespace.
    """
    if not name or ":" in name or any(c.isspace() for c in name):
        raise ValueError(
            f"Invalid seance name {name!r}: must be non-empty, without colons or spaces"
        )


def session_name_for(name: str, seance_id: str) -> str:
    """Build the zellij session name of a seance."""
    return f"{name}:{seance_id}"


def parse_seance_from_session(line: str) -> SeanceIdentity | None:
    """Extract seance identity from a zellij session name or list-sessions line.

    Args:
        line: e.g. "my-project:x3k9p2m7" or "my-project:x3k9p2m7 [Created 3m ago]"

    Returns:
        SeanceIdentity, or None if the session is not an aineko seance.
    """
    session_name = parse_session_line(line)
    if session_name is None:
        return None

    match = _SESSION_NAME_RE.fullmatch(session_name)
    if match is None:
        return None

    name, seance_id = match.groups()
    return SeanceIdentity(id=seance_id, name=name, session_name=session_name)


def build_seance(identity: SeanceIdentity, seances_dir: Path) -> Seance:
    """Merge a seance identity with its persisted state and status.

    A corrupt state file is logged and treated as missing so that one bad
    record does not hide every other seance.
    """
    try:
        state = read_seance_state(identity.id, seances_dir)
    except StateError as e:
        logger.warning("Ignoring state of seance %s: %s", identity.id, e)
        state = None
    return Seance(identity=identity, state=state, status=seance_status(state))


def list_active_seances(seances_dir: Path, session_lines: list[str]) -> list[Seance]:
    """Build the sorted list of active seances.

    Args:
        seances_dir: Directory holding the state files.
        session_lines: Active zellij sessions (see zellij.list_sessions).

    Returns:
        Seances sorted by status priority, then most recently updated first.
    """
    identities = (parse_seance_from_session(line) for line in session_lines)
    seances = [
        build_seance(identity, seances_dir) for identity in identities if identity
    ]
    return sort_seances(seances)


def create_new_seance(
    name: str,
    seances_dir: Path,
    sockets_dir: Path,
    project_dir: Path,
) -> tuple[SeanceIdentity, SeanceState]:
    """Create a new seance: initial state record plus a detached zellij session.

    The state is written before the session exists so the first hook event
    already finds a record with the seance's name.

    Raises:
        ValueError: If the name is not a valid seance name.
        ZellijError: If the zellij session cannot be created.
    """
    validate_seance_name(name)
    seance_id = generate_seance_id()
    identity = SeanceIdentity(
        id=seance_id, name=name, session_name=session_name_for(name, seance_id)
    )
    sock_path = str(socket_path_for(seance_id, sockets_dir))

    state = SeanceState(
        name=name,
        project_dir=str(Path(project_dir).absolute()),
        created_at=format_timestamp(now()),
        socket_path=sock_path,
    )
    state = write_seance_state(seance_id, state, seances_dir)

    create_session(identity.session_name, socket_path=sock_path, seance_id=seance_id)
    return identity, state
