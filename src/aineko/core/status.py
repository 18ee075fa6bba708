"""Seance status detection and ordering.

Statuses, from most to least in need of attention:
- waiting: Claude is asking for permission
- idle: Claude is ready for input (or not running)
- working: Claude is busy
- unknown: no hook event received yet
"""

from functools import cmp_to_key

from aineko.core.events import (
    IDLE_PROMPT,
    NOTIFICATION,
    PERMISSION_PROMPT,
    SESSION_START,
    STOP,
    SUBAGENT_STOP,
)
from aineko.core.state import SeanceState

WAITING = "waiting"
IDLE = "idle"
WORKING = "working"
UNKNOWN = "unknown"

STATUSES = (WAITING, IDLE, WORKING, UNKNOWN)

# Lower sorts first
STATUS_PRIORITY = {WAITING: 0, IDLE: 1, WORKING: 2, UNKNOWN: 3}

# Events after which Claude is waiting for the user
_IDLE_EVENTS = {STOP, SUBAGENT_STOP, SESSION_START}


def seance_status(state: SeanceState | None) -> str:
    """Determine the status of a seance from its state.

    SessionStart counts as idle even though it also sets claude_session_id.

    Returns:
        One of "waiting", "idle", "working", "unknown".
    """
    if state is None or state.last_message is None:
        return UNKNOWN

    last_message = state.last_message
    hook_event_name = last_message.get("hook_event_name")
    notification_type = last_message.get("notification_type")

    if hook_event_name == NOTIFICATION and notification_type == PERMISSION_PROMPT:
        return WAITING

    if hook_event_name == NOTIFICATION and notification_type == IDLE_PROMPT:
        return IDLE

    if hook_event_name in _IDLE_EVENTS:
        return IDLE

    if state.claude_session_id is None:
        return IDLE

    return WORKING


def status_priority(status: str) -> int:
    """Numeric sort priority of a status; unrecognised statuses sort last."""
    return STATUS_PRIORITY.get(status, 4)


def last_update_time(seance) -> str | None:
    """Get the most recent timestamp of a seance (updated_at, else created_at)."""
    return seance.updated_at or seance.created_at


def compare_seances(seance_a, seance_b) -> int:
    """Comparator for sorting seances.

    Sorts by status priority, then most recently updated first. Timestamps
    are ISO-8601 UTC strings, so comparing them as strings orders them in
    time; a missing timestamp sorts as the oldest.
    """
    priority_a = status_priority(seance_a.status)
    priority_b = status_priority(seance_b.status)
    if priority_a != priority_b:
        return -1 if priority_a < priority_b else 1

    time_a = last_update_time(seance_a) or ""
    time_b = last_update_time(seance_b) or ""
    if time_a == time_b:
        return 0
    return -1 if time_a > time_b else 1


def sort_seances(seances) -> list:
    """Sort seances for display, most urgent first."""
    return sorted(seances, key=cmp_to_key(compare_seances))
