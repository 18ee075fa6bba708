"""Hook event processing for aineko.

Claude Code hooks deliver one JSON object per event. Events are kept as
plain dicts so fields added by future hook types survive untouched; only the
keys below are interpreted:
- hook_event_name: Notification, SessionStart, SessionEnd, Stop, ...
- notification_type: permission_prompt, idle_prompt, ... (Notification only)
- message: Human-readable notification text
- session_id: Claude session ID
- transcript_path: Path to the conversation transcript (.jsonl)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

from aineko.core.notify import send_desktop_notification
from aineko.core.state import SeanceState, read_seance_state, write_seance_state

logger = logging.getLogger(__name__)

# Hook event names
NOTIFICATION = "Notification"
PRE_TOOL_USE = "PreToolUse"
SESSION_END = "SessionEnd"
SESSION_START = "SessionStart"
STOP = "Stop"
SUBAGENT_STOP = "SubagentStop"
USER_PROMPT_SUBMIT = "UserPromptSubmit"

# Hook events aineko subscribes to
HOOK_EVENTS = [
    NOTIFICATION,
    PRE_TOOL_USE,
    SESSION_END,
    SESSION_START,
    STOP,
    SUBAGENT_STOP,
    USER_PROMPT_SUBMIT,
]

# Notification types
PERMISSION_PROMPT = "permission_prompt"
IDLE_PROMPT = "idle_prompt"

DEFAULT_PERMISSION_MESSAGE = "Claude needs your permission"
STOPPED_MESSAGE = "Claude session stopped and ready for input"


@dataclass(frozen=True)
class Notification:
    """A desktop notification to send after an event is processed."""

    summary: str
    body: str


def reduce_event(
    state: SeanceState | None, event: dict, seance_id: str = ""
) -> tuple[SeanceState, Notification | None]:
    """Apply a hook event to a seance's state.

    Args:
        state: Current state, or None if the seance has no record yet.
        event: The hook event.
        seance_id: Used to label notifications when the state has no name.

    Returns:
        Tuple of (next state, notification to send or None).
    """
    state = state or SeanceState()
    hook_event_name = event.get("hook_event_name")

    updated = replace(state, last_message=event)

    if event.get("transcript_path") is not None:
        updated = replace(updated, transcript_path=event["transcript_path"])

    if hook_event_name == SESSION_START:
        updated = replace(updated, claude_session_id=event.get("session_id"))
    elif hook_event_name == SESSION_END:
        updated = replace(updated, claude_session_id=None)

    summary = f"Aineko: {state.name or seance_id}"
    notification = None
    if (
        hook_event_name == NOTIFICATION
        and event.get("notification_type") == PERMISSION_PROMPT
    ):
        notification = Notification(
            summary, event.get("message") or DEFAULT_PERMISSION_MESSAGE
        )
    elif hook_event_name == STOP:
        notification = Notification(summary, STOPPED_MESSAGE)

    return updated, notification


def handle_hook_event(
    seance_id: str,
    event: dict,
    seances_dir: Path,
    notifier: Callable[[str, str], bool] | None = send_desktop_notification,
) -> None:
    """Process a hook event received by a seance's listener.

    Reads the seance state, applies the event, persists the result and sends
    a desktop notification when the event calls for one. Failures are logged
    and swallowed so one bad event cannot stop the listener.

    Args:
        seance_id: The seance the event belongs to.
        event: The decoded hook event.
        seances_dir: Directory holding the state files.
        notifier: Called as notifier(summary, body); None disables notifications.
    """
    try:
        if not isinstance(event, dict):
            raise TypeError(f"expected a JSON object, got {type(event).__name__}")

        state = read_seance_state(seance_id, seances_dir)
        updated, notification = reduce_event(state, event, seance_id=seance_id)
        write_seance_state(seance_id, updated, seances_dir)
        logger.debug(
            "Seance %s: recorded %s event", seance_id, event.get("hook_event_name")
        )

        if notification is not None and notifier is not None:
            notifier(notification.summary, notification.body)
    except Exception:
        logger.exception("Error processing hook event for seance %s", seance_id)
