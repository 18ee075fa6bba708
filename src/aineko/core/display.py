"""Formatting of seances and hook events for the terminal."""

import re
from datetime import datetime, tzinfo

from aineko.core.status import IDLE, UNKNOWN, WAITING, WORKING, last_update_time

STATUS_INDICATORS = {
    WAITING: ">",
    IDLE: "○",
    WORKING: "●",
    UNKNOWN: "?",
}

# "[●] my-project:abc123de | 10:00 AM" -> "my-project:abc123de"
_FORMATTED_LINE_RE = re.compile(r"([^:\s]+:([a-z0-9]+))")


def status_indicator(status: str) -> str:
    """Get the single-character indicator for a status."""
    return STATUS_INDICATORS.get(status, "!")


def _parse_timestamp(timestamp: str) -> datetime:
    # Python < 3.11 does not accept a trailing "Z"
    return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))


def _short_time(dt: datetime) -> str:
    return f"{dt.hour % 12 or 12}:{dt:%M} {dt:%p}"


def format_time(
    timestamp: str | None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> str | None:
    """Format a UTC timestamp in local time.

    Shows "10:00 AM" for today and "11/17/25, 10:00 AM" for other days.

    Args:
        timestamp: ISO-8601 timestamp, e.g. "2025-11-17T10:00:00Z".
        now: Reference time for "today" (defaults to the current time).
        tz: Display timezone (defaults to the system timezone).

    Returns:
        The formatted time, the input unchanged if it is not ISO-8601, or
        None if timestamp is None.
    """
    if timestamp is None:
        return None

    try:
        dt = _parse_timestamp(timestamp).astimezone(tz)
    except (TypeError, ValueError):
        return str(timestamp)
    today = (now or datetime.now(dt.tzinfo)).astimezone(dt.tzinfo).date()

    if dt.date() == today:
        return _short_time(dt)
    return f"{dt.month}/{dt.day}/{dt:%y}, {_short_time(dt)}"


def format_seance_lines(seances, tz: tzinfo | None = None) -> list[str]:
    """Format seances as aligned "[status] session-name | time" lines."""
    if not seances:
        return []

    width = max(len(seance.session_name) for seance in seances)
    lines = []
    for seance in seances:
        line = f"[{status_indicator(seance.status)}] {seance.session_name:<{width}}"
        timestamp = last_update_time(seance)
        if timestamp:
            line += f" | {format_time(timestamp, tz=tz)}"
        lines.append(line)
    return lines


def parse_formatted_seance_line(line: str) -> tuple[str, str] | None:
    """Extract (seance_id, session_name) from a session name or formatted line.

    Accepts both "my-project:abc123de" and
    "[●] my-project:abc123de | 11/17/25, 10:00 AM".
    """
    match = _FORMATTED_LINE_RE.search(line)
    if match is None:
        return None
    session_name, seance_id = match.groups()
    return seance_id, session_name


def format_content_item(item) -> str:
    """Format one item of an event's content list."""
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        item_type = item.get("type")
        text = item.get("text")
        if text:
            return f"{item_type}: {text}"
        return str(item_type)
    return str(item)


def format_hook_event(event: dict, tz: tzinfo | None = None) -> str:
    """Format a hook event for `aineko detail`."""
    notification_type = event.get("notification_type")
    lines = [f"Last Event: {event.get('hook_event_name')}"]
    if notification_type:
        lines[0] += f" ({notification_type})"

    if message := event.get("message"):
        lines.append(f"Message: {message}")

    content = event.get("content")
    if isinstance(content, list):
        lines.append("Content:")
        lines.extend(f"  {format_content_item(item)}" for item in content)

    if text := event.get("text"):
        lines.append(f"Text: {text}")

    if timestamp := event.get("timestamp"):
        lines.append(f"Time: {format_time(timestamp, tz=tz)}")

    return "\n".join(lines)
