"""Tests for terminal formatting of seances and events."""

from datetime import datetime, timedelta, timezone

import pytest

from aineko.core.display import (
    format_content_item,
    format_hook_event,
    format_seance_lines,
    format_time,
    parse_formatted_seance_line,
    status_indicator,
)
from aineko.core.seance import Seance, SeanceIdentity
from aineko.core.state import SeanceState
from aineko.core.status import IDLE, UNKNOWN, WAITING, WORKING

UTC = timezone.utc
NOW = datetime(2025, 11, 17, 15, 0, 0, tzinfo=UTC)


def make_seance(name, seance_id, status, updated_at=None, created_at=None):
    identity = SeanceIdentity(seance_id, name, f"{name}:{seance_id}")
    state = SeanceState(name=name, updated_at=updated_at, created_at=created_at)
    return Seance(identity=identity, state=state, status=status)


@pytest.mark.parametrize(
    "status, indicator",
    [(WAITING, ">"), (IDLE, "○"), (WORKING, "●"), (UNKNOWN, "?"), ("weird", "!")],
)
def test_status_indicator(status, indicator):
    assert status_indicator(status) == indicator


def test_format_time_today():
    assert format_time("2025-11-17T10:05:00Z", now=NOW, tz=UTC) == "10:05 AM"


def test_format_time_afternoon_and_midnight():
    assert format_time("2025-11-17T13:30:00.123456Z", now=NOW, tz=UTC) == "1:30 PM"
    assert format_time("2025-11-17T00:07:00Z", now=NOW, tz=UTC) == "12:07 AM"


def test_format_time_other_day():
    assert format_time("2025-11-16T22:00:00Z", now=NOW, tz=UTC) == "11/16/25, 10:00 PM"


def test_format_time_converts_timezone():
    """Test the day is judged in the display timezone."""
    tz = timezone(timedelta(hours=-8))

    assert format_time("2025-11-17T06:00:00Z", now=NOW, tz=tz) == "11/16/25, 10:00 PM"


def test_format_time_invalid_returns_input():
    assert format_time("not a time", now=NOW, tz=UTC) == "not a time"


def test_format_time_none():
    assert format_time(None) is None


def test_format_seance_lines_aligned():
    seances = [
        make_seance("short", "abc123de", IDLE),
        make_seance("longer-name", "xyz789ab", WORKING),
    ]

    assert format_seance_lines(seances, tz=UTC) == [
        "[○] short:abc123de      ",
        "[●] longer-name:xyz789ab",
    ]


def test_format_seance_lines_with_time():
    seances = [
        make_seance("a", "abc123", WAITING, updated_at="2025-11-16T10:00:00Z"),
        make_seance("bb", "def456", UNKNOWN, created_at="2025-11-15T09:00:00Z"),
    ]

    assert format_seance_lines(seances, tz=UTC) == [
        "[>] a:abc123  | 11/16/25, 10:00 AM",
        "[?] bb:def456 | 11/15/25, 9:00 AM",
    ]


def test_format_seance_lines_empty():
    assert format_seance_lines([]) == []


@pytest.mark.parametrize(
    "line, expected",
    [
        ("my-project:abc123de", ("abc123de", "my-project:abc123de")),
        ("[●] my-project:abc123de | 10:00 AM", ("abc123de", "my-project:abc123de")),
        (
            "[○] short:abc123de       | 11/17/25, 10:00 AM",
            ("abc123de", "short:abc123de"),
        ),
        ("no seance here", None),
        ("", None),
    ],
)
def test_parse_formatted_seance_line(line, expected):
    assert parse_formatted_seance_line(line) == expected


def test_format_content_item():
    assert format_content_item("plain") == "plain"
    assert format_content_item({"type": "text", "text": "hello"}) == "text: hello"
    assert format_content_item({"type": "image"}) == "image"
    assert format_content_item(42) == "42"


def test_format_hook_event_full():
    event = {
        "hook_event_name": "Notification",
        "notification_type": "permission_prompt",
        "message": "Claude needs your permission to use Write",
        "content": ["first", {"type": "text", "text": "second"}],
        "text": "extra",
        "timestamp": "2025-11-16T10:00:00Z",
    }

    assert format_hook_event(event, tz=UTC).splitlines()[:6] == [
        "Last Event: Notification (permission_prompt)",
        "Message: Claude needs your permission to use Write",
        "Content:",
        "  first",
        "  text: second",
        "Text: extra",
    ]
    assert format_hook_event(event, tz=UTC).splitlines()[6].startswith("Time: ")


def test_format_hook_event_minimal():
    assert format_hook_event({"hook_event_name": "Stop"}) == "Last Event: Stop"
