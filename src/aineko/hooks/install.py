"""Hook installation for Claude Code integration.

This module provides functions to register the `aineko handle` hook in
Claude Code's settings.json for every event aineko tracks.
"""

import copy
import logging
from pathlib import Path

import orjson

from aineko.core.events import HOOK_EVENTS

logger = logging.getLogger(__name__)

# Hook descriptor added to each event's hook list
AINEKO_HOOK_CONFIG = {
    "hooks": [
        {
            "type": "command",
            "command": "aineko handle",
        }
    ]
}


def get_claude_settings_path() -> Path:
    """Get the path to Claude Code's settings.json."""
    return Path.home() / ".claude" / "settings.json"


def is_hook_enabled(hooks: dict | None, event: str) -> bool:
    """Check if the aineko hook is registered for an event.

    Args:
        hooks: The "hooks" section of the settings.
        event: Hook event name (e.g., "Stop").
    """
    return AINEKO_HOOK_CONFIG in (hooks or {}).get(event, [])


def enabled_hooks(hooks: dict | None) -> list[str]:
    """List the aineko hook events registered in a hooks section."""
    return [event for event in HOOK_EVENTS if is_hook_enabled(hooks, event)]


def merge_hooks(hooks: dict | None, events: list[str]) -> dict:
    """Add the aineko hook to each event's hook list.

    Existing entries are kept and the aineko hook is appended after them,
    at most once per event. An entry that is not a list is kept as the first
    item of the new list. The input is not modified.

    Args:
        hooks: The "hooks" section of the settings (may be None).
        events: Event names to register the hook for.

    Returns:
        The merged hooks section.
    """
    merged = copy.deepcopy(hooks) if hooks else {}
    for event in events:
        existing = merged.get(event)
        if existing is None:
            event_hooks = []
        elif isinstance(existing, list):
            event_hooks = list(existing)
        else:
            logger.warning("Hooks for %s are not a list, wrapping the existing entry", event)
            event_hooks = [existing]
        if AINEKO_HOOK_CONFIG not in event_hooks:
            event_hooks.append(copy.deepcopy(AINEKO_HOOK_CONFIG))
        merged[event] = event_hooks
    return merged


def update_settings_with_hooks(settings: dict, events: list[str]) -> dict:
    """Return settings with the aineko hooks merged into its "hooks" section."""
    updated = dict(settings)
    updated["hooks"] = merge_hooks(settings.get("hooks"), events)
    return updated


def read_claude_settings(settings_path: Path) -> dict:
    """Read Claude Code settings.

    Returns:
        Parsed settings, or an empty dict if the file is missing or unreadable.
    """
    if not settings_path.exists():
        return {}
    try:
        content = settings_path.read_bytes()
        settings = orjson.loads(content) if content else {}
    except (orjson.JSONDecodeError, OSError) as e:
        logger.error("Error reading settings file %s: %s", settings_path, e)
        return {}
    return settings if isinstance(settings, dict) else {}


def write_claude_settings(settings: dict, settings_path: Path) -> None:
    """Write Claude Code settings, creating the parent directory if needed."""
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_bytes(orjson.dumps(settings, option=orjson.OPT_INDENT_2))


def setup_hooks(settings_path: Path | None = None) -> Path | None:
    """Install aineko hooks into Claude Code settings.

    This function:
    1. Reads existing settings.json (empty if missing)
    2. Merges the aineko hook into every tracked event
    3. Moves the existing file to settings.json.backup
    4. Writes the updated settings

    Returns:
        Path of the backup, or None if there was no settings file to back up.
    """
    settings_path = settings_path or get_claude_settings_path()
    settings = read_claude_settings(settings_path)
    updated = update_settings_with_hooks(settings, HOOK_EVENTS)

    backup_path = None
    if settings_path.exists():
        backup_path = settings_path.with_name(settings_path.name + ".backup")
        settings_path.replace(backup_path)

    write_claude_settings(updated, settings_path)
    return backup_path
