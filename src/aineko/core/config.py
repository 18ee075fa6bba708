"""Aineko configuration and filesystem locations.

Handles the state/socket directories, the environment variables shared with
hook processes, and the optional ~/.config/aineko/config.json user config.
"""

import logging
import os
from pathlib import Path

import orjson

logger = logging.getLogger(__name__)

# Set inside every seance's zellij session so hook processes can find the listener
SOCKET_PATH_ENV = "AINEKO_SOCKET_PATH"
SEANCE_ID_ENV = "AINEKO_SEANCE_ID"

# Overrides for the state directory and log level
STATE_DIR_ENV = "AINEKO_STATE_DIR"
LOG_LEVEL_ENV = "AINEKO_LOG_LEVEL"

DEFAULT_LISTENER_TIMEOUT = 60.0
DEFAULT_WATCH_INTERVAL = 5.0


def xdg_state_home() -> Path:
    """Get $XDG_STATE_HOME, falling back to ~/.local/state."""
    if env_dir := os.environ.get("XDG_STATE_HOME"):
        return Path(env_dir)
    return Path.home() / ".local" / "state"


def xdg_config_home() -> Path:
    """Get $XDG_CONFIG_HOME, falling back to ~/.config."""
    if env_dir := os.environ.get("XDG_CONFIG_HOME"):
        return Path(env_dir)
    return Path.home() / ".config"


def get_seances_dir() -> Path:
    """Get the directory holding one state file per seance.

    Returns $AINEKO_STATE_DIR if set, otherwise $XDG_STATE_HOME/aineko/seances.
    """
    if env_dir := os.environ.get(STATE_DIR_ENV):
        return Path(env_dir)
    return xdg_state_home() / "aineko" / "seances"


def get_sockets_dir() -> Path:
    """Get the sockets directory inside the current project.

    Sockets live under the project's .tmp/ so sandboxed agents, which can
    usually only write inside the project, are still able to connect.
    """
    return Path.cwd() / ".tmp" / "aineko" / "sockets"


def get_config_path() -> Path:
    """Get the path to aineko's config file."""
    return xdg_config_home() / "aineko" / "config.json"


def read_config() -> dict:
    """Read aineko config, returning empty dict if not found or unreadable."""
    config_path = get_config_path()
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_bytes()
        config = orjson.loads(content) if content else {}
    except (orjson.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return {}
    if not isinstance(config, dict):
        logger.warning("Ignoring config %s: expected a JSON object", config_path)
        return {}
    return config


def write_config(config: dict) -> None:
    """Write aineko config."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_bytes(orjson.dumps(config, option=orjson.OPT_INDENT_2))


def _get_seconds(key: str, default: float) -> float:
    """Read a positive number of seconds from the config, else the default."""
    value = read_config().get(key, default)
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        seconds = 0.0
    if seconds <= 0:
        logger.warning("Ignoring invalid %s %r, using %g", key, value, default)
        return default
    return seconds


def get_listener_timeout() -> float:
    """Get the watchdog liveness-check interval in seconds (default: 60)."""
    return _get_seconds("listener_timeout", DEFAULT_LISTENER_TIMEOUT)


def get_watch_interval() -> float:
    """Get the refresh interval of `aineko watch` in seconds (default: 5)."""
    return _get_seconds("watch_interval", DEFAULT_WATCH_INTERVAL)


def notifications_enabled() -> bool:
    """Check whether desktop notifications are enabled (default: True)."""
    return bool(read_config().get("notifications", True))
