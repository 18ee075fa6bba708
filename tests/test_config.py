"""Tests for aineko configuration."""

from pathlib import Path

import pytest

from aineko.core.config import (
    DEFAULT_LISTENER_TIMEOUT,
    DEFAULT_WATCH_INTERVAL,
    get_config_path,
    get_listener_timeout,
    get_seances_dir,
    get_sockets_dir,
    get_watch_interval,
    notifications_enabled,
    read_config,
    write_config,
)


def test_seances_dir_from_env(seances_dir):
    assert get_seances_dir() == seances_dir


def test_seances_dir_from_xdg(tmp_path, monkeypatch):
    monkeypatch.delenv("AINEKO_STATE_DIR", raising=False)
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))

    assert get_seances_dir() == tmp_path / "aineko" / "seances"


def test_seances_dir_default(tmp_path, monkeypatch):
    monkeypatch.delenv("AINEKO_STATE_DIR", raising=False)
    monkeypatch.delenv("XDG_STATE_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert get_seances_dir() == tmp_path / ".local" / "state" / "aineko" / "seances"


def test_sockets_dir_in_project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert get_sockets_dir() == Path.cwd() / ".tmp" / "aineko" / "sockets"


def test_config_defaults(seances_dir):
    assert read_config() == {}
    assert get_listener_timeout() == DEFAULT_LISTENER_TIMEOUT
    assert get_watch_interval() == DEFAULT_WATCH_INTERVAL
    assert notifications_enabled() is True


def test_config_roundtrip(seances_dir, tmp_path):
    write_config({"listener_timeout": 5, "watch_interval": 2.5, "notifications": False})

    assert get_config_path() == tmp_path / "config" / "aineko" / "config.json"
    assert get_listener_timeout() == 5.0
    assert get_watch_interval() == 2.5
    assert notifications_enabled() is False


def test_corrupt_config_ignored(seances_dir):
    path = get_config_path()
    path.parent.mkdir(parents=True)
    path.write_text("{nope")

    assert read_config() == {}
    assert get_listener_timeout() == DEFAULT_LISTENER_TIMEOUT


def test_non_object_config_ignored(seances_dir):
    path = get_config_path()
    path.parent.mkdir(parents=True)
    path.write_text("[]")

    assert read_config() == {}


@pytest.mark.parametrize("value", ["abc", None, [1], 0, -5])
def test_invalid_seconds_fall_back_to_default(seances_dir, value):
    """Test unusable interval values are ignored instead of raising."""
    write_config({"listener_timeout": value, "watch_interval": value})

    assert get_listener_timeout() == DEFAULT_LISTENER_TIMEOUT
    assert get_watch_interval() == DEFAULT_WATCH_INTERVAL


def test_numeric_string_seconds_accepted(seances_dir):
    write_config({"listener_timeout": "2.5"})

    assert get_listener_timeout() == 2.5
