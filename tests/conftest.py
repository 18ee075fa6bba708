"""Shared pytest fixtures for aineko tests."""

import shutil
import tempfile
import threading
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def seances_dir(tmp_path, monkeypatch):
    """Point aineko's state directory at tmp_path for test isolation.

    This ensures tests don't write to the real ~/.local/state/aineko/.
    Also isolates the user config and clears the hook socket variable so a
    parent seance cannot leak into the tests.
    """
    state_dir = tmp_path / "seances"
    monkeypatch.setenv("AINEKO_STATE_DIR", str(state_dir))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("AINEKO_SOCKET_PATH", raising=False)
    monkeypatch.delenv("AINEKO_SEANCE_ID", raising=False)
    return state_dir


@pytest.fixture
def socket_dir():
    """Short temporary directory for unix sockets.

    pytest's tmp_path can exceed the ~104 byte limit on unix socket paths.
    """
    path = Path(tempfile.mkdtemp(prefix="aineko-", dir="/tmp"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def fake_sessions(monkeypatch):
    """Replace the zellij session list with a mutable list of session lines."""
    sessions: list[str] = []
    monkeypatch.setattr("aineko.commands.list.list_sessions", lambda: list(sessions))
    return sessions


@pytest.fixture
def listener_thread():
    """Start SocketListeners in background threads and stop them after the test."""
    started = []

    def start(listener):
        listener.bind()
        thread = threading.Thread(target=listener.serve, daemon=True)
        thread.start()
        started.append((listener, thread))
        return thread

    yield start

    for listener, thread in started:
        listener.stop()
        thread.join(timeout=5)
