"""Tests for attaching to a seance with its listener running."""

import pytest

from aineko.commands.attach import attach_with_listener, resolve_socket_path
from aineko.core.config import write_config
from aineko.core.listener import SocketListener, send_event, socket_path_for
from aineko.core.seance import SeanceIdentity
from aineko.core.state import SeanceState, read_seance_state, write_seance_state
from aineko.core.zellij import ZellijError
from tests.helpers import wait_until

IDENTITY = SeanceIdentity(id="abc123", name="alpha", session_name="alpha:abc123")


@pytest.fixture
def seance(seances_dir, socket_dir):
    """A stored seance whose socket lives in socket_dir."""
    path = socket_path_for(IDENTITY.id, socket_dir)
    write_seance_state(
        IDENTITY.id, SeanceState(name="alpha", socket_path=str(path)), seances_dir
    )
    write_config({"listener_timeout": 0.05})
    return path


@pytest.fixture
def sessions(monkeypatch):
    """Mutable zellij session list seen by listeners."""
    names = [IDENTITY.session_name]
    monkeypatch.setattr("aineko.core.listener.list_session_names", lambda: list(names))
    return names


@pytest.fixture
def notifications(monkeypatch):
    sent = []
    monkeypatch.setattr(
        "aineko.commands.attach.send_desktop_notification",
        lambda summary, body: sent.append((summary, body)) or True,
    )
    return sent


def test_resolve_socket_path_prefers_state(seances_dir, seance):
    assert resolve_socket_path(IDENTITY.id, seances_dir) == seance


def test_resolve_socket_path_without_state(seances_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert resolve_socket_path("zzz999", seances_dir) == (
        tmp_path / ".tmp" / "aineko" / "sockets" / "zzz999.socket"
    )


def test_events_recorded_while_attached(
    seances_dir, seance, sessions, notifications, monkeypatch, capsys
):
    """Test hook events sent during the attach update state and notify."""

    def fake_attach(name):
        send_event(seance, {"hook_event_name": "Stop"})
        wait_until(
            lambda: read_seance_state(IDENTITY.id, seances_dir).last_message is not None
        )
        sessions.clear()
        return 0

    monkeypatch.setattr("aineko.commands.attach.attach_session", fake_attach)

    assert attach_with_listener(IDENTITY) == 0

    state = read_seance_state(IDENTITY.id, seances_dir)
    assert state.last_message == {"hook_event_name": "Stop"}
    assert notifications == [
        ("Aineko: alpha", "Claude session stopped and ready for input")
    ]
    assert "Attaching to seance: alpha:abc123" in capsys.readouterr().out
    assert not seance.exists()


def test_notifications_disabled(seances_dir, seance, sessions, notifications, monkeypatch):
    write_config({"listener_timeout": 0.05, "notifications": False})

    def fake_attach(name):
        send_event(seance, {"hook_event_name": "Stop"})
        wait_until(
            lambda: read_seance_state(IDENTITY.id, seances_dir).last_message is not None
        )
        sessions.clear()
        return 0

    monkeypatch.setattr("aineko.commands.attach.attach_session", fake_attach)

    attach_with_listener(IDENTITY)

    assert notifications == []


def test_listener_outlives_detach(seances_dir, seance, sessions, monkeypatch, capsys):
    """Test the listener keeps running after detach until the session ends."""
    detached = []

    def fake_attach(name):
        detached.append(True)
        return 0

    monkeypatch.setattr("aineko.commands.attach.attach_session", fake_attach)

    def end_session_later(self, timeout=None):
        # Simulate the session ending a little after the user detached
        assert self.socket_path.is_socket()
        sessions.clear()
        original_join(self, timeout)

    original_join = SocketListener.join
    monkeypatch.setattr(SocketListener, "join", end_session_later)

    assert attach_with_listener(IDENTITY) == 0

    out = capsys.readouterr().out
    assert "Detached. Listening for seance events" in out
    assert not seance.exists()


def test_returns_zellij_exit_code(seances_dir, seance, sessions, monkeypatch):
    def fake_attach(name):
        sessions.clear()
        return 2

    monkeypatch.setattr("aineko.commands.attach.attach_session", fake_attach)

    assert attach_with_listener(IDENTITY) == 2


def test_attach_failure_stops_listener(seances_dir, seance, sessions, monkeypatch, capsys):
    def failing(name):
        raise ZellijError("Failed to run zellij: not found")

    monkeypatch.setattr("aineko.commands.attach.attach_session", failing)

    with pytest.raises(SystemExit) as exc_info:
        attach_with_listener(IDENTITY)

    assert exc_info.value.code == 1
    assert "Failed to run zellij" in capsys.readouterr().err
    assert wait_until(lambda: not seance.exists())


def test_existing_listener_still_attaches(
    seances_dir, seance, sessions, listener_thread, monkeypatch, capsys
):
    """Test a second attach reuses the running listener."""
    listener_thread(
        SocketListener(
            IDENTITY.id,
            IDENTITY.session_name,
            seance,
            lambda seance_id, event: None,
            list_sessions=lambda: [IDENTITY.session_name],
        )
    )
    attached = []
    monkeypatch.setattr(
        "aineko.commands.attach.attach_session", lambda name: attached.append(name) or 0
    )

    assert attach_with_listener(IDENTITY) == 0

    out = capsys.readouterr().out
    assert "Listener already running for seance: alpha:abc123" in out
    assert attached == ["alpha:abc123"]
    # The first listener keeps its socket
    assert seance.is_socket()
