"""Attach to a seance with its event listener running.

Shared by `aineko new`, `aineko open` and the seance picker.
"""

from pathlib import Path

import click

from aineko.core.config import (
    get_listener_timeout,
    get_seances_dir,
    get_sockets_dir,
    notifications_enabled,
)
from aineko.core.events import handle_hook_event
from aineko.core.listener import (
    ListenerAlreadyRunning,
    ListenerError,
    SocketListener,
    socket_path_for,
)
from aineko.core.notify import send_desktop_notification
from aineko.core.seance import SeanceIdentity
from aineko.core.state import StateError, read_seance_state
from aineko.core.zellij import ZellijError, attach_session


def resolve_socket_path(seance_id: str, seances_dir: Path) -> Path:
    """Get a seance's socket path.

    Prefers the path recorded at creation, since that is the one exported
    to the seance's zellij session.
    """
    try:
        state = read_seance_state(seance_id, seances_dir)
    except StateError:
        state = None
    if state is not None and state.socket_path:
        return Path(state.socket_path)
    return socket_path_for(seance_id, get_sockets_dir())


def attach_with_listener(
    identity: SeanceIdentity, socket_path: Path | None = None
) -> int:
    """Start the seance's listener in the background and attach to its session.

    The listener keeps running after the user detaches and retires once the
    zellij session is gone. If another aineko process already listens for
    the seance, attach without starting a second listener.

    Returns:
        zellij's exit code.
    """
    seances_dir = get_seances_dir()
    socket_path = socket_path or resolve_socket_path(identity.id, seances_dir)
    notifier = send_desktop_notification if notifications_enabled() else None

    def handler(seance_id: str, event: dict) -> None:
        handle_hook_event(seance_id, event, seances_dir, notifier=notifier)

    listener: SocketListener | None = SocketListener(
        identity.id,
        identity.session_name,
        socket_path,
        handler,
        timeout=get_listener_timeout(),
    )
    try:
        listener.start()
    except ListenerAlreadyRunning:
        click.echo(f"Listener already running for seance: {identity.session_name}")
        listener = None
    except ListenerError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Attaching to seance: {identity.session_name}")
    try:
        exit_code = attach_session(identity.session_name)
    except ZellijError as e:
        if listener is not None:
            listener.stop()
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if listener is not None:
        if listener.session_alive():
            click.echo(
                "Detached. Listening for seance events until the session ends "
                "(Ctrl-C to stop)..."
            )
        else:
            listener.stop()
        try:
            listener.join()
        except KeyboardInterrupt:
            listener.stop()
            listener.join()

    return exit_code
