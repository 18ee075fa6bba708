"""Unix socket listener for aineko seances.

Hook processes inside a seance (possibly sandboxed) cannot reach the
supervising aineko process any other way, so each seance gets a unix socket
at {project}/.tmp/aineko/sockets/{id}.socket. A hook connects, writes one
JSON-encoded event and closes the connection; the listener reads until EOF
and hands the event to its handler.

Listener lifecycle:

    bound -> accepting <-> processing -> retired

While accepting, the listener waits for a connection or for the liveness
timeout, whichever comes first. On timeout it asks zellij whether the
seance's session still exists and retires once it is gone. Retiring closes
the server socket and removes the socket file; a retired listener is never
restarted.
"""

import logging
import selectors
import socket
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

import orjson

from aineko.core.config import DEFAULT_LISTENER_TIMEOUT
from aineko.core.zellij import list_session_names, parse_session_line

logger = logging.getLogger(__name__)

NEW = "new"
BOUND = "bound"
ACCEPTING = "accepting"
PROCESSING = "processing"
RETIRED = "retired"

# Deadline for a connected peer to finish sending its event
READ_TIMEOUT = 10.0
# Deadline for the sending side to connect and write
SEND_TIMEOUT = 10.0

_RECV_SIZE = 65536


class ListenerError(Exception):
    """Raised when a listener cannot bind its socket."""

    pass


class ListenerAlreadyRunning(ListenerError):
    """Raised when another listener is already serving the socket path."""

    pass


def socket_path_for(seance_id: str, sockets_dir: Path) -> Path:
    """Get path to the socket file for a seance."""
    return Path(sockets_dir) / f"{seance_id}.socket"


def socket_in_use(socket_path: Path) -> bool:
    """Check whether a listener is accepting connections on a socket path."""
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as probe:
        probe.settimeout(1.0)
        try:
            probe.connect(str(socket_path))
        except OSError:
            return False
    return True


def send_event(socket_path: str | Path, event: dict) -> None:
    """Send one event to a seance listener.

    Connects, writes the JSON-encoded event and closes the connection, which
    marks the end of the payload.

    Raises:
        OSError: If the socket cannot be reached or written.
    """
    data = orjson.dumps(event)
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        sock.settimeout(SEND_TIMEOUT)
        sock.connect(str(socket_path))
        sock.sendall(data)


def _read_until_eof(conn: socket.socket) -> bytes:
    chunks = []
    while True:
        chunk = conn.recv(_RECV_SIZE)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


class SocketListener:
    """Receives hook events for one seance and retires with its session.

    Args:
        seance_id: The seance ID, passed to the handler with every event.
        session_name: zellij session to watch (e.g. "my-project:x3k9p2").
        socket_path: Unix socket path to bind.
        handler: Called as handler(seance_id, event) for every event.
        list_sessions: Returns the active zellij session names (defaults to
            zellij.list_session_names).
        timeout: Seconds to wait for a connection before checking whether
            the session still exists.
    """

    def __init__(
        self,
        seance_id: str,
        session_name: str,
        socket_path: str | Path,
        handler: Callable[[str, dict], None],
        list_sessions: Callable[[], Iterable[str]] | None = None,
        timeout: float = DEFAULT_LISTENER_TIMEOUT,
    ) -> None:
        self.seance_id = seance_id
        self.session_name = session_name
        self.socket_path = Path(socket_path)
        self.handler = handler
        self.list_sessions = list_sessions or list_session_names
        self.timeout = timeout
        self.state = NEW
        self._server: socket.socket | None = None
        self._wakeup_recv: socket.socket | None = None
        self._wakeup_send: socket.socket | None = None
        self._stop_requested = threading.Event()
        self._thread: threading.Thread | None = None

    def bind(self) -> None:
        """Bind the unix socket.

        A leftover socket file nobody answers on is replaced.

        Raises:
            ListenerAlreadyRunning: If another listener serves the path.
            ListenerError: If the socket cannot be bound.
        """
        path = self.socket_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ListenerError(f"Failed to create {path.parent}: {e}") from e

        if path.is_socket():
            if socket_in_use(path):
                raise ListenerAlreadyRunning(f"A listener is already running on {path}")
            logger.info("Removing stale socket %s", path)
            path.unlink(missing_ok=True)

        server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            server.bind(str(path))
            server.listen()
            server.setblocking(False)
        except OSError as e:
            server.close()
            raise ListenerError(f"Failed to bind socket {path}: {e}") from e

        self._server = server
        self._wakeup_recv, self._wakeup_send = socket.socketpair()
        self.state = BOUND
        logger.debug("Seance %s listening on %s", self.seance_id, path)

    def serve(self) -> None:
        """Accept and process connections until the session disappears or stop() is called."""
        if self._server is None:
            raise ListenerError("Listener is not bound")

        selector = selectors.DefaultSelector()
        selector.register(self._server, selectors.EVENT_READ)
        selector.register(self._wakeup_recv, selectors.EVENT_READ)
        try:
            while not self._stop_requested.is_set():
                self.state = ACCEPTING
                ready = selector.select(timeout=self.timeout)
                if self._stop_requested.is_set():
                    break
                if not ready:
                    if not self.session_alive():
                        break
                    continue
                if any(key.fileobj is self._server for key, _ in ready):
                    self._accept_one()
        except Exception:
            logger.exception("Socket listener error for seance %s", self.seance_id)
        finally:
            selector.close()
            self._retire()

    def run(self) -> None:
        """Bind and serve in the current thread."""
        self.bind()
        self.serve()

    def start(self) -> threading.Thread:
        """Bind in the current thread, then serve in a background thread.

        The thread is not a daemon: the process stays alive until the
        listener retires, so the listener outlives a detached zellij client.

        Raises:
            ListenerError: If the socket cannot be bound.
        """
        self.bind()
        self._thread = threading.Thread(
            target=self.serve, name=f"aineko-listener-{self.seance_id}"
        )
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        """Ask the listener to retire. Safe to call from any thread."""
        self._stop_requested.set()
        wakeup = self._wakeup_send
        if wakeup is not None:
            try:
                wakeup.send(b"\0")
            except OSError:
                # Already retired
                pass

    def join(self, timeout: float | None = None) -> None:
        """Wait for a listener started with start() to retire."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _accept_one(self) -> None:
        try:
            conn, _ = self._server.accept()
        except (BlockingIOError, InterruptedError):
            return

        self.state = PROCESSING
        with conn:
            try:
                conn.settimeout(READ_TIMEOUT)
                payload = _read_until_eof(conn)
                if payload.strip():
                    self.handler(self.seance_id, orjson.loads(payload))
            except Exception:
                logger.exception(
                    "Error handling connection for seance %s", self.seance_id
                )

    def session_alive(self) -> bool:
        """Check whether the seance's zellij session is still listed.

        Registry failures are logged and count as alive.
        """
        try:
            names = list(self.list_sessions())
        except Exception:
            logger.exception(
                "Failed to list zellij sessions, keeping listener for %s",
                self.session_name,
            )
            return True

        if any(parse_session_line(name) == self.session_name for name in names):
            return True

        logger.info(
            "zellij session %s no longer exists, stopping listener", self.session_name
        )
        return False

    def _retire(self) -> None:
        for sock in (self._server, self._wakeup_recv, self._wakeup_send):
            if sock is not None:
                sock.close()
        self._server = None
        self._wakeup_recv = None
        self._wakeup_send = None
        self.socket_path.unlink(missing_ok=True)
        self.state = RETIRED
