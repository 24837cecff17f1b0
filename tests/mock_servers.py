import socket
import ssl
import threading
from typing import Callable, List


class MockServer:
    """Single-connection loopback server running handler(conn) on a thread."""

    def __init__(self, handler: Callable[[socket.socket], None]):
        self.handler = handler
        self.errors: List[BaseException] = []
        self.listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.listener.bind(("127.0.0.1", 0))
        self.listener.listen(1)
        self.port = self.listener.getsockname()[1]
        self.thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self):
        self.listener.settimeout(10)
        try:
            conn, _ = self.listener.accept()
        except OSError as exc:
            self.errors.append(exc)
            return
        with conn:
            conn.settimeout(10)
            try:
                self.handler(conn)
            except Exception as exc:  # noqa: BLE001
                self.errors.append(exc)

    def __enter__(self) -> "MockServer":
        self.thread.start()
        return self

    def __exit__(self, *exc_info):
        self.thread.join(10)
        self.listener.close()


def recv_exact(conn: socket.socket, size: int) -> bytes:
    data = b""
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


def serve_tls(conn: socket.socket, context: ssl.SSLContext) -> None:
    with context.wrap_socket(conn, server_side=True) as tls:
        try:
            tls.recv(1)
        except OSError:
            pass


def looks_like_client_hello(data: bytes) -> bool:
    # TLS record header: handshake content type
    return len(data) > 0 and data[0] == 0x16
