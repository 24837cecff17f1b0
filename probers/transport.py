"""
Transport establishment shared by every TLS probe variant.

A Deadline is created before the dial. When deadline_covers_exchange is
set, every later blocking step (upgrade frame exchange, TLS handshake)
runs with the time that is left; otherwise the socket is made blocking
once connected and only the dial is bounded.
"""

from __future__ import annotations

import logging
import socket
import time

from core.config import settings
from core.errors import DialError

log = logging.getLogger(__name__)


class Deadline:
    def __init__(self, timeout: float):
        self.timeout = timeout
        self.started = time.monotonic()
        self.expires_at = self.started + timeout

    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def remaining(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    def apply(self, sock: socket.socket) -> None:
        """Bound the next blocking call on sock by the remaining time."""
        if not settings.deadline_covers_exchange:
            sock.settimeout(None)
            return
        remaining = self.remaining()
        if remaining <= 0:
            raise socket.timeout(f"deadline of {self.timeout:g}s exceeded")
        sock.settimeout(remaining)


def dial(host: str, port: int, deadline: Deadline, label: str = "") -> socket.socket:
    """Open a TCP connection to host:port within the deadline, or raise DialError."""
    address = f"{host}:{port}"
    target = f"{label} at {address}" if label else address
    log.debug("dialing %s (timeout %.2fs)", address, deadline.timeout)
    try:
        sock = socket.create_connection((host, port), timeout=deadline.remaining())
    except socket.timeout as exc:
        raise DialError(f"failed to connect to {target}: timed out after {deadline.elapsed():.2f}s") from exc
    except OSError as exc:
        raise DialError(f"failed to connect to {target} after {deadline.elapsed():.2f}s") from exc
    except ValueError as exc:
        # IDNA encoding of the host name failed
        raise DialError(f"failed to connect to {target}: invalid host") from exc
    log.debug("connected to %s in %.3fs", address, deadline.elapsed())
    return sock
