"""
TCP reachability check: one connect() bounded by the timeout, closed
immediately. No data is exchanged.
"""

import logging
import socket
import time

from core.models import TcpResult

log = logging.getLogger(__name__)


def tcp_probe(host: str, port: int, timeout: float = 10.0) -> TcpResult:
    address = f"{host}:{port}"
    start = time.monotonic()
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except socket.timeout as exc:
        elapsed = time.monotonic() - start
        log.info("TCP connection to %s timed out", address)
        return TcpResult(
            host=host,
            port=port,
            success=False,
            elapsed_s=elapsed,
            timed_out=True,
            failure=f"TCP connection to {address} timed out after {elapsed:.2f}s: {exc}",
        )
    except OSError as exc:
        elapsed = time.monotonic() - start
        log.info("TCP connection to %s failed: %s", address, exc)
        return TcpResult(
            host=host,
            port=port,
            success=False,
            elapsed_s=elapsed,
            failure=f"TCP connection to {address} failed after {elapsed:.2f}s: {exc}",
        )
    sock.close()
    return TcpResult(host=host, port=port, success=True, elapsed_s=time.monotonic() - start)
