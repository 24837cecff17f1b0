"""
STARTTLS probes: upgrade a plaintext PostgreSQL or LDAP connection in
place, then hand the same socket to the TLS handshake.

Only the minimal upgrade exchange of each protocol is spoken; the request
frames are fixed byte strings.
"""

from __future__ import annotations

import logging
import socket
import struct

from core.config import settings
from core.errors import UpgradeError
from core.models import ProbeRequest, ProbeResult
from probers.tls_handshake import run_handshake_probe
from probers.transport import Deadline

log = logging.getLogger(__name__)

# SSLRequest: int32 length (8) + int32 request code 80877103 (0x04d2162f)
POSTGRES_SSL_REQUEST_CODE = 0x04D2162F
POSTGRES_SSL_REQUEST = struct.pack("!II", 8, POSTGRES_SSL_REQUEST_CODE)
POSTGRES_SSL_ACCEPTED = b"S"

LDAP_STARTTLS_OID = b"1.3.6.1.4.1.1466.20037"
# LDAPMessage { messageID 1, extendedReq { requestName [0] OID } }, BER encoded
LDAP_STARTTLS_REQUEST = (
    b"\x30\x1d"  # SEQUENCE, 29 bytes
    b"\x02\x01\x01"  # INTEGER messageID = 1
    b"\x77\x18"  # [APPLICATION 23] ExtendedRequest, 24 bytes
    b"\x80\x16" + LDAP_STARTTLS_OID  # [0] requestName, 22 bytes
)


def _show_byte(value: bytes) -> str:
    code = value[0]
    if 0x20 <= code < 0x7F:
        return f"{chr(code)!r} (0x{code:02x})"
    return f"0x{code:02x}"


def _send(sock: socket.socket, deadline: Deadline, frame: bytes, what: str) -> None:
    try:
        deadline.apply(sock)
        sock.sendall(frame)
    except OSError as exc:
        raise UpgradeError(f"failed to send {what}") from exc


def _recv(sock: socket.socket, deadline: Deadline, size: int, what: str) -> bytes:
    try:
        deadline.apply(sock)
        data = sock.recv(size)
    except OSError as exc:
        raise UpgradeError(f"failed to read {what}") from exc
    if not data:
        raise UpgradeError(f"failed to read {what}: connection closed by server")
    return data


def postgres_upgrade(sock: socket.socket, deadline: Deadline) -> None:
    _send(sock, deadline, POSTGRES_SSL_REQUEST, "SSL request")
    response = _recv(sock, deadline, 1, "SSL response")
    log.debug("postgres SSL response byte %s", _show_byte(response))
    if response != POSTGRES_SSL_ACCEPTED:
        raise UpgradeError(f"server does not support SSL (response: {_show_byte(response)})")


def ldap_upgrade(sock: socket.socket, deadline: Deadline) -> None:
    # Length check only; the ExtendedResponse is not decoded.
    _send(sock, deadline, LDAP_STARTTLS_REQUEST, "STARTTLS request")
    response = _recv(sock, deadline, settings.ldap_read_size, "STARTTLS response")
    log.debug("LDAP STARTTLS response: %d bytes", len(response))
    if len(response) < settings.ldap_min_response_bytes:
        raise UpgradeError(f"invalid STARTTLS response length: {len(response)}")


def postgres_starttls_probe(request: ProbeRequest) -> ProbeResult:
    return run_handshake_probe(request, "postgres", upgrade=postgres_upgrade)


def ldap_starttls_probe(request: ProbeRequest) -> ProbeResult:
    return run_handshake_probe(request, "LDAP", upgrade=ldap_upgrade)
