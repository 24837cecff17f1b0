"""
Direct TLS handshake probe (verified, insecure or custom SNI) and the
result extraction shared with the STARTTLS probes.
"""

from __future__ import annotations

import logging
import socket
import ssl
from typing import Callable, Optional

from core.config import settings
from core.errors import HandshakeError, ProbeError
from core.models import ProbeRequest, ProbeResult
from probers.names import version_code
from probers.transport import Deadline, dial

log = logging.getLogger(__name__)


def build_context(verify: bool = True) -> ssl.SSLContext:
    context = ssl.create_default_context(cafile=settings.ca_bundle)
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def handshake(sock: socket.socket, sni: str, deadline: Deadline, context: ssl.SSLContext) -> ssl.SSLSocket:
    """Run a client handshake over an already connected socket."""
    log.debug("starting TLS handshake (sni=%s, verify=%s)", sni, context.verify_mode != ssl.CERT_NONE)
    try:
        deadline.apply(sock)
        return context.wrap_socket(sock, server_hostname=sni)
    except (OSError, ValueError) as exc:
        raise HandshakeError("TLS handshake failed") from exc


def _cipher_code(tls: ssl.SSLSocket) -> int:
    current = tls.cipher()
    if not current:
        return 0
    name = current[0]
    for entry in tls.context.get_ciphers():
        if entry.get("name") == name:
            return entry.get("id", 0) & 0xFFFF
    return 0


def _peer_certificate_count(tls: ssl.SSLSocket) -> int:
    if hasattr(tls, "get_unverified_chain"):
        chain = tls.get_unverified_chain()
        if chain:
            return len(chain)
    return 1 if tls.getpeercert(binary_form=True) else 0


def extract_result(tls: ssl.SSLSocket, server_name: str) -> ProbeResult:
    """Read the negotiated parameters from an established session. No I/O."""
    return ProbeResult(
        success=True,
        server_name=server_name,
        version=version_code(tls.version()),
        cipher_suite=_cipher_code(tls),
        peer_certificates=_peer_certificate_count(tls),
    )


def run_handshake_probe(
    request: ProbeRequest,
    label: str,
    upgrade: Optional[Callable[[socket.socket, Deadline], None]] = None,
) -> ProbeResult:
    """
    Dial, optionally run an in-band upgrade on the plaintext socket, then
    handshake over the same connection and extract the session facts.
    Every failure becomes a failed ProbeResult; the socket is always closed.
    """
    context = build_context(verify=request.verify)
    deadline = Deadline(request.timeout)
    try:
        sock = dial(request.host, request.port, deadline, label=label if upgrade is not None else "")
        with sock:
            if upgrade is not None:
                upgrade(sock, deadline)
                log.debug("%s upgrade accepted by %s", label, request.address)
            with handshake(sock, request.sni, deadline, context) as tls:
                result = extract_result(tls, request.sni)
    except ProbeError as exc:
        log.info("%s probe of %s failed at %s stage: %s", label, request.address, exc.stage, exc.describe())
        return ProbeResult.failed(request.sni, exc.describe())
    log.debug("%s probe of %s negotiated %s", label, request.address, result.negotiated_version)
    return result


def tls_probe(request: ProbeRequest) -> ProbeResult:
    return run_handshake_probe(request, "TLS")
