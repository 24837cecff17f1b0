"""
Entry points for the TLS probe variants, one per mode, plus a
dispatcher keyed on ProbeRequest.mode.
"""

from typing import Callable, Dict

from core.models import ProbeMode, ProbeRequest, ProbeResult
from probers.starttls import ldap_starttls_probe, postgres_starttls_probe
from probers.tls_handshake import tls_probe

_VARIANTS: Dict[ProbeMode, Callable[[ProbeRequest], ProbeResult]] = {
    ProbeMode.TLS: tls_probe,
    ProbeMode.TLS_INSECURE: tls_probe,
    ProbeMode.TLS_SNI: tls_probe,
    ProbeMode.TLS_POSTGRES: postgres_starttls_probe,
    ProbeMode.TLS_LDAP: ldap_starttls_probe,
}


def run_probe(request: ProbeRequest) -> ProbeResult:
    try:
        variant = _VARIANTS[request.mode]
    except KeyError:
        raise ValueError(f"mode {request.mode.value!r} is not a TLS probe") from None
    return variant(request)


def probe_tls(host: str, port: int, timeout: float) -> ProbeResult:
    return run_probe(ProbeRequest(host=host, port=port, timeout=timeout, mode=ProbeMode.TLS))


def probe_tls_insecure(host: str, port: int, timeout: float) -> ProbeResult:
    return run_probe(ProbeRequest(host=host, port=port, timeout=timeout, mode=ProbeMode.TLS_INSECURE))


def probe_tls_sni(host: str, port: int, sni: str, timeout: float) -> ProbeResult:
    return run_probe(ProbeRequest(host=host, port=port, timeout=timeout, sni=sni, mode=ProbeMode.TLS_SNI))


def probe_postgres_starttls(host: str, port: int, timeout: float) -> ProbeResult:
    return run_probe(ProbeRequest(host=host, port=port, timeout=timeout, mode=ProbeMode.TLS_POSTGRES))


def probe_ldap_starttls(host: str, port: int, timeout: float) -> ProbeResult:
    return run_probe(ProbeRequest(host=host, port=port, timeout=timeout, mode=ProbeMode.TLS_LDAP))
