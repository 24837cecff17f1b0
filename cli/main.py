import argparse
import logging
import sys
from typing import List, Optional

from cli import render
from core.config import settings
from core.errors import HostCheckError
from core.log import setup_logging
from core.models import ProbeMode, ProbeRequest
from hostcheck.procenv import get_process_env
from hostcheck.sysctl import get_sysctls
from hostcheck.ulimits import get_ulimits
from probers.l4_tcp import tcp_probe
from probers.runner import run_probe

log = logging.getLogger(__name__)

MODES = [m.value for m in ProbeMode]


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def cmd_tcp(args) -> int:
    result = tcp_probe(args.host, args.port, timeout=args.timeout)
    if args.json:
        render.print_json(result)
    else:
        render.print_tcp_result(result)
    return 0 if result.success else 1


def cmd_tls(args) -> int:
    request = ProbeRequest(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        sni=args.sni if args.mode == ProbeMode.TLS_SNI else None,
        mode=args.mode,
    )
    result = run_probe(request)
    if args.json:
        render.print_json(result)
    else:
        render.print_tls_result(result, args.host, args.port)
    return 0 if result.success else 1


def cmd_ulimits(args) -> int:
    try:
        checks = get_ulimits()
    except HostCheckError as exc:
        return _fail(f"failed to get ulimits: {exc}")
    if args.json:
        render.print_json(checks)
    else:
        render.print_ulimits(checks)
    return 0


def cmd_sysctl(args) -> int:
    try:
        checks = get_sysctls()
    except HostCheckError as exc:
        return _fail(f"failed to get sysctl parameters: {exc}")
    if args.json:
        render.print_json(checks)
    else:
        render.print_sysctls(checks)
    return 0


def cmd_mm_env(args) -> int:
    try:
        env = get_process_env()
    except HostCheckError as exc:
        return _fail(f"failed to get {settings.process_name} environment variables: {exc}")
    if args.json:
        render.print_json(env)
    else:
        render.print_env(env, settings.process_name)
    return 0


COMMANDS = {
    ProbeMode.TCP: cmd_tcp,
    ProbeMode.TLS: cmd_tls,
    ProbeMode.TLS_INSECURE: cmd_tls,
    ProbeMode.TLS_SNI: cmd_tls,
    ProbeMode.TLS_POSTGRES: cmd_tls,
    ProbeMode.TLS_LDAP: cmd_tls,
    ProbeMode.ULIMITS: cmd_ulimits,
    ProbeMode.MM_ENV: cmd_mm_env,
    ProbeMode.SYSCTL: cmd_sysctl,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Network, TLS/STARTTLS and host diagnostics")
    parser.add_argument("--host", default="", help="Host to connect to")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to connect to")
    parser.add_argument("--timeout", type=float, default=settings.timeout_s, help="Connection timeout in seconds")
    parser.add_argument("--mode", default=ProbeMode.TCP.value, help=f"Test mode: {', '.join(MODES)}")
    parser.add_argument("--sni", default="", help="Custom SNI for TLS connections")
    parser.add_argument("--json", action="store_true", default=False, help="Output JSON instead of text")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Debug logging to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)

    try:
        args.mode = ProbeMode(args.mode.lower())
    except ValueError:
        print(f"Error: unknown mode '{args.mode}'", file=sys.stderr)
        print(f"Available modes: {', '.join(MODES)}", file=sys.stderr)
        return 1

    if args.mode.needs_host and not args.host:
        parser.print_usage(sys.stderr)
        return _fail("host is required")
    if args.mode == ProbeMode.TLS_SNI and not args.sni:
        return _fail("SNI is required for tls-sni mode")
    if args.mode.needs_host and not 1 <= args.port <= 65535:
        return _fail(f"port must be between 1 and 65535, got {args.port}")
    if args.timeout <= 0:
        return _fail("timeout must be positive")

    log.debug("running mode %s", args.mode.value)
    return COMMANDS[args.mode](args)


if __name__ == "__main__":
    raise SystemExit(main())
