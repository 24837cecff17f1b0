"""
Console rendering for probe results and host diagnostics.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.models import EnvVar, ProbeResult, SysctlCheck, TcpResult, UlimitCheck

stdout_console = Console()


def _console(console: Optional[Console]) -> Console:
    return console or stdout_console


def print_json(obj: Any, console: Optional[Console] = None) -> None:
    if isinstance(obj, list):
        payload = [item.model_dump(mode="json") if hasattr(item, "model_dump") else item for item in obj]
    elif hasattr(obj, "model_dump"):
        payload = obj.model_dump(mode="json")
    else:
        payload = obj
    _console(console).print_json(json.dumps(payload, default=str))


def print_tls_result(result: ProbeResult, host: str, port: int, console: Optional[Console] = None) -> None:
    out = _console(console)
    if not result.success:
        out.print(Text(f"TLS connection to {host}:{port} failed: {result.failure}", style="bold red"))
        return
    out.print(Text(f"TLS connection to {host}:{port} successful", style="bold green"))
    out.print(f"  TLS Version: {result.negotiated_version}", highlight=False, markup=False)
    out.print(f"  Cipher Suite: {result.negotiated_cipher_suite}", highlight=False, markup=False)
    out.print(f"  Server Name: {result.server_name}", highlight=False, markup=False)
    out.print(f"  Peer Certificates: {result.peer_certificates}", highlight=False, markup=False)


def print_tcp_result(result: TcpResult, console: Optional[Console] = None) -> None:
    out = _console(console)
    if result.success:
        out.print(Text(f"TCP connection to {result.host}:{result.port} successful", style="bold green"))
    else:
        out.print(Text(f"TCP connection to {result.host}:{result.port} failed", style="bold red"))
        out.print(f"  {result.failure}", highlight=False, markup=False)


def _status(ok: bool, value: str) -> tuple:
    style = "green" if ok else "red"
    return Text(value, style=style), Text("OK" if ok else "FAIL", style=style)


def print_sysctls(checks: Iterable[SysctlCheck], console: Optional[Console] = None) -> None:
    table = Table(title="Sysctl Parameters", box=box.SIMPLE_HEAVY)
    table.add_column("Parameter", no_wrap=True)
    table.add_column("Expected")
    table.add_column("Actual")
    table.add_column("Status")
    for check in checks:
        actual, status = _status(check.matches, check.actual)
        table.add_row(check.name, check.expected, actual, status)
    _console(console).print(table)


def print_ulimits(checks: Iterable[UlimitCheck], console: Optional[Console] = None) -> None:
    table = Table(title="Resource Limits", box=box.SIMPLE_HEAVY)
    table.add_column("Resource", no_wrap=True)
    table.add_column("Expected")
    table.add_column("Actual")
    table.add_column("Status")
    for check in checks:
        actual, status = _status(check.matches, check.actual)
        table.add_row(check.name, str(check.expected), actual, status)
    _console(console).print(table)


def print_env(env: Iterable[EnvVar], process_name: str, console: Optional[Console] = None) -> None:
    env = list(env)
    out = _console(console)
    out.print(f"{process_name} environment variables ({len(env)} total)", highlight=False, markup=False)
    table = Table(box=box.SIMPLE_HEAVY)
    table.add_column("Variable", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for var in env:
        table.add_row(var.name, Text(var.value))
    out.print(table)
