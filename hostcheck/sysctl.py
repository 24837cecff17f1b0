"""
Kernel tunable checks read straight from procfs (<procfs_root>/sys).
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from core.config import settings
from core.errors import HostCheckError
from core.models import SysctlCheck

log = logging.getLogger(__name__)

NOT_FOUND = "not found"


@dataclass(frozen=True)
class SysctlSpec:
    name: str
    expected: str
    kind: str  # int, range or string


DEFAULT_SYSCTLS: List[SysctlSpec] = [
    SysctlSpec("net.ipv4.ip_local_port_range", "1025 65000", "range"),
    SysctlSpec("net.ipv4.tcp_fin_timeout", "30", "int"),
    SysctlSpec("net.ipv4.tcp_tw_reuse", "1", "int"),
    SysctlSpec("net.core.somaxconn", "4096", "int"),
    SysctlSpec("net.ipv4.tcp_max_syn_backlog", "8192", "int"),
    SysctlSpec("vm.min_free_kbytes", "167772", "int"),
    SysctlSpec("net.ipv4.tcp_slow_start_after_idle", "0", "int"),
    SysctlSpec("net.ipv4.tcp_congestion_control", "bbr", "string"),
    SysctlSpec("net.core.default_qdisc", "fq", "string"),
    SysctlSpec("net.ipv4.tcp_notsent_lowat", "16384", "int"),
    SysctlSpec("net.ipv4.tcp_rmem", "4096 156250 625000", "range"),
    SysctlSpec("net.ipv4.tcp_wmem", "4096 156250 625000", "range"),
    SysctlSpec("net.core.rmem_max", "312500", "int"),
    SysctlSpec("net.core.wmem_max", "312500", "int"),
    SysctlSpec("net.core.rmem_default", "312500", "int"),
    SysctlSpec("net.core.wmem_default", "312500", "int"),
    SysctlSpec("net.ipv4.tcp_mem", "1638400 1638400 1638400", "range"),
]


def _sysctl_root() -> Path:
    return Path(settings.procfs_root) / "sys"


def read_sysctl(name: str, root: Optional[Path] = None) -> str:
    if not name:
        raise ValueError("empty parameter name")
    path = (root or _sysctl_root()) / name.replace(".", "/")
    fields = path.read_text().split()
    if not fields:
        raise ValueError(f"{name} is empty")
    return " ".join(fields)


def compare_sysctl(expected: str, actual: str) -> bool:
    """
    Exact match, or field-wise integer comparison where every actual value
    must be at least the expected one.
    """
    expected = expected.strip()
    actual = actual.strip()
    if expected == actual:
        return True

    expected_fields = expected.split()
    actual_fields = actual.split()
    if len(expected_fields) != len(actual_fields):
        return False
    for exp, act in zip(expected_fields, actual_fields):
        try:
            if int(act) < int(exp):
                return False
        except ValueError:
            return False
    return True


def get_sysctls(specs: Optional[List[SysctlSpec]] = None, root: Optional[Path] = None) -> List[SysctlCheck]:
    if not sys.platform.startswith("linux"):
        raise HostCheckError(f"sysctl reading is only supported on Linux, current OS: {sys.platform}")

    specs = DEFAULT_SYSCTLS if specs is None else specs
    log.debug("checking %d sysctl parameters", len(specs))
    results: List[SysctlCheck] = []
    for spec in specs:
        try:
            actual = read_sysctl(spec.name, root=root)
        except (OSError, ValueError) as exc:
            log.debug("failed to read %s: %s", spec.name, exc)
            actual = NOT_FOUND
        results.append(
            SysctlCheck(
                name=spec.name,
                expected=spec.expected,
                actual=actual,
                matches=actual != NOT_FOUND and compare_sysctl(spec.expected, actual),
            )
        )
    return sorted(results, key=lambda r: r.name)
