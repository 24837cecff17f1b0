"""
Environment inspection of a named running process via psutil.
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

import psutil

from core.config import settings
from core.errors import HostCheckError
from core.models import EnvVar

log = logging.getLogger(__name__)


def find_process(name: str) -> psutil.Process:
    for proc in psutil.process_iter(["name"]):
        if proc.info.get("name") == name:
            log.debug("found %s as PID %d", name, proc.pid)
            return proc
    raise HostCheckError(f"{name} process not found")


def get_process_env(name: Optional[str] = None, prefix: Optional[str] = None) -> List[EnvVar]:
    """Sorted NAME=VALUE pairs from the process environment whose name has the prefix."""
    if not sys.platform.startswith("linux"):
        raise HostCheckError(
            f"reading process environment variables is only supported on Linux, current OS: {sys.platform}"
        )
    name = name or settings.process_name
    prefix = settings.env_prefix_filter if prefix is None else prefix

    proc = find_process(name)
    try:
        environ = proc.environ()
    except (psutil.AccessDenied, psutil.NoSuchProcess, psutil.ZombieProcess) as exc:
        raise HostCheckError(f"failed to read environment for PID {proc.pid}: {exc}") from exc

    filtered = sorted(f"{k}={v}" for k, v in environ.items() if k.startswith(prefix))
    if not filtered:
        raise HostCheckError(f"no {prefix} environment variables found")
    return [EnvVar.parse(entry) for entry in filtered]
