"""
Resource limit checks for the current process.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from core.errors import HostCheckError
from core.models import UlimitCheck

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class UlimitSpec:
    name: str
    resource: str  # attribute name in the resource module
    expected: int


DEFAULT_ULIMITS: List[UlimitSpec] = [
    UlimitSpec("nofile", "RLIMIT_NOFILE", 65536),
    UlimitSpec("nproc", "RLIMIT_NPROC", 8192),
]


def get_ulimits(specs: Optional[List[UlimitSpec]] = None) -> List[UlimitCheck]:
    if not sys.platform.startswith("linux"):
        raise HostCheckError(f"ulimits are only supported on Linux, current OS: {sys.platform}")
    import resource

    specs = DEFAULT_ULIMITS if specs is None else specs
    log.debug("checking %d ulimit resources", len(specs))
    results: List[UlimitCheck] = []
    for spec in specs:
        try:
            soft, hard = resource.getrlimit(getattr(resource, spec.resource))
        except (AttributeError, ValueError, OSError) as exc:
            log.warning("failed to get %s: %s", spec.name, exc)
            continue
        soft_value = None if soft == resource.RLIM_INFINITY else soft
        hard_value = None if hard == resource.RLIM_INFINITY else hard
        results.append(
            UlimitCheck(
                name=spec.name,
                soft=soft_value,
                hard=hard_value,
                expected=spec.expected,
                matches=soft_value is None or soft_value >= spec.expected,
            )
        )
    return results
