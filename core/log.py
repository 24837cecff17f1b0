"""Logging setup for CLI use."""

from __future__ import annotations

import logging
from typing import Optional

from core.config import settings


def setup_logging(level: Optional[str] = None) -> None:
    effective_level = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
