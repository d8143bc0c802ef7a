from __future__ import annotations

import logging

from ..errors import ExternalToolFailure
from .command import run_cmd

logger = logging.getLogger(__name__)


def is_online(host: str = "1.1.1.1", *, dry_run: bool = False) -> bool:
    """Best-effort online check (one ping, two second timeout)."""

    try:
        r = run_cmd(["ping", "-c", "1", "-t", "2", host], check=False, dry_run=dry_run)
    except ExternalToolFailure:
        logger.debug("ping unavailable; assuming offline")
        return False
    return r.returncode == 0
