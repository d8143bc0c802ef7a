"""Docker Desktop settings patch.

Docker Desktop keeps its preferences in a JSON document whose layout changes
between releases, so the edits here are plain text substitutions on the three
keys we care about. Everything else in the file is left byte-for-byte intact.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from ..errors import SettingsNotFound, UnsupportedSettingsSchema

logger = logging.getLogger(__name__)

MIN_SWAP_MIB = 4096

REQUIRED_KEYS = (
    "UseVirtualizationFramework",
    "UseVirtualizationFrameworkRosetta",
    "SwapMiB",
)

_VZ_FALSE = re.compile(r'("UseVirtualizationFramework"\s*:\s*)false')
_ROSETTA_FALSE = re.compile(r'("UseVirtualizationFrameworkRosetta"\s*:\s*)false')
_SWAP = re.compile(r'("SwapMiB"\s*:\s*)(-?\d+)')


def locate_settings(candidates: Iterable[Path]) -> Path:
    """Return the first candidate that exists, in the given priority order."""

    tried = []
    for c in candidates:
        p = Path(c)
        tried.append(str(p))
        if p.is_file():
            logger.debug("Using Docker settings file %s", p)
            return p
    raise SettingsNotFound(f"Settings file not found (tried: {', '.join(tried)})")


def check_schema(text: str) -> None:
    lowered = text.lower()
    missing = [k for k in REQUIRED_KEYS if f'"{k.lower()}":' not in lowered]
    if missing:
        raise UnsupportedSettingsSchema(f"Docker settings lack required keys: {', '.join(missing)}")


def read_swap_mib(text: str) -> int:
    m = _SWAP.search(text)
    if not m:
        raise UnsupportedSettingsSchema('"SwapMiB" is not an integer value')
    return int(m.group(2))


def patch_settings_text(text: str, min_swap_mib: int = MIN_SWAP_MIB) -> str:
    """Enable the virtualization framework and Rosetta, raise swap to the floor.

    Raises UnsupportedSettingsSchema before touching anything when a key is
    missing or SwapMiB is not numeric.
    """

    check_schema(text)
    swap = read_swap_mib(text)

    out = _VZ_FALSE.sub(r"\1true", text)
    out = _ROSETTA_FALSE.sub(r"\1true", out)
    if swap < min_swap_mib:
        out = _SWAP.sub(lambda m: f"{m.group(1)}{min_swap_mib}", out)
        logger.info("Raising Docker swap from %s MiB to %s MiB", swap, min_swap_mib)
    return out


def patch_settings_file(path: Path, min_swap_mib: int = MIN_SWAP_MIB, *, dry_run: bool = False) -> bool:
    """Patch ``path`` in place. Returns True when the file content changed."""

    with path.open("r", encoding="utf-8", newline="") as f:
        original = f.read()
    patched = patch_settings_text(original, min_swap_mib)

    if patched == original:
        logger.info("Docker settings already configured")
        return False

    if dry_run:
        logger.info("Would rewrite %s", path)
        return True

    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(patched)
    logger.info("Configured Docker successfully")
    return True
