from __future__ import annotations

import re

DEFAULT_RESOLUTION = "1920x1080"

_RESOLUTION = re.compile(r"[0-9]+x[0-9]+")


def parse_resolution(raw: str | None, default: str = DEFAULT_RESOLUTION) -> str:
    """Return ``raw`` if it looks like WIDTHxHEIGHT, else ``default``.

    Only the shape is checked; "0x0" or absurdly large values pass.
    """

    if not _RESOLUTION.fullmatch(default):
        raise ValueError(f"Default resolution must look like WIDTHxHEIGHT, got {default!r}")

    candidate = (raw or "").strip()
    if _RESOLUTION.fullmatch(candidate):
        return candidate
    return default
