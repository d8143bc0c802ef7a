from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8 * 1024 * 1024


def md5_file(path: str | Path) -> str:
    """MD5 hex digest of a (possibly multi-GB) file, streamed in chunks."""

    h = hashlib.md5()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


@dataclass(frozen=True)
class HashCache:
    """Sidecar file remembering the checksum of the accepted installer.

    The stored value is trusted as-is: it is NOT re-checked against whatever
    file is offered next. Delete the file when the installer changes.
    """

    path: Path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> Optional[str]:
        if not self.exists():
            return None
        value = "".join(self.path.read_text(encoding="utf-8").split())
        return value or None

    def write(self, checksum: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(checksum, encoding="utf-8")
        logger.debug("Stored checksum in %s", self.path)
