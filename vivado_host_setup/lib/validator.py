from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..errors import PathOutsideWorkdir, UnrecognizedChecksum
from .checksum import HashCache, md5_file
from .prompts import Prompter
from .versions import VersionTable

logger = logging.getLogger(__name__)

Hasher = Callable[[str], str]


@dataclass(frozen=True)
class InstallerCandidate:
    path: str
    checksum: str
    version: str
    from_cache: bool = False


class InstallerValidator:
    """Accept an installer only if its checksum is in the version table.

    The installer must live inside ``workdir`` because that folder is the
    only thing the container can see.
    """

    def __init__(
        self,
        workdir: str | Path,
        table: VersionTable,
        *,
        cache: Optional[HashCache] = None,
        hasher: Hasher = md5_file,
        dry_run: bool = False,
    ) -> None:
        self.workdir = str(workdir).rstrip("/")
        self.table = table
        self.cache = cache
        self.hasher = hasher
        self.dry_run = dry_run

    def check_location(self, path: str) -> None:
        if not path.startswith(self.workdir + "/"):
            raise PathOutsideWorkdir(f"{path} is not inside {self.workdir}")

    def checksum(self, path: str) -> tuple[str, bool]:
        cached = self.cache.read() if self.cache is not None else None
        if cached:
            # Not re-verified against path; a stale cache is trusted as well.
            logger.debug("Trusting cached checksum %s from %s for %s", cached, self.cache.path, path)
            return cached, True
        logger.info("Generating hash, this may take a while...")
        return self.hasher(path), False

    def validate(self, path: str) -> InstallerCandidate:
        self.check_location(path)
        checksum, from_cache = self.checksum(path)

        version = self.table.lookup(checksum)
        if version is None:
            raise UnrecognizedChecksum(f"Unknown installer checksum {checksum}")

        if self.cache is not None and not from_cache:
            if self.dry_run:
                logger.info("Would write %s", self.cache.path)
            else:
                self.cache.write(checksum)
        return InstallerCandidate(path=path, checksum=checksum, version=version, from_cache=from_cache)


def select_installer(validator: InstallerValidator, prompter: Prompter) -> InstallerCandidate:
    """Prompt until the user drops a valid installer. There is no retry limit."""

    logger.info("You need to put the Vivado installation file into %s if you have not done so already.", validator.workdir)
    while True:
        path = prompter.ask_path(
            "Then, drag and drop the Vivado installation binary into this terminal window and press Enter:"
        )
        try:
            if validator.cache is not None and validator.cache.exists():
                validator.check_location(path)
                prompter.wait(
                    f"Using stored hash, delete {validator.cache.path} and rerun if installer file has changed. "
                    "Press Enter to continue..."
                )
            candidate = validator.validate(path)
        except PathOutsideWorkdir:
            logger.info("You need to move the installation binary into the folder!")
            continue
        except UnrecognizedChecksum:
            logger.info("File corrupted or version not supported.")
            continue
        except OSError as e:
            logger.info("Could not read %s: %s", path, e)
            continue

        logger.info("Valid file provided. Detected version %s", candidate.version)
        return candidate
