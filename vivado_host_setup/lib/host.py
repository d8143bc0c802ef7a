from __future__ import annotations

import logging
import platform
import shutil
from pathlib import Path
from typing import Sequence

from ..errors import ExternalToolFailure, PermissionDenied, PreflightFailed
from .command import run_cmd
from .prompts import Prompter

logger = logging.getLogger(__name__)

QUARANTINE_ATTR = "com.apple.quarantine"


def validate_macos() -> None:
    if platform.system() != "Darwin":
        raise PreflightFailed("This setup has to be run on macOS (not inside the container).")


def ensure_not_root(user: str) -> None:
    if user == "root":
        raise PreflightFailed("Do not execute this script as root.")


def is_intel_mac() -> bool:
    return platform.machine().lower() == "x86_64"


def rosetta_installed(*, dry_run: bool = False) -> bool:
    try:
        r = run_cmd(["arch", "-arch", "x86_64", "uname", "-m"], check=False, dry_run=dry_run)
    except ExternalToolFailure:
        return False
    return r.returncode == 0


def ensure_rosetta(*, dry_run: bool = False) -> str:
    """Install Rosetta 2 on Apple Silicon. Returns what was decided."""

    if is_intel_mac():
        logger.info("Mac is Intel-based. Rosetta installation is not required.")
        return "not_required"
    if rosetta_installed(dry_run=dry_run):
        logger.info("Rosetta is already installed.")
        return "present"

    logger.info("Rosetta is not installed.")
    logger.info("Proceeding with Rosetta installation...")
    try:
        run_cmd(["softwareupdate", "--install-rosetta", "--agree-to-license"], capture=False, dry_run=dry_run)
    except ExternalToolFailure as e:
        raise ExternalToolFailure("Error installing Rosetta.") from e
    return "installed"


def extract_tar(archive: str | Path, dest: str | Path, *, dry_run: bool = False) -> None:
    """Unpack the installer tarball, dropping its top-level directory."""

    d = Path(dest)
    if not dry_run:
        d.mkdir(parents=True, exist_ok=True)
    logger.info("Extracting tar, this may take a while...")
    run_cmd(["tar", "-xf", str(archive), "-C", str(d), "--strip-components", "1"], dry_run=dry_run)


def chown_tree(path: str | Path, user: str, *, dry_run: bool = False) -> None:
    """``chown -R`` with exactly one ``sudo`` retry."""

    argv = ["chown", "-R", user, str(path)]
    try:
        run_cmd(argv, dry_run=dry_run)
        return
    except ExternalToolFailure:
        logger.info("Higher privileges are required to make the folder owned by the user.")

    try:
        run_cmd(["sudo", *argv], capture=False, dry_run=dry_run)
    except ExternalToolFailure as e:
        raise PermissionDenied(f"Error setting {user} as owner of {path}.") from e


def has_quarantine(path: str | Path, *, dry_run: bool = False) -> bool:
    try:
        r = run_cmd(["xattr", "-p", QUARANTINE_ATTR, str(path)], check=False, dry_run=dry_run)
    except ExternalToolFailure:
        return False
    return r.returncode == 0 and not dry_run


def remove_quarantine(path: str | Path, prompter: Prompter, *, dry_run: bool = False) -> bool:
    """Strip the Gatekeeper quarantine flag. Falls back to asking the user."""

    if not has_quarantine(path, dry_run=dry_run):
        return False
    try:
        run_cmd(["xattr", "-d", QUARANTINE_ATTR, str(path)], dry_run=dry_run)
    except ExternalToolFailure:
        prompter.wait(f"You need to remove the quarantine attribute from {path} manually. Press Enter when done...")
    return True


def make_executable(paths: Sequence[str | Path], *, dry_run: bool = False) -> None:
    if not paths:
        return
    try:
        run_cmd(["chmod", "+x", *[str(p) for p in paths]], dry_run=dry_run)
    except ExternalToolFailure as e:
        raise ExternalToolFailure("Error making the scripts executable.") from e


def install_autostart(workdir: str | Path, *, dry_run: bool = False) -> Path:
    """Copy the desktop autostart entry into the container user's home."""

    root = Path(workdir)
    src = root / "scripts" / "de_start.desktop"
    dst = root / ".config" / "autostart" / "de_start.desktop"
    if not src.exists():
        raise FileNotFoundError(str(src))

    if dry_run:
        logger.info("Would copy %s -> %s", src, dst)
        return dst

    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
    (root / "Desktop").mkdir(exist_ok=True)
    return dst
