from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from ..config import SetupConfig
from ..errors import ExternalToolFailure
from .command import run_cmd

logger = logging.getLogger(__name__)

DOCKER_APP = "Docker"
START_TIMEOUT_S = 180.0
POLL_INTERVAL_S = 2.0


def docker_running(*, dry_run: bool = False) -> bool:
    if dry_run:
        return True
    try:
        return run_cmd(["docker", "info"], check=False).returncode == 0
    except ExternalToolFailure:
        return False


def start_docker(*, timeout_s: float = START_TIMEOUT_S, dry_run: bool = False) -> None:
    """Launch Docker Desktop and block until the daemon answers."""

    if not dry_run and docker_running():
        return

    logger.info("Starting Docker...")
    try:
        run_cmd(["open", "-a", DOCKER_APP], dry_run=dry_run)
    except ExternalToolFailure as e:
        raise ExternalToolFailure(
            "Docker Desktop could not be started. Make sure it is installed in /Applications."
        ) from e

    if dry_run:
        return

    deadline = time.monotonic() + timeout_s
    while not docker_running():
        if time.monotonic() >= deadline:
            raise ExternalToolFailure(f"Docker did not become ready within {int(timeout_s)}s")
        time.sleep(POLL_INTERVAL_S)
    logger.info("Docker is running")


def stop_docker(*, timeout_s: float = START_TIMEOUT_S, dry_run: bool = False) -> None:
    logger.info("Stopping Docker...")
    run_cmd(["osascript", "-e", f'quit app "{DOCKER_APP}"'], dry_run=dry_run)
    if dry_run:
        return

    deadline = time.monotonic() + timeout_s
    while docker_running():
        if time.monotonic() >= deadline:
            raise ExternalToolFailure(f"Docker did not stop within {int(timeout_s)}s")
        time.sleep(POLL_INTERVAL_S)


@contextmanager
def docker_stopped(*, dry_run: bool = False) -> Iterator[None]:
    """Keep Docker Desktop stopped for the duration of the block."""

    stop_docker(dry_run=dry_run)
    try:
        yield
    except BaseException as e:
        # The error from the block wins over a failed restart.
        logger.info("Restarting Docker after error: %s", e)
        try:
            start_docker(dry_run=dry_run)
        except ExternalToolFailure as start_error:
            logger.error("%s", start_error)
        raise
    start_docker(dry_run=dry_run)


def build_image(cfg: SetupConfig) -> None:
    logger.info("Building the container image %s, this may take a while...", cfg.image)
    run_cmd(
        ["docker", "build", "--platform", cfg.platform, "-t", cfg.image, str(cfg.scripts_dir)],
        capture=False,
        dry_run=cfg.dry_run,
    )


def container_argv(cfg: SetupConfig) -> list[str]:
    port = f"127.0.0.1:{cfg.vnc_port}:{cfg.vnc_port}"
    return [
        "docker",
        "run",
        "--init",
        "-it",
        "--rm",
        "--name",
        cfg.container_name,
        "--mount",
        f"type=bind,source={cfg.workdir},target={cfg.container_home}",
        "-p",
        port,
        "--platform",
        cfg.platform,
        cfg.image,
        "sudo",
        "-H",
        "-u",
        "user",
        "bash",
        f"{cfg.container_home}/{cfg.install_script}",
    ]


def run_container(cfg: SetupConfig) -> int:
    """Run the installation container attached to this terminal."""

    r = run_cmd(container_argv(cfg), check=False, capture=False, dry_run=cfg.dry_run)
    return r.returncode
