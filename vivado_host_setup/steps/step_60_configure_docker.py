from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import SetupCtx, decisions
from ..errors import SettingsNotFound, UnsupportedSettingsSchema
from ..lib.docker import docker_stopped, start_docker
from ..lib.docker_settings import locate_settings, patch_settings_file

logger = logging.getLogger(__name__)

MANUAL_INSTRUCTIONS = (
    "Unfortunately, the script could not configure Docker automatically.",
    "This means that you have to change the settings in the Docker Dashboard yourself:",
    "Enable the Virtualization Framework, Rosetta emulation and set Swap to at least {gib} GiB.",
    "Restart Docker after applying the changes and then continue with the installation.",
)


class ConfigureDockerStep:
    """Enable Rosetta emulation in Docker Desktop and raise its swap."""

    step_id = "60_configure_docker"

    def __init__(self, ctx: SetupCtx) -> None:
        self.ctx = ctx

    def notify_manual_setup(self) -> None:
        gib = self.ctx.cfg.min_swap_mib // 1024
        for line in MANUAL_INSTRUCTIONS:
            logger.info(line.format(gib=gib))
        self.ctx.prompter.wait()

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.ctx.cfg
        dry_run = self.ctx.dry_run
        d = decisions(state)

        # Makes sure Docker is installed and has written its settings once.
        start_docker(dry_run=dry_run)

        try:
            settings_path = locate_settings(cfg.settings_candidates)
            with docker_stopped(dry_run=dry_run):
                changed = patch_settings_file(settings_path, cfg.min_swap_mib, dry_run=dry_run)
        except (SettingsNotFound, UnsupportedSettingsSchema) as e:
            logger.info("%s", e)
            self.notify_manual_setup()
            d["docker_settings"] = "manual"
            return state

        d["docker_settings"] = "patched" if changed else "unchanged"
        d["docker_settings_file"] = str(settings_path)
        return state
