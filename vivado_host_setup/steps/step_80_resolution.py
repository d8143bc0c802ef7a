from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import SetupCtx, decisions
from ..lib.resolution import parse_resolution

logger = logging.getLogger(__name__)


class ResolutionStep:
    step_id = "80_resolution"

    def __init__(self, ctx: SetupCtx) -> None:
        self.ctx = ctx

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.ctx.cfg
        logger.info(
            "Set the resolution of the container. Keep in mind that high resolutions might make text and images appear small."
        )
        logger.info("You can change the resolution manually in the %s file later.", cfg.resolution_file.name)
        raw = self.ctx.prompter.ask(
            f"Press enter to leave the default ({cfg.default_resolution}) or type in your preference:"
        )

        resolution = parse_resolution(raw, cfg.default_resolution)
        if resolution == raw.strip():
            logger.info("Setting %s as resolution", resolution)
        else:
            logger.info("Setting the default of %s", resolution)

        if self.ctx.dry_run:
            logger.info("Would write %s", cfg.resolution_file)
        else:
            cfg.resolution_file.parent.mkdir(parents=True, exist_ok=True)
            cfg.resolution_file.write_text(resolution + "\n", encoding="utf-8")

        decisions(state)["vnc_resolution"] = resolution
        return state
