from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import SetupCtx
from ..errors import ExternalToolFailure
from ..lib.docker import run_container

logger = logging.getLogger(__name__)


class LaunchContainerStep:
    step_id = "90_launch_container"

    def __init__(self, ctx: SetupCtx) -> None:
        self.ctx = ctx

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(
            "Now, the container is started (only terminal, no GUI) and the actual installation process begins."
        )
        rc = run_container(self.ctx.cfg)
        if rc != 0:
            raise ExternalToolFailure(f"Installation container exited with status {rc}", returncode=rc)
        return state
