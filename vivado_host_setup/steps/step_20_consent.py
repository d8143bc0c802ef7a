from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import SetupCtx, decisions
from ..errors import AbortedByUser

logger = logging.getLogger(__name__)

TERMS = (
    "Advancing with the setup requires the following:",
    "- Agreeing to Xilinx'/AMD's EULAs (which can be obtained by extracting the installation binary)",
    "- Enabling WebTalk data collection for version 2021.1 and agreeing to corresponding terms",
    "- Installation of Rosetta 2 and agreeing to Apple's corresponding software license agreement",
)


class ConsentStep:
    step_id = "20_consent"

    def __init__(self, ctx: SetupCtx) -> None:
        self.ctx = ctx

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        for line in TERMS:
            logger.info("%s", line)

        if not self.ctx.prompter.confirm("Proceed [Y/n]?"):
            raise AbortedByUser("Aborting setup.")

        logger.info("Continuing setup...")
        decisions(state)["consent"] = True
        return state
