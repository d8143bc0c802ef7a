from __future__ import annotations

from typing import Any, Dict

from ..context import SetupCtx
from ..lib.host import install_autostart


class AutostartStep:
    step_id = "85_autostart"

    def __init__(self, ctx: SetupCtx) -> None:
        self.ctx = ctx

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        install_autostart(self.ctx.cfg.workdir, dry_run=self.ctx.dry_run)
        return state
