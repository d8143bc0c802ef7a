from __future__ import annotations

from typing import Any, Dict

from ..context import SetupCtx, decisions
from ..lib.host import ensure_rosetta


class RosettaStep:
    step_id = "30_rosetta"

    def __init__(self, ctx: SetupCtx) -> None:
        self.ctx = ctx

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        decisions(state)["rosetta"] = ensure_rosetta(dry_run=self.ctx.dry_run)
        return state
