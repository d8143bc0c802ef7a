from __future__ import annotations

from typing import Any, Dict

from ..context import SetupCtx
from ..lib.docker import build_image


class BuildImageStep:
    step_id = "70_build_image"

    def __init__(self, ctx: SetupCtx) -> None:
        self.ctx = ctx

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        build_image(self.ctx.cfg)
        return state
