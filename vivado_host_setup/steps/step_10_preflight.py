from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import SetupCtx, decisions
from ..errors import PreflightFailed
from ..lib.host import ensure_not_root, validate_macos
from ..lib.net import is_online

logger = logging.getLogger(__name__)


class PreflightStep:
    step_id = "10_preflight"

    def __init__(self, ctx: SetupCtx) -> None:
        self.ctx = ctx

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.ctx.cfg

        validate_macos()
        ensure_not_root(cfg.user)

        if cfg.previous_install_dir.is_dir():
            raise PreflightFailed(
                f"A previous installation was found. To reinstall, remove the {cfg.previous_install_dir.name} folder."
            )

        if not is_online(cfg.online_probe_host, dry_run=self.ctx.dry_run):
            raise PreflightFailed("No internet connection. Connect to the internet and rerun the setup.")

        decisions(state)["user"] = cfg.user
        return state
