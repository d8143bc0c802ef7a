from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import SetupCtx, decisions
from ..lib.host import chown_tree, extract_tar, make_executable, remove_quarantine

logger = logging.getLogger(__name__)


class PrepareWorkdirStep:
    step_id = "50_prepare_workdir"

    def __init__(self, ctx: SetupCtx) -> None:
        self.ctx = ctx

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.ctx.cfg
        dry_run = self.ctx.dry_run
        d = decisions(state)
        installer = d.get("installer_path")
        if not installer:
            raise RuntimeError("No installer selected; run 40_select_installer first")

        # Extract on the host; much faster than inside the emulated container.
        if installer.endswith(".tar"):
            extract_tar(installer, cfg.installer_extract_dir, dry_run=dry_run)
            d["installer_extracted_to"] = str(cfg.installer_extract_dir)

        install_bin = cfg.relative_to_workdir(installer)
        if dry_run:
            logger.info("Would write %s", cfg.install_bin_file)
        else:
            cfg.install_bin_file.parent.mkdir(parents=True, exist_ok=True)
            cfg.install_bin_file.write_text(install_bin, encoding="utf-8")
        d["install_bin"] = install_bin

        chown_tree(cfg.workdir, cfg.user, dry_run=dry_run)

        if cfg.xvcd_binary.exists():
            remove_quarantine(cfg.xvcd_binary, self.ctx.prompter, dry_run=dry_run)

        executables = sorted(cfg.scripts_dir.glob("*.sh"))
        if cfg.xvcd_binary.exists():
            executables.append(cfg.xvcd_binary)
        make_executable([*executables, installer], dry_run=dry_run)
        return state
