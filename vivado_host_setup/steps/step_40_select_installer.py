from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..context import SetupCtx, decisions
from ..lib.checksum import HashCache
from ..lib.validator import InstallerValidator, select_installer
from ..lib.versions import DictVersionTable, ManifestVersionTable, VersionTable

logger = logging.getLogger(__name__)


class SelectInstallerStep:
    step_id = "40_select_installer"

    def __init__(self, ctx: SetupCtx, table: Optional[VersionTable] = None) -> None:
        self.ctx = ctx
        self.table = table

    def _table(self) -> VersionTable:
        if self.table is not None:
            return self.table
        cfg = self.ctx.cfg
        return ManifestVersionTable(cfg.versions_manifest, extra=cfg.known_checksums)

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.ctx.cfg
        table = self._table()
        if isinstance(table, DictVersionTable) and len(table) == 0:
            logger.warning(
                "No known installer checksums are configured, so no installer can be accepted. "
                "Add entries under installer.checksums in %s or pass a manifest with --versions.",
                cfg.workdir / "setup_config.yaml",
            )

        validator = InstallerValidator(
            cfg.workdir,
            table,
            cache=HashCache(cfg.hash_cache_path),
            dry_run=self.ctx.dry_run,
        )
        candidate = select_installer(validator, self.ctx.prompter)

        d = decisions(state)
        d["installer_path"] = candidate.path
        d["installer_checksum"] = candidate.checksum
        d["vivado_version"] = candidate.version
        return state
