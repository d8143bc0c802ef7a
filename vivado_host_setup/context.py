from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .config import SetupConfig
from .lib.prompts import Prompter


@dataclass(frozen=True)
class SetupCtx:
    cfg: SetupConfig
    prompter: Prompter = field(default_factory=Prompter)

    @property
    def dry_run(self) -> bool:
        return self.cfg.dry_run


def decisions(state: Dict[str, Any]) -> Dict[str, Any]:
    return state.setdefault("execution", {}).setdefault("decisions", {})
