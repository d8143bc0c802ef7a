from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .state_store import is_step_completed, mark_step_completed

logger = logging.getLogger(__name__)


class Step(Protocol):
    """One setup step. Steps get their SetupCtx at construction and record
    what they decided under ``state["execution"]["decisions"]``."""

    step_id: str

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    skipped_steps: List[str]
    stopped_after: Optional[str] = None

    @property
    def finished(self) -> bool:
        """True when the run reached the last step (the container launch)."""
        return self.stopped_after is None


def run_pipeline(
    *,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> PipelineResult:
    """Run steps strictly in order; a raising step stops everything after it."""

    ids = [s.step_id for s in steps]
    for wanted in (start_at, stop_after):
        if wanted is not None and wanted not in ids:
            raise ValueError(f"Unknown step id {wanted!r} (known: {', '.join(ids)})")

    ran: List[str] = []
    skipped: List[str] = []
    stopped: Optional[str] = None

    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        state.setdefault("execution", {})["current_step"] = step.step_id

        if (not force) and is_step_completed(state, step.step_id):
            logger.debug("Skipping step %s (already completed)", step.step_id)
            skipped.append(step.step_id)
        else:
            logger.debug("Running step %s", step.step_id)
            state = step.run(state)
            mark_step_completed(state, step.step_id)
            ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after and step is not steps[-1]:
            logger.info("Stopping after %s; rerun with --start-at to continue", stop_after)
            stopped = stop_after
            break

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran, skipped_steps=skipped, stopped_after=stopped)
