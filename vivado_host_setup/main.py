from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .config import SetupConfig, load_setup_config
from .context import SetupCtx
from .errors import AbortedByUser, SetupError
from .lib.prompts import Prompter
from .logging_utils import DEFAULT_LOG_NAME, configure_logging
from .pipeline import run_pipeline
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    AutostartStep,
    BuildImageStep,
    ConfigureDockerStep,
    ConsentStep,
    LaunchContainerStep,
    PrepareWorkdirStep,
    PreflightStep,
    ResolutionStep,
    RosettaStep,
    SelectInstallerStep,
)

logger = logging.getLogger(__name__)

DEFAULT_STATE_NAME = ".vivado-setup/state.json"


def build_steps(ctx: SetupCtx):
    return [
        PreflightStep(ctx),
        ConsentStep(ctx),
        RosettaStep(ctx),
        SelectInstallerStep(ctx),
        PrepareWorkdirStep(ctx),
        ConfigureDockerStep(ctx),
        BuildImageStep(ctx),
        ResolutionStep(ctx),
        AutostartStep(ctx),
        LaunchContainerStep(ctx),
    ]


def run(
    cfg: SetupConfig,
    *,
    state_path: str,
    prompter: Optional[Prompter] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> Dict[str, Any]:
    """Run the host setup, persisting state so a later run can resume."""

    ctx = SetupCtx(cfg=cfg, prompter=prompter or Prompter())
    state = ensure_defaults(load_state(state_path))
    steps = build_steps(ctx)

    try:
        result = run_pipeline(
            state=state,
            steps=steps,
            start_at=start_at,
            stop_after=stop_after,
            force=force,
        )
        state = result.state
        state.setdefault("execution", {}).setdefault("summary", {})["ran_steps"] = result.ran_steps
        state.setdefault("execution", {}).setdefault("summary", {})["skipped_steps"] = result.skipped_steps
        state["execution"]["summary"]["stopped_after"] = result.stopped_after
        if not result.finished:
            logger.info("Setup paused after %s", result.stopped_after)
        return state
    except Exception as e:
        state.setdefault("execution", {}).setdefault("errors", []).append(
            {
                "step": (state.get("execution") or {}).get("current_step"),
                "type": type(e).__name__,
                "error": str(e),
            }
        )
        raise
    finally:
        save_state(state_path, state)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="vivado-host-setup")
    p.add_argument("--workdir", default=None, help="Folder mounted into the container (default: cwd)")
    p.add_argument("--config", default=None, help="Path to setup_config.yaml")
    p.add_argument("--state", default=None, help=f"Path to setup state (default: <workdir>/{DEFAULT_STATE_NAME})")
    p.add_argument("--log", default=None, help=f"Path to setup log (default: <workdir>/{DEFAULT_LOG_NAME})")
    p.add_argument("--versions", default=None, help="YAML manifest mapping installer checksums to versions")
    p.add_argument("--min-swap", type=int, default=None, help="Docker swap floor in MiB (default: 4096)")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_select_installer)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")
    p.add_argument("--dry-run", action="store_true", help="Log external commands and file writes instead of running them")
    p.add_argument("-v", "--verbose", action="store_true", help="Show debug messages on the console")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    workdir = Path(args.workdir).expanduser() if args.workdir else Path.cwd()
    log_path = args.log or str(workdir / DEFAULT_LOG_NAME)
    level = logging.DEBUG if args.verbose else logging.INFO
    configure_logging(log_path=log_path, level=level, console_level=level)

    try:
        cfg = load_setup_config(
            workdir,
            path=args.config,
            overrides={
                "installer": {"versions_manifest": args.versions},
                "docker": {"min_swap_mib": args.min_swap},
            },
            current_user=os.environ.get("USER", ""),
            dry_run=bool(args.dry_run),
        )
        run(
            cfg,
            state_path=args.state or str(cfg.workdir / DEFAULT_STATE_NAME),
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=bool(args.force),
        )
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130
    except AbortedByUser as e:
        logger.info("%s", e)
        return 1
    except SetupError as e:
        logger.error("%s", e)
        logger.debug("Setup aborted", exc_info=True)
        return 1
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
