from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_NAME = "logs/vivado-host-setup.log"
CONSOLE_PREFIX = "[vivado-setup]"


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
    console_level: int = logging.INFO,
) -> str:
    """Configure logging.

    Every decision goes to ``log_path`` with timestamps. The console only gets
    the message text behind a short prefix, since the same records double as
    the interactive output of the setup. ``console_level=DEBUG`` (``-v``) also
    shows commands and step bookkeeping there.

    If ``log_path`` is not writable we fall back to a file in the current
    working directory. Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_vivado_setup_configured", False):
        return getattr(logger, "_vivado_setup_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        chosen_path = log_path
    except OSError:
        fallback = str(Path.cwd() / "vivado-host-setup.log")
        file_handler = logging.FileHandler(fallback)
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(fmt=f"{CONSOLE_PREFIX} %(message)s"))
        console.setLevel(console_level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_vivado_setup_configured", True)
    setattr(logger, "_vivado_setup_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
