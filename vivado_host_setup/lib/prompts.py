from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from ..errors import AbortedByUser

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]

_ESCAPED = re.compile(r"\\(.)")


def unescape_dropped_path(raw: str) -> str:
    """Normalize a path dragged into Terminal.app.

    Terminal inserts either a quoted path or one with backslash-escaped
    spaces, usually followed by a trailing space.
    """

    p = raw.strip()
    if len(p) >= 2 and p[0] == p[-1] and p[0] in {"'", '"'}:
        return p[1:-1]
    return _ESCAPED.sub(r"\1", p)


@dataclass
class Prompter:
    """Line-based interactive prompts. ``input_fn`` is swapped out in tests."""

    input_fn: InputFn = field(default=input)

    def _read(self, message: str) -> str:
        if message:
            logger.info("%s", message)
        try:
            return self.input_fn("")
        except EOFError as e:
            raise AbortedByUser("No input available (stdin closed)") from e

    def confirm(self, message: str) -> bool:
        """Yes/no consent. Anything that is neither yes nor no aborts."""
        answer = self._read(message).strip().lower()
        if answer == "y" or answer.startswith("ye"):
            return True
        if answer == "n" or answer.startswith("no"):
            return False
        raise AbortedByUser("Invalid option.")

    def ask(self, message: str) -> str:
        return self._read(message)

    def ask_path(self, message: str) -> str:
        return unescape_dropped_path(self._read(message))

    def wait(self, message: str = "Press Enter to continue...") -> None:
        self._read(message)
