from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pytest

from vivado_host_setup.config import SetupConfig, load_setup_config
from vivado_host_setup.lib.prompts import Prompter


class ScriptedInput:
    """Feeds canned answers to a Prompter; EOF once they run out."""

    def __init__(self, answers: Iterable[str]) -> None:
        self.answers = list(answers)
        self.asked = 0

    def __call__(self, _prompt: str) -> str:
        if not self.answers:
            raise EOFError
        self.asked += 1
        return self.answers.pop(0)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    root = tmp_path / "vivado-on-mac"
    (root / "scripts").mkdir(parents=True)
    (root / "scripts" / "de_start.desktop").write_text("[Desktop Entry]\nName=start\n", encoding="utf-8")
    (root / "scripts" / "install_vivado.sh").write_text("#!/bin/bash\n", encoding="utf-8")
    return root


@pytest.fixture
def cfg(workdir: Path) -> SetupConfig:
    return load_setup_config(workdir, current_user="alice")


@pytest.fixture
def prompter_factory():
    def make(*answers: str) -> Prompter:
        return Prompter(input_fn=ScriptedInput(answers))

    return make


SETTINGS_TEMPLATE = """{{
  "AutoStart": false,
  "UseVirtualizationFramework": {vz},
  "UseVirtualizationFrameworkRosetta": {rosetta},
  "SwapMiB": {swap},
  "MemoryMiB": 8092
}}
"""


@pytest.fixture
def settings_text():
    def make(vz: str = "false", rosetta: str = "false", swap: int = 1024) -> str:
        return SETTINGS_TEMPLATE.format(vz=vz, rosetta=rosetta, swap=swap)

    return make
