"""
Shared test fixtures.
"""

import io
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from archzfs_installer.config import DEFAULT_RECIPES_PATH, InstallerConfig
from archzfs_installer.lib.prompt import Prompter
from archzfs_installer.pipeline import Outcome, Step
from archzfs_installer.recipes import RecipeBook, load_recipes


class RecordingRunner:
    """Stands in for StepRunner: records every step instead of running it."""

    def __init__(self, fail_when: Optional[Callable[[Step], bool]] = None, exit_status: int = 2):
        self.steps: List[Step] = []
        self.fail_when = fail_when
        self.exit_status = exit_status

    def run(self, step: Step) -> Outcome:
        self.steps.append(step)
        if self.fail_when is not None and self.fail_when(step):
            return Outcome.failure(step=step, exit_status=self.exit_status, output="boom\n")
        return Outcome.success(f"ok: {step.label}\n")

    @property
    def labels(self) -> List[str]:
        return [s.label for s in self.steps]

    @property
    def commands(self) -> List[str]:
        return [s.command for s in self.steps]


def make_prompter(*lines: str) -> Prompter:
    text = "".join(line + "\n" for line in lines)
    return Prompter(stdin=io.StringIO(text), stdout=io.StringIO())


@pytest.fixture
def recipes() -> RecipeBook:
    return load_recipes(DEFAULT_RECIPES_PATH)


@pytest.fixture
def config(tmp_path: Path) -> InstallerConfig:
    return InstallerConfig(raw={"device_dir": str(tmp_path / "by-id"), "step_delay_s": 0})


@pytest.fixture
def by_id_dir(tmp_path: Path) -> Path:
    """A fake /dev/disk/by-id with two disks and their partitions."""

    d = tmp_path / "by-id"
    d.mkdir()
    for name in [
        "nvme-Samsung_SSD_980_1TB_S64ANS0T",
        "nvme-Samsung_SSD_980_1TB_S64ANS0T-part1",
        "nvme-Samsung_SSD_980_1TB_S64ANS0T-part2",
        "ata-WDC_WD10EZEX_WD-WCC6Y3",
        "ata-WDC_WD10EZEX_WD-WCC6Y3-part1",
    ]:
        (d / name).touch()
    return d
