from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """One opaque shell command.

    ``sensitive`` steps are logged by label only.
    """

    label: str
    command: str
    sensitive: bool = False

    @property
    def display(self) -> str:
        return f"<{self.label}>" if self.sensitive else self.command


@dataclass(frozen=True)
class Stage:
    name: str
    steps: Tuple[Step, ...]


@dataclass(frozen=True)
class Outcome:
    ok: bool
    output: str = ""
    exit_status: int = 0
    step: Optional[Step] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, output: str = "") -> "Outcome":
        return cls(ok=True, output=output)

    @classmethod
    def failure(
        cls,
        *,
        step: Optional[Step] = None,
        exit_status: int = 1,
        output: str = "",
        reason: Optional[str] = None,
    ) -> "Outcome":
        return cls(ok=False, output=output, exit_status=exit_status, step=step, reason=reason)


class Runner(Protocol):
    def run(self, step: Step) -> Outcome:
        ...


def run_stage(stage: Stage, *, runner: Runner) -> Outcome:
    """Run a stage's steps in order, stopping at the first failure.

    Steps that already succeeded are left as they are; there is no rollback.
    """

    logger.info("Running stage %s (%d steps)", stage.name, len(stage.steps))
    last = Outcome.success()

    for index, step in enumerate(stage.steps, start=1):
        logger.info("[%s %d/%d] %s", stage.name, index, len(stage.steps), step.label)
        last = runner.run(step)
        if not last.ok:
            logger.error(
                "Stage %s failed at step %d (%s), exit status %s",
                stage.name,
                index,
                step.label,
                last.exit_status,
            )
            return last

    logger.info("Stage %s complete", stage.name)
    return Outcome.success(last.output)
