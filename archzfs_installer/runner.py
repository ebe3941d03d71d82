from __future__ import annotations

import logging
import sys
import time
from typing import Callable, TextIO

from .lib.command import run_cmd
from .pipeline import Outcome, Step

logger = logging.getLogger(__name__)

DEFAULT_STEP_DELAY_S = 3.0


class StepRunner:
    """Run each Step through ``sh -c`` and pause after every success.

    The pause lets udev and the kernel settle between destructive disk
    operations (new partitions need their by-id links before formatting).
    """

    def __init__(
        self,
        *,
        delay_s: float = DEFAULT_STEP_DELAY_S,
        dry_run: bool = False,
        echo: TextIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if delay_s < 0:
            raise ValueError(f"step delay must be >= 0, got {delay_s}")
        self.delay_s = delay_s
        self.dry_run = dry_run
        self.echo = echo
        self.sleep = sleep

    def run(self, step: Step) -> Outcome:
        r = run_cmd(
            ["sh", "-c", step.command],
            check=False,
            merge_output=True,
            display=step.display,
            dry_run=self.dry_run,
        )

        if r.returncode != 0:
            return Outcome.failure(step=step, exit_status=r.returncode, output=r.stdout)

        out = self.echo if self.echo is not None else sys.stdout
        out.write(r.stdout)
        if r.stdout and not r.stdout.endswith("\n"):
            out.write("\n")
        out.flush()

        self.sleep(self.delay_s)
        return Outcome.success(r.stdout)
