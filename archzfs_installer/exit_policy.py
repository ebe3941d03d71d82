from __future__ import annotations

import sys
from typing import TextIO

from .pipeline import Outcome

EXIT_OK = 0
EXIT_FAILURE = 1


def exit_code_for(outcome: Outcome) -> int:
    return EXIT_OK if outcome.ok else EXIT_FAILURE


def report_failure(outcome: Outcome, stream: TextIO | None = None) -> None:
    """Tell the operator what failed so the step can be finished by hand."""

    out = stream if stream is not None else sys.stderr
    if outcome.step is not None:
        out.write(
            f"Command '{outcome.step.display}' failed with exit status: {outcome.exit_status}\n"
        )
    else:
        out.write(f"{outcome.reason or 'Installer failed'}\n")
    if outcome.output:
        out.write(outcome.output if outcome.output.endswith("\n") else outcome.output + "\n")
    out.flush()
