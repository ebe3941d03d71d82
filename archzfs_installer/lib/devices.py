from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from ..errors import SelectionError
from .env import PATHS
from .prompt import Prompter

logger = logging.getLogger(__name__)

PARTITION_MARKER = "part"


class DeviceCatalog:
    """Whole-disk candidates from the stable by-id device directory.

    Partitions are recognised by a substring match on their name, which is a
    heuristic: a whole disk whose id happens to contain "part" is hidden too.
    """

    def __init__(self, device_dir: str = PATHS.device_dir) -> None:
        self.device_dir = device_dir

    def list_candidate_devices(self) -> List[str]:
        root = Path(self.device_dir)
        if not root.is_dir():
            raise SelectionError(f"Device directory not found: {self.device_dir}")

        names = sorted(p.name for p in root.iterdir() if PARTITION_MARKER not in p.name)
        logger.info("Found %d candidate devices in %s", len(names), self.device_dir)
        return names

    @staticmethod
    def render(candidates: Sequence[str]) -> str:
        lines = ["Available drives:"]
        lines += [f"  {i}) {name}" for i, name in enumerate(candidates, start=1)]
        return "\n".join(lines)

    @staticmethod
    def resolve(candidates: Sequence[str], answer: str) -> str:
        text = answer.strip()
        try:
            index = int(text)
        except ValueError:
            raise SelectionError(f"Not a number: {text!r}") from None

        if not 1 <= index <= len(candidates):
            raise SelectionError(f"Invalid selection {index}; expected 1-{len(candidates)}")
        return candidates[index - 1]

    def prompt_selection(
        self,
        candidates: Sequence[str],
        prompter: Prompter,
        *,
        attempts: int = 1,
    ) -> str:
        if not candidates:
            raise SelectionError(f"No candidate devices in {self.device_dir}")

        prompter.say(self.render(candidates))
        for attempt in range(1, attempts + 1):
            answer = prompter.ask("Enter the number of the drive you want to use: ")
            try:
                device = self.resolve(candidates, answer)
            except SelectionError as e:
                if attempt >= attempts:
                    raise
                prompter.say(str(e))
                continue
            logger.info("Selected device %s", device)
            return device

        raise SelectionError("No selection attempts allowed")
