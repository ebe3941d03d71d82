from __future__ import annotations


class InstallerError(RuntimeError):
    """Base class for installer faults."""


class StepFailure(InstallerError):
    def __init__(self, command: str, exit_status: int, output: str = "") -> None:
        super().__init__(f"Command '{command}' failed with exit status: {exit_status}")
        self.command = command
        self.exit_status = exit_status
        self.output = output


class SelectionError(InstallerError):
    """Operator input did not resolve to a candidate device."""


class PromptError(InstallerError):
    """Prompt I/O failed or the operator supplied an unusable value."""


class RecipeError(InstallerError):
    pass


class StateError(InstallerError):
    pass
