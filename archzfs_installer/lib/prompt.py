from __future__ import annotations

import getpass
import sys
from typing import TextIO

from ..errors import PromptError


class Prompter:
    """Line-oriented operator prompts on a pair of text streams."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def say(self, text: str) -> None:
        try:
            self.stdout.write(text + "\n")
            self.stdout.flush()
        except OSError as e:
            raise PromptError(f"Failed to write to operator: {e}") from e

    def ask(self, question: str) -> str:
        try:
            self.stdout.write(question)
            self.stdout.flush()
            line = self.stdin.readline()
        except OSError as e:
            raise PromptError(f"Failed to read operator input: {e}") from e
        if not line:
            raise PromptError("Unexpected end of input")
        return line.rstrip("\r\n")

    def ask_secret(self, question: str) -> str:
        if not self.stdin.isatty():
            return self.ask(question)
        try:
            return getpass.getpass(question, stream=self.stdout)
        except EOFError as e:
            raise PromptError("Unexpected end of input") from e

    def confirm(self, question: str, *, default: bool = False) -> bool:
        answer = self.ask(question).strip().lower()
        if not answer:
            return default
        if answer in {"y", "yes"}:
            return True
        if answer in {"n", "no"}:
            return False
        raise PromptError(f"Expected yes or no, got: {answer!r}")
