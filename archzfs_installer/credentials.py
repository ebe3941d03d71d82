from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import PromptError
from .lib.prompt import Prompter
from .state import Credentials

logger = logging.getLogger(__name__)

PLATFORMS = ("intel", "amd")


@dataclass(frozen=True)
class UserSetup:
    username: str
    dotfiles_source: str
    apply_profile: bool


def _required(value: str, what: str) -> str:
    value = value.strip()
    if not value:
        raise PromptError(f"{what} must not be empty")
    return value


def collect_credentials(prompter: Prompter, *, username: Optional[str] = None) -> Credentials:
    """Ask for the account and CPU platform used by the in-root stage.

    A username fixed earlier in the run is reused rather than asked again.
    """

    if username is None:
        username = _required(prompter.ask("Enter username: "), "Username")
    password = _required(prompter.ask_secret("Enter password: "), "Password")
    platform = prompter.ask("Enter your Platform in Lower Case(intel/amd): ").strip().lower()
    if platform not in PLATFORMS:
        raise PromptError(f"Platform must be one of {', '.join(PLATFORMS)}, got: {platform!r}")

    logger.info("Collected credentials for user %s (platform=%s)", username, platform)
    return Credentials(username=username, password=password, platform=platform)


def collect_user_setup(
    prompter: Prompter,
    *,
    default_dotfiles: str,
    username: Optional[str] = None,
) -> UserSetup:
    """Ask for the post-boot user settings; a known username is not asked again."""

    if username is None:
        username = _required(prompter.ask("Enter username: "), "Username")
    dotfiles = prompter.ask(f"Dotfiles bare repository [{default_dotfiles}]: ").strip()
    apply_profile = prompter.confirm("Use Stetsed's configuration? [y/N]: ")

    setup = UserSetup(
        username=username,
        dotfiles_source=dotfiles or default_dotfiles,
        apply_profile=apply_profile,
    )
    logger.info(
        "User setup: user=%s dotfiles=%s profile=%s",
        setup.username,
        setup.dotfiles_source,
        setup.apply_profile,
    )
    return setup
