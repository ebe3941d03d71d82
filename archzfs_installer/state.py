from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from .errors import StateError


@dataclass(frozen=True)
class Credentials:
    username: str
    password: Optional[str] = None
    platform: Optional[str] = None


@dataclass
class PipelineState:
    """Values produced by one stage and consumed by later ones.

    Each field is set once through fix(); a second assignment is an error.
    """

    selected_device: Optional[str] = None
    credentials: Optional[Credentials] = None
    dotfiles_source: Optional[str] = None
    apply_profile: Optional[bool] = None

    def fix(self, name: str, value: Any) -> None:
        if name not in {f.name for f in fields(self)}:
            raise StateError(f"Unknown pipeline state field: {name}")
        if value is None:
            raise StateError(f"Cannot fix {name} to None")
        if getattr(self, name) is not None:
            raise StateError(f"{name} is already set for this run")
        setattr(self, name, value)

    def complete_credentials(self, *, password: str, platform: str) -> None:
        """Fill in password and platform on credentials that only carry a username."""

        creds = self.credentials
        if creds is None:
            raise StateError("credentials are not set")
        if creds.password is not None or creds.platform is not None:
            raise StateError("credentials are already complete for this run")
        self.credentials = replace(creds, password=password, platform=platform)

    def params(self) -> Dict[str, str]:
        """Recipe placeholders derived from the fields set so far."""

        p: Dict[str, str] = {}
        if self.selected_device is not None:
            p["device"] = self.selected_device
        if self.credentials is not None:
            p["username"] = self.credentials.username
            if self.credentials.password is not None:
                p["password"] = self.credentials.password
            if self.credentials.platform is not None:
                p["platform"] = self.credentials.platform
        if self.dotfiles_source is not None:
            p["dotfiles"] = self.dotfiles_source
        return p
