from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .lib.env import PATHS

DEFAULT_RECIPES_PATH = str(Path(__file__).with_name("recipes.yaml"))


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def staging_root(self) -> str:
        return str(self.raw.get("staging_root") or PATHS.staging_root)

    @property
    def device_dir(self) -> str:
        return str(self.raw.get("device_dir") or PATHS.device_dir)

    @property
    def pool(self) -> str:
        return str(self.raw.get("pool") or "zroot")

    @property
    def step_delay_s(self) -> float:
        value = self.raw.get("step_delay_s")
        return 3.0 if value is None else float(value)

    @property
    def bootstrap_url(self) -> str:
        return str(
            self.raw.get("bootstrap_url")
            or "https://raw.githubusercontent.com/eoli3n/archiso-zfs/master/init"
        )

    @property
    def repo_key(self) -> str:
        return str(self.raw.get("repo_key") or "DDF7DB817396A49B2A2723F7403BD972F75D9D76")

    @property
    def tool_path(self) -> str:
        return str(self.raw.get("tool_path") or PATHS.tool_path)

    @property
    def default_dotfiles(self) -> str:
        return str(self.raw.get("default_dotfiles") or "https://github.com/Stetsed/.dotfiles.git")

    @property
    def recipes_path(self) -> str:
        return str(self.raw.get("recipes_path") or DEFAULT_RECIPES_PATH)

    @property
    def selection_attempts(self) -> int:
        return max(1, int(self.raw.get("selection_attempts") or 1))

    @property
    def reboot_after_install(self) -> bool:
        return bool(self.raw.get("reboot_after_install", False))

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    def params(self) -> Dict[str, str]:
        """Recipe placeholders that come from configuration rather than the operator."""

        return {
            "root": self.staging_root,
            "device_dir": self.device_dir,
            "pool": self.pool,
            "repo_key": self.repo_key,
            "tool": self.tool_path,
        }

    def with_overrides(self, **overrides: Any) -> "InstallerConfig":
        raw = dict(self.raw)
        raw.update({k: v for k, v in overrides.items() if v is not None})
        return InstallerConfig(raw=raw)


def load_config(path: Optional[str]) -> InstallerConfig:
    """Load the optional YAML config file; no path means built-in defaults."""

    if path is None:
        return InstallerConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read the installer config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    return InstallerConfig(raw=raw)
