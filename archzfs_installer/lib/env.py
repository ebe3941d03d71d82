from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    staging_root: str = "/mnt"
    device_dir: str = "/dev/disk/by-id"
    log_default: str = "/var/log/archzfs-installer.log"
    tool_path: str = "install"


PATHS = Paths()
