from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default
FALLBACK_LOG_NAME = "archzfs-installer.log"

_FILE_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)


def open_log_file(candidates: Iterable[str]) -> Tuple[Optional[logging.Handler], Optional[str]]:
    """Return a file handler for the first candidate path that can be opened.

    (None, None) when none of them is writable.
    """

    for candidate in candidates:
        try:
            Path(candidate).parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(candidate)
        except OSError:
            continue
        handler.setFormatter(_FILE_FORMAT)
        return handler, candidate
    return None, None


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Send the command trail to a log file and warnings to the console.

    The live ISO may refuse writes under /var/log, so ./archzfs-installer.log
    is tried next. With neither writable the run continues console-only.

    Returns the log file actually in use, if any. Safe to call repeatedly.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_archzfs_configured", False):
        return getattr(root, "_archzfs_log_path", None)

    handler, chosen = open_log_file([log_path, str(Path.cwd() / FALLBACK_LOG_NAME)])
    if handler is not None:
        root.addHandler(handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(fmt="%(levelname)s: %(message)s"))
        console.setLevel(logging.WARNING)
        root.addHandler(console)

    setattr(root, "_archzfs_configured", True)
    setattr(root, "_archzfs_log_path", chosen)

    log = logging.getLogger(__name__)
    if chosen is None:
        log.warning("No writable log file (tried %s); logging to console only", log_path)
    else:
        log.info("Logging initialized (requested=%s, actual=%s)", log_path, chosen)
    return chosen
