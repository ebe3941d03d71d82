from __future__ import annotations

import logging

from .command import run_cmd

logger = logging.getLogger(__name__)


def fetch_script(url: str, *, dry_run: bool = False) -> str:
    """Download a script body over HTTPS.

    Raises StepFailure when curl exits non-zero (including HTTP errors).
    """

    r = run_cmd(["curl", "-fsSL", url], dry_run=dry_run)
    body = r.stdout
    if dry_run:
        body = "true"
    logger.info("Fetched %d bytes from %s", len(body), url)
    return body
