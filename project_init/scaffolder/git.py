"""Fresh git repository for a newly created project."""

from __future__ import annotations

import logging
from pathlib import Path

from project_init.utils import run_command

logger = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit from project-init"


async def init_git_repository(path: Path) -> bool:
    """Run ``git init``, stage everything and make the initial commit.

    Returns:
        ``True`` if all three steps succeeded.  Failures are logged and
        reported through the return value only.
    """
    steps = [
        ["git", "init"],
        ["git", "add", "."],
        ["git", "commit", "-m", INITIAL_COMMIT_MESSAGE],
    ]
    for cmd in steps:
        returncode, _stdout, stderr = await run_command(cmd, cwd=path)
        if returncode != 0:
            logger.warning("%s failed (exit %d): %s", " ".join(cmd[:2]), returncode, stderr)
            return False
    return True
