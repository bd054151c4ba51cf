"""Target directory resolution.

Asks for a project name until it is both valid and free on disk.  Name
problems are handled inside the text prompt (same question re-asked); an
existing file or folder restarts the whole cycle with the same default.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from project_init.prompts import InterruptiblePrompt
from project_init.scaffolder.naming import name_error
from project_init.utils import print_error

NAME_MESSAGE = "Enter folder name to clone into:"


class TargetDirectory(BaseModel):
    """A validated project name and the absolute path it resolves to."""

    name: str
    path: Path


def path_taken(path: Path) -> bool:
    """True if anything, including a dangling symlink, occupies *path*."""
    return path.exists() or path.is_symlink()


def resolve_target_directory(
    prompt: InterruptiblePrompt,
    cwd: Path | None = None,
    default: str = "my-project",
) -> TargetDirectory:
    """Prompt until a valid, non-colliding project name is entered.

    Args:
        prompt: Prompt wrapper used for the name question.
        cwd: Directory the project is created in; defaults to ``Path.cwd()``.
        default: Suggested name offered on every attempt.

    Returns:
        The accepted name and its absolute path, which does not exist.
    """
    base = (cwd or Path.cwd()).resolve()
    while True:
        name = prompt.text(NAME_MESSAGE, default=default, validate=name_error)
        target = base / name
        if path_taken(target):
            print_error(f"Folder already exists: {target}. Choose another name.")
            continue
        return TargetDirectory(name=name, path=target)
