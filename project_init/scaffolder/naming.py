"""Project name validation.

A project name doubles as the directory name under the current working
directory and as the ``name`` field of ``package.json``, so it follows npm's
package naming rules: lowercase letters, digits, hyphens and underscores,
starting with a letter or digit, at most 214 characters.
"""

from __future__ import annotations

import re
from enum import Enum

MAX_NAME_LENGTH = 214

_NAME_RE = re.compile(r"[a-z0-9][a-z0-9_-]*")


class NameProblem(str, Enum):
    """Reason a candidate project name was rejected."""

    EMPTY_NAME = "empty_name"
    INVALID_CHARACTERS = "invalid_characters"
    TOO_LONG = "too_long"

    @property
    def message(self) -> str:
        """Human-readable explanation shown next to the prompt."""
        return _MESSAGES[self]


_MESSAGES: dict[NameProblem, str] = {
    NameProblem.EMPTY_NAME: "Project name cannot be empty.",
    NameProblem.INVALID_CHARACTERS: (
        "Project name must start with a lowercase letter or digit and contain "
        "only lowercase letters, digits, '-' and '_'."
    ),
    NameProblem.TOO_LONG: f"Project name must be at most {MAX_NAME_LENGTH} characters.",
}


def validate_project_name(name: str) -> NameProblem | None:
    """Check *name* against the naming rules.

    Returns:
        ``None`` when the name is acceptable, otherwise the first
        ``NameProblem`` found (empty, then characters, then length).

    Examples::

        validate_project_name("my-app")  -> None
        validate_project_name("My_App")  -> NameProblem.INVALID_CHARACTERS
        validate_project_name("")        -> NameProblem.EMPTY_NAME
    """
    if not name:
        return NameProblem.EMPTY_NAME
    if _NAME_RE.fullmatch(name) is None:
        return NameProblem.INVALID_CHARACTERS
    if len(name) > MAX_NAME_LENGTH:
        return NameProblem.TOO_LONG
    return None


def name_error(name: str) -> str | None:
    """Prompt-friendly wrapper: the problem's message, or ``None`` if valid."""
    problem = validate_project_name(name)
    return problem.message if problem is not None else None
