"""project-init configuration.

Typed configuration for a single run. Settings use a Pydantic v2 model so
they are validated at construction time and can be built from environment
variables or CLI flags without boiler-plate.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

from project_init.scaffolder.manifest import MANIFEST_FILES
from project_init.scaffolder.naming import validate_project_name

DEFAULT_REGISTRY_URL = (
    "https://raw.githubusercontent.com/aannaassalam/project-templates/main/repos.json"
)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(raw: str) -> bool | None:
    """Interpret an environment flag; unrecognised values mean "unset"."""
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return None


class Config(BaseModel):
    """Global project-init configuration.

    Instances are created once by the CLI entry point and passed to
    ``ProjectInitializer``; nothing else reads the environment.
    """

    registry_url: str = Field(default=DEFAULT_REGISTRY_URL)
    request_timeout: int = Field(default=30, ge=1, description="Registry fetch timeout in seconds")
    download_timeout: int = Field(
        default=120, ge=1, description="Template archive download timeout in seconds"
    )
    default_project_name: str = Field(default="my-project")
    allow_custom_url: bool = Field(
        default=True, description="Offer a free-form GitHub URL next to the registry categories"
    )
    manifest_files: tuple[str, ...] = Field(default=MANIFEST_FILES)

    # None means "ask the user after the template is in place".
    init_git: bool | None = Field(default=None)

    @field_validator("default_project_name")
    @classmethod
    def _check_default_name(cls, value: str) -> str:
        problem = validate_project_name(value)
        if problem is not None:
            raise ValueError(problem.message)
        return value

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PROJECT_INIT_REGISTRY_URL, PROJECT_INIT_TIMEOUT,
            PROJECT_INIT_DOWNLOAD_TIMEOUT, PROJECT_INIT_DEFAULT_NAME,
            PROJECT_INIT_ALLOW_CUSTOM_URL, PROJECT_INIT_GIT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("PROJECT_INIT_REGISTRY_URL"):
            kwargs["registry_url"] = os.environ["PROJECT_INIT_REGISTRY_URL"]
        if os.environ.get("PROJECT_INIT_TIMEOUT"):
            kwargs["request_timeout"] = int(os.environ["PROJECT_INIT_TIMEOUT"])
        if os.environ.get("PROJECT_INIT_DOWNLOAD_TIMEOUT"):
            kwargs["download_timeout"] = int(os.environ["PROJECT_INIT_DOWNLOAD_TIMEOUT"])
        if os.environ.get("PROJECT_INIT_DEFAULT_NAME"):
            kwargs["default_project_name"] = os.environ["PROJECT_INIT_DEFAULT_NAME"]
        if os.environ.get("PROJECT_INIT_ALLOW_CUSTOM_URL"):
            allow = _parse_bool(os.environ["PROJECT_INIT_ALLOW_CUSTOM_URL"])
            if allow is not None:
                kwargs["allow_custom_url"] = allow
        if os.environ.get("PROJECT_INIT_GIT"):
            kwargs["init_git"] = _parse_bool(os.environ["PROJECT_INIT_GIT"])

        return cls(**kwargs)
