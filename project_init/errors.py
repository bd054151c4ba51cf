"""Error taxonomy for project-init.

Fatal errors derive from ``ProjectInitError`` and carry a short ``code`` so
the CLI can print a consistent diagnostic before exiting non-zero.
``UserAbort`` is not a ``ProjectInitError``; a confirmed Ctrl+C exits 0.
"""

from __future__ import annotations

from pathlib import Path


class ProjectInitError(Exception):
    """Base class for every error raised by project-init."""

    code = "PROJECT_INIT_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class RegistryError(ProjectInitError):
    """The template registry could not be obtained."""

    code = "REGISTRY_ERROR"

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class RegistryUnreachable(RegistryError):
    """Connection refused, DNS failure or timeout while fetching the registry."""

    code = "REGISTRY_UNREACHABLE"

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(url, f"Cannot reach template registry at {url}: {reason}")


class RegistryHttpError(RegistryError):
    """The registry server answered with a non-success status."""

    code = "REGISTRY_HTTP_ERROR"

    def __init__(self, url: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(url, f"Template registry returned HTTP {status_code} for {url}")


class RegistryMalformed(RegistryError):
    """The registry body is not JSON, or not a tree of templates."""

    code = "REGISTRY_MALFORMED"

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(url, f"Template registry at {url} is malformed: {reason}")


# ---------------------------------------------------------------------------
# Template fetch
# ---------------------------------------------------------------------------


class FetchFailed(ProjectInitError):
    """Downloading or extracting a template failed."""

    code = "FETCH_FAILED"

    def __init__(self, locator: str, reason: str) -> None:
        self.locator = locator
        self.reason = reason
        super().__init__(f"Could not fetch template {locator!r}: {reason}")


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


class ManifestMalformed(ProjectInitError):
    """A package manifest exists but is not a JSON object."""

    code = "MANIFEST_MALFORMED"

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path.name} is not a valid JSON manifest: {reason}")


# ---------------------------------------------------------------------------
# User-initiated exit
# ---------------------------------------------------------------------------


class UserAbort(Exception):
    """The user cancelled a prompt and confirmed they want to exit."""
