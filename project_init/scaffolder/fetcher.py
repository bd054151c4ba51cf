"""Template download and extraction.

A template locator names a repository on GitHub, GitLab or Bitbucket,
optionally with a sub-directory and a ref::

    owner/repo
    owner/repo/packages/starter#v2
    gitlab:owner/repo
    https://github.com/owner/repo.git
    git@bitbucket.org:owner/repo#main

The fetcher downloads the host's ``.tar.gz`` snapshot of that ref (no git
history) and extracts it into the destination, dropping the archive's
top-level ``<repo>-<ref>/`` directory.

Failures of any kind surface as ``FetchFailed``.  A destination that was
partially written before the failure is left in place.
"""

from __future__ import annotations

import asyncio
import logging
import re
import tarfile
import tempfile
from pathlib import Path, PurePosixPath

import httpx
from pydantic import BaseModel

from project_init.errors import FetchFailed
from project_init.scaffolder.resolver import path_taken

logger = logging.getLogger(__name__)

SUPPORTED_HOSTS = ("github", "gitlab", "bitbucket")

_LOCATOR_RE = re.compile(
    r"""
    (?:
        (?:https://)?(?P<domain>[^:/\s]+\.[^:/\s]+)/   # https://github.com/
      | git@(?P<ssh>[^:/\s]+)[:/]                       # git@github.com:
      | (?P<prefix>[a-z]+):                             # github:
    )?
    (?P<owner>[^/\s#]+)/(?P<repo>[^/\s#]+)
    (?P<subdir>(?:/[^/\s#]+)+)?
    /?
    (?:\#(?P<ref>[^\s]+))?
    """,
    re.VERBOSE,
)


class TemplateSource(BaseModel):
    """A parsed template locator."""

    host: str = "github"
    owner: str
    repo: str
    ref: str = "HEAD"
    subdir: str | None = None

    @property
    def archive_url(self) -> str:
        """Download URL of the ``.tar.gz`` snapshot for ``ref``."""
        if self.host == "gitlab":
            return (
                f"https://gitlab.com/{self.owner}/{self.repo}/-/archive/"
                f"{self.ref}/{self.repo}-{self.ref}.tar.gz"
            )
        if self.host == "bitbucket":
            return f"https://bitbucket.org/{self.owner}/{self.repo}/get/{self.ref}.tar.gz"
        return f"https://github.com/{self.owner}/{self.repo}/archive/{self.ref}.tar.gz"


def parse_locator(locator: str) -> TemplateSource:
    """Parse a template locator into its parts.

    Raises:
        ValueError: If the locator is not recognised or names an
            unsupported host.
    """
    match = _LOCATOR_RE.fullmatch(locator.strip())
    if match is None:
        raise ValueError(f"Unrecognised template locator: {locator!r}")

    site = match.group("domain") or match.group("ssh") or match.group("prefix") or "github"
    host = re.sub(r"\.(com|org)$", "", site)
    if host not in SUPPORTED_HOSTS:
        raise ValueError(f"Unsupported template host {site!r} in {locator!r}")

    repo = match.group("repo")
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    subdir = match.group("subdir")

    return TemplateSource(
        host=host,
        owner=match.group("owner"),
        repo=repo,
        ref=match.group("ref") or "HEAD",
        subdir=subdir.strip("/") if subdir else None,
    )


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def _relative_parts(name: str, prefix: tuple[str, ...]) -> tuple[str, ...]:
    """Strip the archive root (and *prefix*) from a member path."""
    parts = PurePosixPath(name).parts[1:]
    if prefix:
        if parts[: len(prefix)] != prefix:
            return ()
        parts = parts[len(prefix):]
    return parts


def extract_archive(archive: Path, destination: Path, subdir: str | None = None) -> int:
    """Extract a repository snapshot into *destination*.

    The single top-level directory of the archive is dropped; with *subdir*
    only that subtree is kept.  Members are extracted with tarfile's
    ``data`` filter, which rejects absolute paths and ``..`` escapes.

    Returns:
        The number of archive members written.

    Raises:
        ValueError: If nothing in the archive matches.
        tarfile.TarError: If the archive is corrupt.
        OSError: On filesystem errors, including an existing destination.
    """
    prefix = PurePosixPath(subdir).parts if subdir else ()
    with tarfile.open(archive, "r:gz") as tar:
        members: list[tarfile.TarInfo] = []
        for member in tar.getmembers():
            parts = _relative_parts(member.name, prefix)
            if not parts:
                continue
            if member.islnk():
                link_parts = _relative_parts(member.linkname, prefix)
                if not link_parts:
                    continue
                member.linkname = "/".join(link_parts)
            member.name = "/".join(parts)
            members.append(member)

        if not members:
            where = f"sub-directory {subdir!r}" if subdir else "archive"
            raise ValueError(f"No files found in {where}")

        destination.mkdir(parents=True)
        tar.extractall(destination, members=members, filter="data")
    return len(members)


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class TemplateFetcher:
    """Materialises a template's files at a destination path."""

    def __init__(
        self,
        timeout: int = 120,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            follow_redirects=True,
            transport=self._transport,
        )

    async def fetch(self, locator: str, destination: Path) -> TemplateSource:
        """Download *locator* and extract it into *destination*.

        Args:
            locator: Template source locator (see module docstring).
            destination: Absolute path that must not exist yet.

        Returns:
            The parsed ``TemplateSource`` that was fetched.

        Raises:
            FetchFailed: On any parse, transport, HTTP, archive or
                filesystem error.
        """
        try:
            source = parse_locator(locator)
        except ValueError as exc:
            raise FetchFailed(locator, str(exc)) from exc

        if path_taken(destination):
            raise FetchFailed(locator, f"destination already exists: {destination}")

        with tempfile.TemporaryDirectory(prefix="project-init-") as tmp:
            archive = Path(tmp) / "template.tar.gz"
            await self._download(locator, source.archive_url, archive)
            try:
                count = await asyncio.to_thread(
                    extract_archive, archive, destination, source.subdir
                )
            except (tarfile.TarError, OSError, ValueError) as exc:
                raise FetchFailed(locator, str(exc) or type(exc).__name__) from exc

        logger.debug("Extracted %d entries from %s into %s", count, source.archive_url, destination)
        return source

    async def _download(self, locator: str, url: str, target: Path) -> None:
        logger.debug("Downloading %s", url)
        try:
            async with self._client() as client:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise FetchFailed(locator, f"HTTP {response.status_code} from {url}")
                    with target.open("wb") as fh:
                        async for chunk in response.aiter_bytes(chunk_size=65536):
                            fh.write(chunk)
        except httpx.TimeoutException:
            raise FetchFailed(locator, f"download timed out after {self.timeout}s") from None
        except (httpx.HTTPError, OSError) as exc:
            raise FetchFailed(locator, str(exc) or type(exc).__name__) from exc
