"""Remote template registry.

The registry is a JSON document hosted at a fixed URL.  Its top level maps
category names to nested objects whose leaves are template source locators::

    {
      "frontend": {"react-app": "org/react-template"},
      "backend": {"api": "org/api-template"}
    }

Nesting depth is not fixed.  The raw JSON is converted into an immutable
``Leaf | Branch`` tree so that the selector never has to guess what a value
is at prompt time.

Typical usage::

    client = TemplateRegistryClient(url)
    registry = await client.fetch()
"""

from __future__ import annotations

import json
import logging
from typing import Any, Union

import httpx
from pydantic import BaseModel, ConfigDict

from project_init.errors import RegistryHttpError, RegistryMalformed, RegistryUnreachable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Registry tree
# ---------------------------------------------------------------------------


class Leaf(BaseModel):
    """A concrete template: an opaque source locator such as ``org/repo``."""

    model_config = ConfigDict(frozen=True)

    locator: str


class Branch(BaseModel):
    """A level of choices, keyed by human-readable label."""

    model_config = ConfigDict(frozen=True)

    children: dict[str, Union[Leaf, "Branch"]]

    def labels(self) -> list[str]:
        """Return child labels in document order."""
        return list(self.children)


Branch.model_rebuild()

Node = Union[Leaf, Branch]


def parse_registry(data: Any, url: str = "<registry>") -> Branch:
    """Convert decoded registry JSON into a ``Branch`` tree.

    Raises:
        RegistryMalformed: If the top level is not an object, a value is
            neither a string nor an object, or an object is empty.
    """
    if not isinstance(data, dict):
        raise RegistryMalformed(url, f"top level must be an object, got {type(data).__name__}")
    return _parse_branch(data, url, path=())


def _where(path: tuple[str, ...]) -> str:
    return " > ".join(path) or "<root>"


def _parse_branch(value: dict[str, Any], url: str, path: tuple[str, ...]) -> Branch:
    if not value:
        raise RegistryMalformed(url, f"no templates under {_where(path)}")
    return Branch(
        children={
            str(key): _parse_node(child, url, path + (str(key),))
            for key, child in value.items()
        }
    )


def _parse_node(value: Any, url: str, path: tuple[str, ...]) -> Node:
    if isinstance(value, str):
        return Leaf(locator=value)
    if isinstance(value, dict):
        return _parse_branch(value, url, path)
    raise RegistryMalformed(
        url, f"unexpected {type(value).__name__} at {_where(path)}; expected a string or an object"
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class TemplateRegistryClient:
    """Fetches the template registry with a single GET request.

    There is no retry: a failure here is fatal for the run and the user is
    expected to re-invoke the tool.
    """

    def __init__(
        self,
        url: str,
        timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our timeout."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            follow_redirects=True,
            transport=self._transport,
        )

    async def fetch(self) -> Branch:
        """Download and parse the registry.

        Raises:
            RegistryUnreachable: On connection, DNS or timeout failures.
            RegistryHttpError: On a non-2xx response.
            RegistryMalformed: If the body is not valid registry JSON.
        """
        logger.debug("Fetching template registry from %s", self.url)
        try:
            async with self._client() as client:
                response = await client.get(self.url)
        except httpx.TimeoutException:
            raise RegistryUnreachable(self.url, f"timed out after {self.timeout}s") from None
        except httpx.TransportError as exc:
            raise RegistryUnreachable(self.url, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise RegistryHttpError(self.url, response.status_code)

        try:
            data = json.loads(response.text)
        except json.JSONDecodeError as exc:
            raise RegistryMalformed(self.url, f"invalid JSON ({exc})") from exc

        registry = parse_registry(data, self.url)
        logger.debug("Registry loaded with categories: %s", ", ".join(registry.labels()))
        return registry
