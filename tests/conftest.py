"""Shared pytest fixtures for the project-init test suite.

Provides reusable fixtures for:
- A captured Rich console (no terminal output during tests)
- Sample registry documents and parsed trees
- A scripted stand-in for ``InterruptiblePrompt``
- In-memory ``.tar.gz`` repository snapshots
- ``httpx.MockTransport`` helpers
"""

from __future__ import annotations

import io
import json
import tarfile
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from rich.console import Console

from project_init.registry import Branch, parse_registry


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------


@pytest.fixture
def captured_console(monkeypatch: pytest.MonkeyPatch) -> Console:
    """Route all Rich output into a string buffer.

    Read it back with ``captured_console.file.getvalue()``.
    """
    buffer_console = Console(file=io.StringIO(), width=200, color_system=None)
    monkeypatch.setattr("project_init.utils.console", buffer_console)
    monkeypatch.setattr("project_init.initializer.console", buffer_console)
    return buffer_console


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


SAMPLE_REGISTRY: dict[str, Any] = {
    "frontend": {"react-app": "org/react-template"},
    "backend": {"api": "org/api-template"},
}


@pytest.fixture
def sample_registry_data() -> dict[str, Any]:
    """Raw registry JSON from the canonical two-category example."""
    return json.loads(json.dumps(SAMPLE_REGISTRY))


@pytest.fixture
def sample_registry(sample_registry_data: dict[str, Any]) -> Branch:
    """The sample registry parsed into a ``Branch`` tree."""
    return parse_registry(sample_registry_data)


@pytest.fixture
def deep_registry() -> Branch:
    """A registry with uneven depth along different paths."""
    return parse_registry(
        {
            "web": {
                "react": {
                    "vite": {"typescript": "org/react-vite-ts", "javascript": "org/react-vite-js"},
                    "next": "org/next-template",
                },
                "vue": "org/vue-template",
            },
            "cli": "org/cli-template",
        }
    )


# ---------------------------------------------------------------------------
# Scripted prompt
# ---------------------------------------------------------------------------


class ScriptedPrompt:
    """Answers prompt questions from a fixed script.

    Mirrors the ``InterruptiblePrompt`` question methods.  ``text`` applies
    the caller's validator the way the real prompt does: rejected answers
    are recorded in ``rejections`` and the next scripted answer is tried.
    Scripted exceptions (instances or classes) are raised when reached.
    """

    def __init__(self, answers: list[Any]) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, str, Any]] = []
        self.rejections: list[tuple[str, str]] = []

    def _next(self) -> Any:
        if not self.answers:
            raise AssertionError("prompt asked more questions than were scripted")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException) or (
            isinstance(answer, type) and issubclass(answer, BaseException)
        ):
            raise answer
        return answer

    def select(self, message: str, choices: list[str]) -> str:
        self.calls.append(("select", message, list(choices)))
        answer = self._next()
        assert answer in choices, f"{answer!r} not offered in {choices!r}"
        return answer

    def text(
        self,
        message: str,
        default: str | None = None,
        validate: Callable[[str], str | None] | None = None,
    ) -> str:
        self.calls.append(("text", message, default))
        while True:
            answer = self._next()
            error = validate(answer) if validate else None
            if error is None:
                return answer
            self.rejections.append((answer, error))

    def confirm(self, message: str, default: bool = False) -> bool:
        self.calls.append(("confirm", message, default))
        return self._next()


@pytest.fixture
def scripted_prompt() -> Callable[[list[Any]], ScriptedPrompt]:
    """Factory for ``ScriptedPrompt`` instances.

    Usage::

        def test_something(scripted_prompt):
            prompt = scripted_prompt(["frontend", "react-app"])
    """
    return ScriptedPrompt


# ---------------------------------------------------------------------------
# Template archives
# ---------------------------------------------------------------------------


def build_tarball(files: dict[str, str | bytes], root: str = "template-main") -> bytes:
    """Build a GitHub-style ``.tar.gz`` snapshot with a single root directory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        root_info = tarfile.TarInfo(root)
        root_info.type = tarfile.DIRTYPE
        root_info.mode = 0o755
        tar.addfile(root_info)

        seen_dirs: set[str] = set()
        for rel_path, content in files.items():
            parts = rel_path.split("/")
            for depth in range(1, len(parts)):
                directory = "/".join(parts[:depth])
                if directory not in seen_dirs:
                    seen_dirs.add(directory)
                    dir_info = tarfile.TarInfo(f"{root}/{directory}")
                    dir_info.type = tarfile.DIRTYPE
                    dir_info.mode = 0o755
                    tar.addfile(dir_info)

            data = content.encode("utf-8") if isinstance(content, str) else content
            info = tarfile.TarInfo(f"{root}/{rel_path}")
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def make_tarball() -> Callable[..., bytes]:
    """Factory fixture around ``build_tarball``."""
    return build_tarball


@pytest.fixture
def template_files() -> dict[str, str]:
    """A small npm project as it would appear in a template repository."""
    return {
        "package.json": json.dumps(
            {
                "name": "react-template",
                "version": "1.0.0",
                "private": True,
                "scripts": {"dev": "vite", "build": "vite build"},
                "dependencies": {"react": "^19.0.0"},
            },
            indent=2,
        ),
        "package-lock.json": json.dumps(
            {
                "name": "react-template",
                "version": "1.0.0",
                "lockfileVersion": 3,
                "requires": True,
                "packages": {},
            },
            indent=2,
        ),
        "README.md": "# React template\n",
        "src/main.jsx": "console.log('hello');\n",
    }


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """``MockTransport`` that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


@pytest.fixture
def recording_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], RecordingTransport]:
    """Factory for request-recording mock transports."""
    return RecordingTransport
