"""Package manifest patching.

After a template is extracted, its ``package.json`` and ``package-lock.json``
still carry the template's own name.  ``patch_manifests`` rewrites the
top-level ``name`` of each and leaves every other field as it was (key order
included).  A manifest that is missing is skipped; one that cannot be parsed
is reported and skipped without affecting the other, and so is one that
cannot be read or written.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from project_init.errors import ManifestMalformed
from project_init.utils import load_json, save_json

logger = logging.getLogger(__name__)

MANIFEST_FILES: tuple[str, ...] = ("package.json", "package-lock.json")


class PatchStatus(str, Enum):
    PATCHED = "patched"
    SKIPPED = "skipped"
    MALFORMED = "malformed"
    FAILED = "failed"


class ManifestPatch(BaseModel):
    """Outcome of patching a single manifest."""

    path: Path
    status: PatchStatus
    error: str | None = None


def set_name(document: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a copy of *document* with ``name`` set.

    An existing ``name`` keeps its position; a missing one is inserted as
    the first key, where npm puts it.
    """
    if "name" in document:
        return {**document, "name": name}
    return {"name": name, **document}


async def patch_manifest(path: Path, name: str) -> bool:
    """Set the ``name`` field of the manifest at *path*.

    Returns:
        ``False`` if the file does not exist, ``True`` once rewritten.

    Raises:
        ManifestMalformed: If the file is not a JSON object.
        OSError: If the file cannot be read or written.
    """
    if not path.is_file():
        return False

    try:
        document = load_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ManifestMalformed(path, str(exc)) from exc
    if not isinstance(document, dict):
        raise ManifestMalformed(path, f"expected an object, got {type(document).__name__}")

    await save_json(set_name(document, name), path)
    return True


async def patch_manifests(
    target_dir: Path,
    name: str,
    files: Sequence[str] = MANIFEST_FILES,
) -> list[ManifestPatch]:
    """Patch every manifest in *files* under *target_dir*.

    Each file is handled independently; a malformed or unwritable one never
    stops the others from being patched.
    """
    results: list[ManifestPatch] = []
    for filename in files:
        path = target_dir / filename
        try:
            patched = await patch_manifest(path, name)
        except ManifestMalformed as exc:
            logger.warning("Skipping %s: %s", path, exc.reason)
            results.append(ManifestPatch(path=path, status=PatchStatus.MALFORMED, error=exc.message))
            continue
        except OSError as exc:
            logger.warning("Could not update %s: %s", path, exc)
            results.append(ManifestPatch(path=path, status=PatchStatus.FAILED, error=str(exc)))
            continue
        status = PatchStatus.PATCHED if patched else PatchStatus.SKIPPED
        results.append(ManifestPatch(path=path, status=status))
    return results
