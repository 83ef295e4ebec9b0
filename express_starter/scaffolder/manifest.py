"""Manifest (``package.json``) fixups.

Only the ``name`` field is touched.  All other keys keep their values and
their order, and the file is written back with 2-space indentation.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import ManifestIOError, ManifestParseError
from ..utils import load_json, save_json

MANIFEST_FILENAME = "package.json"


def read_manifest(path: str | Path) -> dict[str, Any]:
    """Load a manifest and check that it is a JSON object.

    Raises:
        ManifestIOError: If the file cannot be read.
        ManifestParseError: If the content is not a JSON object.
    """
    manifest_path = Path(path)
    try:
        data = load_json(manifest_path)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(manifest_path, str(exc)) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestIOError(manifest_path, str(exc)) from exc

    if not isinstance(data, dict):
        raise ManifestParseError(
            manifest_path, f"expected a JSON object, got {type(data).__name__}"
        )
    return data


def patch_manifest(
    target: str | Path,
    project_name: str,
    filename: str = MANIFEST_FILENAME,
) -> dict[str, Any]:
    """Set the manifest's ``name`` to *project_name* and write it back.

    Args:
        target: Project directory containing the manifest.
        project_name: Normalised project name.
        filename: Manifest file name inside *target*.

    Returns:
        The updated manifest document.

    Raises:
        ManifestIOError: On read or write failure.
        ManifestParseError: On invalid JSON content.
    """
    manifest_path = Path(target) / filename
    manifest = read_manifest(manifest_path)
    manifest["name"] = project_name

    try:
        save_json(manifest, manifest_path, indent=2)
    except OSError as exc:
        raise ManifestIOError(manifest_path, str(exc)) from exc
    return manifest
