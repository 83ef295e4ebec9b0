"""Template discovery and literal directory copy.

Templates are plain directory trees shipped inside the package under
``express_starter/templates/``.  Nothing is rendered: files are copied byte for
byte and a few files whose real names would be dropped by packaging tools
(``gitignore``) are renamed afterwards.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Mapping

from ..errors import DotfileRenameFailure, MissingExpectedFile, TemplateCopyFailure

DEFAULT_DOTFILES: dict[str, str] = {"gitignore": ".gitignore"}


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------

def list_template_files(template_path: str | Path) -> list[Path]:
    """Return every file in a template as sorted paths relative to its root."""
    root = Path(template_path)
    return sorted(p.relative_to(root) for p in root.rglob("*") if p.is_file())


# ---------------------------------------------------------------------------
# Copy
# ---------------------------------------------------------------------------

async def copy_template(template_path: str | Path, target: str | Path) -> list[Path]:
    """Recursively copy *template_path* into *target*.

    The relative structure and file contents are preserved exactly.  Existing
    files in *target* with the same relative path are overwritten; other files
    already present are left alone.  The copy is not transactional: on failure
    *target* keeps whatever was written so far.

    Args:
        template_path: Root directory of the template.
        target: Project directory (created if missing).

    Returns:
        The copied files, relative to *target*.

    Raises:
        TemplateCopyFailure: If the template does not exist or a file cannot
            be written.
    """
    source = Path(template_path)
    destination = Path(target)
    if not source.is_dir():
        raise TemplateCopyFailure(source, "template directory does not exist")

    try:
        await asyncio.to_thread(_copy_tree, source, destination)
    except (OSError, shutil.Error) as exc:
        raise TemplateCopyFailure(source, str(exc)) from exc

    return list_template_files(source)


def normalize_dotfiles(
    target: str | Path,
    renames: Mapping[str, str] | None = None,
) -> list[Path]:
    """Rename template placeholder files to their dotfile names inside *target*.

    Args:
        target: Project directory.
        renames: ``{template_name: real_name}``; defaults to
            ``{"gitignore": ".gitignore"}``.

    Returns:
        The renamed files' new paths.

    Raises:
        MissingExpectedFile: If a placeholder file is absent.
        DotfileRenameFailure: If a placeholder cannot be renamed.
    """
    root = Path(target)
    renamed: list[Path] = []
    for source_name, dest_name in (renames if renames is not None else DEFAULT_DOTFILES).items():
        source = root / source_name
        if not source.is_file():
            raise MissingExpectedFile(source)
        destination = root / dest_name
        try:
            source.replace(destination)
        except OSError as exc:
            raise DotfileRenameFailure(source, destination, str(exc)) from exc
        renamed.append(destination)
    return renamed


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _copy_tree(source: Path, destination: Path) -> None:
    """Synchronous helper: copy files and permission bits, merging into *destination*."""
    shutil.copytree(source, destination, dirs_exist_ok=True)
