"""Tests for template discovery, copy and dotfile normalisation.

Covers:
- list_template_files
- copy_template fidelity (relative paths, byte content, no extra files)
- copy into an existing, non-empty directory
- TemplateCopyFailure for missing templates and write errors
- normalize_dotfiles rename, MissingExpectedFile and DotfileRenameFailure
"""

from __future__ import annotations

import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from express_starter.errors import DotfileRenameFailure, MissingExpectedFile, TemplateCopyFailure
from express_starter.scaffolder.templates import (
    copy_template,
    list_template_files,
    normalize_dotfiles,
)


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _snapshot(root: Path) -> dict[Path, bytes]:
    return {p.relative_to(root): p.read_bytes() for p in root.rglob("*") if p.is_file()}


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


class TestDiscovery:
    def test_list_template_files_relative(self, templates_dir: Path):
        files = list_template_files(templates_dir / "js-template")
        assert Path("package.json") in files
        assert Path("gitignore") in files
        assert Path(".env.example") in files
        assert Path("tests/unit/app.test.js") in files
        assert all(not f.is_absolute() for f in files)


# ---------------------------------------------------------------------------
# copy_template
# ---------------------------------------------------------------------------


class TestCopyTemplate:
    @pytest.mark.asyncio
    async def test_copy_fidelity(self, templates_dir: Path, tmp_path: Path):
        source = templates_dir / "ts-template"
        target = tmp_path / "project"

        copied = await copy_template(source, target)

        assert _snapshot(target) == _snapshot(source)
        assert sorted(copied) == sorted(_snapshot(source).keys())

    @pytest.mark.asyncio
    async def test_binary_content_preserved(self, templates_dir: Path, tmp_path: Path):
        target = tmp_path / "project"
        await copy_template(templates_dir / "js-template", target)
        assert (target / "public" / "favicon.ico").read_bytes() == bytes(range(256))

    @pytest.mark.asyncio
    async def test_copy_into_existing_directory(self, templates_dir: Path, tmp_path: Path):
        target = tmp_path / "project"
        target.mkdir()
        (target / "notes.txt").write_text("mine", encoding="utf-8")

        await copy_template(templates_dir / "js-template", target)

        assert (target / "notes.txt").read_text(encoding="utf-8") == "mine"
        assert (target / "package.json").is_file()

    @pytest.mark.asyncio
    async def test_missing_template_raises(self, tmp_path: Path):
        target = tmp_path / "project"
        with pytest.raises(TemplateCopyFailure, match="does not exist"):
            await copy_template(tmp_path / "no-such-template", target)
        assert not target.exists()

    @pytest.mark.asyncio
    async def test_write_failure_raises(self, templates_dir: Path, tmp_path: Path):
        with patch(
            "express_starter.scaffolder.templates.shutil.copytree",
            side_effect=shutil.Error([("a", "b", "Permission denied")]),
        ):
            with pytest.raises(TemplateCopyFailure) as exc_info:
                await copy_template(templates_dir / "js-template", tmp_path / "project")
        assert exc_info.value.step == "copy_template"

    @pytest.mark.asyncio
    async def test_oserror_wrapped(self, templates_dir: Path, tmp_path: Path):
        with patch(
            "express_starter.scaffolder.templates.shutil.copytree",
            side_effect=OSError(28, "No space left on device"),
        ):
            with pytest.raises(TemplateCopyFailure, match="No space left"):
                await copy_template(templates_dir / "js-template", tmp_path / "project")


# ---------------------------------------------------------------------------
# normalize_dotfiles
# ---------------------------------------------------------------------------


class TestNormalizeDotfiles:
    def test_renames_gitignore(self, tmp_path: Path):
        (tmp_path / "gitignore").write_text("node_modules/\n", encoding="utf-8")

        renamed = normalize_dotfiles(tmp_path)

        assert renamed == [tmp_path / ".gitignore"]
        assert not (tmp_path / "gitignore").exists()
        assert (tmp_path / ".gitignore").read_text(encoding="utf-8") == "node_modules/\n"

    def test_replaces_existing_dotfile(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("old\n", encoding="utf-8")
        (tmp_path / "gitignore").write_text("new\n", encoding="utf-8")

        normalize_dotfiles(tmp_path)

        assert (tmp_path / ".gitignore").read_text(encoding="utf-8") == "new\n"

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(MissingExpectedFile) as exc_info:
            normalize_dotfiles(tmp_path)
        assert exc_info.value.path == tmp_path / "gitignore"

    def test_custom_renames(self, tmp_path: Path):
        (tmp_path / "npmrc").write_text("save-exact=true\n", encoding="utf-8")
        normalize_dotfiles(tmp_path, {"npmrc": ".npmrc"})
        assert (tmp_path / ".npmrc").is_file()

    def test_rename_error_wrapped(self, tmp_path: Path):
        (tmp_path / "gitignore").write_text("node_modules/\n", encoding="utf-8")
        with patch(
            "express_starter.scaffolder.templates.Path.replace",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            with pytest.raises(DotfileRenameFailure, match="Permission denied") as exc_info:
                normalize_dotfiles(tmp_path)
        assert exc_info.value.step == "normalize_dotfiles"
        assert exc_info.value.destination == tmp_path / ".gitignore"
        assert (tmp_path / "gitignore").is_file()
