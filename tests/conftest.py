"""Shared pytest fixtures for the express-starter test suite.

Provides reusable fixtures for:
- A throw-away templates root with both language templates
- Materializer configurations pointing at that root
- A fake command runner that records calls instead of spawning npm/git
- A stub choice provider
- Mock subprocess helpers
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest

from express_starter.config import MaterializerConfig


# ---------------------------------------------------------------------------
# Template fixtures
# ---------------------------------------------------------------------------

SAMPLE_MANIFEST: dict[str, Any] = {
    "name": "express-app",
    "version": "1.0.0",
    "private": True,
    "scripts": {"dev": "node --watch src/server.js", "test": "jest"},
    "dependencies": {"express": "^4.21.1"},
    "devDependencies": {"jest": "^29.7.0"},
    "customField": {"nested": [1, 2, {"keep": "me"}]},
}


def _write_template(root: Path, language: str) -> None:
    root.mkdir(parents=True)
    (root / "package.json").write_text(json.dumps(SAMPLE_MANIFEST, indent=4), encoding="utf-8")
    (root / "gitignore").write_text("node_modules/\n.env\n", encoding="utf-8")
    (root / ".env.example").write_text("PORT=3000\n", encoding="utf-8")
    (root / "src").mkdir()
    (root / "src" / f"app.{language}").write_text("// app\n", encoding="utf-8")
    (root / "tests" / "unit").mkdir(parents=True)
    (root / "tests" / "unit" / f"app.test.{language}").write_text("// test\n", encoding="utf-8")
    (root / "public").mkdir()
    (root / "public" / "favicon.ico").write_bytes(bytes(range(256)))


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Templates root containing a ``js-template`` and a ``ts-template``."""
    root = tmp_path / "templates"
    _write_template(root / "js-template", "js")
    _write_template(root / "ts-template", "ts")
    return root


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Directory standing in for the user's working directory."""
    cwd = tmp_path / "workspace"
    cwd.mkdir()
    return cwd


@pytest.fixture
def interactive_config(templates_dir: Path) -> MaterializerConfig:
    return MaterializerConfig.interactive_profile(templates_dir=templates_dir)


@pytest.fixture
def fixed_config(templates_dir: Path) -> MaterializerConfig:
    return MaterializerConfig.fixed_profile(templates_dir=templates_dir)


# ---------------------------------------------------------------------------
# Collaborator stubs
# ---------------------------------------------------------------------------

class StubChooser:
    """Choice provider that returns a canned answer and records every prompt."""

    def __init__(self, answer: str = "Javascript") -> None:
        self.answer = answer
        self.calls: list[tuple[str, list[str]]] = []

    def choose(self, message: str, choices: Sequence[str]) -> str:
        self.calls.append((message, list(choices)))
        return self.answer


@pytest.fixture
def chooser() -> StubChooser:
    return StubChooser()


@pytest.fixture
def make_chooser():
    """Factory for a :class:`StubChooser` with a specific answer."""
    return StubChooser


@pytest.fixture
def fake_runner():
    """Factory for an ``AsyncMock`` standing in for ``run_command``.

    Usage:
        def test_install(fake_runner):
            runner = fake_runner(returncode=0, stdout="added 57 packages")
            await install_dependencies(path, runner=runner)
            runner.assert_awaited_once()
    """
    def factory(
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        results: dict[str, tuple[int, str, str]] | None = None,
    ) -> AsyncMock:
        async def _run(cmd: str, cwd: Any = None, timeout: Any = None, **kwargs: Any):
            if results and cmd in results:
                return results[cmd]
            return (returncode, stdout, stderr)

        return AsyncMock(side_effect=_run)

    return factory


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
