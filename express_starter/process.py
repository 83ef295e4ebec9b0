"""External process steps: dependency installation and repository init.

Both steps go through a *runner* coroutine with the same signature as
:func:`express_starter.utils.run_command`, so tests can substitute a fake and
never spawn npm or git.
"""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, Callable, Optional

from .errors import CommandFailure, DependencyInstallFailure, VersionControlFailure
from .models import CommandResult
from .utils import run_command

CommandRunner = Callable[..., Awaitable[tuple[int, str, str]]]


async def _run_checked(
    command: str,
    cwd: Path,
    timeout: Optional[float],
    failure: type[CommandFailure],
    runner: CommandRunner,
) -> CommandResult:
    """Run *command* in *cwd* and raise *failure* unless it exits with 0."""
    try:
        returncode, stdout, stderr = await runner(command, cwd=cwd, timeout=timeout)
    except OSError as exc:
        raise failure(command, None, str(exc)) from exc

    result = CommandResult(command=command, returncode=returncode, stdout=stdout, stderr=stderr)
    if returncode != 0:
        raise failure(command, returncode, result.output)
    return result


async def install_dependencies(
    target: str | Path,
    command: str = "npm install",
    timeout: Optional[float] = None,
    runner: CommandRunner = run_command,
) -> CommandResult:
    """Install the project's dependencies inside *target*.

    Args:
        target: Project directory; used as the child's working directory.
        command: Package manager command line.
        timeout: Seconds before the install is killed.  ``None`` never times out.
        runner: Coroutine executing the command.

    Returns:
        The command's exit status and captured output.

    Raises:
        DependencyInstallFailure: On spawn failure, timeout or non-zero exit.
    """
    return await _run_checked(command, Path(target), timeout, DependencyInstallFailure, runner)


def is_git_repository(path: str | Path) -> bool:
    """Return ``True`` if *path* already holds a ``.git`` directory or file."""
    return (Path(path) / ".git").exists()


async def initialize_version_control(
    target: str | Path,
    command: str = "git init",
    timeout: Optional[float] = 60,
    runner: CommandRunner = run_command,
    existing_ok: bool = True,
) -> Optional[CommandResult]:
    """Initialise a repository in *target*.

    Args:
        target: Project directory.
        command: Version control init command line.
        timeout: Seconds before the command is killed.
        runner: Coroutine executing the command.
        existing_ok: When ``True`` and *target* is already a repository, do
            nothing and return ``None``.

    Raises:
        VersionControlFailure: On spawn failure, timeout or non-zero exit.
    """
    target_path = Path(target)
    if existing_ok and is_git_repository(target_path):
        return None
    return await _run_checked(command, target_path, timeout, VersionControlFailure, runner)
