"""Project materializer.

Turns one user intent ("make a project named X" or "use this directory") into
an installed, version-controlled Express project by walking a fixed sequence
of states:

START -> TARGET_RESOLVED -> DIRECTORY_READY -> TEMPLATE_COPIED ->
DOTFILES_NORMALIZED -> MANIFEST_PATCHED -> DEPENDENCIES_INSTALLED ->
VERSION_CONTROL_INITIALIZED -> DONE

A failing step moves the run to FAILED.  Nothing is retried and completed
steps are never undone, so the target directory is left exactly as far as the
run got.

Usage::

    materializer = ProjectMaterializer(MaterializerConfig.fixed_profile())
    result = asyncio.run(materializer.run("my-app"))
"""

from __future__ import annotations

import asyncio
import time
import traceback
from pathlib import Path
from typing import Optional

from rich.markup import escape

from .config import MaterializerConfig
from .errors import (
    DirectoryPreparationFailure,
    InvalidProjectName,
    MaterializationCancelled,
    MaterializeError,
    MissingArgument,
)
from .models import (
    MaterializationResult,
    MaterializationState,
    ProjectRequest,
    ProjectTarget,
    TemplateChoice,
)
from .process import CommandRunner, initialize_version_control, install_dependencies
from .prompts import ChoiceProvider, RichChoiceProvider
from .scaffolder import copy_template, normalize_dotfiles, patch_manifest
from .utils import (
    console,
    create_progress,
    format_duration,
    normalize_project_name,
    print_command,
    print_error,
    print_success,
    print_warning,
    run_command,
)

CURRENT_DIRECTORY = "."
LANGUAGE_PROMPT = "Which language would you like to use?"


# ---------------------------------------------------------------------------
# Individual steps
# ---------------------------------------------------------------------------


def build_request(raw_name: Optional[str], *, allow_current_directory: bool = True) -> ProjectRequest:
    """Turn the raw CLI argument into a :class:`ProjectRequest`.

    Raises:
        MissingArgument: If *raw_name* is ``None``, empty or only whitespace.
    """
    if raw_name is None or not raw_name.strip():
        raise MissingArgument()
    return ProjectRequest(
        raw_name=raw_name,
        use_current_directory=allow_current_directory and raw_name == CURRENT_DIRECTORY,
    )


def resolve_target(
    raw_name: Optional[str],
    cwd: str | Path,
    *,
    allow_current_directory: bool = True,
) -> ProjectTarget:
    """Work out where the project goes and what it is called.

    Shorthand for :func:`build_request` followed by :func:`locate_target`.

    Raises:
        MissingArgument: If *raw_name* is empty.
        InvalidProjectName: If the last path segment normalises to nothing.
    """
    request = build_request(raw_name, allow_current_directory=allow_current_directory)
    return locate_target(request, cwd)


def locate_target(request: ProjectRequest, cwd: str | Path) -> ProjectTarget:
    """Place *request* under *cwd*.

    The current-directory sentinel means *cwd* itself.  Anything else is
    joined onto *cwd* and made absolute; an absolute name loses its anchor
    first, so ``/srv/app`` lands at ``cwd/srv/app``.  The project name is
    always the normalised last segment of the resulting path.  An existing,
    non-empty directory is not an error.

    Raises:
        InvalidProjectName: If the last path segment normalises to nothing.
    """
    base = Path(cwd).absolute()

    if request.use_current_directory:
        path = base
    else:
        relative = Path(request.raw_name)
        if relative.anchor:
            relative = Path(*relative.parts[1:])
        path = (base / relative).resolve()

    name = normalize_project_name(path.name)
    if not name:
        raise InvalidProjectName(request.raw_name)

    return ProjectTarget(path=path, name=name, is_current_directory=request.use_current_directory)


def prepare_directory(target: ProjectTarget) -> Path:
    """Create the target directory and any missing parents.

    Succeeds silently when the directory already exists.

    Raises:
        DirectoryPreparationFailure: If the directory cannot be created.
    """
    try:
        target.path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryPreparationFailure(target.path, str(exc)) from exc
    return target.path


def select_template(
    config: MaterializerConfig,
    chooser: Optional[ChoiceProvider] = None,
) -> TemplateChoice:
    """Pick the template to copy.

    The ``fixed`` selection mode returns ``config.default_template`` without
    asking anything; ``interactive`` asks *chooser* once.
    """
    if config.template_selection == "fixed":
        return config.default_template

    chooser = chooser or RichChoiceProvider()
    answer = chooser.choose(LANGUAGE_PROMPT, [choice.label for choice in TemplateChoice])
    return TemplateChoice.from_label(answer)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectMaterializer:
    """Runs the materialization sequence and reports progress to the console.

    Attributes:
        config: Behaviour switches and command lines.
        chooser: Interactive choice provider used in ``interactive`` mode.
        runner: Coroutine used to execute external commands.
        cancel_event: When set, the run stops before its next step.
    """

    def __init__(
        self,
        config: Optional[MaterializerConfig] = None,
        *,
        chooser: Optional[ChoiceProvider] = None,
        runner: Optional[CommandRunner] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        self.config = config or MaterializerConfig()
        self.chooser = chooser
        self.runner = runner or run_command
        self.cancel_event = cancel_event
        self._step = "resolve_target"

    # ------------------------------------------------------------------
    # Step bookkeeping
    # ------------------------------------------------------------------

    def _begin(self, step: str) -> None:
        """Record *step* as current, stopping first if cancellation was requested."""
        self._step = step
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise MaterializationCancelled(step)

    @staticmethod
    def _advance(result: MaterializationResult, state: MaterializationState) -> None:
        result.state = state
        result.completed.append(state)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(
        self,
        raw_name: Optional[str],
        cwd: str | Path | None = None,
    ) -> MaterializationResult:
        """Materialize a project for *raw_name* relative to *cwd*.

        Args:
            raw_name: Project directory name, or ``"."`` for *cwd* itself.
            cwd: Base directory; defaults to the process working directory.

        Returns:
            The final result.  ``result.success`` is ``True`` only when every
            step completed; otherwise ``result.failed_step`` and
            ``result.error`` describe what went wrong.
        """
        started = time.monotonic()
        result = MaterializationResult()
        base = Path(cwd) if cwd is not None else Path.cwd()

        try:
            await self._run_steps(raw_name, base, result)
        except MaterializeError as exc:
            self._fail(result, exc)
        except Exception as exc:
            self._fail(result, exc)
            console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
        finally:
            result.duration = time.monotonic() - started

        if result.success:
            self._print_next_steps(result)
        else:
            console.print(f"[dim]Stopped after {format_duration(result.duration)}.[/dim]")
        return result

    async def _run_steps(
        self,
        raw_name: Optional[str],
        base: Path,
        result: MaterializationResult,
    ) -> None:
        config = self.config

        # 1. Resolve target
        self._begin("resolve_target")
        request = build_request(raw_name, allow_current_directory=config.allow_current_directory)
        result.request = request
        target = locate_target(request, base)
        result.target = target
        self._advance(result, MaterializationState.TARGET_RESOLVED)

        # 2. Prepare directory
        self._begin("prepare_directory")
        if target.is_current_directory:
            console.print("\n[bold green]Using current directory as project.[/bold green]\n")
        else:
            prepare_directory(target)
            console.print(
                f"\n[bold green]{escape(target.path.name)} directory created.[/bold green]\n"
            )
        self._advance(result, MaterializationState.DIRECTORY_READY)

        # 3. Select and copy the template
        self._begin("select_template")
        choice = select_template(config, self.chooser)
        result.template = choice

        self._begin("copy_template")
        description = f"[cyan]Creating a new Express project with {choice.label}[/cyan]"
        with create_progress() as progress:
            progress.add_task(description, total=None)
            await copy_template(config.template_path(choice), target.path)
        print_success(f"Created a new Express project with {choice.label}")
        self._advance(result, MaterializationState.TEMPLATE_COPIED)

        # 4. Dotfiles
        self._begin("normalize_dotfiles")
        normalize_dotfiles(target.path, config.dotfiles)
        self._advance(result, MaterializationState.DOTFILES_NORMALIZED)

        # 5. Manifest
        self._begin("patch_manifest")
        patch_manifest(target.path, target.name, config.manifest_filename)
        self._advance(result, MaterializationState.MANIFEST_PATCHED)

        # 6. Dependencies
        self._begin("install_dependencies")
        with create_progress() as progress:
            progress.add_task(
                "[cyan]Installing dependencies (this may take a moment)...[/cyan]",
                total=None,
            )
            await install_dependencies(
                target.path,
                command=config.install_command,
                timeout=config.install_timeout,
                runner=self.runner,
            )
        print_success("Dependencies installed!")
        self._advance(result, MaterializationState.DEPENDENCIES_INSTALLED)

        # 7. Version control
        self._begin("initialize_version_control")
        vcs_result = await initialize_version_control(
            target.path,
            command=config.vcs_command,
            timeout=config.vcs_timeout,
            runner=self.runner,
            existing_ok=config.existing_repository_ok,
        )
        if vcs_result is None:
            print_warning("Existing git repository found -- skipping initialization.")
        self._advance(result, MaterializationState.VERSION_CONTROL_INITIALIZED)

        self._advance(result, MaterializationState.DONE)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _fail(self, result: MaterializationResult, exc: Exception) -> None:
        result.state = MaterializationState.FAILED
        result.failed_step = self._step
        result.error = exc
        print_error("An error occurred during setup.")
        console.print(f"[red]{escape(str(exc))}[/red]")

    @staticmethod
    def _print_next_steps(result: MaterializationResult) -> None:
        """Print what to run once the project is ready."""
        print_success("\nProject is ready to use!")
        console.print(f"[dim]Finished in {format_duration(result.duration)}.[/dim]")
        console.print("\n[bold]To get started, run:[/bold]")
        if result.request is not None and result.target is not None and not result.target.is_current_directory:
            print_command(f'cd "{result.request.raw_name}"')
        print_command("npm run dev")
        console.print("\n[bold]To test, run:[/bold]")
        print_command("npm test")
