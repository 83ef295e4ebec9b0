"""Exception hierarchy for the materialization workflow.

Every step raises a subclass of :class:`MaterializeError`.  The orchestrator
catches them once, records the failing step and hands the error to the CLI,
which decides the process exit code.
"""

from __future__ import annotations

from pathlib import Path


class MaterializeError(Exception):
    """Base class for every step-level failure.

    Attributes:
        step: Short name of the workflow step that failed.
        exit_code: Process exit status used when distinct exit codes are
            enabled.  The CLI exits with ``1`` otherwise.
    """

    step = "materialize"
    exit_code = 1

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingArgument(MaterializeError):
    """Raised when no project name was supplied."""

    step = "resolve_target"
    exit_code = 2

    def __init__(self, message: str = "Please provide a name for your project.") -> None:
        super().__init__(message)


class InvalidProjectName(MaterializeError):
    """Raised when the target's last path segment normalises to nothing."""

    step = "resolve_target"
    exit_code = 2

    def __init__(self, raw_name: str) -> None:
        self.raw_name = raw_name
        super().__init__(f"Cannot derive a project name from {raw_name!r}.")


class DirectoryPreparationFailure(MaterializeError):
    """Raised when the target directory cannot be created."""

    step = "prepare_directory"
    exit_code = 3

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Could not create {path}: {reason}")


class TemplateCopyFailure(MaterializeError):
    """Raised when the template is missing or a file cannot be written."""

    step = "copy_template"
    exit_code = 4

    def __init__(self, template_path: Path, reason: str) -> None:
        self.template_path = template_path
        super().__init__(f"Failed to copy template {template_path}: {reason}")


class MissingExpectedFile(MaterializeError):
    """Raised when a file every template must ship is absent after the copy.

    This points at a broken template, not at anything the user did.
    """

    step = "normalize_dotfiles"
    exit_code = 5

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Template is missing expected file: {path}")


class DotfileRenameFailure(MaterializeError):
    """Raised when a copied placeholder cannot be renamed to its dotfile name."""

    step = "normalize_dotfiles"
    exit_code = 5

    def __init__(self, source: Path, destination: Path, reason: str) -> None:
        self.source = source
        self.destination = destination
        super().__init__(f"Could not rename {source} to {destination.name}: {reason}")


class ManifestParseError(MaterializeError):
    """Raised when the manifest is not a JSON object."""

    step = "patch_manifest"
    exit_code = 6

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Invalid manifest {path}: {reason}")


class ManifestIOError(MaterializeError):
    """Raised when the manifest cannot be read or written."""

    step = "patch_manifest"
    exit_code = 6

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Could not access manifest {path}: {reason}")


class CommandFailure(MaterializeError):
    """Base for failures of an external process.

    Attributes:
        command: The command line that was executed.
        returncode: Exit status of the process (``-1`` on timeout, ``None``
            if it never started).
        output: Captured stdout and stderr, joined.
    """

    label = "Command"

    def __init__(
        self,
        command: str,
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        status = "could not be started" if returncode is None else f"exited with {returncode}"
        message = f"{self.label} failed: `{command}` {status}"
        if output:
            message = f"{message}\n{output}"
        super().__init__(message)


class DependencyInstallFailure(CommandFailure):
    """Raised when the package manager install command fails."""

    step = "install_dependencies"
    exit_code = 7
    label = "Dependency installation"


class VersionControlFailure(CommandFailure):
    """Raised when repository initialisation fails."""

    step = "initialize_version_control"
    exit_code = 8
    label = "Version control initialization"


class MaterializationCancelled(MaterializeError):
    """Raised between steps once cancellation has been requested."""

    exit_code = 130

    def __init__(self, step: str) -> None:
        self.step = step
        super().__init__(f"Cancelled before {step}.")
