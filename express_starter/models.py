"""Pydantic v2 models for a single materialization run.

All of these live only for the duration of one invocation; nothing is
persisted except the project directory itself.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class TemplateChoice(str, Enum):
    """Language flavour of the bundled Express template."""
    PLAIN = "plain"
    TYPED = "typed"

    @property
    def directory(self) -> str:
        """Name of the template directory under the templates root."""
        return _TEMPLATE_DIRECTORIES[self]

    @property
    def label(self) -> str:
        """Language name shown to the user."""
        return _TEMPLATE_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> "TemplateChoice":
        """Look up a choice by its display label or value (case-insensitive)."""
        needle = label.strip().lower()
        for choice in cls:
            if needle in (choice.value, choice.label.lower()):
                return choice
        raise ValueError(f"Unknown template choice: {label!r}")


_TEMPLATE_DIRECTORIES = {
    TemplateChoice.PLAIN: "js-template",
    TemplateChoice.TYPED: "ts-template",
}

_TEMPLATE_LABELS = {
    TemplateChoice.PLAIN: "Javascript",
    TemplateChoice.TYPED: "Typescript",
}


class MaterializationState(str, Enum):
    """Position of a run in the linear materialization sequence."""
    START = "start"
    TARGET_RESOLVED = "target_resolved"
    DIRECTORY_READY = "directory_ready"
    TEMPLATE_COPIED = "template_copied"
    DOTFILES_NORMALIZED = "dotfiles_normalized"
    MANIFEST_PATCHED = "manifest_patched"
    DEPENDENCIES_INSTALLED = "dependencies_installed"
    VERSION_CONTROL_INITIALIZED = "version_control_initialized"
    DONE = "done"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Request / target
# ---------------------------------------------------------------------------

class ProjectRequest(BaseModel):
    """What the user asked for on the command line."""
    model_config = ConfigDict(frozen=True)

    raw_name: str = Field(..., description="Argument exactly as given")
    use_current_directory: bool = Field(
        default=False, description="Whether to materialize into the working directory"
    )


class ProjectTarget(BaseModel):
    """Resolved location and identifier of the project to materialize."""
    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Absolute project directory")
    name: str = Field(..., min_length=1, description="Normalised project name")
    is_current_directory: bool = Field(default=False)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class CommandResult(BaseModel):
    """Outcome of one external process."""
    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def output(self) -> str:
        """Stdout and stderr joined, skipping empty streams."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class MaterializationResult(BaseModel):
    """Final state of a run, including the failing step when it did not finish."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: MaterializationState = MaterializationState.START
    request: Optional[ProjectRequest] = None
    target: Optional[ProjectTarget] = None
    template: Optional[TemplateChoice] = None
    completed: list[MaterializationState] = Field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[Exception] = Field(default=None, exclude=True)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.state is MaterializationState.DONE
