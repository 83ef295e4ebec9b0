"""express-starter configuration.

Typed configuration for the materializer.  Settings use a Pydantic v2 model
so they are validated at construction time and can be saved to or loaded from
JSON without boiler-plate.

Two presets reproduce the two behaviours the tool has shipped with:

* :meth:`MaterializerConfig.interactive_profile` accepts ``.`` for the current
  directory and asks which language template to use.
* :meth:`MaterializerConfig.fixed_profile` always creates a new directory and
  copies the single default template without prompting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .models import TemplateChoice

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"

TemplateSelection = Literal["fixed", "interactive"]


class MaterializerConfig(BaseModel):
    """Every tuneable parameter of a materialization run.

    Instances are created once by the CLI entry point (or by tests) and passed
    to :class:`~express_starter.materializer.ProjectMaterializer`.
    """

    allow_current_directory: bool = Field(
        default=True, description="Treat the '.' argument as the working directory"
    )
    template_selection: TemplateSelection = Field(
        default="interactive", description="Prompt for a template or use the default"
    )
    default_template: TemplateChoice = Field(default=TemplateChoice.PLAIN)
    templates_dir: Path = Field(default=DEFAULT_TEMPLATES_DIR)

    manifest_filename: str = Field(default="package.json")
    dotfiles: dict[str, str] = Field(
        default_factory=lambda: {"gitignore": ".gitignore"},
        description="Template file names renamed after the copy",
    )

    install_command: str = Field(default="npm install")
    install_timeout: Optional[float] = Field(
        default=None, gt=0, description="Seconds before the install is killed; None waits forever"
    )
    vcs_command: str = Field(default="git init")
    vcs_timeout: Optional[float] = Field(default=60, gt=0)
    existing_repository_ok: bool = Field(
        default=True, description="Skip version control init when .git already exists"
    )

    distinct_exit_codes: bool = Field(
        default=False, description="Exit with a per-error-kind status instead of 1"
    )

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    @classmethod
    def interactive_profile(cls, **overrides) -> "MaterializerConfig":
        """Current-directory sentinel allowed, language chosen interactively."""
        settings = {"allow_current_directory": True, "template_selection": "interactive"}
        return cls(**{**settings, **overrides})

    @classmethod
    def fixed_profile(cls, **overrides) -> "MaterializerConfig":
        """Always a new directory, always the default template."""
        settings = {"allow_current_directory": False, "template_selection": "fixed"}
        return cls(**{**settings, **overrides})

    @classmethod
    def for_profile(cls, name: str, **overrides) -> "MaterializerConfig":
        """Build the named profile (``"interactive"`` or ``"fixed"``)."""
        factories = {
            "interactive": cls.interactive_profile,
            "fixed": cls.fixed_profile,
        }
        try:
            factory = factories[name]
        except KeyError:
            raise ValueError(f"Unknown profile: {name!r}") from None
        return factory(**overrides)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def template_path(self, choice: TemplateChoice) -> Path:
        """Directory holding the template for *choice*."""
        return self.templates_dir / choice.directory

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "MaterializerConfig":
        """Load a previously-saved configuration from JSON.

        Keys missing from the file keep their defaults.
        """
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)
