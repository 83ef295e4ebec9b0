"""express-starter: scaffold a new Express project from a bundled template.

Quick usage::

    import asyncio
    from express_starter import MaterializerConfig, ProjectMaterializer

    materializer = ProjectMaterializer(MaterializerConfig.fixed_profile())
    result = asyncio.run(materializer.run("my-app"))
    assert result.success
"""

from express_starter.config import MaterializerConfig
from express_starter.materializer import ProjectMaterializer, resolve_target
from express_starter.models import (
    MaterializationResult,
    MaterializationState,
    ProjectRequest,
    ProjectTarget,
    TemplateChoice,
)

__all__ = [
    "MaterializationResult",
    "MaterializationState",
    "MaterializerConfig",
    "ProjectMaterializer",
    "ProjectRequest",
    "ProjectTarget",
    "TemplateChoice",
    "resolve_target",
]

__version__ = "1.0.0"
