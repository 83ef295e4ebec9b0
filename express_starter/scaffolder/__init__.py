"""Filesystem steps of materialization: template copy and post-copy fixups.

Quick usage::

    from express_starter.scaffolder import copy_template, normalize_dotfiles, patch_manifest

    await copy_template(template_dir, project_dir)
    normalize_dotfiles(project_dir)
    patch_manifest(project_dir, "my-app")
"""

from express_starter.scaffolder.manifest import patch_manifest, read_manifest
from express_starter.scaffolder.templates import (
    copy_template,
    list_template_files,
    normalize_dotfiles,
)

__all__ = [
    "copy_template",
    "list_template_files",
    "normalize_dotfiles",
    "patch_manifest",
    "read_manifest",
]
