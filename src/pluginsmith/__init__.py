"""Scaffolding for Halo plugin projects.

The package turns a plugin name and domain into validated identifiers,
classifies the files of a template tree and renders them into a new project.
It can be used programmatically or through the ``create-halo-plugin``
command line interface.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .classification import DEFAULT_CLASSIFICATION, TemplateClassification
from .config import ProjectVariables, UiTool
from .errors import (
    CopyError,
    DestinationUnwritableError,
    DirectoryNotEmptyError,
    GenerationError,
    PluginsmithError,
    RenderError,
    ValidationError,
)
from .naming import format_package_name, format_slug, format_type_name
from .scaffold import FileAction, FileDecision, GenerationReport, ProjectGenerator, generate
from .template import TemplateRenderer, TemplateRenderingError
from .validation import ValidationFailure, ValidationResult, validate_domain, validate_slug

__all__ = [
    "CopyError",
    "DEFAULT_CLASSIFICATION",
    "DestinationUnwritableError",
    "DirectoryNotEmptyError",
    "FileAction",
    "FileDecision",
    "GenerationError",
    "GenerationReport",
    "PluginsmithError",
    "ProjectGenerator",
    "ProjectVariables",
    "RenderError",
    "TemplateClassification",
    "TemplateRenderer",
    "TemplateRenderingError",
    "UiTool",
    "ValidationError",
    "ValidationFailure",
    "ValidationResult",
    "format_package_name",
    "format_slug",
    "format_type_name",
    "generate",
    "validate_domain",
    "validate_slug",
]
