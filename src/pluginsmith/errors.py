"""Exception types raised while preparing and generating plugin projects."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import ValidationFailure


class PluginsmithError(RuntimeError):
    """Base class for every error surfaced to the command line front end."""


class ValidationError(PluginsmithError, ValueError):
    """Raised when a slug, domain or variant is rejected before generation."""

    def __init__(self, message: str, failure: "ValidationFailure | None" = None) -> None:
        super().__init__(message)
        self.failure = failure


class DirectoryNotEmptyError(PluginsmithError):
    """Raised when the target directory holds anything besides ``.git``."""

    def __init__(self, directory: str) -> None:
        super().__init__(
            f'Directory "{directory}" is not empty. Please choose a different directory '
            "or remove existing files."
        )
        self.directory = directory


class GenerationError(PluginsmithError):
    """Raised when materialising the template tree fails.

    ``relative_path`` names the template file being processed when the error
    occurred, or ``None`` when the failure concerns the destination root.
    """

    def __init__(self, message: str, relative_path: str | None = None) -> None:
        super().__init__(message)
        self.relative_path = relative_path


class DestinationUnwritableError(GenerationError):
    """Raised when the destination root cannot be created or accessed."""


class RenderError(GenerationError):
    """Raised when a template cannot be rendered or its output written."""


class CopyError(GenerationError):
    """Raised when copying a static or conditional file fails."""
