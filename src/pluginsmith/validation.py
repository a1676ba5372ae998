"""Validators for user supplied plugin names and domains."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .errors import ValidationError

__all__ = [
    "ValidationFailure",
    "ValidationResult",
    "ensure_valid",
    "validate_domain",
    "validate_slug",
]


_SLUG_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")
_DOMAIN_CHARACTERS = re.compile(r"^[a-z0-9.-]+$")


class ValidationFailure(str, Enum):
    """Reasons a validator can reject its input."""

    EMPTY_INPUT = "empty_input"
    INVALID_FORMAT = "invalid_format"
    INVALID_CHARACTERS = "invalid_characters"
    TOO_FEW_PARTS = "too_few_parts"
    INVALID_PART = "invalid_part"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a validator: either ok or a failure with a readable reason."""

    failure: ValidationFailure | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def error(cls, failure: ValidationFailure, message: str) -> "ValidationResult":
        return cls(failure=failure, message=message)


def validate_slug(name: str) -> ValidationResult:
    """Check that ``name`` is a lowercase, hyphen or dot separated plugin name."""

    if not name or not name.strip():
        return ValidationResult.error(ValidationFailure.EMPTY_INPUT, "Project name cannot be empty")

    if not _SLUG_PATTERN.fullmatch(name):
        return ValidationResult.error(
            ValidationFailure.INVALID_FORMAT,
            "Project name must follow the pattern: lowercase letters, numbers, hyphens, and dots. "
            "Must start and end with alphanumeric characters.",
        )

    return ValidationResult.success()


def validate_domain(domain: str) -> ValidationResult:
    """Check that ``domain`` is usable as a Maven group and package prefix."""

    if not domain or not domain.strip():
        return ValidationResult.error(ValidationFailure.EMPTY_INPUT, "Domain cannot be empty")

    if not _DOMAIN_CHARACTERS.fullmatch(domain):
        return ValidationResult.error(
            ValidationFailure.INVALID_CHARACTERS,
            "Domain can only contain lowercase letters, numbers, dots and hyphens",
        )

    parts = domain.split(".")
    if len(parts) < 2:
        return ValidationResult.error(
            ValidationFailure.TOO_FEW_PARTS,
            "Domain must have at least two parts (e.g., com.example)",
        )

    for part in parts:
        if not part or part.startswith("-") or part.endswith("-"):
            return ValidationResult.error(
                ValidationFailure.INVALID_PART,
                "Each part of domain cannot be empty or start/end with hyphens",
            )

    return ValidationResult.success()


def ensure_valid(result: ValidationResult) -> None:
    """Raise :class:`~pluginsmith.errors.ValidationError` for a failed result."""

    if not result.ok:
        raise ValidationError(result.message, result.failure)
