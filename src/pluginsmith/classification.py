"""Declaration of how files in a template tree are treated during generation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from types import MappingProxyType

__all__ = [
    "DEFAULT_CLASSIFICATION",
    "TEMPLATE_SUFFIX",
    "FileSelection",
    "TemplateClassification",
    "normalize_path",
]


TEMPLATE_SUFFIX = ".template"


def normalize_path(path: str | PurePosixPath) -> str:
    """Return ``path`` with forward slashes and no leading ``./``."""

    text = str(path).replace("\\", "/")
    if not text:
        return ""
    return PurePosixPath(text).as_posix().lstrip("/")


@dataclass(frozen=True, slots=True)
class FileSelection:
    """Conditional files kept for one generation run."""

    include_optional_module: bool
    variant: str | None
    conditional_files: frozenset[str] = frozenset()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self.conditional_files


@dataclass(frozen=True, slots=True)
class TemplateClassification:
    """Static classification of the relative paths inside a template root.

    Attributes
    ----------
    template_files:
        Paths that are always rendered. Each ends with :data:`TEMPLATE_SUFFIX`.
    conditional_files:
        Variant name mapped to the paths copied only when that variant is
        selected. A path belongs to at most one variant and never to
        ``template_files``.
    optional_module:
        Top level directory that is generated only when the optional module
        is enabled.
    """

    template_files: tuple[str, ...] = ()
    conditional_files: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    optional_module: str = "ui"
    _all_conditional: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        templates = tuple(normalize_path(path) for path in self.template_files)
        for path in templates:
            if not path.endswith(TEMPLATE_SUFFIX):
                raise ValueError(f"template file '{path}' must end with '{TEMPLATE_SUFFIX}'")

        variants: dict[str, tuple[str, ...]] = {}
        owners: dict[str, str] = {}
        for variant, paths in self.conditional_files.items():
            normalized = tuple(normalize_path(path) for path in paths)
            for path in normalized:
                if path in owners and owners[path] != variant:
                    raise ValueError(
                        f"conditional file '{path}' is declared by both "
                        f"'{owners[path]}' and '{variant}'"
                    )
                if path in templates:
                    raise ValueError(f"'{path}' cannot be both a template and a conditional file")
                owners[path] = variant
            variants[variant] = normalized

        object.__setattr__(self, "template_files", templates)
        object.__setattr__(self, "conditional_files", MappingProxyType(variants))
        object.__setattr__(self, "optional_module", normalize_path(self.optional_module).strip("/"))
        object.__setattr__(self, "_all_conditional", frozenset(owners))

    @property
    def variants(self) -> tuple[str, ...]:
        return tuple(self.conditional_files)

    def is_template(self, path: str) -> bool:
        return normalize_path(path).endswith(TEMPLATE_SUFFIX)

    def is_conditional(self, path: str) -> bool:
        """Return ``True`` when ``path`` belongs to any variant."""

        return normalize_path(path) in self._all_conditional

    def is_optional(self, path: str) -> bool:
        """Return ``True`` when ``path`` lies inside the optional module."""

        if not self.optional_module:
            return False
        return normalize_path(path).startswith(f"{self.optional_module}/")

    def resolve(self, include_optional_module: bool, variant: str | None) -> FileSelection:
        """Return the conditional files kept for the given toggle and variant."""

        if variant is not None:
            variant = str(getattr(variant, "value", variant))
        if not include_optional_module or variant is None:
            return FileSelection(include_optional_module, variant)
        if variant not in self.conditional_files:
            known = ", ".join(self.variants)
            raise ValueError(f"unknown variant '{variant}', expected one of: {known}")
        return FileSelection(
            include_optional_module,
            variant,
            frozenset(self.conditional_files[variant]),
        )

    def declared_paths(self) -> Iterable[str]:
        yield from self.template_files
        for paths in self.conditional_files.values():
            yield from paths

    def missing_from(self, template_root: str | Path) -> list[str]:
        """List declared paths that do not exist below ``template_root``."""

        root = Path(template_root)
        return [path for path in self.declared_paths() if not (root / path).is_file()]


DEFAULT_CLASSIFICATION = TemplateClassification(
    template_files=(
        "README.md.template",
        "build.gradle.template",
        "gradle.properties.template",
        "settings.gradle.template",
        "src/main/java/Plugin.java.template",
        "src/main/resources/plugin.yaml.template",
        "src/test/java/PluginTest.java.template",
        "ui/package.json.template",
        "ui/src/index.ts.template",
    ),
    conditional_files={
        "rsbuild": ("ui/rsbuild.config.ts",),
        "vite": ("ui/vite.config.ts",),
    },
    optional_module="ui",
)
