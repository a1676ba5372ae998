"""Materialise a plugin project from a template tree."""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from .classification import (
    DEFAULT_CLASSIFICATION,
    TEMPLATE_SUFFIX,
    FileSelection,
    TemplateClassification,
    normalize_path,
)
from .config import ProjectVariables
from .errors import CopyError, DestinationUnwritableError, GenerationError, RenderError
from .template import TemplateRenderer, TemplateRenderingError

__all__ = [
    "TEMPLATE_ROOT",
    "FileAction",
    "FileDecision",
    "GenerationReport",
    "ProjectGenerator",
    "generate",
    "list_template_files",
]


LOGGER = logging.getLogger(__name__)

TEMPLATE_ROOT = Path(__file__).resolve().parent / "template"

# Generic source names replaced by ``<TypeName>...`` and moved into the package directory.
PLACEHOLDER_SOURCES = {
    "Plugin.java": "{type_name}Plugin.java",
    "PluginTest.java": "{type_name}PluginTest.java",
}


class FileAction(str, Enum):
    """What happens to a single template file."""

    RENDER = "render"
    COPY_CONDITIONAL = "copy_conditional"
    COPY_STATIC = "copy_static"
    SKIP = "skip"

    @property
    def label(self) -> str:
        return _ACTION_LABELS[self]


_ACTION_LABELS = {
    FileAction.RENDER: "Render template",
    FileAction.COPY_CONDITIONAL: "Copy conditional file",
    FileAction.COPY_STATIC: "Copy file",
    FileAction.SKIP: "Skip",
}


@dataclass(frozen=True, slots=True)
class FileDecision:
    """Classification of one template file and its destination path."""

    relative_path: str
    action: FileAction
    destination: str | None = None

    def describe(self) -> str:
        return f"{self.action.label}: {self.destination or self.relative_path}"


@dataclass(frozen=True, slots=True)
class GenerationReport:
    """Result of a successful generation run."""

    destination: Path
    decisions: tuple[FileDecision, ...]

    @property
    def written(self) -> tuple[FileDecision, ...]:
        return tuple(decision for decision in self.decisions if decision.action is not FileAction.SKIP)

    @property
    def skipped(self) -> tuple[FileDecision, ...]:
        return tuple(decision for decision in self.decisions if decision.action is FileAction.SKIP)


ProgressCallback = Callable[[FileDecision], None]


def list_template_files(template_root: str | Path) -> list[str]:
    """Return every file below ``template_root`` as sorted ``/`` separated paths."""

    root = Path(template_root)
    return sorted(
        normalize_path(path.relative_to(root).as_posix()) for path in root.rglob("*") if path.is_file()
    )


@dataclass(slots=True)
class ProjectGenerator:
    """Classify and write the files of a template tree into a new project."""

    renderer: TemplateRenderer
    classification: TemplateClassification

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        classification: TemplateClassification | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.classification = classification or DEFAULT_CLASSIFICATION

    def select(self, variables: ProjectVariables) -> FileSelection:
        return self.classification.resolve(variables.include_optional_module, variables.variant_choice)

    def classify(
        self,
        relative_path: str,
        variables: ProjectVariables,
        selection: FileSelection | None = None,
    ) -> FileDecision:
        """Decide how ``relative_path`` is handled for ``variables``.

        The optional module toggle wins over everything else, so templates
        inside a disabled module are never rendered. Conditional files of a
        variant other than the selected one are skipped.
        """

        path = normalize_path(relative_path)
        if selection is None:
            selection = self.select(variables)

        if not selection.include_optional_module and self.classification.is_optional(path):
            return FileDecision(path, FileAction.SKIP)
        if path.endswith(TEMPLATE_SUFFIX):
            return FileDecision(path, FileAction.RENDER, self.render_destination(path, variables))
        if path in selection:
            return FileDecision(path, FileAction.COPY_CONDITIONAL, path)
        if self.classification.is_conditional(path):
            return FileDecision(path, FileAction.SKIP)
        return FileDecision(path, FileAction.COPY_STATIC, path)

    def render_destination(self, relative_path: str, variables: ProjectVariables) -> str:
        """Return where the rendered form of ``relative_path`` is written.

        ``src/main/java/Plugin.java.template`` becomes
        ``src/main/java/com/example/demo/DemoPlugin.java`` for the package
        ``com.example.demo``.
        """

        destination = PurePosixPath(normalize_path(relative_path)[: -len(TEMPLATE_SUFFIX)])
        pattern = PLACEHOLDER_SOURCES.get(destination.name)
        if pattern is not None:
            package_dir = PurePosixPath(*variables.package_name.split("."))
            destination = destination.parent / package_dir / pattern.format(type_name=variables.type_name)
        return destination.as_posix()

    def plan(self, template_root: str | Path, variables: ProjectVariables) -> list[FileDecision]:
        """Return the decision for every file without writing anything."""

        selection = self.select(variables)
        return [self.classify(path, variables, selection) for path in list_template_files(template_root)]

    def generate(
        self,
        template_root: str | Path,
        target_dir: str | Path,
        variables: ProjectVariables,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationReport:
        """Write the project described by ``variables`` into ``target_dir``.

        Files are processed one at a time in sorted order. The first failure
        aborts the run and files written so far are left in place. Existing
        files at a destination path are overwritten.
        """

        source_root = Path(template_root)
        if not source_root.is_dir():
            raise GenerationError(f"template directory {source_root} does not exist")

        target_path = Path(target_dir).expanduser().resolve()
        try:
            target_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DestinationUnwritableError(f"cannot create {target_path}: {exc.strerror or exc}") from exc
        if not os.access(target_path, os.W_OK | os.X_OK):
            raise DestinationUnwritableError(f"cannot write to {target_path}: permission denied")

        LOGGER.info("generating project in %s from %s", target_path, source_root)
        decisions: list[FileDecision] = []
        for decision in self.plan(source_root, variables):
            source = source_root / decision.relative_path
            if decision.action is FileAction.SKIP or decision.destination is None:
                LOGGER.debug("skipping %s", decision.relative_path)
                decisions.append(decision)
                continue
            if not source.is_file():
                LOGGER.debug("%s disappeared before processing", decision.relative_path)
                continue

            destination = target_path / decision.destination
            if decision.action is FileAction.RENDER:
                self._render(source, destination, variables, decision.relative_path)
            else:
                self._copy(source, destination, decision.relative_path)

            decisions.append(decision)
            LOGGER.info("%s", decision.describe())
            if on_progress is not None:
                on_progress(decision)

        return GenerationReport(target_path, tuple(decisions))

    def _render(
        self,
        source: Path,
        destination: Path,
        variables: ProjectVariables,
        relative_path: str,
    ) -> None:
        try:
            rendered = self.renderer.render_file(source, variables.context())
        except TemplateRenderingError as exc:
            raise RenderError(f"failed to render {relative_path}: {exc}", relative_path) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise RenderError(f"failed to read {relative_path}: {exc}", relative_path) from exc

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(rendered, encoding="utf-8")
        except OSError as exc:
            raise RenderError(f"failed to write {destination}: {exc.strerror or exc}", relative_path) from exc

    def _copy(self, source: Path, destination: Path, relative_path: str) -> None:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy(source, destination)
        except OSError as exc:
            raise CopyError(f"failed to copy {relative_path}: {exc.strerror or exc}", relative_path) from exc


def generate(
    template_root: str | Path,
    target_dir: str | Path,
    variables: ProjectVariables,
    classification: TemplateClassification = DEFAULT_CLASSIFICATION,
    *,
    renderer: TemplateRenderer | None = None,
    on_progress: ProgressCallback | None = None,
) -> GenerationReport:
    """Generate a project with a one-off :class:`ProjectGenerator`."""

    generator = ProjectGenerator(renderer, classification)
    return generator.generate(template_root, target_dir, variables, on_progress=on_progress)
