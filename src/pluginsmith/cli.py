"""Command line interface for creating Halo plugin projects."""

from __future__ import annotations

import argparse
import getpass
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Iterable, Sequence

from . import __version__
from .classification import DEFAULT_CLASSIFICATION
from .config import ProjectVariables, UiTool
from .errors import DirectoryNotEmptyError, GenerationError, PluginsmithError
from .logging_config import setup_logging
from .scaffold import TEMPLATE_ROOT, FileAction, FileDecision, ProjectGenerator
from .template import TemplateRenderer, TemplateRenderingError
from .validation import ValidationResult, ensure_valid, validate_domain, validate_slug

LOGGER = logging.getLogger(__name__)


class OperationCancelled(Exception):
    """Raised when the user aborts an interactive prompt."""


def get_current_user() -> str:
    """Return the login name of the current user or ``Anonymous``."""

    try:
        return getpass.getuser() or "Anonymous"
    except (KeyError, OSError, ImportError):
        return "Anonymous"


def is_empty_directory(path: Path) -> bool:
    """Return ``True`` when ``path`` is missing or only holds a ``.git`` entry."""

    if not path.exists():
        return True
    if not path.is_dir():
        return False
    entries = [entry.name for entry in path.iterdir()]
    return not entries or entries == [".git"]


def check_target_directory(path: Path) -> None:
    if not is_empty_directory(path):
        raise DirectoryNotEmptyError(os.path.relpath(path, Path.cwd()))


def resolve_project_path(directory: Path | None, slug: str) -> Path:
    """Return the output directory, defaulting to ``plugin-<slug>``."""

    if directory is not None:
        return directory.expanduser().resolve()
    project_path = Path.cwd() / f"plugin-{slug}"
    check_target_directory(project_path)
    return project_path


def _parse_key_value_pairs(pairs: Iterable[str]) -> dict[str, str]:
    context: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise argparse.ArgumentTypeError(
                f"invalid key/value pair '{pair}'. Expected KEY=VALUE syntax."
            )
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise argparse.ArgumentTypeError("keys must not be empty")
        context[key] = value
    return context


def _read(message: str) -> str:
    try:
        return input(message)
    except (EOFError, KeyboardInterrupt) as exc:
        raise OperationCancelled from exc


def _ask(
    message: str,
    *,
    default: str | None = None,
    validator: Callable[[str], ValidationResult] | None = None,
) -> str:
    suffix = f" ({default})" if default else ""
    while True:
        answer = _read(f"{message}{suffix}: ").strip()
        if not answer and default is not None:
            answer = default
        if validator is None:
            if answer:
                return answer
            continue
        result = validator(answer)
        if result:
            return answer
        print(f"  {result.message}")


def _confirm(message: str, *, default: bool = True) -> bool:
    hint = "Y/n" if default else "y/N"
    while True:
        answer = _read(f"{message} [{hint}]: ").strip().lower()
        if not answer:
            return default
        if answer in {"y", "yes"}:
            return True
        if answer in {"n", "no"}:
            return False


def _choose_ui_tool() -> UiTool:
    tools = list(UiTool)
    print("Choose UI build tool:")
    for index, tool in enumerate(tools, start=1):
        print(f"  {index}) {tool.value} - {tool.description}")
    while True:
        answer = _read("Selection (1): ").strip().lower() or "1"
        if answer.isdigit() and 1 <= int(answer) <= len(tools):
            return tools[int(answer) - 1]
        for tool in tools:
            if answer == tool.value:
                return tool


def _collect_variables(args: argparse.Namespace) -> ProjectVariables:
    if args.name is not None:
        ensure_valid(validate_slug(args.name))
        name = args.name
    else:
        name = _ask("Plugin name (e.g., my-awesome-plugin)", validator=validate_slug)

    if args.domain is not None:
        ensure_valid(validate_domain(args.domain))
        domain = args.domain
    else:
        domain = _ask("Domain for group and package name (e.g., com.example)", validator=validate_domain)

    author = args.author
    if author is None:
        author = get_current_user() if args.yes else _ask("Author name", default=get_current_user())

    include_ui = args.include_ui
    if include_ui is None:
        include_ui = True if args.yes else _confirm("Include UI module?")

    ui_tool: UiTool | None = None
    if include_ui:
        if args.ui_tool is not None:
            ui_tool = UiTool(args.ui_tool)
        else:
            ui_tool = UiTool.RSBUILD if args.yes else _choose_ui_tool()

    return ProjectVariables.from_answers(name, domain, author, include_ui=include_ui, ui_tool=ui_tool)


def _print_summary(variables: ProjectVariables, project_path: Path) -> None:
    print("\nProject configuration:")
    print(f"   Name: {variables.project_slug}")
    print(f"   Domain: {variables.group_domain}")
    print(f"   Package: {variables.package_name}")
    print(f"   Author: {variables.author_name}")
    if variables.include_optional_module and variables.variant_choice is not None:
        print(f"   UI Tool: {variables.variant_choice.value}")
    else:
        print("   UI Module: disabled")
    print(f"   Output Directory: {project_path}")


def _report_progress(decision: FileDecision) -> None:
    print(f"  {decision.describe()}")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more details (repeat for debug output)",
    )

    parser = argparse.ArgumentParser(description="Create Halo plugin projects from the bundled template")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create", parents=[common], help="create a new plugin project")
    create_parser.add_argument(
        "directory",
        nargs="?",
        type=Path,
        help="Target directory (defaults to plugin-<name> in the working directory)",
    )
    create_parser.add_argument("--name", help="Plugin name, e.g. my-awesome-plugin")
    create_parser.add_argument("--domain", help="Domain used for group and package name, e.g. com.example")
    create_parser.add_argument("--author", help="Author name (defaults to the current user)")
    create_parser.add_argument(
        "--ui-tool",
        choices=[tool.value for tool in UiTool],
        help="Build tool for the UI module",
    )
    ui_group = create_parser.add_mutually_exclusive_group()
    ui_group.add_argument(
        "--ui",
        dest="include_ui",
        action="store_const",
        const=True,
        default=None,
        help="Generate the ui/ module",
    )
    ui_group.add_argument(
        "--no-ui",
        dest="include_ui",
        action="store_const",
        const=False,
        help="Skip the ui/ module",
    )
    create_parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Accept defaults and do not ask for confirmation",
    )
    create_parser.add_argument(
        "--template-root",
        type=Path,
        default=TEMPLATE_ROOT,
        help=argparse.SUPPRESS,
    )
    create_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show which files would be written without creating anything",
    )

    render_parser = subparsers.add_parser(
        "render", parents=[common], help="render a single template file with moustache style placeholders"
    )
    render_parser.add_argument("template", type=Path, help="Path to the template file")
    render_parser.add_argument(
        "-c",
        "--context",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Values exposed to the template renderer",
    )
    render_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the rendered template to this path instead of stdout",
    )
    render_parser.add_argument(
        "--missing",
        choices=["keep", "empty", "error"],
        default="error",
        help="Behaviour when a placeholder cannot be resolved",
    )

    return parser


def _handle_create(args: argparse.Namespace) -> int:
    if args.directory is not None:
        check_target_directory(args.directory)

    try:
        variables = _collect_variables(args)
        project_path = resolve_project_path(args.directory, variables.project_slug)
        _print_summary(variables, project_path)
        if not args.yes and not args.dry_run and not _confirm("Create project?"):
            raise OperationCancelled
    except OperationCancelled:
        print("Operation cancelled")
        return 0

    missing = DEFAULT_CLASSIFICATION.missing_from(args.template_root)
    if missing:
        raise GenerationError(
            f"template directory {args.template_root} is missing: {', '.join(missing)}"
        )

    generator = ProjectGenerator(TemplateRenderer(), DEFAULT_CLASSIFICATION)
    if args.dry_run:
        for decision in generator.plan(args.template_root, variables):
            if decision.action is not FileAction.SKIP:
                _report_progress(decision)
        return 0

    print("\nGenerating project...")
    try:
        generator.generate(args.template_root, project_path, variables, on_progress=_report_progress)
    except GenerationError:
        print(
            f"Generation stopped; {project_path} may contain a partial project. "
            "Remove it before trying again.",
            file=sys.stderr,
        )
        raise

    print("\nProject created successfully!")
    print("\nNext steps:")
    print(f"   cd {os.path.relpath(project_path, Path.cwd())}")
    print("   gradle wrapper")
    print("   ./gradlew haloServer")
    return 0


def _handle_render(args: argparse.Namespace) -> int:
    renderer = TemplateRenderer()
    context = _parse_key_value_pairs(args.context)
    rendered = renderer.render_file(args.template, context, missing=args.missing)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(rendered, encoding="utf-8")
    else:
        sys.stdout.write(rendered)
        if not rendered.endswith("\n"):
            sys.stdout.write("\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logging({0: None, 1: "INFO"}.get(args.verbose, "DEBUG"))
        if args.command == "create":
            return _handle_create(args)
        if args.command == "render":
            return _handle_render(args)
    except (PluginsmithError, TemplateRenderingError, ValueError, OSError) as exc:
        LOGGER.debug("%s command failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    parser.error("no command provided")
    return 2


def create_main(argv: Sequence[str] | None = None) -> int:
    """Entry point of ``create-halo-plugin``, equivalent to ``pluginsmith create``."""

    arguments = list(sys.argv[1:] if argv is None else argv)
    if "--version" in arguments:
        return main(["--version"])
    return main(["create", *arguments])


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
