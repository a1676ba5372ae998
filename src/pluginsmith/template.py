"""Lightweight moustache style templating with conditional blocks."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, MutableMapping, Union

from .naming import format_slug, format_type_name

__all__ = [
    "TemplateRenderer",
    "TemplateRenderingError",
]


_TAG_PATTERN = re.compile(r"{{\s*(?P<expression>[^{}]+?)\s*}}")
_EQ_HELPER = re.compile(r"^\(\s*eq\s+(?P<arguments>.*?)\s*\)$")
_ARGUMENT = re.compile(r"\"(?P<double>[^\"]*)\"|'(?P<single>[^']*)'|(?P<name>[^\s()\"']+)")
_MISSING_POLICIES = {"keep", "empty", "error"}


class TemplateRenderingError(RuntimeError):
    """Raised when the renderer cannot evaluate a template."""


@dataclass(slots=True)
class _Placeholder:
    expression: str
    raw: str


@dataclass(slots=True)
class _IfBlock:
    condition: str
    body: list["_Node"] = field(default_factory=list)
    alternative: list["_Node"] = field(default_factory=list)
    in_alternative: bool = False

    def append(self, node: "_Node") -> None:
        if self.in_alternative:
            self.alternative.append(node)
        else:
            self.body.append(node)


_Node = Union[str, _Placeholder, _IfBlock]


class _Missing(Exception):
    pass


def _resolve_value(context: Mapping[str, Any], key: str) -> Any:
    if key not in context:
        raise KeyError(key)
    return context[key]


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _apply_filter(value: Any, filter_name: str, filters: Mapping[str, Callable[[Any], Any]]) -> Any:
    try:
        filter_func = filters[filter_name]
    except KeyError as exc:
        raise TemplateRenderingError(f"unknown filter '{filter_name}'") from exc

    return filter_func(value)


def _standalone_span(template: str, match: re.Match[str], cursor: int) -> tuple[int, int] | None:
    """Return the line span of a block tag that sits alone on its line."""

    line_start = template.rfind("\n", 0, match.start()) + 1
    if line_start < cursor or template[line_start : match.start()].strip():
        return None
    line_end = template.find("\n", match.end())
    tail_end = len(template) if line_end == -1 else line_end
    if template[match.end() : tail_end].strip():
        return None
    return line_start, tail_end if line_end == -1 else line_end + 1


def _parse(template: str) -> list[_Node]:
    root: list[_Node] = []
    stack: list[_IfBlock] = []

    def emit(node: _Node) -> None:
        if stack:
            stack[-1].append(node)
        else:
            root.append(node)

    cursor = 0
    for match in _TAG_PATTERN.finditer(template):
        expression = match.group("expression")
        is_block = expression[0] in "#/" or expression == "else"
        start, end = match.start(), match.end()
        if is_block:
            span = _standalone_span(template, match, cursor)
            if span is not None:
                start, end = span

        if start > cursor:
            emit(template[cursor:start])
        cursor = end

        if expression.startswith("#"):
            helper, _, condition = expression[1:].partition(" ")
            if helper != "if":
                raise TemplateRenderingError(f"unknown block helper '#{helper}'")
            if not condition.strip():
                raise TemplateRenderingError("'#if' requires a condition")
            block = _IfBlock(condition.strip())
            emit(block)
            stack.append(block)
        elif expression == "else":
            if not stack or stack[-1].in_alternative:
                raise TemplateRenderingError("'else' without a matching '#if'")
            stack[-1].in_alternative = True
        elif expression.startswith("/"):
            name = expression[1:].strip()
            if name != "if" or not stack:
                raise TemplateRenderingError(f"unexpected closing tag '{{{{{expression}}}}}'")
            stack.pop()
        else:
            emit(_Placeholder(expression, match.group(0)))

    if cursor < len(template):
        emit(template[cursor:])
    if stack:
        raise TemplateRenderingError(f"unclosed block '#if {stack[-1].condition}'")
    return root


@dataclass(slots=True)
class TemplateRenderer:
    """Render templates with ``{{ placeholder|filters }}`` expressions.

    Besides plain substitution the renderer understands conditional blocks::

        {{#if (eq variantChoice "vite")}}...{{else}}...{{/if}}
        {{#if includeOptionalModule}}...{{/if}}

    ``eq`` compares the text form of both operands, which are either context
    names or quoted literals. A block tag that is alone on its line removes
    the whole line from the output.
    """

    filters: MutableMapping[str, Callable[[Any], Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.filters:
            self.filters.update(
                {
                    "upper": lambda value: _to_text(value).upper(),
                    "lower": lambda value: _to_text(value).lower(),
                    "slug": lambda value: format_slug(_to_text(value)),
                    "type": lambda value: format_type_name(_to_text(value)),
                    "strip": lambda value: _to_text(value).strip(),
                }
            )

    def render_string(
        self,
        template: str,
        context: Mapping[str, Any],
        *,
        missing: str = "error",
    ) -> str:
        """Render ``template`` using ``context``.

        Parameters
        ----------
        template:
            The template string to evaluate.
        context:
            Mapping providing values for placeholders.
        missing:
            Controls what happens when a name cannot be resolved. The
            supported policies are ``"error"`` (raise
            :class:`TemplateRenderingError`), ``"keep"`` (leave the placeholder
            unchanged) and ``"empty"`` (replace with an empty string). Inside
            conditions an unresolved name is falsy unless the policy is
            ``"error"``.
        """

        if missing not in _MISSING_POLICIES:
            raise ValueError("missing must be 'keep', 'empty', or 'error'")

        nodes = _parse(template)
        parts: list[str] = []
        self._render_nodes(nodes, context, missing, parts)
        return "".join(parts)

    def _render_nodes(
        self,
        nodes: list[_Node],
        context: Mapping[str, Any],
        missing: str,
        parts: list[str],
    ) -> None:
        for node in nodes:
            if isinstance(node, str):
                parts.append(node)
            elif isinstance(node, _Placeholder):
                parts.append(self._substitute(node, context, missing))
            else:
                branch = node.body if self._evaluate(node.condition, context, missing) else node.alternative
                self._render_nodes(branch, context, missing, parts)

    def _lookup(self, context: Mapping[str, Any], key: str, missing: str) -> Any:
        try:
            return _resolve_value(context, key)
        except KeyError:
            if missing == "error":
                raise TemplateRenderingError(f"missing value for '{key}'") from None
            raise _Missing(key) from None

    def _substitute(self, node: _Placeholder, context: Mapping[str, Any], missing: str) -> str:
        parts = [part.strip() for part in node.expression.split("|") if part.strip()]
        if not parts:
            return node.raw

        key, *filters = parts
        try:
            value = self._lookup(context, key, missing)
        except _Missing:
            return node.raw if missing == "keep" else ""

        for filter_name in filters:
            value = _apply_filter(value, filter_name, self.filters)

        return _to_text(value)

    def _evaluate(self, condition: str, context: Mapping[str, Any], missing: str) -> bool:
        helper = _EQ_HELPER.match(condition)
        if helper is None:
            if condition.startswith("("):
                raise TemplateRenderingError(f"unsupported helper in '{condition}'")
            try:
                value = self._lookup(context, condition, missing)
            except _Missing:
                return False
            return bool(value)

        arguments = list(_ARGUMENT.finditer(helper.group("arguments")))
        if len(arguments) != 2:
            raise TemplateRenderingError(f"'eq' expects two arguments in '{condition}'")

        operands: list[str] = []
        for argument in arguments:
            if argument.group("name") is None:
                literal = argument.group("double")
                operands.append(literal if literal is not None else argument.group("single"))
                continue
            try:
                operands.append(_to_text(self._lookup(context, argument.group("name"), missing)))
            except _Missing:
                return False
        return operands[0] == operands[1]

    def render_file(
        self,
        template_path: str | Path,
        context: Mapping[str, Any],
        *,
        target: str | Path | None = None,
        encoding: str = "utf-8",
        missing: str = "error",
    ) -> str:
        """Render ``template_path`` and optionally write the result to ``target``."""

        template_path = Path(template_path)
        if not template_path.is_file():
            raise FileNotFoundError(template_path)

        text = template_path.read_text(encoding=encoding)
        rendered = self.render_string(text, context, missing=missing)

        if target is not None:
            target_path = Path(target)
            target_path.parent.mkdir(parents=True, exist_ok=True)
            target_path.write_text(rendered, encoding=encoding)

        return rendered
