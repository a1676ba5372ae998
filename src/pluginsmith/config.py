"""Variables describing the plugin project that is about to be generated."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .naming import format_package_name, format_slug, format_type_name
from .validation import validate_domain, validate_slug

__all__ = ["ProjectVariables", "UiTool"]


class UiTool(str, Enum):
    """Build tools available for the optional UI module."""

    RSBUILD = "rsbuild"
    VITE = "vite"

    @property
    def description(self) -> str:
        if self is UiTool.RSBUILD:
            return "The Rspack Powered Build Tool (Recommended)"
        return "The Build Tool for the Web"


class ProjectVariables(BaseModel):
    """Immutable variable bag handed to the template engine.

    Fields use snake_case names in Python and the camelCase aliases inside
    templates, e.g. ``{{packageName}}``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    project_slug: str = Field(..., alias="projectSlug", description="Lowercase project identifier.")
    type_name: str = Field(..., alias="typeName", description="PascalCase name used for Java types.")
    package_name: str = Field(..., alias="packageName", description="Dotted Java package name.")
    group_domain: str = Field(..., alias="groupDomain", description="Maven group, e.g. com.example.")
    author_name: str = Field(..., alias="authorName", description="Free form author name.")
    include_optional_module: bool = Field(
        True, alias="includeOptionalModule", description="Whether the ui/ module is generated."
    )
    variant_choice: UiTool | None = Field(
        None, alias="variantChoice", description="UI build tool, only meaningful with the ui/ module."
    )

    @field_validator("project_slug")
    @classmethod
    def _check_slug(cls, value: str) -> str:
        result = validate_slug(value)
        if not result:
            raise ValueError(result.message)
        return value

    @field_validator("group_domain")
    @classmethod
    def _check_domain(cls, value: str) -> str:
        result = validate_domain(value)
        if not result:
            raise ValueError(result.message)
        return value

    @classmethod
    def from_answers(
        cls,
        name: str,
        domain: str,
        author: str,
        *,
        include_ui: bool = True,
        ui_tool: UiTool | str | None = UiTool.RSBUILD,
    ) -> "ProjectVariables":
        """Derive every identifier from the answers collected by the front end.

        Parameters
        ----------
        name:
            The plugin name as typed by the user.
        domain:
            Domain used for the Maven group and as package prefix.
        author:
            Author name written into the plugin manifest.
        include_ui:
            Generate the optional ``ui/`` module.
        ui_tool:
            Build tool for the UI module, rsbuild when not given; ignored when
            ``include_ui`` is false.
        """

        slug = format_slug(name)
        return cls(
            project_slug=slug,
            type_name=format_type_name(slug),
            package_name=format_package_name(domain, slug),
            group_domain=domain,
            author_name=author.strip() or "Anonymous",
            include_optional_module=include_ui,
            variant_choice=UiTool(ui_tool or UiTool.RSBUILD) if include_ui else None,
        )

    def context(self) -> Mapping[str, Any]:
        """Return the alias keyed mapping consumed by the template renderer."""

        return self.model_dump(mode="json", by_alias=True)
