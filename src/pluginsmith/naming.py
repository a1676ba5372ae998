"""Identifier formatting used to derive project, type and package names."""

from __future__ import annotations

import re

__all__ = ["format_slug", "format_type_name", "format_package_name"]


_INVALID_SLUG_CHARACTER = re.compile(r"[^a-z0-9-]")
_MULTIPLE_HYPHENS = re.compile(r"-+")


def format_slug(value: str) -> str:
    """Return a URL and filesystem friendly project slug for ``value``.

    Every character outside ``[a-z0-9-]`` is replaced by a hyphen after the
    input is lowercased, runs of hyphens collapse into one and hyphens at
    either end are removed. Empty input yields an empty slug.
    """

    text = _INVALID_SLUG_CHARACTER.sub("-", value.lower())
    text = _MULTIPLE_HYPHENS.sub("-", text)
    return text.strip("-")


def format_type_name(value: str) -> str:
    """Return the PascalCase type name used for generated Java sources."""

    return "".join(part[0].upper() + part[1:].lower() for part in value.split("-") if part)


def format_package_name(domain: str, slug: str) -> str:
    """Combine ``domain`` and ``slug`` into a dotted Java package name.

    >>> format_package_name("com.example", "my-plugin")
    'com.example.myplugin'
    """

    return f"{domain}.{slug.replace('-', '').lower()}"
