"""Identifier variants derived from a plugin slug."""

from __future__ import annotations

import re
import unicodedata

__all__ = [
    "SLUG_PATTERN",
    "camel_case",
    "is_valid_slug",
    "pascal_snake_case",
    "slugify",
    "version_constant",
]


SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
_SEPARATORS = re.compile(r"[\s\-_]+")


def _capitalize_segments(slug: str) -> list[str]:
    # Only the first character of each segment changes; the remainder is kept
    # verbatim so "my-2d-plugin" yields "My", "2d", "Plugin".
    return [segment[:1].upper() + segment[1:] for segment in slug.split("-")]


def is_valid_slug(value: object) -> bool:
    """Return ``True`` when ``value`` is a non-empty lowercase hyphenated slug."""

    return isinstance(value, str) and SLUG_PATTERN.fullmatch(value) is not None


def slugify(value: str) -> str:
    """Create a plugin slug from a human friendly plugin name.

    Accents are folded to ASCII, anything other than letters, digits, spaces,
    hyphens and underscores is dropped, and runs of separators collapse into a
    single hyphen.
    """

    text = unicodedata.normalize("NFKD", str(value))
    text = text.encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^\w\- ]", "", text).strip().lower()
    return _SEPARATORS.sub("-", text).strip("-")


def camel_case(slug: str) -> str:
    """Return the camelCase form of ``slug`` (``my-plugin`` -> ``myPlugin``)."""

    joined = "".join(_capitalize_segments(slug))
    return joined[:1].lower() + joined[1:]


def pascal_snake_case(slug: str) -> str:
    """Return the Pascal_Snake form of ``slug`` (``my-plugin`` -> ``My_Plugin``)."""

    return "_".join(_capitalize_segments(slug))


def version_constant(slug: str) -> str:
    """Return the version constant name for ``slug`` (``MY_PLUGIN_VERSION``)."""

    return f"{slug.upper().replace('-', '_')}_VERSION"
