"""Request, template source and preference-file configuration."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .naming import SLUG_PATTERN

__all__ = [
    "DEFAULT_ARCHIVE_URL",
    "PREFERENCE_KEYS",
    "ScaffoldRequest",
    "TemplateSource",
    "default_preferences_path",
    "load_preferences",
    "save_preferences",
]


LOGGER = logging.getLogger(__name__)

DEFAULT_ARCHIVE_URL = (
    "https://github.com/DevinVinson/WordPress-Plugin-Boilerplate/archive/refs/heads/master.zip"
)
PREFERENCES_FILENAME = ".wppb-cli"
PREFERENCES_ENV_VAR = "WPPB_CONFIG"
PREFERENCE_KEYS = ("author_name", "author_email", "author_url")

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_HTTP_URL = TypeAdapter(AnyHttpUrl)


@dataclass(frozen=True, slots=True)
class TemplateSource:
    """Where the boilerplate archive lives and what to look for inside it.

    Attributes
    ----------
    url:
        Location of the zip archive.
    root_name:
        Name of the single top-level directory the archive unpacks into.
    marker:
        Name of the placeholder directory holding the plugin template. The same
        string is the hyphenated token replaced in paths and file contents.
    """

    url: str = DEFAULT_ARCHIVE_URL
    root_name: str = "WordPress-Plugin-Boilerplate-master"
    marker: str = "plugin-name"


class ScaffoldRequest(BaseModel):
    """Values substituted into the boilerplate for a new plugin."""

    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)

    plugin_name: str = Field(..., min_length=1, description="Display name of the plugin.")
    plugin_slug: str = Field(..., description="Lowercase, hyphenated directory and text-domain name.")
    plugin_url: str = Field(..., description="Plugin URI advertised in the plugin header.")
    author_name: str = Field(..., min_length=1, description="Author or company name.")
    author_email: str = Field(..., description="Author contact address.")
    author_url: str = Field(..., description="Author URI advertised in the plugin header.")
    plugin_description: str = Field(..., min_length=1, description="Short plugin description.")

    @field_validator("plugin_slug")
    @classmethod
    def _check_slug(cls, value: str) -> str:
        if not SLUG_PATTERN.fullmatch(value):
            raise ValueError(
                "the plugin slug must be lowercase and use hyphens (e.g., sample-text)"
            )
        return value

    @field_validator("plugin_url", "author_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        # Validate only; the original spelling is what ends up in the plugin header.
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError("please enter a valid URL") from exc
        return value

    @field_validator("author_email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not _EMAIL_PATTERN.fullmatch(value):
            raise ValueError("please enter a valid email address")
        return value


def default_preferences_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return the preference file location, honouring ``$WPPB_CONFIG``."""

    environ = os.environ if environ is None else environ
    override = environ.get(PREFERENCES_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / PREFERENCES_FILENAME


def load_preferences(path: str | Path | None = None) -> dict[str, str]:
    """Read ``key=value`` author defaults from ``path``.

    A missing file yields no defaults. An unreadable or malformed file is
    logged and also yields no defaults so it never blocks a run.
    """

    path = Path(path) if path is not None else default_preferences_path()
    if not path.is_file():
        return {}

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Ignoring unreadable preference file %s: %s", path, exc)
        return {}

    preferences: dict[str, str] = {}
    for number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            LOGGER.warning("Ignoring malformed preference file %s (line %d)", path, number)
            return {}
        key, value = line.split("=", 1)
        key = key.strip()
        if key in PREFERENCE_KEYS:
            preferences[key] = value.strip()
    return preferences


def save_preferences(values: Mapping[str, str], path: str | Path | None = None) -> Path:
    """Persist the author fields of ``values`` for the next run."""

    path = Path(path) if path is not None else default_preferences_path()
    lines = [f"{key}={values[key]}" for key in PREFERENCE_KEYS if values.get(key)]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
