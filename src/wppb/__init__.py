"""Scaffold WordPress plugins from the WordPress Plugin Boilerplate.

The package downloads the boilerplate archive, unpacks it with every entry
checked against the extraction directory, swaps the placeholder tokens for the
values of a :class:`ScaffoldRequest`, and copies the finished plugin into a
fresh directory. Everything is usable programmatically or via the ``wppb``
command line interface.
"""

from __future__ import annotations

from .config import ScaffoldRequest, TemplateSource, load_preferences, save_preferences
from .errors import (
    ArchiveError,
    ConfigurationError,
    DestinationExistsError,
    FetchError,
    InvalidDestinationError,
    MaterializationError,
    ScaffoldError,
    ScratchAreaError,
    SubstitutionError,
    TemplateNotFoundError,
    UnsafeEntryError,
)
from .fetch import ArchiveFetcher, extract_archive
from .naming import camel_case, pascal_snake_case, slugify, version_constant
from .paths import is_contained
from .scaffold import Materializer, PluginScaffolder, ScaffoldStage
from .telemetry import NullTracker, Tracker
from .template import SubstitutionMap, SubstitutionRule, TokenSubstitutor, locate_template

__all__ = [
    "ArchiveError",
    "ArchiveFetcher",
    "ConfigurationError",
    "DestinationExistsError",
    "FetchError",
    "InvalidDestinationError",
    "MaterializationError",
    "Materializer",
    "NullTracker",
    "PluginScaffolder",
    "ScaffoldError",
    "ScaffoldRequest",
    "ScaffoldStage",
    "ScratchAreaError",
    "SubstitutionError",
    "SubstitutionMap",
    "SubstitutionRule",
    "TemplateNotFoundError",
    "TemplateSource",
    "TokenSubstitutor",
    "Tracker",
    "UnsafeEntryError",
    "camel_case",
    "extract_archive",
    "is_contained",
    "load_preferences",
    "locate_template",
    "pascal_snake_case",
    "save_preferences",
    "slugify",
    "version_constant",
]

__version__ = "0.1.0"
