"""Command line interface for scaffolding WordPress plugins."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Mapping, Sequence

from pydantic import ValidationError

from .config import ScaffoldRequest, TemplateSource, load_preferences, save_preferences
from .errors import ConfigurationError, ScaffoldError
from .fetch import ArchiveFetcher
from .naming import slugify
from .scaffold import PluginScaffolder

LOGGER = logging.getLogger(__name__)

PLUGINS_DIRECTORY_NAME = "wp-plugins"

_FIELDS = (
    ("plugin_name", "name", "Display name of the plugin, e.g. 'Sample Plugin'"),
    ("plugin_slug", "slug", "Lowercase hyphenated slug; derived from --name when omitted"),
    ("plugin_url", "plugin_url", "URL of the plugin"),
    ("author_name", "author_name", "Name of the author"),
    ("author_email", "author_email", "Email of the author"),
    ("author_url", "author_url", "URL of the author"),
    ("plugin_description", "description", "Short description of the plugin"),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wppb", description="Scaffold WordPress plugins from the WordPress Plugin Boilerplate"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log output (repeat for debug messages)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    new_parser = subparsers.add_parser("new", help="create a new WordPress plugin boilerplate")
    for _field, option, help_text in _FIELDS:
        new_parser.add_argument(f"--{option.replace('_', '-')}", dest=option, help=help_text)
    new_parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        default=Path.cwd(),
        help="Directory in which the plugin folder is created",
    )
    new_parser.add_argument(
        "--source-url",
        default=TemplateSource().url,
        help="Location of the boilerplate zip archive",
    )
    new_parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Seconds to wait for the archive download",
    )
    new_parser.add_argument(
        "--config",
        type=Path,
        help="Preference file holding author defaults (default: ~/.wppb-cli)",
    )
    new_parser.add_argument(
        "--no-save",
        action="store_true",
        help="Do not remember the author details for the next run",
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_request(args: argparse.Namespace, defaults: Mapping[str, str]) -> ScaffoldRequest:
    """Combine command line values with preference defaults into a request."""

    values: dict[str, str] = {}
    for field_name, option, _help in _FIELDS:
        value = getattr(args, option, None)
        if value is None:
            value = defaults.get(field_name)
        if value is not None:
            values[field_name] = value

    if "plugin_slug" not in values and values.get("plugin_name"):
        values["plugin_slug"] = slugify(values["plugin_name"])

    missing = [
        f"--{option.replace('_', '-')}" for field_name, option, _help in _FIELDS if field_name not in values
    ]
    if missing:
        raise ConfigurationError(f"missing required options: {', '.join(missing)}")

    try:
        return ScaffoldRequest.model_validate(values)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ConfigurationError(problems) from exc


def _handle_new(args: argparse.Namespace) -> int:
    preferences = load_preferences(args.config)
    request = build_request(args, preferences)

    directory = args.directory.expanduser()
    if directory.name != PLUGINS_DIRECTORY_NAME:
        LOGGER.warning(
            "%s does not look like the WordPress plugin directory; continuing", directory
        )

    scaffolder = PluginScaffolder(
        cwd=directory,
        source=TemplateSource(url=args.source_url),
        fetcher=ArchiveFetcher(timeout=args.timeout),
        progress=print,
    )
    scaffolder.create(request)

    if not args.no_save:
        try:
            save_preferences(request.model_dump(), args.config)
        except OSError as exc:
            LOGGER.warning("Could not save author defaults: %s", exc)

    slug = request.plugin_slug
    print(f"Plugin created successfully in: {slug}")
    print("Next steps:")
    print(f" - Navigate to the plugin directory: cd {slug}")
    print(
        f" - Activate the plugin: wp plugin activate {slug} or directly in the WordPress admin"
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        if args.command == "new":
            return _handle_new(args)
    except ScaffoldError as exc:
        print(f"Error ({exc.stage}): {exc}", file=sys.stderr)
        return exc.exit_code
    parser.error("no command provided")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
