"""Locate the boilerplate template and replace its placeholder tokens."""

from __future__ import annotations

import logging
import os
import re
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .config import ScaffoldRequest
from .errors import SubstitutionError, TemplateNotFoundError
from .naming import camel_case, pascal_snake_case, version_constant

__all__ = [
    "SubstitutionMap",
    "SubstitutionRule",
    "TokenSubstitutor",
    "locate_template",
]


LOGGER = logging.getLogger(__name__)

BOILERPLATE_PLUGIN_URI = "http://example.com/plugin-name-uri/"
BOILERPLATE_NAME = "WordPress Plugin Boilerplate"
BOILERPLATE_DESCRIPTION = (
    "This is a short description of what the plugin does. "
    "It's displayed in the WordPress admin area."
)
BOILERPLATE_AUTHOR = "Your Name or Your Company"
BOILERPLATE_DOMAIN = "http://example.com"
BOILERPLATE_AUTHOR_EMAIL = "Your Name <email@example.com>"


def locate_template(root: str | Path, marker: str) -> Path:
    """Return the shallowest directory below ``root`` named exactly ``marker``.

    Siblings are visited in name order, so when the archive holds more than
    one candidate the result is still deterministic.
    """

    root = Path(root)
    if not root.is_dir():
        raise TemplateNotFoundError(f"could not find '{marker}' directory in {root}")

    pending: deque[Path] = deque([root])
    while pending:
        directory = pending.popleft()
        try:
            children = sorted(entry for entry in directory.iterdir() if entry.is_dir())
        except OSError as exc:
            raise TemplateNotFoundError(f"could not read {directory}: {exc}") from exc
        for child in children:
            if child.name == marker:
                return child
        pending.extend(child for child in children if not child.is_symlink())

    raise TemplateNotFoundError(f"could not find '{marker}' directory in {root}")


@dataclass(frozen=True, slots=True)
class SubstitutionRule:
    """Replace every literal occurrence of ``pattern`` with ``replacement``."""

    pattern: str
    replacement: str

    def __post_init__(self) -> None:
        if not self.pattern:
            raise ValueError("substitution patterns must not be empty")


@dataclass(frozen=True, slots=True)
class SubstitutionMap:
    """Ordered literal replacements applied in a single left-to-right pass.

    At each position the earliest rule whose pattern matches wins, and
    scanning continues after the matched text. Values inserted by a rule are
    therefore never matched again by a later one.
    """

    rules: tuple[SubstitutionRule, ...]

    @classmethod
    def from_request(cls, request: ScaffoldRequest, *, marker: str = "plugin-name") -> "SubstitutionMap":
        """Build the boilerplate replacement rules for ``request``."""

        slug = request.plugin_slug
        snake_marker = marker.replace("-", "_")
        pairs = [
            (BOILERPLATE_PLUGIN_URI.replace("plugin-name", marker), request.plugin_url),
            (BOILERPLATE_NAME, request.plugin_name),
            (BOILERPLATE_DESCRIPTION, request.plugin_description),
            (BOILERPLATE_AUTHOR, request.author_name),
            (snake_marker, camel_case(slug)),
            (BOILERPLATE_DOMAIN, request.author_url),
            (marker, slug),
            (BOILERPLATE_AUTHOR_EMAIL, f"{request.author_name} <{request.author_email}>"),
            (pascal_snake_case(marker), pascal_snake_case(slug)),
            (f"{snake_marker.upper()}_VERSION", version_constant(slug)),
        ]
        return cls(tuple(SubstitutionRule(pattern, replacement) for pattern, replacement in pairs))

    def __iter__(self) -> Iterator[SubstitutionRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(rule.pattern for rule in self.rules)

    def apply(self, text: str) -> str:
        """Return ``text`` with every rule applied."""

        if not self.rules:
            return text
        lookup = {rule.pattern: rule.replacement for rule in reversed(self.rules)}
        expression = re.compile("|".join(re.escape(pattern) for pattern in self.patterns))
        return expression.sub(lambda match: lookup[match.group(0)], text)

    def apply_bytes(self, data: bytes, *, encoding: str = "utf-8") -> bytes:
        """Byte-level variant of :meth:`apply` that leaves undecodable content intact."""

        if not self.rules:
            return data
        encoded = [
            (rule.pattern.encode(encoding), rule.replacement.encode(encoding))
            for rule in self.rules
        ]
        lookup = dict(reversed(encoded))
        expression = re.compile(b"|".join(re.escape(pattern) for pattern, _ in encoded))
        return expression.sub(lambda match: lookup[match.group(0)], data)


@dataclass(slots=True)
class TokenSubstitutor:
    """Turn the located placeholder directory into the customised plugin tree."""

    marker: str = "plugin-name"

    def apply(self, template_dir: str | Path, request: ScaffoldRequest) -> Path:
        """Rename ``template_dir`` after the slug and rewrite everything inside it.

        Returns the renamed directory. Paths are renamed before any content is
        rewritten; content substitution then runs over the final file names.
        """

        template_dir = Path(template_dir)
        final_dir = template_dir.with_name(request.plugin_slug)
        if final_dir != template_dir:
            self._rename(template_dir, final_dir)

        self.rename_paths(final_dir, request.plugin_slug)
        substitutions = SubstitutionMap.from_request(request, marker=self.marker)
        for path in self._files(final_dir):
            self.rewrite_file(path, substitutions)
        return final_dir

    def rename_paths(self, directory: Path, slug: str) -> None:
        """Rename every file and directory below ``directory`` containing the marker."""

        for current, dirnames, filenames in os.walk(directory, topdown=False, onerror=_raise_walk_error):
            for name in [*filenames, *dirnames]:
                renamed = name.replace(self.marker, slug)
                if renamed == name:
                    continue
                source = Path(current) / name
                self._rename(source, source.with_name(renamed))

    def rewrite_file(self, path: Path, substitutions: SubstitutionMap) -> bool:
        """Apply ``substitutions`` to ``path`` in place; return whether it changed."""

        try:
            original = path.read_bytes()
        except OSError as exc:
            raise SubstitutionError(path, f"could not read file: {exc}") from exc

        updated = substitutions.apply_bytes(original)
        if updated == original:
            return False

        try:
            path.write_bytes(updated)
        except OSError as exc:
            raise SubstitutionError(path, f"could not write file: {exc}") from exc
        LOGGER.debug("Customized %s", path)
        return True

    def _rename(self, source: Path, target: Path) -> None:
        if target.exists() or target.is_symlink():
            raise SubstitutionError(source, f"cannot rename to {target.name}: target already exists")
        try:
            source.rename(target)
        except OSError as exc:
            raise SubstitutionError(source, f"could not rename to {target.name}: {exc}") from exc
        LOGGER.debug("Renamed %s -> %s", source, target)

    @staticmethod
    def _files(directory: Path) -> Iterable[Path]:
        for current, _dirnames, filenames in os.walk(directory, onerror=_raise_walk_error):
            for name in sorted(filenames):
                path = Path(current) / name
                if not path.is_symlink():
                    yield path


def _raise_walk_error(error: OSError) -> None:
    raise SubstitutionError(error.filename or "<unknown>", f"could not read directory: {error}")
