"""Plugin scaffolding pipeline.

A run moves through a fixed sequence of stages: the destination is validated
before anything touches the network, a fresh scratch directory receives the
downloaded boilerplate, the placeholder directory is customised in place, and
only the finished tree is copied to ``<cwd>/<slug>``. The scratch directory is
removed on the way out whatever happened.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from .config import ScaffoldRequest, TemplateSource
from .errors import (
    ConfigurationError,
    DestinationExistsError,
    InvalidDestinationError,
    MaterializationError,
    ScratchAreaError,
)
from .fetch import ArchiveFetcher
from .naming import is_valid_slug
from .paths import is_contained
from .telemetry import NullTracker, Tracker
from .template import TokenSubstitutor, locate_template

__all__ = [
    "Materializer",
    "PluginScaffolder",
    "ScaffoldStage",
    "check_destination",
    "create_scratch_area",
    "remove_scratch_area",
]


LOGGER = logging.getLogger(__name__)

DESTINATION_MODE = 0o750


class ScaffoldStage(str, Enum):
    """Stages a scaffold run passes through."""

    IDLE = "idle"
    VALIDATING = "validating"
    CLEANING = "cleaning"
    FETCHING = "fetching"
    SUBSTITUTING = "substituting"
    COPYING = "copying"
    DONE = "done"
    FAILED = "failed"


def create_scratch_area(root: str | Path | None = None) -> Path:
    """Create a new, uniquely named scratch directory for a single run."""

    try:
        return Path(tempfile.mkdtemp(prefix="wppb-", dir=root))
    except OSError as exc:
        raise ScratchAreaError(f"could not create a scratch directory: {exc}") from exc


def remove_scratch_area(path: str | Path) -> None:
    """Delete ``path`` recursively; failures are logged, never raised."""

    path = Path(path)
    if not path.exists():
        return
    try:
        shutil.rmtree(path)
    except OSError as exc:
        LOGGER.warning("Could not remove scratch directory %s: %s", path, exc)
    else:
        LOGGER.debug("Removed scratch directory %s", path)


@dataclass(slots=True)
class Materializer:
    """Copy a customised plugin tree into its final, previously absent location."""

    mode: int = DESTINATION_MODE

    def materialize(
        self,
        source_dir: str | Path,
        destination: str | Path,
        *,
        base: str | Path | None = None,
        scratch: str | Path | None = None,
    ) -> Path:
        """Create ``destination`` and copy the contents of ``source_dir`` into it.

        ``destination`` must resolve inside ``base`` (its parent by default) and
        must not exist yet. When ``scratch`` is given it is removed afterwards,
        whether or not the copy succeeded. A partially copied destination is
        left in place for inspection.
        """

        source_dir = Path(source_dir)
        destination = Path(destination)
        try:
            check_destination(destination, destination.parent if base is None else Path(base))
            try:
                destination.mkdir(mode=self.mode)
                destination.chmod(self.mode)
            except FileExistsError as exc:
                raise DestinationExistsError(destination) from exc
            except OSError as exc:
                raise MaterializationError(
                    f"failed to create destination directory {destination}: {exc}"
                ) from exc

            try:
                entries = sorted(source_dir.iterdir())
            except OSError as exc:
                raise MaterializationError(f"failed to read {source_dir}: {exc}") from exc

            for entry in entries:
                target = destination / entry.name
                try:
                    if entry.is_dir() and not entry.is_symlink():
                        shutil.copytree(entry, target, symlinks=True)
                    else:
                        shutil.copy2(entry, target, follow_symlinks=False)
                except OSError as exc:
                    raise MaterializationError(f"failed to copy {entry} to {target}: {exc}") from exc
        finally:
            if scratch is not None:
                remove_scratch_area(scratch)

        LOGGER.info("Created plugin directory %s", destination)
        return destination


def check_destination(destination: Path, base: Path) -> None:
    """Raise unless ``destination`` lies inside ``base`` and does not exist yet."""

    if not is_contained(destination, base):
        raise InvalidDestinationError(destination)
    if destination.exists() or destination.is_symlink():
        raise DestinationExistsError(destination)


@dataclass(slots=True)
class PluginScaffolder:
    """Run the download, customise and copy pipeline for one plugin."""

    cwd: Path
    source: TemplateSource = field(default_factory=TemplateSource)
    fetcher: ArchiveFetcher = field(default_factory=ArchiveFetcher)
    materializer: Materializer = field(default_factory=Materializer)
    tracker: Tracker = field(default_factory=NullTracker)
    progress: Callable[[str], None] | None = None
    scratch_root: Path | None = None
    state: ScaffoldStage = ScaffoldStage.IDLE
    history: list[ScaffoldStage] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.cwd = Path(self.cwd).expanduser().resolve()

    def destination_for(self, request: ScaffoldRequest) -> Path:
        """Return the directory the plugin described by ``request`` will occupy."""

        slug = request.plugin_slug
        if not isinstance(slug, str):
            raise ConfigurationError(f"plugin slug must be a string, got {type(slug).__name__}")
        return self.cwd / slug

    def validate(self, request: ScaffoldRequest) -> Path:
        """Check the destination for ``request`` without touching the network."""

        destination = self.destination_for(request)
        if not is_contained(destination, self.cwd):
            raise InvalidDestinationError(destination)
        if not is_valid_slug(request.plugin_slug):
            raise ConfigurationError(
                f"invalid plugin slug '{request.plugin_slug}': use lowercase letters, digits and hyphens"
            )
        check_destination(destination, self.cwd)
        return destination

    def create(self, request: ScaffoldRequest) -> Path:
        """Scaffold the plugin described by ``request`` and return its directory."""

        self.history = []
        self._enter(ScaffoldStage.VALIDATING)
        scratch: Path | None = None
        try:
            destination = self.validate(request)

            self._enter(ScaffoldStage.CLEANING, "Cleaning temporary directory...")
            scratch = create_scratch_area(self.scratch_root)

            self._enter(ScaffoldStage.FETCHING, "Downloading WordPress Plugin Boilerplate...")
            self.fetcher.fetch(self.source.url, scratch)

            self._enter(ScaffoldStage.SUBSTITUTING, "Customizing plugin files...")
            template_dir = locate_template(scratch / self.source.root_name, self.source.marker)
            plugin_dir = TokenSubstitutor(marker=self.source.marker).apply(template_dir, request)

            self._enter(ScaffoldStage.COPYING, "Creating plugin directory...")
            self.materializer.materialize(plugin_dir, destination, base=self.cwd, scratch=scratch)
        except Exception:
            failed_in = self.state
            self._enter(ScaffoldStage.FAILED)
            LOGGER.info("Scaffold failed while %s", failed_in.value)
            raise
        finally:
            if scratch is not None:
                remove_scratch_area(scratch)

        self._enter(ScaffoldStage.DONE)
        self._track(request, destination)
        return destination

    def _enter(self, stage: ScaffoldStage, message: str | None = None) -> None:
        self.state = stage
        self.history.append(stage)
        LOGGER.info("Stage: %s", stage.value)
        if message and self.progress is not None:
            self.progress(message)

    def _track(self, request: ScaffoldRequest, destination: Path) -> None:
        try:
            self.tracker.track(
                "plugin_created",
                {"plugin_slug": request.plugin_slug, "destination": str(destination)},
            )
        except Exception:
            LOGGER.warning("Usage tracking failed", exc_info=True)
