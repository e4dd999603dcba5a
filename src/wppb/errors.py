"""Exception types raised while scaffolding a plugin."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "ArchiveError",
    "ConfigurationError",
    "DestinationExistsError",
    "FetchError",
    "InvalidDestinationError",
    "MaterializationError",
    "ScaffoldError",
    "ScratchAreaError",
    "SubstitutionError",
    "TemplateNotFoundError",
    "UnsafeEntryError",
]


class ScaffoldError(RuntimeError):
    """Base class for failures that abort a scaffold run.

    Every subclass names the pipeline ``stage`` it belongs to and the process
    ``exit_code`` the command line reports for it.
    """

    stage = "scaffold"
    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigurationError(ScaffoldError):
    """Raised when the request is unusable before any I/O takes place."""

    stage = "validating"
    exit_code = 2


class FetchError(ScaffoldError):
    """Raised when the boilerplate archive cannot be downloaded."""

    stage = "fetching"
    exit_code = 3


class ArchiveError(ScaffoldError):
    """Raised when the downloaded archive cannot be opened or extracted."""

    stage = "fetching"
    exit_code = 4


class UnsafeEntryError(ArchiveError):
    """Raised when an archive entry would be written outside the scratch area."""

    exit_code = 5

    def __init__(self, entry: str) -> None:
        super().__init__(f"archive entry '{entry}' escapes the extraction directory")
        self.entry = entry


class TemplateNotFoundError(ScaffoldError):
    """Raised when the placeholder directory is missing from the archive."""

    stage = "substituting"
    exit_code = 6


class SubstitutionError(ScaffoldError):
    """Raised when a template file cannot be renamed, read or rewritten."""

    stage = "substituting"
    exit_code = 7

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)


class DestinationExistsError(ScaffoldError):
    """Raised when the plugin directory is already present."""

    stage = "validating"
    exit_code = 8

    def __init__(self, path: str | Path) -> None:
        super().__init__(
            f"a folder named '{Path(path).name}' already exists in {Path(path).parent}"
        )
        self.path = Path(path)


class InvalidDestinationError(ScaffoldError):
    """Raised when the plugin directory would land outside its base directory."""

    stage = "validating"
    exit_code = 9

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"invalid destination path '{path}'")
        self.path = Path(path)


class MaterializationError(ScaffoldError):
    """Raised when the customised tree cannot be copied into place."""

    stage = "copying"
    exit_code = 10


class ScratchAreaError(ScaffoldError):
    """Raised when the per-run scratch directory cannot be created."""

    stage = "cleaning"
    exit_code = 11
