"""Download the boilerplate archive and unpack it safely."""

from __future__ import annotations

import logging
import os
import tempfile
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from .errors import ArchiveError, FetchError, UnsafeEntryError
from .paths import is_contained

__all__ = ["ArchiveFetcher", "extract_archive"]


LOGGER = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def extract_archive(archive_path: str | Path, destination: str | Path) -> list[str]:
    """Extract ``archive_path`` into ``destination`` and return the entry names.

    Every entry is checked before anything is written, so an archive holding a
    single escaping entry leaves ``destination`` untouched.
    """

    destination = Path(destination)
    try:
        destination.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path) as archive:
            names = archive.namelist()
            for name in names:
                if not is_contained(destination / name, destination):
                    raise UnsafeEntryError(name)
            archive.extractall(destination)
    except zipfile.BadZipFile as exc:
        raise ArchiveError(f"failed to open the zip file: {exc}") from exc
    except (zlib.error, EOFError, NotImplementedError) as exc:
        raise ArchiveError(f"corrupt zip file member: {exc}") from exc
    except OSError as exc:
        raise ArchiveError(f"failed to extract the zip file: {exc}") from exc
    return names


@dataclass(slots=True)
class ArchiveFetcher:
    """Fetch a zip archive over HTTP(S) and extract it into a scratch directory."""

    client: httpx.Client | None = None
    timeout: float = 60.0
    headers: dict[str, str] = field(default_factory=lambda: {"User-Agent": "wppb-cli"})

    def fetch(self, url: str, scratch_dir: str | Path) -> None:
        """Download ``url`` and unpack it into ``scratch_dir``."""

        scratch_dir = Path(scratch_dir)
        try:
            handle, name = tempfile.mkstemp(prefix="wppb-", suffix=".zip")
        except OSError as exc:
            raise FetchError(f"could not create a temporary file for the download: {exc}") from exc
        os.close(handle)
        archive_path = Path(name)
        try:
            self._download(url, archive_path)
            entries = extract_archive(archive_path, scratch_dir)
            LOGGER.debug("Extracted %d entries into %s", len(entries), scratch_dir)
        finally:
            try:
                archive_path.unlink(missing_ok=True)
            except OSError as exc:
                LOGGER.warning("Could not remove downloaded archive %s: %s", archive_path, exc)

    def _download(self, url: str, target: Path) -> int:
        client = self.client or httpx.Client(timeout=self.timeout, follow_redirects=True)
        written = 0
        received = 0
        try:
            with client.stream("GET", url, headers=self.headers) as response:
                response.raise_for_status()
                expected = response.headers.get("Content-Length")
                with target.open("wb") as stream:
                    for chunk in response.iter_bytes(_CHUNK_SIZE):
                        stream.write(chunk)
                        written += len(chunk)
                received = response.num_bytes_downloaded
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"failed to download {url}: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"failed to download {url}: {exc}") from exc
        except OSError as exc:
            raise FetchError(f"failed to write the zip file {target}: {exc}") from exc
        finally:
            if self.client is None:
                client.close()

        if written == 0:
            raise FetchError(f"failed to download {url}: empty response")
        if expected is not None and expected.isdigit() and int(expected) != received:
            raise FetchError(
                f"failed to download {url}: expected {expected} bytes, received {received}"
            )
        LOGGER.info("Downloaded %d bytes from %s", written, url)
        return written
