from __future__ import annotations

import stat
from pathlib import Path

import pytest

from wppb.errors import (
    DestinationExistsError,
    InvalidDestinationError,
    MaterializationError,
    ScratchAreaError,
)
from wppb.scaffold import Materializer, create_scratch_area, remove_scratch_area


@pytest.fixture()
def scratch(tmp_path: Path) -> Path:
    area = create_scratch_area(tmp_path)
    plugin = area / "repo" / "sample-plugin"
    (plugin / "includes").mkdir(parents=True)
    (plugin / "sample-plugin.php").write_text("<?php\n", encoding="utf-8")
    (plugin / "includes" / "class-sample-plugin.php").write_text("<?php\n", encoding="utf-8")
    return area


def test_materialize_copies_tree_and_removes_scratch(tmp_path: Path, scratch: Path):
    site = tmp_path / "site"
    site.mkdir()
    destination = site / "sample-plugin"

    result = Materializer().materialize(
        scratch / "repo" / "sample-plugin", destination, scratch=scratch
    )

    assert result == destination
    assert (destination / "sample-plugin.php").is_file()
    assert (destination / "includes" / "class-sample-plugin.php").is_file()
    assert not scratch.exists()


def test_materialize_restricts_permissions(tmp_path: Path, scratch: Path):
    destination = tmp_path / "sample-plugin"

    Materializer().materialize(scratch / "repo" / "sample-plugin", destination)

    mode = stat.S_IMODE(destination.stat().st_mode)
    assert mode & stat.S_IRWXU == stat.S_IRWXU
    assert mode & stat.S_IRWXO == 0


def test_existing_destination_is_never_overwritten(tmp_path: Path, scratch: Path):
    destination = tmp_path / "sample-plugin"
    destination.mkdir()
    (destination / "keep.txt").write_text("mine", encoding="utf-8")

    with pytest.raises(DestinationExistsError):
        Materializer().materialize(scratch / "repo" / "sample-plugin", destination, scratch=scratch)

    assert [path.name for path in destination.iterdir()] == ["keep.txt"]
    assert not scratch.exists()


def test_destination_outside_base_is_rejected(tmp_path: Path, scratch: Path):
    base = tmp_path / "site"
    base.mkdir()

    with pytest.raises(InvalidDestinationError):
        Materializer().materialize(
            scratch / "repo" / "sample-plugin", base / ".." / "escape", base=base
        )

    assert not (tmp_path / "escape").exists()


def test_copy_failure_keeps_partial_destination_and_cleans_scratch(tmp_path: Path, scratch: Path):
    destination = tmp_path / "sample-plugin"

    with pytest.raises(MaterializationError):
        Materializer().materialize(scratch / "repo" / "missing", destination, scratch=scratch)

    assert destination.is_dir()
    assert not scratch.exists()


def test_scratch_areas_are_unique(tmp_path: Path):
    first = create_scratch_area(tmp_path)
    second = create_scratch_area(tmp_path)

    assert first != second
    remove_scratch_area(first)
    remove_scratch_area(first)
    assert not first.exists()
    assert second.exists()


def test_scratch_area_failure_raises_scratch_area_error(tmp_path: Path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("file", encoding="utf-8")

    with pytest.raises(ScratchAreaError):
        create_scratch_area(blocker)


def test_relative_destination_is_checked_from_working_directory(
    tmp_path: Path, scratch: Path, monkeypatch: pytest.MonkeyPatch
):
    (tmp_path / "site").mkdir()
    monkeypatch.chdir(tmp_path)
    source = scratch / "repo" / "sample-plugin"

    with pytest.raises(InvalidDestinationError):
        Materializer().materialize(source, Path("site") / ".." / ".." / "escape", base=Path("site"))

    result = Materializer().materialize(source, Path("site") / "sample-plugin")

    assert (tmp_path / "site" / "sample-plugin" / "sample-plugin.php").is_file()
    assert result == Path("site") / "sample-plugin"
    assert not (tmp_path.parent / "escape").exists()
