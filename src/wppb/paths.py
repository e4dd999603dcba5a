"""Containment checks guarding every write the scaffolder performs."""

from __future__ import annotations

import os
from pathlib import Path

__all__ = ["is_contained"]


def is_contained(candidate: str | Path, base: str | Path) -> bool:
    """Return ``True`` when ``candidate`` resolves to ``base`` or somewhere below it.

    ``base`` must exist; it is canonicalised with symlinks resolved and an
    unresolvable base is treated as "not contained". ``candidate`` may point at a
    path that does not exist yet. Both paths are canonicalised on their own, so
    relative paths are taken from the process working directory; callers
    checking archive entries pass ``base / name``.
    """

    try:
        canonical_base = Path(base).resolve(strict=True)
        canonical_candidate = Path(candidate).resolve()
    except (OSError, RuntimeError):
        return False

    if canonical_candidate == canonical_base:
        return True
    prefix = str(canonical_base).rstrip(os.sep) + os.sep
    return str(canonical_candidate).startswith(prefix)
