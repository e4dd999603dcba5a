"""Usage tracking hooks invoked once a plugin has been created."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping

__all__ = ["NullTracker", "Tracker"]


class Tracker(ABC):
    """Sink for fire-and-forget usage events."""

    @abstractmethod
    def track(self, event: str, properties: Mapping[str, str]) -> None:
        """Record ``event``. Implementations must not block the scaffold run."""


class NullTracker(Tracker):
    """Tracker that discards every event."""

    def track(self, event: str, properties: Mapping[str, str]) -> None:
        return None
