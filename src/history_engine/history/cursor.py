"""Position tracking into the visible history log."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class PositionCursor:
    """Count of forward sets applied from the oldest retained state."""

    position: int = 0

    @staticmethod
    def clamp(target: int, upper: int) -> Tuple[int, bool]:
        """Clamp ``target`` into ``[0, upper]``; report whether it moved."""

        bounded = max(0, min(target, upper))
        return bounded, bounded != target

    def advance(self, capacity: int) -> int:
        self.position = min(self.position + 1, capacity)
        return self.position

    def remap(self, dropped: int, upper: int) -> bool:
        """Shift left by ``dropped`` trimmed entries, clamped into range."""

        self.position, clamped = self.clamp(self.position - dropped, upper)
        return clamped


__all__ = ["PositionCursor"]
