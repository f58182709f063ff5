"""Committed patch log with capacity windowing and a pending batch."""

from __future__ import annotations

from typing import Optional, Tuple

from history_engine.runtime import telemetry

from .patches import HistoryPatches, PatchSet, compose_patch_sets


class HistoryLog:
    """Owns committed history plus the uncommitted (manual-archive) batch.

    The committed log never holds more than ``capacity`` entries; trimming
    drops the oldest. While the pending batch is non-empty it occupies one
    virtual slot at the tip of the visible log.
    """

    def __init__(self, capacity: int, initial: Optional[HistoryPatches] = None) -> None:
        self._capacity = capacity
        self._committed = initial.copy() if initial is not None else HistoryPatches()
        self._pending = HistoryPatches()
        self.trim()

    def __len__(self) -> int:
        return len(self._committed)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def committed(self) -> HistoryPatches:
        return self._committed

    @property
    def pending(self) -> HistoryPatches:
        return self._pending

    @property
    def has_pending(self) -> bool:
        return bool(self._pending.forward)

    def truncate(self, position: int) -> None:
        """Drop the stale future branch starting at ``position``."""

        del self._committed.forward[position:]
        del self._committed.inverse[position:]

    def append(self, forward: PatchSet, inverse: PatchSet) -> int:
        self._committed.forward.append(forward)
        self._committed.inverse.append(inverse)
        return self.trim()

    def trim(self) -> int:
        """Drop the oldest entries beyond capacity; return how many went."""

        excess = len(self._committed) - self._capacity
        if excess <= 0:
            return 0
        del self._committed.forward[:excess]
        del self._committed.inverse[:excess]
        return excess

    def stage(self, forward: PatchSet, inverse: PatchSet) -> None:
        self._pending.forward.append(forward)
        self._pending.inverse.append(inverse)

    def clear_pending(self) -> None:
        self._pending.forward.clear()
        self._pending.inverse.clear()

    def _composed_pending(self) -> Tuple[PatchSet, PatchSet]:
        forward = compose_patch_sets(self._pending.forward)
        inverse = compose_patch_sets(reversed(self._pending.inverse))
        return forward, inverse

    def consolidate(self) -> bool:
        """Commit the pending batch as a single entry."""

        if not self.has_pending:
            return False
        forward, inverse = self._composed_pending()
        self.clear_pending()
        self.append(forward, inverse)
        return True

    def visible(self) -> HistoryPatches:
        """Committed entries plus the virtual pending slot, windowed to capacity."""

        combined = self._committed.copy()
        if self.has_pending:
            forward, inverse = self._composed_pending()
            combined.forward.append(forward)
            combined.inverse.append(inverse)
        return combined.window(self._capacity)

    def visible_length(self) -> int:
        return min(len(self._committed) + int(self.has_pending), self._capacity)

    def restore(self, patches: HistoryPatches) -> None:
        self._committed = patches.copy()
        self.clear_pending()
        self.trim()


def normalize_patches(
    patches: Optional[HistoryPatches],
    capacity: int,
    *,
    logger_name: Optional[str] = None,
) -> Tuple[HistoryPatches, int]:
    """Validate a rehydration log and trim it to ``capacity``.

    Mismatched lengths are reported and cut to the shorter side. Returns the
    normalized copy and the number of oldest entries dropped by trimming.
    """

    if patches is None:
        return HistoryPatches(), 0

    normalized = patches.copy()
    if not normalized.aligned:
        telemetry.record_event(
            "history.options.invalid_log",
            level="error",
            data={
                "forward": len(normalized.forward),
                "inverse": len(normalized.inverse),
            },
            logger_name=logger_name,
        )
        size = min(len(normalized.forward), len(normalized.inverse))
        del normalized.forward[size:]
        del normalized.inverse[size:]

    dropped = max(0, len(normalized) - capacity)
    if dropped:
        normalized = normalized.window(capacity)
        telemetry.record_event(
            "history.options.trimmed_log",
            data={"dropped": dropped, "capacity": capacity},
            logger_name=logger_name,
        )
    return normalized, dropped


__all__ = ["HistoryLog", "normalize_patches"]
