"""On-demand reconstruction of every reachable state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from .patches import HistoryPatches

if TYPE_CHECKING:
    from history_engine.patching.engine import PatchEngine


class HistoryReplayer:
    """Replays the visible log outward from the current value.

    The result is memoized until ``invalidate`` is called.
    """

    def __init__(self, engine: "PatchEngine") -> None:
        self._engine = engine
        self._cache: Optional[Tuple[Any, ...]] = None

    @property
    def cached(self) -> bool:
        return self._cache is not None

    def invalidate(self) -> None:
        self._cache = None

    def history(
        self, value: Any, patches: HistoryPatches, position: int
    ) -> Tuple[Any, ...]:
        if self._cache is None:
            self._cache = self._replay(value, patches, position)
        return self._cache

    def _replay(
        self, value: Any, patches: HistoryPatches, position: int
    ) -> Tuple[Any, ...]:
        future: List[Any] = [value]
        current = value
        for index in range(position, len(patches.forward)):
            current = self._engine.apply(current, patches.forward[index])
            future.append(current)

        past: List[Any] = []
        current = value
        for index in range(position - 1, -1, -1):
            current = self._engine.apply(current, patches.inverse[index])
            past.append(current)
        past.reverse()

        return tuple(past + future)


__all__ = ["HistoryReplayer"]
