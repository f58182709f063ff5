"""Serialization boundary for a controller's ``(value, patches, position)``."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping

from history_engine.history.patches import HistoryPatches

if TYPE_CHECKING:
    from history_engine.controller import HistoryController


@dataclass(frozen=True, slots=True)
class HistorySnapshot:
    """Everything needed to rebuild an equivalent controller."""

    value: Any
    patches: HistoryPatches = field(default_factory=HistoryPatches)
    position: int = 0

    @classmethod
    def capture(cls, controller: "HistoryController") -> "HistorySnapshot":
        return cls(
            value=copy.deepcopy(controller.get_state()),
            patches=copy.deepcopy(controller.get_patches()),
            position=controller.get_position(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": copy.deepcopy(self.value),
            "patches": copy.deepcopy(self.patches.to_dict()),
            "position": self.position,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistorySnapshot":
        if "state" not in data:
            raise ValueError("snapshot is missing 'state'")
        position = data.get("position", 0)
        if not isinstance(position, int) or isinstance(position, bool):
            raise ValueError(f"snapshot position must be an integer, got {position!r}")
        raw_patches = data.get("patches")
        patches = (
            HistoryPatches()
            if raw_patches is None
            else HistoryPatches.from_dict(raw_patches)
        )
        return cls(value=data["state"], patches=patches, position=position)

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, payload: str) -> "HistorySnapshot":
        return cls.from_dict(json.loads(payload))

    def restore(self, **options: Any) -> "HistoryController":
        """Build a controller resuming from this snapshot.

        ``options`` are forwarded to ``HistoryController``; rehydration
        options come from the snapshot itself.
        """

        from history_engine.controller import HistoryController

        return HistoryController.from_snapshot(self, **options)


__all__ = ["HistorySnapshot"]
