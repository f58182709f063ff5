"""Patch-set containers shared by the log, replayer, and controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence

Patch = Dict[str, Any]  # one RFC 6902 operation
PatchSet = List[Patch]

_ROOT_OPS = frozenset({"replace", "add"})


def replaces_root(patch: Mapping[str, Any]) -> bool:
    return patch.get("path") == "" and patch.get("op") in _ROOT_OPS


def is_root_replacement(patch_set: Iterable[Mapping[str, Any]]) -> bool:
    """True when any operation in ``patch_set`` swaps out the whole value."""

    return any(replaces_root(patch) for patch in patch_set)


def compose_patch_sets(patch_sets: Iterable[Sequence[Patch]]) -> PatchSet:
    """Concatenate ``patch_sets`` into one set applied in the given order.

    Operations before the last full-root replacement are overwritten by it and
    are dropped from the result.
    """

    combined = [patch for patch_set in patch_sets for patch in patch_set]
    for index in range(len(combined) - 1, -1, -1):
        if replaces_root(combined[index]):
            return combined[index:]
    return combined


@dataclass(slots=True)
class HistoryPatches:
    """Forward and inverse patch sets, index-aligned."""

    forward: List[PatchSet] = field(default_factory=list)
    inverse: List[PatchSet] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.forward)

    @property
    def aligned(self) -> bool:
        return len(self.forward) == len(self.inverse)

    def copy(self) -> "HistoryPatches":
        return HistoryPatches(
            forward=[list(patch_set) for patch_set in self.forward],
            inverse=[list(patch_set) for patch_set in self.inverse],
        )

    def window(self, capacity: int) -> "HistoryPatches":
        """Return a copy holding only the newest ``capacity`` entries."""

        if capacity <= 0:
            return HistoryPatches()
        if len(self.forward) <= capacity:
            return self.copy()
        return HistoryPatches(
            forward=[list(patch_set) for patch_set in self.forward[-capacity:]],
            inverse=[list(patch_set) for patch_set in self.inverse[-capacity:]],
        )

    def to_dict(self) -> Dict[str, List[PatchSet]]:
        return {
            "patches": [list(patch_set) for patch_set in self.forward],
            "inversePatches": [list(patch_set) for patch_set in self.inverse],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryPatches":
        if "patches" in data or "inversePatches" in data:
            forward = data.get("patches")
            inverse = data.get("inversePatches")
        else:
            forward = data.get("forward")
            inverse = data.get("inverse")
        if not isinstance(forward, list) or not isinstance(inverse, list):
            raise ValueError(
                "history patches need list-valued 'patches' and 'inversePatches'"
            )
        for patch_set in (*forward, *inverse):
            if not isinstance(patch_set, list):
                raise ValueError("every patch set must be a list of operations")
        return cls(
            forward=[list(patch_set) for patch_set in forward],
            inverse=[list(patch_set) for patch_set in inverse],
        )


__all__ = [
    "Patch",
    "PatchSet",
    "HistoryPatches",
    "compose_patch_sets",
    "is_root_replacement",
    "replaces_root",
]
