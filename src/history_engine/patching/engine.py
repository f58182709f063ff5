"""Patch engine boundary and the default JSON-patch implementation."""

from __future__ import annotations

import copy
from typing import Any, Protocol, Sequence, Tuple

import jsonpatch

from history_engine.edits import Compute, Edit, Mutate, Replace
from history_engine.history.patches import Patch, PatchSet


class PatchEngine(Protocol):
    """Contract the controller relies on for diffing and applying edits."""

    def diff(self, value: Any, edit: Edit) -> Tuple[Any, PatchSet, PatchSet]:
        """Return ``(new_value, forward, inverse)`` for ``edit`` against ``value``."""
        ...

    def apply(
        self, value: Any, patches: Sequence[Patch], *, in_place: bool = False
    ) -> Any:
        """Return ``value`` after ``patches``; mutate it when ``in_place``."""
        ...


class JsonPatchEngine:
    """RFC 6902 engine backed by ``jsonpatch``.

    Both directions are produced with ``jsonpatch.make_patch``. Patch values
    are deep-copied on the way out of ``diff`` and on the way into ``apply``
    so recorded history never aliases a live value.
    """

    def produce(self, value: Any, edit: Edit) -> Any:
        if isinstance(edit, Replace):
            return edit.value
        if isinstance(edit, Compute):
            return edit.fn()
        if isinstance(edit, Mutate):
            draft = copy.deepcopy(value)
            result = edit.fn(draft)
            return draft if result is None else result
        raise TypeError(f"Unsupported edit {type(edit).__name__}")

    def diff(self, value: Any, edit: Edit) -> Tuple[Any, PatchSet, PatchSet]:
        new_value = self.produce(value, edit)
        forward = _patch_list(jsonpatch.make_patch(value, new_value))
        inverse = _patch_list(jsonpatch.make_patch(new_value, value))
        return new_value, forward, inverse

    def apply(
        self, value: Any, patches: Sequence[Patch], *, in_place: bool = False
    ) -> Any:
        return jsonpatch.apply_patch(
            value, copy.deepcopy(list(patches)), in_place=in_place
        )


def _patch_list(patch: jsonpatch.JsonPatch) -> PatchSet:
    return copy.deepcopy(list(patch.patch))


__all__ = ["JsonPatchEngine", "PatchEngine"]
