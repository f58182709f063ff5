"""Reversible, navigable state history built on JSON patches."""

from .controller import (
    HistoryController,
    HistoryControls,
    ManualHistoryControls,
    create_history,
)
from .edits import Compute, Edit, Mutate, Replace, resolve_edit
from .history import HistoryPatches, Patch, PatchSet
from .options import DEFAULT_MAX_HISTORY, HistoryConfigError, HistoryOptions
from .patching import JsonPatchEngine, PatchEngine
from .persistence import HistorySnapshot

__all__ = [
    "Compute",
    "DEFAULT_MAX_HISTORY",
    "Edit",
    "HistoryConfigError",
    "HistoryController",
    "HistoryControls",
    "HistoryOptions",
    "HistoryPatches",
    "HistorySnapshot",
    "JsonPatchEngine",
    "ManualHistoryControls",
    "Mutate",
    "Patch",
    "PatchEngine",
    "PatchSet",
    "Replace",
    "create_history",
    "resolve_edit",
]

__version__ = "0.1.0"
