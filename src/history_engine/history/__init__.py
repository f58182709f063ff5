"""History log, position cursor, replay, and subscription primitives."""

from .cursor import PositionCursor
from .log import HistoryLog, normalize_patches
from .patches import (
    HistoryPatches,
    Patch,
    PatchSet,
    compose_patch_sets,
    is_root_replacement,
)
from .replay import HistoryReplayer
from .subscriptions import Listener, SubscriptionHub, Unsubscribe

__all__ = [
    "HistoryLog",
    "HistoryPatches",
    "HistoryReplayer",
    "Listener",
    "Patch",
    "PatchSet",
    "PositionCursor",
    "SubscriptionHub",
    "Unsubscribe",
    "compose_patch_sets",
    "is_root_replacement",
    "normalize_patches",
]
