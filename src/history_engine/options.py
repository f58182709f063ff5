"""Construction options for ``HistoryController``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from history_engine.history.patches import HistoryPatches
from history_engine.runtime.telemetry import env, env_flag

DEFAULT_MAX_HISTORY = 10


class HistoryConfigError(ValueError):
    """Raised when construction options cannot be used."""

    def __init__(self, message: str, *, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


@dataclass(frozen=True, slots=True)
class HistoryOptions:
    """Validated controller options.

    ``initial_patches`` accepts a ``HistoryPatches`` or its mapping form
    (``{"patches": [...], "inversePatches": [...]}``).
    """

    max_history: int = DEFAULT_MAX_HISTORY
    initial_position: int = 0
    initial_patches: Optional[HistoryPatches] = None
    auto_archive: bool = True
    mutable: bool = False

    def __post_init__(self) -> None:
        if not _is_int(self.max_history):
            raise HistoryConfigError(
                f"maxHistory must be an integer, but got {self.max_history!r}",
                option="max_history",
            )
        if self.max_history < 0:
            raise HistoryConfigError(
                f"maxHistory must be non-negative, but got {self.max_history}",
                option="max_history",
            )
        if not _is_int(self.initial_position):
            raise HistoryConfigError(
                f"initialPosition must be an integer, but got {self.initial_position!r}",
                option="initial_position",
            )
        object.__setattr__(
            self, "initial_patches", _coerce_patches(self.initial_patches)
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> "HistoryOptions":
        """Build options from ``HISTORY_ENGINE_*`` variables, then ``overrides``."""

        values: dict[str, Any] = {}
        raw_max = env("MAX_HISTORY")
        if raw_max is not None:
            try:
                values["max_history"] = int(raw_max)
            except ValueError as exc:
                raise HistoryConfigError(
                    f"HISTORY_ENGINE_MAX_HISTORY must be an integer, got {raw_max!r}",
                    option="max_history",
                ) from exc
        values["auto_archive"] = env_flag("AUTO_ARCHIVE", True)
        values["mutable"] = env_flag("MUTABLE", False)
        values.update(overrides)
        return cls(**values)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce_patches(value: Any) -> Optional[HistoryPatches]:
    if value is None or isinstance(value, HistoryPatches):
        return value
    if isinstance(value, Mapping):
        try:
            return HistoryPatches.from_dict(value)
        except ValueError as exc:
            raise HistoryConfigError(str(exc), option="initial_patches") from exc
    raise HistoryConfigError(
        f"initialPatches must be HistoryPatches or a mapping, got {type(value).__name__}",
        option="initial_patches",
    )


__all__ = ["DEFAULT_MAX_HISTORY", "HistoryConfigError", "HistoryOptions"]
