"""State controller: the public undo/redo façade."""

from __future__ import annotations

import copy
import dataclasses
from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

from history_engine.edits import Mutate, resolve_edit
from history_engine.history import (
    HistoryLog,
    HistoryPatches,
    HistoryReplayer,
    Listener,
    PositionCursor,
    SubscriptionHub,
    Unsubscribe,
    is_root_replacement,
    normalize_patches,
)
from history_engine.options import HistoryOptions
from history_engine.patching import (
    JsonPatchEngine,
    PatchEngine,
    assign_in_place,
    is_composite,
    same_composite_shape,
)
from history_engine.persistence import HistorySnapshot
from history_engine.runtime import telemetry

_Deferred = Tuple[str, Callable[..., None], Tuple[Any, ...]]


class HistoryController:
    """Owns a live value and its navigable patch history.

    Every public state-changing call runs to completion, then notifies
    subscribers with ``(value, visible patches, position)``. Calls made from
    inside a listener are queued and run after the current notification round.
    """

    def __init__(
        self,
        initial_value: Any,
        options: Optional[HistoryOptions] = None,
        *,
        engine: Optional[PatchEngine] = None,
        logger_name: Optional[str] = None,
        **overrides: Any,
    ) -> None:
        if options is None:
            options = HistoryOptions(**overrides)
        elif overrides:
            options = dataclasses.replace(options, **overrides)

        self._options = options
        self._engine: PatchEngine = engine or JsonPatchEngine()
        self._logger_name = logger_name

        patches, dropped = normalize_patches(
            options.initial_patches, options.max_history, logger_name=logger_name
        )
        self._log = HistoryLog(options.max_history, patches)
        self._cursor = PositionCursor(options.initial_position)
        if self._cursor.remap(dropped, len(self._log)):
            self._record(
                "history.position.clamped",
                level="warning",
                requested=options.initial_position,
                position=self._cursor.position,
            )

        self._state = initial_value
        self._initial_value = (
            copy.deepcopy(initial_value) if options.mutable else initial_value
        )
        self._initial_patches = self._log.committed.copy()
        self._initial_position = self._cursor.position

        self._hub = SubscriptionHub(logger_name=logger_name)
        self._replayer = HistoryReplayer(self._engine)
        self._deferred: Deque[_Deferred] = deque()
        self._fallback_noticed = False

    @classmethod
    def from_snapshot(
        cls, snapshot: HistorySnapshot, **kwargs: Any
    ) -> "HistoryController":
        return cls(
            copy.deepcopy(snapshot.value),
            initial_patches=snapshot.patches,
            initial_position=snapshot.position,
            **kwargs,
        )

    @property
    def options(self) -> HistoryOptions:
        return self._options

    @property
    def mutable(self) -> bool:
        return self._options.mutable

    @property
    def auto_archive(self) -> bool:
        return self._options.auto_archive

    @property
    def max_history(self) -> int:
        return self._options.max_history

    # -- queries -----------------------------------------------------------

    def get_state(self) -> Any:
        return self._state

    def get_position(self) -> int:
        return self._cursor.position

    def get_patches(self) -> HistoryPatches:
        return self._log.visible()

    def get_history(self) -> Tuple[Any, ...]:
        return self._replayer.history(
            self._state, self._log.visible(), self._cursor.position
        )

    def can_back(self) -> bool:
        return self._cursor.position > 0

    def can_forward(self) -> bool:
        return not self._log.has_pending and self._cursor.position < len(self._log)

    def can_archive(self) -> bool:
        return not self.auto_archive and self._log.has_pending

    def subscribe(self, listener: Listener) -> Unsubscribe:
        return self._hub.subscribe(listener)

    def snapshot(self) -> HistorySnapshot:
        return HistorySnapshot.capture(self)

    def get_controls(self) -> "HistoryControls":
        if self.auto_archive:
            return HistoryControls(self)
        return ManualHistoryControls(self)

    # -- operations --------------------------------------------------------

    def set_state(self, edit: Any) -> None:
        self._run("set_state", self._set_state, edit)

    def archive(self) -> None:
        self._run("archive", self._archive)

    def go(self, position: int) -> None:
        self._run("go", self._go, position)

    def back(self, amount: int = 1) -> None:
        self._run("back", self._step, -amount)

    def forward(self, amount: int = 1) -> None:
        self._run("forward", self._step, amount)

    def reset(self) -> None:
        self._run("reset", self._reset)

    def _run(self, name: str, operation: Callable[..., None], *args: Any) -> None:
        if self._hub.notifying:
            self._record("history.reentrant.deferred", level="debug", operation=name)
            self._deferred.append((name, operation, args))
            return
        try:
            self._execute(name, operation, args)
        except Exception:
            self._deferred.clear()
            raise
        while self._deferred:
            queued_name, queued_operation, queued_args = self._deferred.popleft()
            try:
                self._execute(queued_name, queued_operation, queued_args)
            except Exception as exc:
                # Listener-queued work never fails the outer call.
                self._record(
                    "history.reentrant.failed",
                    level="error",
                    operation=queued_name,
                    error=f"{type(exc).__name__}: {exc}",
                )

    def _execute(
        self, name: str, operation: Callable[..., None], args: Tuple[Any, ...]
    ) -> None:
        with telemetry.span(
            f"history::{name}",
            logger_name=self._logger_name,
            component="history",
            metadata={"position": self._cursor.position},
        ):
            operation(*args)

    def _set_state(self, raw_edit: Any) -> None:
        edit = resolve_edit(raw_edit)
        current = self._state
        new_value, forward, inverse = self._engine.diff(current, edit)
        if not forward and not inverse:
            return

        if not self.mutable:
            self._state = new_value
        elif isinstance(edit, Mutate):
            if is_composite(current) and not is_root_replacement(forward):
                self._state = self._engine.apply(current, forward, in_place=True)
            else:
                self._notice_fallback("mutation replaced the root value")
                self._state = new_value
        elif same_composite_shape(current, new_value):
            self._state = assign_in_place(current, new_value)
        else:
            self._notice_fallback("replacement shape differs from the live value")
            self._state = copy.deepcopy(new_value)

        log = self._log
        position = self._cursor.position
        if self.auto_archive:
            if position < len(log):
                log.truncate(position)
            log.append(forward, inverse)
            self._cursor.advance(log.capacity)
        else:
            truncated = position < log.visible_length()
            if truncated:
                log.truncate(position)
                log.clear_pending()
            if truncated or not log.has_pending:
                self._cursor.advance(log.capacity)
            log.stage(forward, inverse)

        self._changed()

    def _archive(self) -> None:
        if self.auto_archive:
            self._record("history.archive.auto_mode", level="warning")
            return
        if self._log.consolidate():
            self._changed()

    def _step(self, delta: int) -> None:
        self._go(self._cursor.position + delta)

    def _go(self, target: int) -> None:
        if self._log.has_pending:
            self._archive()

        position = self._cursor.position
        bounded, clamped = PositionCursor.clamp(target, len(self._log))
        if clamped:
            self._record(
                "history.position.clamped",
                level="warning",
                requested=target,
                position=bounded,
            )
        if bounded == position:
            return

        committed = self._log.committed
        if bounded < position:
            patch_sets = [committed.inverse[i] for i in range(position - 1, bounded - 1, -1)]
        else:
            patch_sets = [committed.forward[i] for i in range(position, bounded)]
        patches = [patch for patch_set in patch_sets for patch in patch_set]

        in_place = (
            self.mutable
            and is_composite(self._state)
            and not any(is_root_replacement(patch_set) for patch_set in patch_sets)
        )
        if self.mutable and not in_place:
            self._notice_fallback("navigation replaced the root value")
        self._state = self._engine.apply(self._state, patches, in_place=in_place)

        self._cursor.position = bounded
        self._changed()

    def _reset(self) -> None:
        self._log.restore(self._initial_patches)
        self._cursor.position = self._initial_position

        if not self.mutable:
            self._state = self._initial_value
        elif same_composite_shape(self._state, self._initial_value):
            assign_in_place(self._state, self._initial_value)
        else:
            self._notice_fallback("reset target shape differs from the live value")
            self._state = copy.deepcopy(self._initial_value)

        self._changed()

    def _changed(self) -> None:
        self._replayer.invalidate()
        self._hub.notify(self._state, self._log.visible(), self._cursor.position)

    def _notice_fallback(self, reason: str) -> None:
        if self._fallback_noticed:
            return
        self._fallback_noticed = True
        self._record("history.mutable.fallback", level="warning", reason=reason)

    def _record(self, event: str, *, level: str = "info", **data: Any) -> None:
        telemetry.record_event(
            event, level=level, data=data, logger_name=self._logger_name
        )


class HistoryControls:
    """Navigation surface handed to presentation code.

    ``position`` and ``patches`` are re-read from the controller on every
    access; this object holds no state of its own, so consumers needing
    change detection must re-read it or subscribe to the controller.
    """

    __slots__ = ("_controller",)

    def __init__(self, controller: HistoryController) -> None:
        self._controller = controller

    @property
    def position(self) -> int:
        return self._controller.get_position()

    @property
    def patches(self) -> HistoryPatches:
        return self._controller.get_patches()

    def get_history(self) -> Tuple[Any, ...]:
        return self._controller.get_history()

    def back(self, amount: int = 1) -> None:
        self._controller.back(amount)

    def forward(self, amount: int = 1) -> None:
        self._controller.forward(amount)

    def go(self, position: int) -> None:
        self._controller.go(position)

    def reset(self) -> None:
        self._controller.reset()

    def can_back(self) -> bool:
        return self._controller.can_back()

    def can_forward(self) -> bool:
        return self._controller.can_forward()


class ManualHistoryControls(HistoryControls):
    """Controls for manual-archive controllers."""

    __slots__ = ()

    def archive(self) -> None:
        self._controller.archive()

    def can_archive(self) -> bool:
        return self._controller.can_archive()


def create_history(
    initial_value: Any,
    options: Optional[HistoryOptions] = None,
    **kwargs: Any,
) -> HistoryController:
    """Build a ``HistoryController``; keyword options mirror ``HistoryOptions``."""

    return HistoryController(initial_value, options, **kwargs)


__all__ = [
    "HistoryController",
    "HistoryControls",
    "ManualHistoryControls",
    "create_history",
]
