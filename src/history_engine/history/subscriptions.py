"""Listener registry notified after every state-affecting operation."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from history_engine.runtime import telemetry

from .patches import HistoryPatches

Listener = Callable[[Any, HistoryPatches, int], None]
Unsubscribe = Callable[[], None]


class SubscriptionHub:
    """Synchronous fan-out in registration order.

    A listener that raises is reported and skipped; the rest still run.
    """

    def __init__(self, *, logger_name: Optional[str] = None) -> None:
        self._listeners: List[Listener] = []
        self._logger_name = logger_name
        self._notifying = False

    def __len__(self) -> int:
        return len(self._listeners)

    @property
    def notifying(self) -> bool:
        return self._notifying

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register ``listener`` and return a callable that removes it.

        Registrations are keyed by the listener itself: subscribing the same
        callable again is ignored, and every returned ``unsubscribe`` removes
        that single registration. Callers sharing a listener share its
        lifetime; wrap it in a distinct callable to unsubscribe independently.
        """

        if not callable(listener):
            raise TypeError("listener must be callable")
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, value: Any, patches: HistoryPatches, position: int) -> None:
        self._notifying = True
        try:
            for listener in list(self._listeners):
                try:
                    listener(value, patches, position)
                except Exception as exc:
                    telemetry.record_event(
                        "history.listener.failed",
                        level="error",
                        data={
                            "listener": getattr(listener, "__qualname__", repr(listener)),
                            "error": f"{type(exc).__name__}: {exc}",
                        },
                        logger_name=self._logger_name,
                    )
        finally:
            self._notifying = False


__all__ = ["Listener", "SubscriptionHub", "Unsubscribe"]
