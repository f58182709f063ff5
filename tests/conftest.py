from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from history_engine.runtime import telemetry

Event = Tuple[str, str, Dict[str, Any]]


@pytest.fixture
def events(monkeypatch: pytest.MonkeyPatch) -> List[Event]:
    """Capture diagnostics emitted through ``telemetry.record_event``."""

    captured: List[Event] = []

    def record(
        name: str,
        *,
        level: str = "info",
        data: Optional[Dict[str, Any]] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        captured.append((name, str(level), dict(data or {})))

    monkeypatch.setattr(telemetry, "record_event", record)
    return captured

