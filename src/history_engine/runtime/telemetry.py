"""telelog wiring for the history engine.

Loggers are configured once from ``HISTORY_ENGINE_*`` environment variables
and cached per name. Controller code only needs two entry points:
``record_event`` for diagnostics and ``span`` around each operation.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "HISTORY_ENGINE_"
DEFAULT_LOGGER_NAME = "history_engine"

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_CONFIG: Optional[Any] = None


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _build_config() -> Any:
    """Translate the environment into a ``telelog.Config``.

    ``LOG_LEVEL`` (default INFO), ``DISABLE_CONSOLE``, ``NO_COLOR``,
    ``LOG_JSON``, ``LOG_FILE`` and ``LOG_BUFFERED``/``LOG_BUFFER_SIZE`` are
    honored; profiling is always on so spans report timings.
    """

    config = tl.Config()
    config.with_min_level((env("LOG_LEVEL") or "INFO").upper())

    console = not env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not env_flag("NO_COLOR", False))

    if env_flag("LOG_JSON", False):
        config.with_json_format(True)

    log_file = env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)

    if env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(int(env("LOG_BUFFER_SIZE") or "2048"))

    config.with_profiling(True)
    return config


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached ``telelog.Logger`` for ``name``."""

    global _CONFIG
    logger_name = name or env("LOGGER") or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        if _CONFIG is None:
            _CONFIG = _build_config()
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _CONFIG)
    return _LOGGER_CACHE[logger_name]


def _pairs(data: Dict[str, Any]) -> List[Tuple[str, str]]:
    return [
        (str(key), value if isinstance(value, str) else repr(value))
        for key, value in data.items()
    ]


def _emit(log: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    structured = getattr(log, f"{level}_with", None)
    if structured is not None:
        structured(message, _pairs(data))
        return
    plain = getattr(log, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {data}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` at ``level`` with ``data`` as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), str(level).lower(), f"event::{name}", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[None]:
    """Profile the block as ``name``, tracked under ``component`` when given.

    ``metadata`` is attached as logger context while the block runs. An
    exception is logged as ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    context = {key: str(value) for key, value in (metadata or {}).items()}
    for key, value in context.items():
        log.add_context(key, value)

    try:
        with ExitStack() as stack:
            if component:
                stack.enter_context(log.track_component(component))
            stack.enter_context(log.profile(name))
            try:
                yield
            except Exception as exc:
                failure = {"span": name, **context, "reason": str(exc)}
                if component:
                    failure["component"] = component
                _emit(log, "error", "span::fail", failure)
                raise
    finally:
        for key in context:
            log.remove_context(key)


__all__ = ["env", "env_flag", "get_logger", "record_event", "span"]
