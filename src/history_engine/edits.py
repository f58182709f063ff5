"""Edit descriptions accepted by ``HistoryController.set_state``."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Union


@dataclass(frozen=True, slots=True)
class Replace:
    """Swap the whole value for ``value``."""

    value: Any


@dataclass(frozen=True, slots=True)
class Compute:
    """Call ``fn()`` and use its result as the replacement value."""

    fn: Callable[[], Any]

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise TypeError("Compute requires a callable")


@dataclass(frozen=True, slots=True)
class Mutate:
    """Call ``fn(draft)`` on a writable copy of the current value.

    A non-``None`` return value replaces the draft.
    """

    fn: Callable[[Any], Any]

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise TypeError("Mutate requires a callable")


Edit = Union[Replace, Compute, Mutate]


def resolve_edit(edit: object) -> Edit:
    """Normalize a raw ``set_state`` argument into an ``Edit``.

    Callables taking no required positional argument become ``Compute``,
    other callables ``Mutate``; anything else is a ``Replace``. Wrap a
    callable in ``Replace`` explicitly to store the callable itself.
    """

    if isinstance(edit, (Replace, Compute, Mutate)):
        return edit
    if callable(edit):
        return Compute(edit) if _takes_no_arguments(edit) else Mutate(edit)
    return Replace(edit)


def _takes_no_arguments(fn: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return False
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return False
        if (
            parameter.kind
            in (
                inspect.Parameter.POSITIONAL_ONLY,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
            )
            and parameter.default is inspect.Parameter.empty
        ):
            return False
    return True


__all__ = ["Compute", "Edit", "Mutate", "Replace", "resolve_edit"]
