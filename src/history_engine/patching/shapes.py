"""Shape classification for the mutable write path."""

from __future__ import annotations

import copy
from typing import Any, Literal

Shape = Literal["record", "array", "primitive", "foreign"]

_PRIMITIVES = (bool, int, float, str)


def shape_of(value: Any) -> Shape:
    """Classify ``value``.

    Only exact ``dict`` instances with ``str`` keys count as records and only
    exact ``list`` instances count as arrays; subclasses and other containers
    are foreign.
    """

    if type(value) is dict:
        return "record" if all(isinstance(key, str) for key in value) else "foreign"
    if type(value) is list:
        return "array"
    if value is None or isinstance(value, _PRIMITIVES):
        return "primitive"
    return "foreign"


def is_composite(value: Any) -> bool:
    return shape_of(value) in ("record", "array")


def same_composite_shape(left: Any, right: Any) -> bool:
    shape = shape_of(left)
    return shape in ("record", "array") and shape == shape_of(right)


def assign_in_place(target: Any, source: Any) -> Any:
    """Make ``target`` equal to a deep copy of ``source`` without rebinding it.

    Keys absent from ``source`` are removed first, then every key of ``source``
    is copied in. Both arguments must share a composite shape.
    """

    if not same_composite_shape(target, source):
        raise TypeError(
            f"cannot assign {shape_of(source)} onto {shape_of(target)} in place"
        )
    if isinstance(target, list):
        target[:] = copy.deepcopy(source)
        return target

    for key in [key for key in target if key not in source]:
        del target[key]
    for key, value in source.items():
        target[key] = copy.deepcopy(value)
    return target


__all__ = [
    "Shape",
    "assign_in_place",
    "is_composite",
    "same_composite_shape",
    "shape_of",
]
