"""Diff/apply collaborators and value-shape helpers."""

from .engine import JsonPatchEngine, PatchEngine
from .shapes import assign_in_place, is_composite, same_composite_shape, shape_of

__all__ = [
    "JsonPatchEngine",
    "PatchEngine",
    "assign_in_place",
    "is_composite",
    "same_composite_shape",
    "shape_of",
]
