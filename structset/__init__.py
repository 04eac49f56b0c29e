"""
structset — Immutable Path Assignment
=====================================

Set a value deep inside nested dicts and lists without mutating them.

    update({"a": {"b": 1}}, "a.b", 2)           → {"a": {"b": 2}}
    update({}, "a.b[0]", "x", array_preferring=True)
                                                → {"a": {"b": ["x"]}}
    update({}, ["a", [0, 1]], [10, 20])         → {"a": [10, 20]}

Only the containers on the path are copied.  Every branch off the path
is shared by reference with the original, so consumers that detect
change by identity (`old is new`) see exactly what moved.

With safe=True, an update that would store a value already present
returns the original object unchanged.
"""

from structset.core import (
    # Shapes
    Shape,
    shape_of,
    strict_equal,
    # Group values
    Single,
    Positional,
    Keyed,
    classify_values,
    # Options
    UpdateOptions,
    resolve_options,
    # Algorithm
    next_base,
    recursive_equal,
    reduce_sequence,
    reduce_mapping,
    set_in,
    get_in,
    update,
)
from structset.errors import (
    StructSetError, ShapeMismatchError, SparseIndexError, PathError,
)
from structset.formats import update_json, get_json
from structset.path import Group, is_index, parse_path, format_path

__version__ = "0.1.0"
__all__ = [
    "Shape", "shape_of", "strict_equal",
    "Single", "Positional", "Keyed", "classify_values",
    "UpdateOptions", "resolve_options",
    "next_base", "recursive_equal", "reduce_sequence", "reduce_mapping",
    "set_in", "get_in", "update",
    "StructSetError", "ShapeMismatchError", "SparseIndexError", "PathError",
    "update_json", "get_json",
    "Group", "is_index", "parse_path", "format_path",
]
