"""
structset.core — Immutable path assignment
==========================================

§1  THE PROBLEM
───────────────

Application state is usually a tree of dicts and lists.  Code that
wants to change one leaf of that tree has two bad options: mutate it
in place (and break every consumer that compares references to
detect change), or deep-copy the whole tree (and pay for every branch
that did not change).

structset takes the third option: copy ONLY the containers on the path
to the leaf, and share everything else by reference.

    base = {"user": {"name": "Ada", "tags": ["x"]}, "meta": {...}}
    new  = update(base, "user.name", "Grace")

    new is not base                      # root re-allocated
    new["user"] is not base["user"]      # on the path → re-allocated
    new["meta"] is base["meta"]          # off the path → shared
    new["user"]["tags"] is base["user"]["tags"]


§2  SHAPES
──────────

Every level of a structure has exactly one shape:

    MAPPING    any collections.abc.Mapping   → rebuilt as a dict
    SEQUENCE   list or tuple                 → rebuilt as the same kind
    SCALAR     everything else               → never descended into

str and bytes are SCALAR.  A SCALAR found where the path still
continues is replaced by a fresh empty container, so a path can grow a
structure out of None or a missing slot on demand.


§3  PATHS AND GROUPS
────────────────────

A path is a tuple of segments (see structset.path).  A segment is a
single key or a Group of sibling keys.  A Group fans the update out:
the value paired with it is classified ONCE into

    Single(v)         the same v for every key
    Positional(vs)    vs[i] for the i-th key of the group
    Keyed(vs)         vs[key] for each key

A Group on a SEQUENCE level requires Positional values; anything else
raises ShapeMismatchError.


§4  CONTAINER CHOICE
────────────────────

When a missing slot has to be materialized, the next segment decides
what to create:

    Group whose first key is an index     → []
    index, with array_preferring=True     → []
    anything else                         → {}


§5  WRITING INTO SEQUENCES
──────────────────────────

For a sequence of length n, index i:

    0 ≤ i < n    replace slot i
    i = n        append
    otherwise    SparseIndexError

Digit-only string keys ("0", "12") address sequence slots as indexes.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum, auto
from typing import Any, Callable, Optional

from .errors import PathError, ShapeMismatchError, SparseIndexError
from .path import Group, is_index, parse_path

_LOG = logging.getLogger(__name__)

# Sentinel for "no value at this key"; None is a legitimate stored value
_MISSING = object()


# ═══════════════════════════════════════════════════════════════════
#  SHAPES
# ═══════════════════════════════════════════════════════════════════

class Shape(Enum):
    """The structural kind of one level."""
    MAPPING = auto()
    SEQUENCE = auto()
    SCALAR = auto()


def shape_of(value: Any) -> Shape:
    if isinstance(value, Mapping):
        return Shape.MAPPING
    if isinstance(value, (list, tuple)):
        return Shape.SEQUENCE
    return Shape.SCALAR


_PRIMITIVES = (str, bytes, int, float, type(None))


def strict_equal(a: Any, b: Any) -> bool:
    """
    Equality used when no custom comparison is given.

    JSON primitives (str, bytes, int, float, None) compare by value,
    except that bools never equal ints (True is not 1 here).  Every
    other object, containers included, compares by identity only, so
    its own __eq__ is never called.
    """
    if a is b:
        return True
    if not isinstance(a, _PRIMITIVES) or not isinstance(b, _PRIMITIVES):
        return False
    if (type(a) is bool) != (type(b) is bool):
        return False
    return a == b


# ═══════════════════════════════════════════════════════════════════
#  GROUP VALUES
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Single:
    """One value shared by every key of a group."""
    value: Any

    def at(self, key: Any, position: int) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class Positional:
    """Values matched to the group keys by position."""
    values: tuple

    def at(self, key: Any, position: int) -> Any:
        if position < len(self.values):
            return self.values[position]
        return None


@dataclass(frozen=True, slots=True)
class Keyed:
    """Values matched to the group keys by key."""
    values: Mapping

    def at(self, key: Any, position: int) -> Any:
        return self.values.get(key)


def classify_values(value: Any):
    """Decide once how a value pairs with the keys of a group."""
    if isinstance(value, Mapping):
        return Keyed(value)
    if isinstance(value, (list, tuple)):
        return Positional(tuple(value))
    return Single(value)


# ═══════════════════════════════════════════════════════════════════
#  OPTIONS
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class UpdateOptions:
    """
    Options recognized by update().

    array_preferring:
        create [] instead of {} for a missing slot whose next key is
        an index
    equality:
        custom comparison used by the safe pre-check only
    safe:
        return the original base when it already holds the value
    """
    array_preferring: bool = False
    equality: Optional[Callable[[Any, Any], bool]] = None
    safe: bool = False


_OPTION_ALIASES = {
    "arrayPreferring": "array_preferring",
}


def _option_kwargs(raw: Mapping) -> dict:
    known = {f.name for f in fields(UpdateOptions)}
    kwargs = {}
    for name, value in raw.items():
        name = _OPTION_ALIASES.get(name, name)
        if name not in known:
            raise TypeError(f"unknown update option: {name!r}")
        kwargs[name] = value
    return kwargs


def resolve_options(options: Any = None, overrides: Optional[Mapping] = None) -> UpdateOptions:
    """
    Build an UpdateOptions from an instance, a mapping or nothing,
    then apply keyword overrides on top.

    Mappings may use the Python names or the camelCase ones
    (arrayPreferring).  Unknown names raise TypeError.
    """
    if options is None:
        resolved = UpdateOptions()
    elif isinstance(options, UpdateOptions):
        resolved = options
    elif isinstance(options, Mapping):
        resolved = UpdateOptions(**_option_kwargs(options))
    else:
        raise TypeError(
            f"options must be an UpdateOptions or a mapping, not {type(options).__name__}"
        )

    if overrides:
        resolved = replace(resolved, **_option_kwargs(overrides))
    return resolved


# ═══════════════════════════════════════════════════════════════════
#  LOOKUP HELPERS
# ═══════════════════════════════════════════════════════════════════

def _digit_index(key: Any) -> Optional[int]:
    """An int index for key, or None if key cannot address a sequence."""
    if is_index(key):
        return key
    if isinstance(key, str) and key.isascii() and key.isdigit():
        return int(key)
    return None


def _lookup(level: Any, key: Any) -> Any:
    """The value stored at key, or _MISSING.  Never raises."""
    shape = shape_of(level)
    if shape is Shape.MAPPING:
        return level.get(key, _MISSING)
    if shape is Shape.SEQUENCE:
        index = _digit_index(key)
        if index is not None and 0 <= index < len(level):
            return level[index]
    return _MISSING


def _sequence_index(key: Any, length: int) -> int:
    """Validate key as a writable slot of a sequence of the given length."""
    index = _digit_index(key)
    if index is None:
        raise ShapeMismatchError(f"key {key!r} cannot address a sequence")
    if index < 0 or index > length:
        raise SparseIndexError(index, length)
    return index


def _rebuild(level: Any, items: list) -> Any:
    if isinstance(level, tuple):
        return tuple(items)
    return items


def get_in(base: Any, path: Any, default: Any = None) -> Any:
    """
    Read the value at path, or default if any level is missing.

    Accepts the same path forms as update(), minus groups:
        get_in({"a": [{"b": 1}]}, "a[0].b") == 1

    An empty or invalid path returns base itself.
    """
    segments = parse_path(path)
    if not segments:
        return base

    level = base
    for segment in segments:
        if isinstance(segment, Group):
            raise PathError(f"cannot read through group segment {segment!r}")
        level = _lookup(level, segment)
        if level is _MISSING:
            return default
    return level


# ═══════════════════════════════════════════════════════════════════
#  CONTAINER FACTORY
# ═══════════════════════════════════════════════════════════════════

def _empty_container(segment: Any, array_preferring: bool) -> Any:
    """Empty container fit to be indexed by segment (see §4)."""
    if isinstance(segment, Group):
        return [] if is_index(segment.first) else {}
    if array_preferring and is_index(segment):
        return []
    return {}


def next_base(level: Any, key: Any, next_key: Any, array_preferring: bool) -> Any:
    """
    The child to descend into at key.

    The existing child is returned as-is when present and not None.
    Otherwise a new empty container is chosen from next_key, the
    segment that will be applied to the child.
    """
    child = _lookup(level, key)
    if child is not _MISSING and child is not None:
        return child
    container = _empty_container(next_key, array_preferring)
    _LOG.debug("creating %s for missing slot %r", type(container).__name__, key)
    return container


# ═══════════════════════════════════════════════════════════════════
#  EQUALITY PRE-CHECK
# ═══════════════════════════════════════════════════════════════════

def recursive_equal(
    base: Any,
    path: tuple,
    value: Any,
    equality: Optional[Callable[[Any, Any], bool]] = None,
) -> bool:
    """
    True if base already holds value at the end of path.

    The walk stops with False at the first missing slot, at the first
    level that is not a mapping or sequence, and at any group segment
    (fan-out updates are never treated as no-ops).  The final
    comparison uses equality(found, value) when given, strict_equal
    otherwise.
    """
    level = base
    for segment in path:
        if isinstance(segment, Group):
            return False
        level = _lookup(level, segment)
        if level is _MISSING:
            return False

    if equality is not None:
        return bool(equality(level, value))
    return strict_equal(level, value)


# ═══════════════════════════════════════════════════════════════════
#  BATCH REDUCERS
# ═══════════════════════════════════════════════════════════════════

def reduce_sequence(
    level: Any,
    rest: tuple,
    keys: Group,
    next_key: Any,
    values,
    array_preferring: bool,
) -> Any:
    """
    Apply a group to a sequence level.

    Each index of the group receives set_in(child, rest, values[i]).
    Indexes are written in group order against the growing copy, so
    Group((0, 1)) on [] appends twice.
    """
    if not isinstance(values, Positional):
        raise ShapeMismatchError(
            f"group {keys!r} on a sequence needs positional values, "
            f"got {type(values).__name__.lower()} values"
        )

    items = list(level)
    for position, key in enumerate(keys):
        index = _sequence_index(key, len(items))
        child = set_in(
            next_base(level, index, next_key, array_preferring),
            rest, values.at(key, position), array_preferring,
        )
        if index < len(items):
            items[index] = child
        else:
            items.append(child)
    return _rebuild(level, items)


def reduce_mapping(
    level: Any,
    rest: tuple,
    keys: Group,
    next_key: Any,
    values,
    array_preferring: bool,
) -> dict:
    """
    Apply a group to a mapping level.

    Returns a new dict holding every original entry, with each key of
    the group replaced by set_in(child, rest, value-for-key).
    """
    result = dict(level)
    for position, key in enumerate(keys):
        result[key] = set_in(
            next_base(level, key, next_key, array_preferring),
            rest, values.at(key, position), array_preferring,
        )
    return result


# ═══════════════════════════════════════════════════════════════════
#  RECURSIVE SETTER
# ═══════════════════════════════════════════════════════════════════

def _assign(level: Any, key: Any, child: Any) -> Any:
    """A copy of level with child stored at key (key already validated)."""
    if shape_of(level) is Shape.SEQUENCE:
        items = list(level)
        if key < len(items):
            items[key] = child
        else:
            items.append(child)
        return _rebuild(level, items)

    result = dict(level)
    result[key] = child
    return result


def set_in(level: Any, path: tuple, value: Any, array_preferring: bool = False) -> Any:
    """
    Return a new instance of level with value placed at path.

    Containers on the path are re-allocated; everything else is shared
    with level by reference.  level itself is never mutated.

    Runs of single keys are walked in a loop and the copies are built
    on the way back up, so path length is not bounded by the
    interpreter's recursion limit.  Only a group segment recurses,
    once per key, for the rest of the path below it.
    """
    trail: list[tuple[Any, Any]] = []

    for pos, segment in enumerate(path):
        next_key = path[pos + 1] if pos + 1 < len(path) else None

        shape = shape_of(level)
        if shape is Shape.SCALAR:
            if level is not None:
                _LOG.debug("replacing scalar %r with a container for %r", level, segment)
            level = _empty_container(segment, array_preferring)
            shape = shape_of(level)

        if isinstance(segment, Group):
            rest = path[pos + 1:]
            values = classify_values(value)
            if shape is Shape.SEQUENCE:
                value = reduce_sequence(level, rest, segment, next_key, values, array_preferring)
            else:
                value = reduce_mapping(level, rest, segment, next_key, values, array_preferring)
            break

        key = _sequence_index(segment, len(level)) if shape is Shape.SEQUENCE else segment
        trail.append((level, key))
        level = next_base(level, key, next_key, array_preferring)

    for parent, key in reversed(trail):
        value = _assign(parent, key, value)
    return value


# ═══════════════════════════════════════════════════════════════════
#  ENTRY POINT
# ═══════════════════════════════════════════════════════════════════

def update(base: Any, path: Any, value: Any, options: Any = None, **overrides) -> Any:
    """
    Immutable set: return a new base with value at path.

    Arguments:
        base:     the structure to update (never mutated)
        path:     "a.b[0].c", or a list/tuple of keys and groups
        value:    the value to place, or per-key values for a group
        options:  UpdateOptions, or a mapping of option names
        **overrides: option values taking precedence over options

    Behavior:
        • No usable path → the whole base is replaced by value
          (base itself is returned when it strictly equals value)
        • safe=True and base already holds value at path → base
        • otherwise → a new structure from set_in()

    Examples:
        update({}, "a.b", 1)                       → {"a": {"b": 1}}
        update([], [0], "x")                       → ["x"]
        update({}, ["a", [0, 1]], [10, 20])        → {"a": [10, 20]}
        update({}, [["x", "y"]], {"x": 1, "y": 2}) → {"x": 1, "y": 2}
    """
    opts = resolve_options(options, overrides)
    segments = parse_path(path)

    if not segments:
        _LOG.debug("no path given, replacing the whole structure")
        return base if strict_equal(base, value) else value

    if opts.safe and recursive_equal(base, segments, value, opts.equality):
        _LOG.debug("value already present at %r, keeping original", segments)
        return base

    return set_in(base, segments, value, opts.array_preferring)
