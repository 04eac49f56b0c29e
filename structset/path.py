"""
structset.path — Path parsing and rendering.

A path is a tuple of segments.  Each segment is either a single key
(a ``str`` for mappings, an ``int`` for sequences) or a ``Group`` of
sibling keys updated together in one call.

Textual grammar:

    path   := token ("." token)*
    token  := text? ("[" digits "]")*

    parse_path("a.b[0].c")   → ("a", "b", 0, "c")
    parse_path("[0]")        → (0,)
    parse_path("m[1][2]")    → ("m", 1, 2)

A token whose brackets do not form a run of ``[digits]`` suffixes is
kept verbatim as a mapping key.  Key legality is never checked.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from .errors import PathError


Key = Union[str, int]


@dataclass(frozen=True, slots=True)
class Group:
    """
    Several sibling keys sharing one parent level (a fan-out update).

    Examples:
        Group(("x", "y"))     # update mapping keys x and y
        Group((0, 1))         # update sequence slots 0 and 1
    """
    keys: tuple[Key, ...]

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    @property
    def first(self) -> Optional[Key]:
        return self.keys[0] if self.keys else None

    def __repr__(self) -> str:
        return f"Group({list(self.keys)!r})"


Segment = Union[Key, Group]

_GROUP_TYPES = (list, tuple, set, frozenset)
_INDEX_SUFFIX = re.compile(r"\[(\d+)\]")


def is_index(key: Any) -> bool:
    """True for sequence indexes: ints, but not bools."""
    return isinstance(key, int) and not isinstance(key, bool)


def parse_path(path: Any) -> Optional[tuple[Segment, ...]]:
    """
    Normalize a path into a tuple of segments.

    Strings are parsed with the textual grammar.  Lists and tuples are
    taken segment by segment; any element that is itself a list, tuple,
    set or frozenset becomes a ``Group``.  Anything else (including the
    empty string) means "no path" and yields ``None``.
    """
    if isinstance(path, str):
        if not path:
            return None
        segments: list[Segment] = []
        for token in path.split("."):
            segments.extend(_classify_token(token))
        return tuple(segments)

    if isinstance(path, (list, tuple)):
        return tuple(_normalize_segment(seg) for seg in path)

    return None


def _normalize_segment(seg: Any) -> Segment:
    if isinstance(seg, Group):
        return seg
    if isinstance(seg, _GROUP_TYPES):
        return Group(tuple(seg))
    return seg


def _classify_token(token: str) -> list[Key]:
    """Split one dotted token into its key and trailing index suffixes."""
    head, bracket, _ = token.partition("[")
    if not bracket:
        return [token]

    indexes: list[Key] = []
    pos = len(head)
    while pos < len(token):
        match = _INDEX_SUFFIX.match(token, pos)
        if match is None:
            # Not a clean run of [n] suffixes: the whole token is a key
            return [token]
        indexes.append(int(match.group(1)))
        pos = match.end()

    return ([head] if head else []) + indexes


def format_path(segments) -> str:
    """
    Render a group-free path in the textual grammar.

    Inverse of parse_path for paths it can express:
        format_path(("a", 0, "b")) == "a[0].b"

    Raises PathError for groups, for keys that would not parse back
    to themselves, and for paths that render to the empty string.
    """
    tokens: list[str] = []
    for seg in segments:
        if isinstance(seg, (Group,) + _GROUP_TYPES):
            raise PathError(f"group segment {seg!r} has no textual form")
        if is_index(seg):
            if seg < 0:
                raise PathError(f"negative index {seg!r} has no textual form")
            if tokens and tokens[-1] == "":
                raise PathError("an empty key cannot be followed by an index")
            if tokens:
                tokens[-1] += f"[{seg}]"
            else:
                tokens.append(f"[{seg}]")
        elif isinstance(seg, str):
            if "." in seg or "[" in seg:
                raise PathError(f"key {seg!r} cannot be written as a path token")
            tokens.append(seg)
        else:
            raise PathError(f"key {seg!r} is neither a string nor an index")

    text = ".".join(tokens)
    if not text:
        raise PathError("path renders to the empty string")
    return text
