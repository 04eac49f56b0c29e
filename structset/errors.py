"""Exception types raised by structset."""

from dataclasses import dataclass
from typing import Any


class StructSetError(Exception):
    """Base class for structset errors."""


class ShapeMismatchError(StructSetError, TypeError):
    """A path segment does not fit the level, or the values, it is applied to."""


@dataclass(eq=False)
class SparseIndexError(StructSetError, IndexError):
    """Write to a sequence index that is neither an existing slot nor the end."""

    index: Any
    length: int

    def __str__(self) -> str:
        return (
            f"index {self.index!r} out of range for sequence of length "
            f"{self.length} (only 0..{self.length} can be written)"
        )


class PathError(StructSetError, ValueError):
    """A path cannot be rendered in, or read through, the path grammar."""
