"""Shared dataclasses for auto-markdown operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


Path = Tuple[int, ...]


@dataclass(frozen=True, order=True)
class Point:
    """A caret position: a path to a text node and a character offset into it."""

    path: Path
    offset: int


@dataclass(frozen=True)
class Range:
    """An anchor/focus pair of points.  Collapsed when both are equal."""

    anchor: Point
    focus: Point

    @classmethod
    def collapsed(cls, point: Point) -> "Range":
        """Create a collapsed range (a caret) at a point."""
        return cls(point, point)

    def is_collapsed(self) -> bool:
        """Check whether the range selects no characters."""
        return self.anchor == self.focus

    def is_backward(self) -> bool:
        """Check whether the focus precedes the anchor in document order."""
        return self.focus < self.anchor

    def edges(self) -> Tuple[Point, Point]:
        """
        Get the start and end points of the range in document order.

        Returns:
            Tuple of (start, end) points
        """
        if self.is_backward():
            return self.focus, self.anchor

        return self.anchor, self.focus


class DeleteUnit(Enum):
    """Granularity of a backward deletion."""
    CHARACTER = "character"
    WORD = "word"
    LINE = "line"
    BLOCK = "block"
