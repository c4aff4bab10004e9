"""
Pieces
======

Stackable slices and helpers for working with a tower of them.
"""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, replace
from typing import Iterator, Sequence, Tuple


Tower = Tuple["Piece", ...]

_piece_ids: Iterator[int] = itertools.count(1)


def next_piece_id() -> int:
    """Return a fresh, process-wide unique piece id."""
    return next(_piece_ids)


def round_position(position: float) -> int:
    """Round a track position to whole units, halves rounding up."""
    return int(math.floor(position + 0.5))


@dataclass(frozen=True)
class Piece:
    """
    One placed slice.

    ``position`` is the leading (left) edge along the track. ``rotation`` is in
    degrees and stays 0 until the tower collapses.
    """
    position: float
    rotation: float = 0.0
    id: int = 0

    @classmethod
    def place(cls, position: float) -> "Piece":
        """Create a freshly stacked piece at the rounded position."""
        return cls(position=round_position(position), rotation=0.0, id=next_piece_id())

    def center(self, width: float) -> float:
        """Horizontal center of the piece."""
        return self.position + width / 2

    def span(self, width: float) -> Tuple[float, float]:
        """Half-open footprint ``[start, end)`` along the track."""
        return (self.position, self.position + width)

    def displaced(self, dx: float, d_rotation: float) -> "Piece":
        """Copy of this piece moved and rotated, keeping its id."""
        return replace(
            self,
            position=self.position + dx,
            rotation=self.rotation + d_rotation
        )


def overlap(a_start: float, b_start: float, width: float) -> Tuple[float, float]:
    """
    Overlap interval of two equal-width footprints.

    Returns ``(start, end)``; the interval is empty when ``end <= start``.
    """
    return (max(a_start, b_start), min(a_start + width, b_start + width))


def top_piece(tower: Sequence[Piece]) -> Piece:
    """The most recently stacked piece."""
    return tower[-1]
