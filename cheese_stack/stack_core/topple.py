"""
Collapse Animator
=================

Fixed-length toppling animation played after an unstable drop.

Every frame each piece slides one unit in the lean direction and rotates by
``rotation_step * (index + 1)`` degrees, so higher pieces fall away faster.
There is no rest condition; the animation simply ends after ``frames`` frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from cheese_stack.stack_core.pieces import Piece, Tower


TOPPLE_FRAMES = 50


@dataclass(frozen=True)
class ToppleState:
    """Progress of an in-flight collapse."""
    direction: int
    frame: int = 0


def advance_topple(
    tower: Sequence[Piece],
    lean_direction: int,
    frame: int,
    total_frames: int = TOPPLE_FRAMES,
    rotation_step: float = 2.0,
    slide_step: float = 1.0
) -> Tuple[Tower, bool]:
    """
    Produce the next collapse frame.

    Args:
        tower: Pieces as of the previous frame.
        lean_direction: -1, 0 or +1.
        frame: Number of frames already produced.
        total_frames: Animation length.
        rotation_step: Degrees per frame for the base piece.
        slide_step: Units per frame for every piece.

    Returns:
        (new_tower, done). ``done`` is True once ``total_frames`` frames exist.
    """
    new_tower = tuple(
        piece.displaced(
            dx=lean_direction * slide_step,
            d_rotation=rotation_step * lean_direction * (index + 1)
        )
        for index, piece in enumerate(tower)
    )
    return new_tower, frame + 1 >= total_frames
