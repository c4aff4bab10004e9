"""
Stability Evaluator
===================

Deterministic center-of-mass heuristic deciding whether a tower stands.

Each piece's horizontal center is compared with the base piece's center.
Pieces within a small dead zone are treated as aligned and ignored; the rest
contribute a moment weighted linearly by height (index + 1), so an overhang
near the top matters more than the same overhang near the base.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from cheese_stack.stack_core.pieces import Piece


@dataclass(frozen=True)
class StabilityResult:
    """Outcome of a stability check."""
    stable: bool
    lean_direction: int      # -1, 0 or +1
    center_of_mass: float    # Weighted offset from the base center

    @staticmethod
    def upright() -> "StabilityResult":
        return StabilityResult(True, 0, 0.0)


def center_offsets(tower: Sequence[Piece], piece_width: float) -> np.ndarray:
    """Signed offsets of every piece's center from the base piece's center."""
    positions = np.fromiter((p.position for p in tower), dtype=np.float64, count=len(tower))
    centers = positions + piece_width / 2
    return centers - centers[0]


def evaluate(
    tower: Sequence[Piece],
    piece_width: float,
    dead_zone_fraction: float = 0.1,
    threshold_fraction: float = 0.4
) -> StabilityResult:
    """
    Evaluate whether a tower is stable.

    Args:
        tower: Pieces from base (index 0) upward.
        piece_width: Width shared by all pieces.
        dead_zone_fraction: Offsets up to this share of the width are ignored.
        threshold_fraction: Lean at or beyond this share of the width is unstable.

    Returns:
        StabilityResult. The lean direction is reported even when stable.
    """
    if len(tower) < 2:
        return StabilityResult.upright()

    offsets = center_offsets(tower, piece_width)
    weights = np.arange(1, len(tower) + 1, dtype=np.float64)

    contributing = np.abs(offsets) > piece_width * dead_zone_fraction
    total_weight = float(weights[contributing].sum())
    if total_weight == 0.0:
        center_of_mass = 0.0
    else:
        moment = float((offsets[contributing] * weights[contributing]).sum())
        center_of_mass = moment / total_weight

    return StabilityResult(
        stable=abs(center_of_mass) < piece_width * threshold_fraction,
        lean_direction=int(np.sign(center_of_mass)),
        center_of_mass=center_of_mass
    )
