"""
Placement Resolver
==================

Decides what happens when the moving slice is dropped onto the tower.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Sequence

from cheese_stack.stack_core.pieces import Piece, Tower, overlap, top_piece
from cheese_stack.stack_core.stability import StabilityResult, evaluate

logger = logging.getLogger(__name__)


class PlacementKind(enum.Enum):
    FIRST_PIECE = "first_piece"
    EXTENDED = "extended"
    MISSED = "missed"
    COLLAPSING = "collapsing"


@dataclass(frozen=True)
class PlacementResult:
    """Result of a drop attempt."""
    kind: PlacementKind
    tower: Tower
    lean_direction: int = 0
    stability: StabilityResult = StabilityResult.upright()

    @property
    def landed(self) -> bool:
        """True if the dropped piece became part of the tower."""
        return self.kind is not PlacementKind.MISSED

    @staticmethod
    def first_piece(tower: Tower) -> "PlacementResult":
        return PlacementResult(PlacementKind.FIRST_PIECE, tower)

    @staticmethod
    def extended(tower: Tower, stability: StabilityResult) -> "PlacementResult":
        return PlacementResult(
            PlacementKind.EXTENDED, tower, stability.lean_direction, stability
        )

    @staticmethod
    def missed(tower: Tower) -> "PlacementResult":
        return PlacementResult(PlacementKind.MISSED, tower)

    @staticmethod
    def collapsing(tower: Tower, stability: StabilityResult) -> "PlacementResult":
        return PlacementResult(
            PlacementKind.COLLAPSING, tower, stability.lean_direction, stability
        )


def resolve_placement(
    moving_position: float,
    tower: Sequence[Piece],
    piece_width: float,
    dead_zone_fraction: float = 0.1,
    threshold_fraction: float = 0.4
) -> PlacementResult:
    """
    Resolve a drop of the moving slice onto the tower.

    The first piece of a round always lands. Later pieces miss when their
    footprint shares no width with the top piece; otherwise they are stacked
    at the rounded position and the new tower's stability decides between
    EXTENDED and COLLAPSING. A MISSED result carries the unchanged tower.

    Args:
        moving_position: Current leading-edge position of the moving slice.
        tower: Current tower, base first.
        piece_width: Width shared by all pieces.
        dead_zone_fraction: Passed through to the stability evaluator.
        threshold_fraction: Passed through to the stability evaluator.

    Returns:
        PlacementResult describing the outcome.
    """
    tower = tuple(tower)
    piece = Piece.place(moving_position)

    if not tower:
        return PlacementResult.first_piece((piece,))

    start, end = overlap(piece.position, top_piece(tower).position, piece_width)
    if end <= start:
        logger.debug("Drop at %s missed the top piece at %s", piece.position, tower[-1].position)
        return PlacementResult.missed(tower)

    new_tower = tower + (piece,)
    stability = evaluate(new_tower, piece_width, dead_zone_fraction, threshold_fraction)

    if stability.stable:
        return PlacementResult.extended(new_tower, stability)

    logger.debug(
        "Drop at %s destabilized the tower (lean %.2f)", piece.position, stability.center_of_mass
    )
    return PlacementResult.collapsing(new_tower, stability)
