"""
State Snapshot
==============

Read-only view of the game for renderers, packed into fixed-size numpy
arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np

from cheese_stack.stack_core.config_loader import GameConfig, get_config
from cheese_stack.stack_core.motion import MotionState
from cheese_stack.stack_core.pieces import Piece, Tower
from cheese_stack.stack_core.stability import evaluate
from cheese_stack.stack_core.topple import ToppleState

# Observation codes for the round state, in lifecycle order
ROUND_STATE_CODES = {"idle": 0, "playing": 1, "toppling": 2, "ended": 3}
MOOD_CODES = {"normal": 0, "happy": 1, "sad": 2}


@dataclass
class GameSnapshot:
    """
    Complete game state at one instant.

    Piece arrays are fixed-size with masking for variable tower heights.
    """
    # Round
    round_state: str
    mood: str
    score: int
    multiplier: int
    high_score: int
    milestone_pending: bool

    # Moving slice (frozen values when not playing)
    moving_position: float
    moving_direction: int
    speed: float

    # Tower
    tower: Tower
    tower_height: int
    center_of_mass: float             # Weighted lean from the stability heuristic
    lean_direction: int
    stable: bool
    topple_frame: int                 # -1 when not toppling

    # Piece arrays (fixed size, padded)
    piece_x: np.ndarray               # (MAX_PIECES,) float32
    piece_rotation: np.ndarray        # (MAX_PIECES,) float32
    piece_mask: np.ndarray            # (MAX_PIECES,) bool

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "round_state": np.array(ROUND_STATE_CODES[self.round_state], dtype=np.int32),
            "mood": np.array(MOOD_CODES[self.mood], dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "multiplier": np.array(self.multiplier, dtype=np.int32),
            "moving_position": np.array(self.moving_position, dtype=np.float32),
            "moving_direction": np.array(self.moving_direction, dtype=np.int32),
            "speed": np.array(self.speed, dtype=np.float32),
            "tower_height": np.array(self.tower_height, dtype=np.int32),
            "center_of_mass": np.array(self.center_of_mass, dtype=np.float32),
            "lean_direction": np.array(self.lean_direction, dtype=np.int32),
            "piece_x": self.piece_x,
            "piece_rotation": self.piece_rotation,
            "piece_mask": self.piece_mask,
        }


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_pieces = config.observation.max_pieces

        self._piece_x = np.zeros(self._max_pieces, dtype=np.float32)
        self._piece_rotation = np.zeros(self._max_pieces, dtype=np.float32)
        self._piece_mask = np.zeros(self._max_pieces, dtype=bool)

    def _fill_piece_arrays(self, tower: Sequence[Piece]) -> None:
        self._piece_x.fill(0.0)
        self._piece_rotation.fill(0.0)
        self._piece_mask.fill(False)

        count = min(len(tower), self._max_pieces)
        for i in range(count):
            self._piece_x[i] = tower[i].position
            self._piece_rotation[i] = tower[i].rotation
            self._piece_mask[i] = True

    def build(
        self,
        round_state: str,
        mood: str,
        tower: Tower,
        motion: MotionState,
        topple: Optional[ToppleState],
        score: int,
        multiplier: int,
        high_score: int,
        speed: float,
        milestone_pending: bool,
        moving: bool
    ) -> GameSnapshot:
        """Build a snapshot from the game's current state."""
        self._fill_piece_arrays(tower)

        stability = evaluate(
            tower,
            self._config.piece_width,
            self._config.stability.dead_zone_fraction,
            self._config.stability.threshold_fraction
        )

        return GameSnapshot(
            round_state=round_state,
            mood=mood,
            score=score,
            multiplier=multiplier,
            high_score=high_score,
            milestone_pending=milestone_pending,
            moving_position=motion.position,
            moving_direction=motion.direction if moving else 0,
            speed=speed,
            tower=tuple(tower),
            tower_height=len(tower),
            center_of_mass=stability.center_of_mass,
            lean_direction=stability.lean_direction,
            stable=stability.stable,
            topple_frame=topple.frame if topple is not None else -1,
            piece_x=self._piece_x.copy(),
            piece_rotation=self._piece_rotation.copy(),
            piece_mask=self._piece_mask.copy(),
        )
