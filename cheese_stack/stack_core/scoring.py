"""
Scoring System
==============

Tracks score, the placement multiplier and the best score seen so far.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    multiplier: int
    tower_height: int

    def __repr__(self) -> str:
        return f"ScoreEvent(+{self.points} at {self.multiplier}x, height={self.tower_height})"


class ScoreTracker:
    """
    Score bookkeeping for one game object.

    Each landed piece is worth the current multiplier. The multiplier starts
    at 1 every round and only increases at the height milestone. The high
    score survives round resets and is only ever raised.
    """

    def __init__(self):
        self._score: int = 0
        self._multiplier: int = 1
        self._high_score: int = 0
        self._placements: int = 0

    @property
    def score(self) -> int:
        """Current round score."""
        return self._score

    @property
    def multiplier(self) -> int:
        """Points awarded per landed piece."""
        return self._multiplier

    @property
    def high_score(self) -> int:
        """Best final score across rounds."""
        return self._high_score

    @property
    def placements(self) -> int:
        """Scoring placements this round."""
        return self._placements

    def award_placement(self, tower_height: int) -> ScoreEvent:
        """Award points for a landed piece."""
        points = self._multiplier
        self._score += points
        self._placements += 1
        return ScoreEvent(points=points, multiplier=self._multiplier, tower_height=tower_height)

    def bump_multiplier(self) -> int:
        """Raise the multiplier by one level. Returns the new value."""
        self._multiplier += 1
        return self._multiplier

    def record_final_score(self) -> bool:
        """Fold the current score into the high score. Returns True on a new best."""
        if self._score > self._high_score:
            self._high_score = self._score
            return True
        return False

    def reset(self) -> None:
        """Reset round score and multiplier; the high score is kept."""
        self._score = 0
        self._multiplier = 1
        self._placements = 0
