"""
Core Game
=========

Round state machine combining motion, placement, stability, collapse and
scoring. Callers drive it with three entry points:

- ``start()`` begins a fresh round.
- ``act()`` starts a round when none is running, otherwise drops the slice.
- ``tick(delta_time_units)`` advances the moving slice or the collapse.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Dict, Optional

from cheese_stack.stack_core.config_loader import GameConfig, get_config
from cheese_stack.stack_core.mood import Mood, MoodTracker
from cheese_stack.stack_core.motion import MotionState, advance, speed_for_multiplier
from cheese_stack.stack_core.pieces import Tower
from cheese_stack.stack_core.placement import PlacementKind, PlacementResult, resolve_placement
from cheese_stack.stack_core.scheduler import ScheduledTask, TaskScheduler
from cheese_stack.stack_core.scoring import ScoreTracker
from cheese_stack.stack_core.state_snapshot import GameSnapshot, SnapshotBuilder
from cheese_stack.stack_core.topple import ToppleState, advance_topple

logger = logging.getLogger(__name__)

MILESTONE_TASK = "milestone_reset"


class RoundState(enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    TOPPLING = "toppling"
    ENDED = "ended"


class ActOutcome(enum.Enum):
    STARTED = "started"
    FIRST_PIECE = "first_piece"
    EXTENDED = "extended"
    MISSED = "missed"
    COLLAPSING = "collapsing"
    REJECTED = "rejected"


_OUTCOME_FOR_KIND = {
    PlacementKind.FIRST_PIECE: ActOutcome.FIRST_PIECE,
    PlacementKind.EXTENDED: ActOutcome.EXTENDED,
    PlacementKind.MISSED: ActOutcome.MISSED,
    PlacementKind.COLLAPSING: ActOutcome.COLLAPSING,
}


class StackGame:
    """
    Main game simulation class.

    Owns the tower, the moving slice, the collapse animation, score and
    multiplier bookkeeping, and the deferred milestone reset. All mutation
    happens synchronously inside ``start``, ``act`` or ``tick``.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        # Subsystems
        self._scheduler = TaskScheduler()
        self._scorer = ScoreTracker()
        self._mood = MoodTracker(self._scheduler, config.mood.happy_duration_ms)
        self._snapshot_builder = SnapshotBuilder(config)

        # Round state
        self._state = RoundState.IDLE
        self._tower: Tower = ()
        self._motion = self._initial_motion()
        self._topple: Optional[ToppleState] = None
        self._milestone_task: Optional[ScheduledTask] = None
        self._last_outcome: Optional[ActOutcome] = None

    def _initial_motion(self) -> MotionState:
        board = self._config.board
        return MotionState(board.start_position, board.start_direction)

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def round_state(self) -> RoundState:
        """Current lifecycle state."""
        return self._state

    @property
    def tower(self) -> Tower:
        """Placed pieces, base first."""
        return self._tower

    @property
    def motion(self) -> Optional[MotionState]:
        """Moving slice, or None when no round is being played."""
        if self._state is RoundState.PLAYING:
            return self._motion
        return None

    @property
    def topple(self) -> Optional[ToppleState]:
        """Collapse progress, or None when not toppling."""
        return self._topple

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def multiplier(self) -> int:
        """Points per landed piece."""
        return self._scorer.multiplier

    @property
    def high_score(self) -> int:
        """Best final score across rounds."""
        return self._scorer.high_score

    @property
    def speed(self) -> float:
        """Moving slice speed at the current multiplier."""
        motion = self._config.motion
        return speed_for_multiplier(self._scorer.multiplier, motion.base_speed, motion.speed_step)

    @property
    def mood(self) -> Mood:
        """Mascot reaction to the last drop."""
        return self._mood.mood

    @property
    def milestone_pending(self) -> bool:
        """True while the milestone reset is waiting to fire."""
        return self._milestone_task is not None and self._milestone_task.pending

    @property
    def last_outcome(self) -> Optional[ActOutcome]:
        """Result of the most recent ``act`` call."""
        return self._last_outcome

    @property
    def is_playing(self) -> bool:
        return self._state is RoundState.PLAYING

    @property
    def is_over(self) -> bool:
        """True once a round has ended."""
        return self._state is RoundState.ENDED

    @property
    def clock_ms(self) -> float:
        """Game time accumulated through ``tick``."""
        return self._scheduler.now_ms

    def reset(self) -> None:
        """
        Abandon whatever is in progress and return to IDLE.

        The high score is kept. Used by the Gymnasium wrapper between
        episodes; interactive callers use ``start``/``act``.
        """
        self._scheduler.cancel_all()
        self._milestone_task = None
        self._tower = ()
        self._scorer.reset()
        self._motion = self._initial_motion()
        self._topple = None
        self._mood.reset()
        self._last_outcome = None
        self._state = RoundState.IDLE

    def start(self) -> None:
        """
        Begin a fresh round.

        Only valid from IDLE or ENDED; ignored mid-round. Any deferred effect
        left over from the previous round is cancelled.
        """
        if self._state in (RoundState.PLAYING, RoundState.TOPPLING):
            logger.debug("start() ignored while %s", self._state.value)
            return

        self.reset()
        self._state = RoundState.PLAYING

        logger.info("Round started (high score %d)", self._scorer.high_score)

    def act(self) -> ActOutcome:
        """
        Start a round if none is running, otherwise drop the moving slice.

        Returns:
            The outcome of the call. REJECTED means nothing changed.
        """
        if self._state in (RoundState.IDLE, RoundState.ENDED):
            self.start()
            outcome = ActOutcome.STARTED
        elif self._state is RoundState.TOPPLING or self.milestone_pending:
            logger.debug("act() rejected (state=%s, milestone_pending=%s)",
                         self._state.value, self.milestone_pending)
            outcome = ActOutcome.REJECTED
        else:
            outcome = self._place()

        self._last_outcome = outcome
        return outcome

    def tick(self, delta_time_units: float) -> None:
        """
        Advance the game by ``delta_time_units`` reference ticks.

        Deferred effects that come due fire first; then the moving slice
        advances when playing, or the collapse advances one frame when
        toppling.

        Raises:
            ValueError: If ``delta_time_units`` is negative.
        """
        if delta_time_units < 0:
            raise ValueError(f"delta_time_units must be non-negative, got {delta_time_units}")

        self._scheduler.advance(delta_time_units * self._config.motion.reference_tick_ms)

        if self._state is RoundState.PLAYING:
            board = self._config.board
            self._motion = advance(
                self._motion,
                delta_time_units,
                self.speed,
                board.track_min,
                board.track_max
            )
        elif self._state is RoundState.TOPPLING:
            self._advance_collapse()

    def _place(self) -> ActOutcome:
        """Resolve a drop and apply its effects."""
        stability = self._config.stability
        result = resolve_placement(
            self._motion.position,
            self._tower,
            self._config.piece_width,
            stability.dead_zone_fraction,
            stability.threshold_fraction
        )

        if result.kind is PlacementKind.MISSED:
            self._mood.sulk()
            logger.info("Missed at %.0f; final score %d", self._motion.position, self._scorer.score)
            self._end_round()
        elif result.kind is PlacementKind.COLLAPSING:
            self._begin_collapse(result)
        else:
            self._land(result)

        return _OUTCOME_FOR_KIND[result.kind]

    def _land(self, result: PlacementResult) -> None:
        self._tower = result.tower
        event = self._scorer.award_placement(len(self._tower))
        self._mood.cheer()
        logger.debug("Landed %r", event)

        if len(self._tower) >= self._config.scoring.milestone_height:
            self._milestone_task = self._scheduler.schedule(
                self._config.scoring.milestone_delay_ms,
                self._apply_milestone,
                name=MILESTONE_TASK
            )
            logger.info("Milestone reached at height %d", len(self._tower))

    def _apply_milestone(self) -> None:
        """Clear the board and raise the multiplier; the score is kept."""
        self._milestone_task = None
        self._tower = ()
        multiplier = self._scorer.bump_multiplier()
        logger.info("Board cleared, multiplier now %dx (speed %.1f)", multiplier, self.speed)

    def _begin_collapse(self, result: PlacementResult) -> None:
        # The destabilizing piece stays in the tower but earns nothing
        self._tower = result.tower
        self._topple = ToppleState(direction=result.lean_direction, frame=0)
        self._mood.sulk()
        self._state = RoundState.TOPPLING
        logger.info(
            "Tower collapsing at height %d, leaning %+d", len(self._tower), result.lean_direction
        )

    def _advance_collapse(self) -> None:
        topple_config = self._config.topple
        self._tower, done = advance_topple(
            self._tower,
            self._topple.direction,
            self._topple.frame,
            total_frames=topple_config.frames,
            rotation_step=topple_config.rotation_step,
            slide_step=topple_config.slide_step
        )
        self._topple = ToppleState(self._topple.direction, self._topple.frame + 1)

        if done:
            self._topple = None
            logger.info("Collapse finished; final score %d", self._scorer.score)
            self._end_round()

    def _end_round(self) -> None:
        self._state = RoundState.ENDED
        if self._scorer.record_final_score():
            logger.info("New high score: %d", self._scorer.high_score)

    def snapshot(self) -> GameSnapshot:
        """Build a read-only snapshot of the current state."""
        return self._snapshot_builder.build(
            round_state=self._state.value,
            mood=self._mood.mood.value,
            tower=self._tower,
            motion=self._motion,
            topple=self._topple,
            score=self._scorer.score,
            multiplier=self._scorer.multiplier,
            high_score=self._scorer.high_score,
            speed=self.speed,
            milestone_pending=self.milestone_pending,
            moving=self.is_playing
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "multiplier": self._scorer.multiplier,
            "high_score": self._scorer.high_score,
            "tower_height": len(self._tower),
            "round_state": self._state.value,
            "outcome": self._last_outcome.value if self._last_outcome else "",
            "milestone_pending": self.milestone_pending,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with track geometry, pieces and the scoreboard.
        """
        board = self._config.board
        return {
            "piece_width": board.piece_width,
            "piece_height": board.piece_height,
            "track_width": board.track_width,
            "track_max": board.track_max,
            "pieces": [
                {"id": p.id, "x": p.position, "rotation": p.rotation}
                for p in self._tower
            ],
            "moving_x": self._motion.position if self.is_playing else None,
            "round_state": self._state.value,
            "mood": self._mood.mood.value,
            "score": self._scorer.score,
            "multiplier": self._scorer.multiplier,
            "high_score": self._scorer.high_score,
        }
