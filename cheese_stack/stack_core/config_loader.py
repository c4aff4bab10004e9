"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "game_config.yaml"
)


@dataclass(frozen=True)
class BoardConfig:
    """Track geometry and round start settings."""
    piece_width: float     # Width of one slice
    piece_height: float    # Height of one slice (rendering only)
    track_width: float     # Nominal play area width (rendering only)
    track_min: float       # Left clamp for the moving slice
    track_max: float       # Right clamp for the moving slice
    start_position: float  # Moving slice position at round start
    start_direction: int   # +1 or -1


@dataclass(frozen=True)
class MotionConfig:
    """Moving slice speed parameters."""
    base_speed: float
    speed_step: float
    reference_tick_ms: float


@dataclass(frozen=True)
class StabilityConfig:
    """Center-of-mass heuristic thresholds, as fractions of piece width."""
    dead_zone_fraction: float
    threshold_fraction: float


@dataclass(frozen=True)
class ToppleConfig:
    """Collapse animation parameters."""
    frames: int
    rotation_step: float
    slide_step: float


@dataclass(frozen=True)
class ScoringConfig:
    """Milestone parameters."""
    milestone_height: int
    milestone_delay_ms: float


@dataclass(frozen=True)
class MoodConfig:
    """Reaction indicator timing."""
    happy_duration_ms: float


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_pieces: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    motion: MotionConfig
    stability: StabilityConfig
    topple: ToppleConfig
    scoring: ScoringConfig
    mood: MoodConfig
    observation: ObservationConfig

    @property
    def piece_width(self) -> float:
        """Width of one slice."""
        return self.board.piece_width

    @property
    def dead_zone(self) -> float:
        """Absolute offset below which a piece does not add lean."""
        return self.board.piece_width * self.stability.dead_zone_fraction

    @property
    def stability_threshold(self) -> float:
        """Absolute weighted lean at which the tower collapses."""
        return self.board.piece_width * self.stability.threshold_fraction


def _validate_fraction(name: str, value: float) -> None:
    if not 0.0 < value <= 1.0:
        raise ValueError(f"{name} must be in (0, 1], got {value}")


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    board = config.board
    if board.piece_width <= 0:
        raise ValueError(f"piece_width must be positive, got {board.piece_width}")
    if board.track_max <= board.track_min:
        raise ValueError(
            f"track_max ({board.track_max}) must be greater than "
            f"track_min ({board.track_min})"
        )
    if not board.track_min <= board.start_position <= board.track_max:
        raise ValueError(
            f"start_position ({board.start_position}) must lie within "
            f"[{board.track_min}, {board.track_max}]"
        )
    if board.start_direction not in (-1, 1):
        raise ValueError(f"start_direction must be 1 or -1, got {board.start_direction}")

    if config.motion.base_speed <= 0:
        raise ValueError(f"base_speed must be positive, got {config.motion.base_speed}")
    if config.motion.speed_step < 0:
        raise ValueError(f"speed_step must be non-negative, got {config.motion.speed_step}")
    if config.motion.reference_tick_ms <= 0:
        raise ValueError(
            f"reference_tick_ms must be positive, got {config.motion.reference_tick_ms}"
        )

    _validate_fraction("dead_zone_fraction", config.stability.dead_zone_fraction)
    _validate_fraction("threshold_fraction", config.stability.threshold_fraction)

    if config.topple.frames <= 0:
        raise ValueError(f"topple frames must be positive, got {config.topple.frames}")

    if config.scoring.milestone_height < 2:
        raise ValueError(
            f"milestone_height must be at least 2, got {config.scoring.milestone_height}"
        )
    if config.scoring.milestone_delay_ms < 0:
        raise ValueError(
            f"milestone_delay_ms must be non-negative, got {config.scoring.milestone_delay_ms}"
        )
    if config.mood.happy_duration_ms < 0:
        raise ValueError(
            f"happy_duration_ms must be non-negative, got {config.mood.happy_duration_ms}"
        )

    # The tower never grows past the milestone, so this bounds the obs arrays
    if config.observation.max_pieces < config.scoring.milestone_height:
        raise ValueError(
            f"observation.max_pieces ({config.observation.max_pieces}) must be at least "
            f"scoring.milestone_height ({config.scoring.milestone_height})"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        piece_width=float(board_data["piece_width"]),
        piece_height=float(board_data.get("piece_height", 20)),
        track_width=float(board_data.get("track_width", 400)),
        track_min=float(board_data.get("track_min", 0)),
        track_max=float(board_data["track_max"]),
        start_position=float(board_data["start_position"]),
        start_direction=int(board_data.get("start_direction", 1))
    )

    motion_data = raw["motion"]
    motion = MotionConfig(
        base_speed=float(motion_data["base_speed"]),
        speed_step=float(motion_data.get("speed_step", 1.0)),
        reference_tick_ms=float(motion_data.get("reference_tick_ms", 16.0))
    )

    stability_data = raw["stability"]
    stability = StabilityConfig(
        dead_zone_fraction=float(stability_data["dead_zone_fraction"]),
        threshold_fraction=float(stability_data["threshold_fraction"])
    )

    topple_data = raw["topple"]
    topple = ToppleConfig(
        frames=int(topple_data["frames"]),
        rotation_step=float(topple_data.get("rotation_step", 2.0)),
        slide_step=float(topple_data.get("slide_step", 1.0))
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        milestone_height=int(scoring_data["milestone_height"]),
        milestone_delay_ms=float(scoring_data.get("milestone_delay_ms", 100.0))
    )

    # Optional sections
    mood_data = raw.get("mood", {})
    mood = MoodConfig(
        happy_duration_ms=float(mood_data.get("happy_duration_ms", 500.0))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_pieces=int(obs_data.get("max_pieces", scoring.milestone_height))
    )

    config = GameConfig(
        board=board,
        motion=motion,
        stability=stability,
        topple=topple,
        scoring=scoring,
        mood=mood,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
