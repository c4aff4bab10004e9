"""
Motion Controller
=================

Moves the unplaced slice back and forth along the track.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MotionState:
    """Position and heading of the moving slice."""
    position: float
    direction: int  # +1 right, -1 left


def speed_for_multiplier(multiplier: int, base_speed: float, speed_step: float) -> float:
    """Speed in units per reference tick; grows with every multiplier level."""
    return base_speed + (multiplier - 1) * speed_step


def advance(
    motion: MotionState,
    delta_time_units: float,
    speed: float,
    track_min: float,
    track_max: float
) -> MotionState:
    """
    Advance the moving slice.

    Reaching a bound clamps the position to it and flips the direction for the
    next call; the overshoot is discarded rather than reflected.

    Args:
        motion: Current state.
        delta_time_units: Elapsed time in reference ticks.
        speed: Units per reference tick.
        track_min: Left bound.
        track_max: Right bound.

    Returns:
        New MotionState.
    """
    new_position = motion.position + motion.direction * speed * delta_time_units

    if new_position >= track_max:
        return MotionState(track_max, -1)
    if new_position <= track_min:
        return MotionState(track_min, 1)

    return MotionState(new_position, motion.direction)
