"""
Tests for the moving slice and the collapse animation.
"""

import pytest

from cheese_stack.stack_core.motion import MotionState, advance, speed_for_multiplier
from cheese_stack.stack_core.pieces import Piece
from cheese_stack.stack_core.topple import TOPPLE_FRAMES, advance_topple

TRACK_MIN = 0.0
TRACK_MAX = 442.0


class TestMotion:
    """Clamp-and-reflect motion along the track."""

    def test_moves_by_speed_times_delta(self):
        motion = advance(MotionState(150, 1), 1.0, 4.0, TRACK_MIN, TRACK_MAX)
        assert motion == MotionState(154, 1)

    def test_delta_scales_distance(self):
        motion = advance(MotionState(150, -1), 2.5, 4.0, TRACK_MIN, TRACK_MAX)
        assert motion.position == pytest.approx(140.0)
        assert motion.direction == -1

    def test_zero_delta_holds_position(self):
        motion = advance(MotionState(150, 1), 0.0, 4.0, TRACK_MIN, TRACK_MAX)
        assert motion == MotionState(150, 1)

    def test_overshoot_is_discarded_at_max(self):
        motion = advance(MotionState(440, 1), 1.0, 4.0, TRACK_MIN, TRACK_MAX)
        assert motion == MotionState(TRACK_MAX, -1)

    def test_reflect_takes_effect_on_next_call(self):
        """At the right bound heading right: clamp first, move left after."""
        first = advance(MotionState(TRACK_MAX, 1), 1.0, 4.0, TRACK_MIN, TRACK_MAX)
        assert first.position == TRACK_MAX
        assert first.direction == -1

        second = advance(first, 1.0, 4.0, TRACK_MIN, TRACK_MAX)
        assert second.position == pytest.approx(TRACK_MAX - 4.0)
        assert second.direction == -1

    def test_clamps_at_min(self):
        first = advance(MotionState(2, -1), 1.0, 4.0, TRACK_MIN, TRACK_MAX)
        assert first == MotionState(TRACK_MIN, 1)

        second = advance(first, 1.0, 4.0, TRACK_MIN, TRACK_MAX)
        assert second == MotionState(4.0, 1)

    def test_huge_delta_never_leaves_track(self):
        motion = MotionState(150, 1)
        for _ in range(20):
            motion = advance(motion, 500.0, 4.0, TRACK_MIN, TRACK_MAX)
            assert TRACK_MIN <= motion.position <= TRACK_MAX

    def test_speed_grows_with_multiplier(self):
        assert speed_for_multiplier(1, 4.0, 1.0) == 4.0
        assert speed_for_multiplier(2, 4.0, 1.0) == 5.0
        assert speed_for_multiplier(5, 4.0, 0.5) == 6.0


class TestTopple:
    """Fixed-length collapse animation."""

    @pytest.fixture
    def tower(self):
        return (Piece(150, id=1), Piece(150, id=2), Piece(210, id=3))

    def test_done_exactly_after_fifty_frames(self, tower):
        frame = 0
        for _ in range(TOPPLE_FRAMES - 1):
            tower, done = advance_topple(tower, 1, frame)
            frame += 1
            assert not done

        tower, done = advance_topple(tower, 1, frame)
        assert done

    @pytest.mark.parametrize("direction", [1, -1])
    def test_cumulative_rotation_and_slide(self, tower, direction):
        original = tower
        frames = 17
        for frame in range(frames):
            tower, _ = advance_topple(tower, direction, frame)

        for i, piece in enumerate(tower):
            assert piece.rotation == pytest.approx(2 * direction * (i + 1) * frames)
            assert piece.position == pytest.approx(original[i].position + direction * frames)

    def test_ids_survive_animation(self, tower):
        new_tower, _ = advance_topple(tower, 1, 0)
        assert [p.id for p in new_tower] == [p.id for p in tower]

    def test_original_pieces_untouched(self, tower):
        advance_topple(tower, -1, 0)
        assert all(p.rotation == 0.0 for p in tower)

    def test_custom_length(self, tower):
        _, done = advance_topple(tower, 1, 4, total_frames=5)
        assert done
        _, done = advance_topple(tower, 1, 3, total_frames=5)
        assert not done
