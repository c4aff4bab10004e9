"""
Tests for the round state machine.
"""

import pytest

from cheese_stack.stack_core.config_loader import load_config
from cheese_stack.stack_core.game import ActOutcome, RoundState, StackGame
from cheese_stack.stack_core.mood import Mood


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return StackGame(config=config)


@pytest.fixture
def playing(game):
    assert game.act() is ActOutcome.STARTED
    return game


def stack_in_place(game, count):
    """Drop ``count`` pieces without moving the slice."""
    return [game.act() for _ in range(count)]


def run_collapse(game):
    ticks = 0
    while game.round_state is RoundState.TOPPLING:
        game.tick(1.0)
        ticks += 1
    return ticks


class TestLifecycle:
    """Round start and entry point dispatch."""

    def test_initial_state(self, game):
        assert game.round_state is RoundState.IDLE
        assert game.tower == ()
        assert game.motion is None
        assert game.score == 0
        assert game.multiplier == 1
        assert game.high_score == 0
        assert game.mood is Mood.NORMAL

    def test_act_from_idle_starts(self, game, config):
        assert game.act() is ActOutcome.STARTED
        assert game.round_state is RoundState.PLAYING
        assert game.motion.position == config.board.start_position
        assert game.motion.direction == config.board.start_direction

    def test_start_mid_round_is_ignored(self, playing):
        stack_in_place(playing, 2)
        playing.tick(3.0)
        position = playing.motion.position

        playing.start()

        assert len(playing.tower) == 2
        assert playing.score == 2
        assert playing.motion.position == position

    def test_tick_moves_slice_only_while_playing(self, game):
        game.tick(5.0)
        assert game.motion is None

        game.act()
        game.tick(5.0)
        assert game.motion.position == pytest.approx(170.0)

    def test_negative_tick_rejected(self, playing):
        with pytest.raises(ValueError):
            playing.tick(-1.0)

    def test_speed_follows_multiplier(self, playing, config):
        assert playing.speed == config.motion.base_speed


class TestScenario:
    """Full round from first drop to collapse."""

    def test_first_extend_collapse(self, playing):
        assert playing.act() is ActOutcome.FIRST_PIECE
        assert playing.score == 1

        assert playing.act() is ActOutcome.EXTENDED
        assert playing.score == 2
        assert len(playing.tower) == 2

        # 15 reference ticks at speed 4 moves the slice 60 units right
        playing.tick(15.0)
        assert playing.motion.position == pytest.approx(210.0)

        assert playing.act() is ActOutcome.COLLAPSING
        assert playing.round_state is RoundState.TOPPLING
        assert playing.topple.direction == 1
        assert playing.topple.frame == 0
        assert len(playing.tower) == 3
        # Collapsing placements earn nothing, and the high score waits
        assert playing.score == 2
        assert playing.high_score == 0

        for _ in range(49):
            playing.tick(1.0)
        assert playing.round_state is RoundState.TOPPLING
        assert playing.high_score == 0

        playing.tick(1.0)
        assert playing.round_state is RoundState.ENDED
        assert playing.topple is None
        assert playing.high_score == 2

        # Ended keeps the fallen tower for display
        top = playing.tower[2]
        assert top.rotation == pytest.approx(2 * 1 * 3 * 50)
        assert top.position == pytest.approx(260.0)

    def test_collapse_blocks_input(self, playing):
        stack_in_place(playing, 2)
        playing.tick(15.0)
        playing.act()

        assert playing.act() is ActOutcome.REJECTED
        playing.start()
        assert playing.round_state is RoundState.TOPPLING
        assert len(playing.tower) == 3

    def test_collapse_runs_fifty_ticks(self, playing):
        stack_in_place(playing, 2)
        playing.tick(15.0)
        playing.act()
        assert run_collapse(playing) == 50

    def test_miss_ends_round_immediately(self, playing):
        playing.act()
        # 30 ticks at speed 4 puts the slice at 270, clear of [150, 250)
        playing.tick(30.0)

        assert playing.act() is ActOutcome.MISSED
        assert playing.round_state is RoundState.ENDED
        assert playing.is_over
        assert playing.high_score == 1
        assert len(playing.tower) == 1
        assert playing.motion is None
        assert playing.mood is Mood.SAD

    def test_act_after_end_starts_new_round(self, playing):
        playing.act()
        playing.tick(30.0)
        playing.act()

        assert playing.act() is ActOutcome.STARTED
        assert playing.round_state is RoundState.PLAYING
        assert playing.tower == ()
        assert playing.score == 0
        assert playing.high_score == 1

    def test_high_score_only_rises(self, playing):
        # Round 1: two points, then collapse
        stack_in_place(playing, 2)
        playing.tick(15.0)
        playing.act()
        run_collapse(playing)
        assert playing.high_score == 2

        # Round 2: one point, then miss
        playing.act()
        playing.act()
        playing.tick(30.0)
        assert playing.act() is ActOutcome.MISSED
        assert playing.score == 1
        assert playing.high_score == 2

    @pytest.mark.parametrize("ticks", [0, 3, 40, 75, 110, 200])
    def test_first_piece_lands_anywhere(self, playing, ticks):
        playing.tick(float(ticks))
        assert playing.act() is ActOutcome.FIRST_PIECE


class TestMilestone:
    """Board clear and multiplier bump at the height milestone."""

    def test_milestone_reset(self, playing, config):
        height = config.scoring.milestone_height
        outcomes = stack_in_place(playing, height)

        assert outcomes[0] is ActOutcome.FIRST_PIECE
        assert all(o is ActOutcome.EXTENDED for o in outcomes[1:])
        assert len(playing.tower) == height
        assert playing.score == height
        assert playing.milestone_pending

        # Drops wait for the reset
        assert playing.act() is ActOutcome.REJECTED
        assert len(playing.tower) == height

        # 6 ticks = 96 ms, not yet due
        playing.tick(6.0)
        assert playing.milestone_pending
        assert len(playing.tower) == height

        # 7 ticks = 112 ms
        playing.tick(1.0)
        assert not playing.milestone_pending
        assert playing.tower == ()
        assert playing.multiplier == 2
        assert playing.score == height
        assert playing.round_state is RoundState.PLAYING

    def test_multiplier_raises_points_and_speed(self, playing, config):
        height = config.scoring.milestone_height
        stack_in_place(playing, height)
        playing.tick(7.0)

        assert playing.speed == config.motion.base_speed + config.motion.speed_step
        assert playing.act() is ActOutcome.FIRST_PIECE
        assert playing.score == height + 2
        assert playing.act() is ActOutcome.EXTENDED
        assert playing.score == height + 4

    def test_fresh_round_cancels_pending_reset(self, playing, config):
        height = config.scoring.milestone_height
        stack_in_place(playing, height)
        assert playing.milestone_pending

        playing.reset()
        playing.start()
        stack_in_place(playing, 3)
        playing.tick(10.0)

        assert len(playing.tower) == 3
        assert playing.multiplier == 1
        assert not playing.milestone_pending


class TestMood:
    """Reaction indicator."""

    def test_happy_then_normal(self, playing):
        playing.act()
        assert playing.mood is Mood.HAPPY

        # 31 ticks = 496 ms
        playing.tick(31.0)
        assert playing.mood is Mood.HAPPY
        playing.tick(1.0)
        assert playing.mood is Mood.NORMAL

    def test_new_cheer_restarts_timer(self, playing):
        playing.act()
        # 2 ticks = 32 ms; the slice moves 8 units, inside the dead zone
        playing.tick(2.0)
        assert playing.act() is ActOutcome.EXTENDED

        # 512 ms: the first timer would have expired by now
        playing.tick(30.0)
        assert playing.mood is Mood.HAPPY

        playing.tick(2.0)
        assert playing.mood is Mood.NORMAL

    def test_sad_on_collapse(self, playing):
        stack_in_place(playing, 2)
        playing.tick(15.0)
        playing.act()
        assert playing.mood is Mood.SAD
        run_collapse(playing)
        assert playing.mood is Mood.SAD

    def test_start_resets_mood(self, playing):
        playing.act()
        playing.tick(30.0)
        playing.act()
        playing.act()
        assert playing.mood is Mood.NORMAL


class TestSnapshot:
    """Read-only views for renderers and agents."""

    def test_snapshot_tracks_tower(self, playing, config):
        stack_in_place(playing, 3)
        snapshot = playing.snapshot()

        assert snapshot.round_state == "playing"
        assert snapshot.tower_height == 3
        assert snapshot.piece_mask.sum() == 3
        assert snapshot.piece_x.shape == (config.observation.max_pieces,)
        assert snapshot.piece_x[0] == 150
        assert snapshot.stable
        assert snapshot.topple_frame == -1

    def test_snapshot_is_detached(self, playing):
        playing.act()
        snapshot = playing.snapshot()
        playing.act()
        assert snapshot.tower_height == 1
        assert snapshot.piece_mask.sum() == 1

    def test_obs_dict_keys(self, playing):
        obs = playing.snapshot().to_obs_dict()
        for key in ("round_state", "score", "multiplier", "moving_position",
                    "tower_height", "piece_x", "piece_rotation", "piece_mask"):
            assert key in obs

    def test_render_data(self, playing):
        playing.act()
        data = playing.get_render_data()
        assert data["moving_x"] == 150
        assert len(data["pieces"]) == 1
        assert data["round_state"] == "playing"
        assert data["mood"] == "happy"
