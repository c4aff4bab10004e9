"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the stacking game.
Reward is always 0.0 - agents must compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from cheese_stack.stack_core.config_loader import GameConfig, load_config
from cheese_stack.stack_core.game import RoundState, StackGame
from cheese_stack.stack_core.state_snapshot import GameSnapshot, MOOD_CODES, ROUND_STATE_CODES

WAIT = 0
DROP = 1


class StackEnv(gym.Env):
    """
    Cheese stacking game as a Gymnasium environment.

    Action Space:
        Discrete(2). 0 waits, 1 calls ``act()`` (drop the slice).
        Every step then advances the game by one reference tick. A collapse
        triggered by the action is played out inside the same step.

    Observation Space:
        Dict of scalars describing the round and the moving slice, plus
        fixed-size per-piece arrays with a mask.

    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.

    Info:
        Contains score, delta_score, multiplier, outcome, round_state, etc.
    """

    metadata = {
        "render_modes": [],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        max_episode_ticks: int = 10_000,
    ):
        """
        Initialize stacking environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            max_episode_ticks: Ticks after which the episode is truncated.
        """
        super().__init__()

        self._config = load_config(config_path)
        self._max_episode_ticks = max_episode_ticks
        self._game = StackGame(config=self._config)
        self._ticks = 0

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_pieces = self._config.observation.max_pieces
        board = self._config.board
        # Collapse frames slide pieces off the track; leave room for that
        slack = self._config.topple.frames * self._config.topple.slide_step
        x_low = board.track_min - slack
        x_high = board.track_max + slack

        return spaces.Dict({
            "round_state": spaces.Box(low=0, high=len(ROUND_STATE_CODES) - 1, shape=(), dtype=np.int32),
            "mood": spaces.Box(low=0, high=len(MOOD_CODES) - 1, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "multiplier": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "moving_position": spaces.Box(low=board.track_min, high=board.track_max, shape=(), dtype=np.float32),
            "moving_direction": spaces.Box(low=-1, high=1, shape=(), dtype=np.int32),
            "speed": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "tower_height": spaces.Box(low=0, high=max_pieces, shape=(), dtype=np.int32),
            "center_of_mass": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "lean_direction": spaces.Box(low=-1, high=1, shape=(), dtype=np.int32),
            "piece_x": spaces.Box(low=x_low, high=x_high, shape=(max_pieces,), dtype=np.float32),
            "piece_rotation": spaces.Box(low=-np.inf, high=np.inf, shape=(max_pieces,), dtype=np.float32),
            "piece_mask": spaces.MultiBinary(max_pieces),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment to a freshly started round.

        The high score carries over between episodes, as it does between
        rounds of one game.

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._ticks = 0
        self._game.reset()
        self._game.start()

        obs = self._snapshot_to_obs(self._game.snapshot())
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 0 to wait, 1 to drop.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())

        score_before = self._game.score
        outcome = self._game.act() if action == DROP else None

        self._game.tick(1.0)
        self._ticks += 1
        while self._game.round_state is RoundState.TOPPLING:
            self._game.tick(1.0)
            self._ticks += 1

        obs = self._snapshot_to_obs(self._game.snapshot())
        reward = 0.0

        terminated = self._game.is_over
        truncated = not terminated and self._ticks >= self._max_episode_ticks

        info = self._game.get_info()
        info["delta_score"] = self._game.score - score_before
        info["outcome"] = outcome.value if outcome is not None else ""
        info["ticks"] = self._ticks

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict()

    def close(self) -> None:
        """Nothing to release; present for API completeness."""

    @property
    def game(self) -> StackGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
