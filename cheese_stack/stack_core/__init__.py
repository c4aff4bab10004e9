"""
Stack Core - The game state machine and everything it drives.

Main exports:
- StackGame: Round state machine (start / act / tick)
- StackEnv: Gymnasium environment for agents
- evaluate: Center-of-mass stability heuristic
- resolve_placement: Drop outcome resolution
- GameConfig: Configuration loaded from game_config.yaml
"""

from cheese_stack.stack_core.config_loader import GameConfig, load_config
from cheese_stack.stack_core.pieces import Piece
from cheese_stack.stack_core.stability import StabilityResult, evaluate
from cheese_stack.stack_core.placement import PlacementKind, PlacementResult, resolve_placement
from cheese_stack.stack_core.motion import MotionState, advance, speed_for_multiplier
from cheese_stack.stack_core.topple import ToppleState, advance_topple
from cheese_stack.stack_core.mood import Mood
from cheese_stack.stack_core.game import ActOutcome, RoundState, StackGame
from cheese_stack.stack_core.env_gym import StackEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Piece",
    "StabilityResult",
    "evaluate",
    "PlacementKind",
    "PlacementResult",
    "resolve_placement",
    "MotionState",
    "advance",
    "speed_for_multiplier",
    "ToppleState",
    "advance_topple",
    "Mood",
    "ActOutcome",
    "RoundState",
    "StackGame",
    "StackEnv",
]
