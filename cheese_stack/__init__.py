"""
Cheese Stack Package
====================

A reflex stacking game: drop an oscillating cheese slice onto the tower,
keep the stack balanced, and climb through score multipliers.

- stack_core: game state machine, stability model, motion and collapse
- logging_config: logger setup for applications embedding the game

All gameplay constants are in game_config.yaml.
"""
