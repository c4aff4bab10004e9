"""
Human Play Mode
===============

Play Cheese Stack in a pygame window.

Controls:
    - Space/Click: Start a round, or drop the slice
    - ESC: Quit

Usage:
    python -m tools.play_human [--width WIDTH] [--height HEIGHT] [--fps FPS]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from cheese_stack.logging_config import setup_logging
from cheese_stack.stack_core.config_loader import load_config, GameConfig
from cheese_stack.stack_core.game import ActOutcome, StackGame

# Vertical distance between stacked slices, including a small gap
ROW_PITCH = 22


class StackRenderer:
    """Draws the tower, the moving slice and the scoreboard."""

    def __init__(self, config: GameConfig, window_width: int, window_height: int):
        self._config = config
        self._window_width = window_width
        self._window_height = window_height

        # Colors
        self._background = (240, 253, 244)
        self._arena_fill = (220, 252, 231)
        self._arena_border = (74, 222, 128)
        self._cheese_fill = (255, 217, 102)
        self._cheese_edge = (246, 178, 107)
        self._cheese_hole = (255, 229, 153)
        self._text_dark = (22, 101, 52)
        self._mood_colors = {
            "normal": (120, 120, 120),
            "happy": (34, 197, 94),
            "sad": (220, 38, 38),
        }

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 42)
        self._font_medium = pygame.font.Font(None, 28)

        self._slice_surface = self._create_slice_surface()

        # Layout
        self._top_ui_height = 70
        self._arena_x = 20
        self._ground_y = window_height - 60

    def _create_slice_surface(self) -> pygame.Surface:
        """Pre-render one cheese slice."""
        width = int(self._config.board.piece_width)
        height = int(self._config.board.piece_height)
        surface = pygame.Surface((width, height), pygame.SRCALPHA)

        sx = width / 100
        sy = height / 20
        outline = [(5 * sx, 2 * sy), (95 * sx, 2 * sy), (90 * sx, 18 * sy), (10 * sx, 18 * sy)]
        pygame.draw.polygon(surface, self._cheese_fill, outline)
        pygame.draw.polygon(surface, self._cheese_edge, outline, 1)
        for cx, cy, r in ((25, 8, 2), (60, 10, 2.5), (40, 12, 2), (75, 7, 1.5)):
            pygame.draw.circle(surface, self._cheese_hole, (int(cx * sx), int(cy * sy)), max(1, int(r * sx)))
        return surface

    def _slice_rect_center(self, x: float, row: int) -> Tuple[int, int]:
        board = self._config.board
        cx = self._arena_x + x + board.piece_width / 2
        cy = self._ground_y - row * ROW_PITCH - board.piece_height / 2
        return int(cx), int(cy)

    def _draw_slice(self, screen: pygame.Surface, x: float, row: int, rotation: float = 0.0) -> None:
        # pygame rotates counter-clockwise; game rotation is clockwise
        surface = pygame.transform.rotate(self._slice_surface, -rotation) if rotation else self._slice_surface
        rect = surface.get_rect(center=self._slice_rect_center(x, row))
        screen.blit(surface, rect)

    def render(self, screen: pygame.Surface, render_data: dict) -> None:
        """Render the complete game scene."""
        screen.fill(self._background)

        arena = pygame.Rect(
            self._arena_x, self._top_ui_height,
            self._window_width - 2 * self._arena_x, self._ground_y - self._top_ui_height
        )
        pygame.draw.rect(screen, self._arena_fill, arena)
        pygame.draw.rect(screen, self._arena_border, arena, 4)

        for row, piece in enumerate(render_data["pieces"]):
            self._draw_slice(screen, piece["x"], row, piece["rotation"])

        if render_data["moving_x"] is not None:
            self._draw_slice(screen, render_data["moving_x"], len(render_data["pieces"]))

        self._draw_scoreboard(screen, render_data)
        self._draw_footer(screen, render_data)

    def _draw_scoreboard(self, screen: pygame.Surface, render_data: dict) -> None:
        entries = (
            f"Score: {render_data['score']}",
            f"Multiplier: {render_data['multiplier']}x",
            f"High Score: {render_data['high_score']}",
        )
        column = self._window_width // len(entries)
        for i, text in enumerate(entries):
            label = self._font_medium.render(text, True, self._text_dark)
            screen.blit(label, (i * column + (column - label.get_width()) // 2, 20))

    def _draw_footer(self, screen: pygame.Surface, render_data: dict) -> None:
        mood = render_data["mood"]
        pygame.draw.circle(
            screen, self._mood_colors[mood], (self._window_width - 40, self._ground_y + 30), 18
        )

        state = render_data["round_state"]
        if state == "idle":
            message = "Press SPACE to start"
        elif state == "ended":
            message = "Press SPACE to play again"
        elif state == "toppling":
            message = "Timber!"
        else:
            message = "Press SPACE to stack cheese!"
        label = self._font_large.render(message, True, self._text_dark)
        screen.blit(label, ((self._window_width - label.get_width()) // 2, self._ground_y + 15))


class HumanPlayer:
    """Human-playable game loop feeding frame time into the core."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        window_width: int = 600,
        window_height: int = 600,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps
        self._game = StackGame(config=config)

        pygame.init()
        self._screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption("Cheese Stack")
        self._clock = pygame.time.Clock()

        self._renderer = StackRenderer(config, window_width, window_height)
        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns the high score."""
        print("=== Cheese Stack ===")
        print("Space or click to start / drop, ESC to quit")
        print()

        reference_ms = self._config.motion.reference_tick_ms
        while self._running:
            self._handle_events()

            elapsed_ms = self._clock.tick(self._target_fps)
            # Clamp long stalls (window drags) so the slice doesn't teleport
            self._game.tick(min(elapsed_ms, 100) / reference_ms)

            self._renderer.render(self._screen, self._game.get_render_data())
            pygame.display.flip()

        pygame.quit()
        return self._game.high_score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_SPACE:
                    self._act()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._act()

    def _act(self) -> None:
        outcome = self._game.act()
        if outcome in (ActOutcome.MISSED, ActOutcome.COLLAPSING):
            print(f"{outcome.value.upper()} - Score: {self._game.score}")


def main():
    parser = argparse.ArgumentParser(description="Play Cheese Stack interactively")
    parser.add_argument("--width", type=int, default=600, help="Window width (default: 600)")
    parser.add_argument("--height", type=int, default=600, help="Window height (default: 600)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--log-level", default="INFO", help="Game log level (default: INFO)")

    args = parser.parse_args()
    setup_logging(args.log_level)

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps
        )
        high_score = player.run()
        print(f"\nHigh Score: {high_score}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
