"""Host shell: window, input, overlays, high score and leaderboard around the engine.

The shell keeps its own ``ViewState`` and moves it only on engine events
(score update, game over) and on the start/reset calls it makes itself.
"""

from __future__ import annotations

import enum
import logging
import os
import sys
from pathlib import Path

import pygame

from .config import (
    ACCENT_COLOR,
    FIELD_HEIGHT,
    FIELD_WIDTH,
    FPS,
    HEADER_BG,
    HEADER_HEIGHT,
    HIGH_SCORE_PATH,
    LEADERBOARD,
    OVERLAY_COLOR,
    PANEL_BG,
    TEXT_COLOR,
    TEXT_DIM,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from .engine import Engine
from .highscore import HighScoreStore
from .loop import FrameScheduler

logger = logging.getLogger(__name__)

JUMP_KEYS = (pygame.K_SPACE, pygame.K_UP)


class ViewState(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    GAME_OVER = "game_over"


def ranked_leaderboard() -> list[tuple[int, str, int, str]]:
    """Static leaderboard entries as (rank, name, score, date), best first."""
    entries = sorted(LEADERBOARD, key=lambda e: e[1], reverse=True)
    return [(i + 1, name, score, date) for i, (name, score, date) in enumerate(entries)]


class App:
    """Top-level shell: owns the window and feeds refreshes to the engine."""

    def __init__(self, high_score_path: Path = HIGH_SCORE_PATH) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("RunnerX")
        self.clock = pygame.time.Clock()
        self.font_big = pygame.font.SysFont(None, 48)
        self.font_small = pygame.font.SysFont(None, 24)
        self.overlay = pygame.Surface((FIELD_WIDTH, FIELD_HEIGHT), pygame.SRCALPHA)
        self.overlay.fill(OVERLAY_COLOR)

        self.high_scores = HighScoreStore(high_score_path)
        self.view = ViewState.MENU
        self.score = 0
        self.new_record = False

        self.scheduler = FrameScheduler()
        self.canvas = pygame.Surface((FIELD_WIDTH, FIELD_HEIGHT))
        self.engine = Engine(self.canvas, self, scheduler=self.scheduler)

    # -- engine events -----------------------------------------------------

    def on_score_update(self, score: int) -> None:
        self.score = score

    def on_game_over(self, final_score: int) -> None:
        self.score = final_score
        self.new_record = self.high_scores.submit(final_score)
        self.view = ViewState.GAME_OVER

    # -- actions -----------------------------------------------------------

    def start(self) -> None:
        self.new_record = False
        self.engine.start()
        self.view = ViewState.PLAYING

    def reset(self) -> None:
        self.engine.reset()
        self.new_record = False
        self.view = ViewState.MENU

    def press(self) -> None:
        """Jump while playing; otherwise begin a fresh run."""
        if self.view is ViewState.PLAYING:
            self.engine.jump()
        elif self.view is ViewState.GAME_OVER:
            self.engine.reset()
            self.start()
        else:
            self.start()

    def handle_input(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            if event.key in JUMP_KEYS:
                self.press()
            elif event.key in (pygame.K_r,):
                self.reset()
            elif event.key in (pygame.K_ESCAPE,):
                pygame.event.post(pygame.event.Event(pygame.QUIT))
        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1:
                self.press()

    # -- drawing -----------------------------------------------------------

    def draw(self) -> None:
        self._draw_header(self.screen)
        self.screen.blit(self.canvas, (0, HEADER_HEIGHT))
        if self.view is ViewState.MENU:
            self._draw_overlay(
                self.screen,
                "RunnerX",
                ["Press SPACE or click to start", "Use SPACE or UP to jump"],
            )
        elif self.view is ViewState.GAME_OVER:
            lines = [f"Score: {self.score}"]
            if self.new_record:
                lines.append("New High Score!")
            lines.append("Press SPACE or click to restart")
            self._draw_overlay(self.screen, "Game Over!", lines)
        self._draw_leaderboard(self.screen)
        pygame.display.flip()

    def _draw_header(self, surf: pygame.Surface) -> None:
        pygame.draw.rect(surf, HEADER_BG, pygame.Rect(0, 0, WINDOW_WIDTH, HEADER_HEIGHT))
        title = self.font_small.render("RunnerX  -  Intuition Eye Runner", True, TEXT_COLOR)
        surf.blit(title, title.get_rect(midleft=(16, HEADER_HEIGHT // 2)))
        scores = self.font_small.render(
            f"Score: {self.score:05d}    High: {self.high_scores.best:05d}", True, TEXT_COLOR
        )
        surf.blit(scores, scores.get_rect(midright=(WINDOW_WIDTH - 16, HEADER_HEIGHT // 2)))

    def _draw_overlay(self, surf: pygame.Surface, title: str, lines: list[str]) -> None:
        surf.blit(self.overlay, (0, HEADER_HEIGHT))
        cx = FIELD_WIDTH // 2
        y = HEADER_HEIGHT + 50
        text = self.font_big.render(title, True, TEXT_COLOR)
        surf.blit(text, text.get_rect(center=(cx, y)))
        y += 40
        for line in lines:
            color = ACCENT_COLOR if line == "New High Score!" else TEXT_DIM
            text = self.font_small.render(line, True, color)
            surf.blit(text, text.get_rect(center=(cx, y)))
            y += 26

    def _draw_leaderboard(self, surf: pygame.Surface) -> None:
        top = HEADER_HEIGHT + FIELD_HEIGHT
        pygame.draw.rect(surf, PANEL_BG, pygame.Rect(0, top, WINDOW_WIDTH, WINDOW_HEIGHT - top))
        heading = self.font_small.render("Leaderboard", True, ACCENT_COLOR)
        surf.blit(heading, (16, top + 12))
        y = top + 42
        for rank, name, score, date in ranked_leaderboard():
            row = self.font_small.render(f"#{rank}  {name:<14} {score:>6,}   {date}", True, TEXT_COLOR)
            surf.blit(row, (24, y))
            y += 26

    def run(self) -> None:
        logger.info("RunnerX window open (%dx%d @ %d fps)", WINDOW_WIDTH, WINDOW_HEIGHT, FPS)
        while True:
            self.clock.tick(FPS)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.engine.stop()
                    pygame.quit()
                    sys.exit(0)
                self.handle_input(event)

            # One display refresh: the engine ticks (if running), then the shell composes
            self.scheduler.run_frame()
            self.draw()


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main() -> None:
    setup_logging(os.getenv("RUNNERX_DEBUG", "false").lower() == "true")
    App().run()
