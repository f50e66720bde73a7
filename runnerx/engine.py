"""Simulation engine: frame loop, physics, obstacle generation, collisions, scoring.

One ``Engine`` owns all mutable game state. Each scheduled frame runs
``update`` then ``render``; inside ``update`` the order is scoring, player
physics, ground scroll, spawn, obstacle advance/retire, collision. Collisions
are therefore tested against positions after this tick's movement, and the
rendered frame always shows a finished tick.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Callable, Protocol

import pygame

from .config import (
    ELEVATED_THRESHOLD,
    GROUND_BAND_HEIGHT,
    GROUND_TILE_WIDTH,
    INITIAL_SPEED,
    MAX_OBSTACLE_DISTANCE,
    MIN_OBSTACLE_DISTANCE,
    PLAYER_HEIGHT,
    SCORE_DIVISOR,
    SPEED_RAMP_TICKS,
    SPEED_STEP,
    ConfigurationError,
)
from .entities import Obstacle, ObstacleKind, Player
from .loop import FrameScheduler
from .renderer import Renderer
from .utils import boxes_overlap

logger = logging.getLogger(__name__)


class RunState(enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class EngineListener(Protocol):
    """Receives engine events. Called synchronously from inside a frame."""

    def on_score_update(self, score: int) -> None:
        ...

    def on_game_over(self, final_score: int) -> None:
        ...


@dataclass
class GameCallbacks:
    """Adapts a pair of plain callables to ``EngineListener``."""

    on_score_update: Callable[[int], None]
    on_game_over: Callable[[int], None]


class Engine:
    """Owns the player, obstacles, run state and scroll state of one game."""

    def __init__(
        self,
        surface: pygame.Surface,
        listener: EngineListener,
        *,
        scheduler: FrameScheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        width, height = surface.get_size()
        if width <= 0:
            raise ConfigurationError(f"surface width must be positive, got {width}")
        if height <= GROUND_BAND_HEIGHT + PLAYER_HEIGHT:
            raise ConfigurationError(
                f"surface height {height} leaves no room for the ground band "
                f"({GROUND_BAND_HEIGHT}px) and the player ({PLAYER_HEIGHT}px)"
            )
        self.surface = surface
        self.width = width
        self.height = height
        self.ground_y = height - GROUND_BAND_HEIGHT
        self.listener = listener
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.rng = rng if rng is not None else random.Random()
        self.renderer = Renderer(surface)
        self.player = Player(self.ground_y)
        self._state = RunState.STOPPED
        self._frame_handle: int | None = None
        self._init_run()
        self.render()

    def _init_run(self) -> None:
        self.ticks = 0
        self.speed = INITIAL_SPEED
        self.obstacles: list[Obstacle] = []
        self.ground_offset = 0.0
        self.player.reset()

    # -- state -------------------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is RunState.RUNNING

    @property
    def score(self) -> int:
        """Displayed score; advances once per SCORE_DIVISOR ticks."""
        return self.ticks // SCORE_DIVISOR

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> None:
        if self._state is RunState.RUNNING:
            return
        self._state = RunState.RUNNING
        logger.info("Run started (score=%d, speed=%.1f)", self.score, self.speed)
        self._frame_handle = self.scheduler.request_frame(self.frame)

    def stop(self) -> None:
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
        if self._state is RunState.RUNNING:
            self._state = RunState.STOPPED
            logger.info("Run stopped at tick %d", self.ticks)

    def reset(self) -> None:
        self.stop()
        self._init_run()
        logger.info("Engine reset")
        self.listener.on_score_update(0)
        self.render()

    def jump(self) -> None:
        """Jump if grounded; ignored mid-air."""
        self.player.jump()

    def frame(self) -> None:
        """One scheduled tick: update, render, then queue the next frame."""
        if self._state is not RunState.RUNNING:
            return
        self._frame_handle = None
        self.update()
        self.render()
        # A listener may already have restarted the run and queued a frame
        if self._state is RunState.RUNNING and self._frame_handle is None:
            self._frame_handle = self.scheduler.request_frame(self.frame)

    # -- simulation --------------------------------------------------------

    def update(self) -> None:
        self.ticks += 1
        # Ramp follows raw ticks, so it fires every 10 displayed points
        if self.ticks % SPEED_RAMP_TICKS == 0:
            self.speed += SPEED_STEP
            logger.debug("Speed ramped to %.1f at tick %d", self.speed, self.ticks)
        self.listener.on_score_update(self.score)
        if self._state is not RunState.RUNNING:
            return

        self.player.update()

        self.ground_offset -= self.speed
        if self.ground_offset <= -GROUND_TILE_WIDTH:
            self.ground_offset = 0.0

        self.maybe_spawn_obstacle()
        self.advance_obstacles()

        hit = self.detect_collision()
        if hit is not None:
            self._game_over(hit)

    def maybe_spawn_obstacle(self) -> None:
        if not self.obstacles:
            self.spawn_obstacle()
            return
        # Fresh threshold on every check, not fixed when the last one spawned
        gap = self.width - self.obstacles[-1].x
        threshold = self.rng.uniform(MIN_OBSTACLE_DISTANCE, MAX_OBSTACLE_DISTANCE)
        if gap > threshold:
            self.spawn_obstacle()

    def spawn_obstacle(self) -> Obstacle:
        kind = ObstacleKind.ELEVATED if self.rng.random() > ELEVATED_THRESHOLD else ObstacleKind.GROUND
        obstacle = Obstacle.spawn(kind, self.width, self.ground_y)
        self.obstacles.append(obstacle)
        logger.debug("Spawned %r", obstacle)
        return obstacle

    def advance_obstacles(self) -> None:
        for obs in self.obstacles:
            obs.update(self.speed)
        self.obstacles = [o for o in self.obstacles if not o.offscreen()]

    def detect_collision(self) -> Obstacle | None:
        """First obstacle (in spawn order) overlapping the player's inset hitbox."""
        hitbox = self.player.hitbox
        for obs in self.obstacles:
            if boxes_overlap(hitbox, obs.box):
                return obs
        return None

    def _game_over(self, obstacle: Obstacle) -> None:
        self.stop()
        final = self.score
        logger.info("Game over: hit %r, final score %d", obstacle, final)
        self.listener.on_game_over(final)

    def render(self) -> None:
        self.renderer.render(self)
