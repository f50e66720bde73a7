"""Frame composition for the engine canvas.

The renderer only reads engine state. Anything it caches (sky gradient, cloud
sprite) is derived from the surface size, never from the simulation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pygame

from .config import (
    CLOUD_COLOR,
    CLOUD_PERIOD,
    CLOUDS,
    GROUND_BAND_HEIGHT,
    GROUND_COLOR,
    GROUND_LINE_COLOR,
    GROUND_TILE_WIDTH,
    SKY_BOTTOM,
    SKY_TOP,
)
from .utils import gradient_surface

if TYPE_CHECKING:
    from .engine import Engine

# Cloud puffs relative to the cloud anchor: (dx, radius)
_PUFFS = ((0, 15), (15, 20), (30, 15))


def cloud_positions(ticks: int, width: int) -> list[tuple[float, float]]:
    """Anchors of the clouds visible at ``ticks``; a pure function of the tick count."""
    visible = []
    for base_x, y, drift in CLOUDS:
        x = base_x - (ticks * drift) % CLOUD_PERIOD
        if -100 < x < width + 50:
            visible.append((x, y))
    return visible


class Renderer:
    def __init__(self, surface: pygame.Surface) -> None:
        self.surface = surface
        self.width, self.height = surface.get_size()
        self.sky = gradient_surface(self.width, self.height, SKY_TOP, SKY_BOTTOM)
        self.cloud_sprite = self._make_cloud_sprite()

    def _make_cloud_sprite(self) -> pygame.Surface:
        s = pygame.Surface((65, 40), pygame.SRCALPHA)
        for dx, r in _PUFFS:
            pygame.draw.circle(s, CLOUD_COLOR[:3], (15 + dx, 20), r)
        s.set_alpha(CLOUD_COLOR[3])
        return s

    def render(self, engine: "Engine") -> None:
        surf = self.surface
        surf.blit(self.sky, (0, 0))
        self.draw_ground(surf, engine.ground_y, engine.ground_offset)
        engine.player.draw(surf)
        for obs in engine.obstacles:
            obs.draw(surf)
        self.draw_clouds(surf, engine.ticks)

    def draw_ground(self, surf: pygame.Surface, ground_y: float, offset: float) -> None:
        gy = int(ground_y)
        pygame.draw.rect(surf, GROUND_COLOR, pygame.Rect(0, gy, self.width, GROUND_BAND_HEIGHT))

        # Chevrons anchored to the scroll offset
        half = GROUND_TILE_WIDTH // 2
        x = offset
        while x < self.width + GROUND_TILE_WIDTH:
            left = (int(x), gy)
            mid = (int(x) + half, gy + GROUND_BAND_HEIGHT // 2)
            right = (int(x) + GROUND_TILE_WIDTH, gy)
            pygame.draw.lines(surf, GROUND_LINE_COLOR, False, [left, mid, right], 2)
            x += GROUND_TILE_WIDTH

    def draw_clouds(self, surf: pygame.Surface, ticks: int) -> None:
        for x, y in cloud_positions(ticks, self.width):
            surf.blit(self.cloud_sprite, (int(x) - 15, int(y) - 20))
