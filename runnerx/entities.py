"""Game entities: the player-controlled eye and the obstacles it jumps over.

Physics here run in ticks: velocities are pixels per tick and every update is
one explicit Euler step. Spacing and jump arcs were tuned against that step,
so nothing in this module takes a dt.
"""

from __future__ import annotations

import enum

import pygame

from .config import (
    BIRD_COLOR,
    BIRD_WING,
    CACTUS_COLOR,
    CACTUS_STRIPE,
    ELEVATED_OBSTACLE_LIFT,
    ELEVATED_OBSTACLE_SIZE,
    EYE_BODY,
    EYE_HIGHLIGHT,
    EYE_IRIS,
    EYE_PUPIL,
    EYE_RIM,
    GRAVITY,
    GROUND_OBSTACLE_LIFT,
    GROUND_OBSTACLE_SIZE,
    HITBOX_INSET,
    JUMP_POWER,
    PLAYER_HEIGHT,
    PLAYER_WIDTH,
    PLAYER_X,
)
from .utils import Box, inset_box


class Player:
    """The eye. Runs in place at a fixed x; only y changes."""

    def __init__(self, ground_y: float, x: float = PLAYER_X) -> None:
        self.x = float(x)
        self.width = PLAYER_WIDTH
        self.height = PLAYER_HEIGHT
        self.jump_power = JUMP_POWER
        self.gravity = GRAVITY
        self.ground_y = float(ground_y)
        self.reset()

    @property
    def rest_y(self) -> float:
        return self.ground_y - self.height

    def reset(self) -> None:
        self.y = self.rest_y
        self.velocity_y = 0.0
        self.airborne = False

    def jump(self) -> None:
        if self.airborne:
            return
        self.velocity_y = -self.jump_power
        self.airborne = True

    def update(self) -> None:
        if not self.airborne:
            return
        self.y += self.velocity_y
        self.velocity_y += self.gravity
        # Land
        if self.y >= self.rest_y:
            self.y = self.rest_y
            self.velocity_y = 0.0
            self.airborne = False

    @property
    def box(self) -> Box:
        return (self.x, self.y, self.width, self.height)

    @property
    def hitbox(self) -> Box:
        """Sprite box shrunk on all sides so edge grazes don't count."""
        return inset_box(self.box, HITBOX_INSET)

    def draw(self, surf: pygame.Surface) -> None:
        cx = self.x + self.width / 2
        cy = self.y + self.height / 2
        rx = self.width / 2 - 2
        ry = self.height / 2 - 5

        body = pygame.Rect(0, 0, int(rx * 2), int(ry * 2))
        body.center = (int(cx), int(cy))
        pygame.draw.ellipse(surf, EYE_BODY, body)
        pygame.draw.ellipse(surf, EYE_RIM, body, 2)

        center = (int(cx), int(cy))
        pygame.draw.circle(surf, EYE_PUPIL, center, 8)
        pygame.draw.circle(surf, EYE_IRIS, center, 4)
        pygame.draw.circle(surf, EYE_HIGHLIGHT, (int(cx) + 1, int(cy) - 1), 1.5)


class ObstacleKind(enum.Enum):
    GROUND = "cactus"
    ELEVATED = "bird"


class Obstacle:
    def __init__(self, x: float, y: float, width: float, height: float, kind: ObstacleKind) -> None:
        self.x = float(x)
        self.y = float(y)
        self.width = width
        self.height = height
        self.kind = kind

    @classmethod
    def spawn(cls, kind: ObstacleKind, x: float, ground_y: float) -> "Obstacle":
        """Build an obstacle with the fixed geometry of its kind."""
        if kind is ObstacleKind.ELEVATED:
            w, h = ELEVATED_OBSTACLE_SIZE
            lift = ELEVATED_OBSTACLE_LIFT
        else:
            w, h = GROUND_OBSTACLE_SIZE
            lift = GROUND_OBSTACLE_LIFT
        return cls(x, ground_y - lift, w, h, kind)

    @property
    def box(self) -> Box:
        return (self.x, self.y, self.width, self.height)

    @property
    def right(self) -> float:
        return self.x + self.width

    def update(self, speed: float) -> None:
        self.x -= speed

    def offscreen(self) -> bool:
        return self.right <= 0

    def draw(self, surf: pygame.Surface) -> None:
        x, y = int(self.x), int(self.y)
        w, h = int(self.width), int(self.height)
        if self.kind is ObstacleKind.GROUND:
            pygame.draw.rect(surf, CACTUS_COLOR, pygame.Rect(x, y, w, h))
            # Stripes every 10px, skipped where the body is too short
            for dy in (5, 15, 25):
                if dy + 5 <= h:
                    pygame.draw.rect(surf, CACTUS_STRIPE, pygame.Rect(x + 2, y + dy, w - 4, 5))
        else:
            pygame.draw.rect(surf, BIRD_COLOR, pygame.Rect(x, y, w, h))
            pygame.draw.rect(surf, BIRD_WING, pygame.Rect(x + 5, y + 3, w - 10, h - 6))

    def __repr__(self) -> str:
        return f"Obstacle({self.kind.value}, x={self.x:.1f}, y={self.y:.1f}, {self.width}x{self.height})"
