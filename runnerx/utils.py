"""Geometry and color utility functions used across the game."""

from __future__ import annotations

from typing import Tuple

import numpy as np
import pygame

Box = Tuple[float, float, float, float]  # x, y, width, height


def inset_box(box: Box, margin: float) -> Box:
    """Shrink a box by margin on every side."""
    x, y, w, h = box
    return (x + margin, y + margin, w - 2 * margin, h - 2 * margin)


def boxes_overlap(a: Box, b: Box) -> bool:
    """Strict AABB overlap; boxes that only share an edge do not overlap."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def vertical_gradient(
    w: int, h: int, top: tuple[int, int, int], bottom: tuple[int, int, int]
) -> np.ndarray:
    """Build a (w, h, 3) uint8 array blending top into bottom, for surfarray."""
    t = np.linspace(0.0, 1.0, h, dtype=np.float32)[:, None]
    rows = np.asarray(top, dtype=np.float32) * (1.0 - t) + np.asarray(bottom, dtype=np.float32) * t
    column = np.clip(rows, 0, 255).astype(np.uint8)
    return np.repeat(column[None, :, :], w, axis=0)


def gradient_surface(
    w: int, h: int, top: tuple[int, int, int], bottom: tuple[int, int, int]
) -> pygame.Surface:
    """Precompute a vertical gradient as a surface for fast blitting."""
    return pygame.surfarray.make_surface(vertical_gradient(w, h, top, bottom))
