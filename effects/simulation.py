"""
Prism — Simulation Effects
Conway's Game of Life and Gray-Scott reaction-diffusion, both seeded from
the image and run on a downsampled toroidal grid.

Grids are double-buffered: every step reads the previous generation only.
"""

from dataclasses import dataclass

import numpy as np

from core.color import mean_brightness, round_half_up
from effects.base import (
    FilterPass,
    cell_means,
    expand_cells,
    fill_white,
    read_int_setting,
    read_setting,
)

NEIGHBOURS = [(dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dy, dx) != (0, 0)]

# Gray-Scott constants
DIFFUSION_A = 1.0
DIFFUSION_B = 0.5
TIME_STEP = 1.0
LAPLACE_CARDINAL = 0.2
LAPLACE_DIAGONAL = 0.05
LAPLACE_CENTER = 0.95
SEED_A = 0.5
SEED_B = 0.25
DARK_SEED_LEVEL = 0.4


# ---------------------------------------------------------------------------
# Game of Life
# ---------------------------------------------------------------------------

def seed_grid(rgb: np.ndarray, cell_size: int, threshold: float) -> np.ndarray:
    """Boolean grid, True where a cell's mean brightness is below threshold."""
    return cell_means(mean_brightness(rgb) / 255, cell_size) < threshold


def neighbour_count(grid: np.ndarray) -> np.ndarray:
    alive = grid.astype(np.int32)
    total = np.zeros_like(alive)
    for dy, dx in NEIGHBOURS:
        total += np.roll(np.roll(alive, dy, axis=0), dx, axis=1)
    return total


def life_step(grid: np.ndarray) -> np.ndarray:
    """One B3/S23 generation with wrap-around edges. Returns a new grid."""
    count = neighbour_count(grid)
    return (count == 3) | (grid & (count == 2))


@dataclass(frozen=True)
class CellularPass(FilterPass):
    name = "cellular"
    threshold: float = 0.5
    iterations: int = 3
    cell_size: int = 2

    def apply(self, buffer):
        rgb = buffer.rgb
        grid = seed_grid(rgb, self.cell_size, self.threshold)
        for _ in range(self.iterations):
            grid = life_step(grid)

        fill_white(rgb)
        alive = expand_cells(grid, self.cell_size, buffer.height, buffer.width)
        rgb[alive] = 0


# ---------------------------------------------------------------------------
# Reaction-diffusion
# ---------------------------------------------------------------------------

def laplacian(field: np.ndarray) -> np.ndarray:
    """3x3 weighted Laplacian with toroidal wrap.

    Weights sum to 1.0 around the centre but the centre is scaled by 0.95,
    so a flat field decays slightly.
    """
    total = np.zeros_like(field, dtype=np.float64)
    for dy, dx in NEIGHBOURS:
        weight = LAPLACE_DIAGONAL if dy and dx else LAPLACE_CARDINAL
        total += weight * np.roll(np.roll(field, dy, axis=0), dx, axis=1)
    return total - LAPLACE_CENTER * field


def gray_scott_step(a: np.ndarray, b: np.ndarray, feed: float, kill: float):
    """Advance both chemical fields one step. Returns new (a, b) float32 grids."""
    reaction = a * b * b
    next_a = a + TIME_STEP * (DIFFUSION_A * laplacian(a) - reaction + feed * (1 - a))
    next_b = b + TIME_STEP * (DIFFUSION_B * laplacian(b) + reaction - (feed + kill) * b)
    return (np.clip(next_a, 0, 1).astype(np.float32),
            np.clip(next_b, 0, 1).astype(np.float32))


def seed_fields(rgb: np.ndarray, scale: int):
    """Initial (a, b) grids: dark cells and a centre disk are pre-seeded."""
    bright = cell_means(mean_brightness(rgb) / 255, scale)
    dark = bright < DARK_SEED_LEVEL
    a = np.where(dark, SEED_A, 1.0).astype(np.float32)
    b = np.where(dark, SEED_B, 0.0).astype(np.float32)

    rows, cols = a.shape
    radius = min(rows, cols) // 10
    offsets = np.arange(-radius, radius + 1)
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
    inside = dx * dx + dy * dy <= radius * radius
    ys = (rows // 2 + dy[inside]) % rows
    xs = (cols // 2 + dx[inside]) % cols
    a[ys, xs] = SEED_A
    b[ys, xs] = SEED_B
    return a, b


@dataclass(frozen=True)
class ReactionDiffusionPass(FilterPass):
    """Gray-Scott model; the B concentration is rendered as ink on white."""
    name = "reaction-diffusion"
    iterations: int = 10
    scale: int = 4
    feed_rate: float = 0.055
    kill_rate: float = 0.062

    def apply(self, buffer):
        rgb = buffer.rgb
        a, b = seed_fields(rgb, self.scale)
        for _ in range(self.iterations):
            a, b = gray_scott_step(a, b, self.feed_rate, self.kill_rate)

        rows, cols = b.shape
        gray = round_half_up(255 * (1 - b.astype(np.float64))).astype(np.uint8)
        ys = np.minimum(rows - 1, np.arange(buffer.height) // self.scale)
        xs = np.minimum(cols - 1, np.arange(buffer.width) // self.scale)
        rgb[:] = gray[np.ix_(ys, xs)][:, :, np.newaxis]


def cellular_passes(settings, region=None):
    return [CellularPass(
        threshold=read_setting(settings, "threshold", 0.5, 0.1, 0.9),
        iterations=read_int_setting(settings, "iterations", 3, 1, 10),
        cell_size=read_int_setting(settings, "cell_size", 2, 1, 8),
    )]


def reaction_diffusion_passes(settings, region=None):
    return [ReactionDiffusionPass(
        iterations=read_int_setting(settings, "iterations", 10, 1, 20),
        scale=read_int_setting(settings, "scale", 4, 1, 8),
        feed_rate=read_setting(settings, "feed_rate", 0.055, 0.01, 0.1),
        kill_rate=read_setting(settings, "kill_rate", 0.062, 0.01, 0.1),
    )]
