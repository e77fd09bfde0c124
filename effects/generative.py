"""
Prism — Generative Effects
Noise, stippling, geometric abstraction.

All three draw from numpy's RandomState. Passing a `seed` setting makes
the output reproducible; without one every run differs.
"""

import math
from dataclasses import dataclass

import numpy as np

from core.color import mean_brightness, round_half_up, to_uint8
from effects.base import (
    FilterPass,
    cell_means,
    fill_white,
    paint_disk,
    read_int_setting,
    read_seed,
    read_setting,
)


# Samples drawn per batch when stippling
STIPPLE_CHUNK = 65536


def _rng(seed: int | None) -> np.random.RandomState:
    return np.random.RandomState(seed)


@dataclass(frozen=True)
class NoisePass(FilterPass):
    """Uniform noise in [-amount*255, amount*255], same offset for R, G and B."""
    name = "noise"
    amount: float = 0.2
    seed: int | None = None

    def apply(self, buffer):
        rgb = buffer.rgb
        rng = _rng(self.seed)
        offset = (rng.random_sample((buffer.height, buffer.width)) * 2 - 1) * self.amount * 255
        rgb[:] = to_uint8(rgb.astype(np.float64) + offset[:, :, np.newaxis])


@dataclass(frozen=True)
class StipplePass(FilterPass):
    """Monte-Carlo ink marks on white paper.

    Random sample points are kept with probability (1 - brightness) * density,
    so dark regions collect more marks. Each kept sample draws a dot (radius
    grows with darkness) or, with hatching on, a short diagonal stroke.
    """
    name = "stippling"
    density: float = 1.0
    dot_size: float = 1.0
    hatching: bool = False
    seed: int | None = None

    def sample_count(self, width: int, height: int) -> int:
        spacing = 10 / self.density
        return math.ceil(width * height / (spacing * spacing) * 5)

    def apply(self, buffer):
        rgb = buffer.rgb
        width, height = buffer.width, buffer.height
        brightness = mean_brightness(rgb) / 255
        fill_white(rgb)

        rng = _rng(self.seed)
        remaining = self.sample_count(width, height)
        while remaining > 0:
            n = min(remaining, STIPPLE_CHUNK)
            remaining -= n
            # One (x, y, chance) row per sample, so output is chunk-size independent
            draws = rng.random_sample((n, 3))
            xs = np.floor(draws[:, 0] * width).astype(np.int64)
            ys = np.floor(draws[:, 1] * height).astype(np.int64)

            b = brightness[ys, xs]
            keep = draws[:, 2] <= (1 - b) * self.density
            for x, y, bright in zip(xs[keep], ys[keep], b[keep]):
                if self.hatching:
                    _paint_stroke(rgb, x, y, bright)
                else:
                    paint_disk(rgb, x, y, self.dot_size * (1 - bright) + 0.5)


def _paint_stroke(rgb, x, y, brightness):
    """Diagonal stroke; direction flips between dark and light samples."""
    h, w = rgb.shape[:2]
    length = math.floor(5 + 10 * (1 - brightness))
    angle = math.pi * (0.25 if brightness < 0.5 else -0.25)
    steps = -length / 2 + np.arange(length)
    px = np.floor(x + steps * math.cos(angle)).astype(np.int64)
    py = np.floor(y + steps * math.sin(angle)).astype(np.int64)
    ok = (px >= 0) & (px < w) & (py >= 0) & (py < h)
    rgb[py[ok], px[ok]] = 0


SHAPES = ("square", "circle", "triangle", "diamond")


@dataclass(frozen=True)
class GeometricPass(FilterPass):
    """Grid of flat shapes, each filled with its cell's mean color.

    The shape per cell is floor(u / (1 - complexity) * 4) mod 4 for a uniform
    draw u, so higher complexity spreads cells across more shape kinds.
    At complexity 1 the index is undefined and cells stay white.
    """
    name = "geometric"
    grid_size: int = 16
    complexity: float = 0.5
    seed: int | None = None

    def shape_index(self, draw: float) -> int | None:
        if self.complexity >= 1:
            return None
        return int(math.floor(draw / (1 - self.complexity) * 4)) % 4

    def apply(self, buffer):
        rgb = buffer.rgb
        grid = self.grid_size
        colors = round_half_up(cell_means(rgb, grid)).astype(np.uint8)
        fill_white(rgb)

        rng = _rng(self.seed)
        draws = rng.random_sample(colors.shape[:2])

        local_y, local_x = np.mgrid[0:grid, 0:grid].astype(np.float64)
        half = grid / 2
        triangle = (local_x >= half - local_y / 2) & (local_x <= half + local_y / 2)
        dist = np.sqrt((local_x - half) ** 2 + (local_y - half) ** 2)
        manhattan = np.abs(local_x - half) + np.abs(local_y - half)

        for row in range(colors.shape[0]):
            for col in range(colors.shape[1]):
                kind = self.shape_index(draws[row, col])
                if kind is None:
                    continue
                color = colors[row, col]
                scale = 0.5 + (color.astype(np.float64).sum() / 3 / 255) * 0.5
                if kind == 0:
                    mask = np.ones((grid, grid), dtype=bool)
                elif kind == 1:
                    mask = dist <= half * scale
                elif kind == 2:
                    mask = triangle
                else:
                    mask = manhattan <= half * scale
                block = rgb[row * grid:(row + 1) * grid, col * grid:(col + 1) * grid]
                block[mask[:block.shape[0], :block.shape[1]]] = color


def noise_passes(settings, region=None):
    return [NoisePass(amount=read_setting(settings, "noise", 0.2, 0.0, 1.0),
                      seed=read_seed(settings))]


def stippling_passes(settings, region=None):
    return [StipplePass(
        density=read_setting(settings, "density", 1.0, 0.1, 10.0),
        dot_size=read_setting(settings, "dot_size", 1.0, 0.5, 5.0),
        hatching=read_setting(settings, "use_hatching", 0.0, 0.0, 1.0) > 0.5,
        seed=read_seed(settings),
    )]


def geometric_passes(settings, region=None):
    return [GeometricPass(
        grid_size=read_int_setting(settings, "grid_size", 16, 1, 64),
        complexity=read_setting(settings, "complexity", 0.5, 0.0, 1.0),
        seed=read_seed(settings),
    )]
