"""
Prism — Tile Effects
Pixelate and halftone: the frame is cut into square cells and each cell is
redrawn from a single sample or statistic of the original pixels.
"""

from dataclasses import dataclass

import numpy as np

from core.color import mean_brightness
from effects.base import (
    FilterPass,
    cell_means,
    expand_cells,
    fill_white,
    paint_disk,
    read_int_setting,
)


@dataclass(frozen=True)
class PixelatePass(FilterPass):
    """Every tile takes the color of its top-left pixel."""
    name = "pixelate"
    pixel_size: int = 8

    def apply(self, buffer):
        size = self.pixel_size
        if size <= 1:
            return
        rgb = buffer.rgb
        samples = rgb[::size, ::size].copy()
        rgb[:] = expand_cells(samples, size, buffer.height, buffer.width)


@dataclass(frozen=True)
class HalftonePass(FilterPass):
    """Black dots on white, one per cell; darker cells get larger dots.

    Args:
        dot_size: Maximum dot radius (reached by a fully black cell).
        spacing: Gap added to dot_size to form the cell size.
    """
    name = "halftone"
    dot_size: int = 4
    spacing: int = 5

    @property
    def cell_size(self) -> int:
        return self.spacing + self.dot_size

    def apply(self, buffer):
        rgb = buffer.rgb
        cell = self.cell_size
        means = cell_means(mean_brightness(rgb), cell)
        radii = (255 - means) / 255 * self.dot_size
        fill_white(rgb)

        for row, col in zip(*np.nonzero(radii > 0)):
            paint_disk(rgb, col * cell + cell / 2, row * cell + cell / 2, radii[row, col])


def pixelate_passes(settings, region=None):
    return [PixelatePass(pixel_size=read_int_setting(settings, "pixel_size", 8, 1, 32))]


def halftone_passes(settings, region=None):
    return [HalftonePass(
        dot_size=read_int_setting(settings, "size", 4, 1, 20),
        spacing=read_int_setting(settings, "spacing", 5, 1, 20),
    )]
