"""
Prism — Error-Diffusion Dithering
Floyd-Steinberg halftoning to pure black and white.

Error weights (x = current pixel, scan left->right, top->bottom):

            x    7/16
    3/16  5/16   1/16

Traversal order decides the output, so the scan is a plain nested loop.
Pending error is kept as unclamped floats: a neighbour pushed below 0
still quantizes to black, even at threshold 0.
"""

from dataclasses import dataclass

import numpy as np

from core.color import luminance, round_half_up
from effects.base import FilterPass, read_setting


def floyd_steinberg(gray: np.ndarray, threshold: float) -> tuple[np.ndarray, float]:
    """Dither a 2-D grayscale array to {0, 255}.

    Args:
        gray: (H, W) values 0-255.
        threshold: Cut-off in 0-255; values below it become 0.

    Returns:
        (quantized uint8 array, total error pushed past the image border).
        The sum of (gray - quantized) always equals the leaked error.
    """
    height, width = gray.shape
    work = [[float(v) for v in row] for row in gray]
    out = np.zeros((height, width), dtype=np.uint8)
    leaked = 0.0

    for y in range(height):
        row = work[y]
        below = work[y + 1] if y + 1 < height else None
        for x in range(width):
            old = row[x]
            new = 0.0 if old < threshold else 255.0
            out[y, x] = int(new)
            error = old - new
            if error == 0.0:
                continue

            if x + 1 < width:
                row[x + 1] += error * 7 / 16
            else:
                leaked += error * 7 / 16

            if below is None:
                leaked += error * 9 / 16
                continue
            if x > 0:
                below[x - 1] += error * 3 / 16
            else:
                leaked += error * 3 / 16
            below[x] += error * 5 / 16
            if x + 1 < width:
                below[x + 1] += error * 1 / 16
            else:
                leaked += error * 1 / 16

    return out, leaked


@dataclass(frozen=True)
class DitherPass(FilterPass):
    name = "dithering"
    threshold: float = 0.5

    def apply(self, buffer):
        rgb = buffer.rgb
        gray = round_half_up(luminance(rgb))
        out, _ = floyd_steinberg(gray, self.threshold * 255)
        rgb[:] = out[:, :, np.newaxis]


def dithering_passes(settings, region=None):
    return [DitherPass(threshold=read_setting(settings, "threshold", 0.5, 0.0, 1.0))]
