"""
Prism — Neighbourhood Effects
Multi-pass separable box blur and 5-point sharpen.

Both read from a snapshot of the buffer and write back as clamped bytes,
so a pass never sees its own partial output.
"""

import math
from dataclasses import dataclass

import numpy as np

from core.backend import require_backend
from core.color import to_uint8
from effects.base import FilterPass, read_int_setting, read_setting

MAX_SAMPLE_RADIUS = 5


@dataclass(frozen=True)
class BlurPass(FilterPass):
    """Repeated horizontal-then-vertical box average.

    Sample half-width is min(radius, 5); ceil(radius / 5) repetitions
    approximate larger radii. Samples past the edge reuse the edge pixel.
    """
    name = "blur"
    radius: int = 5

    @property
    def sample_size(self) -> int:
        return min(self.radius, MAX_SAMPLE_RADIUS)

    @property
    def repetitions(self) -> int:
        return math.ceil(self.radius / MAX_SAMPLE_RADIUS)

    def apply(self, buffer):
        if self.radius <= 0:
            return
        cv2 = require_backend()
        k = 2 * self.sample_size + 1
        rgb = buffer.rgb
        work = rgb.astype(np.float32)

        for _ in range(self.repetitions):
            horizontal = cv2.blur(work, (k, 1), borderType=cv2.BORDER_REPLICATE)
            work = to_uint8(horizontal).astype(np.float32)
            vertical = cv2.blur(work, (1, k), borderType=cv2.BORDER_REPLICATE)
            work = to_uint8(vertical).astype(np.float32)

        rgb[:] = work.astype(np.uint8)


@dataclass(frozen=True)
class SharpenPass(FilterPass):
    """Kernel [0,-a,0; -a,1+4a,-a; 0,-a,0] with a = amount * 0.5.

    The 1-pixel frame border is left untouched. Evaluated as
    center*(1+4a) - (top+left+right+bottom)*a in float64, in that term
    order; exact .5 results round half to even.
    """
    name = "sharpen"
    amount: float = 0.5

    def apply(self, buffer):
        if buffer.width < 3 or buffer.height < 3:
            return
        a = self.amount * 0.5
        rgb = buffer.rgb
        src = rgb.astype(np.float64)
        center = src[1:-1, 1:-1]
        around = src[:-2, 1:-1] + src[1:-1, :-2] + src[1:-1, 2:] + src[2:, 1:-1]
        rgb[1:-1, 1:-1] = to_uint8(center * (1 + 4 * a) - around * a)


def blur_passes(settings, region=None):
    return [BlurPass(radius=read_int_setting(settings, "radius", 5, 0, 20))]


def sharpen_passes(settings, region=None):
    return [SharpenPass(amount=read_setting(settings, "amount", 0.5, 0.0, 5.0))]
