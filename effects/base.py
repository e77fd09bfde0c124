"""
Prism — Filter Pass Base
Shared pieces for every effect family: the FilterPass value-object base,
settings readers with clamping, and region-gated writes.

A factory is a function (settings, region) -> list[FilterPass]. It reads
and clamps its own parameters; nothing here consults the catalog.
"""

import logging
import math
from dataclasses import dataclass
from typing import ClassVar, Mapping

import numpy as np

from core.buffer import PixelBuffer
from core.region import FilterRegion, region_mask

logger = logging.getLogger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def read_setting(settings: Mapping | None, key: str, default: float,
                 lo: float, hi: float) -> float:
    """Read settings[key] as a float clamped to [lo, hi].

    Missing keys, None and NaN use the default. Values that float() cannot
    convert use the default and log a warning.
    """
    raw = None if settings is None else settings.get(key)
    if raw is None:
        return clamp(default, lo, hi)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric setting %s=%r, using %s", key, raw, default)
        return clamp(default, lo, hi)
    if math.isnan(value):
        return clamp(default, lo, hi)
    return clamp(value, lo, hi)


def read_int_setting(settings: Mapping | None, key: str, default: int,
                     lo: int, hi: int) -> int:
    """Like read_setting, floored to a whole number before clamping."""
    value = read_setting(settings, key, default, -math.inf, math.inf)
    if math.isinf(value):
        return int(clamp(value, lo, hi))
    return int(clamp(math.floor(value), lo, hi))


def read_seed(settings: Mapping | None) -> int | None:
    """Optional RNG seed; None means fresh entropy."""
    raw = None if settings is None else settings.get("seed")
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric seed %r", raw)
        return None
    if not math.isfinite(value):
        return None
    return int(value) % (2 ** 32)


@dataclass(frozen=True)
class FilterPass:
    """One in-place mutation of a PixelBuffer.

    Subclasses are frozen dataclasses holding already-clamped parameters and
    set `name` to the effect they implement.
    """

    name: ClassVar[str] = ""

    def apply(self, buffer: PixelBuffer) -> None:
        raise NotImplementedError

    def __call__(self, buffer: PixelBuffer) -> None:
        self.apply(buffer)


@dataclass(frozen=True)
class PixelPass(FilterPass):
    """Pass that maps every pixel's RGB independently of its neighbours."""

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        """Map an (H, W, 3) uint8 array to its new (H, W, 3) uint8 values."""
        raise NotImplementedError

    def apply(self, buffer: PixelBuffer) -> None:
        rgb = buffer.rgb
        rgb[:] = self.transform(rgb)


@dataclass(frozen=True)
class MaskedPass(PixelPass):
    """Per-pixel pass whose writes honour an optional FilterRegion.

    Subclass fields must carry defaults because `region` already does.
    """

    region: FilterRegion | None = None

    def apply(self, buffer: PixelBuffer) -> None:
        rgb = buffer.rgb
        result = self.transform(rgb)
        mask = region_mask(self.region, buffer.width, buffer.height)
        if mask is None:
            rgb[:] = result
        else:
            rgb[mask] = result[mask]


def fill_white(rgb: np.ndarray) -> None:
    """Clear color channels to white (alpha untouched)."""
    rgb[:] = 255


def cell_means(values: np.ndarray, cell: int) -> np.ndarray:
    """Mean of (H, W, ...) values over cell x cell tiles.

    Edge tiles that run past the image only average their in-bounds pixels.
    Returns shape (ceil(H/cell), ceil(W/cell), ...).
    """
    h, w = values.shape[:2]
    rows = -(-h // cell)
    cols = -(-w // cell)
    values = values.astype(np.float64)
    sums = np.add.reduceat(np.add.reduceat(values, np.arange(0, h, cell), axis=0),
                           np.arange(0, w, cell), axis=1)
    heights = np.minimum(cell, h - np.arange(rows) * cell)
    widths = np.minimum(cell, w - np.arange(cols) * cell)
    counts = np.outer(heights, widths).astype(np.float64)
    if values.ndim > 2:
        counts = counts.reshape(counts.shape + (1,) * (values.ndim - 2))
    return sums / counts


def expand_cells(cells: np.ndarray, cell: int, height: int, width: int) -> np.ndarray:
    """Broadcast a per-cell array back to a (height, width, ...) pixel array."""
    return np.repeat(np.repeat(cells, cell, axis=0), cell, axis=1)[:height, :width]


def paint_disk(rgb: np.ndarray, cx: float, cy: float, radius: float, value: int = 0) -> None:
    """Rasterize a filled disk by unit steps from -radius to +radius.

    A point (dx, dy) on the step lattice is inside when dx^2 + dy^2 <= r^2;
    it paints pixel (floor(cx + dx), floor(cy + dy)). Out-of-bounds pixels
    are skipped.
    """
    if radius < 0:
        return
    h, w = rgb.shape[:2]
    steps = -radius + np.arange(int(math.floor(2 * radius)) + 1, dtype=np.float64)
    dy, dx = np.meshgrid(steps, steps, indexing="ij")
    inside = dx * dx + dy * dy <= radius * radius
    px = np.floor(cx + dx[inside]).astype(np.int64)
    py = np.floor(cy + dy[inside]).astype(np.int64)
    ok = (px >= 0) & (px < w) & (py >= 0) & (py < h)
    rgb[py[ok], px[ok]] = value
