"""
Prism — Tonal Effects
Brightness, contrast, saturation, hue, grayscale, sepia, invert,
threshold, posterize, duotone.

Single per-pixel pass each. Only brightness, contrast and saturation
honour a FilterRegion.
"""

from dataclasses import dataclass

import numpy as np

from core.color import (
    hsl_to_rgb,
    hue_color,
    lerp,
    luminance,
    mean_brightness,
    rgb_to_hsl,
    round_half_up,
    to_uint8,
)
from effects.base import MaskedPass, PixelPass, read_int_setting, read_setting

SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])

# Duotone target colors: (saturation, lightness)
DUOTONE_DARK_SL = (0.8, 0.2)
DUOTONE_LIGHT_SL = (0.8, 0.8)
DUOTONE_DARK_HUE = 0.67
DUOTONE_LIGHT_HUE = 0.17


@dataclass(frozen=True)
class BrightnessPass(MaskedPass):
    name = "brightness"
    amount: float = 0.0

    def transform(self, rgb):
        return to_uint8(rgb.astype(np.float64) + self.amount * 255)


@dataclass(frozen=True)
class ContrastPass(MaskedPass):
    name = "contrast"
    contrast: float = 0.0

    @property
    def factor(self) -> float:
        c = self.contrast
        return (259 * (c + 255)) / (255 * (259 - c))

    def transform(self, rgb):
        out = round_half_up(self.factor * (rgb.astype(np.float64) - 128) + 128)
        return np.clip(out, 0, 255).astype(np.uint8)


@dataclass(frozen=True)
class SaturationPass(MaskedPass):
    name = "saturation"
    amount: float = 0.0

    def transform(self, rgb):
        hsl = rgb_to_hsl(rgb)
        hsl[..., 1] = np.clip(hsl[..., 1] + self.amount / 10, 0.0, 1.0)
        return to_uint8(hsl_to_rgb(hsl))


@dataclass(frozen=True)
class HuePass(PixelPass):
    name = "hue"
    degrees: float = 0.0

    def transform(self, rgb):
        hsl = rgb_to_hsl(rgb)
        hsl[..., 0] = np.mod(hsl[..., 0] + self.degrees / 360, 1.0)
        return to_uint8(hsl_to_rgb(hsl))


@dataclass(frozen=True)
class GrayscalePass(PixelPass):
    name = "grayscale"

    def transform(self, rgb):
        gray = to_uint8(luminance(rgb))
        return np.repeat(gray[:, :, np.newaxis], 3, axis=2)


@dataclass(frozen=True)
class SepiaPass(PixelPass):
    name = "sepia"

    def transform(self, rgb):
        out = rgb.astype(np.float64) @ SEPIA_MATRIX.T
        return to_uint8(np.minimum(255, out))


@dataclass(frozen=True)
class InvertPass(PixelPass):
    name = "invert"

    def transform(self, rgb):
        return 255 - rgb


@dataclass(frozen=True)
class ThresholdPass(PixelPass):
    name = "threshold"
    level: float = 0.5

    def transform(self, rgb):
        bright = mean_brightness(rgb) >= self.level * 255
        out = np.where(bright, 255, 0).astype(np.uint8)
        return np.repeat(out[:, :, np.newaxis], 3, axis=2)


@dataclass(frozen=True)
class PosterizePass(PixelPass):
    name = "posterize"
    levels: int = 4

    def transform(self, rgb):
        step = 255 / (self.levels - 1)
        out = round_half_up(round_half_up(rgb / step) * step)
        return np.clip(out, 0, 255).astype(np.uint8)


@dataclass(frozen=True)
class DuotonePass(PixelPass):
    """Map luminance onto a dark->light two-color gradient.

    The blend weight is g * intensity + (1 - intensity) * g, which reduces
    to g: intensity currently has no visible effect.
    """
    name = "duotone"
    dark_hue: float = DUOTONE_DARK_HUE
    light_hue: float = DUOTONE_LIGHT_HUE
    intensity: float = 0.5

    def transform(self, rgb):
        dark = np.array(hue_color(self.dark_hue, *DUOTONE_DARK_SL), dtype=np.float64)
        light = np.array(hue_color(self.light_hue, *DUOTONE_LIGHT_SL), dtype=np.float64)
        norm = luminance(rgb) / 255
        t = norm * self.intensity + (1 - self.intensity) * norm
        return to_uint8(lerp(dark, light, t[:, :, np.newaxis]))


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def brightness_passes(settings, region=None):
    return [BrightnessPass(region=region, amount=read_setting(settings, "value", 0.0, -1.0, 1.0))]


def contrast_passes(settings, region=None):
    return [ContrastPass(region=region, contrast=read_setting(settings, "value", 0.0, -100.0, 100.0))]


def saturation_passes(settings, region=None):
    return [SaturationPass(region=region, amount=read_setting(settings, "value", 0.0, -10.0, 10.0))]


def hue_passes(settings, region=None):
    return [HuePass(degrees=read_setting(settings, "value", 0.0, 0.0, 360.0))]


def grayscale_passes(settings, region=None):
    return [GrayscalePass()]


def sepia_passes(settings, region=None):
    return [SepiaPass()]


def invert_passes(settings, region=None):
    return [InvertPass()]


def threshold_passes(settings, region=None):
    return [ThresholdPass(level=read_setting(settings, "threshold", 0.5, 0.0, 1.0))]


def posterize_passes(settings, region=None):
    return [PosterizePass(levels=read_int_setting(settings, "levels", 4, 2, 8))]


def duotone_passes(settings, region=None):
    """Hues arrive in degrees; any value wraps onto the color wheel."""
    dark = read_setting(settings, "dark_color", DUOTONE_DARK_HUE * 360, -1e6, 1e6)
    light = read_setting(settings, "light_color", DUOTONE_LIGHT_HUE * 360, -1e6, 1e6)
    return [DuotonePass(
        dark_hue=(dark % 360) / 360,
        light_hue=(light % 360) / 360,
        intensity=read_setting(settings, "intensity", 0.5, 0.0, 1.0),
    )]
