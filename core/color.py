"""
Prism — Color Space Utilities
RGB <-> HSL conversion, luminance, linear interpolation, byte rounding.

Every function works element-wise on numpy arrays (or plain scalars).
RGB values are 0-255 floats; H, S and L are 0.0-1.0.
"""

import numpy as np

# ITU-R BT.709 luma weights
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)


def round_half_up(values):
    """Round .5 upward, matching the rounding used by the pixel formulas."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def to_uint8(values) -> np.ndarray:
    """Store floats the way a clamped byte array does: clip to 0-255, round half to even."""
    return np.rint(np.clip(values, 0, 255)).astype(np.uint8)


def luminance(rgb) -> np.ndarray:
    """Perceptual luminance of an (..., 3) RGB array. Returns 0-255 floats."""
    rgb = np.asarray(rgb, dtype=np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    return wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]


def mean_brightness(rgb) -> np.ndarray:
    """Unweighted channel mean (R + G + B) / 3, 0-255."""
    rgb = np.asarray(rgb, dtype=np.float64)
    return (rgb[..., 0] + rgb[..., 1] + rgb[..., 2]) / 3.0


def lerp(a, b, t):
    """Linear interpolation from a (t=0) to b (t=1)."""
    return a + (b - a) * t


def rgb_to_hsl(rgb) -> np.ndarray:
    """Convert (..., 3) RGB bytes to (..., 3) HSL in 0.0-1.0.

    Achromatic pixels get hue and saturation 0. When two channels tie for
    the maximum, red wins over green and green over blue.
    """
    rgb = np.asarray(rgb, dtype=np.float64) / 255.0
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    mx = np.max(rgb, axis=-1)
    mn = np.min(rgb, axis=-1)
    light = (mx + mn) / 2.0
    d = mx - mn

    chromatic = d > 0
    safe_d = np.where(chromatic, d, 1.0)
    denom = np.where(light > 0.5, 2.0 - mx - mn, mx + mn)
    sat = np.where(chromatic, d / np.where(chromatic, denom, 1.0), 0.0)

    hue = np.where(
        mx == r,
        (g - b) / safe_d + np.where(g < b, 6.0, 0.0),
        np.where(mx == g, (b - r) / safe_d + 2.0, (r - g) / safe_d + 4.0),
    )
    hue = np.where(chromatic, hue / 6.0, 0.0)
    return np.stack([hue, sat, light], axis=-1)


def _hue_to_channel(p, q, t):
    t = np.where(t < 0, t + 1.0, t)
    t = np.where(t > 1, t - 1.0, t)
    return np.where(
        t < 1 / 6, p + (q - p) * 6.0 * t,
        np.where(
            t < 1 / 2, q,
            np.where(t < 2 / 3, p + (q - p) * (2 / 3 - t) * 6.0, p),
        ),
    )


def hsl_to_rgb(hsl) -> np.ndarray:
    """Convert (..., 3) HSL in 0.0-1.0 to RGB, rounded to whole 0-255 values."""
    hsl = np.asarray(hsl, dtype=np.float64)
    h, s, l = hsl[..., 0], hsl[..., 1], hsl[..., 2]

    q = np.where(l < 0.5, l * (1.0 + s), l + s - l * s)
    p = 2.0 * l - q
    rgb = np.stack([
        _hue_to_channel(p, q, h + 1 / 3),
        _hue_to_channel(p, q, h),
        _hue_to_channel(p, q, h - 1 / 3),
    ], axis=-1)

    gray = np.stack([l, l, l], axis=-1)
    rgb = np.where((s == 0)[..., np.newaxis], gray, rgb)
    return round_half_up(rgb * 255.0)


def hue_color(hue: float, saturation: float, lightness: float) -> tuple[int, int, int]:
    """Single HSL color as an (R, G, B) tuple of ints."""
    r, g, b = hsl_to_rgb(np.array([hue, saturation, lightness]))
    return int(r), int(g), int(b)
