"""
Prism — Color Utility Tests
Rounding rules, luminance, and the RGB <-> HSL round trip.

Run with: pytest tests/test_color.py -v
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

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


class TestRounding:

    def test_round_half_up(self):
        np.testing.assert_array_equal(round_half_up([0.5, 1.5, 2.5, 2.4]), [1, 2, 3, 2])

    def test_to_uint8_rounds_half_to_even(self):
        np.testing.assert_array_equal(to_uint8([0.5, 1.5, 2.5]), [0, 2, 2])

    def test_to_uint8_clamps(self):
        np.testing.assert_array_equal(to_uint8([-40.0, 300.0, 255.4]), [0, 255, 255])

    def test_to_uint8_dtype(self):
        assert to_uint8([1.0]).dtype == np.uint8


class TestBrightness:

    def test_luminance_weights_sum_to_one(self):
        assert luminance(np.array([255, 255, 255])) == pytest.approx(255.0)

    def test_luminance_green_dominates(self):
        assert luminance(np.array([0, 255, 0])) > luminance(np.array([255, 0, 0]))
        assert luminance(np.array([255, 0, 0])) > luminance(np.array([0, 0, 255]))

    def test_mean_brightness(self):
        assert mean_brightness(np.array([30, 60, 90])) == pytest.approx(60.0)

    def test_lerp_endpoints(self):
        assert lerp(10.0, 20.0, 0.0) == 10.0
        assert lerp(10.0, 20.0, 1.0) == 20.0
        assert lerp(10.0, 20.0, 0.25) == 12.5


class TestHsl:

    @pytest.mark.parametrize("rgb,hsl", [
        ((255, 0, 0), (0.0, 1.0, 0.5)),
        ((0, 255, 0), (1 / 3, 1.0, 0.5)),
        ((0, 0, 255), (2 / 3, 1.0, 0.5)),
        ((255, 255, 255), (0.0, 0.0, 1.0)),
        ((0, 0, 0), (0.0, 0.0, 0.0)),
    ])
    def test_primaries(self, rgb, hsl):
        np.testing.assert_allclose(rgb_to_hsl(np.array(rgb)), hsl, atol=1e-9)

    def test_gray_is_achromatic(self):
        h, s, l = rgb_to_hsl(np.array([128, 128, 128]))
        assert h == 0.0
        assert s == 0.0
        assert l == pytest.approx(128 / 255)

    def test_round_trip_random_pixels(self):
        rng = np.random.RandomState(7)
        rgb = rng.randint(0, 256, (50, 3)).astype(np.float64)
        np.testing.assert_allclose(hsl_to_rgb(rgb_to_hsl(rgb)), rgb, atol=1.0)

    def test_hsl_to_rgb_gray(self):
        np.testing.assert_array_equal(hsl_to_rgb(np.array([0.3, 0.0, 0.5])), [128, 128, 128])

    def test_hue_color_returns_ints(self):
        color = hue_color(0.0, 1.0, 0.5)
        assert color == (255, 0, 0)
        assert all(isinstance(c, int) for c in color)
