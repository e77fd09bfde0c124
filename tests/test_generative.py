"""
Prism — Generative Effect Tests
Noise, stippling and geometric: seeded reproducibility, value ranges,
and the deterministic corners of each algorithm.

Run with: pytest tests/test_generative.py -v
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.buffer import PixelBuffer
from effects import apply_effect, generative
from effects.generative import (
    GeometricPass,
    StipplePass,
    geometric_passes,
    noise_passes,
    stippling_passes,
)


def solid(value, width=24, height=18):
    return PixelBuffer.blank(width, height, (value, value, value, 255))


# ---------------------------------------------------------------------------
# NOISE
# ---------------------------------------------------------------------------

class TestNoise:

    def test_seeded_is_reproducible(self, random_buffer):
        a = random_buffer.copy()
        b = random_buffer.copy()
        apply_effect(a, "noise", {"noise": 0.3, "seed": 5})
        apply_effect(b, "noise", {"noise": 0.3, "seed": 5})
        assert a == b

    def test_different_seeds_differ(self, random_buffer):
        a = random_buffer.copy()
        b = random_buffer.copy()
        apply_effect(a, "noise", {"seed": 1})
        apply_effect(b, "noise", {"seed": 2})
        assert a != b

    def test_zero_amount_is_noop(self, random_buffer):
        before = random_buffer.copy()
        apply_effect(random_buffer, "noise", {"noise": 0, "seed": 3})
        assert random_buffer == before

    def test_same_offset_on_all_channels(self):
        buf = solid(128)
        apply_effect(buf, "noise", {"noise": 0.2, "seed": 9})
        rgb = buf.rgb
        np.testing.assert_array_equal(rgb[..., 0], rgb[..., 1])
        np.testing.assert_array_equal(rgb[..., 1], rgb[..., 2])

    def test_offset_bounded(self):
        buf = solid(128)
        apply_effect(buf, "noise", {"noise": 0.1, "seed": 4})
        offset = np.abs(buf.rgb.astype(int) - 128)
        assert offset.max() <= 26
        assert offset.max() > 0

    def test_alpha_untouched(self, random_buffer):
        alpha = random_buffer.alpha.copy()
        apply_effect(random_buffer, "noise", {"noise": 1})
        np.testing.assert_array_equal(random_buffer.alpha, alpha)

    def test_factory(self):
        p = noise_passes({"noise": 4, "seed": 12.7})[0]
        assert p.amount == 1.0
        assert p.seed == 12


# ---------------------------------------------------------------------------
# STIPPLING
# ---------------------------------------------------------------------------

class TestStippling:

    def test_white_input_stays_blank(self):
        buf = solid(255)
        apply_effect(buf, "stippling", {"seed": 1})
        np.testing.assert_array_equal(buf.rgb, 255)

    def test_black_input_gets_marks(self):
        buf = solid(0)
        apply_effect(buf, "stippling", {"seed": 1})
        rgb = buf.rgb
        assert set(np.unique(rgb)) <= {0, 255}
        assert (rgb == 0).any()
        assert (rgb == 255).any()

    def test_hatching_marks(self):
        buf = solid(0, 40, 40)
        apply_effect(buf, "stippling", {"use_hatching": 1, "density": 3, "seed": 2})
        assert (buf.rgb == 0).sum() > 0

    def test_seeded_is_reproducible(self, gradient_buffer):
        a = gradient_buffer.copy()
        b = gradient_buffer.copy()
        apply_effect(a, "stippling", {"density": 4, "seed": 77})
        apply_effect(b, "stippling", {"density": 4, "seed": 77})
        assert a == b

    def test_denser_means_more_ink(self):
        sparse = solid(60, 48, 48)
        dense = solid(60, 48, 48)
        apply_effect(sparse, "stippling", {"density": 0.5, "seed": 8})
        apply_effect(dense, "stippling", {"density": 5, "seed": 8})
        assert (dense.rgb == 0).sum() > (sparse.rgb == 0).sum()

    def test_sample_count(self):
        assert StipplePass(density=1).sample_count(100, 100) == 500
        assert StipplePass(density=10).sample_count(10, 10) == 500

    def test_output_independent_of_batch_size(self, monkeypatch, gradient_buffer):
        whole = gradient_buffer.copy()
        batched = gradient_buffer.copy()
        apply_effect(whole, "stippling", {"density": 6, "seed": 5})
        monkeypatch.setattr(generative, "STIPPLE_CHUNK", 7)
        apply_effect(batched, "stippling", {"density": 6, "seed": 5})
        assert whole == batched

    def test_draws_bounded_per_batch(self, monkeypatch):
        sizes = []
        real_rng = generative._rng

        class Recording:
            def __init__(self, seed):
                self.rng = real_rng(seed)

            def random_sample(self, size=None):
                sizes.append(int(np.prod(size)))
                return self.rng.random_sample(size)

        monkeypatch.setattr(generative, "STIPPLE_CHUNK", 100)
        monkeypatch.setattr(generative, "_rng", Recording)
        StipplePass(density=10, seed=1).apply(solid(255, 30, 30))
        # 30*30 / 1 * 5 = 4500 samples -> 45 batches of 100 rows
        assert len(sizes) == 45
        assert max(sizes) == 300

    def test_alpha_untouched(self, random_buffer):
        alpha = random_buffer.alpha.copy()
        apply_effect(random_buffer, "stippling", {"seed": 0})
        np.testing.assert_array_equal(random_buffer.alpha, alpha)

    def test_factory(self):
        p = stippling_passes({"density": 50, "dot_size": 0, "use_hatching": 0.7})[0]
        assert p.density == 10.0
        assert p.dot_size == 0.5
        assert p.hatching is True
        assert stippling_passes({})[0].hatching is False


# ---------------------------------------------------------------------------
# GEOMETRIC
# ---------------------------------------------------------------------------

class TestGeometric:

    def test_complexity_one_leaves_white(self, random_buffer):
        apply_effect(random_buffer, "geometric", {"complexity": 1, "seed": 1})
        np.testing.assert_array_equal(random_buffer.rgb, 255)

    def test_shape_index(self):
        p = GeometricPass(complexity=0.5)
        assert p.shape_index(0.0) == 0
        assert p.shape_index(0.3) == 2
        assert p.shape_index(0.9) == 3
        assert GeometricPass(complexity=1.0).shape_index(0.5) is None

    def test_only_cell_color_or_white(self):
        buf = solid(100, 32, 32)
        apply_effect(buf, "geometric", {"grid_size": 8, "complexity": 0.3, "seed": 4})
        assert set(np.unique(buf.rgb)) <= {100, 255}

    def test_every_cell_draws_something(self):
        buf = solid(100, 32, 32)
        apply_effect(buf, "geometric", {"grid_size": 8, "complexity": 0.2, "seed": 6})
        for row in range(4):
            for col in range(4):
                cell = buf.rgb[row * 8:(row + 1) * 8, col * 8:(col + 1) * 8]
                assert (cell == 100).any(), (row, col)

    def test_partial_edge_cells(self):
        buf = solid(30, 21, 13)
        apply_effect(buf, "geometric", {"grid_size": 16, "complexity": 0, "seed": 2})
        assert buf.rgb.shape == (13, 21, 3)
        assert set(np.unique(buf.rgb)) <= {30, 255}

    def test_seeded_is_reproducible(self, random_buffer):
        a = random_buffer.copy()
        b = random_buffer.copy()
        apply_effect(a, "geometric", {"seed": 10})
        apply_effect(b, "geometric", {"seed": 10})
        assert a == b

    def test_factory(self):
        p = geometric_passes({"grid_size": 3.7, "complexity": 2})[0]
        assert p.grid_size == 3
        assert p.complexity == 1.0
        assert geometric_passes({"grid_size": 0})[0].grid_size == 1
