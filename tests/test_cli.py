"""
Prism — CLI Tests
Drives prism.main() in-process: listing commands and a full
load -> effect -> save round trip through Pillow.

Run with: pytest tests/test_cli.py -v
"""

import os
import sys

import numpy as np
import pytest
from PIL import Image

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import prism
from core.buffer import load_image


@pytest.fixture
def input_png(tmp_path):
    rng = np.random.RandomState(5)
    path = tmp_path / "input.png"
    Image.fromarray(rng.randint(0, 256, (20, 30, 3), dtype=np.uint8), "RGB").save(path)
    return path


def run(argv):
    prism.main(argv)


class TestListing:

    def test_list_effects(self, capsys):
        run(["list-effects"])
        out = capsys.readouterr().out
        assert "Total: 20 effects across 7 categories" in out
        assert "reaction-diffusion" in out

    def test_list_effects_category_compact(self, capsys):
        run(["list-effects", "--category", "filters", "--compact"])
        out = capsys.readouterr().out
        assert "invert" in out
        assert "blur" not in out
        assert "Params" not in out

    def test_info(self, capsys):
        run(["info", "halftone"])
        out = capsys.readouterr().out
        assert "Halftone" in out
        assert "spacing" in out

    def test_info_unknown_suggests(self, capsys):
        run(["info", "blu"])
        assert "Did you mean: blur" in capsys.readouterr().out

    def test_search(self, capsys):
        run(["search", "dither"])
        assert "dithering" in capsys.readouterr().out

    def test_list_presets(self, capsys):
        run(["list-presets"])
        out = capsys.readouterr().out
        assert "center" in out
        assert "top-half" in out

    def test_no_command_prints_help(self, capsys):
        run([])
        assert "usage" in capsys.readouterr().out.lower()


class TestApply:

    def test_invert_round_trip(self, input_png, tmp_path):
        out = tmp_path / "out.png"
        run(["apply", str(input_png), str(out), "--effect", "invert"])
        original = load_image(input_png)
        result = load_image(out)
        np.testing.assert_array_equal(result.rgb, 255 - original.rgb)
        np.testing.assert_array_equal(result.alpha, 255)

    def test_params(self, input_png, tmp_path):
        out = tmp_path / "out.png"
        run(["apply", str(input_png), str(out), "--effect", "posterize", "--params", "levels=2"])
        assert set(np.unique(load_image(out).rgb)) <= {0, 255}

    def test_region(self, input_png, tmp_path):
        out = tmp_path / "out.png"
        run(["apply", str(input_png), str(out), "--effect", "brightness",
             "--params", "value=-1", "--region", "0,0,9,4"])
        original = load_image(input_png).rgb
        result = load_image(out).rgb
        np.testing.assert_array_equal(result[:5, :10], 0)
        np.testing.assert_array_equal(result[5:], original[5:])

    def test_inverse_region(self, input_png, tmp_path):
        out = tmp_path / "out.png"
        run(["apply", str(input_png), str(out), "--effect", "brightness",
             "--params", "value=-1", "--region", "0,0,9,4", "--inverse"])
        original = load_image(input_png).rgb
        result = load_image(out).rgb
        np.testing.assert_array_equal(result[:5, :10], original[:5, :10])
        np.testing.assert_array_equal(result[5:], 0)

    def test_seed_reproducible(self, input_png, tmp_path):
        a, b = tmp_path / "a.png", tmp_path / "b.png"
        run(["apply", str(input_png), str(a), "--effect", "noise", "--seed", "3"])
        run(["apply", str(input_png), str(b), "--effect", "noise", "--seed", "3"])
        assert load_image(a) == load_image(b)

    def test_jpeg_output(self, input_png, tmp_path):
        out = tmp_path / "out.jpg"
        run(["apply", str(input_png), str(out), "--effect", "grayscale"])
        assert out.exists()

    @pytest.mark.parametrize("extra", [
        ["--params", "levels=nan"],
        ["--params", "levels"],
        ["--region", "nowhere"],
    ])
    def test_bad_input_exits(self, input_png, tmp_path, extra, capsys):
        with pytest.raises(SystemExit) as exc:
            run(["apply", str(input_png), str(tmp_path / "o.png"), "--effect", "posterize"] + extra)
        assert exc.value.code == 1
        assert "Error" in capsys.readouterr().err

    def test_missing_input(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            run(["apply", str(tmp_path / "nope.png"), str(tmp_path / "o.png"), "--effect", "invert"])
        assert exc.value.code == 1

    def test_unknown_effect(self, input_png, tmp_path):
        with pytest.raises(SystemExit) as exc:
            run(["apply", str(input_png), str(tmp_path / "o.png"), "--effect", "sparkle"])
        assert exc.value.code == 1


class TestPackaging:

    def test_readme_is_package_readme(self):
        root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        with open(os.path.join(root, "pyproject.toml")) as f:
            assert 'readme = "README.md"' in f.read()
        assert os.path.isfile(os.path.join(root, "README.md"))
