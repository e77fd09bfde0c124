"""
Prism — Effect Catalog
Parameter schema for every effect, for UIs and listings.

Pure data. Factories clamp their own inputs and never read this table, so
ranges here describe what a slider should offer, not what is accepted.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Category key -> display label, in UI folder order
CATEGORIES = {
    "basic": "Basic",
    "filters": "Filters",
    "color": "Color Effects",
    "blur": "Blur & Sharpen",
    "distortion": "Distortion",
    "artistic": "Artistic",
    "generative": "Generative",
}

CATEGORY_ORDER = list(CATEGORIES.keys())


@dataclass(frozen=True)
class ParameterSpec:
    label: str
    min: float
    max: float
    default: float
    step: float


@dataclass(frozen=True)
class EffectDescriptor:
    label: str
    category: str
    description: str
    parameters: Mapping[str, ParameterSpec] = field(default_factory=dict)
    supports_region: bool = False

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def defaults(self) -> dict:
        return {key: spec.default for key, spec in self.parameters.items()}


def _effect(label, category, description, supports_region=False, **parameters):
    return EffectDescriptor(
        label=label,
        category=category,
        description=description,
        parameters={key: ParameterSpec(*values) for key, values in parameters.items()},
        supports_region=supports_region,
    )


# Parameter tuples are (label, min, max, default, step).
# supports_region must match the dispatcher registry; tests keep them in sync.
EFFECT_CATALOG = MappingProxyType({
    # === BASIC ===
    "brightness": _effect(
        "Brightness", "basic", "Lighten or darken every channel",
        supports_region=True,
        value=("Amount", -1, 1, 0, 0.01),
    ),
    "contrast": _effect(
        "Contrast", "basic", "Push channels away from or toward mid-grey",
        supports_region=True,
        value=("Amount", -100, 100, 0, 1),
    ),
    "saturation": _effect(
        "Saturation", "basic", "Boost or drain color intensity in HSL space",
        supports_region=True,
        value=("Amount", -10, 10, 0, 0.1),
    ),
    "hue": _effect(
        "Hue Rotation", "basic", "Rotate hue around the color wheel",
        value=("Degrees", 0, 360, 0, 1),
    ),

    # === FILTERS ===
    "grayscale": _effect("Grayscale", "filters", "Rec. 709 luminance to all channels"),
    "sepia": _effect("Sepia", "filters", "Warm brown photographic toning"),
    "invert": _effect("Invert", "filters", "Photographic negative"),

    # === COLOR EFFECTS ===
    "duotone": _effect(
        "Duotone", "color", "Map luminance onto a two-color gradient",
        dark_color=("Dark Tone", 0, 360, 240, 1),
        light_color=("Light Tone", 0, 360, 60, 1),
        intensity=("Intensity", 0, 1, 0.5, 0.01),
    ),

    # === BLUR & SHARPEN ===
    "blur": _effect(
        "Blur", "blur", "Multi-pass separable box blur",
        radius=("Radius", 0, 20, 5, 1),
    ),
    "sharpen": _effect(
        "Sharpen", "blur", "Unsharp 5-point kernel",
        amount=("Amount", 0, 5, 0.5, 0.1),
    ),

    # === DISTORTION ===
    "pixelate": _effect(
        "Pixelate", "distortion", "Blocky mosaic from tile corners",
        pixel_size=("Pixel Size", 1, 32, 8, 1),
    ),
    "noise": _effect(
        "Noise", "distortion", "Random grey grain added to every pixel",
        noise=("Amount", 0, 1, 0.2, 0.01),
    ),

    # === ARTISTIC ===
    "threshold": _effect(
        "Threshold", "artistic", "Hard black and white cut-off",
        threshold=("Level", 0, 1, 0.5, 0.01),
    ),
    "posterize": _effect(
        "Posterize", "artistic", "Reduce each channel to a few levels",
        levels=("Levels", 2, 8, 4, 1),
    ),
    "halftone": _effect(
        "Halftone", "artistic", "Print-style dot screen, dots grow with darkness",
        size=("Dot Size", 1, 20, 4, 1),
        spacing=("Spacing", 1, 20, 5, 1),
    ),
    "dithering": _effect(
        "Dithering", "artistic", "Floyd-Steinberg error diffusion to black and white",
        threshold=("Threshold", 0, 1, 0.5, 0.01),
    ),

    # === GENERATIVE ===
    "geometric": _effect(
        "Geometric", "generative", "Abstract grid of squares, circles, triangles and diamonds",
        grid_size=("Grid Size", 4, 64, 16, 4),
        complexity=("Complexity", 0, 1, 0.5, 0.1),
    ),
    "stippling": _effect(
        "Stippling", "generative", "Random ink dots or hatching, denser in shadows",
        density=("Density", 0.1, 5, 1, 0.1),
        dot_size=("Dot Size", 0.5, 3, 1, 0.1),
        use_hatching=("Use Hatching", 0, 1, 0, 1),
    ),
    "cellular": _effect(
        "Cellular", "generative", "Game of Life seeded from dark image areas",
        threshold=("Threshold", 0.1, 0.9, 0.5, 0.05),
        iterations=("Iterations", 1, 10, 3, 1),
        cell_size=("Cell Size", 1, 8, 2, 1),
    ),
    "reaction-diffusion": _effect(
        "Reaction-Diffusion", "generative", "Gray-Scott organic patterns grown from the image",
        iterations=("Iterations", 1, 20, 10, 1),
        scale=("Scale", 1, 8, 4, 1),
        feed_rate=("Feed Rate", 0.01, 0.1, 0.055, 0.001),
        kill_rate=("Kill Rate", 0.01, 0.1, 0.062, 0.001),
    ),
})


def get_filter_config() -> Mapping[str, EffectDescriptor]:
    """Read-only effect name -> EffectDescriptor table."""
    return EFFECT_CATALOG
