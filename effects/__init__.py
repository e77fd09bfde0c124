"""
Prism — Effects Registry
Maps effect names to pass factories and provides a uniform interface.
Every factory is a function: (settings, region=None) -> list[FilterPass]
"""

import logging
import warnings

from core.backend import BACKEND
from effects.catalog import CATEGORIES, CATEGORY_ORDER, EFFECT_CATALOG, get_filter_config
from effects.convolution import blur_passes, sharpen_passes
from effects.dither import dithering_passes
from effects.generative import geometric_passes, noise_passes, stippling_passes
from effects.simulation import cellular_passes, reaction_diffusion_passes
from effects.tiles import halftone_passes, pixelate_passes
from effects.tonal import (
    brightness_passes,
    contrast_passes,
    duotone_passes,
    grayscale_passes,
    hue_passes,
    invert_passes,
    posterize_passes,
    saturation_passes,
    sepia_passes,
    threshold_passes,
)

logger = logging.getLogger(__name__)

__all__ = [
    "CATEGORIES", "CATEGORY_ORDER", "FACTORIES", "RegionIgnoredWarning",
    "apply_effect", "apply_passes", "dispatch", "dispatch_async",
    "get_filter_config", "list_categories", "list_effects", "search_effects",
]


class RegionIgnoredWarning(UserWarning):
    """A region was supplied to an effect that always edits the full frame."""
    pass


# Master registry: name -> factory + whether its passes honour a FilterRegion
FACTORIES = {
    # === BASIC ===
    "brightness": {"factory": brightness_passes, "supports_region": True},
    "contrast": {"factory": contrast_passes, "supports_region": True},
    "saturation": {"factory": saturation_passes, "supports_region": True},
    "hue": {"factory": hue_passes, "supports_region": False},

    # === FILTERS ===
    "grayscale": {"factory": grayscale_passes, "supports_region": False},
    "sepia": {"factory": sepia_passes, "supports_region": False},
    "invert": {"factory": invert_passes, "supports_region": False},

    # === COLOR EFFECTS ===
    "duotone": {"factory": duotone_passes, "supports_region": False},

    # === BLUR & SHARPEN ===
    "blur": {"factory": blur_passes, "supports_region": False},
    "sharpen": {"factory": sharpen_passes, "supports_region": False},

    # === DISTORTION ===
    "pixelate": {"factory": pixelate_passes, "supports_region": False},
    "noise": {"factory": noise_passes, "supports_region": False},

    # === ARTISTIC ===
    "threshold": {"factory": threshold_passes, "supports_region": False},
    "posterize": {"factory": posterize_passes, "supports_region": False},
    "halftone": {"factory": halftone_passes, "supports_region": False},
    "dithering": {"factory": dithering_passes, "supports_region": False},

    # === GENERATIVE ===
    "geometric": {"factory": geometric_passes, "supports_region": False},
    "stippling": {"factory": stippling_passes, "supports_region": False},
    "cellular": {"factory": cellular_passes, "supports_region": False},
    "reaction-diffusion": {"factory": reaction_diffusion_passes, "supports_region": False},
}


def dispatch(effect_name, settings=None, region=None) -> list:
    """Build the ordered pass list for an effect.

    Never raises for configuration problems: an empty name, an unknown
    effect, an uninitialized backend or a failing factory all yield [].

    Args:
        effect_name: Registry key, e.g. "blur" or "reaction-diffusion".
        settings: Mapping of parameter name -> number. Unknown keys ignored.
        region: Optional FilterRegion. Only region-aware effects use it.
    """
    if not effect_name:
        logger.debug("No effect selected, nothing to dispatch")
        return []

    if not BACKEND.ready:
        logger.error("Filter backend not initialized, cannot dispatch '%s'", effect_name)
        return []

    entry = FACTORIES.get(effect_name)
    if entry is None:
        logger.warning("Unknown effect: %s", effect_name)
        return []

    settings = settings or {}
    logger.debug("Dispatching %s with settings %s", effect_name, dict(settings))

    if region is not None and not entry["supports_region"]:
        warnings.warn(
            f"'{effect_name}' does not support regions; applying to the full frame",
            RegionIgnoredWarning,
            stacklevel=2,
        )
        region = None

    try:
        return list(entry["factory"](settings, region))
    except Exception:
        logger.exception("Error building passes for %s", effect_name)
        return []


async def dispatch_async(effect_name, settings=None, region=None) -> list:
    """Initialize the backend if needed, then dispatch."""
    await BACKEND.ensure()
    return dispatch(effect_name, settings, region)


def apply_passes(buffer, passes):
    """Run passes in order over the buffer. Returns the same buffer."""
    for filter_pass in passes:
        filter_pass.apply(buffer)
    return buffer


def apply_effect(buffer, effect_name: str, settings=None, region=None):
    """Dispatch a named effect and apply it to the buffer in place."""
    return apply_passes(buffer, dispatch(effect_name, settings, region))


def _describe(name: str) -> dict:
    descriptor = EFFECT_CATALOG[name]
    return {
        "name": name,
        "label": descriptor.label,
        "description": descriptor.description,
        "params": descriptor.defaults,
        "category": descriptor.category,
        "supports_region": FACTORIES[name]["supports_region"],
    }


def list_effects(category: str = None) -> list[dict]:
    """List all available effects with descriptions.

    Args:
        category: Optional filter, only return effects in this category.
    """
    results = []
    for name in FACTORIES:
        if category and EFFECT_CATALOG[name].category != category:
            continue
        results.append(_describe(name))
    return results


def list_categories() -> list[str]:
    """Return ordered list of category keys."""
    return list(CATEGORY_ORDER)


def search_effects(query: str, max_query_len: int = 200) -> list[dict]:
    """Search effects by name, label or description substring."""
    if len(query) > max_query_len:
        raise ValueError(f"Search query too long (max {max_query_len} chars)")
    query_lower = query.lower()
    results = []
    for name in FACTORIES:
        descriptor = EFFECT_CATALOG[name]
        haystack = (name, descriptor.label.lower(), descriptor.description.lower())
        if any(query_lower in text for text in haystack):
            results.append(_describe(name))
    return results
