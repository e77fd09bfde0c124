#!/usr/bin/env python3
"""
Prism — Image Effect Engine
CLI entry point. Also importable as a library.

Usage:
    python prism.py list-effects
    python prism.py list-effects --category artistic --compact
    python prism.py info halftone
    python prism.py search blur
    python prism.py list-presets
    python prism.py apply photo.png out.png --effect posterize --params levels=3
    python prism.py apply photo.png out.png --effect brightness --params value=0.3 --region center --shape ellipse
"""

import argparse
import logging
import os
import sys

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.backend import BACKEND
from core.buffer import image_size, load_image, save_image
from core.region import REGION_PRESETS, RegionError, list_presets, parse_region
from core.safety import SafetyError, parse_param_value, preflight, validate_dimensions
from effects import (
    CATEGORIES,
    FACTORIES,
    apply_passes,
    dispatch,
    get_filter_config,
    list_categories,
    list_effects,
    search_effects,
)

__version__ = "0.1.0"

MAX_SEARCH_LEN = 200

logger = logging.getLogger("prism")


def _unknown_effect(name: str):
    matches = [n for n in FACTORIES if name in n]
    if matches:
        print(f"Unknown effect: {name}. Did you mean: {', '.join(matches)}?")
    else:
        print(f"Unknown effect: {name}. Use 'prism list-effects' to see all.")


def _parse_params(pairs) -> dict:
    """Turn ['key=value', ...] into a settings dict of floats."""
    settings = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise SafetyError(f"Param must be key=value. Got: '{pair}'")
        key, val = pair.split("=", 1)
        settings[key.strip()] = parse_param_value(key, val)
    return settings


def cmd_apply(args):
    """Load an image, apply one effect, save the result."""
    if args.effect not in FACTORIES:
        _unknown_effect(args.effect)
        sys.exit(1)

    settings = _parse_params(args.params)
    if args.seed is not None:
        settings["seed"] = args.seed
    if not args.params:
        defaults = get_filter_config()[args.effect].defaults
        if defaults:
            print("Using defaults: " + ", ".join(f"{k}={v}" for k, v in defaults.items()))

    info = preflight(args.input)
    width, height = image_size(info["path"])
    validate_dimensions(width, height)
    print(f"Source validated: {info['size_mb']:.1f}MB {info['extension']} {width}x{height}")

    region = None
    if args.region:
        mode = "inverse" if args.inverse else "selection"
        region = parse_region(args.region, width, height, mode=mode, shape=args.shape)
        label = f"preset '{args.region}'" if args.region in REGION_PRESETS else f"'{args.region}'"
        print(f"  Region: {label} ({region.selection}, {mode})")
    elif args.inverse:
        print("Note: --inverse has no effect without --region.", file=sys.stderr)

    result = BACKEND.ensure_sync()
    if not result.ok:
        print(f"Filter backend unavailable: {result.error}", file=sys.stderr)
        sys.exit(1)

    buffer = load_image(info["path"])
    passes = dispatch(args.effect, settings, region)
    logger.info("Applying %d pass(es) for %s", len(passes), args.effect)
    apply_passes(buffer, passes)

    output = save_image(buffer, args.output)
    print(f"Saved: {output}")


def cmd_list_presets(args):
    """List all available region presets."""
    presets = list_presets()
    print(f"\n  Region Presets ({len(presets)} available)")
    print(f"  {'-' * 50}")
    for name in sorted(presets):
        x, y, w, h = presets[name]
        print(f"    {name:20s}  x={x}, y={y}, w={w}, h={h}")
    print(f"\n  Usage: --region <preset_name>")
    print(f"  Custom: --region 'x,y,w,h' (pixels or 0-1 percent)")
    print(f"  Shape: --shape ellipse, Inverse: --inverse\n")


def cmd_list_effects(args):
    """List all available effects, grouped by category."""
    category_filter = getattr(args, "category", None)
    compact = getattr(args, "compact", False)

    categories = [category_filter] if category_filter else list_categories()
    total = 0
    for cat_key in categories:
        effects = list_effects(category=cat_key)
        if not effects:
            continue
        total += len(effects)
        print(f"\n  {CATEGORIES[cat_key]} ({len(effects)})")
        print(f"  {'-' * 50}")
        for e in effects:
            print(f"    {e['name']:20s} {e['description']}")
            if not compact and e["params"]:
                params_str = ", ".join(f"{k}={v}" for k, v in e["params"].items())
                print(f"    {'':20s} Params: {params_str}")

    if category_filter:
        print()
        return
    print(f"\n  Total: {total} effects across {len(CATEGORIES)} categories")
    print(f"  Use --category <name> to filter. Use --compact for names only.")
    print(f"  Use 'prism info <effect>' for details.\n")


def cmd_info(args):
    """Show detailed info about a single effect."""
    name = args.effect_name
    if name not in FACTORIES:
        _unknown_effect(name)
        return

    descriptor = get_filter_config()[name]
    print(f"\n  {name} ({descriptor.label})")
    print(f"  {'-' * 40}")
    print(f"  Category:    {CATEGORIES[descriptor.category]}")
    print(f"  Description: {descriptor.description}")
    print(f"  Regions:     {'yes' if FACTORIES[name]['supports_region'] else 'no (full frame only)'}")
    if descriptor.parameters:
        print(f"\n  Parameters:")
        for key, spec in descriptor.parameters.items():
            print(f"    {key:15s} = {spec.default:<8} [{spec.min} .. {spec.max}, step {spec.step}]  {spec.label}")
    print(f"\n  Example:")
    params_example = " ".join(f"{k}={spec.default}" for k, spec in list(descriptor.parameters.items())[:2])
    suffix = f" --params {params_example}" if params_example else ""
    print(f"    prism apply in.png out.png --effect {name}{suffix}")
    print()


def cmd_search(args):
    """Search effects by name or description."""
    results = search_effects(args.query, max_query_len=MAX_SEARCH_LEN)
    if not results:
        print(f"No effects matching '{args.query}'.")
        return
    print(f"\n  Results for '{args.query}' ({len(results)} found):")
    print(f"  {'-' * 50}")
    for e in results:
        cat = CATEGORIES.get(e["category"], e["category"])
        print(f"    {e['name']:20s} [{cat:14s}] {e['description']}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prism",
        description="Prism — Image Effect Engine",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    # apply
    p = sub.add_parser("apply", help="Apply an effect to an image file")
    p.add_argument("input", help="Input image path")
    p.add_argument("output", help="Output image path")
    p.add_argument("--effect", required=True, help="Effect name")
    p.add_argument("--params", nargs="*", help="Effect settings as key=value pairs")
    p.add_argument("--region", help="Restrict to a region: 'x,y,w,h' (pixels or 0-1 percent) or preset name")
    p.add_argument("--shape", choices=["rectangle", "ellipse"], default="rectangle",
                   help="Region shape")
    p.add_argument("--inverse", action="store_true", help="Edit everything outside the region")
    p.add_argument("--seed", type=int, help="Random seed for noise, stippling and geometric")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    # list-effects
    p = sub.add_parser("list-effects", help="List all available effects")
    p.add_argument("--category", choices=list_categories(), help="Filter by category")
    p.add_argument("--compact", action="store_true", help="Compact view (names only)")

    # info
    p = sub.add_parser("info", help="Show detailed info about an effect")
    p.add_argument("effect_name", help="Effect name")

    # search
    p = sub.add_parser("search", help="Search effects by name or description")
    p.add_argument("query", help="Search term")

    # list-presets
    sub.add_parser("list-presets", help="List all region presets")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "apply": cmd_apply,
        "list-effects": cmd_list_effects,
        "list-presets": cmd_list_presets,
        "info": cmd_info,
        "search": cmd_search,
    }

    if args.command in commands:
        try:
            commands[args.command](args)
        except (SafetyError, RegionError, OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
