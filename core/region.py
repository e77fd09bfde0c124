"""
Prism — Region Selection
Geometric selections that restrict which pixels an effect may touch.

Selection shapes:
    - Rectangle(x, y, w, h)   axis-aligned, edges inclusive
    - Ellipse(x, y, w, h)     ellipse inscribed in the bounding box
    - Freehand(points)        closed polygon, even-odd rule

Selection spec formats accepted by parse_selection():
    - Pixels: "100,50,400,300"  (x, y, width, height)
    - Percent: "0.25,0.1,0.5,0.8" (values 0.0-1.0 interpreted as percentages)
    - Preset: "center", "top-half", "bottom-half", "left-half", "right-half"
    - Dict: {"type": "ellipse", "x": 100, "y": 50, "w": 400, "h": 300}
    - Dict: {"type": "freehand", "points": [[10, 10], [90, 10], [50, 80]]}
"""

import enum
from dataclasses import dataclass

import numpy as np


# Named region presets (as percentage of frame)
REGION_PRESETS = {
    "center":       (0.25, 0.25, 0.50, 0.50),
    "top-half":     (0.00, 0.00, 1.00, 0.50),
    "bottom-half":  (0.00, 0.50, 1.00, 0.50),
    "left-half":    (0.00, 0.00, 0.50, 1.00),
    "right-half":   (0.50, 0.00, 0.50, 1.00),
    "top-left":     (0.00, 0.00, 0.50, 0.50),
    "top-right":    (0.50, 0.00, 0.50, 0.50),
    "bottom-left":  (0.00, 0.50, 0.50, 0.50),
    "bottom-right": (0.50, 0.50, 0.50, 0.50),
    "center-strip": (0.00, 0.33, 1.00, 0.34),
    "thirds-left":  (0.00, 0.00, 0.33, 1.00),
    "thirds-center":(0.33, 0.00, 0.34, 1.00),
    "thirds-right": (0.66, 0.00, 0.34, 1.00),
}

SHAPES = ("rectangle", "ellipse", "freehand")

# Limits
MAX_POLYGON_POINTS = 10000


class RegionError(Exception):
    """Invalid region specification."""
    pass


class RegionMode(str, enum.Enum):
    SELECTION = "selection"
    INVERSE = "inverse"


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class Ellipse:
    """Ellipse inscribed in the (x, y, w, h) bounding box."""
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class Freehand:
    """Closed polygon; the last vertex connects back to the first."""
    points: tuple


@dataclass(frozen=True)
class FilterRegion:
    selection: object
    mode: RegionMode = RegionMode.SELECTION


# ---------------------------------------------------------------------------
# Predicate
# ---------------------------------------------------------------------------

def contains(x: float, y: float, selection) -> bool:
    """Return True if point (x, y) lies inside the selection.

    Degenerate shapes (zero-radius ellipse, polygon with fewer than three
    vertices) and unknown selection types contain nothing.
    """
    if selection is None:
        return False

    if isinstance(selection, Rectangle):
        return (selection.x <= x <= selection.x + selection.w
                and selection.y <= y <= selection.y + selection.h)

    if isinstance(selection, Ellipse):
        rx = selection.w / 2
        ry = selection.h / 2
        if rx <= 0 or ry <= 0:
            return False
        cx = selection.x + rx
        cy = selection.y + ry
        return ((x - cx) / rx) ** 2 + ((y - cy) / ry) ** 2 <= 1

    if isinstance(selection, Freehand):
        points = selection.points
        if len(points) < 3:
            return False
        inside = False
        xj, yj = points[-1]
        for xi, yi in points:
            if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
                inside = not inside
            xj, yj = xi, yi
        return inside

    return False


def selection_mask(selection, width: int, height: int) -> np.ndarray:
    """Evaluate contains() for every pixel of a width x height frame at once.

    Returns:
        Bool array (height, width); True where the pixel is inside.
    """
    if selection is None:
        return np.zeros((height, width), dtype=bool)

    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)

    if isinstance(selection, Rectangle):
        return ((xs >= selection.x) & (xs <= selection.x + selection.w)
                & (ys >= selection.y) & (ys <= selection.y + selection.h))

    if isinstance(selection, Ellipse):
        rx = selection.w / 2
        ry = selection.h / 2
        if rx <= 0 or ry <= 0:
            return np.zeros((height, width), dtype=bool)
        cx = selection.x + rx
        cy = selection.y + ry
        return ((xs - cx) / rx) ** 2 + ((ys - cy) / ry) ** 2 <= 1

    if isinstance(selection, Freehand):
        points = selection.points
        inside = np.zeros((height, width), dtype=bool)
        if len(points) < 3:
            return inside
        xj, yj = points[-1]
        for xi, yi in points:
            crosses = (yi > ys) != (yj > ys)
            if yj != yi:
                x_hit = (xj - xi) * (ys - yi) / (yj - yi) + xi
                inside ^= crosses & (xs < x_hit)
            xj, yj = xi, yi
        return inside

    return np.zeros((height, width), dtype=bool)


def region_mask(region: FilterRegion | None, width: int, height: int) -> np.ndarray | None:
    """Pixels a masked pass may mutate, or None when the whole frame is eligible."""
    if region is None or region.selection is None:
        return None
    mask = selection_mask(region.selection, width, height)
    if RegionMode(region.mode) is RegionMode.INVERSE:
        return ~mask
    return mask


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_selection(spec, frame_width: int, frame_height: int,
                    shape: str = "rectangle"):
    """Parse a selection spec into a Rectangle, Ellipse or Freehand.

    Args:
        spec: Selection, string, dict, tuple or list.
        frame_width: Frame width in pixels.
        frame_height: Frame height in pixels.
        shape: Shape for box-style specs ('rectangle' or 'ellipse').

    Returns:
        A selection in absolute pixel coordinates.

    Raises:
        RegionError: If the spec is invalid.
    """
    if isinstance(spec, (Rectangle, Ellipse, Freehand)):
        return spec
    if shape not in SHAPES:
        raise RegionError(f"Unknown shape '{shape}'. Shapes: {', '.join(SHAPES)}")

    # Preset name
    if isinstance(spec, str):
        if spec in REGION_PRESETS:
            box = _percent_to_pixels(*REGION_PRESETS[spec], frame_width, frame_height)
            return _make_box(shape, box)

        parts = spec.replace(" ", "").split(",")
        if len(parts) != 4:
            raise RegionError(
                f"Region must be 'x,y,w,h' or a preset name. Got: '{spec}'. "
                f"Presets: {', '.join(sorted(REGION_PRESETS.keys()))}"
            )
        try:
            values = [float(p) for p in parts]
        except ValueError:
            raise RegionError(f"Region values must be numbers. Got: '{spec}'")
        return _make_box(shape, _box_from_values(values, frame_width, frame_height))

    if isinstance(spec, dict):
        kind = spec.get("type", shape)
        if kind == "freehand":
            return _parse_points(spec.get("points"))
        if kind not in SHAPES:
            raise RegionError(f"Unknown selection type '{kind}'. Types: {', '.join(SHAPES)}")
        try:
            values = [
                float(spec.get("x", 0)),
                float(spec.get("y", 0)),
                float(spec.get("w", spec.get("width", frame_width))),
                float(spec.get("h", spec.get("height", frame_height))),
            ]
        except (TypeError, ValueError) as e:
            raise RegionError(f"Invalid region dict values: {e}")
        return _make_box(kind, _box_from_values(values, frame_width, frame_height))

    if isinstance(spec, (tuple, list)):
        if shape == "freehand":
            return _parse_points(spec)
        if len(spec) != 4:
            raise RegionError(f"Region tuple must have 4 values (x,y,w,h). Got {len(spec)}.")
        try:
            values = [float(v) for v in spec]
        except (TypeError, ValueError) as e:
            raise RegionError(f"Invalid region values: {e}")
        return _make_box(shape, _box_from_values(values, frame_width, frame_height))

    raise RegionError(f"Unknown region spec type: {type(spec).__name__}")


def parse_region(spec, frame_width: int, frame_height: int,
                 mode: str = "selection", shape: str = "rectangle") -> FilterRegion | None:
    """Parse a spec into a FilterRegion. None spec means no region."""
    if spec is None:
        return None
    try:
        region_mode = RegionMode(mode)
    except ValueError:
        raise RegionError(f"Region mode must be 'selection' or 'inverse'. Got: '{mode}'")
    return FilterRegion(parse_selection(spec, frame_width, frame_height, shape), region_mode)


def _box_from_values(values, frame_w, frame_h):
    # Percent mode when ALL values are within 0-1
    if all(0.0 <= v <= 1.0 for v in values):
        return _percent_to_pixels(*values, frame_w, frame_h)
    return _validate_pixels(*values)


def _percent_to_pixels(px, py, pw, ph, frame_w, frame_h):
    """Convert percentage-based region to pixel coordinates."""
    return _validate_pixels(int(px * frame_w), int(py * frame_h),
                            int(pw * frame_w), int(ph * frame_h))


def _validate_pixels(x, y, w, h):
    if w <= 0 or h <= 0:
        raise RegionError(f"Region size must be positive. Got w={w}, h={h}")
    if any(v != v or v in (float("inf"), float("-inf")) for v in (x, y, w, h)):
        raise RegionError("NaN/Inf not allowed in region")
    return (x, y, w, h)


def _make_box(shape, box):
    if shape == "ellipse":
        return Ellipse(*box)
    if shape == "freehand":
        raise RegionError("Freehand selections need a point list, not a box")
    return Rectangle(*box)


def _parse_points(raw):
    """Accept [[x, y], ...] or a flat [x0, y0, x1, y1, ...] list."""
    if not isinstance(raw, (tuple, list)):
        raise RegionError("Freehand selection needs a 'points' list")
    if raw and not isinstance(raw[0], (tuple, list)):
        if len(raw) % 2:
            raise RegionError(f"Flat point list needs an even number of values. Got {len(raw)}.")
        raw = list(zip(raw[0::2], raw[1::2]))
    if len(raw) > MAX_POLYGON_POINTS:
        raise RegionError(f"Too many polygon points ({len(raw)}, max {MAX_POLYGON_POINTS})")
    try:
        points = tuple((float(p[0]), float(p[1])) for p in raw)
    except (TypeError, ValueError, IndexError) as e:
        raise RegionError(f"Invalid freehand point: {e}")
    return Freehand(points)


def list_presets() -> dict:
    """Return all available region presets."""
    return REGION_PRESETS.copy()
