"""
Prism — Safety & Resource Guards
Centralized preflight checks run before an image file is decoded.
Prevents oversized decodes, unsupported formats, and hostile parameter strings.
"""

import math
import os
from pathlib import Path

# --- Configurable Limits ---
MAX_FILE_MB = 100          # Maximum input file size
MAX_PIXELS = 40_000_000    # Maximum decoded pixel count (W * H)
MAX_PARAM_LEN = 200        # Maximum length of a single CLI parameter value
ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp", ".tif", ".tiff"}


class SafetyError(Exception):
    """Raised when a preflight check fails."""
    pass


def preflight(input_path: str) -> dict:
    """Run all safety checks before decoding an image.

    Args:
        input_path: Path to the input image.

    Returns:
        dict with file metadata (path, size_mb, extension).

    Raises:
        SafetyError: If any check fails.
        FileNotFoundError: If input doesn't exist.
    """
    input_path = str(input_path)
    real_path = os.path.realpath(input_path)

    # 1. File exists
    if not os.path.isfile(real_path):
        raise FileNotFoundError(f"Input file not found: {input_path}")

    # 2. File extension check
    ext = Path(real_path).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise SafetyError(
            f"File type '{ext}' not allowed. "
            f"Supported: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    # 3. File size check
    size_mb = os.path.getsize(real_path) / (1024 * 1024)
    if size_mb > MAX_FILE_MB:
        raise SafetyError(
            f"Input file is {size_mb:.0f}MB, exceeds {MAX_FILE_MB}MB limit. "
            f"Downscale the image first."
        )

    return {
        "path": real_path,
        "size_mb": size_mb,
        "extension": ext,
    }


def validate_dimensions(width: int, height: int) -> None:
    """Reject images whose decoded size would exhaust memory.

    Raises:
        SafetyError: If width * height exceeds MAX_PIXELS.
    """
    if width <= 0 or height <= 0:
        raise SafetyError(f"Image has no pixels ({width}x{height})")
    if width * height > MAX_PIXELS:
        raise SafetyError(
            f"Image is {width}x{height} ({width * height:,} pixels), "
            f"exceeds {MAX_PIXELS:,} pixel limit."
        )


def parse_param_value(key: str, val: str) -> float:
    """Parse a CLI 'key=value' setting value into a finite float.

    Raises:
        SafetyError: If the value is too long, non-numeric, NaN or Inf.
    """
    if len(val) > MAX_PARAM_LEN:
        raise SafetyError(f"Value for '{key}' too long ({len(val)} chars, max {MAX_PARAM_LEN})")
    lowered = val.strip().lower()
    if lowered in ("true", "on", "yes"):
        return 1.0
    if lowered in ("false", "off", "no"):
        return 0.0
    try:
        number = float(lowered)
    except ValueError:
        raise SafetyError(f"Non-numeric value for '{key}': '{val}'")
    if not math.isfinite(number):
        raise SafetyError(f"NaN/Inf not allowed for '{key}': {val}")
    return number
