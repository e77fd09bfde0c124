"""
Prism — Pixel Buffer
RGBA byte buffer shared between the caller and effect passes.

The buffer owns a bytearray of exactly width * height * 4 bytes. Passes
work through `pixels`, a numpy view over the same memory, so every write
lands in `data` without reallocating it.
"""

from pathlib import Path

import numpy as np


class BufferShapeError(ValueError):
    """Pixel data length does not match width * height * 4."""
    pass


class PixelBuffer:
    """Row-major, interleaved RGBA pixels (1 byte per channel)."""

    __slots__ = ("width", "height", "data")

    def __init__(self, width: int, height: int, data=None):
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise BufferShapeError(f"Buffer size must be positive. Got {width}x{height}")
        expected = width * height * 4
        if data is None:
            data = bytearray(expected)
        elif not isinstance(data, bytearray):
            data = bytearray(data)
        if len(data) != expected:
            raise BufferShapeError(
                f"Buffer of {width}x{height} needs {expected} bytes, got {len(data)}"
            )
        self.width = width
        self.height = height
        self.data = data

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (self.width, self.height, self.data) == (other.width, other.height, other.data)

    @property
    def pixels(self) -> np.ndarray:
        """Writable (H, W, 4) uint8 view over `data`."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4)

    @property
    def rgb(self) -> np.ndarray:
        """Writable (H, W, 3) view of the color channels (alpha excluded)."""
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, bytearray(self.data))

    def to_array(self) -> np.ndarray:
        """Independent (H, W, 4) copy of the pixels."""
        return self.pixels.copy()

    @classmethod
    def blank(cls, width: int, height: int, color=(255, 255, 255, 255)) -> "PixelBuffer":
        buf = cls(width, height)
        buf.pixels[:, :] = color
        return buf

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an (H, W, 3) or (H, W, 4) uint8 array.

        RGB input gets a fully opaque alpha channel.
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise BufferShapeError(f"Expected (H, W, 3) or (H, W, 4) array, got {array.shape}")
        if array.dtype != np.uint8:
            array = np.clip(array, 0, 255).astype(np.uint8)
        h, w = array.shape[:2]
        if array.shape[2] == 3:
            array = np.dstack([array, np.full((h, w), 255, dtype=np.uint8)])
        return cls(w, h, bytearray(np.ascontiguousarray(array).tobytes()))

    @classmethod
    def from_image(cls, image) -> "PixelBuffer":
        """Build a buffer from a PIL image (any mode is converted to RGBA)."""
        rgba = image.convert("RGBA")
        return cls(rgba.width, rgba.height, bytearray(rgba.tobytes()))

    def to_image(self):
        """Return an RGBA PIL image copy of the buffer."""
        from PIL import Image
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))


def image_size(path) -> tuple[int, int]:
    """(width, height) from the file header, without decoding pixels."""
    from PIL import Image
    with Image.open(Path(path)) as img:
        return img.size


def load_image(path) -> PixelBuffer:
    """Decode an image file into a PixelBuffer."""
    from PIL import Image
    with Image.open(Path(path)) as img:
        return PixelBuffer.from_image(img)


def save_image(buffer: PixelBuffer, path) -> Path:
    """Encode a PixelBuffer to disk. Formats without alpha are saved as RGB."""
    path = Path(path)
    image = buffer.to_image()
    if path.suffix.lower() in (".jpg", ".jpeg", ".bmp"):
        image = image.convert("RGB")
    image.save(path)
    return path
