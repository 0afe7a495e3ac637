"""NV21 (YUV 4:2:0) decoding and viewport color averaging."""

from __future__ import annotations

import logging

import numpy as np

from .errors import InvalidInput
from .models import RGBColor, Viewport, validate_geometry

logger = logging.getLogger("colorvision.detector.nv21")

# BT.601 full-range coefficients in thousandths. Channel math is exact
# integer arithmetic, floored once after the division by SCALE.
SCALE = 1000
KR_V = 1402
KG_U = 344
KG_V = 714
KB_U = 1772

# Decoded words are 0xFF000000 | b << 16 | g << 8 | r.
OPAQUE = 0xFF000000


def buffer_size(data) -> int:
    return memoryview(data).nbytes


def decode_nv21(data, width: int, height: int, out: np.ndarray | None = None) -> np.ndarray:
    """Decode one NV21 frame into ``width*height`` packed pixels in row-major order.

    ``data`` is only read for the duration of the call. When ``out`` is given it
    must be a ``uint32`` array of exactly ``width*height`` elements; it is
    filled in place and returned.
    """
    validate_geometry(width, height, buffer_size(data))
    size = width * height
    if out is None:
        out = np.empty(size, dtype=np.uint32)
    elif out.dtype != np.uint32 or out.shape != (size,):
        raise InvalidInput(f"Output buffer must be uint32[{size}], got {out.dtype}{list(out.shape)}")

    raw = np.frombuffer(data, dtype=np.uint8, count=size * 3 // 2)
    y = raw[:size].reshape(height, width).astype(np.int32) * SCALE
    # Interleaved chroma plane: one (V, U) pair per 2x2 luma block.
    chroma = raw[size:].reshape(height // 2, width // 2, 2).astype(np.int32) - 128
    v = chroma[:, :, 0].repeat(2, axis=0).repeat(2, axis=1)
    u = chroma[:, :, 1].repeat(2, axis=0).repeat(2, axis=1)

    r = np.clip((y + KR_V * v) // SCALE, 0, 255)
    g = np.clip((y - KG_U * u - KG_V * v) // SCALE, 0, 255)
    b = np.clip((y + KB_U * u) // SCALE, 0, 255)

    pixels = out.reshape(height, width)
    pixels[...] = OPAQUE
    pixels |= b.astype(np.uint32) << np.uint32(16)
    pixels |= g.astype(np.uint32) << np.uint32(8)
    pixels |= r.astype(np.uint32)
    return out


def unpack_channels(pixels: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split decoded ``ABGR`` words into red, green and blue arrays."""
    red = pixels & np.uint32(0xFF)
    green = (pixels >> np.uint32(8)) & np.uint32(0xFF)
    blue = (pixels >> np.uint32(16)) & np.uint32(0xFF)
    return red, green, blue


def average_pixels(pixels: np.ndarray, width: int, height: int, viewport: Viewport) -> RGBColor:
    """Per-channel mean (floored) of decoded pixels inside ``viewport``."""
    if pixels.size != width * height:
        raise InvalidInput(f"Expected {width * height} pixels, got {pixels.size}")
    viewport.validate(width, height)
    frame = pixels.reshape(height, width)
    region = frame[viewport.top : viewport.bottom, viewport.left : viewport.right]
    count = region.size
    red, green, blue = unpack_channels(region)
    return RGBColor(
        alpha=255,
        red=int(red.sum(dtype=np.uint64)) // count,
        green=int(green.sum(dtype=np.uint64)) // count,
        blue=int(blue.sum(dtype=np.uint64)) // count,
    )


class PixelConverter:
    """Decodes camera frames into a scratch buffer reused across calls.

    The scratch is reallocated only when the frame geometry changes. Arrays
    returned by :meth:`decode` are that scratch, so they are valid until the
    next call. One converter serves one frame producer.
    """

    def __init__(self) -> None:
        self._scratch: np.ndarray | None = None
        self._geometry: tuple[int, int] = (0, 0)
        self.allocations = 0

    @property
    def geometry(self) -> tuple[int, int]:
        return self._geometry

    def _scratch_for(self, width: int, height: int) -> np.ndarray:
        if self._scratch is None or self._geometry != (width, height):
            self._scratch = np.empty(width * height, dtype=np.uint32)
            self._geometry = (width, height)
            self.allocations += 1
            logger.debug("allocated %dx%d scratch buffer", width, height)
        return self._scratch

    def decode(self, data, width: int, height: int) -> np.ndarray:
        validate_geometry(width, height, buffer_size(data))
        return decode_nv21(data, width, height, out=self._scratch_for(width, height))

    def average_color(self, data, width: int, height: int, viewport: Viewport) -> RGBColor:
        viewport.validate(width, height)
        pixels = self.decode(data, width, height)
        return average_pixels(pixels, width, height, viewport)

    def release(self) -> None:
        self._scratch = None
        self._geometry = (0, 0)
