"""Synthetic NV21 frames for tests, benchmarks and the sample-pattern tool."""

from __future__ import annotations

import numpy as np
from PIL import Image, ImageDraw

from .models import FrameBuffer, validate_geometry

SOLID_COLORS: dict[str, tuple[int, int, int]] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "gray": (128, 128, 128),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
}

PATTERNS = tuple(SOLID_COLORS) + ("quadrants", "h-gradient", "v-gradient", "checkerboard")


def solid_frame(width: int, height: int, y: int = 128, u: int = 128, v: int = 128) -> bytes:
    """Raw NV21 bytes with constant luma and chroma planes."""
    size = width * height
    chroma = bytes((v, u)) * (size // 4)
    return bytes([y]) * size + chroma


def encode_nv21(image: Image.Image) -> bytes:
    """Encode an image as NV21 using full-range YCbCr, chroma averaged per 2x2 block."""
    width, height = image.size
    validate_geometry(width, height, width * height * 3 // 2)
    ycc = np.asarray(image.convert("RGB").convert("YCbCr"), dtype=np.uint8)

    luma = ycc[:, :, 0]
    blocks = ycc[:, :, 1:].astype(np.uint16).reshape(height // 2, 2, width // 2, 2, 2)
    cbcr = ((blocks.sum(axis=(1, 3)) + 2) // 4).astype(np.uint8)

    chroma = np.empty((height // 2, width // 2, 2), dtype=np.uint8)
    chroma[:, :, 0] = cbcr[:, :, 1]  # V (Cr)
    chroma[:, :, 1] = cbcr[:, :, 0]  # U (Cb)
    return np.ascontiguousarray(luma).tobytes() + chroma.tobytes()


def _gray_image(levels: np.ndarray) -> Image.Image:
    return Image.fromarray(np.repeat(levels[:, :, None], 3, axis=2))


def build_test_pattern(name: str, width: int, height: int, cell: int = 24) -> Image.Image:
    if name in SOLID_COLORS:
        return Image.new("RGB", (width, height), SOLID_COLORS[name])

    if name == "quadrants":
        img = Image.new("RGB", (width, height), (255, 255, 255))
        draw = ImageDraw.Draw(img)
        half_w, half_h = width // 2, height // 2
        draw.rectangle((0, 0, half_w - 1, half_h - 1), fill=(255, 0, 0))
        draw.rectangle((half_w, 0, width - 1, half_h - 1), fill=(0, 255, 0))
        draw.rectangle((0, half_h, half_w - 1, height - 1), fill=(0, 0, 255))
        return img

    xs = np.arange(width, dtype=np.uint32)[None, :]
    ys = np.arange(height, dtype=np.uint32)[:, None]
    if name == "h-gradient":
        levels = np.broadcast_to(xs * 255 // max(width - 1, 1), (height, width))
    elif name == "v-gradient":
        levels = np.broadcast_to(ys * 255 // max(height - 1, 1), (height, width))
    elif name == "checkerboard":
        levels = np.where((xs // cell + ys // cell) % 2 == 0, 255, 0)
    else:
        raise ValueError(f"Unknown pattern: {name}")
    return _gray_image(levels.astype(np.uint8))


def build_test_frame(name: str, width: int, height: int) -> FrameBuffer:
    return FrameBuffer(width=width, height=height, data=encode_nv21(build_test_pattern(name, width, height)))
