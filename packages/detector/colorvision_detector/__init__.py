"""Color detection core: NV21 decoding, viewport averaging, and color naming."""

from .errors import ColorVisionError, InvalidInput, NotInitialized
from .models import FrameBuffer, RGBColor, Viewport
from .nv21 import PixelConverter, average_pixels, decode_nv21, unpack_channels
from .palette import Palette, PaletteEntry, load_palette
from .patterns import PATTERNS, build_test_frame, build_test_pattern, encode_nv21, solid_frame
from .resolver import CacheInfo, ColorMatch, ColorNameResolver

__all__ = [
    "CacheInfo",
    "ColorMatch",
    "ColorNameResolver",
    "ColorVisionError",
    "FrameBuffer",
    "InvalidInput",
    "NotInitialized",
    "PATTERNS",
    "Palette",
    "PaletteEntry",
    "PixelConverter",
    "RGBColor",
    "Viewport",
    "average_pixels",
    "build_test_frame",
    "build_test_pattern",
    "decode_nv21",
    "encode_nv21",
    "load_palette",
    "solid_frame",
    "unpack_channels",
]
