"""Typed detector models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

from .errors import InvalidInput

NV21 = "NV21"

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def _clamp(value: int) -> int:
    return 255 if value > 255 else 0 if value < 0 else int(value)


@dataclass(frozen=True)
class RGBColor:
    """An 8-bit per channel color. Channels are clamped to [0, 255]."""

    alpha: int = 255
    red: int = 0
    green: int = 0
    blue: int = 0
    name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "alpha", _clamp(self.alpha))
        object.__setattr__(self, "red", _clamp(self.red))
        object.__setattr__(self, "green", _clamp(self.green))
        object.__setattr__(self, "blue", _clamp(self.blue))

    @classmethod
    def rgb(cls, red: int, green: int, blue: int) -> RGBColor:
        return cls(255, red, green, blue)

    @classmethod
    def from_pixel(cls, pixel: int) -> RGBColor:
        """Unpack an ``alpha<<24 | red<<16 | green<<8 | blue`` word."""
        pixel = int(pixel) & 0xFFFFFFFF
        return cls(
            alpha=(pixel >> 24) & 0xFF,
            red=(pixel >> 16) & 0xFF,
            green=(pixel >> 8) & 0xFF,
            blue=pixel & 0xFF,
        )

    @classmethod
    def from_hex(cls, text: str) -> RGBColor:
        match = _HEX_RE.match(text.strip())
        if not match:
            raise InvalidInput(f"Invalid hex color: {text!r}")
        digits = match.group(1)
        if len(digits) == 6:
            digits = "ff" + digits
        return cls.from_pixel(int(digits, 16))

    @property
    def pixel(self) -> int:
        return (self.alpha << 24) | (self.red << 16) | (self.green << 8) | self.blue

    @property
    def hex_code(self) -> str:
        return f"#{self.pixel:08x}"

    @property
    def rgb_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    @property
    def display_hex(self) -> str:
        # Label format shown next to the swatch.
        return self.rgb_hex.upper()

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def with_name(self, name: str | None) -> RGBColor:
        return replace(self, name=name)


@dataclass(frozen=True)
class Viewport:
    """Half-open pixel rectangle: left/top inclusive, right/bottom exclusive."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def area(self) -> int:
        return max(self.width, 0) * max(self.height, 0)

    def validate(self, width: int, height: int) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidInput(f"Degenerate viewport: {self}")
        if self.left < 0 or self.top < 0 or self.right > width or self.bottom > height:
            raise InvalidInput(f"Viewport {self} outside {width}x{height} frame")

    @classmethod
    def full(cls, width: int, height: int) -> Viewport:
        return cls(0, 0, width, height)

    @classmethod
    def centered(cls, frame_width: int, frame_height: int, view_width: int, view_height: int) -> Viewport:
        left = frame_width // 2 - view_width // 2
        top = frame_height // 2 - view_height // 2
        return cls(
            left=max(0, left),
            top=max(0, top),
            right=min(frame_width, left + view_width),
            bottom=min(frame_height, top + view_height),
        )


@dataclass(frozen=True)
class FrameBuffer:
    width: int
    height: int
    data: bytes | bytearray | memoryview
    pixel_format: str = NV21

    @property
    def expected_size(self) -> int:
        return self.width * self.height * 3 // 2

    def validate(self) -> None:
        if self.pixel_format != NV21:
            raise InvalidInput(f"Unsupported pixel format: {self.pixel_format}")
        validate_geometry(self.width, self.height, len(self.data))


def validate_geometry(width: int, height: int, size: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidInput(f"Frame dimensions must be positive, got {width}x{height}")
    if width % 2 or height % 2:
        raise InvalidInput(f"NV21 frames need even dimensions, got {width}x{height}")
    expected = width * height * 3 // 2
    if size < expected:
        raise InvalidInput(f"NV21 buffer too short: {size} bytes, expected {expected}")
