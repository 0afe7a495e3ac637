"""Error types raised by the color detection core."""

from __future__ import annotations


class ColorVisionError(Exception):
    """Base class for recoverable detector errors."""


class InvalidInput(ColorVisionError, ValueError):
    """Frame, geometry or channel values the core cannot work with."""


class NotInitialized(ColorVisionError, RuntimeError):
    """The color palette has not been loaded yet."""
