"""Nearest named color lookup against a fixed palette."""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from .errors import InvalidInput, NotInitialized
from .models import RGBColor
from .palette import Palette, load_palette

logger = logging.getLogger("colorvision.detector.resolver")


@dataclass(frozen=True)
class ColorMatch:
    name: str
    rgb: RGBColor
    distance: int
    index: int


@dataclass(frozen=True)
class CacheInfo:
    hits: int
    misses: int
    size: int
    max_entries: int


@dataclass(frozen=True, eq=False)
class _PaletteIndex:
    palette: Palette
    channels: np.ndarray
    cache: dict[int, str] = field(default_factory=dict, compare=False)


def _channels(r, g, b) -> tuple[int, int, int]:
    out = []
    for label, value in (("red", r), ("green", g), ("blue", b)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidInput(f"{label} channel must be an integer, got {value!r}")
        value = int(value)
        if not 0 <= value <= 255:
            raise InvalidInput(f"{label} channel out of range 0-255: {value}")
        out.append(value)
    return out[0], out[1], out[2]


class ColorNameResolver:
    """Resolves RGB triples to the closest palette color by squared RGB distance.

    Ties go to the entry that comes first in palette order. Results are cached
    by exact triple; the cache never changes an answer, it only skips the scan.
    The palette is published in one assignment, so lookups from several
    threads need no locking.
    """

    def __init__(
        self,
        palette_path: Path | None = None,
        cache_enabled: bool = True,
        cache_max_entries: int = 65536,
    ) -> None:
        self.palette_path = palette_path
        self.cache_enabled = cache_enabled
        self.cache_max_entries = max(1, int(cache_max_entries))
        self._index: _PaletteIndex | None = None
        self._hits = 0
        self._misses = 0

    @property
    def is_initialized(self) -> bool:
        return self._index is not None

    @property
    def palette(self) -> Palette:
        return self._require_index().palette

    def initialize(self, palette: Palette | None = None) -> bool:
        """Load the palette (or adopt ``palette``). Returns whether lookups are ready."""
        if palette is None:
            source = str(self.palette_path) if self.palette_path else "bundled"
            try:
                palette = load_palette(self.palette_path)
            except (OSError, InvalidInput) as exc:
                logger.warning(
                    f"palette load failed source={source}: {exc}",
                    extra={"event": "palette_load_failed"},
                )
                return self.is_initialized
        channels = np.array([entry.rgb.as_tuple() for entry in palette], dtype=np.int32)
        self._index = _PaletteIndex(palette=palette, channels=channels)
        logger.info(
            f"palette ready colors={len(palette)}",
            extra={"event": "palette_ready"},
        )
        return True

    def _require_index(self) -> _PaletteIndex:
        index = self._index
        if index is None:
            raise NotInitialized("Color palette is not initialized")
        return index

    @staticmethod
    def _scan(index: _PaletteIndex, r: int, g: int, b: int) -> ColorMatch:
        diff = index.channels - np.array((r, g, b), dtype=np.int32)
        distances = (diff * diff).sum(axis=1)
        # argmin reports the first minimum, which is the tie-break rule.
        best = int(np.argmin(distances))
        entry = index.palette[best]
        return ColorMatch(name=entry.name, rgb=entry.rgb, distance=int(distances[best]), index=best)

    def nearest(self, r: int, g: int, b: int) -> ColorMatch:
        index = self._require_index()
        r, g, b = _channels(r, g, b)
        return self._scan(index, r, g, b)

    def resolve(self, r: int, g: int, b: int) -> str:
        index = self._require_index()
        r, g, b = _channels(r, g, b)
        if not self.cache_enabled:
            return self._scan(index, r, g, b).name

        key = (r << 16) | (g << 8) | b
        name = index.cache.get(key)
        if name is not None:
            self._hits += 1
            return name

        self._misses += 1
        name = self._scan(index, r, g, b).name
        if len(index.cache) >= self.cache_max_entries:
            index.cache.clear()
        index.cache[key] = name
        return name

    def name_color(self, color: RGBColor) -> RGBColor:
        return color.with_name(self.resolve(color.red, color.green, color.blue))

    def cache_info(self) -> CacheInfo:
        index = self._index
        return CacheInfo(
            hits=self._hits,
            misses=self._misses,
            size=len(index.cache) if index is not None else 0,
            max_entries=self.cache_max_entries,
        )

    def clear_cache(self) -> None:
        index = self._index
        if index is not None:
            index.cache.clear()
        self._hits = 0
        self._misses = 0
