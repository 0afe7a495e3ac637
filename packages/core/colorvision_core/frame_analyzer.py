"""Per-frame color analysis: decode, average over the viewport, name the color."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from colorvision_detector import (
    ColorNameResolver,
    FrameBuffer,
    InvalidInput,
    NotInitialized,
    PixelConverter,
    RGBColor,
    Viewport,
)

from .config import AppConfig
from .performance import MAX_FRAME_SKIP, BudgetStatus

logger = logging.getLogger("colorvision.analyzer")

INVALID_INPUT = "invalid_input"
NOT_INITIALIZED = "not_initialized"


@dataclass(frozen=True)
class ColorReading:
    success: bool
    color: RGBColor | None
    name: str | None
    viewport: Viewport | None
    error: str | None = None
    error_kind: str | None = None
    duration_s: float = 0.0


@dataclass
class AnalyzerStatus:
    frames: int = 0
    rejected: int = 0
    unnamed: int = 0
    fps: float = 0.0
    last_error: str | None = None
    frame_skip: int = 0
    degraded: bool = False


class FrameAnalyzer:
    """Turns delivered camera frames into color readings.

    No exception leaves :meth:`analyze`; bad frames and a missing palette come
    back as unsuccessful readings so the frame callback stays responsive.
    """

    def __init__(
        self,
        converter: PixelConverter | None = None,
        resolver: ColorNameResolver | None = None,
        viewport_size: tuple[int, int] = (40, 40),
    ) -> None:
        self.converter = converter or PixelConverter()
        self.resolver = resolver or ColorNameResolver()
        self.viewport_size = viewport_size

        self._status = AnalyzerStatus()
        self._lock = threading.RLock()
        self._ewma_fps = 0.0
        self._events: list[dict[str, Any]] = []

    @classmethod
    def from_config(cls, cfg: AppConfig) -> FrameAnalyzer:
        resolver = ColorNameResolver(
            palette_path=cfg.palette_path,
            cache_enabled=cfg.palette.cache_enabled,
            cache_max_entries=cfg.palette.cache_max_entries,
        )
        return cls(
            converter=PixelConverter(),
            resolver=resolver,
            viewport_size=(cfg.viewport.width, cfg.viewport.height),
        )

    @property
    def status(self) -> AnalyzerStatus:
        return self._status

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        return self._events[-limit:]

    def _log_event(self, event: str, **fields: Any) -> None:
        row = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event": event,
        }
        row.update(fields)
        self._events.append(row)
        if len(self._events) > 1000:
            self._events = self._events[-1000:]

    def viewport_for(self, width: int, height: int) -> Viewport:
        view_w, view_h = self.viewport_size
        return Viewport.centered(width, height, view_w, view_h)

    def analyze(self, frame: FrameBuffer, viewport: Viewport | None = None) -> ColorReading:
        with self._lock:
            start = time.perf_counter()
            self._status.frames += 1
            try:
                frame.validate()
                viewport = viewport or self.viewport_for(frame.width, frame.height)
                color = self.converter.average_color(frame.data, frame.width, frame.height, viewport)
            except InvalidInput as exc:
                self._status.rejected += 1
                self._status.last_error = str(exc)
                self._log_event("frame_rejected", error=str(exc))
                logger.debug(f"frame rejected: {exc}", extra={"event": "frame_rejected"})
                return ColorReading(
                    success=False,
                    color=None,
                    name=None,
                    viewport=viewport,
                    error=str(exc),
                    error_kind=INVALID_INPUT,
                    duration_s=time.perf_counter() - start,
                )

            try:
                color = self.resolver.name_color(color)
            except NotInitialized as exc:
                self._status.unnamed += 1
                self._status.last_error = str(exc)
                self._log_event("palette_not_ready", hex=color.hex_code)
                logger.warning(f"color not named: {exc}", extra={"event": "palette_not_ready"})
                return ColorReading(
                    success=False,
                    color=color,
                    name=None,
                    viewport=viewport,
                    error=str(exc),
                    error_kind=NOT_INITIALIZED,
                    duration_s=self._record_timing(start),
                )

            elapsed = self._record_timing(start)
            self._status.last_error = None
            return ColorReading(success=True, color=color, name=color.name, viewport=viewport, duration_s=elapsed)

    def _record_timing(self, start: float) -> float:
        elapsed = max(time.perf_counter() - start, 1e-9)
        fps = 1.0 / elapsed
        self._ewma_fps = fps if self._ewma_fps == 0 else (0.75 * self._ewma_fps + 0.25 * fps)
        self._status.fps = self._ewma_fps
        return elapsed

    def apply_budget(self, budget: BudgetStatus) -> None:
        with self._lock:
            self._status.frame_skip = max(0, min(MAX_FRAME_SKIP, int(budget.recommended_frame_skip)))
            self._status.degraded = budget.overloaded
            if budget.warning:
                self._log_event(
                    "budget_warning",
                    warning=budget.warning,
                    cpu_percent=budget.cpu_percent,
                    rss_mb=budget.rss_mb,
                    frame_skip=self._status.frame_skip,
                )
