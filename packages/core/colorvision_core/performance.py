"""Runtime performance budgeting and frame-skip hints."""

from __future__ import annotations

from dataclasses import dataclass

import psutil

MAX_FRAME_SKIP = 8


@dataclass(frozen=True)
class PerformanceTargets:
    cpu_percent_max: float = 25.0
    rss_mb_max: float = 300.0
    fps_min: float = 15.0
    fps_max: float = 30.0


@dataclass(frozen=True)
class BudgetStatus:
    cpu_percent: float
    rss_mb: float
    fps: float
    overloaded: bool
    warning: str | None
    recommended_frame_skip: int


class PerformanceController:
    def __init__(self, targets: PerformanceTargets | None = None) -> None:
        self.targets = targets or PerformanceTargets()
        self._process = psutil.Process()
        # Prime non-blocking CPU measurement.
        self._process.cpu_percent(interval=None)

    def sample(self, fps: float, frame_skip: int = 0) -> BudgetStatus:
        cpu = float(self._process.cpu_percent(interval=None))
        rss_mb = float(self._process.memory_info().rss) / (1024 * 1024)
        return evaluate_budget(self.targets, cpu, rss_mb, fps, frame_skip)


def evaluate_budget(
    targets: PerformanceTargets,
    cpu_percent: float,
    rss_mb: float,
    fps: float,
    frame_skip: int = 0,
) -> BudgetStatus:
    overloaded = cpu_percent > targets.cpu_percent_max or rss_mb > targets.rss_mb_max

    warning = None
    skip = frame_skip
    if overloaded:
        warning = "resource_overload"
        skip = min(MAX_FRAME_SKIP, frame_skip + 1)
    elif fps < targets.fps_min:
        # Analysis cannot keep up with delivery; drop more frames upstream.
        warning = "below_fps_target"
        skip = min(MAX_FRAME_SKIP, frame_skip + 1)
    elif fps > targets.fps_max:
        warning = "above_fps_target"
        skip = max(0, frame_skip - 1)

    return BudgetStatus(
        cpu_percent=float(cpu_percent),
        rss_mb=float(rss_mb),
        fps=float(fps),
        overloaded=overloaded,
        warning=warning,
        recommended_frame_skip=skip,
    )
