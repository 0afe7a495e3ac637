"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 1


@dataclass
class FrameConfig:
    # Glass preview size.
    width: int = 640
    height: int = 360


@dataclass
class ViewportConfig:
    width: int = 40
    height: int = 40


@dataclass
class PaletteConfig:
    path: str | None = None
    cache_enabled: bool = True
    cache_max_entries: int = 65536


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class PerformanceConfig:
    cpu_percent_max: float = 25.0
    rss_mb_max: float = 300.0
    fps_min: float = 15.0
    fps_max: float = 30.0


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    frame: FrameConfig = field(default_factory=FrameConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    palette: PaletteConfig = field(default_factory=PaletteConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)

    @property
    def palette_path(self) -> Path | None:
        return Path(self.palette.path).expanduser() if self.palette.path else None


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "ColorVision"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "ColorVision"
    return Path.home() / ".config" / "colorvision"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _even(value: Any, default: int) -> int:
    value = _int(value, default)
    if value <= 0:
        return default
    return value - (value % 2) or 2


def _normalize_frame(cfg: AppConfig) -> None:
    cfg.frame.width = _even(cfg.frame.width, FrameConfig.width)
    cfg.frame.height = _even(cfg.frame.height, FrameConfig.height)


def _normalize_viewport(cfg: AppConfig) -> None:
    cfg.viewport.width = max(1, min(cfg.frame.width, _int(cfg.viewport.width, ViewportConfig.width)))
    cfg.viewport.height = max(1, min(cfg.frame.height, _int(cfg.viewport.height, ViewportConfig.height)))


def _normalize_palette(cfg: AppConfig) -> None:
    cfg.palette.cache_enabled = bool(cfg.palette.cache_enabled)
    cfg.palette.cache_max_entries = max(1, _int(cfg.palette.cache_max_entries, PaletteConfig.cache_max_entries))
    if not cfg.palette.path:
        cfg.palette.path = None


def _normalize_performance(cfg: AppConfig) -> None:
    cfg.performance.cpu_percent_max = max(1.0, _float(cfg.performance.cpu_percent_max, PerformanceConfig.cpu_percent_max))
    cfg.performance.rss_mb_max = max(64.0, _float(cfg.performance.rss_mb_max, PerformanceConfig.rss_mb_max))
    cfg.performance.fps_min = max(1.0, _float(cfg.performance.fps_min, PerformanceConfig.fps_min))
    cfg.performance.fps_max = max(cfg.performance.fps_min, _float(cfg.performance.fps_max, PerformanceConfig.fps_max))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=_int(data.get("config_version"), CONFIG_VERSION),
        frame=_merge(FrameConfig, data.get("frame", {})),
        viewport=_merge(ViewportConfig, data.get("viewport", {})),
        palette=_merge(PaletteConfig, data.get("palette", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
        performance=_merge(PerformanceConfig, data.get("performance", {})),
    )

    _normalize_frame(cfg)
    _normalize_viewport(cfg)
    _normalize_palette(cfg)
    _normalize_performance(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
