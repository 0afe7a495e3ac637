"""Doctor payload describing the local runtime and palette readiness."""

from __future__ import annotations

import platform
from dataclasses import asdict
from datetime import datetime, timezone
from importlib import metadata
from typing import Any

from colorvision_detector import ColorNameResolver

from .config import AppConfig, config_path
from .logging_setup import log_dir

_LIBRARIES = ("numpy", "Pillow", "psutil")


def library_versions() -> dict[str, str | None]:
    versions: dict[str, str | None] = {}
    for name in _LIBRARIES:
        try:
            versions[name] = metadata.version(name)
        except metadata.PackageNotFoundError:
            versions[name] = None
    return versions


def build_doctor_payload(cfg: AppConfig, resolver: ColorNameResolver | None = None) -> dict[str, Any]:
    palette: dict[str, Any] = {
        "source": cfg.palette.path or "bundled",
        "initialized": False,
        "colors": 0,
    }
    if resolver is not None and resolver.is_initialized:
        info = resolver.cache_info()
        palette.update(
            initialized=True,
            colors=len(resolver.palette),
            cache={"hits": info.hits, "misses": info.misses, "size": info.size, "max_entries": info.max_entries},
        )

    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "libraries": library_versions(),
        "config_path": str(config_path()),
        "log_dir": str(log_dir()),
        "config": asdict(cfg),
        "palette": palette,
    }
