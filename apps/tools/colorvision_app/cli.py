"""CLI entrypoints for ColorVision frame analysis, color naming, benchmarks, and diagnostics."""

from __future__ import annotations

import argparse
import json
import time
from dataclasses import asdict
from pathlib import Path

from colorvision_core import (
    AppConfig,
    ColorReading,
    FrameAnalyzer,
    PerformanceController,
    PerformanceTargets,
    build_doctor_payload,
    load_config,
)
from colorvision_core.logging_setup import configure_logging, install_crash_hooks
from colorvision_detector import PATTERNS, ColorVisionError, FrameBuffer, Viewport, build_test_frame


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _reading_payload(reading: ColorReading) -> dict[str, object]:
    payload: dict[str, object] = {
        "success": reading.success,
        "name": reading.name,
        "error": reading.error,
        "error_kind": reading.error_kind,
        "duration_s": reading.duration_s,
        "viewport": asdict(reading.viewport) if reading.viewport else None,
    }
    if reading.color is not None:
        payload["color"] = {
            "red": reading.color.red,
            "green": reading.color.green,
            "blue": reading.color.blue,
            "hex": reading.color.hex_code,
            "label": reading.color.display_hex,
        }
    return payload


def _parse_viewport(text: str | None) -> Viewport | None:
    if not text:
        return None
    parts = text.split(",")
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("viewport must be LEFT,TOP,RIGHT,BOTTOM")
    try:
        left, top, right, bottom = (int(p) for p in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"viewport must be integers: {text}") from exc
    return Viewport(left, top, right, bottom)


def _build_analyzer(cfg: AppConfig | None = None) -> FrameAnalyzer:
    cfg = cfg or load_config()
    analyzer = FrameAnalyzer.from_config(cfg)
    analyzer.resolver.initialize()
    return analyzer


def cmd_analyze(args: argparse.Namespace) -> int:
    cfg = load_config()
    width = args.width or cfg.frame.width
    height = args.height or cfg.frame.height
    try:
        data = Path(args.input).expanduser().read_bytes()
    except OSError as exc:
        _print_json({"success": False, "error": str(exc)})
        return 2

    analyzer = _build_analyzer(cfg)
    reading = analyzer.analyze(FrameBuffer(width=width, height=height, data=data), viewport=args.viewport)
    _print_json(_reading_payload(reading))
    return 0 if reading.success else 2


def cmd_name(args: argparse.Namespace) -> int:
    analyzer = _build_analyzer()
    try:
        match = analyzer.resolver.nearest(args.red, args.green, args.blue)
    except ColorVisionError as exc:
        _print_json({"success": False, "error": str(exc)})
        return 2

    _print_json(
        {
            "success": True,
            "name": match.name,
            "palette_hex": match.rgb.rgb_hex,
            "distance": match.distance,
            "index": match.index,
        }
    )
    return 0


def cmd_palette(args: argparse.Namespace) -> int:
    analyzer = _build_analyzer()
    if not analyzer.resolver.is_initialized:
        _print_json({"success": False, "error": "palette not loaded"})
        return 2

    palette = analyzer.resolver.palette
    entries = list(palette)
    if args.search:
        needle = args.search.casefold()
        entries = [e for e in entries if needle in e.name.casefold()]
    _print_json([{"name": e.name, "hex": e.rgb.rgb_hex} for e in entries])
    return 0


def cmd_sample_pattern(args: argparse.Namespace) -> int:
    try:
        frame = build_test_frame(args.pattern, width=args.width, height=args.height)
    except ColorVisionError as exc:
        _print_json({"success": False, "pattern": args.pattern, "error": str(exc)})
        return 2
    if args.out:
        Path(args.out).expanduser().write_bytes(frame.data)

    analyzer = _build_analyzer()
    reading = analyzer.analyze(frame, viewport=args.viewport)
    payload = _reading_payload(reading)
    payload["pattern"] = args.pattern
    _print_json(payload)
    return 0 if reading.success else 2


def cmd_benchmark(args: argparse.Namespace) -> int:
    cfg = load_config()
    analyzer = _build_analyzer(cfg)
    perf = PerformanceController(
        PerformanceTargets(
            cpu_percent_max=cfg.performance.cpu_percent_max,
            rss_mb_max=cfg.performance.rss_mb_max,
            fps_min=cfg.performance.fps_min,
            fps_max=cfg.performance.fps_max,
        )
    )

    patterns = ["checkerboard", "quadrants", "h-gradient", "v-gradient"]
    frames_in = [build_test_frame(name, cfg.frame.width, cfg.frame.height) for name in patterns]
    idx = 0
    frames = 0
    start = time.perf_counter()
    deadline = start + args.seconds
    samples = []

    while time.perf_counter() < deadline:
        analyzer.analyze(frames_in[idx % len(frames_in)])
        idx += 1
        frames += 1
        budget = perf.sample(analyzer.status.fps, analyzer.status.frame_skip)
        analyzer.apply_budget(budget)
        samples.append(asdict(budget))

    elapsed = max(time.perf_counter() - start, 1e-9)
    cpu_max = max((s["cpu_percent"] for s in samples), default=0.0)
    rss_max = max((s["rss_mb"] for s in samples), default=0.0)
    fps_actual = frames / elapsed

    pass_cpu = cpu_max <= cfg.performance.cpu_percent_max
    pass_mem = rss_max <= cfg.performance.rss_mb_max
    pass_fps = fps_actual >= cfg.performance.fps_min

    _print_json(
        {
            "seconds": args.seconds,
            "frames": frames,
            "fps": fps_actual,
            "frame_size": [cfg.frame.width, cfg.frame.height],
            "scratch_allocations": analyzer.converter.allocations,
            "cache": asdict(analyzer.resolver.cache_info()),
            "recommended_frame_skip": analyzer.status.frame_skip,
            "budget": {
                "max_observed": {"cpu_percent": cpu_max, "rss_mb": rss_max, "fps": fps_actual},
                "pass": bool(pass_cpu and pass_mem and pass_fps),
                "checks": {"cpu": pass_cpu, "memory": pass_mem, "fps": pass_fps},
            },
        }
    )
    return 0


def cmd_doctor(_args: argparse.Namespace) -> int:
    cfg = load_config()
    analyzer = _build_analyzer(cfg)
    _print_json(build_doctor_payload(cfg, analyzer.resolver))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="colorvision", description="ColorVision color detection tools")
    parser.add_argument("--verbose", action="store_true", help="Log debug events")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze_cmd = sub.add_parser("analyze", help="Analyze a raw NV21 frame file")
    analyze_cmd.add_argument("--input", required=True, help="Path to raw NV21 bytes")
    analyze_cmd.add_argument("--width", type=int, default=None)
    analyze_cmd.add_argument("--height", type=int, default=None)
    analyze_cmd.add_argument("--viewport", type=_parse_viewport, default=None, help="LEFT,TOP,RIGHT,BOTTOM")
    analyze_cmd.set_defaults(func=cmd_analyze)

    name_cmd = sub.add_parser("name", help="Name the closest palette color")
    name_cmd.add_argument("red", type=int)
    name_cmd.add_argument("green", type=int)
    name_cmd.add_argument("blue", type=int)
    name_cmd.set_defaults(func=cmd_name)

    palette_cmd = sub.add_parser("palette", help="List palette colors")
    palette_cmd.add_argument("--search", default=None, help="Case-insensitive name filter")
    palette_cmd.set_defaults(func=cmd_palette)

    pat_cmd = sub.add_parser("sample-pattern", help="Analyze a synthetic NV21 pattern")
    pat_cmd.add_argument("--pattern", default="quadrants", choices=list(PATTERNS))
    pat_cmd.add_argument("--width", type=int, default=640)
    pat_cmd.add_argument("--height", type=int, default=360)
    pat_cmd.add_argument("--viewport", type=_parse_viewport, default=None, help="LEFT,TOP,RIGHT,BOTTOM")
    pat_cmd.add_argument("--out", default=None, help="Optional path to write the NV21 frame")
    pat_cmd.set_defaults(func=cmd_sample_pattern)

    bench_cmd = sub.add_parser("benchmark", help="Run frame analysis benchmark")
    bench_cmd.add_argument("--seconds", type=int, default=10)
    bench_cmd.set_defaults(func=cmd_benchmark)

    doctor_cmd = sub.add_parser("doctor", help="Print runtime and palette diagnostics")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False, verbose=args.verbose)
    install_crash_hooks()
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
