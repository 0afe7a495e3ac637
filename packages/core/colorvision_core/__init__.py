"""Core app services for settings, logging, performance budgets, diagnostics, and frame analysis."""

from .config import AppConfig, load_config, save_config
from .diagnostics import build_doctor_payload
from .frame_analyzer import AnalyzerStatus, ColorReading, FrameAnalyzer
from .performance import BudgetStatus, PerformanceController, PerformanceTargets, evaluate_budget

__all__ = [
    "AnalyzerStatus",
    "AppConfig",
    "BudgetStatus",
    "ColorReading",
    "FrameAnalyzer",
    "PerformanceController",
    "PerformanceTargets",
    "build_doctor_payload",
    "evaluate_budget",
    "load_config",
    "save_config",
]
