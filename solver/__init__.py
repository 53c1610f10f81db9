"""Solver-Modul (Greedy-Wochenplan für Klassenlehrer-, Koreanisch- und Fremdsprachen-Stunden)."""

from .scheduler import WeeklyScheduler, ScheduleResult, GenerationContext, generate
from .metrics import GenerationMetrics, MetricsCollector

__all__ = [
    "WeeklyScheduler",
    "ScheduleResult",
    "GenerationContext",
    "generate",
    "GenerationMetrics",
    "MetricsCollector",
]
