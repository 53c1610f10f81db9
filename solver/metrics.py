"""Laufzeit- und Zähl-Metriken eines Planungslaufs."""

import time
from typing import Optional

from pydantic import BaseModel

from models.assignment import Assignment


class GenerationMetrics(BaseModel):
    """Metriken eines abgeschlossenen Planungslaufs."""

    generation_time_ms: float
    total_assignments: int     # alle Einträge inkl. Prüfungen (= Versuche)
    assigned_count: int
    unassigned_count: int
    warnings_count: int
    teachers_count: int
    classes_count: int
    sort_operations: int
    cache_hits: int
    cache_misses: int
    cache_hit_rate: int        # Prozent, gerundet


class MetricsCollector:
    """Sammelt Metriken während eines Laufs. Beeinflusst die Planung nicht."""

    def __init__(self) -> None:
        self._started: Optional[float] = None
        self._elapsed_ms: float = 0.0
        self.total = 0
        self.assigned = 0
        self.unassigned = 0
        self.sort_operations = 0
        self.cache_hits = 0
        self.cache_misses = 0

    def start(self) -> None:
        self._started = time.perf_counter()

    def stop(self) -> None:
        if self._started is not None:
            self._elapsed_ms = (time.perf_counter() - self._started) * 1000
            self._started = None

    def record_assignment(self, assignment: Assignment) -> None:
        self.total += 1
        if assignment.is_unassigned:
            self.unassigned += 1
        else:
            self.assigned += 1

    def record_sort(self) -> None:
        self.sort_operations += 1

    def record_cache_hit(self) -> None:
        self.cache_hits += 1

    def record_cache_miss(self) -> None:
        self.cache_misses += 1

    @property
    def cache_hit_rate(self) -> int:
        lookups = self.cache_hits + self.cache_misses
        if lookups == 0:
            return 0
        return round(self.cache_hits / lookups * 100)

    def snapshot(
        self, warnings_count: int, teachers_count: int, classes_count: int
    ) -> GenerationMetrics:
        """Friert die gesammelten Werte als GenerationMetrics ein."""
        return GenerationMetrics(
            generation_time_ms=round(self._elapsed_ms, 3),
            total_assignments=self.total,
            assigned_count=self.assigned,
            unassigned_count=self.unassigned,
            warnings_count=warnings_count,
            teachers_count=teachers_count,
            classes_count=classes_count,
            sort_operations=self.sort_operations,
            cache_hits=self.cache_hits,
            cache_misses=self.cache_misses,
            cache_hit_rate=self.cache_hit_rate,
        )
