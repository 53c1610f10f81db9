"""Sperrzeiten-Abfrage mit laufbezogenem Cache."""

from typing import Callable, Optional

from models.teacher import TeacherConstraint
from solver.metrics import MetricsCollector


class AvailabilityFilter:
    """Beantwortet "ist Lehrkraft t in (Tag, Stunde) gesperrt?".

    Der Cache lebt nur so lange wie die Instanz, also einen Planungslauf.
    """

    def __init__(
        self,
        constraint_for: Callable[[str], TeacherConstraint],
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._constraint_for = constraint_for
        self._metrics = metrics
        self._cache: dict[tuple[str, str, float], bool] = {}

    def is_unavailable(self, teacher: str, day: str, period: float) -> bool:
        key = (teacher, day, float(period))
        if key in self._cache:
            if self._metrics:
                self._metrics.record_cache_hit()
            return self._cache[key]
        if self._metrics:
            self._metrics.record_cache_miss()
        result = self._constraint_for(teacher).is_unavailable(day, period)
        self._cache[key] = result
        return result

    def is_available(self, teacher: str, day: str, period: float) -> bool:
        return not self.is_unavailable(teacher, day, period)
