"""Sammelt Zuweisungen in drei Sichten: Tagesraster, je Klasse, je Lehrkraft."""

import re
from typing import Optional

from models.assignment import Assignment
from solver.metrics import MetricsCollector

DayGrid = dict[str, dict[float, list[Assignment]]]
Summary = dict[str, dict[str, list[Assignment]]]


def class_sort_key(class_id: str) -> tuple:
    """Natürliche Sortierung: R1C2 vor R1C10."""
    return tuple(
        int(part) if part.isdigit() else part
        for part in re.split(r"(\d+)", class_id)
    )


class ScheduleAggregator:
    """Faltet den Strom der Zuweisungen in die Ergebnis-Sichten."""

    def __init__(self, days: list[str], metrics: Optional[MetricsCollector] = None) -> None:
        self.days = list(days)
        self._metrics = metrics
        self.day_grid: DayGrid = {day: {} for day in self.days}
        self.by_class: Summary = {}
        self.by_teacher: Summary = {}

    def add(self, assignment: Assignment) -> None:
        day = assignment.day
        self.day_grid[day].setdefault(assignment.period, []).append(assignment)
        self.by_class.setdefault(assignment.class_id, {}).setdefault(day, []).append(assignment)
        self.by_teacher.setdefault(assignment.teacher_label, {}).setdefault(day, []).append(assignment)

    def finalize(self) -> tuple[DayGrid, Summary, Summary]:
        """Sortiert alle Listen und ergänzt fehlende Tage als leere Listen.

        Tagesraster: Stunden aufsteigend, je Stunde nach Klasse.
        Klassen- und Lehrer-Sicht: je Tag nach Stunde (stabil).
        """
        day_grid: DayGrid = {}
        for day in self.days:
            periods = self.day_grid[day]
            day_grid[day] = {}
            for period in sorted(periods):
                day_grid[day][period] = sorted(
                    periods[period], key=lambda a: class_sort_key(a.class_id)
                )
                self._count_sort()

        return day_grid, self._sorted_summary(self.by_class), self._sorted_summary(self.by_teacher)

    def _sorted_summary(self, summary: Summary) -> Summary:
        result: Summary = {}
        for key, per_day in summary.items():
            result[key] = {}
            for day in self.days:
                result[key][day] = sorted(per_day.get(day, []), key=lambda a: a.period)
                self._count_sort()
        return result

    def _count_sort(self) -> None:
        if self._metrics:
            self._metrics.record_sort()
