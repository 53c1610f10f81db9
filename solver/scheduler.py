"""Wochenplan-Generator (Greedy, ein Durchlauf).

Ablauf:
  - Klassenlehrer einmalig bestimmen
  - für jede Runde × Tag × Klasse:
      Rollen-Staffelung → Kandidatenauswahl (Sperren, Belegung, Last)
  - Prüfungsaufsichten für Runden 2–4
  - Einträge in Tagesraster, Klassen- und Lehrer-Sicht sammeln

Kein Backtracking: Findet sich für eine Stunde niemand, bleibt sie mit
Warnung unbesetzt und der Lauf geht weiter.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel

from models.assignment import UNASSIGNED_LABEL, Assignment, Role
from models.slot_config import SlotConfig
from solver.aggregator import ScheduleAggregator
from solver.availability import AvailabilityFilter
from solver.conflicts import ConflictTracker
from solver.exams import place_exams
from solver.homerooms import HomeroomAssignment, assign_homerooms
from solver.metrics import GenerationMetrics, MetricsCollector
from solver.selection import CandidateSelector
from solver.stagger import role_capacity, roles_for

logger = logging.getLogger(__name__)


# ─── Ergebnis-Modell ──────────────────────────────────────────────────────────

class ScheduleResult(BaseModel):
    """Vollständiges Ergebnis eines Planungslaufs."""

    class_summary: dict[str, dict[str, list[Assignment]]]
    teacher_summary: dict[str, dict[str, list[Assignment]]]
    day_grid: dict[str, dict[float, list[Assignment]]]
    homerooms: dict[str, str]
    warnings: list[str]
    metrics: GenerationMetrics
    class_names: dict[str, str] = {}

    @property
    def assignments(self) -> list[Assignment]:
        """Alle Einträge in Rasterreihenfolge (Tag, Stunde, Klasse)."""
        return [
            a
            for periods in self.day_grid.values()
            for entries in periods.values()
            for a in entries
        ]

    def class_label(self, class_id: str) -> str:
        """Anzeigename einer Klasse (Fallback: Klassen-ID)."""
        return self.class_names.get(class_id, class_id)

    def get_class_schedule(self, class_id: str) -> list[Assignment]:
        """Alle Einträge einer Klasse über die Woche."""
        return [a for entries in self.class_summary.get(class_id, {}).values() for a in entries]

    def get_teacher_schedule(self, teacher: str) -> list[Assignment]:
        """Alle Einträge einer Lehrkraft über die Woche."""
        return [a for entries in self.teacher_summary.get(teacher, {}).values() for a in entries]

    def save_json(self, path: Path) -> None:
        """Speichert das Ergebnis als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "ScheduleResult":
        """Lädt ein gespeichertes Ergebnis aus JSON."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Ergebnis nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())


# ─── Laufzustand ──────────────────────────────────────────────────────────────

@dataclass
class GenerationContext:
    """Veränderlicher Zustand genau eines Planungslaufs."""

    slot: SlotConfig
    homerooms: HomeroomAssignment
    tracker: ConflictTracker
    availability: AvailabilityFilter
    selector: CandidateSelector
    aggregator: ScheduleAggregator
    metrics: MetricsCollector
    loads: Counter = field(default_factory=Counter)
    warnings: list[str] = field(default_factory=list)


# ─── Generator ────────────────────────────────────────────────────────────────

class WeeklyScheduler:
    """Greedy-Generator für den Wochenplan eines Slots.

    Verwendung:
        scheduler = WeeklyScheduler(slot_config)
        result = scheduler.generate()

    Die Instanz hält nur die (validierte) Konfiguration; jeder generate()-Aufruf
    baut seinen eigenen Laufzustand auf.
    """

    def __init__(self, slot_config: Union[SlotConfig, dict[str, Any]]) -> None:
        self.slot = SlotConfig.coerce(slot_config)

    def generate(self) -> ScheduleResult:
        """Erzeugt den Wochenplan."""
        ctx = self._new_context()
        ctx.metrics.start()

        for class_id in ctx.homerooms.fallback_classes:
            msg = f"{class_id}: kein Klassenlehrer verfügbar, Platzhalter {ctx.homerooms.owner(class_id)}"
            logger.warning(msg)
            ctx.warnings.append(msg)

        grid = self.slot.time_grid
        for round_number, class_ids in self.slot.round_classes.items():
            if not class_ids:
                continue
            periods = grid.round_periods[round_number]
            capacity = role_capacity(round_number, self.slot.teachers)

            for day_index, day in enumerate(grid.day_names):
                for exam in place_exams(
                    round_number, day, class_ids, ctx.homerooms,
                    self.slot.global_options, grid,
                ):
                    self._emit(ctx, exam)

                for class_index, class_id in enumerate(class_ids):
                    roles = roles_for(round_number, day_index, class_index, capacity)
                    logger.debug(
                        f"[{day} R{round_number}] {class_id} (#{class_index}): "
                        f"Rollen {roles[0].value}/{roles[1].value}"
                    )
                    for role, period in zip(roles, periods):
                        self._assign_one(ctx, round_number, day, period, class_id, role)

        day_grid, by_class, by_teacher = ctx.aggregator.finalize()
        ctx.metrics.stop()

        teachers_count = sum(1 for t in by_teacher if t != UNASSIGNED_LABEL)
        metrics = ctx.metrics.snapshot(
            warnings_count=len(ctx.warnings),
            teachers_count=teachers_count,
            classes_count=len(by_class),
        )
        logger.info(
            f"Wochenplan '{self.slot.name}' erzeugt | "
            f"Einträge: {metrics.total_assignments} | "
            f"nicht besetzt: {metrics.unassigned_count} | "
            f"Zeit: {metrics.generation_time_ms:.1f}ms"
        )

        return ScheduleResult(
            class_summary=by_class,
            teacher_summary=by_teacher,
            day_grid=day_grid,
            homerooms=dict(ctx.homerooms.owners),
            warnings=ctx.warnings,
            metrics=metrics,
            class_names=dict(self.slot.global_options.class_names),
        )

    # ─── Intern ───────────────────────────────────────────────────────────────

    def _new_context(self) -> GenerationContext:
        slot = self.slot
        metrics = MetricsCollector()
        tracker = ConflictTracker()
        availability = AvailabilityFilter(slot.constraint_for, metrics)
        homerooms = assign_homerooms(
            slot.class_ids,
            slot.teachers.homeroom_korean_pool,
            slot.fixed_homerooms,
            slot.constraint_for,
        )
        loads: Counter = Counter()
        selector = CandidateSelector(
            pools=slot.teachers,
            homerooms=homerooms,
            tracker=tracker,
            availability=availability,
            loads=loads,
            include_homerooms_in_korean=slot.global_options.include_homerooms_in_korean,
        )
        return GenerationContext(
            slot=slot,
            homerooms=homerooms,
            tracker=tracker,
            availability=availability,
            selector=selector,
            aggregator=ScheduleAggregator(slot.time_grid.day_names, metrics),
            metrics=metrics,
            loads=loads,
        )

    def _assign_one(
        self,
        ctx: GenerationContext,
        round_number: int,
        day: str,
        period: int,
        class_id: str,
        role: Role,
    ) -> None:
        if role is Role.FOREIGN and round_number == 4:
            teacher = None
        else:
            teacher = ctx.selector.select(role, round_number, day, period, class_id)

        if teacher is not None:
            ctx.tracker.occupy(day, period, teacher)
            ctx.loads[teacher] += 1
        else:
            ctx.warnings.append(f"[{day} {period:g}] {class_id} {role.value} nicht besetzt")

        self._emit(ctx, Assignment(
            class_id=class_id, round=round_number, day=day,
            period=period, time=self.slot.time_grid.period_label(period),
            role=role, teacher=teacher,
        ))

    def _emit(self, ctx: GenerationContext, assignment: Assignment) -> None:
        ctx.metrics.record_assignment(assignment)
        ctx.aggregator.add(assignment)


def generate(slot_config: Union[SlotConfig, dict[str, Any]]) -> ScheduleResult:
    """Erzeugt den Wochenplan für eine Slot-Konfiguration.

    Raises:
        SlotConfigError: bei ungültiger Konfiguration, bevor geplant wird.
    """
    return WeeklyScheduler(slot_config).generate()
