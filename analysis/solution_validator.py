"""Validierung eines fertigen Wochenplans.

Prüft ein ScheduleResult unabhängig vom Generator gegen die Slot-Konfiguration.
Dient als Sicherheitsnetz und für gespeicherte Ergebnisse (JSON).
"""

from collections import Counter, defaultdict
from typing import Literal

from pydantic import BaseModel

from models.assignment import Assignment, Role
from models.slot_config import SlotConfig
from solver.homerooms import fallback_homeroom_label
from solver.scheduler import ScheduleResult


class ValidationViolation(BaseModel):
    """Eine einzelne Regelverletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "teacher_double_booking"
    description: str
    entity: str          # Lehrkraft oder Klassen-ID


class ValidationReport(BaseModel):
    """Ergebnis der Validierung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    @property
    def errors(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def by_constraint(self, constraint: str) -> list[ValidationViolation]:
        return [v for v in self.violations if v.constraint == constraint]

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ VALIDE[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(self.errors)} | Warnungen: {len(self.warnings)}"]
        console.print(Panel("\n".join(lines), title="Wochenplan-Validierung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Regel", width=26)
        table.add_column("Entität", width=14)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


def _where(a: Assignment) -> str:
    return f"{a.day} {a.period:g}. Std."


class SolutionValidator:
    """Prüft ein ScheduleResult auf Regelverletzungen."""

    def validate(self, result: ScheduleResult, slot: SlotConfig) -> ValidationReport:
        """Führt alle Prüfungen durch und gibt einen ValidationReport zurück."""
        assignments = result.assignments
        violations: list[ValidationViolation] = []

        violations.extend(self._check_teacher_double_booking(assignments))
        violations.extend(self._check_korean_self_exclusion(assignments, result))
        violations.extend(self._check_round4_foreign(assignments))
        violations.extend(self._check_exams(assignments, result))
        violations.extend(self._check_coverage(assignments, slot))
        violations.extend(self._check_unavailable_slots(assignments, slot))
        violations.extend(self._check_homeroom_rules(result, slot))
        violations.extend(self._check_unassigned(assignments))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_teacher_double_booking(
        self, assignments: list[Assignment]
    ) -> list[ValidationViolation]:
        """Keine Lehrkraft unterrichtet zur selben Zeit zwei Klassen.

        Prüfungsaufsichten liegen vor bzw. zwischen den Stunden und zählen nicht
        als Unterricht. Mehrere gleichzeitige Aufsichten einer Lehrkraft sind
        nur ein Hinweis.
        """
        violations: list[ValidationViolation] = []
        teaching: dict[tuple, list[str]] = defaultdict(list)
        exams: dict[tuple, list[str]] = defaultdict(list)

        for a in assignments:
            if a.is_unassigned:
                continue
            target = exams if a.is_exam else teaching
            target[(a.teacher, a.day, a.period)].append(a.class_id)

        for (teacher, day, period), classes in teaching.items():
            if len(classes) > 1:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="teacher_double_booking",
                    entity=teacher,
                    description=(
                        f"{day} {period:g}. Std.: gleichzeitig in "
                        f"{', '.join(classes)} eingeplant."
                    ),
                ))
        for (teacher, day, period), classes in exams.items():
            if len(classes) > 1:
                violations.append(ValidationViolation(
                    severity="warning",
                    constraint="exam_proctor_overlap",
                    entity=teacher,
                    description=(
                        f"{day} {period:g}: Aufsicht für mehrere Prüfungen "
                        f"({', '.join(classes)})."
                    ),
                ))
        return violations

    def _check_korean_self_exclusion(
        self, assignments: list[Assignment], result: ScheduleResult
    ) -> list[ValidationViolation]:
        """K-Stunden nie beim eigenen Klassenlehrer."""
        violations: list[ValidationViolation] = []
        for a in assignments:
            if a.role is Role.KOREAN and a.teacher == result.homerooms.get(a.class_id):
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="korean_by_homeroom_owner",
                    entity=a.class_id,
                    description=f"{_where(a)}: K-Stunde beim eigenen Klassenlehrer {a.teacher}.",
                ))
        return violations

    def _check_round4_foreign(self, assignments: list[Assignment]) -> list[ValidationViolation]:
        """Runde 4 hat keine F-Stunden."""
        return [
            ValidationViolation(
                severity="error",
                constraint="round4_foreign",
                entity=a.class_id,
                description=f"{_where(a)}: F-Stunde in Runde 4.",
            )
            for a in assignments
            if a.round == 4 and a.role is Role.FOREIGN
        ]

    def _check_exams(
        self, assignments: list[Assignment], result: ScheduleResult
    ) -> list[ValidationViolation]:
        """Prüfungen nur ab Runde 2, Aufsicht immer der Klassenlehrer."""
        violations: list[ValidationViolation] = []
        for a in assignments:
            if not a.is_exam:
                continue
            if a.round == 1:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="exam_in_round1",
                    entity=a.class_id,
                    description=f"{_where(a)}: Prüfung in Runde 1.",
                ))
            owner = result.homerooms.get(a.class_id)
            if a.teacher != owner:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="exam_proctor_mismatch",
                    entity=a.class_id,
                    description=(
                        f"{_where(a)}: Aufsicht {a.teacher_label}, "
                        f"Klassenlehrer ist {owner}."
                    ),
                ))
        return violations

    def _check_coverage(
        self, assignments: list[Assignment], slot: SlotConfig
    ) -> list[ValidationViolation]:
        """Jede Klasse hat pro Tag genau die zwei Stunden ihrer Runde."""
        violations: list[ValidationViolation] = []
        seen: dict[tuple, list[float]] = defaultdict(list)
        for a in assignments:
            if not a.is_exam:
                seen[(a.class_id, a.day)].append(a.period)

        for rnd, class_ids in slot.round_classes.items():
            expected = sorted(float(p) for p in slot.time_grid.round_periods[rnd])
            for class_id in class_ids:
                for day in slot.time_grid.day_names:
                    got = sorted(seen.pop((class_id, day), []))
                    if got != expected:
                        violations.append(ValidationViolation(
                            severity="error",
                            constraint="coverage_mismatch",
                            entity=class_id,
                            description=(
                                f"{day}: Stunden {[f'{p:g}' for p in got]}, "
                                f"erwartet {[f'{p:g}' for p in expected]}."
                            ),
                        ))

        for (class_id, day) in seen:
            violations.append(ValidationViolation(
                severity="error",
                constraint="unknown_class",
                entity=class_id,
                description=f"{day}: Einträge für eine nicht konfigurierte Klasse.",
            ))
        return violations

    def _check_unavailable_slots(
        self, assignments: list[Assignment], slot: SlotConfig
    ) -> list[ValidationViolation]:
        """Keine Lehrkraft in gesperrten Stunden.

        Prüfungsaufsichten werden beim Generieren nicht gegen Sperren geprüft,
        daher dort nur Warnung.
        """
        violations: list[ValidationViolation] = []
        for a in assignments:
            if a.is_unassigned:
                continue
            if not slot.constraint_for(a.teacher).is_unavailable(a.day, a.period):
                continue
            violations.append(ValidationViolation(
                severity="warning" if a.is_exam else "error",
                constraint="unavailable_slot_violation",
                entity=a.teacher,
                description=(
                    f"{_where(a)} ist gesperrt, aber {a.role.value} "
                    f"für {a.class_id} eingeplant."
                ),
            ))
        return violations

    def _check_homeroom_rules(
        self, result: ScheduleResult, slot: SlotConfig
    ) -> list[ValidationViolation]:
        """Sperre und Obergrenze für Klassenleitungen.

        Feste Zuordnungen werden immer übernommen; Verstöße dort sind nur Warnungen.
        """
        violations: list[ValidationViolation] = []
        counts: Counter = Counter()
        for class_id, teacher in result.homerooms.items():
            if teacher == fallback_homeroom_label(class_id):
                continue
            counts[teacher] += 1
            constraint = slot.constraint_for(teacher)
            if constraint.homeroom_disabled:
                fixed = slot.fixed_homerooms.get(teacher) == class_id
                violations.append(ValidationViolation(
                    severity="warning" if fixed else "error",
                    constraint="homeroom_disabled",
                    entity=teacher,
                    description=f"Führt {class_id}, darf aber keine Klasse führen.",
                ))

        for teacher, count in counts.items():
            limit = slot.constraint_for(teacher).max_homerooms
            if limit is not None and count > limit:
                violations.append(ValidationViolation(
                    severity="warning" if teacher in slot.fixed_homerooms else "error",
                    constraint="max_homerooms_exceeded",
                    entity=teacher,
                    description=f"{count} Klassen geführt, erlaubt sind {limit}.",
                ))
        return violations

    def _check_unassigned(self, assignments: list[Assignment]) -> list[ValidationViolation]:
        """Unbesetzte Stunden sind erlaubt, werden aber gemeldet."""
        return [
            ValidationViolation(
                severity="warning",
                constraint="unassigned",
                entity=a.class_id,
                description=f"{_where(a)}: {a.role.value}-Stunde nicht besetzt.",
            )
            for a in assignments
            if a.is_unassigned
        ]
