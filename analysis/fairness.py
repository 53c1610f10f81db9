"""Auslastungs- und Fairnessbericht für einen fertigen Wochenplan.

Zählt je Lehrkraft Klassenleitungen sowie H-, K- und F-Stunden und
bewertet die Verteilung innerhalb der Pools.
"""

from collections import Counter

from pydantic import BaseModel

from models.assignment import UNASSIGNED_LABEL, Role
from models.slot_config import SlotConfig
from solver.homerooms import fallback_homeroom_label
from solver.scheduler import ScheduleResult


# ─── Metriken-Modelle ─────────────────────────────────────────────────────────

class TeacherLoad(BaseModel):
    """Auslastung einer einzelnen Lehrkraft."""

    teacher: str
    pool: str                     # "H/K", "F" oder "-"
    homerooms: int
    homeroom_sessions: int
    korean_sessions: int
    foreign_sessions: int
    exams: int
    sessions_per_day: dict[str, int]

    @property
    def total_sessions(self) -> int:
        """Unterrichtsstunden ohne Prüfungsaufsichten."""
        return self.homeroom_sessions + self.korean_sessions + self.foreign_sessions


class FairnessReport(BaseModel):
    """Verteilung der Stunden über die Lehrkräfte eines Slots."""

    teacher_loads: list[TeacherLoad]
    homeroom_spread: int          # max - min Klassenleitungen im H/K-Pool
    korean_spread: int            # max - min K-Stunden im H/K-Pool
    foreign_spread: int           # max - min F-Stunden im F-Pool
    fairness_index: float         # Jain's fairness index über Stunden (1.0 = perfekt)
    unassigned_count: int

    def load_for(self, teacher: str) -> TeacherLoad:
        for load in self.teacher_loads:
            if load.teacher == teacher:
                return load
        raise KeyError(teacher)

    def print_rich(self) -> None:
        """Gibt den Bericht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        fairness_color = (
            "green" if self.fairness_index >= 0.95
            else "yellow" if self.fairness_index >= 0.85
            else "red"
        )
        console.print(Panel(
            f"Fairness (Jain): "
            f"[{fairness_color}]{self.fairness_index:.4f}[/{fairness_color}] "
            f"(1.0 = perfekt)\n"
            f"Spannweite Klassenleitungen: [bold]{self.homeroom_spread}[/bold] | "
            f"K-Stunden: [bold]{self.korean_spread}[/bold] | "
            f"F-Stunden: [bold]{self.foreign_spread}[/bold]\n"
            f"Nicht besetzt: [bold]{self.unassigned_count}[/bold]",
            title="Auslastung – Übersicht",
            border_style="cyan",
        ))

        table = Table(title="Lehrkräfte", box=box.ROUNDED, show_lines=False)
        table.add_column("Lehrkraft", width=20)
        table.add_column("Pool", width=5)
        table.add_column("Klassen", justify="right", width=8)
        table.add_column("H", justify="right", width=4)
        table.add_column("K", justify="right", width=4)
        table.add_column("F", justify="right", width=4)
        table.add_column("Prüf.", justify="right", width=6)
        table.add_column("Gesamt", justify="right", width=7)

        for load in self.teacher_loads:
            table.add_row(
                load.teacher, load.pool,
                str(load.homerooms),
                str(load.homeroom_sessions),
                str(load.korean_sessions),
                str(load.foreign_sessions),
                str(load.exams),
                f"[bold]{load.total_sessions}[/bold]",
            )
        console.print(table)


# ─── Analyzer ─────────────────────────────────────────────────────────────────

def jain_index(values: list[int]) -> float:
    """Jain's Fairness Index: (Σ x_i)² / (n * Σ x_i²); leere/Null-Verteilung → 1.0."""
    sum_sq = sum(v * v for v in values)
    if not values or sum_sq == 0:
        return 1.0
    return sum(values) ** 2 / (len(values) * sum_sq)


def _spread(values: list[int]) -> int:
    return max(values) - min(values) if values else 0


class FairnessAnalyzer:
    """Berechnet den Auslastungsbericht für ein ScheduleResult."""

    def analyze(self, result: ScheduleResult, slot: SlotConfig) -> FairnessReport:
        pools = slot.teachers
        days = slot.time_grid.day_names
        homeroom_counts = Counter(result.homerooms.values())

        # Pool-Mitglieder zuerst (auch ohne Stunden), dann feste Klassenlehrer ohne Pool
        placeholders = {
            owner for cid, owner in result.homerooms.items()
            if owner == fallback_homeroom_label(cid)
        }
        teachers = list(pools.all_teachers)
        for name in result.teacher_summary:
            if name in teachers or name in placeholders or name == UNASSIGNED_LABEL:
                continue
            teachers.append(name)

        loads = [
            self._teacher_load(t, result, days, pools.pool_of(t) or "-", homeroom_counts[t])
            for t in teachers
        ]

        hk = [l for l in loads if l.pool == "H/K"]
        f = [l for l in loads if l.pool == "F"]
        pooled = hk + f

        return FairnessReport(
            teacher_loads=loads,
            homeroom_spread=_spread([l.homerooms for l in hk]),
            korean_spread=_spread([l.korean_sessions for l in hk]),
            foreign_spread=_spread([l.foreign_sessions for l in f]),
            fairness_index=round(jain_index([l.total_sessions for l in pooled]), 4),
            unassigned_count=result.metrics.unassigned_count,
        )

    @staticmethod
    def _teacher_load(
        teacher: str, result: ScheduleResult, days: list[str], pool: str, homerooms: int
    ) -> TeacherLoad:
        per_day = result.teacher_summary.get(teacher, {})
        roles: Counter = Counter()
        sessions_per_day: dict[str, int] = {}
        for day in days:
            entries = per_day.get(day, [])
            for a in entries:
                roles[a.role] += 1
            sessions_per_day[day] = sum(1 for a in entries if not a.is_exam)

        return TeacherLoad(
            teacher=teacher,
            pool=pool,
            homerooms=homerooms,
            homeroom_sessions=roles[Role.HOMEROOM],
            korean_sessions=roles[Role.KOREAN],
            foreign_sessions=roles[Role.FOREIGN],
            exams=roles[Role.EXAM],
            sessions_per_day=sessions_per_day,
        )
