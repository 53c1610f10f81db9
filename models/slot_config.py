"""SlotConfig: Vollständige Eingabe eines Planungslaufs + Machbarkeits-Check."""

import json
from collections import Counter
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from config.schema import GlobalOptions, TimeGridConfig
from models.teacher import TeacherConstraint, TeacherPools, format_slot_key


class SlotConfigError(ValueError):
    """Ungültige Slot-Konfiguration. Wird vor jeder Planungsarbeit geworfen."""

    def __init__(self, errors: list[str], source: str = "") -> None:
        self.errors = list(errors)
        self.source = source
        head = f"Slot-Konfiguration ungültig: {source}" if source else "Slot-Konfiguration ungültig"
        super().__init__(head + "\n" + "\n".join(f"  • {e}" for e in self.errors))

    @classmethod
    def from_validation_error(cls, exc: ValidationError, source: str = "") -> "SlotConfigError":
        errors = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"])
            msg = err["msg"].removeprefix("Value error, ")
            for line in msg.splitlines():
                errors.append(f"{loc}: {line}" if loc else line)
        return cls(errors, source)


class FeasibilityReport(BaseModel):
    """Ergebnis des Machbarkeits-Checks."""

    is_feasible: bool
    errors: list[str]      # Kritische Probleme (Plan wird sicher lückenhaft)
    warnings: list[str]    # Hinweise (Plan wird evtl. lückenhaft)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_feasible:
            status = "[bold green]✓ BESETZBAR[/bold green]"
        else:
            status = "[bold red]✗ NICHT VOLL BESETZBAR[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler (kritisch):[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Machbarkeits-Check", border_style="cyan"))


def build_class_ids(round_number: int, count: int) -> list[str]:
    """Klassen-IDs einer Runde: R<runde>C1 .. R<runde>C<count>."""
    return [f"R{round_number}C{i}" for i in range(1, count + 1)]


def _default_time_grid() -> TimeGridConfig:
    from config.defaults import default_time_grid
    return default_time_grid()


class SlotConfig(BaseModel):
    """Vollständige Eingabe eines Planungslaufs: Pools, Sperren, feste Klassenlehrer, Optionen."""

    name: str = "Slot"
    description: str = ""
    teachers: TeacherPools = Field(default_factory=TeacherPools)
    teacher_constraints: dict[str, TeacherConstraint] = {}
    # Lehrkraft → Klassen-ID, wird unverändert übernommen
    fixed_homerooms: dict[str, str] = {}
    global_options: GlobalOptions = Field(default_factory=GlobalOptions)
    time_grid: TimeGridConfig = Field(default_factory=_default_time_grid)

    @model_validator(mode='after')
    def _check_references(self):
        """Prüft Bezüge zwischen Optionen, Zeitraster und festen Klassenlehrern."""
        problems: list[str] = []
        days = set(self.time_grid.day_names)
        max_period = self.time_grid.max_period

        for rnd in self.global_options.round_class_counts:
            if rnd not in self.time_grid.round_periods:
                problems.append(f"Runde {rnd} hat keine Stunden im Zeitraster")

        for teacher, constraint in self.teacher_constraints.items():
            for key in sorted(constraint.unavailable):
                day, period = key
                if day not in days or period > max_period:
                    problems.append(
                        f"{teacher}: Sperrzeit '{format_slot_key(key)}' "
                        f"liegt nicht im Zeitraster"
                    )

        for day, markers in self.global_options.exam_periods.items():
            if day not in days:
                problems.append(f"Prüfungen an unbekanntem Tag '{day}'")
            for marker in markers:
                if marker >= max_period:
                    problems.append(
                        f"{day}: Prüfungsstunde {marker:g} liegt hinter der letzten Stunde"
                    )

        known = set(self.class_ids)
        owners_by_class: dict[str, list[str]] = {}
        for teacher, class_id in self.fixed_homerooms.items():
            owners_by_class.setdefault(class_id, []).append(teacher)
            if class_id not in known:
                problems.append(f"Fester Klassenlehrer {teacher}: Klasse '{class_id}' existiert nicht")
        for class_id, owners in owners_by_class.items():
            if len(owners) > 1:
                problems.append(
                    f"Klasse {class_id} hat mehrere feste Klassenlehrer: {', '.join(owners)}"
                )

        if problems:
            raise ValueError("\n".join(problems))
        return self

    # ─── Klassen ───

    @property
    def round_classes(self) -> dict[int, list[str]]:
        """Runde → Klassen-IDs, in Rundenreihenfolge."""
        counts = self.global_options.round_class_counts
        return {
            rnd: build_class_ids(rnd, counts.get(rnd, 0))
            for rnd in sorted(self.time_grid.round_periods)
        }

    @property
    def class_ids(self) -> list[str]:
        return [cid for ids in self.round_classes.values() for cid in ids]

    def constraint_for(self, teacher: str) -> TeacherConstraint:
        """Sperren einer Lehrkraft (leere Sperren wenn nicht konfiguriert)."""
        return self.teacher_constraints.get(teacher) or TeacherConstraint()

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Slot."""
        counts = self.global_options.round_class_counts
        rounds = ", ".join(f"R{r}: {n}" for r, n in sorted(counts.items()))
        lines = [
            f"Slot: {self.name}",
            f"Tage: {'/'.join(self.time_grid.day_names)}",
            f"Klassen: {len(self.class_ids)} ({rounds})" if counts else "Klassen: 0",
            f"H/K-Pool: {len(self.teachers.homeroom_korean_pool)} Lehrkräfte",
            f"F-Pool: {len(self.teachers.foreign_pool)} Lehrkräfte",
            f"Feste Klassenlehrer: {len(self.fixed_homerooms)}",
            f"Lehrkräfte mit Sperren: {len(self.teacher_constraints)}",
        ]
        return "\n".join(lines)

    # ─── Machbarkeits-Check ───

    def check_feasibility(self) -> FeasibilityReport:
        """Prüft ob die Pools den Bedarf grundsätzlich decken können.

        Prüfungen:
        1. Klassenlehrer-Kapazität ≥ Anzahl Klassen
        2. F-Bedarf je (Tag, Stunde) ≤ verfügbare Fremdsprachen-Lehrkräfte
        3. Gleichzeitige Klassen einer Runde ≤ verfügbare H/K-Lehrkräfte
        4. Sperren für Lehrkräfte ohne Pool
        """
        from models.assignment import Role
        from solver.stagger import role_capacity, roles_for

        errors: list[str] = []
        warnings: list[str] = []
        pools = self.teachers
        grid = self.time_grid
        round_classes = self.round_classes
        total = len(self.class_ids)

        if total == 0:
            warnings.append("Keine Klassen konfiguriert – es wird ein leerer Plan erzeugt.")
            return FeasibilityReport(is_feasible=True, errors=errors, warnings=warnings)

        # ── 1. Klassenlehrer-Kapazität ────────────────────────────────────
        fixed_classes = set(self.fixed_homerooms.values())
        open_classes = total - len(fixed_classes)
        homeroom_capacity = 0.0
        for teacher in pools.homeroom_korean_pool:
            homeroom_capacity += self.constraint_for(teacher).homeroom_cap
        if open_classes > homeroom_capacity:
            errors.append(
                f"Klassenlehrer: {open_classes} Klassen ohne festen Klassenlehrer, "
                f"aber nur Kapazität für {homeroom_capacity:.0f}. "
                f"Fehlende Klassen erhalten einen Platzhalter."
            )

        # ── 2. Fremdsprachen-Bedarf ───────────────────────────────────────
        f_demand: Counter = Counter()
        for rnd, class_ids in round_classes.items():
            if not class_ids or rnd == 4:
                continue
            capacity = role_capacity(rnd, pools)
            periods = grid.round_periods[rnd]
            for day_idx, day in enumerate(grid.day_names):
                for cls_idx in range(len(class_ids)):
                    roles = roles_for(rnd, day_idx, cls_idx, capacity)
                    for role, period in zip(roles, periods):
                        if role is Role.FOREIGN:
                            f_demand[(day, period)] += 1
        # Leerer F-Pool wird unten einmal gemeldet statt je Stunde
        if not pools.foreign_pool:
            f_demand.clear()
        # Counter behält die Einfügereihenfolge (Runde, Tag, Stunde)
        for (day, period), need in f_demand.items():
            free = sum(
                1 for t in pools.foreign_pool
                if not self.constraint_for(t).is_unavailable(day, period)
            )
            if need > free:
                errors.append(
                    f"{day} {period}. Std.: {need} F-Stunden gleichzeitig, "
                    f"aber nur {free} Fremdsprachen-Lehrkräfte verfügbar."
                )

        # ── 3. Gleichzeitige Klassen je Runde ─────────────────────────────
        for rnd, class_ids in round_classes.items():
            if len(class_ids) > len(pools.homeroom_korean_pool):
                warnings.append(
                    f"Runde {rnd}: {len(class_ids)} Klassen gleichzeitig bei nur "
                    f"{len(pools.homeroom_korean_pool)} H/K-Lehrkräften – "
                    f"K-Stunden werden knapp."
                )

        # ── 4. Sperren ohne Pool ─────────────────────────────────────────
        for teacher in self.teacher_constraints:
            if pools.pool_of(teacher) is None and teacher not in self.fixed_homerooms:
                warnings.append(f"Sperren für '{teacher}' ohne Pool-Zugehörigkeit werden ignoriert.")

        if not pools.foreign_pool and any(
            ids for rnd, ids in round_classes.items() if rnd != 4
        ):
            errors.append("F-Pool ist leer – alle F-Stunden bleiben unbesetzt.")

        return FeasibilityReport(
            is_feasible=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )

    # ─── Laden / Persistenz ────────────────────────────────────────────────

    @classmethod
    def coerce(cls, data: Union["SlotConfig", dict[str, Any]], source: str = "") -> "SlotConfig":
        """Validiert Rohdaten oder eine bestehende SlotConfig (erneut) vollständig.

        Raises:
            SlotConfigError: wenn die Konfiguration ungültig ist.
        """
        if isinstance(data, SlotConfig):
            data = data.model_dump()
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise SlotConfigError.from_validation_error(exc, source) from exc

    def save_json(self, path: Path) -> None:
        """Speichert die Slot-Konfiguration als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "SlotConfig":
        """Lädt eine Slot-Konfiguration aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.coerce(json.load(f), source=str(path))
