from pydantic import BaseModel, Field, field_validator, model_validator

# Runden 1–4 haben je ein festes Rollenmuster (siehe config.defaults)
VALID_ROUNDS = (1, 2, 3, 4)


# ─── ZEITRASTER ───

class TimeGridConfig(BaseModel):
    """Wochenraster eines Slots.

    Das Zeitraster definiert:
    - An welchen Wochentagen unterrichtet wird (Standard: Mo/Mi/Fr)
    - Welche zwei Stunden zu einer Runde gehören
    - Die Uhrzeit-Beschriftung jeder Stunde (auch der Zwischen-Stunden x.5)
    - Die Standard-Uhrzeit der Prüfung je Runde
    """
    # Namen der Unterrichtstage in Wochenreihenfolge
    day_names: list[str] = Field(
        default=["Mo", "Mi", "Fr"],
        min_length=1,
        description="Unterrichtstage des Slots")
    # Runde → (erste Stunde, zweite Stunde)
    round_periods: dict[int, tuple[int, int]] = Field(
        description="Stundenpaar je Runde")
    # Stunde → Uhrzeit-Beschriftung, z.B. 2.5 → "15:55–16:15"
    period_times: dict[float, str] = Field(
        default_factory=dict,
        description="Uhrzeiten je Stunde (inkl. Zwischen-Stunden)")
    # Runde → Uhrzeit der Standard-Prüfung
    exam_times: dict[int, str] = Field(
        default_factory=dict,
        description="Standard-Prüfungszeit je Runde")

    @field_validator("day_names")
    @classmethod
    def _unique_days(cls, v: list[str]) -> list[str]:
        if len(set(v)) != len(v):
            raise ValueError(f"Wochentage doppelt angegeben: {v}")
        return v

    @model_validator(mode='after')
    def validate_rounds(self):
        """Prüfe dass jede Runde aus zwei aufeinanderfolgenden Stunden besteht."""
        for rnd, (first, second) in self.round_periods.items():
            if rnd not in VALID_ROUNDS:
                raise ValueError(
                    f"Runde {rnd} unbekannt (erlaubt: {list(VALID_ROUNDS)})")
            if second != first + 1:
                raise ValueError(
                    f"Runde {rnd}: Stunden {first}-{second} sind nicht aufeinanderfolgend")
        return self

    @property
    def max_period(self) -> int:
        """Letzte Stunde des Tages."""
        return max((p[1] for p in self.round_periods.values()), default=0)

    def period_label(self, period: float) -> str:
        """Uhrzeit-Beschriftung einer Stunde (Fallback: "3. Std.")."""
        return self.period_times.get(float(period), f"{period:g}. Std.")


# ─── GLOBALE OPTIONEN ───

class GlobalOptions(BaseModel):
    """Globale Optionen eines Slots (Klassenzahlen, Prüfungen, Rollenregeln)."""
    # Runde → Anzahl Klassen (Klassen-IDs werden als R<runde>C<nr> erzeugt)
    round_class_counts: dict[int, int] = Field(
        default_factory=dict,
        description="Anzahl Klassen je Runde")
    # Tag → Zwischen-Stunden für Prüfungen, z.B. {"Mi": [2.5]}
    exam_periods: dict[str, list[float]] = Field(
        default_factory=dict,
        description="Prüfungen zwischen den Stunden je Tag")
    # Klassenlehrer anderer Klassen dürfen K-Stunden übernehmen
    include_homerooms_in_korean: bool = Field(
        True,
        description="Klassenlehrer im K-Pool berücksichtigen")
    # Optionale Anzeigenamen, z.B. {"R1C1": "Sonne"}
    class_names: dict[str, str] = Field(default_factory=dict)

    @field_validator("round_class_counts")
    @classmethod
    def _check_round_counts(cls, v: dict[int, int]) -> dict[int, int]:
        for rnd, count in v.items():
            if rnd not in VALID_ROUNDS:
                raise ValueError(
                    f"Runde {rnd} unbekannt (erlaubt: {list(VALID_ROUNDS)})")
            if count < 0:
                raise ValueError(f"Runde {rnd}: negative Klassenzahl {count}")
        return v

    @field_validator("exam_periods")
    @classmethod
    def _check_exam_markers(cls, v: dict[str, list[float]]) -> dict[str, list[float]]:
        for day, markers in v.items():
            for marker in markers:
                if marker <= 0:
                    raise ValueError(f"{day}: ungültige Prüfungsstunde {marker}")
        return v

    @property
    def total_classes(self) -> int:
        """Gesamtzahl aller Klassen über alle Runden."""
        return sum(self.round_class_counts.values())
