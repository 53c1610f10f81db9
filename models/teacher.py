"""Datenmodelle für Lehrkräfte-Pools und Sperrzeiten (Pydantic v2)."""

from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

# (Tag, Stunde), z.B. ("Mo", 3.0)
SlotKey = tuple[str, float]


def parse_slot_key(raw: Any) -> SlotKey:
    """Wandelt "Mo|3" bzw. ["Mo", 3] in ("Mo", 3.0) um."""
    if isinstance(raw, str):
        parts = raw.split("|")
        if len(parts) != 2 or not parts[0].strip():
            raise ValueError(f"Ungültiger Sperrzeit-Schlüssel '{raw}' (erwartet 'Tag|Stunde')")
        day, period = parts[0].strip(), parts[1].strip()
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        day, period = raw
    else:
        raise ValueError(f"Ungültiger Sperrzeit-Schlüssel {raw!r}")
    try:
        value = float(period)
    except (TypeError, ValueError):
        raise ValueError(f"Ungültige Stunde in Sperrzeit-Schlüssel {raw!r}") from None
    if value <= 0:
        raise ValueError(f"Ungültige Stunde in Sperrzeit-Schlüssel {raw!r}")
    return str(day), value


def format_slot_key(key: SlotKey) -> str:
    day, period = key
    return f"{day}|{period:g}"


class TeacherConstraint(BaseModel):
    """Sperrzeiten und Klassenlehrer-Regeln einer Lehrkraft."""

    model_config = ConfigDict(frozen=True)

    unavailable: frozenset[SlotKey] = frozenset()  # {("Mo", 1.0), ("Fr", 4.0)}
    homeroom_disabled: bool = False                 # darf keine Klasse führen
    max_homerooms: Optional[int] = Field(None, ge=0)

    @field_validator("unavailable", mode="before")
    @classmethod
    def _parse_keys(cls, v: Any) -> frozenset[SlotKey]:
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(parse_slot_key(item) for item in v)

    @field_serializer("unavailable")
    def _dump_keys(self, v: frozenset[SlotKey]) -> list[str]:
        return [format_slot_key(k) for k in sorted(v)]

    def is_unavailable(self, day: str, period: float) -> bool:
        return (day, float(period)) in self.unavailable

    @property
    def homeroom_cap(self) -> float:
        """Maximale Anzahl Klassen (unbegrenzt wenn nicht gesetzt)."""
        if self.homeroom_disabled:
            return 0
        return float("inf") if self.max_homerooms is None else self.max_homerooms


class TeacherPools(BaseModel):
    """Die zwei disjunkten Lehrkräfte-Pools eines Slots."""

    homeroom_korean_pool: list[str] = []  # Klassenlehrer + Koreanisch
    foreign_pool: list[str] = []          # Fremdsprachen-Lehrkräfte

    @field_validator("homeroom_korean_pool", "foreign_pool")
    @classmethod
    def _strip_names(cls, v: list[str]) -> list[str]:
        names = [name.strip() for name in v]
        if any(not name for name in names):
            raise ValueError("Leerer Lehrkraft-Name im Pool")
        return names

    @model_validator(mode='after')
    def _check_disjoint(self):
        problems = []
        for label, pool in (("homeroom_korean_pool", self.homeroom_korean_pool),
                            ("foreign_pool", self.foreign_pool)):
            seen: set[str] = set()
            for name in pool:
                if name in seen:
                    problems.append(f"{label}: '{name}' mehrfach eingetragen")
                seen.add(name)
        overlap = sorted(set(self.homeroom_korean_pool) & set(self.foreign_pool))
        for name in overlap:
            problems.append(f"'{name}' ist in beiden Pools eingetragen")
        if problems:
            raise ValueError("\n".join(problems))
        return self

    @property
    def all_teachers(self) -> list[str]:
        return self.homeroom_korean_pool + self.foreign_pool

    def pool_of(self, teacher: str) -> Optional[str]:
        """"H/K" bzw. "F" für Pool-Mitglieder, sonst None."""
        if teacher in self.homeroom_korean_pool:
            return "H/K"
        if teacher in self.foreign_pool:
            return "F"
        return None
