"""Klassenlehrer-Zuweisung: feste Zuordnungen zuerst, Rest gleichmäßig verteilen."""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping

from models.teacher import TeacherConstraint


def fallback_homeroom_label(class_id: str) -> str:
    """Platzhalter für Klassen ohne zuweisbaren Klassenlehrer."""
    return f"H-{class_id}"


@dataclass
class HomeroomAssignment:
    """Klasse → Klassenlehrer (vollständig, ggf. mit Platzhaltern)."""

    owners: dict[str, str]
    fallback_classes: list[str] = field(default_factory=list)

    def owner(self, class_id: str) -> str:
        return self.owners[class_id]

    def has_real_owner(self, class_id: str) -> bool:
        return class_id not in self.fallback_classes

    def real_owners(self) -> list[str]:
        """Alle echten Klassenlehrer, eindeutig, in Klassenreihenfolge."""
        seen: dict[str, None] = {}
        for class_id, teacher in self.owners.items():
            if self.has_real_owner(class_id):
                seen.setdefault(teacher, None)
        return list(seen)

    def count_for(self, teacher: str) -> int:
        return sum(
            1 for cid, t in self.owners.items()
            if t == teacher and self.has_real_owner(cid)
        )


def assign_homerooms(
    class_ids: Iterable[str],
    homeroom_pool: list[str],
    fixed_homerooms: Mapping[str, str],
    constraint_for: Callable[[str], TeacherConstraint],
) -> HomeroomAssignment:
    """Bestimmt für jede Klasse den Klassenlehrer.

    1. Feste Zuordnungen (Lehrkraft → Klasse) werden unverändert übernommen.
    2. Jede übrige Klasse erhält die Lehrkraft mit den bisher wenigsten Klassen,
       die nicht gesperrt ist und ihr max_homerooms noch nicht erreicht hat
       (Gleichstand: alphabetisch).
    3. Findet sich niemand, bekommt die Klasse den Platzhalter "H-<Klasse>".

    Reine Funktion ohne Seiteneffekte.
    """
    class_ids = list(class_ids)
    owners: dict[str, str] = {}

    for teacher, class_id in fixed_homerooms.items():
        owners[class_id] = teacher

    allowed = [t for t in homeroom_pool if not constraint_for(t).homeroom_disabled]
    cap = {t: constraint_for(t).homeroom_cap for t in allowed}
    current = {
        t: sum(1 for owner in owners.values() if owner == t)
        for t in allowed
    }

    for class_id in class_ids:
        if class_id in owners:
            continue
        candidates = [t for t in allowed if current[t] < cap[t]]
        if not candidates:
            continue
        picked = min(candidates, key=lambda t: (current[t], t))
        owners[class_id] = picked
        current[picked] += 1

    fallback_classes = []
    result: dict[str, str] = {}
    for class_id in class_ids:
        if class_id not in owners:
            owners[class_id] = fallback_homeroom_label(class_id)
            fallback_classes.append(class_id)
        result[class_id] = owners[class_id]

    return HomeroomAssignment(owners=result, fallback_classes=fallback_classes)
