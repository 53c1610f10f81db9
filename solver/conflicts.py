"""Belegungs-Matrix: welche Lehrkraft ist in welcher (Tag, Stunde) schon eingeplant."""


class ConflictTracker:
    """Merkt sich belegte (Tag, Stunde, Lehrkraft)-Tripel eines Planungslaufs.

    Aufrufer prüfen mit can() bevor sie occupy() aufrufen; occupy() selbst
    ist idempotent und meldet keine Doppelbelegung.
    """

    def __init__(self) -> None:
        self._busy: set[tuple[str, float, str]] = set()
        self._by_slot: dict[tuple[str, float], set[str]] = {}

    def can(self, day: str, period: float, teacher: str) -> bool:
        return (day, float(period), teacher) not in self._busy

    def occupy(self, day: str, period: float, teacher: str) -> None:
        key = (day, float(period))
        self._busy.add((key[0], key[1], teacher))
        self._by_slot.setdefault(key, set()).add(teacher)

    def busy_teachers(self, day: str, period: float) -> frozenset[str]:
        """Alle Lehrkräfte, die in (Tag, Stunde) bereits belegt sind."""
        return frozenset(self._by_slot.get((day, float(period)), ()))

    def __len__(self) -> int:
        return len(self._busy)

    def __repr__(self) -> str:
        return f"ConflictTracker({len(self._busy)} belegt)"
