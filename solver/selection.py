"""Kandidatenauswahl für H-, K- und F-Stunden.

Alle drei Varianten filtern nach Sperrzeiten und Belegung und wählen unter
den verbleibenden Lehrkräften die mit der geringsten bisherigen Last
(Gleichstand: alphabetisch). None bedeutet "niemand verfügbar".
"""

from collections import Counter
from typing import Iterable, Optional

from models.assignment import Role
from models.teacher import TeacherPools
from solver.availability import AvailabilityFilter
from solver.conflicts import ConflictTracker
from solver.homerooms import HomeroomAssignment


class CandidateSelector:
    """Wählt die Lehrkraft für eine (Rolle, Tag, Stunde, Klasse)."""

    def __init__(
        self,
        pools: TeacherPools,
        homerooms: HomeroomAssignment,
        tracker: ConflictTracker,
        availability: AvailabilityFilter,
        loads: Counter,
        include_homerooms_in_korean: bool = True,
    ) -> None:
        self.pools = pools
        self.homerooms = homerooms
        self.tracker = tracker
        self.availability = availability
        self.loads = loads
        self.include_homerooms_in_korean = include_homerooms_in_korean

    def select(
        self, role: Role, round_number: int, day: str, period: float, class_id: str
    ) -> Optional[str]:
        if role is Role.HOMEROOM:
            return self.select_homeroom(day, period, class_id)
        if role is Role.KOREAN:
            return self.select_korean(day, period, class_id)
        if role is Role.FOREIGN:
            return self.select_foreign(round_number, day, period)
        raise ValueError(f"Rolle {role.value} wird nicht über die Kandidatenauswahl besetzt")

    def select_homeroom(self, day: str, period: float, class_id: str) -> Optional[str]:
        """Ausschließlich der eigene Klassenlehrer – kein Ersatz."""
        owner = self.homerooms.owner(class_id)
        if not self._is_free(owner, day, period):
            return None
        return owner

    def select_korean(self, day: str, period: float, class_id: str) -> Optional[str]:
        """H/K-Pool (+ Klassenlehrer anderer Klassen), nie der eigene Klassenlehrer."""
        own = self.homerooms.owner(class_id)
        candidates = list(self.pools.homeroom_korean_pool)
        if self.include_homerooms_in_korean:
            candidates.extend(self.homerooms.real_owners())
        unique = dict.fromkeys(t for t in candidates if t != own)
        return self._pick_least_loaded(unique, day, period)

    def select_foreign(self, round_number: int, day: str, period: float) -> Optional[str]:
        if round_number == 4:
            raise ValueError("Runde 4 hat keine F-Stunden")
        return self._pick_least_loaded(self.pools.foreign_pool, day, period)

    # ─── Hilfsfunktionen ──────────────────────────────────────────────────────

    def _is_free(self, teacher: str, day: str, period: float) -> bool:
        if self.availability.is_unavailable(teacher, day, period):
            return False
        return self.tracker.can(day, period, teacher)

    def _pick_least_loaded(
        self, candidates: Iterable[str], day: str, period: float
    ) -> Optional[str]:
        free = [t for t in candidates if self._is_free(t, day, period)]
        if not free:
            return None
        return min(free, key=lambda t: (self.loads[t], t))
