"""Rollen-Staffelung: welche zwei Rollen belegen die Stunden einer Runde.

Jede Klasse durchläuft pro Runde ein festes 6er-Muster
[Mo A, Mo B, Mi A, Mi B, Fr A, Fr B]. Der Einstiegspunkt ins Muster wird
über Tag und Klassenindex verschoben, begrenzt durch die Kapazität des
knappen Pools. So landen nicht alle Klassen am selben Tag auf derselben
Rolle.
"""

from config.defaults import WEEKLY_ROLE_PATTERN
from models.assignment import Role
from models.teacher import TeacherPools


def role_capacity(round_number: int, pools: TeacherPools) -> int:
    """Größe des begrenzenden Pools: Runde 4 → H/K-Pool, sonst F-Pool (mind. 1)."""
    if round_number == 4:
        return max(1, len(pools.homeroom_korean_pool))
    return max(1, len(pools.foreign_pool))


def roles_for(
    round_number: int, day_index: int, class_index: int, capacity: int
) -> tuple[Role, Role]:
    """Rollen für die beiden Stunden einer Runde.

    phase = (d + i) mod capacity
    base  = (2d + phase) mod 6
    → Muster[base], Muster[(base + 1) mod 6]
    """
    pattern = WEEKLY_ROLE_PATTERN[round_number]
    size = len(pattern)
    phase = (day_index + class_index) % max(1, capacity)
    base = (day_index * 2 + phase) % size
    return pattern[base], pattern[(base + 1) % size]
