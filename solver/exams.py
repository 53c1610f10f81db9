"""Prüfungsaufsichten für die Runden 2–4."""

import math

from config.schema import GlobalOptions, TimeGridConfig
from models.assignment import Assignment, Role
from solver.homerooms import HomeroomAssignment


def exam_label(marker: float) -> str:
    """Beschriftung einer Prüfung zwischen zwei Stunden, z.B. 2.5 → zwischen 2. und 3."""
    low, high = math.floor(marker), math.ceil(marker)
    if low == high:
        return f"Prüfung ({low}. Std.)"
    return f"Prüfung (zwischen {low}. und {high}. Std.)"


def place_exams(
    round_number: int,
    day: str,
    class_ids: list[str],
    homerooms: HomeroomAssignment,
    options: GlobalOptions,
    time_grid: TimeGridConfig,
) -> list[Assignment]:
    """Erzeugt die Prüfungs-Einträge einer Runde an einem Tag.

    Runde 1 hat keine Prüfung. Sind für den Tag eigene Prüfungsstunden
    konfiguriert, entsteht je Klasse und Marker ein Eintrag auf der
    Zwischen-Stunde; sonst genau einer auf der ersten Stunde der Runde mit
    der festen Prüfungszeit der Runde.

    Aufsicht ist immer der Klassenlehrer. Sperrzeiten und Belegung werden
    dabei NICHT geprüft.
    """
    if round_number == 1:
        return []

    markers = options.exam_periods.get(day, [])
    anchor = time_grid.round_periods[round_number][0]
    exams: list[Assignment] = []

    for class_id in class_ids:
        proctor = homerooms.owner(class_id)
        if markers:
            for marker in markers:
                exams.append(Assignment(
                    class_id=class_id, round=round_number, day=day,
                    period=marker, time=exam_label(marker),
                    role=Role.EXAM, teacher=proctor,
                ))
        else:
            exams.append(Assignment(
                class_id=class_id, round=round_number, day=day,
                period=anchor, time=time_grid.exam_times.get(round_number, ""),
                role=Role.EXAM, teacher=proctor,
            ))
    return exams
