from config.schema import GlobalOptions, TimeGridConfig
from models.assignment import Role

H, K, F = Role.HOMEROOM, Role.KOREAN, Role.FOREIGN

# Wöchentliches Rollenmuster je Runde, 6 Plätze pro Klasse:
# [Mo A, Mo B, Mi A, Mi B, Fr A, Fr B]
# Runden 1–3: H2 + K2 + F2, Runde 4: H4 + K2 (kein F)
WEEKLY_ROLE_PATTERN: dict[int, tuple[Role, ...]] = {
    1: (H, K, F, H, F, K),
    2: (H, K, F, H, F, K),
    3: (H, K, F, H, F, K),
    4: (H, K, H, K, H, H),
}

ROUND_PERIODS: dict[int, tuple[int, int]] = {
    1: (1, 2),
    2: (3, 4),
    3: (5, 6),
    4: (7, 8),
}

PERIOD_TIMES: dict[float, str] = {
    1: "14:20–15:05",
    1.5: "15:05–15:10",
    2: "15:10–15:55",
    2.5: "15:55–16:15",
    3: "16:15–17:00",
    3.5: "17:00–17:05",
    4: "17:05–17:50",
    4.5: "17:50–18:05",
    5: "18:05–18:55",
    5.5: "18:55–19:00",
    6: "19:00–19:50",
    6.5: "19:50–20:15",
    7: "20:15–21:05",
    7.5: "21:05–21:10",
    8: "21:10–22:00",
}

# Runde 1 hat keine Prüfung
EXAM_TIMES: dict[int, str] = {
    2: "16:00–16:15",
    3: "17:50–18:05",
    4: "20:00–20:15",
}


def default_time_grid() -> TimeGridConfig:
    """Standard-Wochenraster Mo/Mi/Fr.

    Stundenraster:
    Runde 1  1./2. Stunde  14:20 - 15:55
    Runde 2  3./4. Stunde  16:15 - 17:50
    Runde 3  5./6. Stunde  18:05 - 19:50
    Runde 4  7./8. Stunde  20:15 - 22:00

    Zwischen-Stunden (1.5, 2.5, ...) sind nur für Prüfungen gedacht.
    """
    return TimeGridConfig(
        day_names=["Mo", "Mi", "Fr"],
        round_periods=dict(ROUND_PERIODS),
        period_times=dict(PERIOD_TIMES),
        exam_times=dict(EXAM_TIMES),
    )


def default_global_options() -> GlobalOptions:
    """Standard: je 2 Klassen in allen vier Runden."""
    return GlobalOptions(round_class_counts={1: 2, 2: 2, 3: 2, 4: 2})
