"""Testdaten-Generator für den Wochenplan-Generator.

Erzeugt realistische Slot-Konfigurationen mit absichtlichen Engpässen für
robuste Tests.

Absichtliche Engpässe:
  1. F-Engpass: nur 3 Fremdsprachen-Lehrkräfte bei 3 Klassen in Runde 1/2
  2. Klassenleitungs-Sperre: eine H/K-Lehrkraft darf keine Klasse führen
  3. Obergrenze: eine H/K-Lehrkraft führt höchstens eine Klasse
  4. Abend-Sperre: eine F-Lehrkraft ist freitags ab der 5. Stunde gesperrt
  5. Zufällige Einzelsperren: je Lauf einige (Tag, Stunde) bei H/K-Lehrkräften

Lösbarkeits-Garantien:
  - H/K-Pool ist mindestens so groß wie die größte Runde + 2
  - Die erste H/K-Lehrkraft leitet R1C1 fest
"""

import random
from typing import Optional

from config.defaults import ROUND_PERIODS, default_global_options, default_time_grid
from models.slot_config import SlotConfig
from models.teacher import TeacherConstraint, TeacherPools

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_KOREAN_FAMILY_NAMES = [
    "Kim", "Lee", "Park", "Choi", "Jung", "Kang", "Cho", "Yoon", "Jang",
    "Lim", "Han", "Oh", "Seo", "Shin", "Kwon", "Hwang", "Ahn", "Song",
]

_KOREAN_GIVEN_NAMES = [
    "Minji", "Jiwoo", "Seoyeon", "Hyunwoo", "Jihoon", "Sora", "Yuna",
    "Dohyun", "Eunji", "Taeyang", "Hana", "Jisoo", "Minho", "Sujin",
]

_FOREIGN_NAMES = [
    "Anna Becker", "Tom Walsh", "Emma Clarke", "Lucas Martin", "Sofia Rossi",
    "James Miller", "Chloe Dubois", "Noah Fischer", "Mia Jensen", "Liam O'Brien",
]

_CLASS_NAMES = [
    "Sonne", "Mond", "Stern", "Wolke", "Regen", "Wind", "Blitz", "Schnee",
    "Welle", "Berg", "Wald", "Fluss",
]

DEFAULT_ROUND_CLASS_COUNTS = {1: 3, 2: 3, 3: 2, 4: 2}


class FakeSlotGenerator:
    """Generiert vollständige Slot-Konfigurationen (deterministisch je Seed)."""

    def __init__(
        self,
        seed: Optional[int] = None,
        round_class_counts: Optional[dict[int, int]] = None,
        foreign_pool_size: int = 3,
    ) -> None:
        self.rng = random.Random(seed)
        self.round_class_counts = dict(round_class_counts or DEFAULT_ROUND_CLASS_COUNTS)
        self.foreign_pool_size = foreign_pool_size

    # ─── Lehrkräfte ───────────────────────────────────────────────────────────

    def _korean_names(self, count: int) -> list[str]:
        names: list[str] = []
        while len(names) < count:
            name = f"{self.rng.choice(_KOREAN_FAMILY_NAMES)} {self.rng.choice(_KOREAN_GIVEN_NAMES)}"
            if name not in names:
                names.append(name)
        return names

    def _generate_pools(self) -> TeacherPools:
        largest_round = max(self.round_class_counts.values(), default=0)
        hk_size = largest_round + 2 + self.rng.randint(0, 2)
        foreign = self.rng.sample(_FOREIGN_NAMES, min(self.foreign_pool_size, len(_FOREIGN_NAMES)))
        return TeacherPools(
            homeroom_korean_pool=self._korean_names(hk_size),
            foreign_pool=sorted(foreign),
        )

    def _generate_constraints(self, pools: TeacherPools) -> dict[str, TeacherConstraint]:
        constraints: dict[str, TeacherConstraint] = {}
        hk = pools.homeroom_korean_pool
        days = default_time_grid().day_names

        if len(hk) >= 3:
            constraints[hk[-1]] = TeacherConstraint(homeroom_disabled=True)
            constraints[hk[-2]] = TeacherConstraint(max_homerooms=1)

        if pools.foreign_pool:
            constraints[pools.foreign_pool[-1]] = TeacherConstraint(
                unavailable={("Fr", p) for p in range(5, 9)}
            )

        # Einzelsperren bei den "normalen" H/K-Lehrkräften
        for teacher in hk[1:-2]:
            if self.rng.random() < 0.4:
                day = self.rng.choice(days)
                rnd = self.rng.choice(sorted(ROUND_PERIODS))
                constraints[teacher] = TeacherConstraint(
                    unavailable={(day, ROUND_PERIODS[rnd][self.rng.randint(0, 1)])}
                )
        return constraints

    # ─── Slot ─────────────────────────────────────────────────────────────────

    def generate(self, name: str = "Beispiel-Slot") -> SlotConfig:
        """Erzeugt eine validierte SlotConfig."""
        pools = self._generate_pools()
        options = default_global_options()
        options.round_class_counts = dict(self.round_class_counts)
        options.exam_periods = {"Mi": [2.5]}

        slot = SlotConfig(
            name=name,
            description="Automatisch erzeugte Testdaten",
            teachers=pools,
            teacher_constraints=self._generate_constraints(pools),
            global_options=options,
        )
        class_ids = slot.class_ids
        if class_ids and pools.homeroom_korean_pool:
            slot.fixed_homerooms = {pools.homeroom_korean_pool[0]: class_ids[0]}
        labels = self.rng.sample(_CLASS_NAMES, min(len(class_ids), len(_CLASS_NAMES)))
        slot.global_options.class_names = dict(zip(class_ids, labels))
        return SlotConfig.coerce(slot)

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, slot: SlotConfig) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Testdaten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        counts = slot.global_options.round_class_counts
        table.add_row("Klassen", str(len(slot.class_ids)),
                      ", ".join(f"R{r}: {n}" for r, n in sorted(counts.items())))
        table.add_row("H/K-Lehrkräfte", str(len(slot.teachers.homeroom_korean_pool)), "")
        table.add_row("F-Lehrkräfte", str(len(slot.teachers.foreign_pool)), "")
        table.add_row("Sperren", str(len(slot.teacher_constraints)), "")
        table.add_row("Feste Klassenlehrer", str(len(slot.fixed_homerooms)), "")
        console.print(table)
