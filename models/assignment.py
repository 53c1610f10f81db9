"""Datenmodell für eine einzelne Zuweisung im Wochenplan (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

# Anzeige-Platzhalter für nicht besetzte Stunden
UNASSIGNED_LABEL = "(nicht besetzt)"


class Role(str, Enum):
    HOMEROOM = "H"   # Klassenlehrer der Klasse
    KOREAN = "K"     # Koreanisch-Lehrkraft
    FOREIGN = "F"    # Fremdsprachen-Lehrkraft
    EXAM = "EXAM"    # Prüfungsaufsicht


class Assignment(BaseModel):
    """Eine Zuweisung (Tag, Stunde, Klasse) → (Rolle, Lehrkraft).

    teacher=None ist der Platzhalter für "nicht besetzt".
    """

    model_config = ConfigDict(frozen=True)

    class_id: str             # "R2C1"
    round: int                # 1..4
    day: str                  # "Mo", "Mi", "Fr"
    period: float             # 3 oder 2.5 (= zwischen 2. und 3. Stunde)
    time: str = ""            # Uhrzeit-Beschriftung
    role: Role
    teacher: Optional[str] = None

    @property
    def is_exam(self) -> bool:
        return self.role is Role.EXAM

    @property
    def is_unassigned(self) -> bool:
        return self.teacher is None

    @property
    def teacher_label(self) -> str:
        """Lehrkraft oder Platzhalter für Anzeige und Gruppierung."""
        return self.teacher if self.teacher is not None else UNASSIGNED_LABEL

    def __str__(self) -> str:
        return (
            f"{self.day} {self.period:g}. {self.class_id} "
            f"{self.role.value}: {self.teacher_label}"
        )
