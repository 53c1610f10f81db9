"""Konfigurationsmanager: Slot-Konfigurationen laden, speichern und auflisten.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from models.slot_config import SlotConfig, SlotConfigError

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

def _yaml_header() -> str:
    return f"""\
# ============================================
# Wochenplan-Generator — Slot-Konfiguration
# Tage: Mo / Mi / Fr, 4 Runden à 2 Stunden
# Erstellt: {date.today().isoformat()}
# ============================================
"""


_SECTION_COMMENTS = {
    "teachers": (
        "Lehrkräfte-Pools",
        "homeroom_korean_pool: Klassenlehrer + Koreanisch, foreign_pool: Fremdsprachen.\n"
        "Eine Lehrkraft darf nur in einem Pool stehen.",
    ),
    "teacher_constraints": (
        "Sperren",
        "unavailable: Liste 'Tag|Stunde', z.B. 'Mo|3'.\n"
        "homeroom_disabled / max_homerooms begrenzen Klassenleitungen.",
    ),
    "fixed_homerooms": (
        "Feste Klassenlehrer",
        "Lehrkraft: Klassen-ID (R<runde>C<nr>), wird ohne Prüfung übernommen.",
    ),
    "global_options": (
        "Optionen",
        "round_class_counts: Klassen je Runde. exam_periods: Prüfungen zwischen den Stunden.",
    ),
    "time_grid": (
        "Zeitraster",
        None,
    ),
}


class ConfigManager:
    SLOTS_DIR = Path("slots")
    DEFAULT_SLOT = SLOTS_DIR / "slot.yaml"

    def __init__(self, slots_dir: Optional[Path] = None) -> None:
        if slots_dir is not None:
            self.SLOTS_DIR = Path(slots_dir)
            self.DEFAULT_SLOT = self.SLOTS_DIR / "slot.yaml"

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> SlotConfig:
        """Lade Slot aus YAML (oder JSON). Validiert automatisch via Pydantic.

        Raises:
            FileNotFoundError: Datei existiert nicht.
            SlotConfigError: Inhalt ist keine gültige Slot-Konfiguration.
        """
        target = Path(path) if path else self.DEFAULT_SLOT
        if not target.exists():
            raise FileNotFoundError(
                f"Slot-Datei nicht gefunden: {target}\n"
                f"Mit 'python main.py sample' lässt sich ein Beispiel erzeugen."
            )
        if target.suffix == ".json":
            return SlotConfig.load_json(target)

        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        if not isinstance(raw, dict):
            raise SlotConfigError(["Datei enthält keine YAML-Zuordnung"], source=str(target))
        return SlotConfig.coerce(dict(raw), source=str(target))

    # ─── Speichern ───

    def save(self, config: SlotConfig, path: Optional[Path] = None) -> Path:
        """Speichere Slot als YAML mit deutschen Kommentaren."""
        target = Path(path) if path else self.DEFAULT_SLOT
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_yaml_header() + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Slot gespeichert: {target}")
        return target

    def _build_commented_yaml(self, config: SlotConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            if field not in cm:
                continue
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "global_options" in cm:
            options = CommentedMap(cm["global_options"])
            if "include_homerooms_in_korean" in options:
                options.yaml_add_eol_comment(
                    "Klassenlehrer anderer Klassen als K-Lehrkraft", "include_homerooms_in_korean"
                )
            cm["global_options"] = options

        return cm

    # ─── Slots ───

    def list_slots(self) -> list[dict]:
        """Listet alle gespeicherten Slots im Slot-Verzeichnis auf."""
        if not self.SLOTS_DIR.exists():
            return []
        slots = []
        for p in sorted(self.SLOTS_DIR.glob("*.yaml")):
            entry = {"name": p.stem, "path": str(p), "description": "", "classes": 0, "error": ""}
            try:
                slot = self.load(p)
            except SlotConfigError as e:
                entry["error"] = f"{len(e.errors)} Fehler"
            else:
                entry["description"] = slot.description
                entry["classes"] = len(slot.class_ids)
            slots.append(entry)
        return slots

    def load_slot(self, name: str) -> SlotConfig:
        """Lädt einen gespeicherten Slot über seinen Namen."""
        path = self.SLOTS_DIR / f"{name}.yaml"
        if not path.exists():
            raise FileNotFoundError(
                f"Slot '{name}' nicht gefunden. "
                f"Verfügbar: {[s['name'] for s in self.list_slots()]}"
            )
        return self.load(path)
