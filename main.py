"""Wochenplan-Generator — Haupt-CLI.

Verwendung:
  python main.py sample                       Beispiel-Slot erzeugen (slots/beispiel.yaml)
  python main.py validate <slot.yaml>         Machbarkeits-Check
  python main.py validate <slot.yaml> --result <plan.json>
                                              Gespeicherten Plan prüfen
  python main.py generate <slot.yaml>         Wochenplan berechnen und anzeigen
  python main.py generate <slot.yaml> --export-json
                                              Plan zusätzlich als JSON speichern
  python main.py fairness <slot.yaml>         Auslastungsbericht
  python main.py slots list                   Gespeicherte Slots auflisten
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfad für gespeicherte Ergebnisse
DEFAULT_RESULT_JSON = Path("output/schedule.json")


def _load_slot_or_abort(path: Path):
    """Lädt eine Slot-Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    from models.slot_config import SlotConfigError

    try:
        return ConfigManager().load(path)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except SlotConfigError as e:
        console.print(f"[red]Slot-Konfiguration ungültig:[/red] {e.source or path}")
        for err in e.errors:
            console.print(f"  [red]• {err}[/red]")
        sys.exit(1)


def _print_result(result, slot) -> None:
    """Tagesraster, Klassenlehrer und Warnungen eines Laufs."""
    m = result.metrics
    console.print(Panel(
        f"Einträge: [bold]{m.total_assignments}[/bold] | "
        f"besetzt: [green]{m.assigned_count}[/green] | "
        f"nicht besetzt: [red]{m.unassigned_count}[/red]\n"
        f"Lehrkräfte: {m.teachers_count} | Klassen: {m.classes_count} | "
        f"Zeit: {m.generation_time_ms:.1f}ms | Cache-Trefferquote: {m.cache_hit_rate}%",
        title=f"Wochenplan – {slot.name}",
        border_style="cyan",
    ))

    hr_table = Table(title="Klassenlehrer", box=box.ROUNDED)
    hr_table.add_column("Klasse", style="bold")
    hr_table.add_column("Name")
    hr_table.add_column("Klassenlehrer")
    for class_id, owner in result.homerooms.items():
        hr_table.add_row(class_id, result.class_label(class_id), owner)
    console.print(hr_table)

    class_ids = list(result.class_summary)
    for day, periods in result.day_grid.items():
        table = Table(title=day, box=box.SIMPLE_HEAVY)
        table.add_column("Std.", justify="right")
        table.add_column("Zeit")
        for class_id in class_ids:
            table.add_column(class_id)
        for period, entries in periods.items():
            cells = {cid: [] for cid in class_ids}
            for a in entries:
                color = "red" if a.is_unassigned else "magenta" if a.is_exam else "white"
                cells[a.class_id].append(f"[{color}]{a.role.value}: {a.teacher_label}[/{color}]")
            time = entries[0].time if entries else ""
            table.add_row(f"{period:g}", time, *("\n".join(cells[cid]) for cid in class_ids))
        console.print(table)

    if result.warnings:
        console.print("\n[yellow bold]Warnungen:[/yellow bold]")
        for w in result.warnings:
            console.print(f"  [yellow]• {w}[/yellow]")


# ─── SAMPLE ───────────────────────────────────────────────────────────────────

@click.command("sample")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--output", "-o", default="slots/beispiel.yaml",
              type=click.Path(path_type=Path), help="Zielpfad der Slot-Datei.")
def cmd_sample(seed: int, output: Path):
    """Erzeugt eine Beispiel-Slot-Konfiguration mit Testdaten."""
    from config.manager import ConfigManager
    from data.fake_data import FakeSlotGenerator

    gen = FakeSlotGenerator(seed=seed)
    slot = gen.generate()
    gen.print_summary(slot)
    ConfigManager().save(slot, output)


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.argument("slot_path", type=click.Path(path_type=Path))
@click.option("--result", "result_path", default=None, type=click.Path(path_type=Path),
              help="Gespeicherten Wochenplan (JSON) gegen den Slot prüfen.")
def cmd_validate(slot_path: Path, result_path):
    """Führt einen Machbarkeits-Check auf einer Slot-Konfiguration durch."""
    slot = _load_slot_or_abort(slot_path)
    console.print(f"\n{slot.summary()}\n")
    report = slot.check_feasibility()
    report.print_rich()
    ok = report.is_feasible

    if result_path is not None:
        from analysis.solution_validator import SolutionValidator
        from solver.scheduler import ScheduleResult

        try:
            result = ScheduleResult.load_json(result_path)
        except FileNotFoundError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)
        validation = SolutionValidator().validate(result, slot)
        validation.print_rich()
        ok = ok and validation.is_valid

    sys.exit(0 if ok else 1)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.argument("slot_path", type=click.Path(path_type=Path))
@click.option("--export-json", is_flag=True, default=False,
              help="Wochenplan als JSON speichern.")
@click.option("--json-path", default=str(DEFAULT_RESULT_JSON),
              help="Pfad für JSON-Export.")
@click.option("--check/--no-check", "run_check", default=True,
              help="Plan nach der Erzeugung validieren.")
def cmd_generate(slot_path: Path, export_json: bool, json_path: str, run_check: bool):
    """Berechnet den Wochenplan eines Slots."""
    from solver.scheduler import generate

    slot = _load_slot_or_abort(slot_path)
    result = generate(slot)
    _print_result(result, slot)

    if run_check:
        from analysis.solution_validator import SolutionValidator
        report = SolutionValidator().validate(result, slot)
        if not report.is_valid:
            report.print_rich()

    if export_json:
        p = Path(json_path)
        result.save_json(p)
        console.print(f"[green]✓[/green] Wochenplan gespeichert: {p}")


# ─── FAIRNESS ─────────────────────────────────────────────────────────────────

@click.command("fairness")
@click.argument("slot_path", type=click.Path(path_type=Path))
def cmd_fairness(slot_path: Path):
    """Zeigt die Auslastung der Lehrkräfte im erzeugten Plan."""
    from analysis.fairness import FairnessAnalyzer
    from solver.scheduler import generate

    slot = _load_slot_or_abort(slot_path)
    result = generate(slot)
    FairnessAnalyzer().analyze(result, slot).print_rich()


# ─── SLOTS ────────────────────────────────────────────────────────────────────

@click.group("slots")
def cmd_slots():
    """Gespeicherte Slot-Konfigurationen verwalten."""


@cmd_slots.command("list")
@click.option("--dir", "slots_dir", default=None, type=click.Path(path_type=Path),
              help="Slot-Verzeichnis (Standard: slots/).")
def slots_list(slots_dir):
    """Listet alle gespeicherten Slots auf."""
    from config.manager import ConfigManager
    slots = ConfigManager(slots_dir).list_slots()

    if not slots:
        console.print("[dim]Keine Slots vorhanden.[/dim]")
        return

    table = Table(title="Gespeicherte Slots", box=box.ROUNDED)
    table.add_column("Name", style="bold")
    table.add_column("Klassen", justify="right")
    table.add_column("Beschreibung")
    for s in slots:
        info = f"[red]{s['error']}[/red]" if s["error"] else s["description"]
        table.add_row(s["name"], str(s["classes"]), info)
    console.print(table)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Log-Ausgabe.")
def cli(verbose: bool):
    """Wochenplan-Generator für Klassenlehrer-, Koreanisch- und Fremdsprachen-Stunden.

    Starten Sie mit: python main.py sample
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Befehle registrieren
cli.add_command(cmd_sample)
cli.add_command(cmd_validate)
cli.add_command(cmd_generate)
cli.add_command(cmd_fairness)
cli.add_command(cmd_slots)


if __name__ == "__main__":
    cli()
