"""Tests für Konfiguration, Datenmodelle, YAML-Manager, Testdaten und CLI."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.defaults import (
    EXAM_TIMES, ROUND_PERIODS, WEEKLY_ROLE_PATTERN,
    default_global_options, default_time_grid,
)
from config.manager import ConfigManager
from config.schema import GlobalOptions, TimeGridConfig
from data.fake_data import FakeSlotGenerator
from models.assignment import UNASSIGNED_LABEL, Assignment, Role
from models.slot_config import SlotConfig, SlotConfigError, build_class_ids
from models.teacher import (
    TeacherConstraint, TeacherPools, format_slot_key, parse_slot_key,
)


# ─── DEFAULTS ─────────────────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_time_grid_valid(self):
        grid = default_time_grid()
        assert grid.day_names == ["Mo", "Mi", "Fr"]
        assert grid.round_periods[4] == (7, 8)
        assert grid.max_period == 8

    def test_patterns_cover_all_rounds(self):
        assert sorted(WEEKLY_ROLE_PATTERN) == sorted(ROUND_PERIODS)
        for pattern in WEEKLY_ROLE_PATTERN.values():
            assert len(pattern) == 6
        assert Role.FOREIGN not in WEEKLY_ROLE_PATTERN[4]

    def test_round1_has_no_exam_time(self):
        assert 1 not in EXAM_TIMES

    def test_default_global_options(self):
        options = default_global_options()
        assert options.total_classes == 8
        assert options.include_homerooms_in_korean is True

    def test_period_label(self):
        grid = default_time_grid()
        assert grid.period_label(3) == "16:15–17:00"
        assert grid.period_label(2.5) == "15:55–16:15"
        assert grid.period_label(9) == "9. Std."


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_round_periods_must_be_consecutive(self):
        with pytest.raises(ValidationError):
            TimeGridConfig(round_periods={1: (1, 3)})

    def test_unknown_round_in_grid(self):
        with pytest.raises(ValidationError):
            TimeGridConfig(round_periods={5: (9, 10)})

    def test_duplicate_days(self):
        with pytest.raises(ValidationError):
            TimeGridConfig(day_names=["Mo", "Mo"], round_periods={1: (1, 2)})

    def test_negative_class_count(self):
        with pytest.raises(ValidationError):
            GlobalOptions(round_class_counts={2: -1})

    def test_exam_marker_positive(self):
        with pytest.raises(ValidationError):
            GlobalOptions(exam_periods={"Mo": [0]})

    def test_pools_disjoint(self):
        with pytest.raises(ValidationError) as exc_info:
            TeacherPools(homeroom_korean_pool=["Kim"], foreign_pool=["Kim"])
        assert "beiden Pools" in str(exc_info.value)

    def test_pool_names_stripped(self):
        pools = TeacherPools(homeroom_korean_pool=[" Kim "])
        assert pools.homeroom_korean_pool == ["Kim"]
        with pytest.raises(ValidationError):
            TeacherPools(foreign_pool=["  "])

    def test_max_homerooms_non_negative(self):
        with pytest.raises(ValidationError):
            TeacherConstraint(max_homerooms=-1)


# ─── MODELLE ──────────────────────────────────────────────────────────────────

class TestModels:
    def test_parse_slot_key(self):
        assert parse_slot_key("Mo|3") == ("Mo", 3.0)
        assert parse_slot_key(["Fr", 2]) == ("Fr", 2.0)
        assert parse_slot_key("Mi|2.5") == ("Mi", 2.5)
        assert format_slot_key(("Mi", 2.5)) == "Mi|2.5"
        assert format_slot_key(("Mo", 3.0)) == "Mo|3"

    @pytest.mark.parametrize("raw", ["Mo", "Mo|x", "Mo|0", "|3", 42])
    def test_parse_slot_key_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_slot_key(raw)

    def test_teacher_constraint(self):
        c = TeacherConstraint(unavailable=["Mo|3", "Fr|1"])
        assert c.is_unavailable("Mo", 3)
        assert not c.is_unavailable("Mo", 4)
        assert c.model_dump()["unavailable"] == ["Fr|1", "Mo|3"]
        assert c.homeroom_cap == float("inf")
        assert TeacherConstraint(homeroom_disabled=True, max_homerooms=3).homeroom_cap == 0

    def test_pool_of(self):
        pools = TeacherPools(homeroom_korean_pool=["Kim"], foreign_pool=["Walsh"])
        assert pools.pool_of("Kim") == "H/K"
        assert pools.pool_of("Walsh") == "F"
        assert pools.pool_of("Park") is None
        assert pools.all_teachers == ["Kim", "Walsh"]

    def test_assignment_unassigned(self):
        a = Assignment(class_id="R1C1", round=1, day="Mo", period=1, role=Role.FOREIGN)
        assert a.is_unassigned
        assert a.teacher_label == UNASSIGNED_LABEL
        assert str(a) == f"Mo 1. R1C1 F: {UNASSIGNED_LABEL}"

    def test_assignment_frozen(self):
        a = Assignment(class_id="R1C1", round=1, day="Mo", period=1, role=Role.HOMEROOM, teacher="Kim")
        with pytest.raises(ValidationError):
            a.teacher = "Lee"

    def test_class_ids(self):
        assert build_class_ids(2, 3) == ["R2C1", "R2C2", "R2C3"]
        slot = SlotConfig(global_options=GlobalOptions(round_class_counts={1: 1, 3: 2}))
        assert slot.class_ids == ["R1C1", "R3C1", "R3C2"]
        assert slot.round_classes[2] == []

    def test_constraint_for_unknown_teacher(self):
        slot = SlotConfig()
        assert slot.constraint_for("Niemand") == TeacherConstraint()

    def test_slot_config_error_messages(self):
        with pytest.raises(SlotConfigError) as exc_info:
            SlotConfig.coerce({
                "teacher_constraints": {"Kim": {"unavailable": ["So|1", "Mo|9"]}},
            }, source="test.yaml")
        err = exc_info.value
        assert err.source == "test.yaml"
        assert len(err.errors) == 2
        assert any("So|1" in e for e in err.errors)
        assert "test.yaml" in str(err)

    def test_exam_marker_beyond_last_period(self):
        with pytest.raises(SlotConfigError):
            SlotConfig.coerce({"global_options": {"exam_periods": {"Mo": [8.5]}}})

    def test_fixed_homeroom_twice(self):
        with pytest.raises(SlotConfigError) as exc_info:
            SlotConfig.coerce({
                "global_options": {"round_class_counts": {1: 1}},
                "fixed_homerooms": {"Kim": "R1C1", "Lee": "R1C1"},
            })
        assert any("mehrere feste Klassenlehrer" in e for e in exc_info.value.errors)

    def test_json_roundtrip(self, tmp_path: Path):
        slot = FakeSlotGenerator(seed=3).generate()
        path = tmp_path / "slot.json"
        slot.save_json(path)
        loaded = SlotConfig.load_json(path)
        assert loaded.model_dump() == slot.model_dump()

    def test_summary(self):
        slot = FakeSlotGenerator(seed=3).generate()
        text = slot.summary()
        assert slot.name in text
        assert "Mo/Mi/Fr" in text


# ─── MACHBARKEITS-CHECK ───────────────────────────────────────────────────────

class TestFeasibility:
    def test_single_foreign_teacher_two_classes(self):
        slot = SlotConfig(
            teachers=TeacherPools(homeroom_korean_pool=["H1", "H2"], foreign_pool=["F1"]),
            global_options=GlobalOptions(round_class_counts={1: 2}),
        )
        report = slot.check_feasibility()
        assert not report.is_feasible
        assert len(report.errors) == 2
        assert all("F-Stunden gleichzeitig" in e for e in report.errors)

    def test_enough_teachers(self):
        slot = SlotConfig(
            teachers=TeacherPools(homeroom_korean_pool=["H1", "H2", "H3"], foreign_pool=["F1", "F2"]),
            global_options=GlobalOptions(round_class_counts={1: 2}),
        )
        report = slot.check_feasibility()
        assert report.is_feasible
        assert report.errors == []

    def test_homeroom_capacity(self):
        slot = SlotConfig(
            teachers=TeacherPools(homeroom_korean_pool=["H1", "H2"], foreign_pool=["F1", "F2"]),
            teacher_constraints={
                "H1": TeacherConstraint(max_homerooms=1),
                "H2": TeacherConstraint(homeroom_disabled=True),
            },
            global_options=GlobalOptions(round_class_counts={1: 2}),
        )
        report = slot.check_feasibility()
        assert any(e.startswith("Klassenlehrer:") for e in report.errors)

    def test_empty_foreign_pool_reported_once(self):
        slot = SlotConfig(
            teachers=TeacherPools(homeroom_korean_pool=["H1", "H2"]),
            global_options=GlobalOptions(round_class_counts={2: 1}),
        )
        report = slot.check_feasibility()
        assert report.errors == ["F-Pool ist leer – alle F-Stunden bleiben unbesetzt."]

    def test_constraint_without_pool(self):
        slot = SlotConfig(
            teachers=TeacherPools(homeroom_korean_pool=["H1"], foreign_pool=["F1"]),
            teacher_constraints={"Gast": TeacherConstraint(unavailable=["Mo|1"])},
            global_options=GlobalOptions(round_class_counts={4: 1}),
        )
        report = slot.check_feasibility()
        assert any("Gast" in w for w in report.warnings)

    def test_no_classes(self):
        report = SlotConfig().check_feasibility()
        assert report.is_feasible
        assert report.warnings


# ─── YAML SPEICHERN / LADEN ───────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Slot speichern, laden und validieren: vollständiger Roundtrip."""
        slot = FakeSlotGenerator(seed=11).generate()
        mgr = ConfigManager(tmp_path)

        mgr.save(slot)
        assert mgr.DEFAULT_SLOT.exists()

        loaded = mgr.load(mgr.DEFAULT_SLOT)
        assert loaded.model_dump() == slot.model_dump()

    def test_yaml_has_comments(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path)
        path = mgr.save(FakeSlotGenerator(seed=1).generate())
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "─── Lehrkräfte-Pools ───" in text
        assert "Mo|" in text or "Fr|" in text

    def test_load_nonexistent_raises(self, tmp_path: Path):
        """Laden einer nicht-existenten Datei → FileNotFoundError."""
        mgr = ConfigManager()
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "not_there.yaml")

    def test_load_invalid_yaml_content(self, tmp_path: Path):
        path = tmp_path / "kaputt.yaml"
        path.write_text(
            "global_options:\n  round_class_counts:\n    7: 2\n", encoding="utf-8"
        )
        with pytest.raises(SlotConfigError) as exc_info:
            ConfigManager().load(path)
        assert exc_info.value.source == str(path)

    def test_load_scalar_yaml(self, tmp_path: Path):
        path = tmp_path / "leer.yaml"
        path.write_text("nur text\n", encoding="utf-8")
        with pytest.raises(SlotConfigError):
            ConfigManager().load(path)

    def test_load_handwritten_yaml(self, tmp_path: Path):
        path = tmp_path / "hand.yaml"
        path.write_text(
            "name: Abendkurs\n"
            "teachers:\n"
            "  homeroom_korean_pool: [Kim, Lee]\n"
            "  foreign_pool: [Walsh]\n"
            "teacher_constraints:\n"
            "  Walsh:\n"
            "    unavailable: ['Fr|1']\n"
            "global_options:\n"
            "  round_class_counts: {1: 2}\n",
            encoding="utf-8",
        )
        slot = ConfigManager().load(path)
        assert slot.name == "Abendkurs"
        assert slot.class_ids == ["R1C1", "R1C2"]
        assert slot.constraint_for("Walsh").is_unavailable("Fr", 1)

    def test_list_slots(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path)
        assert mgr.list_slots() == []
        mgr.save(FakeSlotGenerator(seed=2).generate(), tmp_path / "a.yaml")
        (tmp_path / "b.yaml").write_text("global_options: {round_class_counts: {9: 1}}\n", encoding="utf-8")
        slots = mgr.list_slots()
        assert [s["name"] for s in slots] == ["a", "b"]
        assert slots[0]["classes"] == 10
        assert slots[1]["error"]

    def test_load_slot_by_name(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path)
        mgr.save(FakeSlotGenerator(seed=2).generate(name="Herbst"), tmp_path / "herbst.yaml")
        assert mgr.load_slot("herbst").name == "Herbst"
        with pytest.raises(FileNotFoundError):
            mgr.load_slot("winter")


# ─── TESTDATEN ────────────────────────────────────────────────────────────────

class TestFakeData:
    def test_generate_returns_slot(self):
        slot = FakeSlotGenerator(seed=42).generate()
        assert isinstance(slot, SlotConfig)
        assert len(slot.class_ids) == 10

    def test_deterministic_per_seed(self):
        a = FakeSlotGenerator(seed=9).generate()
        b = FakeSlotGenerator(seed=9).generate()
        assert a.model_dump() == b.model_dump()

    def test_bottlenecks_present(self):
        slot = FakeSlotGenerator(seed=42).generate()
        hk = slot.teachers.homeroom_korean_pool
        assert slot.constraint_for(hk[-1]).homeroom_disabled
        assert slot.constraint_for(hk[-2]).max_homerooms == 1
        assert slot.constraint_for(slot.teachers.foreign_pool[-1]).is_unavailable("Fr", 5)
        assert slot.fixed_homerooms == {hk[0]: "R1C1"}

    def test_custom_counts(self):
        slot = FakeSlotGenerator(seed=1, round_class_counts={1: 1}, foreign_pool_size=1).generate()
        assert slot.class_ids == ["R1C1"]
        assert len(slot.teachers.foreign_pool) == 1
        assert len(slot.global_options.class_names) == 1


# ─── CLI ──────────────────────────────────────────────────────────────────────

class TestCLI:
    def test_cli_help(self):
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_generate_command_exists(self):
        """generate Befehl ist registriert und hat --export-json."""
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", "--help"])
        assert result.exit_code == 0
        assert "export-json" in result.output

    def test_generate_missing_slot(self):
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["generate", "fehlt.yaml"])
            assert result.exit_code == 1
            assert "nicht gefunden" in result.output

    def test_generate_invalid_slot(self):
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("kaputt.yaml").write_text(
                "teachers:\n  homeroom_korean_pool: [Kim]\n  foreign_pool: [Kim]\n",
                encoding="utf-8",
            )
            result = runner.invoke(cli, ["generate", "kaputt.yaml"])
            assert result.exit_code == 1
            assert "ungültig" in result.output

    def test_sample_generate_validate(self):
        """sample → generate --export-json → validate --result."""
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["sample", "--seed", "7", "-o", "slots/test.yaml"])
            assert result.exit_code == 0, result.output
            assert Path("slots/test.yaml").exists()

            result = runner.invoke(cli, [
                "generate", "slots/test.yaml", "--export-json", "--json-path", "out/plan.json",
            ])
            assert result.exit_code == 0, result.output
            assert "Klassenlehrer" in result.output
            assert Path("out/plan.json").exists()

            result = runner.invoke(cli, ["validate", "slots/test.yaml", "--result", "out/plan.json"])
            assert result.exit_code in (0, 1)
            assert "Machbarkeits-Check" in result.output
            assert "Wochenplan-Validierung" in result.output

            result = runner.invoke(cli, ["slots", "list", "--dir", "slots"])
            assert result.exit_code == 0
            assert "test" in result.output

    def test_fairness_command(self):
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["sample", "-o", "slot.yaml"])
            result = runner.invoke(cli, ["fairness", "slot.yaml"])
            assert result.exit_code == 0, result.output
            assert "Fairness" in result.output

    def test_slots_list_empty(self):
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["slots", "list"])
            assert result.exit_code == 0
            assert "Keine Slots" in result.output
