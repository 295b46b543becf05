"""Tests für Eingabewerte, Konfigurationsmanager, Demo-Daten und CLI."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.defaults import (
    ELIGIBILITY_OVERRIDES,
    STUNDENTAFEL_REALSCHULE_NRW,
    default_parallel_groups,
    default_policy_input,
)
from config.manager import ConfigManager
from config.schema import PolicyInput


def _make_manager(tmp_path: Path) -> ConfigManager:
    mgr = ConfigManager()
    mgr.CONFIG_DIR = tmp_path
    mgr.DEFAULT_CONFIG = tmp_path / "planstellen.yaml"
    mgr.SCENARIOS_DIR = tmp_path / "scenarios"
    return mgr


# ─── EINGABEWERTE ─────────────────────────────────────────────────────────────

class TestPolicyInput:
    def test_defaults(self):
        """Defaults entsprechen dem Arbeitsblatt 2024/25."""
        policy = default_policy_input()
        assert policy.student_count == 710
        assert policy.student_teacher_ratio == 20.19
        assert policy.per_position_deputat == 28
        assert policy.weiterer_ausgleich == 0

    def test_none_counts_as_zero(self):
        policy = PolicyInput(personalrat=None, free_line_1_label=None)
        assert policy.personalrat == 0.0
        assert policy.free_line_1_label == ""

    def test_frozen(self):
        policy = default_policy_input()
        with pytest.raises(ValidationError):
            policy.student_count = 800

    def test_invalid_number_rejected(self):
        with pytest.raises(ValidationError):
            PolicyInput(student_count="viele")

    def test_descriptions_are_labels(self):
        fields = PolicyInput.model_fields
        assert fields["personalrat"].description == "Personalrat"
        assert fields["rounding_adjustment"].description == "Rundung"

    def test_worksheet_section_defaults(self):
        """Stellenbesetzung, Leitungspauschale und Klassenbildung wie im Arbeitsblatt."""
        policy = default_policy_input()
        assert policy.gegen_unterrichtsausfall_foerderung == 0.77
        assert policy.abzug_kapitalisierung_uebermittag == -0.56
        assert policy.grundstellenbedarf_faktor == 0.5
        assert policy.grundpauschale == 9
        assert policy.schulleiter_drei_fuenftel == 18
        assert policy.istklassenzahl == 17
        assert policy.vorhandene_planstellen == 0


class TestDefaults:
    def test_parallel_groups(self):
        groups = {g.id: g for g in default_parallel_groups()}
        assert set(groups) == {"Differenzierung", "Religion"}
        assert groups["Religion"].subjects == ("KR", "ER", "PP")
        assert groups["Differenzierung"].hours_per_grade[8] == 4
        assert 5 not in groups["Differenzierung"].hours_per_grade

    def test_beu_override(self):
        override = ELIGIBILITY_OVERRIDES[0]
        assert override.excludes("BEU", "KR")
        assert override.excludes("beu", "ER")
        assert not override.excludes("BEU", "E")
        assert not override.excludes("XYZ", "KR")

    def test_stundentafel_covers_all_grades(self):
        assert sorted(STUNDENTAFEL_REALSCHULE_NRW) == [5, 6, 7, 8, 9, 10]


# ─── YAML SPEICHERN / LADEN ───────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Eingabewerte speichern und wieder laden."""
        policy = default_policy_input().model_copy(update={"school_name": "RS Testhausen"})
        mgr = _make_manager(tmp_path)

        mgr.save(policy)
        assert mgr.DEFAULT_CONFIG.exists()

        loaded = mgr.load()
        assert loaded.school_name == "RS Testhausen"
        assert loaded.student_count == policy.student_count
        assert loaded.student_teacher_ratio == policy.student_teacher_ratio
        assert loaded.personalrat == policy.personalrat

    def test_saved_file_has_comments(self, tmp_path: Path):
        mgr = _make_manager(tmp_path)
        mgr.save(default_policy_input())
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert "Planstellen-Rechner" in text
        assert "Ausgleichsbedarf" in text
        assert "# Personalrat" in text
        assert "Stellenbesetzung" in text
        assert "Klassenbildung" in text
        assert "# Teilzeit im Blockmodell (Ansparphase)" in text

    def test_first_run_check(self, tmp_path: Path):
        mgr = _make_manager(tmp_path)
        assert mgr.first_run_check() is True
        mgr.save(default_policy_input())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            _make_manager(tmp_path).load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "kaputt.yaml"
        path.write_text("student_count: viele\n", encoding="utf-8")
        with pytest.raises(ValueError):
            _make_manager(tmp_path).load(path)

    def test_missing_keys_use_defaults(self, tmp_path: Path):
        path = tmp_path / "teilweise.yaml"
        path.write_text("student_count: 500\npersonalrat:\n", encoding="utf-8")
        loaded = _make_manager(tmp_path).load(path)
        assert loaded.student_count == 500
        assert loaded.personalrat == 0.0
        assert loaded.fachleiter == 0.21

    def test_scenario_save_and_load(self, tmp_path: Path):
        policy = default_policy_input().model_copy(update={"praxissemester_in_schule": 0.0})
        mgr = _make_manager(tmp_path)

        assert mgr.save_scenario(policy, "ohne_praxissemester", "Nur zum Testen")
        loaded = mgr.load_scenario("ohne_praxissemester")
        assert loaded.praxissemester_in_schule == 0.0

        scenarios = mgr.list_scenarios()
        assert [s["name"] for s in scenarios] == ["ohne_praxissemester"]
        assert scenarios[0]["description"] == "Nur zum Testen"

    def test_scenario_overwrite(self, tmp_path: Path):
        mgr = _make_manager(tmp_path)
        mgr.save_scenario(default_policy_input(), "a")
        changed = default_policy_input().model_copy(update={"student_count": 650})
        assert mgr.save_scenario(changed, "a", overwrite=True)
        assert mgr.load_scenario("a").student_count == 650

    def test_load_unknown_scenario_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            _make_manager(tmp_path).load_scenario("gibt_es_nicht")

    def test_list_scenarios_empty(self, tmp_path: Path):
        assert _make_manager(tmp_path).list_scenarios() == []


# ─── DEMO-DATEN ───────────────────────────────────────────────────────────────

class TestDemoData:
    def test_generate_structure(self):
        from data.demo_data import DemoDataGenerator
        data = DemoDataGenerator(seed=42).generate()
        assert len(data.classes) == 18
        assert len(data.teachers) == 45
        assert len(data.parallel_groups) == 2
        assert data.subject_by_id("D1") is not None

    def test_teacher_ids_unique(self):
        from data.demo_data import DemoDataGenerator
        data = DemoDataGenerator(seed=7).generate()
        ids = [t.id for t in data.teachers]
        assert len(ids) == len(set(ids))

    def test_known_irregularities(self):
        """BEU mit KR-Eintrag, Sammeleintrag und inaktive Lehrkraft vorhanden."""
        from data.demo_data import DemoDataGenerator
        data = DemoDataGenerator(seed=42).generate()
        beu = data.teacher_by_id("BEU")
        assert "KR" in beu.qualifications
        assert any("D, GE" in t.qualifications for t in data.teachers)
        assert any(not t.is_active for t in data.teachers)

    def test_seed_reproducible(self):
        from data.demo_data import DemoDataGenerator
        a = DemoDataGenerator(seed=3).generate()
        b = DemoDataGenerator(seed=3).generate()
        assert [t.qualifications for t in a.teachers] == [t.qualifications for t in b.teachers]

    def test_optimizer_never_assigns_beu_religion(self):
        from data.demo_data import DemoDataGenerator
        from solver.optimizer import AssignmentOptimizer
        data = DemoDataGenerator(seed=42).generate()
        AssignmentOptimizer().run(data)
        beu_subjects = {
            data.subject_by_id(a.subject_id).short_name
            for a in data.assignments if a.teacher_id == "BEU"
        }
        assert not beu_subjects & {"KR1", "KR2", "ER1", "ER2"}


# ─── SCHOOLDATA JSON ──────────────────────────────────────────────────────────

class TestSchoolDataJson:
    def test_save_and_load_json(self, tmp_path: Path):
        from data.demo_data import DemoDataGenerator
        from models.school_data import SchoolData
        data = DemoDataGenerator(seed=1).generate()
        json_path = tmp_path / "school_data.json"
        data.save_json(json_path)

        loaded = SchoolData.load_json(json_path)
        assert len(loaded.teachers) == len(data.teachers)
        assert loaded.parallel_groups[0].hours_per_grade == data.parallel_groups[0].hours_per_grade
        assert loaded.created_at is not None

    def test_load_json_nonexistent_raises(self, tmp_path: Path):
        from models.school_data import SchoolData
        with pytest.raises(FileNotFoundError):
            SchoolData.load_json(tmp_path / "does_not_exist.json")


# ─── CLI ──────────────────────────────────────────────────────────────────────

class TestCli:
    def test_help(self):
        from main import cli
        from click.testing import CliRunner

        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "planstellen" in result.output

    def test_planstellen_policy_without_file(self):
        from main import cli
        from click.testing import CliRunner

        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["planstellen", "--mode", "policy"])
        assert result.exit_code == 0, result.output
        assert "Planstellen" in result.output
        assert "Stellen-Soll" in result.output

    def test_hours_without_data_aborts(self):
        from main import cli
        from click.testing import CliRunner

        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["hours"])
        assert result.exit_code == 1

    def test_demo_optimize_validate(self):
        from main import cli
        from click.testing import CliRunner

        runner = CliRunner()
        with runner.isolated_filesystem():
            assert runner.invoke(cli, ["demo", "--seed", "1"]).exit_code == 0
            assert Path("output/school_data.json").exists()

            result = runner.invoke(cli, ["hours", "--classes"])
            assert result.exit_code == 0, result.output

            result = runner.invoke(cli, ["optimize"])
            assert result.exit_code == 0, result.output
            assert "Optimierung" in result.output

            result = runner.invoke(cli, ["validate"])
            assert result.exit_code == 0, result.output

    def test_init_and_scenario_list(self):
        from main import cli
        from click.testing import CliRunner

        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["init"])
            assert result.exit_code == 0, result.output
            assert Path("config/planstellen.yaml").exists()

            result = runner.invoke(cli, ["scenario", "list"])
            assert result.exit_code == 0
            assert "Keine Szenarien" in result.output

    def test_team_add_rejects_unknown_teacher(self):
        from main import cli
        from click.testing import CliRunner
        from models.school_data import SchoolData

        runner = CliRunner()
        with runner.isolated_filesystem():
            assert runner.invoke(cli, ["demo", "--seed", "1"]).exit_code == 0
            assert runner.invoke(cli, ["optimize"]).exit_code == 0
            json_path = Path("output/school_data.json")
            before = SchoolData.load_json(json_path)
            base_id = before.assignments[0].id

            result = runner.invoke(cli, ["team", "add", base_id, "GHOST"])
            assert result.exit_code == 1
            assert "existiert nicht" in result.output
            assert len(SchoolData.load_json(json_path).assignments) == len(before.assignments)
