"""Tests für Excel- und PDF-Export."""

from pathlib import Path

import pytest

from config.defaults import default_policy_input
from models.assignment import Assignment
from models.school_class import ClassUnit
from models.school_data import SchoolData
from models.subject import Subject
from models.teacher import Teacher
from solver.staffing import StaffingCalculator


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _make_mini_school_data() -> SchoolData:
    """2 Klassen, 2 Lehrkräfte, 4 Zuweisungen (eine davon im Team)."""
    return SchoolData(
        school_name="RS Testhausen",
        subjects=[
            Subject(id="M1", short_name="M1", name="Mathe (1. Hj.)", category="hauptfach"),
            Subject(id="D1", short_name="D1", name="Deutsch (1. Hj.)", category="hauptfach"),
        ],
        classes=[
            ClassUnit(id="5a", name="5a", grade=5, subject_hours={"M": 4, "D": 5}),
            ClassUnit(id="6a", name="6a", grade=6, subject_hours={"M": 4, "KR": 2}),
        ],
        teachers=[
            Teacher(id="MUE", short_name="MUE", qualifications=["M"], max_hours=28),
            Teacher(id="SCH", short_name="SCH", qualifications=["D"], max_hours=14),
        ],
        assignments=[
            Assignment(teacher_id="MUE", class_id="6a", subject_id="M1",
                       semester="1", hours_per_week=4, is_optimized=True),
            Assignment(teacher_id="MUE", class_id="5a", subject_id="M1",
                       semester="1", hours_per_week=4, is_optimized=True),
            Assignment(teacher_id="SCH", class_id="5a", subject_id="D1",
                       semester="1", hours_per_week=4, team_teaching_id="team-0001-x"),
            Assignment(teacher_id="MUE", class_id="5a", subject_id="D1",
                       semester="1", hours_per_week=4, team_teaching_id="team-0001-x"),
        ],
    )


def _make_policy_lines():
    return StaffingCalculator().calculate_from_policy(default_policy_input()).lines


# ─── Hilfsfunktionen des Exports ──────────────────────────────────────────────

class TestHelpers:
    def test_hex_to_rgb(self):
        from export.helpers import hex_to_rgb
        assert hex_to_rgb("4472C4") == (0x44, 0x72, 0xC4)
        assert hex_to_rgb("#FFFFFF") == (255, 255, 255)

    def test_fmt_hours(self):
        from export.helpers import fmt_hours
        assert fmt_hours(34.45) == "34,45"
        assert fmt_hours(2.0) == "2"
        assert fmt_hours(1.5) == "1,5"

    def test_line_color(self):
        from export.helpers import line_color
        lines = _make_policy_lines()
        total = next(ln for ln in lines if ln.component == "Gesamtsumme Stunden")
        assert line_color(total) == "C6EFCE"
        summary = lines[-1]
        assert line_color(summary) == "BDD7EE"

    def test_line_color_hex(self):
        from export.helpers import line_color
        from models.staffing import StaffingReportLine
        line = StaffingReportLine(component="M - Klasse 5", category="grundbedarf",
                                  line_type="requirement", required_hours=4,
                                  color="#3b82f6")
        assert line_color(line) == "3B82F6"

    def test_subject_color(self):
        from export.helpers import COLORS, get_subject_color
        data = _make_mini_school_data()
        assert get_subject_color("M1", data.subjects) == COLORS["hauptfach"]
        assert get_subject_color("XX", data.subjects) == COLORS["sonstig"]

    def test_teacher_hours(self):
        from export.helpers import teacher_hours
        assert teacher_hours(_make_mini_school_data()) == {"MUE": 12, "SCH": 4}

    def test_assignment_rows_sorted(self):
        from export.helpers import assignment_rows
        rows = assignment_rows(_make_mini_school_data())
        assert [r["class"] for r in rows] == ["5a", "5a", "5a", "6a"]
        assert rows[0]["subject"] == "D1"
        assert rows[0]["team"] == "team-000"
        assert rows[-1]["optimized"] is True


# ─── Excel ────────────────────────────────────────────────────────────────────

class TestExcelExport:
    def test_creates_file_with_sheets(self, tmp_path: Path):
        from openpyxl import load_workbook
        from export.excel_export import ExcelExporter

        out = tmp_path / "planstellen.xlsx"
        ExcelExporter(_make_mini_school_data(), _make_policy_lines()).export(out)

        assert out.exists()
        wb = load_workbook(out)
        assert wb.sheetnames == ["Planstellen", "Zuweisungen", "Jahrgangsbedarf"]

    def test_planstellen_sheet_content(self, tmp_path: Path):
        from openpyxl import load_workbook
        from export.excel_export import ExcelExporter

        lines = _make_policy_lines()
        out = tmp_path / "planstellen.xlsx"
        ExcelExporter(_make_mini_school_data(), lines).export(out)

        ws = load_workbook(out)["Planstellen"]
        assert ws.cell(row=1, column=1).value == "RS Testhausen"
        assert ws.cell(row=4, column=3).value == "Bezeichnung"
        assert ws.cell(row=5, column=3).value == lines[0].component
        last = 5 + len(lines) - 1
        assert ws.cell(row=last, column=3).value == "Gesamtbedarf Planstellen"

    def test_workload_sheet_optional(self, tmp_path: Path):
        from openpyxl import load_workbook
        from analysis.workload_report import WorkloadAnalyzer
        from export.excel_export import ExcelExporter

        data = _make_mini_school_data()
        report = WorkloadAnalyzer().analyze(data)
        out = tmp_path / "mit_auslastung.xlsx"
        ExcelExporter(data, _make_policy_lines()).export(out, workload_report=report)

        assert "Auslastung" in load_workbook(out).sheetnames

    def test_empty_data(self, tmp_path: Path):
        from export.excel_export import ExcelExporter

        out = tmp_path / "sub" / "leer.xlsx"
        ExcelExporter(SchoolData(), []).export(out)
        assert out.exists()


# ─── PDF ──────────────────────────────────────────────────────────────────────

class TestPdfExport:
    def test_creates_pdf(self, tmp_path: Path):
        from export.pdf_export import PdfExporter

        out = tmp_path / "planstellen.pdf"
        PdfExporter(_make_mini_school_data(), _make_policy_lines()).export_report(out)
        assert out.exists()
        assert out.read_bytes().startswith(b"%PDF")

    def test_with_assignments(self, tmp_path: Path):
        from export.pdf_export import PdfExporter

        out = tmp_path / "mit_zuweisungen.pdf"
        PdfExporter(_make_mini_school_data(), _make_policy_lines()).export_report(
            out, include_assignments=True,
        )
        assert out.stat().st_size > 0

    @pytest.mark.parametrize("text,expected", [
        ("a – b", "a - b"),
        ("38 ÷ 28", "38 / 28"),
        ("x → y", "x -> y"),
    ])
    def test_pdf_safe(self, text, expected):
        from export.pdf_export import _pdf_safe
        assert _pdf_safe(text) == expected
