"""Excel-Export für Planstellen-Bericht und Zuweisungen (openpyxl)."""

from pathlib import Path
from typing import Mapping, Optional

from models.school_data import SchoolData
from models.staffing import StaffingReportLine
from solver.hours import GradeHours

from export.helpers import (
    COLORS, assignment_rows, get_subject_color, line_color, teacher_hours, today_str,
)


class ExcelExporter:
    """Exportiert Planstellen-Bericht, Zuweisungen und Jahrgangsbedarf."""

    ROW_HEADER_H = 22

    def __init__(
        self,
        school_data: SchoolData,
        lines: list[StaffingReportLine],
        grade_hours: Optional[Mapping[int, GradeHours]] = None,
    ):
        self.data = school_data
        self.lines = lines
        self.grade_hours = grade_hours or {}

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path, workload_report=None) -> None:
        """Erstellt die Excel-Datei mit allen Sheets.

        workload_report: optionaler WorkloadReport – wenn angegeben,
        wird ein zusätzliches Auslastungsblatt eingefügt.
        """
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_planstellen(wb)
        self._sheet_zuweisungen(wb)
        self._sheet_jahrgangsbedarf(wb)

        if workload_report is not None:
            self._sheet_auslastung(wb, workload_report)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header(self, ws, row: int, headers: list[str]) -> None:
        from openpyxl.styles import Alignment, Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = border
        ws.row_dimensions[row].height = self.ROW_HEADER_H

    def _set_widths(self, ws, widths: list[int]) -> None:
        from openpyxl.utils import get_column_letter
        for col, w in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = w

    # ─── Sheet: Planstellen ───────────────────────────────────────────────────

    def _sheet_planstellen(self, wb) -> None:
        from openpyxl.styles import Font
        ws = wb.create_sheet(title="Planstellen", index=0)

        ws.cell(row=1, column=1, value=self.data.school_name).font = Font(bold=True, size=14)
        ws.cell(row=2, column=1, value=f"Schuljahr {self.data.school_year}")
        ws.cell(row=2, column=3, value=f"Erstellt: {today_str()}")

        headers = ["Jg.", "Bereich", "Bezeichnung", "Bedarf", "Vorhanden", "Differenz", "Formel"]
        self._write_header(ws, 4, headers)
        border = self._thin_border()

        row = 5
        for line in self.lines:
            values = [
                line.grade,
                line.category,
                line.component,
                round(line.required_hours, 2),
                round(line.available_hours, 2),
                round(line.deficit, 2),
                line.formula.description,
            ]
            fill = self._fill(line_color(line))
            bold = line.line_type != "requirement"
            for col, value in enumerate(values, 1):
                c = ws.cell(row=row, column=col, value=value)
                c.border = border
                c.fill = fill
                if bold:
                    c.font = Font(bold=True)
                if col in (4, 5, 6):
                    c.number_format = "0.00"
            if line.line_type == "requirement" and line.available_hours and line.deficit > 0:
                ws.cell(row=row, column=6).fill = self._fill(COLORS["deficit"])
            row += 1

        self._set_widths(ws, [6, 18, 48, 10, 11, 10, 50])

    # ─── Sheet: Zuweisungen ───────────────────────────────────────────────────

    def _sheet_zuweisungen(self, wb) -> None:
        ws = wb.create_sheet(title="Zuweisungen")
        headers = ["Klasse", "Fach", "Halbjahr", "Lehrkraft", "Std./Woche", "Team", "Optimiert"]
        self._write_header(ws, 1, headers)
        border = self._thin_border()

        row = 2
        for r in assignment_rows(self.data):
            values = [
                r["class"], r["subject"], r["semester"], r["teacher"],
                r["hours"], r["team"], "ja" if r["optimized"] else "",
            ]
            color = get_subject_color(r["subject_id"], self.data.subjects)
            for col, value in enumerate(values, 1):
                c = ws.cell(row=row, column=col, value=value)
                c.border = border
                if col == 2:
                    c.fill = self._fill(color)
            row += 1

        # Summen pro Lehrkraft
        row += 1
        self._write_header(ws, row, ["Lehrkraft", "Ist", "Max", "Rest"])
        row += 1
        hours = teacher_hours(self.data)
        for t in sorted(self.data.teachers, key=lambda t: t.short_name):
            actual = hours.get(t.id, 0.0)
            values = [t.short_name, actual, t.max_hours, t.max_hours - actual]
            for col, value in enumerate(values, 1):
                c = ws.cell(row=row, column=col, value=value)
                c.border = border
            if actual > t.max_hours:
                ws.cell(row=row, column=2).fill = self._fill(COLORS["deficit"])
            row += 1

        self._set_widths(ws, [10, 10, 10, 12, 12, 10, 10])

    # ─── Sheet: Jahrgangsbedarf ───────────────────────────────────────────────

    def _sheet_jahrgangsbedarf(self, wb) -> None:
        from openpyxl.styles import Font
        ws = wb.create_sheet(title="Jahrgangsbedarf")
        self._write_header(ws, 1, ["Jahrgang", "Klassen", "Fach/Gruppe", "Stunden", "Art"])
        border = self._thin_border()

        row = 2
        for grade, gh in sorted(self.grade_hours.items()):
            entries = [(gid, h, "Parallelgruppe (max)") for gid, h in gh.parallel_group_hours.items()]
            entries += [(code, h, "Fach (Summe)") for code, h in gh.regular_hours.items()]
            for name, hours, kind in entries:
                values = [grade, gh.class_count, name, hours, kind]
                for col, value in enumerate(values, 1):
                    ws.cell(row=row, column=col, value=value).border = border
                row += 1
            total = ws.cell(row=row, column=4, value=gh.total_hours)
            total.font = Font(bold=True)
            total.border = border
            ws.cell(row=row, column=3, value=f"Summe Jg. {grade}").font = Font(bold=True)
            row += 2

        self._set_widths(ws, [10, 9, 18, 10, 22])

    # ─── Sheet: Auslastung ────────────────────────────────────────────────────

    def _sheet_auslastung(self, wb, report) -> None:
        from openpyxl.styles import Font
        ws = wb.create_sheet(title="Auslastung")
        border = self._thin_border()

        ws.cell(row=1, column=1, value="Auslastungsbericht").font = Font(bold=True, size=13)
        ws.cell(row=2, column=1, value=f"Erstellt: {today_str()}")
        ws.cell(row=2, column=3, value=f"Bewertung: {report.rating}")

        self._write_header(ws, 4, ["KPI", "Wert"])
        kpis = [
            ("Abdeckung", f"{report.resolved_pairs}/{report.required_pairs} ({report.coverage_rate:.1%})"),
            ("Qualifikationstreue", f"{report.qualification_rate:.1%}"),
            ("Deputat-Fairness (Jain)", f"{report.fairness_index:.4f}"),
            ("Ø Punktzahl", f"{report.average_score:.1f}"),
        ]
        row = 5
        for name, value in kpis:
            ws.cell(row=row, column=1, value=name).border = border
            ws.cell(row=row, column=2, value=value).border = border
            row += 1

        row += 1
        self._write_header(ws, row, ["Kürzel", "Ist", "Max", "Auslastung %", "Fächer"])
        row += 1
        for m in sorted(report.teacher_metrics, key=lambda x: x.short_name):
            values = [m.short_name, m.assigned_hours, m.max_hours, m.utilization,
                      ", ".join(m.subjects_taught)]
            for col, value in enumerate(values, 1):
                ws.cell(row=row, column=col, value=value).border = border
            row += 1

        self._set_widths(ws, [24, 24, 8, 13, 30])
