"""PDF-Export für den Planstellen-Bericht (fpdf2)."""

from pathlib import Path

from models.school_data import SchoolData
from models.staffing import StaffingReportLine

from export.helpers import (
    COLORS, assignment_rows, fmt_hours, hex_to_rgb, line_color, today_str,
)


def _pdf_safe(text: str) -> str:
    """Ersetzt nicht-latin-1-fähige Zeichen für fpdf2-Built-in-Fonts."""
    return (
        text
        .replace("—", " - ")   # em dash —
        .replace("–", "-")      # en dash –
        .replace("─", "-")      # BOX DRAWINGS LIGHT HORIZONTAL ─
        .replace("÷", "/")      # DIVISION SIGN ÷
        .replace("→", "->")     # RIGHTWARDS ARROW →
    )


# ─── A4-Hochformat-Dimensionen ────────────────────────────────────────────────
# Portrait A4: 210 × 297 mm
# Nutzbare Breite (Margin 10 links+rechts): 190 mm
# Spalten: Jg.(10) + Bezeichnung(100) + 3×Zahl(22) + Formel-Kennung(14) = 190 mm

_COLS = {
    "grade": 10,
    "label": 100,
    "num":   22,    # Bedarf / Vorhanden / Differenz
    "op":    14,
}
_ROW_HEADER_H = 7     # mm
_ROW_H        = 6     # mm
_FONT_HEADER  = 8     # pt
_FONT_CONTENT = 7     # pt


class _ReportPdf:
    """Interner Wrapper um fpdf.FPDF für Berichtsseiten."""

    def __init__(self, school_name: str):
        from fpdf import FPDF

        class _Pdf(FPDF):
            def __init__(inner, sn):
                super().__init__(orientation="P", unit="mm", format="A4")
                inner._school_name = sn
                inner._entity_title = ""
                inner.alias_nb_pages()
                inner.set_auto_page_break(auto=True, margin=18)
                inner.set_margins(left=10, top=22, right=10)

            def header(inner):
                inner.set_font("Helvetica", "B", 11)
                inner.set_xy(10, 8)
                inner.cell(100, 7, _pdf_safe(inner._school_name), border=0, align="L")
                inner.cell(0,   7, _pdf_safe(inner._entity_title), border=0, align="R")
                inner.ln(0)
                inner.set_draw_color(150, 150, 150)
                inner.line(10, 18, inner.w - 10, 18)
                inner.set_xy(10, 22)

            def footer(inner):
                inner.set_y(-14)
                inner.set_font("Helvetica", "I", 7)
                inner.cell(
                    0, 8,
                    f"{today_str()}  |  Seite {inner.page_no()}/{{nb}}",
                    border=0, align="C",
                )

        self._pdf = _Pdf(school_name)

    def set_entity(self, title: str) -> None:
        self._pdf._entity_title = title

    def add_page(self) -> None:
        self._pdf.add_page()

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._pdf.output(str(path))

    # ─── Tabellen-Zeilen ──────────────────────────────────────────────────────

    def row(
        self,
        cells: list[tuple[str, float, str]],
        bg_hex: str | None = None,
        bold: bool = False,
        header: bool = False,
    ) -> None:
        """Zeichnet eine Tabellenzeile; cells = [(Text, Breite, Ausrichtung)]."""
        pdf = self._pdf
        h = _ROW_HEADER_H if header else _ROW_H
        if pdf.get_y() + h > pdf.h - 18:
            pdf.add_page()

        fill = bg_hex is not None
        if fill:
            pdf.set_fill_color(*hex_to_rgb(bg_hex))
        pdf.set_draw_color(180, 180, 180)
        pdf.set_font("Helvetica", "B" if bold or header else "",
                     _FONT_HEADER if header else _FONT_CONTENT)
        pdf.set_text_color(*((255, 255, 255) if header else (0, 0, 0)))

        pdf.set_x(10)
        for text, w, align in cells:
            limit = int(w * 0.55)   # Zeichen pro mm bei 7pt
            pdf.cell(w, h, _pdf_safe(text)[:limit], border=1, align=align, fill=fill)
        pdf.ln(h)
        pdf.set_text_color(0, 0, 0)

    def heading(self, text: str) -> None:
        pdf = self._pdf
        pdf.ln(3)
        pdf.set_font("Helvetica", "B", 10)
        pdf.set_x(10)
        pdf.cell(0, 7, _pdf_safe(text), border=0, align="L")
        pdf.ln(8)


class PdfExporter:
    """Exportiert den Planstellen-Bericht als PDF."""

    def __init__(self, school_data: SchoolData, lines: list[StaffingReportLine]):
        self.data = school_data
        self.lines = lines

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export_report(self, output_path: Path, include_assignments: bool = False) -> None:
        """Erzeugt die PDF: Berichtszeilen, optional gefolgt von den Zuweisungen."""
        pdf = _ReportPdf(self.data.school_name)
        pdf.set_entity(f"Planstellenberechnung {self.data.school_year}")
        pdf.add_page()
        self._draw_report(pdf)

        if include_assignments:
            pdf.set_entity(f"Zuweisungen {self.data.school_year}")
            pdf.add_page()
            self._draw_assignments(pdf)

        pdf.save(output_path)

    # ─── Tabellenzeichnung ────────────────────────────────────────────────────

    def _draw_report(self, pdf: _ReportPdf) -> None:
        pdf.row([
            ("Jg.", _COLS["grade"], "C"),
            ("Bezeichnung", _COLS["label"], "L"),
            ("Bedarf", _COLS["num"], "R"),
            ("Vorhanden", _COLS["num"], "R"),
            ("Differenz", _COLS["num"], "R"),
            ("Art", _COLS["op"], "C"),
        ], bg_hex=COLORS["header"], header=True)

        for line in self.lines:
            pdf.row([
                (str(line.grade) if line.grade is not None else "", _COLS["grade"], "C"),
                (line.component, _COLS["label"], "L"),
                (fmt_hours(line.required_hours), _COLS["num"], "R"),
                (fmt_hours(line.available_hours) if line.available_hours else "", _COLS["num"], "R"),
                (fmt_hours(line.deficit) if line.line_type == "requirement" else "", _COLS["num"], "R"),
                (line.formula.op, _COLS["op"], "C"),
            ], bg_hex=line_color(line), bold=line.line_type != "requirement")

        summary = next((ln for ln in self.lines if ln.line_type == "summary"), None)
        if summary is not None:
            pdf.heading(
                f"{summary.component}: {fmt_hours(summary.required_hours)} "
                f"({summary.formula.description})"
            )

    def _draw_assignments(self, pdf: _ReportPdf) -> None:
        widths = [20, 25, 20, 30, 25, 30]
        headers = ["Klasse", "Fach", "Halbjahr", "Lehrkraft", "Std./Woche", "Team"]
        pdf.row([(h, w, "C") for h, w in zip(headers, widths)],
                bg_hex=COLORS["header"], header=True)
        for r in assignment_rows(self.data):
            values = [r["class"], r["subject"], r["semester"], r["teacher"],
                      fmt_hours(r["hours"]), r["team"]]
            pdf.row([(v, w, "C") for v, w in zip(values, widths)])
