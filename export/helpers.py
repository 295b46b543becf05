"""Gemeinsame Hilfsfunktionen für Excel- und PDF-Export."""

from collections import defaultdict
from datetime import date

from models.school_data import SchoolData
from models.staffing import StaffingReportLine
from models.subject import Subject

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "hauptfach":    "B3D4FF",
    "sprache":      "FFF2B3",
    "nw":           "B3FFB3",
    "musisch":      "FFB3E6",
    "sport":        "FFD4B3",
    "gesellschaft": "D4B3FF",
    "religion":     "FFFFB3",
    "wpf":          "E0E0E0",
    "sonstig":      "E0E0E0",
    "deficit":      "FF9999",
    "surplus":      "CCFFCC",
    "header":       "4472C4",
}

# Berichtsfarben (Namen oder #RRGGBB) → RRGGBB
_NAMED_COLORS: dict[str, str] = {
    "yellow": "FFF2B3",
    "gray":   "EEEEEE",
    "purple": "E4D4FF",
    "cyan":   "D4F4FA",
    "green":  "C6EFCE",
    "blue":   "BDD7EE",
}


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def line_color(line: StaffingReportLine) -> str:
    """Hintergrundfarbe einer Berichtszeile als RRGGBB."""
    color = line.color or "gray"
    if color.startswith("#"):
        return color.lstrip("#").upper()
    return _NAMED_COLORS.get(color, _NAMED_COLORS["gray"])


def get_subject_color(subject_id: str, subjects: list[Subject]) -> str:
    """Gibt die Hex-Farbe für ein Fach zurück (anhand Subject.category)."""
    for s in subjects:
        if s.id == subject_id:
            return COLORS.get(s.category, COLORS["sonstig"])
    return COLORS["sonstig"]


def fmt_hours(value: float) -> str:
    """Stunden mit Komma als Dezimaltrennzeichen, höchstens 2 Nachkommastellen."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text.replace(".", ",")


# ─── Lehrer-Stunden ───────────────────────────────────────────────────────────

def teacher_hours(school_data: SchoolData) -> dict[str, float]:
    """Summe der Zuweisungsstunden pro Lehrkraft (beide Halbjahre)."""
    hours: dict[str, float] = defaultdict(float)
    for a in school_data.assignments:
        hours[a.teacher_id] += a.hours_per_week
    return dict(hours)


# ─── Zuweisungs-Zeilen ────────────────────────────────────────────────────────

def assignment_rows(school_data: SchoolData) -> list[dict]:
    """Zuweisungen als Anzeige-Zeilen, sortiert nach Klasse, Fach, Halbjahr.

    Unbekannte IDs werden unverändert angezeigt.
    """
    rows = []
    for a in school_data.assignments:
        cls = school_data.class_by_id(a.class_id)
        subject = school_data.subject_by_id(a.subject_id)
        teacher = school_data.teacher_by_id(a.teacher_id)
        rows.append({
            "class": cls.name if cls else a.class_id,
            "grade": cls.grade if cls else 0,
            "subject_id": a.subject_id,
            "subject": subject.short_name if subject else a.subject_id,
            "semester": a.semester,
            "teacher": teacher.short_name if teacher else a.teacher_id,
            "hours": a.hours_per_week,
            "team": a.team_teaching_id[:8] if a.team_teaching_id else "",
            "optimized": a.is_optimized,
        })
    rows.sort(key=lambda r: (r["grade"], r["class"], r["subject"], r["semester"]))
    return rows
