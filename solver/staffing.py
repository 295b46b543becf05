"""Planstellen-Berechnung: Stundenbedarf gegen vorhandene Lehrerstunden.

Zwei unabhängige Modi mit demselben Ergebnisformat (Liste von
StaffingReportLine):

  A) aus dem Bestand: Jahrgangsbedarf (HourAggregator) vs. zugewiesene
     Stunden der passend qualifizierten Lehrkräfte
  B) aus den Eingabewerten des Planstellen-Arbeitsblatts (PolicyInput),
     inkl. Stellen-Soll, Soll-Ist-Vergleich, Leitungspauschalen und
     Klassenbildung
"""

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel

from config.defaults import REPORT_COLORS
from config.schema import (
    ADDITIONAL_POSITION_FIELDS,
    BASE_DATA_FIELDS,
    BASE_NEED_FIELDS,
    COMPENSATION_FIELDS,
    FREE_LINE_FIELDS,
    OTHER_AREA_FIELDS,
    PERSONNEL_FIELDS,
    STAFFING_FIELDS,
    PolicyInput,
)
from models.parallel_group import ParallelGroup
from models.staffing import FormulaDescriptor, StaffingReportLine
from models.subject import Subject, find_subject
from models.teacher import Teacher
from solver.hours import GradeHours
from solver.qualification import QualificationMatcher

logger = logging.getLogger(__name__)

# Schüler je Klasse für die Sollklassenzahl (F69)
CLASS_SIZE_DIVISOR = 28


class PolicyCalculation(BaseModel):
    """Ergebnis von Modus B inkl. aller Zwischenwerte des Arbeitsblatts."""

    quotient: float              # F5
    quotient_truncated: float    # F6, fließt in den Grundbedarf
    rounded_base: float          # F7, nur ausgewiesen
    sum_base_need: float         # F10
    sum_compensation_need: float # F27
    sum_other_areas: float
    grand_total_hours: float     # F34
    required_positions: float

    additional_positions: float      # F36
    sum_staffing: float              # F41
    sum_personnel: float             # F47
    total_position_need: float       # F48, Stellen-Soll
    position_difference: float       # F51, Ist - Soll
    relief_base: float               # F53
    relief_hours_staff: float        # F54
    leadership_extra_relief: float   # F57
    leadership_hours: float          # F60
    leadership_relief_rounded: float # F61
    deputy_share: float              # F63
    principal_allowance: float       # F66
    deputy_allowance: float          # F67
    target_class_count: float        # F69
    class_count_difference: float   # F71
    lesson_hours_difference: float   # F75

    lines: list[StaffingReportLine]


def truncate(value: float, decimals: int = 2) -> float:
    """Schneidet nach ``decimals`` Nachkommastellen ab (Excel TRUNC)."""
    factor = 10 ** decimals
    return math.trunc(value * factor) / factor


def half_step_round(value: float) -> float:
    """Auf ganze bzw. halbe Stelle abrunden (Excel: WENN(F5-GANZZAHL(F5)<0,5;...))."""
    whole = math.floor(value)
    return whole if value - whole < 0.5 else whole + 0.5


def round_half_up(value: float, decimals: int = 0) -> float:
    """Kaufmännisch runden wie Excel RUNDEN, .5 weg von 0 (nicht Pythons ``round``)."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))

class StaffingCalculator:
    """Berechnet Planstellen-Berichtszeilen. Kein I/O, keine Ausnahmen."""

    def __init__(
        self,
        parallel_groups: Iterable[ParallelGroup] = (),
        matcher: Optional[QualificationMatcher] = None,
    ) -> None:
        self.parallel_groups = {g.id: g for g in parallel_groups}
        self.matcher = matcher or QualificationMatcher()

    # ─── Modus A: aus dem Bestand ─────────────────────────────────────────────

    def calculate_from_roster(
        self,
        grade_hours: Mapping[int, GradeHours],
        subjects: list[Subject],
        teachers: list[Teacher],
    ) -> list[StaffingReportLine]:
        lines: list[StaffingReportLine] = []

        for grade, gh in grade_hours.items():
            for group_id, required in gh.parallel_group_hours.items():
                group = self.parallel_groups.get(group_id)
                members = group.subjects if group else ()
                qualified = [
                    t for t in teachers
                    if self.matcher.is_qualified_for_any(t, members)
                ]
                available = sum(t.assigned_hours for t in qualified)
                lines.append(StaffingReportLine(
                    grade=grade,
                    subject_id=None,
                    category="grundbedarf",
                    component=f"{group_id} - Klasse {grade} (Parallelgruppe)",
                    line_type="requirement",
                    required_hours=required,
                    available_hours=available,
                    formula=FormulaDescriptor(
                        op="max",
                        terms=list(members),
                        description=(
                            f"Parallele Fächergruppe {group_id} für Klasse {grade}: "
                            f"Maximum über die Klassen des Jahrgangs"
                        ),
                    ),
                    color=REPORT_COLORS["parallel_group"],
                ))

            for code, required in gh.regular_hours.items():
                subject = find_subject(subjects, code)
                qualified = [t for t in teachers if self.matcher.is_qualified(t, code)]
                available = sum(t.assigned_hours for t in qualified)
                lines.append(StaffingReportLine(
                    grade=grade,
                    subject_id=subject.id if subject else None,
                    category="grundbedarf",
                    component=f"{code} - Klasse {grade}",
                    line_type="requirement",
                    required_hours=required,
                    available_hours=available,
                    formula=FormulaDescriptor(
                        op="sum",
                        terms=[t.short_name for t in qualified],
                        description=(
                            f"Summe über {gh.class_count} Klasse(n) des Jahrgangs {grade}"
                        ),
                    ),
                    color=REPORT_COLORS["subject"],
                ))

        logger.info(f"Planstellen (Bestand): {len(lines)} Bedarfszeilen berechnet")
        return lines

    # ─── Modus B: Arbeitsblatt ────────────────────────────────────────────────

    def calculate_from_policy(self, policy: PolicyInput) -> PolicyCalculation:
        p = policy
        quotient = (
            p.student_count / p.student_teacher_ratio
            if p.student_teacher_ratio else 0.0
        )
        quotient_truncated = truncate(quotient, 2)
        rounded_base = half_step_round(quotient)

        sum_base_need = quotient_truncated + p.training_deduction + p.rounding_adjustment
        sum_compensation_need = sum(getattr(p, f) for f in COMPENSATION_FIELDS)
        other_fields = list(OTHER_AREA_FIELDS) + [v for v, _ in FREE_LINE_FIELDS]
        sum_other_areas = sum(getattr(p, f) for f in other_fields)
        grand_total_hours = sum_base_need + sum_compensation_need + sum_other_areas
        deputat = p.per_position_deputat
        required_positions = grand_total_hours / deputat if deputat else 0.0

        lines: list[StaffingReportLine] = []
        lines += [_base_data_line(_label(f), getattr(p, f))
                  for f in BASE_DATA_FIELDS if getattr(p, f)]
        lines += self._input_lines(p, BASE_NEED_FIELDS, "grundbedarf")
        lines += self._input_lines(p, COMPENSATION_FIELDS, "ausgleichsbedarf")
        lines += self._input_lines(p, OTHER_AREA_FIELDS, "weitere_bereiche")
        for value_field, label_field in FREE_LINE_FIELDS:
            value = getattr(p, value_field)
            if value:
                label = getattr(p, label_field) or _label(value_field)
                lines.append(_direct_line(label, value, "freie_zeilen"))

        lines.append(_calculated_line(
            "Summe Grundbedarf", sum_base_need, "=SUM(F6,F8:F9)",
            [quotient_truncated, p.training_deduction, p.rounding_adjustment],
        ))
        lines.append(_calculated_line(
            "Summe Ausgleichsbedarf", sum_compensation_need, "=SUM(F12:F26)",
            [getattr(p, f) for f in COMPENSATION_FIELDS],
        ))
        lines.append(_calculated_line(
            "Weitere Bereiche", sum_other_areas, "=SUM(F30:F32, freie Zeilen)",
            [getattr(p, f) for f in other_fields],
        ))
        lines.append(_calculated_line(
            "Gesamtsumme Stunden", grand_total_hours,
            "=SUM(F10,F27,weitere Bereiche)",
            [sum_base_need, sum_compensation_need, sum_other_areas],
            color=REPORT_COLORS["total"],
        ))

        sheet, sheet_lines = self._worksheet_evaluation(p, sum_base_need, grand_total_hours)
        lines += sheet_lines

        lines.append(StaffingReportLine(
            category="summe",
            component="Gesamtbedarf Planstellen",
            line_type="summary",
            required_hours=required_positions,
            available_hours=0.0,
            formula=FormulaDescriptor(
                op="divide",
                terms=[grand_total_hours, deputat],
                description=f"Gesamtstunden ({grand_total_hours:.2f}) ÷ Deputat ({deputat:g})",
            ),
            color=REPORT_COLORS["summary"],
        ))

        logger.info(
            f"Planstellen (Arbeitsblatt): {grand_total_hours:.2f}h → "
            f"{required_positions:.2f} Stellen, Stellen-Soll "
            f"{sheet['total_position_need']:.2f}"
        )
        return PolicyCalculation(
            quotient=quotient,
            quotient_truncated=quotient_truncated,
            rounded_base=rounded_base,
            sum_base_need=sum_base_need,
            sum_compensation_need=sum_compensation_need,
            sum_other_areas=sum_other_areas,
            grand_total_hours=grand_total_hours,
            required_positions=required_positions,
            lines=lines,
            **sheet,
        )

    def _worksheet_evaluation(
        self, p: PolicyInput, sum_base_need: float, grand_total_hours: float
    ) -> tuple[dict[str, float], list[StaffingReportLine]]:
        """Abschnitte ab Zeile 35 des Arbeitsblatts (F36-F75).

        Liefert die Zwischenwerte für ``PolicyCalculation`` und die
        zugehörigen Berichtszeilen.
        """
        additional_positions = sum(getattr(p, f) for f in ADDITIONAL_POSITION_FIELDS)
        sum_staffing = sum(getattr(p, f) for f in STAFFING_FIELDS)
        sum_personnel = sum(getattr(p, f) for f in PERSONNEL_FIELDS)
        # F36 steht im Arbeitsblatt, fließt aber nicht in F48 ein
        total_position_need = grand_total_hours + sum_staffing + sum_personnel
        position_difference = p.vorhandene_planstellen - total_position_need

        relief_base = sum_base_need * p.grundstellenbedarf_faktor
        relief_hours_staff = round_half_up(relief_base)

        leadership_extra_relief = total_position_need * 0.7 + p.grundpauschale
        leadership_hours = (
            leadership_extra_relief
            + p.schulleiterentlastung_fortbildung
            + p.ausbau_leitungszeit_schulleiter
        )
        # SUMME(F56:F59): die Grundpauschale zählt hier ein zweites Mal
        leadership_relief_rounded = round_half_up(p.grundpauschale + leadership_hours, 2)
        deputy_share = math.floor(leadership_relief_rounded * 2 / 5)
        principal_allowance = math.trunc(
            p.schulleiter_drei_fuenftel - p.minus_entlastung_stundenplanarbeit / 2
        )
        deputy_allowance = round_half_up(
            deputy_share
            - p.minus_entlastung_stundenplanarbeit / 2
            + (p.schulleiter_drei_fuenftel - math.trunc(p.schulleiter_drei_fuenftel))
        )

        target_class_count = round_half_up(p.student_count / CLASS_SIZE_DIVISOR, 2)
        class_count_difference = target_class_count - p.istklassenzahl
        lesson_hours_difference = (
            p.verfuegbare_unterrichtsstunden - p.unterrichtssoll_nach_kuerzung
        )

        lines: list[StaffingReportLine] = []
        lines += self._input_lines(p, ADDITIONAL_POSITION_FIELDS, "zusaetzliche_stellen")
        lines += self._input_lines(p, STAFFING_FIELDS, "stellenbesetzung")
        lines += self._input_lines(p, PERSONNEL_FIELDS, "personalausstattung")
        lines.append(_calculated_line(
            "Summe Stellenbesetzung", sum_staffing, "=SUM(F38:F40)",
            [getattr(p, f) for f in STAFFING_FIELDS],
        ))
        lines.append(_calculated_line(
            "Summe Personalausstattung", sum_personnel, "=SUM(F44:F46)",
            [getattr(p, f) for f in PERSONNEL_FIELDS],
        ))
        lines.append(_calculated_line(
            "Stellenbedarf (Stellen-Soll) insgesamt", total_position_need,
            "=SUM(F34,F41,F47)", [grand_total_hours, sum_staffing, sum_personnel],
            color=REPORT_COLORS["total"],
        ))

        evaluation = [
            ("Differenz Soll-Ist", position_difference, "subtract",
             "=F50-F48", [p.vorhandene_planstellen, total_position_need]),
            ("Grundstellenbedarf * Faktor", relief_base, "multiply",
             "=F10*F53", [sum_base_need, p.grundstellenbedarf_faktor]),
            ("Entlastungsstunden (Kollegium) gerundet", relief_hours_staff, "round",
             "=RUNDEN(F53;0)", [relief_base]),
            ("zusätzl. Entlastung (abhängig v. Stellenanzahl)",
             leadership_extra_relief, "sum", "=F48*0,7+F56",
             [total_position_need * 0.7, p.grundpauschale]),
            ("Anzahl 44-46 in Stunden", leadership_hours, "sum", "=SUMME(F57:F59)",
             [leadership_extra_relief, p.schulleiterentlastung_fortbildung,
              p.ausbau_leitungszeit_schulleiter]),
            ("Entlastungsstd. (Schulleitung) gerundet 2 Dezimalen",
             leadership_relief_rounded, "round", "=RUNDEN(SUMME(F56:F59);2)",
             [p.grundpauschale, leadership_extra_relief,
              p.schulleiterentlastung_fortbildung, p.ausbau_leitungszeit_schulleiter]),
            ("Stellvertreter 2/5 (abgerundet)", deputy_share, "floor",
             "=ABRUNDEN(F61*2/5)", [leadership_relief_rounded]),
            ("geänderte und abgerundete Schulleiterpauschal", principal_allowance,
             "trunc", "=GANZZAHL(F62-F65/2)",
             [p.schulleiter_drei_fuenftel, p.minus_entlastung_stundenplanarbeit]),
            ("geänderte und aufgerundete Stellvertreterpauschal", deputy_allowance,
             "round", "=RUNDEN(F63-F65/2+(F62-GANZZAHL(F62));0)",
             [deputy_share, p.minus_entlastung_stundenplanarbeit,
              p.schulleiter_drei_fuenftel]),
            ("Sollklassenzahl", target_class_count, "round",
             f"=RUNDEN(F3/{CLASS_SIZE_DIVISOR};2)", [p.student_count, CLASS_SIZE_DIVISOR]),
            ("Abweichung Klassenanzahl", class_count_difference, "subtract",
             "=F69-F70", [target_class_count, p.istklassenzahl]),
            ("Abweichung Unterrichtsstunden", lesson_hours_difference, "subtract",
             "=F73-F74", [p.verfuegbare_unterrichtsstunden,
                          p.unterrichtssoll_nach_kuerzung]),
        ]
        for label, value, op, formula, terms in evaluation:
            lines.append(_calculated_line(
                label, value, formula, terms, op=op, category="auswertung",
            ))

        return {
            "additional_positions": additional_positions,
            "sum_staffing": sum_staffing,
            "sum_personnel": sum_personnel,
            "total_position_need": total_position_need,
            "position_difference": position_difference,
            "relief_base": relief_base,
            "relief_hours_staff": relief_hours_staff,
            "leadership_extra_relief": leadership_extra_relief,
            "leadership_hours": leadership_hours,
            "leadership_relief_rounded": leadership_relief_rounded,
            "deputy_share": deputy_share,
            "principal_allowance": principal_allowance,
            "deputy_allowance": deputy_allowance,
            "target_class_count": target_class_count,
            "class_count_difference": class_count_difference,
            "lesson_hours_difference": lesson_hours_difference,
        }, lines

    def _input_lines(
        self, policy: PolicyInput, fields: Iterable[str], category: str
    ) -> list[StaffingReportLine]:
        return [
            _direct_line(_label(f), getattr(policy, f), category)
            for f in fields
            if getattr(policy, f)
        ]


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _label(field: str) -> str:
    return PolicyInput.model_fields[field].description or field


def _base_data_line(label: str, value: float) -> StaffingReportLine:
    # Schülerzahl und Relation sind keine Stunden: Wert nur in den Operanden
    return StaffingReportLine(
        category="grunddaten",
        component=label,
        line_type="requirement",
        required_hours=0.0,
        available_hours=0.0,
        formula=FormulaDescriptor(
            op="direct", terms=[value],
            description=f"{label}: {value:g} (Eingabewert, geht über den Quotienten ein)",
        ),
        color=REPORT_COLORS["grunddaten"],
    )


def _direct_line(label: str, value: float, category: str) -> StaffingReportLine:
    return StaffingReportLine(
        category=category,
        component=label,
        line_type="requirement",
        required_hours=value,
        available_hours=0.0,
        formula=FormulaDescriptor(
            op="direct", terms=[value], description=f"{label}: Direkteingabe"
        ),
        color=REPORT_COLORS.get(category, "gray"),
    )


def _calculated_line(
    label: str, value: float, formula: str, terms: list[float],
    color: str = REPORT_COLORS["calculated"],
    op: str = "sum",
    category: str = "berechnet",
) -> StaffingReportLine:
    return StaffingReportLine(
        category=category,
        component=label,
        line_type="calculated",
        required_hours=value,
        available_hours=0.0,
        formula=FormulaDescriptor(op=op, terms=terms, description=formula),
        color=color,
    )
