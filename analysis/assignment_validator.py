"""Validierung der Lehrerzuweisungen nach einem Optimizer-Lauf.

Prüft die fertigen Zuweisungen unabhängig vom Optimizer als Sicherheitsnetz.
"""

from collections import defaultdict
from typing import Literal, Optional

from pydantic import BaseModel

from analysis.team_teaching import team_ids, validate_team_teaching_group
from config.defaults import CURRICULUM, SEMESTER_SUBJECT_ALIASES
from models.assignment import Assignment
from models.school_data import SchoolData
from solver.qualification import QualificationMatcher


class ValidationViolation(BaseModel):
    """Eine einzelne Regelverletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "deputat_exceeded"
    description: str
    entity: str          # teacher_id / team_teaching_id / assignment_id


class ValidationReport(BaseModel):
    """Ergebnis der Zuweisungs-Validierung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [v for v in self.violations if v.severity == "error"]
        warnings = [v for v in self.violations if v.severity == "warning"]

        status = (
            "[bold green]✓ VALIDE[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Zuweisungs-Validierung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Regel", width=24)
        table.add_column("Entität", width=12)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity[:12],
                v.description,
            )
        console.print(table)


def base_subject_for(code: str) -> Optional[str]:
    """Ordnet ein Halbjahresfach ("D1", "DE2", "BI1") seinem Basisfach zu."""
    for base, entry in CURRICULUM.items():
        if code == base:
            return base
        for sem_code in entry.semesters:
            if code == sem_code or code in SEMESTER_SUBJECT_ALIASES.get(sem_code, ()):
                return base
    return None


class AssignmentValidator:
    """Prüft die Zuweisungen eines SchoolData-Datensatzes."""

    def __init__(self, matcher: Optional[QualificationMatcher] = None) -> None:
        self.matcher = matcher or QualificationMatcher()

    def validate(self, data: SchoolData) -> ValidationReport:
        violations: list[ValidationViolation] = []

        violations.extend(self._check_unknown_or_inactive(data))
        violations.extend(self._check_deputat_bounds(data))
        violations.extend(self._check_team_groups(data))
        violations.extend(self._check_qualification(data))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_unknown_or_inactive(self, data: SchoolData) -> list[ValidationViolation]:
        violations: list[ValidationViolation] = []
        reported: set[str] = set()
        for a in data.assignments:
            if a.teacher_id in reported:
                continue
            teacher = data.teacher_by_id(a.teacher_id)
            if teacher is None:
                reported.add(a.teacher_id)
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="unknown_teacher",
                    entity=a.teacher_id,
                    description=f"Lehrkraft {a.teacher_id} existiert nicht.",
                ))
            elif not teacher.is_active:
                reported.add(a.teacher_id)
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="inactive_teacher",
                    entity=a.teacher_id,
                    description=f"{teacher.short_name} ist inaktiv, hat aber Zuweisungen.",
                ))
        return violations

    def _check_deputat_bounds(self, data: SchoolData) -> list[ValidationViolation]:
        """Summe der Zuweisungsstunden ≤ max_hours pro Lehrkraft."""
        violations: list[ValidationViolation] = []
        load: dict[str, float] = defaultdict(float)
        for a in data.assignments:
            load[a.teacher_id] += a.hours_per_week

        for teacher in data.teachers:
            actual = load.get(teacher.id, 0.0)
            if actual > teacher.max_hours:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="deputat_exceeded",
                    entity=teacher.id,
                    description=(
                        f"{teacher.short_name}: Ist {actual:g}h > Max {teacher.max_hours:g}h "
                        f"(Überschreitung: +{actual - teacher.max_hours:g}h)."
                    ),
                ))
        return violations

    def _check_team_groups(self, data: SchoolData) -> list[ValidationViolation]:
        violations: list[ValidationViolation] = []
        for team_id in team_ids(data.assignments):
            report = validate_team_teaching_group(data.assignments, team_id)
            for error in report.errors:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="team_teaching_inconsistent",
                    entity=team_id,
                    description=error,
                ))
        return violations

    def _check_qualification(self, data: SchoolData) -> list[ValidationViolation]:
        """Warnung, wenn eine Zuweisung nicht streng zur Qualifikation passt.

        Trifft typischerweise Treffer der Ausweichsuche.
        """
        violations: list[ValidationViolation] = []
        for a in data.assignments:
            teacher = data.teacher_by_id(a.teacher_id)
            base = self._base_subject(data, a)
            if teacher is None or base is None:
                continue
            if not self.matcher.is_qualified(teacher, base):
                violations.append(ValidationViolation(
                    severity="warning",
                    constraint="not_strictly_qualified",
                    entity=a.id,
                    description=(
                        f"{teacher.short_name} unterrichtet {base} (Halbjahr {a.semester}) "
                        f"ohne passende Qualifikation ({', '.join(teacher.qualifications) or '-'})."
                    ),
                ))
        return violations

    @staticmethod
    def _base_subject(data: SchoolData, assignment: Assignment) -> Optional[str]:
        subject = data.subject_by_id(assignment.subject_id)
        code = subject.short_name if subject else assignment.subject_id
        return base_subject_for(code)
