"""Auslastungsbericht nach einem Optimizer-Lauf.

Analysiert Lehrer-Auslastung, Abdeckung des Bedarfs und Qualifikationstreue
und fasst alles zu einer Gesamtbewertung zusammen.
"""

from collections import defaultdict
from typing import Literal, Optional

from pydantic import BaseModel

from analysis.assignment_validator import base_subject_for
from models.school_data import SchoolData
from solver.optimizer import AssignmentOptimizer, OptimizationResult
from solver.qualification import QualificationMatcher

Rating = Literal["optimal", "good", "warning", "poor"]


# ─── Metriken-Modelle ─────────────────────────────────────────────────────────

class TeacherWorkloadMetrics(BaseModel):
    """Auslastung einer einzelnen Lehrkraft."""

    teacher_id: str
    short_name: str
    assigned_hours: float
    max_hours: float
    utilization: float           # 0–100 (%)
    subjects_taught: list[str]


class WorkloadReport(BaseModel):
    """Vollständiger Auslastungsbericht."""

    teacher_metrics: list[TeacherWorkloadMetrics]
    required_pairs: int
    resolved_pairs: int
    coverage_rate: float          # 0.0–1.0
    qualification_rate: float     # 0.0–1.0
    fairness_index: float         # Jain's fairness index (1.0 = perfekt)
    average_score: float          # 0–100
    rating: Rating
    warnings: list[str]


def rate(score: float) -> Rating:
    if score >= 95:
        return "optimal"
    if score >= 85:
        return "good"
    if score >= 70:
        return "warning"
    return "poor"


def jain_index(values: list[float]) -> float:
    """Jain's Fairness Index: (Σ x_i)² / (n · Σ x_i²)."""
    n = len(values)
    sum_sq = sum(v * v for v in values)
    if n == 0 or sum_sq == 0:
        return 1.0
    return sum(values) ** 2 / (n * sum_sq)


# ─── Analyzer ─────────────────────────────────────────────────────────────────

class WorkloadAnalyzer:
    """Berechnet Auslastungsmetriken für die Zuweisungen eines Datensatzes."""

    def __init__(
        self,
        optimizer: Optional[AssignmentOptimizer] = None,
        matcher: Optional[QualificationMatcher] = None,
    ) -> None:
        self.optimizer = optimizer or AssignmentOptimizer()
        self.matcher = matcher or QualificationMatcher()

    def analyze(
        self, data: SchoolData, result: Optional[OptimizationResult] = None
    ) -> WorkloadReport:
        teacher_metrics = self._teacher_metrics(data)

        if result is not None:
            required, resolved = result.required_count, len(result.committed)
        else:
            required, resolved = self._coverage_from_assignments(data)
        coverage = resolved / required if required else 1.0

        qualification = self._qualification_rate(data)
        fairness = jain_index([m.utilization for m in teacher_metrics])

        average = (coverage * 100 + qualification * 100 + fairness * 100) / 3
        warnings: list[str] = []
        if qualification < 0.8:
            warnings.append("Einige Zuweisungen erfolgen an Lehrkräfte ohne passende Qualifikation")
        if fairness < 0.7:
            warnings.append("Ungleichmäßige Verteilung der Arbeitsbelastung erkannt")
        if coverage < 0.9:
            warnings.append("Nicht alle erforderlichen Stunden konnten zugewiesen werden")
        if not data.assignments:
            warnings.append("Keine Zuweisungen vorhanden")

        return WorkloadReport(
            teacher_metrics=teacher_metrics,
            required_pairs=required,
            resolved_pairs=resolved,
            coverage_rate=round(coverage, 4),
            qualification_rate=round(qualification, 4),
            fairness_index=round(fairness, 4),
            average_score=round(average, 2),
            rating=rate(average),
            warnings=warnings,
        )

    def print_rich(self, report: WorkloadReport) -> None:
        """Gibt den Auslastungsbericht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()

        rating_color = {
            "optimal": "green", "good": "green", "warning": "yellow", "poor": "red",
        }[report.rating]
        fairness_color = (
            "green" if report.fairness_index >= 0.95
            else "yellow" if report.fairness_index >= 0.85
            else "red"
        )
        console.print(Panel(
            f"Bewertung: [{rating_color}][bold]{report.rating}[/bold][/{rating_color}] "
            f"(Ø {report.average_score:.1f})\n"
            f"Abdeckung: [bold]{report.resolved_pairs}/{report.required_pairs}[/bold] "
            f"({report.coverage_rate:.1%})\n"
            f"Qualifikationstreue: {report.qualification_rate:.1%}\n"
            f"Deputat-Fairness (Jain): "
            f"[{fairness_color}]{report.fairness_index:.4f}[/{fairness_color}] (1.0 = perfekt)",
            title="Auslastungsbericht – Übersicht",
            border_style="cyan",
        ))

        table = Table(title="Lehrer-Auslastung", box=box.ROUNDED, show_lines=False)
        table.add_column("Kürzel", width=8)
        table.add_column("Ist", justify="right", width=6)
        table.add_column("Max", justify="right", width=6)
        table.add_column("Auslastung", justify="right", width=10)
        table.add_column("Fächer")

        for m in sorted(report.teacher_metrics, key=lambda x: x.short_name):
            color = "green" if m.utilization >= 80 else "yellow" if m.utilization >= 40 else "dim"
            table.add_row(
                m.short_name,
                f"{m.assigned_hours:g}",
                f"{m.max_hours:g}",
                f"[{color}]{m.utilization:.0f}%[/{color}]",
                ", ".join(m.subjects_taught),
            )
        console.print(table)

        for w in report.warnings:
            console.print(f"[yellow]⚠ {w}[/yellow]")

    # ── Private Berechnungen ──────────────────────────────────────────────────

    def _teacher_metrics(self, data: SchoolData) -> list[TeacherWorkloadMetrics]:
        hours: dict[str, float] = defaultdict(float)
        subjects: dict[str, set[str]] = defaultdict(set)
        for a in data.assignments:
            hours[a.teacher_id] += a.hours_per_week
            subject = data.subject_by_id(a.subject_id)
            code = subject.short_name if subject else a.subject_id
            subjects[a.teacher_id].add(base_subject_for(code) or code)

        metrics = []
        for t in data.teachers:
            if not t.is_active:
                continue
            actual = hours.get(t.id, 0.0)
            metrics.append(TeacherWorkloadMetrics(
                teacher_id=t.id,
                short_name=t.short_name,
                assigned_hours=actual,
                max_hours=t.max_hours,
                utilization=round(actual / t.max_hours * 100, 1) if t.max_hours else 0.0,
                subjects_taught=sorted(subjects.get(t.id, set())),
            ))
        return metrics

    def _qualification_rate(self, data: SchoolData) -> float:
        checked = qualified = 0
        for a in data.assignments:
            teacher = data.teacher_by_id(a.teacher_id)
            subject = data.subject_by_id(a.subject_id)
            base = base_subject_for(subject.short_name if subject else a.subject_id)
            if teacher is None or base is None:
                continue
            checked += 1
            if self.matcher.is_qualified(teacher, base):
                qualified += 1
        return qualified / checked if checked else 1.0

    def _coverage_from_assignments(self, data: SchoolData) -> tuple[int, int]:
        """(benötigte, besetzte) Klasse/Basisfach-Paare aus den Zuweisungen."""
        covered: set[tuple[str, str]] = set()
        for a in data.assignments:
            subject = data.subject_by_id(a.subject_id)
            base = base_subject_for(subject.short_name if subject else a.subject_id)
            if base:
                covered.add((a.class_id, base))

        required = resolved = 0
        for cls in data.classes:
            for base in self.optimizer.required_subjects(cls.grade):
                if base not in self.optimizer.curriculum:
                    continue
                required += 1
                if (cls.id, base) in covered:
                    resolved += 1
        return required, resolved
