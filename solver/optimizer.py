"""Greedy-Lehrerzuweisung für beide Halbjahre (First-Fit in Roster-Reihenfolge).

Ablauf pro (Klasse, Basisfach):
  1. Vorfilter: Eignungs-Ausnahmen entfernen
  2. Strenge Suche: erste Lehrkraft mit passender Qualifikation und
     ausreichend Restdeputat für BEIDE Halbjahre
  3. Ausweichsuche: lockerer Teilstring-Abgleich, gleiche Kapazitätsprüfung
  4. Sonst unbesetzt (nur gezählt und geloggt, keine Ausnahme)

Jeder Lauf verwirft alle bisherigen Zuweisungen und rechnet komplett neu.
Keine Lastverteilung, kein Backtracking: das Ergebnis ist deterministisch,
aber nicht global optimal.
"""

import logging
from typing import Iterable, Literal, Mapping, Optional

from pydantic import BaseModel

from config.defaults import (
    CURRICULUM,
    GRADE_SUBJECT_THRESHOLDS,
    MAX_GRADE,
    MIN_GRADE,
    SEMESTER_SUBJECT_ALIASES,
)
from config.schema import CurriculumEntry, GradeThreshold
from models.assignment import Assignment
from models.school_class import ClassUnit
from models.school_data import SchoolData
from models.subject import Subject
from models.teacher import Teacher
from solver.qualification import EligibilityFilter, QualificationMatcher

logger = logging.getLogger(__name__)

MatchKind = Literal["strict", "fallback"]


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class UnresolvedDemand(BaseModel):
    """Klasse/Fach ohne geeignete Lehrkraft (auch nach Ausweichsuche)."""

    class_id: str
    class_name: str
    base_subject: str
    weekly_hours: float


class CommittedPair(BaseModel):
    """Besetztes (Klasse, Basisfach)-Paar."""

    class_id: str
    base_subject: str
    teacher_id: str
    match: MatchKind


class OptimizationResult(BaseModel):
    """Vollständiges Ergebnis eines Optimizer-Laufs."""

    assignments: list[Assignment]
    committed: list[CommittedPair]
    unresolved: list[UnresolvedDemand]
    workload: dict[str, float]
    discarded_count: int

    @property
    def created_count(self) -> int:
        return len(self.assignments)

    @property
    def strict_count(self) -> int:
        return sum(1 for c in self.committed if c.match == "strict")

    @property
    def fallback_count(self) -> int:
        return sum(1 for c in self.committed if c.match == "fallback")

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved)

    @property
    def required_count(self) -> int:
        return len(self.committed) + len(self.unresolved)


# ─── Arbeitslast ──────────────────────────────────────────────────────────────

class WorkloadTracker:
    """Laufende Stunden pro Lehrkraft während EINES Optimizer-Laufs."""

    def __init__(self, teachers: Iterable[Teacher]) -> None:
        self._max: dict[str, float] = {t.id: t.max_hours for t in teachers}
        self._load: dict[str, float] = {tid: 0.0 for tid in self._max}

    def current(self, teacher_id: str) -> float:
        return self._load.get(teacher_id, 0.0)

    def fits(self, teacher: Teacher, hours: float) -> bool:
        return self.current(teacher.id) + hours <= teacher.max_hours

    def commit(self, teacher: Teacher, hours: float) -> float:
        """Bucht Stunden; eine Überschreitung des Deputats wird nie gebucht."""
        if not self.fits(teacher, hours):
            raise ValueError(
                f"Lehrkraft {teacher.short_name}: {self.current(teacher.id) + hours:g}h "
                f"> max. {teacher.max_hours:g}h"
            )
        self._load[teacher.id] = self.current(teacher.id) + hours
        return self._load[teacher.id]

    def snapshot(self) -> dict[str, float]:
        return dict(self._load)


# ─── Optimizer ────────────────────────────────────────────────────────────────

class AssignmentOptimizer:
    """First-Fit-Zuweisung von Lehrkräften zu Klassen und Basisfächern.

    Verwendung:
        optimizer = AssignmentOptimizer()
        result = optimizer.run(school_data)
    """

    def __init__(
        self,
        curriculum: Mapping[str, CurriculumEntry] = CURRICULUM,
        thresholds: Iterable[GradeThreshold] = GRADE_SUBJECT_THRESHOLDS,
        matcher: Optional[QualificationMatcher] = None,
        eligibility: Optional[EligibilityFilter] = None,
    ) -> None:
        self.curriculum = curriculum
        self.thresholds = sorted(thresholds, key=lambda th: th.min_grade)
        self.matcher = matcher or QualificationMatcher()
        self.eligibility = eligibility or EligibilityFilter()

    def required_subjects(self, grade: int) -> list[str]:
        """Basisfächer eines Jahrgangs laut Schwellentabelle."""
        if not MIN_GRADE <= grade <= MAX_GRADE:
            return []
        subjects: list[str] = []
        for th in self.thresholds:
            if grade >= th.min_grade:
                subjects.extend(s for s in th.subjects if s not in subjects)
        return subjects

    def run(self, data: SchoolData) -> OptimizationResult:
        """Verwirft alle Zuweisungen von ``data`` und berechnet sie neu."""
        discarded = len(data.assignments)
        data.assignments = []

        teachers = [t for t in data.teachers if t.is_active]
        tracker = WorkloadTracker(teachers)

        logger.info(
            f"Optimierung startet: {len(teachers)} Lehrkräfte, "
            f"{len(data.classes)} Klassen, {len(data.subjects)} Fächer "
            f"({discarded} alte Zuweisungen verworfen)"
        )

        assignments: list[Assignment] = []
        committed: list[CommittedPair] = []
        unresolved: list[UnresolvedDemand] = []

        for cls in data.classes:
            for base in self.required_subjects(cls.grade):
                entry = self.curriculum.get(base)
                if entry is None:
                    continue
                both_semesters = entry.weekly_hours * 2
                pool = self.eligibility.candidates(teachers, base)

                teacher, match = self._find_strict(pool, base, tracker, both_semesters), "strict"
                if teacher is None:
                    logger.debug(f"  {cls.name}/{base}: keine streng passende Lehrkraft")
                    teacher, match = self._find_fallback(pool, base, tracker, both_semesters), "fallback"

                if teacher is None:
                    logger.warning(
                        f"Keine geeignete Lehrkraft für {base} in Klasse {cls.name} – "
                        f"Zuweisung übersprungen"
                    )
                    unresolved.append(UnresolvedDemand(
                        class_id=cls.id, class_name=cls.name,
                        base_subject=base, weekly_hours=entry.weekly_hours,
                    ))
                    continue

                load = tracker.commit(teacher, both_semesters)
                logger.info(
                    f"  {cls.name}/{base}: {teacher.short_name} "
                    f"({load:g}h / {teacher.max_hours:g}h){' [Ausweich]' if match == 'fallback' else ''}"
                )
                assignments.extend(self._semester_rows(cls, base, entry, teacher, data.subjects))
                committed.append(CommittedPair(
                    class_id=cls.id, base_subject=base,
                    teacher_id=teacher.id, match=match,
                ))

        workload = tracker.snapshot()
        for t in teachers:
            t.assigned_hours = workload.get(t.id, 0.0)
        data.assignments = assignments

        logger.info(
            f"Optimierung fertig: {len(assignments)} Zuweisungen, "
            f"{len(unresolved)} unbesetzt"
        )
        return OptimizationResult(
            assignments=assignments,
            committed=committed,
            unresolved=unresolved,
            workload=workload,
            discarded_count=discarded,
        )

    # ─── Suche ────────────────────────────────────────────────────────────────

    def _find_strict(
        self, pool: list[Teacher], base: str, tracker: WorkloadTracker, hours: float
    ) -> Optional[Teacher]:
        for teacher in pool:
            if not tracker.fits(teacher, hours):
                logger.debug(
                    f"    Deputat-Grenze: {teacher.short_name} "
                    f"({tracker.current(teacher.id) + hours:g}h > {teacher.max_hours:g}h)"
                )
                continue
            if self.matcher.is_qualified(teacher, base):
                return teacher
        return None

    def _find_fallback(
        self, pool: list[Teacher], base: str, tracker: WorkloadTracker, hours: float
    ) -> Optional[Teacher]:
        for teacher in pool:
            if tracker.fits(teacher, hours) and self.matcher.is_loosely_qualified(teacher, base):
                return teacher
        return None

    # ─── Zuweisungszeilen ─────────────────────────────────────────────────────

    def _semester_rows(
        self,
        cls: ClassUnit,
        base: str,
        entry: CurriculumEntry,
        teacher: Teacher,
        subjects: list[Subject],
    ) -> list[Assignment]:
        rows = []
        for semester, code in zip(("1", "2"), entry.semesters):
            subject = find_semester_subject(subjects, code, base)
            if subject is None:
                logger.warning(
                    f"    Fach {code}/{base} nicht im Fächerstamm – "
                    f"Kürzel wird als Fach-ID verwendet"
                )
            rows.append(Assignment(
                teacher_id=teacher.id,
                class_id=cls.id,
                subject_id=subject.id if subject else code,
                semester=semester,
                hours_per_week=entry.weekly_hours,
                is_optimized=True,
            ))
        return rows


def find_semester_subject(
    subjects: list[Subject], semester_code: str, base: str
) -> Optional[Subject]:
    """Sucht das Halbjahresfach im Fächerstamm.

    Reihenfolge: Aliase des Halbjahresfachs, direktes Kürzel des
    Halbjahresfachs, zuletzt das Basisfach selbst.
    """
    by_short = {s.short_name: s for s in subjects}
    for alias in SEMESTER_SUBJECT_ALIASES.get(semester_code, (semester_code,)):
        if alias in by_short:
            return by_short[alias]
    return by_short.get(semester_code) or by_short.get(base)
