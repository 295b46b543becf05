"""Stundenbedarf pro Klasse und Jahrgang ohne Doppelzählung paralleler Fächer.

Parallelfächer (Religion, Differenzierung) belegen einen gemeinsamen
Zeitslot. Pro Klasse zählt eine Gruppe deshalb nur einmal, und pro Jahrgang
wird das Maximum über die Klassen genommen statt der Summe.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel

from models.parallel_group import ParallelGroup
from models.school_class import ClassUnit

logger = logging.getLogger(__name__)


def halve_for_semester(hours: float) -> float:
    """Halbiert auf Halbjahressicht, auf eine Nachkommastelle (kaufmännisch).

    Dezimal gerechnet: 2,9 → 1,45 → 1,5. Mit float läge 1,45 knapp darunter
    und würde zu 1,4.
    """
    half = Decimal(str(hours)) / 2
    return float(half.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class ClassHours(BaseModel):
    """Korrigierter Stundenbedarf einer Klasse."""

    parallel_group_hours: dict[str, float]
    regular_hours: dict[str, float]
    total_hours: float


class GradeHours(BaseModel):
    """Korrigierter Stundenbedarf eines Jahrgangs."""

    grade: int
    parallel_group_hours: dict[str, float] = {}
    regular_hours: dict[str, float] = {}
    total_hours: float = 0.0
    class_count: int = 0

    def recompute_total(self) -> None:
        self.total_hours = (
            sum(self.parallel_group_hours.values()) + sum(self.regular_hours.values())
        )


class ClassHoursSummary(BaseModel):
    """Anzeige-Zusammenfassung: Rohsumme vs. korrigierte Summe."""

    class_id: str
    raw_total: float
    corrected_total: float
    parallel_group_hours: dict[str, float]

    @property
    def saved_hours(self) -> float:
        return self.raw_total - self.corrected_total


class ParallelGroupResolver:
    """Trennt die Fachstunden einer Klasse in Gruppen- und Einzelstunden."""

    def __init__(self, groups: Iterable[ParallelGroup]) -> None:
        self.groups: dict[str, ParallelGroup] = {g.id: g for g in groups}
        self._group_of: dict[str, ParallelGroup] = {}
        for group in self.groups.values():
            for code in group.subjects:
                # Erste Gruppe gewinnt, falls ein Kürzel mehrfach vorkommt
                self._group_of.setdefault(code, group)

    def group_for_subject(self, code: str) -> Optional[ParallelGroup]:
        return self._group_of.get(code)

    def resolve(
        self,
        subject_hours: Mapping[str, float],
        grade: int,
        semester_view: bool = False,
    ) -> ClassHours:
        """Berechnet den korrigierten Bedarf einer Klasse.

        Das erste Fach einer Gruppe trägt die feste Gruppenstundenzahl des
        Jahrgangs ein, weitere Fächer derselben Gruppe zählen nicht mehr.
        """
        parallel_group_hours: dict[str, float] = {}
        regular_hours: dict[str, float] = {}

        for code, hours in subject_hours.items():
            group = self.group_for_subject(code)
            if group is not None:
                if group.id in parallel_group_hours:
                    continue
                value = group.hours_for_grade(grade)
                parallel_group_hours[group.id] = (
                    halve_for_semester(value) if semester_view else value
                )
            else:
                regular_hours[code] = halve_for_semester(hours) if semester_view else hours

        total = sum(parallel_group_hours.values()) + sum(regular_hours.values())
        return ClassHours(
            parallel_group_hours=parallel_group_hours,
            regular_hours=regular_hours,
            total_hours=total,
        )

    def class_summary(self, cls: ClassUnit) -> ClassHoursSummary:
        corrected = self.resolve(cls.subject_hours, cls.grade)
        return ClassHoursSummary(
            class_id=cls.id,
            raw_total=cls.raw_total_hours,
            corrected_total=corrected.total_hours,
            parallel_group_hours=corrected.parallel_group_hours,
        )


class HourAggregator:
    """Rollt den Klassenbedarf auf Jahrgänge hoch.

    Einzelfächer werden über die Klassen summiert, Parallelgruppen nehmen
    das Maximum (ein gemeinsamer Slot für alle Klassen des Jahrgangs).
    """

    def __init__(self, resolver: ParallelGroupResolver) -> None:
        self.resolver = resolver

    def aggregate(self, classes: Iterable[ClassUnit]) -> dict[int, GradeHours]:
        result: dict[int, GradeHours] = {}

        for cls in classes:
            acc = result.get(cls.grade)
            if acc is None:
                acc = result[cls.grade] = GradeHours(grade=cls.grade)

            class_hours = self.resolver.resolve(cls.subject_hours, cls.grade)

            for group_id, hours in class_hours.parallel_group_hours.items():
                acc.parallel_group_hours[group_id] = max(
                    acc.parallel_group_hours.get(group_id, 0.0), hours
                )
            for code, hours in class_hours.regular_hours.items():
                acc.regular_hours[code] = acc.regular_hours.get(code, 0.0) + hours

            acc.class_count += 1
            acc.recompute_total()

        logger.debug(
            f"Jahrgangsbedarf: "
            + ", ".join(f"Jg.{g}={gh.total_hours:g}h" for g, gh in sorted(result.items()))
        )
        return result
