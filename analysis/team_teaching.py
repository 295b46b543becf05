"""Team-Teaching: mehrere Lehrkräfte teilen sich eine Zuweisung.

Eine Gruppe sind alle Zuweisungszeilen mit derselben ``team_teaching_id``.
Alle Zeilen einer Gruppe beziehen sich auf dieselbe Klasse, dasselbe Fach,
dasselbe Halbjahr und dieselbe Stundenzahl, aber auf verschiedene Lehrkräfte.
"""

import logging

from pydantic import BaseModel

from models.assignment import Assignment, new_id
from models.teacher import Teacher

logger = logging.getLogger(__name__)


class TeamTeachingError(ValueError):
    """Ungültige Team-Teaching-Operation (unbekannte Zeile, Duplikate, ...)."""


class TeamValidationReport(BaseModel):
    is_valid: bool
    errors: list[str] = []


def get_team_teaching_group(assignments: list[Assignment], team_id: str) -> list[Assignment]:
    return [a for a in assignments if a.team_teaching_id == team_id]


def create_team_teaching(
    assignments: list[Assignment],
    base_assignment_id: str,
    teacher_ids: list[str],
    teachers: list[Teacher],
) -> list[Assignment]:
    """Bildet aus einer bestehenden Zuweisung eine Team-Teaching-Gruppe.

    Für jede Lehrkraft, die noch nicht in der Gruppe ist, wird eine neue
    Zeile an ``assignments`` angehängt und ihr ``assigned_hours``
    fortgeschrieben. Gibt die vollständige Gruppe zurück.

    Alle Prüfungen laufen vor der ersten Änderung: schlägt eine fehl,
    bleiben ``assignments`` und ``teachers`` unverändert.

    Raises:
        TeamTeachingError: Basiszeile unbekannt, doppelte Lehrkräfte in der
            Anfrage, weniger als zwei Lehrkräfte in der Gruppe, Lehrkraft
            unbekannt oder inaktiv, oder Deputat würde überschritten.
    """
    base = next((a for a in assignments if a.id == base_assignment_id), None)
    if base is None:
        raise TeamTeachingError(f"Zuweisung {base_assignment_id} nicht gefunden")
    if len(set(teacher_ids)) != len(teacher_ids):
        raise TeamTeachingError("Doppelte Lehrkräfte im Team-Teaching nicht erlaubt")

    team_id = base.team_teaching_id or new_id()
    group = get_team_teaching_group(assignments, team_id) if base.team_teaching_id else []
    members = {a.teacher_id for a in group} | {base.teacher_id}

    if len(members | set(teacher_ids)) < 2:
        raise TeamTeachingError("Team-Teaching braucht mindestens zwei Lehrkräfte")

    roster = {t.id: t for t in teachers}
    new_members: list[tuple[Teacher, float]] = []
    for teacher_id in teacher_ids:
        if teacher_id in members:
            continue
        teacher = roster.get(teacher_id)
        if teacher is None:
            raise TeamTeachingError(f"Lehrkraft {teacher_id} existiert nicht")
        if not teacher.is_active:
            raise TeamTeachingError(f"Lehrkraft {teacher.short_name} ist nicht aktiv")
        booked = booked_hours(assignments, teacher.id)
        if booked + base.hours_per_week > teacher.max_hours:
            raise TeamTeachingError(
                f"{teacher.short_name}: {booked:g}h + {base.hours_per_week:g}h "
                f"> Max {teacher.max_hours:g}h"
            )
        new_members.append((teacher, booked))

    base.team_teaching_id = team_id
    for teacher, booked in new_members:
        assignments.append(Assignment(
            teacher_id=teacher.id,
            class_id=base.class_id,
            subject_id=base.subject_id,
            semester=base.semester,
            hours_per_week=base.hours_per_week,
            team_teaching_id=team_id,
        ))
        teacher.assigned_hours = booked + base.hours_per_week
        members.add(teacher.id)

    logger.info(f"Team-Teaching {team_id[:8]}: {len(members)} Lehrkräfte")
    return get_team_teaching_group(assignments, team_id)


def booked_hours(assignments: list[Assignment], teacher_id: str) -> float:
    """Summe der Wochenstunden aller Zeilen einer Lehrkraft (beide Halbjahre)."""
    return sum(a.hours_per_week for a in assignments if a.teacher_id == teacher_id)


def remove_from_team_teaching(assignments: list[Assignment], assignment_id: str) -> None:
    """Löst eine Zeile aus ihrer Gruppe.

    Bleibt danach nur eine Lehrkraft übrig, wird die ganze Gruppe aufgelöst.
    """
    row = next((a for a in assignments if a.id == assignment_id), None)
    if row is None:
        raise TeamTeachingError(f"Zuweisung {assignment_id} nicht gefunden")
    if row.team_teaching_id is None:
        raise TeamTeachingError(f"Zuweisung {assignment_id} ist in keiner Team-Teaching-Gruppe")

    group = get_team_teaching_group(assignments, row.team_teaching_id)
    if len(group) <= 2:
        for a in group:
            a.team_teaching_id = None
        logger.info("Team-Teaching aufgelöst (nur noch eine Lehrkraft)")
    else:
        row.team_teaching_id = None


def validate_team_teaching_group(
    assignments: list[Assignment], team_id: str
) -> TeamValidationReport:
    group = get_team_teaching_group(assignments, team_id)
    errors: list[str] = []

    if len(group) < 2:
        errors.append("Team-Teaching-Gruppe muss mindestens 2 Lehrkräfte haben")
    if group:
        first = group[0]
        for a in group[1:]:
            if a.class_id != first.class_id:
                errors.append("Alle Zuweisungen müssen dieselbe Klasse haben")
            if a.subject_id != first.subject_id:
                errors.append("Alle Zuweisungen müssen dasselbe Fach haben")
            if a.semester != first.semester:
                errors.append("Alle Zuweisungen müssen dasselbe Halbjahr haben")
            if a.hours_per_week != first.hours_per_week:
                errors.append("Alle Zuweisungen müssen dieselbe Stundenzahl haben")
    teacher_ids = [a.teacher_id for a in group]
    if len(set(teacher_ids)) != len(teacher_ids):
        errors.append("Doppelte Lehrkräfte im Team-Teaching nicht erlaubt")

    # Meldungen nur einmal
    errors = list(dict.fromkeys(errors))
    return TeamValidationReport(is_valid=not errors, errors=errors)


def team_ids(assignments: list[Assignment]) -> list[str]:
    """Alle Team-Teaching-IDs in Reihenfolge des ersten Auftretens."""
    return list(dict.fromkeys(a.team_teaching_id for a in assignments if a.team_teaching_id))
