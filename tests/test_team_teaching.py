"""Tests für Team-Teaching-Gruppen."""

import pytest

from analysis.team_teaching import (
    TeamTeachingError,
    booked_hours,
    create_team_teaching,
    get_team_teaching_group,
    remove_from_team_teaching,
    team_ids,
    validate_team_teaching_group,
)
from models.assignment import Assignment
from models.teacher import Teacher


def _make_base(teacher_id: str = "T1") -> list[Assignment]:
    return [Assignment(teacher_id=teacher_id, class_id="7a", subject_id="M1",
                       semester="1", hours_per_week=4)]


def _make_roster(*extra: Teacher) -> list[Teacher]:
    """T1-T3 mit viel Luft, dazu optional weitere Lehrkräfte."""
    teachers = [
        Teacher(id=tid, short_name=tid, qualifications=["M"], max_hours=28)
        for tid in ("T1", "T2", "T3")
    ]
    return teachers + list(extra)


class TestCreateTeamTeaching:
    def test_creates_group(self):
        rows = _make_base()
        group = create_team_teaching(rows, rows[0].id, ["T2"], _make_roster())

        assert len(group) == 2
        assert len(rows) == 2
        assert {a.teacher_id for a in group} == {"T1", "T2"}
        assert len({a.team_teaching_id for a in group}) == 1
        new = rows[1]
        assert (new.class_id, new.subject_id, new.semester, new.hours_per_week) == \
            ("7a", "M1", "1", 4)

    def test_updates_assigned_hours(self):
        """Neue Teamlehrkraft: gebuchte Stunden + Stunden der Basiszeile."""
        rows = _make_base() + [
            Assignment(teacher_id="T2", class_id="8b", subject_id="D1",
                       semester="1", hours_per_week=5),
        ]
        teachers = _make_roster()
        create_team_teaching(rows, rows[0].id, ["T2"], teachers)
        assert teachers[1].assigned_hours == 9
        assert booked_hours(rows, "T2") == 9

    def test_base_teacher_in_request_not_duplicated(self):
        rows = _make_base()
        group = create_team_teaching(rows, rows[0].id, ["T1", "T2"], _make_roster())
        assert len(group) == 2

    def test_duplicate_teachers_rejected(self):
        rows = _make_base()
        with pytest.raises(TeamTeachingError):
            create_team_teaching(rows, rows[0].id, ["T2", "T2"], _make_roster())
        assert len(rows) == 1
        assert rows[0].team_teaching_id is None

    def test_single_teacher_rejected(self):
        rows = _make_base()
        with pytest.raises(TeamTeachingError):
            create_team_teaching(rows, rows[0].id, ["T1"], _make_roster())

    def test_unknown_base_rejected(self):
        with pytest.raises(TeamTeachingError):
            create_team_teaching(_make_base(), "gibt-es-nicht", ["T2"], _make_roster())

    def test_unknown_teacher_rejected(self):
        rows = _make_base()
        with pytest.raises(TeamTeachingError, match="GHOST existiert nicht"):
            create_team_teaching(rows, rows[0].id, ["GHOST"], _make_roster())
        assert len(rows) == 1
        assert rows[0].team_teaching_id is None

    def test_inactive_teacher_rejected(self):
        rows = _make_base()
        away = Teacher(id="AWAY", short_name="AWAY", qualifications=["M"],
                       max_hours=28, is_active=False)
        with pytest.raises(TeamTeachingError, match="nicht aktiv"):
            create_team_teaching(rows, rows[0].id, ["AWAY"], _make_roster(away))
        assert len(rows) == 1

    def test_full_teacher_rejected(self):
        """FULL hat schon 4 von 4 Stunden; eine weitere 4h-Zeile passt nicht."""
        rows = _make_base() + [
            Assignment(teacher_id="FULL", class_id="9c", subject_id="E1",
                       semester="1", hours_per_week=4),
        ]
        full = Teacher(id="FULL", short_name="FULL", qualifications=["M"],
                       max_hours=4, assigned_hours=4)
        with pytest.raises(TeamTeachingError, match="Max 4h"):
            create_team_teaching(rows, rows[0].id, ["FULL"], _make_roster(full))
        assert booked_hours(rows, "FULL") == 4
        assert full.assigned_hours == 4

    def test_rejection_leaves_valid_teachers_untouched(self):
        """Schlägt eine Lehrkraft fehl, wird auch für die anderen nichts angelegt."""
        rows = _make_base()
        teachers = _make_roster()
        with pytest.raises(TeamTeachingError):
            create_team_teaching(rows, rows[0].id, ["T2", "GHOST"], teachers)
        assert len(rows) == 1
        assert rows[0].team_teaching_id is None
        assert teachers[1].assigned_hours == 0

    def test_exactly_full_is_allowed(self):
        rows = _make_base()
        tight = Teacher(id="TIGHT", short_name="TIGHT", qualifications=["M"], max_hours=4)
        group = create_team_teaching(rows, rows[0].id, ["TIGHT"], _make_roster(tight))
        assert len(group) == 2
        assert tight.assigned_hours == 4

    def test_extend_existing_group(self):
        rows = _make_base()
        teachers = _make_roster()
        group = create_team_teaching(rows, rows[0].id, ["T2"], teachers)
        bigger = create_team_teaching(rows, rows[0].id, ["T3"], teachers)
        assert len(bigger) == 3
        assert bigger[0].team_teaching_id == group[0].team_teaching_id

    def test_team_ids(self):
        rows = _make_base()
        create_team_teaching(rows, rows[0].id, ["T2"], _make_roster())
        assert team_ids(rows) == [rows[0].team_teaching_id]


class TestRemoveFromTeamTeaching:
    def test_two_members_dissolves_group(self):
        """Nach dem Entfernen bliebe eine Lehrkraft übrig → Gruppe aufgelöst."""
        rows = _make_base()
        create_team_teaching(rows, rows[0].id, ["T2"], _make_roster())
        remove_from_team_teaching(rows, rows[1].id)
        assert all(a.team_teaching_id is None for a in rows)

    def test_three_members_only_one_removed(self):
        rows = _make_base()
        group = create_team_teaching(rows, rows[0].id, ["T2", "T3"], _make_roster())
        team_id = group[0].team_teaching_id

        remove_from_team_teaching(rows, rows[2].id)
        assert rows[2].team_teaching_id is None
        remaining = get_team_teaching_group(rows, team_id)
        assert {a.teacher_id for a in remaining} == {"T1", "T2"}

    def test_row_without_group_rejected(self):
        rows = _make_base()
        with pytest.raises(TeamTeachingError):
            remove_from_team_teaching(rows, rows[0].id)

    def test_unknown_row_rejected(self):
        with pytest.raises(TeamTeachingError):
            remove_from_team_teaching(_make_base(), "gibt-es-nicht")


class TestValidateTeamTeachingGroup:
    def test_valid_group(self):
        rows = _make_base()
        group = create_team_teaching(rows, rows[0].id, ["T2"], _make_roster())
        report = validate_team_teaching_group(rows, group[0].team_teaching_id)
        assert report.is_valid
        assert report.errors == []

    def test_mismatched_hours(self):
        rows = _make_base()
        group = create_team_teaching(rows, rows[0].id, ["T2", "T3"], _make_roster())
        rows[1].hours_per_week = 2
        rows[2].hours_per_week = 3
        report = validate_team_teaching_group(rows, group[0].team_teaching_id)
        assert not report.is_valid
        assert report.errors == ["Alle Zuweisungen müssen dieselbe Stundenzahl haben"]

    def test_duplicate_teacher(self):
        rows = [
            Assignment(teacher_id="T1", class_id="7a", subject_id="M1", semester="1",
                       hours_per_week=4, team_teaching_id="tt")
            for _ in range(2)
        ]
        report = validate_team_teaching_group(rows, "tt")
        assert not report.is_valid
        assert "Doppelte Lehrkräfte im Team-Teaching nicht erlaubt" in report.errors

    def test_single_row_group(self):
        rows = _make_base()
        rows[0].team_teaching_id = "tt"
        report = validate_team_teaching_group(rows, "tt")
        assert not report.is_valid

    def test_different_class(self):
        rows = _make_base()
        group = create_team_teaching(rows, rows[0].id, ["T2"], _make_roster())
        rows[1].class_id = "7b"
        report = validate_team_teaching_group(rows, group[0].team_teaching_id)
        assert "Alle Zuweisungen müssen dieselbe Klasse haben" in report.errors
