"""Tests für ParallelGroupResolver und HourAggregator."""

import pytest

from config.defaults import default_parallel_groups
from models.parallel_group import ParallelGroup
from models.school_class import ClassUnit
from solver.hours import HourAggregator, ParallelGroupResolver, halve_for_semester


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _make_resolver() -> ParallelGroupResolver:
    return ParallelGroupResolver(default_parallel_groups())


def _make_class(class_id: str, grade: int, hours: dict[str, float]) -> ClassUnit:
    return ClassUnit(id=class_id, name=class_id, grade=grade, subject_hours=hours)


# ─── Halbjahressicht ──────────────────────────────────────────────────────────

class TestHalveForSemester:
    def test_even_hours(self):
        assert halve_for_semester(4) == 2.0

    def test_odd_hours_one_decimal(self):
        """3 Wochenstunden → 1,5 je Halbjahr."""
        assert halve_for_semester(3) == 1.5

    def test_round_half_up(self):
        """(4.5 / 2) * 10 = 22.5 → kaufmännisch 23 → 2.3."""
        assert halve_for_semester(4.5) == 2.3

    def test_zero(self):
        assert halve_for_semester(0) == 0.0

    def test_decimal_midpoint(self):
        """2,9 / 2 = 1,45 liegt als float knapp unter 1,45, gerundet wird trotzdem 1,5."""
        assert halve_for_semester(2.9) == 1.5
        assert halve_for_semester(0.3) == 0.2

    @pytest.mark.parametrize("hours", [0, 1, 2, 2.9, 3, 4.5, 5.3, 7.7, 12.1, 28])
    def test_rounding_is_stable(self, hours):
        """Ein bereits halbiertes Ergebnis ändert sich durch erneutes Runden nicht."""
        half = halve_for_semester(hours)
        assert round(half, 1) == half
        assert halve_for_semester(half * 2) == half
        assert halve_for_semester(hours) == half


# ─── Resolver ─────────────────────────────────────────────────────────────────

class TestParallelGroupResolver:
    def test_religion_counts_once(self):
        """KR 2 + ER 2 + M 4 in Klasse 7 → Gesamt 6 (Religion nur einmal)."""
        result = _make_resolver().resolve({"KR": 2, "ER": 2, "M": 4}, grade=7)
        assert result.parallel_group_hours == {"Religion": 2}
        assert result.regular_hours == {"M": 4}
        assert result.total_hours == 6

    def test_group_hours_override_subject_hours(self):
        """Die Gruppenstunden des Jahrgangs gelten, nicht die Fachstunden."""
        result = _make_resolver().resolve({"FS": 1, "SW": 7}, grade=8)
        assert result.parallel_group_hours == {"Differenzierung": 4}
        assert result.total_hours == 4

    def test_differenzierung_grade_7(self):
        result = _make_resolver().resolve({"FS": 3, "IF": 3, "TC": 3}, grade=7)
        assert result.parallel_group_hours["Differenzierung"] == 3

    def test_group_without_grade_entry_is_zero(self):
        """Differenzierung hat für Jahrgang 5 keinen Eintrag → 0 Stunden."""
        result = _make_resolver().resolve({"IF": 2, "D": 5}, grade=5)
        assert result.parallel_group_hours == {"Differenzierung": 0}
        assert result.total_hours == 5

    def test_unknown_subject_is_regular(self):
        result = _make_resolver().resolve({"XY": 1.5}, grade=6)
        assert result.regular_hours == {"XY": 1.5}
        assert result.parallel_group_hours == {}

    def test_empty_input(self):
        result = _make_resolver().resolve({}, grade=9)
        assert result.total_hours == 0
        assert result.parallel_group_hours == {}
        assert result.regular_hours == {}

    def test_semester_view_halves_all_values(self):
        result = _make_resolver().resolve({"KR": 2, "M": 4, "FS": 3}, grade=7, semester_view=True)
        assert result.parallel_group_hours == {"Religion": 1.0, "Differenzierung": 1.5}
        assert result.regular_hours == {"M": 2.0}
        assert result.total_hours == pytest.approx(4.5)

    def test_semester_view_is_repeatable(self):
        """Zweimal dieselbe Eingabe mit Halbjahressicht ergibt dieselben Werte."""
        resolver = _make_resolver()
        hours = {"KR": 2, "ER": 2, "M": 2.9, "D": 4.5, "FS": 3}
        first = resolver.resolve(hours, grade=8, semester_view=True)
        second = resolver.resolve(dict(hours), grade=8, semester_view=True)
        assert first == second
        assert list(first.regular_hours) == ["M", "D"]
        assert first.regular_hours == {"M": 1.5, "D": 2.3}

    def test_group_for_subject(self):
        resolver = _make_resolver()
        assert resolver.group_for_subject("PP").id == "Religion"
        assert resolver.group_for_subject("M") is None

    def test_first_group_wins_for_shared_code(self):
        groups = [
            ParallelGroup(id="A", name="A", subjects=("X", "Y"), hours_per_grade={5: 1}),
            ParallelGroup(id="B", name="B", subjects=("X",), hours_per_grade={5: 9}),
        ]
        result = ParallelGroupResolver(groups).resolve({"X": 3}, grade=5)
        assert result.parallel_group_hours == {"A": 1}

    def test_class_summary(self):
        cls = _make_class("7a", 7, {"KR": 2, "ER": 2, "PP": 2, "M": 4})
        summary = _make_resolver().class_summary(cls)
        assert summary.raw_total == 10
        assert summary.corrected_total == 6
        assert summary.saved_hours == 4


# ─── Aggregator ───────────────────────────────────────────────────────────────

class TestHourAggregator:
    def test_groups_take_max_regular_subjects_sum(self):
        """8a (FS) und 8b (SW): Differenzierung einmal 4h, Deutsch 4+4."""
        classes = [
            _make_class("8a", 8, {"FS": 4, "D": 4}),
            _make_class("8b", 8, {"SW": 4, "D": 4}),
        ]
        result = HourAggregator(_make_resolver()).aggregate(classes)
        gh = result[8]
        assert gh.parallel_group_hours == {"Differenzierung": 4}
        assert gh.regular_hours == {"D": 8}
        assert gh.total_hours == 12
        assert gh.class_count == 2

    def test_grades_kept_apart(self):
        classes = [
            _make_class("5a", 5, {"D": 5, "KR": 2}),
            _make_class("6a", 6, {"D": 4, "ER": 2}),
        ]
        result = HourAggregator(_make_resolver()).aggregate(classes)
        assert set(result) == {5, 6}
        assert result[5].total_hours == 7
        assert result[6].total_hours == 6

    def test_order_independent(self):
        classes = [
            _make_class("9a", 9, {"FS": 3, "M": 4, "KR": 2}),
            _make_class("9b", 9, {"NW": 3, "M": 4, "E": 3}),
            _make_class("9c", 9, {"IF": 3, "M": 4, "ER": 2}),
        ]
        agg = HourAggregator(_make_resolver())
        forward = agg.aggregate(classes)
        backward = agg.aggregate(list(reversed(classes)))
        assert forward[9].parallel_group_hours == backward[9].parallel_group_hours
        assert forward[9].regular_hours == backward[9].regular_hours
        assert forward[9].total_hours == backward[9].total_hours

    def test_no_classes(self):
        assert HourAggregator(_make_resolver()).aggregate([]) == {}

    def test_total_is_sum_of_parts(self):
        classes = [
            _make_class("10a", 10, {"MUS": 4, "D": 4, "E": 4, "PP": 2}),
            _make_class("10b", 10, {"SW": 4, "D": 4, "KR": 2}),
        ]
        gh = HourAggregator(_make_resolver()).aggregate(classes)[10]
        assert gh.total_hours == (
            sum(gh.parallel_group_hours.values()) + sum(gh.regular_hours.values())
        )
