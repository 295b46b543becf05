"""Demo-Daten-Generator für den Planstellen-Rechner.

Erzeugt einen realistischen Datensatz einer dreizügigen Realschule
(Jahrgänge 5–10) mit absichtlichen Auffälligkeiten:

  1. Fehlerhafter Import: BEU führt KR in den Qualifikationen, darf aber
     laut Eignungs-Ausnahme keine Religion unterrichten
  2. Sammeleinträge: einige Lehrkräfte haben "D, GE" als EINEN Eintrag
  3. Ausweich-Treffer: eine Lehrkraft führt nur "Französisch-Kurs", was
     erst im lockeren Abgleich für L zählt
  4. Eine inaktive Lehrkraft (Elternzeit), die nie zugewiesen werden darf
"""

import random
import string
from typing import Optional

from config.defaults import (
    CURRICULUM,
    STUNDENTAFEL_REALSCHULE_NRW,
    SUBJECT_METADATA,
    default_parallel_groups,
)
from models.school_class import ClassUnit
from models.school_data import SchoolData
from models.subject import Subject
from models.teacher import Teacher

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Andreas", "Anna", "Bernd", "Birgit", "Christian", "Christine", "Dieter",
    "Eva", "Franz", "Gabi", "Hans", "Iris", "Jürgen", "Kathrin", "Klaus",
    "Lena", "Markus", "Maria", "Norbert", "Olga", "Peter", "Renate",
    "Stefan", "Sandra", "Thomas", "Tanja", "Ulrich", "Ulrike", "Yusuf", "Zoe",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
    "Schwarz", "Zimmermann", "Braun", "Krüger", "Hofmann", "Hartmann",
    "Lange", "Schmitt", "Werner", "Krause", "Meier", "Lehmann",
    "Köhler", "Herrmann", "Kaiser", "Fuchs", "Lang", "Weiß", "Berger",
]

# ─── Fächerkombinationen (gewichtet) ─────────────────────────────────────────

_SUBJECT_COMBOS: list[tuple[list[str], int]] = [
    (["M", "PH"], 8),
    (["D", "GE"], 8),
    (["E", "F"], 6),
    (["BI", "EK"], 5),
    (["M", "IF"], 5),
    (["EK", "PK"], 5),
    (["D", "E"], 4),
    (["SP", "BI"], 4),
    (["KU", "D"], 3),
    (["MU", "E"], 3),
    (["TC", "M"], 3),
    (["CH", "BI"], 3),
    (["KR", "D"], 2),
    (["ER", "GE"], 2),
    (["SW", "PK"], 2),
]

_COMBO_WEIGHTS = [w for _, w in _SUBJECT_COMBOS]
_COMBO_SUBJECTS = [s for s, _ in _SUBJECT_COMBOS]

_FULL_TIME = 28.0
_PART_TIME = 14.0
_CLASS_LABELS = string.ascii_lowercase


def _make_abbreviation(last_name: str, used: set[str]) -> str:
    """Generiert ein eindeutiges 3-Zeichen-Kürzel aus dem Nachnamen."""
    base = (
        last_name.upper()
        .replace("Ä", "AE").replace("Ö", "OE").replace("Ü", "UE")
        .replace("ß", "SS")
    )
    candidates = [
        base[:3],
        base[:2] + base[-1],
        base[0] + base[2:4],
        base[:2] + str(len(used) % 10),
    ]
    for c in candidates:
        c = c[:3].ljust(3, "X")
        if c not in used:
            used.add(c)
            return c
    # Fallback: fortlaufend
    i = 0
    while f"L{i:02d}" in used:
        i += 1
    used.add(f"L{i:02d}")
    return f"L{i:02d}"


class DemoDataGenerator:
    """Generiert einen vollständigen Demo-Datensatz."""

    def __init__(
        self,
        seed: Optional[int] = None,
        classes_per_grade: int = 3,
        teacher_count: int = 45,
    ) -> None:
        self.rng = random.Random(seed)
        self.classes_per_grade = classes_per_grade
        self.teacher_count = teacher_count
        # BEU ist fest vergeben
        self._used_abbreviations: set[str] = {"BEU"}

    # ─── Fächer ───────────────────────────────────────────────────────────────

    def _generate_subjects(self) -> list[Subject]:
        """Basisfächer aus SUBJECT_METADATA plus Halbjahresfächer (D1, D2, ...)."""
        group_of = {
            code: g.id for g in default_parallel_groups() for code in g.subjects
        }
        subjects = []
        for code, (name, category) in SUBJECT_METADATA.items():
            subjects.append(Subject(
                id=code,
                short_name=code,
                name=name,
                category=category,
                parallel_group_id=group_of.get(code),
            ))

        for base, entry in CURRICULUM.items():
            name, category = SUBJECT_METADATA.get(base, (base, "sonstig"))
            if base == "L":
                name, category = "Zweite Fremdsprache", "sprache"
            for half, code in enumerate(entry.semesters, 1):
                subjects.append(Subject(
                    id=code,
                    short_name=code,
                    name=f"{name} ({half}. Hj.)",
                    category=category,
                ))
        return subjects

    # ─── Klassen ──────────────────────────────────────────────────────────────

    def _generate_classes(self) -> list[ClassUnit]:
        classes = []
        for grade, table in sorted(STUNDENTAFEL_REALSCHULE_NRW.items()):
            hours = {code: h for code, h in table.items() if h > 0}
            for label in _CLASS_LABELS[:self.classes_per_grade]:
                classes.append(ClassUnit(
                    id=f"{grade}{label}",
                    name=f"{grade}{label}",
                    grade=grade,
                    student_count=self.rng.randint(24, 30),
                    subject_hours=dict(hours),
                ))
        return classes

    # ─── Lehrkräfte ───────────────────────────────────────────────────────────

    def _make_teacher(
        self,
        qualifications: list[str],
        max_hours: float = _FULL_TIME,
        is_active: bool = True,
    ) -> Teacher:
        first = self.rng.choice(_FIRST_NAMES)
        last = self.rng.choice(_LAST_NAMES)
        abbr = _make_abbreviation(last, self._used_abbreviations)
        return Teacher(
            id=abbr,
            short_name=abbr,
            name=f"{last}, {first}",
            qualifications=qualifications,
            max_hours=max_hours,
            is_active=is_active,
        )

    def _generate_teachers(self) -> list[Teacher]:
        """Feste Lehrkräfte für die Auffälligkeiten, Rest gewichtet zufällig."""
        teachers: list[Teacher] = [
            # Auffälligkeit #1: KR aus fehlerhaftem Import
            Teacher(
                id="BEU",
                short_name="BEU",
                name="Beumer, Anna",
                qualifications=["E", "GE", "EK", "KR"],
                max_hours=_FULL_TIME,
            ),
        ]

        # Auffälligkeit #2: Sammeleinträge
        teachers.append(self._make_teacher(["D, GE"]))
        teachers.append(self._make_teacher(["M; PH"]))

        # Auffälligkeit #3: nur über den lockeren Abgleich geeignet
        teachers.append(self._make_teacher(["Französisch-Kurs"], max_hours=_PART_TIME))

        # Auffälligkeit #4: inaktiv
        teachers.append(self._make_teacher(["D", "E"], is_active=False))

        # Religion: je eine Lehrkraft KR und ER
        teachers.append(self._make_teacher(["KR", "GE"]))
        teachers.append(self._make_teacher(["ER", "D"]))

        # Sport und Technik sind knapp, feste Grundabdeckung
        for quals in (["SP", "BI"], ["SP", "EK"], ["SP", "M"], ["TC", "PH"]):
            teachers.append(self._make_teacher(quals))

        remaining = self.teacher_count - len(teachers)
        for i in range(remaining):
            quals = self.rng.choices(_COMBO_SUBJECTS, weights=_COMBO_WEIGHTS)[0]
            part_time = self.rng.random() < 0.25
            teachers.append(self._make_teacher(
                list(quals), max_hours=_PART_TIME if part_time else _FULL_TIME,
            ))
        return teachers

    # ─── Vollständiger Datensatz ──────────────────────────────────────────────

    def generate(self) -> SchoolData:
        """Erzeugt den vollständigen Datensatz als SchoolData-Objekt."""
        return SchoolData(
            subjects=self._generate_subjects(),
            classes=self._generate_classes(),
            teachers=self._generate_teachers(),
            parallel_groups=default_parallel_groups(),
        )

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: SchoolData) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demo-Daten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        active = [t for t in data.teachers if t.is_active]
        table.add_row("Fächer", str(len(data.subjects)),
                      f"{sum(1 for s in data.subjects if s.parallel_group_id)} in Parallelgruppen")
        table.add_row("Klassen", str(len(data.classes)),
                      f"{len(set(c.grade for c in data.classes))} Jahrgänge")
        table.add_row("Lehrkräfte", str(len(data.teachers)),
                      f"{len(active)} aktiv, Kapazität {sum(t.max_hours for t in active):g}h")
        table.add_row("Parallelgruppen", str(len(data.parallel_groups)),
                      ", ".join(g.id for g in data.parallel_groups))

        console.print(table)
