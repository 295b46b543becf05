from config.schema import (
    CurriculumEntry,
    EligibilityOverride,
    GradeThreshold,
    PolicyInput,
)
from models.parallel_group import ParallelGroup


def default_policy_input() -> PolicyInput:
    """Arbeitsblatt-Defaults (Realschule, Schuljahr 2024/25)."""
    return PolicyInput()


# ─── PARALLELE FÄCHERGRUPPEN ───
# Mitglieder einer Gruppe teilen sich einen Zeitslot; die Gruppenstunden
# pro Jahrgang überschreiben die Stunden der einzelnen Fächer.

def default_parallel_groups() -> list[ParallelGroup]:
    return [
        ParallelGroup(
            id="Differenzierung",
            name="Differenzierungsfächer",
            description="Wahlpflichtfächer, parallel unterrichtet (7.-10. Klasse)",
            # FS=Französisch, SW=Sozialwiss., NW=Bio-Kurs, IF=Informatik, TC=Technik, MUS=Musik-Kurs
            subjects=("FS", "SW", "NW", "IF", "TC", "MUS"),
            hours_per_grade={7: 3, 8: 4, 9: 3, 10: 4},
        ),
        ParallelGroup(
            id="Religion",
            name="Religionsfächer",
            description="Religion und Praktische Philosophie, parallel unterrichtet",
            # KR=kath. Religion, ER=ev. Religion, PP=Praktische Philosophie
            subjects=("KR", "ER", "PP"),
            hours_per_grade={5: 2, 6: 2, 7: 2, 8: 2, 9: 2, 10: 2},
        ),
    ]


# ─── FÄCHER-ALIASE ───
# Basisfach → akzeptierte Schreibweisen in Lehrer-Qualifikationen.

SUBJECT_ALIASES: dict[str, tuple[str, ...]] = {
    "D":  ("D", "DE", "Deutsch"),
    "M":  ("M", "MA", "Mathe", "Mathematik"),
    "E":  ("E", "EN", "Englisch", "English"),
    "L":  ("L", "F", "FS", "Französisch", "Latein"),
    "NW": ("NW", "BI", "BIO", "CH", "Chemie", "PH", "Physik"),
    "GE": ("GE", "Geschichte"),
    "EK": ("EK", "Erdkunde", "Geografie"),
    "PK": ("PK", "Politik", "SW", "Sozialwissenschaften"),
    "SP": ("SP", "Sport"),
    "KU": ("KU", "Kunst"),
    "MU": ("MU", "Musik"),
    "TC": ("TC", "Technik", "Tx"),
    "KR": ("KR",),
    "ER": ("ER",),
}

# Konfessioneller Religionsunterricht: nur exakter Code, keine Aliase.
EXACT_MATCH_SUBJECTS: frozenset[str] = frozenset({"KR", "ER"})

# Lockerer Abgleich (Teilstring, ohne Groß-/Kleinschreibung) für die
# Ausweichsuche, wenn keine Lehrkraft streng passt.
FALLBACK_ALIASES: dict[str, tuple[str, ...]] = {
    "D":  ("D", "DE", "Deutsch"),
    "M":  ("M", "MA", "Mathe", "Mathematik"),
    "E":  ("E", "EN", "Englisch", "English"),
    "L":  ("L", "F", "FR", "LA", "FS", "Französisch", "Latein", "Fremdsprache"),
    "PK": ("PK", "SW", "Politik", "Sozialwissenschaften"),
    "TC": ("TC", "TX", "Technik"),
    "NW": ("NW", "BI", "BIO", "CH", "PH", "Naturwissenschaften"),
    "GE": ("GE", "Geschichte"),
    "EK": ("EK", "Erdkunde", "Geografie"),
    "SP": ("SP", "Sport"),
    "KU": ("KU", "Kunst"),
    "MU": ("MU", "Musik"),
    "KR": ("KR", "katholische Religion"),
    "ER": ("ER", "evangelische Religion"),
}

# Halbjahresfach → Kürzel, unter denen es im Fächerstamm stehen kann.
SEMESTER_SUBJECT_ALIASES: dict[str, tuple[str, ...]] = {
    "D1": ("D1", "DE1"), "D2": ("D2", "DE2"),
    "M1": ("M1", "MA1"), "M2": ("M2", "MA2"),
    "E1": ("E1", "EN1"), "E2": ("E2", "EN2"),
    "L1": ("L1", "F1", "FR1", "LA1"), "L2": ("L2", "F2", "FR2", "LA2"),
    "PK1": ("PK1", "SW1"), "PK2": ("PK2", "SW2"),
    "TC1": ("TC1", "TX1"), "TC2": ("TC2", "TX2"),
    "NW1": ("NW1", "BI1", "CH1", "PH1"), "NW2": ("NW2", "BI2", "CH2", "PH2"),
}


# ─── STUNDENTAFEL DES OPTIMIZERS ───

CURRICULUM: dict[str, CurriculumEntry] = {
    "D":  CurriculumEntry(semesters=("D1", "D2"), weekly_hours=4),
    "M":  CurriculumEntry(semesters=("M1", "M2"), weekly_hours=4),
    "E":  CurriculumEntry(semesters=("E1", "E2"), weekly_hours=4),
    "L":  CurriculumEntry(semesters=("L1", "L2"), weekly_hours=3),   # 2. Fremdsprache
    "NW": CurriculumEntry(semesters=("NW1", "NW2"), weekly_hours=2),
    "GE": CurriculumEntry(semesters=("GE1", "GE2"), weekly_hours=2),
    "EK": CurriculumEntry(semesters=("EK1", "EK2"), weekly_hours=1),
    "PK": CurriculumEntry(semesters=("PK1", "PK2"), weekly_hours=2),
    "SP": CurriculumEntry(semesters=("SP1", "SP2"), weekly_hours=3),
    "KU": CurriculumEntry(semesters=("KU1", "KU2"), weekly_hours=2),
    "MU": CurriculumEntry(semesters=("MU1", "MU2"), weekly_hours=2),
    "TC": CurriculumEntry(semesters=("TC1", "TC2"), weekly_hours=2),
    "KR": CurriculumEntry(semesters=("KR1", "KR2"), weekly_hours=2),
    "ER": CurriculumEntry(semesters=("ER1", "ER2"), weekly_hours=2),
}

MIN_GRADE = 5
MAX_GRADE = 10

GRADE_SUBJECT_THRESHOLDS: tuple[GradeThreshold, ...] = (
    GradeThreshold(min_grade=5, subjects=("D", "M", "E", "SP")),
    GradeThreshold(min_grade=6, subjects=("NW", "GE", "MU", "KU")),
    GradeThreshold(min_grade=7, subjects=("L", "TC", "KR")),
    GradeThreshold(min_grade=8, subjects=("EK", "PK")),
)


# ─── EIGNUNGS-AUSNAHMEN ───

ELIGIBILITY_OVERRIDES: tuple[EligibilityOverride, ...] = (
    EligibilityOverride(
        teacher_short_name="BEU",
        forbidden_subjects=frozenset({"KR", "ER"}),
        reason="Importierte Qualifikation fehlerhaft: unterrichtet nur E, GE, EK",
    ),
)


# ─── BERICHTSFARBEN ───

REPORT_COLORS: dict[str, str] = {
    "parallel_group": "#10B981",
    "subject":        "#3B82F6",
    "grundbedarf":    "yellow",
    "ausgleichsbedarf": "gray",
    "weitere_bereiche": "gray",
    "freie_zeilen":   "purple",
    "calculated":     "cyan",
    "total":          "green",
    "summary":        "blue",
    "grunddaten":     "yellow",
    "zusaetzliche_stellen": "gray",
    "stellenbesetzung": "gray",
    "personalausstattung": "gray",
}


# ─── FÄCHERSTAMM + STUNDENTAFEL (Demo-Daten) ───
# Kürzel → (Name, Kategorie)

SUBJECT_METADATA: dict[str, tuple[str, str]] = {
    "D":   ("Deutsch", "hauptfach"),
    "M":   ("Mathematik", "hauptfach"),
    "E":   ("Englisch", "hauptfach"),
    "BI":  ("Biologie", "nw"),
    "PH":  ("Physik", "nw"),
    "CH":  ("Chemie", "nw"),
    "GE":  ("Geschichte", "gesellschaft"),
    "EK":  ("Erdkunde", "gesellschaft"),
    "PK":  ("Politik", "gesellschaft"),
    "SP":  ("Sport", "sport"),
    "KU":  ("Kunst", "musisch"),
    "MU":  ("Musik", "musisch"),
    "KR":  ("Katholische Religion", "religion"),
    "ER":  ("Evangelische Religion", "religion"),
    "PP":  ("Praktische Philosophie", "religion"),
    "FS":  ("Französisch", "wpf"),
    "SW":  ("Sozialwissenschaften", "wpf"),
    "NW":  ("Naturwissenschaften", "wpf"),
    "IF":  ("Informatik", "wpf"),
    "TC":  ("Technik", "wpf"),
    "MUS": ("Musik-Kurs", "wpf"),
}

# NRW Realschule, Jahrgang → Kürzel → Wochenstunden. Parallelfächer stehen
# einzeln drin; die Parallelgruppe korrigiert die Doppelzählung.
STUNDENTAFEL_REALSCHULE_NRW: dict[int, dict[str, float]] = {
    5: {"D": 5, "M": 4, "E": 4, "BI": 2, "EK": 2, "GE": 2, "SP": 3,
        "KU": 2, "MU": 2, "KR": 2, "ER": 2, "PP": 2},
    6: {"D": 4, "M": 4, "E": 4, "BI": 2, "PH": 2, "EK": 1, "GE": 2, "PK": 1,
        "SP": 3, "KU": 2, "MU": 1, "KR": 2, "ER": 2, "PP": 2},
    7: {"D": 4, "M": 4, "E": 4, "FS": 3, "IF": 3, "TC": 3, "BI": 2, "PH": 2,
        "CH": 2, "GE": 2, "PK": 2, "EK": 1, "SP": 3, "KU": 1, "MU": 1,
        "KR": 2, "ER": 2, "PP": 2},
    8: {"D": 4, "M": 4, "E": 3, "FS": 4, "SW": 4, "TC": 4, "BI": 1, "PH": 2,
        "CH": 2, "GE": 2, "PK": 2, "EK": 2, "SP": 3, "KU": 2, "MU": 1,
        "KR": 2, "ER": 2, "PP": 2},
    9: {"D": 4, "M": 4, "E": 3, "FS": 3, "NW": 3, "IF": 3, "BI": 2, "PH": 2,
        "CH": 2, "GE": 2, "PK": 2, "EK": 1, "SP": 3, "KU": 1, "MU": 1,
        "KR": 2, "ER": 2, "PP": 2},
    10: {"D": 4, "M": 4, "E": 4, "FS": 4, "SW": 4, "MUS": 4, "BI": 2, "PH": 2,
         "CH": 2, "GE": 2, "PK": 2, "EK": 2, "SP": 3, "KU": 1, "MU": 1,
         "KR": 2, "ER": 2, "PP": 2},
}
