from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


# ─── PLANSTELLEN-EINGABE (Arbeitsblatt "Planstellenberechnung") ───

class PolicyInput(BaseModel):
    """Eingabewerte des Planstellen-Arbeitsblatts.

    Jedes Feld hat einen Default (Stand Schuljahr 2024/25). Die ``description``
    eines Felds ist gleichzeitig die Zeilenbezeichnung im Bericht.
    Fehlende Zahlenwerte (``None``) werden als 0 behandelt.
    """
    model_config = ConfigDict(frozen=True)

    # Grunddaten
    school_name: str = Field("Realschule Musterstadt",
        description="Name der Schule")
    school_year: str = Field("2024/25",
        description="Schuljahr")

    # ── Grundbedarf (F3-F10) ──
    # F3
    student_count: float = Field(710,
        description="Schülerzahl Stand 31.08.")
    # F4
    student_teacher_ratio: float = Field(20.19,
        description="Schüler/Lehrerrelation an der Realschule")
    # F8
    training_deduction: float = Field(-0.5,
        description="bedarfsdeckender Unterricht - Abzug Lehramtsanwärter")
    # F9
    rounding_adjustment: float = Field(-0.21,
        description="Rundung")

    # ── Ausgleichsbedarf (F12-F26) ──
    fachleiter: float = Field(0.21, description="Fachleiter")
    personalrat: float = Field(1.64, description="Personalrat")
    schulleitungsentlastung_fortbildung: float = Field(0.04,
        description="Schulleitungsentlastung - Fortbildung")
    ausbau_leitungszeit: float = Field(0.15, description="Ausbau Leitungszeit")
    rueckgabe_vorgriffstunde: float = Field(0.04,
        description="Rückgabe Vorgriffstunde")
    digitalisierungsbeauftragter: float = Field(0.04,
        description="Digitalisierungsbeauftragter")
    fortbildung_qualif_medien_ds: float = Field(0.07,
        description="Fortb. und Qualif. / Medien und DS")
    fachberater_schulaufsicht: float = Field(0.07,
        description="Fachberater Schulaufsicht")
    wechselnde_ausgleichsbedarfe: float = Field(0.5,
        description="Wechs. Mehr- und Ausgleichsbedarfe")
    praxissemester_in_schule: float = Field(0.29,
        description="Praxissemester in Schule")
    zusaetzliche_ausfallvertretung: float = Field(0.25,
        description="Zusätzliche Ausfallvertretung")
    entlastung_lehrertaetigkeit: float = Field(0.04,
        description="Entlastung Lehrertätigkeit")
    entlastung_lvo_co: float = Field(0.04, description="Entlastung LVO&CO")
    ermaessigungen_weitere: float = Field(0.3,
        description="Ermäßigungen weitere")
    weiterer_ausgleich: float = Field(0.0,
        description="Weiterer Ausgleichsbedarf")

    # ── Weitere Bereiche (F30-F32) ──
    praktische_philosophie_islamkunde: float = Field(0.0,
        description="Praktische Philosophie / Islamkunde")
    paedagogische_uebermittagsbetreuung: float = Field(0.0,
        description="Pädagogische Übermittagsbetreuung")
    integration_durch_bildung: float = Field(0.0,
        description="Integration durch Bildung")

    # ── Freie Eingabezeilen ──
    free_line_1_label: str = Field("", description="Freie Zeile 1")
    free_line_1_value: float = Field(0.0, description="Freie Zeile 1")
    free_line_2_label: str = Field("", description="Freie Zeile 2")
    free_line_2_value: float = Field(0.0, description="Freie Zeile 2")

    # Wochenstunden einer vollen Stelle (Pflichtstunden Realschule NRW)
    per_position_deputat: float = Field(28.0,
        description="Deputat einer vollen Stelle")

    # ── Zusätzliche Stellen (F36) ──
    gegen_unterrichtsausfall_foerderung: float = Field(0.77,
        description="gegen U-Ausfall und für ind. Förderung")

    # ── Stellenbesetzung (F38-F40) ──
    teilzeit_blockmodell_ansparphase: float = Field(0.36,
        description="Teilzeit im Blockmodell (Ansparphase)")
    kapitalisierung_uebermittag: float = Field(0.56,
        description="Kapitalisierung päd. Übermittagsbetreuung")
    abzug_kapitalisierung_uebermittag: float = Field(-0.56,
        description="Abzug Kapitalisierung (Geld an Gemeinde)")

    # ── Personalausstattung (F44-F46) ──
    beurlaubung_elternzeit: float = Field(0.0,
        description="Beurlaubung o. L Elternzeit")
    ersatzeinstellung_elternzeit: float = Field(0.0,
        description="Ersatzeinstellung Elternzeit")
    abordnung_zugang: float = Field(0.0,
        description="Abordnung Zugang (anderes Kapitel)")

    # F50
    vorhandene_planstellen: float = Field(0.0,
        description="Vorhandene Planstellen (Istbestand)")
    # F53: Anteil des Grundbedarfs für Entlastungsstunden des Kollegiums
    grundstellenbedarf_faktor: float = Field(0.5,
        description="Grundstellenbedarf-Faktor")

    # ── Schulleiter- und Stellvertreterpauschale (F56-F65) ──
    grundpauschale: float = Field(9.0, description="Grundpauschal")
    schulleiterentlastung_fortbildung: float = Field(0.04,
        description="Schulleiterentlastung Fortbildung")
    ausbau_leitungszeit_schulleiter: float = Field(0.12,
        description="Ausbau Leitungszeit (Schulleiter)")
    schulleiter_drei_fuenftel: float = Field(18.0,
        description="Schulleiter 3/5 (aufgerundet)")
    ausbau_leitungszeit_stellvertreter: float = Field(0.11,
        description="Ausbau Leitungszeit (Stellvertreter)")
    minus_entlastung_stundenplanarbeit: float = Field(0.0,
        description="minus Entl. (Stundenplanarbeit) aus Schulleitungspauschale")

    # ── Klassenbildung (F70) ──
    istklassenzahl: float = Field(17.0, description="Istklassenzahl")

    # ── Statistik Unterrichtsstunden (F73-F74) ──
    verfuegbare_unterrichtsstunden: float = Field(0.0,
        description="verfügbare Unterrichtsstunden")
    unterrichtssoll_nach_kuerzung: float = Field(0.0,
        description="Unterrichtssoll nach Kürzung")

    @field_validator("*", mode="before")
    @classmethod
    def _none_as_default(cls, v, info: ValidationInfo):
        if v is None:
            return "" if cls.model_fields[info.field_name].annotation is str else 0.0
        return v


# Grunddaten: fließen über den Quotienten ein, sind selbst keine Stunden
BASE_DATA_FIELDS: tuple[str, ...] = (
    "student_count",
    "student_teacher_ratio",
)

BASE_NEED_FIELDS: tuple[str, ...] = (
    "training_deduction",
    "rounding_adjustment",
)

COMPENSATION_FIELDS: tuple[str, ...] = (
    "fachleiter",
    "personalrat",
    "schulleitungsentlastung_fortbildung",
    "ausbau_leitungszeit",
    "rueckgabe_vorgriffstunde",
    "digitalisierungsbeauftragter",
    "fortbildung_qualif_medien_ds",
    "fachberater_schulaufsicht",
    "wechselnde_ausgleichsbedarfe",
    "praxissemester_in_schule",
    "zusaetzliche_ausfallvertretung",
    "entlastung_lehrertaetigkeit",
    "entlastung_lvo_co",
    "ermaessigungen_weitere",
    "weiterer_ausgleich",
)

OTHER_AREA_FIELDS: tuple[str, ...] = (
    "praktische_philosophie_islamkunde",
    "paedagogische_uebermittagsbetreuung",
    "integration_durch_bildung",
)

# (Wert-Feld, Label-Feld)
FREE_LINE_FIELDS: tuple[tuple[str, str], ...] = (
    ("free_line_1_value", "free_line_1_label"),
    ("free_line_2_value", "free_line_2_label"),
)

ADDITIONAL_POSITION_FIELDS: tuple[str, ...] = (
    "gegen_unterrichtsausfall_foerderung",
)

STAFFING_FIELDS: tuple[str, ...] = (
    "teilzeit_blockmodell_ansparphase",
    "kapitalisierung_uebermittag",
    "abzug_kapitalisierung_uebermittag",
)

PERSONNEL_FIELDS: tuple[str, ...] = (
    "beurlaubung_elternzeit",
    "ersatzeinstellung_elternzeit",
    "abordnung_zugang",
)


# ─── STUNDENTAFEL FÜR DEN OPTIMIZER ───

class CurriculumEntry(BaseModel):
    """Basisfach der Stundentafel mit Halbjahresfächern und Wochenstunden."""
    model_config = ConfigDict(frozen=True)

    # Halbjahresfächer, z.B. ("D1", "D2")
    semesters: tuple[str, str]
    # Wochenstunden je Halbjahr
    weekly_hours: float = Field(gt=0)


class GradeThreshold(BaseModel):
    """Ab ``min_grade`` kommen ``subjects`` zum Pflichtbereich hinzu."""
    model_config = ConfigDict(frozen=True)

    min_grade: int
    subjects: tuple[str, ...]


# ─── EIGNUNGS-AUSNAHMEN ───

class EligibilityOverride(BaseModel):
    """Lehrkraft darf bestimmte Fächer nie unterrichten.

    Korrigiert bekannte Fehler in importierten Qualifikationen und hat
    Vorrang vor jedem Fächerabgleich.
    """
    model_config = ConfigDict(frozen=True)

    teacher_short_name: str
    forbidden_subjects: frozenset[str]
    reason: str = ""

    def excludes(self, short_name: str, base_subject: str) -> bool:
        return (
            short_name.upper() == self.teacher_short_name.upper()
            and base_subject in self.forbidden_subjects
        )
