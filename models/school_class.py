"""Datenmodell für eine Schulklasse (Pydantic v2)."""

from pydantic import BaseModel, Field


class ClassUnit(BaseModel):
    """Repräsentiert eine Klasse der Sekundarstufe I (z.B. 7b)."""

    id: str
    name: str                                   # "7b"
    grade: int = Field(ge=5, le=10)
    student_count: int = Field(0, ge=0)
    subject_hours: dict[str, float] = {}        # Fachkürzel → Wochenstunden (Jahressicht)

    @property
    def raw_total_hours(self) -> float:
        """Summe aller Fachstunden ohne Parallelkorrektur."""
        return sum(self.subject_hours.values())
