"""Datenmodell für parallele Fächergruppen (Pydantic v2)."""

from pydantic import BaseModel


class ParallelGroup(BaseModel):
    """Fächer, die im selben Zeitslot parallel unterrichtet werden.

    Beispiel Religion: KR, ER und PP belegen gemeinsam einen Slot. Die
    Wochenstunden der Gruppe stehen in ``hours_per_grade`` und haben Vorrang
    vor den Stunden, die bei den einzelnen Fächern hinterlegt sind.
    """

    id: str                              # "Religion", "Differenzierung"
    name: str
    description: str = ""
    subjects: tuple[str, ...]            # Fachkürzel der Mitglieder (geordnet)
    hours_per_grade: dict[int, float]    # Jahrgang → Wochenstunden

    def hours_for_grade(self, grade: int) -> float:
        """Wochenstunden für einen Jahrgang; 0 wenn kein Eintrag existiert."""
        return self.hours_per_grade.get(grade, 0.0)
