"""SchoolData: Vollständiger Datensatz einer Planungsperiode (Pydantic v2)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from models.assignment import Assignment
from models.parallel_group import ParallelGroup
from models.school_class import ClassUnit
from models.subject import Subject
from models.teacher import Teacher


class SchoolData(BaseModel):
    """Lehrkräfte, Klassen, Fächer, Parallelgruppen und Zuweisungen.

    Die Stammdaten werden von der umgebenden Verwaltung geliefert. Die
    Zuweisungen ersetzt der AssignmentOptimizer bei jedem Lauf komplett.
    """

    school_name: str = "Realschule Musterstadt"
    school_year: str = "2024/25"
    teachers: list[Teacher] = []
    classes: list[ClassUnit] = []
    subjects: list[Subject] = []
    parallel_groups: list[ParallelGroup] = []
    assignments: list[Assignment] = []
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        active = [t for t in self.teachers if t.is_active]
        capacity = sum(t.max_hours for t in active)
        assigned = sum(a.hours_per_week for a in self.assignments)
        lines = [
            f"Schule: {self.school_name} ({self.school_year})",
            f"Klassen: {len(self.classes)} "
            f"({len(set(c.grade for c in self.classes))} Jahrgänge)",
            f"Schüler: {sum(c.student_count for c in self.classes)}",
            f"Fächer: {len(self.subjects)}",
            f"Lehrkräfte: {len(active)} aktiv "
            f"({len(self.teachers) - len(active)} inaktiv)",
            f"Gesamtkapazität: {capacity:g}h/Woche",
            f"Zuweisungen: {len(self.assignments)} ({assigned:g}h)",
            f"Parallelgruppen: {len(self.parallel_groups)}",
        ]
        return "\n".join(lines)

    # ─── Lookups ───

    def teacher_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def class_by_id(self, class_id: str) -> Optional[ClassUnit]:
        return next((c for c in self.classes if c.id == class_id), None)

    def subject_by_id(self, subject_id: str) -> Optional[Subject]:
        return next((s for s in self.subjects if s.id == subject_id), None)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "SchoolData":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
