"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from typing import Iterable, Optional

from pydantic import BaseModel


class Subject(BaseModel):
    """Repräsentiert ein Unterrichtsfach, ggf. semesterbezogen ("D1", "D2")."""

    id: str
    short_name: str
    name: str
    category: str                             # hauptfach/sprache/nw/musisch/...
    parallel_group_id: Optional[str] = None   # Rückverweis, keine Besitzrelation


def find_subject(subjects: Iterable[Subject], code: str) -> Optional[Subject]:
    """Sucht ein Fach über Kürzel, danach über den Namen."""
    subjects = list(subjects)
    found = next((s for s in subjects if s.short_name == code), None)
    if found is None:
        found = next((s for s in subjects if s.name == code), None)
    return found
