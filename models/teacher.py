"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

import re

from pydantic import BaseModel, field_validator

_SPLIT_RE = re.compile(r"[,;]")


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft."""

    id: str
    short_name: str                  # Kürzel ("BEU")
    name: str = ""                   # "Beumer, Anna"
    qualifications: list[str] = []   # Fachkürzel, evtl. "D, GE" in einem Eintrag
    max_hours: float                 # Obergrenze Wochenstunden (nie überschreiten)
    assigned_hours: float = 0.0      # Wird nur vom AssignmentOptimizer gesetzt
    is_active: bool = True

    @field_validator("short_name")
    @classmethod
    def normalize_short_name(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("max_hours")
    @classmethod
    def _check_max_hours(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"max_hours ({v}) darf nicht negativ sein.")
        return v

    def qualification_tokens(self) -> list[str]:
        """Alle Fachkürzel, importierte Sammeleinträge ("D, GE") aufgeteilt."""
        tokens: list[str] = []
        for entry in self.qualifications:
            for part in _SPLIT_RE.split(entry):
                part = part.strip()
                if part:
                    tokens.append(part)
        return tokens
