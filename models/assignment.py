"""Datenmodell für eine Lehrer-Zuweisung (Pydantic v2)."""

import uuid
from typing import Literal, Optional

from pydantic import BaseModel, Field

Semester = Literal["1", "2"]


def new_id() -> str:
    return str(uuid.uuid4())


class Assignment(BaseModel):
    """Lehrkraft unterrichtet Klasse im Fach für ein Halbjahr.

    Zeilen mit gleicher ``team_teaching_id`` bilden eine Team-Teaching-Gruppe.
    """

    id: str = Field(default_factory=new_id)
    teacher_id: str
    class_id: str
    subject_id: str
    semester: Semester
    hours_per_week: float
    team_teaching_id: Optional[str] = None
    is_optimized: bool = False
