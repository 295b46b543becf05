"""Datenmodelle für den Planstellen-Bericht (Pydantic v2)."""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from models.assignment import new_id

LineType = Literal["requirement", "calculated", "summary"]


class FormulaDescriptor(BaseModel):
    """Nachvollziehbare Herkunft eines Berichtswerts."""

    op: str = "direct"                        # direct / sum / divide / max
    terms: list[Union[float, str]] = []
    description: str = ""


class StaffingReportLine(BaseModel):
    """Eine Zeile des Planstellen-Berichts (Bedarf vs. vorhandene Stunden)."""

    id: str = Field(default_factory=new_id)
    grade: Optional[int] = None
    subject_id: Optional[str] = None          # None für Gruppen- und Summenzeilen
    category: str
    component: str
    line_type: LineType
    required_hours: float
    available_hours: float = 0.0
    deficit: Optional[float] = None
    formula: FormulaDescriptor = Field(default_factory=FormulaDescriptor)
    color: Optional[str] = None

    @model_validator(mode="after")
    def _fill_deficit(self):
        if self.deficit is None:
            self.deficit = self.required_hours - self.available_hours
        return self
