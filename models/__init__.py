from models.teacher import Teacher
from models.school_class import ClassUnit
from models.subject import Subject
from models.parallel_group import ParallelGroup
from models.assignment import Assignment
from models.staffing import FormulaDescriptor, StaffingReportLine
from models.school_data import SchoolData

__all__ = [
    "Teacher",
    "ClassUnit",
    "Subject",
    "ParallelGroup",
    "Assignment",
    "FormulaDescriptor",
    "StaffingReportLine",
    "SchoolData",
]
