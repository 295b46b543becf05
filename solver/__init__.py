"""Solver-Modul: Stundenbedarf, Planstellen und Lehrerzuweisung."""

from .hours import HourAggregator, ParallelGroupResolver, GradeHours, ClassHours
from .qualification import EligibilityFilter, QualificationMatcher
from .staffing import PolicyCalculation, StaffingCalculator
from .optimizer import AssignmentOptimizer, OptimizationResult, WorkloadTracker

__all__ = [
    "HourAggregator",
    "ParallelGroupResolver",
    "GradeHours",
    "ClassHours",
    "EligibilityFilter",
    "QualificationMatcher",
    "PolicyCalculation",
    "StaffingCalculator",
    "AssignmentOptimizer",
    "OptimizationResult",
    "WorkloadTracker",
]
