"""
Enumerations for the registrar domain.
"""

from enum import Enum


class Role(Enum):
    """Role tag carried by every user."""
    STUDENT = "Student"
    INSTRUCTOR = "Instructor"


class CourseKind(Enum):
    """Course variants. The value is the label used in persisted rows."""
    THEORY = "Theory"
    LAB = "Lab"
    PROJECT = "Project"
