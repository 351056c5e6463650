"""
Core module containing the domain model of the registrar.
"""

from .entities import *
from .interfaces import *
from .exceptions import *
from .enums import *

__all__ = [
    # Entities
    "User",
    "Student",
    "Instructor",
    "Course",
    "CourseKindSpec",
    "COURSE_KIND_SPECS",

    # Interfaces
    "Row",
    "RowStore",

    # Enums
    "Role",
    "CourseKind",

    # Exceptions
    "RegistrarError",
    "EnrollmentError",
    "AlreadyEnrolledError",
    "CourseFullError",
    "NotEnrolledError",
    "ResourceNotFoundError",
    "StudentNotFoundError",
    "CourseNotFoundError",
    "ValidationError",
    "PersistenceError",
    "ConfigurationError",
]
