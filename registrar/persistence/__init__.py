"""
Persistence module for flat-file storage.
"""

from .csv_store import CsvRowStore
from .repositories import (
    EnrollmentRecord, StudentRowMapper, InstructorRowMapper,
    CourseRowMapper, EnrollmentRowMapper
)

__all__ = [
    "CsvRowStore",
    "EnrollmentRecord",
    "StudentRowMapper",
    "InstructorRowMapper",
    "CourseRowMapper",
    "EnrollmentRowMapper",
]
