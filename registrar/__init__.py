"""
Campus Registrar: an in-process course-registration registry.

Manages students, instructors and courses, enforces enrollment capacity
rules, and persists state to flat comma-delimited files.
"""

__version__ = "1.0.0"
__author__ = "Registrar Development Team"
__description__ = "Course registration registry with flat-file persistence"
