"""
Custom exceptions for the registrar.
"""

from typing import Optional, Any, Dict


class RegistrarError(Exception):
    """Base exception for all registrar errors."""

    default_message = "Registrar error."
    default_code = "registrar_error"
    status_code = 500

    def __init__(self, message: Optional[str] = None, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}


class EnrollmentError(RegistrarError):
    """Raised when a course rejects an enroll or drop."""
    default_message = "Enrollment failed."
    default_code = "enrollment_error"
    status_code = 409


class AlreadyEnrolledError(EnrollmentError):
    """Raised when the student is already in the course."""
    default_message = "Already enrolled."
    default_code = "already_enrolled"


class CourseFullError(EnrollmentError):
    """Raised when the course has no seats left."""
    default_message = "Course full."
    default_code = "course_full"


class NotEnrolledError(EnrollmentError):
    """Raised when dropping a student who is not in the course."""
    default_message = "Student not in course."
    default_code = "not_enrolled"


class ResourceNotFoundError(RegistrarError):
    """Raised when a requested resource is not found."""
    default_message = "Resource not found."
    default_code = "not_found"
    status_code = 404


class StudentNotFoundError(ResourceNotFoundError):
    """Raised when a student id is not in the catalog."""
    default_message = "Student not found."
    default_code = "student_not_found"


class CourseNotFoundError(ResourceNotFoundError):
    """Raised when a course code is not in the catalog."""
    default_message = "Course not found."
    default_code = "course_not_found"


class ValidationError(RegistrarError):
    """Raised when data validation fails."""
    default_message = "Invalid value."
    default_code = "validation_error"
    status_code = 400


class PersistenceError(RegistrarError):
    """Raised when persistence operations fail."""
    default_message = "Persistence failure."
    default_code = "persistence_error"


class ConfigurationError(RegistrarError):
    """Raised when configuration is invalid."""
    default_message = "Invalid configuration."
    default_code = "configuration_error"
