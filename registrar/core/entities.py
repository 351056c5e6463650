"""
Core entities for the registrar: users and courses.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .enums import Role, CourseKind
from .exceptions import (
    ValidationError, AlreadyEnrolledError, CourseFullError, NotEnrolledError
)


class User(ABC):
    """Abstract base class for everyone known to the registrar."""

    role: Role

    def __init__(self, user_id: str, name: str, email: str):
        self._id = user_id
        self._name = name
        self._email = email

    @property
    def id(self) -> str:
        """Get the user ID."""
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((type(self), self._id))

    def to_dict(self) -> Dict[str, str]:
        """Convert user to dictionary."""
        return {
            'id': self._id,
            'name': self._name,
            'email': self._email,
            'role': self.role.value,
        }

    def __str__(self) -> str:
        return f"{self.role.value} {self._name} ({self._id}) <{self._email}>"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id!r}, name={self._name!r})"


class Student(User):
    """Student enrolled in a degree program."""

    role = Role.STUDENT

    def __init__(self, user_id: str, name: str, email: str, program: str):
        super().__init__(user_id, name, email)
        self._program = program

    @property
    def program(self) -> str:
        return self._program

    @program.setter
    def program(self, value: str) -> None:
        self._program = value

    def to_dict(self) -> Dict[str, str]:
        base_dict = super().to_dict()
        base_dict['program'] = self._program
        return base_dict


class Instructor(User):
    """Instructor belonging to a department."""

    role = Role.INSTRUCTOR

    def __init__(self, user_id: str, name: str, email: str, department: str):
        super().__init__(user_id, name, email)
        self._department = department

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, value: str) -> None:
        self._department = value

    def to_dict(self) -> Dict[str, str]:
        base_dict = super().to_dict()
        base_dict['department'] = self._department
        return base_dict


@dataclass(frozen=True)
class CourseKindSpec:
    """Fixed constants of a course kind."""
    credits: int
    fee_per_credit: float


COURSE_KIND_SPECS: Dict[CourseKind, CourseKindSpec] = {
    CourseKind.THEORY: CourseKindSpec(credits=3, fee_per_credit=1500.0),
    CourseKind.LAB: CourseKindSpec(credits=2, fee_per_credit=2000.0),
    CourseKind.PROJECT: CourseKindSpec(credits=4, fee_per_credit=1200.0),
}


class Course:
    """
    A course of a fixed kind with a capacity-checked enrolled set.

    The enrolled set keeps student ids in enrollment order. Enroll and drop
    only touch memory; persisting them is the caller's job.
    """

    def __init__(self, kind: CourseKind, code: str, title: str, capacity: int,
                 instructor: Optional[Instructor] = None):
        self._kind = CourseKind(kind)
        self._code = code
        self._title = title
        self._capacity = self._validate_capacity(capacity)
        self._instructor = instructor
        self._enrolled: List[str] = []

    @staticmethod
    def _validate_capacity(capacity: int) -> int:
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValidationError(f"Capacity must be an integer, got {capacity!r}")
        if capacity < 1:
            raise ValidationError("Capacity must be a positive integer")
        return capacity

    @property
    def kind(self) -> CourseKind:
        return self._kind

    @property
    def code(self) -> str:
        return self._code

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self._title = value

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        # Shrinking below the current load does not evict anyone.
        self._capacity = self._validate_capacity(value)

    @property
    def instructor(self) -> Optional[Instructor]:
        return self._instructor

    @instructor.setter
    def instructor(self, value: Optional[Instructor]) -> None:
        self._instructor = value

    @property
    def enrolled(self) -> Tuple[str, ...]:
        """Get enrolled student ids in enrollment order."""
        return tuple(self._enrolled)

    @property
    def enrolled_count(self) -> int:
        return len(self._enrolled)

    @property
    def credits(self) -> int:
        return COURSE_KIND_SPECS[self._kind].credits

    @property
    def fee_per_credit(self) -> float:
        return COURSE_KIND_SPECS[self._kind].fee_per_credit

    def is_enrolled(self, student_id: str) -> bool:
        """Check if a student is in this course."""
        return student_id in self._enrolled

    def enroll(self, student_id: str) -> None:
        """Enroll a student, raising if already enrolled or full."""
        if student_id in self._enrolled:
            raise AlreadyEnrolledError(details={'student_id': student_id, 'course_code': self._code})
        if len(self._enrolled) >= self._capacity:
            raise CourseFullError(details={'student_id': student_id, 'course_code': self._code})
        self._enrolled.append(student_id)

    def drop(self, student_id: str) -> None:
        """Drop a student, raising if not enrolled."""
        if student_id not in self._enrolled:
            raise NotEnrolledError(details={'student_id': student_id, 'course_code': self._code})
        self._enrolled.remove(student_id)

    def seats_left(self) -> int:
        """Seats still free. Negative once capacity is shrunk below the load."""
        return self._capacity - len(self._enrolled)

    def total_fee(self) -> float:
        return self.credits * self.fee_per_credit

    @property
    def instructor_name(self) -> str:
        return self._instructor.name if self._instructor is not None else "TBA"

    def to_dict(self) -> Dict[str, object]:
        """Convert course to dictionary."""
        return {
            'kind': self._kind.value,
            'code': self._code,
            'title': self._title,
            'capacity': self._capacity,
            'instructor_id': self._instructor.id if self._instructor is not None else None,
            'enrolled': list(self._enrolled),
        }

    def __str__(self) -> str:
        return (
            f"{self._kind.value} {self._code} ({self._title}) | by {self.instructor_name} | "
            f"seats: {len(self._enrolled)}/{self._capacity} | "
            f"credits={self.credits}, fee=₹{self.total_fee():.2f}"
        )

    def __repr__(self) -> str:
        return f"Course(kind={self._kind.value}, code={self._code!r}, capacity={self._capacity})"
