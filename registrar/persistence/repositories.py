"""
Row mappers between catalog entities and persisted rows.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Iterable, List, Mapping, Optional, TypeVar

from ..core.entities import Student, Instructor, Course
from ..core.enums import CourseKind
from ..core.exceptions import ValidationError
from ..core.interfaces import Row


logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class EnrollmentRecord:
    """One persisted (student id, course code) pair."""
    student_id: str
    course_code: str


class BaseRowMapper(Generic[T], ABC):
    """Common row conversion; rows with too few fields are skipped."""

    min_fields: int = 0
    resource: str = "row"

    def to_rows(self, entities: Iterable[T]) -> List[Row]:
        """Convert entities to rows."""
        return [self._entity_to_row(entity) for entity in entities]

    def from_rows(self, rows: Iterable[Row]) -> List[T]:
        """Convert rows to entities, skipping rows that cannot be mapped."""
        entities = []
        for line_num, row in enumerate(rows, 1):
            if len(row) < self.min_fields:
                continue
            try:
                entity = self._entity_from_row(row)
            except (ValueError, ValidationError) as e:
                logger.warning("Skipping malformed %s at line %d: %s", self.resource, line_num, e)
                continue
            if entity is not None:
                entities.append(entity)
        return entities

    @abstractmethod
    def _entity_to_row(self, entity: T) -> Row:
        """Convert an entity to a row."""
        pass

    @abstractmethod
    def _entity_from_row(self, row: Row) -> Optional[T]:
        """Convert a row to an entity."""
        pass


class StudentRowMapper(BaseRowMapper[Student]):
    """Rows of the form id,name,email,program."""

    min_fields = 4
    resource = "student"

    def _entity_to_row(self, entity: Student) -> Row:
        return [entity.id, entity.name, entity.email, entity.program]

    def _entity_from_row(self, row: Row) -> Student:
        return Student(row[0], row[1], row[2], row[3])


class InstructorRowMapper(BaseRowMapper[Instructor]):
    """Rows of the form id,name,email,department."""

    min_fields = 4
    resource = "instructor"

    def _entity_to_row(self, entity: Instructor) -> Row:
        return [entity.id, entity.name, entity.email, entity.department]

    def _entity_from_row(self, row: Row) -> Instructor:
        return Instructor(row[0], row[1], row[2], row[3])


class CourseRowMapper(BaseRowMapper[Course]):
    """
    Rows of the form kind,code,title,capacity,instructorId.

    The instructor id is resolved against the given catalog. An empty or
    unknown id leaves the course unassigned.
    """

    min_fields = 5
    resource = "course"

    def __init__(self, instructors: Optional[Mapping[str, Instructor]] = None):
        self._instructors = instructors or {}

    def _entity_to_row(self, entity: Course) -> Row:
        instructor_id = entity.instructor.id if entity.instructor is not None else ""
        return [entity.kind.value, entity.code, entity.title, str(entity.capacity), instructor_id]

    def _entity_from_row(self, row: Row) -> Course:
        kind_raw, code, title, capacity_raw, instructor_id = row[:5]
        try:
            kind = CourseKind(kind_raw)
        except ValueError:
            raise ValueError(f"unknown course kind {kind_raw!r}")
        capacity = int(capacity_raw.strip())
        instructor = self._instructors.get(instructor_id)
        return Course(kind, code, title, capacity, instructor)


class EnrollmentRowMapper(BaseRowMapper[EnrollmentRecord]):
    """Rows of the form studentId,courseCode."""

    min_fields = 2
    resource = "enrollment"

    def _entity_to_row(self, entity: EnrollmentRecord) -> Row:
        return [entity.student_id, entity.course_code]

    def _entity_from_row(self, row: Row) -> EnrollmentRecord:
        return EnrollmentRecord(row[0], row[1])
