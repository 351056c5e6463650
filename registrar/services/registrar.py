"""
Registrar service: catalogs, enrollment orchestration and persistence sync.
"""

import logging
from typing import Dict, Optional, Tuple

from ..config import RegistrarConfig
from ..core.entities import Student, Instructor, Course
from ..core.enums import CourseKind
from ..core.exceptions import (
    EnrollmentError, StudentNotFoundError, CourseNotFoundError
)
from ..core.interfaces import RowStore
from ..persistence.repositories import (
    EnrollmentRecord, StudentRowMapper, InstructorRowMapper,
    CourseRowMapper, EnrollmentRowMapper
)


logger = logging.getLogger(__name__)

DEMO_INSTRUCTORS = (
    ("T01", "Dr. Meera", "meera@univ.edu", "CSE"),
    ("T02", "Prof. Arjun", "arjun@univ.edu", "ECE"),
)

DEMO_STUDENTS = (
    ("S01", "Riya Agarwal", "riya@univ.edu", "B.Tech CSE"),
    ("S02", "Aditya Singh", "adi@univ.edu", "B.Tech CSE"),
)

DEMO_COURSES = (
    (CourseKind.THEORY, "CS101", "Programming Basics", 3),
    (CourseKind.LAB, "CS101L", "Programming Lab", 2),
    (CourseKind.PROJECT, "CS399", "Mini Project", 2),
)


class Registrar:
    """
    Owns the student, instructor and course catalogs.

    Every catalog mutation rewrites that catalog's file. Enrolling appends one
    record to the enrollment file; dropping rewrites it without the pair.
    Storage failures are logged by the store and never undo the in-memory
    change.
    """

    def __init__(self, store: RowStore, config: Optional[RegistrarConfig] = None):
        self._store = store
        self._config = config or RegistrarConfig()
        self._students: Dict[str, Student] = {}
        self._instructors: Dict[str, Instructor] = {}
        self._courses: Dict[str, Course] = {}

        self._student_mapper = StudentRowMapper()
        self._instructor_mapper = InstructorRowMapper()
        self._enrollment_mapper = EnrollmentRowMapper()

        self._bootstrap()

    def _bootstrap(self) -> None:
        """Load all catalogs, replay enrollments and seed demo data."""
        self._load_instructors()
        self._load_students()
        self._load_courses()
        self._load_enrollments()

        if self._config.seed_demo_data:
            if not self._instructors:
                self._seed_demo_instructors()
            if not self._students:
                self._seed_demo_students()
            if not self._courses:
                self._seed_demo_courses()

        logger.info(
            "Registrar ready: %d students, %d instructors, %d courses",
            len(self._students), len(self._instructors), len(self._courses)
        )

    def reload(self) -> None:
        """Drop in-memory state and bootstrap again from storage."""
        self._students.clear()
        self._instructors.clear()
        self._courses.clear()
        self._bootstrap()

    # Demo data

    def _seed_demo_instructors(self) -> None:
        logger.info("No instructors found, seeding demo instructors")
        for row in DEMO_INSTRUCTORS:
            self.add_instructor(Instructor(*row))

    def _seed_demo_students(self) -> None:
        logger.info("No students found, seeding demo students")
        for row in DEMO_STUDENTS:
            self.add_student(Student(*row))

    def _seed_demo_courses(self) -> None:
        logger.info("No courses found, seeding demo courses")
        instructor = next(iter(self._instructors.values()), None)
        if instructor is None:
            instructor = Instructor(*DEMO_INSTRUCTORS[0])
            self.add_instructor(instructor)
        for kind, code, title, capacity in DEMO_COURSES:
            self.add_course(Course(kind, code, title, capacity, instructor))

    # Catalog management

    def add_student(self, student: Student) -> None:
        """Insert or overwrite a student, then rewrite the student file."""
        self._students[student.id] = student
        self._save_students()
        logger.info("Saved student %s", student.id)

    def add_instructor(self, instructor: Instructor) -> None:
        """Insert or overwrite an instructor, then rewrite the instructor file."""
        self._instructors[instructor.id] = instructor
        self._save_instructors()
        logger.info("Saved instructor %s", instructor.id)

    def add_course(self, course: Course) -> None:
        """Insert or overwrite a course, then rewrite the course file."""
        self._courses[course.code] = course
        self._save_courses()
        logger.info("Saved course %s", course.code)

    def get_student(self, student_id: str) -> Optional[Student]:
        return self._students.get(student_id)

    def get_instructor(self, instructor_id: str) -> Optional[Instructor]:
        return self._instructors.get(instructor_id)

    def get_course(self, course_code: str) -> Optional[Course]:
        return self._courses.get(course_code)

    def list_students(self) -> Tuple[Student, ...]:
        return tuple(self._students.values())

    def list_instructors(self) -> Tuple[Instructor, ...]:
        return tuple(self._instructors.values())

    def list_courses(self) -> Tuple[Course, ...]:
        return tuple(self._courses.values())

    def courses_for_student(self, student_id: str) -> Tuple[Course, ...]:
        """Get the courses whose enrolled set contains the student id."""
        return tuple(c for c in self._courses.values() if c.is_enrolled(student_id))

    # Enrollment actions

    def enroll(self, student_id: str, course_code: str) -> None:
        """
        Enroll a student in a course and append the enrollment record.

        Raises StudentNotFoundError or CourseNotFoundError for unknown keys;
        errors raised by the course propagate unchanged.
        """
        if student_id not in self._students:
            raise StudentNotFoundError(details={'student_id': student_id})
        course = self._courses.get(course_code)
        if course is None:
            raise CourseNotFoundError(details={'course_code': course_code})

        course.enroll(student_id)
        self._store.append(
            self._config.enrollments_file,
            [student_id, course_code]
        )
        logger.info("Enrolled %s in %s", student_id, course_code)

    def drop(self, student_id: str, course_code: str) -> None:
        """
        Drop a student from a course and rewrite the enrollment records
        without that pair.
        """
        course = self._courses.get(course_code)
        if course is None:
            raise CourseNotFoundError(details={'course_code': course_code})

        course.drop(student_id)
        rows = self._store.read(self._config.enrollments_file)
        remaining = [
            row for row in rows
            if not (len(row) >= 2 and row[0] == student_id and row[1] == course_code)
        ]
        self._store.write_all(self._config.enrollments_file, remaining)
        logger.info("Dropped %s from %s", student_id, course_code)

    # Persistence loaders/savers

    def _load_students(self) -> None:
        rows = self._store.read(self._config.students_file)
        for student in self._student_mapper.from_rows(rows):
            self._students[student.id] = student

    def _save_students(self) -> None:
        rows = self._student_mapper.to_rows(self._students.values())
        self._store.write_all(self._config.students_file, rows)

    def _load_instructors(self) -> None:
        rows = self._store.read(self._config.instructors_file)
        for instructor in self._instructor_mapper.from_rows(rows):
            self._instructors[instructor.id] = instructor

    def _save_instructors(self) -> None:
        rows = self._instructor_mapper.to_rows(self._instructors.values())
        self._store.write_all(self._config.instructors_file, rows)

    def _load_courses(self) -> None:
        mapper = CourseRowMapper(self._instructors)
        rows = self._store.read(self._config.courses_file)
        for course in mapper.from_rows(rows):
            self._courses[course.code] = course

    def _save_courses(self) -> None:
        rows = CourseRowMapper().to_rows(self._courses.values())
        self._store.write_all(self._config.courses_file, rows)

    def _load_enrollments(self) -> None:
        """Replay enrollment records. Stale or duplicate records are discarded."""
        rows = self._store.read(self._config.enrollments_file)
        for record in self._enrollment_mapper.from_rows(rows):
            self._replay(record)

    def _replay(self, record: EnrollmentRecord) -> None:
        course = self._courses.get(record.course_code)
        if course is None:
            logger.debug("Skipping enrollment for unknown course %s", record.course_code)
            return
        try:
            course.enroll(record.student_id)
        except EnrollmentError as e:
            logger.debug(
                "Discarding enrollment %s -> %s: %s",
                record.student_id, record.course_code, e.message
            )
