"""
REST API for the registrar using FastAPI.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.entities import Student, Instructor, Course
from ..core.enums import CourseKind
from ..core.exceptions import RegistrarError
from ..services import Registrar


logger = logging.getLogger(__name__)

EMAIL_PATTERN = r'^[^@,]+@[^@,]+\.[^@,]+$'
# Fields are persisted comma-joined without escaping.
NO_COMMA_PATTERN = r'^[^,]*$'


# Pydantic models for API
class StudentCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=20, pattern=NO_COMMA_PATTERN)
    name: str = Field(..., min_length=1, max_length=100, pattern=NO_COMMA_PATTERN)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    program: str = Field(..., min_length=1, max_length=100, pattern=NO_COMMA_PATTERN)


class StudentResponse(BaseModel):
    id: str
    name: str
    email: str
    program: str
    role: str


class InstructorCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=20, pattern=NO_COMMA_PATTERN)
    name: str = Field(..., min_length=1, max_length=100, pattern=NO_COMMA_PATTERN)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    department: str = Field(..., min_length=1, max_length=100, pattern=NO_COMMA_PATTERN)


class InstructorResponse(BaseModel):
    id: str
    name: str
    email: str
    department: str
    role: str


class CourseCreate(BaseModel):
    kind: CourseKind
    code: str = Field(..., min_length=1, max_length=20, pattern=NO_COMMA_PATTERN)
    title: str = Field(..., min_length=1, max_length=200, pattern=NO_COMMA_PATTERN)
    capacity: int = Field(..., ge=1)
    instructor_id: Optional[str] = None


class CourseResponse(BaseModel):
    kind: str
    code: str
    title: str
    capacity: int
    instructor_id: Optional[str] = None
    instructor_name: str
    enrolled: List[str] = []
    seats_left: int
    credits: int
    fee_per_credit: float
    total_fee: float


class EnrollmentRequest(BaseModel):
    student_id: str = Field(..., min_length=1)
    course_code: str = Field(..., min_length=1)


class EnrollmentResponse(BaseModel):
    success: bool
    message: str
    student_id: str
    course_code: str
    seats_left: int


class RegistrarRestAPI:
    """REST API over a single Registrar."""

    def __init__(self, registrar: Registrar):
        self._registrar = registrar

        # Create FastAPI app
        self.app = FastAPI(
            title="Campus Registrar API",
            description="Course registration with capacity-checked enrollment",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self.app.add_exception_handler(RegistrarError, self._handle_registrar_error)

        self._setup_routes()

    @property
    def registrar(self) -> Registrar:
        return self._registrar

    async def _handle_registrar_error(self, request: Request, exc: RegistrarError) -> JSONResponse:
        """Map domain errors to their HTTP status."""
        logger.info("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error_code": exc.error_code}
        )

    def _setup_routes(self):
        """Setup API routes."""
        registrar = self._registrar

        @self.app.get("/", response_model=Dict[str, str])
        async def root():
            """Root endpoint."""
            return {
                "message": "Campus Registrar API",
                "version": __version__,
                "docs": "/docs"
            }

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.get("/students", response_model=List[StudentResponse])
        async def list_students():
            """List all students in insertion order."""
            return [self._student_to_response(s) for s in registrar.list_students()]

        @self.app.get("/students/{student_id}", response_model=StudentResponse)
        async def get_student(student_id: str):
            student = registrar.get_student(student_id)
            if student is None:
                raise HTTPException(status_code=404, detail="Student not found.")
            return self._student_to_response(student)

        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        async def create_student(student_data: StudentCreate):
            """Add or overwrite a student."""
            student = Student(
                student_data.id, student_data.name, student_data.email, student_data.program
            )
            registrar.add_student(student)
            return self._student_to_response(student)

        @self.app.get("/students/{student_id}/courses", response_model=List[CourseResponse])
        async def get_student_courses(student_id: str):
            """Courses the student is enrolled in."""
            return [self._course_to_response(c) for c in registrar.courses_for_student(student_id)]

        # Instructor endpoints
        @self.app.get("/instructors", response_model=List[InstructorResponse])
        async def list_instructors():
            return [self._instructor_to_response(i) for i in registrar.list_instructors()]

        @self.app.post("/instructors", response_model=InstructorResponse,
                       status_code=status.HTTP_201_CREATED)
        async def create_instructor(instructor_data: InstructorCreate):
            """Add or overwrite an instructor."""
            instructor = Instructor(
                instructor_data.id, instructor_data.name,
                instructor_data.email, instructor_data.department
            )
            registrar.add_instructor(instructor)
            return self._instructor_to_response(instructor)

        # Course endpoints
        @self.app.get("/courses", response_model=List[CourseResponse])
        async def list_courses():
            """List all courses in insertion order."""
            return [self._course_to_response(c) for c in registrar.list_courses()]

        @self.app.get("/courses/{course_code}", response_model=CourseResponse)
        async def get_course(course_code: str):
            course = registrar.get_course(course_code)
            if course is None:
                raise HTTPException(status_code=404, detail="Course not found.")
            return self._course_to_response(course)

        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        async def create_course(course_data: CourseCreate):
            """Add or overwrite a course. An unknown instructor id leaves it TBA."""
            instructor = None
            if course_data.instructor_id:
                instructor = registrar.get_instructor(course_data.instructor_id)
            course = Course(
                course_data.kind, course_data.code, course_data.title,
                course_data.capacity, instructor
            )
            registrar.add_course(course)
            return self._course_to_response(course)

        # Enrollment endpoints
        @self.app.post("/enrollments", response_model=EnrollmentResponse,
                       status_code=status.HTTP_201_CREATED)
        async def enroll_student(enrollment_data: EnrollmentRequest):
            """Enroll a student in a course."""
            registrar.enroll(enrollment_data.student_id, enrollment_data.course_code)
            course = registrar.get_course(enrollment_data.course_code)
            return EnrollmentResponse(
                success=True,
                message="Enrolled successfully.",
                student_id=enrollment_data.student_id,
                course_code=enrollment_data.course_code,
                seats_left=course.seats_left()
            )

        @self.app.delete("/enrollments/{student_id}/{course_code}", response_model=EnrollmentResponse)
        async def drop_student(student_id: str, course_code: str):
            """Drop a student from a course."""
            registrar.drop(student_id, course_code)
            course = registrar.get_course(course_code)
            return EnrollmentResponse(
                success=True,
                message="Dropped successfully.",
                student_id=student_id,
                course_code=course_code,
                seats_left=course.seats_left()
            )

        @self.app.post("/reload", response_model=Dict[str, int])
        async def reload():
            """Rebuild in-memory state from storage."""
            registrar.reload()
            return {
                "students": len(registrar.list_students()),
                "instructors": len(registrar.list_instructors()),
                "courses": len(registrar.list_courses()),
            }

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert Student entity to response model."""
        return StudentResponse(**student.to_dict())

    def _instructor_to_response(self, instructor: Instructor) -> InstructorResponse:
        """Convert Instructor entity to response model."""
        return InstructorResponse(**instructor.to_dict())

    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert Course entity to response model."""
        return CourseResponse(
            kind=course.kind.value,
            code=course.code,
            title=course.title,
            capacity=course.capacity,
            instructor_id=course.instructor.id if course.instructor is not None else None,
            instructor_name=course.instructor_name,
            enrolled=list(course.enrolled),
            seats_left=course.seats_left(),
            credits=course.credits,
            fee_per_credit=course.fee_per_credit,
            total_fee=course.total_fee()
        )
