import logging

import pytest

from registrar.config import RegistrarConfig
from registrar.core import (
    Student, Instructor, Course, CourseKind,
    AlreadyEnrolledError, CourseFullError, NotEnrolledError,
    StudentNotFoundError, CourseNotFoundError,
)
from registrar.persistence import CsvRowStore
from registrar.services import Registrar


def write_file(data_dir, name, lines):
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / name).write_text("".join(line + "\n" for line in lines), encoding="utf-8")


class FailingStore(CsvRowStore):
    """Store whose writes fail after bootstrap, the way a full disk would."""

    def __init__(self, base_path):
        super().__init__(base_path)
        self.broken = False

    def write_all(self, name, rows):
        if self.broken:
            logging.getLogger("registrar.persistence").error("Write error on %s", name)
            return
        super().write_all(name, rows)

    def append(self, name, row):
        if self.broken:
            logging.getLogger("registrar.persistence").error("Append error on %s", name)
            return
        super().append(name, row)


# Bootstrap

def test_bootstrap_seeds_empty_storage(registrar, read_lines):
    assert [s.id for s in registrar.list_students()] == ["S01", "S02"]
    assert [i.id for i in registrar.list_instructors()] == ["T01", "T02"]
    assert [(c.kind, c.code, c.capacity) for c in registrar.list_courses()] == [
        (CourseKind.THEORY, "CS101", 3),
        (CourseKind.LAB, "CS101L", 2),
        (CourseKind.PROJECT, "CS399", 2),
    ]
    assert all(c.instructor.id == "T01" for c in registrar.list_courses())

    assert read_lines("students.csv") == [
        "S01,Riya Agarwal,riya@univ.edu,B.Tech CSE",
        "S02,Aditya Singh,adi@univ.edu,B.Tech CSE",
    ]
    assert read_lines("instructors.csv") == [
        "T01,Dr. Meera,meera@univ.edu,CSE",
        "T02,Prof. Arjun,arjun@univ.edu,ECE",
    ]
    assert read_lines("courses.csv") == [
        "Theory,CS101,Programming Basics,3,T01",
        "Lab,CS101L,Programming Lab,2,T01",
        "Project,CS399,Mini Project,2,T01",
    ]
    assert read_lines("enrollments.csv") == []


def test_bootstrap_without_seeding(empty_registrar, data_dir):
    assert empty_registrar.list_students() == ()
    assert empty_registrar.list_instructors() == ()
    assert empty_registrar.list_courses() == ()
    assert not data_dir.exists()


def test_bootstrap_keeps_existing_data(data_dir, store, config):
    write_file(data_dir, "instructors.csv", ["T05,Dr. Rao,rao@univ.edu,MECH"])
    write_file(data_dir, "students.csv", ["S10,Neha,neha@univ.edu,ECE"])
    write_file(data_dir, "courses.csv", ["Lab,ME201L,Thermal Lab,10,T05"])

    registrar = Registrar(store, config)

    assert [s.id for s in registrar.list_students()] == ["S10"]
    assert [i.id for i in registrar.list_instructors()] == ["T05"]
    (course,) = registrar.list_courses()
    assert course.code == "ME201L"
    assert course.instructor is registrar.get_instructor("T05")


def test_courses_seeded_with_first_existing_instructor(data_dir, store, config):
    write_file(data_dir, "instructors.csv", [
        "T07,Dr. Iyer,iyer@univ.edu,CIVIL",
        "T08,Dr. Das,das@univ.edu,EEE",
    ])
    registrar = Registrar(store, config)

    assert [i.id for i in registrar.list_instructors()] == ["T07", "T08"]
    assert {c.instructor.id for c in registrar.list_courses()} == {"T07"}


def test_unknown_instructor_gives_tba_course(data_dir, store, config):
    write_file(data_dir, "courses.csv", ["Theory,CS101,Basics,3,T99"])
    registrar = Registrar(store, config)

    course = registrar.get_course("CS101")
    assert course.instructor is None
    assert "| by TBA |" in str(course)


def test_replay_restores_enrollments(data_dir, store, config):
    write_file(data_dir, "courses.csv", ["Theory,CS101,Basics,3,"])
    write_file(data_dir, "enrollments.csv", ["S01,CS101", "S02,CS101"])

    registrar = Registrar(store, config)
    assert registrar.get_course("CS101").enrolled == ("S01", "S02")


def test_replay_discards_stale_records(data_dir, store, config):
    write_file(data_dir, "courses.csv", ["Lab,CS101L,Lab,1,"])
    write_file(data_dir, "enrollments.csv", [
        "S01,CS101L",
        "S01,CS101L",
        "S02,CS101L",
        "S01,GONE101",
        "broken",
    ])

    registrar = Registrar(store, config)

    course = registrar.get_course("CS101L")
    assert course.enrolled == ("S01",)
    assert course.seats_left() == 0


def test_replay_accepts_unknown_student_ids(data_dir, store, config):
    write_file(data_dir, "courses.csv", ["Theory,CS101,Basics,3,"])
    write_file(data_dir, "enrollments.csv", ["GHOST,CS101"])

    registrar = Registrar(store, config)

    assert registrar.get_student("GHOST") is None
    assert registrar.get_course("CS101").is_enrolled("GHOST")


def test_malformed_course_row_does_not_abort_startup(data_dir, store, config):
    write_file(data_dir, "courses.csv", [
        "Theory,CS101,Basics,lots,",
        "Project,CS399,Mini Project,2,",
    ])
    registrar = Registrar(store, config)
    assert [c.code for c in registrar.list_courses()] == ["CS399"]


# Catalog management

def test_add_student_rewrites_catalog(registrar, read_lines):
    registrar.add_student(Student("S10", "Neha Verma", "neha@univ.edu", "B.Tech ECE"))

    assert registrar.get_student("S10").name == "Neha Verma"
    assert read_lines("students.csv")[-1] == "S10,Neha Verma,neha@univ.edu,B.Tech ECE"
    assert len(read_lines("students.csv")) == 3


def test_add_student_overwrites_by_id(registrar, read_lines):
    registrar.add_student(Student("S01", "Riya A.", "riya@univ.edu", "M.Tech"))

    assert [s.id for s in registrar.list_students()] == ["S01", "S02"]
    assert registrar.get_student("S01").program == "M.Tech"
    assert read_lines("students.csv")[0] == "S01,Riya A.,riya@univ.edu,M.Tech"


def test_add_instructor_and_course(registrar, read_lines):
    rao = Instructor("T05", "Dr. Rao", "rao@univ.edu", "MECH")
    registrar.add_instructor(rao)
    registrar.add_course(Course(CourseKind.LAB, "ME201L", "Thermal Lab", 10, rao))

    assert registrar.get_instructor("T05") is rao
    assert read_lines("instructors.csv")[-1] == "T05,Dr. Rao,rao@univ.edu,MECH"
    assert read_lines("courses.csv")[-1] == "Lab,ME201L,Thermal Lab,10,T05"


def test_listings_are_read_only(registrar):
    students = registrar.list_students()
    assert isinstance(students, tuple)
    with pytest.raises(AttributeError):
        students.append(Student("S99", "x", "y", "z"))
    assert len(registrar.list_students()) == 2


def test_lookup_misses_return_none(registrar):
    assert registrar.get_student("S99") is None
    assert registrar.get_course("XX000") is None
    assert registrar.get_instructor("T99") is None


def test_catalogs_round_trip(registrar, store, config):
    registrar.add_student(Student("S03", "Neha Verma", "neha@univ.edu", "B.Tech ECE"))
    registrar.get_course("CS399").capacity = 5
    registrar.add_course(registrar.get_course("CS399"))

    reloaded = Registrar(store, config)

    assert reloaded.list_students() == registrar.list_students()
    assert reloaded.list_instructors() == registrar.list_instructors()
    assert [c.to_dict() for c in reloaded.list_courses()] == \
        [c.to_dict() for c in registrar.list_courses()]


# Enrollment

def test_enroll_appends_record(registrar, read_lines):
    registrar.enroll("S01", "CS101")
    registrar.enroll("S02", "CS101")

    assert registrar.get_course("CS101").enrolled == ("S01", "S02")
    assert read_lines("enrollments.csv") == ["S01,CS101", "S02,CS101"]


def test_enroll_unknown_student(registrar, read_lines):
    with pytest.raises(StudentNotFoundError) as exc_info:
        registrar.enroll("S99", "CS101")
    assert exc_info.value.message == "Student not found."
    assert read_lines("enrollments.csv") == []


def test_enroll_unknown_course(registrar):
    with pytest.raises(CourseNotFoundError) as exc_info:
        registrar.enroll("S01", "XX000")
    assert exc_info.value.message == "Course not found."


def test_enroll_checks_student_before_course(registrar):
    with pytest.raises(StudentNotFoundError):
        registrar.enroll("S99", "XX000")


def test_enroll_twice_propagates_course_error(registrar, read_lines):
    registrar.enroll("S01", "CS101")
    with pytest.raises(AlreadyEnrolledError):
        registrar.enroll("S01", "CS101")
    assert read_lines("enrollments.csv") == ["S01,CS101"]


def test_enroll_into_full_course(empty_registrar, read_lines):
    empty_registrar.add_student(Student("S01", "Riya", "riya@univ.edu", "CSE"))
    empty_registrar.add_student(Student("S02", "Adi", "adi@univ.edu", "CSE"))
    empty_registrar.add_course(Course(CourseKind.LAB, "CS101L", "Lab", 1))
    empty_registrar.enroll("S01", "CS101L")
    course = empty_registrar.get_course("CS101L")
    assert course.seats_left() == 0

    with pytest.raises(CourseFullError):
        empty_registrar.enroll("S02", "CS101L")

    assert course.seats_left() == 0
    assert course.enrolled == ("S01",)
    assert read_lines("enrollments.csv") == ["S01,CS101L"]


def test_drop_rewrites_without_pair(registrar, data_dir, read_lines):
    registrar.enroll("S01", "CS101")
    registrar.enroll("S02", "CS101")
    registrar.enroll("S01", "CS399")
    # Leftover duplicate and a short row from an earlier run.
    with open(data_dir / "enrollments.csv", "a", encoding="utf-8") as f:
        f.write("S01,CS101\nstray\n")

    registrar.drop("S01", "CS101")

    assert registrar.get_course("CS101").enrolled == ("S02",)
    assert read_lines("enrollments.csv") == ["S02,CS101", "S01,CS399", "stray"]


def test_drop_unknown_course(registrar):
    with pytest.raises(CourseNotFoundError):
        registrar.drop("S01", "XX000")


def test_drop_not_enrolled(registrar):
    with pytest.raises(NotEnrolledError):
        registrar.drop("S01", "CS101")


def test_drop_does_not_consult_student_catalog(data_dir, store, config):
    write_file(data_dir, "courses.csv", ["Theory,CS101,Basics,3,"])
    write_file(data_dir, "enrollments.csv", ["GHOST,CS101"])
    registrar = Registrar(store, config)

    registrar.drop("GHOST", "CS101")

    assert registrar.get_course("CS101").enrolled == ()
    assert (data_dir / "enrollments.csv").read_text(encoding="utf-8") == ""


def test_drop_then_reenroll(registrar, read_lines):
    registrar.enroll("S01", "CS101L")
    registrar.enroll("S02", "CS101L")
    registrar.drop("S01", "CS101L")
    registrar.enroll("S01", "CS101L")

    assert registrar.get_course("CS101L").enrolled == ("S02", "S01")
    assert read_lines("enrollments.csv") == ["S02,CS101L", "S01,CS101L"]


def test_capacity_never_exceeded(registrar):
    course = registrar.get_course("CS101")
    accepted = []
    for n in range(10):
        student_id = f"X{n}"
        registrar.add_student(Student(student_id, "n", "e", "p"))
        try:
            registrar.enroll(student_id, "CS101")
            accepted.append(student_id)
        except CourseFullError:
            pass
        assert course.enrolled_count <= course.capacity
        assert course.seats_left() == course.capacity - course.enrolled_count

    assert accepted == ["X0", "X1", "X2"]


def test_courses_for_student(registrar):
    registrar.enroll("S01", "CS101")
    registrar.enroll("S01", "CS399")
    assert [c.code for c in registrar.courses_for_student("S01")] == ["CS101", "CS399"]
    assert registrar.courses_for_student("S02") == ()


# Persistence failures

def test_write_failure_keeps_in_memory_change(data_dir, caplog):
    store = FailingStore(str(data_dir))
    registrar = Registrar(store, RegistrarConfig(data_dir=str(data_dir)))
    store.broken = True

    with caplog.at_level(logging.ERROR, logger="registrar"):
        registrar.add_student(Student("S10", "Neha", "neha@univ.edu", "ECE"))
        registrar.enroll("S10", "CS101")

    assert registrar.get_student("S10") is not None
    assert registrar.get_course("CS101").is_enrolled("S10")
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 2

    reloaded = Registrar(CsvRowStore(str(data_dir)), RegistrarConfig(data_dir=str(data_dir)))
    assert reloaded.get_student("S10") is None
    assert not reloaded.get_course("CS101").is_enrolled("S10")


# End to end

def test_enrollment_survives_restart(registrar, store, config):
    theory = next(c for c in registrar.list_courses() if c.kind is CourseKind.THEORY)
    registrar.enroll("S01", theory.code)

    restarted = Registrar(store, config)

    assert restarted.get_course(theory.code).is_enrolled("S01")
    assert len(restarted.list_students()) == 2
    assert len(restarted.list_courses()) == 3


def test_reload_rebuilds_from_storage(registrar, data_dir):
    registrar.enroll("S01", "CS101")
    write_file(data_dir, "students.csv", ["S77,Zed,zed@univ.edu,Physics"])

    registrar.reload()

    assert [s.id for s in registrar.list_students()] == ["S77"]
    assert registrar.get_course("CS101").enrolled == ("S01",)


def test_custom_file_names(data_dir, store):
    config = RegistrarConfig(
        data_dir=str(data_dir),
        students_file="people.csv",
        enrollments_file="seats.csv",
    )
    registrar = Registrar(store, config)
    registrar.enroll("S01", "CS101")

    assert (data_dir / "people.csv").exists()
    assert (data_dir / "seats.csv").read_text(encoding="utf-8") == "S01,CS101\n"
    assert not (data_dir / "students.csv").exists()


def test_undecodable_student_file_does_not_abort_startup(data_dir, store, config, caplog):
    data_dir.mkdir(parents=True)
    (data_dir / "students.csv").write_bytes(b"S02,\xff\xfe,adi@univ.edu,ECE\n")
    write_file(data_dir, "instructors.csv", ["T05,Dr. Rao,rao@univ.edu,ME"])

    with caplog.at_level(logging.ERROR, logger="registrar"):
        registrar = Registrar(store, config)

    assert [s.id for s in registrar.list_students()] == ["S01", "S02"]
    assert [i.id for i in registrar.list_instructors()] == ["T05"]
    assert any(r.getMessage().startswith("Read error") for r in caplog.records)
