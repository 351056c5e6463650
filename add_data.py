"""
Script to add sample data to a running registrar via the REST API.
Start the server first with ``python -m registrar.main --serve``.

Usage:
    python add_data.py [BASE_URL]
"""

import os
import sys

from registrar.client import RegistrarClient, RegistrarClientError, DEFAULT_BASE_URL


INSTRUCTORS = [
    ("T03", "Dr. Kavya Rao", "kavya@univ.edu", "MECH"),
]

STUDENTS = [
    ("S03", "Neha Verma", "neha@univ.edu", "B.Tech ECE"),
    ("S04", "Rahul Mehta", "rahul@univ.edu", "B.Tech MECH"),
]

COURSES = [
    ("Theory", "ME201", "Thermodynamics", 30, "T03"),
    ("Lab", "ME201L", "Thermal Lab", 15, "T03"),
]

ENROLLMENTS = [
    ("S03", "ME201"),
    ("S04", "ME201"),
    ("S04", "ME201L"),
]


def add_sample_data(client: RegistrarClient) -> int:
    """Create the sample entities. Returns the number of failed requests."""
    failures = 0

    steps = (
        [(client.create_instructor, row, f"instructor {row[0]}") for row in INSTRUCTORS]
        + [(client.create_student, row, f"student {row[0]}") for row in STUDENTS]
        + [(client.create_course, row, f"course {row[1]}") for row in COURSES]
        + [(client.enroll, row, f"enrollment {row[0]} -> {row[1]}") for row in ENROLLMENTS]
    )

    for call, args, label in steps:
        try:
            call(*args)
            print(f"[OK] Created {label}")
        except RegistrarClientError as e:
            failures += 1
            print(f"[FAIL] {label}: {e.message}")

    return failures


def main() -> int:
    base_url = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("REGISTRAR_BASE_URL", DEFAULT_BASE_URL)
    client = RegistrarClient(base_url)

    if not client.check_server():
        print(f"[FAIL] Server is not running at {base_url}")
        print("\nPlease start the server first:")
        print("  python -m registrar.main --serve")
        return 1

    failures = add_sample_data(client)
    for course in client.list_courses():
        print(f"  {course['kind']} {course['code']}: {len(course['enrolled'])}/{course['capacity']}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
