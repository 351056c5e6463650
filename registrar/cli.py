"""
Interactive console menu over a Registrar.
"""

import logging
from typing import Callable, Optional

from .core.entities import Student
from .core.exceptions import RegistrarError
from .services import Registrar


logger = logging.getLogger(__name__)

MENU = """
--- Menu ---
1. List courses
2. List students
3. Enroll student to course
4. Drop student from course
5. Add new student
6. Exit"""

EXIT_CHOICE = 6


class RegistrarConsole:
    """Menu loop. Input and output functions are injectable for tests."""

    def __init__(self, registrar: Registrar,
                 input_func: Optional[Callable[[str], str]] = None,
                 output_func: Optional[Callable[[str], None]] = None):
        self._registrar = registrar
        self._input = input_func or input
        self._output = output_func or print

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _read_choice(self) -> int:
        raw = self._ask("Choice: ")
        while True:
            try:
                return int(raw)
            except ValueError:
                raw = self._ask("Enter a number: ")

    def run(self) -> None:
        """Run the menu until Exit is chosen or input ends."""
        self._output("Welcome to Course Registration")
        try:
            while True:
                self._output(MENU)
                choice = self._read_choice()
                if not self._handle_safely(choice):
                    break
        except (EOFError, KeyboardInterrupt):
            self._output("\nGoodbye!")

    def _handle_safely(self, choice: int) -> bool:
        """Dispatch one choice. Returns False once the user exits."""
        try:
            return self._handle(choice)
        except RegistrarError as e:
            self._output(f"Error: {e.message}")
        except (EOFError, KeyboardInterrupt):
            raise
        except Exception as e:
            logger.exception("Unexpected error handling menu choice %s", choice)
            self._output(f"Unexpected: {e}")
        return True

    def _handle(self, choice: int) -> bool:
        if choice == 1:
            for course in self._registrar.list_courses():
                self._output(f" - {course}")
        elif choice == 2:
            for student in self._registrar.list_students():
                self._output(f" - {student}")
        elif choice == 3:
            student_id = self._ask("Student ID: ")
            code = self._ask("Course Code: ")
            self._registrar.enroll(student_id, code)
            self._output("Enrolled successfully.")
        elif choice == 4:
            student_id = self._ask("Student ID: ")
            code = self._ask("Course Code: ")
            self._registrar.drop(student_id, code)
            self._output("Dropped successfully.")
        elif choice == 5:
            student_id = self._ask("Student ID (e.g., S10): ")
            name = self._ask("Name: ")
            email = self._ask("Email: ")
            program = self._ask("Program: ")
            self._registrar.add_student(Student(student_id, name, email, program))
            self._output("Student added.")
        elif choice == EXIT_CHOICE:
            self._output("Goodbye!")
            return False
        else:
            self._output("Invalid.")
        return True
