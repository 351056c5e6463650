"""
HTTP client for the registrar REST API, built on requests.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .core.exceptions import RegistrarError


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


class RegistrarClientError(RegistrarError):
    """Raised when the server rejects a request or cannot be reached."""
    default_message = "Registrar request failed."
    default_code = "client_error"


class RegistrarClient:
    """
    Thin wrapper over the REST API.

    ``session`` may be any object with requests-style ``get``, ``post`` and
    ``delete`` methods; it defaults to a ``requests.Session``.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, session: Optional[Any] = None,
                 timeout: float = 5.0):
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _request(self, method: str, path: str, expected: int = 200,
                 json: Optional[Dict[str, Any]] = None) -> Any:
        """Send a request and decode the JSON body, raising on any failure."""
        call = getattr(self._session, method)
        kwargs: Dict[str, Any] = {"timeout": self._timeout}
        if json is not None:
            kwargs["json"] = json

        try:
            response = call(self._url(path), **kwargs)
        except requests.exceptions.RequestException as e:
            raise RegistrarClientError(f"Cannot reach {self._base_url}: {e}")

        if response.status_code != expected:
            detail = response.text
            error_code = None
            try:
                body = response.json()
                detail = body.get("detail", detail)
                error_code = body.get("error_code")
            except ValueError:
                pass
            raise RegistrarClientError(
                str(detail),
                error_code=error_code,
                details={"status_code": response.status_code, "path": path}
            )
        return response.json()

    def check_server(self) -> bool:
        """Check if the server answers its health endpoint."""
        try:
            self._request("get", "/health")
        except RegistrarClientError as e:
            logger.warning("Server check failed: %s", e.message)
            return False
        return True

    def create_student(self, student_id: str, name: str, email: str, program: str) -> Dict[str, Any]:
        data = {"id": student_id, "name": name, "email": email, "program": program}
        return self._request("post", "/students", expected=201, json=data)

    def create_instructor(self, instructor_id: str, name: str, email: str,
                          department: str) -> Dict[str, Any]:
        data = {"id": instructor_id, "name": name, "email": email, "department": department}
        return self._request("post", "/instructors", expected=201, json=data)

    def create_course(self, kind: str, code: str, title: str, capacity: int,
                      instructor_id: Optional[str] = None) -> Dict[str, Any]:
        data = {
            "kind": kind,
            "code": code,
            "title": title,
            "capacity": capacity,
            "instructor_id": instructor_id,
        }
        return self._request("post", "/courses", expected=201, json=data)

    def list_courses(self) -> List[Dict[str, Any]]:
        return self._request("get", "/courses")

    def list_students(self) -> List[Dict[str, Any]]:
        return self._request("get", "/students")

    def enroll(self, student_id: str, course_code: str) -> Dict[str, Any]:
        data = {"student_id": student_id, "course_code": course_code}
        return self._request("post", "/enrollments", expected=201, json=data)

    def drop(self, student_id: str, course_code: str) -> Dict[str, Any]:
        return self._request("delete", f"/enrollments/{student_id}/{course_code}")
