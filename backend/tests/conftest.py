"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend and provide an in-memory LMS
REST backend (`httpx.MockTransport`) so no test talks to a real server.
"""
from __future__ import annotations

import itertools
import json
import re
from typing import Any, Dict, List, Optional

import httpx
import pytest
from httpx import ASGITransport

from backend.identity_access.tokens import MemoryTokenStore
from backend.lms_api import ApiTransport, LmsApi
from backend.web.config import Settings
from backend.web.main import create_app

BASE_URL = "http://lms.test/api"

ADMIN = {"id": 1, "name": "Ada Admin", "email": "admin@lms.test", "role": "ADMIN"}
# The backend is loose about types: numeric ids and lower-case roles occur.
STUDENT = {"id": 2, "name": "Sam Student", "email": "student@lms.test", "role": "student"}


class FakeLmsBackend:
    """Minimal stand-in for the LMS REST API, used as a MockTransport handler.

    Knobs:
      - `envelope_lists`: answer list endpoints with `{"data": [...]}`.
      - `down`: raise a connection error for every request.
      - `envelope_items`: answer single-object reads with `{"data": {...}}`.
      - `fail_paths`: paths (without `/api`) that answer 500.
    """

    def __init__(self) -> None:
        self.users: Dict[str, Dict[str, Any]] = {"1": dict(ADMIN), "2": dict(STUDENT)}
        self.passwords = {"admin@lms.test": "adminpass", "student@lms.test": "studentpass"}
        self.tokens: Dict[str, str] = {}
        self.courses: Dict[str, Dict[str, Any]] = {
            "c1": {"id": "c1", "title": "Python Basics", "description": "Learn Python", "imageUrl": None},
            "c2": {"id": "c2", "title": "Web Development", "description": "HTML and HTTP", "imageUrl": None},
        }
        self.modules: Dict[str, Dict[str, Any]] = {
            "m1": {"id": "m1", "title": "Functions", "courseId": "c1", "order": 2},
            "m2": {"id": "m2", "title": "Variables", "courseId": "c1", "order": 1},
        }
        self.lessons: Dict[str, Dict[str, Any]] = {
            "l1": {"id": "l1", "title": "What is a variable", "moduleId": "m2", "order": 1, "content": "x = 1", "duration": 5},
            "l2": {"id": "l2", "title": "Types", "moduleId": "m2", "order": 2, "content": "int, str", "duration": 7},
            "l3": {"id": "l3", "title": "Defining functions", "moduleId": "m1", "order": 1, "content": "def f(): ...", "duration": 10},
        }
        self.enrollments: List[Dict[str, Any]] = [
            {"id": "e1", "userId": "2", "courseId": "c1", "enrolledAt": "2024-01-01T00:00:00Z"},
        ]
        self.progress: Dict[tuple, Dict[str, Any]] = {
            ("2", "l1"): {"id": "p1", "userId": "2", "lessonId": "l1", "completed": True, "completedAt": "2024-01-02T00:00:00Z"},
        }
        self.uploads: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []
        self.envelope_lists = False
        self.envelope_items = False
        self.down = False
        self.fail_paths: set = set()
        self._ids = itertools.count(100)
        self._routes = [
            ("POST", r"/users/login", self._login, True),
            ("POST", r"/users/register", self._register, True),
            ("GET", r"/users/me", self._me, False),
            ("GET", r"/users", self._users_list, False),
            ("GET", r"/users/([^/]+)", self._user_get, False),
            ("PUT", r"/users/([^/]+)", self._user_update, False),
            ("DELETE", r"/users/([^/]+)", self._user_delete, False),
            ("GET", r"/courses", self._courses_list, False),
            ("POST", r"/courses", self._course_create, False),
            ("GET", r"/courses/([^/]+)", self._course_get, False),
            ("PUT", r"/courses/([^/]+)", self._course_update, False),
            ("DELETE", r"/courses/([^/]+)", self._course_delete, False),
            ("GET", r"/modules/course/([^/]+)", self._modules_by_course, False),
            ("POST", r"/modules", self._module_create, False),
            ("PUT", r"/modules/([^/]+)", self._module_update, False),
            ("DELETE", r"/modules/([^/]+)", self._module_delete, False),
            ("GET", r"/lessons/module/([^/]+)", self._lessons_by_module, False),
            ("POST", r"/lessons", self._lesson_create, False),
            ("POST", r"/lessons/([^/]+)/video", self._lesson_video, False),
            ("PUT", r"/lessons/([^/]+)", self._lesson_update, False),
            ("DELETE", r"/lessons/([^/]+)", self._lesson_delete, False),
            ("GET", r"/enrollments/my", self._enrollments_my, False),
            ("GET", r"/enrollments/courses/([^/]+)", self._enrollments_by_course, False),
            ("POST", r"/enrollments/courses/([^/]+)", self._enroll, False),
            ("GET", r"/progress/lesson/([^/]+)", self._progress_lesson, False),
            ("POST", r"/progress/lesson/([^/]+)/complete", self._progress_complete, False),
            ("GET", r"/progress/course/([^/]+)", self._progress_course, False),
        ]

    # --- helpers -----------------------------------------------------------------

    def issue_token(self, user_id: str) -> str:
        token = f"token-{user_id}-{next(self._ids)}"
        self.tokens[token] = str(user_id)
        return token

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [
            r.url.path.removeprefix("/api")
            for r in self.requests
            if method is None or r.method == method
        ]

    def _list(self, items: List[Any]) -> httpx.Response:
        return httpx.Response(200, json={"data": items} if self.envelope_lists else items)

    def _one(self, item: Any) -> httpx.Response:
        return httpx.Response(200, json={"data": item} if self.envelope_items else item)

    @staticmethod
    def _body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content) if request.content else {}

    @staticmethod
    def _error(status: int, message: str) -> httpx.Response:
        return httpx.Response(status, json={"message": message})

    def _caller(self, request: httpx.Request) -> Optional[Dict[str, Any]]:
        header = request.headers.get("authorization", "")
        if not header.startswith("Bearer "):
            return None
        user_id = self.tokens.get(header[len("Bearer "):])
        return self.users.get(user_id) if user_id else None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("Connection refused", request=request)
        path = request.url.path.removeprefix("/api")
        if path in self.fail_paths:
            return self._error(500, "Internal failure")
        for method, pattern, handler, public in self._routes:
            match = re.fullmatch(pattern, path)
            if match and method == request.method:
                caller = self._caller(request)
                if not public and caller is None:
                    return self._error(401, "Unauthorized")
                return handler(request, caller, *match.groups())
        return self._error(404, "Not found")

    # --- users -------------------------------------------------------------------

    def _login(self, request, caller):
        body = self._body(request)
        email = body.get("email")
        if self.passwords.get(email) != body.get("password"):
            return self._error(401, "Invalid credentials")
        user = next(u for u in self.users.values() if u["email"] == email)
        return httpx.Response(200, json={"token": self.issue_token(str(user["id"])), "user": user})

    def _register(self, request, caller):
        body = self._body(request)
        if body.get("email") in self.passwords:
            return self._error(409, "Email already registered")
        user_id = str(next(self._ids))
        user = {"id": user_id, "name": body["name"], "email": body["email"], "role": body.get("role", "STUDENT")}
        self.users[user_id] = user
        self.passwords[body["email"]] = body["password"]
        return httpx.Response(201, json={"token": self.issue_token(user_id), "user": user})

    def _me(self, request, caller):
        return self._one(caller)

    def _users_list(self, request, caller):
        return self._list(list(self.users.values()))

    def _user_get(self, request, caller, user_id):
        user = self.users.get(user_id)
        return self._one(user) if user else self._error(404, "User not found")

    def _user_update(self, request, caller, user_id):
        if user_id not in self.users:
            return self._error(404, "User not found")
        self.users[user_id].update(self._body(request))
        return httpx.Response(200, json=self.users[user_id])

    def _user_delete(self, request, caller, user_id):
        if self.users.pop(user_id, None) is None:
            return self._error(404, "User not found")
        return httpx.Response(204)

    # --- courses / modules / lessons ---------------------------------------------

    def _courses_list(self, request, caller):
        return self._list(list(self.courses.values()))

    def _course_get(self, request, caller, course_id):
        course = self.courses.get(course_id)
        return self._one(course) if course else self._error(404, "Course not found")

    def _course_create(self, request, caller):
        if caller["role"] != "ADMIN":
            return self._error(403, "Forbidden")
        course_id = f"c{next(self._ids)}"
        self.courses[course_id] = {"id": course_id, **self._body(request)}
        return httpx.Response(201, json=self.courses[course_id])

    def _course_update(self, request, caller, course_id):
        if course_id not in self.courses:
            return self._error(404, "Course not found")
        self.courses[course_id].update(self._body(request))
        return httpx.Response(200, json=self.courses[course_id])

    def _course_delete(self, request, caller, course_id):
        if self.courses.pop(course_id, None) is None:
            return self._error(404, "Course not found")
        return httpx.Response(204)

    def _modules_by_course(self, request, caller, course_id):
        return self._list([m for m in self.modules.values() if m["courseId"] == course_id])

    def _module_create(self, request, caller):
        module_id = f"m{next(self._ids)}"
        self.modules[module_id] = {"id": module_id, **self._body(request)}
        return httpx.Response(201, json=self.modules[module_id])

    def _module_update(self, request, caller, module_id):
        if module_id not in self.modules:
            return self._error(404, "Module not found")
        self.modules[module_id].update(self._body(request))
        return httpx.Response(200, json=self.modules[module_id])

    def _module_delete(self, request, caller, module_id):
        if self.modules.pop(module_id, None) is None:
            return self._error(404, "Module not found")
        return httpx.Response(204)

    def _lessons_by_module(self, request, caller, module_id):
        return self._list([l for l in self.lessons.values() if l["moduleId"] == module_id])

    def _lesson_create(self, request, caller):
        lesson_id = f"l{next(self._ids)}"
        self.lessons[lesson_id] = {"id": lesson_id, **self._body(request)}
        return httpx.Response(201, json=self.lessons[lesson_id])

    def _lesson_update(self, request, caller, lesson_id):
        if lesson_id not in self.lessons:
            return self._error(404, "Lesson not found")
        self.lessons[lesson_id].update(self._body(request))
        return httpx.Response(200, json=self.lessons[lesson_id])

    def _lesson_delete(self, request, caller, lesson_id):
        if self.lessons.pop(lesson_id, None) is None:
            return self._error(404, "Lesson not found")
        return httpx.Response(204)

    def _lesson_video(self, request, caller, lesson_id):
        if lesson_id not in self.lessons:
            return self._error(404, "Lesson not found")
        self.uploads.append(
            {"lesson_id": lesson_id, "content_type": request.headers.get("content-type", ""), "body": request.content}
        )
        self.lessons[lesson_id]["videoUrl"] = f"/uploads/{lesson_id}.mp4"
        return httpx.Response(200, json=self.lessons[lesson_id])

    # --- enrollments / progress --------------------------------------------------

    def _enrollments_my(self, request, caller):
        return self._list([e for e in self.enrollments if e["userId"] == str(caller["id"])])

    def _enrollments_by_course(self, request, caller, course_id):
        return self._list([e for e in self.enrollments if e["courseId"] == course_id])

    def _enroll(self, request, caller, course_id):
        if course_id not in self.courses:
            return self._error(404, "Course not found")
        user_id = str(caller["id"])
        if any(e["userId"] == user_id and e["courseId"] == course_id for e in self.enrollments):
            return self._error(409, "Already enrolled")
        enrollment = {"id": f"e{next(self._ids)}", "userId": user_id, "courseId": course_id, "enrolledAt": "2024-02-01T00:00:00Z"}
        self.enrollments.append(enrollment)
        return httpx.Response(201, json=enrollment)

    def _progress_lesson(self, request, caller, lesson_id):
        record = self.progress.get((str(caller["id"]), lesson_id))
        return self._one(record) if record else self._error(404, "No progress")

    def _progress_complete(self, request, caller, lesson_id):
        if lesson_id not in self.lessons:
            return self._error(404, "Lesson not found")
        user_id = str(caller["id"])
        record = {"id": f"p{next(self._ids)}", "userId": user_id, "lessonId": lesson_id, "completed": True, "completedAt": "2024-02-02T00:00:00Z"}
        self.progress[(user_id, lesson_id)] = record
        return httpx.Response(200, json=record)

    def _progress_course(self, request, caller, course_id):
        module_ids = {m["id"] for m in self.modules.values() if m["courseId"] == course_id}
        lesson_ids = {l["id"] for l in self.lessons.values() if l["moduleId"] in module_ids}
        user_id = str(caller["id"])
        return self._list([r for (uid, lid), r in self.progress.items() if uid == user_id and lid in lesson_ids])


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_backend() -> FakeLmsBackend:
    return FakeLmsBackend()


@pytest.fixture
def http_client(fake_backend) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_backend))


@pytest.fixture
def make_api(http_client):
    """Build an `LmsApi` whose token lives in a `MemoryTokenStore`."""

    def _make(token: Optional[str] = None):
        tokens = MemoryTokenStore(token)
        return LmsApi(ApiTransport(BASE_URL, http_client, tokens.get)), tokens

    return _make


@pytest.fixture
def settings() -> Settings:
    return Settings(api_url=BASE_URL, environment="test")


@pytest.fixture
def app(settings, http_client):
    return create_app(settings, http_client=http_client)


@pytest.fixture
async def web(app, anyio_backend):
    """Browser-like client: one cookie jar, redirects not followed."""
    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.fixture
async def student_web(web):
    """`web` after logging in through the form as the student."""
    r = await web.post("/login", data={"email": "student@lms.test", "password": "studentpass"})
    assert r.status_code == 303
    return web


@pytest.fixture
async def admin_web(web):
    r = await web.post("/login", data={"email": "admin@lms.test", "password": "adminpass"})
    assert r.status_code == 303
    return web
