"""Aggregate of all resource modules bound to one transport."""

from __future__ import annotations

from .auth import AuthApi
from .courses import CoursesApi
from .enrollments import EnrollmentsApi
from .lessons import LessonsApi
from .modules import ModulesApi
from .progress import ProgressApi
from .transport import ApiTransport
from .users import UsersApi


class LmsApi:
    def __init__(self, transport: ApiTransport) -> None:
        self.transport = transport
        self.auth = AuthApi(transport)
        self.courses = CoursesApi(transport)
        self.modules = ModulesApi(transport)
        self.lessons = LessonsApi(transport)
        self.enrollments = EnrollmentsApi(transport)
        self.progress = ProgressApi(transport)
        self.users = UsersApi(transport)
