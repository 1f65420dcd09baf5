"""
Read-side use cases that assemble course pages from several backend calls.

Why:
    Course pages need data from several resources (course, modules, lessons,
    enrollments, progress). Keeping the orchestration here keeps the web
    adapter thin and makes the partial-failure rules testable without HTTP.

Failure policy:
    Reads degrade instead of failing: a failed branch of a fan-out resolves to
    an empty value for that branch, a failed top-level read yields an empty
    view with `error` set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from backend.identity_access.domain import Role
from backend.identity_access.models import Identity
from backend.lms_api import LmsApi, gather_settled


def _order_key(item: Mapping[str, Any]) -> tuple:
    order = item.get("order")
    try:
        return (0, float(order))
    except (TypeError, ValueError):
        return (1, 0.0)


def sort_by_order(items: List[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """Sort by the numeric `order` field; items without one go last (stable)."""
    return sorted((i for i in items if isinstance(i, Mapping)), key=_order_key)


def completion_percent(completed: Mapping[str, bool], total_lessons: int) -> float:
    if total_lessons <= 0:
        return 0.0
    done = sum(1 for flag in completed.values() if flag)
    return done / total_lessons * 100


@dataclass
class ModuleWithLessons:
    module: Mapping[str, Any]
    lessons: List[Mapping[str, Any]] = field(default_factory=list)


@dataclass
class CourseOverview:
    course: Optional[Mapping[str, Any]]
    modules: List[ModuleWithLessons] = field(default_factory=list)
    completed: Dict[str, bool] = field(default_factory=dict)
    is_enrolled: bool = False
    progress: float = 0.0
    error: Optional[str] = None

    @property
    def lessons(self) -> List[Mapping[str, Any]]:
        return [lesson for m in self.modules for lesson in m.lessons]


@dataclass
class CourseOverviewInput:
    course_id: str
    identity: Identity


async def _modules_with_lessons(api: LmsApi, course_id: str) -> List[ModuleWithLessons]:
    modules_result = await api.modules.list_by_course(course_id)
    modules = sort_by_order(modules_result.data_or([]))
    lesson_lists = await gather_settled(
        (api.lessons.list_by_module(str(m.get("id"))) for m in modules),
        default=[],
    )
    return [
        ModuleWithLessons(module=m, lessons=sort_by_order(lessons))
        for m, lessons in zip(modules, lesson_lists)
    ]


async def _lesson_completion(api: LmsApi, lessons: List[Mapping[str, Any]]) -> Dict[str, bool]:
    records = await gather_settled(
        (api.progress.lesson(str(lesson.get("id"))) for lesson in lessons),
        default={},
    )
    completed: Dict[str, bool] = {}
    for lesson, record in zip(lessons, records):
        if isinstance(record, Mapping):
            completed[str(lesson.get("id"))] = bool(record.get("completed"))
    return completed


def _enrolled_in(enrollments: List[Any], course_id: str) -> bool:
    return any(
        isinstance(e, Mapping) and str(e.get("courseId")) == str(course_id)
        for e in enrollments
    )


class CourseOverviewUseCase:
    def __init__(self, api: LmsApi) -> None:
        self._api = api

    async def execute(self, req: CourseOverviewInput) -> CourseOverview:
        """Return the course with ordered modules, lessons and the caller's progress.

        Behavior:
            - Lessons are fetched concurrently for every module.
            - Students: enrollment is looked up; when enrolled, per-lesson
              progress is fetched concurrently and summarized as a percentage.
            - Admins are treated as enrolled (they can open every lesson) and
              carry no progress.

        Permissions:
            Caller must be authenticated; the backend enforces visibility.
        """
        course_result = await self._api.courses.get(req.course_id)
        if not course_result.is_ok:
            return CourseOverview(course=None, error=course_result.error)

        overview = CourseOverview(course=course_result.data)
        overview.modules = await _modules_with_lessons(self._api, req.course_id)

        if req.identity.role is Role.ADMIN:
            overview.is_enrolled = True
            return overview

        enrollments = (await self._api.enrollments.my()).data_or([])
        overview.is_enrolled = _enrolled_in(enrollments, req.course_id)
        if overview.is_enrolled:
            lessons = overview.lessons
            overview.completed = await _lesson_completion(self._api, lessons)
            overview.progress = completion_percent(overview.completed, len(lessons))
        return overview


@dataclass
class LessonPage:
    course: Optional[Mapping[str, Any]]
    module: Optional[Mapping[str, Any]] = None
    lesson: Optional[Mapping[str, Any]] = None
    previous: Optional[tuple] = None
    next: Optional[tuple] = None
    completed: bool = False
    error: Optional[str] = None


@dataclass
class LessonPageInput:
    course_id: str
    module_id: str
    lesson_id: str


class LessonPageUseCase:
    def __init__(self, api: LmsApi) -> None:
        self._api = api

    async def execute(self, req: LessonPageInput) -> LessonPage:
        """Return a lesson with its neighbours (as `(module_id, lesson_id)`) and completion."""
        course_result = await self._api.courses.get(req.course_id)
        if not course_result.is_ok:
            return LessonPage(course=None, error=course_result.error)
        modules = await _modules_with_lessons(self._api, req.course_id)

        sequence = [(m.module, lesson) for m in modules for lesson in m.lessons]
        index = next(
            (
                i
                for i, (module, lesson) in enumerate(sequence)
                if str(lesson.get("id")) == str(req.lesson_id) and str(module.get("id")) == str(req.module_id)
            ),
            None,
        )
        if index is None:
            return LessonPage(course=course_result.data, error="Lesson not found")

        module, lesson = sequence[index]
        page = LessonPage(course=course_result.data, module=module, lesson=lesson)
        if index > 0:
            prev_module, prev_lesson = sequence[index - 1]
            page.previous = (str(prev_module.get("id")), str(prev_lesson.get("id")))
        if index + 1 < len(sequence):
            next_module, next_lesson = sequence[index + 1]
            page.next = (str(next_module.get("id")), str(next_lesson.get("id")))

        progress = await self._api.progress.lesson(str(req.lesson_id))
        record = progress.data_or({})
        page.completed = isinstance(record, Mapping) and bool(record.get("completed"))
        return page


class MyCoursesUseCase:
    def __init__(self, api: LmsApi) -> None:
        self._api = api

    async def execute(self) -> List[Mapping[str, Any]]:
        """Return the courses the caller is enrolled in, in enrollment order.

        Courses that fail to load are skipped.
        """
        enrollments = (await self._api.enrollments.my()).data_or([])
        course_ids = [
            str(e.get("courseId")) for e in enrollments if isinstance(e, Mapping) and e.get("courseId") is not None
        ]
        courses = await gather_settled((self._api.courses.get(cid) for cid in course_ids), default=None)
        return [c for c in courses if isinstance(c, Mapping)]


@dataclass
class Dashboard:
    courses: List[Mapping[str, Any]] = field(default_factory=list)
    enrolled_ids: List[str] = field(default_factory=list)

    @property
    def enrolled_courses(self) -> List[Mapping[str, Any]]:
        ids = set(self.enrolled_ids)
        return [c for c in self.courses if str(c.get("id")) in ids]


class DashboardUseCase:
    def __init__(self, api: LmsApi) -> None:
        self._api = api

    async def execute(self, identity: Identity) -> Dashboard:
        courses = [c for c in (await self._api.courses.list()).data_or([]) if isinstance(c, Mapping)]
        dashboard = Dashboard(courses=courses)
        if identity.role is Role.STUDENT:
            enrollments = (await self._api.enrollments.my()).data_or([])
            dashboard.enrolled_ids = [
                str(e.get("courseId")) for e in enrollments if isinstance(e, Mapping)
            ]
        return dashboard


def _enrollment_percent(enrollment: Mapping[str, Any]) -> float:
    """Progress carried on an enrollment: a number or `{"progressPercentage": n}`."""
    value = enrollment.get("progress")
    if isinstance(value, Mapping):
        value = value.get("progressPercentage")
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _matches(course: Mapping[str, Any], query: str) -> bool:
    needle = query.lower()
    return any(needle in str(course.get(key) or "").lower() for key in ("title", "description"))


@dataclass
class Catalogue:
    courses: List[Mapping[str, Any]] = field(default_factory=list)
    progress: Dict[str, float] = field(default_factory=dict)
    query: str = ""


@dataclass
class CatalogueInput:
    identity: Identity
    query: str = ""


class CatalogueUseCase:
    def __init__(self, api: LmsApi) -> None:
        self._api = api

    async def execute(self, req: CatalogueInput) -> Catalogue:
        """Return all courses, optionally filtered, with enrollment progress.

        Behavior:
            - `query` matches title or description, case-insensitive; blank
              means no filter.
            - Students get `progress[course_id]` for every enrolled course.
        """
        query = (req.query or "").strip()
        if req.identity.role is Role.STUDENT:
            courses, enrollments = await gather_settled(
                (self._api.courses.list(), self._api.enrollments.my()),
                default=[],
            )
        else:
            courses, enrollments = (await self._api.courses.list()).data_or([]), []

        catalogue = Catalogue(courses=courses, query=query)
        if query:
            catalogue.courses = [c for c in courses if _matches(c, query)]
        for enrollment in enrollments:
            if enrollment.get("courseId") is not None:
                catalogue.progress[str(enrollment.get("courseId"))] = _enrollment_percent(enrollment)
        return catalogue
