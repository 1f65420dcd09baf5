"""
Learning routes: dashboard, course catalogue, course overview and lessons.

Why:
    These pages consume the data-access layer the same way: guard, fetch
    (fan-out where needed), render, and after a mutation redirect with a
    notification. Failed reads render empty states instead of errors.

Permissions:
    All pages require an authenticated session; enrolling requires the
    STUDENT role.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Request

from backend.identity_access.domain import Role
from backend.identity_access.session import safe_redirect
from backend.learning.usecases import (
    CatalogueInput,
    CatalogueUseCase,
    CourseOverviewInput,
    CourseOverviewUseCase,
    DashboardUseCase,
    LessonPageInput,
    LessonPageUseCase,
    MyCoursesUseCase,
)

from ..components import Component, CourseCard, ModuleList, ProgressBar, SubmitButton
from ..guards import require_auth, roles_allowed
from ..pages import form_str, redirect_with, render_page
from ..session_wiring import current_api, current_session

learning_router = APIRouter(tags=["Learning"])
logger = logging.getLogger("lms.web.learning")


def _course_grid(courses, empty_text: str, progress=None) -> str:
    if not courses:
        return f'<p class="empty-state">{Component.escape(empty_text)}</p>'
    progress = progress or {}
    cards = "".join(CourseCard(c, progress=progress.get(str(c.get("id")))).render() for c in courses)
    return f'<div class="course-grid">{cards}</div>'


@learning_router.get("/dashboard")
@require_auth
async def dashboard(request: Request):
    identity = current_session(request).identity
    data = await DashboardUseCase(current_api(request)).execute(identity)
    if identity.role is Role.STUDENT:
        heading = "Continue learning"
        body = _course_grid(data.enrolled_courses, "You are not enrolled in any course yet.")
    else:
        heading = "All courses"
        body = _course_grid(data.courses, "No courses have been created yet.")
    content = f"""
    <h1>Welcome, {Component.escape(identity.name)}</h1>
    <section class="dashboard-stats">
        <p><strong>{len(data.courses)}</strong> courses available</p>
        <p><strong>{len(data.enrolled_ids)}</strong> enrollments</p>
    </section>
    <section><h2>{heading}</h2>{body}</section>"""
    return render_page(request, "Dashboard", content)


@learning_router.get("/courses")
@require_auth
async def course_catalogue(request: Request, q: str = ""):
    """Catalogue with an optional `?q=` title/description filter."""
    identity = current_session(request).identity
    catalogue = await CatalogueUseCase(current_api(request)).execute(CatalogueInput(identity=identity, query=q))
    search = (
        '<form class="course-search" method="get" action="/courses" role="search">'
        '<input type="search" name="q" placeholder="Search courses..." aria-label="Search courses" '
        f'value="{Component.escape(catalogue.query)}">'
        f'{SubmitButton("Search", variant="secondary").render()}</form>'
    )
    empty = "No courses match your search." if catalogue.query else "No courses available."
    content = f"<h1>Courses</h1>{search}{_course_grid(catalogue.courses, empty, catalogue.progress)}"
    return render_page(request, "Courses", content)


@learning_router.get("/courses/my")
@require_auth
async def my_courses(request: Request):
    courses = await MyCoursesUseCase(current_api(request)).execute()
    content = f'<h1>My Courses</h1>{_course_grid(courses, "You are not enrolled in any course yet.")}'
    return render_page(request, "My Courses", content)


@learning_router.get("/courses/{course_id}")
@require_auth
async def course_detail(request: Request, course_id: str):
    """Course overview with modules, lessons and the caller's progress.

    Behavior:
        - Unknown course or backend error -> 404 page with the message.
        - Students who are not enrolled see the syllabus and an enroll button;
          lessons are not linked until they enroll.
    """
    identity = current_session(request).identity
    overview = await CourseOverviewUseCase(current_api(request)).execute(
        CourseOverviewInput(course_id=course_id, identity=identity)
    )
    if overview.course is None:
        content = f'<h1>Course not available</h1><p class="empty-state">{Component.escape(overview.error)}</p>'
        return render_page(request, "Course not available", content, status_code=404)

    course = overview.course
    actions = ""
    if identity.role is Role.STUDENT and not overview.is_enrolled:
        actions = (
            f'<form method="post" action="/courses/{Component.escape(course_id)}/enroll">'
            f'{SubmitButton("Enroll in this course").render()}</form>'
        )
    elif identity.role is Role.STUDENT:
        actions = ProgressBar(overview.progress).render()
    elif identity.role is Role.ADMIN:
        actions = f'<a class="btn btn-secondary" href="/admin/courses/{Component.escape(course_id)}">Manage course</a>'

    modules_html = ModuleList(
        course_id,
        overview.modules,
        completed=overview.completed,
        can_open=overview.is_enrolled,
    ).render()
    content = f"""
    <h1>{Component.escape(course.get("title"))}</h1>
    <p class="course-description">{Component.escape(course.get("description"))}</p>
    <div class="course-actions">{actions}</div>
    <section class="course-modules"><h2>Modules</h2>{modules_html}</section>"""
    return render_page(request, str(course.get("title") or "Course"), content)


@learning_router.post("/courses/{course_id}/enroll")
@roles_allowed(Role.STUDENT)
async def enroll(request: Request, course_id: str):
    result = await current_api(request).enrollments.enroll(course_id)
    back = f"/courses/{quote(course_id, safe='')}"
    if not result.is_ok:
        return redirect_with(back, error=result.error)
    return redirect_with(back, notice="You have been enrolled in this course.")


@learning_router.get("/courses/{course_id}/modules/{module_id}/lessons/{lesson_id}")
@require_auth
async def lesson_detail(request: Request, course_id: str, module_id: str, lesson_id: str):
    page = await LessonPageUseCase(current_api(request)).execute(
        LessonPageInput(course_id=course_id, module_id=module_id, lesson_id=lesson_id)
    )
    if page.lesson is None:
        content = f'<h1>Lesson not available</h1><p class="empty-state">{Component.escape(page.error)}</p>'
        return render_page(request, "Lesson not available", content, status_code=404)

    lesson = page.lesson
    base = f"/courses/{course_id}/modules"
    nav = []
    for label, target in (("Previous", page.previous), ("Next", page.next)):
        if target:
            href = Component.escape(f"{base}/{target[0]}/lessons/{target[1]}")
            nav.append(f'<a class="btn btn-secondary" href="{href}">{label}</a>')

    video = lesson.get("videoUrl")
    video_html = (
        f'<video class="lesson-video" controls src="{Component.escape(video)}"></video>' if video else ""
    )
    here = request.url.path
    if page.completed:
        status_html = '<p class="lesson-status lesson-status--done">Completed</p>'
    else:
        status_html = (
            f'<form method="post" action="/lessons/{Component.escape(lesson_id)}/complete">'
            f'<input type="hidden" name="redirect" value="{Component.escape(here)}">'
            f'{SubmitButton("Mark as completed").render()}</form>'
        )
    duration = lesson.get("duration")
    duration_html = f'<p class="lesson-duration">{Component.escape(duration)} min</p>' if duration else ""
    content = f"""
    <p class="breadcrumb"><a href="/courses/{Component.escape(course_id)}">{Component.escape((page.course or {}).get("title"))}</a>
       / {Component.escape((page.module or {}).get("title"))}</p>
    <h1>{Component.escape(lesson.get("title"))}</h1>
    {duration_html}
    {video_html}
    <div class="lesson-content">{Component.escape(lesson.get("content"))}</div>
    {status_html}
    <nav class="lesson-nav">{"".join(nav)}</nav>"""
    return render_page(request, str(lesson.get("title") or "Lesson"), content)


@learning_router.post("/lessons/{lesson_id}/complete")
@require_auth
async def complete_lesson(request: Request, lesson_id: str):
    form = await request.form()
    back = safe_redirect(form_str(form, "redirect")) or "/courses/my"
    result = await current_api(request).progress.complete_lesson(lesson_id)
    if not result.is_ok:
        return redirect_with(back, error=result.error)
    return redirect_with(back, notice="Lesson marked as completed.")
