"""
Admin console routes: CRUD over courses, modules and lessons.

Why:
    Admins maintain the catalogue through plain HTML forms. Each mutation calls
    exactly one resource operation and redirects back with a notification
    carrying either a success notice or the backend's error message.

Permissions:
    Every route requires the ADMIN role. Students are redirected to the
    dashboard by the role guard.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Request

from backend.identity_access.domain import Role
from backend.learning.usecases import ModuleWithLessons, sort_by_order
from backend.lms_api import gather_settled

from ..components import (
    Component,
    CourseForm,
    DeleteButton,
    LessonForm,
    ModuleForm,
    VideoUploadForm,
)
from ..guards import roles_allowed
from ..pages import form_int, form_str, redirect_with, render_page
from ..session_wiring import current_api

admin_router = APIRouter(tags=["Admin"])
logger = logging.getLogger("lms.web.admin")

MAX_VIDEO_BYTES = 500 * 1024 * 1024


def _course_payload(form) -> Dict[str, Any]:
    return {
        "title": form_str(form, "title"),
        "description": form_str(form, "description"),
        "imageUrl": form_str(form, "imageUrl"),
    }


def _ordered_payload(form, **extra: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"title": form_str(form, "title"), **extra}
    order = form_int(form, "order")
    if order is not None:
        payload["order"] = order
    return payload


def _back_to_course(form, fallback: str = "/admin/courses") -> str:
    course_id = form_str(form, "courseId")
    return f"/admin/courses/{course_id}" if course_id else fallback


@admin_router.get("/admin/courses")
@roles_allowed(Role.ADMIN)
async def admin_courses(request: Request):
    courses = (await current_api(request).courses.list()).data_or([])
    rows = []
    for course in courses:
        raw_id = str(course.get("id"))
        cid = Component.escape(raw_id)
        delete_html = DeleteButton(f"/admin/courses/{raw_id}/delete").render()
        rows.append(
            "<tr>"
            f'<td><a href="/admin/courses/{cid}">{Component.escape(course.get("title"))}</a></td>'
            f'<td><a class="btn btn-link" href="/admin/courses/{cid}/edit">Edit</a></td>'
            f"<td>{delete_html}</td>"
            "</tr>"
        )
    table = (
        f'<table class="admin-table"><thead><tr><th>Title</th><th></th><th></th></tr></thead><tbody>{"".join(rows)}</tbody></table>'
        if rows
        else '<p class="empty-state">No courses yet.</p>'
    )
    content = f"""
    <h1>Manage courses</h1>
    <p><a class="btn btn-primary" href="/admin/courses/new">New course</a></p>
    {table}"""
    return render_page(request, "Manage courses", content)


@admin_router.get("/admin/courses/new")
@roles_allowed(Role.ADMIN)
async def admin_course_new(request: Request):
    return render_page(request, "New course", f"<h1>New course</h1>{CourseForm().render()}")


@admin_router.post("/admin/courses/new")
@roles_allowed(Role.ADMIN)
async def admin_course_create(request: Request):
    form = await request.form()
    payload = _course_payload(form)
    if not payload["title"]:
        page = CourseForm(values=payload, error="Title is required")
        return render_page(request, "New course", f"<h1>New course</h1>{page.render()}", status_code=400)
    result = await current_api(request).courses.create(payload)
    if not result.is_ok:
        page = CourseForm(values=payload, error=result.error)
        return render_page(request, "New course", f"<h1>New course</h1>{page.render()}", status_code=400)
    return redirect_with("/admin/courses", notice="Course created.")


@admin_router.get("/admin/courses/{course_id}")
@roles_allowed(Role.ADMIN)
async def admin_course_manage(request: Request, course_id: str):
    """Module and lesson management for one course.

    Lessons are fetched concurrently per module; a module whose lessons fail
    to load is shown without lessons.
    """
    api = current_api(request)
    course_result = await api.courses.get(course_id)
    if not course_result.is_ok:
        return redirect_with("/admin/courses", error=course_result.error)
    modules = sort_by_order((await api.modules.list_by_course(course_id)).data_or([]))
    lesson_lists = await gather_settled(
        (api.lessons.list_by_module(str(m.get("id"))) for m in modules), default=[]
    )
    views = [ModuleWithLessons(m, sort_by_order(ls)) for m, ls in zip(modules, lesson_lists)]
    back_ref = {"courseId": course_id}

    sections = []
    for view in views:
        mid = str(view.module.get("id"))
        lessons_html = []
        for lesson in view.lessons:
            lid = str(lesson.get("id"))
            lessons_html.append(
                '<li class="admin-lesson">'
                + LessonForm(module_id=mid, course_id=course_id, lesson=lesson).render()
                + VideoUploadForm(lesson_id=lid, course_id=course_id).render()
                + DeleteButton(f"/admin/lessons/{lid}/delete", "Delete lesson", hidden=back_ref).render()
                + "</li>"
            )
        module_form = ModuleForm(course_id=course_id, module=view.module).render()
        delete_module = DeleteButton(f"/admin/modules/{mid}/delete", "Delete module", hidden=back_ref).render()
        new_lesson = LessonForm(module_id=mid, course_id=course_id).render()
        sections.append(
            f"""
            <section class="admin-module">
                {module_form}
                {delete_module}
                <ol class="admin-lessons">{"".join(lessons_html)}</ol>
                {new_lesson}
            </section>"""
        )
    course = course_result.data
    content = f"""
    <h1>{Component.escape(course.get("title"))}</h1>
    <p><a class="btn btn-link" href="/admin/courses/{Component.escape(course_id)}/edit">Edit course details</a></p>
    {"".join(sections) or '<p class="empty-state">No modules yet.</p>'}
    <h2>Add module</h2>
    {ModuleForm(course_id=course_id).render()}"""
    return render_page(request, str(course.get("title") or "Course"), content)


@admin_router.get("/admin/courses/{course_id}/edit")
@roles_allowed(Role.ADMIN)
async def admin_course_edit(request: Request, course_id: str):
    result = await current_api(request).courses.get(course_id)
    if not result.is_ok:
        return redirect_with("/admin/courses", error=result.error)
    page = CourseForm(course_id=course_id, values=result.data)
    return render_page(request, "Edit course", f"<h1>Edit course</h1>{page.render()}")


@admin_router.post("/admin/courses/{course_id}/edit")
@roles_allowed(Role.ADMIN)
async def admin_course_update(request: Request, course_id: str):
    form = await request.form()
    payload = _course_payload(form)
    if not payload["title"]:
        page = CourseForm(course_id=course_id, values=payload, error="Title is required")
        return render_page(request, "Edit course", f"<h1>Edit course</h1>{page.render()}", status_code=400)
    result = await current_api(request).courses.update(course_id, payload)
    if not result.is_ok:
        page = CourseForm(course_id=course_id, values=payload, error=result.error)
        return render_page(request, "Edit course", f"<h1>Edit course</h1>{page.render()}", status_code=400)
    return redirect_with("/admin/courses", notice="Course updated.")


@admin_router.post("/admin/courses/{course_id}/delete")
@roles_allowed(Role.ADMIN)
async def admin_course_delete(request: Request, course_id: str):
    result = await current_api(request).courses.delete(course_id)
    if not result.is_ok:
        return redirect_with("/admin/courses", error=result.error)
    return redirect_with("/admin/courses", notice="Course deleted.")


@admin_router.post("/admin/courses/{course_id}/modules")
@roles_allowed(Role.ADMIN)
async def admin_module_create(request: Request, course_id: str):
    form = await request.form()
    back = f"/admin/courses/{course_id}"
    payload = _ordered_payload(form, courseId=course_id)
    if not payload["title"]:
        return redirect_with(back, error="Module title is required")
    result = await current_api(request).modules.create(payload)
    if not result.is_ok:
        return redirect_with(back, error=result.error)
    return redirect_with(back, notice="Module created.")


@admin_router.post("/admin/modules/{module_id}")
@roles_allowed(Role.ADMIN)
async def admin_module_update(request: Request, module_id: str):
    form = await request.form()
    back = _back_to_course(form)
    payload = _ordered_payload(form)
    if not payload["title"]:
        return redirect_with(back, error="Module title is required")
    result = await current_api(request).modules.update(module_id, payload)
    if not result.is_ok:
        return redirect_with(back, error=result.error)
    return redirect_with(back, notice="Module updated.")


@admin_router.post("/admin/modules/{module_id}/delete")
@roles_allowed(Role.ADMIN)
async def admin_module_delete(request: Request, module_id: str):
    form = await request.form()
    back = _back_to_course(form)
    result = await current_api(request).modules.delete(module_id)
    if not result.is_ok:
        return redirect_with(back, error=result.error)
    return redirect_with(back, notice="Module deleted.")


@admin_router.post("/admin/modules/{module_id}/lessons")
@roles_allowed(Role.ADMIN)
async def admin_lesson_create(request: Request, module_id: str):
    form = await request.form()
    back = _back_to_course(form)
    payload = _ordered_payload(form, moduleId=module_id, content=form_str(form, "content"))
    duration = form_int(form, "duration")
    if duration is not None:
        payload["duration"] = duration
    if not payload["title"]:
        return redirect_with(back, error="Lesson title is required")
    result = await current_api(request).lessons.create(payload)
    if not result.is_ok:
        return redirect_with(back, error=result.error)
    return redirect_with(back, notice="Lesson created.")


@admin_router.post("/admin/lessons/{lesson_id}")
@roles_allowed(Role.ADMIN)
async def admin_lesson_update(request: Request, lesson_id: str):
    form = await request.form()
    back = _back_to_course(form)
    payload = _ordered_payload(form, content=form_str(form, "content"))
    duration = form_int(form, "duration")
    if duration is not None:
        payload["duration"] = duration
    if not payload["title"]:
        return redirect_with(back, error="Lesson title is required")
    result = await current_api(request).lessons.update(lesson_id, payload)
    if not result.is_ok:
        return redirect_with(back, error=result.error)
    return redirect_with(back, notice="Lesson updated.")


@admin_router.post("/admin/lessons/{lesson_id}/delete")
@roles_allowed(Role.ADMIN)
async def admin_lesson_delete(request: Request, lesson_id: str):
    form = await request.form()
    back = _back_to_course(form)
    result = await current_api(request).lessons.delete(lesson_id)
    if not result.is_ok:
        return redirect_with(back, error=result.error)
    return redirect_with(back, notice="Lesson deleted.")


@admin_router.post("/admin/lessons/{lesson_id}/video")
@roles_allowed(Role.ADMIN)
async def admin_lesson_video(request: Request, lesson_id: str):
    """Forward an uploaded video to the backend as multipart field `video`."""
    form = await request.form()
    back = _back_to_course(form)
    upload = form.get("video")
    if upload is None or isinstance(upload, str) or not getattr(upload, "filename", ""):
        return redirect_with(back, error="Choose a video file to upload")
    content_type = upload.content_type or "application/octet-stream"
    if not content_type.startswith("video/"):
        return redirect_with(back, error="Only video files can be uploaded")
    content = await upload.read()
    if len(content) > MAX_VIDEO_BYTES:
        return redirect_with(back, error="Video is too large")
    result = await current_api(request).lessons.upload_video(lesson_id, upload.filename, content, content_type)
    if not result.is_ok:
        return redirect_with(back, error=result.error)
    return redirect_with(back, notice="Video uploaded.")
