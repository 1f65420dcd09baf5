"""
Admin forms for courses, modules and lessons.
"""

from typing import Any, Mapping, Optional

from ..base import Component
from .fields import FileUploadField, SubmitButton, TextAreaField, TextInputField


def _v(values: Optional[Mapping[str, Any]], key: str) -> str:
    value = (values or {}).get(key)
    return "" if value is None else str(value)


class CourseForm(Component):
    """Create (no `course_id`) or edit a course."""

    def __init__(self, *, course_id: Optional[str] = None, values: Optional[Mapping[str, Any]] = None, error: Optional[str] = None) -> None:
        self.course_id = course_id
        self.values = values or {}
        self.error = error

    def render(self) -> str:
        action = f"/admin/courses/{self.course_id}/edit" if self.course_id else "/admin/courses/new"
        label = "Save changes" if self.course_id else "Create course"
        error_html = f'<div class="form-error" role="alert">{self.escape(self.error)}</div>' if self.error else ""
        return f"""
        <form method="post" action="{self.escape(action)}" class="course-form">
            {error_html}
            {TextInputField("title", "Title", required=True).render(value=_v(self.values, "title"))}
            {TextAreaField("description", "Description").render(value=_v(self.values, "description"), rows=4)}
            {TextInputField("imageUrl", "Image URL").render(value=_v(self.values, "imageUrl"), input_type="url")}
            <div class="form-actions">{SubmitButton(label).render()}</div>
        </form>"""


class ModuleForm(Component):
    """Create a module inside a course, or update an existing module."""

    def __init__(self, *, course_id: str, module: Optional[Mapping[str, Any]] = None) -> None:
        self.course_id = course_id
        self.module = module

    def render(self) -> str:
        if self.module:
            action = f"/admin/modules/{self.module.get('id')}"
            label = "Update module"
        else:
            action = f"/admin/courses/{self.course_id}/modules"
            label = "Add module"
        prefix = f"module-{self.module.get('id')}-" if self.module else "new-module-"
        return f"""
        <form method="post" action="{self.escape(action)}" class="module-form">
            <input type="hidden" name="courseId" value="{self.escape(self.course_id)}">
            {TextInputField(prefix + "title", "Module title", name="title", required=True).render(value=_v(self.module, "title"))}
            {TextInputField(prefix + "order", "Order", name="order").render(value=_v(self.module, "order"), input_type="number")}
            <div class="form-actions">{SubmitButton(label, variant="secondary").render()}</div>
        </form>"""


def _hidden(values: Optional[Mapping[str, Any]]) -> str:
    return "".join(
        f'<input type="hidden" name="{Component.escape(k)}" value="{Component.escape(v)}">'
        for k, v in (values or {}).items()
        if v is not None
    )


class LessonForm(Component):
    """Create a lesson inside a module, or update an existing lesson.

    `course_id` is posted back as a hidden field so the handler can return to
    the course management page.
    """

    def __init__(self, *, module_id: str, course_id: Optional[str] = None, lesson: Optional[Mapping[str, Any]] = None) -> None:
        self.module_id = module_id
        self.course_id = course_id
        self.lesson = lesson

    def render(self) -> str:
        if self.lesson:
            action = f"/admin/lessons/{self.lesson.get('id')}"
            label = "Update lesson"
        else:
            action = f"/admin/modules/{self.module_id}/lessons"
            label = "Add lesson"
        prefix = f"lesson-{self.lesson.get('id')}-" if self.lesson else f"new-lesson-{self.module_id}-"
        hidden = _hidden({"moduleId": self.module_id, "courseId": self.course_id})
        return f"""
        <form method="post" action="{self.escape(action)}" class="lesson-form">
            {hidden}
            {TextInputField(prefix + "title", "Lesson title", name="title", required=True).render(value=_v(self.lesson, "title"))}
            {TextAreaField(prefix + "content", "Content", name="content").render(value=_v(self.lesson, "content"), rows=3)}
            {TextInputField(prefix + "order", "Order", name="order").render(value=_v(self.lesson, "order"), input_type="number")}
            {TextInputField(prefix + "duration", "Duration (minutes)", name="duration").render(value=_v(self.lesson, "duration"), input_type="number")}
            <div class="form-actions">{SubmitButton(label, variant="secondary").render()}</div>
        </form>"""


class VideoUploadForm(Component):
    def __init__(self, *, lesson_id: str, course_id: Optional[str] = None) -> None:
        self.lesson_id = lesson_id
        self.course_id = course_id

    def render(self) -> str:
        control = FileUploadField(f"video-{self.lesson_id}", "Lesson video", name="video").render(accept="video/*")
        return f"""
        <form method="post" action="/admin/lessons/{self.escape(self.lesson_id)}/video" enctype="multipart/form-data" class="video-form">
            {_hidden({"courseId": self.course_id})}
            {control}
            <div class="form-actions">{SubmitButton("Upload video", variant="secondary").render()}</div>
        </form>"""


class DeleteButton(Component):
    """Single-button POST form used for destructive admin actions."""

    def __init__(self, action: str, label: str = "Delete", *, hidden: Optional[Mapping[str, Any]] = None) -> None:
        self.action = action
        self.label = label
        self.hidden = hidden

    def render(self) -> str:
        return (
            f'<form method="post" action="{self.escape(self.action)}" class="inline-form">'
            f"{_hidden(self.hidden)}"
            f"{SubmitButton(self.label, variant='danger').render()}</form>"
        )
