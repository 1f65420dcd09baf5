"""
Course, module and lesson cards.

Cards take plain backend mappings (see `lms_api`) and never assume optional
fields exist.
"""

from typing import Any, Dict, Mapping, Optional, Sequence

from ..base import Component


class CourseCard(Component):
    """Summary card linking to the course overview."""

    def __init__(self, course: Mapping[str, Any], *, progress: Optional[float] = None, actions_html: str = "") -> None:
        self.course = course
        self.progress = progress
        self.actions_html = actions_html

    def render(self) -> str:
        course_id = self.course.get("id", "")
        image = self.course.get("imageUrl")
        image_html = (
            f'<img class="course-card-image" src="{self.escape(image)}" alt="" loading="lazy">' if image else ""
        )
        progress_html = ProgressBar(self.progress).render() if self.progress is not None else ""
        return f"""
        <article class="course-card">
            {image_html}
            <h3 class="course-card-title"><a href="/courses/{self.escape(course_id)}">{self.escape(self.course.get("title"))}</a></h3>
            <p class="course-card-description">{self.escape(self.course.get("description"))}</p>
            {progress_html}
            {self.actions_html}
        </article>"""


class ProgressBar(Component):
    def __init__(self, percent: Optional[float]) -> None:
        value = float(percent or 0)
        self.percent = max(0.0, min(100.0, value))

    def render(self) -> str:
        rounded = int(round(self.percent))
        return (
            f'<div class="progress" role="progressbar" aria-valuemin="0" aria-valuemax="100" aria-valuenow="{rounded}">'
            f'<div class="progress-bar" style="width: {rounded}%"></div>'
            f'<span class="progress-label">{rounded}% complete</span>'
            "</div>"
        )


class ModuleList(Component):
    """Ordered modules with their lessons and completion marks.

    `modules` items expose `.module` (mapping) and `.lessons` (list of mappings).
    """

    def __init__(
        self,
        course_id: str,
        modules: Sequence[Any],
        *,
        completed: Optional[Dict[str, bool]] = None,
        can_open: bool = True,
    ) -> None:
        self.course_id = course_id
        self.modules = modules
        self.completed = completed or {}
        self.can_open = can_open

    def _lesson(self, module_id: str, lesson: Mapping[str, Any]) -> str:
        lesson_id = str(lesson.get("id", ""))
        done = self.completed.get(lesson_id, False)
        mark = '<span class="lesson-done" aria-label="Completed">&#10003;</span>' if done else ""
        title = self.escape(lesson.get("title"))
        if self.can_open:
            href = f"/courses/{self.course_id}/modules/{module_id}/lessons/{lesson_id}"
            title = f'<a href="{self.escape(href)}">{title}</a>'
        return f'<li class="{self.classes("lesson-item", completed=done)}">{title}{mark}</li>'

    def render(self) -> str:
        if not self.modules:
            return '<p class="empty-state">This course has no modules yet.</p>'
        sections = []
        for view in self.modules:
            module_id = str(view.module.get("id", ""))
            lessons = "".join(self._lesson(module_id, lesson) for lesson in view.lessons)
            lessons_html = f'<ol class="lesson-list">{lessons}</ol>' if lessons else '<p class="empty-state">No lessons yet.</p>'
            sections.append(
                f'<section class="module"><h3>{self.escape(view.module.get("title"))}</h3>{lessons_html}</section>'
            )
        return "".join(sections)
