"""
Learning pages: dashboard, catalogue, course overview, lessons and progress.
"""

import pytest

pytestmark = pytest.mark.anyio("asyncio")


async def test_student_dashboard_lists_enrolled_courses(student_web):
    r = await student_web.get("/dashboard")
    assert r.status_code == 200
    assert r.headers["cache-control"] == "private, no-store"
    assert "Welcome, Sam Student" in r.text
    assert "Continue learning" in r.text
    assert 'href="/courses/c1"' in r.text
    assert 'href="/courses/c2"' not in r.text


async def test_admin_dashboard_lists_all_courses(admin_web):
    r = await admin_web.get("/dashboard")
    assert "All courses" in r.text
    assert 'href="/courses/c1"' in r.text and 'href="/courses/c2"' in r.text
    assert 'href="/admin/courses"' in r.text


@pytest.mark.parametrize("envelope", [False, True])
async def test_catalogue_handles_both_list_shapes(student_web, fake_backend, envelope):
    fake_backend.envelope_lists = envelope
    r = await student_web.get("/courses")
    assert r.status_code == 200
    assert "Python Basics" in r.text and "Web Development" in r.text


async def test_catalogue_renders_empty_state_when_backend_fails(student_web, fake_backend):
    fake_backend.fail_paths.add("/courses")
    r = await student_web.get("/courses")
    assert r.status_code == 200
    assert "No courses available." in r.text


async def test_my_courses(student_web):
    r = await student_web.get("/courses/my")
    assert r.status_code == 200
    assert "Python Basics" in r.text
    assert "Web Development" not in r.text


async def test_my_courses_skips_courses_that_fail(student_web, fake_backend):
    fake_backend.fail_paths.add("/courses/c1")
    r = await student_web.get("/courses/my")
    assert r.status_code == 200
    assert "You are not enrolled in any course yet." in r.text


async def test_enrolled_course_overview_orders_modules_and_shows_progress(student_web):
    r = await student_web.get("/courses/c1")
    assert r.status_code == 200
    assert r.text.index("Variables") < r.text.index("Functions")
    assert r.text.index("What is a variable") < r.text.index("Types")
    assert "33% complete" in r.text
    assert 'href="/courses/c1/modules/m2/lessons/l1"' in r.text
    assert "Enroll in this course" not in r.text


async def test_course_overview_degrades_when_one_module_fails(student_web, fake_backend):
    fake_backend.fail_paths.add("/lessons/module/m1")
    r = await student_web.get("/courses/c1")
    assert r.status_code == 200
    assert "What is a variable" in r.text
    assert "Defining functions" not in r.text
    assert "No lessons yet." in r.text


async def test_unenrolled_student_sees_enroll_button(student_web):
    r = await student_web.get("/courses/c2")
    assert r.status_code == 200
    assert 'action="/courses/c2/enroll"' in r.text
    assert "This course has no modules yet." in r.text


async def test_unknown_course_is_404(student_web):
    r = await student_web.get("/courses/nope")
    assert r.status_code == 404
    assert "Course not found" in r.text


async def test_enroll_redirects_with_notice(student_web, fake_backend):
    r = await student_web.post("/courses/c2/enroll")
    assert r.status_code == 303
    assert r.headers["location"].startswith("/courses/c2?notice=")
    assert any(e["courseId"] == "c2" and e["userId"] == "2" for e in fake_backend.enrollments)

    page = await student_web.get(r.headers["location"])
    assert "You have been enrolled in this course." in page.text
    assert 'class="notification notification--success"' in page.text


async def test_enroll_twice_shows_backend_error(student_web):
    r = await student_web.post("/courses/c1/enroll")
    assert r.headers["location"] == "/courses/c1?error=Already+enrolled"


async def test_admin_cannot_use_student_enroll(admin_web, fake_backend):
    r = await admin_web.post("/courses/c2/enroll")
    assert r.status_code == 302
    assert r.headers["location"] == "/dashboard"
    assert "/enrollments/courses/c2" not in fake_backend.paths("POST")


async def test_lesson_page_has_neighbours_and_complete_form(student_web):
    r = await student_web.get("/courses/c1/modules/m2/lessons/l2")
    assert r.status_code == 200
    assert "Types" in r.text
    assert 'href="/courses/c1/modules/m2/lessons/l1">Previous' in r.text
    assert 'href="/courses/c1/modules/m1/lessons/l3">Next' in r.text
    assert 'action="/lessons/l2/complete"' in r.text


async def test_completed_lesson_shows_status(student_web):
    r = await student_web.get("/courses/c1/modules/m2/lessons/l1")
    assert "Completed" in r.text
    assert 'action="/lessons/l1/complete"' not in r.text
    assert "Previous" not in r.text


async def test_unknown_lesson_is_404(student_web):
    r = await student_web.get("/courses/c1/modules/m2/lessons/l3")
    assert r.status_code == 404
    assert "Lesson not found" in r.text


async def test_complete_lesson_returns_to_lesson(student_web, fake_backend):
    back = "/courses/c1/modules/m2/lessons/l2"
    r = await student_web.post("/lessons/l2/complete", data={"redirect": back})
    assert r.status_code == 303
    assert r.headers["location"] == f"{back}?notice=Lesson+marked+as+completed."
    assert fake_backend.progress[("2", "l2")]["completed"] is True

    overview = await student_web.get("/courses/c1")
    assert "67% complete" in overview.text


async def test_complete_lesson_ignores_external_redirect(student_web):
    r = await student_web.post("/lessons/l2/complete", data={"redirect": "https://evil.example/"})
    assert r.headers["location"].startswith("/courses/my?notice=")


async def test_backend_down_during_page_render_shows_empty_states(student_web, fake_backend):
    # Session restore needs /users/me; fail only the data reads.
    fake_backend.fail_paths.update({"/courses", "/enrollments/my"})
    r = await student_web.get("/dashboard")
    assert r.status_code == 200
    assert "You are not enrolled in any course yet." in r.text


async def test_catalogue_search_filters_title_and_description(student_web):
    by_title = await student_web.get("/courses", params={"q": "python"})
    by_description = await student_web.get("/courses", params={"q": "HTTP"})
    nothing = await student_web.get("/courses", params={"q": "<cobol>"})

    assert "Python Basics" in by_title.text and "Web Development" not in by_title.text
    assert "Web Development" in by_description.text and "Python Basics" not in by_description.text
    assert "No courses match your search." in nothing.text
    assert 'value="&lt;cobol&gt;"' in nothing.text


async def test_catalogue_shows_enrollment_progress_on_enrolled_cards(student_web, fake_backend):
    fake_backend.enrollments[0]["progress"] = {"progressPercentage": 40}
    r = await student_web.get("/courses")
    assert "40% complete" in r.text
    assert r.text.count('role="progressbar"') == 1


async def test_catalogue_skips_entries_that_are_not_courses(student_web, fake_backend):
    fake_backend.courses["junk"] = None
    r = await student_web.get("/courses")
    assert r.status_code == 200
    assert "Python Basics" in r.text and "Web Development" in r.text


async def test_overview_and_my_courses_with_enveloped_objects(student_web, fake_backend):
    fake_backend.envelope_items = True
    overview = await student_web.get("/courses/c1")
    mine = await student_web.get("/courses/my")
    assert overview.status_code == 200
    assert "<h1>Python Basics</h1>" in overview.text
    assert "Learn Python" in overview.text
    assert "Python Basics" in mine.text


async def test_course_id_with_control_character_is_404_not_500(student_web):
    r = await student_web.get("/courses/a%0Ab")
    assert r.status_code == 404
    assert "Course not found" in r.text


async def test_lesson_navigation_links_are_escaped(student_web, fake_backend):
    fake_backend.lessons["l2"]["id"] = 'l2"x'
    fake_backend.lessons['l2"x'] = fake_backend.lessons.pop("l2")
    r = await student_web.get("/courses/c1/modules/m2/lessons/l1")
    assert 'href="/courses/c1/modules/m2/lessons/l2&quot;x"' in r.text
    assert 'lessons/l2"x"' not in r.text
