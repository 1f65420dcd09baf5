"""
End-to-end auth flows through the web app (ASGI) against the fake backend.

Requirements:
- Login stores the token cookie (HttpOnly, SameSite=Lax, 30 days) and lands on /dashboard.
- Wrong password re-renders the login page and sets no cookie.
- Students never see admin pages; anonymous visitors keep their target.
- Logout deletes the cookie; the next request restores without network calls.
"""

import pytest

pytestmark = pytest.mark.anyio("asyncio")


async def test_login_with_valid_credentials_lands_on_dashboard(web, fake_backend):
    fake_backend.users["42"] = {"id": 42, "name": "Alex", "email": "a@x.com", "role": "STUDENT"}
    fake_backend.passwords["a@x.com"] = "secret1"

    r = await web.post("/login", data={"email": "a@x.com", "password": "secret1"})

    assert r.status_code == 303
    assert r.headers["location"] == "/dashboard"
    set_cookie = r.headers["set-cookie"]
    token = web.cookies.get("token")
    assert token and fake_backend.tokens[token] == "42"
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()
    assert "Max-Age=2592000" in set_cookie
    assert "Secure" not in set_cookie  # test environment serves plain http

    dashboard = await web.get("/dashboard")
    assert dashboard.status_code == 200
    assert "Welcome, Alex" in dashboard.text
    assert fake_backend.requests[-1].headers["authorization"] == f"Bearer {token}"


async def test_login_with_wrong_password_stays_on_login(web, fake_backend):
    r = await web.post("/login", data={"email": "student@lms.test", "password": "nope"})

    assert r.status_code == 400
    assert "Invalid credentials" in r.text
    assert 'action="/login"' in r.text
    assert "set-cookie" not in r.headers
    assert web.cookies.get("token") is None


async def test_login_requires_both_fields(web, fake_backend):
    r = await web.post("/login", data={"email": "student@lms.test"})
    assert r.status_code == 400
    assert "Email and password are required" in r.text
    assert fake_backend.paths("POST") == []


async def test_student_is_sent_away_from_admin_pages(student_web, fake_backend):
    r = await student_web.get("/admin/courses")
    assert r.status_code == 302
    assert r.headers["location"] == "/dashboard"
    assert "Manage courses" not in r.text


async def test_anonymous_visit_keeps_requested_target(web, fake_backend):
    r = await web.get("/courses/my?foo=1")
    assert r.status_code == 302
    assert r.headers["location"] == "/login?redirect=%2Fcourses%2Fmy%3Ffoo%3D1"
    assert fake_backend.requests == []


async def test_login_page_carries_redirect_and_login_returns_there(web):
    page = await web.get("/login", params={"redirect": "/courses/my?foo=1"})
    assert page.status_code == 200
    assert 'name="redirect" value="/courses/my?foo=1"' in page.text

    r = await web.post(
        "/login",
        data={"email": "student@lms.test", "password": "studentpass", "redirect": "/courses/my?foo=1"},
    )
    assert r.headers["location"] == "/courses/my?foo=1"


async def test_login_ignores_external_redirect(web):
    page = await web.get("/login", params={"redirect": "https://evil.example/"})
    assert 'name="redirect"' not in page.text

    r = await web.post(
        "/login",
        data={"email": "student@lms.test", "password": "studentpass", "redirect": "//evil.example/"},
    )
    assert r.headers["location"] == "/dashboard"


async def test_logout_clears_cookie_and_next_request_is_anonymous_offline(student_web, fake_backend):
    r = await student_web.post("/logout")
    assert r.status_code == 303
    assert r.headers["location"] == "/login"
    assert 'token=""' in r.headers["set-cookie"] or "Max-Age=0" in r.headers["set-cookie"]
    assert student_web.cookies.get("token") is None

    before = len(fake_backend.requests)
    page = await student_web.get("/login")
    assert page.status_code == 200
    assert len(fake_backend.requests) == before

    protected = await student_web.get("/dashboard")
    assert protected.status_code == 302
    assert protected.headers["location"].startswith("/login?redirect=")


async def test_rejected_cookie_is_cleared(web, fake_backend):
    web.cookies.set("token", "revoked")
    r = await web.get("/dashboard")
    assert r.status_code == 302
    assert r.headers["location"] == "/login?redirect=%2Fdashboard"
    assert "Max-Age=0" in r.headers["set-cookie"]
    assert fake_backend.paths() == ["/users/me"]


async def test_signed_in_visitors_skip_login_and_register(student_web):
    for path in ("/login", "/register"):
        r = await student_web.get(path)
        assert r.status_code == 302
        assert r.headers["location"] == "/dashboard"


async def test_root_redirects_by_session(web):
    r = await web.get("/")
    assert r.headers["location"] == "/login"
    await web.post("/login", data={"email": "admin@lms.test", "password": "adminpass"})
    r = await web.get("/")
    assert r.headers["location"] == "/dashboard"


async def test_register_creates_student_and_signs_in(web, fake_backend):
    r = await web.post("/register", data={"name": "New Person", "email": "new@lms.test", "password": "secret1"})
    assert r.status_code == 303
    assert r.headers["location"] == "/dashboard"
    assert web.cookies.get("token") in fake_backend.tokens
    created = [u for u in fake_backend.users.values() if u["email"] == "new@lms.test"]
    assert created[0]["role"] == "STUDENT"


@pytest.mark.parametrize(
    "form,message",
    [
        ({"name": "", "email": "n@lms.test", "password": "secret1"}, "Name is required"),
        ({"name": "N", "email": "not-an-email", "password": "secret1"}, "A valid email address is required"),
        ({"name": "N", "email": "n@lms.test", "password": "123"}, "Password must be at least 6 characters"),
    ],
)
async def test_register_validation(web, fake_backend, form, message):
    r = await web.post("/register", data=form)
    assert r.status_code == 400
    assert message in r.text
    assert fake_backend.paths("POST") == []


async def test_register_duplicate_email_shows_backend_message(web):
    r = await web.post("/register", data={"name": "Sam", "email": "student@lms.test", "password": "secret1"})
    assert r.status_code == 400
    assert "Email already registered" in r.text


async def test_cross_origin_post_is_rejected(web, fake_backend):
    r = await web.post(
        "/login",
        data={"email": "student@lms.test", "password": "studentpass"},
        headers={"Origin": "https://evil.example"},
    )
    assert r.status_code == 403
    assert fake_backend.requests == []


async def test_same_origin_post_is_accepted(web):
    r = await web.post(
        "/login",
        data={"email": "student@lms.test", "password": "studentpass"},
        headers={"Origin": "http://testserver"},
    )
    assert r.status_code == 303
