"""
User routes: own profile and the admin user directory.

Why:
    Profile edits and account deletion are ordinary calls on the users
    resource. Deleting one's own account additionally ends the session, so the
    browser drops its token cookie in the same response.

Permissions:
    `/profile*` requires an authenticated session; `/admin/users` requires the
    ADMIN role.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from backend.identity_access.domain import Role

from ..components import Component, SubmitButton, TextInputField
from ..guards import require_auth, roles_allowed
from ..pages import form_str, redirect_with, render_page
from ..session_wiring import current_api, current_session

users_router = APIRouter(tags=["Users"])
logger = logging.getLogger("lms.web.users")


def _profile_form(name: str, email: str, error: str | None = None) -> str:
    error_html = f'<div class="form-error" role="alert">{Component.escape(error)}</div>' if error else ""
    return f"""
    <form method="post" action="/profile" class="profile-form">
        {error_html}
        {TextInputField("name", "Name", required=True).render(value=name)}
        {TextInputField("email", "Email", required=True).render(value=email, input_type="email")}
        <div class="form-actions">{SubmitButton("Save profile").render()}</div>
    </form>
    <form method="post" action="/profile/delete" class="inline-form danger-zone">
        {SubmitButton("Delete my account", variant="danger").render()}
    </form>"""


@users_router.get("/profile")
@require_auth
async def profile_page(request: Request):
    identity = current_session(request).identity
    content = f"<h1>Your profile</h1>{_profile_form(identity.name, identity.email)}"
    return render_page(request, "Profile", content)


@users_router.post("/profile")
@require_auth
async def profile_update(request: Request):
    """Update name and email of the signed-in user.

    The new values are visible on the next request, when the session is
    restored from `/users/me` again.
    """
    identity = current_session(request).identity
    form = await request.form()
    name = form_str(form, "name")
    email = form_str(form, "email")
    if not name or "@" not in email:
        content = f'<h1>Your profile</h1>{_profile_form(name, email, "Name and a valid email address are required")}'
        return render_page(request, "Profile", content, status_code=400)
    result = await current_api(request).users.update(identity.id, {"name": name, "email": email})
    if not result.is_ok:
        content = f"<h1>Your profile</h1>{_profile_form(name, email, result.error)}"
        return render_page(request, "Profile", content, status_code=400)
    return redirect_with("/profile", notice="Profile updated.")


@users_router.post("/profile/delete")
@require_auth
async def profile_delete(request: Request):
    session = current_session(request)
    result = await current_api(request).users.delete(session.identity.id)
    if not result.is_ok:
        return redirect_with("/profile", error=result.error)
    logger.info("Account deleted, ending session")
    outcome = session.logout()
    return redirect_with(outcome.redirect, notice="Your account has been deleted.")


@users_router.get("/admin/users")
@roles_allowed(Role.ADMIN)
async def admin_users(request: Request):
    users = (await current_api(request).users.list()).data_or([])
    rows = "".join(
        "<tr>"
        f"<td>{Component.escape(u.get('name'))}</td>"
        f"<td>{Component.escape(u.get('email'))}</td>"
        f"<td>{Component.escape(u.get('role'))}</td>"
        "</tr>"
        for u in users
    )
    table = (
        f'<table class="admin-table"><thead><tr><th>Name</th><th>Email</th><th>Role</th></tr></thead><tbody>{rows}</tbody></table>'
        if rows
        else '<p class="empty-state">No users found.</p>'
    )
    return render_page(request, "Users", f"<h1>Users</h1>{table}")
