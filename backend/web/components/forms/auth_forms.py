"""
Login and registration forms.

The login form carries the return destination in a hidden `redirect` field so
the POST handler can send the user back to the page that required login.
"""

from typing import Optional

from ..base import Component
from .fields import SubmitButton, TextInputField


def _error_banner(error: Optional[str]) -> str:
    if not error:
        return ""
    return f'<div class="form-error" role="alert">{Component.escape(error)}</div>'


class LoginForm(Component):
    def __init__(self, *, email: str = "", redirect: Optional[str] = None, error: Optional[str] = None) -> None:
        self.email = email
        self.redirect = redirect
        self.error = error

    def render(self) -> str:
        redirect_html = (
            f'<input type="hidden" name="redirect" value="{self.escape(self.redirect)}">' if self.redirect else ""
        )
        return f"""
        <form method="post" action="/login" class="auth-form" novalidate>
            <h1>Log in</h1>
            {_error_banner(self.error)}
            {redirect_html}
            {TextInputField("email", "Email", required=True).render(value=self.email, input_type="email", autocomplete="username")}
            {TextInputField("password", "Password", required=True).render(input_type="password", autocomplete="current-password")}
            <div class="form-actions">{SubmitButton("Log in").render()}</div>
            <p class="auth-switch">No account yet? <a href="/register">Register</a></p>
        </form>"""


class RegisterForm(Component):
    def __init__(self, *, name: str = "", email: str = "", error: Optional[str] = None) -> None:
        self.name = name
        self.email = email
        self.error = error

    def render(self) -> str:
        return f"""
        <form method="post" action="/register" class="auth-form" novalidate>
            <h1>Create account</h1>
            {_error_banner(self.error)}
            {TextInputField("name", "Name", required=True).render(value=self.name, autocomplete="name")}
            {TextInputField("email", "Email", required=True).render(value=self.email, input_type="email", autocomplete="email")}
            {TextInputField("password", "Password", required=True, help_text="At least 6 characters.").render(input_type="password", autocomplete="new-password")}
            <div class="form-actions">{SubmitButton("Register").render()}</div>
            <p class="auth-switch">Already registered? <a href="/login">Log in</a></p>
        </form>"""
