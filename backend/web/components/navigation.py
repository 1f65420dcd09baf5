"""
Navigation Component

Role-based sidebar: students see their learning pages, admins additionally
get the course management console.
"""

from typing import Optional, Dict, Any, List, Tuple
from .base import Component

STUDENT_ITEMS: List[Tuple[str, str]] = [
    ("/dashboard", "Dashboard"),
    ("/courses", "Courses"),
    ("/courses/my", "My Courses"),
    ("/profile", "Profile"),
]

ADMIN_ITEMS: List[Tuple[str, str]] = [
    ("/dashboard", "Dashboard"),
    ("/courses", "Courses"),
    ("/admin/courses", "Manage Courses"),
    ("/admin/users", "Users"),
    ("/profile", "Profile"),
]


class Navigation(Component):
    """Navigation component with role-based menu items"""

    def __init__(self, user: Optional[Dict[str, Any]] = None, current_path: str = "/"):
        self.user = user
        self.current_path = current_path

    def render(self) -> str:
        if not self.user:
            return self._render_public_nav()

        links = "".join(self._link(href, label) for href, label in self._items())
        name = self.user.get("name", "")
        role = self.user.get("role", "")
        return f"""
    <aside class="sidebar" id="sidebar" aria-label="Sidebar">
        <nav class="sidebar-nav" role="navigation" aria-label="Main navigation">
            <div class="sidebar-items">{links}</div>
            <div class="sidebar-footer">
                <div class="user-name">{self.escape(name)}</div>
                <div class="user-role">{self.escape(role.title())}</div>
                {self._render_logout()}
            </div>
        </nav>
    </aside>"""

    def _items(self) -> List[Tuple[str, str]]:
        if (self.user or {}).get("role") == "ADMIN":
            return ADMIN_ITEMS
        return STUDENT_ITEMS

    def _active_href(self) -> str:
        """Longest nav href that prefixes the current path."""
        best = ""
        for href, _ in self._items():
            if self.current_path == href or self.current_path.startswith(href + "/"):
                if len(href) > len(best):
                    best = href
        return best

    def _link(self, href: str, label: str) -> str:
        active = href == self._active_href()
        attrs = self.attributes(
            href=href,
            class_=self.classes("nav-link", active=active),
            aria_current="page" if active else None,
        )
        return f"<a {attrs}>{self.escape(label)}</a>"

    def _render_logout(self) -> str:
        return (
            '<form method="post" action="/logout" class="logout-form">'
            '<button type="submit" class="btn btn-link">Log out</button>'
            "</form>"
        )

    def _render_public_nav(self) -> str:
        return """
    <nav class="public-nav" role="navigation" aria-label="Main navigation">
        <a href="/login" class="nav-link">Log in</a>
        <a href="/register" class="nav-link">Register</a>
    </nav>"""
