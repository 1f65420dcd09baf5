"""
Layout Component for the LMS web UI

Main layout wrapper that combines navigation, notifications and page content
into a complete HTML document.
"""

from typing import Optional, Dict, Any
from .base import Component
from .navigation import Navigation


class Layout(Component):
    """Main layout component that assembles the complete page"""

    def __init__(
        self,
        title: str,
        content: str,
        user: Optional[Dict[str, Any]] = None,
        show_nav: bool = True,
        current_path: str = "/",
        notifications: str = "",
    ):
        """
        Args:
            title: Page title (will be escaped)
            content: Main content HTML (pre-rendered components)
            user: Current user view dict (optional)
            show_nav: Whether to show navigation (default: True)
            current_path: Current URL path for active navigation highlighting
            notifications: Pre-rendered notification HTML shown above content
        """
        self.title = title
        self.content = content
        self.user = user
        self.show_nav = show_nav
        self.current_path = current_path
        self.notifications = notifications

    def render(self) -> str:
        nav_html = Navigation(self.user, self.current_path).render() if self.show_nav else ""
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{self.escape(self.title)} - LMS</title>
    <link rel="stylesheet" href="/static/css/lms.css">
</head>
<body>
    <a href="#main-content" class="skip-link">Skip to content</a>
    {nav_html}
    <main id="main-content" class="main-content" role="main">
        <div id="notifications" aria-live="polite">{self.notifications}</div>
        {self.content}
    </main>
</body>
</html>"""
