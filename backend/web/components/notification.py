"""
Feedback components: dismissable notifications and the loading indicator.
"""

from typing import Optional

from .base import Component


class Notification(Component):
    """Dismissable notice shown after a mutating action.

    `kind` is "success" or "error"; errors are announced assertively.
    """

    def __init__(self, message: str, kind: str = "success") -> None:
        self.message = message
        self.kind = "error" if kind == "error" else "success"

    def render(self) -> str:
        role = "alert" if self.kind == "error" else "status"
        return (
            f'<div class="notification notification--{self.kind}" role="{role}">'
            f'<span class="notification-text">{self.escape(self.message)}</span>'
            '<button type="button" class="notification-close" aria-label="Dismiss" '
            "onclick=\"this.parentElement.remove()\">&times;</button>"
            "</div>"
        )

    @classmethod
    def from_query(cls, notice: Optional[str], error: Optional[str]) -> str:
        """Render notifications carried by `?notice=` / `?error=` redirects."""
        parts = []
        if error:
            parts.append(cls(error, "error").render())
        if notice:
            parts.append(cls(notice, "success").render())
        return "".join(parts)


class LoadingIndicator(Component):
    """Neutral placeholder rendered while the session is still restoring."""

    def __init__(self, label: str = "Loading...") -> None:
        self.label = label

    def render(self) -> str:
        return (
            '<div class="loading" role="status" aria-live="polite">'
            '<div class="spinner" aria-hidden="true"></div>'
            f'<p class="loading-label">{self.escape(self.label)}</p>'
            "</div>"
        )
