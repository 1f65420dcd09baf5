"""
Form field components.

Every field renders the same wrapper (label, control, optional help and
error text) so forms stay consistent and accessible.
"""

from typing import Optional

from ..base import Component


class FormField(Component):
    """Wrapper that renders label, input slot, help, and error text."""

    def __init__(
        self,
        field_id: str,
        label: str,
        *,
        name: Optional[str] = None,
        required: bool = False,
        help_text: Optional[str] = None,
        error_text: Optional[str] = None,
    ) -> None:
        self.field_id = field_id
        self.name = name or field_id
        self.label = label
        self.required = required
        self.help_text = help_text
        self.error_text = error_text

    def _control_attrs(self, **attrs) -> str:
        return self.attributes(
            id=self.field_id,
            name=self.name,
            required=self.required,
            aria_describedby=f"{self.field_id}-help" if self.help_text else None,
            aria_invalid="true" if self.error_text else "false",
            **attrs,
        )

    def wrap(self, control_html: str) -> str:
        required_marker = '<span class="form-required" aria-hidden="true">*</span>' if self.required else ""
        help_html = (
            f'<p class="form-help" id="{self.field_id}-help">{self.escape(self.help_text)}</p>'
            if self.help_text
            else ""
        )
        error_html = (
            f'<p class="form-error" role="alert">{self.escape(self.error_text)}</p>' if self.error_text else ""
        )
        label_attrs = self.attributes(for_=self.field_id, class_="form-label")
        return (
            '<div class="form-field">'
            f"<label {label_attrs}>{self.escape(self.label)}{required_marker}</label>"
            f"{control_html}{help_html}{error_html}"
            "</div>"
        )


class TextInputField(FormField):
    """Single-line input; `input_type` is text, email, password or number."""

    def render(self, *, value: str = "", input_type: str = "text", autocomplete: Optional[str] = None) -> str:
        attrs = self._control_attrs(type=input_type, value=value, autocomplete=autocomplete, class_="form-input")
        return self.wrap(f"<input {attrs}>")


class TextAreaField(FormField):
    def render(self, *, value: str = "", rows: int = 5) -> str:
        attrs = self._control_attrs(rows=str(rows), class_="form-input")
        return self.wrap(f"<textarea {attrs}>{self.escape(value)}</textarea>")


class FileUploadField(FormField):
    def render(self, *, accept: Optional[str] = None) -> str:
        attrs = self._control_attrs(type="file", accept=accept)
        return self.wrap(f"<input {attrs}>")


class SubmitButton(Component):
    """Primary form action button."""

    def __init__(self, label: str, *, variant: str = "primary") -> None:
        self.label = label
        self.variant = variant

    def render(self) -> str:
        attrs = self.attributes(type="submit", class_=f"btn btn-{self.variant}")
        return f"<button {attrs}>{self.escape(self.label)}</button>"
