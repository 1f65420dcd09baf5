# LMS Component System
# Pure Python components for escaped HTML generation

from .base import Component
from .layout import Layout
from .navigation import Navigation
from .notification import Notification, LoadingIndicator
from .cards import CourseCard, ProgressBar, ModuleList
from .forms import (
    FormField,
    TextAreaField,
    FileUploadField,
    TextInputField,
    SubmitButton,
    LoginForm,
    RegisterForm,
    CourseForm,
    ModuleForm,
    LessonForm,
    VideoUploadForm,
    DeleteButton,
)

__all__ = [
    "Component",
    "Layout",
    "Navigation",
    "Notification",
    "LoadingIndicator",
    "CourseCard",
    "ProgressBar",
    "ModuleList",
    "FormField",
    "TextAreaField",
    "FileUploadField",
    "TextInputField",
    "SubmitButton",
    "LoginForm",
    "RegisterForm",
    "CourseForm",
    "ModuleForm",
    "LessonForm",
    "VideoUploadForm",
    "DeleteButton",
]
