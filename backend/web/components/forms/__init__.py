"""
Form components for the LMS web UI.
"""

from .fields import FormField, TextAreaField, FileUploadField, TextInputField, SubmitButton
from .auth_forms import LoginForm, RegisterForm
from .course_forms import CourseForm, ModuleForm, LessonForm, VideoUploadForm, DeleteButton

__all__ = [
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
