from .course import CourseCard, ProgressBar, ModuleList

__all__ = ["CourseCard", "ProgressBar", "ModuleList"]
