"""Use case layer for the Learning context.

Re-export common use cases for convenient imports in routes and tests.
"""

from .courses import (
    Catalogue,
    CatalogueInput,
    CatalogueUseCase,
    CourseOverview,
    CourseOverviewInput,
    CourseOverviewUseCase,
    Dashboard,
    DashboardUseCase,
    LessonPage,
    LessonPageInput,
    LessonPageUseCase,
    ModuleWithLessons,
    MyCoursesUseCase,
    completion_percent,
    sort_by_order,
)

__all__ = [
    "Catalogue",
    "CatalogueInput",
    "CatalogueUseCase",
    "CourseOverview",
    "CourseOverviewInput",
    "CourseOverviewUseCase",
    "Dashboard",
    "DashboardUseCase",
    "LessonPage",
    "LessonPageInput",
    "LessonPageUseCase",
    "ModuleWithLessons",
    "MyCoursesUseCase",
    "completion_percent",
    "sort_by_order",
]
