"""
Enrollment check used before a student may start a quiz.

The check is pluggable: ``settings.QUIZ_ENROLLMENT_CHECKER`` holds the dotted
path of a callable ``(student, course) -> bool``. By default the local
``CourseEnrollment`` table is queried.
"""

from typing import Callable, List

from django.conf import settings
from django.utils.module_loading import import_string

from .models import Course, CourseEnrollment

DEFAULT_ENROLLMENT_CHECKER = "assessments.courses.enrollment.has_active_enrollment"


def has_active_enrollment(student, course: Course) -> bool:
    if not student or not student.is_authenticated:
        return False
    return CourseEnrollment.objects.filter(
        student=student,
        course=course,
        status=CourseEnrollment.Status.ACTIVE,
    ).exists()


def get_enrollment_checker() -> Callable:
    path = getattr(settings, "QUIZ_ENROLLMENT_CHECKER", DEFAULT_ENROLLMENT_CHECKER)
    return import_string(path)


def is_enrolled(student, course: Course) -> bool:
    """Ask the configured enrollment collaborator whether ``student`` may take quizzes of ``course``."""
    return bool(get_enrollment_checker()(student, course))


def active_course_ids_for(student) -> List[int]:
    return list(
        CourseEnrollment.objects.filter(
            student=student, status=CourseEnrollment.Status.ACTIVE
        ).values_list("course_id", flat=True)
    )


def active_student_ids_for(course: Course) -> List[int]:
    return list(
        CourseEnrollment.objects.filter(
            course=course, status=CourseEnrollment.Status.ACTIVE
        ).values_list("student_id", flat=True)
    )
