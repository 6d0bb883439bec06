"""
Course and Enrollment Models

This module defines the course-side data the quiz engine depends on. The
full course catalogue is maintained elsewhere; the engine only needs to know
which course a quiz belongs to, who teaches it and which students are
actively enrolled.

Models:
- Course: A course that owns quizzes and has assigned teachers
- CourseEnrollment: A student's enrollment in a course

Author: DSP Development Team
Version: 1.0.0
"""

from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _


class Course(models.Model):
    """
    Course owning a set of quizzes.

    Attributes:
        title: Unique course title
        teachers: Users assigned to teach (and grade) this course
        created_at: Creation timestamp
    """

    title = models.CharField(
        max_length=255,
        unique=True,
        verbose_name=_("Course Title"),
    )

    teachers = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="teaching_courses",
        verbose_name=_("Teachers"),
        help_text=_("Users allowed to manage quizzes of this course"),
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Course")
        verbose_name_plural = _("Courses")
        ordering = ["title"]
        db_table = "assessments_course"

    def __str__(self) -> str:
        return self.title

    def is_taught_by(self, user) -> bool:
        """Check whether ``user`` is assigned as a teacher of this course."""
        if not user or not user.is_authenticated:
            return False
        return self.teachers.filter(pk=user.pk).exists()


class CourseEnrollment(models.Model):
    """
    Enrollment of a student in a course.

    Only enrollments with status ``active`` allow starting quizzes and
    receiving publication notifications.
    """

    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        SUSPENDED = "suspended", _("Suspended")
        FINISHED = "finished", _("Finished")

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="course_enrollments",
        verbose_name=_("Student"),
    )

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="enrollments",
        verbose_name=_("Course"),
    )

    status = models.CharField(
        max_length=15,
        choices=Status.choices,
        default=Status.ACTIVE,
        verbose_name=_("Status"),
    )

    enrolled_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Course Enrollment")
        verbose_name_plural = _("Course Enrollments")
        unique_together = ("student", "course")
        ordering = ["course", "student"]
        db_table = "assessments_course_enrollment"
        indexes = [
            models.Index(fields=["course", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.student.username} in {self.course.title} ({self.status})"
