"""
Assessments Django Admin Configuration

Admin interface for the quiz engine. Sections:
- Courses: Courses, assigned teachers and student enrollments
- Quizzes: Quiz configuration with inline question editing
- Attempts: Read-only view of attempts and their answers
- Notifications: Stored in-app notifications

Attempts are created by students through the API only, so adding them in the
admin is disabled.

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Optional
from django.contrib import admin
from django.utils.translation import gettext_lazy as _
from django.db.models import QuerySet
from django.http import HttpRequest

# Import all models from the central models registry
from .models import (
    Course,
    CourseEnrollment,
    Notification,
    Quiz,
    Question,
    QuizAttempt,
    QuizAnswer,
)

# --- Course Administration ---


class CourseEnrollmentInline(admin.TabularInline):
    """Inline admin for student enrollments of a course."""

    model = CourseEnrollment
    extra = 0
    fields = ("student", "status", "enrolled_at")
    readonly_fields = ("enrolled_at",)
    autocomplete_fields = ("student",)


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("title", "quiz_count", "created_at")
    search_fields = ("title",)
    filter_horizontal = ("teachers",)
    inlines = [CourseEnrollmentInline]

    @admin.display(description=_("Quizzes"))
    def quiz_count(self, obj: Course) -> int:
        return obj.quizzes.count()


@admin.register(CourseEnrollment)
class CourseEnrollmentAdmin(admin.ModelAdmin):
    """Administration interface for course enrollments."""

    list_display = ("student", "course", "status", "enrolled_at")
    list_filter = ("status", "course")
    search_fields = ("student__username", "student__email", "course__title")
    autocomplete_fields = ("student", "course")
    readonly_fields = ("enrolled_at",)

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        """Optimize queryset with related object prefetch."""
        return super().get_queryset(request).select_related("student", "course")


# --- Quiz Administration ---


class QuestionInline(admin.TabularInline):
    """Inline admin for quiz question management."""

    model = Question
    extra = 1
    fields = ("order", "type", "prompt", "options", "correct_answer", "points")
    ordering = ("order",)


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    """
    Administration interface for quizzes.

    Provides quiz configuration including time limit, attempt limit and
    visibility flags, with inline editing of the question set.
    """

    list_display = (
        "title",
        "course",
        "teacher",
        "question_count",
        "max_attempts",
        "time_limit",
        "is_active",
        "is_published",
    )
    list_filter = ("is_active", "is_published", "course")
    search_fields = ("title", "description", "course__title")
    autocomplete_fields = ("course", "teacher")
    inlines = [QuestionInline]

    fieldsets = (
        (_("Basic Information"), {"fields": ("title", "description", "course", "teacher")}),
        (
            _("Configuration"),
            {
                "fields": (
                    "time_limit",
                    "max_attempts",
                    "passing_score",
                    "show_results",
                    "shuffle_questions",
                ),
            },
        ),
        (
            _("Visibility"),
            {
                "fields": ("is_active", "is_published"),
                "description": _("Students only see quizzes that are active and published"),
            },
        ),
    )

    readonly_fields = ("created_at", "updated_at")

    @admin.display(description=_("Questions"))
    def question_count(self, obj: Quiz) -> int:
        return obj.questions.count()

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        """Optimize queryset with related object prefetch."""
        return (
            super()
            .get_queryset(request)
            .select_related("course", "teacher")
            .prefetch_related("questions")
        )


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("__str__", "quiz", "type", "points", "order")
    list_filter = ("type", "quiz__course")
    search_fields = ("prompt", "quiz__title")
    autocomplete_fields = ("quiz",)
    ordering = ("quiz", "order")


# --- Attempt Administration ---


class QuizAnswerInline(admin.TabularInline):
    """
    Read-only inline for the answers of an attempt.

    Manual grades are entered through the grading API, which enforces the
    point bounds and recomputes the attempt score.
    """

    model = QuizAnswer
    extra = 0
    fields = ("question", "value", "is_correct", "points_earned", "graded_by", "updated_at")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request: HttpRequest, obj: Optional[QuizAttempt] = None) -> bool:
        return False


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
    """
    Administration interface for quiz attempts.

    Status, scores and answers are maintained by the engine and are shown
    read-only; the admin never moves an attempt through its state machine.
    """

    list_display = (
        "quiz",
        "student",
        "status",
        "score",
        "total_points",
        "max_points",
        "started_at",
        "completed_at",
    )
    list_filter = ("status", "quiz__course", "started_at")
    search_fields = ("student__username", "student__email", "quiz__title")
    readonly_fields = (
        "quiz",
        "student",
        "status",
        "started_at",
        "completed_at",
        "graded_at",
        "time_spent_sec",
        "score",
        "total_points",
        "max_points",
        "created_at",
    )
    inlines = [QuizAnswerInline]

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        """Optimize queryset with related object prefetch."""
        return super().get_queryset(request).select_related("quiz", "student")


# --- Notification Administration ---


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("recipient", "kind", "subject", "is_read", "created_at")
    list_filter = ("kind", "is_read", "created_at")
    search_fields = ("recipient__username", "subject", "message")
    readonly_fields = ("created_at",)
