"""
Quiz Engine Models

This module defines the persisted state of the quiz engine.

Models:
- Quiz: Quiz configuration owned by a course and (optionally) a teacher
- Question: A single question of a quiz with its grading definition
- QuizAttempt: One student's pass at one quiz
- QuizAnswer: One response to one question within one attempt

Invariants:
- At most one in-progress attempt per (student, quiz), enforced by a
  conditional unique constraint
- Exactly one answer per (attempt, question); resubmission overwrites it
- Answers of a graded attempt are never changed

Author: DSP Development Team
Version: 1.0.0
"""

import datetime
from typing import FrozenSet, Optional

from django.db import models
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db.models import QuerySet
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ..courses.models import Course
from . import grading

User = settings.AUTH_USER_MODEL


def validate_question_definition(question_type: str, options, correct_answer) -> None:
    """
    Validate options and correct answer for ``question_type``.

    Raises:
        ValidationError: If the definition violates the rules of its type
    """
    if question_type in grading.MANUAL_TYPES:
        return

    if question_type not in grading.CHOICE_TYPES:
        raise ValidationError({"type": _("Unknown question type.")})

    if not isinstance(options, list) or not options:
        raise ValidationError({"options": _("Choice questions require a list of options.")})

    option_ids = []
    for option in options:
        if not isinstance(option, dict) or "id" not in option:
            raise ValidationError({"options": _("Every option needs an 'id'.")})
        option_ids.append(grading.as_option_id(option["id"]))
    if len(set(option_ids)) != len(option_ids):
        raise ValidationError({"options": _("Option ids must be unique.")})

    if not isinstance(correct_answer, list):
        correct_answer = [correct_answer]
    correct_ids = grading.as_option_ids(correct_answer)

    if not correct_ids:
        raise ValidationError({"correct_answer": _("At least one correct option is required.")})
    if question_type in grading.SINGLE_ANSWER_TYPES and len(correct_ids) != 1:
        raise ValidationError(
            {"correct_answer": _("Single-choice and true/false questions need exactly one correct option.")}
        )
    if not correct_ids.issubset(option_ids):
        raise ValidationError({"correct_answer": _("Correct answer must reference existing options.")})


class Quiz(models.Model):
    """
    Quiz configuration.

    Attributes:
        course: Course the quiz belongs to
        teacher: Owning teacher; empty for quizzes created by an administrator
        time_limit: Optional time limit in minutes
        max_attempts: Number of finished attempts a student may use
        passing_score: Optional passing threshold in percent
        show_results: Reveal correct answers and explanations after completion
        shuffle_questions: Present questions in a fresh random order per request
        is_active / is_published: Visibility flags for students
    """

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="quizzes",
        verbose_name=_("Course"),
    )
    teacher = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="owned_quizzes",
        verbose_name=_("Teacher"),
    )
    title = models.CharField(max_length=255, verbose_name=_("Title"))
    description = models.TextField(blank=True, default="", verbose_name=_("Description"))
    time_limit = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
        verbose_name=_("Time Limit"),
        help_text=_("Time limit in minutes. Empty means unlimited."),
    )
    max_attempts = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name=_("Max Attempts"),
    )
    passing_score = models.DecimalField(
        max_digits=5,
        decimal_places=1,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name=_("Passing Score"),
        help_text=_("Passing threshold in percent."),
    )
    show_results = models.BooleanField(default=True, verbose_name=_("Show Results"))
    shuffle_questions = models.BooleanField(default=False, verbose_name=_("Shuffle Questions"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))
    is_published = models.BooleanField(default=False, verbose_name=_("Published"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Quiz")
        verbose_name_plural = _("Quizzes")
        ordering = ["-created_at"]
        db_table = "assessments_quiz"

    def __str__(self) -> str:
        return self.title

    @property
    def question_count(self) -> int:
        return self.questions.count()

    def is_available_to_students(self) -> bool:
        return self.is_active and self.is_published

    def can_be_managed_by(self, user) -> bool:
        """
        Check if ``user`` may edit this quiz and grade its attempts.

        Logic:
            1. Staff users manage every quiz
            2. The owning teacher manages their quiz
            3. Quizzes without owner are managed by the course's teachers
        """
        if not user or not user.is_authenticated:
            return False
        if user.is_staff:
            return True
        if self.teacher_id is not None:
            return self.teacher_id == user.pk
        return self.course.is_taught_by(user)

    @staticmethod
    def get_manageable_quizzes_for_user(user) -> QuerySet["Quiz"]:
        if not user or not user.is_authenticated:
            return Quiz.objects.none()
        if user.is_staff:
            return Quiz.objects.all()
        return Quiz.objects.filter(
            models.Q(teacher=user)
            | models.Q(teacher__isnull=True, course__teachers=user)
        ).distinct()


class Question(models.Model):
    """
    A question of a quiz.

    ``options`` is a list of ``{"id": ..., "text": ...}`` entries for choice
    questions. ``correct_answer`` holds the list of correct option ids for
    choice questions and a free-text grading hint for open-text/code
    questions.
    """

    class Type(models.TextChoices):
        SINGLE_CHOICE = grading.SINGLE_CHOICE, _("Single Choice")
        MULTI_SELECT = grading.MULTI_SELECT, _("Multi Select")
        TRUE_FALSE = grading.TRUE_FALSE, _("True / False")
        OPEN_TEXT = grading.OPEN_TEXT, _("Open Text")
        CODE = grading.CODE, _("Code")

    quiz = models.ForeignKey(
        Quiz,
        on_delete=models.CASCADE,
        related_name="questions",
        verbose_name=_("Quiz"),
    )
    type = models.CharField(max_length=20, choices=Type.choices, verbose_name=_("Type"))
    prompt = models.TextField(verbose_name=_("Prompt"))
    options = models.JSONField(null=True, blank=True, verbose_name=_("Options"))
    correct_answer = models.JSONField(
        null=True,
        blank=True,
        verbose_name=_("Correct Answer"),
        help_text=_("List of option ids, or a grading hint for open questions."),
    )
    points = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name=_("Points"),
    )
    explanation = models.TextField(blank=True, null=True, verbose_name=_("Explanation"))
    order = models.PositiveIntegerField(default=0, verbose_name=_("Display Order"))

    class Meta:
        verbose_name = _("Question")
        verbose_name_plural = _("Questions")
        ordering = ["quiz", "order", "id"]
        db_table = "assessments_question"

    def __str__(self) -> str:
        return f"{self.quiz.title} - Q{self.order}: {self.prompt[:40]}"

    def clean(self):
        super().clean()
        validate_question_definition(self.type, self.options, self.correct_answer)
        self.validate_type_change(self.type)

    def validate_type_change(self, new_type: str) -> None:
        """
        Reject changing the type of a question that already has answers.

        Stored answers were graded (or routed to manual grading) by the old
        type; switching would strand them.
        """
        if self.pk is None:
            return
        stored_type = Question.objects.filter(pk=self.pk).values_list("type", flat=True).first()
        if stored_type is None or stored_type == new_type:
            return
        if self.answers.exists():
            raise ValidationError(
                {"type": _("The type of a question with submitted answers cannot be changed.")}
            )

    @property
    def requires_manual_grading(self) -> bool:
        return self.type in grading.MANUAL_TYPES

    @property
    def correct_option_ids(self) -> FrozenSet[str]:
        if self.type not in grading.CHOICE_TYPES:
            return frozenset()
        answer = self.correct_answer
        if answer is None:
            return frozenset()
        if not isinstance(answer, list):
            answer = [answer]
        return grading.as_option_ids(answer)


class QuizAttempt(models.Model):
    """
    One student's pass at one quiz.

    Status flow:
        in_progress -> timed_out                   (time limit hit)
        in_progress -> graded                      (completed, all answers resolved)
        in_progress -> completed -> graded         (manual grading pending)

    ``score``, ``total_points`` and ``max_points`` are a persisted snapshot
    written by the score aggregator; they are not computed on read.
    """

    class Status(models.TextChoices):
        IN_PROGRESS = "in_progress", _("In Progress")
        COMPLETED = "completed", _("Completed")
        GRADED = "graded", _("Graded")
        TIMED_OUT = "timed_out", _("Timed Out")

    FINISHED_STATUSES = (Status.COMPLETED, Status.GRADED, Status.TIMED_OUT)

    quiz = models.ForeignKey(
        Quiz,
        on_delete=models.CASCADE,
        related_name="attempts",
        verbose_name=_("Quiz"),
    )
    student = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="quiz_attempts",
        verbose_name=_("Student"),
    )
    status = models.CharField(
        max_length=15,
        choices=Status.choices,
        default=Status.IN_PROGRESS,
        verbose_name=_("Status"),
    )
    started_at = models.DateTimeField(default=timezone.now, verbose_name=_("Started At"))
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Completed At"))
    graded_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Graded At"))
    time_spent_sec = models.PositiveIntegerField(null=True, blank=True, verbose_name=_("Time Spent (s)"))
    score = models.DecimalField(
        max_digits=5,
        decimal_places=1,
        null=True,
        blank=True,
        help_text=_("Percentage score. Empty while answers await manual grading."),
    )
    total_points = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    max_points = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Quiz Attempt")
        verbose_name_plural = _("Quiz Attempts")
        ordering = ["-created_at", "-id"]
        db_table = "assessments_quiz_attempt"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "quiz"],
                condition=models.Q(status="in_progress"),
                name="unique_open_attempt_per_student_quiz",
            ),
        ]
        indexes = [
            models.Index(fields=["quiz", "student", "status"]),
        ]

    def __str__(self) -> str:
        return f"Attempt for {self.quiz.title} by {self.student.username} ({self.status})"

    @property
    def is_open(self) -> bool:
        return self.status == self.Status.IN_PROGRESS

    @property
    def deadline(self) -> Optional[datetime.datetime]:
        if self.started_at and self.quiz.time_limit:
            return self.started_at + datetime.timedelta(minutes=self.quiz.time_limit)
        return None

    def is_time_exceeded(self, now: Optional[datetime.datetime] = None) -> bool:
        """Elapsed time strictly greater than the quiz time limit."""
        deadline = self.deadline
        if deadline is None:
            return False
        return (now or timezone.now()) > deadline

    @property
    def passed(self) -> Optional[bool]:
        if self.score is None or self.quiz.passing_score is None:
            return None
        return self.score >= self.quiz.passing_score


class QuizAnswer(models.Model):
    """
    One response to one question within one attempt.

    ``value`` stores a tagged variant, either
    ``{"kind": "options", "options": [...]}`` or ``{"kind": "text", "text": "..."}``.
    ``is_correct`` is empty exactly while manual grading is pending.
    """

    attempt = models.ForeignKey(
        QuizAttempt,
        on_delete=models.CASCADE,
        related_name="answers",
        verbose_name=_("Attempt"),
    )
    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name="answers",
        verbose_name=_("Question"),
    )
    value = models.JSONField(verbose_name=_("Submitted Value"))
    is_correct = models.BooleanField(null=True, blank=True, verbose_name=_("Correct"))
    points_earned = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        verbose_name=_("Points Earned"),
    )
    graded_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="graded_quiz_answers",
        verbose_name=_("Graded By"),
    )
    answered_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Quiz Answer")
        verbose_name_plural = _("Quiz Answers")
        unique_together = ("attempt", "question")
        ordering = ["attempt", "question__order", "question_id"]
        db_table = "assessments_quiz_answer"

    def __str__(self) -> str:
        return f"Answer to {self.question_id} in attempt {self.attempt_id}"

    @property
    def is_resolved(self) -> bool:
        return self.is_correct is not None
