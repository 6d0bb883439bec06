"""
Attempt Tracker

Creates, resumes, completes and times out quiz attempts, and provides the
student's read-only views of their attempts.

Lifecycle:
    start()    -> resume the open attempt or create a new one
    complete() -> score the attempt, graded or awaiting manual grading
    expire_if_overdue() -> lazy time-limit enforcement, called on every
                           interaction with an open attempt

There is no background timer: an expired attempt is only closed when it is
touched again (or by the ``close_expired_attempts`` command).

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from ...courses.enrollment import active_course_ids_for, is_enrolled
from ...notifications.services import (
    NotificationEvent,
    QUIZ_GRADED,
    QUIZ_NEEDS_GRADING,
    emit,
)
from ..exceptions import (
    AttemptLimitExceeded,
    EmptyQuiz,
    Forbidden,
    InvalidState,
    NotFound,
    TimeExceeded,
)
from ..models import Quiz, QuizAttempt
from . import question_bank
from .score_aggregator import ScoreAggregator

logger = logging.getLogger(__name__)


@dataclass
class StartResult:
    attempt: QuizAttempt
    questions: List[Dict[str, Any]]
    time_limit: Optional[int]
    created: bool


@dataclass
class CompletionResult:
    attempt: QuizAttempt
    has_manual_grading: bool
    passed: Optional[bool]


@dataclass
class StudentQuizOverview:
    """A published quiz together with the student's attempt history."""
    quiz: Quiz
    question_count: int
    best_attempt: Optional[QuizAttempt]
    last_attempt: Optional[QuizAttempt]
    attempts_used: int
    can_retake: bool
    has_in_progress: bool
    passed: Optional[bool]
    attempts: List[QuizAttempt] = field(default_factory=list, repr=False)


class AttemptTracker:
    """
    Service owning the attempt state machine.

    Args:
        aggregator: Score aggregator used at completion
        clock: Callable returning the current time (``timezone.now`` by default)
    """

    def __init__(self, aggregator: Optional[ScoreAggregator] = None, clock: Callable = timezone.now):
        self.aggregator = aggregator or ScoreAggregator()
        self.clock = clock
        self.logger = logger

    # --- Lookup helpers ---

    def get_student_attempt(self, student, attempt_id) -> QuizAttempt:
        attempt = (
            QuizAttempt.objects.select_related("quiz", "quiz__course")
            .filter(pk=attempt_id, student=student)
            .first()
        )
        if attempt is None:
            raise NotFound("Attempt not found", details={"attempt_id": attempt_id})
        return attempt

    def _find_open_attempt(self, student, quiz: Quiz) -> Optional[QuizAttempt]:
        return (
            QuizAttempt.objects.select_related("quiz")
            .filter(student=student, quiz=quiz, status=QuizAttempt.Status.IN_PROGRESS)
            .first()
        )

    def finished_attempt_count(self, student, quiz: Quiz) -> int:
        return QuizAttempt.objects.filter(
            student=student, quiz=quiz, status__in=QuizAttempt.FINISHED_STATUSES
        ).count()

    # --- Time limit ---

    def expire_if_overdue(self, attempt: QuizAttempt) -> bool:
        """
        Close ``attempt`` as timed out if its time limit has elapsed.

        The write is committed in its own transaction so that the timed-out
        state persists even when the caller goes on to reject the request.

        Returns:
            True if the attempt is (now) timed out
        """
        if attempt.status == QuizAttempt.Status.TIMED_OUT:
            return True
        if not attempt.is_open:
            return False

        now = self.clock()
        if not attempt.is_time_exceeded(now):
            return False

        with transaction.atomic():
            updated = QuizAttempt.objects.filter(
                pk=attempt.pk, status=QuizAttempt.Status.IN_PROGRESS
            ).update(status=QuizAttempt.Status.TIMED_OUT, completed_at=now)

        attempt.refresh_from_db(fields=["status", "completed_at"])
        if updated:
            self.logger.info(
                "Attempt %s of student %s timed out (limit %s min)",
                attempt.pk, attempt.student_id, attempt.quiz.time_limit,
            )
        return attempt.status == QuizAttempt.Status.TIMED_OUT

    def ensure_open(self, attempt: QuizAttempt) -> None:
        """
        Raise unless ``attempt`` accepts student interaction.

        Raises:
            InvalidState: Attempt is no longer in progress
            TimeExceeded: Time limit elapsed; the attempt has been closed
        """
        if not attempt.is_open:
            raise InvalidState("Attempt is already finished", current_status=attempt.status)
        if self.expire_if_overdue(attempt):
            raise TimeExceeded(time_limit=attempt.quiz.time_limit)

    # --- Operations ---

    def start(self, student, quiz_id) -> StartResult:
        """
        Start a new attempt or resume the open one.

        Raises:
            NotFound: Quiz missing, inactive or unpublished
            Forbidden: Student not actively enrolled in the quiz's course
            EmptyQuiz: Quiz has no questions
            AttemptLimitExceeded: All attempts used up
        """
        quiz = Quiz.objects.select_related("course").filter(pk=quiz_id).first()
        if quiz is None:
            raise NotFound("Quiz not found", details={"quiz_id": quiz_id})
        if not is_enrolled(student, quiz.course):
            raise Forbidden("Not enrolled in this course")
        if not quiz.is_available_to_students():
            raise NotFound("Quiz not found or not published", details={"quiz_id": quiz_id})
        if not quiz.questions.exists():
            raise EmptyQuiz()

        open_attempt = self._find_open_attempt(student, quiz)
        if open_attempt is not None and not self.expire_if_overdue(open_attempt):
            return self._start_result(open_attempt, quiz, created=False)

        used = self.finished_attempt_count(student, quiz)
        if used >= quiz.max_attempts:
            raise AttemptLimitExceeded(quiz.max_attempts)

        try:
            with transaction.atomic():
                attempt = QuizAttempt.objects.create(
                    quiz=quiz,
                    student=student,
                    status=QuizAttempt.Status.IN_PROGRESS,
                    started_at=self.clock(),
                )
        except IntegrityError:
            # Paralleler Start: der andere Request hat den Versuch bereits angelegt
            attempt = self._find_open_attempt(student, quiz)
            if attempt is None:
                raise
            self.logger.info("Concurrent start for quiz %s resolved to attempt %s", quiz.pk, attempt.pk)
            return self._start_result(attempt, quiz, created=False)

        self.logger.info(
            "Student %s started attempt %s for quiz %s (%s/%s used)",
            student.pk, attempt.pk, quiz.pk, used, quiz.max_attempts,
        )
        return self._start_result(attempt, quiz, created=True)

    def _start_result(self, attempt: QuizAttempt, quiz: Quiz, created: bool) -> StartResult:
        questions = [question_bank.public_view(q) for q in question_bank.presentation_order(quiz)]
        return StartResult(attempt=attempt, questions=questions, time_limit=quiz.time_limit, created=created)

    def complete(self, student, attempt_id) -> CompletionResult:
        """
        Finish an open attempt and compute its score.

        The attempt becomes ``graded`` when every answer is resolved,
        otherwise ``completed`` with an empty score until manual grading.
        """
        attempt = self.get_student_attempt(student, attempt_id)
        self.ensure_open(attempt)

        with transaction.atomic():
            attempt = (
                QuizAttempt.objects.select_for_update()
                .select_related("quiz", "quiz__course")
                .get(pk=attempt.pk)
            )
            if not attempt.is_open:
                raise InvalidState("Attempt is already finished", current_status=attempt.status)

            now = self.clock()
            attempt.completed_at = now
            attempt.time_spent_sec = max(0, round((now - attempt.started_at).total_seconds()))

            snapshot = self.aggregator.recompute(attempt, save=False)
            if snapshot.all_resolved:
                attempt.status = QuizAttempt.Status.GRADED
                attempt.graded_at = now
            else:
                attempt.status = QuizAttempt.Status.COMPLETED
            attempt.save()

            if snapshot.all_resolved:
                notify_graded(attempt)
            else:
                self._notify_teacher(attempt)

        self.logger.info(
            "Attempt %s completed with status %s (%s/%s points, score=%s)",
            attempt.pk, attempt.status, attempt.total_points, attempt.max_points, attempt.score,
        )
        return CompletionResult(
            attempt=attempt,
            has_manual_grading=not snapshot.all_resolved,
            passed=attempt.passed,
        )

    def _notify_teacher(self, attempt: QuizAttempt) -> None:
        quiz = attempt.quiz
        if quiz.teacher_id is None:
            return
        name = attempt.student.get_full_name() or attempt.student.username
        emit(
            NotificationEvent(
                recipient_id=quiz.teacher_id,
                kind=QUIZ_NEEDS_GRADING,
                subject="Quiz Needs Grading",
                message=f'{name} completed "{quiz.title}" and has open answers to grade',
                link=f"/lms/teacher/courses/{quiz.course_id}/quizzes",
            )
        )

    # --- Read-only views ---

    def results(self, student, attempt_id) -> QuizAttempt:
        attempt = (
            QuizAttempt.objects.select_related("quiz")
            .prefetch_related("answers__question")
            .filter(pk=attempt_id, student=student, status__in=QuizAttempt.FINISHED_STATUSES)
            .first()
        )
        if attempt is None:
            raise NotFound("Completed attempt not found", details={"attempt_id": attempt_id})
        return attempt

    def my_attempts(self, student, quiz_id=None):
        queryset = QuizAttempt.objects.filter(student=student).select_related("quiz")
        if quiz_id is not None:
            queryset = queryset.filter(quiz_id=quiz_id)
        return queryset.order_by("-started_at", "-id")

    def my_quizzes(self, student, course_id=None) -> List[StudentQuizOverview]:
        course_ids = active_course_ids_for(student)
        if course_id is not None:
            if int(course_id) not in course_ids:
                raise Forbidden("Not enrolled in this course")
            course_ids = [int(course_id)]
        if not course_ids:
            return []

        quizzes = Quiz.objects.filter(
            course_id__in=course_ids, is_active=True, is_published=True
        ).select_related("course", "teacher")

        overviews = []
        for quiz in quizzes:
            attempts = list(quiz.attempts.filter(student=student).order_by("-started_at", "-id"))
            overviews.append(self._overview(quiz, attempts))
        return overviews

    def _overview(self, quiz: Quiz, attempts: List[QuizAttempt]) -> StudentQuizOverview:
        scored = [
            a for a in attempts
            if a.status in (QuizAttempt.Status.COMPLETED, QuizAttempt.Status.GRADED)
        ]
        best = max(scored, key=lambda a: a.score or 0, default=None)
        attempts_used = sum(1 for a in attempts if not a.is_open)

        passed = None
        if best is not None and quiz.passing_score is not None:
            passed = (best.score or 0) >= quiz.passing_score

        return StudentQuizOverview(
            quiz=quiz,
            question_count=quiz.question_count,
            best_attempt=best,
            last_attempt=attempts[0] if attempts else None,
            attempts_used=attempts_used,
            can_retake=attempts_used < quiz.max_attempts,
            has_in_progress=any(a.is_open for a in attempts),
            passed=passed,
            attempts=attempts,
        )


def notify_graded(attempt: QuizAttempt) -> None:
    """Tell the student their attempt has its final score."""
    quiz = attempt.quiz
    emit(
        NotificationEvent(
            recipient_id=attempt.student_id,
            kind=QUIZ_GRADED,
            subject="Quiz Graded",
            message=f'Your quiz "{quiz.title}" has been fully graded. Score: {attempt.score}%',
            link=f"/lms/student/courses/{quiz.course_id}/quizzes",
        )
    )
