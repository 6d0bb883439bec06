"""
Manual Grading Service

Lets an instructor supply correctness and points for open-text and code
answers the auto-grader could not resolve. Every grade re-runs the score
aggregator; the last missing grade moves the attempt from ``completed`` to
``graded`` and notifies the student.

All reads and writes for one grade happen in a single transaction holding a
row lock on the attempt, so grading several answers of the same attempt in
quick succession cannot miss the final transition.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.db import transaction
from django.utils import timezone

from ..exceptions import Forbidden, InvalidState, NotFound, OutOfRange
from ..models import Quiz, QuizAnswer, QuizAttempt
from .attempt_tracker import notify_graded
from .score_aggregator import ScoreAggregator

logger = logging.getLogger(__name__)


@dataclass
class GradingOutcome:
    answer: QuizAnswer
    attempt: QuizAttempt
    finalized: bool


class ManualGradingService:
    def __init__(self, aggregator: Optional[ScoreAggregator] = None):
        self.aggregator = aggregator or ScoreAggregator()
        self.logger = logger

    def grade(self, instructor, attempt_id, answer_id, points_earned, is_correct: bool) -> GradingOutcome:
        """
        Grade one answer of a completed attempt.

        Raises:
            NotFound: Attempt or answer missing, answer not in attempt, or
                question type is auto-graded
            Forbidden: Instructor may not manage this quiz
            InvalidState: Attempt is not awaiting manual grading
            OutOfRange: Points negative or above the question's points
        """
        with transaction.atomic():
            attempt = (
                QuizAttempt.objects.select_for_update()
                .filter(pk=attempt_id)
                .first()
            )
            if attempt is None:
                raise NotFound("Attempt not found", details={"attempt_id": attempt_id})

            answer = (
                QuizAnswer.objects.select_related("question")
                .filter(pk=answer_id, attempt=attempt)
                .first()
            )
            if answer is None:
                raise NotFound("Answer not found", details={"answer_id": answer_id})
            if not answer.question.requires_manual_grading:
                raise NotFound(
                    "Only open-text and code answers can be manually graded",
                    details={"answer_id": answer_id, "type": answer.question.type},
                )

            quiz = Quiz.objects.select_related("course").get(pk=attempt.quiz_id)
            if not quiz.can_be_managed_by(instructor):
                raise Forbidden("You can only grade your own quizzes")
            if attempt.status != QuizAttempt.Status.COMPLETED:
                raise InvalidState("Attempt is not awaiting manual grading", current_status=attempt.status)

            points = self._to_points(points_earned, answer.question.points)

            answer.is_correct = bool(is_correct)
            answer.points_earned = points
            answer.graded_by = instructor
            answer.save(update_fields=["is_correct", "points_earned", "graded_by", "updated_at"])

            snapshot = self.aggregator.recompute(attempt, save=False)
            finalized = snapshot.all_resolved
            if finalized:
                attempt.status = QuizAttempt.Status.GRADED
                attempt.graded_at = timezone.now()
            attempt.save(update_fields=["total_points", "max_points", "score", "status", "graded_at"])

            if finalized:
                attempt.quiz = quiz
                notify_graded(attempt)

        self.logger.info(
            "Instructor %s graded answer %s of attempt %s with %s points%s",
            instructor.pk, answer.pk, attempt.pk, points,
            " (attempt fully graded)" if finalized else "",
        )
        return GradingOutcome(answer=answer, attempt=attempt, finalized=finalized)

    @staticmethod
    def _to_points(points_earned, max_points) -> Decimal:
        try:
            points = Decimal(str(points_earned))
        except (InvalidOperation, TypeError, ValueError):
            raise OutOfRange(points_earned, max_points)
        if not points.is_finite() or points < 0 or points > Decimal(max_points):
            raise OutOfRange(points_earned, max_points)
        return points

    def pending_submissions(self, instructor):
        """Completed attempts with open answers on quizzes the instructor manages."""
        quizzes = Quiz.get_manageable_quizzes_for_user(instructor)
        return (
            QuizAttempt.objects.filter(
                quiz__in=quizzes,
                status=QuizAttempt.Status.COMPLETED,
            )
            .select_related("quiz", "student")
            .prefetch_related("answers__question")
            .order_by("completed_at", "id")
        )
