"""
Answer Recorder

Accepts a student's answer for one question of an open attempt, grades it
through the auto-grader and upserts the stored answer. Students may change
an answer any number of times until the attempt is completed.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Optional

from django.db import transaction

from ..exceptions import InvalidState
from ..grading import auto_grade, normalize_answer
from ..models import QuizAnswer, QuizAttempt
from . import question_bank
from .attempt_tracker import AttemptTracker

logger = logging.getLogger(__name__)


class AnswerRecorder:
    def __init__(self, tracker: Optional[AttemptTracker] = None):
        self.tracker = tracker or AttemptTracker()
        self.logger = logger

    def submit(self, student, attempt_id, question_id, value: Any) -> QuizAnswer:
        """
        Record ``value`` as the answer to ``question_id``.

        Raises:
            NotFound: Attempt not owned by the student, or question not in its quiz
            InvalidState: Attempt is no longer in progress
            TimeExceeded: Time limit elapsed; the attempt is closed as timed out
        """
        attempt = self.tracker.get_student_attempt(student, attempt_id)
        self.tracker.ensure_open(attempt)

        question = question_bank.question_in_quiz(attempt.quiz, question_id)
        normalized = normalize_answer(question.type, value)
        result = auto_grade(question, normalized)

        with transaction.atomic():
            locked = QuizAttempt.objects.select_for_update().get(pk=attempt.pk)
            if not locked.is_open:
                raise InvalidState("Attempt is already finished", current_status=locked.status)

            answer, created = QuizAnswer.objects.update_or_create(
                attempt=locked,
                question=question,
                defaults={
                    "value": normalized.to_json(),
                    "is_correct": result.is_correct,
                    "points_earned": result.points_earned,
                    "graded_by": None,
                },
            )

        self.logger.info(
            "%s answer for question %s in attempt %s (correct=%s)",
            "Recorded" if created else "Replaced", question.pk, attempt.pk, result.is_correct,
        )
        return answer
