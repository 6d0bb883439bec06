"""
Question Bank Access

Read access to quiz questions for the engine, the student-facing
presentation of a question set, and the teacher-side publication hook.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
import random
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from django.db.models import Avg, Count, Q

from ...courses.enrollment import active_student_ids_for
from ...notifications.services import NotificationEvent, QUIZ_PUBLISHED, emit_many
from ..exceptions import NotFound
from ..models import Question, Quiz, QuizAttempt

logger = logging.getLogger(__name__)


def questions_for(quiz: Quiz) -> List[Question]:
    return list(quiz.questions.order_by("order", "id"))


def presentation_order(quiz: Quiz, rng: Optional[random.Random] = None) -> List[Question]:
    """
    Questions in the order shown to the student.

    With ``shuffle_questions`` a Fisher-Yates shuffle is computed with a fresh
    random source on every call; the order is not persisted, so refreshing
    may reorder the questions of the same attempt.
    """
    questions = questions_for(quiz)
    if quiz.shuffle_questions:
        (rng or random.Random()).shuffle(questions)
    return questions


def public_view(question: Question) -> Dict[str, Any]:
    """Question as sent to a student during an attempt: no correct answer, no explanation."""
    return {
        "id": question.id,
        "type": question.type,
        "prompt": question.prompt,
        "options": question.options,
        "points": question.points,
        "order": question.order,
    }


def question_in_quiz(quiz: Quiz, question_id) -> Question:
    question = Question.objects.filter(pk=question_id, quiz=quiz).first()
    if question is None:
        raise NotFound("Question not found in this quiz", details={"question_id": question_id})
    return question


def next_question_order(quiz: Quiz) -> int:
    last = quiz.questions.order_by("-order").first()
    return last.order + 1 if last else 0


def quiz_stats(quiz: Quiz) -> Dict[str, Any]:
    finished = (QuizAttempt.Status.COMPLETED, QuizAttempt.Status.GRADED)
    aggregate = quiz.attempts.aggregate(
        total=Count("id"),
        completed=Count("id", filter=Q(status__in=finished)),
        avg_score=Avg("score", filter=Q(status__in=finished, score__isnull=False)),
    )
    avg_score = aggregate["avg_score"]
    if avg_score is not None:
        avg_score = Decimal(str(avg_score)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return {
        "total_attempts": aggregate["total"],
        "completed_attempts": aggregate["completed"],
        "avg_score": avg_score,
    }


def notify_quiz_published(quiz: Quiz) -> int:
    """Notify every actively enrolled student that ``quiz`` is available."""
    suffix = f" ({quiz.time_limit} min)" if quiz.time_limit else ""
    events = [
        NotificationEvent(
            recipient_id=student_id,
            kind=QUIZ_PUBLISHED,
            subject="New Quiz Available",
            message=f'A new quiz "{quiz.title}" is now available{suffix}',
            link=f"/lms/student/courses/{quiz.course_id}/quizzes",
        )
        for student_id in active_student_ids_for(quiz.course)
    ]
    sent = emit_many(events)
    logger.info("Quiz %s published, %s students notified", quiz.pk, sent)
    return sent
