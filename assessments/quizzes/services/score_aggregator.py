"""
Score Aggregator

Recomputes the persisted score snapshot of an attempt from its answers.
Called when an attempt is completed and after every manual grade.

Rules:
- total_points: sum of points of answers with known correctness
- max_points: sum of question points over the recorded answers only;
  unanswered questions count on neither side
- score: total / max * 100 rounded half-up to one decimal (0 if max is 0),
  or None while any answer awaits manual grading

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from ..models import QuizAttempt, QuizAnswer

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ScoreSnapshot:
    total_points: Decimal
    max_points: Decimal
    all_resolved: bool
    score: Optional[Decimal]


def round_score(total_points: Decimal, max_points: Decimal) -> Decimal:
    """Percentage rounded half-up to one decimal place; 0 when nothing is achievable."""
    if max_points <= 0:
        return Decimal("0.0")
    return (Decimal(total_points) / Decimal(max_points) * HUNDRED).quantize(
        ONE_DECIMAL, rounding=ROUND_HALF_UP
    )


def compute_snapshot(answers: Iterable[QuizAnswer]) -> ScoreSnapshot:
    total = Decimal("0")
    maximum = Decimal("0")
    all_resolved = True
    for answer in answers:
        maximum += Decimal(answer.question.points)
        if not answer.is_resolved:
            all_resolved = False
            continue
        total += answer.points_earned or Decimal("0")

    return ScoreSnapshot(
        total_points=total,
        max_points=maximum,
        all_resolved=all_resolved,
        score=round_score(total, maximum) if all_resolved else None,
    )


class ScoreAggregator:
    """
    Writes the score snapshot onto an attempt.

    Status transitions are decided by the caller from
    ``ScoreSnapshot.all_resolved``.
    """

    def __init__(self):
        self.logger = logger

    def recompute(self, attempt: QuizAttempt, save: bool = True) -> ScoreSnapshot:
        answers = QuizAnswer.objects.filter(attempt=attempt).select_related("question")
        snapshot = compute_snapshot(answers)

        attempt.total_points = snapshot.total_points
        attempt.max_points = snapshot.max_points
        attempt.score = snapshot.score
        if save:
            attempt.save(update_fields=["total_points", "max_points", "score"])

        self.logger.debug(
            "Recomputed attempt %s: %s/%s points, score=%s",
            attempt.pk, snapshot.total_points, snapshot.max_points, snapshot.score,
        )
        return snapshot
