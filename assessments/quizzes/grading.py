"""
Auto-Grader

Pure grading rules for quiz answers. Nothing in this module touches the
database: it receives a question definition and a normalized answer value and
returns correctness and awarded points.

Rules:
- single-choice, true-false, multi-select: the submitted option set must equal
  the correct option set exactly (order-independent, no partial credit)
- open-text, code: never resolved automatically

Author: DSP Development Team
Version: 1.0.0
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, Optional, Union

SINGLE_CHOICE = "single-choice"
MULTI_SELECT = "multi-select"
TRUE_FALSE = "true-false"
OPEN_TEXT = "open-text"
CODE = "code"

CHOICE_TYPES = frozenset({SINGLE_CHOICE, MULTI_SELECT, TRUE_FALSE})
MANUAL_TYPES = frozenset({OPEN_TEXT, CODE})
SINGLE_ANSWER_TYPES = frozenset({SINGLE_CHOICE, TRUE_FALSE})


def as_option_id(value: Any) -> str:
    """Option identifiers are compared as strings; booleans map to ``"true"``/``"false"``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def as_option_ids(values: Iterable[Any]) -> FrozenSet[str]:
    return frozenset(as_option_id(v) for v in values if v is not None)


@dataclass(frozen=True)
class OptionSet:
    """Answer value for choice questions: the set of selected option ids."""

    kind: ClassVar[str] = "options"
    options: FrozenSet[str]

    def to_json(self) -> Dict[str, Any]:
        return {"kind": self.kind, "options": sorted(self.options)}


@dataclass(frozen=True)
class FreeText:
    """Answer value for open-text and code questions."""

    kind: ClassVar[str] = "text"
    text: str

    def to_json(self) -> Dict[str, Any]:
        return {"kind": self.kind, "text": self.text}


AnswerValue = Union[OptionSet, FreeText]


def normalize_answer(question_type: str, raw: Any) -> AnswerValue:
    """
    Normalize a submitted answer for ``question_type``.

    A scalar is wrapped into a singleton; choice questions get an
    ``OptionSet``, open-text and code questions a ``FreeText``.
    """
    if isinstance(raw, (list, tuple, set, frozenset)):
        items = list(raw)
    else:
        items = [raw]

    if question_type in CHOICE_TYPES:
        return OptionSet(as_option_ids(items))
    return FreeText("\n".join(str(item) for item in items if item is not None))


@dataclass(frozen=True)
class GradeResult:
    """Outcome of auto-grading; ``None`` fields mean manual grading is pending."""

    is_correct: Optional[bool]
    points_earned: Optional[Decimal]


UNGRADED = GradeResult(is_correct=None, points_earned=None)


def auto_grade(question, value: AnswerValue) -> GradeResult:
    """
    Grade ``value`` against ``question``.

    Args:
        question: Object exposing ``type``, ``points`` and ``correct_option_ids``
        value: Normalized answer value

    Returns:
        GradeResult with full points or zero, or ``UNGRADED`` for manual types
    """
    if question.type in MANUAL_TYPES:
        return UNGRADED

    if question.type not in CHOICE_TYPES:
        raise ValueError(f"Unsupported question type: {question.type!r}")

    points = Decimal(question.points)
    if not isinstance(value, OptionSet):
        return GradeResult(is_correct=False, points_earned=Decimal("0"))

    is_correct = value.options == question.correct_option_ids
    return GradeResult(
        is_correct=is_correct,
        points_earned=points if is_correct else Decimal("0"),
    )
