"""
Quiz Engine Exceptions

This module provides the error taxonomy of the quiz engine. Every service
operation reports failures by raising one of these exceptions; the REST
layer turns them into JSON responses through the project's exception
handler (``backend.exception_handler``).

Hierarchy:
- QuizEngineError
  - NotFound
  - Forbidden
  - InvalidState
  - TimeExceeded
  - AttemptLimitExceeded
  - EmptyQuiz
  - OutOfRange

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Optional, Dict, Any


class QuizEngineError(Exception):
    """
    Base exception class for all quiz engine errors.

    Attributes:
        message (str): Human-readable error message
        status_code (int): HTTP status code used by the REST layer
        error_code (str): Stable machine-readable error identifier
        details (Dict[str, Any]): Additional context for the client

    Example:
        >>> try:
        ...     tracker.start(student, quiz_id)
        ... except QuizEngineError as e:
        ...     logger.warning(f"Start rejected: {e.error_code}")
    """

    default_message = "Quiz engine error"
    default_status_code = 400
    default_error_code = "QuizEngineError"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.status_code = status_code or self.default_status_code
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation used as the response body
        """
        return {
            "success": False,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class NotFound(QuizEngineError):
    """Missing quiz, question, attempt or answer, or mismatched foreign keys."""

    default_message = "Resource not found"
    default_status_code = 404
    default_error_code = "NotFound"


class Forbidden(QuizEngineError):
    """Student not enrolled, or instructor acting on another instructor's quiz."""

    default_message = "You are not allowed to perform this action"
    default_status_code = 403
    default_error_code = "Forbidden"


class InvalidState(QuizEngineError):
    """Action attempted against an attempt that is not in the required state."""

    default_message = "Attempt is not in a valid state for this action"
    default_status_code = 409
    default_error_code = "InvalidState"

    def __init__(self, message: Optional[str] = None, current_status: Optional[str] = None) -> None:
        details = {"status": current_status} if current_status else {}
        super().__init__(message=message, details=details)


class TimeExceeded(QuizEngineError):
    """
    Time limit crossed.

    Raised after the attempt has already been closed as timed out, so the
    stored state is consistent even though the request itself fails.
    """

    default_message = "Time limit exceeded"
    default_status_code = 409
    default_error_code = "TimeExceeded"

    def __init__(self, message: Optional[str] = None, time_limit: Optional[int] = None) -> None:
        details = {"time_limit": time_limit} if time_limit is not None else {}
        super().__init__(message=message, details=details)


class AttemptLimitExceeded(QuizEngineError):
    default_message = "Maximum number of attempts reached"
    default_status_code = 409
    default_error_code = "AttemptLimitExceeded"

    def __init__(self, max_attempts: int) -> None:
        super().__init__(
            message=f"Maximum attempts ({max_attempts}) reached",
            details={"max_attempts": max_attempts},
        )


class EmptyQuiz(QuizEngineError):
    default_message = "Quiz has no questions"
    default_status_code = 400
    default_error_code = "EmptyQuiz"


class OutOfRange(QuizEngineError):
    """Manual grade points outside ``[0, question.points]``."""

    default_message = "Points are out of range"
    default_status_code = 400
    default_error_code = "OutOfRange"

    def __init__(self, points, max_points) -> None:
        super().__init__(
            message=f"Points must be between 0 and {max_points}",
            details={"points_earned": str(points), "max_points": str(max_points)},
        )
