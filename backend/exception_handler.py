"""
REST Framework Exception Handler

Renders quiz engine errors as JSON responses with their status code and
error code. Everything else is left to DRF's default handler.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Optional

from rest_framework.response import Response
from rest_framework.views import exception_handler

from assessments.quizzes.exceptions import QuizEngineError

logger = logging.getLogger(__name__)


def api_exception_handler(exc: Exception, context: dict) -> Optional[Response]:
    if isinstance(exc, QuizEngineError):
        view = context.get("view")
        logger.warning(
            "%s rejected in %s: %s",
            exc.error_code,
            view.__class__.__name__ if view is not None else "unknown view",
            exc.message,
        )
        return Response(exc.to_dict(), status=exc.status_code)

    response: Any = exception_handler(exc, context)
    return response
