"""
Notification Sink

The quiz engine emits ``NotificationEvent`` objects; the configured sink
(``settings.QUIZ_NOTIFICATION_SINK``, dotted path to a callable taking one
event) delivers them. The default sink stores a ``Notification`` row.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from django.conf import settings
from django.utils.module_loading import import_string

from .models import Notification

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_SINK = "assessments.notifications.services.store_notification"

QUIZ_GRADED = Notification.Kind.QUIZ_GRADED.value
QUIZ_PUBLISHED = Notification.Kind.QUIZ_PUBLISHED.value
QUIZ_NEEDS_GRADING = Notification.Kind.QUIZ_NEEDS_GRADING.value


@dataclass(frozen=True)
class NotificationEvent:
    """Boundary payload handed to the delivery system."""
    recipient_id: int
    kind: str
    subject: str
    message: str = ""
    link: str = ""


def store_notification(event: NotificationEvent) -> None:
    Notification.objects.create(
        recipient_id=event.recipient_id,
        kind=event.kind,
        subject=event.subject,
        message=event.message,
        link=event.link,
    )


def get_notification_sink() -> Callable[[NotificationEvent], None]:
    path = getattr(settings, "QUIZ_NOTIFICATION_SINK", DEFAULT_NOTIFICATION_SINK)
    return import_string(path)


def emit(event: NotificationEvent) -> None:
    """Hand one event to the configured sink."""
    get_notification_sink()(event)
    logger.info(
        "Notification %s sent to user %s: %s", event.kind, event.recipient_id, event.subject
    )


def emit_many(events: Iterable[NotificationEvent]) -> int:
    sink = get_notification_sink()
    count = 0
    for event in events:
        sink(event)
        count += 1
    if count:
        logger.info("%s notifications sent", count)
    return count
