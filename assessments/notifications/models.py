"""
Notification Models

Stored notifications shown in the student and teacher notification bell.
Delivery (email, push) is handled by an external system; this table is the
default target of the quiz engine's notification sink.

Author: DSP Development Team
Version: 1.0.0
"""

from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _


class Notification(models.Model):
    """
    A single notification addressed to one user.

    Attributes:
        recipient: User receiving the notification
        kind: Event type that produced the notification
        subject: Short title
        message: Human-readable text
        link: Frontend route the notification points to
        is_read: Whether the recipient has opened it
    """

    class Kind(models.TextChoices):
        QUIZ_GRADED = "quiz-graded", _("Quiz graded")
        QUIZ_PUBLISHED = "quiz-published", _("Quiz published")
        QUIZ_NEEDS_GRADING = "quiz-needs-grading", _("Quiz needs grading")

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name=_("Recipient"),
    )

    kind = models.CharField(
        max_length=30,
        choices=Kind.choices,
        verbose_name=_("Kind"),
    )

    subject = models.CharField(max_length=255, verbose_name=_("Subject"))

    message = models.TextField(blank=True, verbose_name=_("Message"))

    link = models.CharField(max_length=500, blank=True, verbose_name=_("Link"))

    is_read = models.BooleanField(default=False, verbose_name=_("Read"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Notification")
        verbose_name_plural = _("Notifications")
        ordering = ["-created_at"]
        db_table = "assessments_notification"
        indexes = [
            models.Index(fields=["recipient", "is_read"]),
        ]

    def __str__(self) -> str:
        return f"{self.kind} for {self.recipient.username}: {self.subject}"
