"""
Close Expired Attempts Management Command

Dieses Management Command schließt offene Quiz-Versuche, deren Zeitlimit
abgelaufen ist. Im normalen Betrieb werden abgelaufene Versuche erst beim
nächsten Zugriff geschlossen; das Command räumt Versuche auf, die nie wieder
angefasst werden (z.B. für Statistiken und die Lehreransicht).

Features:
- Setzt abgelaufene Versuche auf ``timed_out``
- Optionaler Trockenlauf mit ``--dry-run``
- Detaillierte Ausgabe für Monitoring

Author: DSP Development Team
Version: 1.0.0
"""

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
import logging

from assessments.quizzes.models import QuizAttempt
from assessments.quizzes.services import AttemptTracker

# Logger einrichten
logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Schließt offene Quiz-Versuche, deren Zeitlimit abgelaufen ist, mit dem Status 'timed_out'."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Nur anzeigen, welche Versuche geschlossen würden.",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        now = timezone.now()
        tracker = AttemptTracker(clock=lambda: now)

        self.stdout.write(
            f"Suche nach offenen Versuchen mit abgelaufenem Zeitlimit (Stand {now.strftime('%Y-%m-%d %H:%M:%S')})..."
        )

        try:
            candidates = QuizAttempt.objects.filter(
                status=QuizAttempt.Status.IN_PROGRESS,
                quiz__time_limit__isnull=False,
            ).select_related("quiz", "student")

            expired = [attempt for attempt in candidates if attempt.is_time_exceeded(now)]

            if not expired:
                self.stdout.write(
                    self.style.SUCCESS("Keine abgelaufenen Versuche gefunden.")
                )
                return

            self.stdout.write(f"{len(expired)} abgelaufene Versuche gefunden:")
            for attempt in expired:
                self.stdout.write(
                    f"  - Versuch {attempt.pk}: {attempt.student.username} / {attempt.quiz.title}, gestartet am {attempt.started_at.strftime('%Y-%m-%d %H:%M:%S')}"
                )

            if dry_run:
                self.stdout.write(self.style.WARNING("Trockenlauf: keine Änderungen vorgenommen."))
                return

            closed = sum(1 for attempt in expired if tracker.expire_if_overdue(attempt))

            self.stdout.write(
                self.style.SUCCESS(f"{closed} Versuche als 'timed_out' geschlossen.")
            )

        except Exception as e:
            logger.error(
                f"Fehler beim Ausführen von close_expired_attempts: {e}", exc_info=True
            )
            raise CommandError(f"Ein Fehler ist aufgetreten: {e}")
