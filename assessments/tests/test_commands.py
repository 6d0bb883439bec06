from io import StringIO

from django.core.management import call_command

from assessments.quizzes.models import QuizAttempt

from .helpers import QuizEngineTestCase


class CloseExpiredAttemptsCommandTests(QuizEngineTestCase):
    def setUp(self):
        self.timed_quiz = self.make_quiz(title="Mit Zeitlimit", time_limit=5)
        self.untimed_quiz = self.make_quiz(title="Ohne Zeitlimit")

        self.expired = QuizAttempt.objects.create(quiz=self.timed_quiz, student=self.student)
        self.backdate(self.expired, 6)
        self.running = QuizAttempt.objects.create(quiz=self.timed_quiz, student=self.outsider)
        self.untimed = QuizAttempt.objects.create(quiz=self.untimed_quiz, student=self.student)
        self.backdate(self.untimed, 600)

    def test_closes_only_expired_attempts(self):
        out = StringIO()
        call_command("close_expired_attempts", stdout=out)

        self.expired.refresh_from_db()
        self.running.refresh_from_db()
        self.untimed.refresh_from_db()
        self.assertEqual(self.expired.status, QuizAttempt.Status.TIMED_OUT)
        self.assertIsNotNone(self.expired.completed_at)
        self.assertEqual(self.running.status, QuizAttempt.Status.IN_PROGRESS)
        self.assertEqual(self.untimed.status, QuizAttempt.Status.IN_PROGRESS)
        self.assertIn("1 Versuche", out.getvalue())

    def test_dry_run_changes_nothing(self):
        out = StringIO()
        call_command("close_expired_attempts", "--dry-run", stdout=out)

        self.expired.refresh_from_db()
        self.assertEqual(self.expired.status, QuizAttempt.Status.IN_PROGRESS)
        self.assertIn("Trockenlauf", out.getvalue())

    def test_nothing_to_close(self):
        QuizAttempt.objects.filter(pk=self.expired.pk).delete()
        out = StringIO()
        call_command("close_expired_attempts", stdout=out)
        self.assertIn("Keine abgelaufenen Versuche", out.getvalue())
