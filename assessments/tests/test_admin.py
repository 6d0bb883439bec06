"""
Tests für die Admin-Oberfläche der Quiz-Versuche.
"""

from decimal import Decimal

from django.contrib.auth.models import User
from django.test import override_settings

from assessments.quizzes.models import QuizAttempt
from assessments.quizzes.services import AnswerRecorder, AttemptTracker

from .helpers import QuizEngineTestCase

PLAIN_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


@override_settings(STORAGES=PLAIN_STORAGES)
class QuizAttemptAdminTests(QuizEngineTestCase):
    def setUp(self):
        self.superuser = User.objects.create_superuser(username="root", password="Musterpassword")
        self.client.force_login(self.superuser)

        tracker = AttemptTracker()
        self.quiz = self.make_quiz()
        self.question = self.add_question(self.quiz, points=2)
        self.attempt = tracker.start(self.student, self.quiz.pk).attempt
        self.answer = AnswerRecorder(tracker).submit(self.student, self.attempt.pk, self.question.pk, "a")
        tracker.complete(self.student, self.attempt.pk)
        self.attempt.refresh_from_db()

    def test_change_form_does_not_edit_status_or_points(self):
        response = self.client.post(
            f"/admin/assessments/quizattempt/{self.attempt.pk}/change/",
            {
                "status": "in_progress",
                "score": "0",
                "answers-TOTAL_FORMS": "1",
                "answers-INITIAL_FORMS": "1",
                "answers-MIN_NUM_FORMS": "0",
                "answers-MAX_NUM_FORMS": "1000",
                "answers-0-id": str(self.answer.pk),
                "answers-0-attempt": str(self.attempt.pk),
                "answers-0-is_correct": "false",
                "answers-0-points_earned": "99",
            },
        )
        self.assertIn(response.status_code, (200, 302))

        self.attempt.refresh_from_db()
        self.answer.refresh_from_db()
        self.assertEqual(self.attempt.status, QuizAttempt.Status.GRADED)
        self.assertEqual(self.attempt.score, Decimal("100.0"))
        self.assertEqual(self.attempt.total_points, Decimal("2"))
        self.assertTrue(self.answer.is_correct)
        self.assertEqual(self.answer.points_earned, Decimal("2"))

    def test_attempts_cannot_be_added(self):
        response = self.client.get("/admin/assessments/quizattempt/add/")
        self.assertEqual(response.status_code, 403)
