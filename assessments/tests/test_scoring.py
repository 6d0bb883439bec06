"""
Tests für die Punkteberechnung und den Abschluss von Versuchen.
"""

from decimal import Decimal

from django.test import SimpleTestCase

from assessments.notifications.models import Notification
from assessments.quizzes.models import QuizAttempt
from assessments.quizzes.services import AnswerRecorder, AttemptTracker, round_score

from .helpers import QuizEngineTestCase


class RoundScoreTests(SimpleTestCase):
    def test_rounds_half_up_to_one_decimal(self):
        self.assertEqual(round_score(Decimal("2"), Decimal("3")), Decimal("66.7"))
        self.assertEqual(round_score(Decimal("1"), Decimal("3")), Decimal("33.3"))
        self.assertEqual(round_score(Decimal("1"), Decimal("8")), Decimal("12.5"))
        self.assertEqual(round_score(Decimal("1"), Decimal("16")), Decimal("6.3"))

    def test_nothing_achievable_scores_zero(self):
        self.assertEqual(round_score(Decimal("0"), Decimal("0")), Decimal("0.0"))


class CompleteAttemptTests(QuizEngineTestCase):
    def setUp(self):
        self.tracker = AttemptTracker()
        self.recorder = AnswerRecorder(self.tracker)

    def answer(self, attempt, question, value):
        return self.recorder.submit(self.student, attempt.pk, question.pk, value)

    def test_auto_graded_attempt_is_graded_immediately(self):
        quiz = self.make_quiz(passing_score=Decimal("60"))
        questions = [self.add_question(quiz) for _ in range(3)]
        attempt = self.tracker.start(self.student, quiz.pk).attempt
        self.answer(attempt, questions[0], "a")
        self.answer(attempt, questions[1], "a")
        self.answer(attempt, questions[2], "b")

        result = self.tracker.complete(self.student, attempt.pk)

        attempt.refresh_from_db()
        self.assertEqual(attempt.status, QuizAttempt.Status.GRADED)
        self.assertEqual(attempt.score, Decimal("66.7"))
        self.assertEqual(attempt.total_points, Decimal("2"))
        self.assertEqual(attempt.max_points, Decimal("3"))
        self.assertIsNotNone(attempt.graded_at)
        self.assertIsNotNone(attempt.time_spent_sec)
        self.assertFalse(result.has_manual_grading)
        self.assertTrue(result.passed)

        notification = Notification.objects.get(recipient=self.student)
        self.assertEqual(notification.kind, Notification.Kind.QUIZ_GRADED)

    def test_unanswered_questions_do_not_count(self):
        quiz = self.make_quiz()
        answered = self.add_question(quiz, points=2)
        self.add_question(quiz, points=5)
        attempt = self.tracker.start(self.student, quiz.pk).attempt
        self.answer(attempt, answered, "a")

        self.tracker.complete(self.student, attempt.pk)

        attempt.refresh_from_db()
        self.assertEqual(attempt.max_points, Decimal("2"))
        self.assertEqual(attempt.score, Decimal("100.0"))

    def test_completing_without_answers_scores_zero(self):
        quiz = self.make_quiz()
        self.add_question(quiz)
        attempt = self.tracker.start(self.student, quiz.pk).attempt

        self.tracker.complete(self.student, attempt.pk)

        attempt.refresh_from_db()
        self.assertEqual(attempt.status, QuizAttempt.Status.GRADED)
        self.assertEqual(attempt.score, Decimal("0.0"))

    def test_open_answer_defers_score(self):
        quiz = self.make_quiz()
        choice = self.add_question(quiz, points=2)
        open_text = self.add_question(quiz, type="open-text", points=3)
        attempt = self.tracker.start(self.student, quiz.pk).attempt
        self.answer(attempt, choice, "a")
        self.answer(attempt, open_text, "Erklärung")

        result = self.tracker.complete(self.student, attempt.pk)

        attempt.refresh_from_db()
        self.assertEqual(attempt.status, QuizAttempt.Status.COMPLETED)
        self.assertIsNone(attempt.score)
        self.assertEqual(attempt.total_points, Decimal("2"))
        self.assertEqual(attempt.max_points, Decimal("5"))
        self.assertIsNone(attempt.graded_at)
        self.assertTrue(result.has_manual_grading)
        self.assertIsNone(result.passed)

        self.assertFalse(Notification.objects.filter(recipient=self.student).exists())
        notification = Notification.objects.get(recipient=self.teacher)
        self.assertEqual(notification.kind, Notification.Kind.QUIZ_NEEDS_GRADING)

    def test_notification_sink_is_configurable(self):
        quiz = self.make_quiz()
        self.add_question(quiz)
        attempt = self.tracker.start(self.student, quiz.pk).attempt

        with self.settings(QUIZ_NOTIFICATION_SINK="assessments.tests.test_scoring.collect"):
            self.tracker.complete(self.student, attempt.pk)

        self.assertEqual([e.kind for e in COLLECTED], ["quiz-graded"])
        self.assertFalse(Notification.objects.exists())
        COLLECTED.clear()


COLLECTED = []


def collect(event):
    COLLECTED.append(event)
