"""
Tests für die manuelle Bewertung von Freitext- und Code-Antworten.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError

from assessments.notifications.models import Notification
from assessments.quizzes.exceptions import Forbidden, InvalidState, NotFound, OutOfRange
from assessments.quizzes.models import QuizAnswer, QuizAttempt
from assessments.quizzes.services import AnswerRecorder, AttemptTracker, ManualGradingService

from .helpers import ABC_OPTIONS, QuizEngineTestCase


class ManualGradingTests(QuizEngineTestCase):
    def setUp(self):
        self.tracker = AttemptTracker()
        self.recorder = AnswerRecorder(self.tracker)
        self.service = ManualGradingService()

        self.quiz = self.make_quiz()
        self.choice = self.add_question(self.quiz, points=2)
        self.open_text = self.add_question(self.quiz, type="open-text", points=3)
        self.code = self.add_question(self.quiz, type="code", points=4)

        self.attempt = self.tracker.start(self.student, self.quiz.pk).attempt
        self.choice_answer = self.recorder.submit(self.student, self.attempt.pk, self.choice.pk, "a")
        self.text_answer = self.recorder.submit(self.student, self.attempt.pk, self.open_text.pk, "Text")
        self.code_answer = self.recorder.submit(self.student, self.attempt.pk, self.code.pk, "print(1)")
        self.tracker.complete(self.student, self.attempt.pk)

    def test_last_grade_finalizes_attempt(self):
        first = self.service.grade(self.teacher, self.attempt.pk, self.text_answer.pk, 3, True)
        self.assertFalse(first.finalized)
        self.assertEqual(first.attempt.status, QuizAttempt.Status.COMPLETED)
        self.assertIsNone(first.attempt.score)

        second = self.service.grade(self.teacher, self.attempt.pk, self.code_answer.pk, Decimal("1"), False)

        self.assertTrue(second.finalized)
        self.attempt.refresh_from_db()
        self.assertEqual(self.attempt.status, QuizAttempt.Status.GRADED)
        self.assertIsNotNone(self.attempt.graded_at)
        self.assertEqual(self.attempt.total_points, Decimal("6"))
        self.assertEqual(self.attempt.max_points, Decimal("9"))
        self.assertEqual(self.attempt.score, Decimal("66.7"))

        graded = Notification.objects.filter(recipient=self.student, kind=Notification.Kind.QUIZ_GRADED)
        self.assertEqual(graded.count(), 1)

    def test_grade_records_instructor(self):
        self.service.grade(self.teacher, self.attempt.pk, self.text_answer.pk, Decimal("1.5"), False)

        self.text_answer.refresh_from_db()
        self.assertFalse(self.text_answer.is_correct)
        self.assertEqual(self.text_answer.points_earned, Decimal("1.5"))
        self.assertEqual(self.text_answer.graded_by, self.teacher)

    def test_points_out_of_range_leave_answer_unchanged(self):
        for points in (4, -1, "abc"):
            with self.subTest(points=points):
                with self.assertRaises(OutOfRange):
                    self.service.grade(self.teacher, self.attempt.pk, self.text_answer.pk, points, True)

        self.text_answer.refresh_from_db()
        self.assertIsNone(self.text_answer.is_correct)
        self.assertIsNone(self.text_answer.points_earned)

    def test_other_teacher_is_forbidden(self):
        with self.assertRaises(Forbidden):
            self.service.grade(self.other_teacher, self.attempt.pk, self.text_answer.pk, 1, True)

    def test_staff_may_grade_any_quiz(self):
        outcome = self.service.grade(self.admin, self.attempt.pk, self.text_answer.pk, 1, True)
        self.assertEqual(outcome.answer.graded_by, self.admin)

    def test_course_teacher_grades_quiz_without_owner(self):
        self.quiz.teacher = None
        self.quiz.save()
        outcome = self.service.grade(self.teacher, self.attempt.pk, self.text_answer.pk, 1, True)
        self.assertTrue(outcome.answer.is_correct)

    def test_auto_graded_answer_cannot_be_graded(self):
        with self.assertRaises(NotFound):
            self.service.grade(self.teacher, self.attempt.pk, self.choice_answer.pk, 0, False)

    def test_answer_of_other_attempt_is_not_found(self):
        other_quiz = self.make_quiz(title="Anderes Quiz")
        question = self.add_question(other_quiz, type="open-text")
        other_attempt = self.tracker.start(self.student, other_quiz.pk).attempt
        other_answer = self.recorder.submit(self.student, other_attempt.pk, question.pk, "x")

        with self.assertRaises(NotFound):
            self.service.grade(self.teacher, self.attempt.pk, other_answer.pk, 1, True)

    def test_missing_attempt_is_not_found(self):
        with self.assertRaises(NotFound):
            self.service.grade(self.teacher, 999999, self.text_answer.pk, 1, True)

    def test_graded_attempt_cannot_be_regraded(self):
        self.service.grade(self.teacher, self.attempt.pk, self.text_answer.pk, 3, True)
        self.service.grade(self.teacher, self.attempt.pk, self.code_answer.pk, 4, True)

        with self.assertRaises(InvalidState):
            self.service.grade(self.teacher, self.attempt.pk, self.text_answer.pk, 0, False)
        self.assertEqual(QuizAnswer.objects.get(pk=self.text_answer.pk).points_earned, Decimal("3"))

    def test_in_progress_attempt_cannot_be_graded(self):
        other_quiz = self.make_quiz(title="Offen")
        question = self.add_question(other_quiz, type="open-text")
        attempt = self.tracker.start(self.student, other_quiz.pk).attempt
        answer = self.recorder.submit(self.student, attempt.pk, question.pk, "x")

        with self.assertRaises(InvalidState):
            self.service.grade(self.teacher, attempt.pk, answer.pk, 1, True)

    def test_pending_submissions_are_scoped_to_instructor(self):
        pending = self.service.pending_submissions(self.teacher)
        self.assertEqual([a.pk for a in pending], [self.attempt.pk])
        self.assertFalse(self.service.pending_submissions(self.other_teacher).exists())
        self.assertTrue(self.service.pending_submissions(self.admin).exists())


class QuestionTypeLockTests(QuizEngineTestCase):
    def setUp(self):
        tracker = AttemptTracker()
        self.quiz = self.make_quiz()
        self.open_text = self.add_question(self.quiz, type="open-text", points=3)
        attempt = tracker.start(self.student, self.quiz.pk).attempt
        AnswerRecorder(tracker).submit(self.student, attempt.pk, self.open_text.pk, "Text")
        tracker.complete(self.student, attempt.pk)

    def switch_to_single_choice(self, question):
        question.type = "single-choice"
        question.options = ABC_OPTIONS
        question.correct_answer = ["a"]

    def test_answered_question_cannot_change_type(self):
        self.switch_to_single_choice(self.open_text)
        with self.assertRaises(ValidationError) as ctx:
            self.open_text.clean()
        self.assertIn("type", ctx.exception.message_dict)

    def test_unanswered_question_can_change_type(self):
        fresh = self.add_question(self.quiz, type="open-text")
        self.switch_to_single_choice(fresh)
        fresh.clean()
