"""
Gemeinsame Testdaten für die Quiz-Engine Tests.

Author: DSP Development Team
Version: 1.0.0
"""

from datetime import timedelta

from django.contrib.auth.models import User
from django.test import TestCase
from django.utils import timezone

from assessments.courses.models import Course, CourseEnrollment
from assessments.quizzes.models import Question, Quiz, QuizAttempt

ABC_OPTIONS = [
    {"id": "a", "text": "Antwort A"},
    {"id": "b", "text": "Antwort B"},
    {"id": "c", "text": "Antwort C"},
]

TRUE_FALSE_OPTIONS = [
    {"id": "true", "text": "Wahr"},
    {"id": "false", "text": "Falsch"},
]


class QuizEngineTestCase(TestCase):
    """
    Base class with one course, one teacher and one actively enrolled student.

    Quizzes and questions are created per test through ``make_quiz`` and
    ``add_question``.
    """

    @classmethod
    def setUpTestData(cls):
        cls.teacher = User.objects.create_user(
            username="lehrer", password="Musterpassword", first_name="Lena", last_name="Lehrer"
        )
        cls.other_teacher = User.objects.create_user(username="fremd", password="Musterpassword")
        cls.student = User.objects.create_user(username="max", password="Musterpassword")
        cls.outsider = User.objects.create_user(username="gast", password="Musterpassword")
        cls.admin = User.objects.create_user(username="admin", password="Musterpassword", is_staff=True)

        cls.course = Course.objects.create(title="Python Grundlagen")
        cls.course.teachers.add(cls.teacher)
        CourseEnrollment.objects.create(student=cls.student, course=cls.course)

    def make_quiz(self, **kwargs) -> Quiz:
        defaults = {
            "course": self.course,
            "teacher": self.teacher,
            "title": "Quiz 1",
            "is_published": True,
            "max_attempts": 1,
        }
        defaults.update(kwargs)
        return Quiz.objects.create(**defaults)

    def add_question(self, quiz: Quiz, type="single-choice", points=1, **kwargs) -> Question:
        defaults = {"prompt": f"Frage {quiz.questions.count() + 1}", "order": quiz.questions.count()}
        if type in ("single-choice", "multi-select"):
            defaults.update(options=ABC_OPTIONS, correct_answer=["a"])
        elif type == "true-false":
            defaults.update(options=TRUE_FALSE_OPTIONS, correct_answer=["true"])
        defaults.update(kwargs)
        return Question.objects.create(quiz=quiz, type=type, points=points, **defaults)

    def backdate(self, attempt: QuizAttempt, minutes: int) -> None:
        QuizAttempt.objects.filter(pk=attempt.pk).update(
            started_at=timezone.now() - timedelta(minutes=minutes)
        )
        attempt.refresh_from_db()
