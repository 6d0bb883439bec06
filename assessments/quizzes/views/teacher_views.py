import logging

from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.views import APIView
from rest_framework.response import Response

# Angepasste Importe
from ...courses.models import Course
from ..exceptions import Forbidden
from ..models import Quiz, Question
from ..services import ManualGradingService, question_bank
from ..serializers import (
    AnswerSerializer,
    AttemptSerializer,
    GradeAnswerSerializer,
    QuestionSerializer,
    QuizSerializer,
    TeacherSubmissionSerializer,
)

logger = logging.getLogger(__name__)


def _ensure_course_access(user, course: Course) -> None:
    if not (user.is_staff or course.is_taught_by(user)):
        raise Forbidden("Not assigned to this course")


def _ensure_quiz_access(user, quiz: Quiz) -> None:
    if not quiz.can_be_managed_by(user):
        raise Forbidden("You can only manage your own quizzes")


# --- Quiz Management ---


class CourseQuizListCreateView(generics.ListCreateAPIView):
    """List the quizzes of a course or create a new one."""

    serializer_class = QuizSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_course(self) -> Course:
        course = get_object_or_404(Course, pk=self.kwargs["course_id"])
        _ensure_course_access(self.request.user, course)
        return course

    def get_queryset(self):
        return (
            Quiz.objects.filter(course=self.get_course())
            .select_related("teacher")
            .prefetch_related("questions")
        )

    def perform_create(self, serializer):
        course = self.get_course()
        user = self.request.user
        quiz = serializer.save(course=course, teacher=None if user.is_staff else user)
        logger.info("Quiz %s created in course %s by user %s", quiz.pk, course.pk, user.pk)
        if quiz.is_published:
            question_bank.notify_quiz_published(quiz)


class QuizManageView(generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update or delete a quiz. Publishing notifies enrolled students."""

    serializer_class = QuizSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Quiz.objects.select_related("course", "teacher").prefetch_related("questions")
    lookup_url_kwarg = "quiz_id"

    def get_object(self):
        quiz = super().get_object()
        _ensure_quiz_access(self.request.user, quiz)
        return quiz

    def perform_update(self, serializer):
        was_published = serializer.instance.is_published
        quiz = serializer.save()
        if quiz.is_published and not was_published:
            question_bank.notify_quiz_published(quiz)

    def perform_destroy(self, instance):
        logger.info("Quiz %s deleted by user %s", instance.pk, self.request.user.pk)
        instance.delete()


class QuestionCreateView(generics.CreateAPIView):
    serializer_class = QuestionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def perform_create(self, serializer):
        quiz = get_object_or_404(Quiz.objects.select_related("course"), pk=self.kwargs["quiz_id"])
        _ensure_quiz_access(self.request.user, quiz)
        order = serializer.validated_data.get("order")
        if order is None:
            order = question_bank.next_question_order(quiz)
        serializer.save(quiz=quiz, order=order)


class QuestionUpdateView(generics.RetrieveUpdateDestroyAPIView):
    """Handle Question CRUD operations: GET (retrieve), PUT/PATCH (update), DELETE (destroy)."""

    serializer_class = QuestionSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Question.objects.select_related("quiz", "quiz__course")
    lookup_url_kwarg = "question_id"

    def get_object(self):
        question = super().get_object()
        _ensure_quiz_access(self.request.user, question.quiz)
        return question


# --- Manual Grading ---


class TeacherSubmissionsListView(generics.ListAPIView):
    """Completed attempts waiting for manual grading."""

    serializer_class = TeacherSubmissionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return ManualGradingService().pending_submissions(self.request.user)


class GradeAnswerView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request, attempt_id, answer_id):
        serializer = GradeAnswerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = ManualGradingService().grade(
            request.user,
            attempt_id,
            answer_id,
            serializer.validated_data["points_earned"],
            serializer.validated_data["is_correct"],
        )
        return Response(
            {
                "answer": AnswerSerializer(outcome.answer).data,
                "attempt": AttemptSerializer(outcome.attempt).data,
                "finalized": outcome.finalized,
            },
            status=status.HTTP_200_OK,
        )
