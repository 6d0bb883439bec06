from rest_framework import generics, permissions, status
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView
from rest_framework.response import Response

# Angepasste Importe
from ..services import AnswerRecorder, AttemptTracker
from ..serializers import (
    AnswerSerializer,
    AttemptResultSerializer,
    AttemptSerializer,
    StudentQuizOverviewSerializer,
    SubmitAnswerSerializer,
)


class MyQuizzesView(APIView):
    """Published quizzes of the student's courses with attempt history."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, course_id=None):
        overviews = AttemptTracker().my_quizzes(request.user, course_id=course_id)
        return Response(StudentQuizOverviewSerializer(overviews, many=True).data)


class MyAttemptsView(generics.ListAPIView):
    serializer_class = AttemptSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        quiz_id = self.request.query_params.get("quiz_id")
        if quiz_id is not None and not quiz_id.isdigit():
            raise ValidationError({"quiz_id": "Must be an integer."})
        return AttemptTracker().my_attempts(self.request.user, quiz_id=quiz_id)


class StartQuizView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, quiz_id):
        result = AttemptTracker().start(request.user, quiz_id)
        return Response(
            {
                "attempt": AttemptSerializer(result.attempt).data,
                "questions": result.questions,
                "time_limit": result.time_limit,
                "resumed": not result.created,
            },
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )


class SubmitAnswerView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, attempt_id):
        serializer = SubmitAnswerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        answer = AnswerRecorder().submit(
            request.user,
            attempt_id,
            serializer.validated_data["question_id"],
            serializer.validated_data["answer"],
        )
        return Response(AnswerSerializer(answer).data, status=status.HTTP_200_OK)


class CompleteAttemptView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, attempt_id):
        result = AttemptTracker().complete(request.user, attempt_id)
        attempt = result.attempt

        data = {
            "attempt": AttemptSerializer(attempt).data,
            "score": attempt.score,
            "total_points": attempt.total_points,
            "max_points": attempt.max_points,
            "time_spent_sec": attempt.time_spent_sec,
            "has_manual_grading": result.has_manual_grading,
            "passed": result.passed,
        }
        if attempt.quiz.show_results:
            data["answers"] = AttemptResultSerializer(attempt).data["answers"]
        return Response(data, status=status.HTTP_200_OK)


class AttemptResultsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, attempt_id):
        attempt = AttemptTracker().results(request.user, attempt_id)
        return Response(AttemptResultSerializer(attempt).data)
