from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

# Angepasste Importe
from .models import Quiz, Question, QuizAttempt, QuizAnswer, validate_question_definition
from .services import question_bank


# --- Teacher Serializers ---


class QuestionSerializer(serializers.ModelSerializer):
    """Full question definition including the correct answer (teachers only)."""

    class Meta:
        model = Question
        fields = [
            "id",
            "quiz",
            "type",
            "prompt",
            "options",
            "correct_answer",
            "points",
            "explanation",
            "order",
        ]
        read_only_fields = ["quiz"]
        extra_kwargs = {"order": {"required": False}}

    def validate(self, attrs):
        attrs = super().validate(attrs)
        instance = self.instance

        def current(name):
            if name in attrs:
                return attrs[name]
            return getattr(instance, name, None) if instance is not None else None

        try:
            validate_question_definition(
                current("type"), current("options"), current("correct_answer")
            )
            if instance is not None and "type" in attrs:
                instance.validate_type_change(attrs["type"])
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict)
        return attrs


class QuizSerializer(serializers.ModelSerializer):
    """
    Quiz with its questions and attempt statistics.

    Questions can be supplied inline when creating a quiz; afterwards they
    are managed through the question endpoints.
    """

    questions = QuestionSerializer(many=True, required=False)
    stats = serializers.SerializerMethodField()
    teacher_name = serializers.SerializerMethodField()

    class Meta:
        model = Quiz
        fields = [
            "id",
            "course",
            "teacher",
            "teacher_name",
            "title",
            "description",
            "time_limit",
            "max_attempts",
            "passing_score",
            "show_results",
            "shuffle_questions",
            "is_active",
            "is_published",
            "created_at",
            "updated_at",
            "questions",
            "stats",
        ]
        read_only_fields = ["course", "teacher", "created_at", "updated_at"]

    def get_stats(self, obj):
        return question_bank.quiz_stats(obj)

    def get_teacher_name(self, obj):
        if obj.teacher is None:
            return None
        return obj.teacher.get_full_name() or obj.teacher.username

    def create(self, validated_data):
        questions_data = validated_data.pop("questions", [])
        validated_data.setdefault(
            "max_attempts", getattr(settings, "QUIZ_DEFAULT_MAX_ATTEMPTS", 1)
        )
        quiz = Quiz.objects.create(**validated_data)
        for index, question_data in enumerate(questions_data):
            question_data.setdefault("order", index)
            Question.objects.create(quiz=quiz, **question_data)
        return quiz

    def update(self, instance, validated_data):
        validated_data.pop("questions", None)
        return super().update(instance, validated_data)


# --- Student Serializers ---


class AttemptSerializer(serializers.ModelSerializer):
    passed = serializers.BooleanField(read_only=True, allow_null=True)
    quiz_title = serializers.CharField(source="quiz.title", read_only=True)

    class Meta:
        model = QuizAttempt
        fields = [
            "id",
            "quiz",
            "quiz_title",
            "status",
            "started_at",
            "completed_at",
            "graded_at",
            "time_spent_sec",
            "score",
            "total_points",
            "max_points",
            "passed",
        ]
        read_only_fields = fields


class AnswerSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuizAnswer
        fields = [
            "id",
            "attempt",
            "question",
            "value",
            "is_correct",
            "points_earned",
            "answered_at",
            "updated_at",
        ]
        read_only_fields = fields


class ResultAnswerSerializer(AnswerSerializer):
    """
    Answer with its question.

    Correct answer and explanation are only included when the quiz reveals
    results (``context["show_results"]``).
    """

    question = serializers.SerializerMethodField()

    def get_question(self, obj):
        data = question_bank.public_view(obj.question)
        if self.context.get("show_results"):
            data["correct_answer"] = obj.question.correct_answer
            data["explanation"] = obj.question.explanation
        return data


class AttemptResultSerializer(AttemptSerializer):
    answers = serializers.SerializerMethodField()
    has_manual_grading = serializers.SerializerMethodField()

    class Meta(AttemptSerializer.Meta):
        fields = AttemptSerializer.Meta.fields + ["has_manual_grading", "answers"]
        read_only_fields = fields

    def get_has_manual_grading(self, obj):
        return any(not answer.is_resolved for answer in obj.answers.all())

    def get_answers(self, obj):
        context = {**self.context, "show_results": obj.quiz.show_results}
        answers = sorted(obj.answers.all(), key=lambda a: (a.question.order, a.question_id))
        return ResultAnswerSerializer(answers, many=True, context=context).data


class StudentQuizOverviewSerializer(serializers.Serializer):
    id = serializers.IntegerField(source="quiz.id")
    course = serializers.IntegerField(source="quiz.course_id")
    title = serializers.CharField(source="quiz.title")
    description = serializers.CharField(source="quiz.description")
    time_limit = serializers.IntegerField(source="quiz.time_limit", allow_null=True)
    max_attempts = serializers.IntegerField(source="quiz.max_attempts")
    passing_score = serializers.DecimalField(
        source="quiz.passing_score", max_digits=5, decimal_places=1, allow_null=True
    )
    question_count = serializers.IntegerField()
    best_attempt = AttemptSerializer(allow_null=True)
    last_attempt = AttemptSerializer(allow_null=True)
    attempts_used = serializers.IntegerField()
    can_retake = serializers.BooleanField()
    has_in_progress = serializers.BooleanField()
    passed = serializers.BooleanField(allow_null=True)


class SubmitAnswerSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    answer = serializers.JSONField()


# --- Grading Serializers ---


class GradeAnswerSerializer(serializers.Serializer):
    points_earned = serializers.DecimalField(max_digits=7, decimal_places=2)
    is_correct = serializers.BooleanField()


class TeacherAnswerSerializer(AnswerSerializer):
    question = QuestionSerializer(read_only=True)


class TeacherSubmissionSerializer(AttemptSerializer):
    student = serializers.SerializerMethodField()
    answers = TeacherAnswerSerializer(many=True, read_only=True)

    class Meta(AttemptSerializer.Meta):
        fields = AttemptSerializer.Meta.fields + ["student", "answers"]
        read_only_fields = fields

    def get_student(self, obj):
        return {
            "id": obj.student_id,
            "username": obj.student.username,
            "name": obj.student.get_full_name(),
            "email": obj.student.email,
        }
