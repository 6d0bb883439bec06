"""
Assessments URL Configuration

URL routing for the quiz engine. Mounted by the project under
``/api/assessments/``.

URL Structure:
- /quizzes/my/...: Student quiz overview, attempts and results
- /quizzes/<quiz_id>/start/: Start or resume an attempt
- /quizzes/attempts/...: Answer submission, completion, manual grading
- /quizzes/courses/<course_id>/, /quizzes/<quiz_id>/manage/,
  /quizzes/questions/...: Teacher quiz and question management

Author: DSP Development Team
Version: 1.0.0
"""

from typing import List
from django.urls import path, include, URLPattern

from .quizzes import views as quiz_views

app_name = "assessments"

# --- Student URL Patterns ---

student_urlpatterns: List[URLPattern] = [
    path("my/", quiz_views.MyQuizzesView.as_view(), name="my-quizzes"),
    path("my/courses/<int:course_id>/", quiz_views.MyQuizzesView.as_view(), name="my-course-quizzes"),
    path("attempts/", quiz_views.MyAttemptsView.as_view(), name="my-attempts"),
    path("<int:quiz_id>/start/", quiz_views.StartQuizView.as_view(), name="start-quiz"),
    path("attempts/<int:attempt_id>/answer/", quiz_views.SubmitAnswerView.as_view(), name="submit-answer"),
    path("attempts/<int:attempt_id>/complete/", quiz_views.CompleteAttemptView.as_view(), name="complete-attempt"),
    path("attempts/<int:attempt_id>/results/", quiz_views.AttemptResultsView.as_view(), name="attempt-results"),
]

# --- Teacher URL Patterns ---

teacher_urlpatterns: List[URLPattern] = [
    path("courses/<int:course_id>/", quiz_views.CourseQuizListCreateView.as_view(), name="course-quizzes"),
    path("<int:quiz_id>/manage/", quiz_views.QuizManageView.as_view(), name="quiz-manage"),
    path("<int:quiz_id>/questions/", quiz_views.QuestionCreateView.as_view(), name="question-create"),
    path("questions/<int:question_id>/", quiz_views.QuestionUpdateView.as_view(), name="question-update"),
    path("submissions/", quiz_views.TeacherSubmissionsListView.as_view(), name="teacher-submissions"),
    path(
        "attempts/<int:attempt_id>/answers/<int:answer_id>/grade/",
        quiz_views.GradeAnswerView.as_view(),
        name="grade-answer",
    ),
]

urlpatterns: List[URLPattern] = [
    path("quizzes/", include((student_urlpatterns + teacher_urlpatterns, "quizzes"))),
]
