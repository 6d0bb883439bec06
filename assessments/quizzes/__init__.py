"""
Quizzes Package - Quiz Engine

Enthält Modelle, Services und Views für Quiz-Versuche und deren Bewertung.

Struktur:
- models.py: Quiz, Question, QuizAttempt, QuizAnswer
- grading.py: Automatische Bewertung (reine Funktionen)
- services/: Fragenbank, Versuchsverwaltung, Antworterfassung,
  Punkteberechnung und manuelle Bewertung
- serializers.py: API-Serialisierung
- views/: Schüler- und Lehrer-Views

Author: DSP Development Team
Version: 1.0.0
"""
