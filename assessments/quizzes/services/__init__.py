"""
Quiz Engine Services

Dieses Paket enthält die Geschäftslogik der Quiz-Engine.

Services:
- question_bank: Fragenzugriff und Darstellung für Schüler
- AttemptTracker: Start, Abschluss und Zeitlimit von Versuchen
- AnswerRecorder: Antworterfassung mit automatischer Bewertung
- ScoreAggregator: Punkteberechnung eines Versuchs
- ManualGradingService: Manuelle Bewertung offener Fragen

Author: DSP Development Team
Version: 1.0.0
"""

from . import question_bank
from .score_aggregator import ScoreAggregator, ScoreSnapshot, round_score
from .attempt_tracker import AttemptTracker, StartResult, CompletionResult, StudentQuizOverview
from .answer_recorder import AnswerRecorder
from .manual_grading import ManualGradingService, GradingOutcome

__all__ = [
    "question_bank",
    "ScoreAggregator",
    "ScoreSnapshot",
    "round_score",
    "AttemptTracker",
    "StartResult",
    "CompletionResult",
    "StudentQuizOverview",
    "AnswerRecorder",
    "ManualGradingService",
    "GradingOutcome",
]
