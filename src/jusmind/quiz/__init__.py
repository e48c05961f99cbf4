"""Practice quiz session and its terminal view."""

from .session import (
    AnswerOutcome,
    QuizPhase,
    QuizResult,
    QuizSession,
    QuizState,
)
from .view import parse_quiz_command, run_quiz

__all__ = [
    "AnswerOutcome",
    "QuizPhase",
    "QuizResult",
    "QuizSession",
    "QuizState",
    "parse_quiz_command",
    "run_quiz",
]
