"""Practice question types and the payload-to-question boundary.

Generated payloads are duck-typed JSON. ``parse_question`` turns one payload
into exactly one of two frozen variants, keyed by the ``type`` tag. Fields are
coerced leniently: a missing explanation or answer index is kept as ``None``
and resolved to a fallback at read time, so a partially malformed set stays
usable. Only items that cannot be classified at all are quarantined.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from .core.text import fold_text

__all__ = [
    "Difficulty",
    "QuestionType",
    "ObjectiveQuestion",
    "DiscursiveQuestion",
    "Question",
    "NO_COMMENTARY",
    "parse_difficulty",
    "parse_question",
]

NO_COMMENTARY = "Sem comentário disponível."


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def label(self) -> str:
        return _DIFFICULTY_LABELS[self]


_DIFFICULTY_LABELS = {
    Difficulty.EASY: "Fácil",
    Difficulty.MEDIUM: "Médio",
    Difficulty.HARD: "Difícil",
}

_DIFFICULTY_ALIASES = {
    "easy": Difficulty.EASY,
    "facil": Difficulty.EASY,
    "medium": Difficulty.MEDIUM,
    "medio": Difficulty.MEDIUM,
    "hard": Difficulty.HARD,
    "dificil": Difficulty.HARD,
}


class QuestionType(str, Enum):
    OBJECTIVE = "objective"
    DISCURSIVE = "discursive"


@dataclass(frozen=True)
class ObjectiveQuestion:
    """Multiple-choice item with a single correct option index."""

    id: str
    topic: str
    difficulty: Difficulty
    text: str
    options: tuple[str, ...] = ()
    correct_answer_index: int | None = None
    explanation: str | None = None

    @property
    def type(self) -> QuestionType:
        return QuestionType.OBJECTIVE

    @property
    def resolved_answer_index(self) -> int:
        """Answer index used for grading; an absent index counts as 0."""
        if self.correct_answer_index is None:
            return 0
        return self.correct_answer_index

    @property
    def correct_option_text(self) -> str | None:
        index = self.resolved_answer_index
        if 0 <= index < len(self.options):
            return self.options[index]
        return None

    @property
    def feedback(self) -> str:
        return self.explanation or NO_COMMENTARY


@dataclass(frozen=True)
class DiscursiveQuestion:
    """Free-response item graded against a reference answer."""

    id: str
    topic: str
    difficulty: Difficulty
    text: str
    reference_answer: str | None = None
    explanation: str | None = None

    @property
    def type(self) -> QuestionType:
        return QuestionType.DISCURSIVE

    @property
    def feedback(self) -> str:
        return self.reference_answer or self.explanation or NO_COMMENTARY


Question = Union[ObjectiveQuestion, DiscursiveQuestion]


def parse_difficulty(raw: Any) -> Difficulty:
    if isinstance(raw, Difficulty):
        return raw
    key = fold_text(str(raw or ""))
    return _DIFFICULTY_ALIASES.get(key, Difficulty.MEDIUM)


def parse_question(
    payload: Any,
    *,
    question_id: str,
    fallback_topic: str = "",
) -> Question | None:
    """Build a question from a generated payload, or ``None`` to quarantine.

    ``question_id`` always replaces whatever id the payload carried.
    """

    if not isinstance(payload, Mapping):
        return None
    qtype = _classify(payload)
    if qtype is None:
        return None

    topic = _optional_text(payload.get("topic")) or fallback_topic
    difficulty = parse_difficulty(payload.get("difficulty"))
    text = _optional_text(payload.get("text")) or ""
    explanation = _optional_text(payload.get("explanation"))

    if qtype is QuestionType.OBJECTIVE:
        return ObjectiveQuestion(
            id=question_id,
            topic=topic,
            difficulty=difficulty,
            text=text,
            options=_coerce_options(payload.get("options")),
            correct_answer_index=_coerce_index(
                payload.get("correctAnswerIndex")
            ),
            explanation=explanation,
        )
    return DiscursiveQuestion(
        id=question_id,
        topic=topic,
        difficulty=difficulty,
        text=text,
        reference_answer=_optional_text(payload.get("referenceAnswer")),
        explanation=explanation,
    )


def _classify(payload: Mapping[str, Any]) -> QuestionType | None:
    raw = payload.get("type")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if payload.get("options") is not None:
            return QuestionType.OBJECTIVE
        return QuestionType.DISCURSIVE
    try:
        return QuestionType(str(raw).strip().lower())
    except ValueError:
        return None


def _coerce_options(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(str(item) for item in raw if item is not None)


def _coerce_index(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    return None


def _optional_text(raw: Any) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None

