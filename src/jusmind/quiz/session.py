"""Quiz session state machine.

A session walks one generated question set:

    NEW -> LOADING -> PRESENTING(i) -> ANSWERED(i) -> ... -> COMPLETED

Only ``load`` and ``deep_dive`` talk to the generation client; everything else
is local. The phase doubles as the re-entrancy guard, so a host driving the
session from callbacks cannot start a second load while one is running.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from ..generation.client import GenerationClient
from ..generation.profiler import PromptProfile, profile
from ..generation.prompts import build_deep_dive_prompt, build_quiz_brief
from ..questions import DiscursiveQuestion, ObjectiveQuestion, Question
from ..stats import StatsSink

__all__ = [
    "QuizPhase",
    "QuizState",
    "AnswerOutcome",
    "QuizResult",
    "QuizSession",
]


class QuizPhase(str, Enum):
    NEW = "new"
    LOADING = "loading"
    PRESENTING = "presenting"
    ANSWERED = "answered"
    COMPLETED = "completed"


@dataclass(frozen=True)
class QuizState:
    """Snapshot of the session for rendering and tests."""

    questions: Tuple[Question, ...]
    current_index: int
    score: int
    finished: bool


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of one accepted submission.

    ``correct`` is ``None`` for discursive items, which are self-assessed.
    """

    question_id: str
    answer: Any
    correct: Optional[bool]
    feedback: str


@dataclass(frozen=True)
class QuizResult:
    topic: str
    score: int
    total: int
    scored: bool

    @property
    def accuracy(self) -> float:
        if not self.total:
            return 0.0
        return self.score / self.total


class QuizSession:
    def __init__(
        self,
        topic: str,
        context_tag: str = "",
        *,
        client: GenerationClient,
        stats: StatsSink | None = None,
        initial_questions: Sequence[Question] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._topic = topic.strip()
        self._context_tag = (context_tag or "").strip()
        self._client = client
        self._stats = stats
        self._initial_questions = (
            tuple(initial_questions) if initial_questions else None
        )
        self._logger = logger or logging.getLogger(__name__)
        self._profile = profile(self._topic, self._context_tag)
        self._phase = QuizPhase.NEW
        self._reset_progress()

    def _reset_progress(self) -> None:
        self._questions: Tuple[Question, ...] = ()
        self._index = 0
        self._score = 0
        self._last_outcome: AnswerOutcome | None = None
        self._answers: Dict[str, Any] = {}
        self._deep_dives: Dict[str, str] = {}

    # -- read side -------------------------------------------------------

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def context_tag(self) -> str:
        return self._context_tag

    @property
    def profile(self) -> PromptProfile:
        return self._profile

    @property
    def phase(self) -> QuizPhase:
        return self._phase

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def score(self) -> int:
        return self._score

    @property
    def current(self) -> Question | None:
        if self._phase not in (QuizPhase.PRESENTING, QuizPhase.ANSWERED):
            return None
        return self._questions[self._index]

    @property
    def last_outcome(self) -> AnswerOutcome | None:
        if self._phase is not QuizPhase.ANSWERED:
            return None
        return self._last_outcome

    @property
    def feedback(self) -> str | None:
        """Stored explanation or rubric for the answered item."""
        question = self.current
        if question is None or self._phase is not QuizPhase.ANSWERED:
            return None
        return question.feedback

    @property
    def state(self) -> QuizState:
        return QuizState(
            questions=self._questions,
            current_index=self._index,
            score=self._score,
            finished=self._phase is QuizPhase.COMPLETED,
        )

    def result(self) -> QuizResult:
        scored = any(
            isinstance(question, ObjectiveQuestion)
            for question in self._questions
        )
        return QuizResult(
            topic=self._topic,
            score=self._score,
            total=len(self._questions),
            scored=scored,
        )

    # -- transitions -----------------------------------------------------

    def load(self) -> bool:
        """Fetch the question set. Returns ``False`` outside ``NEW``."""
        if self._phase is not QuizPhase.NEW:
            return False
        self._phase = QuizPhase.LOADING

        if self._initial_questions is not None:
            questions = self._initial_questions
            self._initial_questions = None
        else:
            brief = build_quiz_brief(self._topic, self._profile)
            questions = tuple(
                self._client.generate_structured(
                    brief,
                    self._profile.item_count,
                    modality=self._profile.modality,
                    topic=self._topic,
                )
            )

        self._questions = tuple(questions)
        self._index = 0
        if self._questions:
            self._phase = QuizPhase.PRESENTING
        else:
            self._phase = QuizPhase.COMPLETED
            self._logger.warning(
                "Quiz loaded without questions",
                extra={"topic": self._topic, "context_tag": self._context_tag},
            )
        self._logger.info(
            "Quiz loaded",
            extra={
                "topic": self._topic,
                "requested": self._profile.item_count,
                "received": len(self._questions),
                "modality": self._profile.modality.value,
            },
        )
        return True

    def submit(self, answer: Any) -> AnswerOutcome | None:
        """Evaluate ``answer`` for the current item.

        Objective items take an option index; discursive items take
        non-blank text. Anything else is rejected with ``None`` and leaves
        the session untouched.
        """
        question = self.current
        if question is None or self._phase is not QuizPhase.PRESENTING:
            return None

        if isinstance(question, ObjectiveQuestion):
            if not _is_option_index(answer, len(question.options)):
                return None
            correct: Optional[bool] = answer == question.resolved_answer_index
            if correct:
                self._score += 1
            recorded = bool(correct)
        else:
            if not isinstance(answer, str) or not answer.strip():
                return None
            answer = answer.strip()
            correct = None
            recorded = True

        if self._stats is not None:
            self._stats.record(self._topic, recorded)

        self._answers[question.id] = answer
        self._last_outcome = AnswerOutcome(
            question_id=question.id,
            answer=answer,
            correct=correct,
            feedback=question.feedback,
        )
        self._phase = QuizPhase.ANSWERED
        return self._last_outcome

    def deep_dive(self) -> str | None:
        """Ask for an in-depth analysis of the answered discursive item.

        The generator is called at most once per question; later calls return
        the cached text. Objective items and other phases return ``None``.
        """
        question = self.current
        if self._phase is not QuizPhase.ANSWERED or not isinstance(
            question, DiscursiveQuestion
        ):
            return None
        cached = self._deep_dives.get(question.id)
        if cached is not None:
            return cached
        prompt = build_deep_dive_prompt(
            question, self._answers.get(question.id)
        )
        analysis = self._client.generate_prose(prompt)
        self._deep_dives[question.id] = analysis
        return analysis

    def advance(self) -> bool:
        if self._phase is not QuizPhase.ANSWERED:
            return False
        self._move_next()
        return True

    def skip(self) -> bool:
        """Move past the presented item without answering it."""
        if self._phase is not QuizPhase.PRESENTING:
            return False
        self._move_next()
        return True

    def regenerate(self) -> bool:
        """Discard all progress and load a fresh set."""
        if self._phase is QuizPhase.LOADING:
            return False
        self._reset_progress()
        self._initial_questions = None
        self._phase = QuizPhase.NEW
        return self.load()

    def _move_next(self) -> None:
        self._last_outcome = None
        if self._index + 1 < len(self._questions):
            self._index += 1
            self._phase = QuizPhase.PRESENTING
        else:
            self._phase = QuizPhase.COMPLETED


def _is_option_index(answer: Any, option_count: int) -> bool:
    if isinstance(answer, bool) or not isinstance(answer, int):
        return False
    return 0 <= answer < option_count
