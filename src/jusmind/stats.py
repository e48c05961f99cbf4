"""In-memory answer statistics fed by quiz sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Protocol

__all__ = [
    "StatsSink",
    "TopicPerformance",
    "StatsRecorder",
]


class StatsSink(Protocol):
    def record(self, topic: str, correct: bool) -> None:
        """Register one answered question."""


@dataclass(frozen=True)
class TopicPerformance:
    topic: str
    answered: int
    correct: int

    @property
    def accuracy(self) -> float:
        if not self.answered:
            return 0.0
        return self.correct / self.answered


class StatsRecorder:
    """Accumulate per-topic answer counts for the current process."""

    def __init__(self) -> None:
        self._answered: Dict[str, int] = {}
        self._correct: Dict[str, int] = {}

    def record(self, topic: str, correct: bool) -> None:
        key = topic.strip() or "Geral"
        self._answered[key] = self._answered.get(key, 0) + 1
        if correct:
            self._correct[key] = self._correct.get(key, 0) + 1

    @property
    def questions_solved(self) -> int:
        return sum(self._answered.values())

    @property
    def accuracy(self) -> float:
        solved = self.questions_solved
        if not solved:
            return 0.0
        return sum(self._correct.values()) / solved

    def topic_performance(self) -> List[TopicPerformance]:
        """Per-topic totals, most practiced first, then by name."""
        rows = [
            TopicPerformance(
                topic=topic,
                answered=answered,
                correct=self._correct.get(topic, 0),
            )
            for topic, answered in self._answered.items()
        ]
        rows.sort(key=lambda row: (-row.answered, row.topic))
        return rows
