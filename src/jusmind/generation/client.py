"""Single entry point for text and question-set generation.

The client never raises across its boundary. Structured requests that fail
for any reason yield an empty list and prose requests yield
``PROSE_ERROR``; the failure itself is only visible in the logs.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple

from ..questions import Question, parse_question
from .backend import CompletionBackend
from .profiler import Modality
from .prompts import SYSTEM_INSTRUCTION, build_structured_prompt
from .repair import StructuredOutputError, extract_json_array

__all__ = [
    "PROSE_ERROR",
    "OutputShape",
    "GenerationRequest",
    "GenerationResult",
    "GenerationClient",
]

PROSE_ERROR = (
    "⚠️ Houve um erro na conexão com o Tutor. Verifique sua internet ou "
    "tente novamente mais tarde."
)

_ROLE_NAMES = {
    "user": "user",
    "model": "assistant",
    "assistant": "assistant",
}


class OutputShape(str, Enum):
    PROSE = "prose"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    shape: OutputShape = OutputShape.PROSE
    expected_count: int = 0
    history: Tuple[Tuple[str, str], ...] = ()
    modality: Modality = Modality.OBJECTIVE
    topic: str = ""


@dataclass(frozen=True)
class GenerationResult:
    shape: OutputShape
    text: str | None = None
    items: Tuple[Question, ...] = ()


class GenerationClient:
    def __init__(
        self,
        backend: CompletionBackend,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._backend = backend
        self._logger = logger or logging.getLogger(__name__)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        if request.shape is OutputShape.STRUCTURED:
            items = self.generate_structured(
                request.prompt,
                request.expected_count,
                modality=request.modality,
                topic=request.topic,
            )
            return GenerationResult(shape=request.shape, items=tuple(items))
        text = self.generate_prose(request.prompt, history=request.history)
        return GenerationResult(shape=request.shape, text=text)

    def generate_structured(
        self,
        prompt: str,
        expected_count: int,
        *,
        modality: Modality = Modality.OBJECTIVE,
        topic: str = "",
    ) -> List[Question]:
        """Request ``expected_count`` questions and parse what comes back.

        Every returned item gets a fresh id. Items that cannot be classified
        are dropped; the list is never padded or truncated.
        """
        final_prompt = build_structured_prompt(
            prompt,
            modality=modality,
            expected_count=expected_count,
            topic=topic,
        )
        messages = [{"role": "user", "content": final_prompt}]
        try:
            reply = self._backend.complete(messages, expect_json=True)
        except Exception as exc:
            self._logger.warning(
                "Structured generation failed",
                extra={
                    "error_type": type(exc).__name__,
                    "prompt_chars": len(final_prompt),
                },
            )
            return []

        try:
            payloads = extract_json_array(reply)
        except StructuredOutputError as exc:
            self._logger.warning(
                "Structured reply could not be parsed",
                extra={"reason": str(exc), "reply_chars": len(reply or "")},
            )
            return []

        questions: List[Question] = []
        for payload in payloads:
            question = parse_question(
                payload,
                question_id=_new_question_id(),
                fallback_topic=topic,
            )
            if question is None:
                self._logger.warning(
                    "Dropped unclassifiable item",
                    extra={"item_type": _describe_tag(payload)},
                )
                continue
            questions.append(question)

        if len(questions) != expected_count:
            self._logger.info(
                "Item count differs from request",
                extra={
                    "expected_count": expected_count,
                    "received_count": len(questions),
                },
            )
        return questions

    def generate_prose(
        self,
        prompt: str,
        *,
        history: Sequence[Tuple[Any, str]] = (),
    ) -> str:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": SYSTEM_INSTRUCTION}
        ]
        for role, text in history:
            messages.append({"role": _role_name(role), "content": text})
        messages.append({"role": "user", "content": prompt})
        try:
            reply = self._backend.complete(messages, expect_json=False)
        except Exception as exc:
            self._logger.warning(
                "Prose generation failed",
                extra={
                    "error_type": type(exc).__name__,
                    "history_turns": len(history),
                },
            )
            return PROSE_ERROR
        if not reply or not reply.strip():
            self._logger.warning("Prose generation returned an empty reply")
            return PROSE_ERROR
        return reply


def _new_question_id() -> str:
    return f"q-{uuid.uuid4().hex}"


def _role_name(role: Any) -> str:
    key = str(getattr(role, "value", role)).lower()
    return _ROLE_NAMES.get(key, "user")


def _describe_tag(payload: Any) -> str:
    if isinstance(payload, dict):
        return str(payload.get("type"))
    return type(payload).__name__
