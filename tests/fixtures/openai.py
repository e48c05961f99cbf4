"""OpenAI client stand-in passed to ``OpenAIBackend(client=...)``.

The production adapter only touches ``client.chat.completions.create``; the
stub records each call and returns queued contents (or raises queued
exceptions) in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, Dict, List, Union


@dataclass
class Choice:
    """Single completion choice shaped like the SDK's."""

    content: str | None

    @property
    def message(self) -> SimpleNamespace:
        return SimpleNamespace(content=self.content)


class OpenAIStub:
    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Union[str, None, Exception]] = []
        self._chat = SimpleNamespace(
            completions=SimpleNamespace(create=self._create_completion)
        )

    @property
    def chat(self) -> SimpleNamespace:
        return self._chat

    def queue_response(self, content: Union[str, None, Exception]) -> None:
        self.responses.append(content)

    def _create_completion(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        content = self.responses.pop(0) if self.responses else ""
        if isinstance(content, Exception):
            raise content
        return SimpleNamespace(choices=[Choice(content)])
