"""Transport seam between the generation client and the model provider."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from ..core.ai import load_client

__all__ = [
    "Message",
    "CompletionBackend",
    "OpenAIBackend",
]

Message = Mapping[str, str]


class CompletionBackend(Protocol):
    """Anything that turns chat messages into reply text.

    Implementations raise on transport or service failure; translating
    failures into soft results is the generation client's job.
    """

    def complete(
        self,
        messages: Sequence[Message],
        *,
        expect_json: bool = False,
    ) -> str:
        """Return the assistant reply for ``messages``."""


class OpenAIBackend:
    """Adapter for OpenAI chat completions."""

    def __init__(
        self,
        *,
        model: str,
        temperature: float,
        structured_temperature: float,
        max_output_tokens: int,
        request_timeout: int,
        api_base: str | None = None,
        max_retries: int | None = None,
        client: Any | None = None,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._structured_temperature = structured_temperature
        self._max_output_tokens = max_output_tokens
        self._timeout = request_timeout
        if client is None:
            client = load_client(api_base=api_base, max_retries=max_retries)
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    def complete(
        self,
        messages: Sequence[Message],
        *,
        expect_json: bool = False,
    ) -> str:
        temperature = (
            self._structured_temperature if expect_json else self._temperature
        )
        response = self._client.chat.completions.create(
            model=self._model,
            messages=[dict(message) for message in messages],
            temperature=temperature,
            max_tokens=self._max_output_tokens,
            timeout=self._timeout,
        )
        content = response.choices[0].message.content or ""
        return content.strip()
