"""Retry, backoff and circuit-breaking around a completion backend.

``ResilientBackend`` implements the same ``complete`` interface as the
backend it wraps, so the generation client and the sessions above it do not
know whether retries happen.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

import openai

from ..config import RetryConfig
from .backend import CompletionBackend, Message

__all__ = [
    "CircuitOpenError",
    "CircuitState",
    "RetryPolicy",
    "ResilientBackend",
    "is_transient",
]


class CircuitOpenError(RuntimeError):
    """Raised without calling the backend while the breaker is open."""


_TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
    ConnectionError,
    TimeoutError,
)


def is_transient(exc: BaseException) -> bool:
    """Whether a failed call may succeed when repeated.

    Connection drops, timeouts, rate limits and 5xx replies qualify; auth
    and request errors (4xx other than 429) do not.
    """
    if isinstance(exc, _TRANSIENT_ERRORS):
        return True
    status = getattr(exc, "status_code", None)
    if isinstance(status, int):
        return status == 429 or status >= 500
    return False


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    initial_backoff: float = 1.0
    backoff_multiplier: float = 2.0
    max_backoff: float = 8.0
    failure_threshold: int = 5
    cooldown_seconds: float = 30.0

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            initial_backoff=config.initial_backoff_seconds,
            backoff_multiplier=config.backoff_multiplier,
            max_backoff=config.max_backoff_seconds,
            failure_threshold=config.failure_threshold,
            cooldown_seconds=config.cooldown_seconds,
        )

    def backoff_for(self, attempt: int) -> float:
        """Delay after failed ``attempt`` (1-based), capped at ``max_backoff``."""
        delay = self.initial_backoff * self.backoff_multiplier ** (attempt - 1)
        return min(delay, self.max_backoff)


class ResilientBackend:
    """Wrap a backend with bounded retries and a circuit breaker.

    Only failures ``retryable`` accepts are retried and counted against the
    breaker; any other error is raised on the first attempt.
    """

    def __init__(
        self,
        inner: CompletionBackend,
        policy: RetryPolicy | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        retryable: Callable[[BaseException], bool] = is_transient,
        logger: logging.Logger | None = None,
    ) -> None:
        self._inner = inner
        self._policy = policy or RetryPolicy()
        self._sleep = sleep
        self._clock = clock
        self._retryable = retryable
        self._logger = logger or logging.getLogger(__name__)
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._opened_at = 0.0

    @property
    def state(self) -> CircuitState:
        return self._state

    def complete(
        self,
        messages: Sequence[Message],
        *,
        expect_json: bool = False,
    ) -> str:
        self._check_circuit()
        if self._state is CircuitState.HALF_OPEN:
            attempts = 1
        else:
            attempts = max(1, self._policy.max_attempts)
        attempt = 0
        while True:
            attempt += 1
            try:
                reply = self._inner.complete(messages, expect_json=expect_json)
            except Exception as exc:
                transient = self._retryable(exc)
                self._logger.warning(
                    "Generation attempt failed",
                    extra={
                        "attempt": attempt,
                        "max_attempts": attempts,
                        "error_type": type(exc).__name__,
                        "transient": transient,
                    },
                )
                if not transient:
                    raise
                if attempt >= attempts:
                    self._record_failure()
                    raise
                self._sleep(self._policy.backoff_for(attempt))
                continue
            self._record_success()
            return reply

    def _check_circuit(self) -> None:
        if self._state is not CircuitState.OPEN:
            return
        elapsed = self._clock() - self._opened_at
        if elapsed >= self._policy.cooldown_seconds:
            self._state = CircuitState.HALF_OPEN
            self._logger.info("Circuit half-open; allowing a trial call")
            return
        raise CircuitOpenError(
            "Generation service temporarily disabled after repeated "
            f"failures; retry in {self._policy.cooldown_seconds - elapsed:.0f}s."
        )

    def _record_success(self) -> None:
        if self._state is not CircuitState.CLOSED:
            self._logger.info("Circuit closed")
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0

    def _record_failure(self) -> None:
        self._consecutive_failures += 1
        tripped = (
            self._state is CircuitState.HALF_OPEN
            or self._consecutive_failures >= self._policy.failure_threshold
        )
        if tripped:
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()
            self._logger.error(
                "Circuit opened",
                extra={"consecutive_failures": self._consecutive_failures},
            )
