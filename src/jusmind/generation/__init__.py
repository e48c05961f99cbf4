"""Prompt profiling, generation transport and output repair."""

from .backend import CompletionBackend, OpenAIBackend  # noqa: F401
from .client import PROSE_ERROR, GenerationClient  # noqa: F401
from .policy import (  # noqa: F401
    CircuitOpenError,
    CircuitState,
    ResilientBackend,
    RetryPolicy,
)
from .profiler import Modality, PromptProfile, profile  # noqa: F401
from .prompts import ChatMode  # noqa: F401
from .repair import StructuredOutputError, extract_json_array  # noqa: F401

__all__ = [
    "CompletionBackend",
    "OpenAIBackend",
    "PROSE_ERROR",
    "GenerationClient",
    "CircuitOpenError",
    "CircuitState",
    "ResilientBackend",
    "RetryPolicy",
    "Modality",
    "PromptProfile",
    "profile",
    "ChatMode",
    "StructuredOutputError",
    "extract_json_array",
]
