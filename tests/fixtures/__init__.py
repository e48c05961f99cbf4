"""Shared testing fixtures and stubs for the jusmind test suite."""

from .backend import ScriptedBackend  # noqa: F401
from .openai import OpenAIStub  # noqa: F401
from .questions import (  # noqa: F401
    discursive_payload,
    objective_payload,
    payload_json,
)

__all__ = [
    "OpenAIStub",
    "ScriptedBackend",
    "discursive_payload",
    "objective_payload",
    "payload_json",
]
