"""Recover a JSON array from free-form generator output."""

from __future__ import annotations

import json
import re
from typing import Any, List

__all__ = [
    "StructuredOutputError",
    "strip_code_fences",
    "slice_array_span",
    "extract_json_array",
]

_FENCE_OPEN = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE_ANY = re.compile(r"```\s*")


class StructuredOutputError(ValueError):
    """Raised when a reply holds no parseable JSON array."""


def strip_code_fences(text: str) -> str:
    without_open = _FENCE_OPEN.sub("", text)
    return _FENCE_ANY.sub("", without_open).strip()


def slice_array_span(text: str) -> str:
    """Keep the span between the first ``[`` and the last ``]``.

    Text without both brackets (or with them out of order) is returned
    unchanged so the parse step reports the failure.
    """
    first = text.find("[")
    last = text.rfind("]")
    if first == -1 or last == -1 or last < first:
        return text
    return text[first : last + 1]


def extract_json_array(text: str) -> List[Any]:
    """Run the fence-strip, slice and parse steps over ``text``.

    Raises :class:`StructuredOutputError` when the result is not a list,
    including replies nested too deeply for the JSON decoder.
    """
    if not text or not text.strip():
        raise StructuredOutputError("Empty reply.")
    candidate = slice_array_span(strip_code_fences(text))
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise StructuredOutputError(f"Reply is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise StructuredOutputError("Reply nests arrays too deeply.") from exc
    if not isinstance(data, list):
        raise StructuredOutputError(
            f"Expected a JSON array, found {type(data).__name__}."
        )
    return data
