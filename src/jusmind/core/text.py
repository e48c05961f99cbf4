"""Text normalisation helpers."""

from __future__ import annotations

import unicodedata

__all__ = ["fold_text"]


def fold_text(value: str) -> str:
    """Lower-case ``value`` and strip combining accents (NFD)."""
    decomposed = unicodedata.normalize("NFD", value.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
