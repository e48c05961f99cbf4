"""Tutoring conversation session and its terminal view."""

from .session import (
    GREETING,
    RESET_GREETING,
    ChatMessage,
    ChatMode,
    ChatRole,
    ConversationLog,
    ConversationSession,
)
from .view import run_chat

__all__ = [
    "GREETING",
    "RESET_GREETING",
    "ChatMessage",
    "ChatMode",
    "ChatRole",
    "ConversationLog",
    "ConversationSession",
    "run_chat",
]
