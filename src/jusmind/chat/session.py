"""Tutoring conversation state.

The transcript is an immutable ``ConversationLog``; every change produces a
new log. A turn starts by appending the user message and a pending model
placeholder and ends by replacing that placeholder, by id and in place, with
the reply or the connection-error text.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Tuple

from ..generation.client import PROSE_ERROR, GenerationClient
from ..generation.prompts import ChatMode, build_chat_prompt

__all__ = [
    "GREETING",
    "RESET_GREETING",
    "ChatMode",
    "ChatRole",
    "ChatMessage",
    "ConversationLog",
    "ConversationSession",
]

GREETING = (
    "Olá! Sou o JusMind, seu tutor jurídico pessoal. Posso explicar "
    "conceitos doutrinários, analisar casos práticos ou guiá-lo em modo "
    "socrático. Qual tema do Direito vamos estudar hoje?"
)
RESET_GREETING = "Conversa reiniciada. Em que tema jurídico posso ajudar agora?"


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class ChatMessage:
    """A single transcript entry."""

    id: str
    role: ChatRole
    text: str
    is_pending: bool = False
    is_error: bool = False


@dataclass(frozen=True)
class ConversationLog:
    messages: Tuple[ChatMessage, ...] = ()

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)

    @property
    def pending_count(self) -> int:
        return sum(1 for message in self.messages if message.is_pending)

    def append(self, message: ChatMessage) -> "ConversationLog":
        return ConversationLog(self.messages + (message,))

    def replace(self, message_id: str, **changes: Any) -> "ConversationLog":
        """Return a log where the message ``message_id`` carries ``changes``.

        The message keeps its id and position. Unknown ids raise ``KeyError``.
        """
        for index, message in enumerate(self.messages):
            if message.id == message_id:
                updated = dataclasses.replace(message, **changes)
                return ConversationLog(
                    self.messages[:index]
                    + (updated,)
                    + self.messages[index + 1 :]
                )
        raise KeyError(message_id)


def _new_id() -> str:
    return uuid.uuid4().hex


class ConversationSession:
    """One tutoring dialogue with a selectable answer mode."""

    def __init__(
        self,
        client: GenerationClient,
        *,
        mode: ChatMode = ChatMode.RESOLVER,
        max_history_turns: int = 20,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._default_mode = ChatMode(mode)
        self._mode = self._default_mode
        self._max_history_turns = max(0, max_history_turns)
        self._logger = logger or logging.getLogger(__name__)
        self._log = ConversationLog().append(
            ChatMessage(id=_new_id(), role=ChatRole.MODEL, text=GREETING)
        )
        self._pending_id: str | None = None

    @property
    def log(self) -> ConversationLog:
        return self._log

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return self._log.messages

    @property
    def mode(self) -> ChatMode:
        return self._mode

    @property
    def awaiting_reply(self) -> bool:
        return self._pending_id is not None

    def switch_mode(self, mode: ChatMode | str) -> ChatMode:
        """Select the mode used for later prompts; past messages stay."""
        self._mode = ChatMode(mode)
        return self._mode

    def begin_turn(self, text: str) -> ChatMessage | None:
        """Record the user's message and a pending reply placeholder.

        Returns the placeholder, or ``None`` when ``text`` is blank or a
        reply is already pending.
        """
        if self.awaiting_reply or not text or not text.strip():
            return None
        user = ChatMessage(id=_new_id(), role=ChatRole.USER, text=text.strip())
        placeholder = ChatMessage(
            id=_new_id(),
            role=ChatRole.MODEL,
            text="",
            is_pending=True,
        )
        self._log = self._log.append(user).append(placeholder)
        self._pending_id = placeholder.id
        return placeholder

    def resolve_turn(self, reply: str) -> ChatMessage | None:
        """Swap the pending placeholder for ``reply``.

        Returns ``None`` when no turn is in flight.
        """
        if self._pending_id is None:
            return None
        message_id = self._pending_id
        self._log = self._log.replace(
            message_id,
            text=reply,
            is_pending=False,
            is_error=reply == PROSE_ERROR,
        )
        self._pending_id = None
        return next(m for m in self._log if m.id == message_id)

    def send(self, text: str) -> ChatMessage | None:
        """Run one complete turn and return the model's message."""
        history = self._history()
        placeholder = self.begin_turn(text)
        if placeholder is None:
            return None
        prompt = build_chat_prompt(text.strip(), self._mode)
        reply = self._client.generate_prose(prompt, history=history)
        message = self.resolve_turn(reply)
        if message is not None and message.is_error:
            self._logger.warning(
                "Tutor reply failed", extra={"mode": self._mode.value}
            )
        return message

    def reset(self) -> bool:
        """Start over with a fresh greeting. Refused while a reply is pending."""
        if self.awaiting_reply:
            return False
        self._log = ConversationLog().append(
            ChatMessage(id=_new_id(), role=ChatRole.MODEL, text=RESET_GREETING)
        )
        self._mode = self._default_mode
        return True

    def _history(self) -> List[Tuple[str, str]]:
        """Completed turns after the greeting, newest last."""
        turns = [
            (message.role.value, message.text)
            for message in self._log.messages[1:]
            if not message.is_pending and not message.is_error
        ]
        limit = self._max_history_turns * 2
        if not limit:
            return []
        return turns[-limit:]
