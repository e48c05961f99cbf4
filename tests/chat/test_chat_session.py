from __future__ import annotations

import pytest

from jusmind.chat.session import (
    GREETING,
    RESET_GREETING,
    ChatMessage,
    ChatMode,
    ChatRole,
    ConversationLog,
    ConversationSession,
)
from jusmind.generation.client import PROSE_ERROR


def test_session_starts_with_greeting(client):
    session = ConversationSession(client)

    (greeting,) = session.messages
    assert greeting.role is ChatRole.MODEL
    assert greeting.text == GREETING
    assert session.mode is ChatMode.RESOLVER
    assert session.awaiting_reply is False


def test_begin_and_resolve_turn_replace_placeholder_in_place(client):
    session = ConversationSession(client)

    placeholder = session.begin_turn("O que é usucapião?")

    assert placeholder.is_pending is True
    assert session.awaiting_reply is True
    assert session.log.pending_count == 1
    assert [m.role for m in session.messages] == [
        ChatRole.MODEL,
        ChatRole.USER,
        ChatRole.MODEL,
    ]

    reply = session.resolve_turn("Resposta")

    assert reply.id == placeholder.id
    assert session.messages[-1] == reply
    assert reply.text == "Resposta"
    assert reply.is_pending is False
    assert reply.is_error is False
    assert session.awaiting_reply is False
    assert session.log.pending_count == 0


def test_begin_turn_rejected_while_pending_or_blank(client):
    session = ConversationSession(client)

    assert session.begin_turn("   ") is None
    assert session.begin_turn("primeira") is not None
    assert session.begin_turn("segunda") is None
    assert session.log.pending_count == 1
    assert len(session.messages) == 3


def test_resolve_without_pending_turn_is_ignored(client):
    session = ConversationSession(client)
    assert session.resolve_turn("solta") is None
    assert len(session.messages) == 1


def test_send_wraps_prompt_in_mode_template(client, backend):
    session = ConversationSession(client)
    backend.queue("Conceito...")

    reply = session.send("O que é dolo eventual?")

    assert reply.text == "Conceito..."
    assert backend.last_prompt.startswith("MODO DOUTRINADOR")
    assert session.messages[1].text == "O que é dolo eventual?"


def test_failed_turn_becomes_error_message(client, backend):
    session = ConversationSession(client)
    backend.queue(ConnectionError("offline"))

    reply = session.send("pergunta")

    assert reply.text == PROSE_ERROR
    assert reply.is_error is True
    assert session.awaiting_reply is False


def test_switch_mode_affects_only_later_prompts(client, backend):
    session = ConversationSession(client)
    backend.queue("r1", "r2")

    session.send("primeira")
    first_prompt = backend.last_prompt
    session.switch_mode("socratic")
    session.send("segunda")

    assert first_prompt.startswith("MODO DOUTRINADOR")
    assert backend.last_prompt.startswith("MODO SOCRÁTICO")
    assert session.messages[2].text == "r1"


def test_switch_mode_rejects_unknown_mode(client):
    session = ConversationSession(client)
    with pytest.raises(ValueError):
        session.switch_mode("lecture")


def test_history_excludes_greeting_pending_and_errors(client, backend):
    session = ConversationSession(client)
    backend.queue("r1", ConnectionError("x"), "r3")

    session.send("q1")
    session.send("q2")
    session.send("q3")

    history = backend.calls[-1]["messages"][1:-1]
    assert history == [
        {"role": "user", "content": "q1"},
        {"role": "assistant", "content": "r1"},
        {"role": "user", "content": "q2"},
    ]


def test_history_is_bounded(client, backend):
    session = ConversationSession(client, max_history_turns=1)
    backend.queue("r1", "r2", "r3")

    for text in ("q1", "q2", "q3"):
        session.send(text)

    history = backend.calls[-1]["messages"][1:-1]
    assert [m["content"] for m in history] == ["q2", "r2"]


def test_reset_restores_greeting_and_default_mode(client, backend):
    session = ConversationSession(client, mode=ChatMode.SOCRATIC)
    backend.queue("r1")
    session.send("q1")
    session.switch_mode(ChatMode.RESOLVER)

    assert session.reset() is True

    (message,) = session.messages
    assert message.text == RESET_GREETING
    assert session.mode is ChatMode.SOCRATIC


def test_reset_refused_while_reply_pending(client):
    session = ConversationSession(client)
    session.begin_turn("pergunta")

    assert session.reset() is False
    assert session.log.pending_count == 1


def test_conversation_log_is_immutable():
    message = ChatMessage(id="1", role=ChatRole.USER, text="a")
    empty = ConversationLog()

    log = empty.append(message)
    updated = log.replace("1", text="b")

    assert len(empty) == 0
    assert log.messages[0].text == "a"
    assert updated.messages[0].text == "b"
    assert updated.messages[0].id == "1"
    with pytest.raises(KeyError):
        log.replace("missing", text="c")
