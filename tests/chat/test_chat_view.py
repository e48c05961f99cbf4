from __future__ import annotations

from rich.console import Console

from jusmind.chat.session import ChatMode, ConversationSession
from jusmind.chat.view import run_chat
from jusmind.generation.client import PROSE_ERROR


def make_provider(lines: list[str]):
    iterator = iter(lines)

    def _provider() -> str:
        return next(iterator)

    return _provider


def test_run_chat_round_trip(client, backend):
    console = Console(record=True, width=200)
    session = ConversationSession(client)
    backend.queue("**Dolo** é a vontade consciente.")

    run_chat(session, console, make_provider(["", "O que é dolo?", ":quit"]))

    output = console.export_text()
    assert "JusMind Tutor" in output
    assert "Qual tema do Direito" in output
    assert "Dolo é a vontade consciente." in output
    assert "Até a próxima!" in output
    assert len(backend.calls) == 1


def test_run_chat_commands(client, backend):
    console = Console(record=True, width=200)
    session = ConversationSession(client)

    run_chat(
        session,
        console,
        make_provider([":mode socratic", ":mode lecture", ":oops", ":reset"]),
    )

    output = console.export_text()
    assert "Modo Socrático ativado." in output
    assert "Modo inválido." in output
    assert "Comando desconhecido." in output
    assert "Conversa reiniciada." in output
    assert "Encerrando a sessão." in output
    assert session.mode is ChatMode.RESOLVER
    assert backend.calls == []


def test_run_chat_shows_error_reply(client, backend):
    console = Console(record=True, width=200)
    session = ConversationSession(client)
    backend.queue(ConnectionError("down"))

    run_chat(session, console, make_provider(["pergunta", ":q"]))

    assert session.messages[-1].text == PROSE_ERROR
    assert "Houve um erro na conexão com o Tutor" in console.export_text()
