"""Rich terminal loop for tutoring conversations."""

from __future__ import annotations

from typing import Callable, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from .session import ChatMessage, ChatMode, ConversationSession

__all__ = ["render_message", "run_chat"]

InputProvider = Callable[[], str]

_MODE_TITLES = {
    ChatMode.RESOLVER: "Doutrinador",
    ChatMode.SOCRATIC: "Socrático",
}
_QUIT_COMMANDS = {":quit", ":q", "exit"}


def render_message(console: Console, message: ChatMessage) -> None:
    if message.is_error:
        console.print(Panel(message.text, title="JusMind", border_style="red"))
        return
    console.print(
        Panel(Markdown(message.text), title="JusMind", border_style="cyan")
    )


def run_chat(
    session: ConversationSession,
    console: Console,
    input_provider: Optional[InputProvider] = None,
) -> None:
    """Read prompts until ``:quit`` or end of input."""

    read = input_provider or (lambda: console.input("[bold green]Você[/]> "))
    _render_banner(console, session)
    for message in session.messages:
        render_message(console, message)

    while True:
        try:
            raw = read()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\nEncerrando a sessão.")
            break
        prompt = raw.strip()
        if not prompt:
            continue
        if prompt in _QUIT_COMMANDS:
            console.print("Até a próxima!")
            break
        if prompt == ":reset":
            if session.reset():
                render_message(console, session.messages[-1])
            continue
        if prompt.startswith(":mode"):
            _switch_mode(console, session, prompt[len(":mode") :].strip())
            continue
        if prompt.startswith(":"):
            console.print(
                "[red]Comando desconhecido.[/] Use :mode, :reset ou :quit."
            )
            continue

        with console.status("Consultando jurisprudência..."):
            reply = session.send(prompt)
        if reply is not None:
            render_message(console, reply)


def _switch_mode(
    console: Console, session: ConversationSession, value: str
) -> None:
    try:
        mode = session.switch_mode(value.lower())
    except ValueError:
        options = ", ".join(item.value for item in ChatMode)
        console.print(f"[red]Modo inválido.[/] Opções: {options}.")
        return
    console.print(f"Modo [bold]{_MODE_TITLES[mode]}[/] ativado.")


def _render_banner(console: Console, session: ConversationSession) -> None:
    console.print(
        Panel(
            (
                f"Modo [bold]{_MODE_TITLES[session.mode]}[/]. Comandos: "
                ":mode socratic|resolver, :reset, :quit"
            ),
            title="JusMind Tutor",
        )
    )
