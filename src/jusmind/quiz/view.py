"""Rich-powered terminal loop for quiz sessions.

The loop only renders and parses input; every transition goes through
``QuizSession`` so the same rules hold for any other front end.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..generation.client import PROSE_ERROR
from ..questions import DiscursiveQuestion, ObjectiveQuestion
from .session import QuizPhase, QuizResult, QuizSession

__all__ = [
    "InputProvider",
    "QuizCommand",
    "parse_quiz_command",
    "option_label",
    "run_quiz",
]

InputProvider = Callable[[], str]
CommandType = Literal["choose", "deep_dive", "next", "regenerate", "quit"]

END_OF_ANSWER = "."


@dataclass(frozen=True)
class QuizCommand:
    type: CommandType
    index: int | None = None


def option_label(index: int) -> str:
    return chr(ord("A") + index)


def parse_quiz_command(
    raw: str | None, *, choosing: bool = False
) -> QuizCommand | None:
    """Parse one input line into a command.

    Options are picked by 1-based number or by letter. ``n``, ``r`` and
    ``q`` always win over option letters; ``d`` means deep dive unless
    ``choosing`` is set, where it picks option D.
    """

    if raw is None:
        return None
    text = raw.strip().lower()
    if not text:
        return None
    if text in {"q", "quit", "exit", "sair"}:
        return QuizCommand("quit")
    if text in {"n", "next", "proxima", "próxima"}:
        return QuizCommand("next")
    if text in {"r", "regenerate", "refazer"}:
        return QuizCommand("regenerate")
    if text in {"deep", "aprofundar"} or (text == "d" and not choosing):
        return QuizCommand("deep_dive")
    if text.isdigit():
        number = int(text)
        if number >= 1:
            return QuizCommand("choose", number - 1)
        return None
    if len(text) == 1 and "a" <= text <= "z":
        return QuizCommand("choose", ord(text) - ord("a"))
    return None


def run_quiz(
    session: QuizSession,
    console: Console,
    input_provider: InputProvider,
) -> QuizResult:
    """Drive ``session`` until the user quits or input runs out."""

    if session.phase is QuizPhase.NEW:
        _load(session, console)

    while True:
        phase = session.phase
        try:
            if phase is QuizPhase.COMPLETED:
                _render_summary(console, session)
                raw = input_provider()
                command = parse_quiz_command(raw)
                if command and command.type == "regenerate":
                    _regenerate(session, console)
                    continue
                if command and command.type == "quit":
                    break
                console.print("[red]Use r (refazer) ou q (sair).[/]")
                continue

            if phase is QuizPhase.PRESENTING:
                _render_question(console, session)
                if not _handle_presenting(session, console, input_provider):
                    break
                continue

            if phase is QuizPhase.ANSWERED:
                raw = input_provider()
                if not _handle_answered(session, console, raw):
                    break
                continue

            # NEW or LOADING would mean a host re-entered the loop mid-load.
            break
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Sessão interrompida.[/]")
            break

    return session.result()


def _load(session: QuizSession, console: Console) -> None:
    message = (
        "Consultando editais e jurisprudência para "
        f"[bold]{session.topic}[/]..."
    )
    with console.status(message):
        session.load()


def _regenerate(session: QuizSession, console: Console) -> None:
    with console.status("Gerando um novo conjunto de questões..."):
        session.regenerate()


def _handle_presenting(
    session: QuizSession,
    console: Console,
    input_provider: InputProvider,
) -> bool:
    question = session.current
    raw = input_provider()
    command = parse_quiz_command(
        raw, choosing=isinstance(question, ObjectiveQuestion)
    )
    if command is not None and command.type == "quit":
        return False
    if command is not None and command.type == "regenerate":
        _regenerate(session, console)
        return True
    if command is not None and command.type == "next":
        session.skip()
        return True

    if isinstance(question, DiscursiveQuestion):
        answer = _read_discursive_answer(raw, input_provider)
        outcome = session.submit(answer)
        if outcome is None:
            console.print("[red]Escreva uma resposta antes de enviar.[/]")
            return True
    else:
        if command is None or command.type != "choose":
            console.print("[red]Comando não reconhecido. Tente novamente.[/]")
            return True
        outcome = session.submit(command.index)
        if outcome is None:
            console.print(
                "[red]'%s' não é uma alternativa válida.[/]" % raw.strip()
            )
            return True

    _render_feedback(console, session)
    return True


def _handle_answered(
    session: QuizSession, console: Console, raw: str
) -> bool:
    command = parse_quiz_command(raw)
    if command is None:
        console.print("[red]Comando não reconhecido. Tente novamente.[/]")
        return True
    if command.type == "quit":
        return False
    if command.type == "next":
        session.advance()
        return True
    if command.type == "regenerate":
        _regenerate(session, console)
        return True
    if command.type == "deep_dive":
        if not isinstance(session.current, DiscursiveQuestion):
            console.print(
                "[dim]Análise aprofundada disponível só para discursivas.[/]"
            )
            return True
        with console.status("Preparando análise aprofundada..."):
            analysis = session.deep_dive()
        _render_deep_dive(console, analysis or PROSE_ERROR)
        return True
    console.print("[red]A questão já foi respondida. Use n para seguir.[/]")
    return True


def _read_discursive_answer(
    first_line: str, input_provider: InputProvider
) -> str:
    """Collect lines until one holding only ``END_OF_ANSWER``."""
    lines = []
    line = first_line
    while line.strip() != END_OF_ANSWER:
        lines.append(line)
        line = input_provider()
    return "\n".join(lines).strip()


def _render_question(console: Console, session: QuizSession) -> None:
    question = session.current
    if question is None:
        return
    total = len(session.questions)
    header = Text.assemble(
        (f"Questão {session.current_index + 1}", "bold cyan"),
        (f" / {total}", "dim"),
        (f"  {question.difficulty.label}", "magenta"),
    )
    console.print()
    console.rule(header)
    if question.topic:
        console.print(Text(question.topic, style="dim"))
    console.print(Text(question.text, style="bold"))

    if isinstance(question, ObjectiveQuestion):
        table = Table(show_header=False, box=box.SIMPLE, expand=True)
        table.add_column("Key", justify="center", style="cyan")
        table.add_column("Option")
        for index, option in enumerate(question.options):
            table.add_row(option_label(index), option)
        console.print(table)
        hint = (
            "Escolha a alternativa (letra ou número) | "
            "n (pular), r (refazer), q (sair)"
        )
    else:
        hint = (
            "Escreva sua resposta; termine com uma linha contendo apenas "
            f"'{END_OF_ANSWER}' | n (pular), r (refazer), q (sair)"
        )
    console.print(
        Text(f"Pontuação {session.score} | {hint}", style="dim")
    )


def _render_feedback(console: Console, session: QuizSession) -> None:
    outcome = session.last_outcome
    question = session.current
    if outcome is None or question is None:
        return
    if outcome.correct is None:
        title = "Espelho de correção"
        border = "blue"
    elif outcome.correct:
        title = "Correto!"
        border = "green"
    else:
        title = "Incorreto"
        border = "red"

    body = outcome.feedback
    if isinstance(question, ObjectiveQuestion) and outcome.correct is False:
        answer = question.correct_option_text
        if answer is None:
            key = "não identificado"
        else:
            key = f"{option_label(question.resolved_answer_index)}) {answer}"
        body = f"**Gabarito: {key}**\n\n{body}"
    console.print(Panel(Markdown(body), title=title, border_style=border))

    hint = "n (próxima), r (refazer), q (sair)"
    if isinstance(question, DiscursiveQuestion):
        hint = "d (análise aprofundada), " + hint
    console.print(Text(hint, style="dim"))


def _render_deep_dive(console: Console, analysis: str) -> None:
    border = "red" if analysis == PROSE_ERROR else "cyan"
    console.print(
        Panel(
            Markdown(analysis),
            title="Análise aprofundada",
            border_style=border,
        )
    )


def _render_summary(console: Console, session: QuizSession) -> None:
    result = session.result()
    if not result.total:
        body = (
            "Nenhuma questão foi gerada para este tema. "
            "Tente novamente (r) ou saia (q)."
        )
        console.print(
            Panel(body, title="Sessão de Questões", border_style="yellow")
        )
        return

    table = Table(show_header=False, box=box.SIMPLE)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Tema", result.topic)
    table.add_row("Questões", str(result.total))
    if result.scored:
        table.add_row("Acertos", f"{result.score}/{result.total}")
        table.add_row("Aproveitamento", f"{result.accuracy:.0%}")
    else:
        table.add_row("Modo", "Discursivas (autoavaliação)")
    console.print(
        Panel(table, title="Ciclo de estudos concluído", border_style="green")
    )
    console.print(Text("r (refazer com novas questões), q (sair)", style="dim"))
