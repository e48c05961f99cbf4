"""CLI entry point for interactive practice quizzes."""

from __future__ import annotations

import argparse
import sys
import uuid
from pathlib import Path
from typing import List, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..generation.repair import StructuredOutputError, extract_json_array
from ..questions import Question, parse_question
from ..runtime import add_config_argument, runtime_from_args
from ..stats import StatsRecorder
from .session import QuizSession
from .view import run_quiz


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jusmind quiz",
        description=(
            "Generate a practice question set for a law topic and answer it "
            "in the terminal."
        ),
    )
    parser.add_argument(
        "topic",
        nargs="+",
        help="Subject or theme, e.g. 'Direito Administrativo'.",
    )
    parser.add_argument(
        "--context",
        default="",
        help=(
            "Exam context tag (e.g. TJRJ, ALERJ, PGE-RJ). Sets exam length and "
            "style; 'discursiva' or 'peça' requests open-ended questions."
        ),
    )
    parser.add_argument(
        "--from-file",
        type=Path,
        help=(
            "Answer a saved JSON question array instead of generating the "
            "first set. Regenerating still asks the tutor for a new one."
        ),
    )
    add_config_argument(parser)
    return parser


def load_question_file(path: Path, *, topic: str) -> List[Question]:
    """Read a saved question set in the generated wire format.

    Raises ``ValueError`` when the file cannot be read or holds no usable
    item.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read question file {path}: {exc}") from exc
    try:
        payloads = extract_json_array(text)
    except StructuredOutputError as exc:
        raise ValueError(f"Invalid question file {path}: {exc}") from exc
    questions = []
    for payload in payloads:
        question = parse_question(
            payload,
            question_id=f"q-{uuid.uuid4().hex}",
            fallback_topic=topic,
        )
        if question is not None:
            questions.append(question)
    if not questions:
        raise ValueError(f"No usable questions in {path}")
    return questions


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    topic = " ".join(args.topic).strip()
    if not topic:
        parser.error("topic must not be empty")

    initial_questions = None
    if args.from_file is not None:
        try:
            initial_questions = load_question_file(args.from_file, topic=topic)
        except ValueError as exc:
            sys.stderr.write(f"{exc}\n")
            return 2

    runtime = runtime_from_args(args)
    stats = StatsRecorder()
    session = QuizSession(
        topic,
        args.context,
        client=runtime.client,
        stats=stats,
        initial_questions=initial_questions,
        logger=runtime.logger.getChild("quiz"),
    )
    console = Console()
    result = run_quiz(
        session,
        console,
        lambda: console.input("[bold green]>[/] "),
    )
    if stats.questions_solved:
        _render_stats(console, stats)
    runtime.logger.info(
        "Quiz finished",
        extra={
            "topic": result.topic,
            "score": result.score,
            "total": result.total,
            "from_file": args.from_file is not None,
        },
    )
    return 0


def _render_stats(console: Console, stats: StatsRecorder) -> None:
    table = Table(title="Desempenho por tema", box=box.SIMPLE)
    table.add_column("Tema", style="cyan")
    table.add_column("Respondidas", justify="right")
    table.add_column("Acertos", justify="right")
    table.add_column("Aproveitamento", justify="right")
    for row in stats.topic_performance():
        table.add_row(
            row.topic,
            str(row.answered),
            str(row.correct),
            f"{row.accuracy:.0%}",
        )
    console.print(table)
    console.print(
        Text(
            f"Respondidas: {stats.questions_solved} | "
            f"Aproveitamento: {stats.accuracy:.0%}",
            style="dim",
        )
    )


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    sys.exit(main())
