"""Generated lessons and key-concept summaries."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from .generation.client import PROSE_ERROR, GenerationClient
from .generation.prompts import build_concepts_prompt, build_lesson_prompt
from .runtime import add_config_argument, runtime_from_args

__all__ = [
    "generate_lesson",
    "extract_key_concepts",
    "main",
]


def generate_lesson(client: GenerationClient, topic: str) -> str:
    """Return a Markdown lesson on ``topic`` or ``PROSE_ERROR``."""
    return client.generate_prose(build_lesson_prompt(topic.strip()))


def extract_key_concepts(client: GenerationClient, content: str) -> str:
    """Return up to five bullet-point concepts from ``content``.

    Blank content and generation failures both yield an empty string so the
    caller can skip the section.
    """
    if not content.strip() or content == PROSE_ERROR:
        return ""
    reply = client.generate_prose(build_concepts_prompt(content))
    if reply == PROSE_ERROR:
        return ""
    return reply


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jusmind lesson",
        description="Generate a Markdown lesson for a law topic.",
    )
    parser.add_argument("topic", nargs="+", help="Lesson topic.")
    parser.add_argument(
        "--concepts",
        action="store_true",
        help="Also list the lesson's five key concepts.",
    )
    add_config_argument(parser)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    topic = " ".join(args.topic).strip()
    if not topic:
        parser.error("topic must not be empty")

    runtime = runtime_from_args(args)
    console = Console()
    with console.status(f"Preparando aula sobre [bold]{topic}[/]..."):
        lesson = generate_lesson(runtime.client, topic)
    if lesson == PROSE_ERROR:
        console.print(Panel(lesson, title=topic, border_style="red"))
        return 1
    console.print(Panel(Markdown(lesson), title=topic, border_style="cyan"))

    if args.concepts:
        with console.status("Extraindo conceitos-chave..."):
            concepts = extract_key_concepts(runtime.client, lesson)
        if concepts:
            console.print(
                Panel(Markdown(concepts), title="Conceitos-chave")
            )
        else:
            console.print("[dim]Conceitos-chave indisponíveis.[/]")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    sys.exit(main())
