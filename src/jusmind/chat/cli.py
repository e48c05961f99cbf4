"""CLI entry point for the tutoring chat."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from rich.console import Console

from ..runtime import add_config_argument, runtime_from_args
from .session import ChatMode, ConversationSession
from .view import run_chat


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jusmind chat",
        description="Talk to the JusMind legal tutor in the terminal.",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ChatMode],
        help=(
            "Answer style: 'resolver' gives full doctrinal answers, "
            "'socratic' guides with questions. Defaults to chat.default_mode."
        ),
    )
    add_config_argument(parser)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    runtime = runtime_from_args(args)
    chat_cfg = runtime.config.chat
    session = ConversationSession(
        runtime.client,
        mode=ChatMode(args.mode or chat_cfg.default_mode),
        max_history_turns=chat_cfg.max_history_turns,
        logger=runtime.logger.getChild("chat"),
    )
    run_chat(session, Console())
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    sys.exit(main())
