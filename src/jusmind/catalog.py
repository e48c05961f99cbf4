"""Static catalog of law subjects, institutions and archived exams."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table

from .core.text import fold_text

__all__ = [
    "SUBJECTS",
    "INSTITUTIONS",
    "Institution",
    "Exam",
    "build_exam_archive",
    "search_subjects",
    "exams_for_subject",
    "main",
]

SUBJECTS: Tuple[str, ...] = (
    "Direito Constitucional",
    "Direito Administrativo",
    "Direito Civil",
    "Processo Civil",
    "Direito Penal",
    "Processo Penal",
    "Direito Tributário",
    "Direito Empresarial",
    "Direito do Trabalho",
    "Processo do Trabalho",
    "Direitos Humanos",
    "Ética Profissional",
    "Direito Ambiental",
    "Estatuto da Criança e Adolescente",
    "Direito do Consumidor",
    "Direito Eleitoral",
    "Direito Previdenciário",
    "Direito Internacional",
    "Filosofia do Direito",
    "Teoria Geral do Direito",
    "Legislação Específica (RJ)",
    "Regimento Interno (Casas Legislativas)",
    "Fazenda Pública em Juízo",
)


@dataclass(frozen=True)
class Institution:
    name: str
    kind: str
    full_name: str


INSTITUTIONS: Tuple[Institution, ...] = (
    Institution("OAB", "Ordem", "Exame de Ordem Unificado (FGV)"),
    Institution(
        "TJRJ", "Concurso", "Tribunal de Justiça do Rio de Janeiro"
    ),
    Institution(
        "ALERJ", "Concurso", "Assembleia Legislativa do Estado do RJ"
    ),
    Institution(
        "PGE-RJ",
        "Concurso",
        "Procuradoria Geral do Estado do RJ (Residência)",
    ),
    Institution("UFF", "Publica", "Universidade Federal Fluminense"),
    Institution(
        "UFRJ", "Publica", "Universidade Federal do Rio de Janeiro"
    ),
    Institution("Estácio", "Privada", "Universidade Estácio de Sá"),
)


@dataclass(frozen=True)
class Exam:
    id: str
    institution: str
    subject: str
    year: int
    period: str

    @property
    def context_tag(self) -> str:
        """Context tag to pass to a quiz started from this exam."""
        return self.institution


# Subject fragments each contest covers, and the period label it uses.
_CONTEST_SUBJECTS = {
    "PGE-RJ": (
        (
            "Administrativo",
            "Constitucional",
            "Tributário",
            "Processo Civil",
            "Fazenda Pública",
        ),
        "Residência Jurídica",
    ),
    "TJRJ": (
        (
            "Civil",
            "Processo Civil",
            "Constitucional",
            "Administrativo",
            "Penal",
        ),
        "Técnico/Analista",
    ),
    "ALERJ": (
        (
            "Constitucional",
            "Administrativo",
            "Processo Legislativo",
            "Regimento Interno",
        ),
        "Edital Anterior",
    ),
}

_DISCURSIVE_EXAMS = (
    Exam(
        id="disc-pge-1",
        institution="PGE-RJ",
        subject="Peça Prática (Discursiva)",
        year=2024,
        period="Fase Final",
    ),
    Exam(
        id="disc-tj-1",
        institution="TJRJ",
        subject="Sentença Cível (Discursiva)",
        year=2023,
        period="Magistratura",
    ),
)


def build_exam_archive() -> List[Exam]:
    """Build the archived exam list in subject, then institution order.

    Contests only list subjects matching their fragments, the OAB lists
    every subject, and universities fill in a deterministic sparse subset.
    Two discursive exams are appended at the end.
    """
    exams: List[Exam] = []
    for index, subject in enumerate(SUBJECTS):
        for inst_index, institution in enumerate(INSTITUTIONS):
            period = f"{index % 2 + 1}º Semestre"
            contest = _CONTEST_SUBJECTS.get(institution.name)
            if contest is not None:
                fragments, period = contest
                include = any(fragment in subject for fragment in fragments)
            elif institution.name == "OAB":
                include = True
                period = f"XXX{index % 5 + 2} Exame"
            else:
                include = (index + inst_index) % 6 == 0
            if include:
                exams.append(
                    Exam(
                        id=f"{institution.name.lower()}-{index}",
                        institution=institution.name,
                        subject=subject,
                        year=2023 - index % 4,
                        period=period,
                    )
                )
    exams.extend(_DISCURSIVE_EXAMS)
    return exams


def search_subjects(term: str = "") -> List[str]:
    """Subjects containing ``term``, ignoring case and accents, sorted."""
    needle = fold_text(term or "")
    matches = [s for s in SUBJECTS if needle in fold_text(s)]
    return sorted(matches, key=lambda s: (fold_text(s), s))


def exams_for_subject(subject: str) -> List[Exam]:
    return [exam for exam in build_exam_archive() if exam.subject == subject]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jusmind catalog",
        description="Browse law subjects and archived exams.",
    )
    parser.add_argument(
        "--search",
        default="",
        help="Filter subjects by name (case and accent insensitive).",
    )
    parser.add_argument(
        "--subject",
        help="Show the archived exams for this exact subject.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = Console()

    if args.subject:
        exams = exams_for_subject(args.subject)
        if not exams:
            console.print(f"[red]Unknown subject '{args.subject}'.[/]")
            suggestions = search_subjects(args.subject)
            if suggestions:
                console.print("Did you mean: " + ", ".join(suggestions))
            return 2
        console.print(_exam_table(args.subject, exams))
        return 0

    subjects = search_subjects(args.search)
    if not subjects:
        console.print(f"No subjects match '{args.search}'.")
        return 1
    table = Table(title="Disciplinas", box=box.SIMPLE)
    table.add_column("Subject")
    table.add_column("Exams", justify="right")
    for subject in subjects:
        table.add_row(subject, str(len(exams_for_subject(subject))))
    console.print(table)
    console.print(f"[dim]Mostrando {len(subjects)} disciplinas[/]")
    return 0


def _exam_table(subject: str, exams: Sequence[Exam]) -> Table:
    kinds = {inst.name: inst.kind for inst in INSTITUTIONS}
    table = Table(title=subject, box=box.SIMPLE)
    table.add_column("Institution", style="cyan")
    table.add_column("Kind")
    table.add_column("Year", justify="right")
    table.add_column("Period")
    table.add_column("Start with")
    for exam in exams:
        table.add_row(
            exam.institution,
            kinds.get(exam.institution, ""),
            str(exam.year),
            exam.period,
            f'jusmind quiz "{exam.subject}" --context {exam.context_tag}',
        )
    return table


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    sys.exit(main())
