"""Map a topic and optional exam context onto generation parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "Modality",
    "PromptProfile",
    "INTRODUCTORY_LEVEL",
    "OPEN_ENDED_KEYWORDS",
    "INSTITUTION_PROFILES",
    "profile",
]


class Modality(str, Enum):
    OBJECTIVE = "objective"
    OPEN_ENDED = "open_ended"


@dataclass(frozen=True)
class PromptProfile:
    difficulty_label: str
    style_directive: str
    item_count: int
    modality: Modality


@dataclass(frozen=True)
class _InstitutionProfile:
    keywords: tuple[str, ...]
    difficulty_label: str
    focus: str


INTRODUCTORY_LEVEL = "Nível Graduação (OAB 1ª Fase)"
OBJECTIVE_STYLE = "Questões de múltipla escolha (4 opções)."
OPEN_ENDED_STYLE = (
    "Questões discursivas (dissertativas ou estudo de caso) com espelho de "
    "correção."
)

OPEN_ENDED_KEYWORDS = ("discursiva", "peça")

INSTITUTION_PROFILES = (
    _InstitutionProfile(
        keywords=("tjrj",),
        difficulty_label="NÍVEL TRIBUNAL DE JUSTIÇA (ANALISTA/MAGISTRATURA)",
        focus=(
            "Foco em lei seca, prazos processuais (CPC/CPP) e jurisprudência "
            "do STJ. Estilo Cebraspe/FGV."
        ),
    ),
    _InstitutionProfile(
        keywords=("alerj",),
        difficulty_label="NÍVEL LEGISLATIVO ESTADUAL (ALERJ)",
        focus=(
            "Foco em Direito Administrativo, Processo Legislativo "
            "Constitucional, Regimento Interno e Constitucional Estadual do RJ."
        ),
    ),
    _InstitutionProfile(
        keywords=("pge", "procuradoria"),
        difficulty_label="NÍVEL PROCURADORIA (ADVOCACIA PÚBLICA)",
        focus=(
            "Foco em Fazenda Pública em Juízo, Tributário, Administrativo "
            "aprofundado e teses favoráveis ao Estado."
        ),
    ),
)

_OPEN_ENDED_COUNT = 2
_EXAM_COUNT = 10
_PRACTICE_COUNT = 5


def profile(topic: str, context_tag: str = "") -> PromptProfile:
    """Return difficulty, style, item count and modality for a quiz.

    Open-ended keywords in the context tag or topic win over everything
    else; a non-empty tag means an exam-length objective set; no context
    means a short introductory set.
    """
    tag = _normalize(context_tag or "")
    subject = _normalize(topic or "")
    institution = _match_institution(tag) if tag else None

    if _mentions_open_ended(tag) or _mentions_open_ended(subject):
        return PromptProfile(
            difficulty_label=(
                institution.difficulty_label
                if institution
                else INTRODUCTORY_LEVEL
            ),
            style_directive=OPEN_ENDED_STYLE,
            item_count=_OPEN_ENDED_COUNT,
            modality=Modality.OPEN_ENDED,
        )
    if tag:
        if institution is None:
            return PromptProfile(
                difficulty_label=INTRODUCTORY_LEVEL,
                style_directive=OBJECTIVE_STYLE,
                item_count=_EXAM_COUNT,
                modality=Modality.OBJECTIVE,
            )
        return PromptProfile(
            difficulty_label=institution.difficulty_label,
            style_directive=f"{OBJECTIVE_STYLE} {institution.focus}",
            item_count=_EXAM_COUNT,
            modality=Modality.OBJECTIVE,
        )
    return PromptProfile(
        difficulty_label=INTRODUCTORY_LEVEL,
        style_directive=OBJECTIVE_STYLE,
        item_count=_PRACTICE_COUNT,
        modality=Modality.OBJECTIVE,
    )


def _normalize(value: str) -> str:
    # Case-folded only; "peça" keeps its cedilla.
    return value.strip().casefold()


def _mentions_open_ended(value: str) -> bool:
    return bool(value) and any(
        keyword in value for keyword in OPEN_ENDED_KEYWORDS
    )


def _match_institution(tag: str) -> _InstitutionProfile | None:
    for candidate in INSTITUTION_PROFILES:
        if any(keyword in tag for keyword in candidate.keywords):
            return candidate
    return None
