"""Prompt templates sent to the text generator.

The generator has no typed schema channel, so structured requests describe
the expected JSON array in prose and the client repairs whatever comes back.
"""

from __future__ import annotations

import json
from enum import Enum

from ..questions import DiscursiveQuestion
from .profiler import Modality, PromptProfile

__all__ = [
    "SYSTEM_INSTRUCTION",
    "ChatMode",
    "build_quiz_brief",
    "build_structured_prompt",
    "build_chat_prompt",
    "build_deep_dive_prompt",
    "build_lesson_prompt",
    "build_concepts_prompt",
]

SYSTEM_INSTRUCTION = """
Você é o JusMind, um tutor especialista em Direito Brasileiro e preparação \
para Concursos de Alto Nível (Magistratura, MP, Procuradorias, Tribunais, \
ALERJ).

**DIRETRIZES ESTRITAS:**
1. **Fundamentação Legal:** Cite o artigo exato (CF/88, Leis, Códigos).
2. **Jurisprudência:** Cite Súmulas (STF/STJ) e Repercussão Geral sempre \
que pertinente.
3. **Doutrina:** Cite autores clássicos quando houver divergência.
4. **Localização:** Considere a legislação específica do Rio de Janeiro \
quando o contexto for TJRJ, ALERJ ou PGE-RJ.

**FORMATO:** Use Markdown. Negrito para prazos e exceções.
""".strip()

_CONCEPTS_SOURCE_LIMIT = 3000


class ChatMode(str, Enum):
    RESOLVER = "resolver"
    SOCRATIC = "socratic"


_CHAT_TEMPLATES = {
    ChatMode.SOCRATIC: (
        'MODO SOCRÁTICO (HERMENÊUTICA): O aluno perguntou: "{message}". '
        "NÃO dê a resposta completa. Faça perguntas que o levem a consultar "
        "o Vade Mecum ou raciocinar sobre os princípios. Se ele errar, "
        "corrija indicando o artigo de lei correto."
    ),
    ChatMode.RESOLVER: (
        'MODO DOUTRINADOR: O aluno perguntou: "{message}". Forneça a '
        "solução completa seguindo a estrutura: Conceito -> Artigos de Lei "
        "-> Jurisprudência -> Conclusão."
    ),
}


def _objective_example(topic: str) -> dict:
    return {
        "id": "...",
        "type": "objective",
        "topic": topic,
        "difficulty": "Médio",
        "text": "Enunciado da questão...",
        "options": [
            "Alternativa A",
            "Alternativa B",
            "Alternativa C",
            "Alternativa D",
        ],
        "correctAnswerIndex": 0,
        "explanation": (
            "Fundamentação jurídica: A alternativa correta é a A pois "
            "conforme o Art. X da Lei Y..."
        ),
    }


def _discursive_example(topic: str) -> dict:
    return {
        "id": "...",
        "type": "discursive",
        "topic": topic,
        "difficulty": "Difícil",
        "text": (
            "Descreva um caso prático complexo ou uma pergunta teórica "
            "profunda que exija raciocínio jurídico..."
        ),
        "referenceAnswer": (
            "ESPELHO DE RESPOSTA (O que o candidato deve responder): "
            "1. Deve citar o princípio X... 2. Deve mencionar a Súmula Y... "
            "3. Conclusão no sentido Z..."
        ),
        "explanation": "Comentários adicionais sobre a doutrina aplicável.",
    }


def build_quiz_brief(topic: str, profile: PromptProfile) -> str:
    """Describe the question set to generate, without the output schema."""
    if profile.modality is Modality.OPEN_ENDED:
        kind = "questões DISCURSIVAS (Dissertativas ou Estudo de Caso)"
    else:
        kind = "questões OBJETIVAS"
    return (
        f'Gere {kind} de Direito sobre "{topic}".\n\n'
        f"CONTEXTO: {profile.difficulty_label}\n"
        f"ESTILO: {profile.style_directive}"
    )


def build_structured_prompt(
    brief: str,
    *,
    modality: Modality,
    expected_count: int,
    topic: str,
) -> str:
    """Append the JSON-array schema and the requested item count to ``brief``."""
    if modality is Modality.OPEN_ENDED:
        example = _discursive_example(topic)
        fields = (
            '"type" deve ser "discursive"; inclua "referenceAnswer" '
            '(espelho de correção) e nunca "options".'
        )
    else:
        example = _objective_example(topic)
        fields = (
            '"type" deve ser "objective"; "options" com 4 alternativas; '
            '"correctAnswerIndex" é o índice (a partir de 0) da correta.'
        )
    schema = json.dumps([example], ensure_ascii=False, indent=2)
    return (
        f"{brief}\n\n"
        f"Quantidade: EXATAMENTE {expected_count} questões.\n"
        'Valores de "difficulty": "Fácil", "Médio" ou "Difícil". '
        f"{fields}\n\n"
        "Responda SOMENTE com um JSON Array válido, sem comentários.\n"
        f"Schema Obrigatório (JSON Array):\n{schema}"
    )


def build_chat_prompt(message: str, mode: ChatMode) -> str:
    return _CHAT_TEMPLATES[ChatMode(mode)].format(message=message)


def build_deep_dive_prompt(
    question: DiscursiveQuestion, user_answer: str | None = None
) -> str:
    """Ask for an in-depth analysis of a discursive item."""
    parts = [
        "Atue como um Professor de Direito e examinador de banca. Analise em "
        "profundidade a questão discursiva abaixo.",
        f'Questão: "{question.text}"',
    ]
    if question.reference_answer:
        parts.append(f"Espelho de correção: {question.reference_answer}")
    if user_answer and user_answer.strip():
        parts.append(f"Resposta do candidato: {user_answer.strip()}")
        parts.append(
            "Compare a resposta do candidato com o espelho, apontando acertos, "
            "omissões e erros."
        )
    parts.append(
        "Estrutura: Tese Jurídica -> Fundamentação Legal -> Jurisprudência "
        "-> Conclusão."
    )
    return "\n".join(parts)


def build_lesson_prompt(topic: str) -> str:
    return (
        f'Crie uma aula de Direito completa sobre "{topic}" focada em '
        "concursos públicos e graduação. Use Markdown rico."
    )


def build_concepts_prompt(content: str) -> str:
    excerpt = content[:_CONCEPTS_SOURCE_LIMIT]
    return (
        "Extraia os 5 principais conceitos jurídicos (bullet points) deste "
        f"texto: {excerpt}..."
    )
