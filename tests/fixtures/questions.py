"""Generated-question payload builders."""

from __future__ import annotations

import json
from typing import Any, Dict


def objective_payload(index: int = 0, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": f"service-{index}",
        "type": "objective",
        "topic": "Direito Administrativo",
        "difficulty": "Médio",
        "text": f"Enunciado {index}",
        "options": ["Alternativa A", "Alternativa B", "Alternativa C", "Alternativa D"],
        "correctAnswerIndex": 1,
        "explanation": f"Fundamentação {index}",
    }
    payload.update(overrides)
    return payload


def discursive_payload(index: int = 0, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": f"service-d{index}",
        "type": "discursive",
        "topic": "Direito Constitucional",
        "difficulty": "Difícil",
        "text": f"Caso prático {index}",
        "referenceAnswer": f"Espelho {index}",
        "explanation": f"Comentário {index}",
    }
    payload.update(overrides)
    return payload


def payload_json(*payloads: Dict[str, Any], fenced: bool = False) -> str:
    text = json.dumps(list(payloads), ensure_ascii=False)
    if fenced:
        return f"Aqui estão as questões:\n```json\n{text}\n```\nBons estudos!"
    return text
