# domain/ai_status.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AIResultStatus(str, Enum):
    OK = "ok"

    # erreurs IA/format
    EMPTY_RESPONSE = "empty_response"

    # erreurs infra
    API_ERROR = "api_error"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class CompletionOutcome:
    """
    Résultat unique d'un appel de complétion : texte brut ou échec structuré.
    """

    status: AIResultStatus
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is AIResultStatus.OK

    @classmethod
    def success(cls, text: str) -> "CompletionOutcome":
        return cls(status=AIResultStatus.OK, text=text)

    @classmethod
    def failure(cls, status: AIResultStatus, error: str) -> "CompletionOutcome":
        if status is AIResultStatus.OK:
            raise ValueError("Un échec ne peut pas avoir le statut OK.")
        return cls(status=status, error=error)
