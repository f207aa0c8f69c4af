# domain/models.py

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductDescription:
    """
    Fiche produit structurée (titre + description) issue d'une réponse IA.

    Ce modèle ne gère pas l'UI, ni l'API.
    Il est reconstruit à chaque normalisation et n'est jamais persisté.
    """

    title: str = ""
    description: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.title and not self.description

    # ------------------------------------------------------------------ #
    # Sérialisation
    # ------------------------------------------------------------------ #

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductDescription":
        """
        Construit une fiche depuis un dict {"title": ..., "description": ...}.
        Les champs absents ou None deviennent des chaînes vides.
        Lève ValueError si un champ n'est pas une chaîne.
        """
        title = data.get("title") or ""
        description = data.get("description") or ""

        errors = []
        if not isinstance(title, str):
            errors.append(f"title doit être une chaîne (reçu {type(title).__name__}).")
        if not isinstance(description, str):
            errors.append(f"description doit être une chaîne (reçu {type(description).__name__}).")

        if errors:
            logger.error("ProductDescription.from_dict invalide: %s | data=%r", errors, data)
            raise ValueError(" / ".join(errors))

        return cls(title=title, description=description)

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


class Sender(Enum):
    """
    Auteur d'un message du chat produit.
    """
    USER = "user"
    AI = "ai"

    @property
    def api_role(self) -> str:
        """Rôle attendu par les API chat completion."""
        return "assistant" if self is Sender.AI else "user"


@dataclass(frozen=True)
class ChatMessage:
    id: str
    text: str
    sender: Sender

    @classmethod
    def create(cls, text: str, sender: Sender, suffix: str = "") -> "ChatMessage":
        """Identifiant basé sur l'horodatage en millisecondes (+ suffixe optionnel)."""
        return cls(id=f"{int(time.time() * 1000)}{suffix}", text=text, sender=sender)

    def to_api_message(self) -> Dict[str, str]:
        return {"role": self.sender.api_role, "content": self.text}


@dataclass(frozen=True)
class PhotoAsset:
    """
    Photo sélectionnée par l'utilisateur, prête à être envoyée à l'IA.
    """

    path: Path
    mime_type: str
    base64_data: str

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"
