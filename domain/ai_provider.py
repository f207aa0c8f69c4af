# domain/ai_provider.py

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence

from domain.models import ChatMessage, PhotoAsset

logger = logging.getLogger(__name__)


class AIProviderName(Enum):
    """
    Fournisseurs IA disponibles pour décrire une photo et discuter produit.
    """
    OPENAI = "openai"
    GEMINI = "gemini"


class AIClientError(RuntimeError):
    """
    Exception fonctionnelle commune aux providers IA
    (timeout, HTTP non-2xx, enveloppe JSON illisible, réponse vide...).
    """


class AICompletionProvider(ABC):
    """
    Interface commune pour un fournisseur d'IA multimodal.

    Chaque implémentation doit :
    - décrire une photo produit et renvoyer le texte brut du modèle
    - répondre à une conversation et renvoyer le texte brut de la réponse
    - lever une sous-classe de AIClientError en cas de problème côté provider

    Le provider ne normalise jamais le texte : c'est le rôle de domain.normalizer.
    """

    @property
    @abstractmethod
    def name(self) -> AIProviderName:
        """
        Nom logique du provider.
        """
        raise NotImplementedError

    @abstractmethod
    def describe_photo(self, photo: PhotoAsset) -> str:
        """
        Envoie la photo avec la consigne de description produit
        et renvoie la complétion brute.
        """
        raise NotImplementedError

    @abstractmethod
    def chat(self, history: Sequence[ChatMessage]) -> str:
        """
        Envoie l'historique complet (dernier message = question utilisateur)
        et renvoie la réponse brute de l'assistant.
        """
        raise NotImplementedError
