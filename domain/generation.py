# domain/generation.py

"""
Frontière requête/réponse entre l'UI et les providers IA.

Les appels réseau sont encapsulés dans un CompletionOutcome : l'UI reçoit
toujours un résultat structuré, jamais une exception. Le normaliseur n'est
appelé que sur une complétion réussie.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from domain.ai_provider import AIClientError, AICompletionProvider
from domain.ai_status import AIResultStatus, CompletionOutcome
from domain.models import ChatMessage, PhotoAsset, ProductDescription, Sender
from domain.normalizer import normalize
from domain.prompt import CHAT_FAILED_MESSAGE, GENERATION_FAILED_MESSAGE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    outcome: CompletionOutcome
    description: Optional[ProductDescription] = None
    user_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome.ok and self.description is not None


def _to_outcome(label: str, text: Optional[str]) -> CompletionOutcome:
    if text is None or not text.strip():
        logger.warning("%s: réponse IA vide.", label)
        return CompletionOutcome.failure(AIResultStatus.EMPTY_RESPONSE, "Réponse IA vide.")
    return CompletionOutcome.success(text)


# ---------------------------------------------------------------------------
# Description produit depuis une photo
# ---------------------------------------------------------------------------

def request_product_description(
    provider: AICompletionProvider,
    photo: PhotoAsset,
) -> CompletionOutcome:
    """Appelle provider.describe_photo() sans jamais lever."""
    logger.info(
        "Demande de description produit (provider=%s, photo=%s).",
        provider.name.value,
        photo.path,
    )
    try:
        return _to_outcome("describe_photo", provider.describe_photo(photo))
    except AIClientError as exc:
        logger.error("Echec description produit (%s): %s", provider.name.value, exc)
        return CompletionOutcome.failure(AIResultStatus.API_ERROR, str(exc))
    except Exception as exc:
        logger.exception("Erreur inattendue pendant la description produit.")
        return CompletionOutcome.failure(AIResultStatus.INTERNAL_ERROR, f"Erreur inattendue: {exc}")


def generate_product_description(
    provider: AICompletionProvider,
    photo: PhotoAsset,
) -> GenerationResult:
    """
    Appel IA + normalisation.

    En cas d'échec, le normaliseur n'est pas appelé et un message de repli
    destiné à l'utilisateur est renvoyé.
    """
    outcome = request_product_description(provider, photo)
    if not outcome.ok:
        return GenerationResult(outcome=outcome, user_message=GENERATION_FAILED_MESSAGE)

    description = normalize(outcome.text)
    logger.info("Fiche produit générée: '%s'.", description.title)
    return GenerationResult(outcome=outcome, description=description)


# ---------------------------------------------------------------------------
# Chat produit
# ---------------------------------------------------------------------------

def request_chat_reply(
    provider: AICompletionProvider,
    history: Sequence[ChatMessage],
) -> CompletionOutcome:
    """Appelle provider.chat() sans jamais lever."""
    logger.info(
        "Demande de réponse chat (provider=%s, %d message(s)).",
        provider.name.value,
        len(history),
    )
    try:
        return _to_outcome("chat", provider.chat(history))
    except AIClientError as exc:
        logger.error("Echec réponse chat (%s): %s", provider.name.value, exc)
        return CompletionOutcome.failure(AIResultStatus.API_ERROR, str(exc))
    except Exception as exc:
        logger.exception("Erreur inattendue pendant la réponse chat.")
        return CompletionOutcome.failure(AIResultStatus.INTERNAL_ERROR, f"Erreur inattendue: {exc}")


def reply_to_chat(
    provider: AICompletionProvider,
    history: Sequence[ChatMessage],
) -> ChatMessage:
    """Message IA à ajouter à la conversation (réponse ou message d'erreur)."""
    outcome = request_chat_reply(provider, history)
    if outcome.ok:
        return ChatMessage.create(outcome.text.strip(), Sender.AI, suffix="ai")
    return ChatMessage.create(CHAT_FAILED_MESSAGE, Sender.AI, suffix="error")
