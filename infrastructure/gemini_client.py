# infrastructure/gemini_client.py

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Sequence

import google.generativeai as genai

from config.settings import Settings
from domain.ai_provider import AIClientError, AICompletionProvider, AIProviderName
from domain.models import ChatMessage, PhotoAsset, Sender
from domain.prompt import PRODUCT_DESCRIPTION_PROMPT

logger = logging.getLogger(__name__)


class GeminiClientError(AIClientError):
    """
    Exception fonctionnelle pour les erreurs Gemini.
    """


class GeminiCompletionClient(AICompletionProvider):
    """
    Provider IA pour Google Gemini (vision + chat).

    Le texte renvoyé est brut : aucune mise en forme n'est exigée du modèle,
    la normalisation est faite par domain.normalizer.
    """

    def __init__(self, settings: Settings) -> None:
        logger.debug("Initialisation GeminiCompletionClient...")
        if not settings.gemini_api_key:
            raise GeminiClientError("GEMINI_API_KEY absente.")

        genai.configure(api_key=settings.gemini_api_key)
        self._model_name = self._normalize_model_name(settings.gemini_model)
        self._max_tokens = settings.max_tokens
        self._timeout = settings.request_timeout

        logger.info("GeminiCompletionClient initialisé (model=%s).", self._model_name)

    @property
    def name(self) -> AIProviderName:
        return AIProviderName.GEMINI

    @staticmethod
    def _normalize_model_name(model_name: str) -> str:
        """
        Gemini attend le préfixe "models/". Un nom court
        (ex: "gemini-2.5-flash") est préfixé automatiquement.
        """
        cleaned = (model_name or "").strip()
        if not cleaned:
            raise GeminiClientError("Nom de modèle Gemini manquant ou vide.")

        if not cleaned.startswith("models/"):
            logger.debug("Nom de modèle Gemini sans préfixe 'models/': %s. Préfixage automatique.", cleaned)
            cleaned = f"models/{cleaned}"

        return cleaned

    # ------------------------------------------------------------------
    # Méthodes principales
    # ------------------------------------------------------------------

    def describe_photo(self, photo: PhotoAsset) -> str:
        logger.info("Gemini.describe_photo(photo=%s, mime=%s)", photo.path, photo.mime_type)
        try:
            image_bytes = base64.b64decode(photo.base64_data)
        except (ValueError, TypeError) as exc:
            raise GeminiClientError(f"Photo mal encodée: {exc}") from exc

        parts: List[Any] = [
            PRODUCT_DESCRIPTION_PROMPT,
            {
                "mime_type": photo.mime_type,
                "data": image_bytes,
            },
        ]

        try:
            model = genai.GenerativeModel(self._model_name)
            response = model.generate_content(
                contents=parts,
                generation_config={"max_output_tokens": self._max_tokens},
                request_options={"timeout": self._timeout},
            )
            return self._response_text(response)
        except GeminiClientError:
            raise
        except Exception as exc:
            logger.exception("Erreur appel API Gemini (vision).")
            raise GeminiClientError(f"Erreur API Gemini: {exc}") from exc

    def chat(self, history: Sequence[ChatMessage]) -> str:
        if not history:
            raise GeminiClientError("Historique de chat vide.")

        *previous, last = history
        if last.sender is not Sender.USER:
            raise GeminiClientError("Le dernier message doit venir de l'utilisateur.")

        logger.info("Gemini.chat(%d message(s))", len(history))
        try:
            model = genai.GenerativeModel(self._model_name)
            session = model.start_chat(history=self._to_gemini_history(previous))
            response = session.send_message(last.text, request_options={"timeout": self._timeout})
            return self._response_text(response).strip()
        except GeminiClientError:
            raise
        except Exception as exc:
            logger.exception("Erreur appel API Gemini (chat).")
            raise GeminiClientError(f"Erreur API Gemini: {exc}") from exc

    # ------------------------------------------------------------------
    # Utilitaires
    # ------------------------------------------------------------------

    @staticmethod
    def _to_gemini_history(messages: Sequence[ChatMessage]) -> List[Dict[str, Any]]:
        # Gemini nomme "model" le rôle assistant
        return [
            {
                "role": "model" if msg.sender is Sender.AI else "user",
                "parts": [msg.text],
            }
            for msg in messages
        ]

    @staticmethod
    def _response_text(response: Any) -> str:
        text = response.text
        if not text:
            raise GeminiClientError("Réponse Gemini vide (text=None ou '').")
        logger.debug("Texte brut Gemini: %s", text)
        return text
