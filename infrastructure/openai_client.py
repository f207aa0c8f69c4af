# infrastructure/openai_client.py

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

import requests
from jsonschema import ValidationError, validate

from config.settings import Settings
from domain.ai_provider import AIClientError, AICompletionProvider, AIProviderName
from domain.models import ChatMessage, PhotoAsset
from domain.prompt import PRODUCT_DESCRIPTION_PROMPT

logger = logging.getLogger(__name__)

# Enveloppe minimale attendue de /v1/chat/completions
COMPLETION_ENVELOPE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["choices"],
    "properties": {
        "choices": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["message"],
                "properties": {
                    "message": {
                        "type": "object",
                        "required": ["content"],
                        "properties": {
                            "content": {"type": "string"},
                        },
                    },
                },
            },
        },
    },
}


class OpenAIClientError(AIClientError):
    """
    Exception fonctionnelle pour les erreurs OpenAI.
    """


class OpenAICompletionClient(AICompletionProvider):
    """
    Implémentation du provider IA pour OpenAI (chat/completions).

    - describe_photo : modèle vision (ex. gpt-4o), une image en data URL
    - chat           : modèle texte (ex. gpt-4), historique complet
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        logger.debug("Initialisation OpenAICompletionClient...")
        if not settings.openai_api_key:
            raise OpenAIClientError("OPENAI_API_KEY absente.")

        self.api_key = settings.openai_api_key
        self.vision_model = settings.openai_vision_model
        self.chat_model = settings.openai_chat_model
        self.max_tokens = settings.max_tokens
        self.timeout = settings.request_timeout
        self.endpoint = "https://api.openai.com/v1/chat/completions"
        self._http = session or requests

        logger.info(
            "OpenAICompletionClient initialisé (vision=%s, chat=%s, timeout=%ss).",
            self.vision_model,
            self.chat_model,
            self.timeout,
        )

    # ------------------------------------------------------------------
    # Nom du provider
    # ------------------------------------------------------------------

    @property
    def name(self) -> AIProviderName:
        return AIProviderName.OPENAI

    # ------------------------------------------------------------------
    # Méthodes principales
    # ------------------------------------------------------------------

    def describe_photo(self, photo: PhotoAsset) -> str:
        logger.info("OpenAI.describe_photo(photo=%s, mime=%s)", photo.path, photo.mime_type)
        payload = self._build_vision_payload(photo)
        return self._extract_content(self._call_api(payload))

    def chat(self, history: Sequence[ChatMessage]) -> str:
        if not history:
            raise OpenAIClientError("Historique de chat vide.")
        logger.info("OpenAI.chat(%d message(s))", len(history))
        payload = self._build_chat_payload(history)
        return self._extract_content(self._call_api(payload)).strip()

    # ------------------------------------------------------------------
    # Construction des payloads
    # ------------------------------------------------------------------

    def _build_vision_payload(self, photo: PhotoAsset) -> Dict[str, Any]:
        """
        Payload /v1/chat/completions : un message user contenant
        la consigne texte puis l'image (data URL base64).
        """
        user_content: List[Dict[str, Any]] = [
            {
                "type": "text",
                "text": PRODUCT_DESCRIPTION_PROMPT,
            },
            {
                "type": "image_url",
                "image_url": {
                    "url": photo.data_url,
                },
            },
        ]

        payload: Dict[str, Any] = {
            "model": self.vision_model,
            "messages": [
                {
                    "role": "user",
                    "content": user_content,
                },
            ],
            "max_tokens": self.max_tokens,
        }
        logger.debug("Payload vision OpenAI construit (model=%s).", self.vision_model)
        return payload

    def _build_chat_payload(self, history: Sequence[ChatMessage]) -> Dict[str, Any]:
        messages = [msg.to_api_message() for msg in history]
        logger.debug("Payload chat OpenAI construit (%d messages, model=%s).", len(messages), self.chat_model)
        return {
            "model": self.chat_model,
            "messages": messages,
        }

    # ------------------------------------------------------------------
    # Appel HTTP
    # ------------------------------------------------------------------

    def _call_api(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug("Appel API OpenAI (model=%s)...", payload.get("model"))
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self._http.post(
                self.endpoint,
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )

            if not response.ok:
                logger.error(
                    "Erreur HTTP OpenAI (%d): %s",
                    response.status_code,
                    response.text,
                )
                raise OpenAIClientError(
                    f"Erreur API OpenAI (HTTP {response.status_code}): {response.text}"
                )

            try:
                r_json = response.json()
            except ValueError as exc:
                logger.error("Enveloppe OpenAI non JSON: %s", response.text[:300])
                raise OpenAIClientError("Réponse OpenAI illisible (JSON invalide).") from exc

            logger.debug("OpenAI réponse reçue (tronc.): %s", str(r_json)[:400])
            return r_json

        except OpenAIClientError:
            raise
        except requests.exceptions.Timeout as exc:
            logger.error("Timeout OpenAI (%ss).", self.timeout)
            raise OpenAIClientError("Timeout API OpenAI.") from exc
        except requests.exceptions.RequestException as exc:
            logger.exception("Erreur réseau OpenAI.")
            raise OpenAIClientError(f"Erreur réseau: {exc}") from exc

    # ------------------------------------------------------------------
    # Extraction du texte
    # ------------------------------------------------------------------

    def _extract_content(self, api_response: Dict[str, Any]) -> str:
        """
        Récupère le texte brut généré par OpenAI.

        chat/completions -> choices[0].message.content
        """
        try:
            validate(instance=api_response, schema=COMPLETION_ENVELOPE_SCHEMA)
        except ValidationError as exc:
            logger.error("Enveloppe OpenAI non conforme: %s", exc.message)
            raise OpenAIClientError(f"Réponse OpenAI inattendue: {exc.message}") from exc

        content = api_response["choices"][0]["message"]["content"]
        if not content.strip():
            raise OpenAIClientError("Réponse OpenAI sans content.")

        logger.debug("Texte brut OpenAI: %s", content)
        return content
