# infrastructure/ai_factory.py

from __future__ import annotations

import logging
from typing import Dict

from config.settings import Settings
from domain.ai_provider import AIProviderName, AICompletionProvider
from infrastructure.gemini_client import GeminiCompletionClient
from infrastructure.openai_client import OpenAICompletionClient

logger = logging.getLogger(__name__)


def build_providers(settings: Settings) -> Dict[AIProviderName, AICompletionProvider]:
    """
    Instancie les providers IA disponibles.

    Un provider sans clé est ignoré (log d'erreur) ; si aucune clé n'est
    définie, loggue et retourne un dict vide.
    """
    providers: Dict[AIProviderName, AICompletionProvider] = {}

    if settings.openai_api_key:
        try:
            providers[AIProviderName.OPENAI] = OpenAICompletionClient(settings)
            logger.info("Provider OpenAI initialisé.")
        except Exception as exc:
            logger.error("Impossible d'initialiser OpenAI: %s", exc)
    else:
        logger.info("OPENAI_API_KEY absente, provider OpenAI ignoré.")

    if settings.gemini_api_key:
        try:
            providers[AIProviderName.GEMINI] = GeminiCompletionClient(settings)
            logger.info("Provider Gemini initialisé.")
        except Exception as exc:
            logger.error("Impossible d'initialiser Gemini: %s", exc)
    else:
        logger.info("GEMINI_API_KEY absente, provider Gemini ignoré.")

    if not providers:
        logger.critical("Aucun provider IA disponible.")
    else:
        logger.debug("Providers IA disponibles: %s", [p.value for p in providers])

    return providers


def select_default_provider(
    providers: Dict[AIProviderName, AICompletionProvider],
    settings: Settings,
) -> AIProviderName:
    """
    Provider actif au démarrage : celui demandé par AI_PROVIDER s'il est
    disponible, sinon le premier initialisé.
    """
    if not providers:
        raise RuntimeError("Aucun provider IA disponible.")

    try:
        preferred = AIProviderName(settings.preferred_provider)
    except ValueError:
        preferred = None

    if preferred in providers:
        return preferred

    fallback = next(iter(providers))
    logger.warning(
        "Provider préféré '%s' indisponible, utilisation de '%s'.",
        settings.preferred_provider,
        fallback.value,
    )
    return fallback
