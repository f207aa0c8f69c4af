# config/settings.py

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_VISION_MODEL = "gpt-4o"
DEFAULT_OPENAI_CHAT_MODEL = "gpt-4"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_MAX_TOKENS = 300
DEFAULT_REQUEST_TIMEOUT = 30.0
KNOWN_PROVIDERS = ("openai", "gemini")


def _load_dotenv_if_present(env_file: str | Path = ".env") -> None:
    """
    Charge un fichier `.env` local si présent et injecte les variables
    manquantes dans l'environnement process.

    - ignore les lignes vides ou commentées
    - ne surcharge jamais une variable déjà définie dans l'environnement
    - retire les guillemets entourant une valeur (KEY="valeur")
    """
    env_path = Path(env_file)
    logger.debug("Recherche d'un fichier .env local à charger: %s", env_path)

    if not env_path.exists():
        logger.info("Aucun fichier .env trouvé à %s, passage en mode variables système.", env_path)
        return

    try:
        for line_no, raw_line in enumerate(env_path.read_text(encoding="utf-8").splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
                value = value[1:-1]

            if not key:
                logger.warning("Ligne %d du .env ignorée (clé vide).", line_no)
                continue

            if os.getenv(key) is None:
                os.environ[key] = value
                logger.debug("Variable %s chargée depuis .env.", key)
            else:
                logger.debug("Variable %s déjà définie dans l'environnement, .env laissé intact.", key)

        logger.info("Chargement du fichier .env terminé.")
    except Exception as exc:  # pragma: no cover - robustesse
        logger.exception("Echec du chargement du fichier .env: %s", exc)
        raise RuntimeError(f"Erreur lors du chargement du fichier .env: {exc}") from exc


@dataclass
class Settings:
    """
    Configuration applicative centrale.

    - openai_api_key      : clé API OpenAI (optionnelle si Gemini est configuré)
    - openai_vision_model : modèle utilisé pour décrire une photo
    - openai_chat_model   : modèle utilisé pour le chat produit
    - max_tokens          : plafond de tokens pour la description photo
    - request_timeout     : timeout HTTP (secondes), détenu par l'appelant
    - gemini_api_key      : clé API Gemini (optionnelle)
    - gemini_model        : nom du modèle Gemini
    - preferred_provider  : provider sélectionné au démarrage ("openai" ou "gemini")
    """
    openai_api_key: Optional[str] = None
    openai_vision_model: str = DEFAULT_OPENAI_VISION_MODEL
    openai_chat_model: str = DEFAULT_OPENAI_CHAT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL

    preferred_provider: str = "openai"


def _read_key(name: str) -> Optional[str]:
    raw = os.getenv(name)
    return raw.strip() if raw and raw.strip() else None


def _read_model(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is not None and raw.strip():
        return raw.strip()
    if raw is not None:
        logger.warning("%s est défini mais vide, utilisation du modèle par défaut '%s'.", name, default)
    return default


def _read_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError as exc:
        logger.error("%s invalide: %r", name, raw)
        raise RuntimeError(f"{name} doit être un nombre (valeur reçue: {raw!r}).") from exc
    if value <= 0:
        logger.error("%s doit être strictement positif: %r", name, raw)
        raise RuntimeError(f"{name} doit être strictement positif (valeur reçue: {raw!r}).")
    return value


def load_settings() -> Settings:
    """
    Charge la configuration à partir des variables d’environnement.

    Variables prises en compte :
    - OPENAI_API_KEY, OPENAI_VISION_MODEL, OPENAI_CHAT_MODEL, OPENAI_MAX_TOKENS
    - GEMINI_API_KEY, GEMINI_MODEL
    - REQUEST_TIMEOUT, AI_PROVIDER

    Au moins une clé API est obligatoire.
    Lève RuntimeError en cas de problème bloquant.
    """
    logger.debug("Chargement des Settings depuis les variables d'environnement.")

    try:
        _load_dotenv_if_present()
    except Exception as env_exc:
        logger.error("Impossible de précharger le fichier .env: %s", env_exc, exc_info=True)
        raise

    try:
        openai_key = _read_key("OPENAI_API_KEY")
        gemini_key = _read_key("GEMINI_API_KEY")

        if openai_key is None and gemini_key is None:
            logger.error("Aucune clé API (OPENAI_API_KEY / GEMINI_API_KEY) n'est définie.")
            raise RuntimeError(
                "OPENAI_API_KEY ou GEMINI_API_KEY doit être définie. "
                "Lance scripts/configure_api_keys.py ou renseigne le fichier .env."
            )

        preferred = (os.getenv("AI_PROVIDER") or "").strip().lower()
        if preferred and preferred not in KNOWN_PROVIDERS:
            logger.warning("AI_PROVIDER inconnu (%r), sélection automatique.", preferred)
            preferred = ""
        if not preferred:
            preferred = "openai" if openai_key else "gemini"

        settings = Settings(
            openai_api_key=openai_key,
            openai_vision_model=_read_model("OPENAI_VISION_MODEL", DEFAULT_OPENAI_VISION_MODEL),
            openai_chat_model=_read_model("OPENAI_CHAT_MODEL", DEFAULT_OPENAI_CHAT_MODEL),
            max_tokens=_read_number("OPENAI_MAX_TOKENS", DEFAULT_MAX_TOKENS, int),
            request_timeout=_read_number("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float),
            gemini_api_key=gemini_key,
            gemini_model=_read_model("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            preferred_provider=preferred,
        )

        logger.info(
            "Settings chargés (provider='%s', vision='%s', chat='%s', OpenAI_key=%s, Gemini_key=%s).",
            settings.preferred_provider,
            settings.openai_vision_model,
            settings.openai_chat_model,
            "présente" if settings.openai_api_key else "absente",
            "présente" if settings.gemini_api_key else "absente",
        )
        return settings

    except RuntimeError:
        # Erreur fonctionnelle déjà logguée, on la propage telle quelle
        raise
    except Exception as exc:
        logger.exception("Erreur inattendue lors du chargement des Settings.")
        raise RuntimeError(
            f"Erreur inattendue lors du chargement de la configuration: {exc}"
        ) from exc
