# config/log_config.py

"""
Logging console de Product Snap Assistant.

Les paquets de l'application suivent le niveau demandé ; les
bibliothèques HTTP, Pillow et le SDK Gemini sont limitées pour garder la
console lisible pendant les appels IA.
"""

from __future__ import annotations

import logging
import logging.config
from copy import deepcopy
from typing import Any, Dict

# -----------------------------
# Niveau custom "SUCCESS"
# -----------------------------
SUCCESS_LEVEL = 25  # entre INFO (20) et WARNING (30)
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


def success(self: logging.Logger, msg: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(SUCCESS_LEVEL):
        self._log(SUCCESS_LEVEL, msg, args, **kwargs)


if not hasattr(logging.Logger, "success"):
    setattr(logging.Logger, "success", success)


APP_PACKAGES = ("config", "domain", "infrastructure", "presentation")


LOGGING_CONFIG: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
            "level": "DEBUG",
        },
    },
    "loggers": {
        # requests -> urllib3 : une ligne par connexion en DEBUG
        "urllib3": {"level": "WARNING"},
        "PIL": {"level": "INFO"},
        "google": {"level": "WARNING"},
        "grpc": {"level": "WARNING"},
    },
    "root": {
        "handlers": ["console"],
        "level": "DEBUG",
    },
}


def setup_logging(level: int = logging.DEBUG) -> None:
    """
    Configure le logging de l'application (appelé une fois par main.py).

    level : niveau racine et des paquets de l'application ; les loggers des
    bibliothèques gardent le leur.
    """
    try:
        config = deepcopy(LOGGING_CONFIG)
        config["root"]["level"] = logging.getLevelName(level)
        for package in APP_PACKAGES:
            config["loggers"][package] = {"level": config["root"]["level"]}
        logging.config.dictConfig(config)

        logger = logging.getLogger(__name__)
        logger.debug("Logging initialisé (niveau racine=%s).", config["root"]["level"])
        logger.success("Niveau SUCCESS activé (niveau=%s).", SUCCESS_LEVEL)

    except Exception:
        # Filet de sécurité : ne jamais casser l'app à cause du logging
        logging.basicConfig(level=level)
        logging.getLogger(__name__).exception("Échec setup_logging, fallback basicConfig.")
