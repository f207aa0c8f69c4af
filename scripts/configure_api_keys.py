#!/usr/bin/env python3
"""Assistant interactif pour configurer les clés API et modèles par défaut.

- Propose OpenAI (gpt-4o pour la vision, gpt-4 pour le chat) ou Gemini
- Enregistre les variables dans un fichier .env local, sans écraser les
  variables des autres providers
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, Tuple

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
DEFAULT_SHELL_RC = Path.home() / ".bashrc"
EXPORT_MARKER = "# Variables Product Snap Assistant"

# provider -> (variable clé, [(variable modèle, défaut)])
PROVIDERS: Dict[str, Tuple[str, Tuple[Tuple[str, str], ...]]] = {
    "openai": (
        "OPENAI_API_KEY",
        (("OPENAI_VISION_MODEL", "gpt-4o"), ("OPENAI_CHAT_MODEL", "gpt-4")),
    ),
    "gemini": (
        "GEMINI_API_KEY",
        (("GEMINI_MODEL", "gemini-2.5-flash"),),
    ),
}


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def _safe_input(prompt: str) -> str:
    try:
        return input(prompt)
    except (KeyboardInterrupt, EOFError):
        logging.error("Arrêt utilisateur. Configuration abandonnée.")
        sys.exit(1)


def load_env_file(env_path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    if not env_path.exists():
        logging.info("Aucun fichier .env existant, une nouvelle configuration sera créée.")
        return values

    logging.info("Chargement des variables existantes depuis %s", env_path)
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        if key.strip():
            values[key.strip()] = value.strip()
    return values


def write_env_file(env_path: Path, env_data: Dict[str, str]) -> None:
    lines = [f"{key}={value}" for key, value in env_data.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    logging.info("Fichier .env mis à jour dans %s", env_path)


def apply_provider_config(
    env_data: Dict[str, str],
    provider: str,
    api_key: str,
    models: Dict[str, str],
) -> Dict[str, str]:
    """Nouvelle configuration .env : clé + modèles du provider, AI_PROVIDER mis à jour."""
    if provider not in PROVIDERS:
        raise ValueError(f"Provider inconnu: {provider!r}")
    if not api_key.strip():
        raise ValueError("La clé API ne peut pas être vide.")

    key_env, model_envs = PROVIDERS[provider]
    updated = dict(env_data)
    updated[key_env] = api_key.strip()
    for model_env, default in model_envs:
        updated[model_env] = (models.get(model_env) or default).strip()
    updated["AI_PROVIDER"] = provider
    return updated


def _prompt_provider() -> str:
    choices = " / ".join(PROVIDERS)
    while True:
        provider = _safe_input(f"Provider IA ({choices}) [Entrée pour 'openai'] : ").strip().lower()
        provider = provider or "openai"
        if provider in PROVIDERS:
            return provider
        logging.warning("Provider inconnu. Merci de choisir parmi: %s.", choices)


def _prompt_api_key(provider: str) -> str:
    env_name = PROVIDERS[provider][0]
    while True:
        key = _safe_input(f"Saisis la clé API pour {provider} ({env_name}) : ").strip()
        if key:
            logging.info("Clé %s capturée (longueur: %d).", env_name, len(key))
            return key
        logging.warning("La clé ne peut pas être vide. Recommence.")


def _prompt_models(provider: str) -> Dict[str, str]:
    models: Dict[str, str] = {}
    for model_env, default in PROVIDERS[provider][1]:
        value = _safe_input(f"{model_env} [Entrée pour '{default}'] : ").strip()
        models[model_env] = value or default
        logging.info("Modèle retenu (%s): %s", model_env, models[model_env])
    return models


def _append_shell_exports(env_data: Dict[str, str], targets: Iterable[Path]) -> None:
    lines = [EXPORT_MARKER]
    for key, value in env_data.items():
        if "API_KEY" in key:
            lines.append(f"export {key}=\"{value}\"")

    block = "\n" + "\n".join(lines) + "\n"

    for target in targets:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            content = target.read_text(encoding="utf-8") if target.exists() else ""
            if EXPORT_MARKER in content:
                logging.info("Bloc d'export déjà présent dans %s, aucune modification.", target)
                continue

            target.write_text(content + block, encoding="utf-8")
            logging.info("Exports shell ajoutés dans %s", target)
        except OSError as exc:
            logging.exception("Impossible d'ajouter les exports dans %s: %s", target, exc)


def main() -> None:
    setup_logging()
    logging.info("===== Assistant de configuration des clés API =====")

    try:
        env_data = load_env_file(ENV_PATH)
    except OSError as exc:
        logging.exception("Impossible de lire le fichier .env: %s", exc)
        sys.exit(1)

    provider = _prompt_provider()
    env_data = apply_provider_config(
        env_data,
        provider,
        _prompt_api_key(provider),
        _prompt_models(provider),
    )

    try:
        write_env_file(ENV_PATH, env_data)
    except OSError as exc:
        logging.exception("Impossible d'écrire le fichier .env: %s", exc)
        sys.exit(1)

    answer = _safe_input(
        "Ajouter aussi les exports des clés dans ton shell (~/.bashrc) ? (o/N) : "
    ).strip().lower()
    if answer.startswith("o"):
        _append_shell_exports(env_data, targets=[DEFAULT_SHELL_RC])
    else:
        logging.info("Exports shell non ajoutés (réponse: %s).", answer or "entrée vide")

    logging.info("Configuration terminée. Provider par défaut: %s.", provider)


if __name__ == "__main__":
    main()
