# infrastructure/photo_loader.py

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from domain.models import PhotoAsset

logger = logging.getLogger(__name__)

# Formats Pillow acceptés par les API vision
SUPPORTED_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}


class PhotoLoadError(RuntimeError):
    """
    Photo introuvable, illisible ou dans un format non supporté.
    """


def _detect_mime_type(path: Path) -> str:
    try:
        with Image.open(path) as img:
            fmt = (img.format or "").upper()
    except UnidentifiedImageError as exc:
        logger.error("Fichier non reconnu comme image: %s", path)
        raise PhotoLoadError(f"Fichier non reconnu comme image: {path}") from exc
    except OSError as exc:
        logger.exception("Erreur ouverture image (%s).", path)
        raise PhotoLoadError(f"Erreur ouverture image '{path}': {exc}") from exc

    mime_type = SUPPORTED_FORMATS.get(fmt)
    if mime_type is None:
        logger.error("Format image non supporté (%s): %s", fmt or "inconnu", path)
        raise PhotoLoadError(f"Format image non supporté ({fmt or 'inconnu'}): {path}")
    return mime_type


def load_photo(path: Union[str, Path]) -> PhotoAsset:
    """
    Charge une photo locale et la prépare pour l'envoi à l'IA
    (type MIME détecté par Pillow + contenu base64).

    Aucune compression ni redimensionnement : le fichier est envoyé tel quel.
    """
    image_path = Path(path)
    logger.debug("Chargement photo: %s", image_path)

    if not image_path.is_file():
        logger.error("Image introuvable: %s", image_path)
        raise PhotoLoadError(f"Image introuvable: {image_path}")

    mime_type = _detect_mime_type(image_path)

    try:
        encoded = base64.b64encode(image_path.read_bytes()).decode("utf-8")
    except OSError as exc:
        logger.exception("Erreur lecture image (%s).", image_path)
        raise PhotoLoadError(f"Erreur lecture image '{image_path}': {exc}") from exc

    logger.info("Photo chargée (%s, %s, %d caractères base64).", image_path.name, mime_type, len(encoded))
    return PhotoAsset(path=image_path, mime_type=mime_type, base64_data=encoded)
