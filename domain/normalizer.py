# domain/normalizer.py

"""
Normalisation des réponses IA libres en fiche produit {title, description}.

Le modèle répond en langage naturel : lignes vides, séparateurs décoratifs
("***", "---", "==="), emphase markdown, libellés "Title:" / "Description:".
Ce module transforme ce texte en ProductDescription.

Fonction totale : aucune chaîne d'entrée ne lève d'exception.
Pas d'I/O, pas d'état partagé, appel concurrent possible.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from domain.models import ProductDescription

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Règles de nettoyage
# ---------------------------------------------------------------------------

# Ligne composée uniquement de *, -, _, = et d'espaces
SEPARATOR_LINE_RE = re.compile(r"^[*\-_=\s]+$")

TITLE_LABEL_RE = re.compile(r"^title:\s*", re.IGNORECASE)
DESCRIPTION_LABEL_RE = re.compile(r"^description:\s*", re.IGNORECASE)
EMPHASIS_RE = re.compile(r"[*_]")

# Seuls \n et \r\n séparent les lignes (pas \x0c ni \x85)
LINE_BREAK_RE = re.compile(r"\r?\n")


def _is_content_line(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not SEPARATOR_LINE_RE.match(stripped)


def content_lines(raw: Optional[str]) -> List[str]:
    """Lignes porteuses de contenu, dans l'ordre d'origine."""
    if not raw:
        return []
    return [line for line in LINE_BREAK_RE.split(raw) if _is_content_line(line)]


def clean_title(candidate: str) -> str:
    """
    Retire le libellé "Title:" en tête, puis toute emphase markdown (* et _).

    Le libellé n'est cherché qu'avant le retrait de l'emphase :
    "**Title:** Lampe" donne donc "Title: Lampe".
    """
    title = TITLE_LABEL_RE.sub("", candidate.strip(), count=1)
    return EMPHASIS_RE.sub("", title).strip()


def clean_description(candidates: List[str]) -> str:
    """
    Joint les lignes par un espace puis retire le libellé "Description:"
    une seule fois, sur la chaîne jointe (pas ligne par ligne).
    """
    joined = " ".join(candidates).strip()
    return DESCRIPTION_LABEL_RE.sub("", joined, count=1).strip()


def normalize(raw: Optional[str]) -> ProductDescription:
    """
    Convertit le texte brut d'une complétion IA en ProductDescription.

    - 1re ligne utile   -> titre
    - lignes suivantes  -> description (jointes par un espace, ordre conservé)
    - entrée vide ou uniquement décorative -> fiche vide
    """
    lines = content_lines(raw)
    if not lines:
        logger.debug("normalize: aucune ligne exploitable, fiche vide.")
        return ProductDescription(title="", description="")

    title_candidate, *description_candidates = lines
    result = ProductDescription(
        title=clean_title(title_candidate),
        description=clean_description(description_candidates),
    )
    logger.debug(
        "normalize: %d ligne(s) utile(s) -> titre=%r, description=%d caractère(s).",
        len(lines),
        result.title,
        len(result.description),
    )
    return result
