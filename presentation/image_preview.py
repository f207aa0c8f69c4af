from __future__ import annotations

"""
Copyright 2025 Kevin Andreazza
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy at http://www.apache.org/licenses/LICENSE-2.0
Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""Widget used to preview the selected product photo."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import customtkinter as ctk
from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)


def fit_within(size: Tuple[int, int], max_width: int, max_height: int) -> Tuple[int, int]:
    """Dimensions réduites pour tenir dans la zone d'aperçu (ratio conservé, jamais agrandi)."""
    width, height = size
    if width <= 0 or height <= 0:
        return (max(1, max_width), max(1, max_height))
    ratio = min(max_width / width, max_height / height, 1.0)
    return (max(1, int(width * ratio)), max(1, int(height * ratio)))


class ImagePreview(ctk.CTkFrame):
    """Aperçu de la photo produit sélectionnée (bordure accent, état vide)."""

    def __init__(
        self,
        master: ctk.CTkBaseClass,
        width: int = 420,
        height: int = 220,
        accent_color: str = "#e74c3c",
        background: str = "#222222",
    ) -> None:
        super().__init__(
            master,
            width=width,
            height=height,
            fg_color=background,
            border_color=accent_color,
            border_width=2,
            corner_radius=16,
        )
        self._max_width = width
        self._max_height = height
        self._ctk_image: Optional[ctk.CTkImage] = None
        self._current_path: Optional[Path] = None

        self.pack_propagate(False)
        self._label = ctk.CTkLabel(self, text="Aucune photo sélectionnée", text_color="#888888")
        self._label.pack(expand=True, fill="both", padx=4, pady=4)

    @property
    def current_path(self) -> Optional[Path]:
        return self._current_path

    def show_photo(self, path: Path) -> None:
        if path == self._current_path:
            return
        try:
            with Image.open(path) as img:
                img = ImageOps.exif_transpose(img)
                img.load()
                display_size = fit_within(img.size, self._max_width - 8, self._max_height - 8)
                self._ctk_image = ctk.CTkImage(light_image=img.copy(), size=display_size)
        except (UnidentifiedImageError, OSError) as exc:
            logger.error("Aperçu impossible pour %s: %s", path, exc, exc_info=True)
            self.clear("Aperçu indisponible")
            return

        self._current_path = path
        self._label.configure(image=self._ctk_image, text="")
        logger.info("Aperçu photo mis à jour: %s", path.name)

    def clear(self, message: str = "Aucune photo sélectionnée") -> None:
        self._current_path = None
        self._ctk_image = None
        self._label.configure(image=None, text=message)
