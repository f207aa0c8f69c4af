# presentation/ui_app.py

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Optional

import customtkinter as ctk
from tkinter import filedialog, messagebox

from domain.ai_provider import AIProviderName, AICompletionProvider
from domain.app_state import (
    ChatState,
    GenerationFailed,
    GenerationStarted,
    GenerationSucceeded,
    HomeState,
    PhotoSelected,
    Store,
    reduce_chat,
    reduce_home,
)
from domain.generation import GenerationResult, generate_product_description
from domain.models import PhotoAsset
from domain.prompt import GENERATION_FAILED_MESSAGE, MISSING_PHOTO_MESSAGE
from infrastructure.photo_loader import PhotoLoadError, load_photo

from .chat_window import AIChatWindow
from .image_preview import ImagePreview

logger = logging.getLogger(__name__)

PALETTE: Dict[str, str] = {
    "bg": "#181818",
    "surface": "#2c2c2c",
    "panel": "#222222",
    "accent": "#e74c3c",
    "accent_hover": "#c0392b",
    "text_primary": "#ffffff",
    "text_muted": "#888888",
}


class ProductSnapApp(ctk.CTk):
    """
    UI principale : photo produit -> titre + description générés par l'IA.

    - choix du provider IA (si plusieurs clés configurées)
    - sélection d'une photo + aperçu
    - génération (thread daemon) puis affichage de la fiche normalisée
    - accès à la fenêtre de chat produit
    """

    def __init__(
        self,
        providers: Dict[AIProviderName, AICompletionProvider],
        default_provider: Optional[AIProviderName] = None,
    ) -> None:
        super().__init__()

        self.title("Product Snap Assistant")
        self.geometry("560x760")
        self.minsize(460, 640)

        self.palette: Dict[str, str] = dict(PALETTE)
        self.providers = providers
        first = default_provider or next(iter(providers), None)
        self.provider_var = ctk.StringVar(value=first.value if first else "")

        self.store: Store[HomeState] = Store(HomeState(), reduce_home)
        self.chat_store: Store[ChatState] = Store(ChatState(), reduce_chat)
        self.chat_window: Optional[AIChatWindow] = None

        self.preview: Optional[ImagePreview] = None
        self.generate_btn: Optional[ctk.CTkButton] = None
        self.status_label: Optional[ctk.CTkLabel] = None
        self.result_frame: Optional[ctk.CTkFrame] = None
        self.result_title_label: Optional[ctk.CTkLabel] = None
        self.result_description_label: Optional[ctk.CTkLabel] = None

        self._init_theme()
        self._build_ui()
        self.store.subscribe(self._render)
        self._render(self.store.state)

        logger.info("UI ProductSnapApp initialisée (%d provider(s)).", len(providers))

    # ------------------------------------------------------------------
    # Construction de l'UI
    # ------------------------------------------------------------------

    def _init_theme(self) -> None:
        ctk.set_appearance_mode("dark")
        self.configure(fg_color=self.palette["bg"])

    def _build_ui(self) -> None:
        container = ctk.CTkFrame(self, fg_color=self.palette["bg"])
        container.pack(fill="both", expand=True, padx=20, pady=20)

        self._build_top_bar(container)

        header = ctk.CTkLabel(
            container,
            text="Upload Product Photo",
            font=ctk.CTkFont(size=26, weight="bold"),
            text_color=self.palette["text_primary"],
        )
        header.pack(pady=(10, 24))

        picker_btn = ctk.CTkButton(
            container,
            text="Tap to select a photo",
            command=self.select_photo,
            height=48,
            corner_radius=12,
            fg_color=self.palette["accent"],
            hover_color=self.palette["accent_hover"],
            font=ctk.CTkFont(size=16, weight="bold"),
        )
        picker_btn.pack(fill="x", pady=(0, 24))

        self.preview = ImagePreview(
            container,
            accent_color=self.palette["accent"],
            background=self.palette["panel"],
        )
        self.preview.pack(fill="x", pady=(0, 24))

        self.generate_btn = ctk.CTkButton(
            container,
            text="Generate Details",
            command=self.generate_details,
            height=48,
            corner_radius=12,
            fg_color=self.palette["panel"],
            hover_color=self.palette["surface"],
            border_color=self.palette["accent"],
            border_width=2,
            text_color=self.palette["accent"],
            font=ctk.CTkFont(size=16, weight="bold"),
        )
        self.generate_btn.pack(fill="x", pady=(0, 12))

        self.status_label = ctk.CTkLabel(
            container,
            text="",
            text_color=self.palette["text_muted"],
        )
        self.status_label.pack()

        self.result_frame = ctk.CTkFrame(container, fg_color="transparent")
        self.result_title_label = ctk.CTkLabel(
            self.result_frame,
            text="",
            wraplength=480,
            corner_radius=12,
            fg_color=self.palette["surface"],
            text_color=self.palette["text_primary"],
            font=ctk.CTkFont(size=22, weight="bold"),
        )
        self.result_title_label.pack(fill="x", pady=(0, 12), ipady=12)
        self.result_description_label = ctk.CTkLabel(
            self.result_frame,
            text="",
            wraplength=480,
            corner_radius=12,
            fg_color=self.palette["surface"],
            text_color=self.palette["text_primary"],
            font=ctk.CTkFont(size=16, weight="bold"),
        )
        self.result_description_label.pack(fill="x", ipady=12)

    def _build_top_bar(self, parent: ctk.CTkFrame) -> None:
        top_bar = ctk.CTkFrame(parent, fg_color="transparent")
        top_bar.pack(fill="x")

        if len(self.providers) > 1:
            provider_menu = ctk.CTkOptionMenu(
                top_bar,
                values=[p.value for p in self.providers],
                variable=self.provider_var,
                command=self._on_provider_change,
                fg_color=self.palette["surface"],
                button_color=self.palette["accent"],
                button_hover_color=self.palette["accent_hover"],
            )
            provider_menu.pack(side="left")

        chat_btn = ctk.CTkButton(
            top_bar,
            text="💬",
            width=50,
            height=50,
            corner_radius=25,
            fg_color=self.palette["accent"],
            hover_color=self.palette["accent_hover"],
            command=self.open_chat,
        )
        chat_btn.pack(side="right")

    # ------------------------------------------------------------------
    # Rendu depuis l'instantané
    # ------------------------------------------------------------------

    def _render(self, state: HomeState) -> None:
        try:
            if self.preview is not None:
                if state.photo is None:
                    self.preview.clear()
                else:
                    self.preview.show_photo(state.photo.path)

            if self.generate_btn is not None:
                self.generate_btn.configure(state="disabled" if state.loading else "normal")

            if self.status_label is not None:
                if state.loading:
                    self.status_label.configure(text="Generating...", text_color=self.palette["accent"])
                elif state.error:
                    self.status_label.configure(text=state.error, text_color="#f87171")
                else:
                    self.status_label.configure(text="", text_color=self.palette["text_muted"])

            if self.result_frame is not None:
                # Fiche affichée uniquement si le titre est non vide
                if state.result is not None and state.result.title:
                    self.result_title_label.configure(text=state.result.title)
                    self.result_description_label.configure(text=state.result.description)
                    self.result_frame.pack(fill="x", pady=(10, 0))
                else:
                    self.result_frame.pack_forget()
        except Exception as exc:
            logger.error("Erreur lors du rendu de l'écran principal: %s", exc, exc_info=True)

    # ------------------------------------------------------------------
    # Provider
    # ------------------------------------------------------------------

    def _on_provider_change(self, choice: str) -> None:
        logger.info("Provider IA sélectionné: %s", choice)

    def get_selected_provider(self) -> Optional[AICompletionProvider]:
        value = self.provider_var.get()
        try:
            return self.providers.get(AIProviderName(value))
        except ValueError:
            logger.error("Provider IA inconnu: %r", value)
            return None

    # ------------------------------------------------------------------
    # Photo
    # ------------------------------------------------------------------

    def select_photo(self) -> None:
        if self.store.state.loading:
            logger.info("Génération en cours : changement de photo refusé.")
            return

        file_path = filedialog.askopenfilename(
            title="Select a product photo",
            filetypes=[("Images", "*.jpg *.jpeg *.png *.webp *.gif"), ("All files", "*.*")],
        )
        if not file_path:
            logger.info("Sélection de photo annulée.")
            return

        try:
            photo = load_photo(Path(file_path))
        except PhotoLoadError as exc:
            logger.error("Sélection de photo impossible: %s", exc)
            messagebox.showerror("Error", "Image selection failed.")
            return

        self.store.dispatch(PhotoSelected(photo))

    # ------------------------------------------------------------------
    # Génération
    # ------------------------------------------------------------------

    def generate_details(self) -> None:
        state = self.store.state
        if state.photo is None:
            messagebox.showwarning("Photo missing", MISSING_PHOTO_MESSAGE)
            return
        if state.loading:
            return

        provider = self.get_selected_provider()
        if provider is None:
            messagebox.showerror("AI provider", "No AI provider is configured.")
            return

        photo = state.photo
        self.store.dispatch(GenerationStarted(photo))
        logger.info("Lancement génération (provider=%s, photo=%s)", provider.name.value, photo.path)

        def _run_generation() -> None:
            result = generate_product_description(provider, photo)
            self.after(0, lambda: self._handle_generation_result(photo, result))

        thread = threading.Thread(daemon=True, target=_run_generation)
        thread.start()
        logger.info("Thread de génération lancé en mode daemon.")

    def _handle_generation_result(self, photo: PhotoAsset, result: GenerationResult) -> None:
        if result.ok:
            self.store.dispatch(GenerationSucceeded(photo, result.description))
            return

        logger.warning(
            "Génération échouée (status=%s): %s",
            result.outcome.status.value,
            result.outcome.error,
        )
        self.store.dispatch(GenerationFailed(photo, result.user_message or GENERATION_FAILED_MESSAGE))
        messagebox.showerror("AI error", result.user_message or GENERATION_FAILED_MESSAGE)

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def open_chat(self) -> None:
        if self.chat_window is not None and self.chat_window.winfo_exists():
            self.chat_window.focus()
            return

        # Le chat_store survit à la fermeture de la fenêtre : l'historique est conservé
        self.chat_window = AIChatWindow(
            self,
            get_provider=self.get_selected_provider,
            palette=self.palette,
            store=self.chat_store,
        )
