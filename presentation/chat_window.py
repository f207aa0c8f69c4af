# presentation/chat_window.py

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Optional

import customtkinter as ctk

from domain.ai_provider import AICompletionProvider
from domain.app_state import ChatState, DraftChanged, MessageSent, ReplyReceived, Store, reduce_chat
from domain.generation import reply_to_chat
from domain.models import ChatMessage, Sender

logger = logging.getLogger(__name__)


class AIChatWindow(ctk.CTkToplevel):
    """
    Fenêtre de chat produit.

    L'historique vit dans un Store[ChatState] ; la fenêtre se contente de
    le rendre. La requête IA part dans un thread daemon et le résultat
    revient dans la boucle Tk via after(0, ...).
    """

    def __init__(
        self,
        master: ctk.CTk,
        get_provider: Callable[[], Optional[AICompletionProvider]],
        palette: Dict[str, str],
        store: Optional[Store[ChatState]] = None,
    ) -> None:
        super().__init__(master)
        self.title("AI Chat")
        self.geometry("480x640")
        self.minsize(360, 420)

        self.palette = palette
        self._get_provider = get_provider
        self.store: Store[ChatState] = store or Store(ChatState(), reduce_chat)

        self.input_var = ctk.StringVar(value=self.store.state.draft)
        self.messages_frame: Optional[ctk.CTkScrollableFrame] = None
        self.loading_label: Optional[ctk.CTkLabel] = None
        self.send_btn: Optional[ctk.CTkButton] = None
        self._bubbles: List[ctk.CTkLabel] = []

        self.configure(fg_color=self.palette.get("bg"))
        self._build_ui()

        self._unsubscribe = self.store.subscribe(self._render)
        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self._render(self.store.state)
        logger.info("Fenêtre de chat ouverte.")

    # ------------------------------------------------------------------
    # Construction de l'UI
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        self.messages_frame = ctk.CTkScrollableFrame(self, fg_color=self.palette.get("bg"))
        self.messages_frame.pack(fill="both", expand=True, padx=15, pady=(10, 0))
        self.messages_frame.grid_columnconfigure(0, weight=1)

        self.loading_label = ctk.CTkLabel(
            self,
            text="",
            text_color=self.palette.get("accent"),
        )
        self.loading_label.pack(pady=(4, 0))

        input_bar = ctk.CTkFrame(self, fg_color=self.palette.get("bg"))
        input_bar.pack(fill="x", padx=10, pady=10)

        entry = ctk.CTkEntry(
            input_bar,
            textvariable=self.input_var,
            placeholder_text="Ask about a product...",
            placeholder_text_color="#888888",
            fg_color=self.palette.get("surface"),
            text_color="white",
            corner_radius=25,
            height=44,
        )
        entry.pack(side="left", fill="x", expand=True)
        entry.bind("<Return>", lambda _event: self.send_message())
        self.input_var.trace_add("write", self._on_draft_change)

        self.send_btn = ctk.CTkButton(
            input_bar,
            text="➤",
            width=50,
            height=44,
            corner_radius=25,
            fg_color=self.palette.get("accent"),
            hover_color=self.palette.get("accent_hover"),
            text_color="white",
            command=self.send_message,
        )
        self.send_btn.pack(side="left", padx=(10, 0))

    # ------------------------------------------------------------------
    # Rendu
    # ------------------------------------------------------------------

    def _render(self, state: ChatState) -> None:
        if self.messages_frame is None:
            return

        # Les messages ne font que s'ajouter : on ne crée que les bulles manquantes
        for index in range(len(self._bubbles), len(state.messages)):
            self._bubbles.append(self._add_bubble(index, state.messages[index]))

        if self.loading_label is not None:
            self.loading_label.configure(text="AI is typing..." if state.loading else "")
        if self.send_btn is not None:
            self.send_btn.configure(state="disabled" if state.loading else "normal")
        if self.input_var.get() != state.draft:
            self.input_var.set(state.draft)

    def _add_bubble(self, row: int, message: ChatMessage) -> ctk.CTkLabel:
        is_user = message.sender is Sender.USER
        bubble = ctk.CTkLabel(
            self.messages_frame,
            text=message.text,
            wraplength=300,
            justify="left",
            corner_radius=20,
            fg_color=self.palette.get("accent") if is_user else self.palette.get("surface"),
            text_color="white",
            font=ctk.CTkFont(size=16),
        )
        bubble.grid(row=row, column=0, sticky="e" if is_user else "w", pady=(0, 10), ipadx=16, ipady=12)
        return bubble

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _on_draft_change(self, *_args: object) -> None:
        text = self.input_var.get()
        if text != self.store.state.draft:
            self.store.dispatch(DraftChanged(text))

    def send_message(self) -> None:
        state = self.store.state
        text = state.draft
        if not text.strip() or state.loading:
            return

        provider = self._get_provider()
        if provider is None:
            logger.error("Aucun provider IA sélectionné pour le chat.")
            return

        user_message = ChatMessage.create(text, Sender.USER)
        state = self.store.dispatch(MessageSent(user_message))
        history = state.messages

        def _run_chat() -> None:
            reply = reply_to_chat(provider, history)
            self.after(0, lambda: self.store.dispatch(ReplyReceived(reply)))

        thread = threading.Thread(daemon=True, target=_run_chat)
        thread.start()
        logger.info("Thread de chat lancé (%d message(s)).", len(history))

    def _on_close(self) -> None:
        self._unsubscribe()
        self.destroy()
