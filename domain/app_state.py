# domain/app_state.py

"""
État applicatif immuable et réducteurs.

L'UI ne modifie jamais l'état directement : elle envoie une action au Store,
qui calcule un nouvel instantané via le réducteur puis notifie les abonnés.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

from domain.models import ChatMessage, PhotoAsset, ProductDescription, Sender
from domain.prompt import CHAT_GREETING

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Instantanés
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HomeState:
    photo: Optional[PhotoAsset] = None
    result: Optional[ProductDescription] = None
    loading: bool = False
    error: Optional[str] = None


def _greeting() -> Tuple[ChatMessage, ...]:
    return (ChatMessage(id="1", text=CHAT_GREETING, sender=Sender.AI),)


@dataclass(frozen=True)
class ChatState:
    messages: Tuple[ChatMessage, ...] = field(default_factory=_greeting)
    draft: str = ""
    loading: bool = False


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PhotoSelected:
    photo: PhotoAsset


# Les actions de génération portent la photo pour laquelle elles ont été lancées.

@dataclass(frozen=True)
class GenerationStarted:
    photo: PhotoAsset


@dataclass(frozen=True)
class GenerationSucceeded:
    photo: PhotoAsset
    result: ProductDescription


@dataclass(frozen=True)
class GenerationFailed:
    photo: PhotoAsset
    message: str


@dataclass(frozen=True)
class DraftChanged:
    text: str


@dataclass(frozen=True)
class MessageSent:
    message: ChatMessage


@dataclass(frozen=True)
class ReplyReceived:
    message: ChatMessage


# ---------------------------------------------------------------------------
# Réducteurs
# ---------------------------------------------------------------------------

def reduce_home(state: HomeState, action: object) -> HomeState:
    """Transition pure de l'écran d'accueil."""
    if isinstance(action, PhotoSelected):
        # Nouvelle photo : l'ancienne fiche n'est plus valable
        return HomeState(photo=action.photo)

    if isinstance(action, (GenerationStarted, GenerationSucceeded, GenerationFailed)):
        if action.photo != state.photo:
            logger.info(
                "reduce_home: %s obsolète ignorée (photo=%s).",
                type(action).__name__,
                action.photo.path,
            )
            return state

    if isinstance(action, GenerationStarted):
        return replace(state, loading=True, error=None)

    if isinstance(action, GenerationSucceeded):
        return replace(state, result=action.result, loading=False, error=None)

    if isinstance(action, GenerationFailed):
        return replace(state, loading=False, error=action.message)

    logger.debug("reduce_home: action ignorée %r", action)
    return state


def reduce_chat(state: ChatState, action: object) -> ChatState:
    """Transition pure de l'écran de chat."""
    if isinstance(action, DraftChanged):
        return replace(state, draft=action.text)

    if isinstance(action, MessageSent):
        if not action.message.text.strip():
            return state
        return replace(
            state,
            messages=state.messages + (action.message,),
            draft="",
            loading=True,
        )

    if isinstance(action, ReplyReceived):
        return replace(
            state,
            messages=state.messages + (action.message,),
            loading=False,
        )

    logger.debug("reduce_chat: action ignorée %r", action)
    return state


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

S = TypeVar("S")


class Store(Generic[S]):
    """
    Conteneur de l'instantané courant.

    dispatch() est sérialisé par un verrou : les threads réseau et la
    boucle Tk peuvent y accéder sans coordination supplémentaire.
    """

    def __init__(self, initial: S, reducer: Callable[[S, object], S]) -> None:
        self._state = initial
        self._reducer = reducer
        self._lock = threading.Lock()
        self._subscribers: List[Callable[[S], None]] = []

    @property
    def state(self) -> S:
        return self._state

    def subscribe(self, callback: Callable[[S], None]) -> Callable[[], None]:
        """Abonne callback; renvoie une fonction de désabonnement."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def dispatch(self, action: object) -> S:
        with self._lock:
            previous = self._state
            self._state = self._reducer(previous, action)
            current = self._state

        if current is previous:
            return current

        logger.debug("Store: %s appliquée.", type(action).__name__)
        for callback in list(self._subscribers):
            try:
                callback(current)
            except Exception:
                logger.exception("Abonné du Store en erreur (%r).", callback)
        return current
