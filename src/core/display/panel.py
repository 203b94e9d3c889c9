"""
DisplayPanel - Painel público (TV).

Liga o AnnouncementDispatcher e o PlaylistScheduler ao QueueEngine
via subscribe():
- Mudança em TICKETS → dispatcher observa a senha em destaque
- Mudança em PLAYLIST → playlist é revinculada

state() devolve o que a TV desenha: senha atual (com nome do
departamento), destaque, "Últimas Chamadas" e mídia em tela.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from src.core.queue.engine import ChangeKind, QueueEngine
from src.core.queue.dtos import MediaOutputDTO, TicketOutputDTO

from .announcer import AnnouncementDispatcher
from .playlist import PlaylistScheduler


logger = logging.getLogger(__name__)


@dataclass
class DisplayStateDTO:
    """
    Estado desenhado pela TV.

    Attributes:
        current_ticket: Senha em destaque (ou None → "Aguardando...")
        department_name: Nome do departamento (None se removido)
        is_flashing: Painel em destaque após nova chamada
        history: Últimas chamadas, sem a senha em destaque
        current_media: Item da playlist em tela
    """

    current_ticket: Optional[TicketOutputDTO]
    department_name: Optional[str]
    is_flashing: bool
    history: List[TicketOutputDTO] = field(default_factory=list)
    current_media: Optional[MediaOutputDTO] = None

    def to_dict(self) -> dict:
        return {
            "current_ticket": self.current_ticket.to_dict() if self.current_ticket else None,
            "department_name": self.department_name,
            "is_flashing": self.is_flashing,
            "history": [t.to_dict() for t in self.history],
            "current_media": self.current_media.to_dict() if self.current_media else None,
        }


class DisplayPanel:
    """
    Coordena anúncio e playlist a partir das mudanças da fila.

    Example:
        panel = DisplayPanel(engine, dispatcher, playlist_scheduler)
        panel.start()
        engine.call_next_ticket("05")   # dispatcher anuncia
        print(panel.state().to_dict())
        panel.stop()
    """

    def __init__(
        self,
        engine: QueueEngine,
        dispatcher: AnnouncementDispatcher,
        playlist: PlaylistScheduler,
    ):
        self.engine = engine
        self.dispatcher = dispatcher
        self.playlist = playlist
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def is_running(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self.is_running:
            return
        self._unsubscribe = self.engine.subscribe(self._on_change)
        self.playlist.start(self.engine.marketing_playlist)
        self.dispatcher.observe(self.engine.last_called_ticket)
        logger.info("Painel iniciado")

    def stop(self) -> None:
        if not self.is_running:
            return
        self._unsubscribe()
        self._unsubscribe = None
        self.playlist.stop()
        self.dispatcher.shutdown()
        logger.info("Painel parado")

    def _on_change(self, kind: ChangeKind) -> None:
        if kind is ChangeKind.TICKETS:
            self.dispatcher.observe(self.engine.last_called_ticket)
        elif kind is ChangeKind.PLAYLIST:
            self.playlist.rebind(self.engine.marketing_playlist)

    def state(self) -> DisplayStateDTO:
        current = self.engine.last_called_ticket
        return DisplayStateDTO(
            current_ticket=current,
            department_name=(
                self.engine.department_name(current.department_id) if current else None
            ),
            is_flashing=self.dispatcher.is_flashing,
            history=self.engine.recent_calls(),
            current_media=self.playlist.current_item,
        )
