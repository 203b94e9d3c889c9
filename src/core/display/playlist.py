"""
PlaylistScheduler - Rotação da playlist de marketing na TV.

Cada item fica em tela pela sua própria duração; um único timer
de disparo único avança para o próximo. O ciclo é infinito
(depois do último volta ao primeiro).

Quando a playlist muda, rebind() cancela o timer pendente e
rearma contra o item que passa a ser o atual. Disparos de timers
antigos são reconhecidos pela geração e ignorados.
"""

import logging
import threading
from typing import Optional, Sequence, Tuple

from src.core.queue.dtos import MediaOutputDTO

from .ports import MediaRenderer, TimerFactory, TimerHandle


logger = logging.getLogger(__name__)


class PlaylistScheduler:
    """
    Agenda a troca de mídias.

    Attributes:
        current_index: Posição do item em tela
        playlist: Snapshot da playlist vinculada

    Example:
        scheduler = PlaylistScheduler(renderer, ThreadingTimerFactory())
        scheduler.start(engine.marketing_playlist)
        ...
        scheduler.rebind(engine.marketing_playlist)
    """

    def __init__(self, renderer: MediaRenderer, timer_factory: TimerFactory):
        self.renderer = renderer
        self.timer_factory = timer_factory

        self.current_index = 0
        self.playlist: Tuple[MediaOutputDTO, ...] = ()
        self._timer: Optional[TimerHandle] = None
        self._generation = 0
        self._running = False
        self._lock = threading.RLock()

    @property
    def current_item(self) -> Optional[MediaOutputDTO]:
        with self._lock:
            if not self._running or not self.playlist:
                return None
            return self.playlist[self.current_index]

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self, playlist: Sequence[MediaOutputDTO]) -> None:
        """Vincula a playlist e exibe o item atual."""
        with self._lock:
            self._running = True
            self._bind(tuple(playlist))
            if self.current_index >= len(self.playlist):
                self.current_index = 0
            self._activate()

    def stop(self) -> None:
        """Cancela o timer pendente; fica inerte até o próximo start()."""
        with self._lock:
            self._running = False
            self._generation += 1
            self._cancel_timer()

    def rebind(self, playlist: Sequence[MediaOutputDTO]) -> None:
        """
        Revincula após mudança na playlist.

        - Item em tela ainda existe → continua nele (novo índice)
        - Senão → mantém o índice se ainda válido, ou volta a 0
        """
        with self._lock:
            showing = self.playlist[self.current_index] if self.playlist else None
            self._bind(tuple(playlist))

            new_index = None
            if showing is not None:
                new_index = next(
                    (i for i, m in enumerate(self.playlist) if m.id == showing.id),
                    None,
                )
            if new_index is None:
                new_index = self.current_index if self.current_index < len(self.playlist) else 0
            self.current_index = new_index

            if self._running:
                self._activate()

    def _bind(self, playlist: Tuple[MediaOutputDTO, ...]) -> None:
        self._generation += 1
        self._cancel_timer()
        self.playlist = playlist

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _activate(self) -> None:
        """Exibe o item atual e arma o timer pela duração dele."""
        if not self.playlist:
            self.current_index = 0
            return

        item = self.playlist[self.current_index]
        try:
            self.renderer.render(item)
        except Exception as e:
            logger.warning(f"Falha ao exibir mídia {item.title!r}: {e}")

        generation = self._generation
        self._timer = self.timer_factory(item.duration, lambda: self._on_timer(generation))

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or not self._running:
                logger.debug("Timer de playlist obsoleto ignorado")
                return
            self._generation += 1
            self._timer = None
            self.current_index = (self.current_index + 1) % len(self.playlist)
            self._activate()
