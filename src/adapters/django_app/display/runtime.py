"""
Adapters de execução do painel: timers e exibição de mídia.

- ThreadingTimerFactory: threading.Timer daemon, cancelável
- LoggingMediaRenderer: registra a mídia em tela e guarda a última
"""

from typing import Callable, Optional
import logging
import threading

from src.core.queue.dtos import MediaOutputDTO

logger = logging.getLogger(__name__)


class ThreadingTimerFactory:
    """
    Arma threading.Timer de disparo único.

    Example:
        factory = ThreadingTimerFactory()
        handle = factory(10.0, scheduler_callback)
        handle.cancel()
    """

    def __call__(self, seconds: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(seconds, callback)
        timer.daemon = True
        timer.start()
        return timer


class LoggingMediaRenderer:
    """Renderer sem tela: loga cada troca de mídia."""

    def __init__(self):
        self.current: Optional[MediaOutputDTO] = None

    def render(self, media: MediaOutputDTO) -> None:
        self.current = media
        if media.youtube_id:
            target = f"youtube:{media.youtube_id}"
        else:
            target = media.url
        logger.info(f"[DISPLAY] {media.type} '{media.title}' ({media.duration:g}s) -> {target}")
