"""
Ports (Interfaces) do Domínio de Display.

A TV não fala nem toca vídeo por conta própria: ela pede a
adapters externos através destes contratos estreitos.

Ports:
- SpeechSynthesizer: Anúncio por voz (fire-and-forget)
- MediaRenderer: Exibição de item da playlist
- TimerFactory / TimerHandle: Timer de disparo único, cancelável
"""

from typing import Callable, Protocol, runtime_checkable

from src.core.queue.dtos import MediaOutputDTO


@runtime_checkable
class SpeechSynthesizer(Protocol):
    """
    Sintetizador de voz.

    Implementações podem falhar (autoplay bloqueado, backend fora):
    o AnnouncementDispatcher captura qualquer exceção.
    """

    def speak(self, text: str, locale: str) -> None:
        ...


@runtime_checkable
class MediaRenderer(Protocol):
    """Exibe um item da playlist (imagem, vídeo nativo ou YouTube)."""

    def render(self, media: MediaOutputDTO) -> None:
        ...


@runtime_checkable
class TimerHandle(Protocol):
    """Timer já armado; cancel() é idempotente."""

    def cancel(self) -> None:
        ...


@runtime_checkable
class TimerFactory(Protocol):
    """
    Arma um timer de disparo único.

    Example:
        handle = timer_factory(10.0, scheduler.advance)
        handle.cancel()
    """

    def __call__(self, seconds: float, callback: Callable[[], None]) -> TimerHandle:
        ...
