"""
Domínio de Display - Painel público (TV).

- AnnouncementDispatcher: anúncio por voz de chamadas e rechamadas
- PlaylistScheduler: rotação da playlist de marketing
- DisplayPanel: liga ambos às mudanças do QueueEngine
- Ports: SpeechSynthesizer, MediaRenderer, TimerFactory
"""

from .ports import SpeechSynthesizer, MediaRenderer, TimerFactory, TimerHandle
from .announcer import (
    AnnouncementDispatcher,
    AnnouncementKind,
    render_announcement,
)
from .playlist import PlaylistScheduler
from .panel import DisplayPanel, DisplayStateDTO

__all__ = [
    "SpeechSynthesizer",
    "MediaRenderer",
    "TimerFactory",
    "TimerHandle",
    "AnnouncementDispatcher",
    "AnnouncementKind",
    "render_announcement",
    "PlaylistScheduler",
    "DisplayPanel",
    "DisplayStateDTO",
]
