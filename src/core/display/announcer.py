"""
AnnouncementDispatcher - Anúncio de chamadas na TV.

Observa a senha em destaque (last_called_ticket) e decide se
deve anunciar por voz. Não guarda histórico: compara apenas
com o que foi anunciado por último.

Regras:
- Senha diferente da última anunciada → nova chamada
  (anuncia e pisca o painel por flash_seconds)
- Mesma senha, called_at avançou e a chamada é recente
  (menos de recall_window) → rechamada (anuncia, sem piscar)
- Qualquer outra observação → nada

A fala roda num executor próprio (um worker, anúncios em ordem):
observe() nunca espera o sintetizador. Falhas do sintetizador de
voz nunca escapam daqui.
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Dict, Optional

from src.core.shared.interfaces import Clock
from src.core.queue.dtos import TicketOutputDTO

from .ports import SpeechSynthesizer


logger = logging.getLogger(__name__)


DEFAULT_LOCALE = "en-US"

ANNOUNCEMENT_TEMPLATES: Dict[str, str] = {
    "pt-BR": "Senha {number}, Guichê {counter}",
    "en-US": "Ticket {number}, Counter {counter}",
}


def render_announcement(ticket: TicketOutputDTO, locale: str) -> str:
    """
    Texto falado para a senha.

    Locale desconhecido usa o template en-US.

    Example:
        render_announcement(ticket, "pt-BR")  # "Senha CXA-001, Guichê 05"
    """
    template = ANNOUNCEMENT_TEMPLATES.get(locale, ANNOUNCEMENT_TEMPLATES[DEFAULT_LOCALE])
    return template.format(number=ticket.number, counter=ticket.counter or "")


def default_speech_executor() -> Executor:
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="announcer")


class AnnouncementKind(Enum):
    """Resultado de uma observação que gerou anúncio."""

    NEW_CALL = "NEW_CALL"
    RECALL = "RECALL"


class AnnouncementDispatcher:
    """
    Decide e dispara anúncios de voz.

    Attributes:
        last_announced_ticket_id: ID da última senha anunciada
        last_announced_called_at: called_at no momento do último anúncio
        flash_until: Fim do destaque visual da nova chamada

    Example:
        dispatcher = AnnouncementDispatcher(speech, clock, locale="pt-BR")
        kind = dispatcher.observe(engine.last_called_ticket)
        if kind is AnnouncementKind.NEW_CALL:
            ...
    """

    def __init__(
        self,
        speech: SpeechSynthesizer,
        clock: Clock,
        locale: str = "pt-BR",
        flash_seconds: float = 3.0,
        recall_window_seconds: float = 1.0,
        executor_factory: Callable[[], Executor] = default_speech_executor,
    ):
        self.speech = speech
        self.clock = clock
        self.locale = locale
        self.flash_duration = timedelta(seconds=flash_seconds)
        self.recall_window = timedelta(seconds=recall_window_seconds)
        self.executor_factory = executor_factory

        self.last_announced_ticket_id: Optional[str] = None
        self.last_announced_called_at: Optional[datetime] = None
        self.flash_until: Optional[datetime] = None
        self._lock = threading.Lock()
        self._executor: Optional[Executor] = None

    def observe(self, ticket: Optional[TicketOutputDTO]) -> Optional[AnnouncementKind]:
        """
        Processa uma observação da senha em destaque.

        Args:
            ticket: last_called_ticket atual (ou None)

        Returns:
            NEW_CALL, RECALL, ou None se nada foi anunciado
        """
        if ticket is None:
            return None

        now = self.clock.now()

        with self._lock:
            if ticket.id != self.last_announced_ticket_id:
                self.last_announced_ticket_id = ticket.id
                self.last_announced_called_at = ticket.called_at
                self.flash_until = now + self.flash_duration
                kind = AnnouncementKind.NEW_CALL
            elif self._is_fresh_recall(ticket, now):
                self.last_announced_called_at = ticket.called_at
                kind = AnnouncementKind.RECALL
            else:
                return None

        logger.info(f"Anúncio {kind.value}: {ticket.number} (guichê {ticket.counter})")
        self.announce(ticket)
        return kind

    def _is_fresh_recall(self, ticket: TicketOutputDTO, now: datetime) -> bool:
        called_at = ticket.called_at
        if called_at is None:
            return False
        if self.last_announced_called_at is not None and called_at <= self.last_announced_called_at:
            return False
        return now - called_at < self.recall_window

    def announce(self, ticket: TicketOutputDTO) -> Future:
        """
        Agenda a fala da senha e retorna sem esperar o sintetizador.

        Best-effort: qualquer falha vira WARNING no log.
        """
        text = render_announcement(ticket, self.locale)
        with self._lock:
            if self._executor is None:
                self._executor = self.executor_factory()
            return self._executor.submit(self._speak, text, ticket.number)

    def _speak(self, text: str, number: str) -> None:
        try:
            self.speech.speak(text, self.locale)
        except Exception as e:
            logger.warning(f"Falha ao anunciar {number}: {e}")

    def shutdown(self, wait: bool = False) -> None:
        """Encerra o executor de voz. Um novo anúncio cria outro."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    @property
    def is_flashing(self) -> bool:
        """Painel em destaque (vermelho) logo após nova chamada."""
        if self.flash_until is None:
            return False
        return self.clock.now() < self.flash_until

    def reset(self) -> None:
        with self._lock:
            self.last_announced_ticket_id = None
            self.last_announced_called_at = None
            self.flash_until = None
