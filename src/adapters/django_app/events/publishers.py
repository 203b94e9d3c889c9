"""
Event Publishers - Saída dos eventos da fila.

Eventos chegam aqui depois do commit do UnitOfWork, já fora da
seção crítica: um publisher lento atrasa apenas quem publicou,
nunca o totem ou os outros guichês.

Implementações:
- LoggingEventPublisher: Log estruturado (padrão, modo "sync")
- CeleryEventPublisher: Despacha para dispatch_domain_event (modo "celery")
- InMemoryEventPublisher: Coleta eventos (testes)
- CompositeEventPublisher: Vários destinos
"""

from collections import defaultdict
from typing import Callable, DefaultDict, List, Optional
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


EventHandler = Callable[[DomainEvent], None]


class _LocalHandlersMixin:
    """Handlers síncronos registrados por tipo de evento."""

    def _init_handlers(self) -> None:
        self._handlers: DefaultDict[str, List[EventHandler]] = defaultdict(list)

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def _run_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler local de {event.event_type}: {e}")


class LoggingEventPublisher(_LocalHandlersMixin, EventPublisher):
    """
    Publisher que registra eventos no log.

    Formato:
        [EVENT] TicketCalledEvent | aggregate=<id> | data={...}
    """

    def __init__(self, log_level: int = logging.INFO):
        self._log_level = log_level
        self._init_handlers()

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict()['data'], default=str)}"
        )
        self._run_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para o worker Celery.

    Falha ao enfileirar (broker fora do ar) é logada e engolida:
    a senha já foi emitida/chamada e isso não pode ser desfeito.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | aggregate={event.aggregate_id}"
            )

        try:
            from src.adapters.django_app.events.handlers import dispatch_domain_event
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class InMemoryEventPublisher(_LocalHandlersMixin, EventPublisher):
    """
    Publisher em memória para testes.

    Example:
        publisher = InMemoryEventPublisher()
        ...
        assert publisher.get_events_by_type("TicketCalledEvent")
    """

    def __init__(self):
        self._published_events: List[DomainEvent] = []
        self._init_handlers()

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._run_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]

    def clear(self) -> None:
        self._published_events.clear()


class CompositeEventPublisher(EventPublisher):
    """Delega para vários publishers; falha de um não afeta os outros."""

    def __init__(self, publishers: Optional[List[EventPublisher]] = None):
        self._publishers = list(publishers or [])

    def add_publisher(self, publisher: EventPublisher) -> None:
        self._publishers.append(publisher)

    def publish(self, event: DomainEvent) -> None:
        for publisher in self._publishers:
            try:
                publisher.publish(event)
            except Exception as e:
                logger.error(f"Erro ao publicar em {publisher.__class__.__name__}: {e}")

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


def get_event_publisher(mode: str = "sync") -> EventPublisher:
    """
    Factory do publisher conforme QUEUE['EVENT_PUBLISHER_MODE'].

    Args:
        mode: "sync" (log) ou "celery"

    Raises:
        ValueError: Se modo desconhecido
    """
    mode = (mode or "sync").strip().lower()
    if mode == "celery":
        return CeleryEventPublisher()
    if mode == "sync":
        return LoggingEventPublisher()
    raise ValueError(f"Modo de publicação desconhecido: {mode}")
