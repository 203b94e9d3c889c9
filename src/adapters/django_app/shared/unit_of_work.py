"""
Unit of Work - Seção crítica da fila em memória.

Não há banco: a "transação" é a posse do lock compartilhado
por todas as units of work do processo. Quem está dentro do
`with uow:` é o único a ler/alterar o registro de senhas.

Ordem no commit:
1. Liberar o lock
2. Publicar eventos enfileirados
3. Limpar estado interno
"""

from typing import List, Optional
import logging
import threading

from src.core.shared.interfaces import UnitOfWork, EventPublisher
from src.core.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work sobre um lock re-entrante compartilhado.

    Uma instância por operação; o lock é o mesmo para todas
    (o Container injeta o singleton). Re-entrante: uma leitura
    feita dentro de outra unidade na mesma thread não trava.

    Example:
        lock = threading.RLock()
        with InMemoryUnitOfWork(lock, publisher) as uow:
            ticket.call("05", now)
            repo.save(ticket)
            uow.publish_event(TicketCalledEvent(...))
        # Lock liberado, evento publicado

    Example com rollback:
        with InMemoryUnitOfWork(lock) as uow:
            uow.publish_event(event)
            raise ValidationError("...")
        # Lock liberado, evento descartado
    """

    def __init__(
        self,
        lock: Optional[threading.RLock] = None,
        event_publisher: Optional[EventPublisher] = None,
    ):
        """
        Args:
            lock: Lock compartilhado (um novo se omitido)
            event_publisher: Destino dos eventos após commit
        """
        super().__init__()
        self._lock = lock if lock is not None else threading.RLock()
        self._event_publisher = event_publisher
        self._held = False
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self._lock.acquire()
        self._held = True
        self._committed = False
        self._rolled_back = False

    def _release(self) -> None:
        if self._held:
            self._held = False
            self._lock.release()

    def commit(self) -> None:
        events = list(self._events)
        self.clear_events()
        self._committed = True
        self._release()

        for event in events:
            logger.debug(
                f"Publishing event: {event.event_type} for aggregate {event.aggregate_id}"
            )
            self._published_events.append(event)
            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    # A mudança já está feita; falha de publicação só é logada
                    logger.error(f"Failed to publish event: {e}")

    def rollback(self) -> None:
        # Memória não tem desfazer: as entidades validam antes de mudar
        self._rolled_back = True
        self.clear_events()
        self._release()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos publicados por esta unidade (testing/debugging)."""
        return list(self._published_events)
