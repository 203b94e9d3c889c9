"""
Interfaces (Ports) - Contratos entre Core e Adapters.

Tipos de Ports:
- Driven Ports: UnitOfWork, EventPublisher, Clock
- Driving Ports: Definidos nos Use Cases e no QueueEngine

Princípio: Core define interfaces; Adapters implementam.
O fluxo de dependência sempre aponta para o Core.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Protocol, runtime_checkable

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Seção crítica da fila.

    Não há banco de dados: o estado vive em memória durante o
    processo. O UoW garante que toda mutação (emitir, chamar,
    rechamar, finalizar) seja serializada, de forma que duas
    chamadas de "próxima senha" nunca escolham o mesmo candidato.

    Pattern: Context Manager
        with uow:
            candidate = select_next(repo.list_waiting())
            candidate.call(counter, now)
            repo.save(candidate)
            uow.publish_event(TicketCalledEvent(...))
        # Lock liberado; eventos publicados após o commit

    Responsabilidades:
    - Entrar/sair da seção crítica
    - Commit/Rollback coordenado
    - Enfileirar eventos para publicação pós-commit
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # Não suprime exceções

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia a transação (adquire o lock compartilhado)."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Finaliza a transação e publica eventos.

        Ordem de execução:
        1. Liberar a seção crítica
        2. Publicar eventos enfileirados
        3. Limpar estado interno
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Libera a seção crítica e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Adapters implementam para integrar com log estruturado,
    Celery ou coleta em memória (testes).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    @abstractmethod
    def publish_batch(self, events: List[DomainEvent]) -> None:
        raise NotImplementedError


@runtime_checkable
class Clock(Protocol):
    """Fonte de tempo injetável (relógio de parede ou fake em testes)."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Relógio real do processo."""

    def now(self) -> datetime:
        return datetime.now()
