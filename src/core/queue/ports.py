"""
Ports (Interfaces) do Domínio de Fila.

Define os contratos do Registro de Senhas: quem guarda senhas,
departamentos e a playlist de marketing.

Não existe persistência entre reinícios: as implementações
InMemory são as implementações de produção. Elas NÃO são
thread-safe por conta própria; toda mutação passa pelo
UnitOfWork, que serializa o acesso.

Princípio:
    Core define interfaces → Adapters implementam
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .entities import (
    DepartmentEntity,
    MarketingMediaEntity,
    TicketEntity,
    TicketStatus,
)


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para o registro de senhas.

    Senhas nunca são removidas: o histórico é mantido durante
    toda a vida do processo (a numeração depende disso).

    Methods:
        save: Persiste senha (create ou update)
        get_by_id: Busca por ID
        list_all: Lista na ordem de emissão
        list_by_status: Filtra por status, na ordem de emissão
        count_by_department: Total já emitido para um departamento
        count_by_status: Conta por status
    """

    def save(self, ticket: TicketEntity) -> None:
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ...

    def list_all(self) -> List[TicketEntity]:
        ...

    def list_by_status(self, status: TicketStatus) -> List[TicketEntity]:
        ...

    def count_by_department(self, department_id: str) -> int:
        """
        Conta TODAS as senhas já emitidas para o departamento,
        independente do status (base do ordinal da próxima senha).
        """
        ...

    def count_by_status(self, status: TicketStatus) -> int:
        ...


@runtime_checkable
class DepartmentRepository(Protocol):
    """Interface para departamentos (ordem de cadastro preservada)."""

    def save(self, department: DepartmentEntity) -> None:
        ...

    def get_by_id(self, department_id: str) -> Optional[DepartmentEntity]:
        ...

    def delete(self, department_id: str) -> bool:
        ...

    def list_all(self) -> List[DepartmentEntity]:
        ...


@runtime_checkable
class MediaRepository(Protocol):
    """Interface para a playlist (a ordem define o ciclo na TV)."""

    def append(self, media: MarketingMediaEntity) -> None:
        ...

    def get_by_id(self, media_id: str) -> Optional[MarketingMediaEntity]:
        ...

    def delete(self, media_id: str) -> bool:
        ...

    def list_all(self) -> List[MarketingMediaEntity]:
        ...


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Dicts preservam ordem de inserção, então list_all devolve as
    senhas na ordem de emissão. Um contador por departamento evita
    recontar o histórico a cada emissão.

    Example:
        repo = InMemoryTicketRepository()
        repo.save(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self):
        self._tickets: Dict[str, TicketEntity] = {}
        self._issued_by_department: Dict[str, int] = {}

    def save(self, ticket: TicketEntity) -> None:
        if ticket.id not in self._tickets:
            self._issued_by_department[ticket.department_id] = (
                self._issued_by_department.get(ticket.department_id, 0) + 1
            )
        self._tickets[ticket.id] = ticket

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        return self._tickets.get(ticket_id)

    def list_all(self) -> List[TicketEntity]:
        return list(self._tickets.values())

    def list_by_status(self, status: TicketStatus) -> List[TicketEntity]:
        return [t for t in self._tickets.values() if t.status == status]

    def count_by_department(self, department_id: str) -> int:
        return self._issued_by_department.get(department_id, 0)

    def count_by_status(self, status: TicketStatus) -> int:
        return sum(1 for t in self._tickets.values() if t.status == status)

    def count(self) -> int:
        return len(self._tickets)

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._tickets.clear()
        self._issued_by_department.clear()


class InMemoryDepartmentRepository:
    """Departamentos em memória."""

    def __init__(self):
        self._departments: Dict[str, DepartmentEntity] = {}

    def save(self, department: DepartmentEntity) -> None:
        self._departments[department.id] = department

    def get_by_id(self, department_id: str) -> Optional[DepartmentEntity]:
        return self._departments.get(department_id)

    def delete(self, department_id: str) -> bool:
        return self._departments.pop(department_id, None) is not None

    def list_all(self) -> List[DepartmentEntity]:
        return list(self._departments.values())


class InMemoryMediaRepository:
    """Playlist em memória, na ordem de cadastro."""

    def __init__(self):
        self._items: List[MarketingMediaEntity] = []

    def append(self, media: MarketingMediaEntity) -> None:
        self._items.append(media)

    def get_by_id(self, media_id: str) -> Optional[MarketingMediaEntity]:
        return next((m for m in self._items if m.id == media_id), None)

    def delete(self, media_id: str) -> bool:
        before = len(self._items)
        self._items = [m for m in self._items if m.id != media_id]
        return len(self._items) != before

    def list_all(self) -> List[MarketingMediaEntity]:
        return list(self._items)
