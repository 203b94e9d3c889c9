"""
Scheduler - Seleção da próxima senha.

Algoritmo puro sobre o conjunto de senhas do registro: não guarda
estado e não altera nada. Quem altera é o CallNextTicketService,
dentro da seção crítica do UnitOfWork.

Ordenação da fila:
    1. Prioritárias antes de TODAS as normais
    2. Dentro de cada classe, a mais antiga primeiro (FIFO)
    3. created_at idêntico mantém a ordem de emissão (sort estável)
"""

from typing import Iterable, List, Optional, Tuple
from datetime import datetime

from .entities import TicketEntity, TicketStatus


def call_order_key(ticket: TicketEntity) -> Tuple[bool, datetime]:
    """Chave de ordenação da fila (False ordena antes de True)."""
    return (not ticket.is_priority, ticket.created_at)


def order_waiting(
    tickets: Iterable[TicketEntity],
    department_id: Optional[str] = None,
) -> List[TicketEntity]:
    """
    Senhas aguardando na ordem em que serão chamadas.

    Args:
        tickets: Senhas na ordem de emissão
        department_id: Restringe a um departamento (opcional)

    Returns:
        Lista ordenada (prioridade, depois FIFO)
    """
    waiting = [
        t for t in tickets
        if t.status == TicketStatus.WAITING
        and (department_id is None or t.department_id == department_id)
    ]
    return sorted(waiting, key=call_order_key)


def select_next(
    tickets: Iterable[TicketEntity],
    department_id: Optional[str] = None,
) -> Optional[TicketEntity]:
    """
    Candidata à próxima chamada, ou None se a fila está vazia.
    """
    ordered = order_waiting(tickets, department_id)
    return ordered[0] if ordered else None


def _recency_key(ticket: TicketEntity) -> Tuple[datetime, datetime, str]:
    # called_at empatado: desempate determinístico por emissão e depois ID
    return (ticket.called_at or datetime.min, ticket.created_at, ticket.id)


def last_called(tickets: Iterable[TicketEntity]) -> Optional[TicketEntity]:
    """
    Senha CALLED com o maior called_at (a que aparece em destaque na TV).
    """
    called = [t for t in tickets if t.status == TicketStatus.CALLED]
    if not called:
        return None
    return max(called, key=_recency_key)


def recent_calls(tickets: Iterable[TicketEntity], limit: int = 4) -> List[TicketEntity]:
    """
    Histórico "Últimas Chamadas": da 2ª à (limit+1)ª chamada mais recente.

    Considera senhas ainda chamadas ou já finalizadas; a primeira da
    lista é pulada porque já está em destaque no painel.
    """
    history = [
        t for t in tickets
        if t.status in (TicketStatus.CALLED, TicketStatus.FINISHED)
        and t.called_at is not None
    ]
    history.sort(key=_recency_key, reverse=True)
    return history[1:1 + limit]
