"""
QueueEngine - Fonte única da verdade da fila.

Fachada sobre os use cases: totem, guichês, TV e API HTTP falam
com a mesma instância (singleton no Container). Cada operação
cria seu próprio UnitOfWork a partir da factory injetada; todas
as units of work compartilham o mesmo lock, então as mutações
são serializadas.

Observadores (ex: DisplayPanel) assinam mudanças com subscribe().
A notificação acontece DEPOIS do commit e fora do lock, com o
tipo de mudança (ChangeKind) para que cada observador reaja só
ao que lhe interessa.

Example:
    engine = QueueEngine(tickets, departments, media, uow_factory, clock)
    engine.subscribe(lambda kind: print(kind, engine.revision))

    ticket = engine.generate_ticket("2", is_priority=False)
    called = engine.call_next_ticket("05")
"""

import logging
import threading
from enum import Enum
from typing import Callable, Iterable, List, Optional

from src.core.shared.interfaces import Clock, SystemClock, UnitOfWork

from . import scheduler
from .ports import TicketRepository, DepartmentRepository, MediaRepository
from .entities import TicketStatus
from .dtos import (
    AddDepartmentInputDTO,
    AddMediaInputDTO,
    CallNextTicketInputDTO,
    DepartmentOutputDTO,
    GenerateTicketInputDTO,
    MediaOutputDTO,
    QueueSnapshotDTO,
    TicketOutputDTO,
)
from .use_cases import (
    AddDepartmentService,
    AddMediaService,
    CallNextTicketService,
    CancelTicketService,
    FinishTicketService,
    GenerateTicketService,
    GetQueueSnapshotService,
    ListWaitingTicketsService,
    RecallTicketService,
    RemoveDepartmentService,
    RemoveMediaService,
)


logger = logging.getLogger(__name__)


class ChangeKind(Enum):
    """Parte do estado que mudou em um commit."""

    TICKETS = "TICKETS"
    DEPARTMENTS = "DEPARTMENTS"
    PLAYLIST = "PLAYLIST"


ChangeListener = Callable[[ChangeKind], None]


class QueueEngine:
    """
    Fachada da fila compartilhada.

    Attributes:
        revision: Cresce a cada mutação efetivada
        history_size: Tamanho do histórico "Últimas Chamadas"
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        department_repo: DepartmentRepository,
        media_repo: MediaRepository,
        uow_factory: Callable[[], UnitOfWork],
        clock: Optional[Clock] = None,
        history_size: int = 4,
    ):
        self._tickets = ticket_repo
        self._departments = department_repo
        self._media = media_repo
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()
        self.history_size = history_size

        self._revision = 0
        self._listeners: List[ChangeListener] = []
        self._listeners_lock = threading.Lock()

    @property
    def clock(self) -> Clock:
        return self._clock

    # =========================================================================
    # Mutações
    # =========================================================================

    def generate_ticket(
        self,
        department_id: str,
        is_priority: bool = False,
        sub_category: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> TicketOutputDTO:
        """
        Emite senha no totem.

        Raises:
            DepartmentNotFoundError: Se departamento não existe
        """
        service = GenerateTicketService(
            self._tickets, self._departments, self._uow_factory(), self._clock
        )
        ticket = service.execute(
            GenerateTicketInputDTO(
                department_id=department_id,
                is_priority=is_priority,
                sub_category=sub_category,
                customer_id=customer_id,
            )
        )
        self._changed(ChangeKind.TICKETS)
        return ticket

    def call_next_ticket(
        self,
        counter: str,
        department_id: Optional[str] = None,
    ) -> Optional[TicketOutputDTO]:
        """Chama a próxima senha; None se ninguém aguarda."""
        service = CallNextTicketService(self._tickets, self._uow_factory(), self._clock)
        ticket = service.execute(
            CallNextTicketInputDTO(counter=counter, department_id=department_id)
        )
        if ticket is not None:
            self._changed(ChangeKind.TICKETS)
        return ticket

    def recall_ticket(self, ticket_id: str) -> None:
        service = RecallTicketService(self._tickets, self._uow_factory(), self._clock)
        if service.execute(ticket_id):
            self._changed(ChangeKind.TICKETS)

    def finish_ticket(self, ticket_id: str) -> None:
        service = FinishTicketService(self._tickets, self._uow_factory(), self._clock)
        if service.execute(ticket_id):
            self._changed(ChangeKind.TICKETS)

    def cancel_ticket(self, ticket_id: str) -> None:
        service = CancelTicketService(self._tickets, self._uow_factory())
        if service.execute(ticket_id):
            self._changed(ChangeKind.TICKETS)

    def add_department(
        self,
        name: str,
        prefix: str,
        description: Optional[str] = None,
        sub_categories: Optional[Iterable[str]] = None,
        department_id: Optional[str] = None,
    ) -> DepartmentOutputDTO:
        service = AddDepartmentService(self._departments, self._uow_factory())
        department = service.execute(
            AddDepartmentInputDTO(
                name=name,
                prefix=prefix,
                description=description,
                sub_categories=tuple(sub_categories or ()),
            ),
            department_id=department_id,
        )
        self._changed(ChangeKind.DEPARTMENTS)
        return department

    def remove_department(self, department_id: str) -> None:
        service = RemoveDepartmentService(self._departments, self._uow_factory())
        if service.execute(department_id):
            self._changed(ChangeKind.DEPARTMENTS)

    def add_media(
        self,
        media_type: str,
        url: str,
        title: str,
        duration: float,
        media_id: Optional[str] = None,
    ) -> MediaOutputDTO:
        service = AddMediaService(self._media, self._uow_factory())
        media = service.execute(
            AddMediaInputDTO(type=media_type, url=url, title=title, duration=duration),
            media_id=media_id,
        )
        self._changed(ChangeKind.PLAYLIST)
        return media

    def remove_media(self, media_id: str) -> None:
        service = RemoveMediaService(self._media, self._uow_factory())
        if service.execute(media_id):
            self._changed(ChangeKind.PLAYLIST)

    # =========================================================================
    # Projeções (snapshots)
    # =========================================================================

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def departments(self) -> List[DepartmentOutputDTO]:
        with self._uow_factory():
            return [DepartmentOutputDTO.from_entity(d) for d in self._departments.list_all()]

    @property
    def tickets(self) -> List[TicketOutputDTO]:
        with self._uow_factory():
            return [TicketOutputDTO.from_entity(t) for t in self._tickets.list_all()]

    @property
    def marketing_playlist(self) -> List[MediaOutputDTO]:
        with self._uow_factory():
            return [MediaOutputDTO.from_entity(m) for m in self._media.list_all()]

    @property
    def last_called_ticket(self) -> Optional[TicketOutputDTO]:
        with self._uow_factory():
            last = scheduler.last_called(self._tickets.list_by_status(TicketStatus.CALLED))
            return TicketOutputDTO.from_entity(last) if last else None

    @property
    def waiting_count(self) -> int:
        with self._uow_factory():
            return self._tickets.count_by_status(TicketStatus.WAITING)

    def waiting_tickets(self, department_id: Optional[str] = None) -> List[TicketOutputDTO]:
        """Senhas aguardando, na ordem em que serão chamadas."""
        return ListWaitingTicketsService(self._tickets, self._uow_factory()).execute(
            department_id
        )

    def recent_calls(self, limit: Optional[int] = None) -> List[TicketOutputDTO]:
        """Histórico "Últimas Chamadas" (sem a senha em destaque)."""
        size = self.history_size if limit is None else limit
        with self._uow_factory():
            return [
                TicketOutputDTO.from_entity(t)
                for t in scheduler.recent_calls(self._tickets.list_all(), size)
            ]

    def department_name(self, department_id: str) -> Optional[str]:
        """Nome do departamento, ou None se foi removido."""
        with self._uow_factory():
            department = self._departments.get_by_id(department_id)
            return department.name if department else None

    def snapshot(self) -> QueueSnapshotDTO:
        service = GetQueueSnapshotService(
            self._tickets,
            self._departments,
            self._media,
            self._uow_factory(),
            history_size=self.history_size,
        )
        return service.execute(revision=self._revision)

    # =========================================================================
    # Observadores
    # =========================================================================

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Registra observador de mudanças.

        Returns:
            Função que cancela a assinatura
        """
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: ChangeListener) -> None:
        with self._listeners_lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _changed(self, kind: ChangeKind) -> None:
        with self._listeners_lock:
            self._revision += 1
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(kind)
            except Exception:
                # Observador com defeito não pode derrubar a operação
                logger.exception(f"Falha em observador da fila ({kind.value})")
