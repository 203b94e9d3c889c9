"""
Domínio de Fila - Atendimento presencial por senhas.

Este módulo contém toda a lógica de negócio da fila, incluindo:
- Entidades (TicketEntity, DepartmentEntity, MarketingMediaEntity)
- Scheduler (prioridade primeiro, FIFO dentro da classe)
- Use Cases (GenerateTicket, CallNextTicket, RecallTicket, FinishTicket)
- Domain Events (TicketGenerated, TicketCalled, TicketRecalled, TicketFinished)
- DTOs (Input/Output Data Transfer Objects)
- Ports (Interfaces para repositórios)
- QueueEngine (fachada compartilhada por totem, guichês e TV)

Características do Domínio:
- Numeração sequencial por departamento (CXA-001, CXA-002, ...)
- Seleção e marcação da próxima senha em uma única seção crítica
- Transições de status controladas na entidade
- Eventos disparados para side-effects assíncronos
"""

from .entities import (
    TicketEntity,
    TicketStatus,
    DepartmentEntity,
    MarketingMediaEntity,
    MediaType,
)
from .events import (
    TicketGeneratedEvent,
    TicketCalledEvent,
    TicketRecalledEvent,
    TicketFinishedEvent,
    TicketCanceledEvent,
)
from .dtos import (
    TicketOutputDTO,
    DepartmentOutputDTO,
    MediaOutputDTO,
    QueueSnapshotDTO,
)
from .ports import (
    TicketRepository,
    DepartmentRepository,
    MediaRepository,
    InMemoryTicketRepository,
    InMemoryDepartmentRepository,
    InMemoryMediaRepository,
)
from .engine import QueueEngine, ChangeKind

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "DepartmentEntity",
    "MarketingMediaEntity",
    "MediaType",
    # Events
    "TicketGeneratedEvent",
    "TicketCalledEvent",
    "TicketRecalledEvent",
    "TicketFinishedEvent",
    "TicketCanceledEvent",
    # DTOs
    "TicketOutputDTO",
    "DepartmentOutputDTO",
    "MediaOutputDTO",
    "QueueSnapshotDTO",
    # Ports
    "TicketRepository",
    "DepartmentRepository",
    "MediaRepository",
    "InMemoryTicketRepository",
    "InMemoryDepartmentRepository",
    "InMemoryMediaRepository",
    # Engine
    "QueueEngine",
    "ChangeKind",
]
