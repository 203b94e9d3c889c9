"""
Data Transfer Objects (DTOs) do Domínio de Fila.

DTOs transportam dados entre camadas sem vazar entidades mutáveis:
tudo que sai do QueueEngine é uma cópia (snapshot), segura para ser
lida a qualquer frequência pelo totem, guichês e TV.

Tipos de DTOs:
- Input DTOs: Dados de entrada das operações
- Output DTOs: Snapshots de senhas, departamentos e mídias
- QueueSnapshotDTO: Estado agregado da fila
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Tuple

from .entities import (
    DepartmentEntity,
    MarketingMediaEntity,
    TicketEntity,
)


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class GenerateTicketInputDTO:
    """
    DTO de entrada para emitir senha no totem.

    Attributes:
        department_id: Departamento escolhido
        is_priority: Atendimento prioritário
        sub_category: Serviço escolhido (opcional)
        customer_id: CPF (opcional)
    """

    department_id: str
    is_priority: bool = False
    sub_category: Optional[str] = None
    customer_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "department_id": self.department_id,
            "is_priority": self.is_priority,
            "sub_category": self.sub_category,
            "customer_id": self.customer_id,
        }


@dataclass(frozen=True)
class CallNextTicketInputDTO:
    """
    DTO de entrada para chamar a próxima senha.

    Attributes:
        counter: Guichê que está chamando (ex: "05")
        department_id: Restringe a chamada a um departamento (opcional)
    """

    counter: str
    department_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "counter": self.counter,
            "department_id": self.department_id,
        }


@dataclass(frozen=True)
class AddDepartmentInputDTO:
    """DTO de entrada para cadastrar departamento."""

    name: str
    prefix: str
    description: Optional[str] = None
    sub_categories: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AddMediaInputDTO:
    """DTO de entrada para incluir mídia na playlist."""

    type: str
    url: str
    title: str
    duration: float


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída com dados da senha.

    Attributes:
        id: Identificador único
        department_id: Departamento emissor
        number: Número exibido
        status: Valor do enum (ex: "CALLED")
        created_at: Momento da emissão
        called_at: Última chamada/rechamada
        counter: Guichê
        is_priority: Atendimento prioritário
        sub_category: Serviço escolhido
        customer_id: CPF informado
    """

    id: str
    department_id: str
    number: str
    status: str
    created_at: datetime
    called_at: Optional[datetime]
    counter: Optional[str]
    is_priority: bool
    sub_category: Optional[str] = None
    customer_id: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketOutputDTO":
        return cls(
            id=entity.id,
            department_id=entity.department_id,
            number=entity.number,
            status=entity.status.value,
            created_at=entity.created_at,
            called_at=entity.called_at,
            counter=entity.counter,
            is_priority=entity.is_priority,
            sub_category=entity.sub_category,
            customer_id=entity.customer_id,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "department_id": self.department_id,
            "number": self.number,
            "status": self.status,
            "created_at": self.created_at.isoformat(),
            "called_at": self.called_at.isoformat() if self.called_at else None,
            "counter": self.counter,
            "is_priority": self.is_priority,
            "sub_category": self.sub_category,
            "customer_id": self.customer_id,
        }


@dataclass
class DepartmentOutputDTO:
    """DTO de saída de departamento."""

    id: str
    name: str
    prefix: str
    description: Optional[str]
    sub_categories: List[str] = field(default_factory=list)

    @classmethod
    def from_entity(cls, entity: DepartmentEntity) -> "DepartmentOutputDTO":
        return cls(
            id=entity.id,
            name=entity.name,
            prefix=entity.prefix,
            description=entity.description,
            sub_categories=list(entity.sub_categories),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "prefix": self.prefix,
            "description": self.description,
            "sub_categories": list(self.sub_categories),
        }


@dataclass
class MediaOutputDTO:
    """
    DTO de saída de item da playlist.

    youtube_id vem preenchido quando o vídeo deve ser embutido
    (player do YouTube) em vez de tocado pelo player nativo.
    """

    id: str
    type: str
    url: str
    title: str
    duration: float
    youtube_id: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: MarketingMediaEntity) -> "MediaOutputDTO":
        return cls(
            id=entity.id,
            type=entity.type.value,
            url=entity.url,
            title=entity.title,
            duration=entity.duration,
            youtube_id=entity.youtube_id,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "url": self.url,
            "title": self.title,
            "duration": self.duration,
            "youtube_id": self.youtube_id,
        }


@dataclass
class QueueSnapshotDTO:
    """
    Estado agregado da fila em um instante.

    Attributes:
        departments: Departamentos cadastrados
        tickets: Todas as senhas, na ordem de emissão
        marketing_playlist: Playlist na ordem do ciclo
        last_called_ticket: Senha em destaque (ou None)
        waiting_count: Quantidade de senhas aguardando
        recent_calls: Histórico "Últimas Chamadas"
        revision: Revisão do estado (cresce a cada mutação)
    """

    departments: List[DepartmentOutputDTO]
    tickets: List[TicketOutputDTO]
    marketing_playlist: List[MediaOutputDTO]
    last_called_ticket: Optional[TicketOutputDTO]
    waiting_count: int
    recent_calls: List[TicketOutputDTO] = field(default_factory=list)
    revision: int = 0

    def to_dict(self) -> dict:
        return {
            "departments": [d.to_dict() for d in self.departments],
            "tickets": [t.to_dict() for t in self.tickets],
            "marketing_playlist": [m.to_dict() for m in self.marketing_playlist],
            "last_called_ticket": (
                self.last_called_ticket.to_dict() if self.last_called_ticket else None
            ),
            "waiting_count": self.waiting_count,
            "recent_calls": [t.to_dict() for t in self.recent_calls],
            "revision": self.revision,
        }
