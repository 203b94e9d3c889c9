"""
Entidades do Domínio de Fila.

Este módulo define as entidades que encapsulam as regras
de negócio do atendimento presencial por senhas.

Entidades:
- DepartmentEntity: Setor que emite senhas (ex: Caixa, prefixo CXA)
- TicketEntity: Senha retirada no totem (agregado principal)
- MarketingMediaEntity: Item da playlist exibida na TV
- TicketStatus / MediaType: Enumerações de estado e tipo

Regras de Negócio Encapsuladas:
- Numeração <PREFIXO>-<NNN> derivada do ordinal no departamento
- Transições de status controladas (sem voltar, sem pular WAITING)
- calledAt/guichê definidos exatamente na chamada
- Senha finalizada ou cancelada é imutável
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Iterable, Tuple
from urllib.parse import urlparse
import re
import uuid

from src.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)


class TicketStatus(Enum):
    """
    Estados possíveis de uma senha.

    Fluxo de Estados:
        WAITING → CALLED → FINISHED
           │        └──┐ (rechamada: CALLED → CALLED)
           ├→ FINISHED
           └→ CANCELED
    """

    WAITING = "WAITING"
    CALLED = "CALLED"
    FINISHED = "FINISHED"
    CANCELED = "CANCELED"

    @property
    def is_terminal(self) -> bool:
        return self in (TicketStatus.FINISHED, TicketStatus.CANCELED)

    @classmethod
    def from_string(cls, value: str) -> "TicketStatus":
        """
        Converte string para enum.

        Raises:
            ValueError: Se valor inválido
        """
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Status inválido: {value}")


class MediaType(Enum):
    """Tipos de mídia aceitos na playlist de marketing."""

    IMAGE = "IMAGE"
    VIDEO = "VIDEO"

    @classmethod
    def from_string(cls, value: str) -> "MediaType":
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Tipo de mídia inválido: {value}")


def format_ticket_number(prefix: str, ordinal: int) -> str:
    """
    Formata o número exibido da senha.

    Example:
        format_ticket_number("CXA", 7)     # "CXA-007"
        format_ticket_number("CXA", 1234)  # "CXA-1234"
    """
    return f"{prefix}-{ordinal:03d}"


YOUTUBE_HOSTS = ("youtube.com", "youtu.be")
YOUTUBE_ID = re.compile(r"[\w-]{11}")


def extract_youtube_id(url: str) -> Optional[str]:
    """
    Extrai o ID de um vídeo do YouTube.

    Suporta:
    - https://www.youtube.com/watch?v=ID
    - https://youtu.be/ID
    - https://www.youtube.com/embed/ID
    - https://www.youtube.com/shorts/ID

    Só aceita hosts do YouTube e IDs de 11 caracteres.
    """
    url = (url or "").strip()
    if not url:
        return None
    host = urlparse(url if "//" in url else "//" + url).hostname or ""
    if not any(host == h or host.endswith("." + h) for h in YOUTUBE_HOSTS):
        return None
    for marker in ("youtu.be/", "/embed/", "/shorts/", "watch?v="):
        if marker in url:
            part = url.split(marker, 1)[1]
            vid = part.split("?", 1)[0].split("&", 1)[0].split("#", 1)[0].strip().strip("/")
            return vid if YOUTUBE_ID.fullmatch(vid) else None
    return None


@dataclass(frozen=True)
class DepartmentEntity:
    """
    Entidade de Domínio: Departamento.

    Imutável após criação; só pode ser removido por operação
    administrativa explícita. A remoção NÃO apaga as senhas já
    emitidas (leitores toleram department_id órfão).

    Attributes:
        id: Identificador único
        name: Nome exibido (ex: "Caixa")
        prefix: Código curto em maiúsculas (ex: "CXA")
        description: Descrição opcional
        sub_categories: Serviços oferecidos, em ordem de exibição
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    prefix: str = ""
    description: Optional[str] = None
    sub_categories: Tuple[str, ...] = ()

    PREFIX_MAX_LENGTH = 5

    @classmethod
    def create(
        cls,
        name: str,
        prefix: str,
        description: Optional[str] = None,
        sub_categories: Optional[Iterable[str]] = None,
        department_id: Optional[str] = None,
    ) -> "DepartmentEntity":
        """
        Factory method para criar departamento com validações.

        O prefixo é normalizado para maiúsculas. Colisão de prefixo
        entre departamentos é aceita (números ambíguos são risco
        conhecido).

        Raises:
            ValidationError: Se nome ou prefixo inválidos
        """
        if not name or not name.strip():
            raise ValidationError("Nome do departamento é obrigatório", field="name")

        prefix_clean = (prefix or "").strip().upper()
        if not prefix_clean:
            raise ValidationError("Prefixo é obrigatório", field="prefix")
        if len(prefix_clean) > cls.PREFIX_MAX_LENGTH or not prefix_clean.isalnum():
            raise ValidationError(
                f"Prefixo deve ser alfanumérico com até {cls.PREFIX_MAX_LENGTH} caracteres",
                field="prefix"
            )

        subs = tuple(s.strip() for s in (sub_categories or ()) if s and s.strip())

        kwargs = {}
        if department_id:
            kwargs["id"] = department_id

        return cls(
            name=name.strip(),
            prefix=prefix_clean,
            description=description.strip() if description else None,
            sub_categories=subs,
            **kwargs,
        )


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Senha.

    Invariantes:
    - number é único no departamento e crescente na ordem de emissão
    - Status só avança (WAITING → CALLED → FINISHED, WAITING → CANCELED)
    - called_at e counter são definidos exatamente na chamada
    - Rechamada atualiza apenas called_at
    - Senha FINISHED ou CANCELED não muda mais

    Attributes:
        id: Identificador único (UUID)
        department_id: Departamento emissor (pode ficar órfão)
        number: Número exibido (ex: "CXA-001")
        status: Estado atual
        created_at: Momento da emissão
        called_at: Momento da última chamada/rechamada
        counter: Guichê que chamou a senha
        is_priority: Atendimento prioritário
        sub_category: Serviço escolhido no totem
        customer_id: Identificação opcional (CPF)

    Example:
        ticket = TicketEntity.issue(department, ordinal=1, is_priority=False,
                                    created_at=datetime.now())
        ticket.call("05", datetime.now())
        ticket.finish()
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    department_id: str = ""
    number: str = ""
    status: TicketStatus = field(default=TicketStatus.WAITING)
    created_at: datetime = field(default_factory=datetime.now)
    called_at: Optional[datetime] = None
    counter: Optional[str] = None
    is_priority: bool = False
    sub_category: Optional[str] = None
    customer_id: Optional[str] = None

    @classmethod
    def issue(
        cls,
        department: DepartmentEntity,
        ordinal: int,
        is_priority: bool,
        created_at: datetime,
        sub_category: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> "TicketEntity":
        """
        Factory method para emitir senha.

        Args:
            department: Departamento emissor
            ordinal: Posição da senha entre TODAS as já emitidas
                para o departamento (1-indexed)
            is_priority: Atendimento prioritário
            created_at: Momento da emissão
            sub_category: Serviço escolhido no totem (texto livre)
            customer_id: CPF opcional

        Raises:
            ValidationError: Se ordinal inválido
        """
        if ordinal < 1:
            raise ValidationError("Ordinal deve ser positivo", field="ordinal")

        sub = sub_category.strip() if sub_category and sub_category.strip() else None

        customer = customer_id.strip() if customer_id and customer_id.strip() else None

        return cls(
            department_id=department.id,
            number=format_ticket_number(department.prefix, ordinal),
            status=TicketStatus.WAITING,
            created_at=created_at,
            is_priority=bool(is_priority),
            sub_category=sub,
            customer_id=customer,
        )

    def call(self, counter: str, at: datetime) -> None:
        """
        Chama a senha para um guichê.

        Raises:
            ValidationError: Se guichê vazio
            BusinessRuleViolationError: Se senha não está aguardando
        """
        if not counter or not str(counter).strip():
            raise ValidationError("Guichê é obrigatório", field="counter")

        if self.status != TicketStatus.WAITING:
            raise BusinessRuleViolationError(
                f"Senha {self.number} não está aguardando ({self.status.value})",
                rule="chamada_requer_espera"
            )

        self.status = TicketStatus.CALLED
        self.counter = str(counter).strip()
        self.called_at = at

    def recall(self, at: datetime) -> None:
        """
        Rechama a senha no mesmo guichê.

        Apenas called_at avança; status e guichê permanecem.

        Raises:
            BusinessRuleViolationError: Se senha não está chamada
        """
        if self.status != TicketStatus.CALLED:
            raise BusinessRuleViolationError(
                "Apenas senhas chamadas podem ser rechamadas",
                rule="rechamada_requer_chamada"
            )
        self.called_at = at

    def finish(self) -> None:
        """
        Finaliza o atendimento.

        Raises:
            BusinessRuleViolationError: Se senha já finalizada/cancelada
        """
        if self.status.is_terminal:
            raise BusinessRuleViolationError(
                f"Senha {self.number} já está encerrada ({self.status.value})",
                rule="senha_encerrada_imutavel"
            )
        self.status = TicketStatus.FINISHED

    def cancel(self) -> None:
        """
        Cancela senha que ainda aguarda (cliente desistiu).

        Raises:
            BusinessRuleViolationError: Se senha não está aguardando
        """
        if self.status != TicketStatus.WAITING:
            raise BusinessRuleViolationError(
                "Apenas senhas aguardando podem ser canceladas",
                rule="cancelamento_requer_espera"
            )
        self.status = TicketStatus.CANCELED

    @property
    def is_waiting(self) -> bool:
        return self.status == TicketStatus.WAITING

    @property
    def is_called(self) -> bool:
        return self.status == TicketStatus.CALLED

    def wait_seconds(self, now: datetime) -> float:
        """Tempo de espera até a chamada (ou até agora, se ainda aguarda)."""
        end = self.called_at or now
        return max((end - self.created_at).total_seconds(), 0.0)

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"number={self.number}, "
            f"status={self.status.value}, "
            f"priority={self.is_priority}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class MarketingMediaEntity:
    """
    Entidade de Domínio: Item da playlist de marketing.

    A ordem na playlist define a ordem do ciclo na TV. Cada item
    fica visível pela sua própria duração.

    Attributes:
        id: Identificador único
        type: IMAGE ou VIDEO
        url: Endereço do recurso (imagem, MP4, stream ou YouTube)
        title: Título exibido sobre a mídia
        duration: Segundos em tela (> 0)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    type: MediaType = MediaType.IMAGE
    url: str = ""
    title: str = ""
    duration: float = 10

    @classmethod
    def create(
        cls,
        media_type: MediaType,
        url: str,
        title: str,
        duration: float,
        media_id: Optional[str] = None,
    ) -> "MarketingMediaEntity":
        """
        Factory method com validações.

        Raises:
            ValidationError: Se URL vazia ou duração não positiva
        """
        if not url or not url.strip():
            raise ValidationError("URL da mídia é obrigatória", field="url")
        try:
            seconds = float(duration)
        except (TypeError, ValueError):
            raise ValidationError("Duração inválida", field="duration")
        if seconds <= 0:
            raise ValidationError("Duração deve ser maior que zero", field="duration")

        kwargs = {}
        if media_id:
            kwargs["id"] = media_id

        return cls(
            type=media_type,
            url=url.strip(),
            title=(title or "").strip(),
            duration=seconds,
            **kwargs,
        )

    @property
    def youtube_id(self) -> Optional[str]:
        """ID do YouTube quando o vídeo deve ser embutido em vez de tocado nativamente."""
        if self.type != MediaType.VIDEO:
            return None
        return extract_youtube_id(self.url)
