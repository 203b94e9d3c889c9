"""
Domain Events do Domínio de Fila.

Eventos:
- TicketGeneratedEvent: Senha emitida no totem
- TicketCalledEvent: Senha chamada para um guichê
- TicketRecalledEvent: Senha rechamada (mesmo guichê)
- TicketFinishedEvent: Atendimento finalizado
- TicketCanceledEvent: Senha cancelada antes da chamada

Uso:
    with uow:
        ticket.call(counter, now)
        repo.save(ticket)
        uow.publish_event(TicketCalledEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional

from src.core.shared.events import DomainEvent


@dataclass
class TicketGeneratedEvent(DomainEvent):
    """
    Evento: Senha foi emitida.

    Attributes:
        department_id: Departamento emissor
        number: Número da senha (ex: "CXA-001")
        is_priority: Atendimento prioritário
        sub_category: Serviço escolhido no totem
    """

    department_id: str = ""
    number: str = ""
    is_priority: bool = False
    sub_category: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        data = {
            "department_id": self.department_id,
            "number": self.number,
            "is_priority": self.is_priority,
        }
        if self.sub_category:
            data["sub_category"] = self.sub_category
        return data


@dataclass
class TicketCalledEvent(DomainEvent):
    """
    Evento: Senha foi chamada.

    Attributes:
        number: Número da senha
        counter: Guichê
        wait_seconds: Tempo entre emissão e chamada
    """

    number: str = ""
    counter: str = ""
    wait_seconds: float = 0.0

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "counter": self.counter,
            "wait_seconds": self.wait_seconds,
        }


@dataclass
class TicketRecalledEvent(DomainEvent):
    """Evento: Senha foi rechamada no mesmo guichê."""

    number: str = ""
    counter: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"number": self.number, "counter": self.counter}


@dataclass
class TicketFinishedEvent(DomainEvent):
    """
    Evento: Atendimento foi finalizado.

    Attributes:
        number: Número da senha
        counter: Guichê (None se finalizada sem chamada)
        service_seconds: Tempo desde a última chamada (None se nunca chamada)
    """

    number: str = ""
    counter: Optional[str] = None
    service_seconds: Optional[float] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "counter": self.counter,
            "service_seconds": self.service_seconds,
        }


@dataclass
class TicketCanceledEvent(DomainEvent):
    """Evento: Senha foi cancelada enquanto aguardava."""

    number: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"number": self.number}
