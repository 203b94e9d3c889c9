"""
Shared Domain Components.

Contém componentes compartilhados entre os domínios de fila e display:
- Exceções de domínio
- Interfaces (Ports)
- Base classes para Domain Events
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    DepartmentNotFoundError,
    BusinessRuleViolationError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher, Clock, SystemClock

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "DepartmentNotFoundError",
    "BusinessRuleViolationError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "Clock",
    "SystemClock",
]
