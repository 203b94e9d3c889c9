"""
Use Cases (Application Services) do Domínio de Fila.

Este módulo contém os casos de uso da fila, que orquestram
entidades, repositórios e eventos dentro do UnitOfWork.

Use Cases implementados:
- GenerateTicketService: Emite senha no totem
- CallNextTicketService: Chama a próxima senha para um guichê
- RecallTicketService: Rechama senha já chamada
- FinishTicketService: Finaliza atendimento
- CancelTicketService: Cancela senha que ainda aguarda
- AddDepartmentService / RemoveDepartmentService: Administração
- AddMediaService / RemoveMediaService: Playlist de marketing
- GetQueueSnapshotService: Leitura agregada da fila

Responsabilidades dos Use Cases:
- Coordenar entidades
- Serializar mutações (via UoW)
- Disparar eventos de domínio
- Retornar DTOs de saída

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Sem lógica de infraestrutura
"""

import logging
from typing import List, Optional

from src.core.shared.interfaces import UnitOfWork, Clock
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    DepartmentNotFoundError,
    ValidationError,
)

from .ports import TicketRepository, DepartmentRepository, MediaRepository
from .entities import (
    DepartmentEntity,
    MarketingMediaEntity,
    MediaType,
    TicketEntity,
    TicketStatus,
)
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
from .events import (
    TicketCalledEvent,
    TicketCanceledEvent,
    TicketFinishedEvent,
    TicketGeneratedEvent,
    TicketRecalledEvent,
)
from . import scheduler


logger = logging.getLogger(__name__)


class GenerateTicketService:
    """
    Use Case: Emitir uma nova senha.

    Fluxo:
    1. Buscar departamento (erro se não existe)
    2. Calcular ordinal (total já emitido + 1)
    3. Criar entidade Ticket em WAITING
    4. Persistir no registro
    5. Disparar evento TicketGenerated

    O passo 2 e o passo 4 acontecem na mesma seção crítica, então
    dois totens emitindo ao mesmo tempo nunca recebem o mesmo número.

    Example:
        service = GenerateTicketService(ticket_repo, department_repo, uow, clock)
        output = service.execute(GenerateTicketInputDTO(department_id="2"))
        print(output.number)  # "CXA-001"
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        department_repo: DepartmentRepository,
        uow: UnitOfWork,
        clock: Clock,
    ):
        """
        Inicializa service com dependências injetadas.

        Args:
            ticket_repo: Registro de senhas
            department_repo: Departamentos cadastrados
            uow: Unit of Work (seção crítica)
            clock: Fonte de tempo
        """
        self.ticket_repo = ticket_repo
        self.department_repo = department_repo
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: GenerateTicketInputDTO) -> TicketOutputDTO:
        """
        Executa emissão de senha em seção crítica.

        Returns:
            DTO com a senha emitida

        Raises:
            DepartmentNotFoundError: Se departamento não existe
        """
        with self.uow:
            department = self.department_repo.get_by_id(input_dto.department_id)
            if department is None:
                raise DepartmentNotFoundError(input_dto.department_id)

            ordinal = self.ticket_repo.count_by_department(department.id) + 1

            ticket = TicketEntity.issue(
                department=department,
                ordinal=ordinal,
                is_priority=input_dto.is_priority,
                created_at=self.clock.now(),
                sub_category=input_dto.sub_category,
                customer_id=input_dto.customer_id,
            )

            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketGeneratedEvent(
                    aggregate_id=ticket.id,
                    department_id=department.id,
                    number=ticket.number,
                    is_priority=ticket.is_priority,
                    sub_category=ticket.sub_category,
                )
            )

        return TicketOutputDTO.from_entity(ticket)


class CallNextTicketService:
    """
    Use Case: Chamar a próxima senha.

    Fluxo:
    1. Selecionar candidata (prioridade, depois FIFO)
    2. Marcar como CALLED com guichê e horário
    3. Disparar evento TicketCalled

    Seleção e marcação ficam na MESMA seção crítica: guichês
    concorrentes nunca recebem a mesma senha.

    Fila vazia não é erro: retorna None sem efeito colateral.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork, clock: Clock):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: CallNextTicketInputDTO) -> Optional[TicketOutputDTO]:
        """
        Chama a próxima senha para o guichê.

        Returns:
            DTO da senha chamada, ou None se não há senha aguardando

        Raises:
            ValidationError: Se guichê vazio
        """
        if not input_dto.counter or not str(input_dto.counter).strip():
            raise ValidationError("Guichê é obrigatório", field="counter")

        with self.uow:
            candidate = scheduler.select_next(
                self.ticket_repo.list_by_status(TicketStatus.WAITING),
                department_id=input_dto.department_id,
            )
            if candidate is None:
                logger.debug(f"Nenhuma senha aguardando (guichê {input_dto.counter})")
                return None

            now = self.clock.now()
            candidate.call(input_dto.counter, now)
            self.ticket_repo.save(candidate)

            self.uow.publish_event(
                TicketCalledEvent(
                    aggregate_id=candidate.id,
                    number=candidate.number,
                    counter=candidate.counter,
                    wait_seconds=candidate.wait_seconds(now),
                )
            )

        return TicketOutputDTO.from_entity(candidate)


class RecallTicketService:
    """
    Use Case: Rechamar senha.

    Apenas called_at avança. Senha inexistente ou fora de
    CALLED é ignorada (no-op), como um clique repetido no painel.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork, clock: Clock):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.clock = clock

    def execute(self, ticket_id: str) -> bool:
        """
        Returns:
            True se a senha foi rechamada
        """
        with self.uow:
            ticket = self.ticket_repo.get_by_id(ticket_id)
            if ticket is None:
                logger.debug(f"Rechamada ignorada: senha {ticket_id} não existe")
                return False

            try:
                ticket.recall(self.clock.now())
            except BusinessRuleViolationError as e:
                logger.debug(f"Rechamada ignorada: {e}")
                return False

            self.ticket_repo.save(ticket)
            self.uow.publish_event(
                TicketRecalledEvent(
                    aggregate_id=ticket.id,
                    number=ticket.number,
                    counter=ticket.counter,
                )
            )

        return True


class FinishTicketService:
    """
    Use Case: Finalizar atendimento.

    Aceita senha WAITING ou CALLED. Senha já encerrada ou
    inexistente é ignorada.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork, clock: Clock):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.clock = clock

    def execute(self, ticket_id: str) -> bool:
        with self.uow:
            ticket = self.ticket_repo.get_by_id(ticket_id)
            if ticket is None:
                logger.debug(f"Finalização ignorada: senha {ticket_id} não existe")
                return False

            try:
                ticket.finish()
            except BusinessRuleViolationError as e:
                logger.debug(f"Finalização ignorada: {e}")
                return False

            self.ticket_repo.save(ticket)
            self.uow.publish_event(
                TicketFinishedEvent(
                    aggregate_id=ticket.id,
                    number=ticket.number,
                    counter=ticket.counter,
                    service_seconds=self._service_seconds(ticket),
                )
            )

        return True

    def _service_seconds(self, ticket: TicketEntity) -> Optional[float]:
        """Tempo desde a última chamada, em segundos."""
        if ticket.called_at is None:
            return None
        delta = self.clock.now() - ticket.called_at
        return max(delta.total_seconds(), 0.0)


class CancelTicketService:
    """Use Case: Cancelar senha que ainda aguarda (cliente desistiu)."""

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, ticket_id: str) -> bool:
        with self.uow:
            ticket = self.ticket_repo.get_by_id(ticket_id)
            if ticket is None:
                return False

            try:
                ticket.cancel()
            except BusinessRuleViolationError as e:
                logger.debug(f"Cancelamento ignorado: {e}")
                return False

            self.ticket_repo.save(ticket)
            self.uow.publish_event(
                TicketCanceledEvent(aggregate_id=ticket.id, number=ticket.number)
            )

        return True


class AddDepartmentService:
    """
    Use Case: Cadastrar departamento.

    Raises:
        ValidationError: Se nome ou prefixo inválidos
        BusinessRuleViolationError: Se o ID já está cadastrado
    """

    def __init__(self, department_repo: DepartmentRepository, uow: UnitOfWork):
        self.department_repo = department_repo
        self.uow = uow

    def execute(
        self,
        input_dto: AddDepartmentInputDTO,
        department_id: Optional[str] = None,
    ) -> DepartmentOutputDTO:
        department = DepartmentEntity.create(
            name=input_dto.name,
            prefix=input_dto.prefix,
            description=input_dto.description,
            sub_categories=input_dto.sub_categories,
            department_id=department_id,
        )
        with self.uow:
            if self.department_repo.get_by_id(department.id) is not None:
                raise BusinessRuleViolationError(
                    f"Departamento {department.id} já cadastrado",
                    rule="departamento_imutavel",
                )
            self.department_repo.save(department)

        logger.info(f"Departamento cadastrado: {department.name} ({department.prefix})")
        return DepartmentOutputDTO.from_entity(department)


class RemoveDepartmentService:
    """
    Use Case: Remover departamento.

    Senhas já emitidas permanecem no registro com department_id órfão.
    """

    def __init__(self, department_repo: DepartmentRepository, uow: UnitOfWork):
        self.department_repo = department_repo
        self.uow = uow

    def execute(self, department_id: str) -> bool:
        with self.uow:
            removed = self.department_repo.delete(department_id)
        if removed:
            logger.info(f"Departamento removido: {department_id}")
        return removed


class AddMediaService:
    """Use Case: Incluir mídia no fim da playlist."""

    def __init__(self, media_repo: MediaRepository, uow: UnitOfWork):
        self.media_repo = media_repo
        self.uow = uow

    def execute(
        self,
        input_dto: AddMediaInputDTO,
        media_id: Optional[str] = None,
    ) -> MediaOutputDTO:
        """
        Raises:
            ValidationError: Se tipo, URL ou duração inválidos
        """
        try:
            media_type = MediaType.from_string(input_dto.type)
        except (ValueError, AttributeError):
            raise ValidationError(f"Tipo de mídia inválido: {input_dto.type}", field="type")

        media = MarketingMediaEntity.create(
            media_type=media_type,
            url=input_dto.url,
            title=input_dto.title,
            duration=input_dto.duration,
            media_id=media_id,
        )
        with self.uow:
            self.media_repo.append(media)

        return MediaOutputDTO.from_entity(media)


class RemoveMediaService:
    """Use Case: Remover mídia da playlist."""

    def __init__(self, media_repo: MediaRepository, uow: UnitOfWork):
        self.media_repo = media_repo
        self.uow = uow

    def execute(self, media_id: str) -> bool:
        with self.uow:
            return self.media_repo.delete(media_id)


class GetQueueSnapshotService:
    """
    Use Case: Leitura agregada da fila.

    Não publica eventos, mas lê dentro do UoW para não observar
    uma mutação pela metade.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        department_repo: DepartmentRepository,
        media_repo: MediaRepository,
        uow: UnitOfWork,
        history_size: int = 4,
    ):
        self.ticket_repo = ticket_repo
        self.department_repo = department_repo
        self.media_repo = media_repo
        self.uow = uow
        self.history_size = history_size

    def execute(self, revision: int = 0) -> QueueSnapshotDTO:
        with self.uow:
            tickets = self.ticket_repo.list_all()
            last = scheduler.last_called(tickets)
            return QueueSnapshotDTO(
                departments=[
                    DepartmentOutputDTO.from_entity(d)
                    for d in self.department_repo.list_all()
                ],
                tickets=[TicketOutputDTO.from_entity(t) for t in tickets],
                marketing_playlist=[
                    MediaOutputDTO.from_entity(m) for m in self.media_repo.list_all()
                ],
                last_called_ticket=TicketOutputDTO.from_entity(last) if last else None,
                waiting_count=sum(1 for t in tickets if t.is_waiting),
                recent_calls=[
                    TicketOutputDTO.from_entity(t)
                    for t in scheduler.recent_calls(tickets, self.history_size)
                ],
                revision=revision,
            )


class ListWaitingTicketsService:
    """Use Case: Senhas aguardando na ordem de chamada (barra lateral do guichê)."""

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, department_id: Optional[str] = None) -> List[TicketOutputDTO]:
        with self.uow:
            ordered = scheduler.order_waiting(
                self.ticket_repo.list_by_status(TicketStatus.WAITING),
                department_id=department_id,
            )
            return [TicketOutputDTO.from_entity(t) for t in ordered]
