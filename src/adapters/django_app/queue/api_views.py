"""
API Views JSON da fila.

Endpoints:
- GET  /queue/api/state/ - Snapshot da fila
- GET  /queue/api/tickets/ - Listar senhas
- POST /queue/api/tickets/ - Emitir senha (totem)
- GET  /queue/api/tickets/waiting/ - Senhas aguardando, na ordem de chamada
- POST /queue/api/call-next/ - Chamar próxima senha (guichê)
- POST /queue/api/tickets/<id>/recall/ - Rechamar
- POST /queue/api/tickets/<id>/finish/ - Finalizar
- POST /queue/api/tickets/<id>/cancel/ - Cancelar
- GET/POST /queue/api/departments/ - Listar / cadastrar departamento
- DELETE /queue/api/departments/<id>/ - Remover departamento
- GET/POST /queue/api/playlist/ - Listar / incluir mídia
- DELETE /queue/api/playlist/<id>/ - Remover mídia
- GET  /queue/api/display/ - Estado do painel (TV)

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}
"""

import json
import logging
from typing import Any, Dict, List, Optional

from django.views import View
from django.http import JsonResponse, HttpRequest
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.exceptions import (
    ValidationError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    DomainException,
)
from src.config.container import get_container

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("Corpo da requisição deve ser um objeto JSON")
    return data


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'sim')
    return bool(value)


def parse_sub_categories(value: Any) -> List[str]:
    """Aceita lista ou texto separado por vírgulas ("Saques, Depósitos")."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(',') if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(part) for part in value]
    raise ValidationError("Subcategorias devem ser lista ou texto", field="sub_categories")


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao QueueEngine e ao painel (container DI)
    - Tratamento de erros padronizado
    """

    def get_container(self):
        return get_container()

    def get_engine(self):
        return self.get_container().queue_engine()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Converte exceções em respostas.

        ValidationError → 400, EntityNotFoundError → 404,
        BusinessRuleViolationError → 422, inesperada → 500.
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta={'field': getattr(e, 'field', None)}
            )

        if isinstance(e, EntityNotFoundError):
            return json_response(
                success=False,
                error=str(e),
                status=404,
                meta={'entity_type': e.entity_type, 'entity_id': e.entity_id}
            )

        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=str(e),
                status=422,
                meta={'rule': getattr(e, 'rule', None)}
            )

        if isinstance(e, (DomainException, ValueError)):
            return json_response(success=False, error=str(e), status=400)

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )


# =============================================================================
# Fila
# =============================================================================

class QueueStateAPIView(BaseAPIView):
    """GET /queue/api/state/ - Snapshot completo (seguro para polling)."""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            snapshot = self.get_engine().snapshot()
            return json_response(
                success=True,
                data=snapshot.to_dict(),
                meta={'revision': snapshot.revision},
            )
        except Exception as e:
            return self.handle_exception(e)


class TicketAPIListView(BaseAPIView):
    """
    API para listar e emitir senhas.

    GET /queue/api/tickets/ - Lista senhas (?status=WAITING)
    POST /queue/api/tickets/ - Emite senha
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            tickets = self.get_engine().tickets

            status = (request.GET.get('status') or '').strip().upper()
            if status:
                tickets = [t for t in tickets if t.status == status]

            return json_response(
                success=True,
                data=[t.to_dict() for t in tickets],
                meta={'total': len(tickets)},
            )
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Emite nova senha.

        Body JSON:
        {
            "department_id": "string (obrigatório)",
            "is_priority": bool (opcional),
            "sub_category": "string (opcional)",
            "customer_id": "string (opcional, CPF)"
        }
        """
        try:
            data = self.parse_body(request)

            department_id = str(data.get('department_id') or '').strip()
            if not department_id:
                raise ValidationError("Departamento é obrigatório", field="department_id")

            ticket = self.get_engine().generate_ticket(
                department_id=department_id,
                is_priority=parse_bool(data.get('is_priority', False)),
                sub_category=data.get('sub_category'),
                customer_id=data.get('customer_id'),
            )

            logger.info(f"API: Senha emitida: {ticket.number}")

            return json_response(success=True, data=ticket.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class WaitingTicketsAPIView(BaseAPIView):
    """GET /queue/api/tickets/waiting/ - Aguardando, na ordem de chamada."""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            department_id = request.GET.get('department_id') or None
            tickets = self.get_engine().waiting_tickets(department_id)
            return json_response(
                success=True,
                data=[t.to_dict() for t in tickets],
                meta={'total': len(tickets), 'department_id': department_id},
            )
        except Exception as e:
            return self.handle_exception(e)


class CallNextAPIView(BaseAPIView):
    """
    POST /queue/api/call-next/ - Chama a próxima senha.

    Body JSON:
    {
        "counter": "string (obrigatório)",
        "department_id": "string (opcional)"
    }

    Fila vazia: 200 com data ausente e meta.ticket_available = false.
    """

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)

            ticket = self.get_engine().call_next_ticket(
                counter=str(data.get('counter') or ''),
                department_id=data.get('department_id') or None,
            )

            if ticket is None:
                return json_response(success=True, meta={'ticket_available': False})

            logger.info(f"API: Senha {ticket.number} chamada no guichê {ticket.counter}")
            return json_response(
                success=True,
                data=ticket.to_dict(),
                meta={'ticket_available': True},
            )

        except Exception as e:
            return self.handle_exception(e)


class _TicketActionAPIView(BaseAPIView):
    """Ação sobre senha existente; sempre 200 (ação inválida é ignorada)."""

    action: Optional[str] = None

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            engine = self.get_engine()
            getattr(engine, f"{self.action}_ticket")(pk)
            return json_response(
                success=True,
                data={'ticket_id': pk},
                meta={'revision': engine.revision},
            )
        except Exception as e:
            return self.handle_exception(e)


class TicketRecallAPIView(_TicketActionAPIView):
    """POST /queue/api/tickets/<id>/recall/"""

    action = 'recall'


class TicketFinishAPIView(_TicketActionAPIView):
    """POST /queue/api/tickets/<id>/finish/"""

    action = 'finish'


class TicketCancelAPIView(_TicketActionAPIView):
    """POST /queue/api/tickets/<id>/cancel/"""

    action = 'cancel'


# =============================================================================
# Administração
# =============================================================================

class DepartmentAPIListView(BaseAPIView):
    """
    GET /queue/api/departments/ - Lista departamentos
    POST /queue/api/departments/ - Cadastra departamento
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            departments = self.get_engine().departments
            return json_response(success=True, data=[d.to_dict() for d in departments])
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "name": "string (obrigatório)",
            "prefix": "string (obrigatório, até 5 caracteres)",
            "description": "string (opcional)",
            "sub_categories": ["string"] ou "a, b, c" (opcional)
        }
        """
        try:
            data = self.parse_body(request)
            department = self.get_engine().add_department(
                name=data.get('name', ''),
                prefix=data.get('prefix', ''),
                description=data.get('description'),
                sub_categories=parse_sub_categories(data.get('sub_categories')),
            )
            return json_response(success=True, data=department.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class DepartmentAPIDetailView(BaseAPIView):
    """DELETE /queue/api/departments/<id>/ - Senhas já emitidas ficam órfãs."""

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            self.get_engine().remove_department(pk)
            return json_response(success=True, data={'department_id': pk})
        except Exception as e:
            return self.handle_exception(e)


class PlaylistAPIListView(BaseAPIView):
    """
    GET /queue/api/playlist/ - Playlist na ordem do ciclo
    POST /queue/api/playlist/ - Inclui mídia no fim
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            playlist = self.get_engine().marketing_playlist
            return json_response(success=True, data=[m.to_dict() for m in playlist])
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "type": "IMAGE|VIDEO",
            "url": "string",
            "title": "string",
            "duration": number (segundos, > 0)
        }
        """
        try:
            data = self.parse_body(request)
            media = self.get_engine().add_media(
                media_type=data.get('type', 'IMAGE'),
                url=data.get('url', ''),
                title=data.get('title', ''),
                duration=data.get('duration', 10),
            )
            return json_response(success=True, data=media.to_dict(), status=201)
        except Exception as e:
            return self.handle_exception(e)


class PlaylistAPIDetailView(BaseAPIView):
    """DELETE /queue/api/playlist/<id>/"""

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            self.get_engine().remove_media(pk)
            return json_response(success=True, data={'media_id': pk})
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Painel
# =============================================================================

class DisplayAPIView(BaseAPIView):
    """
    GET /queue/api/display/ - O que a TV desenha agora.

    Abrir o painel o inicia (anúncio + playlist), se ainda parado.
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            panel = self.get_container().display_panel()
            panel.start()
            return json_response(success=True, data=panel.state().to_dict())
        except Exception as e:
            return self.handle_exception(e)
