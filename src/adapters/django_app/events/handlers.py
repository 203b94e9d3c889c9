"""
Event Handlers - Processadores assíncronos dos eventos da fila.

Executados pelo worker Celery quando CeleryEventPublisher está
ativo (QUEUE['EVENT_PUBLISHER_MODE'] = "celery"). Nada aqui altera
a fila: handlers só produzem efeitos colaterais (métricas, voz,
relatórios).

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        data = event_data.get('data', {})
        ...

event_data é o resultado de DomainEvent.to_dict(): os campos
específicos do evento ficam em event_data['data'].
"""

import logging
from typing import Any, Dict, Optional

from celery import shared_task

logger = logging.getLogger(__name__)


def _event_fields(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get('data') or {}


# =============================================================================
# Event Handlers - Senhas
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=10,
    acks_late=True,
)
def handle_ticket_generated(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketGeneratedEvent.

    Ações:
    - Registrar métrica de emissão por departamento/prioridade
    """
    try:
        data = _event_fields(event_data)
        logger.info(
            f"[HANDLER] TicketGenerated: {data.get('number')} | "
            f"Prioridade: {data.get('is_priority', False)}"
        )
        record_metric.delay(
            metric_name='tickets_generated',
            value=1,
            tags={
                'department_id': data.get('department_id', ''),
                'priority': 'sim' if data.get('is_priority') else 'nao',
            },
        )
    except Exception as e:
        logger.error(f"Erro no handler TicketGenerated: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=10,
    acks_late=True,
)
def handle_ticket_called(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketCalledEvent.

    Ações:
    - Registrar tempo de espera (emissão até chamada)
    """
    try:
        data = _event_fields(event_data)
        logger.info(
            f"[HANDLER] TicketCalled: {data.get('number')} | "
            f"Guichê: {data.get('counter')}"
        )
        record_metric.delay(
            metric_name='ticket_wait_seconds',
            value=data.get('wait_seconds', 0.0),
            tags={'counter': data.get('counter', '')},
        )
    except Exception as e:
        logger.error(f"Erro no handler TicketCalled: {e}", exc_info=True)
        raise


@shared_task(bind=True, max_retries=3, default_retry_delay=10, acks_late=True)
def handle_ticket_recalled(self, event_data: Dict[str, Any]) -> None:
    """Handler para TicketRecalledEvent."""
    data = _event_fields(event_data)
    logger.info(
        f"[HANDLER] TicketRecalled: {data.get('number')} | "
        f"Guichê: {data.get('counter')}"
    )
    record_metric.delay(
        metric_name='tickets_recalled',
        value=1,
        tags={'counter': data.get('counter', '')},
    )


@shared_task(bind=True, max_retries=3, default_retry_delay=10, acks_late=True)
def handle_ticket_finished(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketFinishedEvent.

    Senha finalizada sem ter sido chamada não tem tempo de atendimento.
    """
    data = _event_fields(event_data)
    logger.info(f"[HANDLER] TicketFinished: {data.get('number')}")

    service_seconds = data.get('service_seconds')
    if service_seconds is not None:
        record_metric.delay(
            metric_name='ticket_service_seconds',
            value=service_seconds,
            tags={'counter': data.get('counter') or ''},
        )


@shared_task(bind=True, max_retries=3, default_retry_delay=10, acks_late=True)
def handle_ticket_canceled(self, event_data: Dict[str, Any]) -> None:
    """Handler para TicketCanceledEvent."""
    data = _event_fields(event_data)
    logger.info(f"[HANDLER] TicketCanceled: {data.get('number')}")
    record_metric.delay(metric_name='tickets_canceled', value=1, tags={})


EVENT_HANDLERS = {
    'TicketGeneratedEvent': handle_ticket_generated,
    'TicketCalledEvent': handle_ticket_called,
    'TicketRecalledEvent': handle_ticket_recalled,
    'TicketFinishedEvent': handle_ticket_finished,
    'TicketCanceledEvent': handle_ticket_canceled,
}


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central dos eventos da fila.

    Args:
        event_type: Nome da classe do evento (ex: 'TicketCalledEvent')
        event_data: DomainEvent.to_dict()
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


# =============================================================================
# Voz
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def speak_announcement(self, text: str, locale: str) -> None:
    """
    Anúncio por voz na TV.

    Enfileirado por CelerySpeechSynthesizer; o AnnouncementDispatcher
    não espera o resultado.
    """
    logger.info(f"[SPEECH] ({locale}) {text}")


# =============================================================================
# Metric Tasks
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Optional[Dict[str, str]] = None
) -> None:
    """
    Registra métrica para monitoramento.

    Args:
        metric_name: Nome da métrica
        value: Valor
        tags: Tags para dimensões
    """
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")


# =============================================================================
# Situação da fila
# =============================================================================

@shared_task(bind=True)
def report_queue_status(self, report: Dict[str, Any]) -> Dict[str, Any]:
    """
    Registra a situação da fila montada pelo servidor.

    O worker não tem acesso à fila (estado em memória do servidor):
    recebe o relatório pronto de QueueStatusReporter.

    Args:
        report: Resultado de build_queue_report

    Returns:
        O próprio relatório
    """
    logger.info(f"[SCHEDULED] Situação da fila: {report}")
    record_metric.delay(
        metric_name='tickets_waiting',
        value=report.get('waiting_count', 0),
        tags={},
    )
    return report
