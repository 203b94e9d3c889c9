"""
Situação periódica da fila.

O estado da fila vive na memória do processo do servidor; por isso
o relatório é montado aqui, num timer do próprio servidor, e só
então enviado (ou não) ao worker Celery.

Modos de envio (QUEUE['EVENT_PUBLISHER_MODE']):
- sync: só loga no servidor
- celery: também enfileira report_queue_status com o relatório pronto
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from src.core.shared.interfaces import Clock
from src.core.queue.dtos import QueueSnapshotDTO
from src.core.queue.engine import QueueEngine
from src.core.display.ports import TimerFactory, TimerHandle

logger = logging.getLogger(__name__)


ReportSink = Callable[[Dict[str, Any]], None]


def build_queue_report(snapshot: QueueSnapshotDTO, clock: Clock) -> Dict[str, Any]:
    """
    Contagens por status a partir de um snapshot da fila.

    Example:
        build_queue_report(engine.snapshot(), clock)
        # {'at': '...', 'revision': 7, 'waiting_count': 2,
        #  'by_status': {'WAITING': 2, 'CALLED': 1}, 'last_called': 'CXA-004'}
    """
    by_status: Dict[str, int] = {}
    for ticket in snapshot.tickets:
        by_status[ticket.status] = by_status.get(ticket.status, 0) + 1

    return {
        'at': clock.now().isoformat(),
        'revision': snapshot.revision,
        'waiting_count': snapshot.waiting_count,
        'by_status': by_status,
        'last_called': (
            snapshot.last_called_ticket.number
            if snapshot.last_called_ticket else None
        ),
    }


def _send_to_worker(report: Dict[str, Any]) -> None:
    from .handlers import report_queue_status
    report_queue_status.delay(report)


def get_report_sink(mode: str = 'sync') -> Optional[ReportSink]:
    """None no modo sync; envio ao worker no modo celery."""
    if mode == 'celery':
        return _send_to_worker
    return None


class QueueStatusReporter:
    """
    Gera o relatório a cada interval_seconds no processo da fila.

    Example:
        reporter = QueueStatusReporter(engine, ThreadingTimerFactory(), clock, 300)
        reporter.start()
        ...
        reporter.stop()
    """

    def __init__(
        self,
        engine: QueueEngine,
        timer_factory: TimerFactory,
        clock: Clock,
        interval_seconds: float = 300.0,
        sink: Optional[ReportSink] = None,
    ):
        self.engine = engine
        self.timer_factory = timer_factory
        self.clock = clock
        self.interval_seconds = float(interval_seconds)
        self.sink = sink

        self._timer: Optional[TimerHandle] = None
        self._running = False
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Arma o primeiro disparo. Intervalo <= 0 desliga o relatório."""
        with self._lock:
            if self._running or self.interval_seconds <= 0:
                return
            self._running = True
            self._arm()

    def stop(self) -> None:
        with self._lock:
            self._running = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def report(self) -> Dict[str, Any]:
        """Monta, loga e envia o relatório agora."""
        report = build_queue_report(self.engine.snapshot(), self.clock)
        logger.info(f"[SCHEDULED] Situação da fila: {report}")

        if self.sink is not None:
            try:
                self.sink(report)
            except Exception as e:
                logger.warning(f"Falha ao enviar situação da fila: {e}")

        return report

    def _arm(self) -> None:
        self._timer = self.timer_factory(self.interval_seconds, self._on_timer)

    def _on_timer(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._timer = None
        try:
            self.report()
        except Exception as e:
            logger.error(f"Erro ao gerar situação da fila: {e}", exc_info=True)
        with self._lock:
            if self._running:
                self._arm()
