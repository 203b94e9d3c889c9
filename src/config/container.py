"""
Dependency Injection Container.

Configura e gerencia todas as dependências da fila.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para todo o processo (repositórios,
  lock da fila, QueueEngine, painel)
- Factory: Nova instância por chamada (UnitOfWork)
- Configuration: Valores de settings.QUEUE

O estado da fila vive nos repositórios em memória; por isso o
QueueEngine e tudo o que ele usa são Singletons do container.
"""

import threading
from typing import Optional

from dependency_injector import containers, providers

from src.core.shared.interfaces import SystemClock
from src.core.queue.ports import (
    InMemoryTicketRepository,
    InMemoryDepartmentRepository,
    InMemoryMediaRepository,
)
from src.core.queue.engine import QueueEngine
from src.core.display.announcer import AnnouncementDispatcher, default_speech_executor
from src.core.display.playlist import PlaylistScheduler
from src.core.display.panel import DisplayPanel
from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from src.adapters.django_app.events.publishers import get_event_publisher
from src.adapters.django_app.events.reporter import QueueStatusReporter, get_report_sink
from src.adapters.django_app.display.speech import get_speech_synthesizer
from src.adapters.django_app.display.runtime import (
    LoggingMediaRenderer,
    ThreadingTimerFactory,
)


DEFAULT_QUEUE_CONFIG = {
    'locale': 'pt-BR',
    'flash_seconds': 3.0,
    'recall_window_seconds': 1.0,
    'history_size': 4,
    'speech_backend': 'logging',
    'event_publisher_mode': 'sync',
    'seed_defaults': True,
    'display_autostart': False,
    'report_interval_seconds': 0,
}


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings.QUEUE
    - Infrastructure: Relógio, lock, publisher, voz, timers
    - Repositories: Registro em memória
    - Unit of Work: Seção crítica
    - Engine / Display: Fila e painel
- Reporter: Situação periódica da fila

    Example:
        container = Container()
        container.config.from_dict(DEFAULT_QUEUE_CONFIG)

        engine = container.queue_engine()
        engine.generate_ticket("2")
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    clock = providers.Singleton(SystemClock)

    queue_lock = providers.Singleton(threading.RLock)

    event_publisher = providers.Singleton(
        get_event_publisher,
        mode=config.event_publisher_mode,
    )

    # =========================================================================
    # Repositories (Singleton - estado da fila)
    # =========================================================================

    ticket_repository = providers.Singleton(InMemoryTicketRepository)
    department_repository = providers.Singleton(InMemoryDepartmentRepository)
    media_repository = providers.Singleton(InMemoryMediaRepository)

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação, lock compartilhado)
    # =========================================================================

    unit_of_work = providers.Factory(
        InMemoryUnitOfWork,
        lock=queue_lock,
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Engine
    # =========================================================================

    queue_engine = providers.Singleton(
        QueueEngine,
        ticket_repo=ticket_repository,
        department_repo=department_repository,
        media_repo=media_repository,
        uow_factory=unit_of_work.provider,
        clock=clock,
        history_size=config.history_size,
    )

    # =========================================================================
    # Display (painel público)
    # =========================================================================

    speech_synthesizer = providers.Singleton(
        get_speech_synthesizer,
        backend=config.speech_backend,
    )

    media_renderer = providers.Singleton(LoggingMediaRenderer)

    timer_factory = providers.Singleton(ThreadingTimerFactory)

    speech_executor_factory = providers.Object(default_speech_executor)

    announcement_dispatcher = providers.Singleton(
        AnnouncementDispatcher,
        speech=speech_synthesizer,
        clock=clock,
        locale=config.locale,
        flash_seconds=config.flash_seconds,
        recall_window_seconds=config.recall_window_seconds,
        executor_factory=speech_executor_factory,
    )

    playlist_scheduler = providers.Singleton(
        PlaylistScheduler,
        renderer=media_renderer,
        timer_factory=timer_factory,
    )

    display_panel = providers.Singleton(
        DisplayPanel,
        engine=queue_engine,
        dispatcher=announcement_dispatcher,
        playlist=playlist_scheduler,
    )

    # =========================================================================
    # Situação periódica (no processo que hospeda a fila)
    # =========================================================================

    queue_reporter = providers.Singleton(
        QueueStatusReporter,
        engine=queue_engine,
        timer_factory=timer_factory,
        clock=clock,
        interval_seconds=config.report_interval_seconds,
        sink=providers.Callable(get_report_sink, mode=config.event_publisher_mode),
    )


def queue_settings() -> dict:
    """
    Configuração efetiva: defaults + settings.QUEUE (chaves em minúsculas).
    """
    values = dict(DEFAULT_QUEUE_CONFIG)

    from django.conf import settings
    if settings.configured:
        overrides = getattr(settings, 'QUEUE', {}) or {}
        values.update({key.lower(): value for key, value in overrides.items()})

    return values


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).

    Returns:
        Container configurado
    """
    global _container

    with _container_lock:
        if _container is None:
            container = Container()
            container.config.from_dict(queue_settings())
            _container = container

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Para o painel e o relatório (cancela os timers) e descarta
    todo o estado da fila.
    """
    global _container

    with _container_lock:
        if _container is not None:
            _container.display_panel().stop()
            _container.queue_reporter().stop()
        _container = None
