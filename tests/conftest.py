"""
Configurações globais do Pytest para QueueMaster.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures compartilhadas:
- FakeClock: relógio controlado pelo teste
- FakeTimerFactory: timers que só disparam quando o teste manda
- ImmediateExecutor: executa a fala na thread do teste
- make_engine: QueueEngine em memória com lock real
"""

import threading
from concurrent.futures import Executor, Future
from datetime import datetime, timedelta
from pathlib import Path

import pytest


class FakeClock:
    """Relógio manual (avança só com advance)."""

    def __init__(self, start: datetime = datetime(2024, 1, 15, 9, 0, 0)):
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        self._now += timedelta(seconds=seconds)
        return self._now


class FakeTimer:
    def __init__(self, seconds, callback):
        self.seconds = seconds
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.fired = True
        self.callback()


class FakeTimerFactory:
    """
    Guarda os timers armados.

    fire() dispara o último timer pendente, como se sua
    duração tivesse passado.
    """

    def __init__(self):
        self.timers = []

    def __call__(self, seconds, callback):
        timer = FakeTimer(seconds, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire(self):
        pending = self.pending
        assert pending, "nenhum timer pendente"
        pending[-1].fire()


class ImmediateExecutor(Executor):
    """Executor síncrono: o anúncio já foi falado quando submit retorna."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer_factory():
    return FakeTimerFactory()


@pytest.fixture
def speech_executor():
    return ImmediateExecutor


@pytest.fixture
def event_publisher():
    from src.adapters.django_app.events.publishers import InMemoryEventPublisher
    return InMemoryEventPublisher()


@pytest.fixture
def make_engine(clock, event_publisher):
    """
    Factory de QueueEngine em memória.

    Todas as units of work compartilham o mesmo RLock,
    como no Container.
    """
    from src.core.queue.engine import QueueEngine
    from src.core.queue.ports import (
        InMemoryTicketRepository,
        InMemoryDepartmentRepository,
        InMemoryMediaRepository,
    )
    from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork

    def _make(history_size: int = 4):
        lock = threading.RLock()
        return QueueEngine(
            ticket_repo=InMemoryTicketRepository(),
            department_repo=InMemoryDepartmentRepository(),
            media_repo=InMemoryMediaRepository(),
            uow_factory=lambda: InMemoryUnitOfWork(lock, event_publisher),
            clock=clock,
            history_size=history_size,
        )

    return _make


@pytest.fixture
def engine(make_engine):
    """Engine com um departamento "Caixa" (prefixo CXA, id "cxa")."""
    engine = make_engine()
    engine.add_department(
        name="Caixa",
        prefix="CXA",
        description="Pagamentos, saques e depósitos",
        sub_categories=["Pagamentos", "Saques", "Depósitos"],
        department_id="cxa",
    )
    return engine


def pytest_configure(config):
    """Configuração do pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
