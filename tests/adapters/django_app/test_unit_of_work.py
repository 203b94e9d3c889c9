"""
Testes do InMemoryUnitOfWork (seção crítica da fila).
"""

import threading

import pytest
from unittest.mock import Mock

from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from src.core.queue.events import TicketCanceledEvent


def make_event(aggregate_id="t1"):
    return TicketCanceledEvent(aggregate_id=aggregate_id, number="CXA-001")


def lock_is_free(lock):
    """Tenta adquirir o lock a partir de outra thread."""
    result = []

    def try_acquire():
        acquired = lock.acquire(blocking=False)
        result.append(acquired)
        if acquired:
            lock.release()

    worker = threading.Thread(target=try_acquire)
    worker.start()
    worker.join()
    return result[0]


class TestCommit:
    def test_publica_eventos_apos_commit(self):
        publisher = InMemoryEventPublisher()
        event = make_event()

        with InMemoryUnitOfWork(event_publisher=publisher) as uow:
            uow.publish_event(event)
            assert publisher.published_events == []

        assert uow.committed
        assert publisher.published_events == [event]
        assert uow.published_events == [event]
        assert uow.collect_events() == []

    def test_lock_retido_durante_a_unidade(self):
        lock = threading.RLock()

        with InMemoryUnitOfWork(lock):
            assert lock_is_free(lock) is False

        assert lock_is_free(lock) is True

    def test_publicacao_acontece_fora_do_lock(self):
        lock = threading.RLock()
        observed = []
        publisher = Mock()
        publisher.publish.side_effect = lambda event: observed.append(lock_is_free(lock))

        with InMemoryUnitOfWork(lock, publisher) as uow:
            uow.publish_event(make_event())

        assert observed == [True]

    def test_falha_do_publisher_nao_propaga(self):
        publisher = Mock()
        publisher.publish.side_effect = RuntimeError("fora do ar")

        with InMemoryUnitOfWork(event_publisher=publisher) as uow:
            uow.publish_event(make_event())

        assert uow.committed


class TestRollback:
    def test_erro_descarta_eventos_e_libera_lock(self):
        lock = threading.RLock()
        publisher = InMemoryEventPublisher()

        with pytest.raises(ValueError):
            with InMemoryUnitOfWork(lock, publisher) as uow:
                uow.publish_event(make_event())
                raise ValueError("falhou")

        assert uow.rolled_back
        assert not uow.committed
        assert publisher.published_events == []
        assert lock_is_free(lock) is True


class TestSharedLock:
    def test_unidades_aninhadas_na_mesma_thread(self):
        lock = threading.RLock()

        with InMemoryUnitOfWork(lock):
            with InMemoryUnitOfWork(lock):
                pass
            assert lock_is_free(lock) is False

        assert lock_is_free(lock) is True

    def test_unidades_serializadas_entre_threads(self):
        lock = threading.RLock()
        counter = {'value': 0}

        def increment():
            for _ in range(200):
                with InMemoryUnitOfWork(lock):
                    current = counter['value']
                    counter['value'] = current + 1

        workers = [threading.Thread(target=increment) for _ in range(5)]
        for w in workers:
            w.start()
        for w in workers:
            w.join()

        assert counter['value'] == 1000
