"""
Testes de Integração End-to-End.

Testes que validam o fluxo completo da agência montado pelo
Container DI:
- Totem → QueueEngine → Registro → Domain Events
- Guichê → QueueEngine → DisplayPanel → Voz
- Administração da playlist → PlaylistScheduler

Relógio, timers e voz são substituídos por fakes via override
de providers (nenhum teste espera tempo real).
"""

import pytest
from unittest.mock import Mock

from dependency_injector import providers

from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.config.container import Container, DEFAULT_QUEUE_CONFIG
from src.config.seed import seed_defaults


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def speech():
    return Mock()


@pytest.fixture
def renderer():
    return Mock()


@pytest.fixture
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def container(clock, timer_factory, speech, renderer, publisher, speech_executor):
    """Container completo com dados iniciais e fakes de infraestrutura."""
    container = Container()
    container.config.from_dict(dict(DEFAULT_QUEUE_CONFIG))
    container.clock.override(providers.Object(clock))
    container.timer_factory.override(providers.Object(timer_factory))
    container.speech_synthesizer.override(providers.Object(speech))
    container.speech_executor_factory.override(providers.Object(speech_executor))
    container.media_renderer.override(providers.Object(renderer))
    container.event_publisher.override(providers.Object(publisher))

    seed_defaults(container.queue_engine())
    yield container

    container.display_panel().stop()


@pytest.fixture
def engine(container):
    return container.queue_engine()


@pytest.fixture
def panel(container):
    panel = container.display_panel()
    panel.start()
    return panel


# =============================================================================
# Fluxo completo
# =============================================================================

@pytest.mark.integration
class TestAgencyDay:
    """Um dia resumido de atendimento."""

    def test_fluxo_completo(self, engine, panel, speech, publisher, clock):
        # Totem
        atd = engine.generate_ticket('1', sub_category='Pessoa Física')
        clock.advance(2)
        cxa = engine.generate_ticket('2', is_priority=True, sub_category='Saques')
        clock.advance(2)
        inf = engine.generate_ticket('3')
        assert (atd.number, cxa.number, inf.number) == ('ATD-001', 'CXA-001', 'INF-001')

        # Guichê 01 chama: prioridade primeiro
        clock.advance(30)
        first = engine.call_next_ticket('01')
        assert first.id == cxa.id
        speech.speak.assert_called_with('Senha CXA-001, Guichê 01', 'pt-BR')
        assert panel.state().is_flashing is True

        # Guichê 02 chama: a mais antiga das normais
        clock.advance(1)
        second = engine.call_next_ticket('02')
        assert second.id == atd.id

        state = panel.state()
        assert state.current_ticket.number == 'ATD-001'
        assert state.department_name == 'Atendimento'
        assert [t.number for t in state.history] == ['CXA-001']

        # Rechamada do guichê 02 (senha em destaque)
        clock.advance(20)
        engine.recall_ticket(second.id)
        assert panel.state().current_ticket.id == second.id
        assert panel.state().is_flashing is False
        assert speech.speak.call_count == 3
        speech.speak.assert_called_with('Senha ATD-001, Guichê 02', 'pt-BR')

        # Finalizações
        clock.advance(60)
        engine.finish_ticket(first.id)
        engine.finish_ticket(second.id)
        assert panel.state().current_ticket is None
        assert engine.waiting_count == 1

        types = [e.event_type for e in publisher.published_events]
        assert types.count('TicketGeneratedEvent') == 3
        assert types.count('TicketCalledEvent') == 2
        assert types.count('TicketRecalledEvent') == 1
        assert types.count('TicketFinishedEvent') == 2

    def test_departamento_removido_nao_quebra_o_painel(self, engine, panel):
        engine.generate_ticket('3')
        engine.call_next_ticket('04')

        engine.remove_department('3')

        state = panel.state()
        assert state.current_ticket.number == 'INF-001'
        assert state.department_name is None
        assert engine.call_next_ticket('04') is None

    def test_falha_da_voz_nao_afeta_a_fila(self, engine, panel, speech):
        speech.speak.side_effect = RuntimeError("autoplay bloqueado")
        engine.generate_ticket('2')

        called = engine.call_next_ticket('05')

        assert called.number == 'CXA-001'
        assert panel.state().is_flashing is True


@pytest.mark.integration
class TestPlaylistOnDisplay:
    def test_rotacao_da_playlist_inicial(self, panel, renderer, timer_factory):
        assert panel.state().current_media.id == 'm1'
        assert timer_factory.pending[-1].seconds == 10

        timer_factory.fire()
        assert panel.state().current_media.id == 'm2'
        timer_factory.fire()
        assert panel.state().current_media.id == 'm3'
        timer_factory.fire()
        assert panel.state().current_media.id == 'm1'
        assert renderer.render.call_count == 4

    def test_remocao_durante_exibicao(self, engine, panel, timer_factory):
        timer_factory.fire()
        assert panel.state().current_media.id == 'm2'

        engine.remove_media('m2')

        assert panel.state().current_media.id == 'm3'
        assert len(timer_factory.pending) == 1

    def test_inclusao_preserva_item_em_tela(self, engine, panel, timer_factory):
        timer_factory.fire()

        engine.add_media('VIDEO', 'https://youtu.be/dQw4w9WgXcQ', 'Clipe', 20)

        assert panel.state().current_media.id == 'm2'
        assert len(engine.marketing_playlist) == 4
        assert len(timer_factory.pending) == 1

    def test_chamadas_nao_mexem_na_playlist(self, engine, panel, timer_factory):
        timer = timer_factory.pending[-1]
        engine.generate_ticket('2')
        engine.call_next_ticket('05')

        assert timer.cancelled is False
        assert panel.state().current_media.id == 'm1'

    def test_playlist_esvaziada(self, engine, panel, timer_factory):
        for media_id in ('m1', 'm2', 'm3'):
            engine.remove_media(media_id)

        assert panel.state().current_media is None
        assert timer_factory.pending == []
