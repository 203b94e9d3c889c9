"""
Testes para a API JSON da fila.

Testa:
- Emissão, chamada e ações sobre senhas
- Administração de departamentos e playlist
- Painel (TV)
- Mapeamento de exceções para status HTTP
"""

import json

import pytest
from unittest.mock import patch

from src.adapters.django_app.queue.api_views import (
    CallNextAPIView,
    QueueStateAPIView,
    TicketAPIListView,
    parse_bool,
    parse_sub_categories,
)
from src.core.shared.exceptions import ValidationError


def post_json(client, url, payload=None):
    return client.post(
        url,
        data=json.dumps(payload or {}),
        content_type='application/json',
    )


def body(response):
    return json.loads(response.content)


# =============================================================================
# Helpers
# =============================================================================

class TestParsers:
    @pytest.mark.parametrize("value,expected", [
        (True, True), (False, False), ("true", True), ("Sim", True),
        ("0", False), ("", False), (None, False), (1, True),
    ])
    def test_parse_bool(self, value, expected):
        assert parse_bool(value) is expected

    def test_subcategorias_texto(self):
        assert parse_sub_categories("Saques, Depósitos, ") == ["Saques", "Depósitos"]

    def test_subcategorias_lista(self):
        assert parse_sub_categories(["A", "B"]) == ["A", "B"]

    def test_subcategorias_tipo_invalido(self):
        with pytest.raises(ValidationError):
            parse_sub_categories(42)


# =============================================================================
# Senhas
# =============================================================================

class TestTicketAPIListView:
    """Testes para emissão e listagem."""

    def test_post_emite_senha(self, client, queue_engine):
        response = post_json(client, '/queue/api/tickets/', {
            'department_id': 'cxa',
            'is_priority': True,
            'sub_category': 'Saques',
        })

        assert response.status_code == 201
        data = body(response)
        assert data['success'] is True
        assert data['data']['number'] == 'CXA-001'
        assert data['data']['status'] == 'WAITING'
        assert data['data']['is_priority'] is True

    def test_post_sem_departamento(self, client, queue_engine):
        response = post_json(client, '/queue/api/tickets/', {})

        assert response.status_code == 400
        data = body(response)
        assert data['success'] is False
        assert data['meta']['field'] == 'department_id'

    def test_post_departamento_inexistente(self, client, queue_engine):
        response = post_json(client, '/queue/api/tickets/', {'department_id': 'xyz'})

        assert response.status_code == 404
        assert body(response)['meta']['entity_id'] == 'xyz'

    def test_post_json_invalido(self, client, queue_engine):
        response = client.post(
            '/queue/api/tickets/', data='{nao e json', content_type='application/json'
        )
        assert response.status_code == 400

    def test_post_json_que_nao_e_objeto(self, client, queue_engine):
        response = client.post(
            '/queue/api/tickets/', data='[1, 2]', content_type='application/json'
        )
        assert response.status_code == 400

    def test_get_lista_e_filtra_por_status(self, client, queue_engine):
        queue_engine.generate_ticket('cxa')
        queue_engine.generate_ticket('cxa')
        queue_engine.call_next_ticket('01')

        all_tickets = body(client.get('/queue/api/tickets/'))
        waiting = body(client.get('/queue/api/tickets/', {'status': 'waiting'}))

        assert all_tickets['meta']['total'] == 2
        assert waiting['meta']['total'] == 1
        assert waiting['data'][0]['number'] == 'CXA-002'

    def test_erro_inesperado_vira_500(self, rf):
        with patch('src.adapters.django_app.queue.api_views.get_container') as mock_container:
            mock_container.return_value.queue_engine.side_effect = RuntimeError("boom")

            response = TicketAPIListView().get(rf.get('/queue/api/tickets/'))

        assert response.status_code == 500
        assert body(response)['error'] == 'Erro interno do servidor'


class TestWaitingTicketsAPIView:
    def test_ordem_de_chamada(self, client, queue_engine):
        normal = queue_engine.generate_ticket('cxa')
        priority = queue_engine.generate_ticket('cxa', is_priority=True)

        data = body(client.get('/queue/api/tickets/waiting/'))

        assert [t['id'] for t in data['data']] == [priority.id, normal.id]
        assert data['meta']['total'] == 2


class TestCallNextAPIView:
    def test_chama_proxima(self, client, queue_engine):
        ticket = queue_engine.generate_ticket('cxa')

        response = post_json(client, '/queue/api/call-next/', {'counter': '05'})

        assert response.status_code == 200
        data = body(response)
        assert data['data']['id'] == ticket.id
        assert data['data']['counter'] == '05'
        assert data['data']['status'] == 'CALLED'
        assert data['meta']['ticket_available'] is True

    def test_fila_vazia(self, client, queue_engine):
        response = post_json(client, '/queue/api/call-next/', {'counter': '05'})

        assert response.status_code == 200
        data = body(response)
        assert data['success'] is True
        assert 'data' not in data
        assert data['meta']['ticket_available'] is False

    def test_sem_guiche(self, client, queue_engine):
        queue_engine.generate_ticket('cxa')

        response = post_json(client, '/queue/api/call-next/', {})

        assert response.status_code == 400
        assert body(response)['meta']['field'] == 'counter'
        assert queue_engine.waiting_count == 1

    def test_view_direta_com_request_factory(self, rf, queue_engine):
        queue_engine.generate_ticket('cxa')
        request = rf.post(
            '/queue/api/call-next/',
            data=json.dumps({'counter': '02', 'department_id': 'cxa'}),
            content_type='application/json',
        )

        response = CallNextAPIView().post(request)

        assert body(response)['data']['counter'] == '02'


class TestTicketActions:
    def test_rechamar(self, client, queue_engine):
        queue_engine.generate_ticket('cxa')
        called = queue_engine.call_next_ticket('05')
        revision = queue_engine.revision

        response = client.post(f'/queue/api/tickets/{called.id}/recall/')

        assert response.status_code == 200
        data = body(response)
        assert data['data'] == {'ticket_id': called.id}
        assert data['meta']['revision'] == revision + 1

    def test_finalizar(self, client, queue_engine):
        queue_engine.generate_ticket('cxa')
        called = queue_engine.call_next_ticket('05')

        client.post(f'/queue/api/tickets/{called.id}/finish/')

        assert queue_engine.last_called_ticket is None
        assert queue_engine.tickets[0].status == 'FINISHED'

    def test_cancelar(self, client, queue_engine):
        ticket = queue_engine.generate_ticket('cxa')

        client.post(f'/queue/api/tickets/{ticket.id}/cancel/')

        assert queue_engine.waiting_count == 0

    def test_acao_invalida_e_ignorada(self, client, queue_engine):
        ticket = queue_engine.generate_ticket('cxa')
        revision = queue_engine.revision

        response = client.post(f'/queue/api/tickets/{ticket.id}/recall/')

        assert response.status_code == 200
        assert body(response)['meta']['revision'] == revision

    def test_senha_inexistente(self, client, queue_engine):
        response = client.post('/queue/api/tickets/nao-existe/finish/')
        assert response.status_code == 200


# =============================================================================
# Administração
# =============================================================================

class TestDepartmentAPI:
    def test_cadastra_com_subcategorias_em_texto(self, client, container):
        response = post_json(client, '/queue/api/departments/', {
            'name': 'Gerência',
            'prefix': 'ger',
            'sub_categories': 'Crédito, Investimentos',
        })

        assert response.status_code == 201
        data = body(response)['data']
        assert data['prefix'] == 'GER'
        assert data['sub_categories'] == ['Crédito', 'Investimentos']

    def test_prefixo_invalido(self, client, container):
        response = post_json(client, '/queue/api/departments/', {'name': 'X', 'prefix': ''})

        assert response.status_code == 400
        assert body(response)['meta']['field'] == 'prefix'

    def test_lista_e_remove(self, client, queue_engine):
        assert [d['id'] for d in body(client.get('/queue/api/departments/'))['data']] == ['cxa']

        response = client.delete('/queue/api/departments/cxa/')

        assert response.status_code == 200
        assert body(client.get('/queue/api/departments/'))['data'] == []


class TestPlaylistAPI:
    def test_inclui_e_lista(self, client, container):
        response = post_json(client, '/queue/api/playlist/', {
            'type': 'VIDEO',
            'url': 'https://www.youtube.com/watch?v=dQw4w9WgXcQ',
            'title': 'Clipe',
            'duration': 30,
        })

        assert response.status_code == 201
        assert body(response)['data']['youtube_id'] == 'dQw4w9WgXcQ'
        assert len(body(client.get('/queue/api/playlist/'))['data']) == 1

    def test_duracao_invalida(self, client, container):
        response = post_json(client, '/queue/api/playlist/', {
            'type': 'IMAGE', 'url': 'https://x/a.png', 'title': 'A', 'duration': 0,
        })
        assert response.status_code == 400

    def test_remove(self, client, container):
        media = container.queue_engine().add_media('IMAGE', 'https://x/a.png', 'A', 5)

        client.delete(f'/queue/api/playlist/{media.id}/')

        assert body(client.get('/queue/api/playlist/'))['data'] == []


# =============================================================================
# Estado e painel
# =============================================================================

class TestQueueStateAPIView:
    def test_snapshot(self, rf, queue_engine):
        queue_engine.generate_ticket('cxa')

        response = QueueStateAPIView().get(rf.get('/queue/api/state/'))

        data = body(response)
        assert data['data']['waiting_count'] == 1
        assert data['meta']['revision'] == queue_engine.revision
        assert data['data']['last_called_ticket'] is None


class TestDisplayAPIView:
    def test_abrir_o_painel_inicia_e_mostra_destaque(self, client, container, queue_engine):
        queue_engine.generate_ticket('cxa')
        queue_engine.call_next_ticket('05')

        response = client.get('/queue/api/display/')

        data = body(response)['data']
        assert container.display_panel().is_running
        assert data['current_ticket']['number'] == 'CXA-001'
        assert data['department_name'] == 'Caixa'
        assert data['is_flashing'] is True
        assert data['current_media'] is None


class TestHealth:
    def test_health(self, client):
        assert body(client.get('/health/')) == {'status': 'ok'}
