"""
Testes Unitários para Entidades do Domínio de Fila.

Coverage:
- DepartmentEntity.create (validações, normalização do prefixo)
- TicketEntity (emissão, numeração, transições de status)
- MarketingMediaEntity (validações, youtube_id)
- Helpers (format_ticket_number, extract_youtube_id)
"""

from datetime import datetime, timedelta

import pytest

from src.core.queue.entities import (
    DepartmentEntity,
    MarketingMediaEntity,
    MediaType,
    TicketEntity,
    TicketStatus,
    extract_youtube_id,
    format_ticket_number,
)
from src.core.shared.exceptions import ValidationError, BusinessRuleViolationError


NOW = datetime(2024, 1, 15, 9, 0, 0)


@pytest.fixture
def caixa():
    return DepartmentEntity.create(
        name="Caixa",
        prefix="cxa",
        sub_categories=["Pagamentos", "Saques"],
        department_id="2",
    )


@pytest.fixture
def waiting_ticket(caixa):
    return TicketEntity.issue(caixa, ordinal=1, is_priority=False, created_at=NOW)


class TestFormatTicketNumber:
    """Testes para a numeração exibida."""

    def test_preenche_tres_digitos(self):
        assert format_ticket_number("CXA", 1) == "CXA-001"
        assert format_ticket_number("CXA", 42) == "CXA-042"

    def test_mil_ou_mais_usa_todos_os_digitos(self):
        assert format_ticket_number("CXA", 1000) == "CXA-1000"


class TestDepartmentEntity:
    """Testes para DepartmentEntity."""

    def test_prefixo_normalizado_para_maiusculas(self, caixa):
        assert caixa.prefix == "CXA"
        assert caixa.id == "2"

    def test_subcategorias_vazias_descartadas(self):
        dept = DepartmentEntity.create("Atendimento", "ATD", sub_categories=[" PF ", "", "  "])
        assert dept.sub_categories == ("PF",)

    def test_id_gerado_quando_omitido(self):
        dept = DepartmentEntity.create("Informações", "INF")
        assert dept.id

    def test_nome_obrigatorio(self):
        with pytest.raises(ValidationError) as exc:
            DepartmentEntity.create("  ", "INF")
        assert exc.value.field == "name"

    @pytest.mark.parametrize("prefix", ["", "   ", "ABCDEF", "C-X"])
    def test_prefixo_invalido(self, prefix):
        with pytest.raises(ValidationError) as exc:
            DepartmentEntity.create("Caixa", prefix)
        assert exc.value.field == "prefix"

    def test_imutavel(self, caixa):
        with pytest.raises(Exception):
            caixa.name = "Outro"


class TestTicketIssue:
    """Testes para emissão de senha."""

    def test_senha_emitida_aguardando(self, caixa, waiting_ticket):
        assert waiting_ticket.status == TicketStatus.WAITING
        assert waiting_ticket.number == "CXA-001"
        assert waiting_ticket.department_id == caixa.id
        assert waiting_ticket.created_at == NOW
        assert waiting_ticket.called_at is None
        assert waiting_ticket.counter is None

    def test_subcategoria_do_departamento_aceita(self, caixa):
        ticket = TicketEntity.issue(caixa, 1, False, NOW, sub_category="Saques")
        assert ticket.sub_category == "Saques"

    def test_subcategoria_fora_da_lista_aceita(self, caixa):
        ticket = TicketEntity.issue(caixa, 1, False, NOW, sub_category=" Rural ")
        assert ticket.sub_category == "Rural"

    def test_subcategoria_em_departamento_sem_lista(self):
        info = DepartmentEntity.create(name="Informações", prefix="INF", department_id="inf")
        ticket = TicketEntity.issue(info, 1, False, NOW, sub_category="Triagem")
        assert ticket.sub_category == "Triagem"

    def test_cpf_em_branco_vira_ausente(self, caixa):
        ticket = TicketEntity.issue(caixa, 1, False, NOW, customer_id="   ")
        assert ticket.customer_id is None

    def test_cpf_armazenado_sem_espacos(self, caixa):
        ticket = TicketEntity.issue(caixa, 1, False, NOW, customer_id=" 123.456.789-00 ")
        assert ticket.customer_id == "123.456.789-00"

    def test_ordinal_deve_ser_positivo(self, caixa):
        with pytest.raises(ValidationError):
            TicketEntity.issue(caixa, 0, False, NOW)


class TestTicketTransitions:
    """Testes para transições de status."""

    def test_chamar_define_guiche_e_horario(self, waiting_ticket):
        called_at = NOW + timedelta(minutes=5)
        waiting_ticket.call("05", called_at)

        assert waiting_ticket.status == TicketStatus.CALLED
        assert waiting_ticket.counter == "05"
        assert waiting_ticket.called_at == called_at

    def test_chamar_sem_guiche(self, waiting_ticket):
        with pytest.raises(ValidationError):
            waiting_ticket.call("  ", NOW)
        assert waiting_ticket.status == TicketStatus.WAITING

    def test_chamar_senha_ja_chamada(self, waiting_ticket):
        waiting_ticket.call("05", NOW)
        with pytest.raises(BusinessRuleViolationError):
            waiting_ticket.call("06", NOW)
        assert waiting_ticket.counter == "05"

    def test_rechamar_atualiza_apenas_called_at(self, waiting_ticket):
        waiting_ticket.call("05", NOW)
        later = NOW + timedelta(seconds=30)

        waiting_ticket.recall(later)

        assert waiting_ticket.status == TicketStatus.CALLED
        assert waiting_ticket.counter == "05"
        assert waiting_ticket.called_at == later

    def test_rechamar_senha_aguardando(self, waiting_ticket):
        with pytest.raises(BusinessRuleViolationError):
            waiting_ticket.recall(NOW)

    def test_finalizar_senha_chamada(self, waiting_ticket):
        waiting_ticket.call("05", NOW)
        waiting_ticket.finish()
        assert waiting_ticket.status == TicketStatus.FINISHED

    def test_finalizar_senha_aguardando(self, waiting_ticket):
        waiting_ticket.finish()
        assert waiting_ticket.status == TicketStatus.FINISHED
        assert waiting_ticket.called_at is None

    def test_senha_finalizada_imutavel(self, waiting_ticket):
        waiting_ticket.finish()
        with pytest.raises(BusinessRuleViolationError):
            waiting_ticket.finish()
        with pytest.raises(BusinessRuleViolationError):
            waiting_ticket.call("05", NOW)
        with pytest.raises(BusinessRuleViolationError):
            waiting_ticket.recall(NOW)

    def test_cancelar_senha_aguardando(self, waiting_ticket):
        waiting_ticket.cancel()
        assert waiting_ticket.status == TicketStatus.CANCELED
        assert waiting_ticket.status.is_terminal

    def test_cancelar_senha_chamada(self, waiting_ticket):
        waiting_ticket.call("05", NOW)
        with pytest.raises(BusinessRuleViolationError):
            waiting_ticket.cancel()

    def test_tempo_de_espera(self, waiting_ticket):
        assert waiting_ticket.wait_seconds(NOW + timedelta(seconds=90)) == 90
        waiting_ticket.call("05", NOW + timedelta(seconds=30))
        assert waiting_ticket.wait_seconds(NOW + timedelta(hours=1)) == 30

    def test_igualdade_por_id(self, caixa):
        a = TicketEntity.issue(caixa, 1, False, NOW)
        b = TicketEntity.issue(caixa, 1, False, NOW)
        assert a != b
        assert a == a
        assert len({a, b}) == 2


class TestTicketStatus:
    def test_from_string(self):
        assert TicketStatus.from_string(" called ") == TicketStatus.CALLED

    def test_from_string_invalido(self):
        with pytest.raises(ValueError):
            TicketStatus.from_string("ATENDIDO")


class TestMarketingMediaEntity:
    """Testes para itens da playlist."""

    def test_criar_imagem(self):
        media = MarketingMediaEntity.create(MediaType.IMAGE, " https://x/img.png ", "Promo", 8)
        assert media.url == "https://x/img.png"
        assert media.duration == 8.0
        assert media.youtube_id is None

    def test_url_obrigatoria(self):
        with pytest.raises(ValidationError) as exc:
            MarketingMediaEntity.create(MediaType.IMAGE, "", "Promo", 8)
        assert exc.value.field == "url"

    @pytest.mark.parametrize("duration", [0, -5, "abc", None])
    def test_duracao_invalida(self, duration):
        with pytest.raises(ValidationError) as exc:
            MarketingMediaEntity.create(MediaType.IMAGE, "https://x", "Promo", duration)
        assert exc.value.field == "duration"

    def test_video_do_youtube_expoe_id(self):
        media = MarketingMediaEntity.create(
            MediaType.VIDEO, "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "Clipe", 30
        )
        assert media.youtube_id == "dQw4w9WgXcQ"

    def test_video_mp4_sem_youtube_id(self):
        media = MarketingMediaEntity.create(
            MediaType.VIDEO, "https://cdn.example.com/institucional.mp4", "Vídeo", 30
        )
        assert media.youtube_id is None


class TestExtractYoutubeId:
    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ?si=abc",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/shorts/dQw4w9WgXcQ",
    ])
    def test_formatos_suportados(self, url):
        assert extract_youtube_id(url) == "dQw4w9WgXcQ"

    @pytest.mark.parametrize("url", ["", "https://vimeo.com/123", None])
    def test_sem_id(self, url):
        assert extract_youtube_id(url) is None

    @pytest.mark.parametrize("url", [
        "https://cdn.example.com/embed/promo.mp4",
        "https://cdn.example.com/watch?v=dQw4w9WgXcQ",
        "https://notyoutube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/embed/curto",
        "https://youtu.be/dQw4w9WgXcQextra",
    ])
    def test_host_ou_id_invalidos(self, url):
        assert extract_youtube_id(url) is None

    def test_sem_esquema(self):
        assert extract_youtube_id("youtu.be/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_video_fora_do_youtube_nao_vira_embed(self):
        media = MarketingMediaEntity.create(
            MediaType.VIDEO, "https://cdn.example.com/embed/promo.mp4", "Promo", 15
        )
        assert media.youtube_id is None
