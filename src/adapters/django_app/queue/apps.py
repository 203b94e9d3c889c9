"""
Configuração do Django App da fila.

No startup carrega os dados iniciais e, se configurado,
inicia o painel (anúncio + rotação da playlist).
O relatório periódico da fila roda aqui, junto do estado em memória.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class QueueConfig(AppConfig):
    """Configuração do app Fila."""

    name = 'src.adapters.django_app.queue'
    label = 'queue'
    verbose_name = 'Fila de Atendimento'

    def ready(self):
        from src.config.container import get_container
        from src.config.seed import seed_defaults

        container = get_container()

        if container.config.seed_defaults():
            seed_defaults(container.queue_engine())

        if container.config.display_autostart():
            container.display_panel().start()

        container.queue_reporter().start()
